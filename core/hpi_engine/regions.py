"""
Region classification.

Maps a free-text administrative region label (as returned by postcodes.io)
onto the RegionKey buckets the HPI table is keyed on.
"""

from typing import Optional, Protocol, Sequence, Tuple

from .models import RegionKey


# Substring rules, checked in order. First match wins.
REGION_RULES: Sequence[Tuple[str, RegionKey]] = (
    ("London", RegionKey.LONDON),
    ("South East", RegionKey.SOUTH_EAST),
)


class RegionClassifier(Protocol):
    """Anything that can turn a raw region label into a RegionKey."""

    def classify(self, raw_region_label: Optional[str]) -> RegionKey:
        ...


class SubstringRegionClassifier:
    """
    Case-sensitive substring matcher.

    Known to over-match (any district containing "London" maps to LONDON);
    exact-match or boundary-based lookup can replace it behind
    RegionClassifier without touching the valuation engine.
    """

    def __init__(self, rules: Sequence[Tuple[str, RegionKey]] = REGION_RULES):
        self._rules = tuple(rules)

    def classify(self, raw_region_label: Optional[str]) -> RegionKey:
        if not raw_region_label:
            return RegionKey.UK_AVERAGE
        for needle, region in self._rules:
            if needle in raw_region_label:
                return region
        return RegionKey.UK_AVERAGE


_default_classifier = SubstringRegionClassifier()


def classify(raw_region_label: Optional[str]) -> RegionKey:
    """Classify a region label with the default rules."""
    return _default_classifier.classify(raw_region_label)
