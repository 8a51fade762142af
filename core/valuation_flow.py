"""
Valuation Flow - Property Selection Pipeline

Postcode -> region + candidate properties -> selected property -> valuation.

The flow owns the two external calls (postcode lookup, property data);
the valuation engine itself never performs I/O.
"""

import logging
from dataclasses import dataclass, field
from typing import List, Optional, Protocol

from .hpi_engine import HpiValuationEngine, PropertyRecord, RegionKey, ValuationResult
from .postcode_lookup import PostcodeDetails


logger = logging.getLogger(__name__)


class PostcodeLookup(Protocol):
    def lookup(self, postcode: str) -> PostcodeDetails:
        ...


class PropertySource(Protocol):
    def fetch_properties(self, postcode: str) -> List[PropertyRecord]:
        ...


@dataclass
class PropertySearch:
    """
    Outcome of a postcode search.

    An empty properties list is the "no properties found" state; it is
    reported to the caller, never raised.
    """
    postcode: str
    formatted_postcode: str
    region: RegionKey
    region_label: Optional[str] = None
    properties: List[PropertyRecord] = field(default_factory=list)

    @property
    def is_empty(self) -> bool:
        return not self.properties

    @property
    def count(self) -> int:
        return len(self.properties)

    def find(self, property_id: str) -> Optional[PropertyRecord]:
        """Return the property with the given id, if listed."""
        for prop in self.properties:
            if prop.id == property_id:
                return prop
        return None

    def to_dict(self) -> dict:
        return {
            "postcode": self.formatted_postcode,
            "region": self.region.value,
            "region_label": self.region_label,
            "status": "no_properties" if self.is_empty else "found",
            "count": self.count,
            "properties": [p.to_dict() for p in self.properties],
        }


class ValuationFlow:
    """
    Search-select-valuate pipeline used by the web layer.

    Pipeline order:
    1. LOOKUP - resolve postcode to region
    2. FETCH - list properties for the formatted postcode
    3. SELECT - pick one property by id
    4. VALUATE - run the HPI valuation engine
    """

    def __init__(
        self,
        postcode_service: PostcodeLookup,
        property_service: PropertySource,
        engine: HpiValuationEngine,
    ):
        self._postcode_service = postcode_service
        self._property_service = property_service
        self._engine = engine

    @property
    def engine(self) -> HpiValuationEngine:
        return self._engine

    def search(self, postcode: str) -> PropertySearch:
        """
        Resolve a postcode and list its properties.

        Args:
            postcode: Postcode as entered

        Returns:
            PropertySearch (properties may be empty)
        """
        details = self._postcode_service.lookup(postcode)
        properties = self._property_service.fetch_properties(details.formatted_postcode)

        if not properties:
            logger.info("No properties found for %s", details.formatted_postcode)

        return PropertySearch(
            postcode=postcode,
            formatted_postcode=details.formatted_postcode,
            region=details.region,
            region_label=details.region_label,
            properties=list(properties),
        )

    def valuate(
        self,
        search: PropertySearch,
        property_id: str,
        include_series: bool = True,
    ) -> Optional[ValuationResult]:
        """
        Value a property selected from a search.

        Returns None, without invoking the engine, when the search found
        nothing or the id is not in the list.
        """
        if search.is_empty:
            return None

        selected = search.find(property_id)
        if selected is None:
            logger.info("Property %s not in results for %s", property_id, search.formatted_postcode)
            return None

        return self._engine.valuate(selected, search.region, include_series=include_series)
