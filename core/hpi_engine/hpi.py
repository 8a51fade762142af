"""
House Price Index table.

Static, versioned snapshot of regional HPI values, normalised so the
base year reads 100.0. Source: UK House Price Index (HM Land Registry / ONS).
"""

import json
import logging
from pathlib import Path
from types import MappingProxyType
from typing import Dict, Mapping, Optional, Tuple, Union

from .models import RegionKey


logger = logging.getLogger(__name__)


# =============================================================================
# Configuration Constants
# =============================================================================

# Index value of the base year, also returned for years missing from the table
INDEX_BASE_VALUE = 100.0

DEFAULT_BASE_YEAR = 2015
DEFAULT_CURRENT_YEAR = 2024
DEFAULT_VERSION = "ukhpi-2024"

DEFAULT_HPI_DATA: Dict[RegionKey, Dict[int, float]] = {
    RegionKey.LONDON: {2000: 38.2, 2010: 85.2, 2015: 100.0, 2020: 120.5, 2024: 130.5},
    RegionKey.SOUTH_EAST: {2000: 42.1, 2010: 84.1, 2015: 100.0, 2020: 121.5, 2024: 138.2},
    RegionKey.UK_AVERAGE: {2000: 43.5, 2010: 84.5, 2015: 100.0, 2020: 122.5, 2024: 143.2},
}


class HpiTable:
    """
    Immutable mapping of RegionKey -> (year -> index value).

    Invariants checked on construction:
    - UK_AVERAGE is present
    - every region defines the base year and the current year
    - every index value is strictly positive
    """

    def __init__(
        self,
        data: Mapping[RegionKey, Mapping[int, float]],
        base_year: int = DEFAULT_BASE_YEAR,
        current_year: int = DEFAULT_CURRENT_YEAR,
        version: str = DEFAULT_VERSION,
    ):
        if RegionKey.UK_AVERAGE not in data:
            raise ValueError("HPI table must contain UK_AVERAGE")

        frozen = {}
        for region, years in data.items():
            if not isinstance(region, RegionKey):
                raise ValueError(f"Unknown region key: {region!r}")
            for required in (base_year, current_year):
                if required not in years:
                    raise ValueError(
                        f"HPI table for {region.value} is missing year {required}"
                    )
            for year, value in years.items():
                if not 0 < value < float("inf"):
                    raise ValueError(
                        f"HPI value for {region.value} {year} must be positive, got {value}"
                    )
            frozen[region] = MappingProxyType(
                {int(year): float(value) for year, value in sorted(years.items())}
            )

        self._data = MappingProxyType(frozen)
        self.base_year = base_year
        self.current_year = current_year
        self.version = version

    def __repr__(self) -> str:
        return (
            f"HpiTable(version={self.version!r}, base_year={self.base_year}, "
            f"current_year={self.current_year}, regions={len(self._data)})"
        )

    @property
    def regions(self) -> Tuple[RegionKey, ...]:
        return tuple(self._data)

    def _series_for(self, region: RegionKey) -> Mapping[int, float]:
        series = self._data.get(region)
        if series is None:
            logger.debug("Region %s not in HPI table, using UK Average", region)
            return self._data[RegionKey.UK_AVERAGE]
        return series

    def index_for(self, region: RegionKey, year: int) -> float:
        """
        Look up the index value for a region and year.

        Years missing from the table read as INDEX_BASE_VALUE (parity).
        This is a documented approximation: no interpolation is done.
        """
        value = self._series_for(region).get(year)
        if value is None:
            logger.debug("No HPI value for %s in %s, using %s", year, region, INDEX_BASE_VALUE)
            return INDEX_BASE_VALUE
        return value

    def years_for(self, region: RegionKey) -> Tuple[int, ...]:
        """Years defined for a region (after region fallback), ascending."""
        return tuple(self._series_for(region))

    # =========================================================================
    # Loading / Serialisation
    # =========================================================================

    @classmethod
    def from_dict(cls, payload: dict) -> "HpiTable":
        """
        Build a table from its JSON shape.

        {"version": "...", "base_year": 2015, "current_year": 2024,
         "regions": {"London": {"2000": 38.2, ...}, ...}}
        """
        data = {}
        for name, years in payload.get("regions", {}).items():
            region = RegionKey.from_string(name)
            if region is None:
                raise ValueError(f"Unknown region in HPI table: {name!r}")
            data[region] = {int(year): float(value) for year, value in years.items()}

        return cls(
            data,
            base_year=int(payload.get("base_year", DEFAULT_BASE_YEAR)),
            current_year=int(payload.get("current_year", DEFAULT_CURRENT_YEAR)),
            version=str(payload.get("version", "custom")),
        )

    @classmethod
    def from_json(cls, path: Union[str, Path]) -> "HpiTable":
        """Load a table from a JSON file."""
        path = Path(path)
        with path.open(encoding="utf-8") as fh:
            payload = json.load(fh)
        table = cls.from_dict(payload)
        logger.info("Loaded HPI table %s from %s", table.version, path)
        return table

    def to_dict(self) -> dict:
        return {
            "version": self.version,
            "base_year": self.base_year,
            "current_year": self.current_year,
            "regions": {
                region.value: {str(year): value for year, value in years.items()}
                for region, years in self._data.items()
            },
        }


def default_hpi_table() -> HpiTable:
    """Built-in HPI snapshot."""
    return HpiTable(DEFAULT_HPI_DATA)


def load_hpi_table(path: Optional[Union[str, Path]] = None) -> HpiTable:
    """Load a table from JSON if a path is given, else the built-in snapshot."""
    if path:
        return HpiTable.from_json(path)
    return default_hpi_table()
