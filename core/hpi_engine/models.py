"""
Data models for the HPI Valuation Engine

Defines property records as supplied by the property-data service,
the region keys the House Price Index is keyed on, and valuation results.
"""

import re
from dataclasses import dataclass, field
from datetime import date
from decimal import Decimal, InvalidOperation, ROUND_HALF_UP
from enum import Enum
from typing import Optional, Tuple


# Leading calendar year of a non-ISO date string ("2005", "2005/06")
_LEADING_YEAR = re.compile(r"^\s*(\d{4})(?!\d)")


def round_half_up(value: Decimal) -> int:
    """Round to the nearest integer, ties away from zero."""
    return int(value.quantize(Decimal(1), rounding=ROUND_HALF_UP))


class RegionKey(Enum):
    """
    Geographic buckets the HPI table is keyed on.

    UK_AVERAGE is the universal fallback and must exist in every table.
    """
    LONDON = "London"
    SOUTH_EAST = "South East"
    UK_AVERAGE = "UK Average"

    @classmethod
    def from_string(cls, value: str) -> Optional["RegionKey"]:
        """
        Resolve a key from its display value or member name.

        Accepts "South East", "south_east" or "SOUTH_EAST".
        """
        if not value:
            return None
        normalised = value.strip().lower().replace("_", " ")
        for member in cls:
            if member.value.lower() == normalised:
                return member
        return None


class PropertyType(Enum):
    """Property type classification."""
    FLAT = "flat"
    MAISONETTE = "maisonette"
    TERRACED = "terraced"
    SEMI_DETACHED = "semi-detached"
    DETACHED = "detached"
    BUNGALOW = "bungalow"
    OTHER = "other"

    @classmethod
    def from_string(cls, value: str) -> Optional["PropertyType"]:
        """Convert string to PropertyType, case-insensitive."""
        if not value:
            return None
        normalised = value.lower().strip().replace("_", "-")
        for member in cls:
            if member.value == normalised:
                return member
        return None


class EpcRating(Enum):
    """Energy Performance Certificate band."""
    A = "A"
    B = "B"
    C = "C"
    D = "D"
    E = "E"
    F = "F"
    G = "G"

    @classmethod
    def from_string(cls, value: str) -> Optional["EpcRating"]:
        if not value:
            return None
        normalised = value.strip().upper()
        for member in cls:
            if member.value == normalised:
                return member
        return None


def parse_sold_date(value) -> Optional[date]:
    """
    Parse a last-sold date from the property-data payload.

    Accepts a date, an ISO-8601 string (a time component is ignored) or a
    string starting with a four-digit year, which reads as 1 January of
    that year. Anything else is treated as unknown.
    """
    if value is None or value == "":
        return None
    if isinstance(value, date):
        return value
    text = str(value).strip()
    try:
        return date.fromisoformat(text[:10])
    except ValueError:
        pass
    match = _LEADING_YEAR.match(text)
    if match and int(match.group(1)) >= 1:
        return date(int(match.group(1)), 1, 1)
    return None


def parse_floor_area(value) -> float:
    """Floor area in square metres; missing or unparseable reads as 0.0 (unknown)."""
    try:
        area = float(value)
    except (TypeError, ValueError):
        return 0.0
    return area if 0 < area < float("inf") else 0.0


def parse_sold_price(value) -> int:
    """
    Last sold price in whole pounds, rounded half up.

    Missing, negative or unparseable prices read as 0 (no known sale).
    """
    if value is None or isinstance(value, bool):
        return 0
    try:
        price = Decimal(str(value).strip())
        if not price.is_finite() or price <= 0:
            return 0
        return round_half_up(price)
    except InvalidOperation:
        return 0


@dataclass(frozen=True)
class PropertyRecord:
    """
    A single dwelling as returned by the property-data service.

    last_sold_price of 0 means no transaction is known, which is the case
    for records sourced only from the EPC register. floor_area_sqm of 0.0
    means the area is unknown.
    """
    id: str
    address: str
    postcode: str
    property_type: PropertyType
    floor_area_sqm: float
    epc_rating: Optional[EpcRating] = None
    last_sold_date: Optional[date] = None
    last_sold_price: int = 0
    city: str = ""

    def __post_init__(self):
        if self.last_sold_price < 0:
            raise ValueError("last_sold_price must be non-negative")

    @property
    def has_sale_price(self) -> bool:
        return self.last_sold_price > 0

    @property
    def last_sold_year(self) -> Optional[int]:
        return self.last_sold_date.year if self.last_sold_date else None

    @classmethod
    def from_dict(cls, data: dict) -> "PropertyRecord":
        """
        Build a record from the property backend's JSON shape.

        Keys: id, address, city, postcode, type, sqMeters, epc,
        lastSoldDate, lastSoldPrice. Malformed field values degrade to
        "unknown" rather than raising.
        """
        raw_type = str(data.get("type") or "")
        return cls(
            id=str(data.get("id", "")),
            address=data.get("address") or "",
            city=data.get("city") or "",
            postcode=data.get("postcode") or "",
            property_type=PropertyType.from_string(raw_type) or PropertyType.OTHER,
            floor_area_sqm=parse_floor_area(data.get("sqMeters")),
            epc_rating=EpcRating.from_string(str(data.get("epc") or "")),
            last_sold_date=parse_sold_date(data.get("lastSoldDate")),
            last_sold_price=parse_sold_price(data.get("lastSoldPrice")),
        )

    def to_dict(self) -> dict:
        """Convert to the backend's JSON shape."""
        return {
            "id": self.id,
            "address": self.address,
            "city": self.city,
            "postcode": self.postcode,
            "type": self.property_type.value,
            "sqMeters": self.floor_area_sqm,
            "epc": self.epc_rating.value if self.epc_rating else None,
            "lastSoldDate": self.last_sold_date.isoformat() if self.last_sold_date else None,
            "lastSoldPrice": self.last_sold_price,
        }


@dataclass(frozen=True)
class SeriesPoint:
    """One year of a reconstructed value series."""
    year: int
    index: float
    value: int


@dataclass(frozen=True)
class ValuationResult:
    """
    Index-adjusted valuation for a single property.

    When available is False the estimate and bounds are 0 and must be
    read as "no usable estimate", not as a valuation of zero.
    """
    # Core valuation
    estimated_value: int
    lower_bound: int
    upper_bound: int
    growth_factor: float
    available: bool

    # Inputs the estimate was derived from
    region: RegionKey
    sold_year: int
    current_year: int

    # Year-by-year reconstruction (trend display)
    series: Tuple[SeriesPoint, ...] = field(default_factory=tuple)

    @property
    def growth_percent(self) -> float:
        """Growth since the sold year as a percentage."""
        return (self.growth_factor - 1) * 100

    def to_dict(self) -> dict:
        """Convert to dictionary for JSON output."""
        return {
            "estimated_value": self.estimated_value,
            "lower_bound": self.lower_bound,
            "upper_bound": self.upper_bound,
            "growth_factor": self.growth_factor,
            "available": self.available,
            "region": self.region.value,
            "sold_year": self.sold_year,
            "current_year": self.current_year,
            "series": [
                {"year": p.year, "index": p.index, "value": p.value}
                for p in self.series
            ],
        }
