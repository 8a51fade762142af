"""
HPI Valuation Engine

Index-adjusted valuation: scales a property's last sold price by the
regional House Price Index growth since the year of sale.

Data Source: UK House Price Index (HM Land Registry / ONS)
"""

from .models import (
    RegionKey,
    PropertyType,
    EpcRating,
    PropertyRecord,
    SeriesPoint,
    ValuationResult,
    parse_sold_date,
    parse_floor_area,
    parse_sold_price,
    round_half_up,
)
from .hpi import (
    HpiTable,
    INDEX_BASE_VALUE,
    DEFAULT_HPI_DATA,
    default_hpi_table,
    load_hpi_table,
)
from .regions import RegionClassifier, SubstringRegionClassifier, classify
from .valuation import HpiValuationEngine, DEFAULT_BOUND_PERCENT

__all__ = [
    # Models
    "RegionKey",
    "PropertyType",
    "EpcRating",
    "PropertyRecord",
    "SeriesPoint",
    "ValuationResult",
    "parse_sold_date",
    "parse_floor_area",
    "parse_sold_price",
    "round_half_up",
    # HPI table
    "HpiTable",
    "INDEX_BASE_VALUE",
    "DEFAULT_HPI_DATA",
    "default_hpi_table",
    "load_hpi_table",
    # Region classification
    "RegionClassifier",
    "SubstringRegionClassifier",
    "classify",
    # Engine
    "HpiValuationEngine",
    "DEFAULT_BOUND_PERCENT",
]

__version__ = "1.0"
