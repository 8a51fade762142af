"""
House Value Engine - Core Business Logic

This module provides the index-adjusted valuation pipeline:
1. Region Classification (postcode region label -> HPI region key)
2. HPI Table (regional index snapshot, base year = 100)
3. Valuation (growth factor, point estimate, confidence band)
4. Series Reconstruction (year-by-year value for trend display)
5. Property Selection (postcode search -> selected property -> valuation)
"""

# HPI Valuation Engine
from .hpi_engine import (
    RegionKey,
    PropertyType,
    EpcRating,
    PropertyRecord,
    SeriesPoint,
    ValuationResult,
    HpiTable,
    INDEX_BASE_VALUE,
    default_hpi_table,
    load_hpi_table,
    RegionClassifier,
    SubstringRegionClassifier,
    classify,
    HpiValuationEngine,
)

# External collaborators
from .postcode_lookup import PostcodeLookupService, PostcodeDetails
from .property_data import PropertyDataService, FALLBACK_PROPERTIES

# Property Selection Flow
from .valuation_flow import ValuationFlow, PropertySearch

__all__ = [
    # HPI Valuation Engine
    "RegionKey",
    "PropertyType",
    "EpcRating",
    "PropertyRecord",
    "SeriesPoint",
    "ValuationResult",
    "HpiTable",
    "INDEX_BASE_VALUE",
    "default_hpi_table",
    "load_hpi_table",
    "RegionClassifier",
    "SubstringRegionClassifier",
    "classify",
    "HpiValuationEngine",
    # External collaborators
    "PostcodeLookupService",
    "PostcodeDetails",
    "PropertyDataService",
    "FALLBACK_PROPERTIES",
    # Property Selection Flow
    "ValuationFlow",
    "PropertySearch",
]
