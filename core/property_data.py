"""
Property Data Service

Fetches the property records for a postcode from the property backend,
which merges HM Land Registry Price Paid Data with the EPC register.

When the backend is unreachable a static fallback list is returned so the
valuation flow always has input.
"""

import logging
from datetime import date
from typing import List, Optional

import requests

from .hpi_engine import EpcRating, PropertyRecord, PropertyType


logger = logging.getLogger(__name__)


DEFAULT_PROPERTY_API_URL = "https://getmyhousevalue-backend.onrender.com"
REQUEST_TIMEOUT_SECONDS = 15

FALLBACK_PROPERTIES: List[PropertyRecord] = [
    PropertyRecord(
        id="1",
        address="10 Downing Street",
        city="London",
        postcode="SW1A 1AA",
        property_type=PropertyType.TERRACED,
        floor_area_sqm=240,
        epc_rating=EpcRating.C,
        last_sold_date=date(2005, 6, 15),
        last_sold_price=4500000,
    ),
]


class PropertyDataService:
    """
    Client for the property backend's /api/properties endpoint.

    An empty list is a valid answer ("no properties found"). Network errors
    and a payload that is not a JSON list fall back to FALLBACK_PROPERTIES.
    Within a list, entries that are not objects are skipped and malformed
    fields degrade to "unknown" without discarding the rest.
    """

    def __init__(
        self,
        base_url: str = DEFAULT_PROPERTY_API_URL,
        timeout: float = REQUEST_TIMEOUT_SECONDS,
        session: Optional[requests.Session] = None,
        fallback: Optional[List[PropertyRecord]] = None,
    ):
        self._base_url = base_url.rstrip("/")
        self._timeout = timeout
        self._session = session or requests.Session()
        self._fallback = list(FALLBACK_PROPERTIES if fallback is None else fallback)

    def fetch_properties(self, postcode: str) -> List[PropertyRecord]:
        """
        Fetch property records for a postcode.

        Args:
            postcode: Formatted postcode

        Returns:
            List of PropertyRecord (may be empty)
        """
        try:
            response = self._session.get(
                f"{self._base_url}/api/properties",
                params={"postcode": postcode},
                timeout=self._timeout,
            )
            response.raise_for_status()
            payload = response.json()
            if not isinstance(payload, list):
                raise ValueError(f"expected a list, got {type(payload).__name__}")
        except (requests.RequestException, ValueError) as exc:
            logger.warning(
                "Property backend unavailable for %s, using fallback list: %s",
                postcode,
                exc,
            )
            return list(self._fallback)

        records = []
        for item in payload:
            if not isinstance(item, dict):
                logger.warning("Skipping malformed property entry for %s: %r", postcode, item)
                continue
            records.append(PropertyRecord.from_dict(item))

        logger.info("Fetched %d properties for %s", len(records), postcode)
        return records

