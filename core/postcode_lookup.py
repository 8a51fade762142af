"""
Postcode Lookup Service

Resolves a UK postcode to its administrative region via postcodes.io and
classifies that region onto an HPI region key.

Data Source: postcodes.io (ONS Postcode Directory)
"""

import logging
from dataclasses import dataclass
from typing import Optional
from urllib.parse import quote

import requests

from .hpi_engine import RegionClassifier, RegionKey, SubstringRegionClassifier


logger = logging.getLogger(__name__)


DEFAULT_POSTCODE_API_URL = "https://api.postcodes.io"
REQUEST_TIMEOUT_SECONDS = 10


@dataclass(frozen=True)
class PostcodeDetails:
    """Region resolution for a postcode."""
    region: RegionKey
    formatted_postcode: str
    region_label: Optional[str] = None
    resolved: bool = False  # False when the lookup failed and defaults were used


class PostcodeLookupService:
    """
    Client for the postcodes.io lookup endpoint.

    Single-shot request with a timeout; no retries. Any failure falls back
    to UK_AVERAGE and the postcode as entered.
    """

    def __init__(
        self,
        base_url: str = DEFAULT_POSTCODE_API_URL,
        timeout: float = REQUEST_TIMEOUT_SECONDS,
        classifier: Optional[RegionClassifier] = None,
        session: Optional[requests.Session] = None,
    ):
        self._base_url = base_url.rstrip("/")
        self._timeout = timeout
        self._classifier = classifier or SubstringRegionClassifier()
        self._session = session or requests.Session()

    def lookup(self, postcode: str) -> PostcodeDetails:
        """
        Resolve a postcode to its region.

        Args:
            postcode: Postcode as entered by the user

        Returns:
            PostcodeDetails (defaults to UK Average on any failure)
        """
        fallback = PostcodeDetails(
            region=RegionKey.UK_AVERAGE,
            formatted_postcode=postcode,
        )

        url = f"{self._base_url}/postcodes/{quote(postcode.strip())}"
        try:
            response = self._session.get(url, timeout=self._timeout)
            payload = response.json()
        except (requests.RequestException, ValueError) as exc:
            logger.warning("Postcode lookup failed for %s: %s", postcode, exc)
            return fallback

        status = payload.get("status") if isinstance(payload, dict) else None
        if status != 200 or not payload.get("result"):
            logger.warning("Postcode lookup for %s returned status %s", postcode, status)
            return fallback

        result = payload["result"]
        label = result.get("region") or result.get("admin_district")

        return PostcodeDetails(
            region=self._classifier.classify(label),
            formatted_postcode=result.get("postcode") or postcode,
            region_label=label,
            resolved=True,
        )

