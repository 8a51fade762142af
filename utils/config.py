"""
Configuration management.
"""

import os
from dataclasses import dataclass, field
from typing import Optional


def _optional_int(name: str) -> Optional[int]:
    value = os.getenv(name)
    return int(value) if value else None


@dataclass
class Config:
    """
    Application configuration.

    Loads from environment variables with sensible defaults.
    """

    # Server
    host: str = field(default_factory=lambda: os.getenv("HOST", "127.0.0.1"))
    port: int = field(default_factory=lambda: int(os.getenv("PORT", "8000")))
    debug: bool = field(default_factory=lambda: os.getenv("DEBUG", "false").lower() == "true")
    log_level: str = field(default_factory=lambda: os.getenv("LOG_LEVEL", "INFO").upper())

    # External services
    postcode_api_url: str = field(
        default_factory=lambda: os.getenv("POSTCODE_API_URL", "https://api.postcodes.io")
    )
    property_api_url: str = field(
        default_factory=lambda: os.getenv(
            "PROPERTY_API_URL", "https://getmyhousevalue-backend.onrender.com"
        )
    )
    request_timeout: int = field(default_factory=lambda: int(os.getenv("REQUEST_TIMEOUT", "10")))

    # Valuation
    hpi_table_path: Optional[str] = field(default_factory=lambda: os.getenv("HPI_TABLE_PATH") or None)
    # None means "use the HPI table's own current year"
    current_year: Optional[int] = field(default_factory=lambda: _optional_int("HPI_CURRENT_YEAR"))
    bound_percent: float = field(
        default_factory=lambda: float(os.getenv("VALUATION_BOUND_PERCENT", "5.0"))
    )

    @classmethod
    def load(cls) -> "Config":
        """Load configuration from environment."""
        return cls()

    def to_dict(self) -> dict:
        """Convert config to dictionary."""
        return {
            "host": self.host,
            "port": self.port,
            "debug": self.debug,
            "log_level": self.log_level,
            "postcode_api_url": self.postcode_api_url,
            "property_api_url": self.property_api_url,
            "request_timeout": self.request_timeout,
            "hpi_table_path": self.hpi_table_path,
            "current_year": self.current_year,
            "bound_percent": self.bound_percent,
        }
