"""
Utility modules for the house value engine.
"""

from .formatting import format_currency, format_currency_approx, format_percent, format_growth
from .config import Config

__all__ = ["format_currency", "format_currency_approx", "format_percent", "format_growth", "Config"]
