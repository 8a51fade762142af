"""
Valuation Engine for index-adjusted property values

Implements:
- Growth factor from the regional HPI (sold year -> current year)
- Point estimate from the last sold price
- Fixed-percentage confidence band
- Year-by-year value reconstruction for trend display

The engine is pure: no I/O, no clock, no state beyond its configuration.
"""

from decimal import Decimal
from typing import Optional, Tuple

from .hpi import HpiTable
from .models import PropertyRecord, RegionKey, SeriesPoint, ValuationResult, round_half_up


# =============================================================================
# Configuration Constants
# =============================================================================

# Width of the band either side of the point estimate
DEFAULT_BOUND_PERCENT = 5.0


def _dec(value: float) -> Decimal:
    # Build from the shortest repr so 130.5 is exactly 130.5
    return Decimal(repr(float(value)))


class HpiValuationEngine:
    """
    Index-adjusted valuation pipeline.

    Pipeline order:
    1. SOLD YEAR - from last_sold_date, else the table base year
    2. INDEX - look up sold-year and current-year HPI values
    3. GROWTH - current index / sold index
    4. VALUATE - scale last sold price, derive bounds
    5. SERIES - optional reconstruction from sold year onwards
    """

    def __init__(
        self,
        table: HpiTable,
        current_year: Optional[int] = None,
        bound_percent: float = DEFAULT_BOUND_PERCENT,
    ):
        """
        Initialize valuation engine.

        Args:
            table: HPI table to value against
            current_year: Reference year for "today" (default: the table's current year)
            bound_percent: Half-width of the confidence band, in percent
        """
        if bound_percent < 0 or bound_percent > 100:
            raise ValueError("bound_percent must be between 0 and 100")
        self._table = table
        self._current_year = current_year if current_year is not None else table.current_year
        self._bound_percent = bound_percent
        self._bound_fraction = _dec(bound_percent) / 100

    @property
    def table(self) -> HpiTable:
        return self._table

    @property
    def current_year(self) -> int:
        return self._current_year

    @property
    def bound_percent(self) -> float:
        return self._bound_percent

    def valuate(
        self,
        prop: PropertyRecord,
        region: RegionKey,
        include_series: bool = False,
    ) -> ValuationResult:
        """
        Value a property against the regional index.

        Never raises for a well-formed record: a missing sold price yields
        an unavailable result with zero estimate and bounds.

        Args:
            prop: The property being valued
            region: Resolved region key
            include_series: Also reconstruct the year-by-year value series

        Returns:
            ValuationResult
        """
        sold_year = self._sold_year(prop)
        index_old = self._table.index_for(region, sold_year)
        index_new = self._table.index_for(region, self._current_year)

        growth_factor = index_new / index_old

        available = prop.has_sale_price
        if available:
            estimated_value = self._scale(prop.last_sold_price, index_new, index_old)
        else:
            estimated_value = 0

        lower_bound, upper_bound = self._bounds(estimated_value)

        series: Tuple[SeriesPoint, ...] = ()
        if include_series:
            series = self._build_series(prop, region, sold_year, index_old)

        return ValuationResult(
            estimated_value=estimated_value,
            lower_bound=lower_bound,
            upper_bound=upper_bound,
            growth_factor=growth_factor,
            available=available,
            region=region,
            sold_year=sold_year,
            current_year=self._current_year,
            series=series,
        )

    def value_series(
        self,
        prop: PropertyRecord,
        region: RegionKey,
    ) -> Tuple[SeriesPoint, ...]:
        """
        Reconstruct the property's value for each table year since it sold.

        Points exist only for years the table defines, so the series is
        sparse where the table is (e.g. 2010, 2015, 2020, 2024); gaps are
        never filled with the 100.0 year fallback. Empty when there is no
        sale price or no sold date.
        """
        sold_year = self._sold_year(prop)
        index_old = self._table.index_for(region, sold_year)
        return self._build_series(prop, region, sold_year, index_old)

    def _sold_year(self, prop: PropertyRecord) -> int:
        if prop.last_sold_date is None:
            return self._table.base_year
        return prop.last_sold_date.year

    def _scale(self, price: int, index_new: float, index_old: float) -> int:
        return round_half_up(Decimal(price) * _dec(index_new) / _dec(index_old))

    def _bounds(self, estimated_value: int) -> Tuple[int, int]:
        estimate = Decimal(estimated_value)
        lower = round_half_up(estimate * (1 - self._bound_fraction))
        upper = round_half_up(estimate * (1 + self._bound_fraction))
        return lower, upper

    def _build_series(
        self,
        prop: PropertyRecord,
        region: RegionKey,
        sold_year: int,
        index_old: float,
    ) -> Tuple[SeriesPoint, ...]:
        if not prop.has_sale_price or prop.last_sold_date is None:
            return ()

        points = []
        for year in self._table.years_for(region):
            if year < sold_year:
                continue
            index = self._table.index_for(region, year)
            points.append(SeriesPoint(
                year=year,
                index=index,
                value=self._scale(prop.last_sold_price, index, index_old),
            ))
        return tuple(points)
