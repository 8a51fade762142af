"""
FastAPI application for the house value engine.

JSON surface over the valuation flow: postcode search, property
valuation and the HPI table in use. Presentation (page routing, forms)
lives in the front end; this layer only adds display strings.
"""

import logging
from contextlib import asynccontextmanager
from datetime import date
from typing import Optional

from fastapi import FastAPI, HTTPException, Query
from fastapi.middleware.cors import CORSMiddleware
from pydantic import BaseModel, Field

from core import (
    EpcRating,
    HpiValuationEngine,
    PostcodeLookupService,
    PropertyDataService,
    PropertyRecord,
    PropertyType,
    RegionKey,
    ValuationFlow,
    ValuationResult,
    classify,
    load_hpi_table,
)
from utils.config import Config
from utils.formatting import format_currency, format_currency_approx, format_growth, format_percent


logger = logging.getLogger(__name__)

API_VERSION = "1.0.0"


# =============================================================================
# Request Models
# =============================================================================

class PropertyInput(BaseModel):
    """A property record supplied directly by the caller."""
    id: str = ""
    address: str = ""
    city: str = ""
    postcode: str = ""
    property_type: str = "other"
    floor_area_sqm: Optional[float] = Field(None, gt=0)
    epc_rating: Optional[str] = None
    last_sold_date: Optional[date] = None
    last_sold_price: int = Field(0, ge=0)

    def to_record(self) -> PropertyRecord:
        return PropertyRecord(
            id=self.id,
            address=self.address,
            city=self.city,
            postcode=self.postcode,
            property_type=PropertyType.from_string(self.property_type) or PropertyType.OTHER,
            floor_area_sqm=self.floor_area_sqm or 0.0,
            epc_rating=EpcRating.from_string(self.epc_rating or ""),
            last_sold_date=self.last_sold_date,
            last_sold_price=self.last_sold_price,
        )


class ValuateRequest(BaseModel):
    """
    Value a caller-supplied property.

    region takes precedence over region_label; with neither, UK Average is used.
    """
    record: PropertyInput = Field(..., alias="property")
    region: Optional[str] = None
    region_label: Optional[str] = None
    include_series: bool = True

    def resolve_region(self) -> RegionKey:
        if self.region:
            key = RegionKey.from_string(self.region)
            if key is not None:
                return key
        return classify(self.region_label)


# =============================================================================
# Wiring
# =============================================================================

def build_flow(config: Config) -> ValuationFlow:
    """Build the valuation flow from configuration."""
    table = load_hpi_table(config.hpi_table_path)
    engine = HpiValuationEngine(
        table,
        current_year=config.current_year,
        bound_percent=config.bound_percent,
    )
    return ValuationFlow(
        postcode_service=PostcodeLookupService(
            base_url=config.postcode_api_url,
            timeout=config.request_timeout,
        ),
        property_service=PropertyDataService(
            base_url=config.property_api_url,
            timeout=config.request_timeout,
        ),
        engine=engine,
    )


def display_values(
    prop: PropertyRecord,
    result: ValuationResult,
    bound_percent: float,
) -> dict:
    """Human-readable strings for the result card."""
    if result.available:
        estimate = format_currency_approx(result.estimated_value)
        value_range = (
            f"{format_currency_approx(result.lower_bound)} - "
            f"{format_currency_approx(result.upper_bound)}"
        )
        growth = format_growth(result.growth_factor)
    else:
        estimate = "Valuation Unavailable"
        value_range = None
        growth = "N/A"

    return {
        "estimated_value": estimate,
        "range": value_range,
        "band": f"±{format_percent(bound_percent)}",
        "growth": growth,
        "since": (
            f"Since purchase in {prop.last_sold_year}"
            if prop.last_sold_date else "No previous sale record"
        ),
        "last_sold": format_currency(prop.last_sold_price) if prop.has_sale_price else "Unknown",
    }


# =============================================================================
# Application
# =============================================================================

def create_app(config: Optional[Config] = None, flow: Optional[ValuationFlow] = None) -> FastAPI:
    """Create and configure the FastAPI application."""
    config = config or Config.load()
    flow = flow or build_flow(config)

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        table = flow.engine.table
        logger.info(
            "House value engine started (HPI %s, base %s, current %s)",
            table.version,
            table.base_year,
            flow.engine.current_year,
        )
        yield

    app = FastAPI(
        title="House Value Engine",
        description="Index-adjusted property valuation from Land Registry sold prices",
        version=API_VERSION,
        debug=config.debug,
        lifespan=lifespan,
    )

    # Healthcheck endpoints: no dependencies, no IO
    @app.get("/", include_in_schema=False)
    def root():
        return {"status": "ok"}

    @app.get("/health", include_in_schema=False)
    def health():
        return {"status": "healthy"}

    if config.debug:
        app.add_middleware(
            CORSMiddleware,
            allow_origins=["http://localhost:5173", "http://127.0.0.1:5173"],
            allow_methods=["GET", "POST"],
            allow_headers=["*"],
        )

    @app.get("/api/health")
    def api_health():
        """Health check endpoint."""
        table = flow.engine.table
        return {
            "status": "healthy",
            "version": API_VERSION,
            "hpi_version": table.version,
            "current_year": flow.engine.current_year,
        }

    @app.get("/api/properties")
    def list_properties(postcode: str = Query(..., min_length=1)):
        """
        List properties for a postcode.

        status is "no_properties" when nothing was found; this is not an error.
        """
        return flow.search(postcode).to_dict()

    @app.get("/api/valuation")
    def valuation(
        postcode: str = Query(..., min_length=1),
        property_id: str = Query(..., min_length=1),
        include_series: bool = True,
    ):
        """Value one property from a postcode search."""
        search = flow.search(postcode)
        if search.is_empty:
            return {
                "status": "no_properties",
                "postcode": search.formatted_postcode,
                "valuation": None,
            }

        selected = search.find(property_id)
        if selected is None:
            raise HTTPException(
                status_code=404,
                detail=f"Property {property_id} not found for {search.formatted_postcode}",
            )

        result = flow.valuate(search, property_id, include_series=include_series)
        return {
            "status": "ok" if result.available else "unavailable",
            "postcode": search.formatted_postcode,
            "property": selected.to_dict(),
            "valuation": result.to_dict(),
            "display": display_values(selected, result, flow.engine.bound_percent),
        }

    @app.post("/api/valuate")
    def valuate(request_data: ValuateRequest):
        """Value a property supplied in the request body."""
        record = request_data.record.to_record()
        result = flow.engine.valuate(
            record,
            request_data.resolve_region(),
            include_series=request_data.include_series,
        )
        return {
            "status": "ok" if result.available else "unavailable",
            "property": record.to_dict(),
            "valuation": result.to_dict(),
            "display": display_values(record, result, flow.engine.bound_percent),
        }

    @app.get("/api/hpi")
    def hpi_table():
        """The HPI table the engine values against."""
        payload = flow.engine.table.to_dict()
        payload["reference_year"] = flow.engine.current_year
        return payload

    return app


# Create app instance for uvicorn
app = create_app()
