"""
Tests for the FastAPI surface.

The app is built with stub collaborators so no request leaves the process.
"""

import pytest
from pathlib import Path
import sys

from fastapi.testclient import TestClient

# Add project root to path
sys.path.insert(0, str(Path(__file__).parent.parent))

from core import (
    FALLBACK_PROPERTIES,
    HpiValuationEngine,
    PostcodeDetails,
    RegionKey,
    ValuationFlow,
    default_hpi_table,
)
from utils.config import Config
from utils.formatting import format_currency, format_currency_approx, format_growth, format_percent
from web.app import create_app


# =============================================================================
# Fixtures
# =============================================================================

class StubPostcodeLookup:
    def lookup(self, postcode):
        return PostcodeDetails(
            region=RegionKey.LONDON,
            formatted_postcode="SW1A 1AA",
            region_label="London",
            resolved=True,
        )


class StubPropertySource:
    def __init__(self, properties):
        self.properties = properties

    def fetch_properties(self, postcode):
        return list(self.properties)


def build_client(properties) -> TestClient:
    flow = ValuationFlow(
        StubPostcodeLookup(),
        StubPropertySource(properties),
        HpiValuationEngine(default_hpi_table()),
    )
    return TestClient(create_app(config=Config(), flow=flow))


@pytest.fixture
def client():
    return build_client(FALLBACK_PROPERTIES)


@pytest.fixture
def empty_client():
    return build_client([])


# =============================================================================
# Health
# =============================================================================

class TestHealth:

    def test_root(self, client):
        response = client.get("/")

        assert response.status_code == 200
        assert response.json() == {"status": "ok"}

    def test_api_health(self, client):
        body = client.get("/api/health").json()

        assert body["status"] == "healthy"
        assert body["hpi_version"] == "ukhpi-2024"
        assert body["current_year"] == 2024


# =============================================================================
# Property Search
# =============================================================================

class TestPropertiesEndpoint:

    def test_found(self, client):
        body = client.get("/api/properties", params={"postcode": "sw1a1aa"}).json()

        assert body["status"] == "found"
        assert body["region"] == "London"
        assert body["count"] == 1
        assert body["properties"][0]["address"] == "10 Downing Street"

    def test_no_properties(self, empty_client):
        body = empty_client.get("/api/properties", params={"postcode": "sw1a1aa"}).json()

        assert body["status"] == "no_properties"
        assert body["count"] == 0

    def test_postcode_required(self, client):
        assert client.get("/api/properties").status_code == 422


# =============================================================================
# Valuation
# =============================================================================

class TestValuationEndpoint:

    def test_valuation(self, client):
        response = client.get("/api/valuation", params={"postcode": "SW1A 1AA", "property_id": "1"})
        body = response.json()

        assert response.status_code == 200
        assert body["status"] == "ok"
        assert body["valuation"]["estimated_value"] == 5872500
        assert body["valuation"]["lower_bound"] == 5578875
        assert body["valuation"]["upper_bound"] == 6166125
        assert [p["year"] for p in body["valuation"]["series"]] == [2010, 2015, 2020, 2024]
        assert body["display"] == {
            "estimated_value": "£5,870,000",
            "range": "£5,580,000 - £6,170,000",
            "band": "±5.0%",
            "growth": "+31%",
            "since": "Since purchase in 2005",
            "last_sold": "£4,500,000",
        }

    def test_without_series(self, client):
        body = client.get(
            "/api/valuation",
            params={"postcode": "SW1A 1AA", "property_id": "1", "include_series": "false"},
        ).json()

        assert body["valuation"]["series"] == []

    def test_unknown_property(self, client):
        response = client.get("/api/valuation", params={"postcode": "SW1A 1AA", "property_id": "nope"})

        assert response.status_code == 404

    def test_no_properties(self, empty_client):
        body = empty_client.get(
            "/api/valuation", params={"postcode": "SW1A 1AA", "property_id": "1"}
        ).json()

        assert body["status"] == "no_properties"
        assert body["valuation"] is None


class TestValuateEndpoint:

    def test_region_key(self, client):
        body = client.post("/api/valuate", json={
            "property": {"id": "x", "last_sold_price": 100000},
            "region": "south_east",
        }).json()

        assert body["status"] == "ok"
        assert body["valuation"]["region"] == "South East"
        assert body["valuation"]["sold_year"] == 2015
        assert body["valuation"]["estimated_value"] == 138200
        assert body["display"]["since"] == "No previous sale record"

    def test_region_label_classified(self, client):
        body = client.post("/api/valuate", json={
            "property": {"last_sold_price": 4500000, "last_sold_date": "2005-06-15"},
            "region_label": "Greater London",
        }).json()

        assert body["valuation"]["region"] == "London"
        assert body["valuation"]["estimated_value"] == 5872500

    def test_no_region_uses_uk_average(self, client):
        body = client.post("/api/valuate", json={"property": {"last_sold_price": 100000}}).json()

        assert body["valuation"]["region"] == "UK Average"
        assert body["valuation"]["estimated_value"] == 143200

    def test_unavailable(self, client):
        body = client.post("/api/valuate", json={
            "property": {"property_type": "flat", "epc_rating": "D", "floor_area_sqm": 54},
            "region": "London",
        }).json()

        assert body["status"] == "unavailable"
        assert body["valuation"]["estimated_value"] == 0
        assert body["valuation"]["lower_bound"] == 0
        assert body["valuation"]["upper_bound"] == 0
        assert body["valuation"]["growth_factor"] == pytest.approx(1.305)
        assert body["display"]["estimated_value"] == "Valuation Unavailable"
        assert body["display"]["growth"] == "N/A"
        assert body["display"]["last_sold"] == "Unknown"

    def test_negative_price_rejected(self, client):
        response = client.post("/api/valuate", json={"property": {"last_sold_price": -5}})

        assert response.status_code == 422

    def test_zero_floor_area_rejected(self, client):
        response = client.post("/api/valuate", json={
            "property": {"last_sold_price": 100000, "floor_area_sqm": 0},
        })

        assert response.status_code == 422

    def test_floor_area_omitted_is_unknown(self, client):
        body = client.post("/api/valuate", json={"property": {"last_sold_price": 100000}}).json()

        assert body["status"] == "ok"
        assert body["property"]["sqMeters"] == 0.0


class TestHpiEndpoint:

    def test_table(self, client):
        body = client.get("/api/hpi").json()

        assert body["base_year"] == 2015
        assert body["reference_year"] == 2024
        assert body["regions"]["London"]["2024"] == 130.5
        assert set(body["regions"]) == {"London", "South East", "UK Average"}


# =============================================================================
# Formatting
# =============================================================================

class TestFormatting:

    def test_format_currency(self):
        assert format_currency(4500000) == "£4,500,000"
        assert format_currency(1200, "USD") == "$1,200"

    @pytest.mark.parametrize("amount,expected", [
        (5872500, "£5,870,000"),
        (5578875, "£5,580,000"),
        (6166125, "£6,170,000"),
        (999, "£999"),
        (0, "£0"),
    ])
    def test_format_currency_approx(self, amount, expected):
        assert format_currency_approx(amount) == expected

    @pytest.mark.parametrize("growth,expected", [
        (1.305, "+31%"),
        (1.0, "+0%"),
        (0.95, "-5%"),
    ])
    def test_format_growth(self, growth, expected):
        assert format_growth(growth) == expected

    def test_format_percent(self):
        assert format_percent(5.0) == "5.0%"
