"""Tests for provider directory endpoints.

The Airtable source and the in-memory directory are swapped out via FastAPI's
dependency_overrides, so no real network connections are made.
"""

from fastapi.testclient import TestClient

from app.api.dependencies import get_airtable_config, get_provider_source
from app.core.airtable import AirtableConfig, FetchError, ProviderSource
from app.main import app
from app.services.directory import LOAD_ERROR_MESSAGE, ProviderDirectory, get_directory


# ---------------------------------------------------------------------------
# Mock helpers
# ---------------------------------------------------------------------------


class FakeSource(ProviderSource):
    """Serves queued payloads (or raises queued exceptions) in order.

    The last queued item is repeated once the queue is exhausted.
    """

    name = "fake"

    def __init__(self, *payloads):
        super().__init__()
        self._payloads = list(payloads)
        self.calls = 0

    async def fetch_payload(self):
        self.calls += 1
        payload = self._payloads.pop(0) if len(self._payloads) > 1 else self._payloads[0]
        if isinstance(payload, Exception):
            raise payload
        return payload


def override(source: ProviderSource, directory: ProviderDirectory | None = None):
    directory = directory or ProviderDirectory()
    app.dependency_overrides[get_provider_source] = lambda: source
    app.dependency_overrides[get_directory] = lambda: directory
    return lambda: app.dependency_overrides.clear()


# ---------------------------------------------------------------------------
# Sample records
# ---------------------------------------------------------------------------

ACME = {
    "id": "rec1",
    "fields": {
        "Name": "Acme Debris Removal",
        "Provider Type": "Debris Removal",
        "Regions Served": ["Southeast", "Mid-Atlantic"],
        "Mobilization Window": "24-48 hours",
        "Badges Earned": "Insured",
        "Primary Contact Phone": "555-0100",
        "Website": "https://acme.example",
    },
}

BLUE = {
    "id": "rec2",
    "fields": {"Provider Name": "Blue Ridge Roofing", "Regions Served": "Mid-Atlantic"},
}

CASCADE = {
    "id": "rec3",
    "fields": {"Provider Name": "Cascade Water Works", "Regions Served": "Pacific Northwest"},
}

NAMELESS = {"id": "rec4", "fields": {"Provider Type": "Roofing"}}

PAYLOAD = {"records": [ACME, BLUE, CASCADE, NAMELESS]}


# ---------------------------------------------------------------------------
# GET /api/providers
# ---------------------------------------------------------------------------


class TestListProviders:
    def test_initial_read_loads_and_normalizes(self):
        source = FakeSource(PAYLOAD)
        cleanup = override(source)
        try:
            with TestClient(app) as client:
                response = client.get("/api/providers")
        finally:
            cleanup()

        assert response.status_code == 200
        body = response.json()
        assert body["total"] == 3
        assert body["loading"] is False
        assert body["load_error"] is None
        assert body["loaded_at"] is not None
        acme = body["providers"][0]
        assert acme == {
            "name": "Acme Debris Removal",
            "category": "Debris Removal",
            "regions": "Southeast, Mid-Atlantic",
            "mobilization_window": "24-48 hours",
            "badges": ["Insured"],
            "phone": "555-0100",
            "email": "",
            "website": "https://acme.example",
        }

    def test_second_read_uses_memory(self):
        source = FakeSource(PAYLOAD)
        cleanup = override(source)
        try:
            with TestClient(app) as client:
                client.get("/api/providers")
                client.get("/api/providers")
        finally:
            cleanup()

        assert source.calls == 1

    def test_load_failure_returns_message_not_error_status(self):
        source = FakeSource(FetchError("down", status=503))
        cleanup = override(source)
        try:
            with TestClient(app) as client:
                response = client.get("/api/providers")
        finally:
            cleanup()

        assert response.status_code == 200
        body = response.json()
        assert body["providers"] == []
        assert body["load_error"] == LOAD_ERROR_MESSAGE

    def test_missing_api_credentials_return_configuration_error(self):
        app.dependency_overrides[get_airtable_config] = lambda: AirtableConfig(
            mode="api", api_key="pat-secret"
        )
        app.dependency_overrides[get_directory] = lambda: ProviderDirectory()
        try:
            with TestClient(app) as client:
                response = client.get("/api/providers")
        finally:
            app.dependency_overrides.clear()

        assert response.status_code == 500
        body = response.json()
        assert body["error"] == "Server configuration error"
        assert "AIRTABLE_BASE_ID" in body["details"]
        assert "AIRTABLE_TABLE_NAME" in body["details"]
        assert "pat-secret" not in response.text


# ---------------------------------------------------------------------------
# POST /api/providers/refresh
# ---------------------------------------------------------------------------


class TestRefreshProviders:
    def test_refresh_reloads_from_source(self):
        source = FakeSource({"records": [ACME]}, PAYLOAD)
        cleanup = override(source)
        try:
            with TestClient(app) as client:
                first = client.get("/api/providers")
                refreshed = client.post("/api/providers/refresh")
        finally:
            cleanup()

        assert first.json()["total"] == 1
        assert refreshed.status_code == 200
        assert refreshed.json()["total"] == 3
        assert source.calls == 2

    def test_failed_refresh_keeps_loaded_providers(self):
        source = FakeSource(PAYLOAD, FetchError("down"))
        cleanup = override(source)
        try:
            with TestClient(app) as client:
                client.get("/api/providers")
                response = client.post("/api/providers/refresh")
        finally:
            cleanup()

        body = response.json()
        assert body["total"] == 3
        assert body["load_error"] == LOAD_ERROR_MESSAGE


# ---------------------------------------------------------------------------
# GET /api/providers/search
# ---------------------------------------------------------------------------


class TestSearchProviders:
    def test_location_filters_case_insensitively(self):
        cleanup = override(FakeSource(PAYLOAD))
        try:
            with TestClient(app) as client:
                response = client.get("/api/providers/search?location=ATLANTIC")
        finally:
            cleanup()

        assert response.status_code == 200
        body = response.json()
        assert body["total"] == 2
        assert [p["name"] for p in body["providers"]] == [
            "Acme Debris Removal",
            "Blue Ridge Roofing",
        ]
        assert body["location"] == "ATLANTIC"
        assert body["disaster_category"] == "Flood / Storm Surge"

    def test_blank_location_returns_all_in_order(self):
        cleanup = override(FakeSource(PAYLOAD))
        try:
            with TestClient(app) as client:
                response = client.get("/api/providers/search", params={"location": "   "})
        finally:
            cleanup()

        names = [p["name"] for p in response.json()["providers"]]
        assert names == ["Acme Debris Removal", "Blue Ridge Roofing", "Cascade Water Works"]

    def test_disaster_category_does_not_filter(self):
        cleanup = override(FakeSource(PAYLOAD))
        try:
            with TestClient(app) as client:
                wildfire = client.get("/api/providers/search", params={"disaster": "Wildfire"})
                other = client.get("/api/providers/search", params={"disaster": "Other"})
        finally:
            cleanup()

        assert wildfire.json()["total"] == 3
        assert other.json()["total"] == 3
        assert wildfire.json()["disaster_category"] == "Wildfire"

    def test_unknown_disaster_returns_422(self):
        cleanup = override(FakeSource(PAYLOAD))
        try:
            with TestClient(app) as client:
                response = client.get("/api/providers/search", params={"disaster": "Meteor"})
        finally:
            cleanup()

        assert response.status_code == 422

    def test_no_match_returns_empty_list(self):
        cleanup = override(FakeSource(PAYLOAD))
        try:
            with TestClient(app) as client:
                response = client.get("/api/providers/search", params={"location": "gulf coast"})
        finally:
            cleanup()

        body = response.json()
        assert body["providers"] == []
        assert body["total"] == 0

    def test_search_reports_load_error(self):
        cleanup = override(FakeSource(FetchError("down")))
        try:
            with TestClient(app) as client:
                response = client.get("/api/providers/search")
        finally:
            cleanup()

        body = response.json()
        assert body["total"] == 0
        assert body["load_error"] == LOAD_ERROR_MESSAGE


# ---------------------------------------------------------------------------
# GET /api/providers/disaster-types
# ---------------------------------------------------------------------------


class TestDisasterTypes:
    def test_lists_categories_in_order(self):
        with TestClient(app) as client:
            response = client.get("/api/providers/disaster-types")

        assert response.status_code == 200
        types = response.json()
        assert len(types) == 10
        assert types[0] == "Flood / Storm Surge"
        assert types[-1] == "Other"


# ---------------------------------------------------------------------------
# GET /api/providers/raw
# ---------------------------------------------------------------------------


class TestRawProviders:
    def test_passes_payload_through_unchanged(self):
        payload = {**PAYLOAD, "offset": None, "view": {"name": "Public"}}
        cleanup = override(FakeSource(payload))
        try:
            with TestClient(app) as client:
                response = client.get("/api/providers/raw")
        finally:
            cleanup()

        assert response.status_code == 200
        assert response.json() == payload

    def test_upstream_failure_returns_error_envelope(self):
        cleanup = override(FakeSource(FetchError("bad", status=404, details="NOT_FOUND")))
        try:
            with TestClient(app) as client:
                response = client.get("/api/providers/raw")
        finally:
            cleanup()

        assert response.status_code == 502
        assert response.json() == {
            "error": "Failed to load providers",
            "status": 404,
            "details": "NOT_FOUND",
        }

    def test_transport_failure_omits_status(self):
        cleanup = override(FakeSource(FetchError("unreachable", details="ConnectError")))
        try:
            with TestClient(app) as client:
                response = client.get("/api/providers/raw")
        finally:
            cleanup()

        assert response.status_code == 502
        assert response.json() == {"error": "Failed to load providers", "details": "ConnectError"}


# ---------------------------------------------------------------------------
# GET /health
# ---------------------------------------------------------------------------


def test_health_check():
    with TestClient(app) as client:
        response = client.get("/health")
    assert response.status_code == 200
    assert response.json() == {"status": "ok", "service": "vrn-api"}
