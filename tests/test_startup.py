"""Tests for the startup and shutdown hooks of the API."""
import pytest
from fastapi.testclient import TestClient

from api import main
from api.main import app
from exceptions import StoreError
from services import seed_service
from storage.models import University
from tests.conftest import InMemoryUniversityStore

STATE_ATTRS = ("store", "query_service", "analytics_service")


def clear_state():
    for attr in STATE_ATTRS:
        if hasattr(app.state, attr):
            delattr(app.state, attr)


class StubLoader:

    def __init__(self, universities):
        self.universities = universities
        self.calls = 0

    def load(self):
        self.calls += 1
        return self.universities


@pytest.fixture(autouse=True)
def fresh_app():
    app.dependency_overrides.clear()
    clear_state()
    yield
    clear_state()


@pytest.fixture
def empty_store(monkeypatch):
    store = InMemoryUniversityStore()
    monkeypatch.setattr(main, "UniversityStore", lambda: store)
    return store


@pytest.fixture
def loader(monkeypatch):
    loader = StubLoader([
        University(name="Uni One", country="Z"),
        University(name="Uni Two", country="W", web_pages=["http://two.example"]),
    ])
    monkeypatch.setattr(seed_service, "DatasetLoader", lambda: loader)
    return loader


class TestStartup:

    def test_unreachable_store_halts_startup(self, empty_store):
        empty_store.fail = True

        with pytest.raises(StoreError):
            with TestClient(app):
                pass

        assert not hasattr(app.state, "query_service")

    def test_seeds_then_serves_through_app_state(self, empty_store, loader, monkeypatch):
        monkeypatch.setattr(main.settings, "seed_on_startup", True)

        with TestClient(app) as client:
            assert app.state.store is empty_store
            response = client.get("/api/countries")
            stats = client.get("/api/analytics/stats").json()

        assert response.status_code == 200
        assert response.json() == ["W", "Z"]
        assert stats["totalUniversities"] == 2
        assert loader.calls == 1
        assert len(empty_store.insert_calls) == 1

    def test_seeding_disabled(self, empty_store, loader, monkeypatch):
        monkeypatch.setattr(main.settings, "seed_on_startup", False)

        with TestClient(app) as client:
            response = client.get("/api/countries")

        assert response.json() == []
        assert loader.calls == 0
        assert empty_store.insert_calls == []

    def test_populated_store_not_reseeded(self, empty_store, loader, monkeypatch):
        monkeypatch.setattr(main.settings, "seed_on_startup", True)
        empty_store.records.append(University(name="Existing", country="X"))

        with TestClient(app) as client:
            response = client.get("/api/countries")

        assert response.json() == ["X"]
        assert loader.calls == 0


class TestUninitializedServices:

    def test_query_endpoint(self):
        response = TestClient(app).get("/api/countries")

        assert response.status_code == 500
        assert response.json() == {"error": "Query service not initialized"}

    def test_analytics_endpoint(self):
        response = TestClient(app).get("/api/analytics/stats")

        assert response.status_code == 500
        assert response.json() == {"error": "Analytics service not initialized"}

    def test_health_without_store(self):
        body = TestClient(app).get("/health").json()

        assert body["neo4j"] == "unknown"
