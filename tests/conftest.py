"""
Pytest configuration and fixtures.

Services and endpoints run against an in-memory stand-in for the Neo4j
store, so no database is needed.
"""
import os

os.environ.setdefault("NEO4J_PASSWORD", "test-password")
os.environ.setdefault("LOG_FILE", "logs/test.log")
os.environ.setdefault("SEED_ON_STARTUP", "false")

import pytest
from fastapi.testclient import TestClient

from api.main import app, get_analytics_service, get_query_service, get_store
from exceptions import StoreError
from storage.models import University
from services.analytics_service import AnalyticsService
from services.query_service import UniversityQueryService


class InMemoryUniversityStore:
    """Implements the UniversityStore primitives over a list of records."""

    def __init__(self, records=None):
        self.records = list(records or [])
        self.fail = False
        self.fail_inserts = False
        self.insert_calls = []

    def _check(self):
        if self.fail:
            raise StoreError("Record store query failed")

    def _matches(self, record, filters):
        for field, value in (filters or {}).items():
            if getattr(record, field) != value:
                return False
        return True

    def _select(self, filters):
        self._check()
        return [r for r in self.records if self._matches(r, filters)]

    def verify_connectivity(self):
        self._check()

    def count(self, filters=None):
        return len(self._select(filters))

    def count_with_web_pages(self):
        return len([r for r in self._select(None) if r.web_pages])

    def distinct_values(self, field, filters=None):
        values = []
        for record in self._select(filters):
            value = getattr(record, field)
            if value is not None and value not in values:
                values.append(value)
        return values

    def group_counts(self, field, filters=None, limit=None, skip_null=False):
        counts = {}
        for record in self._select(filters):
            key = getattr(record, field)
            if skip_null and key is None:
                continue
            counts[key] = counts.get(key, 0) + 1
        rows = [{"key": k, "count": c} for k, c in counts.items()]
        rows.sort(key=lambda row: (-row["count"], row["key"] or ""))
        return rows[:limit] if limit is not None else rows

    def find(self, filters=None, limit=None):
        found = self._select(filters)
        return found[:limit] if limit is not None else found

    def find_one(self, filters):
        found = self.find(filters, limit=1)
        return found[0] if found else None

    def search_by_name(self, text, limit):
        found = [r for r in self._select(None) if text.lower() in r.name.lower()]
        return found[:limit]

    def insert_many(self, records, batch_size=None):
        self._check()
        if self.fail_inserts:
            raise StoreError("Record store insert failed")
        records = list(records)
        self.insert_calls.append((len(records), batch_size))
        self.records.extend(records)
        return len(records)

    def ensure_indexes(self):
        self._check()

    def close(self):
        pass


@pytest.fixture
def scenario_records():
    """Three records: two in X (one with province P), one in Y."""
    return [
        University(name="A", country="X", web_pages=["http://a.example"]),
        University(name="B", country="X", state_province="P"),
        University(name="C", country="Y", web_pages=["http://c.example"]),
    ]


@pytest.fixture
def store(scenario_records):
    return InMemoryUniversityStore(scenario_records)


@pytest.fixture
def query_service(store):
    return UniversityQueryService(store)


@pytest.fixture
def analytics_service(store):
    return AnalyticsService(store)


@pytest.fixture
def client(store, query_service, analytics_service):
    """HTTP client with the services wired to the in-memory store."""
    app.dependency_overrides[get_store] = lambda: store
    app.dependency_overrides[get_query_service] = lambda: query_service
    app.dependency_overrides[get_analytics_service] = lambda: analytics_service

    yield TestClient(app)

    app.dependency_overrides.clear()
