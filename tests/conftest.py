"""Pytest configuration and shared fixtures."""

from datetime import date, datetime, timezone
from decimal import Decimal

import pytest
from fastapi.testclient import TestClient

from events import repository
from main import app


def make_event(event_id: int, **overrides) -> dict:
    """A row shaped like the joined `charity_events` SELECT."""
    row = {
        "id": event_id,
        "title": f"Event {event_id}",
        "short_description": "Short description",
        "full_description": "Full description",
        "category_id": 1,
        "organization_id": 1,
        "location": "Sydney",
        "venue_name": "Town Hall",
        "address": "1 George St",
        "event_date": date(2999, 1, 1),
        "event_time": None,
        "registration_deadline": None,
        "goal_amount": Decimal("1000.00"),
        "current_amount": Decimal("250.00"),
        "ticket_price": Decimal("0.00"),
        "is_free": True,
        "is_featured": False,
        "is_active": True,
        "available_tickets": 100,
        "created_at": datetime(2024, 1, 1, tzinfo=timezone.utc),
        "category_name": "Fun Run",
        "organization_name": "Helping Hands",
    }
    row.update(overrides)
    return row


class FakeEventStore:
    """Stands in for `events.repository`; records what it was asked."""

    def __init__(self) -> None:
        self.events: list[dict] = []
        self.categories: list[dict] = []
        self.search_calls: list = []
        self.similar_calls: list = []
        self.detail_calls: list = []

    async def list_active_events(self):
        return [dict(e) for e in self.events]

    async def search_events(self, filters):
        self.search_calls.append(filters)
        return [dict(e) for e in self.events]

    async def list_categories(self):
        return [dict(c) for c in self.categories]

    async def list_featured_events(self, *, limit=repository.FEATURED_LIMIT):
        return [dict(e) for e in self.events if e["is_featured"]][:limit]

    async def get_active_event(self, event_id):
        self.detail_calls.append(event_id)
        for event in self.events:
            if event["id"] == event_id and event["is_active"]:
                return dict(event)
        return None

    async def list_similar_events(self, event_id, *, limit=repository.SIMILAR_LIMIT):
        self.similar_calls.append(event_id)
        source = next((e for e in self.events if e["id"] == event_id), None)
        if source is None:
            return []
        matches = [
            e
            for e in self.events
            if e["id"] != event_id
            and e["is_active"]
            and (e["category_id"] == source["category_id"] or e["location"] == source["location"])
        ]
        matches.sort(key=lambda e: e["event_date"])
        return [dict(e) for e in matches[:limit]]


@pytest.fixture
def store(monkeypatch) -> FakeEventStore:
    fake = FakeEventStore()
    for name in (
        "list_active_events",
        "search_events",
        "list_categories",
        "list_featured_events",
        "get_active_event",
        "list_similar_events",
    ):
        monkeypatch.setattr(repository, name, getattr(fake, name))
    return fake


@pytest.fixture
def client() -> TestClient:
    # No `with` block: the lifespan (and its DB pool) never starts.
    return TestClient(app, raise_server_exceptions=False)


@pytest.fixture(autouse=True)
def production_env(monkeypatch):
    monkeypatch.setenv("APP_ENV", "production")
