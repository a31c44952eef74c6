"""
Event business logic.

Scope:
- validating ids and search filters before any query runs
- derived per-event fields (progress percentage, formatted date)
- splitting the listing into upcoming/past
- search statistics
"""

from __future__ import annotations

from datetime import date, datetime, timezone
from typing import Any

from fastapi import status

from core.errors import ApiError, data_access

from . import repository
from .filters import InvalidFilterError, SearchFilters, is_storable_id, parse_int


def _as_float(value: Any) -> float:
    if value is None:
        return 0.0
    try:
        return float(value)
    except (TypeError, ValueError):
        return 0.0


def raw_progress(current_amount: Any, goal_amount: Any) -> float:
    """
    current / goal * 100, uncapped. A goal of zero (or less) yields 0.
    """
    goal = _as_float(goal_amount)
    if goal <= 0:
        return 0.0
    return _as_float(current_amount) / goal * 100


def progress_percentage(current_amount: Any, goal_amount: Any) -> float:
    """
    Display progress, clamped to [0, 100].
    """
    return max(0.0, min(raw_progress(current_amount, goal_amount), 100.0))


def _to_date(value: Any) -> date | None:
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    if isinstance(value, str) and value:
        try:
            return date.fromisoformat(value[:10])
        except ValueError:
            return None
    return None


def format_long_date(value: Any) -> str | None:
    # e.g. "Saturday 15 March 2025"
    day = _to_date(value)
    if day is None:
        return None
    return f"{day:%A} {day.day} {day:%B} {day.year}"


def date_stamp(value: Any) -> str:
    if isinstance(value, (date, datetime)):
        return value.isoformat()[:10]
    return str(value or "")


def today_stamp() -> str:
    return datetime.now(timezone.utc).date().isoformat()


def with_progress(event: dict[str, Any]) -> dict[str, Any]:
    event["progress_percentage"] = progress_percentage(
        event.get("current_amount"),
        event.get("goal_amount"),
    )
    return event


def partition_by_date(
    events: list[dict[str, Any]],
    *,
    today: str,
) -> tuple[list[dict[str, Any]], list[dict[str, Any]]]:
    """
    Split into (upcoming, past) by comparing YYYY-MM-DD stamps as strings.
    Each event lands in exactly one side.
    """
    upcoming: list[dict[str, Any]] = []
    past: list[dict[str, Any]] = []
    for event in events:
        if date_stamp(event.get("event_date")) >= today:
            upcoming.append(event)
        else:
            past.append(event)
    return upcoming, past


def search_stats(events: list[dict[str, Any]]) -> dict[str, Any]:
    # avg_progress averages uncapped progress; row progress_percentage stays capped.
    total = len(events)
    total_raised = sum((_as_float(e.get("current_amount")) for e in events), 0.0)
    avg_progress = (
        sum(raw_progress(e.get("current_amount"), e.get("goal_amount")) for e in events) / total
        if total
        else 0.0
    )
    return {
        "total_events": total,
        "total_raised": total_raised,
        "avg_progress": avg_progress,
    }


def parse_event_id(raw: str) -> int:
    event_id = parse_int(raw)
    if event_id is None:
        raise ApiError(
            status.HTTP_400_BAD_REQUEST,
            "Invalid event ID",
            "Event ID must be a number",
        )
    return event_id


def parse_search_filters(
    *,
    date_value: str | None,
    location: str | None,
    category: str | None,
    query: str | None,
) -> SearchFilters:
    try:
        return SearchFilters.from_params(
            date_value=date_value,
            location=location,
            category=category,
            query=query,
        )
    except InvalidFilterError as exc:
        raise ApiError(
            status.HTTP_400_BAD_REQUEST,
            f"Invalid {exc.field_name}",
            str(exc),
        ) from exc


async def list_events(*, today: str | None = None) -> dict[str, Any]:
    with data_access("Failed to fetch events"):
        rows = await repository.list_active_events()

    events = [with_progress(row) for row in rows]
    upcoming, past = partition_by_date(events, today=today or today_stamp())
    return {
        "all_events": events,
        "upcoming_events": upcoming,
        "past_events": past,
        "total_upcoming": len(upcoming),
        "total_past": len(past),
    }


async def search_events(filters: SearchFilters) -> tuple[list[dict[str, Any]], dict[str, Any]]:
    if filters.matches_nothing:
        return [], search_stats([])

    with data_access("Search failed"):
        rows = await repository.search_events(filters)

    events = [with_progress(row) for row in rows]
    return events, search_stats(events)


async def list_categories() -> list[dict[str, Any]]:
    with data_access("Failed to fetch categories"):
        return await repository.list_categories()


async def featured_events() -> list[dict[str, Any]]:
    with data_access("Failed to fetch featured events"):
        rows = await repository.list_featured_events()
    return [with_progress(row) for row in rows]


async def event_detail(event_id: int) -> dict[str, Any]:
    row = None
    if is_storable_id(event_id):
        with data_access("Failed to fetch event details"):
            row = await repository.get_active_event(event_id)

    if row is None:
        raise ApiError(
            status.HTTP_404_NOT_FOUND,
            "Event not found",
            "The specified event does not exist or has been removed",
        )

    event = with_progress(row)
    event["formatted_date"] = format_long_date(event.get("event_date"))
    return event


async def similar_events(event_id: int) -> list[dict[str, Any]]:
    if not is_storable_id(event_id):
        return []

    with data_access("Failed to fetch similar events"):
        rows = await repository.list_similar_events(event_id)
    return [with_progress(row) for row in rows]
