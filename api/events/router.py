"""
Charity event API endpoints.

Successful responses use the envelope {"success": true, "data": ..., "message": ...}.
Failures are raised as `ApiError` and rendered by the handler in `main.py`.
"""

from __future__ import annotations

from fastapi import APIRouter, Query

from . import service

router = APIRouter(prefix="/api/events")


@router.get("")
async def list_events() -> dict:
    data = await service.list_events()
    return {
        "success": True,
        "data": data,
        "message": f"Successfully retrieved {len(data['all_events'])} events",
    }


@router.get("/search")
async def search_events(
    date_value: str | None = Query(default=None, alias="date"),
    location: str | None = Query(default=None),
    category: str | None = Query(default=None),
    query: str | None = Query(default=None),
) -> dict:
    filters = service.parse_search_filters(
        date_value=date_value,
        location=location,
        category=category,
        query=query,
    )
    events, stats = await service.search_events(filters)
    return {
        "success": True,
        "data": events,
        "stats": stats,
        "filters": {
            "date": date_value or None,
            "location": location or None,
            "category": category or None,
            "query": query or None,
        },
        "message": f"Found {len(events)} events matching your criteria",
    }


@router.get("/categories")
async def list_categories() -> dict:
    categories = await service.list_categories()
    return {
        "success": True,
        "data": categories,
        "total": len(categories),
        "message": "Successfully retrieved event categories",
    }


@router.get("/featured")
async def featured_events() -> dict:
    events = await service.featured_events()
    return {
        "success": True,
        "data": events,
        "total": len(events),
        "message": "Successfully retrieved featured events",
    }


@router.get("/{event_id}")
async def event_detail(event_id: str) -> dict:
    event = await service.event_detail(service.parse_event_id(event_id))
    return {
        "success": True,
        "data": event,
        "message": "Successfully retrieved event details",
    }


@router.get("/{event_id}/similar")
async def similar_events(event_id: str) -> dict:
    events = await service.similar_events(service.parse_event_id(event_id))
    return {
        "success": True,
        "data": events,
        "total": len(events),
        "message": "Successfully retrieved similar events",
    }
