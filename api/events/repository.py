"""
Charity event queries (raw SQL).

Only active events (`is_active = true`) are ever returned. Category and
organization are LEFT JOINed so an event with a dangling reference still
shows up, just without the joined names.
"""

from __future__ import annotations

from typing import Any

from core import db

from .filters import SearchFilters, search_conditions

FEATURED_LIMIT = 6
SIMILAR_LIMIT = 4

_LIST_COLUMNS = """
  ce.*,
  ec.name AS category_name,
  co.name AS organization_name
"""

_JOINS = """
FROM charity_events ce
LEFT JOIN event_categories ec ON ec.id = ce.category_id
LEFT JOIN charitable_organizations co ON co.id = ce.organization_id
"""


async def list_active_events() -> list[dict[str, Any]]:
    """
    Featured first, then soonest date, newest row breaking ties.
    """
    return await db.fetch_all(
        f"""
        SELECT
          {_LIST_COLUMNS},
          co.mission_statement AS organization_mission
        {_JOINS}
        WHERE ce.is_active = true
        ORDER BY
          ce.is_featured DESC,
          ce.event_date ASC,
          ce.created_at DESC
        """
    )


async def search_events(filters: SearchFilters) -> list[dict[str, Any]]:
    builder = search_conditions(filters)
    return await db.fetch_all(
        f"""
        SELECT
          {_LIST_COLUMNS}
        {_JOINS}
        {builder.where("ce.is_active = true")}
        ORDER BY
          ce.event_date ASC,
          ce.is_featured DESC
        """,
        *builder.params,
    )


async def list_categories() -> list[dict[str, Any]]:
    return await db.fetch_all(
        """
        SELECT id, name, description
        FROM event_categories
        ORDER BY name ASC
        """
    )


async def list_featured_events(*, limit: int = FEATURED_LIMIT) -> list[dict[str, Any]]:
    return await db.fetch_all(
        f"""
        SELECT
          {_LIST_COLUMNS}
        {_JOINS}
        WHERE ce.is_active = true
          AND ce.is_featured = true
        ORDER BY ce.event_date ASC
        LIMIT $1
        """,
        limit,
    )


async def get_active_event(event_id: int) -> dict[str, Any] | None:
    """
    One active event with the full category and organization detail,
    including organization contact fields.
    """
    return await db.fetch_one(
        f"""
        SELECT
          {_LIST_COLUMNS},
          ec.description AS category_description,
          co.mission_statement AS organization_mission,
          co.description AS organization_description,
          co.contact_email AS organization_email,
          co.phone AS organization_phone,
          co.website AS organization_website,
          co.address AS organization_address
        {_JOINS}
        WHERE ce.id = $1
          AND ce.is_active = true
        """,
        event_id,
    )


async def list_similar_events(event_id: int, *, limit: int = SIMILAR_LIMIT) -> list[dict[str, Any]]:
    """
    Other active events sharing the category OR the location of `event_id`.

    No ranking between the two reasons; soonest first. An unknown id
    matches nothing.
    """
    return await db.fetch_all(
        """
        WITH source AS (
          SELECT category_id, location
          FROM charity_events
          WHERE id = $1
        )
        SELECT
          ce.*,
          ec.name AS category_name
        FROM charity_events ce
        LEFT JOIN event_categories ec ON ec.id = ce.category_id
        CROSS JOIN source s
        WHERE ce.id <> $1
          AND ce.is_active = true
          AND (ce.category_id = s.category_id OR ce.location = s.location)
        ORDER BY ce.event_date ASC
        LIMIT $2
        """,
        event_id,
        limit,
    )
