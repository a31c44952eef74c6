"""
Search filters and the WHERE-clause builder for event search.

Only filters that are present produce a predicate. Every user value is
bound as an asyncpg positional parameter ($1, $2, ...); nothing the caller
sends is ever spliced into the SQL text.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date
from typing import Any

ALL_CATEGORIES = "all"

# Ids are PostgreSQL INTEGER columns.
INT4_MIN = -2_147_483_648
INT4_MAX = 2_147_483_647


class InvalidFilterError(ValueError):
    def __init__(self, field_name: str, message: str) -> None:
        super().__init__(message)
        self.field_name = field_name


def parse_int(raw: str | None) -> int | None:
    """
    Integer value of an optionally signed run of ASCII digits, else None.
    """
    value = (raw or "").strip()
    digits = value[1:] if value.startswith("-") else value
    if not (digits.isascii() and digits.isdigit()):
        return None
    return int(value)


def is_storable_id(value: int) -> bool:
    return INT4_MIN <= value <= INT4_MAX


@dataclass(frozen=True)
class SearchFilters:
    event_date: date | None = None
    location: str | None = None
    category_id: int | None = None
    query: str | None = None

    @classmethod
    def from_params(
        cls,
        *,
        date_value: str | None = None,
        location: str | None = None,
        category: str | None = None,
        query: str | None = None,
    ) -> SearchFilters:
        """
        Build filters from raw query-string values.

        Empty strings count as "not given". The category sentinel "all"
        means no category filter.
        """
        event_date = None
        if date_value:
            try:
                event_date = date.fromisoformat(date_value.strip())
            except ValueError as exc:
                raise InvalidFilterError("date", "Date must be in YYYY-MM-DD format") from exc

        category_id = None
        if category and category.strip().lower() != ALL_CATEGORIES:
            category_id = parse_int(category)
            if category_id is None:
                raise InvalidFilterError("category", "Category must be a numeric ID or 'all'")

        return cls(
            event_date=event_date,
            location=location or None,
            category_id=category_id,
            query=query or None,
        )

    @property
    def matches_nothing(self) -> bool:
        """
        True when the category id cannot exist in the table.
        """
        return self.category_id is not None and not is_storable_id(self.category_id)


def contains_pattern(value: str) -> str:
    """
    ILIKE pattern matching `value` as a literal substring.
    """
    escaped = value.replace("\\", "\\\\").replace("%", "\\%").replace("_", "\\_")
    return f"%{escaped}%"


@dataclass
class ConditionBuilder:
    conditions: list[str] = field(default_factory=list)
    params: list[Any] = field(default_factory=list)

    def bind(self, value: Any) -> str:
        self.params.append(value)
        return f"${len(self.params)}"

    def add(self, condition: str) -> None:
        self.conditions.append(condition)

    def where(self, *base: str) -> str:
        clauses = [*base, *self.conditions]
        if not clauses:
            return ""
        return "WHERE " + "\n  AND ".join(clauses)


def search_conditions(filters: SearchFilters) -> ConditionBuilder:
    builder = ConditionBuilder()

    if filters.event_date is not None:
        builder.add(f"ce.event_date = {builder.bind(filters.event_date)}")

    if filters.location:
        p = builder.bind(contains_pattern(filters.location))
        builder.add(f"(ce.location ILIKE {p} ESCAPE '\\' OR ce.venue_name ILIKE {p} ESCAPE '\\')")

    if filters.category_id is not None:
        builder.add(f"ce.category_id = {builder.bind(filters.category_id)}")

    if filters.query:
        p = builder.bind(contains_pattern(filters.query))
        builder.add(
            f"(ce.title ILIKE {p} ESCAPE '\\'"
            f" OR ce.short_description ILIKE {p} ESCAPE '\\'"
            f" OR ce.full_description ILIKE {p} ESCAPE '\\')"
        )

    return builder
