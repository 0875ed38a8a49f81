"""Shared sorting utilities for repository queries."""

from __future__ import annotations

from sqlalchemy import JSON, asc, desc, inspect
from sqlalchemy.orm import Query

from backoffice.core.database import Base


def apply_order_by(
    query: Query,  # type: ignore[type-arg]
    model: type[Base],
    order_by: str | None,
    default_field: str = "created_at",
    default_direction: str = "desc",
    tie_breaker: str | None = "id",
) -> Query:  # type: ignore[type-arg]
    """Apply ordering to a SQLAlchemy query.

    Args:
        query: The SQLAlchemy query to sort.
        model: The SQLAlchemy model class.
        order_by: Sort string in "field:direction" format (e.g. "type:asc").
            If None, or if the field is not a sortable mapped column, uses
            default_field and default_direction.
        default_field: Default column to sort by.
        default_direction: Default sort direction ("asc" or "desc").
        tie_breaker: Column appended in the same direction so pages are
            stable when the sort column has duplicates.

    Returns:
        The query with ordering applied.
    """
    field = default_field
    direction = default_direction
    # JSON columns have no ordering operator on PostgreSQL
    columns = {
        attr.key
        for attr in inspect(model).column_attrs
        if not isinstance(attr.columns[0].type, JSON)
    }

    if order_by:
        parts = order_by.split(":", 1)
        candidate_field = parts[0].strip()
        candidate_direction = parts[1].strip().lower() if len(parts) > 1 else "asc"

        # Mapped, orderable columns only; ``metadata`` is an attribute of every model
        if candidate_field in columns:
            field = candidate_field
            if candidate_direction in ("asc", "desc"):
                direction = candidate_direction
            else:
                direction = default_direction

    order_func = asc if direction == "asc" else desc
    query = query.order_by(order_func(getattr(model, field)))
    if tie_breaker and tie_breaker != field and tie_breaker in columns:
        query = query.order_by(order_func(getattr(model, tie_breaker)))
    return query
