"""Tagged filter predicates and the owner-scoped predicate set.

A ``PredicateSet`` always carries the ownership predicate and, for models
with a soft-delete column, the not-deleted predicate. Both are derived from
the constructor arguments, so no sequence of calls can produce a set
without them. Caller criteria are added on top and may never target the
owner or soft-delete columns.
"""

from __future__ import annotations

import dataclasses
from dataclasses import dataclass
from typing import Any

from sqlalchemy import inspect
from sqlalchemy.sql import ColumnElement

from backoffice.access.errors import ValidationError


@dataclass(frozen=True)
class Eq:
    field: str
    value: Any
    kind: str = dataclasses.field(default="eq", init=False)


@dataclass(frozen=True)
class IsNull:
    field: str
    kind: str = dataclasses.field(default="is_null", init=False)


@dataclass(frozen=True)
class NotNull:
    field: str
    kind: str = dataclasses.field(default="not_null", init=False)


@dataclass(frozen=True)
class Range:
    """Inclusive range; either bound may be omitted but not both."""

    field: str
    lower: Any = None
    upper: Any = None
    kind: str = dataclasses.field(default="range", init=False)

    def __post_init__(self) -> None:
        if self.lower is None and self.upper is None:
            raise ValidationError(f"Range on '{self.field}' needs at least one bound")
        if self.lower is not None and self.upper is not None and self.lower > self.upper:
            raise ValidationError(f"Range on '{self.field}' has lower bound after upper bound")


Predicate = Eq | IsNull | NotNull | Range


@dataclass(frozen=True)
class PredicateSet:
    owner_field: str
    owner_id: str
    deleted_field: str | None = None
    optional: tuple[Predicate, ...] = ()

    def __post_init__(self) -> None:
        if not isinstance(self.owner_id, str) or not self.owner_id.strip():
            raise ValidationError("Owner id is required")
        protected = {self.owner_field, self.deleted_field} - {None}
        for predicate in self.optional:
            if not isinstance(predicate, (Eq, IsNull, NotNull, Range)):
                raise ValidationError(f"Unsupported predicate: {predicate!r}")
            if predicate.field in protected:
                raise ValidationError(
                    f"Criteria cannot constrain mandatory field '{predicate.field}'"
                )

    @property
    def mandatory(self) -> tuple[Predicate, ...]:
        preds: tuple[Predicate, ...] = (Eq(self.owner_field, self.owner_id),)
        if self.deleted_field is not None:
            preds += (IsNull(self.deleted_field),)
        return preds

    def with_(self, *predicates: Predicate) -> PredicateSet:
        """Return a new set with *predicates* added to the optional criteria."""
        return PredicateSet(
            owner_field=self.owner_field,
            owner_id=self.owner_id,
            deleted_field=self.deleted_field,
            optional=self.optional + tuple(predicates),
        )

    def __iter__(self):  # type: ignore[no-untyped-def]
        return iter(self.mandatory + self.optional)

    def __len__(self) -> int:
        return len(self.mandatory) + len(self.optional)

    def compile(self, model: Any) -> list[ColumnElement[bool]]:
        """Translate every predicate into a SQLAlchemy clause on *model*."""
        columns = {attr.key for attr in inspect(model).column_attrs}
        return [compile_predicate(model, predicate, columns) for predicate in self]


def compile_predicate(
    model: Any, predicate: Predicate, columns: set[str] | None = None
) -> ColumnElement[bool]:
    if columns is None:
        columns = {attr.key for attr in inspect(model).column_attrs}
    if predicate.field not in columns:
        raise ValidationError(f"Unknown field '{predicate.field}' for {model.__name__}")
    column = getattr(model, predicate.field)

    if isinstance(predicate, Eq):
        if predicate.value is None:
            return column.is_(None)
        return column == predicate.value
    if isinstance(predicate, IsNull):
        return column.is_(None)
    if isinstance(predicate, NotNull):
        return column.is_not(None)
    if isinstance(predicate, Range):
        if predicate.lower is not None and predicate.upper is not None:
            return column.between(predicate.lower, predicate.upper)
        if predicate.lower is not None:
            return column >= predicate.lower
        return column <= predicate.upper
    raise ValidationError(f"Unsupported predicate: {predicate!r}")
