"""Base repository for rows owned by a single user.

Every read goes through a ``PredicateSet`` built from the owner id, so
ownership and soft-delete filtering cannot be forgotten by a subclass.
"""

from __future__ import annotations

from typing import Any
from uuid import UUID

from sqlalchemy import func
from sqlalchemy.orm import Query, Session

from backoffice.access.predicates import Eq, Predicate, PredicateSet
from backoffice.core.sorting import apply_order_by
from backoffice.models.shared import utc_now


class OwnedRepository:
    """Storage access for one owned entity.

    Subclasses set ``model`` and, when they differ from the defaults,
    ``owner_field`` and ``deleted_field`` (``None`` for models without soft
    delete).
    """

    model: Any = None
    owner_field: str = "user_id"
    deleted_field: str | None = "deleted_at"
    default_order_field: str = "created_at"

    def __init__(self, db: Session):
        self.db = db

    def predicates(self, owner_id: str, *criteria: Predicate) -> PredicateSet:
        return PredicateSet(
            owner_field=self.owner_field,
            owner_id=owner_id,
            deleted_field=self.deleted_field,
            optional=tuple(criteria),
        )

    def query(self, predicates: PredicateSet) -> Query:  # type: ignore[type-arg]
        return self.db.query(self.model).filter(*predicates.compile(self.model))

    def get_all(
        self,
        predicates: PredicateSet,
        *,
        order_by: str | None = None,
        skip: int | None = None,
        limit: int | None = None,
    ) -> list[Any]:
        query = apply_order_by(
            self.query(predicates), self.model, order_by, default_field=self.default_order_field
        )
        if skip:
            query = query.offset(skip)
        if limit is not None:
            query = query.limit(limit)
        return query.all()

    def count(self, predicates: PredicateSet) -> int:
        return (
            self.db.query(func.count(self.model.id))
            .filter(*predicates.compile(self.model))
            .scalar()
            or 0
        )

    def get_owned(
        self, entity_id: UUID, owner_id: str, *, include_deleted: bool = False
    ) -> Any | None:
        """Fetch one row by id, scoped to *owner_id*.

        With ``include_deleted`` the soft-delete predicate is dropped but the
        ownership predicate is kept.
        """
        if include_deleted:
            predicates = PredicateSet(
                owner_field=self.owner_field,
                owner_id=owner_id,
                optional=(Eq("id", entity_id),),
            )
        else:
            predicates = self.predicates(owner_id, Eq("id", entity_id))
        return self.query(predicates).first()

    def soft_delete(self, entity: Any) -> bool:
        """Stamp the soft-delete column. Returns False if it was already set."""
        if self.deleted_field is None:
            raise TypeError(f"{self.model.__name__} does not support soft delete")
        if getattr(entity, self.deleted_field) is not None:
            return False
        setattr(entity, self.deleted_field, utc_now())
        self.db.commit()
        self.db.refresh(entity)
        return True
