"""Repository for NotificationPreference storage operations."""

from __future__ import annotations

import logging

from sqlalchemy.dialects import postgresql, sqlite
from sqlalchemy.exc import IntegrityError

from backoffice.access.errors import ConflictError
from backoffice.access.predicates import Eq
from backoffice.access.repository import OwnedRepository
from backoffice.core.database import is_unique_violation
from backoffice.models.notification_preference import (
    PREFERENCE_DEFAULTS,
    NotificationPreference,
)
from backoffice.models.shared import generate_uuid, utc_now

logger = logging.getLogger(__name__)

# Dialects with INSERT ... ON CONFLICT DO UPDATE
NATIVE_UPSERT_INSERTS = {
    "postgresql": postgresql.insert,
    "sqlite": sqlite.insert,
}

CONFLICT_COLUMNS = ["user_id", "notification_type"]


class NotificationPreferenceRepository(OwnedRepository):
    model = NotificationPreference
    deleted_field = None
    default_order_field = "notification_type"

    def get_for_type(self, user_id: str, notification_type: str) -> NotificationPreference | None:
        predicates = self.predicates(user_id, Eq("notification_type", notification_type))
        return self.query(predicates).first()

    def get_all_for_user(self, user_id: str) -> list[NotificationPreference]:
        return self.get_all(self.predicates(user_id), order_by="notification_type:asc")

    def get_disabled_user_ids(self, user_ids: list[str], notification_type: str) -> set[str]:
        """Users among *user_ids* who switched *notification_type* off.

        A delivery-time lookup across users, so it is not owner-scoped.
        Users without a stored row are not returned.
        """
        rows = (
            self.db.query(NotificationPreference.user_id)
            .filter(
                NotificationPreference.user_id.in_(user_ids),
                NotificationPreference.notification_type == notification_type,
                NotificationPreference.enabled.is_(False),
            )
            .all()
        )
        return {row.user_id for row in rows}

    def upsert(
        self,
        user_id: str,
        notification_type: str,
        updates: dict[str, bool],
        *,
        native: bool | None = None,
    ) -> NotificationPreference:
        """Create or partially update the (user, type) preference.

        A new row takes ``updates`` over ``PREFERENCE_DEFAULTS``; an existing
        row only changes the supplied fields and ``updated_at``. ``native``
        forces (or disables) the single-statement upsert; by default it is
        used whenever the dialect supports it.
        """
        dialect = self.db.get_bind().dialect.name
        if native is None:
            native = dialect in NATIVE_UPSERT_INSERTS
        if native:
            return self._upsert_native(dialect, user_id, notification_type, updates)
        return self._upsert_in_transaction(user_id, notification_type, updates)

    def _upsert_native(
        self,
        dialect: str,
        user_id: str,
        notification_type: str,
        updates: dict[str, bool],
    ) -> NotificationPreference:
        insert = NATIVE_UPSERT_INSERTS[dialect]
        now = utc_now()
        stmt = insert(NotificationPreference).values(
            id=generate_uuid(),
            user_id=user_id,
            notification_type=notification_type,
            created_at=now,
            updated_at=now,
            **{**PREFERENCE_DEFAULTS, **updates},
        )
        changes = {field: stmt.excluded[field] for field in updates}
        changes["updated_at"] = stmt.excluded["updated_at"]
        stmt = stmt.on_conflict_do_update(index_elements=CONFLICT_COLUMNS, set_=changes)
        try:
            self.db.execute(stmt)
            self.db.commit()
        except IntegrityError as exc:
            self.db.rollback()
            if is_unique_violation(exc):
                logger.warning(
                    "Preference upsert conflict for user %s type %s", user_id, notification_type
                )
                raise ConflictError("Notification preference was modified concurrently") from exc
            raise

        preference = self.get_for_type(user_id, notification_type)
        if preference is None:  # pragma: no cover
            raise ConflictError("Notification preference vanished after upsert")
        return preference

    def _upsert_in_transaction(
        self,
        user_id: str,
        notification_type: str,
        updates: dict[str, bool],
    ) -> NotificationPreference:
        # Check-then-act; the unique constraint still rejects a racing insert.
        self.db.connection(execution_options={"isolation_level": "SERIALIZABLE"})
        try:
            preference = self.get_for_type(user_id, notification_type)
            if preference is None:
                preference = NotificationPreference(
                    id=generate_uuid(),
                    user_id=user_id,
                    notification_type=notification_type,
                    **{**PREFERENCE_DEFAULTS, **updates},
                )
                self.db.add(preference)
            else:
                for field, value in updates.items():
                    setattr(preference, field, value)
                preference.updated_at = utc_now()  # type: ignore[assignment]
            self.db.commit()
        except IntegrityError as exc:
            self.db.rollback()
            if is_unique_violation(exc):
                logger.warning(
                    "Preference upsert conflict for user %s type %s", user_id, notification_type
                )
                raise ConflictError("Notification preference already exists") from exc
            raise
        self.db.refresh(preference)
        return preference
