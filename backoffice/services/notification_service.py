"""Access-layer operations for notifications and notification preferences.

Every operation takes the caller's ``Principal`` (or ``None``) as its first
argument and runs in the same order: identity, authorization, input
validation, storage.
"""

from __future__ import annotations

import logging
from collections.abc import Mapping
from dataclasses import dataclass
from datetime import timedelta
from typing import Any
from uuid import UUID

from pydantic import BaseModel
from pydantic import ValidationError as SchemaValidationError
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from backoffice.access.errors import ConflictError, NotFoundError, ValidationError
from backoffice.access.guard import (
    assert_ownership,
    assert_same_user,
    owns,
    require_principal,
)
from backoffice.access.principal import Principal
from backoffice.core.config import settings
from backoffice.core.database import is_unique_violation
from backoffice.models.notification import Notification
from backoffice.models.notification_preference import NotificationPreference
from backoffice.models.shared import utc_now
from backoffice.repositories.notification_preference_repository import (
    NotificationPreferenceRepository,
)
from backoffice.repositories.notification_repository import NotificationRepository
from backoffice.schemas.notification import (
    NotificationBatchCreate,
    NotificationCreate,
    NotificationFilters,
    NotificationPayload,
    NotificationPreferenceUpdate,
    NotificationRecipients,
)
from backoffice.services.notification_messages import (
    build_action_url,
    build_notification_message,
)

logger = logging.getLogger(__name__)


@dataclass
class NotificationList:
    notifications: list[Notification]
    total: int
    unread_count: int


def _validate(schema: type[BaseModel], data: Any) -> Any:
    """Coerce *data* into *schema*, raising the access-layer ValidationError."""
    if isinstance(data, schema):
        return data
    if isinstance(data, BaseModel):
        data = data.model_dump(exclude_unset=True)
    try:
        return schema.model_validate(dict(data or {}))
    except SchemaValidationError as exc:
        errors = [
            {"loc": list(err["loc"]), "msg": err["msg"], "type": err["type"]}
            for err in exc.errors()
        ]
        raise ValidationError(f"Invalid {schema.__name__}", errors=errors) from exc


def _notification_id(value: UUID | str) -> UUID:
    # A malformed id cannot match any row.
    if isinstance(value, UUID):
        return value
    try:
        return UUID(str(value))
    except ValueError:
        raise NotFoundError("Notification", value) from None


class NotificationService:
    """Notification operations scoped to the calling principal."""

    def __init__(self, db: Session):
        self.db = db
        self.repo = NotificationRepository(db)
        self.preferences = NotificationPreferenceRepository(db)

    # ── Reads ──

    def get_user_notifications(
        self,
        principal: Principal | None,
        user_id: str,
        filters: NotificationFilters | Mapping[str, Any] | None = None,
    ) -> NotificationList:
        """List the caller's active notifications.

        ``total`` counts the whole filtered set; ``limit``/``offset`` only
        shape the returned page.
        """
        principal = require_principal(principal)
        assert_same_user(principal, user_id, "list notifications")
        criteria = _validate(NotificationFilters, filters)

        predicates = self.repo.build_filters(criteria, principal.user_id)
        notifications = self.repo.get_all(
            predicates,
            order_by=criteria.order_by,
            skip=criteria.offset,
            limit=criteria.limit,
        )
        return NotificationList(
            notifications=notifications,
            total=self.repo.count(predicates),
            unread_count=self.repo.count_unread(principal.user_id),
        )

    def get_unread_count(self, principal: Principal | None, user_id: str) -> int:
        principal = require_principal(principal)
        assert_same_user(principal, user_id, "count notifications")
        return self.repo.count_unread(principal.user_id)

    # ── Creation ──

    def create_notification(
        self,
        principal: Principal | None,
        data: NotificationCreate | Mapping[str, Any],
    ) -> Notification:
        """Create a notification for ``data.user_id``.

        Any authenticated principal may notify any user.
        """
        require_principal(principal)
        payload = _validate(NotificationCreate, data)
        return self.repo.create(**payload.model_dump())

    def create_notifications_for_users(
        self,
        principal: Principal | None,
        user_ids: list[str],
        data: NotificationPayload | Mapping[str, Any],
    ) -> list[Notification]:
        """Create one notification per user in a single transaction."""
        require_principal(principal)
        payload = _validate(NotificationPayload, data)
        batch = _validate(
            NotificationBatchCreate, {**payload.model_dump(), "user_ids": user_ids}
        )
        fields = batch.model_dump(exclude={"user_ids"})
        try:
            notifications = self.repo.create_many(batch.user_ids, **fields)
        except IntegrityError as exc:
            if is_unique_violation(exc):
                raise ConflictError(
                    "Batch notification insert conflicted; nothing was created"
                ) from exc
            raise
        logger.info(
            "Created %d notifications of type %s", len(notifications), batch.type
        )
        return notifications

    def notify(
        self,
        principal: Principal | None,
        *,
        user_ids: list[str],
        notification_type: str,
        entity_type: str | None = None,
        entity_id: UUID | None = None,
        entity_name: str | None = None,
        actor_name: str | None = None,
        metadata: dict[str, Any] | None = None,
        exclude_user_id: str | None = None,
    ) -> list[Notification]:
        """Compose title, message and link for a typed event and fan it out.

        Recipients are deduplicated, ``exclude_user_id`` (usually the acting
        user) is dropped, and so is anyone who disabled the type or already
        got the same type for the same entity within the dedupe window.
        Returns an empty list when nobody is left.
        """
        require_principal(principal)
        recipients = _validate(
            NotificationRecipients,
            {"user_ids": user_ids, "exclude_user_id": exclude_user_id, "entity_id": entity_id},
        )
        entity_id = recipients.entity_id
        candidates = [
            user_id
            for user_id in dict.fromkeys(recipients.user_ids)
            if user_id != recipients.exclude_user_id
        ]
        if candidates:
            disabled = self.preferences.get_disabled_user_ids(candidates, notification_type)
            candidates = [user_id for user_id in candidates if user_id not in disabled]
        if candidates and entity_type and entity_id is not None:
            since = utc_now() - timedelta(seconds=settings.NOTIFICATIONS_DEDUPE_WINDOW_SECONDS)
            recent = self.repo.get_recently_notified_user_ids(
                candidates, notification_type, entity_type, entity_id, since
            )
            candidates = [user_id for user_id in candidates if user_id not in recent]
        if not candidates:
            logger.info("No recipients left for %s notification", notification_type)
            return []

        title, message = build_notification_message(
            notification_type,
            entity_name=entity_name,
            entity_id=entity_id,
            actor_name=actor_name,
        )
        return self.create_notifications_for_users(
            principal,
            candidates,
            {
                "type": notification_type,
                "title": title,
                "message": message,
                "entity_type": entity_type,
                "entity_id": entity_id,
                "action_url": build_action_url(entity_type, entity_id),
                "metadata": metadata,
            },
        )

    # ── Mutations ──

    def mark_as_read(
        self,
        principal: Principal | None,
        notification_id: UUID | str,
        user_id: str,
    ) -> Notification:
        principal = require_principal(principal)
        notification_id = _notification_id(notification_id)
        if not owns(principal, user_id):
            raise NotFoundError("Notification", notification_id)

        notification = self.repo.get_owned(notification_id, principal.user_id)
        if notification is None:
            raise NotFoundError("Notification", notification_id)
        assert_ownership(principal, notification.user_id)
        return self.repo.mark_as_read(notification)

    def mark_all_as_read(self, principal: Principal | None, user_id: str) -> int:
        principal = require_principal(principal)
        assert_same_user(principal, user_id, "mark notifications")
        count = self.repo.mark_all_as_read(principal.user_id)
        logger.info("Marked %d notifications as read for user %s", count, principal.user_id)
        return count

    def delete_notification(
        self,
        principal: Principal | None,
        notification_id: UUID | str,
        user_id: str,
    ) -> None:
        """Soft-delete a notification. Deleting it again is a no-op."""
        principal = require_principal(principal)
        notification_id = _notification_id(notification_id)
        if not owns(principal, user_id):
            raise NotFoundError("Notification", notification_id)

        notification = self.repo.get_owned(
            notification_id, principal.user_id, include_deleted=True
        )
        if notification is None:
            raise NotFoundError("Notification", notification_id)
        assert_ownership(principal, notification.user_id)
        self.repo.soft_delete(notification)

    # ── Preferences ──

    def get_notification_preferences(
        self, principal: Principal | None, user_id: str
    ) -> list[NotificationPreference]:
        principal = require_principal(principal)
        assert_same_user(principal, user_id, "view preferences")
        return self.preferences.get_all_for_user(principal.user_id)

    def update_notification_preference(
        self,
        principal: Principal | None,
        user_id: str,
        notification_type: str,
        updates: NotificationPreferenceUpdate | Mapping[str, Any],
    ) -> NotificationPreference:
        principal = require_principal(principal)
        assert_same_user(principal, user_id, "update preferences")
        if not notification_type or not notification_type.strip():
            raise ValidationError("notification_type is required")
        changes = _validate(NotificationPreferenceUpdate, updates).supplied()
        return self.preferences.upsert(principal.user_id, notification_type, changes)

    def is_notification_enabled(
        self, principal: Principal | None, user_id: str, notification_type: str
    ) -> bool:
        """Resolve the preference; no stored row means enabled."""
        principal = require_principal(principal)
        assert_same_user(principal, user_id, "view preferences")
        preference = self.preferences.get_for_type(principal.user_id, notification_type)
        if preference is None:
            return True
        return bool(preference.enabled)
