"""Repository for Notification storage operations."""

from __future__ import annotations

import logging
from datetime import datetime
from typing import Any
from uuid import UUID

from sqlalchemy.exc import SQLAlchemyError

from backoffice.access.predicates import Eq, IsNull, NotNull, PredicateSet, Range
from backoffice.access.repository import OwnedRepository
from backoffice.models.notification import Notification
from backoffice.models.shared import generate_uuid, utc_now
from backoffice.schemas.notification import NotificationFilters

logger = logging.getLogger(__name__)

UNREAD = IsNull("read_at")
READ = NotNull("read_at")


class NotificationRepository(OwnedRepository):
    model = Notification

    def unread_predicates(self, user_id: str) -> PredicateSet:
        """Predicates for the user's unread, active notifications.

        Shared by the list path (``read=False``) and ``count_unread`` so the
        two always agree.
        """
        return self.predicates(user_id, UNREAD)

    def build_filters(self, criteria: NotificationFilters, caller_id: str) -> PredicateSet:
        if criteria.read is False:
            predicates = self.unread_predicates(caller_id)
        elif criteria.read:
            predicates = self.predicates(caller_id, READ)
        else:
            predicates = self.predicates(caller_id)

        extra: list[Any] = []
        if criteria.type:
            extra.append(Eq("type", criteria.type))
        if criteria.entity_type:
            extra.append(Eq("entity_type", criteria.entity_type))
        if criteria.entity_id is not None:
            extra.append(Eq("entity_id", criteria.entity_id))
        if criteria.created_after is not None or criteria.created_before is not None:
            extra.append(Range("created_at", criteria.created_after, criteria.created_before))
        return predicates.with_(*extra)

    def _build(
        self,
        *,
        user_id: str,
        type: str,
        title: str,
        message: str,
        entity_type: str | None = None,
        entity_id: UUID | None = None,
        action_url: str | None = None,
        metadata: dict[str, Any] | None = None,
    ) -> Notification:
        return Notification(
            id=generate_uuid(),
            user_id=user_id,
            type=type,
            title=title,
            message=message,
            entity_type=entity_type,
            entity_id=entity_id,
            action_url=action_url,
            metadata_=metadata,
            created_at=utc_now(),
        )

    def create(self, *, user_id: str, **fields: Any) -> Notification:
        notification = self._build(user_id=user_id, **fields)
        self.db.add(notification)
        try:
            self.db.commit()
        except SQLAlchemyError:
            self.db.rollback()
            raise
        self.db.refresh(notification)
        return notification

    def create_many(self, user_ids: list[str], **fields: Any) -> list[Notification]:
        """Insert one notification per user in a single transaction.

        Either every row is committed or, on any failure, none are.
        """
        notifications = [self._build(user_id=user_id, **fields) for user_id in user_ids]
        self.db.add_all(notifications)
        try:
            self.db.commit()
        except SQLAlchemyError:
            self.db.rollback()
            logger.warning("Batch notification insert for %d users rolled back", len(user_ids))
            raise
        for notification in notifications:
            self.db.refresh(notification)
        return notifications

    def get_recently_notified_user_ids(
        self,
        user_ids: list[str],
        notification_type: str,
        entity_type: str,
        entity_id: UUID,
        since: datetime,
    ) -> set[str]:
        """Users among *user_ids* already sent this type for this entity since *since*.

        Spans users and includes soft-deleted rows.
        """
        rows = (
            self.db.query(Notification.user_id)
            .filter(
                Notification.user_id.in_(user_ids),
                Notification.type == notification_type,
                Notification.entity_type == entity_type,
                Notification.entity_id == entity_id,
                Notification.created_at >= since,
            )
            .all()
        )
        return {row.user_id for row in rows}

    def count_unread(self, user_id: str) -> int:
        return self.count(self.unread_predicates(user_id))

    def mark_as_read(self, notification: Notification) -> Notification:
        """Stamp ``read_at`` unless it is already set."""
        if notification.read_at is None:
            notification.read_at = utc_now()  # type: ignore[assignment]
            self.db.commit()
            self.db.refresh(notification)
        return notification

    def mark_all_as_read(self, user_id: str) -> int:
        predicates = self.unread_predicates(user_id)
        count = (
            self.db.query(Notification)
            .filter(*predicates.compile(Notification))
            .update({"read_at": utc_now()}, synchronize_session=False)
        )
        self.db.commit()
        return count
