"""Notification model for the in-app notification system."""

from sqlalchemy import JSON, Column, Index, String, Text, text

from backoffice.core.database import Base
from backoffice.models.shared import UTCDateTime, UUIDType, generate_uuid, utc_now

_ACTIVE = text("deleted_at IS NULL")


class Notification(Base):
    """Notification model - one in-app message owned by a single user.

    ``user_id`` is the identity provider's opaque user id, not a foreign key.
    Rows are soft-deleted through ``deleted_at`` and never removed here.
    """

    __tablename__ = "notifications"

    id = Column(UUIDType, primary_key=True, default=generate_uuid)
    user_id = Column(String(255), nullable=False)
    type = Column(String(100), nullable=False)
    title = Column(Text, nullable=False)
    message = Column(Text, nullable=False)
    entity_type = Column(String(50), nullable=True)
    entity_id = Column(UUIDType, nullable=True)
    read_at = Column(UTCDateTime, nullable=True)
    action_url = Column(Text, nullable=True)
    metadata_ = Column("metadata", JSON, nullable=True)
    created_at = Column(UTCDateTime, nullable=False, default=utc_now)
    deleted_at = Column(UTCDateTime, nullable=True)

    __table_args__ = (
        Index("idx_notifications_user_id", "user_id", postgresql_where=_ACTIVE, sqlite_where=_ACTIVE),
        Index(
            "idx_notifications_read",
            "user_id",
            "read_at",
            postgresql_where=_ACTIVE,
            sqlite_where=_ACTIVE,
        ),
        Index("idx_notifications_type", "type", postgresql_where=_ACTIVE, sqlite_where=_ACTIVE),
        Index(
            "idx_notifications_entity",
            "entity_type",
            "entity_id",
            postgresql_where=_ACTIVE,
            sqlite_where=_ACTIVE,
        ),
        Index(
            "idx_notifications_created_at",
            "created_at",
            postgresql_where=_ACTIVE,
            sqlite_where=_ACTIVE,
        ),
    )

    @property
    def is_read(self) -> bool:
        return self.read_at is not None
