"""NotificationPreference model - per-user, per-type delivery settings."""

from sqlalchemy import Boolean, Column, Index, String, UniqueConstraint

from backoffice.core.database import Base
from backoffice.models.shared import UTCDateTime, UUIDType, generate_uuid, utc_now

# Applied when a preference row is first created and a field was not supplied
PREFERENCE_DEFAULTS = {
    "enabled": True,
    "email_enabled": False,
    "whatsapp_enabled": False,
}


class NotificationPreference(Base):
    """At most one row per (user_id, notification_type).

    A missing row means the type is enabled.
    """

    __tablename__ = "notification_preferences"

    id = Column(UUIDType, primary_key=True, default=generate_uuid)
    user_id = Column(String(255), nullable=False)
    notification_type = Column(String(100), nullable=False)
    enabled = Column(Boolean, nullable=False, default=True)
    email_enabled = Column(Boolean, nullable=False, default=False)
    whatsapp_enabled = Column(Boolean, nullable=False, default=False)
    created_at = Column(UTCDateTime, nullable=False, default=utc_now)
    updated_at = Column(UTCDateTime, nullable=False, default=utc_now, onupdate=utc_now)

    __table_args__ = (
        UniqueConstraint(
            "user_id",
            "notification_type",
            name="notification_preferences_user_id_notification_type_key",
        ),
        Index("idx_notification_preferences_user_id", "user_id"),
    )
