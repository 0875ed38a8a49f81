from backoffice.repositories.notification_preference_repository import (
    NotificationPreferenceRepository,
)
from backoffice.repositories.notification_repository import NotificationRepository

__all__ = [
    "NotificationPreferenceRepository",
    "NotificationRepository",
]
