from backoffice.models.notification import Notification
from backoffice.models.notification_preference import PREFERENCE_DEFAULTS, NotificationPreference

__all__ = [
    "Notification",
    "NotificationPreference",
    "PREFERENCE_DEFAULTS",
]
