from backoffice.schemas.notification import (
    NotificationBatchCreate,
    NotificationCountResponse,
    NotificationCreate,
    NotificationCreateRequest,
    NotificationEnabledResponse,
    NotificationFilters,
    NotificationListResponse,
    NotificationMarkAllResponse,
    NotificationPayload,
    NotificationPreferenceRequest,
    NotificationPreferenceResponse,
    NotificationPreferenceUpdate,
    NotificationRecipients,
    NotificationResponse,
)

__all__ = [
    "NotificationBatchCreate",
    "NotificationCountResponse",
    "NotificationCreate",
    "NotificationCreateRequest",
    "NotificationEnabledResponse",
    "NotificationFilters",
    "NotificationListResponse",
    "NotificationMarkAllResponse",
    "NotificationPayload",
    "NotificationPreferenceRequest",
    "NotificationPreferenceResponse",
    "NotificationPreferenceUpdate",
    "NotificationRecipients",
    "NotificationResponse",
]
