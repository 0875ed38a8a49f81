"""Notification API endpoints."""

from datetime import datetime
from uuid import UUID

from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from backoffice.access.principal import Principal
from backoffice.core.auth import require_current_principal
from backoffice.core.config import settings
from backoffice.core.database import get_db
from backoffice.schemas.notification import (
    NotificationBatchCreate,
    NotificationCountResponse,
    NotificationCreateRequest,
    NotificationEnabledResponse,
    NotificationListResponse,
    NotificationMarkAllResponse,
    NotificationPreferenceRequest,
    NotificationPreferenceResponse,
    NotificationResponse,
)
from backoffice.services.notification_service import NotificationService

router = APIRouter()

UNAUTHENTICATED = {401: {"description": "Missing, invalid or expired access token"}}
NOT_FOUND = {404: {"description": "Notification not found"}}


@router.get(
    "/",
    response_model=NotificationListResponse,
    summary="List notifications",
    responses=UNAUTHENTICATED,
)
async def list_notifications(
    read: bool | None = None,
    type: str | None = None,
    entity_type: str | None = None,
    entity_id: UUID | None = None,
    created_after: datetime | None = None,
    created_before: datetime | None = None,
    limit: int = Query(
        default=settings.NOTIFICATIONS_PAGE_SIZE,
        ge=1,
        le=settings.NOTIFICATIONS_MAX_PAGE_SIZE,
    ),
    offset: int = Query(default=0, ge=0),
    order_by: str | None = Query(default=None),
    db: Session = Depends(get_db),
    principal: Principal = Depends(require_current_principal),
) -> NotificationListResponse:
    """List the caller's notifications with optional filters."""
    result = NotificationService(db).get_user_notifications(
        principal,
        principal.user_id,
        {
            "read": read,
            "type": type,
            "entity_type": entity_type,
            "entity_id": entity_id,
            "created_after": created_after,
            "created_before": created_before,
            "limit": limit,
            "offset": offset,
            "order_by": order_by,
        },
    )
    return NotificationListResponse(
        notifications=[NotificationResponse.model_validate(n) for n in result.notifications],
        total=result.total,
        unread_count=result.unread_count,
    )


@router.post(
    "/",
    response_model=NotificationResponse,
    status_code=201,
    summary="Create a notification",
    responses=UNAUTHENTICATED,
)
async def create_notification(
    data: NotificationCreateRequest,
    db: Session = Depends(get_db),
    principal: Principal = Depends(require_current_principal),
) -> NotificationResponse:
    """Create a notification. ``user_id`` defaults to the caller."""
    payload = data.model_dump()
    payload["user_id"] = data.user_id or principal.user_id
    notification = NotificationService(db).create_notification(principal, payload)
    return NotificationResponse.model_validate(notification)


@router.post(
    "/batch",
    response_model=list[NotificationResponse],
    status_code=201,
    summary="Create a notification for several users",
    responses={**UNAUTHENTICATED, 409: {"description": "Batch insert conflicted"}},
)
async def create_notifications_for_users(
    data: NotificationBatchCreate,
    db: Session = Depends(get_db),
    principal: Principal = Depends(require_current_principal),
) -> list[NotificationResponse]:
    """Create one notification per user; either all are created or none."""
    notifications = NotificationService(db).create_notifications_for_users(
        principal, data.user_ids, data.model_dump(exclude={"user_ids"})
    )
    return [NotificationResponse.model_validate(n) for n in notifications]


@router.get(
    "/unread_count",
    response_model=NotificationCountResponse,
    summary="Get unread notification count",
    responses=UNAUTHENTICATED,
)
async def get_unread_count(
    db: Session = Depends(get_db),
    principal: Principal = Depends(require_current_principal),
) -> NotificationCountResponse:
    count = NotificationService(db).get_unread_count(principal, principal.user_id)
    return NotificationCountResponse(unread_count=count)


@router.post(
    "/read_all",
    response_model=NotificationMarkAllResponse,
    summary="Mark all notifications as read",
    responses=UNAUTHENTICATED,
)
async def mark_all_as_read(
    db: Session = Depends(get_db),
    principal: Principal = Depends(require_current_principal),
) -> NotificationMarkAllResponse:
    count = NotificationService(db).mark_all_as_read(principal, principal.user_id)
    return NotificationMarkAllResponse(count=count)


@router.get(
    "/preferences",
    response_model=list[NotificationPreferenceResponse],
    summary="List notification preferences",
    responses=UNAUTHENTICATED,
)
async def list_preferences(
    db: Session = Depends(get_db),
    principal: Principal = Depends(require_current_principal),
) -> list[NotificationPreferenceResponse]:
    preferences = NotificationService(db).get_notification_preferences(
        principal, principal.user_id
    )
    return [NotificationPreferenceResponse.model_validate(p) for p in preferences]


@router.patch(
    "/preferences",
    response_model=NotificationPreferenceResponse,
    summary="Update a notification preference",
    responses={**UNAUTHENTICATED, 409: {"description": "Concurrent preference update"}},
)
async def update_preference(
    data: NotificationPreferenceRequest,
    db: Session = Depends(get_db),
    principal: Principal = Depends(require_current_principal),
) -> NotificationPreferenceResponse:
    """Create or partially update the preference for one notification type."""
    preference = NotificationService(db).update_notification_preference(
        principal,
        principal.user_id,
        data.notification_type,
        data.model_dump(exclude={"notification_type"}, exclude_unset=True),
    )
    return NotificationPreferenceResponse.model_validate(preference)


@router.get(
    "/preferences/{notification_type}/enabled",
    response_model=NotificationEnabledResponse,
    summary="Check whether a notification type is enabled",
    responses=UNAUTHENTICATED,
)
async def is_enabled(
    notification_type: str,
    db: Session = Depends(get_db),
    principal: Principal = Depends(require_current_principal),
) -> NotificationEnabledResponse:
    enabled = NotificationService(db).is_notification_enabled(
        principal, principal.user_id, notification_type
    )
    return NotificationEnabledResponse(notification_type=notification_type, enabled=enabled)


@router.post(
    "/{notification_id}/read",
    response_model=NotificationResponse,
    summary="Mark a notification as read",
    responses={**UNAUTHENTICATED, **NOT_FOUND},
)
async def mark_as_read(
    notification_id: UUID,
    db: Session = Depends(get_db),
    principal: Principal = Depends(require_current_principal),
) -> NotificationResponse:
    notification = NotificationService(db).mark_as_read(
        principal, notification_id, principal.user_id
    )
    return NotificationResponse.model_validate(notification)


@router.delete(
    "/{notification_id}",
    status_code=204,
    summary="Delete a notification",
    responses={**UNAUTHENTICATED, **NOT_FOUND},
)
async def delete_notification(
    notification_id: UUID,
    db: Session = Depends(get_db),
    principal: Principal = Depends(require_current_principal),
) -> None:
    """Soft-delete a notification. Deleting it again succeeds."""
    NotificationService(db).delete_notification(principal, notification_id, principal.user_id)
