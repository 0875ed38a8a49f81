"""Pydantic schemas for Notification and NotificationPreference."""

from datetime import datetime
from typing import Annotated, Any
from uuid import UUID

from pydantic import (
    AliasChoices,
    BaseModel,
    ConfigDict,
    Field,
    StringConstraints,
    field_validator,
    model_validator,
)

from backoffice.models.shared import ensure_utc

UserId = Annotated[str, StringConstraints(strip_whitespace=True, min_length=1, max_length=255)]


class NotificationPayload(BaseModel):
    """Fields shared by single and batch creation."""

    model_config = ConfigDict(extra="forbid")

    type: str = Field(min_length=1, max_length=100)
    title: str = Field(min_length=1)
    message: str = Field(min_length=1)
    entity_type: str | None = Field(default=None, max_length=50)
    entity_id: UUID | None = None
    action_url: str | None = None
    metadata: dict[str, Any] | None = None


class NotificationCreate(NotificationPayload):
    user_id: UserId


class NotificationCreateRequest(NotificationPayload):
    """HTTP body; ``user_id`` defaults to the caller."""

    user_id: UserId | None = None


class NotificationBatchCreate(NotificationPayload):
    user_ids: list[UserId] = Field(min_length=1)


class NotificationRecipients(BaseModel):
    """Fan-out targets for a typed event; may be empty."""

    model_config = ConfigDict(extra="forbid")

    user_ids: list[UserId]
    exclude_user_id: UserId | None = None
    entity_id: UUID | None = None


class NotificationFilters(BaseModel):
    model_config = ConfigDict(extra="forbid")

    read: bool | None = None
    type: str | None = None
    entity_type: str | None = None
    entity_id: UUID | None = None
    created_after: datetime | None = None
    created_before: datetime | None = None
    limit: int | None = Field(default=None, ge=1)
    offset: int | None = Field(default=None, ge=0)
    order_by: str | None = None

    @field_validator("created_after", "created_before")
    @classmethod
    def as_utc(cls, value: datetime | None) -> datetime | None:
        return ensure_utc(value) if value is not None else None

    @model_validator(mode="after")
    def check_created_range(self) -> "NotificationFilters":
        if (
            self.created_after is not None
            and self.created_before is not None
            and self.created_after > self.created_before
        ):
            raise ValueError("created_after must not be later than created_before")
        return self


class NotificationResponse(BaseModel):
    id: UUID
    user_id: str
    type: str
    title: str
    message: str
    entity_type: str | None
    entity_id: UUID | None
    read_at: datetime | None
    is_read: bool
    action_url: str | None
    metadata: dict[str, Any] | None = Field(
        default=None, validation_alias=AliasChoices("metadata_", "metadata")
    )
    created_at: datetime

    model_config = {"from_attributes": True}


class NotificationListResponse(BaseModel):
    notifications: list[NotificationResponse]
    total: int
    unread_count: int


class NotificationCountResponse(BaseModel):
    unread_count: int


class NotificationMarkAllResponse(BaseModel):
    count: int


class NotificationPreferenceUpdate(BaseModel):
    model_config = ConfigDict(extra="forbid")

    enabled: bool | None = None
    email_enabled: bool | None = None
    whatsapp_enabled: bool | None = None

    def supplied(self) -> dict[str, bool]:
        """Fields the caller actually set."""
        return self.model_dump(exclude_unset=True, exclude_none=True)


class NotificationPreferenceRequest(NotificationPreferenceUpdate):
    notification_type: str = Field(min_length=1, max_length=100)


class NotificationPreferenceResponse(BaseModel):
    id: UUID
    user_id: str
    notification_type: str
    enabled: bool
    email_enabled: bool
    whatsapp_enabled: bool
    created_at: datetime
    updated_at: datetime

    model_config = {"from_attributes": True}


class NotificationEnabledResponse(BaseModel):
    notification_type: str
    enabled: bool
