"""Notification types, entity URLs and message templates."""

from __future__ import annotations

from uuid import UUID

# Notification types. Storage accepts any string; these are the ones the
# back-office modules emit.
TYPE_TASK_ASSIGNED = "task_assigned"
TYPE_TASK_COMMENTED = "task_commented"
TYPE_TASK_STATUS_CHANGED = "task_status_changed"
TYPE_TASK_DUE_SOON = "task_due_soon"
TYPE_TASK_OVERDUE = "task_overdue"
TYPE_TASK_MENTIONED = "task_mentioned"
TYPE_LEAD_ASSIGNED = "lead_assigned"
TYPE_LEAD_STATUS_CHANGED = "lead_status_changed"
TYPE_ORDER_CREATED = "order_created"
TYPE_ORDER_STATUS_CHANGED = "order_status_changed"
TYPE_QUOTATION_APPROVED = "quotation_approved"
TYPE_QUOTATION_REJECTED = "quotation_rejected"
TYPE_SHIPMENT_DELIVERED = "shipment_delivered"
TYPE_SYSTEM = "system"
TYPE_MENTION = "mention"

ENTITY_URLS = {
    "task": "/tasks?task={id}",
    "lead": "/dashboard/crm/leads/{id}",
    "order": "/dashboard/ops/orders/{id}",
    "quotation": "/dashboard/ops/quotations/{id}",
    "shipment": "/dashboard/ops/shipments/{id}",
    "application": "/dashboard/ats/applications/{id}",
    "interview": "/dashboard/ats/interviews/{id}",
}

# (title, message) per type; {entity} and {actor} are filled in
MESSAGE_TEMPLATES = {
    TYPE_TASK_ASSIGNED: ("New Task Assigned", "You have been assigned to task: {entity}"),
    TYPE_TASK_COMMENTED: ("New Comment", "{actor} commented on task: {entity}"),
    TYPE_TASK_STATUS_CHANGED: ("Task Status Changed", 'Task "{entity}" status has been updated'),
    TYPE_TASK_DUE_SOON: ("Task Due Soon", 'Task "{entity}" is due soon'),
    TYPE_TASK_OVERDUE: ("Task Overdue", 'Task "{entity}" is overdue'),
    TYPE_TASK_MENTIONED: (
        "You Were Mentioned",
        "{actor} mentioned you in a comment on task: {entity}",
    ),
    TYPE_LEAD_ASSIGNED: ("New Lead Assigned", "New lead assigned to you: {entity}"),
    TYPE_LEAD_STATUS_CHANGED: ("Lead Status Changed", 'Lead "{entity}" status has been updated'),
    TYPE_ORDER_CREATED: ("New Order Created", "New order created: {entity}"),
    TYPE_ORDER_STATUS_CHANGED: (
        "Order Status Changed",
        'Order "{entity}" status has been updated',
    ),
    TYPE_QUOTATION_APPROVED: ("Quotation Approved", "Quotation {entity} has been approved"),
    TYPE_QUOTATION_REJECTED: ("Quotation Rejected", "Quotation {entity} has been rejected"),
    TYPE_SHIPMENT_DELIVERED: ("Shipment Delivered", "Shipment {entity} has been delivered"),
    TYPE_SYSTEM: ("System Notification", "{entity}"),
    TYPE_MENTION: ("You Were Mentioned", "{actor} mentioned you"),
}


def build_action_url(entity_type: str | None, entity_id: UUID | str | None) -> str | None:
    """Return the in-app link for an entity, or None for unknown types."""
    if not entity_type or not entity_id:
        return None
    template = ENTITY_URLS.get(entity_type)
    if template is None:
        return None
    return template.format(id=entity_id)


def build_notification_message(
    notification_type: str,
    *,
    entity_name: str | None = None,
    entity_id: UUID | str | None = None,
    actor_name: str | None = None,
) -> tuple[str, str]:
    """Return ``(title, message)`` for a notification type."""
    if entity_name:
        entity = entity_name
    elif entity_id:
        entity = f"#{str(entity_id)[:8]}"
    else:
        entity = "item"
    actor = actor_name or "Someone"

    title, template = MESSAGE_TEMPLATES.get(notification_type, ("Notification", "{entity}"))
    return title, template.format(entity=entity, actor=actor)
