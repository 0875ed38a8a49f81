"""Tests for notification message templates and action URLs."""

from uuid import UUID

import pytest

from backoffice.services.notification_messages import (
    ENTITY_URLS,
    MESSAGE_TEMPLATES,
    TYPE_MENTION,
    TYPE_QUOTATION_APPROVED,
    TYPE_TASK_ASSIGNED,
    TYPE_TASK_COMMENTED,
    build_action_url,
    build_notification_message,
)

ENTITY_ID = UUID("3f2b8c1e-9d4a-4e6b-8f1a-2c3d4e5f6a7b")


class TestBuildActionUrl:
    @pytest.mark.parametrize(
        ("entity_type", "expected"),
        [
            ("task", f"/tasks?task={ENTITY_ID}"),
            ("lead", f"/dashboard/crm/leads/{ENTITY_ID}"),
            ("order", f"/dashboard/ops/orders/{ENTITY_ID}"),
            ("interview", f"/dashboard/ats/interviews/{ENTITY_ID}"),
        ],
    )
    def test_known_entities(self, entity_type, expected):
        assert build_action_url(entity_type, ENTITY_ID) == expected

    def test_unknown_entity(self):
        assert build_action_url("invoice", ENTITY_ID) is None

    @pytest.mark.parametrize(("entity_type", "entity_id"), [(None, ENTITY_ID), ("task", None)])
    def test_missing_parts(self, entity_type, entity_id):
        assert build_action_url(entity_type, entity_id) is None

    def test_every_url_has_id_slot(self):
        assert all("{id}" in template for template in ENTITY_URLS.values())


class TestBuildNotificationMessage:
    def test_entity_name(self):
        title, message = build_notification_message(TYPE_TASK_ASSIGNED, entity_name="Ship it")
        assert title == "New Task Assigned"
        assert message == "You have been assigned to task: Ship it"

    def test_actor(self):
        _, message = build_notification_message(
            TYPE_TASK_COMMENTED, entity_name="Ship it", actor_name="Dana"
        )
        assert message == "Dana commented on task: Ship it"

    def test_missing_actor(self):
        _, message = build_notification_message(TYPE_MENTION)
        assert message == "Someone mentioned you"

    def test_falls_back_to_short_id(self):
        _, message = build_notification_message(TYPE_QUOTATION_APPROVED, entity_id=ENTITY_ID)
        assert message == "Quotation #3f2b8c1e has been approved"

    def test_falls_back_to_item(self):
        _, message = build_notification_message(TYPE_TASK_ASSIGNED)
        assert message == "You have been assigned to task: item"

    def test_unknown_type(self):
        assert build_notification_message("custom", entity_name="Report ready") == (
            "Notification",
            "Report ready",
        )

    def test_every_template_formats(self):
        for notification_type in MESSAGE_TEMPLATES:
            title, message = build_notification_message(
                notification_type, entity_name="X", actor_name="Y"
            )
            assert title
            assert "{" not in message
