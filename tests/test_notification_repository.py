"""Tests for NotificationRepository and the owned-entity base repository."""

from datetime import UTC, datetime, timedelta
from uuid import uuid4

import pytest

from backoffice.access.predicates import Eq
from backoffice.models.notification import Notification
from backoffice.models.notification_preference import NotificationPreference
from backoffice.repositories.notification_preference_repository import (
    NotificationPreferenceRepository,
)
from backoffice.repositories.notification_repository import NotificationRepository
from backoffice.schemas.notification import NotificationFilters


@pytest.fixture
def repo(db_session):
    return NotificationRepository(db_session)


def _create(repo, user_id="user-alice", **overrides):
    fields = {"type": "system", "title": "Hello", "message": "World"}
    fields.update(overrides)
    return repo.create(user_id=user_id, **fields)


def _set_created_at(db_session, notification, created_at):
    notification.created_at = created_at
    db_session.commit()
    db_session.refresh(notification)


# ── Creation ──


class TestCreate:
    def test_create_assigns_id_and_timestamp(self, repo):
        notification = _create(repo, metadata={"source": "test"})
        assert notification.id is not None
        assert notification.created_at is not None
        assert notification.created_at.tzinfo is not None
        assert notification.read_at is None
        assert notification.deleted_at is None
        assert notification.metadata_ == {"source": "test"}

    def test_create_keeps_optional_fields(self, repo):
        entity_id = uuid4()
        notification = _create(
            repo,
            entity_type="task",
            entity_id=entity_id,
            action_url=f"/tasks?task={entity_id}",
        )
        assert notification.entity_type == "task"
        assert notification.entity_id == entity_id
        assert notification.action_url == f"/tasks?task={entity_id}"

    def test_create_many_one_row_per_user(self, repo, db_session):
        rows = repo.create_many(
            ["user-a", "user-b", "user-c"], type="system", title="T", message="M"
        )
        assert [r.user_id for r in rows] == ["user-a", "user-b", "user-c"]
        assert len({r.id for r in rows}) == 3
        assert db_session.query(Notification).count() == 3


# ── Reads ──


class TestOwnedReads:
    def test_get_all_is_owner_scoped(self, repo):
        _create(repo, "user-alice")
        _create(repo, "user-bob")
        rows = repo.get_all(repo.predicates("user-alice"))
        assert [r.user_id for r in rows] == ["user-alice"]

    def test_get_all_excludes_soft_deleted(self, repo):
        keep = _create(repo)
        gone = _create(repo)
        repo.soft_delete(gone)
        assert [r.id for r in repo.get_all(repo.predicates("user-alice"))] == [keep.id]

    def test_get_all_newest_first(self, repo, db_session):
        now = datetime.now(UTC)
        older = _create(repo, title="older")
        newer = _create(repo, title="newer")
        _set_created_at(db_session, older, now - timedelta(hours=2))
        _set_created_at(db_session, newer, now - timedelta(hours=1))
        rows = repo.get_all(repo.predicates("user-alice"))
        assert [r.title for r in rows] == ["newer", "older"]

    def test_get_all_order_by_and_paging(self, repo):
        for title in ["b", "a", "c"]:
            _create(repo, title=title)
        rows = repo.get_all(repo.predicates("user-alice"), order_by="title:asc", skip=1, limit=1)
        assert [r.title for r in rows] == ["b"]

    def test_count(self, repo):
        _create(repo)
        _create(repo, type="task_assigned")
        _create(repo, "user-bob")
        assert repo.count(repo.predicates("user-alice")) == 2
        assert repo.count(repo.predicates("user-alice", Eq("type", "system"))) == 1

    def test_get_owned(self, repo):
        notification = _create(repo)
        assert repo.get_owned(notification.id, "user-alice").id == notification.id
        assert repo.get_owned(notification.id, "user-bob") is None
        assert repo.get_owned(uuid4(), "user-alice") is None

    def test_get_owned_include_deleted_keeps_owner(self, repo):
        notification = _create(repo)
        repo.soft_delete(notification)
        assert repo.get_owned(notification.id, "user-alice") is None
        found = repo.get_owned(notification.id, "user-alice", include_deleted=True)
        assert found is not None and found.deleted_at is not None
        assert repo.get_owned(notification.id, "user-bob", include_deleted=True) is None


class TestBuildFilters:
    def test_read_false_uses_unread_predicates(self, repo):
        preds = repo.build_filters(NotificationFilters(read=False), "user-alice")
        assert list(preds) == list(repo.unread_predicates("user-alice"))

    def test_filters_narrow_results(self, repo, db_session):
        entity_id = uuid4()
        match = _create(repo, type="task_assigned", entity_type="task", entity_id=entity_id)
        _create(repo, type="task_assigned", entity_type="task", entity_id=uuid4())
        _create(repo, type="system")
        criteria = NotificationFilters(
            type="task_assigned", entity_type="task", entity_id=entity_id
        )
        rows = repo.get_all(repo.build_filters(criteria, "user-alice"))
        assert [r.id for r in rows] == [match.id]

    def test_read_true(self, repo):
        read = _create(repo)
        _create(repo)
        repo.mark_as_read(read)
        rows = repo.get_all(repo.build_filters(NotificationFilters(read=True), "user-alice"))
        assert [r.id for r in rows] == [read.id]

    def test_created_range(self, repo, db_session):
        now = datetime.now(UTC)
        old = _create(repo, title="old")
        recent = _create(repo, title="recent")
        _set_created_at(db_session, old, now - timedelta(days=10))
        _set_created_at(db_session, recent, now - timedelta(days=1))

        after = NotificationFilters(created_after=now - timedelta(days=2))
        assert [r.title for r in repo.get_all(repo.build_filters(after, "user-alice"))] == [
            "recent"
        ]
        before = NotificationFilters(created_before=now - timedelta(days=5))
        assert [r.title for r in repo.get_all(repo.build_filters(before, "user-alice"))] == [
            "old"
        ]
        both = NotificationFilters(
            created_after=now - timedelta(days=11), created_before=now
        )
        assert repo.count(repo.build_filters(both, "user-alice")) == 2


# ── Mutations ──


class TestMutations:
    def test_mark_as_read_keeps_first_timestamp(self, repo):
        notification = repo.mark_as_read(_create(repo))
        first = notification.read_at
        assert first is not None
        assert repo.mark_as_read(notification).read_at == first

    def test_mark_all_as_read(self, repo):
        _create(repo)
        _create(repo)
        deleted = _create(repo)
        repo.soft_delete(deleted)
        _create(repo, "user-bob")

        assert repo.mark_all_as_read("user-alice") == 2
        assert repo.count_unread("user-alice") == 0
        assert repo.count_unread("user-bob") == 1
        assert repo.mark_all_as_read("user-alice") == 0

    def test_soft_delete_is_idempotent(self, repo, db_session):
        notification = _create(repo)
        assert repo.soft_delete(notification) is True
        stamp = notification.deleted_at
        assert repo.soft_delete(notification) is False
        assert notification.deleted_at == stamp
        # physically retained
        assert db_session.query(Notification).count() == 1

    def test_soft_delete_requires_column(self, db_session):
        prefs = NotificationPreferenceRepository(db_session)
        preference = prefs.upsert("user-alice", "system", {})
        with pytest.raises(TypeError):
            prefs.soft_delete(preference)
        assert db_session.query(NotificationPreference).count() == 1
