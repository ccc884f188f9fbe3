"""Tests for the shared workflow layer."""

from datetime import date
from unittest.mock import MagicMock

import pytest

from taskmaster.adapters.http_api import AuthenticationError, NetworkError
from taskmaster.core.tasks import RecurringTask, RegularTask, Result, Weekday
from taskmaster.ports.task_service import TaskListing
from taskmaster.workflows import TaskManager


@pytest.fixture
def sunday():
    return date(2025, 4, 20)


@pytest.fixture
def regular():
    return RegularTask(uuid="x", title="X", priority=3, sequence_number=1)


@pytest.fixture
def recurring():
    return RecurringTask(uuid="y", title="Y", recurrence_days=frozenset({Weekday.SUNDAY}), sequence_number=2)


@pytest.fixture
def service(regular, recurring):
    svc = MagicMock()
    svc.list.return_value = TaskListing(regular=[regular], recurring=[recurring])
    return svc


@pytest.fixture
def manager(service):
    m = TaskManager(service)
    m.refresh()
    return m


class TestRefresh:
    def test_loads_snapshot(self, manager):
        assert [t.uuid for t in manager.store.snapshot.all_tasks] == ["x", "y"]

    def test_propagates_network_errors(self, service):
        service.list.side_effect = NetworkError("down")
        with pytest.raises(NetworkError):
            TaskManager(service).refresh()


class TestMutations:
    def test_create_inserts_canonical_task(self, manager, service):
        created = RegularTask(uuid="z", title="Z", sequence_number=3)
        service.create.return_value = Result(success=True, task=created)

        result = manager.create({"title": "Z"})

        service.create.assert_called_once_with({"title": "Z"})
        assert result.success is True
        assert manager.store.snapshot.find("z") == created

    def test_failure_leaves_store_untouched(self, manager, service):
        before = manager.store.snapshot
        service.create.return_value = Result(success=False, error="Title required")

        result = manager.create({})

        assert result.success is False
        assert result.error == "Title required"
        assert manager.store.snapshot is before

    def test_service_error_becomes_result(self, manager, service):
        before = manager.store.snapshot
        service.remove.side_effect = AuthenticationError("Session expired")

        result = manager.remove("x")

        assert result.success is False
        assert "Session expired" in result.error
        assert manager.store.snapshot is before

    def test_remove(self, manager, service):
        service.remove.return_value = Result(success=True)
        manager.remove("x")
        assert manager.store.snapshot.find("x") is None

    def test_update(self, manager, service):
        service.update.return_value = Result(success=True, task=RegularTask(uuid="x", title="X2", sequence_number=1))
        manager.update("x", {"title": "X2"})
        assert manager.store.snapshot.find("x").title == "X2"

    def test_archive(self, manager, service):
        archived = RegularTask(uuid="x", title="X", archived=True, sequence_number=1)
        service.set_archived.return_value = Result(success=True, task=archived)
        manager.set_archived("x", True)
        service.set_archived.assert_called_once_with("x", True)
        assert manager.store.snapshot.find("x").archived is True


class TestToggleCompleted:
    def test_regular_marks_done(self, manager, service):
        service.set_completed.return_value = Result(
            success=True, task=RegularTask(uuid="x", title="X", completed=True, sequence_number=1)
        )
        manager.toggle_completed("x")
        service.set_completed.assert_called_once_with("x", False, None)
        assert manager.store.snapshot.find("x").completed is True

    def test_regular_undo(self, service):
        service.list.return_value = TaskListing(
            regular=[RegularTask(uuid="x", title="X", completed=True)], recurring=[]
        )
        manager = TaskManager(service)
        manager.refresh()
        service.undo_completed.return_value = Result(success=True, task=RegularTask(uuid="x", title="X"))

        manager.toggle_completed("x")

        service.undo_completed.assert_called_once_with("x", None)

    def test_recurring_marks_single_day(self, manager, service, recurring, sunday):
        done = RecurringTask(
            uuid="y", title="Y", recurrence_days=recurring.recurrence_days, done_dates=(sunday,), sequence_number=2
        )
        service.set_completed.return_value = Result(success=True, task=done)

        manager.toggle_completed("y", sunday)

        service.set_completed.assert_called_once_with("y", True, sunday)
        assert manager.store.snapshot.find("y").done_dates == (sunday,)

    def test_recurring_undo_for_that_day(self, service, recurring, sunday):
        done = RecurringTask(
            uuid="y", title="Y", recurrence_days=recurring.recurrence_days, done_dates=(sunday,), sequence_number=2
        )
        service.list.return_value = TaskListing(regular=[], recurring=[done])
        manager = TaskManager(service)
        manager.refresh()
        service.undo_completed.return_value = Result(success=True, task=recurring)

        manager.toggle_completed("y", sunday)

        service.undo_completed.assert_called_once_with("y", sunday)
        assert manager.store.snapshot.find("y").done_dates == ()

    def test_unknown_task(self, manager, service):
        result = manager.toggle_completed("missing")
        assert result.success is False
        service.set_completed.assert_not_called()


class TestCategories:
    def test_without_service(self, service):
        assert TaskManager(service).list_categories() == []

    def test_delegates(self, service):
        categories = MagicMock()
        categories.list.return_value = ["c"]
        assert TaskManager(service, categories=categories).list_categories() == ["c"]
