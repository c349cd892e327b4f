"""Tests for task filtering, sorting and grouping."""

import pytest

from homehelper.core.errors import InvalidStateError
from homehelper.core.query import (
    filter_active,
    filter_tasks,
    filter_tasks_by_assignee,
    filter_tasks_by_frequency,
    filter_tasks_by_helper,
    filter_tasks_by_priority,
    group_tasks_by_status,
    reminder_tasks,
    sort_tasks_by_status,
)
from homehelper.core.tasks import Frequency, Priority, TaskStatus


@pytest.fixture
def sample_tasks(make_task):
    return [
        make_task("everyone", Frequency.WEEKLY, Priority.LOW, status=TaskStatus.OK),
        make_task(
            "ana-only",
            Frequency.MONTHLY,
            Priority.HIGH,
            assigned_to_all_helpers=False,
            assignees=["helper-1"],
            status=TaskStatus.OVERDUE,
        ),
        make_task(
            "bea-only",
            Frequency.WEEKLY,
            Priority.MEDIUM,
            assigned_to_all_helpers=False,
            assignees=["helper-2"],
            status=TaskStatus.DUE_TODAY,
        ),
        make_task("paused", Frequency.MONTHLY, Priority.HIGH, is_active=False, status=TaskStatus.UPCOMING),
    ]


def _ids(tasks):
    return [t.id for t in tasks]


class TestVisibility:
    def test_owner_sees_everything(self, sample_tasks, owner):
        assert _ids(filter_tasks(sample_tasks, user=owner)) == _ids(sample_tasks)

    def test_helper_sees_shared_and_own(self, sample_tasks, helper):
        assert _ids(filter_tasks(sample_tasks, user=helper)) == ["everyone", "ana-only", "paused"]

    def test_unassigned_helper_never_sees_task(self, sample_tasks, other_helper, owner):
        """A task not shared and not naming the helper is hidden from them only."""
        assert "ana-only" not in _ids(filter_tasks(sample_tasks, user=other_helper))
        assert "ana-only" in _ids(filter_tasks(sample_tasks, user=owner))

    def test_by_assignee_flags(self, sample_tasks):
        assert len(filter_tasks_by_assignee(sample_tasks, "nobody", is_owner=True)) == 4
        assert _ids(filter_tasks_by_assignee(sample_tasks, "nobody", is_owner=False)) == [
            "everyone",
            "paused",
        ]


class TestAttributeFilters:
    def test_active_only(self, sample_tasks):
        assert "paused" not in _ids(filter_active(sample_tasks))

    def test_frequency(self, sample_tasks):
        assert _ids(filter_tasks_by_frequency(sample_tasks, "monthly")) == ["ana-only", "paused"]
        assert _ids(filter_tasks_by_frequency(sample_tasks, Frequency.WEEKLY)) == ["everyone", "bea-only"]
        assert len(filter_tasks_by_frequency(sample_tasks, "all")) == 4

    def test_priority(self, sample_tasks):
        assert _ids(filter_tasks_by_priority(sample_tasks, "High")) == ["ana-only", "paused"]
        assert _ids(filter_tasks_by_priority(sample_tasks, "low")) == ["everyone"]
        assert len(filter_tasks_by_priority(sample_tasks, "all")) == 4

    def test_unknown_values_rejected(self, sample_tasks):
        with pytest.raises(InvalidStateError):
            filter_tasks_by_frequency(sample_tasks, "daily")
        with pytest.raises(InvalidStateError):
            filter_tasks_by_priority(sample_tasks, "Urgent")

    def test_helper_filter_includes_shared_tasks(self, sample_tasks):
        assert _ids(filter_tasks_by_helper(sample_tasks, "helper-2")) == ["everyone", "bea-only", "paused"]

    def test_filters_combine(self, sample_tasks, owner):
        result = filter_tasks(
            sample_tasks, user=owner, active_only=True, frequency="monthly", priority="High"
        )
        assert _ids(result) == ["ana-only"]

    def test_helper_filter_ignored_for_helpers(self, sample_tasks, helper):
        result = filter_tasks(sample_tasks, user=helper, helper_id="helper-2")
        assert _ids(result) == ["everyone", "ana-only", "paused"]


class TestSortTasksByStatus:
    def test_status_then_priority(self, make_task):
        tasks = [
            make_task("ok-high", priority=Priority.HIGH, status=TaskStatus.OK),
            make_task("today-low", priority=Priority.LOW, status=TaskStatus.DUE_TODAY),
            make_task("overdue-low", priority=Priority.LOW, status=TaskStatus.OVERDUE),
            make_task("today-high", priority=Priority.HIGH, status=TaskStatus.DUE_TODAY),
            make_task("upcoming-med", priority=Priority.MEDIUM, status=TaskStatus.UPCOMING),
        ]
        assert _ids(sort_tasks_by_status(tasks)) == [
            "overdue-low",
            "today-high",
            "today-low",
            "upcoming-med",
            "ok-high",
        ]

    def test_stable_for_ties(self, make_task):
        tasks = [make_task(f"t{i}", status=TaskStatus.UPCOMING) for i in range(5)]
        assert _ids(sort_tasks_by_status(tasks)) == ["t0", "t1", "t2", "t3", "t4"]

    def test_missing_status_sorts_as_ok(self, make_task):
        tasks = [
            make_task("none", priority=Priority.HIGH),
            make_task("upcoming", priority=Priority.LOW, status=TaskStatus.UPCOMING),
        ]
        assert _ids(sort_tasks_by_status(tasks)) == ["upcoming", "none"]

    def test_does_not_modify_input(self, sample_tasks):
        before = _ids(sample_tasks)
        sort_tasks_by_status(sample_tasks)
        assert _ids(sample_tasks) == before


class TestGroupTasksByStatus:
    def test_four_buckets_in_severity_order(self, sample_tasks):
        groups = group_tasks_by_status(sample_tasks)
        assert list(groups) == [TaskStatus.OVERDUE, TaskStatus.DUE_TODAY, TaskStatus.UPCOMING, TaskStatus.OK]
        assert _ids(groups[TaskStatus.OVERDUE]) == ["ana-only"]
        assert _ids(groups[TaskStatus.DUE_TODAY]) == ["bea-only"]
        assert _ids(groups[TaskStatus.UPCOMING]) == ["paused"]
        assert _ids(groups[TaskStatus.OK]) == ["everyone"]

    def test_empty(self):
        groups = group_tasks_by_status([])
        assert all(g == [] for g in groups.values())
        assert len(groups) == 4


class TestReminderTasks:
    def test_visible_active_sorted(self, sample_tasks, helper):
        assert _ids(reminder_tasks(sample_tasks, helper)) == ["ana-only", "everyone"]
