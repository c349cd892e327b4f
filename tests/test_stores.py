"""Contract tests shared by the in-memory and SQLite record stores."""

from datetime import timedelta

import pytest

from homehelper.adapters.memory_store import MemoryStore, index_matches
from homehelper.adapters.sqlite_store import SQLiteStore
from homehelper.chores import ChoreService
from homehelper.ports.store import COMPLETION_LOGS, TASKS, USERS


@pytest.fixture(params=["memory", "sqlite"])
def record_store(request, tmp_path):
    if request.param == "memory":
        return MemoryStore()
    return SQLiteStore(tmp_path / "homehelper.sqlite3")


class TestRecordStore:
    def test_put_and_get(self, record_store):
        record_store.put(TASKS, {"id": "t1", "title": "Mop", "assignees": []})
        assert record_store.get(TASKS, "t1") == {"id": "t1", "title": "Mop", "assignees": []}

    def test_get_missing(self, record_store):
        assert record_store.get(TASKS, "nope") is None

    def test_put_replaces(self, record_store):
        record_store.put(TASKS, {"id": "t1", "title": "Mop"})
        record_store.put(TASKS, {"id": "t1", "title": "Sweep"})
        assert record_store.get(TASKS, "t1")["title"] == "Sweep"
        assert record_store.count(TASKS) == 1

    def test_get_all_keeps_insertion_order(self, record_store):
        for i in range(3):
            record_store.put(TASKS, {"id": f"t{i}"})
        record_store.put(TASKS, {"id": "t0", "title": "updated"})
        assert [r["id"] for r in record_store.get_all(TASKS)] == ["t0", "t1", "t2"]

    def test_tables_are_separate(self, record_store):
        record_store.put(TASKS, {"id": "x"})
        assert record_store.get(USERS, "x") is None
        assert record_store.get_all(USERS) == []

    def test_delete(self, record_store):
        record_store.put(TASKS, {"id": "t1"})
        record_store.delete(TASKS, "t1")
        record_store.delete(TASKS, "never-existed")
        assert record_store.get(TASKS, "t1") is None

    def test_scalar_index(self, record_store):
        record_store.put(COMPLETION_LOGS, {"id": "l1", "task_id": "a", "completed_by": "h1"})
        record_store.put(COMPLETION_LOGS, {"id": "l2", "task_id": "b", "completed_by": "h1"})
        record_store.put(COMPLETION_LOGS, {"id": "l3", "task_id": "a", "completed_by": "h2"})

        assert [r["id"] for r in record_store.get_all_by_index(COMPLETION_LOGS, "by_task", "a")] == [
            "l1",
            "l3",
        ]
        assert [
            r["id"] for r in record_store.get_all_by_index(COMPLETION_LOGS, "by_completed_by", "h1")
        ] == ["l1", "l2"]

    def test_list_index(self, record_store):
        record_store.put(TASKS, {"id": "t1", "assignees": ["h1", "h2"]})
        record_store.put(TASKS, {"id": "t2", "assignees": ["h2"]})
        record_store.put(TASKS, {"id": "t3", "assignees": []})

        assert [r["id"] for r in record_store.get_all_by_index(TASKS, "by_assignee", "h2")] == ["t1", "t2"]
        assert [r["id"] for r in record_store.get_all_by_index(TASKS, "by_assignee", "h1")] == ["t1"]

    def test_index_follows_updates_and_deletes(self, record_store):
        record_store.put(COMPLETION_LOGS, {"id": "l1", "task_id": "a"})
        record_store.put(COMPLETION_LOGS, {"id": "l1", "task_id": "b"})
        assert record_store.get_all_by_index(COMPLETION_LOGS, "by_task", "a") == []

        record_store.delete(COMPLETION_LOGS, "l1")
        assert record_store.get_all_by_index(COMPLETION_LOGS, "by_task", "b") == []

    def test_unknown_index(self, record_store):
        with pytest.raises(KeyError):
            record_store.get_all_by_index(TASKS, "by_colour", "red")

    def test_returned_records_are_copies(self, record_store):
        record_store.put(TASKS, {"id": "t1", "assignees": ["h1"]})
        record = record_store.get(TASKS, "t1")
        record["assignees"].append("h2")
        assert record_store.get(TASKS, "t1")["assignees"] == ["h1"]


class TestIndexMatches:
    def test_scalar(self):
        assert index_matches({"a": 1}, "a", 1)
        assert not index_matches({"a": 1}, "a", 2)

    def test_list_membership(self):
        assert index_matches({"a": [1, 2]}, "a", 2)
        assert not index_matches({"a": []}, "a", 2)


class TestSQLiteStore:
    def test_persists_across_instances(self, tmp_path):
        path = tmp_path / "data" / "homehelper.sqlite3"
        SQLiteStore(path).put(USERS, {"id": "u1", "email": "ana@home.com"})

        reopened = SQLiteStore(path)
        assert reopened.db_path == path
        assert reopened.get(USERS, "u1")["email"] == "ana@home.com"
        assert reopened.get_all_by_index(USERS, "by_email", "ana@home.com")[0]["id"] == "u1"

    def test_service_round_trip(self, tmp_path, clock, owner, helper, now):
        path = tmp_path / "homehelper.sqlite3"
        service = ChoreService(SQLiteStore(path), clock)
        service.save_user(helper)
        task = service.create_task("Mop", "weekly", start_date=now - timedelta(days=8), task_id="mop")
        _, log = service.record_completion(task, helper, note="kitchen too")

        reloaded = ChoreService(SQLiteStore(path), clock)
        task = reloaded.get_task("mop")
        assert task.last_completed_at == now
        assert task.last_three_completions == [now]
        [history] = reloaded.list_history()
        assert history.id == log.id
        assert history.note == "kitchen too"
        assert history.completed_by_name == "Ana"
