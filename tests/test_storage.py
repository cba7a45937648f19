"""Tests for key-value stores and the task repository."""

import json

import pytest

from tasklist.config import ConfigModel
from tasklist.storage import (
    JsonFileKeyValueStore,
    LoadStatus,
    MalformedPersistedDataError,
    MemoryKeyValueStore,
    StorageUnavailableError,
    TaskRepository,
    open_repository,
)
from tasklist.task import Task, TaskState


class TestMemoryKeyValueStore:
    """Tests for the in-memory store."""

    def test_get_set_remove(self):
        store = MemoryKeyValueStore()

        assert store.get("tasks") is None
        store.set("tasks", "[]")
        assert store.get("tasks") == "[]"
        store.remove("tasks")
        assert store.get("tasks") is None

    def test_rejects_non_string_values(self):
        with pytest.raises(TypeError):
            MemoryKeyValueStore().set("tasks", [])


class TestJsonFileKeyValueStore:
    """Tests for the file-backed store."""

    def test_missing_file_reads_as_empty(self, tmp_path):
        store = JsonFileKeyValueStore(tmp_path / "storage.json")
        assert store.get("tasks") is None

    def test_set_persists_across_instances(self, tmp_path):
        path = tmp_path / "nested" / "storage.json"
        JsonFileKeyValueStore(path).set("tasks", "[]")

        assert JsonFileKeyValueStore(path).get("tasks") == "[]"
        assert json.loads(path.read_text(encoding="utf-8")) == {"tasks": "[]"}

    def test_keys_are_independent(self, tmp_path):
        store = JsonFileKeyValueStore(tmp_path / "storage.json")
        store.set("tasks", "[]")
        store.set("color-scheme", "dark")
        store.remove("tasks")

        assert store.get("tasks") is None
        assert store.get("color-scheme") == "dark"

    def test_no_temp_file_left_behind(self, tmp_path):
        store = JsonFileKeyValueStore(tmp_path / "storage.json")
        store.set("tasks", "[]")

        assert [p.name for p in tmp_path.iterdir()] == ["storage.json"]

    def test_failed_replace_removes_temp_file(self, tmp_path, monkeypatch):
        store = JsonFileKeyValueStore(tmp_path / "storage.json")

        def refuse(src, dst):
            raise PermissionError("read-only")

        monkeypatch.setattr("tasklist.storage.os.replace", refuse)

        with pytest.raises(StorageUnavailableError):
            store.set("tasks", "[]")
        assert list(tmp_path.iterdir()) == []

    def test_unreadable_document_is_unavailable(self, tmp_path):
        path = tmp_path / "storage.json"
        path.write_text("{not json", encoding="utf-8")

        with pytest.raises(StorageUnavailableError):
            JsonFileKeyValueStore(path).get("tasks")

    def test_write_failure_is_unavailable(self, tmp_path):
        blocker = tmp_path / "blocker"
        blocker.write_text("", encoding="utf-8")
        store = JsonFileKeyValueStore(blocker / "storage.json")

        with pytest.raises(StorageUnavailableError):
            store.set("tasks", "[]")


class TestTaskRepository:
    """Tests for encoding, decoding and load results."""

    def test_load_nothing_saved(self, repository):
        result = repository.load()

        assert result.status is LoadStatus.EMPTY
        assert result.tasks == []
        assert not result.ok

    def test_save_then_load(self, repository):
        tasks = [
            Task(title="Write report", summary="Q3 summary", deadline="2024-01-15"),
            Task(title="Review PR", state=TaskState.DONE),
        ]
        repository.save(tasks)
        result = repository.load()

        assert result.ok
        assert result.tasks == tasks

    def test_saved_value_format(self, kv_store, repository):
        repository.save([Task(title="Review PR", state=TaskState.DOING_RIGHT_NOW)])

        assert json.loads(kv_store.get("tasks")) == [
            {"title": "Review PR", "summary": "", "state": "Doing right now", "deadline": ""}
        ]

    def test_empty_list_is_a_successful_load(self, kv_store, repository):
        kv_store.set("tasks", "[]")
        result = repository.load()

        assert result.status is LoadStatus.LOADED
        assert result.tasks == []

    @pytest.mark.parametrize("raw", [
        "not json",
        "null",
        '{"title": "x"}',
        '["x"]',
        '[{"summary": "no title"}]',
        '[{"title": 5}]',
        '[{"title": "x", "state": "Later"}]',
        '[{"title": "x", "state": "done"}]',
        '[{"title": "x", "state": "NOT_DONE"}]',
        '[{"title": "x", "deadline": 20240115}]',
    ])
    def test_malformed_values_are_reported_as_corrupt(self, kv_store, repository, raw):
        kv_store.set("tasks", raw)
        result = repository.load()

        assert result.status is LoadStatus.CORRUPT
        assert result.tasks == []
        assert isinstance(result.error, MalformedPersistedDataError)
        assert result.error.key == "tasks"

    def test_decode_raises(self, repository):
        with pytest.raises(MalformedPersistedDataError, match="Expected a list"):
            repository.decode('{"tasks": []}')

    def test_custom_key(self, kv_store):
        TaskRepository(kv_store, key="other").save([Task(title="x")])

        assert kv_store.get("tasks") is None
        assert kv_store.get("other") is not None

    def test_open_repository_uses_config(self, tmp_path):
        config = ConfigModel(data_dir=str(tmp_path), tasks_key="my-tasks")
        kv_store, repository = open_repository(config)
        repository.save([Task(title="x")])

        assert kv_store.path == tmp_path / "storage.json"
        assert "my-tasks" in json.loads(kv_store.path.read_text(encoding="utf-8"))
