"""Storage layer for tasklist: a synchronous key-value store plus the task repository.

The key-value store holds string values under string keys, the way browser
local storage does. ``JsonFileKeyValueStore`` keeps every key in a single JSON
document on disk; ``MemoryKeyValueStore`` is the in-process equivalent used by
tests. ``TaskRepository`` owns the task sequence slot and its JSON encoding.
"""

import json
import logging
import os
from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path
from typing import Dict, List, Optional, Protocol, Sequence, Tuple

from .config import ConfigModel
from .task import Task

logger = logging.getLogger(__name__)


class StorageError(Exception):
    """Base class for storage failures."""


class StorageUnavailableError(StorageError):
    """The backing store could not be read or written."""

    def __init__(self, message: str, key: Optional[str] = None):
        self.key = key
        super().__init__(message)


class MalformedPersistedDataError(StorageError):
    """A stored value is not valid serialized task data."""

    def __init__(self, message: str, key: str, raw: Optional[str] = None):
        self.key = key
        self.raw = raw
        super().__init__(message)


class KeyValueStore(Protocol):
    """Synchronous string key-value storage."""

    def get(self, key: str) -> Optional[str]:
        ...

    def set(self, key: str, value: str) -> None:
        ...

    def remove(self, key: str) -> None:
        ...


class MemoryKeyValueStore:
    """Dictionary-backed key-value store."""

    def __init__(self, initial: Optional[Dict[str, str]] = None):
        self._data: Dict[str, str] = dict(initial or {})

    def get(self, key: str) -> Optional[str]:
        return self._data.get(key)

    def set(self, key: str, value: str) -> None:
        if not isinstance(value, str):
            raise TypeError(f"Values must be strings, got {type(value).__name__}")
        self._data[key] = value

    def remove(self, key: str) -> None:
        self._data.pop(key, None)

    def keys(self) -> List[str]:
        return list(self._data)


class JsonFileKeyValueStore:
    """Key-value store persisted as one JSON object in a file.

    Every ``set``/``remove`` rewrites the whole document through a temporary
    file followed by a rename, so readers never observe a partial write.
    """

    def __init__(self, path: Path):
        self.path = Path(path)

    def _read_all(self) -> Dict[str, str]:
        if not self.path.exists():
            return {}
        try:
            with open(self.path, "r", encoding="utf-8") as f:
                content = f.read()
        except OSError as e:
            raise StorageUnavailableError(f"Cannot read {self.path}: {e}") from e

        if not content.strip():
            return {}
        try:
            data = json.loads(content)
        except json.JSONDecodeError as e:
            raise StorageUnavailableError(
                f"Storage file {self.path} is not a JSON document: {e}"
            ) from e
        if not isinstance(data, dict):
            raise StorageUnavailableError(f"Storage file {self.path} does not hold a JSON object")
        return data

    def _write_all(self, data: Dict[str, str]) -> None:
        temp_file = self.path.with_suffix(self.path.suffix + ".tmp")
        try:
            self.path.parent.mkdir(parents=True, exist_ok=True)
            with open(temp_file, "w", encoding="utf-8") as f:
                json.dump(data, f, indent=2, ensure_ascii=False)
            os.replace(temp_file, self.path)
        except OSError as e:
            temp_file.unlink(missing_ok=True)
            raise StorageUnavailableError(f"Cannot write {self.path}: {e}") from e

    def get(self, key: str) -> Optional[str]:
        value = self._read_all().get(key)
        if value is not None and not isinstance(value, str):
            # Stored by something other than this class; hand back its JSON text.
            return json.dumps(value)
        return value

    def set(self, key: str, value: str) -> None:
        if not isinstance(value, str):
            raise TypeError(f"Values must be strings, got {type(value).__name__}")
        data = self._read_all()
        data[key] = value
        self._write_all(data)
        logger.debug(f"Stored key {key!r} ({len(value)} chars) in {self.path}")

    def remove(self, key: str) -> None:
        data = self._read_all()
        if key in data:
            del data[key]
            self._write_all(data)


class LoadStatus(Enum):
    """Outcome of reading the persisted task sequence."""
    LOADED = "loaded"
    EMPTY = "empty"  # nothing saved under the key
    CORRUPT = "corrupt"  # saved value is not task data


@dataclass
class LoadResult:
    """Tasks read from storage together with how the read went."""

    status: LoadStatus
    tasks: List[Task] = field(default_factory=list)
    error: Optional[MalformedPersistedDataError] = None

    @property
    def ok(self) -> bool:
        return self.status is LoadStatus.LOADED


class TaskRepository:
    """Loads and saves the task sequence under a single key."""

    def __init__(self, store: KeyValueStore, key: str = "tasks"):
        self.store = store
        self.key = key

    @staticmethod
    def encode(tasks: Sequence[Task]) -> str:
        """Serialize tasks to the persisted JSON text."""
        return json.dumps([task.to_dict() for task in tasks], ensure_ascii=False)

    def decode(self, raw: str) -> List[Task]:
        """Parse persisted JSON text into tasks.

        Raises:
            MalformedPersistedDataError: If the text is not a JSON list of
                task objects with string fields and known state labels
        """
        try:
            data = json.loads(raw)
        except json.JSONDecodeError as e:
            raise MalformedPersistedDataError(f"Invalid JSON: {e}", self.key, raw) from e

        if not isinstance(data, list):
            raise MalformedPersistedDataError(
                f"Expected a list of tasks, got {type(data).__name__}", self.key, raw
            )

        tasks: List[Task] = []
        for position, entry in enumerate(data):
            if not isinstance(entry, dict):
                raise MalformedPersistedDataError(
                    f"Task #{position} is not an object", self.key, raw
                )
            bad_fields = [
                name for name in ("title", "summary", "state", "deadline")
                if entry.get(name) is not None and not isinstance(entry[name], str)
            ]
            if not isinstance(entry.get("title"), str):
                bad_fields.insert(0, "title")
            if bad_fields:
                raise MalformedPersistedDataError(
                    f"Task #{position} has invalid field(s): {', '.join(sorted(set(bad_fields)))}",
                    self.key,
                    raw,
                )
            try:
                tasks.append(Task.from_dict(entry))
            except ValueError as e:
                raise MalformedPersistedDataError(f"Task #{position}: {e}", self.key, raw) from e
        return tasks

    def load(self) -> LoadResult:
        """Read the persisted task sequence.

        Raises:
            StorageUnavailableError: If the backing store cannot be read
        """
        raw = self.store.get(self.key)
        if raw is None:
            return LoadResult(LoadStatus.EMPTY)
        try:
            tasks = self.decode(raw)
        except MalformedPersistedDataError as e:
            return LoadResult(LoadStatus.CORRUPT, error=e)
        return LoadResult(LoadStatus.LOADED, tasks=tasks)

    def save(self, tasks: Sequence[Task]) -> None:
        """Overwrite the persisted sequence with ``tasks``.

        Raises:
            StorageUnavailableError: If the backing store cannot be written
        """
        self.store.set(self.key, self.encode(tasks))


def open_key_value_store(config: ConfigModel) -> JsonFileKeyValueStore:
    """Open the file-backed key-value store named by the configuration."""
    return JsonFileKeyValueStore(config.get_storage_path())


def open_repository(config: ConfigModel) -> Tuple[JsonFileKeyValueStore, TaskRepository]:
    """Open the configured store and a task repository on top of it."""
    store = open_key_value_store(config)
    return store, TaskRepository(store, key=config.tasks_key)
