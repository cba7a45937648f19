"""tasklist - a small task list manager with persistent storage."""

__version__ = "0.1.0"

from .task import Task, TaskState
from .storage import (
    JsonFileKeyValueStore,
    LoadResult,
    LoadStatus,
    MalformedPersistedDataError,
    MemoryKeyValueStore,
    StorageError,
    StorageUnavailableError,
    TaskRepository,
)
from .store import TaskIndexError, TaskNotFoundError, TaskStore

__all__ = [
    "Task",
    "TaskState",
    "TaskStore",
    "TaskRepository",
    "TaskIndexError",
    "TaskNotFoundError",
    "JsonFileKeyValueStore",
    "MemoryKeyValueStore",
    "LoadResult",
    "LoadStatus",
    "StorageError",
    "StorageUnavailableError",
    "MalformedPersistedDataError",
    "__version__",
]
