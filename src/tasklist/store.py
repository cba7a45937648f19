"""Task store: the authoritative in-memory task sequence for a session.

``create`` and ``delete`` persist through the repository after mutating.
``sort_by``, ``filter_by`` and ``load`` only change the in-memory view, so a
fresh ``load`` (or a new session) undoes any sort or filter but never a
create or delete.
"""

import logging
from typing import Iterator, List, Optional, Tuple, Union

from .storage import LoadResult, LoadStatus, StorageUnavailableError, TaskRepository
from .task import Task, TaskState
from .utils.datetime import deadline_sort_key

logger = logging.getLogger(__name__)

SORT_CRITERIA = ("state", "deadline")


class TaskIndexError(IndexError):
    """No task exists at the requested position."""

    def __init__(self, index: int, size: int):
        self.index = index
        self.size = size
        super().__init__(f"No task at position {index} (have {size})")


class TaskNotFoundError(KeyError):
    """No task carries the requested id."""

    def __init__(self, task_id: str):
        self.task_id = task_id
        super().__init__(task_id)

    def __str__(self) -> str:
        return f"Task id {self.task_id} not found"


class TaskStore:
    """Ordered task collection mirrored to a ``TaskRepository``."""

    def __init__(self, repository: TaskRepository):
        self.repository = repository
        self._tasks: List[Task] = []

    # -------------------- queries --------------------
    @property
    def tasks(self) -> Tuple[Task, ...]:
        """Snapshot of the current view."""
        return tuple(self._tasks)

    def __len__(self) -> int:
        return len(self._tasks)

    def __iter__(self) -> Iterator[Task]:
        return iter(tuple(self._tasks))

    def index_of(self, task_id: str) -> int:
        for position, task in enumerate(self._tasks):
            if task.id == task_id:
                return position
        raise TaskNotFoundError(task_id)

    # -------------------- persistence --------------------
    def load(self) -> LoadResult:
        """Replace the view with the persisted sequence.

        Nothing saved or corrupt data leaves the current view unchanged; the
        returned result tells the caller which case occurred.

        Raises:
            StorageUnavailableError: If the backing store cannot be read
        """
        result = self.repository.load()
        if result.status is LoadStatus.LOADED:
            self._tasks = list(result.tasks)
            logger.debug(f"Loaded {len(self._tasks)} task(s)")
        elif result.status is LoadStatus.CORRUPT:
            logger.warning(f"Ignoring malformed saved tasks: {result.error}")
        else:
            logger.debug("No saved tasks found")
        return result

    def _persist(self) -> None:
        try:
            self.repository.save(self._tasks)
        except StorageUnavailableError as e:
            logger.error(f"Failed to persist {len(self._tasks)} task(s): {e}")
            raise

    # -------------------- mutations --------------------
    def create(
        self,
        title: str,
        summary: str = "",
        state: Union[TaskState, str] = TaskState.NOT_DONE,
        deadline: str = "",
    ) -> Task:
        """Append a new task and persist.

        The task stays in memory even if persisting fails.

        Raises:
            StorageUnavailableError: If the sequence could not be saved
        """
        task = Task(title=title, summary=summary or "", state=state, deadline=deadline or "")
        self._tasks.append(task)
        logger.debug(f"Created task {task.id} {task.title!r}")
        self._persist()
        return task

    def delete(self, index: int) -> Task:
        """Remove the task at 0-based ``index`` in the current view and persist.

        Raises:
            TaskIndexError: If ``index`` is out of range (nothing changes)
            StorageUnavailableError: If the sequence could not be saved
        """
        if not 0 <= index < len(self._tasks):
            raise TaskIndexError(index, len(self._tasks))
        task = self._tasks.pop(index)
        logger.debug(f"Deleted task {task.id} {task.title!r} at position {index}")
        self._persist()
        return task

    def delete_by_id(self, task_id: str) -> Task:
        """Remove the task with ``task_id`` and persist.

        Raises:
            TaskNotFoundError: If no task in the view has that id
            StorageUnavailableError: If the sequence could not be saved
        """
        return self.delete(self.index_of(task_id))

    # -------------------- views --------------------
    def sort_by(self, criterion: str) -> None:
        """Stable in-memory sort by ``"state"`` label or ``"deadline"`` date.

        Tasks without a usable deadline sort after all dated tasks.

        Raises:
            ValueError: If the criterion is unknown
        """
        if criterion == "state":
            self._tasks.sort(key=lambda t: t.state.label)
        elif criterion == "deadline":
            self._tasks.sort(key=lambda t: deadline_sort_key(t.deadline))
        else:
            raise ValueError(
                f"Unknown sort criterion {criterion!r} (expected one of: {', '.join(SORT_CRITERIA)})"
            )

    def filter_by(self, state: Optional[Union[TaskState, str]] = None) -> Optional[LoadResult]:
        """Narrow the view to one state, or reload everything when ``state`` is None.

        Returns:
            The load result when reloading, otherwise None
        """
        if state is None:
            return self.load()
        wanted = TaskState.parse(state)
        self._tasks = [task for task in self._tasks if task.state is wanted]
        return None
