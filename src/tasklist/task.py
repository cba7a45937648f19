"""Task data model for the tasklist application."""

import uuid
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, Union


class TaskState(Enum):
    """Task states. Values are the labels shown to users and persisted."""
    DONE = "Done"
    NOT_DONE = "Not done"
    DOING_RIGHT_NOW = "Doing right now"

    @property
    def label(self) -> str:
        return self.value

    @classmethod
    def parse(cls, value: Union["TaskState", str]) -> "TaskState":
        """Resolve a state from an enum member, its label or its name.

        Matching is case-insensitive and treats ``-``, ``_`` and spaces
        alike, so ``"not done"``, ``"NOT_DONE"`` and ``"not-done"`` all work.

        Raises:
            ValueError: If the value does not name a state
        """
        if isinstance(value, cls):
            return value
        normalized = str(value).strip().lower().replace("_", " ").replace("-", " ")
        for state in cls:
            if normalized in (state.value.lower(), state.name.lower().replace("_", " ")):
                return state
        labels = ", ".join(s.value for s in cls)
        raise ValueError(f"Unknown task state '{value}' (expected one of: {labels})")


def _new_task_id() -> str:
    return uuid.uuid4().hex[:8]


@dataclass
class Task:
    """A single task.

    ``id`` is assigned per session when the task enters a store and is not
    part of the persisted record; equality only considers the stored fields.
    """

    title: str
    summary: str = ""
    state: TaskState = TaskState.NOT_DONE
    deadline: str = ""  # YYYY-MM-DD or empty

    id: str = field(default_factory=_new_task_id, compare=False)

    def __post_init__(self):
        self.state = TaskState.parse(self.state)
        if self.summary is None:
            self.summary = ""
        if self.deadline is None:
            self.deadline = ""

    def to_dict(self) -> Dict[str, str]:
        """Convert the Task to its persisted form (labels, plain strings)."""
        return {
            "title": self.title,
            "summary": self.summary,
            "state": self.state.label,
            "deadline": self.deadline,
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Task":
        """Create a Task from its persisted form.

        Missing optional fields fall back to their defaults.

        Raises:
            KeyError: If ``title`` is missing
            ValueError: If ``state`` is not exactly one of the state labels
        """
        label = data.get("state") or TaskState.NOT_DONE.label
        try:
            state = TaskState(label)
        except ValueError:
            raise ValueError(f"Unknown task state label '{label}'") from None
        return cls(
            title=data["title"],
            summary=data.get("summary") or "",
            state=state,
            deadline=data.get("deadline") or "",
        )
