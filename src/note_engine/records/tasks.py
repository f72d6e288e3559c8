"""FIFO task queue persisted under the ``tasks`` key.

When a :class:`~note_engine.records.remote.RemoteTaskStore` is attached the
queue mirrors every change to the tasks API. The local copy stays the
working set: a failed remote call is logged and the local change is kept.
"""

from __future__ import annotations

from dataclasses import asdict, dataclass
from typing import TYPE_CHECKING, Any, Callable, List, Optional, Tuple, TypeVar

from note_engine.runtime import telemetry
from note_engine.storage.base import KeyValueStore, StorageError

from .base import OperationResult, load_json, save_json

if TYPE_CHECKING:  # pragma: no cover
    from .remote import RemoteTaskStore

T = TypeVar("T")

TASK_TYPES = ("Email", "File Upload", "Message", "Other")
DEFAULT_TASK_TYPE = "Other"


def normalize_type(value: Optional[str]) -> str:
    cleaned = (value or "").strip()
    return cleaned if cleaned in TASK_TYPES else DEFAULT_TASK_TYPE


@dataclass(frozen=True, slots=True)
class Task:
    title: str
    type: str = DEFAULT_TASK_TYPE
    desc: str = ""
    # Server-assigned id, present once the task reached the tasks API
    id: Optional[str] = None

    @classmethod
    def from_value(cls, value: Any) -> Optional["Task"]:
        """Accept both stored shapes: a bare title string or a task object."""

        if isinstance(value, str):
            return cls(title=value)
        if not isinstance(value, dict):
            return None
        title = value.get("title")
        if not isinstance(title, str):
            return None
        task_id = value.get("id", value.get("_id"))
        desc = value.get("desc")
        return cls(
            title=title,
            type=normalize_type(value.get("type")),
            desc=desc if isinstance(desc, str) else "",
            id=str(task_id) if task_id is not None else None,
        )

    def to_json(self) -> dict:
        data = asdict(self)
        if self.id is None:
            del data["id"]
        return data


class TaskQueue:
    def __init__(
        self,
        kv: KeyValueStore,
        *,
        key: str = "tasks",
        remote: Optional["RemoteTaskStore"] = None,
    ) -> None:
        self.kv = kv
        self.key = key
        self.remote = remote
        self._tasks: List[Task] = self._load()

    @property
    def tasks(self) -> Tuple[Task, ...]:
        return tuple(self._tasks)

    def __len__(self) -> int:
        return len(self._tasks)

    def peek(self) -> Optional[Task]:
        return self._tasks[0] if self._tasks else None

    def add(self, title: str, type: str = "", desc: str = "") -> OperationResult:
        title = (title or "").strip()
        if not title:
            return OperationResult(False, "Please enter a task title")
        task = Task(title=title, type=normalize_type(type), desc=(desc or "").strip())
        if self.remote is not None:
            remote = self.remote
            task = self._remote_call("add", lambda: remote.add_task(task)) or task
        self._tasks.append(task)
        self._save()
        return OperationResult(True, f'Task "{title}" added!')

    def pop(self) -> OperationResult:
        if not self._tasks:
            return OperationResult(False, "No tasks in queue!")
        task = self._tasks.pop(0)
        self._forget(task)
        self._save()
        return OperationResult(True, f'Completed: "{task.title}"')

    def remove(self, index: int) -> OperationResult:
        if not 0 <= index < len(self._tasks):
            return OperationResult(False, "Task not found")
        task = self._tasks.pop(index)
        self._forget(task)
        self._save()
        return OperationResult(True, f'Removed "{task.title}" from queue!')

    def clear(self) -> OperationResult:
        if not self._tasks:
            return OperationResult(False, "Queue is already empty!")
        dropped, self._tasks = self._tasks, []
        for task in dropped:
            self._forget(task)
        self._save()
        return OperationResult(True, f"Cleared {len(dropped)} task(s) from queue!")

    def refresh(self) -> bool:
        """Replace the local queue with the server's, oldest first."""

        if self.remote is None:
            return False
        tasks = self._remote_call("list", self.remote.list_tasks)
        if tasks is None:
            return False
        self._tasks = list(tasks)
        self._save()
        return True

    def _forget(self, task: Task) -> None:
        if self.remote is None or task.id is None:
            return
        remote, task_id = self.remote, task.id
        self._remote_call("delete", lambda: remote.delete_task(task_id))

    def _remote_call(self, operation: str, call: Callable[[], T]) -> Optional[T]:
        try:
            return call()
        except StorageError as exc:
            telemetry.record_event(
                "records.remote_failed",
                level="warning",
                data={"book": self.key, "operation": operation, "error": str(exc)},
            )
            return None

    def _load(self) -> List[Task]:
        raw = load_json(self.kv, self.key, [])
        if not isinstance(raw, list):
            return []
        tasks = [Task.from_value(item) for item in raw]
        return [task for task in tasks if task is not None]

    def _save(self) -> None:
        save_json(self.kv, self.key, [task.to_json() for task in self._tasks])


__all__ = [
    "DEFAULT_TASK_TYPE",
    "TASK_TYPES",
    "Task",
    "TaskQueue",
    "normalize_type",
]
