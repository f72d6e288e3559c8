"""Record books kept beside the notes: tasks, contacts, and visitors."""

from .base import OperationResult, load_json, save_json
from .contacts import Contact, ContactBook
from .remote import RemoteTaskStore
from .tasks import TASK_TYPES, Task, TaskQueue, normalize_type
from .visitors import Visitor, VisitorTracker

__all__ = [
    "Contact",
    "ContactBook",
    "OperationResult",
    "RemoteTaskStore",
    "TASK_TYPES",
    "Task",
    "TaskQueue",
    "Visitor",
    "VisitorTracker",
    "load_json",
    "normalize_type",
    "save_json",
]
