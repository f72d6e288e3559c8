"""HTTP client for the tasks REST API.

API:
    GET    /api/tasks      -> [{"_id": "...", "title": "...", "type": "...", "desc": "..."}, ...]
    POST   /api/tasks      <- {"title": "...", "type": "...", "desc": "..."}  -> created task
    DELETE /api/tasks/:id  -> {"message": "Task removed"} or 404
"""

from __future__ import annotations

from typing import Any, List, Optional

import httpx

from note_engine.storage.base import StorageError
from note_engine.storage.remote import BACKEND, request_json

from .tasks import Task


class RemoteTaskStore:
    def __init__(
        self,
        base_url: str,
        *,
        timeout: float = 5.0,
        client: Optional[httpx.Client] = None,
    ) -> None:
        self.base_url = base_url.rstrip("/")
        self._owns_client = client is None
        self.client = client or httpx.Client(timeout=timeout)

    @property
    def tasks_url(self) -> str:
        return f"{self.base_url}/api/tasks"

    def list_tasks(self) -> List[Task]:
        data = self._request("GET", self.tasks_url)
        if not isinstance(data, list):
            raise StorageError(
                f"GET {self.tasks_url} returned {type(data).__name__}, expected a list",
                backend=BACKEND,
            )
        tasks = [Task.from_value(item) for item in data]
        return [task for task in tasks if task is not None]

    def add_task(self, task: Task) -> Task:
        payload = {"title": task.title, "type": task.type, "desc": task.desc}
        created = Task.from_value(self._request("POST", self.tasks_url, json=payload))
        return created or task

    def delete_task(self, task_id: str) -> bool:
        """Delete ``task_id``; ``False`` when the server no longer has it."""

        try:
            self._request("DELETE", f"{self.tasks_url}/{task_id}")
        except StorageError as exc:
            if isinstance(exc.__cause__, httpx.HTTPStatusError) and (
                exc.__cause__.response.status_code == 404
            ):
                return False
            raise
        return True

    def close(self) -> None:
        if self._owns_client:
            self.client.close()

    def _request(self, method: str, url: str, **kwargs: Any) -> Any:
        return request_json(self.client, method, url, **kwargs)


__all__ = ["RemoteTaskStore"]
