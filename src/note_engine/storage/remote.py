"""HTTP client for the notes REST API.

API:
    GET  /api/notes   -> {"content": "...", "createdAt": ..., "updatedAt": ...}
    POST /api/notes   <- {"content": "..."}
    GET  /api/health  -> {"status": "ok", ...}

The server keeps a single note document holding only the current text, so a
remote load restores a one-snapshot history.
"""

from __future__ import annotations

from typing import Any, Optional, Sequence, Tuple

import httpx

from note_engine.runtime import telemetry

from .base import DEFAULT_SNAPSHOTS, StorageError

BACKEND = "remote"


class RemoteNoteStore:
    """
    Notes API client.

    Attributes:
        base_url: server root (e.g., http://localhost:5000)
        timeout: per-request timeout in seconds
    """

    def __init__(
        self,
        base_url: str,
        *,
        timeout: float = 5.0,
        client: Optional[httpx.Client] = None,
    ) -> None:
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout
        self._owns_client = client is None
        self.client = client or httpx.Client(timeout=timeout)

    @property
    def notes_url(self) -> str:
        return f"{self.base_url}/api/notes"

    def load(self) -> Tuple[str, ...]:
        data = self._request("GET", self.notes_url)
        content = data.get("content") if isinstance(data, dict) else None
        if not isinstance(content, str):
            telemetry.record_event(
                "storage.malformed",
                level="warning",
                data={"source": self.notes_url, "reason": "missing string content"},
            )
            return DEFAULT_SNAPSHOTS
        return (content,)

    def save(self, snapshots: Sequence[str]) -> None:
        current = snapshots[-1] if snapshots else ""
        self._request("POST", self.notes_url, json={"content": current})

    def healthcheck(self) -> bool:
        try:
            response = self.client.get(f"{self.base_url}/api/health")
            return response.status_code == 200
        except httpx.HTTPError as exc:
            telemetry.record_event(
                "storage.remote_error",
                level="warning",
                data={"url": self.base_url, "error": str(exc)},
            )
            return False

    def close(self) -> None:
        if self._owns_client:
            self.client.close()

    def _request(self, method: str, url: str, **kwargs: Any) -> Any:
        return request_json(self.client, method, url, **kwargs)


def request_json(client: httpx.Client, method: str, url: str, **kwargs: Any) -> Any:
    """Send one request and decode its JSON body; failures become StorageError."""

    try:
        response = client.request(method, url, **kwargs)
        response.raise_for_status()
        return response.json()
    except (httpx.HTTPError, ValueError) as exc:
        telemetry.record_event(
            "storage.remote_error",
            level="warning",
            data={"method": method, "url": url, "error": str(exc)},
        )
        raise StorageError(f"{method} {url} failed: {exc}", backend=BACKEND) from exc


__all__ = ["RemoteNoteStore", "request_json"]
