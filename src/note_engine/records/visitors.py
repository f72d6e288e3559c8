"""Visitor log with duplicate-attempt counting.

Visitors persist under ``visitors`` as a JSON array and attempt counters
under ``visitorAttempts`` as a JSON object. A successful visit seeds the
counter ``"<id>-<email>-<ip>"`` with 1; a rejected duplicate bumps
``"<id>-duplicate"`` or ``"<email>-duplicate"``.
"""

from __future__ import annotations

import json
from dataclasses import asdict, dataclass
from typing import Any, Dict, List, Optional, Tuple

from note_engine.storage.base import KeyValueStore

from .base import OperationResult, load_json, save_json


@dataclass(frozen=True, slots=True)
class Visitor:
    id: str
    email: str
    ip: str

    @property
    def attempt_key(self) -> str:
        return f"{self.id}-{self.email}-{self.ip}"


class VisitorTracker:
    def __init__(
        self,
        kv: KeyValueStore,
        *,
        key: str = "visitors",
        attempts_key: str = "visitorAttempts",
    ) -> None:
        self.kv = kv
        self.key = key
        self.attempts_key = attempts_key
        self._visitors: List[Visitor] = self._load_visitors()
        self._attempts: Dict[str, int] = self._load_attempts()

    def log_visit(
        self, id: Optional[str], email: Optional[str], ip: Optional[str]
    ) -> OperationResult:
        visitor_id = (id or "").strip()
        address = (email or "").strip().lower()
        host = (ip or "").strip()
        if not visitor_id:
            return OperationResult(False, "Please enter a visitor ID")
        if not address:
            return OperationResult(False, "Please enter a visitor email")
        if not host:
            return OperationResult(False, "Please enter an IP address")

        if any(v.id == visitor_id for v in self._visitors):
            count = self._bump(f"{visitor_id}-duplicate")
            return OperationResult(
                False, f'Visitor ID "{visitor_id}" already exists! Attempt #{count}'
            )
        if any(v.email == address for v in self._visitors):
            count = self._bump(f"{address}-duplicate")
            return OperationResult(
                False, f'Email "{address}" already registered! Attempt #{count}'
            )

        visitor = Visitor(id=visitor_id, email=address, ip=host)
        self._visitors.append(visitor)
        self._attempts[visitor.attempt_key] = 1
        self._save()
        return OperationResult(True, f'Visitor "{visitor_id}" logged in successfully!')

    def delete(self, visitor: Visitor) -> OperationResult:
        if visitor not in self._visitors:
            return OperationResult(False, "Visitor not found")
        self._visitors.remove(visitor)
        self._attempts.pop(visitor.attempt_key, None)
        self._save()
        return OperationResult(True, f'Removed visitor "{visitor.id}" from log')

    def visitors(self) -> Tuple[Visitor, ...]:
        return tuple(sorted(self._visitors, key=lambda v: v.id))

    def count(self) -> int:
        return len(self._visitors)

    def unique_count(self) -> int:
        return len({v.id for v in self._visitors})

    def total_attempts(self) -> int:
        """Number of attempt counters kept, successful visits included."""
        return len(self._attempts)

    def duplicate_attempts(self) -> int:
        return sum(count - 1 for count in self._attempts.values() if count > 1)

    def attempt_count(self, visitor: Visitor) -> int:
        return self._attempts.get(visitor.attempt_key, 0)

    def clear(self) -> None:
        self._visitors.clear()
        self._attempts.clear()
        self._save()

    def _bump(self, key: str) -> int:
        count = self._attempts.get(key, 0) + 1
        self._attempts[key] = count
        self._save()
        return count

    def _load_visitors(self) -> List[Visitor]:
        raw = load_json(self.kv, self.key, [])
        if not isinstance(raw, list):
            return []
        visitors = [_visitor_from(item) for item in raw]
        return [v for v in visitors if v is not None]

    def _load_attempts(self) -> Dict[str, int]:
        raw = load_json(self.kv, self.attempts_key, {})
        if not isinstance(raw, dict):
            return {}
        return {
            str(key): value
            for key, value in raw.items()
            if isinstance(value, int) and not isinstance(value, bool)
        }

    def _save(self) -> None:
        save_json(self.kv, self.key, [asdict(v) for v in self._visitors])
        save_json(self.kv, self.attempts_key, self._attempts)


def _visitor_from(value: Any) -> Optional[Visitor]:
    # Older logs stored each visitor as its own JSON string
    if isinstance(value, str):
        try:
            value = json.loads(value)
        except ValueError:
            return None
    if not isinstance(value, dict):
        return None
    fields = [value.get(name) for name in ("id", "email", "ip")]
    if not all(isinstance(item, str) for item in fields):
        return None
    return Visitor(*fields)


__all__ = ["Visitor", "VisitorTracker"]
