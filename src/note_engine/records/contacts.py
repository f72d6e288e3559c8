"""Contact book keyed by lower-cased email, persisted under ``contacts``."""

from __future__ import annotations

from dataclasses import asdict, dataclass
from typing import Any, Dict, Optional, Tuple

from note_engine.storage.base import KeyValueStore

from .base import OperationResult, load_json, save_json


@dataclass(frozen=True, slots=True)
class Contact:
    first: str
    last: str
    email: str
    phone: str

    @property
    def full_name(self) -> str:
        return f"{self.first} {self.last}".strip()


class ContactBook:
    """Email-keyed contacts with insertion order preserved.

    Stored as a JSON array of ``[email, contact]`` pairs. Older files held
    ``[name, phone]`` pairs; those load as a contact whose first name and
    email are both the old key.
    """

    def __init__(self, kv: KeyValueStore, *, key: str = "contacts") -> None:
        self.kv = kv
        self.key = key
        self._contacts: Dict[str, Contact] = self._load()

    @property
    def contacts(self) -> Tuple[Contact, ...]:
        return tuple(self._contacts.values())

    def __len__(self) -> int:
        return len(self._contacts)

    def add(self, first: str, last: str, email: str, phone: str) -> OperationResult:
        """Insert or replace the contact stored under ``email``."""

        first, last, phone = first.strip(), last.strip(), phone.strip()
        email = email.strip().lower()
        if not (first and last and email and phone):
            return OperationResult(
                False, "First name, last name, email, and phone are required"
            )

        updated = email in self._contacts
        contact = Contact(first=first, last=last, email=email, phone=phone)
        self._contacts[email] = contact
        self._save()
        verb = "updated" if updated else "added"
        return OperationResult(
            True, f'Contact "{contact.full_name}" {verb} successfully!', updated=updated
        )

    def search(self, term: str) -> Optional[Contact]:
        query = term.strip().lower()
        if not query:
            return None
        if query in self._contacts:
            return self._contacts[query]
        for contact in self._contacts.values():
            if query in f"{contact.first} {contact.last}".lower():
                return contact
        return None

    def delete(self, email: str) -> OperationResult:
        contact = self._contacts.pop(email.strip().lower(), None)
        if contact is None:
            return OperationResult(False, "Contact not found")
        self._save()
        return OperationResult(True, f'Contact "{contact.full_name}" deleted!')

    def clear(self) -> None:
        self._contacts.clear()
        self._save()

    def _load(self) -> Dict[str, Contact]:
        raw = load_json(self.kv, self.key, [])
        contacts: Dict[str, Contact] = {}
        if not isinstance(raw, list):
            return contacts
        for entry in raw:
            if not (isinstance(entry, list) and len(entry) == 2):
                continue
            key, value = entry
            if not isinstance(key, str):
                continue
            contact = _contact_from(key, value)
            if contact is not None:
                contacts[contact.email] = contact
        return contacts

    def _save(self) -> None:
        save_json(
            self.kv,
            self.key,
            [[email, asdict(contact)] for email, contact in self._contacts.items()],
        )


def _contact_from(key: str, value: Any) -> Optional[Contact]:
    if isinstance(value, dict):
        try:
            return Contact(
                first=str(value["first"]),
                last=str(value.get("last", "")),
                email=str(value.get("email", key)).lower(),
                phone=str(value.get("phone", "")),
            )
        except KeyError:
            return None
    return Contact(first=key, last="", email=key.lower(), phone=str(value))


__all__ = ["Contact", "ContactBook"]
