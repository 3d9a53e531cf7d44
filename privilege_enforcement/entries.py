"""Policy entries as supplied by the directory service."""

from __future__ import annotations

import json
from dataclasses import dataclass
from enum import Enum
from pathlib import Path
from typing import List


class EntriesError(ValueError):
    """Raised when an entries file cannot be turned into policy entries."""


class EntryKey(str, Enum):
    ALLOW_LOCAL_ADMINS = "allow-local-admins"
    CLIENT_ADMINS = "client-admins"


@dataclass(frozen=True)
class PolicyEntry:
    key: str
    value: str = ""
    disabled: bool = False

    @property
    def kind(self) -> EntryKey | None:
        """Recognized key, or None for keys this agent does not handle."""
        try:
            return EntryKey(self.key)
        except ValueError:
            return None


def _entry_from_dict(index: int, raw: object) -> PolicyEntry:
    if not isinstance(raw, dict):
        raise EntriesError(f"Entry #{index} is not an object")

    key = raw.get("key")
    if not isinstance(key, str) or not key:
        raise EntriesError(f"Entry #{index} has no key")

    value = raw.get("value", "")
    if value is None:
        value = ""
    if not isinstance(value, str):
        raise EntriesError(f"Entry #{index} ({key}) value must be a string")

    disabled = raw.get("disabled", False)
    if not isinstance(disabled, bool):
        raise EntriesError(f"Entry #{index} ({key}) disabled must be a boolean")

    return PolicyEntry(key=key, value=value, disabled=disabled)


def parse_entries(data: object) -> List[PolicyEntry]:
    if not isinstance(data, list):
        raise EntriesError("Policy entries must be a JSON array")
    return [_entry_from_dict(index, raw) for index, raw in enumerate(data)]


def load_entries(path: str) -> List[PolicyEntry]:
    entries_path = Path(path)
    if not entries_path.is_file():
        raise EntriesError(f"Entries file does not exist: {path}")

    try:
        data = json.loads(entries_path.read_text(encoding="utf-8"))
    except json.JSONDecodeError as exc:
        raise EntriesError(f"Invalid JSON in entries file {path}: {exc}") from exc

    return parse_entries(data)
