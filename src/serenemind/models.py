from __future__ import annotations

import json
import uuid
from dataclasses import dataclass, field
from datetime import datetime
from typing import Any

from ._util import _dt_from_entry_ts, _now_local


class EntryDecodeError(ValueError):
    """Stored entry payload could not be turned back into LogEntry objects."""


@dataclass(frozen=True)
class LogEntry:
    date: datetime
    reason: str
    id: str = field(default_factory=lambda: str(uuid.uuid4()))

    @classmethod
    def create(cls, reason: str) -> LogEntry:
        return cls(date=_now_local(), reason=reason)

    def to_dict(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "date": self.date.isoformat(),
            "reason": self.reason,
        }

    @classmethod
    def from_dict(cls, raw: Any) -> LogEntry:
        if not isinstance(raw, dict):
            raise EntryDecodeError(f"entry must be an object, got {type(raw).__name__}")

        entry_id = raw.get("id")
        reason = raw.get("reason")
        date_raw = raw.get("date")
        if not isinstance(entry_id, str) or not entry_id:
            raise EntryDecodeError(f"entry has no id: {raw!r}")
        if not isinstance(reason, str):
            raise EntryDecodeError(f"entry {entry_id} has no reason")
        if not isinstance(date_raw, str):
            raise EntryDecodeError(f"entry {entry_id} has no date")

        dt = _dt_from_entry_ts(date_raw)
        if dt is None:
            raise EntryDecodeError(f"entry {entry_id} has a bad date {date_raw!r}")

        return cls(date=dt, reason=reason, id=entry_id)


def encode_entries(entries: list[LogEntry]) -> bytes:
    payload = [e.to_dict() for e in entries]
    return json.dumps(payload, ensure_ascii=False).encode("utf-8")


def decode_entries(data: bytes) -> list[LogEntry]:
    try:
        raw = json.loads(data.decode("utf-8"))
    except (UnicodeDecodeError, json.JSONDecodeError) as e:
        raise EntryDecodeError(f"entries payload is not JSON: {e}") from e
    if not isinstance(raw, list):
        raise EntryDecodeError(f"entries payload must be a list, got {type(raw).__name__}")
    return [LogEntry.from_dict(item) for item in raw]
