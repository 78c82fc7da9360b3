"""
Entry collection + counter persistence on top of a KeyValueStorage.

Everything here is best-effort: a missing or unreadable slot reads as
"no data yet" and a failed write is dropped. Failures are logged, never
raised.
"""

from __future__ import annotations

import logging

from .models import EntryDecodeError, LogEntry, decode_entries, encode_entries
from .storage import KeyValueStorage

log = logging.getLogger(__name__)

ENTRIES_KEY = "angerLogs"
COUNTER_KEY = "angerCount"


class PersistenceAdapter:
    def __init__(self, storage: KeyValueStorage):
        self.storage = storage

    def load(self) -> list[LogEntry]:
        try:
            raw = self.storage.get(ENTRIES_KEY)
        except (OSError, ValueError) as e:
            log.warning("Could not read %s slot: %s", ENTRIES_KEY, e)
            return []
        if raw is None:
            return []
        try:
            return decode_entries(raw)
        except EntryDecodeError as e:
            log.warning("Ignoring unreadable %s slot: %s", ENTRIES_KEY, e)
            return []

    def save(self, entries: list[LogEntry]) -> None:
        try:
            self.storage.set(ENTRIES_KEY, encode_entries(list(entries)))
        except (OSError, TypeError, ValueError) as e:
            log.warning("Dropped save of %d entries: %s", len(entries), e)

    def load_counter(self) -> int:
        try:
            raw = self.storage.get(COUNTER_KEY)
        except (OSError, ValueError) as e:
            log.warning("Could not read %s slot: %s", COUNTER_KEY, e)
            return 0
        if raw is None:
            return 0
        try:
            value = int(raw.decode("ascii").strip())
        except (UnicodeDecodeError, ValueError):
            log.warning("Ignoring malformed %s value %r", COUNTER_KEY, raw)
            return 0
        return max(0, value)

    def save_counter(self, value: int) -> None:
        try:
            self.storage.set(COUNTER_KEY, str(int(value)).encode("ascii"))
        except (OSError, TypeError, ValueError) as e:
            log.warning("Dropped save of %s=%r: %s", COUNTER_KEY, value, e)
