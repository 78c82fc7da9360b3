from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Callable

from .models import LogEntry
from .persistence import PersistenceAdapter

log = logging.getLogger(__name__)

PROGRESS_GOAL = 10


def progress_fraction(count: int, goal: int = PROGRESS_GOAL) -> float:
    """Fill level for the progress ring: count/goal, clamped to [0, 1]."""
    if goal <= 0:
        return 1.0
    return max(0.0, min(count / goal, 1.0))


@dataclass(frozen=True)
class Snapshot:
    entries: tuple[LogEntry, ...]
    count: int

    @property
    def recent_first(self) -> list[LogEntry]:
        return list(reversed(self.entries))

    @property
    def progress(self) -> float:
        return progress_fraction(self.count)


Listener = Callable[[Snapshot], None]


class EntryStore:
    """
    Owns the entry list and the all-time counter.

    The only mutation is add_entry(); every successful add persists both
    slots and pushes a fresh Snapshot to subscribers.
    """

    def __init__(self, persistence: PersistenceAdapter):
        self.persistence = persistence
        self._entries: list[LogEntry] = persistence.load()
        self._count: int = persistence.load_counter()
        self._listeners: list[Listener] = []
        log.debug("Loaded %d entries, count=%d", len(self._entries), self._count)

    @property
    def entries(self) -> tuple[LogEntry, ...]:
        return tuple(self._entries)

    @property
    def count(self) -> int:
        return self._count

    def snapshot(self) -> Snapshot:
        return Snapshot(entries=tuple(self._entries), count=self._count)

    def add_entry(self, reason: str) -> LogEntry | None:
        if not reason or not reason.strip():
            return None

        entry = LogEntry.create(reason)
        self._entries.append(entry)
        self._count += 1

        self.persistence.save(self._entries)
        self.persistence.save_counter(self._count)
        log.debug("Added entry %s (count=%d)", entry.id, self._count)

        self._notify()
        return entry

    def subscribe(self, listener: Listener) -> Callable[[], None]:
        self._listeners.append(listener)

        def unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return unsubscribe

    def _notify(self) -> None:
        snap = self.snapshot()
        for listener in list(self._listeners):
            listener(snap)
