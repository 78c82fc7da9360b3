from __future__ import annotations

import base64
import json
import os
import time
from pathlib import Path
from typing import Any


def _ensure_parent(path: Path) -> None:
    path.parent.mkdir(parents=True, exist_ok=True)


def load_json(path: Path) -> dict[str, Any]:
    """
    Safe load:
    - creates parent dirs
    - if missing/empty -> writes {}
    - if corrupt -> backs up raw text then resets to {}
    Always returns a dict.
    """
    path = Path(path)
    _ensure_parent(path)

    if not path.exists():
        save_json(path, {})
        return {}

    txt = path.read_text(encoding="utf-8").strip()
    if not txt:
        save_json(path, {})
        return {}

    try:
        data = json.loads(txt)
        return data if isinstance(data, dict) else {}
    except json.JSONDecodeError:
        # corruption guard: backup then reset
        backup = path.with_suffix(f".corrupt-{int(time.time())}.json")
        backup.write_text(txt, encoding="utf-8")
        save_json(path, {})
        return {}


def save_json(path: Path, data: Any) -> None:
    """
    Atomic-ish save:
    - write to temp file in same directory
    - flush + fsync
    - os.replace to target
    - chmod 0600 best-effort
    """
    path = Path(path)
    _ensure_parent(path)

    tmp = path.with_name(path.name + ".tmp")

    payload = json.dumps(data, indent=2, sort_keys=True, ensure_ascii=False) + "\n"

    with open(tmp, "w", encoding="utf-8") as f:
        f.write(payload)
        f.flush()
        os.fsync(f.fileno())

    os.replace(tmp, path)

    try:
        os.chmod(path, 0o600)
    except OSError:
        pass


# -------------------------
# Key-value slots
# -------------------------


class KeyValueStorage:
    """Named byte slots. Subclasses decide where the bytes live."""

    def get(self, key: str) -> bytes | None:
        raise NotImplementedError

    def set(self, key: str, value: bytes) -> None:
        raise NotImplementedError


class MemoryStorage(KeyValueStorage):
    def __init__(self, initial: dict[str, bytes] | None = None):
        self._slots: dict[str, bytes] = dict(initial or {})

    def get(self, key: str) -> bytes | None:
        return self._slots.get(key)

    def set(self, key: str, value: bytes) -> None:
        self._slots[key] = bytes(value)


class JsonFileStorage(KeyValueStorage):
    """
    All slots live in one JSON file under "slots".

    UTF-8 payloads are stored as plain strings so the file stays readable;
    anything else is wrapped as {"base64": "..."}. Other top-level keys in
    the file are left alone.
    """

    SLOTS_KEY = "slots"

    def __init__(self, data_path: Path):
        self.data_path = Path(data_path)

    def _slots(self, data: dict[str, Any]) -> dict[str, Any]:
        slots = data.get(self.SLOTS_KEY)
        if not isinstance(slots, dict):
            slots = {}
            data[self.SLOTS_KEY] = slots
        return slots

    def get(self, key: str) -> bytes | None:
        raw = self._slots(load_json(self.data_path)).get(key)
        if raw is None:
            return None
        if isinstance(raw, str):
            return raw.encode("utf-8")
        if isinstance(raw, dict) and isinstance(raw.get("base64"), str):
            return base64.b64decode(raw["base64"])
        # number / list / whatever someone hand-edited in: hand back its JSON text
        return json.dumps(raw).encode("utf-8")

    def set(self, key: str, value: bytes) -> None:
        data = load_json(self.data_path)
        try:
            stored: Any = value.decode("utf-8")
        except UnicodeDecodeError:
            stored = {"base64": base64.b64encode(value).decode("ascii")}
        self._slots(data)[key] = stored
        save_json(self.data_path, data)
