"""Tests for LogEntry and the entry collection codec."""

from __future__ import annotations

import json
from datetime import datetime, timezone

import pytest

from serenemind.models import EntryDecodeError, LogEntry, decode_entries, encode_entries


def test_create_sets_fresh_id_and_aware_time():
    a = LogEntry.create("traffic")
    b = LogEntry.create("traffic")
    assert a.id != b.id
    assert a.date.tzinfo is not None
    assert a.reason == "traffic"


def test_entry_is_immutable():
    e = LogEntry.create("x")
    with pytest.raises(AttributeError):
        e.reason = "y"  # type: ignore[misc]


def test_encode_shape():
    dt = datetime(2026, 10, 19, 9, 30, tzinfo=timezone.utc)
    e = LogEntry(date=dt, reason="printer jam", id="abc")
    assert json.loads(encode_entries([e])) == [
        {"id": "abc", "date": "2026-10-19T09:30:00+00:00", "reason": "printer jam"}
    ]


def test_decode_keeps_order_and_fields():
    entries = [LogEntry.create(r) for r in ("a", "b", "c")]
    decoded = decode_entries(encode_entries(entries))
    assert decoded == entries


def test_decode_empty_list():
    assert decode_entries(b"[]") == []


def test_decode_naive_date_gets_local_tz():
    payload = json.dumps([{"id": "1", "date": "2026-10-19T09:30:00", "reason": "x"}]).encode()
    (e,) = decode_entries(payload)
    assert e.date.tzinfo is not None
    assert e.date.hour == 9


def test_decode_keeps_unicode_reason():
    e = LogEntry.create("café ☕ spilled")
    assert decode_entries(encode_entries([e]))[0].reason == "café ☕ spilled"


@pytest.mark.parametrize(
    "payload",
    [
        b"not json",
        b"\xff\xfe",
        b'{"id": "1"}',
        b"[1, 2]",
        b'[{"date": "2026-10-19T09:30:00", "reason": "x"}]',
        b'[{"id": "1", "reason": "x"}]',
        b'[{"id": "1", "date": "yesterday", "reason": "x"}]',
        b'[{"id": "1", "date": "2026-10-19T09:30:00", "reason": 5}]',
    ],
)
def test_decode_rejects_malformed(payload):
    with pytest.raises(EntryDecodeError):
        decode_entries(payload)


def test_decode_error_is_value_error():
    assert issubclass(EntryDecodeError, ValueError)


def test_decode_offset_date_keeps_instant_and_reads_local():
    payload = json.dumps([{"id": "1", "date": "2026-10-19T09:30:00+00:00", "reason": "x"}]).encode()
    (e,) = decode_entries(payload)
    assert e.date == datetime(2026, 10, 19, 9, 30, tzinfo=timezone.utc)
    assert e.date.utcoffset() == datetime(2026, 10, 19, 9, 30, tzinfo=timezone.utc).astimezone().utcoffset()


def test_decode_rejects_empty_date():
    payload = json.dumps([{"id": "1", "date": "", "reason": "x"}]).encode()
    with pytest.raises(EntryDecodeError, match="bad date"):
        decode_entries(payload)
