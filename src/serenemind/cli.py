from __future__ import annotations

import argparse
import stat
import time
from pathlib import Path

from ._util import _fmt_date, _fmt_time
from .logconfig import configure_logging
from .meditation import CYCLE_SECONDS, INSTRUCTION, SCALE_MAX, SCALE_MIN, eased_scale, phase_label
from .models import EntryDecodeError, LogEntry, decode_entries
from .paths import describe_source, resolve_data_path
from .persistence import COUNTER_KEY, ENTRIES_KEY, PersistenceAdapter
from .safety import assert_safe_data_path
from .storage import JsonFileStorage, load_json
from .store import PROGRESS_GOAL, EntryStore


def _open_store(args: argparse.Namespace) -> EntryStore:
    return EntryStore(PersistenceAdapter(JsonFileStorage(args.data_path)))


# -------------------------
# Formatting helpers
# -------------------------


def _progress_bar(fraction: float, width: int = PROGRESS_GOAL) -> str:
    filled = int(round(max(0.0, min(fraction, 1.0)) * width))
    return "█" * filled + "░" * (width - filled)


def _scale_bar(scale: float, width: int = 20) -> str:
    span = SCALE_MAX - SCALE_MIN
    n = 1 + int(round((scale - SCALE_MIN) / span * (width - 1)))
    return "●" * n


def _entry_line(entry: LogEntry) -> str:
    local = entry.date.astimezone()
    return f"{_fmt_date(local)} {_fmt_time(local)} — {entry.reason}"


def _print_entry_block(entry: LogEntry) -> None:
    local = entry.date.astimezone()
    print("```")
    print("📒 Anger Log")
    print(f"- 📅 Date: {_fmt_date(local)}")
    print(f"- 🕒 Time: {_fmt_time(local)}")
    print(f"- 💬 Reason: {entry.reason}")
    print("```")


# -------------------------
# Commands
# -------------------------


def cmd_log(args: argparse.Namespace) -> None:
    store = _open_store(args)
    entry = store.add_entry(" ".join(args.reason))
    if entry is None:
        raise SystemExit("Reason must not be empty.")

    if args.format == "block":
        _print_entry_block(entry)
    else:
        print(f"😤 Logged: {entry.reason} (count: {store.count})")


def cmd_list(args: argparse.Namespace) -> None:
    snap = _open_store(args).snapshot()
    if not snap.entries:
        print("No anger entries yet.")
        return

    recent = snap.recent_first[: args.limit]
    if args.format == "block":
        for e in recent:
            _print_entry_block(e)
        return

    print("=== Anger Log (newest first) ===")
    for e in recent:
        print(_entry_line(e))


def cmd_count(args: argparse.Namespace) -> None:
    snap = _open_store(args).snapshot()
    print(f"Anger Count: {snap.count}")
    print(f"[{_progress_bar(snap.progress)}] {snap.progress:.0%} of {PROGRESS_GOAL}")


def cmd_breathe(args: argparse.Namespace) -> None:
    print("=== Meditation ===")
    print(INSTRUCTION)
    steps = int(2 * CYCLE_SECONDS) * args.cycles
    for step in range(steps):
        t = float(step)
        print(f"{phase_label(t):<7} {_scale_bar(eased_scale(t))}")
        time.sleep(1)


def cmd_where(args: argparse.Namespace) -> None:
    print(args.data_path)
    print(f"↳ using {describe_source(args.data_arg, args.profile)}")


def cmd_doctor(args: argparse.Namespace) -> None:
    print("=== SereneMind Doctor ===")

    assert_safe_data_path(args.data_path, args.allow_repo_data_path)
    print("✅ Data path safety guard: OK")

    try:
        load_json(args.data_path)
    except (OSError, ValueError) as e:
        print(f"⚠️ Data file unreadable (app will start empty): {e}")
        _print_permissions(args.data_path)
        print("=== Done ===")
        return
    print("✅ JSON readable: OK")

    storage = JsonFileStorage(args.data_path)
    entries: list[LogEntry] | None = None
    try:
        raw = storage.get(ENTRIES_KEY)
    except (OSError, ValueError) as e:
        print(f"⚠️ {ENTRIES_KEY} unreadable (app will start empty): {e}")
    else:
        if raw is None:
            print(f"ℹ️ No {ENTRIES_KEY} slot yet")
        else:
            try:
                entries = decode_entries(raw)
                print(f"✅ {ENTRIES_KEY}: {len(entries)} entries")
            except EntryDecodeError as e:
                print(f"⚠️ {ENTRIES_KEY} unreadable (app will start empty): {e}")

    count = PersistenceAdapter(storage).load_counter()
    print(f"✅ {COUNTER_KEY}: {count}")
    if entries is not None and count != len(entries):
        print(f"ℹ️ Counter ({count}) differs from entry count ({len(entries)}); the counter is all-time")

    _print_permissions(args.data_path)
    print("=== Done ===")


def _print_permissions(path: Path) -> None:
    try:
        perms = stat.S_IMODE(path.stat().st_mode)
        print(f"🔐 File permissions: {oct(perms)} (target 0o600)")
    except FileNotFoundError:
        print("⚠️ Data file missing")


def _non_negative_int(value: str) -> int:
    try:
        n = int(value)
    except ValueError as e:
        raise argparse.ArgumentTypeError(f"expected a whole number, got {value!r}") from e
    if n < 0:
        raise argparse.ArgumentTypeError(f"must be 0 or more, got {n}")
    return n


def main(argv=None) -> None:
    p = argparse.ArgumentParser(prog="serene", description="SereneMind anger log + breathing guide")
    p.add_argument("--data", default=None, help="Path to data JSON (overrides env/default)")
    p.add_argument("--profile", default=None, help="Profile name (e.g. dev/test)")
    p.add_argument("--allow-repo-data-path", action="store_true", help="Override safety guard (not recommended)")
    p.add_argument("-v", "--verbose", action="store_true", help="Debug logging on stderr")

    sub = p.add_subparsers(dest="cmd", required=True)

    log_p = sub.add_parser("log", help="Log an anger event")
    log_p.add_argument("reason", nargs="+", help="Why did you get angry?")
    log_p.add_argument("--format", choices=["line", "block"], default="line")
    log_p.set_defaults(func=cmd_log)

    list_p = sub.add_parser("list", help="List entries (newest first)")
    list_p.add_argument("--limit", type=_non_negative_int, default=50)
    list_p.add_argument("--format", choices=["line", "block"], default="line")
    list_p.set_defaults(func=cmd_list)

    sub.add_parser("count", help="Show the anger count and progress").set_defaults(func=cmd_count)

    breathe = sub.add_parser("breathe", help="Guided breathing in the terminal")
    breathe.add_argument("--cycles", type=_non_negative_int, default=3, help="Inhale/exhale cycles (default 3)")
    breathe.set_defaults(func=cmd_breathe)

    sub.add_parser("where", help="Show which data file is active and why").set_defaults(func=cmd_where)
    sub.add_parser("doctor", help="Run safety + health checks").set_defaults(func=cmd_doctor)

    args = p.parse_args(argv)
    configure_logging(args.verbose)
    args.data_arg = args.data
    args.data_path = resolve_data_path(args.data, args.profile)

    assert_safe_data_path(args.data_path, args.allow_repo_data_path)
    args.func(args)


if __name__ == "__main__":
    main()
