from __future__ import annotations

import logging
import time
import tkinter as tk
import traceback
from tkinter import messagebox, ttk

from ._util import _fmt_date
from .logconfig import configure_logging
from .meditation import CYCLE_SECONDS, INSTRUCTION, SCALE_MIN, BreathingPulse
from .paths import resolve_data_path
from .persistence import PersistenceAdapter
from .safety import assert_safe_data_path
from .storage import JsonFileStorage
from .store import EntryStore, Snapshot

log = logging.getLogger(__name__)

PURPLE = "#7e3fb0"
PURPLE_SOFT = "#b48fd4"
PURPLE_PALE = "#efe6f7"
PINK = "#e0559b"

RING_SIZE = 150
RING_WIDTH = 15

FRAME_MS = 40

# (radius, fill, outline, width) for the breathing circles, back to front
CIRCLES = [
    (150, PURPLE_PALE, "", 0),
    (125, "", "#d7c3ea", 20),
    (100, PURPLE, "", 0),
    (90, "", "#ffffff", 5),
]


class SereneMindApp(tk.Tk):
    def __init__(self, store: EntryStore, data_label: str = ""):
        super().__init__()
        self.title("SereneMind")
        self.geometry("480x720")
        self.store = store
        self.data_label = data_label

        self.pulse = BreathingPulse()
        self._half_cycle_started_at: float | None = None
        self._breath_job: str | None = None

        self._build_tabs()
        self._render(self.store.snapshot())
        self._unsubscribe = self.store.subscribe(self._render)
        self.protocol("WM_DELETE_WINDOW", self._on_close)

    # -------- Crash guard --------

    def report_callback_exception(self, exc, val, tb):  # type: ignore[override]
        traceback.print_exception(exc, val, tb)
        try:
            messagebox.showerror("Crash prevented", f"{exc.__name__}: {val}")
        except tk.TclError:
            pass

    def _safe_cmd(self, fn):
        def wrapped(*args, **kwargs):
            try:
                return fn(*args, **kwargs)
            except Exception as e:
                log.exception("Command %s failed", getattr(fn, "__name__", fn))
                try:
                    messagebox.showerror("Crash prevented", f"{type(e).__name__}: {e}")
                except tk.TclError:
                    pass
                return None

        return wrapped

    def _on_close(self) -> None:
        if self._breath_job:
            self.after_cancel(self._breath_job)
            self._breath_job = None
        self._unsubscribe()
        self.destroy()

    # -------------------------
    # Tabs
    # -------------------------

    def _build_tabs(self) -> None:
        self.nb = ttk.Notebook(self)
        self.nb.pack(fill="both", expand=True, padx=10, pady=10)

        self.tab_tracker = ttk.Frame(self.nb, padding=10)
        self.tab_meditation = ttk.Frame(self.nb, padding=10)

        self.nb.add(self.tab_tracker, text="Tracker")
        self.nb.add(self.tab_meditation, text="Meditation")

        self._build_tracker_tab()
        self._build_meditation_tab()

        self.nb.bind("<<NotebookTabChanged>>", self._on_tab_changed)

    def _on_tab_changed(self, _evt=None) -> None:
        if self.nb.select() == str(self.tab_meditation) and self.pulse.mount():
            # one deferred flip once the tab is actually on screen
            self.after_idle(self._start_breathing)

    # -------------------------
    # Tracker tab
    # -------------------------

    def _build_tracker_tab(self) -> None:
        top = ttk.Frame(self.tab_tracker)
        top.pack(fill="x", pady=(10, 10))

        pad = RING_WIDTH
        side = RING_SIZE + 2 * pad
        self.ring = tk.Canvas(top, width=side, height=side, highlightthickness=0)
        self.ring.pack()
        box = (pad, pad, pad + RING_SIZE, pad + RING_SIZE)
        self.ring.create_oval(*box, outline=PURPLE_PALE, width=RING_WIDTH)
        self._ring_arc = self.ring.create_arc(
            *box, start=90, extent=0, style="arc", outline=PINK, width=RING_WIDTH
        )
        self._ring_text = self.ring.create_text(
            side / 2, side / 2, text="0", fill=PURPLE, font=("TkDefaultFont", 32, "bold")
        )

        ttk.Label(top, text="Anger Count", foreground=PURPLE_SOFT, font=("TkDefaultFont", 12, "bold")).pack()

        form = ttk.Frame(self.tab_tracker)
        form.pack(fill="x", pady=(0, 10))

        ttk.Label(form, text="Why did you get angry?").pack(anchor="w")
        self.reason_var = tk.StringVar()
        entry = ttk.Entry(form, textvariable=self.reason_var)
        entry.pack(fill="x", pady=(0, 8))
        entry.bind("<Return>", lambda _e: self._safe_cmd(self._submit)())

        ttk.Button(form, text="Log Anger", command=self._safe_cmd(self._submit)).pack(fill="x")

        ttk.Separator(self.tab_tracker).pack(fill="x", pady=(0, 8))
        ttk.Label(
            self.tab_tracker,
            text="Anger log (newest first)",
            font=("TkDefaultFont", 12, "bold"),
        ).pack(anchor="w")

        list_frame = ttk.Frame(self.tab_tracker, relief="sunken", borderwidth=1)
        list_frame.pack(fill="both", expand=True, pady=8)
        self.log_list = tk.Listbox(list_frame, height=14, borderwidth=0, highlightthickness=0)
        sb = ttk.Scrollbar(list_frame, orient="vertical", command=self.log_list.yview)
        self.log_list.configure(yscrollcommand=sb.set)
        sb.pack(side="right", fill="y")
        self.log_list.pack(side="left", fill="both", expand=True)

        if self.data_label:
            ttk.Label(self.tab_tracker, text=self.data_label, foreground="#666").pack(anchor="w")

    def _submit(self) -> None:
        reason = self.reason_var.get()
        if not reason.strip():
            return
        self.store.add_entry(reason)
        self.reason_var.set("")

    def _render(self, snap: Snapshot) -> None:
        self.ring.itemconfigure(self._ring_arc, extent=-359.99 * snap.progress)
        self.ring.itemconfigure(self._ring_text, text=str(snap.count))

        self.log_list.delete(0, tk.END)
        for e in snap.recent_first:
            self.log_list.insert(tk.END, f"{e.reason} — {_fmt_date(e.date.astimezone())}")

    # -------------------------
    # Meditation tab
    # -------------------------

    def _build_meditation_tab(self) -> None:
        ttk.Label(
            self.tab_meditation,
            text="Meditation",
            foreground=PURPLE,
            font=("TkDefaultFont", 24, "bold"),
        ).pack(pady=(10, 0))

        size = 2 * int(CIRCLES[0][0] * 1.2) + 20
        self.breath_canvas = tk.Canvas(self.tab_meditation, width=size, height=size, highlightthickness=0)
        self.breath_canvas.pack(expand=True)
        self._breath_center = size / 2
        self._circle_items = [
            self.breath_canvas.create_oval(0, 0, 0, 0, fill=fill, outline=outline, width=width)
            for _r, fill, outline, width in CIRCLES
        ]
        self._draw_circles(SCALE_MIN)

        self.breath_phase_var = tk.StringVar(value="")
        ttk.Label(self.tab_meditation, textvariable=self.breath_phase_var, foreground=PURPLE_SOFT).pack()

        ttk.Label(
            self.tab_meditation,
            text=INSTRUCTION,
            foreground=PURPLE_SOFT,
            wraplength=360,
            justify="center",
        ).pack(pady=(0, 20))

    def _draw_circles(self, scale: float) -> None:
        c = self._breath_center
        for item, (radius, *_rest) in zip(self._circle_items, CIRCLES):
            r = radius * scale
            self.breath_canvas.coords(item, c - r, c - r, c + r, c + r)

    def _start_breathing(self) -> None:
        self._half_cycle_started_at = time.monotonic()
        self._breath_tick()

    def _breath_tick(self) -> None:
        if self._half_cycle_started_at is None:
            return
        frac = (time.monotonic() - self._half_cycle_started_at) / CYCLE_SECONDS
        while frac >= 1.0:
            # end of a half-cycle: reverse direction
            self.pulse.toggle()
            self._half_cycle_started_at += CYCLE_SECONDS
            frac -= 1.0

        self.breath_phase_var.set(self.pulse.label)
        self._draw_circles(self.pulse.scale_at(frac))
        self._breath_job = self.after(FRAME_MS, self._breath_tick)


# -------------------------
# GUI Entrypoint
# -------------------------


def run_gui(argv=None) -> None:
    configure_logging()
    data_path = resolve_data_path(None, None)
    assert_safe_data_path(data_path, allow_repo_data_path=False)
    store = EntryStore(PersistenceAdapter(JsonFileStorage(data_path)))
    app = SereneMindApp(store, data_label=str(data_path))
    app.mainloop()


if __name__ == "__main__":
    run_gui()
