from __future__ import annotations

import math

CYCLE_SECONDS = 4.0
SCALE_MIN = 0.8
SCALE_MAX = 1.2

INSTRUCTION = "Focus on your breath. Inhale deeply, exhale slowly."


class BreathingPulse:
    """
    The one bit of state behind the meditation screen.

    mount() is the on-show hook: it flips `breathing` once so the circles
    start growing, later calls do nothing. toggle() reverses direction at
    the end of each half-cycle.
    """

    def __init__(self) -> None:
        self.breathing = False
        self.mounted = False

    def mount(self) -> bool:
        if self.mounted:
            return False
        self.mounted = True
        self.breathing = not self.breathing
        return True

    def toggle(self) -> None:
        self.breathing = not self.breathing

    @property
    def target_scale(self) -> float:
        return SCALE_MAX if self.breathing else SCALE_MIN

    @property
    def label(self) -> str:
        return "Inhale" if self.breathing else "Exhale"

    def scale_at(self, frac: float) -> float:
        """Eased scale `frac` of the way through the current half-cycle."""
        start = SCALE_MIN if self.breathing else SCALE_MAX
        frac = max(0.0, min(frac, 1.0))
        eased = (1 - math.cos(math.pi * frac)) / 2
        return start + (self.target_scale - start) * eased


def _cycle_position(elapsed: float) -> tuple[bool, float]:
    # (growing?, fraction through the current half-cycle)
    t = max(0.0, elapsed) % (2 * CYCLE_SECONDS)
    if t < CYCLE_SECONDS:
        return True, t / CYCLE_SECONDS
    return False, (t - CYCLE_SECONDS) / CYCLE_SECONDS


def eased_scale(elapsed: float) -> float:
    growing, frac = _cycle_position(elapsed)
    eased = (1 - math.cos(math.pi * frac)) / 2
    if not growing:
        eased = 1 - eased
    return SCALE_MIN + (SCALE_MAX - SCALE_MIN) * eased


def phase_label(elapsed: float) -> str:
    growing, _ = _cycle_position(elapsed)
    return "Inhale" if growing else "Exhale"
