"""
timeline.py

Scheduled slideshow items and the ordered model that holds them.

Ordering rule
-------------
Items declared earlier in the description render *on top of* items
declared later.  A TimelineModel therefore iterates in draw order
(painter's algorithm): last-declared first, first-declared last.  Every
`add()` slides the new item beneath everything already present.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Iterator, List

from cursor import Vec2

DEFAULT_START    = 0.0
DEFAULT_DURATION = 5.0
DEFAULT_FADE_IN  = 1.0
DEFAULT_FADE_OUT = 1.0


def item_alpha(frame_time: float, start: float, duration: float,
               fade_in: float, fade_out: float) -> float:
    """
    Opacity in [0, 1] of an item at *frame_time*.  Fade-in wins over
    fade-out where the two windows overlap.
    """
    if frame_time < start:
        return 0.0

    elapsed = frame_time - start
    if elapsed >= duration:
        return 0.0

    if fade_in > 0 and elapsed < fade_in:
        return elapsed / fade_in
    remaining = duration - elapsed
    if fade_out > 0 and remaining < fade_out:
        return remaining / fade_out
    return 1.0


@dataclass(frozen=True)
class TimelineItem:
    source:     str
    position:   Vec2                    # canvas fraction, origin bottom-left
    size:       Vec2                    # canvas fraction
    start_time: float = DEFAULT_START
    duration:   float = DEFAULT_DURATION
    fade_in:    float = DEFAULT_FADE_IN
    fade_out:   float = DEFAULT_FADE_OUT

    @property
    def end_time(self) -> float:
        return self.start_time + self.duration

    def alpha(self, frame_time: float) -> float:
        return item_alpha(frame_time, self.start_time, self.duration,
                          self.fade_in, self.fade_out)


class TimelineModel:
    """Ordered, append-only collection of TimelineItems."""

    def __init__(self) -> None:
        self._declared: List[TimelineItem] = []     # declaration order
        self.total_loop_duration = 0.0

    def add(self, item: TimelineItem) -> None:
        """Insert *item* beneath every item already in the model."""
        self._declared.append(item)
        if item.end_time > self.total_loop_duration:
            self.total_loop_duration = item.end_time

    # ── views ------------------------------------------------------------
    def __iter__(self) -> Iterator[TimelineItem]:
        """Draw order: bottom-most (last declared) first."""
        return reversed(self._declared)

    def __len__(self) -> int:
        return len(self._declared)

    def __bool__(self) -> bool:
        return bool(self._declared)

    def draw_order(self) -> List[TimelineItem]:
        return list(self)

    def declaration_order(self) -> List[TimelineItem]:
        return list(self._declared)

    def sources(self) -> List[str]:
        """Unique source paths in declaration order."""
        seen: dict[str, None] = {}
        for item in self._declared:
            seen.setdefault(item.source, None)
        return list(seen)
