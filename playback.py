"""
playback.py

Per-frame scheduler for a parsed slideshow.

A SlideshowRuntime owns the TimelineModel and its PlaybackClock.  The
render loop calls `tick(now)` once per frame; nothing here keeps its own
timer.

    NotStarted ──start(now)──▶ Running      (no way back)

While Running, every tick folds the elapsed time into the loop and
reports whether the loop just wrapped.  The very first Running tick also
counts as a wrap so a soundtrack can be started in step with frame 0.
"""

from __future__ import annotations

import logging
import math
from dataclasses import dataclass
from typing import Iterator, List, Tuple

from timeline import TimelineItem, TimelineModel
from timing import wrap_time

log = logging.getLogger(__name__)


@dataclass
class PlaybackClock:
    started: bool = False
    frame_start: float = 0.0
    frame_time: float = 0.0
    previous_frame_time: float = math.inf


class SlideshowRuntime:
    def __init__(self, timeline: TimelineModel, clock: PlaybackClock | None = None):
        self.timeline = timeline
        self.clock    = clock or PlaybackClock()
        self.loops    = 0               # wraps seen so far, first frame included
        if timeline and timeline.total_loop_duration <= 0:
            log.warning("slideshow has zero total duration; nothing will be shown")

    @property
    def started(self) -> bool:
        return self.clock.started

    @property
    def frame_time(self) -> float:
        return self.clock.frame_time

    @property
    def total_loop_duration(self) -> float:
        return self.timeline.total_loop_duration

    # ── state transitions -------------------------------------------------
    def start(self, now: float) -> bool:
        """NotStarted → Running.  Returns False if already running."""
        if self.clock.started:
            return False
        self.clock.started     = True
        self.clock.frame_start = now
        log.info("Playback started (loop %.1fs, %d items)",
                 self.total_loop_duration, len(self.timeline))
        return True

    def tick(self, now: float) -> bool:
        """
        Advance the clock to *now*.  True exactly when the loop wrapped on
        this tick; always False before start().
        """
        clock = self.clock
        if not clock.started:
            return False

        clock.frame_time = wrap_time(now - clock.frame_start, self.total_loop_duration)
        wrapped = clock.frame_time < clock.previous_frame_time
        clock.previous_frame_time = clock.frame_time

        if wrapped:
            self.loops += 1
            log.debug("loop wrap #%d at %.3fs", self.loops, clock.frame_time)
        return wrapped

    # ── per-item opacity --------------------------------------------------
    def alphas(self) -> List[Tuple[TimelineItem, float]]:
        """(item, alpha) for every item, in draw order."""
        t = self.clock.frame_time
        return [(item, item.alpha(t)) for item in self.timeline]

    def visible(self) -> Iterator[Tuple[TimelineItem, float]]:
        """Draw-order (item, alpha) pairs with alpha > 0; empty before start."""
        if not self.clock.started:
            return
        t = self.clock.frame_time
        for item in self.timeline:
            a = item.alpha(t)
            if a > 0.0:
                yield item, a
