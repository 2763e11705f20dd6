#!/usr/bin/env python3
"""
events.py  – central hub

• Translates raw Pygame events to high-level action dicts.
• Exposes a thread-safe queue so the web remote can inject the same
  actions ("start", "quit", …) the keyboard produces.
"""

from __future__ import annotations
import queue
from pygame.locals import *

Action = dict      # alias for readability

# action types understood by SlideshowApp
ACT_START             = "start"
ACT_QUIT              = "quit"
ACT_TOGGLE_OVERLAY    = "toggle_overlay"
ACT_TOGGLE_FULLSCREEN = "toggle_fullscreen"


class EventManager:
    _fifo: "queue.Queue[Action]" = queue.Queue()      # global, thread-safe

    # ── SDL / keyboard path ────────────────────────────────────────────
    @classmethod
    def handle(cls, event) -> None:
        """Translate one Pygame event → action and enqueue it."""
        act = cls._translate_pygame(event)
        if act:
            cls._fifo.put(act)

    # ── external / programmatic path ───────────────────────────────────
    @classmethod
    def post(cls, action: Action) -> None:
        """
        Any thread may call this to inject an already-formed action dict, e.g.:
            EventManager.post({"type": "start"})
        """
        cls._fifo.put(action)

    # ── main-loop consumer ─────────────────────────────────────────────
    @classmethod
    def poll(cls) -> Action | None:
        """Return next queued action or None (non-blocking)."""
        try:
            return cls._fifo.get_nowait()
        except queue.Empty:
            return None

    @classmethod
    def clear(cls) -> None:
        while cls.poll() is not None:
            pass

    # ── internal translator ───────────────────────────────────────────
    @staticmethod
    def _translate_pygame(event) -> Action | None:
        if event.type == QUIT:
            return {"type": ACT_QUIT}

        if event.type == KEYDOWN:
            if event.key in (K_ESCAPE, K_q):
                return {"type": ACT_QUIT}
            if event.key == K_SPACE:
                return {"type": ACT_START}
            if event.key == K_i:
                return {"type": ACT_TOGGLE_OVERLAY}
            if event.key == K_f:
                return {"type": ACT_TOGGLE_FULLSCREEN}

        return None
