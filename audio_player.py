# =========  audio_player.py  =========
"""
GStreamer soundtrack player, restarted on every slideshow loop.

Public API
----------
open(path)       → preroll the file (paused at 0)
restart()        → seek to 0 and play
set_volume(0.0-1.0)
close() / stop()
probe_duration(path) → clip length in seconds (PyAV), 0.0 on failure
Properties
----------
.path     → current file path
.duration → probed length in seconds
"""
from __future__ import annotations

import logging
import os

import av  # PyAV – thin FFmpeg bindings
import gi
gi.require_version("Gst", "1.0")
from gi.repository import Gst

log = logging.getLogger(__name__)


def probe_duration(fp: str) -> float:
    """Best-effort clip length in seconds (0.0 on failure)."""
    try:
        with av.open(fp) as c:
            a  = next((s for s in c.streams if s.type == "audio"), None)
            s  = a or c.streams[0]
            if s.duration and s.time_base:
                return float(s.duration * s.time_base)
            if c.duration:
                return c.duration / av.time_base
    except (av.FFmpegError, OSError, IndexError) as e:
        log.warning("could not probe %s: %s", fp, e)
    return 0.0


# ────────────────────────────────────────────────────────────────────────────
class AudioPlayer:
    def __init__(self):
        Gst.init(None)

        # playbin with video discarded; only the audio track matters
        self.player = Gst.ElementFactory.make("playbin", "soundtrack")
        self.player.set_property("video-sink",
                                 Gst.ElementFactory.make("fakesink", "novideo"))
        self.player.set_property("audio-sink",
                                 Gst.ElementFactory.make("autoaudiosink", "aud"))
        self.path     = ""
        self.duration = 0.0

    # ── public API ──────────────────────────────────────────────────────────
    def open(self, fp: str) -> bool:
        """Preroll *fp*; False (and silence) if it is missing or unplayable."""
        self.close()
        if not os.path.isfile(fp):
            log.warning("soundtrack %s not found; playing silently", fp)
            return False

        self.player.set_property("uri", Gst.filename_to_uri(os.path.abspath(fp)))
        self.player.set_state(Gst.State.PAUSED)

        bus = self.player.get_bus()
        msg = bus.timed_pop_filtered(
            5 * Gst.SECOND,
            Gst.MessageType.ASYNC_DONE | Gst.MessageType.ERROR,
        )
        if msg and msg.type == Gst.MessageType.ERROR:
            log.error("GStreamer error: %s", msg.parse_error()[0])
            self.player.set_state(Gst.State.NULL)
            return False

        self.path     = fp
        self.duration = probe_duration(fp)
        return True

    def check_loop(self, loop_duration: float) -> None:
        if self.path and self.duration > loop_duration > 0:
            log.warning("soundtrack (%.1fs) is longer than the slideshow loop "
                        "(%.1fs); it will be cut off", self.duration, loop_duration)

    def restart(self):
        if not self.path:
            return
        log.info("Starting song...")
        self.player.seek_simple(
            Gst.Format.TIME,
            Gst.SeekFlags.FLUSH | Gst.SeekFlags.ACCURATE,
            0,
        )
        self.player.set_state(Gst.State.PLAYING)

    def set_volume(self, vol: float):
        self.player.set_property("volume", max(0.0, min(1.0, vol)))

    def close(self):
        self.player.set_state(Gst.State.NULL)
        self.path = ""

    stop = close  # alias
