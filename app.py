#!/usr/bin/env python3
"""
app.py – slideshow viewer

One pygame window spans the whole canvas.  Images from the parsed
timeline are blended in with their per-frame alpha; SPACE starts the
show, and every loop restarts the soundtrack.  Input is dispatched by
events.py.
"""
from __future__ import annotations

import logging
import os
from typing import Optional

import pygame

import config
from events import (ACT_QUIT, ACT_START, ACT_TOGGLE_FULLSCREEN,
                    ACT_TOGGLE_OVERLAY, EventManager)
from overlays import draw_overlay
from playback import SlideshowRuntime
from renderer import TextureCache, render_frame
from timeline import TimelineModel
from timing import wall_clock

log = logging.getLogger(__name__)


class SlideshowApp:
    def __init__(self, timeline: TimelineModel, song_path: Optional[str] = None):
        # window ----------------------------------------------------------
        pygame.init()
        pygame.mouse.set_visible(False)
        self.screen = self._set_mode()
        pygame.display.set_caption("multiscreen slideshow")
        self.clock = pygame.time.Clock()

        # core state ------------------------------------------------------
        self.runtime  = SlideshowRuntime(timeline)
        self.textures = TextureCache()
        self.textures.preload(timeline.sources())
        self.force_overlay = config.SHOW_OVERLAYS
        self.running  = False
        self.drawn    = 0

        # soundtrack (GStreamer is only needed when there is a song) -------
        song = config.SONG_PATH if song_path is None else song_path
        self.audio = None
        if song and not os.path.isfile(song):
            log.warning("soundtrack %s not found; playing silently", song)
        elif song:
            from audio_player import AudioPlayer
            self.audio = AudioPlayer()
            if self.audio.open(song):
                self.audio.set_volume(config.SONG_VOLUME)
                self.audio.check_loop(timeline.total_loop_duration)

    def _set_mode(self) -> pygame.Surface:
        return pygame.display.set_mode(
            (0, 0) if config.FULLSCREEN else config.WINDOWED_SIZE,
            pygame.FULLSCREEN if config.FULLSCREEN else 0,
        )

    # ── actions -----------------------------------------------------------
    def _dispatch(self, act: dict) -> None:
        t = act["type"]
        if t == ACT_QUIT:
            self.running = False
        elif t == ACT_START:
            self.runtime.start(wall_clock())
        elif t == ACT_TOGGLE_OVERLAY:
            self.force_overlay ^= True
        elif t == ACT_TOGGLE_FULLSCREEN:
            config.FULLSCREEN ^= True
            self.screen = self._set_mode()
            self.textures.clear_scaled()
            pygame.mouse.set_visible(False)
        else:
            log.warning("ignoring unknown action %r", act)

    # ── main loop ---------------------------------------------------------
    def run(self):
        self.running = True
        while self.running:
            for e in pygame.event.get():
                EventManager.handle(e)
            while (act := EventManager.poll()):
                self._dispatch(act)

            if self.runtime.tick(wall_clock()) and self.audio:
                self.audio.restart()

            self.drawn = render_frame(self.screen, self.runtime.visible(),
                                      self.textures, config.BACKGROUND)
            if self.force_overlay:
                draw_overlay(self.screen, self.runtime)

            pygame.display.flip()
            self.clock.tick(config.FPS)

        if self.audio:
            self.audio.close()
        pygame.quit()
