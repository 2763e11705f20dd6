"""
renderer.py – draws visible timeline items onto the canvas window.

The window is the whole canvas: item coordinates are canvas fractions
with the origin bottom-left, pygame's origin is top-left.
"""
from __future__ import annotations

import logging
from typing import Dict, Iterable, Tuple

import pygame

from timeline import TimelineItem

log = logging.getLogger(__name__)

Rect = Tuple[int, int, int, int]


def canvas_rect(item: TimelineItem, screen_size: Tuple[int, int]) -> Rect:
    """Pixel (x, y, w, h) of *item* on a surface of *screen_size*."""
    sw, sh = screen_size
    w = int(round(item.size.x * sw))
    h = int(round(item.size.y * sh))
    x = int(round(item.position.x * sw))
    y = sh - int(round(item.position.y * sh)) - h
    return x, y, w, h


class TextureCache:
    """Loads each source once; keeps one scaled copy per target size."""

    def __init__(self) -> None:
        self._raw: Dict[str, pygame.Surface] = {}
        self._scaled: Dict[Tuple[str, int, int], pygame.Surface] = {}

    def __len__(self) -> int:
        return len(self._raw)

    def preload(self, sources: Iterable[str]) -> None:
        for src in sources:
            self.raw(src)

    def raw(self, src: str) -> pygame.Surface:
        surf = self._raw.get(src)
        if surf is None:
            try:
                surf = pygame.image.load(src).convert_alpha()
            except (pygame.error, FileNotFoundError) as e:
                log.warning("could not load %s: %s", src, e)
                surf = pygame.Surface((1, 1), pygame.SRCALPHA)
            self._raw[src] = surf
        return surf

    def scaled(self, src: str, w: int, h: int) -> pygame.Surface:
        key = (src, w, h)
        surf = self._scaled.get(key)
        if surf is None:
            surf = pygame.transform.smoothscale(self.raw(src), (w, h))
            self._scaled[key] = surf
        return surf

    def clear_scaled(self) -> None:
        self._scaled.clear()


def render_frame(screen: pygame.Surface,
                 visible: Iterable[Tuple[TimelineItem, float]],
                 textures: TextureCache,
                 background=(0, 0, 0)) -> int:
    """
    Clear *screen* and blend each (item, alpha) pair in order.  Returns
    the number of items drawn.
    """
    screen.fill(background)
    size  = screen.get_size()
    drawn = 0
    for item, alpha in visible:
        x, y, w, h = canvas_rect(item, size)
        if w <= 0 or h <= 0:
            continue
        surf = textures.scaled(item.source, w, h)
        surf.set_alpha(int(round(alpha * 255)))
        screen.blit(surf, (x, y))
        drawn += 1
    return drawn
