"""
overlays.py

Pygame debug overlay for the slideshow: loop position, visible items.
"""

from __future__ import annotations

import os, time, pygame

from playback import SlideshowRuntime

# ── colours ────────────────────────────────────────────────────────────────
WHITE = (255, 255, 255)
GREEN = (0, 255, 0)
RED   = (255,  50, 50)
YEL   = (200, 200, 50)
BG    = (0, 0, 0, 180)

pygame.font.init()


# ── helpers ────────────────────────────────────────────────────────────────
def _compute_font_sizes(h: int) -> tuple[int, int]:
    return max(12, h // 60), max(16, h // 45)


def _fmt_hms(sec: float) -> str:
    sec = int(max(0, sec))
    m, s = divmod(sec, 60)
    h, m = divmod(m, 60)
    return f"{h:02d}:{m:02d}:{s:02d}"


def overlay_lines(runtime: SlideshowRuntime) -> list[str]:
    """Text shown in the overlay panel (also served by the web remote)."""
    total = runtime.total_loop_duration
    if not runtime.started:
        return [f"Waiting for start  ({len(runtime.timeline)} items, "
                f"loop {_fmt_hms(total)})"]

    t = runtime.frame_time
    lines = [
        f"Position   {_fmt_hms(t)} / {_fmt_hms(total)}",
        f"Loop       #{runtime.loops}",
        "--  visible  --",
    ]
    for item, alpha in runtime.visible():
        lines.append(f"{os.path.basename(item.source)}  {alpha:4.2f}  "
                     f"ends in {_fmt_hms(item.end_time - t)}")
    return lines


def _panel(font: pygame.font.Font, lines: list[str], colour) -> pygame.Surface:
    widest = max(font.size(t)[0] for t in lines)
    pbg = pygame.Surface(
        (widest + 20, len(lines) * (font.get_linesize() + 2) + 10),
        pygame.SRCALPHA,
    )
    pbg.fill(BG)
    y = 5
    for t in lines:
        pbg.blit(font.render(t, True, colour), (10, y))
        y += font.get_linesize() + 2
    return pbg


# ── main entry point ───────────────────────────────────────────────────────
def draw_overlay(surface: pygame.Surface, runtime: SlideshowRuntime) -> None:
    sw, sh = surface.get_width(), surface.get_height()
    tiny_pt, small_pt = _compute_font_sizes(sh)
    FT = pygame.font.SysFont("monospace", tiny_pt)
    FS = pygame.font.SysFont("monospace", small_pt)

    # ── wall clock + CPU ─────────────────────────────────────────────────
    try:
        cpu_pct = os.getloadavg()[0] / os.cpu_count() * 100
    except (AttributeError, OSError):
        cpu_pct = 0.0
    clock_txt = f"{time.strftime('%H:%M:%S')}  CPU {cpu_pct:.0f}%"
    clockbg = _panel(FS, [clock_txt], YEL)
    surface.blit(clockbg, (10, 10))

    # ── playlist panel ──────────────────────────────────────────────────
    colour = WHITE if runtime.started else GREEN
    pbg = _panel(FT, overlay_lines(runtime), colour)
    surface.blit(pbg, (sw - pbg.get_width() - 10, 10))

    # ── bottom-right timestamp ──────────────────────────────────────────
    tsbg = _panel(FS, [f"{runtime.frame_time:06.2f}s"], RED if not runtime.started else WHITE)
    surface.blit(tsbg, (sw - tsbg.get_width() - 10, sh - tsbg.get_height() - 10))
