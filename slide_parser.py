"""
slide_parser.py

Recursive-descent interpreter for slideshow description files.

The description first sets the canvas size, then lists the images that
make up the show.  Since every position and size is divided by the
canvas size, pixels and monitor counts are equally valid units:

    screen = 3, 1
    imageDir = "images/"
    captionDir = "captions/"

    slide "title.jpg" 6

    image 4 2, 1 1a 3a

    customimage "logo.png" {
        position = 2.5, 0.5
        size = 0.5, 0.5
        start = 0
        duration = 30
        fadeIn = 2
        fadeOut = 2
    }

Directives
----------
screen = w, h                 canvas size, exactly once, before any image
imageDir / captionDir = "…"   path prefixes for the directives that follow
slide "file" secs             sequential full-height slide
image num w, h <col><row> <col><row>
                              compact form: numbered image plus its caption
image "file" { … }            block form, file relative to imageDir
customimage "file" { … }      block form, keys position, size, start,
                              duration, fadeIn, fadeOut

Images earlier in the file show on top of images further down.  Any
grammar violation raises cursor.ParseError carrying line and column.
"""

from __future__ import annotations

import logging
from typing import Optional

import config
from cursor import Cursor, ParseError, Vec2
from timeline import (DEFAULT_DURATION, DEFAULT_FADE_IN, DEFAULT_FADE_OUT,
                      DEFAULT_START, TimelineItem, TimelineModel)

log = logging.getLogger(__name__)

# ── compact-form constants ─────────────────────────────────────────────────
SLIDE_POSITION     = Vec2(1.0, 0.0)     # raw canvas units
SLIDE_SIZE         = Vec2(4.0, 4.0)
SLIDE_FADE_PAD     = 2.0                # added to a slide's duration for fades
SLIDE_GAP          = 1.0                # extra pause before the next slide
COMPACT_DURATION   = 12.0
COMPACT_LAST_NUM   = 99                 # file number naming the closing image
CAPTION_SIZE       = Vec2(1.0, 1.0)

# block property key → (TimelineItem field, reads a Vec2)
_BLOCK_KEYS = {
    "position": ("position",   True),
    "size":     ("size",       True),
    "start":    ("start_time", False),
    "duration": ("duration",   False),
    "fadeIn":   ("fade_in",    False),
    "fadeOut":  ("fade_out",   False),
}


class SlideshowParser:
    """One-shot interpreter: construct with the text, call parse() once."""

    def __init__(self, text: str, strict_newlines: Optional[bool] = None):
        self.cur = Cursor(text)
        self.strict_newlines = (config.STRICT_NEWLINES if strict_newlines is None
                                else strict_newlines)

        self.timeline = TimelineModel()
        self.screen: Optional[Vec2] = None
        self.image_dir   = ""
        self.caption_dir = ""
        self.load_start_time = 0.0
        self.index = 1

    # ── top level ---------------------------------------------------------
    def parse(self) -> TimelineModel:
        cur = self.cur
        while not cur.at_end():
            cur.skip_whitespace(newlines=True)
            if cur.at_end():
                break

            if cur.try_consume_word("screen"):
                self._screen()
            elif cur.try_consume_word("imageDir"):
                self.image_dir = self._directory()
                log.info("Image directory: %s", self.image_dir)
            elif cur.try_consume_word("captionDir"):
                self.caption_dir = self._directory()
                log.info("Caption directory: %s", self.caption_dir)
            elif cur.try_consume_word("slide"):
                self._slide()
            elif cur.try_consume_word("customimage"):
                self._custom_image()
            elif cur.try_consume_word("image"):
                self._image()
            else:
                line, col = cur.line, cur.column
                log.debug("skipping %r at %d:%d", cur.advance(), line, col)

        return self.timeline

    # ── helpers -----------------------------------------------------------
    def _end_assignment(self, in_block: bool = False) -> None:
        """Newline after an assignment; mandatory only in strict mode."""
        cur = self.cur
        if not self.strict_newlines or cur.at_end():
            return
        if in_block and cur.peek() == "}":
            return
        cur.expect("\n")

    def _require_screen(self) -> Vec2:
        if self.screen is None:
            raise self.cur.error(
                "screen dimensions have not been set, cannot define an image")
        return self.screen

    def _normalize(self, v: Vec2) -> Vec2:
        screen = self._require_screen()
        return Vec2(v.x / screen.x, v.y / screen.y)

    def _add(self, item: TimelineItem) -> None:
        log.info("Loading %s", item.source)
        self.timeline.add(item)

    def _compact_position(self) -> Vec2:
        """'<col><row letter>', 1-based column, row 'a' = 0."""
        col = int(self.cur.read_float()) - 1
        row = ord(self.cur.advance()) - ord("a")
        return Vec2(float(col), float(row))

    # ── directives --------------------------------------------------------
    def _screen(self) -> None:
        if self.screen is not None:
            raise self.cur.error("screen dimensions have already been set")

        screen = self.cur.read_assigned_vec2()
        if screen.x == 0 or screen.y == 0:
            raise self.cur.error("screen dimensions must be non-zero")
        self._end_assignment()
        self.screen = screen
        log.info("Screen: %g, %g", screen.x, screen.y)

    def _directory(self) -> str:
        path = self.cur.read_assigned_string()
        self._end_assignment()
        return path

    def _slide(self) -> None:
        self._require_screen()
        cur = self.cur

        cur.skip_whitespace()
        name = cur.read_quoted_string()
        cur.skip_whitespace()
        seconds = cur.read_float()

        self._add(TimelineItem(
            source=self.image_dir + name,
            position=self._normalize(SLIDE_POSITION),
            size=self._normalize(SLIDE_SIZE),
            start_time=self.load_start_time,
            duration=seconds + SLIDE_FADE_PAD,
            fade_in=1.0,
            fade_out=1.0,
        ))
        self.load_start_time += seconds + SLIDE_FADE_PAD + SLIDE_GAP

    def _image(self) -> None:
        self._require_screen()
        cur = self.cur

        cur.skip_whitespace()
        if cur.peek() == '"':
            name = cur.read_quoted_string()
            self._block_item(self.image_dir + name)
            return

        file_num = int(cur.read_float())
        cur.skip_whitespace()
        size = cur.read_vec2()
        cur.skip_whitespace()
        image_pos = self._compact_position()
        cur.skip_whitespace()
        caption_pos = self._compact_position()

        if file_num != COMPACT_LAST_NUM:
            image_src   = f"{self.image_dir}{self.index}-{file_num}.jpg"
            caption_src = f"{self.caption_dir}{file_num}-C.jpg"
        else:
            image_src   = f"{self.image_dir}{self.index}-last.jpg"
            caption_src = f"{self.caption_dir}Last-C.jpg"
        self.index += 1

        timing = dict(start_time=self.load_start_time, duration=COMPACT_DURATION,
                      fade_in=1.0, fade_out=1.0)
        # caption goes in second so it sits beneath its image
        self._add(TimelineItem(image_src, self._normalize(image_pos),
                               self._normalize(size), **timing))
        self._add(TimelineItem(caption_src, self._normalize(caption_pos),
                               self._normalize(CAPTION_SIZE), **timing))
        self.load_start_time += COMPACT_DURATION + SLIDE_GAP

    def _custom_image(self) -> None:
        self._require_screen()
        self.cur.skip_whitespace()
        name = self.cur.read_quoted_string()
        self._block_item(name)

    def _block_item(self, source: str) -> None:
        cur = self.cur
        props = {
            "position":   Vec2(0.0, 0.0),
            "size":       Vec2(0.0, 0.0),
            "start_time": DEFAULT_START,
            "duration":   DEFAULT_DURATION,
            "fade_in":    DEFAULT_FADE_IN,
            "fade_out":   DEFAULT_FADE_OUT,
        }

        cur.skip_whitespace(newlines=True)
        cur.expect("{")
        while True:
            cur.skip_whitespace(newlines=True)
            if cur.at_end():
                raise cur.error("expected '}'")
            if cur.peek() == "}":
                cur.advance()
                break

            for key, (field, is_vec) in _BLOCK_KEYS.items():
                if cur.try_consume_word(key):
                    props[field] = (cur.read_assigned_vec2() if is_vec
                                    else cur.read_assigned_float())
                    self._end_assignment(in_block=True)
                    break
            else:
                raise cur.error("unexpected character")

        cur.skip_whitespace()
        if not cur.at_end():
            cur.expect("\n")

        props["position"] = self._normalize(props["position"])
        props["size"]     = self._normalize(props["size"])
        self._add(TimelineItem(source, **props))


# ── entry points ───────────────────────────────────────────────────────────
def parse_text(text: str, strict_newlines: Optional[bool] = None) -> TimelineModel:
    return SlideshowParser(text, strict_newlines).parse()


def parse_file(path: str, strict_newlines: Optional[bool] = None) -> TimelineModel:
    """Read *path* whole and parse it."""
    with open(path, "r", encoding="utf-8") as f:
        text = f.read()
    log.info("Running slideshow from file '%s'", path)
    return parse_text(text, strict_newlines)


__all__ = ["ParseError", "SlideshowParser", "parse_file", "parse_text"]
