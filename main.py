"""
main.py – command-line entry point.

    slideshow [file] [--check] [--strict-newlines] [--windowed] …

Parse errors are printed as "At <line>:<column>, <message>" and exit
with status 1.
"""
from __future__ import annotations

import argparse
import logging
import sys

import config
from cursor import ParseError
from logging_config import setup_logging
from slide_parser import parse_file
from timeline import TimelineModel


def build_parser() -> argparse.ArgumentParser:
    ap = argparse.ArgumentParser(description="Multiscreen slideshow player")
    ap.add_argument("file", nargs="?", default=config.SLIDESHOW_FILE,
                    help=f"slideshow description (default: {config.SLIDESHOW_FILE})")
    ap.add_argument("--check", action="store_true",
                    help="parse, print the timeline and exit")
    ap.add_argument("--strict-newlines", action=argparse.BooleanOptionalAction,
                    default=config.STRICT_NEWLINES,
                    help="require a newline after every assignment")
    ap.add_argument("--windowed", action="store_true",
                    help="run in a window instead of fullscreen")
    ap.add_argument("--no-remote", action="store_true",
                    help="do not start the web remote")
    ap.add_argument("--port", type=int, default=config.WEB_PORT)
    ap.add_argument("--song", default=None,
                    help=f"soundtrack restarted on every loop (default: {config.SONG_PATH})")
    ap.add_argument("--log-file", default=config.LOG_FILE)
    ap.add_argument("-v", "--verbose", action="store_true")
    return ap


def format_timeline(timeline: TimelineModel) -> list[str]:
    """Table of items in draw order, bottom-most first."""
    lines = [f"{'start':>7} {'dur':>6} {'in':>4} {'out':>4}  "
             f"{'x':>6} {'y':>6} {'w':>6} {'h':>6}  source"]
    for it in timeline:
        lines.append(
            f"{it.start_time:7.2f} {it.duration:6.2f} {it.fade_in:4.1f} {it.fade_out:4.1f}  "
            f"{it.position.x:6.3f} {it.position.y:6.3f} {it.size.x:6.3f} {it.size.y:6.3f}  "
            f"{it.source}"
        )
    lines.append(f"{len(timeline)} items, loop {timeline.total_loop_duration:.2f}s")
    return lines


def main(argv: list[str] | None = None) -> int:
    args = build_parser().parse_args(argv)
    setup_logging(logging.DEBUG if args.verbose else config.LOG_LEVEL,
                  None if args.check else args.log_file)

    try:
        timeline = parse_file(args.file, args.strict_newlines)
    except ParseError as e:
        print(f"{args.file}: {e}", file=sys.stderr)
        return 1
    except UnicodeDecodeError as e:
        print(f"{args.file}: cannot decode as UTF-8: {e}", file=sys.stderr)
        return 1
    except OSError as e:
        print(f"cannot read slideshow file: {e}", file=sys.stderr)
        return 1

    if args.check:
        print("\n".join(format_timeline(timeline)))
        return 0

    if args.windowed:
        config.FULLSCREEN = False

    from app import SlideshowApp
    import web_remote

    show = SlideshowApp(timeline, args.song)
    if config.WEB_REMOTE and not args.no_remote:
        web_remote.start(show, args.port)
    show.run()
    return 0


if __name__ == "__main__":
    sys.exit(main())
