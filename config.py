"""
Configuration settings for the multiscreen slideshow.
"""
import logging

FPS = 60

# ── Basic Application Settings ──────────────────────────────────────────────

# Description file used when none is given on the command line
SLIDESHOW_FILE = "slideshow.txt"

# Soundtrack restarted every time the slideshow loops ("" = silent)
SONG_PATH = "sounds/song.mp4"
SONG_VOLUME = 1.0

# Display settings
FULLSCREEN = True
WINDOWED_SIZE = (1280, 360)
BACKGROUND = (0, 0, 0)

SHOW_OVERLAYS = False

# ── Parser ─────────────────────────────────────────────────────────────────

# Require a newline after every `key = value` assignment
STRICT_NEWLINES = False

# ── Web remote ─────────────────────────────────────────────────────────────

WEB_REMOTE = True
WEB_PORT = 8080
DIAG_REFRESH_INTERVAL = 1.0

# ── Logging ────────────────────────────────────────────────────────────────

LOG_LEVEL = logging.INFO
LOG_FILE = "runtime.log"
