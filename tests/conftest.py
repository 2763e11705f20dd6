""" Shared fixtures. Pygame runs headless for the whole session. """

import os

os.environ.setdefault("SDL_VIDEODRIVER", "dummy")
os.environ.setdefault("SDL_AUDIODRIVER", "dummy")
os.environ.setdefault("PYGAME_HIDE_SUPPORT_PROMPT", "1")

import pytest

from events import EventManager


@pytest.fixture
def event_queue():
    """ The action queue is process-wide; start and finish each test with it empty. """
    EventManager.clear()
    yield EventManager
    EventManager.clear()


@pytest.fixture
def slideshow_file(tmp_path):
    """ Write a description to a temporary file and return its path. """
    def write(text: str) -> str:
        path = tmp_path / "slideshow.txt"
        path.write_text(text, encoding="utf-8")
        return str(path)
    return write
