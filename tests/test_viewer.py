""" Headless tests for the pygame-facing pieces: input, canvas mapping, drawing, remote. """

import pygame
import pytest

import web_remote
from cursor import Vec2
from events import ACT_QUIT, ACT_START, ACT_TOGGLE_FULLSCREEN, ACT_TOGGLE_OVERLAY
from overlays import overlay_lines
from playback import SlideshowRuntime
from renderer import TextureCache, canvas_rect, render_frame
from slide_parser import parse_text
from timeline import TimelineItem


@pytest.mark.parametrize("event, action", [
    (pygame.event.Event(pygame.QUIT), ACT_QUIT),
    (pygame.event.Event(pygame.KEYDOWN, key=pygame.K_ESCAPE), ACT_QUIT),
    (pygame.event.Event(pygame.KEYDOWN, key=pygame.K_q), ACT_QUIT),
    (pygame.event.Event(pygame.KEYDOWN, key=pygame.K_SPACE), ACT_START),
    (pygame.event.Event(pygame.KEYDOWN, key=pygame.K_i), ACT_TOGGLE_OVERLAY),
    (pygame.event.Event(pygame.KEYDOWN, key=pygame.K_f), ACT_TOGGLE_FULLSCREEN),
])
def test_key_translation(event_queue, event, action) -> None:
    event_queue.handle(event)
    assert event_queue.poll() == {"type": action}
    assert event_queue.poll() is None


def test_unmapped_keys_are_ignored(event_queue) -> None:
    event_queue.handle(pygame.event.Event(pygame.KEYDOWN, key=pygame.K_a))
    event_queue.handle(pygame.event.Event(pygame.KEYUP, key=pygame.K_SPACE))
    assert event_queue.poll() is None


def _item(x, y, w, h, source="missing.png") -> TimelineItem:
    return TimelineItem(source, Vec2(x, y), Vec2(w, h), 0.0, 10.0, 0.0, 0.0)


def test_canvas_rect_flips_vertical_axis() -> None:
    size = (800, 600)
    assert canvas_rect(_item(0.0, 0.0, 0.5, 1.0), size) == (0, 0, 400, 600)
    assert canvas_rect(_item(0.0, 0.0, 0.25, 0.25), size) == (0, 450, 200, 150)
    assert canvas_rect(_item(0.5, 0.5, 0.25, 0.5), size) == (400, 0, 200, 300)


def test_render_frame_skips_empty_items() -> None:
    screen = pygame.Surface((100, 50))
    textures = TextureCache()
    visible = [(_item(0.0, 0.0, 0.5, 0.5), 0.5), (_item(0.0, 0.0, 0.0, 0.0), 1.0)]
    assert render_frame(screen, visible, textures) == 1
    # A missing file falls back to a transparent placeholder, loaded once.
    assert textures.raw("missing.png") is textures.raw("missing.png")


def test_overlay_lines() -> None:
    rt = SlideshowRuntime(parse_text('screen = 1, 1\nslide "dir/a.jpg" 3\n'))
    assert overlay_lines(rt) == ["Waiting for start  (1 items, loop 00:00:05)"]
    rt.start(0.0)
    rt.tick(2.0)
    lines = overlay_lines(rt)
    assert lines[0] == "Position   00:00:02 / 00:00:05"
    assert lines[-1] == "a.jpg  1.00  ends in 00:00:03"


def test_timeline_payload() -> None:
    rt = SlideshowRuntime(parse_text('screen = 2, 1\nslide "a.jpg" 3\nslide "b.jpg" 3\n'))
    data = web_remote.timeline_payload(rt)
    assert data["started"] is False
    assert data["totalLoop"] == 11.0
    assert [i["source"] for i in data["items"]] == ["b.jpg", "a.jpg"]
    assert all(i["alpha"] == 0.0 for i in data["items"])

    rt.start(0.0)
    rt.tick(2.0)
    data = web_remote.timeline_payload(rt)
    a = data["items"][1]
    assert a["alpha"] == 1.0
    assert a["position"] == [0.5, 0.0]
    assert a["size"] == [2.0, 4.0]
    assert data["loops"] == 1


def test_remote_commands(event_queue) -> None:
    assert web_remote.post_command("start")
    assert web_remote.post_command("quit")
    assert not web_remote.post_command("rewind")
    assert event_queue.poll() == {"type": ACT_START}
    assert event_queue.poll() == {"type": ACT_QUIT}
    assert event_queue.poll() is None


def test_missing_song_plays_silently(tmp_path, monkeypatch, caplog) -> None:
    """ No song on disk: the viewer starts without touching GStreamer. """
    import sys
    import config
    from app import SlideshowApp

    monkeypatch.setattr(config, "FULLSCREEN", False)
    monkeypatch.delitem(sys.modules, "audio_player", raising=False)
    song = str(tmp_path / "sounds" / "song.mp4")
    show = SlideshowApp(parse_text('screen = 1, 1\nslide "a.jpg" 3\n'), song)
    try:
        assert show.audio is None
        assert "audio_player" not in sys.modules
        assert f"soundtrack {song} not found" in caplog.text
        assert show.screen.get_size() == config.WINDOWED_SIZE
    finally:
        pygame.quit()


def _fake_show(text: str):
    from types import SimpleNamespace
    textures = TextureCache()
    timeline = parse_text(text)
    textures.preload(timeline.sources())
    return SimpleNamespace(runtime=SlideshowRuntime(timeline), textures=textures,
                           drawn=0, force_overlay=False, audio=None)


def test_show_status() -> None:
    show = _fake_show('screen = 1, 1\nslide "a.jpg" 3\nslide "a.jpg" 1\nslide "b.jpg" 1\n')
    show.runtime.start(0.0)
    show.runtime.tick(1.25)
    status = web_remote.show_status(show)
    assert status["started"] is True
    assert status["frame_time"] == 1.25
    assert status["loops"] == 1
    assert status["items"] == 3
    assert status["textures"] == 2
    assert status["soundtrack"] is None
    assert "cpu_percent" in status and "cpu_per_core" not in status


def test_remote_over_http(event_queue) -> None:
    """ Serve one request at a time on an ephemeral port. """
    import json
    import threading
    import urllib.error
    import urllib.request

    show = _fake_show('screen = 1, 1\nslide "a.jpg" 3\n')
    with web_remote.ReusableTCPServer(("127.0.0.1", 0), web_remote.RemoteHandler) as httpd:
        httpd.app = show
        threading.Thread(target=httpd.serve_forever, daemon=True).start()
        base = f"http://127.0.0.1:{httpd.server_address[1]}"
        try:
            with urllib.request.urlopen(base + "/timeline") as r:
                assert json.load(r)["totalLoop"] == 5.0
            with urllib.request.urlopen(base + "/action?cmd=start") as r:
                assert r.status == 204
            for path in ("/data", "/action?cmd=rewind"):
                with pytest.raises(urllib.error.HTTPError):
                    urllib.request.urlopen(base + path)
        finally:
            httpd.shutdown()
    assert event_queue.poll() == {"type": ACT_START}
    assert event_queue.poll() is None
