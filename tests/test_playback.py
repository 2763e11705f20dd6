""" Tests for the playback clock, loop wrapping and per-frame visibility. """

import pytest

from cursor import Vec2
from playback import PlaybackClock, SlideshowRuntime
from slide_parser import parse_text
from timeline import TimelineItem, TimelineModel
from timing import wrap_time


def _runtime(*items) -> SlideshowRuntime:
    model = TimelineModel()
    for item in items:
        model.add(item)
    return SlideshowRuntime(model)


def _item(source, start, duration) -> TimelineItem:
    return TimelineItem(source, Vec2(0.0, 0.0), Vec2(1.0, 1.0), start, duration)


@pytest.mark.parametrize("t, period, wrapped", [
    (0.0, 20.0, 0.0),
    (19.5, 20.0, 19.5),
    (20.0, 20.0, 20.0),
    (21.0, 20.0, 1.0),
    (45.0, 20.0, 5.0),
    (7.0, 0.0, 0.0),
    (7.0, -1.0, 0.0),
])
def test_wrap_time(t, period, wrapped) -> None:
    assert wrap_time(t, period) == pytest.approx(wrapped)


def test_nothing_happens_before_start() -> None:
    rt = _runtime(_item("a", 0.0, 20.0))
    assert not rt.started
    assert rt.tick(50.0) is False
    assert rt.frame_time == 0.0
    assert rt.clock == PlaybackClock()
    assert list(rt.visible()) == []


def test_loop_wrap_fires_once() -> None:
    rt = _runtime(_item("a", 0.0, 20.0))
    assert rt.total_loop_duration == 20.0
    assert rt.start(100.0)

    # The first frame counts as the start of a loop.
    assert rt.tick(100.0) is True
    assert rt.tick(119.5) is False
    assert rt.frame_time == pytest.approx(19.5)

    assert rt.tick(121.0) is True
    assert rt.frame_time == pytest.approx(1.0)
    assert rt.tick(121.5) is False
    assert rt.tick(122.0) is False
    assert rt.loops == 2


def test_start_is_one_way() -> None:
    rt = _runtime(_item("a", 0.0, 10.0))
    assert rt.start(5.0) is True
    assert rt.start(8.0) is False
    assert rt.clock.frame_start == 5.0
    rt.tick(12.0)
    assert rt.frame_time == pytest.approx(7.0)


def test_zero_length_loop_does_not_spin() -> None:
    rt = _runtime()
    rt.start(0.0)
    assert rt.tick(1000.0) is True
    assert rt.frame_time == 0.0
    assert rt.tick(2000.0) is False
    assert rt.loops == 1


def test_visible_items_in_draw_order() -> None:
    rt = _runtime(_item("top", 0.0, 10.0), _item("middle", 2.0, 3.0), _item("bottom", 8.0, 4.0))
    rt.start(0.0)

    rt.tick(0.5)
    assert [(i.source, a) for i, a in rt.visible()] == [("top", pytest.approx(0.5))]

    rt.tick(3.0)
    assert [(i.source, a) for i, a in rt.visible()] == [("middle", 1.0), ("top", 1.0)]

    rt.tick(9.5)
    assert [(i.source, a) for i, a in rt.visible()] == [
        ("bottom", pytest.approx(1.0)), ("top", pytest.approx(0.5))]

    # alphas() reports every item, hidden ones included.
    assert [i.source for i, _ in rt.alphas()] == ["bottom", "middle", "top"]
    assert dict((i.source, a) for i, a in rt.alphas())["middle"] == 0.0


def test_parsed_show_end_to_end() -> None:
    """ Two slides back to back: the second fades in after the first has gone. """
    rt = SlideshowRuntime(parse_text('screen = 1, 1\nslide "a" 3\nslide "b" 3\n'))
    assert rt.total_loop_duration == 11.0
    rt.start(0.0)
    seen = []
    for t in (0.5, 2.0, 5.5, 6.5, 9.0, 11.5):
        rt.tick(t)
        seen.append([i.source for i, _ in rt.visible()])
    assert seen == [["a"], ["a"], [], ["b"], ["b"], ["a"]]
