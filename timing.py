# =========  timing.py  =========
"""
Clock helpers for slideshow playback.
All values are in *seconds*.
"""

import time


def wall_clock() -> float:
    """
    Monotonic seconds from an arbitrary origin; only differences are
    meaningful.
    """
    return time.monotonic()


def wrap_time(t: float, period: float) -> float:
    """
    Fold *t* back into the loop by repeated subtraction while it exceeds
    *period*.  `t == period` is left alone.  A non-positive period has no
    loop to fold into and yields 0.0.
    """
    if period <= 0:
        return 0.0
    while t > period:
        t -= period
    return t
