from __future__ import annotations

from math import cos, floor, pi

from .models import BezierPair

DEFAULT_BEZIER: BezierPair = (0.5, 0.5)


def bezier(t: float, p1: float, p2: float) -> float:
    """
    Cubic Bezier with endpoints 0 and 1, evaluated directly at ``t``.

    This is the polynomial in the curve parameter, not CSS ``cubic-bezier``
    (which solves x(s) = t first). Both backends use this exact form.
    """
    u = 1.0 - t
    tt = t * t
    uu = u * u
    return 3.0 * uu * t * p1 + 3.0 * u * tt * p2 + tt * t


def ease(style: str, t: float, p1: float = 0.5, p2: float = 0.5) -> float:
    """
    Map segment-local t through a curve style.
      linear      – identity (also the fallback for unknown names)
      ease-in     – bezier(t, 0.42, 0)
      ease-out    – bezier(t, 0, 0.58)
      sinusoidal  – cosine in/out
      stepped     – five flat steps, floor(5t)/4
      custom      – bezier(t, p1, p2)
    """
    if style == "ease-in":
        return bezier(t, 0.42, 0.0)
    if style == "ease-out":
        return bezier(t, 0.0, 0.58)
    if style == "sinusoidal":
        return 0.5 - 0.5 * cos(t * pi)
    if style == "stepped":
        return floor(t * 5.0) / 4.0
    if style == "custom":
        return bezier(t, p1, p2)
    return t


__all__ = ["DEFAULT_BEZIER", "bezier", "ease"]
