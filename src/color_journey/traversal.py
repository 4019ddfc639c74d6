# traversal.py – step index → position on the journey → base OKLab color
#
# Three shapes of journey:
#   segments      – two or more anchors, piecewise OKLab lerp
#   hue arc       – one anchor, hue rotated by up to arc_length degrees
#   perceptual    – one anchor, no arc: ≤20 conceptual light→dark steps

from __future__ import annotations

from math import cos, floor, pi, sin
from typing import Sequence, Tuple

from .models import DynamicsConfig, OKLabColor
from .oklab import clamp01, from_lch, lerp_oklab, to_lch

PERCEPTUAL_STEPS = 20


def is_full_turn(dyn: DynamicsConfig) -> bool:
    return dyn.enable_color_circle and dyn.arc_length >= 360.0


def position(i: int, n: int, loop: str, full_turn: bool = False) -> float:
    """
    Normalized position of step ``i`` out of ``n``.

    Closed loops (and full hue turns, whose ends coincide) divide by ``n`` so
    the last step does not repeat the first; open journeys divide by
    ``n - 1``. Ping-pong folds the position back once it passes 1.
    """
    if loop == "closed" or full_turn:
        t = i / n
    else:
        t = i / (n - 1) if n > 1 else 0.5
    if loop == "ping-pong":
        t = t * 2.0
        if t > 1.0:
            t = 2.0 - t
    return t


def interpolate_anchors(
    anchors: Sequence[OKLabColor], t: float, loop: str
) -> Tuple[OKLabColor, float]:
    """Return (color, segment-local t) for a multi-anchor journey."""
    k = len(anchors)
    segments = k if loop == "closed" else k - 1
    seg_t = t * segments
    idx = int(floor(seg_t))
    if idx >= segments:
        idx = segments - 1
    local_t = seg_t - idx
    return lerp_oklab(anchors[idx], anchors[(idx + 1) % k], local_t), local_t


def hue_arc(anchor: OKLabColor, blend: float, arc_length: float) -> OKLabColor:
    l, c, h = to_lch(anchor)
    return from_lch(l, c, h + blend * (arc_length / 360.0) * 2.0 * pi)


def perceptual_step(
    anchor: OKLabColor, t: float, n: int, dyn: DynamicsConfig
) -> OKLabColor:
    steps = min(n, PERCEPTUAL_STEPS)
    s = floor(t * (steps - 1) + 0.5) / (steps - 1) if steps > 1 else t
    l, c, h = to_lch(anchor)
    l = clamp01(l + 0.25 * cos(s * pi) * (1.0 + 0.5 * dyn.lightness))
    c = c * (1.0 + 0.3 * sin(s * pi) * dyn.chroma)
    return from_lch(l, c, h)


__all__ = [
    "PERCEPTUAL_STEPS",
    "hue_arc",
    "interpolate_anchors",
    "is_full_turn",
    "perceptual_step",
    "position",
]
