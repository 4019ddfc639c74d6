from __future__ import annotations

from math import sqrt
from typing import List, Sequence, Tuple

from .models import OKLabColor
from .oklab import clamp01, delta_e_ok

MAX_PASSES = 5
LIGHTNESS_NUDGE = 0.1
ACHROMATIC = 1e-9


def min_delta_e(contrast: float) -> float:
    return max(contrast * 0.1, 0.01)


def enforce_contrast(
    points: Sequence[OKLabColor], threshold: float
) -> Tuple[List[OKLabColor], int]:
    """
    Relax adjacent pairs toward ``threshold`` ΔE-OK.

    Only the later point of a pair moves: first its lightness, then, if the
    pair is still too close, its chroma. Best effort; returns the adjusted
    points and the number of nudges applied.
    """
    pts = list(points)
    nudges = 0
    for _ in range(MAX_PASSES):
        changed = False
        for i in range(1, len(pts)):
            prev, cur = pts[i - 1], pts[i]
            d = delta_e_ok(prev, cur)
            if d >= threshold:
                continue
            cur = OKLabColor(
                clamp01(cur.l + (threshold - d) * LIGHTNESS_NUDGE), cur.a, cur.b
            )
            nudges += 1
            changed = True
            d = delta_e_ok(prev, cur)
            if d < threshold:
                c = sqrt(cur.a * cur.a + cur.b * cur.b)
                if c > ACHROMATIC:
                    scale = (c + (threshold - d)) / c
                    cur = OKLabColor(cur.l, cur.a * scale, cur.b * scale)
            pts[i] = cur
        if not changed:
            break
    return pts, nudges


__all__ = ["MAX_PASSES", "enforce_contrast", "min_delta_e"]
