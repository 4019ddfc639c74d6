from __future__ import annotations

from dataclasses import dataclass
from math import pi, sin
from typing import Optional

from .easing import DEFAULT_BEZIER, ease
from .models import DynamicsConfig, OKLabColor
from .oklab import clamp01, delta_e_ok, from_lch, lerp, to_lch
from .prng import XorShift128Plus

LARGE_PALETTE_THRESHOLD = 20
JITTER_STRENGTH = {"off": 0.0, "subtle": 0.01, "noticeable": 0.03}
JITTER_DAMPING = 0.8


@dataclass(frozen=True)
class Blend:
    """Per-dimension blend factors for one step."""

    l: float
    c: float
    h: float


def blend_factors(dyn: DynamicsConfig, t: float) -> Blend:
    """
    Eased (and strength-scaled) t for dimensions listed in
    ``curve_dimensions``; the raw segment-local t for the rest.
    """
    p_light = dyn.bezier_light or DEFAULT_BEZIER
    p_chroma = dyn.bezier_chroma or DEFAULT_BEZIER
    e_l = ease(dyn.curve_style, t, p_light[0], p_light[1])
    e_c = ease(dyn.curve_style, t, p_chroma[0], p_chroma[1])
    s = dyn.curve_strength
    dims = dyn.curve_dimensions
    return Blend(
        l=e_l * s if "L" in dims else t,
        c=e_c * s if "C" in dims else t,
        h=e_l * s if "H" in dims else t,
    )


def vibrancy_boost(vibrancy: float, local_t: float) -> float:
    return 1.0 + vibrancy * 0.6 * max(0.0, 1.0 - abs(local_t - 0.5) / 0.35)


def modulate(
    base: OKLabColor, local_t: float, blend: Blend, dyn: DynamicsConfig
) -> OKLabColor:
    """Lightness offset, chroma scale, midpoint vibrancy, then warmth."""
    l, c, h = to_lch(base)
    l = l + lerp(0.0, dyn.lightness * 0.2, blend.l)
    c = lerp(c, c * dyn.chroma, blend.c)
    c = c * vibrancy_boost(dyn.vibrancy, local_t)
    ok = from_lch(clamp01(l), c, h)
    return OKLabColor(ok.l, ok.a + dyn.warmth * 0.01, ok.b + dyn.warmth * 0.03)


def large_palette_ripple(ok: OKLabColor, i: int) -> OKLabColor:
    # lightness ripple (period 20), chroma pulse (period 10), hue walk (period 12)
    l, c, h = to_lch(ok)
    l = clamp01(l + 0.05 * sin(2.0 * pi * i / 20.0))
    c = c * (1.0 + 0.1 * sin(2.0 * pi * i / 10.0))
    h = h + 0.05 * (i % 12)
    return from_lch(l, c, h)


def jitter(
    ok: OKLabColor,
    prev: Optional[OKLabColor],
    rng: XorShift128Plus,
    strength: float,
    threshold: float,
) -> OKLabColor:
    """
    Seeded offset on all three axes. Damped when the step to ``prev`` is
    already under the contrast threshold. Always draws three numbers.
    """
    if prev is not None and delta_e_ok(prev, ok) < threshold:
        strength = strength * JITTER_DAMPING
    dl = rng.symmetric() * strength
    da = rng.symmetric() * strength
    db = rng.symmetric() * strength
    return OKLabColor(clamp01(ok.l + dl), ok.a + da, ok.b + db)


__all__ = [
    "Blend",
    "JITTER_STRENGTH",
    "LARGE_PALETTE_THRESHOLD",
    "blend_factors",
    "jitter",
    "large_palette_ripple",
    "modulate",
    "vibrancy_boost",
]
