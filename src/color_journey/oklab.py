# oklab.py – sRGB ↔ OKLab conversions (© Bjørn Ottosson coefficients, MIT)
#   - IEC 61966-2-1 companding, thresholds 0.04045 / 0.0031308
#   - double-precision matrices (the forms coloraide ships); each inverse pair
#     round-trips to ~1e-15, and both backends depend on these exact digits
#   - out-of-gamut colors are clipped by chroma reduction at constant L and h

from __future__ import annotations

import math
import re

import numpy as np

from .models import OKLabColor, RGBColor

# --- constants ---------------------------------------------------------------
_M1 = np.array(
    [
        [0.4122214694707629, 0.5363325372617349, 0.051445993267502196],
        [0.2119034958178251, 0.6806995506452345, 0.10739695353694051],
        [0.08830245919005637, 0.2817188391361215, 0.6299787016738223],
    ],
    dtype=np.float64,
)
_M2 = np.array(
    [
        [0.21045426830931396, 0.7936177747023053, -0.0040720430116192585],
        [1.9779985324311686, -2.42859224204858, 0.450593709617411],
        [0.025904042465547734, 0.7827717124575297, -0.8086757549230774],
    ],
    dtype=np.float64,
)
_M2_INV = np.array(
    [
        [1.0, 0.3963377773761749, 0.21580375730991364],
        [1.0, -0.10556134581565857, -0.0638541728258133],
        [1.0, -0.08948417752981186, -1.2914855480194092],
    ],
    dtype=np.float64,
)
_M1_INV = np.array(
    [
        [4.076741636075959, -3.307711539258062, 0.2309699031821041],
        [-1.2684379732850313, 2.6097573492876878, -0.3413193760026569],
        [-0.004196076138675526, -0.703418617935936, 1.7076146940746113],
    ],
    dtype=np.float64,
)

_HEX_RE = re.compile(r"^#?([0-9a-f]{2})([0-9a-f]{2})([0-9a-f]{2})$", re.IGNORECASE)


# --- companding --------------------------------------------------------------
def srgb_to_linear(c: float) -> float:
    return ((c + 0.055) / 1.055) ** 2.4 if c > 0.04045 else c / 12.92


def linear_to_srgb(c: float) -> float:
    return 1.055 * c ** (1.0 / 2.4) - 0.055 if c > 0.0031308 else 12.92 * c


def clamp01(x: float) -> float:
    return 0.0 if x < 0.0 else 1.0 if x > 1.0 else x


# --- hex ---------------------------------------------------------------------
def hex_to_rgb(hex_str: str) -> RGBColor:
    """
    Parse ``#rrggbb`` (``#`` optional, any case). Anything else decodes as
    opaque black; strict callers validate before getting here.
    """
    m = _HEX_RE.match(hex_str) if isinstance(hex_str, str) else None
    if m is None:
        return RGBColor(0.0, 0.0, 0.0)
    r, g, b = (int(m.group(i), 16) / 255.0 for i in (1, 2, 3))
    return RGBColor(r, g, b)


def rgb_to_hex(rgb: RGBColor) -> str:
    # halves round up, not to even
    u8 = [int(math.floor(clamp01(c) * 255.0 + 0.5)) for c in (rgb.r, rgb.g, rgb.b)]
    return f"#{u8[0]:02x}{u8[1]:02x}{u8[2]:02x}"


# --- OKLab -------------------------------------------------------------------
def srgb_to_oklab(rgb: RGBColor) -> OKLabColor:
    lrgb = np.array(
        [srgb_to_linear(rgb.r), srgb_to_linear(rgb.g), srgb_to_linear(rgb.b)],
        dtype=np.float64,
    )
    lms_cbrt = np.cbrt(_M1 @ lrgb)
    l, a, b = (_M2 @ lms_cbrt).tolist()
    return OKLabColor(l, a, b)


def oklab_to_linear_srgb(ok: OKLabColor) -> np.ndarray:
    lms = (_M2_INV @ np.array([ok.l, ok.a, ok.b], dtype=np.float64)) ** 3
    return _M1_INV @ lms


def oklab_to_srgb(ok: OKLabColor) -> RGBColor:
    """OKLab → gamma-encoded sRGB. No clamping: out-of-gamut input yields
    channels outside [0, 1]."""
    r, g, b = (linear_to_srgb(float(c)) for c in oklab_to_linear_srgb(ok))
    return RGBColor(r, g, b)


# --- gamut -------------------------------------------------------------------
_GAMUT_EPS = 1e-9
_ACHROMATIC = 1e-7
_CLIP_STEPS = 40


def _in_gamut(lin: np.ndarray) -> bool:
    return bool(np.all((lin >= -_GAMUT_EPS) & (lin <= 1.0 + _GAMUT_EPS)))


def gamut_clip(ok: OKLabColor) -> OKLabColor:
    """
    Pull an out-of-gamut color back into sRGB by scaling its chroma toward
    the neutral axis. Lightness (clamped to [0, 1]) and hue are kept.

    The first guess intersects the gray→color segment with the RGB cube in
    linear light. When that guess still lies outside, the chroma scale is
    bisected between it and zero.
    """
    if _in_gamut(oklab_to_linear_srgb(ok)):
        return ok
    l = clamp01(ok.l)
    if math.sqrt(ok.a * ok.a + ok.b * ok.b) < _ACHROMATIC:
        return OKLabColor(l, 0.0, 0.0)

    gray = oklab_to_linear_srgb(OKLabColor(l, 0.0, 0.0))
    full = oklab_to_linear_srgb(OKLabColor(l, ok.a, ok.b))
    t = 1.0
    for c1, c2 in zip(gray.tolist(), full.tolist()):
        if c2 < 0.0:
            t = min(t, c1 / (c1 - c2))
        if c2 > 1.0:
            t = min(t, (1.0 - c1) / (c2 - c1))
    t = max(t, 0.0)

    def inside(s: float) -> bool:
        return _in_gamut(oklab_to_linear_srgb(OKLabColor(l, ok.a * s, ok.b * s)))

    if not inside(t):
        lo, hi = 0.0, t
        for _ in range(_CLIP_STEPS):
            mid = 0.5 * (lo + hi)
            if inside(mid):
                lo = mid
            else:
                hi = mid
        t = lo
    return OKLabColor(l, ok.a * t, ok.b * t)


def oklab_to_display(ok: OKLabColor) -> RGBColor:
    """Gamut-clipped, clamped sRGB for display and hex output."""
    raw = oklab_to_srgb(gamut_clip(ok))
    return RGBColor(clamp01(raw.r), clamp01(raw.g), clamp01(raw.b))


def hex_to_oklab(hex_str: str) -> OKLabColor:
    return srgb_to_oklab(hex_to_rgb(hex_str))


# --- utilities ---------------------------------------------------------------
def delta_e_ok(c1: OKLabColor, c2: OKLabColor) -> float:
    dl = c1.l - c2.l
    da = c1.a - c2.a
    db = c1.b - c2.b
    return math.sqrt(dl * dl + da * da + db * db)


def lerp(a: float, b: float, t: float) -> float:
    return a * (1 - t) + b * t


def lerp_oklab(c1: OKLabColor, c2: OKLabColor, t: float) -> OKLabColor:
    return OKLabColor(lerp(c1.l, c2.l, t), lerp(c1.a, c2.a, t), lerp(c1.b, c2.b, t))


def to_lch(ok: OKLabColor) -> tuple[float, float, float]:
    """(lightness, chroma, hue in radians)"""
    return ok.l, math.sqrt(ok.a * ok.a + ok.b * ok.b), math.atan2(ok.b, ok.a)


def from_lch(l: float, c: float, h: float) -> OKLabColor:
    return OKLabColor(l, math.cos(h) * c, math.sin(h) * c)


__all__ = [
    "clamp01",
    "delta_e_ok",
    "from_lch",
    "gamut_clip",
    "hex_to_oklab",
    "hex_to_rgb",
    "lerp",
    "lerp_oklab",
    "linear_to_srgb",
    "oklab_to_display",
    "oklab_to_linear_srgb",
    "oklab_to_srgb",
    "rgb_to_hex",
    "srgb_to_linear",
    "srgb_to_oklab",
    "to_lch",
]
