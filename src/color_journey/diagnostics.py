# diagnostics.py – perceptual spacing + WCAG 2.x accessibility stats
#   - ΔE-OK over adjacent pairs of the final palette
#   - relative luminance with the WCAG 2.0 0.03928 threshold
#   - best of (vs white, vs black) per swatch; AA = 4.5, AAA = 7

from __future__ import annotations

from typing import Sequence

import numpy as np

from .models import ColorPoint, Diagnostics, RGBColor, TraversalStrategy

WCAG_AA = 4.5
WCAG_AAA = 7.0

WHITE = RGBColor(1.0, 1.0, 1.0)
BLACK = RGBColor(0.0, 0.0, 0.0)

_LUMA = np.array([0.2126, 0.7152, 0.0722], dtype=np.float64)


def _linearize(c: np.ndarray) -> np.ndarray:
    return np.where(c <= 0.03928, c / 12.92, ((c + 0.055) / 1.055) ** 2.4)


def relative_luminance(rgb: RGBColor) -> float:
    return float(_linearize(np.array([rgb.r, rgb.g, rgb.b], dtype=np.float64)) @ _LUMA)


def contrast_ratio(rgb1: RGBColor, rgb2: RGBColor) -> float:
    l1 = relative_luminance(rgb1)
    l2 = relative_luminance(rgb2)
    return (max(l1, l2) + 0.05) / (min(l1, l2) + 0.05)


def best_text_ratios(palette: Sequence[ColorPoint]) -> np.ndarray:
    """Per swatch, the better contrast of pure white or pure black text."""
    rgb = np.array([[p.rgb.r, p.rgb.g, p.rgb.b] for p in palette], dtype=np.float64)
    lum = _linearize(rgb) @ _LUMA
    vs_white = _ratio(lum, relative_luminance(WHITE))
    vs_black = _ratio(lum, relative_luminance(BLACK))
    return np.maximum(vs_white, vs_black)


def _ratio(lum: np.ndarray, ref: float) -> np.ndarray:
    return (np.maximum(lum, ref) + 0.05) / (np.minimum(lum, ref) + 0.05)


def compute_diagnostics(
    palette: Sequence[ColorPoint],
    threshold: float,
    strategy: TraversalStrategy,
    enforcement_iters: int,
) -> Diagnostics:
    if not palette:
        return Diagnostics(traversal_strategy=strategy, enforcement_iters=enforcement_iters)

    ok = np.array([[p.ok.l, p.ok.a, p.ok.b] for p in palette], dtype=np.float64)
    if len(palette) > 1:
        steps = np.sqrt(((ok[1:] - ok[:-1]) ** 2).sum(axis=1))
        min_de = float(steps.min())
        max_de = float(steps.max())
        violations = int((steps < threshold).sum())
    else:
        min_de = max_de = 0.0
        violations = 0

    ratios = best_text_ratios(palette)
    wcag_min = float(ratios.min())
    return Diagnostics(
        min_delta_e=min_de,
        max_delta_e=max_de,
        contrast_violations=violations,
        wcag_min_ratio=wcag_min,
        wcag_violations=int((ratios < WCAG_AA).sum()),
        aaa_compliant=wcag_min >= WCAG_AAA,
        traversal_strategy=strategy,
        enforcement_iters=enforcement_iters,
    )


__all__ = [
    "WCAG_AA",
    "WCAG_AAA",
    "best_text_ratios",
    "compute_diagnostics",
    "contrast_ratio",
    "relative_luminance",
]
