"""
Portable reference implementation of the journey generator.

Plain Python floats throughout, one color at a time, in the same operation
order as the compiled kernel in ``accelerated.py``. Keep the two in step:
any change to the arithmetic here must be mirrored there.
"""

from __future__ import annotations

import logging
from typing import List, Optional, Sequence

from .contrast import enforce_contrast, min_delta_e
from .diagnostics import compute_diagnostics
from .dynamics import (
    JITTER_STRENGTH,
    LARGE_PALETTE_THRESHOLD,
    blend_factors,
    jitter,
    large_palette_ripple,
    modulate,
)
from .models import (
    ColorJourneyConfig,
    ColorPoint,
    DynamicsConfig,
    GenerateResult,
    OKLabColor,
    TraversalStrategy,
)
from .oklab import hex_to_oklab
from .prng import XorShift128Plus
from .traversal import (
    hue_arc,
    interpolate_anchors,
    is_full_turn,
    perceptual_step,
    position,
)

log = logging.getLogger(__name__)


def traversal_strategy(num_colors: int) -> TraversalStrategy:
    return "multi-dim" if num_colors > LARGE_PALETTE_THRESHOLD else "perceptual"


def empty_result(config: ColorJourneyConfig) -> GenerateResult:
    return GenerateResult(
        palette=(),
        config=config,
        diagnostics=compute_diagnostics((), min_delta_e(config.dynamics.contrast), "perceptual", 0),
    )


def finish(
    config: ColorJourneyConfig, points: Sequence[OKLabColor], nudges: int
) -> GenerateResult:
    """Back-convert final OKLab points and attach diagnostics."""
    palette = tuple(ColorPoint.from_oklab(p) for p in points)
    diagnostics = compute_diagnostics(
        palette,
        min_delta_e(config.dynamics.contrast),
        traversal_strategy(config.num_colors),
        nudges,
    )
    return GenerateResult(palette=palette, config=config, diagnostics=diagnostics)


def journey_point(
    anchors: Sequence[OKLabColor], t: float, n: int, loop: str, dyn: DynamicsConfig
) -> OKLabColor:
    """Base color at position ``t`` with dynamics applied."""
    if len(anchors) == 1:
        local_t = t
        blend = blend_factors(dyn, local_t)
        if dyn.enable_color_circle:
            base = hue_arc(anchors[0], blend.h, dyn.arc_length)
        else:
            base = perceptual_step(anchors[0], t, n, dyn)
    else:
        base, local_t = interpolate_anchors(anchors, t, loop)
        blend = blend_factors(dyn, local_t)
    return modulate(base, local_t, blend, dyn)


def generate_reference(config: ColorJourneyConfig) -> GenerateResult:
    n = config.num_colors
    if not config.anchors or n < 1:
        return empty_result(config)

    dyn = config.dynamics
    anchors = [hex_to_oklab(h) for h in config.anchors]
    threshold = min_delta_e(dyn.contrast)
    full_turn = len(anchors) == 1 and is_full_turn(dyn)

    strength = JITTER_STRENGTH.get(config.variation.mode, 0.0)
    rng: Optional[XorShift128Plus] = None
    if strength > 0.0:
        rng = XorShift128Plus(config.variation.seed)

    points: List[OKLabColor] = []
    for i in range(n):
        t = position(i, n, config.loop, full_turn)
        ok = journey_point(anchors, t, n, config.loop, dyn)
        if n > LARGE_PALETTE_THRESHOLD:
            ok = large_palette_ripple(ok, i)
        if rng is not None:
            ok = jitter(ok, points[-1] if points else None, rng, strength, threshold)
        points.append(ok)

    points, nudges = enforce_contrast(points, threshold)
    log.debug("portable: %d colors, %d contrast nudges", n, nudges)
    return finish(config, points, nudges)


class PortableBackend:
    """Always-available backend."""

    name = "portable"

    def generate(self, config: ColorJourneyConfig) -> GenerateResult:
        return generate_reference(config)


__all__ = [
    "PortableBackend",
    "empty_result",
    "finish",
    "generate_reference",
    "journey_point",
    "traversal_strategy",
]
