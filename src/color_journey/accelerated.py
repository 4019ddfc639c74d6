# accelerated.py – numba-compiled journey kernel
#
# ABI, all values float64 words inside a LinearMemory arena:
#   parameter block  CONFIG_WORDS words at the CFG_* offsets below
#   anchor block     3 words (l, a, b) per anchor, already in OKLab
#   output block     OUT_HEADER_WORDS header (contrast nudges), then
#                    RECORD_WORDS (l, a, b) per color
#
# generate_palette() is the exported entry point: it allocates the output
# block and returns its pointer; the caller copies it out and frees it.
# The arithmetic mirrors reference.py operation for operation.

from __future__ import annotations

import logging
import math
from typing import List

import numpy as np
from numba import njit

from .easing import DEFAULT_BEZIER
from .memory import NULL_PTR, LinearMemory
from .models import CURVE_STYLES, ColorJourneyConfig, GenerateResult, OKLabColor
from .oklab import hex_to_oklab
from .reference import empty_result, finish

log = logging.getLogger(__name__)

# --- parameter block layout --------------------------------------------------
CFG_LIGHTNESS = 0
CFG_CHROMA = 1
CFG_CONTRAST = 2
CFG_VIBRANCY = 3
CFG_WARMTH = 4
CFG_SEED = 5
CFG_NUM_COLORS = 6
CFG_NUM_ANCHORS = 7
CFG_LOOP = 8
CFG_VARIATION = 9
CFG_CURVE_STYLE = 10
CFG_CURVE_MASK = 11
CFG_CURVE_STRENGTH = 12
CFG_BEZIER_L1 = 13
CFG_BEZIER_L2 = 14
CFG_BEZIER_C1 = 15
CFG_BEZIER_C2 = 16
CFG_COLOR_CIRCLE = 17
CFG_ARC_LENGTH = 18
CONFIG_WORDS = 19

ANCHOR_WORDS = 3
OUT_HEADER_WORDS = 1
RECORD_WORDS = 3

LOOP_CODES = {"open": 0, "closed": 1, "ping-pong": 2}
VARIATION_CODES = {"off": 0, "subtle": 1, "noticeable": 2}
CURVE_CODES = {name: i for i, name in enumerate(CURVE_STYLES)}
DIM_BITS = {"L": 1, "C": 2, "H": 4}

_MASK = 0xFFFFFFFF


# --- scalar helpers ----------------------------------------------------------
@njit(cache=True)
def _clamp01(x):
    if x < 0.0:
        return 0.0
    if x > 1.0:
        return 1.0
    return x


@njit(cache=True)
def _bezier(t, p1, p2):
    u = 1.0 - t
    tt = t * t
    uu = u * u
    return 3.0 * uu * t * p1 + 3.0 * u * tt * p2 + tt * t


@njit(cache=True)
def _ease(style, t, p1, p2):
    # codes follow CURVE_STYLES order
    if style == 1:
        return _bezier(t, 0.42, 0.0)
    if style == 2:
        return _bezier(t, 0.0, 0.58)
    if style == 3:
        return 0.5 - 0.5 * math.cos(t * math.pi)
    if style == 4:
        return math.floor(t * 5.0) / 4.0
    if style == 5:
        return _bezier(t, p1, p2)
    return t


@njit(cache=True)
def _lerp(a, b, t):
    return a * (1 - t) + b * t


@njit(cache=True)
def _delta_e(l1, a1, b1, l2, a2, b2):
    dl = l1 - l2
    da = a1 - a2
    db = b1 - b2
    return math.sqrt(dl * dl + da * da + db * db)


# --- xorshift128+ (32-bit words held in int64) --------------------------------
@njit(cache=True)
def _rng_next(state):
    x = state[0]
    t = (x ^ (x << 11)) & 0xFFFFFFFF
    state[0] = state[1]
    state[1] = state[2]
    state[2] = state[3]
    w = state[3]
    w = (w ^ (w >> 19) ^ t ^ (t >> 8)) & 0xFFFFFFFF
    state[3] = w
    return (w + state[1]) & 0xFFFFFFFF


@njit(cache=True)
def _rng_seed(state, seed):
    state[0] = seed ^ 123456789
    state[1] = 362436069
    state[2] = 521288629
    state[3] = 88675123
    for _ in range(8):
        _rng_next(state)


@njit(cache=True)
def _rng_symmetric(state):
    return (_rng_next(state) / 4294967296.0) * 2.0 - 1.0


# --- kernel ------------------------------------------------------------------
@njit(cache=True)
def _journey_kernel(heap, cfg, anchors_ptr, out):
    lightness = heap[cfg + CFG_LIGHTNESS]
    chroma_p = heap[cfg + CFG_CHROMA]
    contrast = heap[cfg + CFG_CONTRAST]
    vibrancy = heap[cfg + CFG_VIBRANCY]
    warmth = heap[cfg + CFG_WARMTH]
    seed = np.int64(heap[cfg + CFG_SEED])
    n = int(heap[cfg + CFG_NUM_COLORS])
    k = int(heap[cfg + CFG_NUM_ANCHORS])
    loop = int(heap[cfg + CFG_LOOP])
    variation = int(heap[cfg + CFG_VARIATION])
    style = int(heap[cfg + CFG_CURVE_STYLE])
    mask = int(heap[cfg + CFG_CURVE_MASK])
    strength_c = heap[cfg + CFG_CURVE_STRENGTH]
    bl1 = heap[cfg + CFG_BEZIER_L1]
    bl2 = heap[cfg + CFG_BEZIER_L2]
    bc1 = heap[cfg + CFG_BEZIER_C1]
    bc2 = heap[cfg + CFG_BEZIER_C2]
    circle = heap[cfg + CFG_COLOR_CIRCLE] != 0.0
    arc = heap[cfg + CFG_ARC_LENGTH]

    threshold = max(contrast * 0.1, 0.01)
    full_turn = k == 1 and circle and arc >= 360.0

    jitter = 0.0
    if variation == 1:
        jitter = 0.01
    elif variation == 2:
        jitter = 0.03
    state = np.zeros(4, dtype=np.int64)
    if jitter > 0.0:
        _rng_seed(state, seed)

    pts = np.empty((n, 3), dtype=np.float64)
    for i in range(n):
        # position
        if loop == 1 or full_turn:
            t = i / n
        elif n > 1:
            t = i / (n - 1)
        else:
            t = 0.5
        if loop == 2:
            t = t * 2.0
            if t > 1.0:
                t = 2.0 - t

        # base color
        if k == 1:
            local_t = t
            l = heap[anchors_ptr]
            ca = heap[anchors_ptr + 1]
            cb = heap[anchors_ptr + 2]
        else:
            segments = k if loop == 1 else k - 1
            seg_t = t * segments
            idx = int(math.floor(seg_t))
            if idx >= segments:
                idx = segments - 1
            local_t = seg_t - idx
            p = anchors_ptr + ANCHOR_WORDS * idx
            q = anchors_ptr + ANCHOR_WORDS * ((idx + 1) % k)
            l = _lerp(heap[p], heap[q], local_t)
            ca = _lerp(heap[p + 1], heap[q + 1], local_t)
            cb = _lerp(heap[p + 2], heap[q + 2], local_t)

        e_l = _ease(style, local_t, bl1, bl2)
        e_c = _ease(style, local_t, bc1, bc2)
        blend_l = e_l * strength_c if mask & 1 else local_t
        blend_c = e_c * strength_c if mask & 2 else local_t
        blend_h = e_l * strength_c if mask & 4 else local_t

        if k == 1:
            c = math.sqrt(ca * ca + cb * cb)
            h = math.atan2(cb, ca)
            if circle:
                h = h + blend_h * (arc / 360.0) * 2.0 * math.pi
            else:
                steps = min(n, 20)
                if steps > 1:
                    s = math.floor(t * (steps - 1) + 0.5) / (steps - 1)
                else:
                    s = t
                l = _clamp01(l + 0.25 * math.cos(s * math.pi) * (1.0 + 0.5 * lightness))
                c = c * (1.0 + 0.3 * math.sin(s * math.pi) * chroma_p)
            ca = math.cos(h) * c
            cb = math.sin(h) * c

        # dynamics
        c = math.sqrt(ca * ca + cb * cb)
        h = math.atan2(cb, ca)
        l = l + _lerp(0.0, lightness * 0.2, blend_l)
        c = _lerp(c, c * chroma_p, blend_c)
        c = c * (1.0 + vibrancy * 0.6 * max(0.0, 1.0 - abs(local_t - 0.5) / 0.35))
        l = _clamp01(l)
        ca = math.cos(h) * c + warmth * 0.01
        cb = math.sin(h) * c + warmth * 0.03

        # large palette
        if n > 20:
            c = math.sqrt(ca * ca + cb * cb)
            h = math.atan2(cb, ca)
            l = _clamp01(l + 0.05 * math.sin(2.0 * math.pi * i / 20.0))
            c = c * (1.0 + 0.1 * math.sin(2.0 * math.pi * i / 10.0))
            h = h + 0.05 * (i % 12)
            ca = math.cos(h) * c
            cb = math.sin(h) * c

        # jitter
        if jitter > 0.0:
            amount = jitter
            if i > 0:
                d = _delta_e(pts[i - 1, 0], pts[i - 1, 1], pts[i - 1, 2], l, ca, cb)
                if d < threshold:
                    amount = amount * 0.8
            dl = _rng_symmetric(state) * amount
            da = _rng_symmetric(state) * amount
            db = _rng_symmetric(state) * amount
            l = _clamp01(l + dl)
            ca = ca + da
            cb = cb + db

        pts[i, 0] = l
        pts[i, 1] = ca
        pts[i, 2] = cb

    # contrast enforcement
    nudges = 0
    for _ in range(5):
        changed = False
        for i in range(1, n):
            d = _delta_e(pts[i - 1, 0], pts[i - 1, 1], pts[i - 1, 2], pts[i, 0], pts[i, 1], pts[i, 2])
            if d >= threshold:
                continue
            pts[i, 0] = _clamp01(pts[i, 0] + (threshold - d) * 0.1)
            nudges += 1
            changed = True
            d = _delta_e(pts[i - 1, 0], pts[i - 1, 1], pts[i - 1, 2], pts[i, 0], pts[i, 1], pts[i, 2])
            if d < threshold:
                c = math.sqrt(pts[i, 1] * pts[i, 1] + pts[i, 2] * pts[i, 2])
                if c > 1e-9:
                    scale = (c + (threshold - d)) / c
                    pts[i, 1] = pts[i, 1] * scale
                    pts[i, 2] = pts[i, 2] * scale
        if not changed:
            break

    heap[out] = nudges
    base = out + OUT_HEADER_WORDS
    for i in range(n):
        heap[base + RECORD_WORDS * i] = pts[i, 0]
        heap[base + RECORD_WORDS * i + 1] = pts[i, 1]
        heap[base + RECORD_WORDS * i + 2] = pts[i, 2]


def generate_palette(memory: LinearMemory, cfg_ptr: int, anchors_ptr: int) -> int:
    """Exported entry point. Returns the output block pointer, or NULL_PTR
    when there is nothing to generate."""
    n = int(memory.heap[cfg_ptr + CFG_NUM_COLORS])
    k = int(memory.heap[cfg_ptr + CFG_NUM_ANCHORS])
    if n <= 0 or k <= 0:
        return NULL_PTR
    out_ptr = memory.malloc(OUT_HEADER_WORDS + RECORD_WORDS * n)
    try:
        _journey_kernel(memory.heap, cfg_ptr, anchors_ptr, out_ptr)
    except Exception:
        memory.free(out_ptr)
        raise
    return out_ptr


# --- caller side -------------------------------------------------------------
def write_config(memory: LinearMemory, ptr: int, config: ColorJourneyConfig) -> None:
    dyn = config.dynamics
    bl = dyn.bezier_light or DEFAULT_BEZIER
    bc = dyn.bezier_chroma or DEFAULT_BEZIER
    block = memory.view(ptr, CONFIG_WORDS)
    block[CFG_LIGHTNESS] = dyn.lightness
    block[CFG_CHROMA] = dyn.chroma
    block[CFG_CONTRAST] = dyn.contrast
    block[CFG_VIBRANCY] = dyn.vibrancy
    block[CFG_WARMTH] = dyn.warmth
    block[CFG_SEED] = config.variation.seed & _MASK
    block[CFG_NUM_COLORS] = config.num_colors
    block[CFG_NUM_ANCHORS] = len(config.anchors)
    block[CFG_LOOP] = LOOP_CODES.get(config.loop, 0)
    block[CFG_VARIATION] = VARIATION_CODES.get(config.variation.mode, 0)
    block[CFG_CURVE_STYLE] = CURVE_CODES.get(dyn.curve_style, 0)
    block[CFG_CURVE_MASK] = sum(DIM_BITS[d] for d in dyn.curve_dimensions if d in DIM_BITS)
    block[CFG_CURVE_STRENGTH] = dyn.curve_strength
    block[CFG_BEZIER_L1], block[CFG_BEZIER_L2] = bl
    block[CFG_BEZIER_C1], block[CFG_BEZIER_C2] = bc
    block[CFG_COLOR_CIRCLE] = 1.0 if dyn.enable_color_circle else 0.0
    block[CFG_ARC_LENGTH] = dyn.arc_length


def write_anchors(memory: LinearMemory, ptr: int, anchors: List[OKLabColor]) -> None:
    block = memory.view(ptr, ANCHOR_WORDS * len(anchors))
    for i, ok in enumerate(anchors):
        block[ANCHOR_WORDS * i : ANCHOR_WORDS * (i + 1)] = (ok.l, ok.a, ok.b)


class AcceleratedBackend:
    """
    Drives the compiled kernel through a private arena. Calls are serialized
    on the arena lock; every block allocated here is released before return,
    including on failure.
    """

    name = "accelerated"

    def __init__(self, memory: LinearMemory | None = None) -> None:
        self.memory = memory or LinearMemory()

    def warm_up(self) -> None:
        """Compile the kernel (or load it from numba's cache)."""
        self.generate(ColorJourneyConfig(anchors=("#ff0000", "#0000ff"), num_colors=3))

    def generate(self, config: ColorJourneyConfig) -> GenerateResult:
        n = config.num_colors
        if not config.anchors or n < 1:
            return empty_result(config)

        anchors = [hex_to_oklab(h) for h in config.anchors]
        mem = self.memory
        with mem.lock:
            cfg_ptr = mem.malloc(CONFIG_WORDS)
            try:
                anchors_ptr = mem.malloc(ANCHOR_WORDS * len(anchors))
                try:
                    write_config(mem, cfg_ptr, config)
                    write_anchors(mem, anchors_ptr, anchors)
                    out_ptr = generate_palette(mem, cfg_ptr, anchors_ptr)
                    if out_ptr == NULL_PTR:
                        raise RuntimeError("kernel returned no output block")
                    try:
                        out = mem.view(out_ptr, OUT_HEADER_WORDS + RECORD_WORDS * n).copy()
                    finally:
                        mem.free(out_ptr)
                finally:
                    mem.free(anchors_ptr)
            finally:
                mem.free(cfg_ptr)

        nudges = int(out[0])
        records = out[OUT_HEADER_WORDS:].reshape(n, RECORD_WORDS)
        points = [OKLabColor(float(l), float(a), float(b)) for l, a, b in records]
        log.debug("accelerated: %d colors, %d contrast nudges", n, nudges)
        return finish(config, points, nudges)


__all__ = [
    "CONFIG_WORDS",
    "AcceleratedBackend",
    "generate_palette",
    "write_anchors",
    "write_config",
]
