import math

import numpy as np
import pytest

from color_journey.diagnostics import BLACK, WHITE, contrast_ratio
from color_journey.models import ColorJourneyConfig, DynamicsConfig, VariationConfig
from color_journey.oklab import hex_to_oklab, to_lch
from color_journey.reference import generate_reference

NEUTRAL = DynamicsConfig(lightness=0.0, chroma=1.0, contrast=0.05, vibrancy=0.0, warmth=0.0)


def _ok(point):
    return np.array([point.ok.l, point.ok.a, point.ok.b])


def test_linear_gradient_black_to_white():
    cfg = ColorJourneyConfig(anchors=("#000000", "#ffffff"), num_colors=3, dynamics=NEUTRAL)
    res = generate_reference(cfg)
    hexes = [p.hex for p in res.palette]
    assert hexes[0] == "#000000"
    assert hexes[2] == "#ffffff"
    mid = res.palette[1]
    assert mid.ok.l == pytest.approx(0.5, abs=1e-3)
    assert np.allclose([mid.rgb.r, mid.rgb.g], mid.rgb.b, atol=1e-3)
    assert res.diagnostics.enforcement_iters == 0


def test_hue_circle_quarter_turns():
    dyn = DynamicsConfig(
        lightness=0.0, chroma=1.0, vibrancy=0.0, enable_color_circle=True, arc_length=360.0
    )
    cfg = ColorJourneyConfig(anchors=("#ff0000",), num_colors=4, dynamics=dyn)
    res = generate_reference(cfg)
    red_l, red_c, red_h = to_lch(hex_to_oklab("#ff0000"))
    assert len(res.palette) == 4
    for i, p in enumerate(res.palette):
        l, c, h = to_lch(p.ok)
        assert l == pytest.approx(red_l, abs=1e-9)
        assert c == pytest.approx(red_c, abs=1e-9)
        turn = (h - red_h - i * math.pi / 2) % (2 * math.pi)
        assert min(turn, 2 * math.pi - turn) < 1e-9


def test_single_anchor_without_circle_walks_lightness():
    cfg = ColorJourneyConfig(anchors=("#3366cc",), num_colors=5, dynamics=NEUTRAL)
    res = generate_reference(cfg)
    ls = [p.ok.l for p in res.palette]
    assert ls[0] > ls[-1]
    assert len(set(p.hex for p in res.palette)) == 5


@pytest.mark.parametrize("n", [1, 2, 7, 20, 21, 64])
def test_cardinality(n):
    cfg = ColorJourneyConfig(anchors=("#f38020", "#667eea"), num_colors=n)
    res = generate_reference(cfg)
    assert len(res.palette) == n
    for p in res.palette:
        assert 0.0 <= p.ok.l <= 1.0
        assert all(0.0 <= v <= 1.0 for v in (p.rgb.r, p.rgb.g, p.rgb.b))
        assert p.hex.startswith("#") and len(p.hex) == 7


def test_strategy_switches_above_twenty():
    small = generate_reference(ColorJourneyConfig(anchors=("#f38020", "#667eea"), num_colors=20))
    large = generate_reference(ColorJourneyConfig(anchors=("#f38020", "#667eea"), num_colors=30))
    assert small.diagnostics.traversal_strategy == "perceptual"
    assert large.diagnostics.traversal_strategy == "multi-dim"


def test_seeded_variation_is_deterministic():
    cfg = ColorJourneyConfig(
        anchors=("#ff7e5f", "#feb47b"),
        num_colors=10,
        variation=VariationConfig(mode="subtle", seed=42),
    )
    a = generate_reference(cfg)
    b = generate_reference(cfg)
    assert [p.hex for p in a.palette] == [p.hex for p in b.palette]
    assert np.array_equal(np.array([_ok(p) for p in a.palette]), np.array([_ok(p) for p in b.palette]))

    plain = generate_reference(
        ColorJourneyConfig(anchors=("#ff7e5f", "#feb47b"), num_colors=10)
    )
    assert not np.allclose(
        np.array([_ok(p) for p in a.palette]), np.array([_ok(p) for p in plain.palette])
    )


def test_unknown_variation_mode_is_off():
    base = ColorJourneyConfig(anchors=("#00c9ff", "#92fe9d"), num_colors=6)
    odd = ColorJourneyConfig(
        anchors=("#00c9ff", "#92fe9d"), num_colors=6, variation=VariationConfig(mode="wild")
    )
    assert [p.hex for p in generate_reference(base).palette] == [
        p.hex for p in generate_reference(odd).palette
    ]


def test_closed_loop_does_not_repeat_first_color():
    cfg = ColorJourneyConfig(anchors=("#ff0000", "#00ff00", "#0000ff"), num_colors=6, loop="closed")
    res = generate_reference(cfg)
    assert res.palette[0].hex != res.palette[-1].hex


def test_ping_pong_is_symmetric():
    cfg = ColorJourneyConfig(
        anchors=("#000000", "#ffffff"), num_colors=5, loop="ping-pong", dynamics=NEUTRAL
    )
    res = generate_reference(cfg)
    assert res.palette[1].ok.l == pytest.approx(res.palette[3].ok.l, abs=0.05)
    assert res.palette[2].ok.l > res.palette[1].ok.l


def test_empty_anchors_and_zero_colors():
    for cfg in (
        ColorJourneyConfig(anchors=(), num_colors=5),
        ColorJourneyConfig(anchors=("#ffffff",), num_colors=0),
    ):
        res = generate_reference(cfg)
        assert res.palette == ()
        assert res.diagnostics.wcag_min_ratio == 1
        assert res.diagnostics.traversal_strategy == "perceptual"


def test_malformed_anchor_decodes_as_black():
    cfg = ColorJourneyConfig(anchors=("oops", "#000000"), num_colors=2, dynamics=NEUTRAL)
    res = generate_reference(cfg)
    assert res.palette[0].ok.l == 0.0
    assert [p.hex for p in res.palette] == ["#000000", "#000000"]
    # identical neighbours: one lightness nudge per pass, never enough
    assert res.diagnostics.enforcement_iters == 5
    assert res.diagnostics.contrast_violations == 1


def test_wcag_extremes():
    assert contrast_ratio(WHITE, BLACK) == pytest.approx(21.0)
    assert contrast_ratio(WHITE, WHITE) == pytest.approx(1.0)


def test_diagnostics_fields():
    cfg = ColorJourneyConfig(anchors=("#000000", "#ffffff"), num_colors=3, dynamics=NEUTRAL)
    d = generate_reference(cfg).diagnostics
    assert d.min_delta_e == pytest.approx(0.5, abs=1e-3)
    assert d.max_delta_e == pytest.approx(0.5, abs=1e-3)
    assert d.contrast_violations == 0
    # mid gray reads best against white at about 6; the ends reach 21
    assert 4.0 < d.wcag_min_ratio < 21.0
    assert d.aaa_compliant is False


def test_bias_preset_merges_under_explicit_values():
    dyn = DynamicsConfig.from_dict({"biasPreset": "warm", "chroma": 0.5})
    assert dyn.warmth == 0.3
    assert dyn.chroma == 0.5
    assert dyn.bias_preset == "warm"


def test_curve_dimensions_all_expands():
    dyn = DynamicsConfig.from_dict({"curveDimensions": ["all"]})
    assert dyn.curve_dimensions == ("L", "C", "H")
