import math

import numpy as np
import pytest
from coloraide import Color

from color_journey.models import ColorPoint, OKLabColor, RGBColor
from color_journey.oklab import (
    delta_e_ok,
    from_lch,
    gamut_clip,
    hex_to_oklab,
    hex_to_rgb,
    oklab_to_linear_srgb,
    oklab_to_srgb,
    rgb_to_hex,
    srgb_to_oklab,
    to_lch,
)


def _rgb(v):
    return RGBColor(float(v[0]), float(v[1]), float(v[2]))


def _arr(rgb):
    return np.array([rgb.r, rgb.g, rgb.b])


def test_round_trip_grid():
    for r in np.linspace(0, 1, 6):
        for g in np.linspace(0, 1, 6):
            for b in np.linspace(0, 1, 6):
                rgb = RGBColor(float(r), float(g), float(b))
                back = oklab_to_srgb(srgb_to_oklab(rgb))
                assert np.allclose(_arr(back), _arr(rgb), atol=1e-6)


def test_white_and_black():
    white = hex_to_oklab("#ffffff")
    black = hex_to_oklab("#000000")
    assert white.l == pytest.approx(1.0, abs=1e-6)
    assert abs(white.a) < 1e-6 and abs(white.b) < 1e-6
    assert (black.l, black.a, black.b) == (0.0, 0.0, 0.0)


@pytest.mark.parametrize("hex_str", ["#ff0000", "#00ff00", "#0000ff", "#f38020", "#667eea"])
def test_matches_coloraide(hex_str):
    ours = hex_to_oklab(hex_str)
    ref = Color(hex_str).convert("oklab").coords()
    assert np.allclose([ours.l, ours.a, ours.b], ref, atol=1e-4)


def test_hex_is_lenient():
    assert hex_to_rgb("FF0000") == RGBColor(1.0, 0.0, 0.0)
    assert hex_to_rgb("#Ff0000") == RGBColor(1.0, 0.0, 0.0)
    assert hex_to_rgb("nonsense") == RGBColor(0.0, 0.0, 0.0)
    assert hex_to_rgb("#fff") == RGBColor(0.0, 0.0, 0.0)


def test_rgb_to_hex_clamps_and_rounds():
    assert rgb_to_hex(RGBColor(1.2, -0.3, 0.5)) == "#ff0080"
    assert rgb_to_hex(_rgb([1, 1, 1])) == "#ffffff"


def test_lch_round_trip():
    ok = OKLabColor(0.6, 0.1, -0.05)
    l, c, h = to_lch(ok)
    back = from_lch(l, c, h)
    assert delta_e_ok(ok, back) < 1e-12
    assert c == pytest.approx(math.hypot(0.1, -0.05))


def test_delta_e_is_euclidean():
    assert delta_e_ok(OKLabColor(0, 0, 0), OKLabColor(0.3, 0.4, 0)) == pytest.approx(0.5)


@pytest.mark.parametrize("rgb", [(0, 1, 0), (1, 1, 0), (0, 0, 1), (1, 0, 1), (0.5, 0.25, 1)])
def test_round_trip_at_cube_corners(rgb):
    back = oklab_to_srgb(srgb_to_oklab(_rgb(rgb)))
    assert np.allclose(_arr(back), rgb, atol=1e-9)


def test_gamut_clip_keeps_hue_and_lightness():
    ok = OKLabColor(0.75, 0.25, 0.05)
    assert oklab_to_srgb(ok).r > 1.0

    point = ColorPoint.from_oklab(ok)
    back = srgb_to_oklab(point.rgb)
    l, c, h = to_lch(back)
    assert l == pytest.approx(0.75, abs=1e-6)
    assert math.degrees(h) == pytest.approx(math.degrees(math.atan2(0.05, 0.25)), abs=1e-4)
    assert c < math.hypot(0.25, 0.05)
    # ok is kept as generated
    assert point.ok == ok


def test_gamut_clip_lands_inside_the_cube():
    for ok in (OKLabColor(0.9, -0.3, 0.2), OKLabColor(0.3, 0.1, -0.35), OKLabColor(0.6, 0.4, 0.4)):
        lin = oklab_to_linear_srgb(gamut_clip(ok))
        assert np.all((lin >= -1e-9) & (lin <= 1 + 1e-9))
        assert to_lch(gamut_clip(ok))[2] == pytest.approx(to_lch(ok)[2], abs=1e-12)


def test_gamut_clip_leaves_in_gamut_colors_alone():
    ok = hex_to_oklab("#336699")
    assert gamut_clip(ok) == ok
    assert ColorPoint.from_oklab(ok).hex == "#336699"


def test_gamut_clip_achromatic_clamps_lightness():
    assert gamut_clip(OKLabColor(1.2, 0.0, 0.0)) == OKLabColor(1.0, 0.0, 0.0)
    assert ColorPoint.from_oklab(OKLabColor(-0.1, 0.0, 0.0)).hex == "#000000"
