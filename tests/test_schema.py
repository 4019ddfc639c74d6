import pytest

from color_journey.schema import ConfigError, config_errors, parse_config, validate_export


def test_parse_valid_config():
    cfg = parse_config(
        {
            "anchors": ["#a8e6cf", "#DCEDC1"],
            "numColors": 10,
            "loop": "closed",
            "dynamics": {"biasPreset": "lighter", "curveDimensions": ["all"], "bezierLight": [0.1, 0.9]},
            "variation": {"mode": "subtle", "seed": 2024},
        }
    )
    assert cfg.num_colors == 10
    assert cfg.dynamics.lightness == 0.2
    assert cfg.dynamics.bezier_light == (0.1, 0.9)


@pytest.mark.parametrize(
    "payload",
    [
        None,
        [],
        {"numColors": 3},
        {"anchors": [], "numColors": 3},
        {"anchors": ["#fff"], "numColors": 3},
        {"anchors": ["#ffffff"], "numColors": 2.5},
        {"anchors": ["#ffffff"], "numColors": True},
        {"anchors": ["#ffffff"], "numColors": 513},
        {"anchors": ["#ffffff"], "numColors": 3, "variation": {"mode": "wild"}},
        {"anchors": ["#ffffff"], "numColors": 3, "variation": {"seed": "x"}},
        {"anchors": ["#ffffff"], "numColors": 3, "dynamics": {"warmth": 2}},
        {"anchors": ["#ffffff"], "numColors": 3, "dynamics": {"curveStyle": "zigzag"}},
        {"anchors": ["#ffffff"], "numColors": 3, "dynamics": {"biasPreset": "loud"}},
        {"anchors": ["#ffffff"], "numColors": 3, "dynamics": {"bezierChroma": [0.5]}},
        {"anchors": ["#ffffff"], "numColors": 3, "dynamics": {"curveDimensions": ["X"]}},
    ],
)
def test_rejects(payload):
    with pytest.raises(ConfigError) as info:
        parse_config(payload)
    assert info.value.details


def test_collects_every_error():
    errors = config_errors({"anchors": ["nope", "#000000", 5], "numColors": -1})
    assert len(errors) == 3


def test_export_document_checks():
    with pytest.raises(ConfigError):
        validate_export({"config": {"anchors": ["#000000"], "numColors": 1}, "palette": [{}]})
    validate_export(
        {
            "config": {
                "anchors": ["#000000"],
                "numColors": 1,
                "loop": "open",
                "dynamics": {},
                "variation": {"mode": "off", "seed": 1},
            },
            "palette": [{"hex": "#000000", "ok": {"l": 0, "a": 0, "b": 0}}],
            "diagnostics": {"minDeltaE": 0, "maxDeltaE": 0, "contrastViolations": 0},
        }
    )
