"""
Static preset bundles.

``BIAS_PRESETS`` are default values for dynamics fields, merged into a
``DynamicsConfig`` when it is built (see ``DynamicsConfig.with_bias``). They
carry no runtime logic. ``JOURNEY_PRESETS`` are complete wire-format configs
served to clients as starting points.
"""

from __future__ import annotations

from typing import Any, Dict, Mapping

BIAS_PRESETS: Mapping[str, Dict[str, float]] = {
    "neutral": {"lightness": 0.0, "chroma": 1.0, "warmth": 0.0},
    "lighter": {"lightness": 0.2, "chroma": 0.9, "warmth": 0.0},
    "darker": {"lightness": -0.2, "chroma": 0.9, "warmth": 0.0},
    "muted": {"lightness": 0.0, "chroma": 0.7, "warmth": 0.0, "vibrancy": 0.2},
    "vivid": {"lightness": 0.0, "chroma": 1.4, "warmth": 0.0, "vibrancy": 0.7},
    "warm": {"lightness": 0.0, "chroma": 1.1, "warmth": 0.3},
    "cool": {"lightness": 0.0, "chroma": 1.1, "warmth": -0.3},
}

JOURNEY_PRESETS: Mapping[str, Dict[str, Any]] = {
    "Default": {
        "anchors": ["#F38020", "#667EEA"],
        "numColors": 12,
        "loop": "open",
        "dynamics": {
            "lightness": 0,
            "chroma": 1.0,
            "contrast": 0.05,
            "vibrancy": 0.5,
            "warmth": 0,
            "biasPreset": "neutral",
            "curveStyle": "linear",
            "curveDimensions": ["L", "C", "H"],
            "curveStrength": 1.0,
        },
        "variation": {"mode": "off", "seed": 12345},
    },
    "Vivid Sunset": {
        "anchors": ["#ff7e5f", "#feb47b"],
        "numColors": 8,
        "loop": "open",
        "dynamics": {
            "lightness": 0,
            "chroma": 1.2,
            "contrast": 0.05,
            "vibrancy": 0.6,
            "warmth": 0.2,
            "biasPreset": "vivid",
            "curveStyle": "ease-in",
            "curveDimensions": ["all"],
            "curveStrength": 1,
        },
        "variation": {"mode": "subtle", "seed": 42},
    },
    "Ocean Deep": {
        "anchors": ["#00c9ff", "#92fe9d"],
        "numColors": 12,
        "loop": "open",
        "dynamics": {
            "lightness": -0.1,
            "chroma": 1.1,
            "contrast": 0.04,
            "vibrancy": 0.5,
            "warmth": -0.3,
            "biasPreset": "cool",
            "curveStyle": "sinusoidal",
            "curveDimensions": ["all"],
            "curveStrength": 1,
        },
        "variation": {"mode": "off", "seed": 123},
    },
    "Pastel Drift": {
        "anchors": ["#a8e6cf", "#dcedc1", "#ffd3b6"],
        "numColors": 10,
        "loop": "closed",
        "dynamics": {
            "lightness": 0.1,
            "chroma": 0.8,
            "contrast": 0.02,
            "vibrancy": 0.3,
            "warmth": 0,
            "biasPreset": "lighter",
            "curveStyle": "ease-out",
            "curveDimensions": ["all"],
            "curveStrength": 0.8,
        },
        "variation": {"mode": "subtle", "seed": 2024},
    },
}


def bias_names() -> tuple[str, ...]:
    return tuple(BIAS_PRESETS.keys())


__all__ = ["BIAS_PRESETS", "JOURNEY_PRESETS", "bias_names"]
