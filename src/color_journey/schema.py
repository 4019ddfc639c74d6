"""
Strict validation for data crossing the service boundary.

The engine itself is lenient (bad anchors decode as black). Request bodies are
checked against the full request rules before they reach it; export documents
only for structure and types. Every problem found is reported at once in
``ConfigError.details``.
"""

from __future__ import annotations

import re
from numbers import Real
from typing import Any, List, Mapping

from .models import (
    CURVE_DIMENSIONS,
    CURVE_STYLES,
    LOOP_MODES,
    VARIATION_MODES,
    ColorJourneyConfig,
)
from .presets import BIAS_PRESETS

HEX_PATTERN = re.compile(r"^#[0-9a-fA-F]{6}$")
DEFAULT_MAX_COLORS = 512
MAX_ANCHORS = 16

# wire key → inclusive range
_DYNAMICS_RANGES = {
    "lightness": (-1.0, 1.0),
    "chroma": (0.0, 2.0),
    "contrast": (0.0, 1.0),
    "vibrancy": (0.0, 1.0),
    "warmth": (-1.0, 1.0),
    "curveStrength": (0.0, 2.0),
    "arcLength": (0.0, 360.0),
}

_DIAGNOSTIC_KEYS = ("minDeltaE", "maxDeltaE", "contrastViolations")


class ConfigError(ValueError):
    def __init__(self, message: str, details: List[str]) -> None:
        super().__init__(message)
        self.details = details


def _is_number(val: Any) -> bool:
    return isinstance(val, Real) and not isinstance(val, bool)


def _is_int(val: Any) -> bool:
    return isinstance(val, int) and not isinstance(val, bool)


def _check_dynamics(dyn: Any, errors: List[str]) -> None:
    if not isinstance(dyn, Mapping):
        errors.append("dynamics must be an object")
        return
    for key, (lo, hi) in _DYNAMICS_RANGES.items():
        if key not in dyn:
            continue
        val = dyn[key]
        if not _is_number(val) or not lo <= val <= hi:
            errors.append(f"dynamics.{key} must be a number in [{lo:g}, {hi:g}]")
    bias = dyn.get("biasPreset")
    if bias is not None and bias not in BIAS_PRESETS:
        errors.append(f"dynamics.biasPreset must be one of {sorted(BIAS_PRESETS)}")
    style = dyn.get("curveStyle")
    if style is not None and style not in CURVE_STYLES:
        errors.append(f"dynamics.curveStyle must be one of {list(CURVE_STYLES)}")
    dims = dyn.get("curveDimensions")
    if dims is not None:
        allowed = set(CURVE_DIMENSIONS) | {"all"}
        if not isinstance(dims, list) or not all(d in allowed for d in dims):
            errors.append("dynamics.curveDimensions must be a list of 'L', 'C', 'H' or 'all'")
    circle = dyn.get("enableColorCircle")
    if circle is not None and not isinstance(circle, bool):
        errors.append("dynamics.enableColorCircle must be a boolean")
    for key in ("bezierLight", "bezierChroma"):
        pair = dyn.get(key)
        if pair is None:
            continue
        if (
            not isinstance(pair, list)
            or len(pair) != 2
            or not all(_is_number(p) and 0.0 <= p <= 1.0 for p in pair)
        ):
            errors.append(f"dynamics.{key} must be two numbers in [0, 1]")


def _check_variation(var: Any, errors: List[str]) -> None:
    if not isinstance(var, Mapping):
        errors.append("variation must be an object")
        return
    if "mode" in var and var["mode"] not in VARIATION_MODES:
        errors.append(f"variation.mode must be one of {list(VARIATION_MODES)}")
    if "seed" in var and not _is_int(var["seed"]):
        errors.append("variation.seed must be an integer")


def config_errors(payload: Any, max_colors: int = DEFAULT_MAX_COLORS) -> List[str]:
    if not isinstance(payload, Mapping):
        return ["body must be a JSON object"]
    errors: List[str] = []

    anchors = payload.get("anchors")
    if not isinstance(anchors, list) or not anchors:
        errors.append("anchors must be a non-empty list")
    elif len(anchors) > MAX_ANCHORS:
        errors.append(f"at most {MAX_ANCHORS} anchors are supported")
    else:
        for i, anchor in enumerate(anchors):
            if not isinstance(anchor, str) or not HEX_PATTERN.match(anchor):
                errors.append(f"anchors[{i}] must match #RRGGBB")

    n = payload.get("numColors")
    if not _is_int(n) or n < 1:
        errors.append("numColors must be a positive integer")
    elif n > max_colors:
        errors.append(f"numColors must be at most {max_colors}")

    if "loop" in payload and payload["loop"] not in LOOP_MODES:
        errors.append(f"loop must be one of {list(LOOP_MODES)}")
    if "dynamics" in payload:
        _check_dynamics(payload["dynamics"], errors)
    if "variation" in payload:
        _check_variation(payload["variation"], errors)
    return errors


def parse_config(payload: Any, max_colors: int = DEFAULT_MAX_COLORS) -> ColorJourneyConfig:
    """Validate a request body and build the config, or raise ConfigError."""
    errors = config_errors(payload, max_colors)
    if errors:
        raise ConfigError("Invalid configuration provided.", errors)
    return ColorJourneyConfig.from_dict(payload)


def _config_shape_errors(config: Any) -> List[str]:
    """Types only. An exported config is whatever the engine was given, so
    request ranges, enum membership and anchor counts are not checked."""
    if not isinstance(config, Mapping):
        return ["config must be an object"]
    errors: List[str] = []
    anchors = config.get("anchors")
    if not isinstance(anchors, list) or not all(isinstance(a, str) for a in anchors):
        errors.append("config.anchors must be a list of strings")
    if not _is_int(config.get("numColors")):
        errors.append("config.numColors must be an integer")
    if not isinstance(config.get("loop"), str):
        errors.append("config.loop must be a string")

    dyn = config.get("dynamics")
    if not isinstance(dyn, Mapping):
        errors.append("config.dynamics must be an object")
    else:
        for key in _DYNAMICS_RANGES:
            if key in dyn and not _is_number(dyn[key]):
                errors.append(f"config.dynamics.{key} must be a number")

    var = config.get("variation")
    if not isinstance(var, Mapping):
        errors.append("config.variation must be an object")
    else:
        if not isinstance(var.get("mode"), str):
            errors.append("config.variation.mode must be a string")
        if not _is_int(var.get("seed")):
            errors.append("config.variation.seed must be an integer")
    return errors


def validate_export(doc: Any) -> None:
    """Check the structure of an export document ``{config, palette, diagnostics}``."""
    if not isinstance(doc, Mapping):
        raise ConfigError("Invalid export document.", ["document must be an object"])
    errors = _config_shape_errors(doc.get("config"))

    palette = doc.get("palette")
    if not isinstance(palette, list):
        errors.append("palette must be a list")
    else:
        for i, entry in enumerate(palette):
            if not isinstance(entry, Mapping):
                errors.append(f"palette[{i}] must be an object")
                continue
            if not isinstance(entry.get("hex"), str) or not HEX_PATTERN.match(entry["hex"]):
                errors.append(f"palette[{i}].hex must match #RRGGBB")
            ok = entry.get("ok")
            if not isinstance(ok, Mapping) or not all(_is_number(ok.get(k)) for k in "lab"):
                errors.append(f"palette[{i}].ok must have numeric l, a, b")

    diagnostics = doc.get("diagnostics")
    if not isinstance(diagnostics, Mapping):
        errors.append("diagnostics must be an object")
    else:
        for key in _DIAGNOSTIC_KEYS:
            if not _is_number(diagnostics.get(key)):
                errors.append(f"diagnostics.{key} must be a number")

    if errors:
        raise ConfigError("Invalid export document.", errors)


__all__ = [
    "DEFAULT_MAX_COLORS",
    "HEX_PATTERN",
    "ConfigError",
    "config_errors",
    "parse_config",
    "validate_export",
]
