from __future__ import annotations

from dataclasses import dataclass, field, fields, replace
from typing import Any, List, Literal, Mapping, Optional, Tuple

from .presets import BIAS_PRESETS

LoopMode = Literal["open", "closed", "ping-pong"]
VariationMode = Literal["off", "subtle", "noticeable"]
CurveStyle = Literal["linear", "ease-in", "ease-out", "sinusoidal", "stepped", "custom"]
CurveDimension = Literal["L", "C", "H"]
TraversalStrategy = Literal["perceptual", "multi-dim"]

LOOP_MODES: Tuple[str, ...] = ("open", "closed", "ping-pong")
VARIATION_MODES: Tuple[str, ...] = ("off", "subtle", "noticeable")
CURVE_STYLES: Tuple[str, ...] = (
    "linear",
    "ease-in",
    "ease-out",
    "sinusoidal",
    "stepped",
    "custom",
)
CURVE_DIMENSIONS: Tuple[str, ...] = ("L", "C", "H")

BezierPair = Tuple[float, float]


# ----------------------------- colors -------------------------------------


@dataclass(frozen=True)
class RGBColor:
    r: float
    g: float
    b: float

    def to_dict(self) -> dict[str, float]:
        return {"r": self.r, "g": self.g, "b": self.b}


@dataclass(frozen=True)
class OKLabColor:
    l: float
    a: float
    b: float

    def to_dict(self) -> dict[str, float]:
        return {"l": self.l, "a": self.a, "b": self.b}


@dataclass(frozen=True)
class ColorPoint:
    """One palette entry. ``rgb`` and ``hex`` are derived from ``ok`` after
    gamut clipping; ``ok`` itself is kept as generated."""

    ok: OKLabColor
    rgb: RGBColor
    hex: str

    @classmethod
    def from_oklab(cls, ok: OKLabColor) -> "ColorPoint":
        from .oklab import oklab_to_display, rgb_to_hex

        rgb = oklab_to_display(ok)
        return cls(ok=ok, rgb=rgb, hex=rgb_to_hex(rgb))

    def to_dict(self) -> dict[str, Any]:
        return {"ok": self.ok.to_dict(), "rgb": self.rgb.to_dict(), "hex": self.hex}


# ----------------------------- config -------------------------------------

# wire name → field name, for the fields whose names differ
_DYNAMICS_WIRE = {
    "biasPreset": "bias_preset",
    "bezierLight": "bezier_light",
    "bezierChroma": "bezier_chroma",
    "curveStyle": "curve_style",
    "curveDimensions": "curve_dimensions",
    "curveStrength": "curve_strength",
    "enableColorCircle": "enable_color_circle",
    "arcLength": "arc_length",
}
_DYNAMICS_FIELD = {v: k for k, v in _DYNAMICS_WIRE.items()}


def _pair(val: Any) -> Optional[BezierPair]:
    if val is None:
        return None
    p1, p2 = list(val)[:2]
    return float(p1), float(p2)


def _dimensions(val: Any) -> Tuple[str, ...]:
    if val is None:
        return CURVE_DIMENSIONS
    if isinstance(val, str):
        val = [val]
    out: List[str] = []
    for d in val:
        d = str(d)
        if d.lower() == "all":
            return CURVE_DIMENSIONS
        d = d.upper()
        if d in CURVE_DIMENSIONS and d not in out:
            out.append(d)
    return tuple(out)


@dataclass(frozen=True)
class DynamicsConfig:
    lightness: float = 0.0
    chroma: float = 1.0
    contrast: float = 0.05
    vibrancy: float = 0.5
    warmth: float = 0.0
    bias_preset: Optional[str] = None
    bezier_light: Optional[BezierPair] = None
    bezier_chroma: Optional[BezierPair] = None
    curve_style: CurveStyle = "linear"
    curve_dimensions: Tuple[str, ...] = CURVE_DIMENSIONS
    curve_strength: float = 1.0
    enable_color_circle: bool = False
    arc_length: float = 0.0

    def with_bias(self, name: str, **overrides: Any) -> "DynamicsConfig":
        """Apply a bias bundle, then any explicit overrides on top of it."""
        bundle = BIAS_PRESETS.get(name, {})
        return replace(self, **{**bundle, **overrides, "bias_preset": name})

    @classmethod
    def from_dict(cls, data: Mapping[str, Any] | None) -> "DynamicsConfig":
        data = dict(data or {})
        names = {f.name for f in fields(cls)}
        explicit: dict[str, Any] = {}
        for key, val in data.items():
            name = _DYNAMICS_WIRE.get(key, key)
            if name in names and val is not None:
                explicit[name] = val

        for key in ("lightness", "chroma", "contrast", "vibrancy", "warmth"):
            if key in explicit:
                explicit[key] = float(explicit[key])
        if "curve_strength" in explicit:
            explicit["curve_strength"] = float(explicit["curve_strength"])
        if "arc_length" in explicit:
            explicit["arc_length"] = float(explicit["arc_length"])
        if "enable_color_circle" in explicit:
            explicit["enable_color_circle"] = bool(explicit["enable_color_circle"])
        for key in ("bezier_light", "bezier_chroma"):
            if key in explicit:
                explicit[key] = _pair(explicit[key])
        if "curve_dimensions" in explicit:
            explicit["curve_dimensions"] = _dimensions(explicit["curve_dimensions"])

        bias = explicit.pop("bias_preset", None)
        if bias is not None:
            return cls().with_bias(str(bias), **explicit)
        return cls(**explicit)

    def to_dict(self) -> dict[str, Any]:
        out: dict[str, Any] = {}
        for f in fields(self):
            val = getattr(self, f.name)
            if val is None:
                continue
            if isinstance(val, tuple):
                val = list(val)
            out[_DYNAMICS_FIELD.get(f.name, f.name)] = val
        return out


@dataclass(frozen=True)
class VariationConfig:
    mode: VariationMode = "off"
    seed: int = 12345

    @classmethod
    def from_dict(cls, data: Mapping[str, Any] | None) -> "VariationConfig":
        data = data or {}
        return cls(mode=data.get("mode", "off"), seed=int(data.get("seed", 12345)))

    def to_dict(self) -> dict[str, Any]:
        return {"mode": self.mode, "seed": self.seed}


@dataclass(frozen=True)
class ColorJourneyConfig:
    anchors: Tuple[str, ...]
    num_colors: int
    loop: LoopMode = "open"
    dynamics: DynamicsConfig = field(default_factory=DynamicsConfig)
    variation: VariationConfig = field(default_factory=VariationConfig)

    def __post_init__(self) -> None:
        # lists from callers become tuples so configs stay hashable
        object.__setattr__(self, "anchors", tuple(self.anchors))

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "ColorJourneyConfig":
        return cls(
            anchors=tuple(data.get("anchors") or ()),
            num_colors=int(data.get("numColors", 0)),
            loop=data.get("loop", "open"),
            dynamics=DynamicsConfig.from_dict(data.get("dynamics")),
            variation=VariationConfig.from_dict(data.get("variation")),
        )

    def to_dict(self) -> dict[str, Any]:
        return {
            "anchors": list(self.anchors),
            "numColors": self.num_colors,
            "loop": self.loop,
            "dynamics": self.dynamics.to_dict(),
            "variation": self.variation.to_dict(),
        }


# ----------------------------- result -------------------------------------


@dataclass(frozen=True)
class Diagnostics:
    min_delta_e: float = 0.0
    max_delta_e: float = 0.0
    contrast_violations: int = 0
    wcag_min_ratio: float = 1.0
    wcag_violations: int = 0
    aaa_compliant: bool = False
    traversal_strategy: TraversalStrategy = "perceptual"
    enforcement_iters: int = 0

    def to_dict(self) -> dict[str, Any]:
        return {
            "minDeltaE": self.min_delta_e,
            "maxDeltaE": self.max_delta_e,
            "contrastViolations": self.contrast_violations,
            "wcagMinRatio": self.wcag_min_ratio,
            "wcagViolations": self.wcag_violations,
            "aaaCompliant": self.aaa_compliant,
            "traversalStrategy": self.traversal_strategy,
            "enforcementIters": self.enforcement_iters,
        }


@dataclass(frozen=True)
class GenerateResult:
    palette: Tuple[ColorPoint, ...]
    config: ColorJourneyConfig
    diagnostics: Diagnostics

    def to_dict(self) -> dict[str, Any]:
        return {
            "palette": [p.to_dict() for p in self.palette],
            "config": self.config.to_dict(),
            "diagnostics": self.diagnostics.to_dict(),
        }


__all__ = [
    "CURVE_DIMENSIONS",
    "CURVE_STYLES",
    "LOOP_MODES",
    "VARIATION_MODES",
    "ColorJourneyConfig",
    "ColorPoint",
    "Diagnostics",
    "DynamicsConfig",
    "GenerateResult",
    "OKLabColor",
    "RGBColor",
    "VariationConfig",
]
