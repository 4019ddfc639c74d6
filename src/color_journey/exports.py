from __future__ import annotations

import json
from typing import Iterable, Literal

from coloraide import Color

from .models import ColorPoint, GenerateResult
from .schema import validate_export

ExportFormat = Literal["hex", "oklch"]


def _css_value(point: ColorPoint, fmt: ExportFormat) -> str:
    if fmt == "oklch":
        ok = point.ok
        return Color("oklab", [ok.l, ok.a, ok.b]).convert("oklch").to_string()
    return point.hex


def to_css_variables(palette: Iterable[ColorPoint], fmt: ExportFormat = "hex") -> str:
    """One ``--cj-<n>`` custom property per color, numbered from 1."""
    return "\n".join(
        f"  --cj-{i}: {_css_value(p, fmt)};" for i, p in enumerate(palette, start=1)
    )


def to_css_block(
    palette: Iterable[ColorPoint], selector: str = ":root", fmt: ExportFormat = "hex"
) -> str:
    if fmt not in ("hex", "oklch"):
        raise ValueError(f"unknown css format '{fmt}'")
    body = to_css_variables(palette, fmt)
    return f"{selector} {{\n{body}\n}}" if body else f"{selector} {{\n}}"


def export_document(result: GenerateResult) -> dict:
    return {
        "config": result.config.to_dict(),
        "palette": [{"hex": p.hex, "ok": p.ok.to_dict()} for p in result.palette],
        "diagnostics": result.diagnostics.to_dict(),
    }


def to_json(result: GenerateResult) -> str:
    """Validated ``{config, palette, diagnostics}`` document, indented by two."""
    doc = export_document(result)
    validate_export(doc)
    return json.dumps(doc, indent=2)


__all__ = ["export_document", "to_css_block", "to_css_variables", "to_json"]
