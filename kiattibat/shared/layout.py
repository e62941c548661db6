from __future__ import annotations

import logging
import math
from dataclasses import dataclass

from ..constants import (
    AREA_CONTEXT,
    FRAME_INFINITE_WAVE,
    FRAME_NONE,
    FRAME_ORNAMENTAL_CORNERS,
    FRAME_SIMPLE_GOLD,
    FRAME_THAI_PREMIUM,
    ROOT_ONLY_FRAME_STYLES,
)

logger = logging.getLogger("kiattibat.layout")

LAYOUT_DEFAULTS_MM: dict[str, float | None] = {
    "content_top": 25.0,
    "footer_bottom": 25.0,
    "logo_height": 35.0,
    "signature_spacing": 3.0,
    "signature_image_height": 20.0,
    "signature_image_width": None,
    "serial_top": 10.0,
    "serial_right": 10.0,
    "qr_bottom": 10.0,
    "qr_right": 10.0,
}

# Template attribute feeding each layout value
LAYOUT_SOURCES: dict[str, str] = {
    "content_top": "content_top",
    "footer_bottom": "footer_bottom",
    "logo_height": "logo_height",
    "signature_spacing": "signature_spacing",
    "signature_image_height": "signature_img_height",
    "signature_image_width": "signature_img_width",
    "serial_top": "serial_top",
    "serial_right": "serial_right",
    "qr_bottom": "qr_bottom",
    "qr_right": "qr_right",
}

GOLD = "#D4AF37"
CORNER_SIZE = "40px"
CORNER_STROKE = f"5px solid {GOLD}"
WAVE_PATTERN = (
    "url('data:image/svg+xml;utf8,<svg width=\"100%\" height=\"100%\" "
    "xmlns=\"http://www.w3.org/2000/svg\"><defs><pattern id=\"wave\" x=\"0\" y=\"0\" "
    "width=\"40\" height=\"40\" patternUnits=\"userSpaceOnUse\"><path d=\"M0 20 Q 10 0 "
    "20 20 T 40 20\" fill=\"none\" stroke=\"%23FDE047\" stroke-width=\"2\" "
    "stroke-opacity=\"0.3\"/></pattern></defs><rect width=\"100%\" height=\"100%\" "
    "fill=\"url(%23wave)\"/></svg>')"
)


def _mm(value: float) -> str:
    return f"{value:g}mm"


@dataclass(frozen=True)
class LayoutPlan:
    content_top: float
    footer_bottom: float
    logo_height: float
    signature_spacing: float
    signature_image_height: float
    signature_image_width: float | None
    serial_top: float
    serial_right: float
    qr_bottom: float
    qr_right: float

    def css(self, name: str) -> str:
        """CSS length for a layout value; an unset width renders as auto."""

        value = getattr(self, name)
        if value is None:
            return "auto"
        return _mm(value)


@dataclass(frozen=True)
class FramePrimitive:
    """One absolutely positioned border or ornament box."""

    css_class: str
    top: str | None = None
    right: str | None = None
    bottom: str | None = None
    left: str | None = None
    width: str | None = None
    height: str | None = None
    declarations: tuple[tuple[str, str], ...] = ()

    def style_rules(self) -> list[tuple[str, str]]:
        rules = [("position", "absolute")]
        for prop in ("top", "right", "bottom", "left", "width", "height"):
            value = getattr(self, prop)
            if value is not None:
                rules.append((prop, value))
        rules.extend(self.declarations)
        rules.extend([("z-index", "1"), ("pointer-events", "none")])
        return rules


@dataclass(frozen=True)
class FramePlan:
    style: str
    primitives: tuple[FramePrimitive, ...] = ()
    background_url: str = ""

    @property
    def has_background(self) -> bool:
        return bool(self.background_url)


def _inset(css_class: str, margin: str, *declarations: tuple[str, str]) -> FramePrimitive:
    return FramePrimitive(
        css_class,
        top=margin,
        right=margin,
        bottom=margin,
        left=margin,
        declarations=tuple(declarations),
    )


def _corner(css_class: str, vertical: str, horizontal: str, margin: str) -> FramePrimitive:
    anchors = {vertical: margin, horizontal: margin}
    return FramePrimitive(
        css_class,
        width=CORNER_SIZE,
        height=CORNER_SIZE,
        declarations=(
            (f"border-{vertical}", CORNER_STROKE),
            (f"border-{horizontal}", CORNER_STROKE),
        ),
        **anchors,
    )


FRAME_GEOMETRIES: dict[str, tuple[FramePrimitive, ...]] = {
    FRAME_SIMPLE_GOLD: (
        _inset(
            "frame-simple-gold",
            "6mm",
            ("border", f"3px solid {GOLD}"),
            ("border-radius", "8px"),
        ),
    ),
    FRAME_INFINITE_WAVE: (
        FramePrimitive(
            "frame-infinite-wave",
            top="0",
            left="0",
            width="100%",
            height="100%",
            declarations=(
                ("background-image", WAVE_PATTERN),
                ("border", "10mm solid transparent"),
                ("box-sizing", "border-box"),
            ),
        ),
    ),
    FRAME_ORNAMENTAL_CORNERS: (
        _inset("frame-ornamental-corners", "10mm", ("border", "2px solid #666")),
        _corner("frame-corner-top-left", "top", "left", "10mm"),
        _corner("frame-corner-top-right", "top", "right", "10mm"),
        _corner("frame-corner-bottom-left", "bottom", "left", "10mm"),
        _corner("frame-corner-bottom-right", "bottom", "right", "10mm"),
    ),
    FRAME_THAI_PREMIUM: (
        _inset(
            "frame-thai-premium",
            "10mm",
            ("border", "8px solid transparent"),
            ("border-image", "linear-gradient(to bottom right, #b88746, #fdf5a6, #b88746) 1"),
        ),
    ),
    FRAME_NONE: (),
}


def _layout_value(raw, default: float | None) -> float | None:
    if isinstance(raw, bool) or raw is None:
        return default
    try:
        value = float(raw)
    except (TypeError, ValueError):
        return default
    if math.isnan(value) or math.isinf(value):
        return default
    return value


def compose_layout(template) -> LayoutPlan:
    values = {
        name: _layout_value(getattr(template, LAYOUT_SOURCES[name], None), default)
        for name, default in LAYOUT_DEFAULTS_MM.items()
    }
    return LayoutPlan(**values)


def frame_style_for(template) -> str:
    style = getattr(template, "frame_style", None) or FRAME_SIMPLE_GOLD
    if style not in FRAME_GEOMETRIES:
        return FRAME_SIMPLE_GOLD
    context_key = getattr(template, "id", "") or AREA_CONTEXT
    if style in ROOT_ONLY_FRAME_STYLES and context_key != AREA_CONTEXT:
        logger.debug("frame %s not available for context %s", style, context_key)
        return FRAME_SIMPLE_GOLD
    return style


def compose_frame(template) -> FramePlan:
    """Pick the decorative frame, or none when a background image is set."""

    background = (getattr(template, "background_url", "") or "").strip()
    style = frame_style_for(template)
    if background:
        return FramePlan(style=style, background_url=background)
    return FramePlan(style=style, primitives=FRAME_GEOMETRIES[style])
