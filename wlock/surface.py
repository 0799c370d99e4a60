"""Drawing surfaces that consume a :class:`RenderState`."""

from __future__ import annotations

import math
from html import escape as html_escape
from typing import Protocol

from wlock.geometry import ArcSpec, Color, RenderState, TextSpec, Viewport

_SVG_ANCHORS = {"left": "start", "center": "middle", "right": "end"}


class Surface(Protocol):
    def draw_arc(self, arc: ArcSpec) -> None: ...

    def draw_text(self, text: TextSpec) -> None: ...


def paint(state: RenderState, surface: Surface) -> None:
    """Draw every arc of ``state`` followed by its text."""
    for arc in state.arcs():
        surface.draw_arc(arc)
    for text in state.texts:
        surface.draw_text(text)


def _point(arc: ArcSpec, degrees: float) -> tuple[float, float]:
    radians = math.radians(degrees)
    return arc.center_x + arc.radius * math.cos(radians), arc.center_y + arc.radius * math.sin(radians)


def _fill_attrs(color: Color, attr: str) -> str:
    opacity = round(color.alpha / 255, 3)
    return f'{attr}="{color.to_hex()}" {attr}-opacity="{opacity}"'


def arc_path(arc: ArcSpec) -> str:
    """SVG path data for an arc; sweeps past a half turn are split in two."""
    sweep = max(-360.0, min(360.0, arc.sweep_angle))
    segments = 2 if abs(sweep) > 180 else 1
    step = sweep / segments
    start_x, start_y = _point(arc, arc.start_angle)
    parts = [f"M {start_x:.2f} {start_y:.2f}"]
    sweep_flag = 1 if sweep > 0 else 0
    for index in range(1, segments + 1):
        end_x, end_y = _point(arc, arc.start_angle + step * index)
        parts.append(f"A {arc.radius:.2f} {arc.radius:.2f} 0 0 {sweep_flag} {end_x:.2f} {end_y:.2f}")
    return " ".join(parts)


class SvgSurface:
    """Collects SVG elements for a preview of the face."""

    def __init__(self, viewport: Viewport | None = None, background: Color | None = None) -> None:
        self.viewport = viewport or Viewport()
        self.background = background or Color(0, 0, 0)
        self._elements: list[str] = []

    def draw_arc(self, arc: ArcSpec) -> None:
        if arc.color.is_transparent or abs(arc.sweep_angle) < 0.01:
            return
        cap = "round" if arc.round_cap else "butt"
        self._elements.append(
            f'<path d="{arc_path(arc)}" fill="none" {_fill_attrs(arc.color, "stroke")} '
            f'stroke-width="{arc.stroke_width:g}" stroke-linecap="{cap}"/>'
        )

    def draw_text(self, text: TextSpec) -> None:
        if text.color.is_transparent or not text.content:
            return
        anchor = _SVG_ANCHORS[text.align]
        self._elements.append(
            f'<text x="{text.x:.2f}" y="{text.y:.2f}" font-size="{text.size:g}" '
            f'text-anchor="{anchor}" {_fill_attrs(text.color, "fill")}>{html_escape(text.content)}</text>'
        )

    @property
    def elements(self) -> tuple[str, ...]:
        return tuple(self._elements)

    def to_svg(self) -> str:
        width = f"{self.viewport.width:g}"
        height = f"{self.viewport.height:g}"
        body = "\n  ".join(self._elements)
        return (
            f'<svg xmlns="http://www.w3.org/2000/svg" width="{width}" height="{height}" '
            f'viewBox="0 0 {width} {height}" font-family="sans-serif">\n'
            f'  <rect width="100%" height="100%" fill="{self.background.to_hex()}"/>\n'
            f"  {body}\n"
            "</svg>\n"
        )


def render_svg(state: RenderState, viewport: Viewport | None = None) -> str:
    surface = SvgSurface(viewport)
    paint(state, surface)
    return surface.to_svg()
