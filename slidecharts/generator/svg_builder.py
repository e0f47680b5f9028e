"""SVG shape builder — composable low-level SVG generation on lxml.

A fluent builder for one-off graphics (icons, diagrams, custom
compositions).  Unlike the chart renderer, which never raises for bad
data, the builder fails fast on impossible geometry: a non-positive canvas,
radius, or rectangle size is a caller bug and raises ``ValueError``.

Usage::

    from slidecharts.generator.svg_builder import SVGBuilder

    svg = (
        SVGBuilder(800, 600, theme="corporate")
        .add_rect(0, 0, 800, 600, "var(--slidey-background)")
        .add_circle(400, 300, 100, "primary")
        .add_text("Hello", 400, 300, font_size=24, text_anchor="middle")
        .to_svg_string()
    )
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from typing import Callable

from lxml import etree

from slidecharts.schema.design_system import fmt
from slidecharts.schema.themes import THEME_ROLES

SVG_NS = "http://www.w3.org/2000/svg"

_VAR_RE = re.compile(r"var\(--slidey-(\w+)\)")


def _tag(name: str) -> str:
    return f"{{{SVG_NS}}}{name}"


def _num(value: float) -> str:
    return fmt(float(value))


@dataclass(frozen=True)
class GradientStop:
    """One color stop of a gradient; ``offset`` and ``opacity`` are 0-1."""
    offset: float
    color: str
    opacity: float | None = None


# ---------------------------------------------------------------------------
# SVGBuilder
# ---------------------------------------------------------------------------

class SVGBuilder:
    """Builds an SVG document element by element.

    Parameters
    ----------
    width, height : float
        Canvas size in pixels.  Both must be positive.
    theme : str, optional
        Built-in theme whose color roles (primary, secondary, accent,
        background, surface, text) resolve ``var(--slidey-*)`` references.
    class_name : str, optional
        CSS class for the root element.
    view_box : str, optional
        Explicit viewBox; defaults to ``"0 0 width height"``.
    """

    def __init__(self, width: float, height: float, theme: str | None = None,
                 class_name: str | None = None, view_box: str | None = None) -> None:
        if not width or not height or width <= 0 or height <= 0:
            raise ValueError("Width and height must be positive numbers")
        self.width = width
        self.height = height
        self.theme = theme
        self._roles = dict(THEME_ROLES.get(theme or "", {}))

        self._root = etree.Element(_tag("svg"), nsmap={None: SVG_NS})
        self._root.set("width", _num(width))
        self._root.set("height", _num(height))
        self._root.set("viewBox", view_box or f"0 0 {_num(width)} {_num(height)}")
        if class_name:
            self._root.set("class", class_name)
        self._defs = None
        self._parent = self._root

    # -- helpers -----------------------------------------------------------

    def resolve_color(self, color: str | None) -> str | None:
        """Map ``var(--slidey-role)`` or a bare role name to a theme color.

        Unknown roles and plain colors pass through unchanged.
        """
        if not color:
            return None
        match = _VAR_RE.fullmatch(color.strip())
        if match:
            return self._roles.get(match.group(1), color)
        return self._roles.get(color, color)

    def _add(self, name: str, attrs: dict[str, str | None]):
        element = etree.SubElement(self._parent, _tag(name))
        for key, value in attrs.items():
            if value is not None:
                element.set(key, value)
        return element

    def _paint(self, fill: str | None, stroke: str | None,
               stroke_width: float | None = None) -> dict[str, str | None]:
        attrs: dict[str, str | None] = {}
        if fill:
            attrs["fill"] = "none" if fill == "none" else self.resolve_color(fill)
        if stroke:
            attrs["stroke"] = self.resolve_color(stroke)
            attrs["stroke-width"] = _num(stroke_width if stroke_width else 1)
        return attrs

    def _get_defs(self):
        if self._defs is None:
            self._defs = etree.Element(_tag("defs"))
            self._root.insert(0, self._defs)
        return self._defs

    # -- shapes ------------------------------------------------------------

    def add_rect(self, x: float, y: float, width: float, height: float,
                 fill: str | None = None, stroke: str | None = None,
                 rx: float | None = None) -> "SVGBuilder":
        if width <= 0 or height <= 0:
            raise ValueError("Width and height must be positive")
        attrs = {"x": _num(x), "y": _num(y),
                 "width": _num(width), "height": _num(height)}
        if rx is not None:
            attrs["rx"] = _num(rx)
        attrs.update(self._paint(fill, stroke))
        self._add("rect", attrs)
        return self

    def add_circle(self, cx: float, cy: float, radius: float,
                   fill: str | None = None, stroke: str | None = None,
                   stroke_width: float | None = None) -> "SVGBuilder":
        if radius <= 0:
            raise ValueError("Radius must be positive")
        attrs = {"cx": _num(cx), "cy": _num(cy), "r": _num(radius)}
        attrs.update(self._paint(fill, stroke, stroke_width))
        self._add("circle", attrs)
        return self

    def add_ellipse(self, cx: float, cy: float, rx: float, ry: float,
                    fill: str | None = None, stroke: str | None = None) -> "SVGBuilder":
        if rx <= 0 or ry <= 0:
            raise ValueError("Radii must be positive")
        attrs = {"cx": _num(cx), "cy": _num(cy), "rx": _num(rx), "ry": _num(ry)}
        attrs.update(self._paint(fill, stroke))
        self._add("ellipse", attrs)
        return self

    def add_line(self, x1: float, y1: float, x2: float, y2: float,
                 stroke: str | None = None, stroke_width: float = 1) -> "SVGBuilder":
        attrs = {"x1": _num(x1), "y1": _num(y1), "x2": _num(x2), "y2": _num(y2)}
        attrs.update(self._paint(None, stroke, stroke_width))
        self._add("line", attrs)
        return self

    def add_path(self, path_data: str, fill: str | None = None,
                 stroke: str | None = None, stroke_width: float | None = None,
                 stroke_linecap: str | None = None,
                 stroke_linejoin: str | None = None,
                 fill_opacity: float | None = None,
                 stroke_opacity: float | None = None) -> "SVGBuilder":
        if not path_data or not path_data.strip():
            raise ValueError("Path data must not be empty")
        attrs: dict[str, str | None] = {"d": path_data}
        attrs.update(self._paint(fill, stroke, stroke_width))
        if stroke:
            attrs["stroke-linecap"] = stroke_linecap or "butt"
            attrs["stroke-linejoin"] = stroke_linejoin or "miter"
            if stroke_opacity is not None:
                attrs["stroke-opacity"] = _num(stroke_opacity)
        if fill_opacity is not None:
            attrs["fill-opacity"] = _num(fill_opacity)
        self._add("path", attrs)
        return self

    def add_polygon(self, points: list[tuple[float, float]],
                    fill: str | None = None, stroke: str | None = None) -> "SVGBuilder":
        if len(points) < 3:
            raise ValueError("A polygon needs at least three points")
        attrs = {"points": " ".join(f"{_num(x)},{_num(y)}" for x, y in points)}
        attrs.update(self._paint(fill, stroke))
        self._add("polygon", attrs)
        return self

    def add_polyline(self, points: list[tuple[float, float]],
                     stroke: str | None = None, stroke_width: float = 1,
                     fill: str = "none") -> "SVGBuilder":
        if len(points) < 2:
            raise ValueError("A polyline needs at least two points")
        attrs = {"points": " ".join(f"{_num(x)},{_num(y)}" for x, y in points)}
        attrs.update(self._paint(fill, stroke, stroke_width))
        self._add("polyline", attrs)
        return self

    def add_text(self, text: str, x: float, y: float,
                 font_size: float | None = None,
                 font_family: str | None = None,
                 font_weight: int | str | None = None,
                 text_anchor: str | None = None,
                 fill: str | None = None,
                 stroke: str | None = None,
                 stroke_width: float | None = None,
                 dominant_baseline: str | None = None) -> "SVGBuilder":
        attrs: dict[str, str | None] = {
            "x": _num(x),
            "y": _num(y),
            "font-size": _num(font_size) if font_size else None,
            "font-family": font_family,
            "font-weight": str(font_weight) if font_weight else None,
            "text-anchor": text_anchor,
            "dominant-baseline": dominant_baseline,
        }
        attrs.update(self._paint(fill, stroke, stroke_width))
        element = self._add("text", attrs)
        # lxml escapes text content on serialization.
        element.text = str(text)
        return self

    # -- paint servers -----------------------------------------------------

    def _add_gradient(self, name: str, gradient_id: str,
                      stops: list[GradientStop], attrs: dict[str, str]) -> "SVGBuilder":
        if not stops:
            raise ValueError("A gradient needs at least one stop")
        gradient = etree.SubElement(self._get_defs(), _tag(name))
        gradient.set("id", gradient_id)
        for key, value in attrs.items():
            gradient.set(key, value)
        for stop in stops:
            if not 0 <= stop.offset <= 1:
                raise ValueError("Gradient stop offset must be between 0 and 1")
            el = etree.SubElement(gradient, _tag("stop"))
            el.set("offset", _num(stop.offset))
            el.set("stop-color", self.resolve_color(stop.color) or stop.color)
            if stop.opacity is not None:
                el.set("stop-opacity", _num(stop.opacity))
        return self

    def add_linear_gradient(self, gradient_id: str, stops: list[GradientStop],
                            x1: float = 0, y1: float = 0,
                            x2: float = 1, y2: float = 0) -> "SVGBuilder":
        return self._add_gradient("linearGradient", gradient_id, stops, {
            "x1": _num(x1), "y1": _num(y1), "x2": _num(x2), "y2": _num(y2),
        })

    def add_radial_gradient(self, gradient_id: str, stops: list[GradientStop],
                            cx: float = 0.5, cy: float = 0.5) -> "SVGBuilder":
        return self._add_gradient("radialGradient", gradient_id, stops, {
            "cx": _num(cx), "cy": _num(cy),
        })

    # -- grouping ----------------------------------------------------------

    def add_group(self, group_id: str | None = None) -> "SVGBuilder":
        """Open a ``<g>``; following shapes go inside it until end_group()."""
        group = self._add("g", {"id": group_id})
        self._parent = group
        return self

    def end_group(self) -> "SVGBuilder":
        if self._parent is not self._root:
            self._parent = self._parent.getparent()
        return self

    # -- output ------------------------------------------------------------

    def get_theme_color(self, role: str) -> str | None:
        return self._roles.get(role)

    def to_svg_string(self) -> str:
        return etree.tostring(self._root, encoding="unicode")


def create_svg(width: float, height: float, theme: str | None = None,
               build: Callable[[SVGBuilder], None] | None = None) -> str:
    """Create a builder, let ``build`` populate it, and return the markup."""
    builder = SVGBuilder(width, height, theme=theme)
    if build is not None:
        build(builder)
    return builder.to_svg_string()
