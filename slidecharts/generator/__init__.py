"""Chart generator package — SVG rendering engine.

Consumes a ChartSpec, a theme, and RenderOptions to produce SVG markup.

Modules:
    charts: Chart renderers (bar, line, area, pie, doughnut, scatter)
    layout: Layout planning and value-to-pixel scaling
    svg_builder: Low-level fluent SVG shape builder
"""

from .charts import render_chart, render_chart_document, render_error
from .svg_builder import GradientStop, SVGBuilder, create_svg

__all__ = [
    "GradientStop",
    "SVGBuilder",
    "create_svg",
    "render_chart",
    "render_chart_document",
    "render_error",
]
