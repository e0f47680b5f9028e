"""slidecharts — SVG chart rendering for presentations.

Renders bar, line, area, pie, doughnut, and scatter charts from plain chart
definitions into self-contained, theme-aware SVG documents.
"""

from slidecharts.generator.charts import render_chart, render_chart_document
from slidecharts.schema.models import ChartSpec, ChartType, Dataset, RenderOptions
from slidecharts.schema.themes import ThemeRegistry, colors_for

__all__ = [
    "ChartSpec",
    "ChartType",
    "Dataset",
    "RenderOptions",
    "ThemeRegistry",
    "colors_for",
    "render_chart",
    "render_chart_document",
]
