"""Chart rendering module — renders ChartSpec values as SVG documents.

Converts a ChartSpec plus RenderOptions and a theme into a self-contained
SVG string with grid, axes, legend, title, and optional value labels.

Supported chart types:
    BAR      — Grouped bars, one bar per dataset per category
    LINE     — One straight-segment line per dataset with point markers
    AREA     — Line plus a translucent fill down to the zero baseline
    PIE      — Slices of the first dataset, clockwise from 12 o'clock
    DOUGHNUT — Pie with a hole and the total in the centre
    SCATTER  — Semi-transparent point markers, no connecting line

Bad data never raises: empty labels, empty datasets, an unknown chart type,
or mismatched dataset lengths return a small diagnostic fragment instead.

Usage:
    from slidecharts.generator.charts import render_chart

    svg = render_chart("bar", spec, "corporate", RenderOptions(title="Sales"))
"""

from __future__ import annotations

import math
from typing import Callable

from slidecharts.generator.layout import (
    CartesianLayout,
    RadialLayout,
    ScaleMapper,
    plan_cartesian_layout,
    plan_radial_layout,
)
from slidecharts.schema.design_system import (
    AXIS_COLOR,
    ERROR_COLOR,
    FONT_FAMILY,
    GRID_COLOR,
    LABEL_TEXT_COLOR,
    TICK_TEXT_COLOR,
    TITLE_COLOR,
    escape,
    fmt,
    format_axis_value,
    format_number,
    format_percentage,
)
from slidecharts.schema.models import (
    ChartDocument,
    ChartSpec,
    ChartType,
    Dataset,
    RenderOptions,
)
from slidecharts.schema.themes import DEFAULT_THEME, ThemeRegistry, colors_for, cycle_colors


# ---------------------------------------------------------------------------
# Constants
# ---------------------------------------------------------------------------

SVG_NS = "http://www.w3.org/2000/svg"

BAR_GUTTER = 10
BAR_MAX_WIDTH = 60
BAR_MIN_WIDTH = 1

LINE_WIDTH = 4
AREA_LINE_WIDTH = 3
AREA_OPACITY = 0.3
POINT_RADIUS = 8
SCATTER_RADIUS = 10
SCATTER_OPACITY = 0.7

DOUGHNUT_HOLE = 0.6
PIE_LABEL_POSITION = 0.7        # Fraction of the way from inner to outer radius
DOUGHNUT_LABEL_POSITION = 0.5

LEGEND_ITEM_WIDTH = 200

# Primitive classes; the QA validator counts elements by these.
CLASS_BAR = "bar"
CLASS_LINE = "series-line"
CLASS_AREA = "series-area"
CLASS_POINT = "point"
CLASS_SLICE = "slice"
CLASS_SWATCH = "legend-swatch"


# ---------------------------------------------------------------------------
# Primitive helpers
# ---------------------------------------------------------------------------

def _attrs(**attrs) -> str:
    parts = []
    for key, value in attrs.items():
        if value is None:
            continue
        name = key.rstrip("_").replace("_", "-")
        if isinstance(value, float):
            value = fmt(value)
        parts.append(f'{name}="{escape(value)}"')
    return " ".join(parts)


def _rect(x, y, width, height, fill, rx=None, class_=None) -> str:
    return f"<rect {_attrs(class_=class_, x=float(x), y=float(y), width=float(width), height=float(height), fill=fill, rx=rx)}/>"


def _line(x1, y1, x2, y2, stroke, stroke_width) -> str:
    return f"<line {_attrs(x1=float(x1), y1=float(y1), x2=float(x2), y2=float(y2), stroke=stroke, stroke_width=stroke_width)}/>"


def _circle(cx, cy, r, fill, class_=None, **extra) -> str:
    return f"<circle {_attrs(class_=class_, cx=float(cx), cy=float(cy), r=r, fill=fill, **extra)}/>"


def _path(d, class_=None, **extra) -> str:
    return f"<path {_attrs(class_=class_, d=d, **extra)}/>"


def _text(x, y, content, font_size, fill, anchor=None, weight=None) -> str:
    """A text element; ``content`` must already be escaped."""
    attrs = _attrs(x=float(x), y=float(y), text_anchor=anchor,
                   font_size=font_size, font_weight=weight, fill=fill)
    return f"<text {attrs}>{content}</text>"


def _polyline_path(points: list[tuple[float, float]]) -> str:
    """Straight-segment path through ``points`` (M first, L the rest)."""
    return " ".join(
        f"{'M' if i == 0 else 'L'} {fmt(x)} {fmt(y)}"
        for i, (x, y) in enumerate(points)
    )


# ---------------------------------------------------------------------------
# Output assembly
# ---------------------------------------------------------------------------

def render_error(message: str) -> str:
    """Diagnostic fragment returned in place of a chart for bad input."""
    return (
        f'<div class="chart-error" style="padding: 2rem; text-align: center; '
        f'color: {ERROR_COLOR};">'
        '<p style="font-size: 24px; font-weight: 600;">Chart Error</p>'
        f'<p style="font-size: 20px;">{escape(message)}</p>'
        "</div>"
    )


def _assemble(width: int, height: int, title: str | None, body: list[str]) -> str:
    """Wrap chart primitives in the root <svg> element."""
    parts = [
        f'<svg viewBox="0 0 {fmt(float(width))} {fmt(float(height))}" '
        f'xmlns="{SVG_NS}" '
        f'style="max-width: 100%; height: auto; font-family: {FONT_FAMILY};">'
    ]
    if title:
        parts.append(_text(width / 2, 30, escape(title), 28, TITLE_COLOR,
                           anchor="middle", weight=600))
    parts.extend(body)
    parts.append("</svg>")
    return "".join(parts)


# ---------------------------------------------------------------------------
# Color resolution
# ---------------------------------------------------------------------------

def _single_fill(dataset: Dataset) -> str | None:
    """The dataset's fill as one color (first entry of a per-index list)."""
    fill = dataset.fill_color
    if isinstance(fill, tuple):
        return fill[0] if fill else None
    return fill


def _indexed_fill(dataset: Dataset, index: int, fallback: str) -> str:
    """Per-index fill > single fill > fallback."""
    fill = dataset.fill_color
    if isinstance(fill, tuple):
        return fill[index] if index < len(fill) else fallback
    return fill or fallback


# ---------------------------------------------------------------------------
# Cartesian chrome
# ---------------------------------------------------------------------------

def _cartesian_frame(layout: CartesianLayout, scale: ScaleMapper,
                     show_grid: bool) -> list[str]:
    """Grid lines, both axes, and y tick labels."""
    plot = layout.plot
    parts: list[str] = []
    ticks = scale.ticks()
    if show_grid:
        for _, y in ticks:
            parts.append(_line(plot.left, y, plot.right, y, GRID_COLOR, 1))
    parts.append(_line(plot.left, plot.top, plot.left, plot.bottom, AXIS_COLOR, 2))
    baseline = scale.baseline_y
    parts.append(_line(plot.left, baseline, plot.right, baseline, AXIS_COLOR, 2))
    for value, y in ticks:
        parts.append(_text(plot.left - 10, y + 6, format_axis_value(value), 20,
                           TICK_TEXT_COLOR, anchor="end"))
    return parts


def _category_labels(labels, xs, y) -> list[str]:
    return [
        _text(x, y, escape(label), 20, TICK_TEXT_COLOR, anchor="middle")
        for label, x in zip(labels, xs)
    ]


def _row_legend(layout: CartesianLayout, datasets, colors,
                marker: str = "rect") -> list[str]:
    """Single centred row of swatch + dataset label entries."""
    parts: list[str] = []
    y = layout.legend_y
    start_x = layout.width / 2 - len(datasets) * LEGEND_ITEM_WIDTH / 2
    for i, dataset in enumerate(datasets):
        x = start_x + i * LEGEND_ITEM_WIDTH
        if marker == "circle":
            parts.append(_circle(x + 10, y + 10, 10, colors[i], class_=CLASS_SWATCH))
        else:
            parts.append(_rect(x, y, 20, 20, colors[i], rx=2, class_=CLASS_SWATCH))
        parts.append(_text(x + 30, y + 16, escape(dataset.label), 20, LABEL_TEXT_COLOR))
    return parts


def _prepare_cartesian(spec: ChartSpec, options: RenderOptions):
    layout = plan_cartesian_layout(options.width, options.height,
                                   bool(options.title), options.show_legend)
    scale = ScaleMapper.from_values(spec.all_values(), layout.plot)
    return layout, scale


def _series_points(dataset: Dataset, layout: CartesianLayout,
                   scale: ScaleMapper) -> list[tuple[float, float]]:
    count = len(dataset.values)
    return [
        (layout.point_x(i, count), scale.value_to_y(value))
        for i, value in enumerate(dataset.values)
    ]


def _value_labels(dataset: Dataset, points) -> list[str]:
    return [
        _text(x, y - 15, format_number(value), 18, LABEL_TEXT_COLOR,
              anchor="middle", weight=500)
        for value, (x, y) in zip(dataset.values, points)
    ]


# ---------------------------------------------------------------------------
# Bar
# ---------------------------------------------------------------------------

def _bar_width(group_width: float, dataset_count: int) -> float:
    """Width of one bar in a group, capped at the max and floored at 1px."""
    width = min(group_width / dataset_count - BAR_GUTTER, BAR_MAX_WIDTH)
    return max(width, BAR_MIN_WIDTH)


def _render_bar(spec: ChartSpec, palette: list[str], options: RenderOptions) -> str:
    layout, scale = _prepare_cartesian(spec, options)
    label_count = len(spec.labels)
    dataset_count = len(spec.datasets)
    colors = cycle_colors(palette, dataset_count)

    group_width = layout.band_width(label_count)
    bar_width = _bar_width(group_width, dataset_count)
    block_width = dataset_count * bar_width + (dataset_count - 1) * BAR_GUTTER
    baseline = scale.baseline_y

    body = _cartesian_frame(layout, scale, options.show_grid)
    for li in range(label_count):
        group_mid = layout.band_x(li, label_count) + group_width / 2
        block_left = group_mid - block_width / 2
        for di, dataset in enumerate(spec.datasets):
            value = dataset.values[li]
            bar_height = abs(value * scale.scale)
            x = block_left + di * (bar_width + BAR_GUTTER)
            y = baseline - bar_height if value >= 0 else baseline
            color = _indexed_fill(dataset, li, colors[di])
            body.append(_rect(x, y, bar_width, bar_height, color, rx=4, class_=CLASS_BAR))
            if options.show_values:
                text_y = y - 10 if value >= 0 else y + bar_height + 25
                body.append(_text(x + bar_width / 2, text_y, format_number(value), 18,
                                  LABEL_TEXT_COLOR, anchor="middle", weight=500))

    xs = [layout.band_x(i, label_count) + group_width / 2 for i in range(label_count)]
    body.extend(_category_labels(spec.labels, xs, layout.plot.bottom + 35))

    if options.show_legend:
        legend_colors = [_single_fill(ds) or colors[i] for i, ds in enumerate(spec.datasets)]
        body.extend(_row_legend(layout, spec.datasets, legend_colors))
    return _assemble(options.width, options.height, options.title, body)


# ---------------------------------------------------------------------------
# Line / Area
# ---------------------------------------------------------------------------

def _render_line(spec: ChartSpec, palette: list[str], options: RenderOptions) -> str:
    layout, scale = _prepare_cartesian(spec, options)
    colors = cycle_colors(palette, len(spec.datasets))
    line_colors: list[str] = []

    body = _cartesian_frame(layout, scale, options.show_grid)
    for di, dataset in enumerate(spec.datasets):
        color = dataset.stroke_color or colors[di]
        point_color = _single_fill(dataset) or color
        line_colors.append(color)
        points = _series_points(dataset, layout, scale)

        body.append(_path(_polyline_path(points), class_=CLASS_LINE, stroke=color,
                          stroke_width=dataset.stroke_width or LINE_WIDTH, fill="none",
                          stroke_linecap="round", stroke_linejoin="round"))
        for x, y in points:
            body.append(_circle(x, y, POINT_RADIUS, point_color, class_=CLASS_POINT,
                                stroke="#fff", stroke_width=2))
        if options.show_values:
            body.extend(_value_labels(dataset, points))

    xs = [layout.point_x(i, len(spec.labels)) for i in range(len(spec.labels))]
    body.extend(_category_labels(spec.labels, xs, layout.plot.bottom + 35))

    if options.show_legend:
        body.extend(_row_legend(layout, spec.datasets, line_colors))
    return _assemble(options.width, options.height, options.title, body)


def _render_area(spec: ChartSpec, palette: list[str], options: RenderOptions) -> str:
    layout, scale = _prepare_cartesian(spec, options)
    colors = cycle_colors(palette, len(spec.datasets))
    fill_colors: list[str] = []
    baseline = scale.baseline_y

    body = _cartesian_frame(layout, scale, options.show_grid)
    for di, dataset in enumerate(spec.datasets):
        fill = _single_fill(dataset) or colors[di]
        stroke = dataset.stroke_color or colors[di]
        fill_colors.append(fill)
        points = _series_points(dataset, layout, scale)

        # Same outline, closed down to the zero baseline and back.
        first_x, last_x = points[0][0], points[-1][0]
        closed = (f"{_polyline_path(points)} L {fmt(last_x)} {fmt(baseline)} "
                  f"L {fmt(first_x)} {fmt(baseline)} Z")
        body.append(_path(closed, class_=CLASS_AREA, fill=fill, fill_opacity=AREA_OPACITY))
        body.append(_path(_polyline_path(points), class_=CLASS_LINE, stroke=stroke,
                          stroke_width=dataset.stroke_width or AREA_LINE_WIDTH,
                          fill="none"))
        if options.show_values:
            body.extend(_value_labels(dataset, points))

    xs = [layout.point_x(i, len(spec.labels)) for i in range(len(spec.labels))]
    body.extend(_category_labels(spec.labels, xs, layout.plot.bottom + 35))

    if options.show_legend:
        body.extend(_row_legend(layout, spec.datasets, fill_colors))
    return _assemble(options.width, options.height, options.title, body)


# ---------------------------------------------------------------------------
# Scatter
# ---------------------------------------------------------------------------

def _render_scatter(spec: ChartSpec, palette: list[str], options: RenderOptions) -> str:
    layout, scale = _prepare_cartesian(spec, options)
    colors = cycle_colors(palette, len(spec.datasets))
    marker_colors: list[str] = []

    body = _cartesian_frame(layout, scale, options.show_grid)
    for di, dataset in enumerate(spec.datasets):
        color = _single_fill(dataset) or colors[di]
        marker_colors.append(color)
        for x, y in _series_points(dataset, layout, scale):
            body.append(_circle(x, y, SCATTER_RADIUS, color, class_=CLASS_POINT,
                                opacity=SCATTER_OPACITY, stroke="#fff", stroke_width=2))

    xs = [layout.point_x(i, len(spec.labels)) for i in range(len(spec.labels))]
    body.extend(_category_labels(spec.labels, xs, layout.plot.bottom + 35))

    if options.show_legend:
        body.extend(_row_legend(layout, spec.datasets, marker_colors, marker="circle"))
    return _assemble(options.width, options.height, options.title, body)


# ---------------------------------------------------------------------------
# Pie / Doughnut
# ---------------------------------------------------------------------------

def _polar(cx: float, cy: float, radius: float, degrees: float) -> tuple[float, float]:
    radians = math.radians(degrees)
    return cx + radius * math.cos(radians), cy + radius * math.sin(radians)


def slice_angles(values, total: float) -> list[float]:
    """Sweep of each slice in degrees; all zero when the total is zero."""
    if total == 0:
        return [0.0 for _ in values]
    return [360 * value / total for value in values]


def _slice_path(layout: RadialLayout, start: float, sweep: float,
                inner_radius: float) -> str:
    """Wedge (inner_radius == 0) or ring segment from ``start`` over ``sweep``."""
    cx, cy, r = layout.center_x, layout.center_y, layout.radius
    end = start + sweep

    if sweep >= 360 - 1e-9:
        # A full-circle arc has identical endpoints and would not draw; split
        # it into two half arcs.
        top, bottom = _polar(cx, cy, r, start), _polar(cx, cy, r, start + 180)
        d = (f"M {fmt(top[0])} {fmt(top[1])} "
             f"A {fmt(r)} {fmt(r)} 0 1 1 {fmt(bottom[0])} {fmt(bottom[1])} "
             f"A {fmt(r)} {fmt(r)} 0 1 1 {fmt(top[0])} {fmt(top[1])} Z")
        if inner_radius > 0:
            itop = _polar(cx, cy, inner_radius, start)
            ibottom = _polar(cx, cy, inner_radius, start + 180)
            ir = fmt(inner_radius)
            d += (f" M {fmt(itop[0])} {fmt(itop[1])} "
                  f"A {ir} {ir} 0 1 0 {fmt(ibottom[0])} {fmt(ibottom[1])} "
                  f"A {ir} {ir} 0 1 0 {fmt(itop[0])} {fmt(itop[1])} Z")
        return d

    large_arc = 1 if sweep > 180 else 0
    x1, y1 = _polar(cx, cy, r, start)
    x2, y2 = _polar(cx, cy, r, end)
    if inner_radius <= 0:
        return (f"M {fmt(cx)} {fmt(cy)} L {fmt(x1)} {fmt(y1)} "
                f"A {fmt(r)} {fmt(r)} 0 {large_arc} 1 {fmt(x2)} {fmt(y2)} Z")

    x3, y3 = _polar(cx, cy, inner_radius, end)
    x4, y4 = _polar(cx, cy, inner_radius, start)
    ir = fmt(inner_radius)
    return (f"M {fmt(x1)} {fmt(y1)} "
            f"A {fmt(r)} {fmt(r)} 0 {large_arc} 1 {fmt(x2)} {fmt(y2)} "
            f"L {fmt(x3)} {fmt(y3)} "
            f"A {ir} {ir} 0 {large_arc} 0 {fmt(x4)} {fmt(y4)} Z")


def _column_legend(layout: RadialLayout, labels, values, total: float,
                   colors: list[str]) -> list[str]:
    """Vertical list of swatch + "label (pct%)" rows."""
    parts: list[str] = []
    x = 50
    for i, label in enumerate(labels):
        y = layout.legend_y + i * 35
        value = values[i] if i < len(values) else 0.0
        parts.append(_rect(x, y, 24, 24, colors[i], rx=2, class_=CLASS_SWATCH))
        parts.append(_text(x + 35, y + 18,
                           f"{escape(label)} ({format_percentage(value, total)})",
                           20, LABEL_TEXT_COLOR))
    return parts


def _render_radial(spec: ChartSpec, palette: list[str], options: RenderOptions,
                   doughnut: bool) -> str:
    kind = "doughnut" if doughnut else "pie"
    if not spec.datasets:
        return render_error(f"No dataset provided for {kind} chart")
    dataset = spec.datasets[0]
    values = dataset.values
    total = sum(values)

    layout = plan_radial_layout(options.width, options.height, bool(options.title),
                                options.show_legend, len(spec.labels))
    inner_radius = layout.radius * DOUGHNUT_HOLE if doughnut else 0.0
    label_position = DOUGHNUT_LABEL_POSITION if doughnut else PIE_LABEL_POSITION
    label_radius = inner_radius + (layout.radius - inner_radius) * label_position
    # Slices take the theme color by index unless the dataset gives one per slice.
    fills = dataset.fill_color if isinstance(dataset.fill_color, tuple) else ()
    colors = [
        fills[i] if i < len(fills) else color
        for i, color in enumerate(cycle_colors(palette, max(len(values), len(spec.labels))))
    ]

    body: list[str] = []
    current = -90.0
    for i, (value, sweep) in enumerate(zip(values, slice_angles(values, total))):
        body.append(_path(_slice_path(layout, current, sweep, inner_radius),
                          class_=CLASS_SLICE, fill=colors[i], stroke="#fff",
                          stroke_width=3, fill_rule="evenodd"))
        if options.show_values:
            lx, ly = _polar(layout.center_x, layout.center_y, label_radius,
                            current + sweep / 2)
            body.append(_text(lx, ly, format_percentage(value, total), 22, "#fff",
                              anchor="middle", weight=600))
        current += sweep

    if doughnut:
        body.append(_text(layout.center_x, layout.center_y, "Total", 32,
                          LABEL_TEXT_COLOR, anchor="middle", weight=600))
        body.append(_text(layout.center_x, layout.center_y + 35, format_number(total),
                          36, TITLE_COLOR, anchor="middle", weight=700))

    if options.show_legend:
        body.extend(_column_legend(layout, spec.labels, values, total, colors))
    return _assemble(options.width, options.height, options.title, body)


def _render_pie(spec: ChartSpec, palette: list[str], options: RenderOptions) -> str:
    return _render_radial(spec, palette, options, doughnut=False)


def _render_doughnut(spec: ChartSpec, palette: list[str], options: RenderOptions) -> str:
    return _render_radial(spec, palette, options, doughnut=True)


# ---------------------------------------------------------------------------
# Dispatch
# ---------------------------------------------------------------------------

Renderer = Callable[[ChartSpec, list, RenderOptions], str]

_RENDERERS: dict[ChartType, Renderer] = {
    ChartType.BAR: _render_bar,
    ChartType.LINE: _render_line,
    ChartType.AREA: _render_area,
    ChartType.PIE: _render_pie,
    ChartType.DOUGHNUT: _render_doughnut,
    ChartType.SCATTER: _render_scatter,
}

_missing = set(ChartType) - set(_RENDERERS)
if _missing:
    raise RuntimeError(f"No renderer registered for {sorted(t.value for t in _missing)}")


def _check_lengths(spec: ChartSpec) -> str | None:
    """Diagnostic for the first dataset not aligned to the labels, if any."""
    expected = len(spec.labels)
    for dataset in spec.datasets:
        if len(dataset.values) != expected:
            return (f'Dataset "{dataset.label}" has {len(dataset.values)} values, '
                    f"expected {expected}")
    return None


# ---------------------------------------------------------------------------
# Public API
# ---------------------------------------------------------------------------

def render_chart(
    chart_type: ChartType | str,
    spec: ChartSpec,
    theme: str | None = DEFAULT_THEME,
    options: RenderOptions | None = None,
    registry: ThemeRegistry | None = None,
) -> str:
    """Render a chart as an SVG document string.

    Args:
        chart_type: ChartType member or selector string ("bar", "pie", ...).
            Selector strings are matched after stripping whitespace and
            lowercasing, so " Bar " selects a bar chart.
        spec: Labels and datasets to plot.
        theme: Theme identifier; unknown themes use the default palette.
        options: Canvas size and chrome toggles (defaults to RenderOptions()).
        registry: Custom themes to resolve ``theme`` against.

    Returns:
        The SVG markup, or a diagnostic ``<div>`` fragment when the input
        cannot be charted.  Never raises for bad data.
    """
    if options is None:
        options = RenderOptions()

    if not spec.labels:
        return render_error("No labels provided")
    if not spec.datasets:
        return render_error("No datasets provided")

    kind = ChartType.parse(chart_type)
    if kind is None:
        return render_error(f"Unsupported chart type: {chart_type}")

    if not kind.is_radial:
        problem = _check_lengths(spec)
        if problem:
            return render_error(problem)

    palette = colors_for(theme, registry)
    return _RENDERERS[kind](spec, palette, options)


def render_chart_document(document: ChartDocument,
                          registry: ThemeRegistry | None = None) -> str:
    """Render a ChartDocument loaded from YAML."""
    return render_chart(document.chart_type, document.spec, document.theme,
                        document.options, registry)


def is_error_output(markup: str) -> bool:
    """True if ``markup`` is a diagnostic fragment rather than a chart."""
    return markup.lstrip().startswith('<div class="chart-error"')
