"""Design system utilities — text escaping and value formatting.

Every caller-supplied string passes through ``escape`` before it is
embedded in markup.  Numeric annotations use the formatters below:
- Values: 300.0 -> "300", 12.5 -> "12.5"
- Percentages: X.X% (0.0% when the total is zero)
- Axis ticks: rounded integers
"""

import math

# Chrome colors shared by every chart family.
GRID_COLOR = "#e5e7eb"
AXIS_COLOR = "#374151"
TICK_TEXT_COLOR = "#4b5563"
LABEL_TEXT_COLOR = "#374151"
TITLE_COLOR = "#000"
ERROR_COLOR = "#dc2626"
FONT_FAMILY = "system-ui, sans-serif"


def escape(text) -> str:
    """Escape the five markup-significant characters.

    The ampersand goes first so existing entities are not double-decoded
    into raw markup.
    """
    if text is None:
        return ""
    return (
        str(text)
        .replace("&", "&amp;")
        .replace("<", "&lt;")
        .replace(">", "&gt;")
        .replace('"', "&quot;")
        .replace("'", "&#039;")
    )


def format_number(value: float | int) -> str:
    """Format a data value for display (integral floats lose their .0)."""
    if isinstance(value, float):
        if math.isnan(value) or math.isinf(value):
            return "0"
        if value == int(value):
            return str(int(value))
    return str(value)


def format_percentage(part: float, total: float) -> str:
    """Format ``part`` as a share of ``total`` with one decimal place.

    A zero total renders every share as 0.0% instead of NaN.
    """
    if total == 0:
        return "0.0%"
    return f"{part / total * 100:.1f}%"


def format_axis_value(value: float) -> str:
    """Format an axis tick as a rounded integer."""
    if math.isnan(value) or math.isinf(value):
        return "0"
    return str(int(math.floor(value + 0.5)))


def fmt(value: float) -> str:
    """Format a coordinate for an SVG attribute (trim float noise)."""
    if math.isnan(value) or math.isinf(value):
        return "0"
    if value == int(value):
        return str(int(value))
    return f"{value:.2f}".rstrip("0").rstrip(".")
