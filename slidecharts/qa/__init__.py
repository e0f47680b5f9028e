"""QA validation package for slidecharts.

Validates rendered SVG output against the chart request — checks the root
element and viewBox, primitive counts per chart family, pie percentages,
the doughnut total, and that caller text survived escaping.
"""

from .validator import (
    Issue,
    QAResult,
    QAValidator,
    validate_chart,
)

__all__ = [
    "Issue",
    "QAResult",
    "QAValidator",
    "validate_chart",
]
