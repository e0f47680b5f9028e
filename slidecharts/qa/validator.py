"""QA validator — inspects rendered SVG output against its chart request.

Validates that rendered markup matches the request that produced it: a
single well-formed SVG root, the expected viewBox, one primitive per data
point, slice angles and percentages that add up, and every caller label
present as text.  Uses lxml to read the markup back, so injected markup in
an unescaped label shows up as a parse failure or a stray element.

Usage::

    from slidecharts.qa.validator import QAValidator

    validator = QAValidator("bar", spec, options)
    result = validator.validate(svg)
    assert result.passed, result.summary()
"""

import math
from dataclasses import dataclass, field

from lxml import etree

from slidecharts.generator.charts import (
    CLASS_AREA,
    CLASS_BAR,
    CLASS_POINT,
    CLASS_SLICE,
    SVG_NS,
    is_error_output,
)
from slidecharts.schema.design_system import fmt, format_number
from slidecharts.schema.models import ChartSpec, ChartType, RenderOptions

_NS = {"svg": SVG_NS}


# ---------------------------------------------------------------------------
# Result types
# ---------------------------------------------------------------------------

@dataclass
class Issue:
    """A single QA issue found during validation."""
    severity: str       # "error" or "warning"
    category: str       # e.g. "parse", "view_box", "primitive_count"
    message: str

    def __str__(self) -> str:
        return f"[{self.severity.upper()}] {self.category}: {self.message}"


@dataclass
class QAResult:
    """Aggregated result of QA validation."""
    issues: list[Issue] = field(default_factory=list)

    @property
    def errors(self) -> list[Issue]:
        return [i for i in self.issues if i.severity == "error"]

    @property
    def warnings(self) -> list[Issue]:
        return [i for i in self.issues if i.severity == "warning"]

    @property
    def passed(self) -> bool:
        return len(self.errors) == 0

    @property
    def error_count(self) -> int:
        return len(self.errors)

    @property
    def warning_count(self) -> int:
        return len(self.warnings)

    def summary(self) -> str:
        """One-line summary string."""
        status = "PASS" if self.passed else "FAIL"
        return (
            f"QA {status}: {self.error_count} error(s), "
            f"{self.warning_count} warning(s)"
        )

    def report(self) -> str:
        """Multi-line report of all issues."""
        lines = [self.summary()]
        for issue in self.issues:
            lines.append(f"  {issue}")
        return "\n".join(lines)

    def error(self, category: str, message: str) -> None:
        self.issues.append(Issue("error", category, message))

    def warn(self, category: str, message: str) -> None:
        self.issues.append(Issue("warning", category, message))


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------

def _count(root, tag: str, css_class: str) -> int:
    return len(root.xpath(f'//svg:{tag}[@class="{css_class}"]', namespaces=_NS))


def _texts(root) -> list[str]:
    """Text content of every <text> element, in document order."""
    return ["".join(t.itertext()) for t in root.iterfind(".//svg:text", _NS)]


def _error_message(markup: str) -> str:
    """The diagnostic line of a soft-failure fragment."""
    try:
        fragment = etree.fromstring(markup.strip())
    except etree.XMLSyntaxError:
        return markup.strip()
    paragraphs = ["".join(p.itertext()) for p in fragment.iter("p")]
    return paragraphs[-1] if paragraphs else "Chart Error"


# ---------------------------------------------------------------------------
# QAValidator
# ---------------------------------------------------------------------------

class QAValidator:
    """Validates rendered chart markup against the request that produced it.

    Parameters
    ----------
    chart_type : ChartType or str
        The chart family that was rendered.
    spec : ChartSpec
        The labels and datasets that were rendered.
    options : RenderOptions, optional
        The render options used (defaults to RenderOptions()).
    """

    def __init__(self, chart_type, spec: ChartSpec,
                 options: RenderOptions | None = None) -> None:
        self.chart_type = ChartType.parse(chart_type)
        self.spec = spec
        self.options = options or RenderOptions()

    def validate(self, markup: str) -> QAResult:
        """Run all validation checks on rendered markup.

        Parameters
        ----------
        markup : str
            Output of ``render_chart``.

        Returns
        -------
        QAResult
            Aggregated validation result.
        """
        result = QAResult()

        if is_error_output(markup):
            result.error("render_error", _error_message(markup))
            return result

        try:
            root = etree.fromstring(markup.encode("utf-8"))
        except etree.XMLSyntaxError as exc:
            result.error("parse", f"Output is not well-formed markup: {exc}")
            return result

        self._check_root(root, result)
        if self.chart_type is None:
            result.error("chart_type", "Chart type is not supported")
            return result

        if self.chart_type.is_radial:
            self._check_radial(root, result)
        else:
            self._check_cartesian(root, result)
        self._check_text(root, result)
        return result

    # ------------------------------------------------------------------
    # Document-level checks
    # ------------------------------------------------------------------

    def _check_root(self, root, result: QAResult) -> None:
        """Verify the root element and its viewBox."""
        if root.tag != f"{{{SVG_NS}}}svg":
            result.error("root", f"Root element is {root.tag!r}, expected svg")
        expected = (f"0 0 {fmt(float(self.options.width))} "
                    f"{fmt(float(self.options.height))}")
        actual = root.get("viewBox")
        if actual != expected:
            result.error("view_box", f"viewBox {actual!r} != expected {expected!r}")
        nested = root.xpath("//svg:svg", namespaces=_NS)
        if len(nested) > 1:
            result.error("root", f"Found {len(nested)} svg elements, expected 1")

    # ------------------------------------------------------------------
    # Chart-family checks
    # ------------------------------------------------------------------

    def _check_cartesian(self, root, result: QAResult) -> None:
        labels = len(self.spec.labels)
        datasets = len(self.spec.datasets)

        if self.chart_type == ChartType.BAR:
            bars = _count(root, "rect", CLASS_BAR)
            if bars != labels * datasets:
                result.error("primitive_count",
                             f"Expected {labels * datasets} bars, found {bars}")
            return

        if self.chart_type in (ChartType.LINE, ChartType.SCATTER):
            points = _count(root, "circle", CLASS_POINT)
            if points != labels * datasets:
                result.error("primitive_count",
                             f"Expected {labels} markers for each of {datasets} "
                             f"dataset(s), found {points} in total")

        if self.chart_type == ChartType.AREA:
            areas = _count(root, "path", CLASS_AREA)
            if areas != datasets:
                result.error("primitive_count",
                             f"Expected {datasets} filled areas, found {areas}")

    def _check_radial(self, root, result: QAResult) -> None:
        values = self.spec.datasets[0].values if self.spec.datasets else ()
        slices = _count(root, "path", CLASS_SLICE)
        if slices != len(values):
            result.error("primitive_count",
                         f"Expected {len(values)} slices, found {slices}")

        total = sum(values)
        texts = _texts(root)

        if self.options.show_values and total != 0:
            shown = [t for t in texts if t.endswith("%") and "(" not in t]
            try:
                pct_sum = sum(float(t.rstrip("%")) for t in shown)
            except ValueError:
                pct_sum = float("nan")
            if math.isnan(pct_sum) or abs(pct_sum - 100.0) > 0.1 * max(len(shown), 1):
                result.warn("percentages",
                            f"Slice percentages sum to {pct_sum:.1f}%, expected ~100%")

        if self.chart_type == ChartType.DOUGHNUT:
            expected = format_number(total)
            if "Total" not in texts or expected not in texts:
                result.error("center_label",
                             f"Doughnut centre does not show total {expected!r}")

    def _check_text(self, root, result: QAResult) -> None:
        """Every caller-supplied label and the title must appear as text."""
        texts = _texts(root)
        joined = "\n".join(texts)
        if self.options.title and self.options.title not in texts:
            result.error("title", f"Title {self.options.title!r} not found")
        labels_shown = not self.chart_type.is_radial or self.options.show_legend
        for label in self.spec.labels if labels_shown else ():
            if label and label not in joined:
                result.warn("label_missing", f"Label {label!r} not found in output")
        if self.options.show_legend and not self.chart_type.is_radial:
            for dataset in self.spec.datasets:
                if dataset.label and dataset.label not in texts:
                    result.warn("legend", f"Dataset {dataset.label!r} missing from legend")


# ---------------------------------------------------------------------------
# Convenience function
# ---------------------------------------------------------------------------

def validate_chart(chart_type, spec: ChartSpec, markup: str,
                   options: RenderOptions | None = None) -> QAResult:
    """One-shot convenience: validate rendered markup against its request."""
    return QAValidator(chart_type, spec, options).validate(markup)
