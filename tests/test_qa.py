"""Tests for the QA validation module."""

import pytest

from slidecharts.generator.charts import render_chart, render_error
from slidecharts.qa.validator import Issue, QAResult, QAValidator, validate_chart
from slidecharts.schema.models import ChartSpec, ChartType, Dataset, RenderOptions


# ---------------------------------------------------------------------------
# Fixtures
# ---------------------------------------------------------------------------

@pytest.fixture
def spec():
    return ChartSpec(
        labels=("Q1", "Q2", "Q3", "Q4"),
        datasets=(
            Dataset("Revenue", (100, 200, 150, 300)),
            Dataset("Cost", (80, 120, 90, 200)),
        ),
    )


@pytest.fixture
def options():
    return RenderOptions(title="Quarterly", show_values=True)


# ---------------------------------------------------------------------------
# Result types
# ---------------------------------------------------------------------------

class TestQAResult:
    def test_empty_passes(self):
        result = QAResult()
        assert result.passed
        assert result.summary() == "QA PASS: 0 error(s), 0 warning(s)"

    def test_warnings_do_not_fail(self):
        result = QAResult()
        result.warn("legend", "missing")
        assert result.passed
        assert result.warning_count == 1

    def test_errors_fail(self):
        result = QAResult()
        result.error("parse", "broken")
        result.warn("legend", "missing")
        assert not result.passed
        assert result.summary() == "QA FAIL: 1 error(s), 1 warning(s)"

    def test_report_lists_issues(self):
        result = QAResult()
        result.error("parse", "broken")
        assert "[ERROR] parse: broken" in result.report()

    def test_issue_str(self):
        assert str(Issue("warning", "legend", "x")) == "[WARNING] legend: x"


# ---------------------------------------------------------------------------
# Rendered charts pass
# ---------------------------------------------------------------------------

class TestRenderedChartsPass:
    @pytest.mark.parametrize("chart_type", [t.value for t in ChartType])
    def test_every_family(self, spec, options, chart_type):
        svg = render_chart(chart_type, spec, "corporate", options)
        result = validate_chart(chart_type, spec, svg, options)
        assert result.passed, result.report()
        assert result.warning_count == 0, result.report()

    @pytest.mark.parametrize("chart_type", ["bar", "pie"])
    def test_without_legend(self, spec, chart_type):
        opts = RenderOptions(show_legend=False)
        svg = render_chart(chart_type, spec, options=opts)
        assert validate_chart(chart_type, spec, svg, opts).passed

    def test_float_dimensions(self, spec):
        opts = RenderOptions(width=800.0, height=400.0)
        svg = render_chart("bar", spec, options=opts)
        assert 'viewBox="0 0 800 400"' in svg
        result = validate_chart("bar", spec, svg, opts)
        assert result.passed, result.report()

    def test_escaped_labels_survive(self):
        spec = ChartSpec(("<b>&", "O'Neil"), (Dataset("A \"quoted\"", (1, 2)),))
        svg = render_chart("bar", spec)
        result = validate_chart("bar", spec, svg)
        assert result.passed
        assert result.warning_count == 0, result.report()


# ---------------------------------------------------------------------------
# Failures detected
# ---------------------------------------------------------------------------

class TestFailuresDetected:
    def test_render_error(self, spec):
        result = validate_chart("bar", spec, render_error("No labels provided"))
        assert not result.passed
        assert result.errors[0].category == "render_error"
        assert result.errors[0].message == "No labels provided"

    def test_malformed_markup(self, spec):
        result = validate_chart("bar", spec, "<svg><rect></svg>")
        assert result.errors[0].category == "parse"

    def test_view_box_mismatch(self, spec):
        svg = render_chart("bar", spec, options=RenderOptions(width=800))
        result = validate_chart("bar", spec, svg)
        assert any(i.category == "view_box" for i in result.errors)

    def test_missing_bar(self, spec):
        svg = render_chart("bar", spec)
        first = svg.index('<rect class="bar"')
        end = svg.index("/>", first) + 2
        result = validate_chart("bar", spec, svg[:first] + svg[end:])
        assert any(i.category == "primitive_count" for i in result.errors)

    def test_wrong_type(self, spec):
        svg = render_chart("line", spec)
        result = validate_chart("bar", spec, svg)
        assert any(i.category == "primitive_count" for i in result.errors)

    def test_unknown_type(self, spec):
        svg = render_chart("bar", spec)
        result = validate_chart("radar", spec, svg)
        assert any(i.category == "chart_type" for i in result.errors)

    def test_missing_title(self, spec, options):
        svg = render_chart("bar", spec, options=RenderOptions(show_values=True))
        result = validate_chart("bar", spec, svg, options)
        assert any(i.category == "title" for i in result.errors)

    def test_doughnut_total_checked(self, spec):
        svg = render_chart("doughnut", spec).replace(">750<", ">751<")
        result = validate_chart("doughnut", spec, svg)
        assert any(i.category == "center_label" for i in result.errors)

    def test_missing_label_warns(self, spec):
        svg = render_chart("bar", spec).replace(">Q3<", "><")
        result = validate_chart("bar", spec, svg)
        assert result.passed
        assert any(i.category == "label_missing" for i in result.warnings)

    def test_bad_percentages_warn(self, spec, options):
        svg = render_chart("pie", spec, options=options).replace(">40.0%<", ">90.0%<")
        result = QAValidator("pie", spec, options).validate(svg)
        assert any(i.category == "percentages" for i in result.warnings)
