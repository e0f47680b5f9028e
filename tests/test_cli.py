"""Tests for the CLI entry point (slidecharts.cli).

Covers argument parsing, chart and table loading, option overrides, the
render pipeline with QA gating, the validate command, and theme listing.
The QA validator is patched where a failing result is needed.
"""

import argparse
from unittest.mock import MagicMock, patch

import pytest

from slidecharts.cli import (
    _apply_overrides,
    _load_document,
    _load_registry,
    build_parser,
    cmd_render,
    cmd_themes,
    cmd_validate,
    main,
)
from slidecharts.schema.loader import save_chart
from slidecharts.schema.models import ChartDocument, ChartSpec, Dataset, RenderOptions


# ---------------------------------------------------------------------------
# Fixtures
# ---------------------------------------------------------------------------

@pytest.fixture
def parser():
    return build_parser()


@pytest.fixture
def chart_file(tmp_path):
    """A bar chart saved as YAML."""
    path = tmp_path / "revenue.yaml"
    save_chart(ChartDocument(
        chart_type="bar",
        spec=ChartSpec(("Q1", "Q2", "Q3"), (Dataset("Revenue", (100, 200, 150)),)),
        options=RenderOptions(title="Revenue"),
    ), path)
    return path


@pytest.fixture
def data_file(tmp_path):
    path = tmp_path / "channels.csv"
    path.write_text("Channel,Share\nDirect,40\nPartner,60\n")
    return path


@pytest.fixture
def themes_file(tmp_path):
    path = tmp_path / "brand.yaml"
    path.write_text(
        "themes:\n"
        "  - name: acme-corp\n"
        "    display_name: ACME Corporation\n"
        "    colors: ['#ff5733']\n"
    )
    return path


@pytest.fixture
def qa_fail():
    """A failing QAResult mock."""
    qa = MagicMock()
    qa.passed = False
    qa.summary.return_value = "QA FAIL: 1 error(s), 0 warning(s)"
    qa.report.return_value = (
        "QA FAIL: 1 error(s), 0 warning(s)\n"
        "  [ERROR] primitive_count: Expected 3 bars, found 2"
    )
    return qa


def _render_args(**overrides):
    args = dict(
        chart=None, data=None, label_column=None,
        type=None, theme=None, themes=None, title=None,
        width=None, height=None,
        no_legend=False, no_grid=False, show_values=False,
        output=None, skip_qa=False, force=False, verbose=False,
    )
    args.update(overrides)
    return argparse.Namespace(**args)


# ===================================================================
# Parser tests
# ===================================================================

class TestParser:
    def test_render_chart(self, parser):
        args = parser.parse_args(["render", "--chart", "c.yaml", "-o", "out.svg"])
        assert args.command == "render"
        assert args.chart == "c.yaml"
        assert args.output == "out.svg"
        assert args.func is cmd_render

    def test_render_data_with_options(self, parser):
        args = parser.parse_args([
            "render", "--data", "d.csv", "--type", "doughnut",
            "--theme", "startup", "--title", "Share", "--width", "800",
            "--height", "400", "--no-legend", "--no-grid", "--show-values",
            "--label-column", "Channel",
        ])
        assert args.data == "d.csv"
        assert args.type == "doughnut"
        assert args.width == 800
        assert args.no_legend and args.no_grid and args.show_values
        assert args.label_column == "Channel"

    def test_render_flags_default_off(self, parser):
        args = parser.parse_args(["render", "--chart", "c.yaml"])
        assert not args.skip_qa
        assert not args.force
        assert not args.verbose
        assert args.output is None

    def test_chart_and_data_mutually_exclusive(self, parser):
        with pytest.raises(SystemExit):
            parser.parse_args(["render", "--chart", "c.yaml", "--data", "d.csv"])

    def test_render_requires_source(self, parser):
        with pytest.raises(SystemExit):
            parser.parse_args(["render"])

    def test_unknown_type_rejected(self, parser):
        with pytest.raises(SystemExit):
            parser.parse_args(["render", "--chart", "c.yaml", "--type", "radar"])

    def test_validate_command(self, parser):
        args = parser.parse_args(["validate", "--chart", "c.yaml", "--svg", "c.svg"])
        assert args.func is cmd_validate

    def test_validate_requires_svg(self, parser):
        with pytest.raises(SystemExit):
            parser.parse_args(["validate", "--chart", "c.yaml"])

    def test_themes_command(self, parser):
        args = parser.parse_args(["themes", "--themes", "brand.yaml"])
        assert args.func is cmd_themes

    def test_no_command_fails(self, parser):
        with pytest.raises(SystemExit):
            parser.parse_args([])


# ===================================================================
# Loading
# ===================================================================

class TestLoading:
    def test_load_chart_file(self, chart_file):
        document = _load_document(_render_args(chart=str(chart_file)))
        assert document.chart_type == "bar"
        assert document.options.title == "Revenue"

    def test_load_data_file_defaults_to_bar(self, data_file):
        document = _load_document(_render_args(data=str(data_file)))
        assert document.chart_type == "bar"
        assert document.spec.labels == ("Direct", "Partner")

    def test_missing_chart_exits(self, tmp_path):
        with pytest.raises(SystemExit):
            _load_document(_render_args(chart=str(tmp_path / "nope.yaml")))

    def test_invalid_chart_exits(self, tmp_path):
        path = tmp_path / "bad.yaml"
        path.write_text("just a string\n")
        with pytest.raises(SystemExit):
            _load_document(_render_args(chart=str(path)))

    def test_string_width_in_chart_exits(self, tmp_path, capsys):
        path = tmp_path / "bad_width.yaml"
        path.write_text(
            "type: bar\n"
            "data: {labels: [a], datasets: [{label: A, values: [1]}]}\n"
            "options: {width: '800'}\n"
        )
        with pytest.raises(SystemExit) as exc:
            _load_document(_render_args(chart=str(path)))
        assert exc.value.code == 1
        assert "ERROR: Invalid chart file" in capsys.readouterr().err

    def test_bad_label_column_exits(self, data_file):
        with pytest.raises(SystemExit):
            _load_document(_render_args(data=str(data_file), label_column="Nope"))

    def test_registry_from_file(self, themes_file):
        registry = _load_registry(_render_args(themes=str(themes_file)))
        assert registry.has("acme-corp")

    def test_no_registry_file(self):
        assert len(_load_registry(_render_args())) == 0

    def test_invalid_theme_file_exits(self, tmp_path):
        path = tmp_path / "bad.yaml"
        path.write_text("themes:\n  - {name: corporate, colors: ['#000000']}\n")
        with pytest.raises(SystemExit):
            _load_registry(_render_args(themes=str(path)))


class TestApplyOverrides:
    def test_overrides(self):
        document = ChartDocument("bar", ChartSpec(("a",), (Dataset("A", (1,)),)))
        result = _apply_overrides(document, _render_args(
            type="pie", theme="academic", title="T", width=640,
            no_legend=True, show_values=True,
        ))
        assert result.chart_type == "pie"
        assert result.theme == "academic"
        assert result.options.title == "T"
        assert result.options.width == 640
        assert result.options.height == 600
        assert not result.options.show_legend
        assert result.options.show_values

    def test_no_overrides_keeps_document(self):
        document = ChartDocument("line", ChartSpec(("a",), (Dataset("A", (1,)),)),
                                 theme="startup")
        assert _apply_overrides(document, _render_args()) == document

    def test_invalid_size_exits(self):
        document = ChartDocument("bar", ChartSpec(("a",), (Dataset("A", (1,)),)))
        with pytest.raises(SystemExit):
            _apply_overrides(document, _render_args(width=0))


# ===================================================================
# Render command tests
# ===================================================================

class TestCmdRender:
    def test_writes_file(self, tmp_path, chart_file):
        output = tmp_path / "out" / "revenue.svg"
        cmd_render(_render_args(chart=str(chart_file), output=str(output)))
        svg = output.read_text(encoding="utf-8")
        assert svg.startswith("<svg")
        assert svg.count('class="bar"') == 3

    def test_writes_stdout(self, capsys, data_file):
        cmd_render(_render_args(data=str(data_file), type="doughnut"))
        out = capsys.readouterr().out
        assert out.startswith("<svg")
        assert ">100<" in out

    def test_custom_theme(self, capsys, chart_file, themes_file):
        cmd_render(_render_args(chart=str(chart_file), themes=str(themes_file),
                                theme="acme-corp"))
        assert 'fill="#ff5733"' in capsys.readouterr().out

    def test_qa_fail_exits(self, tmp_path, chart_file, qa_fail):
        output = tmp_path / "revenue.svg"
        with patch("slidecharts.cli.QAValidator") as MockValidator:
            MockValidator.return_value.validate.return_value = qa_fail
            with pytest.raises(SystemExit):
                cmd_render(_render_args(chart=str(chart_file), output=str(output)))
        assert not output.exists()

    def test_qa_fail_force_writes(self, tmp_path, chart_file, qa_fail, capsys):
        output = tmp_path / "revenue.svg"
        with patch("slidecharts.cli.QAValidator") as MockValidator:
            MockValidator.return_value.validate.return_value = qa_fail
            cmd_render(_render_args(chart=str(chart_file), output=str(output),
                                    force=True, verbose=True))
        assert output.exists()
        assert "primitive_count" in capsys.readouterr().err

    def test_skip_qa(self, tmp_path, chart_file):
        output = tmp_path / "revenue.svg"
        with patch("slidecharts.cli.QAValidator") as MockValidator:
            cmd_render(_render_args(chart=str(chart_file), output=str(output),
                                    skip_qa=True))
        MockValidator.return_value.validate.assert_not_called()
        assert output.exists()

    def test_unsupported_type_in_file_fails_qa(self, tmp_path):
        path = tmp_path / "radar.yaml"
        path.write_text("type: radar\ndata: {labels: [a], datasets: [{label: A, values: [1]}]}\n")
        with pytest.raises(SystemExit):
            cmd_render(_render_args(chart=str(path), output=str(tmp_path / "r.svg")))


# ===================================================================
# Validate / themes command tests
# ===================================================================

class TestCmdValidate:
    def test_pass(self, tmp_path, chart_file, capsys):
        svg = tmp_path / "revenue.svg"
        cmd_render(_render_args(chart=str(chart_file), output=str(svg)))
        with pytest.raises(SystemExit) as exc:
            cmd_validate(argparse.Namespace(chart=str(chart_file), svg=str(svg)))
        assert exc.value.code == 0
        assert "QA PASS" in capsys.readouterr().out

    def test_fail(self, tmp_path, chart_file, capsys):
        svg = tmp_path / "broken.svg"
        svg.write_text('<svg viewBox="0 0 1200 600" xmlns="http://www.w3.org/2000/svg"/>')
        with pytest.raises(SystemExit) as exc:
            cmd_validate(argparse.Namespace(chart=str(chart_file), svg=str(svg)))
        assert exc.value.code == 1
        assert "QA FAIL" in capsys.readouterr().out

    def test_missing_svg(self, tmp_path, chart_file):
        with pytest.raises(SystemExit) as exc:
            cmd_validate(argparse.Namespace(chart=str(chart_file),
                                            svg=str(tmp_path / "nope.svg")))
        assert exc.value.code == 1


class TestCmdThemes:
    def test_builtin_listing(self, capsys):
        main(["themes"])
        out = capsys.readouterr().out
        assert "Built-in themes (5):" in out
        assert "corporate" in out and "(default)" in out
        assert "Custom themes" not in out

    def test_custom_listing(self, capsys, themes_file):
        main(["themes", "--themes", str(themes_file)])
        out = capsys.readouterr().out
        assert "Custom themes (1):" in out
        assert "acme-corp" in out
        assert "(ACME Corporation)" in out


class TestMain:
    def test_main_render(self, tmp_path, chart_file):
        output = tmp_path / "main.svg"
        main(["render", "--chart", str(chart_file), "--type", "line",
              "-o", str(output)])
        assert 'class="series-line"' in output.read_text(encoding="utf-8")
