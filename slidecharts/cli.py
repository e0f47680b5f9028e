"""CLI entry point for slidecharts.

Orchestrates the render pipeline: chart loading (YAML chart file or a
CSV/Excel table), theme registration, SVG rendering, and QA validation.

Usage::

    # Render a chart stored as YAML
    python -m slidecharts.cli render \\
        --chart charts/revenue.yaml \\
        --output output/revenue.svg

    # Render a table straight from CSV as a doughnut
    python -m slidecharts.cli render \\
        --data data/channels.csv --type doughnut \\
        --theme startup --title "Revenue by channel" --show-values \\
        --output output/channels.svg

    # Use brand palettes from a YAML theme file
    python -m slidecharts.cli render \\
        --chart charts/revenue.yaml --themes themes/brand.yaml \\
        --theme acme-corp --output output/revenue.svg

    # Validate an existing SVG against its chart file
    python -m slidecharts.cli validate \\
        --chart charts/revenue.yaml --svg output/revenue.svg

    # List the available palettes
    python -m slidecharts.cli themes --themes themes/brand.yaml
"""

import argparse
import dataclasses
import sys
from pathlib import Path

import yaml

from slidecharts.generator.charts import render_chart_document
from slidecharts.processor.ingestion import ingest
from slidecharts.qa.validator import QAValidator
from slidecharts.schema.loader import load_chart, load_themes
from slidecharts.schema.models import ChartDocument, ChartType, RenderOptions
from slidecharts.schema.themes import BUILTIN_PALETTES, DEFAULT_THEME, ThemeRegistry


# ---------------------------------------------------------------------------
# Loading
# ---------------------------------------------------------------------------

def _load_registry(args):
    """Build a ThemeRegistry from --themes, if given."""
    registry = ThemeRegistry()
    path = getattr(args, "themes", None)
    if not path:
        return registry
    p = Path(path)
    if not p.exists():
        _error(f"Theme file not found: {p}")
    try:
        load_themes(p, registry)
    except (KeyError, ValueError, yaml.YAMLError) as exc:
        _error(f"Invalid theme file {p}: {exc}")
    _info(f"Registered {len(registry)} custom theme(s) from {p}")
    return registry


def _load_document(args):
    """Load a ChartDocument from --chart or --data, then apply overrides."""
    if getattr(args, "chart", None):
        path = Path(args.chart)
        if not path.exists():
            _error(f"Chart file not found: {path}")
        try:
            document = load_chart(path)
        except (KeyError, ValueError, yaml.YAMLError) as exc:
            _error(f"Invalid chart file {path}: {exc}")
        _info(f"Loaded {document.chart_type} chart from {path}")
    else:
        path = Path(args.data)
        if not path.exists():
            _error(f"Data file not found: {path}")
        _info(f"Ingesting table from {path}")
        try:
            spec = ingest(path, label_column=args.label_column)
        except ValueError as exc:
            _error(str(exc))
        document = ChartDocument(chart_type=args.type or ChartType.BAR.value, spec=spec)

    return _apply_overrides(document, args)


def _apply_overrides(document, args):
    """Apply command-line options on top of a loaded document."""
    option_changes = {}
    if getattr(args, "title", None) is not None:
        option_changes["title"] = args.title
    if getattr(args, "width", None) is not None:
        option_changes["width"] = args.width
    if getattr(args, "height", None) is not None:
        option_changes["height"] = args.height
    if getattr(args, "no_legend", False):
        option_changes["show_legend"] = False
    if getattr(args, "no_grid", False):
        option_changes["show_grid"] = False
    if getattr(args, "show_values", False):
        option_changes["show_values"] = True

    try:
        options = dataclasses.replace(document.options, **option_changes)
    except ValueError as exc:
        _error(str(exc))

    return dataclasses.replace(
        document,
        chart_type=getattr(args, "type", None) or document.chart_type,
        theme=getattr(args, "theme", None) or document.theme,
        options=options,
    )


# ---------------------------------------------------------------------------
# Commands
# ---------------------------------------------------------------------------

def cmd_render(args):
    """Render a chart to SVG."""
    registry = _load_registry(args)
    document = _load_document(args)
    spec = document.spec
    _info(f"Chart: {document.chart_type}, theme {document.theme} "
          f"({len(spec.labels)} label(s), {len(spec.datasets)} dataset(s))")

    svg = render_chart_document(document, registry)

    if not args.skip_qa:
        _info("Running QA validation...")
        qa_result = QAValidator(document.chart_type, spec, document.options).validate(svg)
        if qa_result.passed:
            _info(qa_result.summary())
        else:
            _warn(qa_result.summary())
            if args.verbose:
                print(qa_result.report(), file=sys.stderr)
            if not args.force:
                _error("QA validation failed. Use --force to write anyway, "
                       "or --skip-qa to skip validation.")
    else:
        _info("QA validation skipped (--skip-qa)")

    if args.output:
        output = Path(args.output)
        output.parent.mkdir(parents=True, exist_ok=True)
        output.write_text(svg, encoding="utf-8")
        _info(f"Written: {output} ({len(svg):,} characters)")
    else:
        sys.stdout.write(svg + "\n")


def cmd_validate(args):
    """Validate an existing SVG against its chart file."""
    svg_path = Path(args.svg)
    if not svg_path.exists():
        _error(f"SVG file not found: {svg_path}")
    document = _load_document(args)

    _info(f"Validating {svg_path} against {args.chart}")
    validator = QAValidator(document.chart_type, document.spec, document.options)
    qa_result = validator.validate(svg_path.read_text(encoding="utf-8"))

    print(qa_result.report())
    sys.exit(0 if qa_result.passed else 1)


def cmd_themes(args):
    """List built-in and custom palettes."""
    registry = _load_registry(args)

    print(f"Built-in themes ({len(BUILTIN_PALETTES)}):")
    for name, palette in BUILTIN_PALETTES.items():
        default = " (default)" if name == DEFAULT_THEME else ""
        print(f"  {name:<12} {' '.join(palette)}{default}")

    if len(registry):
        print()
        print(f"Custom themes ({len(registry)}):")
        for name in registry.names():
            theme = registry.get(name)
            print(f"  {name:<12} {' '.join(registry.colors_for(name))}"
                  f"  ({theme.display_name})")


# ---------------------------------------------------------------------------
# Output helpers
# ---------------------------------------------------------------------------

def _info(msg):
    print(f"  {msg}", file=sys.stderr)


def _warn(msg):
    print(f"  WARNING: {msg}", file=sys.stderr)


def _error(msg):
    print(f"  ERROR: {msg}", file=sys.stderr)
    sys.exit(1)


# ---------------------------------------------------------------------------
# Argument parsing
# ---------------------------------------------------------------------------

def build_parser():
    """Build the argument parser."""
    parser = argparse.ArgumentParser(
        prog="slidecharts",
        description="Render presentation charts as self-contained SVG.",
    )
    subparsers = parser.add_subparsers(dest="command", required=True)

    # ---- render ----
    ren = subparsers.add_parser(
        "render",
        help="Render a chart from a YAML chart file or a data table.",
    )
    _add_source_args(ren)
    _add_render_args(ren)
    ren.add_argument(
        "-o", "--output",
        help="Output SVG file path (default: stdout).",
    )
    ren.add_argument(
        "--skip-qa",
        action="store_true",
        default=False,
        help="Skip QA validation after rendering.",
    )
    ren.add_argument(
        "--force",
        action="store_true",
        default=False,
        help="Write output even if QA validation fails.",
    )
    ren.add_argument(
        "-v", "--verbose",
        action="store_true",
        default=False,
        help="Show detailed output (full QA report on failure).",
    )
    ren.set_defaults(func=cmd_render)

    # ---- validate ----
    val = subparsers.add_parser(
        "validate",
        help="Validate an existing SVG against its chart file.",
    )
    val.add_argument(
        "--chart",
        required=True,
        help="YAML chart file the SVG was rendered from.",
    )
    val.add_argument(
        "--svg",
        required=True,
        help="Path to the SVG file to validate.",
    )
    val.set_defaults(func=cmd_validate)

    # ---- themes ----
    thm = subparsers.add_parser(
        "themes",
        help="List built-in and custom theme palettes.",
    )
    thm.add_argument(
        "--themes",
        help="YAML file of custom themes to include.",
    )
    thm.set_defaults(func=cmd_themes)

    return parser


def _add_source_args(parser):
    """Add --chart / --data args to a subparser."""
    group = parser.add_mutually_exclusive_group(required=True)
    group.add_argument(
        "--chart",
        help="YAML chart file (type, theme, data, options).",
    )
    group.add_argument(
        "--data",
        help="Data table (.csv, .xlsx, .xlsm); first column holds labels.",
    )
    parser.add_argument(
        "--label-column",
        dest="label_column",
        help="Column of --data to use as category labels.",
    )


def _add_render_args(parser):
    """Add chart type, theme, and render option overrides."""
    opts = parser.add_argument_group("render options")
    opts.add_argument(
        "--type",
        choices=[t.value for t in ChartType],
        help="Chart type (default: from chart file, or bar).",
    )
    opts.add_argument(
        "--theme",
        help=f"Theme name (default: from chart file, or {DEFAULT_THEME}).",
    )
    opts.add_argument(
        "--themes",
        help="YAML file of custom themes to register.",
    )
    opts.add_argument(
        "--title",
        help="Chart title.",
    )
    opts.add_argument(
        "--width",
        type=int,
        help=f"Canvas width in pixels (default: {RenderOptions.width}).",
    )
    opts.add_argument(
        "--height",
        type=int,
        help=f"Canvas height in pixels (default: {RenderOptions.height}).",
    )
    opts.add_argument(
        "--no-legend",
        dest="no_legend",
        action="store_true",
        default=False,
        help="Hide the legend.",
    )
    opts.add_argument(
        "--no-grid",
        dest="no_grid",
        action="store_true",
        default=False,
        help="Hide grid lines.",
    )
    opts.add_argument(
        "--show-values",
        dest="show_values",
        action="store_true",
        default=False,
        help="Annotate bars, points, and slices with their values.",
    )


# ---------------------------------------------------------------------------
# Main
# ---------------------------------------------------------------------------

def main(argv=None):
    """CLI entry point."""
    parser = build_parser()
    args = parser.parse_args(argv)
    args.func(args)


if __name__ == "__main__":
    main()
