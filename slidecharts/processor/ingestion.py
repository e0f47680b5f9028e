"""Tabular data ingestion for chart generation.

Reads a CSV or Excel sheet and turns it into a ChartSpec: one column holds
the category labels, every other numeric column becomes a dataset.

Supported inputs:
- CSV, UTF-8, comma-delimited
- CSV, UTF-16 LE with BOM, tab-delimited (spreadsheet "Unicode text" export)
- Excel .xlsx / .xlsm (first sheet unless one is named)
"""

from pathlib import Path

import pandas as pd

from slidecharts.schema.models import ChartSpec, Dataset


# ---------------------------------------------------------------------------
# Value parsers
# ---------------------------------------------------------------------------

def parse_numeric(value):
    """Parse a numeric value that may contain commas or currency signs.

    Examples:
        "63,571" -> 63571.0
        "$1,200.50" -> 1200.5
        42 -> 42.0
        "" -> NaN
        "n/a" -> NaN
    """
    if pd.isna(value):
        return float("nan")
    if isinstance(value, bool):
        return float("nan")
    if isinstance(value, (int, float)):
        return float(value)
    s = str(value).strip().replace(",", "").replace("$", "")
    if not s:
        return float("nan")
    try:
        return float(s)
    except ValueError:
        return float("nan")


# ---------------------------------------------------------------------------
# Column cleaning
# ---------------------------------------------------------------------------

def clean_columns(df):
    """Strip whitespace and a stray byte-order mark from column names."""
    df.columns = [c.strip().lstrip("\ufeff") if isinstance(c, str) else c
                  for c in df.columns]
    return df


def clean_numeric_columns(df, columns):
    """Apply parse_numeric to the given columns."""
    for col in columns:
        if col in df.columns:
            df[col] = df[col].apply(parse_numeric)
    return df


# ---------------------------------------------------------------------------
# Encoding detection and file reading
# ---------------------------------------------------------------------------

def detect_encoding(path):
    """Detect whether a file is UTF-16 LE (with BOM) or UTF-8.

    Returns (encoding, delimiter) tuple.
    """
    with open(path, "rb") as f:
        raw = f.read(4)
    if raw[:2] == b"\xff\xfe":
        return "utf-16-le", "\t"
    return "utf-8", ","


def read_csv_auto(path):
    """Read a CSV file with automatic encoding and delimiter detection."""
    encoding, sep = detect_encoding(path)
    df = pd.read_csv(path, encoding=encoding, sep=sep)
    return clean_columns(df)


def read_table(path, sheet_name=None):
    """Read a .csv, .xlsx or .xlsm file into a cleaned DataFrame."""
    path = Path(path)
    suffix = path.suffix.lower()
    if suffix in (".xlsx", ".xlsm"):
        df = pd.read_excel(path, sheet_name=sheet_name or 0, engine="openpyxl")
        return clean_columns(df)
    if suffix in (".csv", ".txt"):
        return read_csv_auto(path)
    raise ValueError(
        f"Unsupported data file type: {path.suffix!r}. "
        "Use .csv, .xlsx or .xlsm."
    )


# ---------------------------------------------------------------------------
# DataFrame -> ChartSpec
# ---------------------------------------------------------------------------

def _is_numeric_column(series) -> bool:
    parsed = series.apply(parse_numeric)
    return parsed.notna().any()


def chart_spec_from_dataframe(df, label_column=None, value_columns=None):
    """Build a ChartSpec from a DataFrame.

    Args:
        df: Source table.
        label_column: Column holding category labels (default: first column).
        value_columns: Columns to plot as datasets (default: every other
            column with at least one numeric value).

    Returns:
        ChartSpec with one Dataset per value column.  Missing or
        unparseable cells are plotted as 0.

    Raises:
        ValueError: If a named column does not exist.
    """
    if df.columns.empty:
        return ChartSpec()

    label_column = label_column if label_column is not None else df.columns[0]
    if label_column not in df.columns:
        raise ValueError(f"Label column {label_column!r} not found")

    if value_columns is None:
        value_columns = [
            c for c in df.columns
            if c != label_column and _is_numeric_column(df[c])
        ]
    else:
        missing = [c for c in value_columns if c not in df.columns]
        if missing:
            raise ValueError(f"Value column(s) not found: {missing}")

    df = df.dropna(subset=[label_column]).copy()
    df = clean_numeric_columns(df, value_columns)

    labels = [str(v) for v in df[label_column].tolist()]
    datasets = [
        Dataset(label=str(col), values=tuple(df[col].fillna(0.0).tolist()))
        for col in value_columns
    ]
    return ChartSpec(labels=tuple(labels), datasets=tuple(datasets))


def ingest(path, label_column=None, value_columns=None, sheet_name=None):
    """Read a data file and convert it into a ChartSpec."""
    df = read_table(path, sheet_name=sheet_name)
    return chart_spec_from_dataframe(df, label_column, value_columns)
