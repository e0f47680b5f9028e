"""Data processor module for chart generation."""

from .ingestion import (
    chart_spec_from_dataframe,
    clean_columns,
    clean_numeric_columns,
    detect_encoding,
    ingest,
    parse_numeric,
    read_csv_auto,
    read_table,
)
