"""Minute bar sources and aggregated bar writers."""

from .base import MinuteBarSource
from .csv_data import CsvMinuteBarReader, parse_row, write_bars_csv

__all__ = ["CsvMinuteBarReader", "MinuteBarSource", "parse_row", "write_bars_csv"]
