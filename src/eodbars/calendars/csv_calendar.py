"""Trading calendar loaded from a local date list."""

from __future__ import annotations

from datetime import date
from pathlib import Path

import pandas as pd

from eodbars.errors import ConfigError


class CsvTradingCalendar:
    """Serve trading dates listed in a CSV file.

    The first column holds one date per row, in ``YYYY-MM-DD`` or
    ``YYYYMMDD`` form. A header row named ``date`` is accepted.
    """

    def __init__(self, path: str) -> None:
        self.path = Path(path)
        self._dates = self._load()

    def get_trading_dates(self, start: date, end: date) -> list[date]:
        return [value for value in self._dates if start <= value <= end]

    def _load(self) -> list[date]:
        if not self.path.exists():
            raise ConfigError(f"Trading calendar file not found: {self.path}")
        frame = pd.read_csv(self.path, header=None, dtype=str, usecols=[0])
        raw = frame.iloc[:, 0].str.strip()
        raw = raw[raw.str.lower() != "date"]
        try:
            parsed = pd.to_datetime(raw, format="mixed")
        except (ValueError, TypeError) as exc:
            raise ConfigError(f"{self.path}: invalid trading date values: {exc}") from exc
        return sorted({timestamp.date() for timestamp in parsed})
