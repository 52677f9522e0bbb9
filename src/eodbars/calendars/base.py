"""Trading calendar provider contract."""

from __future__ import annotations

from datetime import date
from typing import Protocol


class TradingCalendar(Protocol):
    """Interface for trading date lookups."""

    def get_trading_dates(self, start: date, end: date) -> list[date]:
        """Return valid trading dates within ``[start, end]`` in ascending order."""
