"""Business-day trading calendar backed by pandas."""

from __future__ import annotations

from collections.abc import Iterable
from datetime import date

import pandas as pd


class WeekdayTradingCalendar:
    """Monday to Friday sessions, minus an optional holiday list."""

    def __init__(self, holidays: Iterable[date] = ()) -> None:
        self.holidays = sorted(set(holidays))

    def get_trading_dates(self, start: date, end: date) -> list[date]:
        if start > end:
            return []
        index = pd.bdate_range(start=start, end=end, freq="C", holidays=self.holidays)
        return [timestamp.date() for timestamp in index]
