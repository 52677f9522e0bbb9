from __future__ import annotations

from datetime import date
from pathlib import Path

import pytest

from eodbars.calendars.csv_calendar import CsvTradingCalendar
from eodbars.calendars.weekday import WeekdayTradingCalendar
from eodbars.errors import ConfigError


def test_weekday_calendar_skips_weekends_and_holidays() -> None:
    calendar = WeekdayTradingCalendar(holidays=[date(2024, 1, 1), date(2024, 1, 15)])

    dates = calendar.get_trading_dates(date(2023, 12, 29), date(2024, 1, 16))

    assert dates[:3] == [date(2023, 12, 29), date(2024, 1, 2), date(2024, 1, 3)]
    assert date(2024, 1, 15) not in dates
    assert dates[-1] == date(2024, 1, 16)
    assert all(value.weekday() < 5 for value in dates)
    assert dates == sorted(dates)


def test_weekday_calendar_empty_range() -> None:
    calendar = WeekdayTradingCalendar()

    assert calendar.get_trading_dates(date(2024, 1, 6), date(2024, 1, 7)) == []
    assert calendar.get_trading_dates(date(2024, 1, 9), date(2024, 1, 8)) == []


def test_csv_calendar_filters_inclusive_range(tmp_path: Path) -> None:
    path = tmp_path / "calendar.csv"
    path.write_text("date\n2024-01-04\n2024-01-02\n2024-01-03\n2024-01-08\n")
    calendar = CsvTradingCalendar(str(path))

    assert calendar.get_trading_dates(date(2024, 1, 2), date(2024, 1, 4)) == [
        date(2024, 1, 2),
        date(2024, 1, 3),
        date(2024, 1, 4),
    ]


def test_csv_calendar_requires_existing_file(tmp_path: Path) -> None:
    with pytest.raises(ConfigError, match="not found"):
        CsvTradingCalendar(str(tmp_path / "missing.csv"))
