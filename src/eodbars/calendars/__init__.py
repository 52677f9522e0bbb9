"""Trading calendar providers."""

from .base import TradingCalendar
from .csv_calendar import CsvTradingCalendar
from .weekday import WeekdayTradingCalendar

__all__ = ["CsvTradingCalendar", "TradingCalendar", "WeekdayTradingCalendar"]
