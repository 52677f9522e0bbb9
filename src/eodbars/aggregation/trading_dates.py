"""Backward mapping of bucket timestamps to trading dates."""

from __future__ import annotations

from collections.abc import Iterator, Mapping
from datetime import date, datetime, time, timedelta
from types import MappingProxyType

from eodbars.calendars.base import TradingCalendar
from eodbars.domain.models import SessionKind, SessionWindow
from eodbars.errors import TradingDateLookupError

ONE_DAY = timedelta(days=1)
TWO_DAYS = timedelta(days=2)
SATURDAY = 5
SUNDAY = 6


class TradingDateIndex:
    """Immutable lookup from bucket open timestamps to trading dates.

    The index is built once by walking a cursor backward from the day before
    ``anchor_date`` in steps of one bucket width, pairing every cursor
    position with the next older trading date from the calendar. Its keys are
    the bucket timestamps a ``BarAggregator`` with the same width and session
    produces, so the index can be shared read-only across instruments.
    """

    def __init__(
        self,
        width: int,
        session: SessionWindow,
        anchor_date: date,
        calendar: TradingCalendar,
        calendar_start: date = date(1970, 1, 1),
        skip_weekends: bool = True,
    ) -> None:
        if width <= 0:
            raise ValueError("width must be positive")
        self.width = width
        self.session = session
        self.anchor_date = anchor_date
        self.skip_weekends = skip_weekends
        self._step = timedelta(minutes=width)
        self._last_open = session.end_offset - self._step
        self._entries: Mapping[datetime, datetime] = MappingProxyType(
            self._build(calendar, calendar_start)
        )

    def attribute(self, bucket_date: date, bucket_time: time) -> datetime:
        """Return the trading date, at session close, for a bucket."""
        key = datetime.combine(bucket_date, bucket_time)
        try:
            return self._entries[key]
        except KeyError:
            raise TradingDateLookupError(
                f"No trading date for bucket {key:%Y-%m-%d %H:%M}; "
                "bucket predates the calendar range or the session/width settings differ"
            ) from None

    @property
    def entries(self) -> Mapping[datetime, datetime]:
        return self._entries

    def keys(self) -> list[datetime]:
        """Return bucket timestamps in ascending order."""
        return sorted(self._entries)

    @property
    def earliest(self) -> datetime | None:
        return min(self._entries, default=None)

    def __contains__(self, key: object) -> bool:
        return key in self._entries

    def __len__(self) -> int:
        return len(self._entries)

    def __iter__(self) -> Iterator[datetime]:
        return iter(self._entries)

    def _build(self, calendar: TradingCalendar, calendar_start: date) -> dict[datetime, datetime]:
        trading_dates = calendar.get_trading_dates(calendar_start, self.anchor_date)
        close = self.session.end_offset
        cursor = self._skip_weekend(self._at_last_open(self.anchor_date - ONE_DAY))

        entries: dict[datetime, datetime] = {}
        for trading_date in sorted(trading_dates, reverse=True):
            entries[cursor] = _midnight(trading_date) + close
            cursor = self._skip_weekend(self._step_back(cursor))
        return entries

    def _at_last_open(self, day: date) -> datetime:
        return _midnight(day) + self._last_open

    def _step_back(self, cursor: datetime) -> datetime:
        moved = cursor - self._step
        offset = moved - _midnight(moved.date())
        kind = self.session.kind
        if kind is SessionKind.REGULAR:
            if offset < self.session.start_offset:
                return self._at_last_open(moved.date() - ONE_DAY)
            if offset >= self.session.end_offset:
                return self._at_last_open(moved.date())
        elif kind is SessionKind.OVERNIGHT:
            if self.session.end_offset < offset < self.session.start_offset:
                return self._at_last_open(moved.date())
        return moved

    def _skip_weekend(self, cursor: datetime) -> datetime:
        if not self.skip_weekends:
            return cursor
        weekday = cursor.weekday()
        if weekday == SUNDAY:
            return self._at_last_open(cursor.date() - TWO_DAYS)
        if weekday == SATURDAY:
            return self._at_last_open(cursor.date() - ONE_DAY)
        return cursor


def _midnight(day: date) -> datetime:
    return datetime.combine(day, time())
