"""Core bar and session models."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import date, datetime, time, timedelta
from decimal import Decimal
from enum import StrEnum

ZERO = Decimal(0)


class SessionKind(StrEnum):
    """Shape of a daily session window."""

    REGULAR = "regular"
    OVERNIGHT = "overnight"
    FULL_DAY = "full_day"


@dataclass(frozen=True)
class SessionWindow:
    """Daily time-of-day range during which bars are aggregated.

    ``start > end`` wraps past midnight (e.g. 22:00-06:00) and
    ``start == end`` is a 24-hour session.
    """

    start: time
    end: time

    @property
    def kind(self) -> SessionKind:
        if self.start < self.end:
            return SessionKind.REGULAR
        if self.start > self.end:
            return SessionKind.OVERNIGHT
        return SessionKind.FULL_DAY

    def contains(self, value: time) -> bool:
        """Return true when a bar opening at ``value`` is in session."""
        kind = self.kind
        if kind is SessionKind.REGULAR:
            return self.start <= value < self.end
        if kind is SessionKind.OVERNIGHT:
            return value >= self.start or value < self.end
        return True

    @property
    def start_offset(self) -> timedelta:
        return time_offset(self.start)

    @property
    def end_offset(self) -> timedelta:
        return time_offset(self.end)


@dataclass(frozen=True)
class MinuteBar:
    """One input record of the minute stream."""

    date: date
    time: time
    open: Decimal
    high: Decimal
    low: Decimal
    close: Decimal
    volume: Decimal
    split: Decimal = ZERO
    secondary: Decimal = ZERO
    dividend: Decimal = ZERO


@dataclass(frozen=True)
class AggregatedBar:
    """Finalized N-minute bar, stamped with its bucket open date and time."""

    date: date
    time: time
    open: Decimal
    high: Decimal
    low: Decimal
    close: Decimal
    volume: Decimal
    split: Decimal = ZERO
    secondary: Decimal = ZERO
    dividend: Decimal = ZERO

    @property
    def timestamp(self) -> datetime:
        return datetime.combine(self.date, self.time)


def time_offset(value: time) -> timedelta:
    """Return the offset of a time of day from midnight."""
    return timedelta(hours=value.hour, minutes=value.minute, seconds=value.second)
