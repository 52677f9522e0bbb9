"""Streaming minute-bar to N-minute bar aggregation."""

from __future__ import annotations

from datetime import date, time
from decimal import Decimal
from typing import Protocol

from eodbars.domain.models import ZERO, AggregatedBar, MinuteBar, SessionWindow

NEGATIVE_INFINITY = Decimal("-Infinity")
POSITIVE_INFINITY = Decimal("Infinity")


class BarListener(Protocol):
    """Receiver of aggregator bucket transitions."""

    def bar_closed(self, bar: AggregatedBar) -> None:
        """Handle a finalized bucket."""

    def split_changed(self, closed: AggregatedBar, new_split: Decimal) -> None:
        """Handle a split ratio change observed on the bar opening the next bucket."""


def bucket_floor(value: time, width: int) -> time:
    """Floor a time of day to its hour-anchored bucket boundary.

    Buckets never span an hour line, so widths that do not divide 60 leave
    a short trailing bucket at the end of every hour.
    """
    minute = value.minute
    return time(value.hour, minute - minute % width)


def _seconds(value: time) -> int:
    return value.hour * 3600 + value.minute * 60 + value.second


class BarAggregator:
    """Stateful reducer turning in-session minute bars into fixed-width bars.

    Call ``process`` once per minute bar in stream order and ``flush`` once
    after the last bar. Finalized bars go to ``listener`` when one is given,
    otherwise they are collected in ``bars``.
    """

    def __init__(
        self,
        width: int,
        session: SessionWindow,
        listener: BarListener | None = None,
    ) -> None:
        if width <= 0:
            raise ValueError("width must be positive")
        self.width = width
        self.session = session
        self.listener = listener
        self.bars: list[AggregatedBar] = []

        self._initialized = False
        self._open_date = date.min
        self._open_time = time()
        self._open = ZERO
        self._high = NEGATIVE_INFINITY
        self._low = POSITIVE_INFINITY
        self._close = ZERO
        self._volume = ZERO
        self._split = ZERO
        self._secondary = ZERO
        self._dividend = ZERO

    @property
    def initialized(self) -> bool:
        return self._initialized

    def in_session(self, bar: MinuteBar) -> bool:
        return self.session.contains(bar.time)

    def is_new_bar(self, bar: MinuteBar) -> bool:
        """Return true when ``bar`` opens a new bucket.

        The minute difference is taken within a single day; across midnight
        it can be negative or small, so the date clause starts the new bucket.
        """
        if not self._initialized:
            return True
        elapsed = _seconds(bar.time) - _seconds(self._open_time)
        return elapsed > self.width * 60 or bar.date > self._open_date

    def process(self, bar: MinuteBar) -> None:
        if not self.in_session(bar):
            return

        if self.is_new_bar(bar):
            if self._initialized:
                closed = self._finalize()
                if bar.split != closed.split and self.listener is not None:
                    self.listener.split_changed(closed, bar.split)

            self._volume = ZERO
            self._high = NEGATIVE_INFINITY
            self._low = POSITIVE_INFINITY
            self._open_date = bar.date
            self._open_time = bucket_floor(bar.time, self.width)
            self._open = bar.open
            self._split = bar.split
            self._secondary = bar.secondary
            self._dividend = bar.dividend
            self._initialized = True

        self._high = max(self._high, bar.high)
        self._low = min(self._low, bar.low)
        self._close = bar.close
        self._volume += bar.volume
        self._split = bar.split
        self._secondary = max(self._secondary, bar.secondary)
        self._dividend = max(self._dividend, bar.dividend)

    def flush(self) -> None:
        """Finalize the in-progress bucket; a second call does nothing."""
        if self._initialized:
            self._finalize()
            self._initialized = False

    def snapshot(self) -> AggregatedBar | None:
        """Return the in-progress bucket without finalizing it."""
        if not self._initialized:
            return None
        return self._current_bar()

    def _current_bar(self) -> AggregatedBar:
        return AggregatedBar(
            date=self._open_date,
            time=self._open_time,
            open=self._open,
            high=self._high,
            low=self._low,
            close=self._close,
            volume=self._volume,
            split=self._split,
            secondary=self._secondary,
            dividend=self._dividend,
        )

    def _finalize(self) -> AggregatedBar:
        bar = self._current_bar()
        if self.listener is None:
            self.bars.append(bar)
        else:
            self.listener.bar_closed(bar)
        return bar
