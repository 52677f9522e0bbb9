"""Pseudo end-of-day record and corporate-action emission."""

from __future__ import annotations

from decimal import Decimal

from eodbars.aggregation.trading_dates import TradingDateIndex
from eodbars.domain.events import DividendEvent, EodRecord, SplitEvent
from eodbars.domain.models import AggregatedBar
from eodbars.sinks.base import CorporateActionSink


def gcd(a: Decimal, b: Decimal) -> Decimal:
    """Greatest common divisor of two fixed-point values (Euclid)."""
    while b != 0:
        a, b = b, a % b
    return a


def reduce_split_ratio(old_ratio: Decimal, new_ratio: Decimal) -> tuple[int, int]:
    """Return ``(old_shares, new_shares)`` for a ratio change in lowest terms."""
    divisor = gcd(old_ratio, new_ratio)
    if divisor == 0:
        raise ValueError("split ratios must not both be zero")
    return int(old_ratio / divisor), int(new_ratio / divisor)


class CorporateActionEmitter:
    """Aggregator listener writing EOD, split and dividend records to a sink.

    A split change observed when bucket B closes and bucket C opens is held
    as pending, attributed to B's trading date, and only written when the
    next bucket is finalized.
    """

    def __init__(
        self,
        instrument_id: int,
        trading_dates: TradingDateIndex,
        sink: CorporateActionSink,
    ) -> None:
        self.instrument_id = instrument_id
        self.trading_dates = trading_dates
        self.sink = sink
        self.eod_count = 0
        self.split_count = 0
        self.dividend_count = 0
        self._pending_split: SplitEvent | None = None

    @property
    def pending_split(self) -> SplitEvent | None:
        return self._pending_split

    def bar_closed(self, bar: AggregatedBar) -> None:
        trading_date = self.trading_dates.attribute(bar.date, bar.time)
        self.sink.append_eod(
            EodRecord(
                instrument_id=self.instrument_id,
                trading_date=trading_date,
                open=bar.open,
                high=bar.high,
                low=bar.low,
                close=bar.close,
                volume_hundreds=int(bar.volume / 100),
            )
        )
        self.eod_count += 1

        if self._pending_split is not None:
            self.sink.append_split(self._pending_split)
            self.split_count += 1
            self._pending_split = None

        if bar.dividend != 0:
            self.sink.append_dividend(
                DividendEvent(
                    instrument_id=self.instrument_id,
                    trading_date=trading_date,
                    dividend=bar.dividend,
                )
            )
            self.dividend_count += 1

    def split_changed(self, closed: AggregatedBar, new_split: Decimal) -> None:
        old_shares, new_shares = reduce_split_ratio(closed.split, new_split)
        self._pending_split = SplitEvent(
            instrument_id=self.instrument_id,
            trading_date=self.trading_dates.attribute(closed.date, closed.time),
            old_shares=old_shares,
            new_shares=new_shares,
        )
