"""Bar aggregation, trading date attribution and corporate-action emission."""

from .aggregator import BarAggregator, BarListener, bucket_floor
from .emitter import CorporateActionEmitter, gcd, reduce_split_ratio
from .trading_dates import TradingDateIndex

__all__ = [
    "BarAggregator",
    "BarListener",
    "CorporateActionEmitter",
    "TradingDateIndex",
    "bucket_floor",
    "gcd",
    "reduce_split_ratio",
]
