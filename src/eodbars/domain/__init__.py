"""Domain models and event types."""

from .events import DividendEvent, EodRecord, RunEvent, SplitEvent
from .models import AggregatedBar, MinuteBar, SessionKind, SessionWindow

__all__ = [
    "AggregatedBar",
    "DividendEvent",
    "EodRecord",
    "MinuteBar",
    "RunEvent",
    "SessionKind",
    "SessionWindow",
    "SplitEvent",
]
