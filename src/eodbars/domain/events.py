"""Corporate-action records and structured run events."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import UTC, datetime
from decimal import Decimal
from typing import Any


@dataclass(frozen=True)
class EodRecord:
    """Pseudo end-of-day record synthesized from one aggregated bar.

    ``trading_date`` carries the session close time of the attributed
    trading day.
    """

    instrument_id: int
    trading_date: datetime
    open: Decimal
    high: Decimal
    low: Decimal
    close: Decimal
    volume_hundreds: int


@dataclass(frozen=True)
class SplitEvent:
    """Share split attributed to a trading date, in smallest integer terms."""

    instrument_id: int
    trading_date: datetime
    old_shares: int
    new_shares: int

    @property
    def ratio_text(self) -> str:
        return f"{self.old_shares}/{self.new_shares}"


@dataclass(frozen=True)
class DividendEvent:
    """Dividend amount attributed to a trading date."""

    instrument_id: int
    trading_date: datetime
    dividend: Decimal


@dataclass(frozen=True)
class RunEvent:
    """Single event written to JSONL."""

    run_id: str
    event_type: str
    payload: dict[str, Any] = field(default_factory=dict)
    ts: str = field(default_factory=lambda: datetime.now(tz=UTC).isoformat())

    def to_record(self) -> dict[str, Any]:
        """Convert event to serializable dict."""
        return {
            "ts": self.ts,
            "run_id": self.run_id,
            "event_type": self.event_type,
            "payload": self.payload,
        }
