"""Corporate-action sink contract."""

from __future__ import annotations

from typing import Protocol

from eodbars.domain.events import DividendEvent, EodRecord, SplitEvent


class CorporateActionSink(Protocol):
    """Write API for pseudo end-of-day and corporate-action records."""

    def append_eod(self, record: EodRecord) -> None:
        """Append one end-of-day record."""

    def append_split(self, event: SplitEvent) -> None:
        """Append one split record."""

    def append_dividend(self, event: DividendEvent) -> None:
        """Append one dividend record."""
