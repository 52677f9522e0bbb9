"""In-memory corporate-action sink."""

from __future__ import annotations

from eodbars.domain.events import DividendEvent, EodRecord, SplitEvent


class InMemoryActionSink:
    """Collect records in three ordered lists."""

    def __init__(self) -> None:
        self.eod_records: list[EodRecord] = []
        self.splits: list[SplitEvent] = []
        self.dividends: list[DividendEvent] = []

    def append_eod(self, record: EodRecord) -> None:
        self.eod_records.append(record)

    def append_split(self, event: SplitEvent) -> None:
        self.splits.append(event)

    def append_dividend(self, event: DividendEvent) -> None:
        self.dividends.append(event)
