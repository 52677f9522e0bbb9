"""CSV rendering of pseudo end-of-day records."""

from __future__ import annotations

from datetime import datetime
from pathlib import Path

import pandas as pd

from eodbars.data.csv_data import format_clock, format_decimal
from eodbars.domain.events import DividendEvent, SplitEvent
from eodbars.sinks.memory import InMemoryActionSink

NOT_APPLICABLE = "N/A"


class CsvEodWriter(InMemoryActionSink):
    """Collect records and write one row per EOD record.

    Split and dividend records are joined onto the EOD row sharing their
    trading date; rows without one carry ``N/A``.
    """

    def rows(self) -> list[list[str]]:
        splits: dict[datetime, SplitEvent] = {event.trading_date: event for event in self.splits}
        dividends: dict[datetime, DividendEvent] = {
            event.trading_date: event for event in self.dividends
        }
        rows: list[list[str]] = []
        for record in self.eod_records:
            split = splits.get(record.trading_date)
            dividend = dividends.get(record.trading_date)
            rows.append(
                [
                    record.trading_date.strftime("%Y-%m-%d"),
                    format_clock(record.trading_date.time()),
                    format_decimal(record.open),
                    format_decimal(record.high),
                    format_decimal(record.low),
                    format_decimal(record.close),
                    str(record.volume_hundreds),
                    split.ratio_text if split is not None else NOT_APPLICABLE,
                    format_decimal(dividend.dividend) if dividend is not None else NOT_APPLICABLE,
                ]
            )
        return rows

    def write(self, path: str | Path) -> int:
        """Write collected rows to ``path``; return the row count."""
        rows = self.rows()
        output = Path(path)
        output.parent.mkdir(parents=True, exist_ok=True)
        pd.DataFrame(rows).to_csv(output, header=False, index=False)
        return len(rows)
