"""CSV-backed minute bar reader and aggregated bar writer."""

from __future__ import annotations

from collections.abc import Iterable, Iterator, Sequence
from datetime import date, datetime, time
from decimal import Decimal, InvalidOperation
from pathlib import Path

import pandas as pd

from eodbars.domain.models import AggregatedBar, MinuteBar
from eodbars.errors import MalformedRecordError

AUX_COLUMNS = 3

# column count -> (price fields, auxiliary fields present)
ROW_LAYOUTS = {
    7: (4, False),
    9: (6, False),
    10: (4, True),
    12: (6, True),
}


class CsvMinuteBarReader:
    """Stream minute bars from a header-less CSV file.

    Rows hold ``yyyymmdd, hmm``, four or six prices, ``volume`` and optionally
    ``split, secondary, dividend``. With six prices the first four are OHLC
    and the remaining two are validated but not carried. The file is read in
    chunks so that large histories never sit in memory at once.
    """

    def __init__(self, path: str | Path, chunk_size: int = 100_000) -> None:
        self.path = Path(path)
        self.chunk_size = max(1, chunk_size)

    def __iter__(self) -> Iterator[MinuteBar]:
        row_number = 0
        for chunk in self._chunks():
            for values in chunk.itertuples(index=False, name=None):
                row_number += 1
                yield parse_row(values, source=str(self.path), row_number=row_number)

    def _chunks(self) -> Iterator[pd.DataFrame]:
        try:
            reader = pd.read_csv(
                self.path,
                header=None,
                dtype=str,
                keep_default_na=False,
                skip_blank_lines=True,
                chunksize=self.chunk_size,
            )
        except pd.errors.EmptyDataError:
            return
        try:
            with reader:
                yield from reader
        except pd.errors.ParserError as exc:
            raise MalformedRecordError(f"{self.path}: {exc}") from exc


def parse_row(values: Sequence[object], source: str = "<input>", row_number: int = 0) -> MinuteBar:
    """Convert one raw CSV row into a ``MinuteBar``."""
    fields = list(values)
    while fields and _is_missing(fields[-1]):
        fields.pop()
    where = f"{source}:{row_number}"
    layout = ROW_LAYOUTS.get(len(fields))
    if layout is None:
        expected = ", ".join(str(count) for count in ROW_LAYOUTS)
        raise MalformedRecordError(f"{where}: expected one of {expected} fields, got {len(fields)}")
    price_count, has_aux = layout
    if any(_is_missing(value) for value in fields):
        raise MalformedRecordError(f"{where}: empty field")

    texts = [str(value) for value in fields]
    numbers = [parse_decimal(text, where=where) for text in texts[2:]]
    open_, high, low, close = numbers[:4]
    volume = numbers[price_count]
    aux = numbers[price_count + 1 :] if has_aux else [Decimal(0)] * AUX_COLUMNS
    return MinuteBar(
        date=parse_date(texts[0], where=where),
        time=parse_time(texts[1], where=where),
        open=open_,
        high=high,
        low=low,
        close=close,
        volume=volume,
        split=aux[0],
        secondary=aux[1],
        dividend=aux[2],
    )


def parse_date(text: str, where: str = "<input>") -> date:
    value = text.strip()
    if len(value) != 8 or not value.isdigit():
        raise MalformedRecordError(f"{where}: invalid date '{text}'")
    try:
        return datetime.strptime(value, "%Y%m%d").date()
    except ValueError as exc:
        raise MalformedRecordError(f"{where}: invalid date '{text}'") from exc


def parse_time(text: str, where: str = "<input>") -> time:
    """Parse a 1-4 digit ``hmm`` time of day, left-padding it to four digits."""
    value = text.strip().zfill(4)
    if len(value) != 4 or not value.isdigit():
        raise MalformedRecordError(f"{where}: invalid time '{text}'")
    hour, minute = int(value[:2]), int(value[2:])
    if hour > 23 or minute > 59:
        raise MalformedRecordError(f"{where}: invalid time '{text}'")
    return time(hour, minute)


def parse_decimal(text: str, where: str = "<input>") -> Decimal:
    """Parse a fixed-point value; scientific notation is kept exact."""
    try:
        value = Decimal(text.strip())
    except InvalidOperation as exc:
        raise MalformedRecordError(f"{where}: invalid number '{text}'") from exc
    if not value.is_finite():
        raise MalformedRecordError(f"{where}: non-finite number '{text}'")
    return value


def format_decimal(value: Decimal) -> str:
    return format(value, "f")


def format_clock(value: time) -> str:
    """Render a time of day as ``hmm`` (no leading zero on the hour)."""
    return f"{value.hour}{value.minute:02d}"


def write_bars_csv(path: str | Path, bars: Iterable[AggregatedBar], include_aux: bool = True) -> int:
    """Write aggregated bars as header-less CSV rows; return the row count."""
    rows: list[list[str]] = []
    for bar in bars:
        row = [
            bar.date.strftime("%Y%m%d"),
            format_clock(bar.time),
            format_decimal(bar.open),
            format_decimal(bar.high),
            format_decimal(bar.low),
            format_decimal(bar.close),
            format_decimal(bar.volume),
        ]
        if include_aux:
            row.extend(
                [
                    format_decimal(bar.split),
                    format_decimal(bar.secondary),
                    format_decimal(bar.dividend),
                ]
            )
        rows.append(row)
    output = Path(path)
    output.parent.mkdir(parents=True, exist_ok=True)
    pd.DataFrame(rows).to_csv(output, header=False, index=False)
    return len(rows)


def _is_missing(value: object) -> bool:
    if value is None:
        return True
    if isinstance(value, float):
        return value != value
    return isinstance(value, str) and not value.strip()
