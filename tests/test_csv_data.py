"""Tests for minute bar CSV parsing and aggregated bar output."""

from __future__ import annotations

from datetime import date, time
from decimal import Decimal
from pathlib import Path

import pytest

from eodbars.data.csv_data import CsvMinuteBarReader, parse_row, write_bars_csv
from eodbars.domain.models import AggregatedBar
from eodbars.errors import MalformedRecordError


def test_reader_parses_rows_with_auxiliary_fields(tmp_path: Path) -> None:
    path = tmp_path / "table_abc.csv"
    path.write_text(
        "\n".join(
            [
                "20240307,930,100.5,101,99.75,100.25,1.2345e4,1,0,0",
                "20240307,931,100.25,100.5,100,100.5,875,0.5,2,0.12",
            ]
        )
    )

    bars = list(CsvMinuteBarReader(path))

    assert len(bars) == 2
    first, second = bars
    assert first.date == date(2024, 3, 7)
    assert first.time == time(9, 30)
    assert first.open == Decimal("100.5")
    assert first.low == Decimal("99.75")
    assert first.volume == Decimal("12345")
    assert second.split == Decimal("0.5")
    assert second.secondary == Decimal("2")
    assert second.dividend == Decimal("0.12")


def test_reader_defaults_auxiliary_fields_to_zero(tmp_path: Path) -> None:
    path = tmp_path / "plain.csv"
    path.write_text("20240307,5,1,2,0.5,1.5,10\n")

    (bar,) = list(CsvMinuteBarReader(path))

    assert bar.time == time(0, 5)
    assert bar.split == Decimal(0)
    assert bar.secondary == Decimal(0)
    assert bar.dividend == Decimal(0)


def test_reader_accepts_six_price_fields(tmp_path: Path) -> None:
    path = tmp_path / "six.csv"
    path.write_text("20240307,930,1,2,0.5,1.5,1.4,1.6,10\n")

    (bar,) = list(CsvMinuteBarReader(path))

    assert (bar.open, bar.high, bar.low, bar.close) == (
        Decimal("1"),
        Decimal("2"),
        Decimal("0.5"),
        Decimal("1.5"),
    )
    assert bar.volume == Decimal("10")
    assert bar.split == Decimal(0)


def test_reader_accepts_six_price_fields_with_auxiliary_fields(tmp_path: Path) -> None:
    path = tmp_path / "six_aux.csv"
    path.write_text("20240307,930,1,2,0.5,1.5,1.4,1.6,2.5e2,0.5,3,0.25\n")

    (bar,) = list(CsvMinuteBarReader(path))

    assert bar.close == Decimal("1.5")
    assert bar.volume == Decimal("250")
    assert bar.split == Decimal("0.5")
    assert bar.secondary == Decimal("3")
    assert bar.dividend == Decimal("0.25")


def test_reader_streams_in_chunks(tmp_path: Path) -> None:
    path = tmp_path / "chunks.csv"
    lines = [f"20240307,{1000 + minute},1,1,1,1,{minute}" for minute in range(5)]
    path.write_text("\n".join(lines) + "\n")

    bars = list(CsvMinuteBarReader(path, chunk_size=2))

    assert [bar.time for bar in bars] == [time(10, minute) for minute in range(5)]
    assert sum(bar.volume for bar in bars) == Decimal(10)


def test_reader_returns_nothing_for_empty_file(tmp_path: Path) -> None:
    path = tmp_path / "empty.csv"
    path.write_text("")

    assert list(CsvMinuteBarReader(path)) == []


@pytest.mark.parametrize(
    ("row", "message"),
    [
        (["2024-03-07", "930", "1", "1", "1", "1", "1"], "invalid date"),
        (["20240230", "930", "1", "1", "1", "1", "1"], "invalid date"),
        (["20240307", "9:30", "1", "1", "1", "1", "1"], "invalid time"),
        (["20240307", "2460", "1", "1", "1", "1", "1"], "invalid time"),
        (["20240307", "930", "abc", "1", "1", "1", "1"], "invalid number"),
        (["20240307", "930", "1", "1", "1", "1", "NaN"], "non-finite"),
        (["20240307", "930", "1", "1", "1", "1", "1", "1"], "expected one of 7, 9, 10, 12 fields"),
        (["20240307", "930", "1", "1", "1", "1", "x", "1", "1"], "invalid number"),
        (["20240307", "930", "1", "", "1", "1", "1"], "empty field"),
    ],
)
def test_parse_row_rejects_malformed_values(row: list[str], message: str) -> None:
    with pytest.raises(MalformedRecordError, match=message):
        parse_row(row, source="bad.csv", row_number=3)


def test_reader_reports_row_number(tmp_path: Path) -> None:
    path = tmp_path / "bad.csv"
    path.write_text("20240307,930,1,1,1,1,1\n20240307,931,1,x,1,1,1\n")

    with pytest.raises(MalformedRecordError, match=r"bad\.csv:2"):
        list(CsvMinuteBarReader(path))


def test_write_bars_csv_renders_compact_rows(tmp_path: Path) -> None:
    bars = [
        AggregatedBar(
            date=date(2024, 3, 7),
            time=time(9, 30),
            open=Decimal("100.5"),
            high=Decimal("101"),
            low=Decimal("99.75"),
            close=Decimal("100.25"),
            volume=Decimal("1.2345E+4"),
            split=Decimal("1"),
            secondary=Decimal("0"),
            dividend=Decimal("0.12"),
        ),
        AggregatedBar(
            date=date(2024, 3, 7),
            time=time(16, 0),
            open=Decimal("1"),
            high=Decimal("2"),
            low=Decimal("0.5"),
            close=Decimal("1.5"),
            volume=Decimal("10"),
        ),
    ]
    full = tmp_path / "full.csv"
    compact = tmp_path / "compact.csv"

    assert write_bars_csv(full, bars) == 2
    write_bars_csv(compact, bars, include_aux=False)

    assert full.read_text().splitlines() == [
        "20240307,930,100.5,101,99.75,100.25,12345,1,0,0.12",
        "20240307,1600,1,2,0.5,1.5,10,0,0,0",
    ]
    assert compact.read_text().splitlines()[0] == "20240307,930,100.5,101,99.75,100.25,12345"
