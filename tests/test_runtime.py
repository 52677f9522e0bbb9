from __future__ import annotations

from datetime import date
from pathlib import Path

from eodbars.config import Settings
from eodbars.logging.event_sink import load_events
from eodbars.runtime import discover_sources, run

ROWS = [
    "20240307,931,20,21,19.5,20.5,1000,1.0,0,0",
    "20240307,945,20.5,22,20,21,500,1.0,0,0",
    "20240307,1001,21,21.5,20.75,21.25,1000,1.0,0,0",
    "20240307,1031,10.5,11,10.25,10.75,2000,0.5,0,0",
    "20240307,1101,10.75,11.25,10.5,11,1000,0.5,0,0.1",
    "20240307,1700,11,11,11,11,99999,0.5,0,0",
]


def _settings(tmp_path: Path, **overrides: object) -> Settings:
    source = tmp_path / "minute_data"
    source.mkdir(exist_ok=True)
    (source / "ABC.csv").write_text("\n".join(ROWS) + "\n")
    base = Settings(
        anchor_date=date(2024, 3, 8),
        calendar_start=date(2023, 10, 1),
        source_path=str(source),
        output_dir=str(tmp_path / "converted"),
        events_dir=str(tmp_path / "runs"),
        first_instrument_id=12,
    )
    return base.with_overrides(**overrides)


def _events(tmp_path: Path) -> list[dict[str, object]]:
    (events_path,) = (tmp_path / "runs").glob("*/events.jsonl")
    return load_events(events_path)


def test_run_writes_pseudo_eod_rows(tmp_path: Path) -> None:
    settings = _settings(tmp_path)

    exit_code = run(settings)

    assert exit_code == 0
    rows = (tmp_path / "converted" / "ABC.csv").read_text().splitlines()
    assert rows == [
        "2024-02-21,1600,20,22,19.5,21,15,N/A,N/A",
        "2024-02-22,1600,21,21.5,20.75,21.25,10,2/1,N/A",
        "2024-02-23,1600,10.5,11,10.25,10.75,20,N/A,N/A",
        "2024-02-26,1600,10.75,11.25,10.5,11,10,N/A,0.1",
    ]
    events = _events(tmp_path)
    event_types = [event["event_type"] for event in events]
    assert event_types == ["run_started", "split", "dividend", "file_converted"]
    converted = events[-1]["payload"]
    assert converted == {
        "file": "ABC.csv",
        "instrument_id": 12,
        "bars": 4,
        "splits": 1,
        "dividends": 1,
    }
    assert list((tmp_path / "runs").glob("*/report.html"))


def test_run_writes_aggregated_bars_in_bars_mode(tmp_path: Path) -> None:
    settings = _settings(tmp_path, output_mode="bars")

    assert run(settings) == 0

    rows = (tmp_path / "converted" / "ABC.csv").read_text().splitlines()
    assert rows[0] == "20240307,930,20,22,19.5,21,1500,1.0,0,0"
    assert rows[-1] == "20240307,1100,10.75,11.25,10.5,11,1000,0.5,0,0.1"
    assert len(rows) == 4


def test_run_fails_on_malformed_record(tmp_path: Path) -> None:
    settings = _settings(tmp_path)
    (Path(settings.source_path) / "BAD.csv").write_text("20240307,930,1,1,1,oops,1\n")

    assert run(settings) == 1

    events = _events(tmp_path)
    assert events[-1]["event_type"] == "error"
    assert "oops" in str(events[-1]["payload"])


def test_run_fails_when_bars_fall_outside_trading_dates(tmp_path: Path) -> None:
    settings = _settings(tmp_path, anchor_date=date(2024, 3, 7))

    assert run(settings) == 1
    assert _events(tmp_path)[-1]["event_type"] == "error"


def test_discover_sources_lists_csv_files_sorted(tmp_path: Path) -> None:
    (tmp_path / "b.csv").write_text("")
    (tmp_path / "a.CSV").write_text("")
    (tmp_path / "notes.txt").write_text("")

    assert [path.name for path in discover_sources(str(tmp_path))] == ["a.CSV", "b.csv"]
    assert discover_sources(str(tmp_path / "b.csv")) == [tmp_path / "b.csv"]
