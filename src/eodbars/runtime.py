"""Runtime wiring and per-file conversion orchestration."""

from __future__ import annotations

from pathlib import Path
from time import perf_counter
from typing import Any
from uuid import uuid4

from eodbars.aggregation.aggregator import BarAggregator
from eodbars.aggregation.emitter import CorporateActionEmitter
from eodbars.aggregation.trading_dates import TradingDateIndex
from eodbars.calendars.base import TradingCalendar
from eodbars.calendars.csv_calendar import CsvTradingCalendar
from eodbars.calendars.weekday import WeekdayTradingCalendar
from eodbars.config import Settings
from eodbars.data.base import MinuteBarSource
from eodbars.data.csv_data import CsvMinuteBarReader, write_bars_csv
from eodbars.domain.events import RunEvent
from eodbars.domain.models import AggregatedBar
from eodbars.errors import ConfigError
from eodbars.logging.event_sink import JsonlEventSink, generate_plotly_report
from eodbars.logging.logger import HumanLogger
from eodbars.sinks.base import CorporateActionSink
from eodbars.sinks.csv_writer import CsvEodWriter


def run(settings: Settings) -> int:
    """Convert every minute-bar file under the configured source path."""
    human_logger = HumanLogger(level=settings.log_level)
    run_id = uuid4().hex
    run_directory = Path(settings.events_dir) / run_id
    run_directory.mkdir(parents=True, exist_ok=True)
    events_path = run_directory / "events.jsonl"
    report_path = run_directory / "report.html"
    event_sink = JsonlEventSink(str(events_path))

    exit_code = 0
    converted = 0
    try:
        sources = discover_sources(settings.source_path)
        human_logger.run_started(
            run_id,
            settings.output_mode,
            settings.width_minutes,
            f"{settings.session_start:%H:%M}-{settings.session_end:%H:%M}",
            len(sources),
        )
        event_sink.emit(
            RunEvent(
                run_id=run_id,
                event_type="run_started",
                payload={
                    "output_mode": settings.output_mode,
                    "width_minutes": settings.width_minutes,
                    "files": [path.name for path in sources],
                },
            )
        )

        trading_dates: TradingDateIndex | None = None
        if settings.output_mode == "eod":
            trading_dates = build_trading_dates(settings, build_calendar(settings))
            human_logger.trading_dates_ready(len(trading_dates), trading_dates.earliest)

        output_dir = Path(settings.output_dir)
        for offset, path in enumerate(sources):
            instrument_id = settings.first_instrument_id + offset
            human_logger.file_started(str(path), instrument_id)
            started = perf_counter()
            reader = CsvMinuteBarReader(path, chunk_size=settings.chunk_size)
            payload: dict[str, Any] = {"file": path.name, "instrument_id": instrument_id}
            if trading_dates is None:
                bars = aggregate_bars(reader, settings)
                payload["bars"] = write_bars_csv(
                    output_dir / path.name,
                    bars,
                    include_aux=settings.include_aux_fields,
                )
            else:
                writer = CsvEodWriter()
                emitter = convert_to_eod(reader, instrument_id, settings, trading_dates, writer)
                payload["bars"] = writer.write(output_dir / path.name)
                payload["splits"] = emitter.split_count
                payload["dividends"] = emitter.dividend_count
                record_corporate_actions(writer, run_id, event_sink, human_logger)

            human_logger.file_finished(
                str(path),
                instrument_id,
                bars=payload["bars"],
                splits=payload.get("splits", 0),
                dividends=payload.get("dividends", 0),
                elapsed_seconds=perf_counter() - started,
            )
            event_sink.emit(RunEvent(run_id=run_id, event_type="file_converted", payload=payload))
            converted += 1
    except Exception as exc:
        human_logger.error(str(exc))
        event_sink.emit(RunEvent(run_id=run_id, event_type="error", payload={"message": str(exc)}))
        exit_code = 1
    finally:
        generate_plotly_report(str(events_path), str(report_path))

    human_logger.run_finished(converted, failed=exit_code != 0)
    return exit_code


def discover_sources(source_path: str) -> list[Path]:
    """Return the CSV files to convert, sorted by name."""
    path = Path(source_path)
    if path.is_file():
        return [path]
    if not path.is_dir():
        raise ConfigError(f"Source path does not exist: {path}")
    return sorted(
        candidate
        for candidate in path.iterdir()
        if candidate.is_file() and candidate.suffix.lower() == ".csv"
    )


def build_calendar(settings: Settings) -> TradingCalendar:
    if settings.calendar_path:
        return CsvTradingCalendar(settings.calendar_path)
    return WeekdayTradingCalendar(holidays=settings.holidays)


def build_trading_dates(settings: Settings, calendar: TradingCalendar) -> TradingDateIndex:
    return TradingDateIndex(
        width=settings.width_minutes,
        session=settings.session,
        anchor_date=settings.anchor_date,
        calendar=calendar,
        calendar_start=settings.calendar_start,
        skip_weekends=settings.skip_weekends,
    )


def aggregate_bars(source: MinuteBarSource, settings: Settings) -> list[AggregatedBar]:
    """Aggregate a minute stream into the configured bar width."""
    aggregator = BarAggregator(settings.width_minutes, settings.session)
    for bar in source:
        aggregator.process(bar)
    aggregator.flush()
    return aggregator.bars


def convert_to_eod(
    source: MinuteBarSource,
    instrument_id: int,
    settings: Settings,
    trading_dates: TradingDateIndex,
    sink: CorporateActionSink,
) -> CorporateActionEmitter:
    """Stream one instrument's minute bars into pseudo end-of-day records."""
    emitter = CorporateActionEmitter(instrument_id, trading_dates, sink)
    aggregator = BarAggregator(settings.width_minutes, settings.session, listener=emitter)
    for bar in source:
        aggregator.process(bar)
    aggregator.flush()
    return emitter


def record_corporate_actions(
    writer: CsvEodWriter,
    run_id: str,
    event_sink: JsonlEventSink,
    human_logger: HumanLogger,
) -> None:
    for split in writer.splits:
        human_logger.split(split.instrument_id, split.trading_date, split.ratio_text)
        event_sink.emit(
            RunEvent(
                run_id=run_id,
                event_type="split",
                payload={
                    "instrument_id": split.instrument_id,
                    "trading_date": split.trading_date.isoformat(),
                    "old_shares": split.old_shares,
                    "new_shares": split.new_shares,
                },
            )
        )
    for dividend in writer.dividends:
        human_logger.dividend(dividend.instrument_id, dividend.trading_date, dividend.dividend)
        event_sink.emit(
            RunEvent(
                run_id=run_id,
                event_type="dividend",
                payload={
                    "instrument_id": dividend.instrument_id,
                    "trading_date": dividend.trading_date.isoformat(),
                    "dividend": format(dividend.dividend, "f"),
                },
            )
        )
