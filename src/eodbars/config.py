"""Environment and CLI runtime configuration."""

from __future__ import annotations

import os
from dataclasses import dataclass, field, replace
from datetime import date, datetime, time, timedelta
from typing import Literal, Self

from dotenv import load_dotenv

from eodbars.domain.models import SessionWindow
from eodbars.errors import ConfigError

OutputMode = Literal["bars", "eod"]
OUTPUT_MODES = ("bars", "eod")


def parse_bool(value: str | None, default: bool) -> bool:
    """Parse truthy environment strings."""
    if value is None:
        return default
    return value.strip().lower() in {"1", "true", "yes", "y", "on"}


def parse_clock(value: str, *, field_name: str) -> time:
    """Parse ``HH:MM`` or ``HHMM`` time-of-day strings."""
    text = value.strip().replace(":", "")
    if not text.isdigit() or not 1 <= len(text) <= 4:
        raise ConfigError(f"{field_name} must look like HH:MM, got '{value}'")
    text = text.zfill(4)
    hour, minute = int(text[:2]), int(text[2:])
    if hour > 23 or minute > 59:
        raise ConfigError(f"{field_name} must look like HH:MM, got '{value}'")
    return time(hour, minute)


def parse_date_value(value: str, *, field_name: str) -> date:
    """Parse ``YYYY-MM-DD`` or ``YYYYMMDD`` dates."""
    text = value.strip()
    for fmt in ("%Y-%m-%d", "%Y%m%d"):
        try:
            return datetime.strptime(text, fmt).date()
        except ValueError:
            continue
    raise ConfigError(f"{field_name} must be a date like YYYY-MM-DD, got '{value}'")


def parse_optional_date(value: str | None, *, field_name: str) -> date | None:
    if value is None or not value.strip():
        return None
    return parse_date_value(value, field_name=field_name)


def parse_dates(value: str | None, *, field_name: str) -> list[date]:
    """Parse comma-separated dates."""
    if not value:
        return []
    return [
        parse_date_value(item, field_name=field_name)
        for item in value.split(",")
        if item.strip()
    ]


def default_anchor_date() -> date:
    return date.today() - timedelta(days=1)


@dataclass(frozen=True)
class Settings:
    """Immutable runtime settings."""

    width_minutes: int = 30
    session_start: time = time(9, 30)
    session_end: time = time(16, 0)
    anchor_date: date = field(default_factory=default_anchor_date)
    calendar_start: date = date(1970, 1, 1)
    calendar_path: str = ""
    holidays: list[date] = field(default_factory=list)
    skip_weekends: bool = True
    output_mode: OutputMode = "eod"
    include_aux_fields: bool = True
    source_path: str = "minute_data"
    output_dir: str = "converted"
    events_dir: str = "runs"
    first_instrument_id: int = 1
    chunk_size: int = 100_000
    log_level: str = "INFO"

    @classmethod
    def from_env(cls) -> Self:
        """Create settings from environment variables."""
        load_dotenv()
        try:
            raw = cls(
                width_minutes=int(os.getenv("BAR_WIDTH_MINUTES", "30")),
                session_start=parse_clock(
                    os.getenv("SESSION_START", "09:30"), field_name="session_start"
                ),
                session_end=parse_clock(
                    os.getenv("SESSION_END", "16:00"), field_name="session_end"
                ),
                anchor_date=parse_optional_date(
                    os.getenv("ANCHOR_DATE"), field_name="anchor_date"
                )
                or default_anchor_date(),
                calendar_start=parse_date_value(
                    os.getenv("CALENDAR_START", "1970-01-01"), field_name="calendar_start"
                ),
                calendar_path=str(os.getenv("CALENDAR_PATH", "")).strip(),
                holidays=parse_dates(os.getenv("HOLIDAYS"), field_name="holidays"),
                skip_weekends=parse_bool(os.getenv("SKIP_WEEKENDS"), True),
                output_mode=str(os.getenv("OUTPUT_MODE", "eod")).strip().lower(),
                include_aux_fields=parse_bool(os.getenv("INCLUDE_AUX_FIELDS"), True),
                source_path=str(os.getenv("SOURCE_PATH", "minute_data")).strip(),
                output_dir=str(os.getenv("OUTPUT_DIR", "converted")).strip(),
                events_dir=str(os.getenv("EVENTS_DIR", "runs")).strip(),
                first_instrument_id=int(os.getenv("FIRST_INSTRUMENT_ID", "1")),
                chunk_size=int(os.getenv("CHUNK_SIZE", "100000")),
                log_level=str(os.getenv("LOG_LEVEL", "INFO")).strip().upper(),
            )
        except ConfigError:
            raise
        except ValueError as exc:
            raise ConfigError(str(exc)) from exc
        return raw.validate()

    def with_overrides(self, **kwargs: object) -> Self:
        """Return a new settings object with updated values."""
        updated = replace(self, **kwargs)
        return updated.validate()

    @property
    def session(self) -> SessionWindow:
        return SessionWindow(start=self.session_start, end=self.session_end)

    def validate(self) -> Self:
        """Validate settings fields.

        Widths that do not divide 60 and equal session bounds (24-hour
        session) are accepted as-is.
        """
        if self.width_minutes <= 0:
            raise ConfigError("width_minutes must be positive")
        if self.output_mode not in OUTPUT_MODES:
            raise ConfigError("output_mode must be one of bars, eod")
        if self.calendar_start > self.anchor_date:
            raise ConfigError("calendar_start must not be after anchor_date")
        if self.chunk_size <= 0:
            raise ConfigError("chunk_size must be positive")
        if self.first_instrument_id < 0:
            raise ConfigError("first_instrument_id must not be negative")
        if not self.source_path:
            raise ConfigError("source_path is required")
        return self
