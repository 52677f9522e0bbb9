"""Concise human-readable run logger."""

from __future__ import annotations

import logging
from datetime import datetime
from decimal import Decimal


class HumanLogger:
    """Console logger with fixed line types."""

    def __init__(self, level: str = "INFO") -> None:
        self._logger = logging.getLogger("eodbars")
        self._logger.setLevel(getattr(logging, level.upper(), logging.INFO))
        self._logger.propagate = False
        if not self._logger.handlers:
            handler = logging.StreamHandler()
            formatter = logging.Formatter("%(asctime)s | %(message)s", "%Y-%m-%d %H:%M:%S")
            handler.setFormatter(formatter)
            self._logger.addHandler(handler)

    def run_started(
        self,
        run_id: str,
        output_mode: str,
        width_minutes: int,
        session: str,
        files: int,
    ) -> None:
        self._logger.info(
            "run | %s | mode %s | %sm bars | session %s | files %d",
            run_id,
            output_mode,
            width_minutes,
            session,
            files,
        )

    def trading_dates_ready(self, entries: int, earliest: datetime | None) -> None:
        earliest_text = earliest.strftime("%Y-%m-%d %H:%M") if earliest is not None else "-"
        self._logger.info("calendar | buckets %d | earliest %s", entries, earliest_text)

    def file_started(self, path: str, instrument_id: int) -> None:
        self._logger.debug("file | %s | instrument %d", path, instrument_id)

    def file_finished(
        self,
        path: str,
        instrument_id: int,
        bars: int,
        splits: int = 0,
        dividends: int = 0,
        elapsed_seconds: float | None = None,
    ) -> None:
        parts = [f"converted | {path} | instrument {instrument_id} | bars {bars}"]
        if splits:
            parts.append(f"splits {splits}")
        if dividends:
            parts.append(f"dividends {dividends}")
        if elapsed_seconds is not None:
            parts.append(f"{elapsed_seconds:.2f}s")
        self._logger.info(" | ".join(parts))

    def split(self, instrument_id: int, trading_date: datetime, ratio: str) -> None:
        self._logger.info(
            "split | instrument %d | %s | %s",
            instrument_id,
            trading_date.strftime("%Y-%m-%d"),
            ratio,
        )

    def dividend(self, instrument_id: int, trading_date: datetime, amount: Decimal) -> None:
        self._logger.debug(
            "dividend | instrument %d | %s | %s",
            instrument_id,
            trading_date.strftime("%Y-%m-%d"),
            format(amount, "f"),
        )

    def run_finished(self, files: int, failed: bool) -> None:
        status = "failed" if failed else "ok"
        self._logger.info("done | files %d | %s", files, status)

    def error(self, message: str) -> None:
        self._logger.error("error | %s", message)
