"""JSONL run event sink and the per-run conversion report."""

from __future__ import annotations

import html
import json
from collections import Counter
from pathlib import Path
from typing import Any

import pandas as pd
import plotly.express as px

from eodbars.domain.events import RunEvent

CONVERSION_COLUMNS = ["ts", "file", "instrument_id", "bars", "splits", "dividends"]


class JsonlEventSink:
    """Append-only JSONL writer that also tallies what it wrote."""

    def __init__(self, path: str) -> None:
        self.path = Path(path)
        self.path.parent.mkdir(parents=True, exist_ok=True)
        self.counts: Counter[str] = Counter()

    def emit(self, event: RunEvent) -> None:
        line = json.dumps(event.to_record(), sort_keys=True, default=str)
        with self.path.open("a", encoding="utf-8") as handle:
            handle.write(f"{line}\n")
        self.counts[event.event_type] += 1


def load_events(path: str | Path) -> list[dict[str, Any]]:
    """Read a run's JSONL events; a missing file yields no events."""
    input_path = Path(path)
    if not input_path.exists():
        return []
    lines = input_path.read_text(encoding="utf-8").splitlines()
    return [json.loads(line) for line in lines if line.strip()]


def conversion_frame(events: list[dict[str, Any]]) -> pd.DataFrame:
    """One row per converted file, in run order, with a running bar total."""
    rows = [
        {
            "ts": event.get("ts"),
            "file": event["payload"].get("file", ""),
            "instrument_id": event["payload"].get("instrument_id"),
            "bars": event["payload"].get("bars", 0),
            "splits": event["payload"].get("splits", 0),
            "dividends": event["payload"].get("dividends", 0),
        }
        for event in events
        if event.get("event_type") == "file_converted"
    ]
    frame = pd.DataFrame(rows, columns=CONVERSION_COLUMNS)
    frame["ts"] = pd.to_datetime(frame["ts"], utc=True, errors="coerce")
    frame["bars_total"] = frame["bars"].cumsum()
    return frame


def generate_plotly_report(events_jsonl_path: str, output_html_path: str) -> None:
    """Chart bars written over the run, per file, and corporate actions per file."""
    events = load_events(events_jsonl_path)
    output = Path(output_html_path)
    output.parent.mkdir(parents=True, exist_ok=True)

    frame = conversion_frame(events)
    errors = [
        str(event.get("payload", {}).get("message", ""))
        for event in events
        if event.get("event_type") == "error"
    ]
    html_parts = ["<html><head><meta charset='utf-8'><title>eodbars run report</title></head><body>"]
    if frame.empty:
        html_parts.append("<p>No files converted.</p>")
    else:
        progress = px.line(
            frame,
            x="ts",
            y="bars_total",
            markers=True,
            hover_data=["file", "bars"],
            title="Bars Written Over Run",
        )
        per_file = px.bar(frame, x="file", y="bars", hover_data=["instrument_id"], title="Bars Per File")
        actions = frame.melt(
            id_vars=["file"],
            value_vars=["splits", "dividends"],
            var_name="action",
            value_name="count",
        )
        per_action = px.bar(
            actions,
            x="file",
            y="count",
            color="action",
            barmode="group",
            title="Corporate Actions Per File",
        )
        html_parts.append(progress.to_html(full_html=False, include_plotlyjs="cdn"))
        html_parts.append(per_file.to_html(full_html=False, include_plotlyjs=False))
        html_parts.append(per_action.to_html(full_html=False, include_plotlyjs=False))
    for message in errors:
        html_parts.append(f"<p class='error'>{html.escape(message)}</p>")
    html_parts.append("</body></html>")
    output.write_text("".join(html_parts), encoding="utf-8")
