"""Logging helpers."""

from .event_sink import JsonlEventSink, conversion_frame, generate_plotly_report, load_events
from .logger import HumanLogger

__all__ = [
    "HumanLogger",
    "JsonlEventSink",
    "conversion_frame",
    "generate_plotly_report",
    "load_events",
]
