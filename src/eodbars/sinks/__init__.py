"""Corporate-action sinks."""

from .base import CorporateActionSink
from .csv_writer import NOT_APPLICABLE, CsvEodWriter
from .memory import InMemoryActionSink

__all__ = ["NOT_APPLICABLE", "CorporateActionSink", "CsvEodWriter", "InMemoryActionSink"]
