"""Exceptions raised by the conversion pipeline."""


class EodBarsError(Exception):
    """Base exception for all package-specific errors."""


class ConfigError(EodBarsError, ValueError):
    """Raised when runtime settings are invalid."""


class MalformedRecordError(EodBarsError, ValueError):
    """Raised when an input row cannot be parsed into a minute bar."""


class TradingDateLookupError(EodBarsError, LookupError):
    """Raised when a bucket timestamp has no trading date attribution.

    Either the bucket predates the earliest calendar date covered by the
    index, or the index and the aggregator were built with different
    session or width parameters.
    """
