"""Minute bar source contract."""

from __future__ import annotations

from collections.abc import Iterator
from typing import Protocol

from eodbars.domain.models import MinuteBar


class MinuteBarSource(Protocol):
    """Lazy, time-ordered stream of minute bars for one instrument."""

    def __iter__(self) -> Iterator[MinuteBar]:
        """Yield bars in non-decreasing (date, time) order."""
