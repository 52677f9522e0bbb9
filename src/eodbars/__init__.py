"""Minute bar aggregation and pseudo end-of-day attribution."""

__version__ = "0.1.0"
