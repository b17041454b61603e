"""Animated bar-chart races from time-series tables."""

__version__ = "0.1.0"
