"""Pivot-and-Launch project template guide exporter."""

__version__ = "0.1.0"
