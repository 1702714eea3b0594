"""Metric emission helpers: object pooling, reporter fan-out, UDP transports and M3 wire types."""

__version__ = "0.1.0"