"""Caching proxy for Visual Crossing weather data."""

__version__ = "0.1.0"
