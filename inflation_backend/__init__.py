"""Inflation effect on savings: calculator and history API."""

__version__ = "1.0.0"
