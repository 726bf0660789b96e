"""Chetana: mental wellness companion API."""

__version__ = "0.1.0"
