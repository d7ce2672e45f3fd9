"""Keyword search and browse service for knowledge articles."""

__version__ = "0.1.0"
