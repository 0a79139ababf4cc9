"""Concurrent regular-expression search across a directory tree."""

__version__ = "0.1.0"