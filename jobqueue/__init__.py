"""Persistent, database-backed job queue."""

__version__ = "1.0.0"
