"""Idempotent, retrying execution cache for multi-step import jobs."""

__version__ = "0.1.0"
