"""A JSON HTTP API for tracking tasks."""

__version__ = "0.1.0"