"""Contract tests for the travel catalog REST API (categories, destinations, login)."""

__version__ = "1.0.0"
