"""PostgreSQL SQLSTATE codes, server error parsing, client errors and message values."""

__version__ = "0.4.0"

__all__ = ["codes", "sqlstate", "error", "messages"]