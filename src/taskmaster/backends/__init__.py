"""Concrete adapters for the core ports (SQLite task service, local session)."""
