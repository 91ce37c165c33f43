"""Database layer for bluebook application."""

from bluebook.database.base import Database
from bluebook.database.factories import create_sqlite_database

__all__ = ["Database", "create_sqlite_database"]
