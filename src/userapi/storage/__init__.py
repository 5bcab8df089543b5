"""
SQLite persistence for the users table.

    open_database(path)   shared connection with the schema applied
    UserStore             create / list / get / update / delete
"""

from .database import open_database, create_tables, SCHEMA_SQL
from .user_store import UserStore

__all__ = [
    "open_database",
    "create_tables",
    "SCHEMA_SQL",
    "UserStore",
]
