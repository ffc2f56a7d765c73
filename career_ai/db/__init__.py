"""
Database module - PostgreSQL connection and schema.
"""
from career_ai.db.postgres import get_db_session, test_postgres_connection
from career_ai.db.schema import init_schema

__all__ = [
    "get_db_session",
    "test_postgres_connection",
    "init_schema",
]
