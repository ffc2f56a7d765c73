"""
Database schema - the tables behind the guidance API.

Tables:
- users: login credentials (owned by the auth layer)
- profiles: one row per user; profile fields plus the daily quota record
  (subscription_plan, queries_today, last_query_reset)
- career_query_history: append-only log of successful AI answers
- saved_careers, career_goals, skills, achievements: dashboard data

DDL is rendered per dialect so the same statements run on PostgreSQL
(production) and SQLite (tests).
"""

import logging
from typing import List

from sqlalchemy import text

from career_ai.db.postgres import engine

logger = logging.getLogger(__name__)

TABLES = [
    "career_query_history",
    "saved_careers",
    "career_goals",
    "skills",
    "achievements",
    "profiles",
    "users",
]


def _types(dialect: str) -> dict:
    if dialect == "postgresql":
        return {"json": "JSONB", "ts": "TIMESTAMPTZ"}
    return {"json": "TEXT", "ts": "TIMESTAMP"}


def schema_statements(dialect: str) -> List[str]:
    t = _types(dialect)
    return [
        f"""
        CREATE TABLE IF NOT EXISTS users (
            id VARCHAR(64) PRIMARY KEY,
            email VARCHAR(255) NOT NULL UNIQUE,
            password_hash VARCHAR(255) NOT NULL,
            is_active BOOLEAN NOT NULL DEFAULT TRUE,
            created_at {t['ts']} NOT NULL
        )
        """,
        f"""
        CREATE TABLE IF NOT EXISTS profiles (
            id VARCHAR(64) PRIMARY KEY REFERENCES users(id),
            full_name VARCHAR(200),
            email VARCHAR(255),
            education TEXT,
            experience_level VARCHAR(50),
            location VARCHAR(200),
            interests TEXT,
            goals TEXT,
            subscription_plan VARCHAR(20) NOT NULL DEFAULT 'free',
            queries_today INTEGER NOT NULL DEFAULT 0 CHECK (queries_today >= 0),
            last_query_reset {t['ts']},
            created_at {t['ts']},
            updated_at {t['ts']}
        )
        """,
        f"""
        CREATE TABLE IF NOT EXISTS career_query_history (
            id VARCHAR(64) PRIMARY KEY,
            user_id VARCHAR(64) NOT NULL,
            query_type VARCHAR(32) NOT NULL,
            input_summary TEXT,
            model_response {t['json']},
            created_at {t['ts']} NOT NULL
        )
        """,
        "CREATE INDEX IF NOT EXISTS idx_history_user_created ON career_query_history (user_id, created_at)",
        f"""
        CREATE TABLE IF NOT EXISTS saved_careers (
            id VARCHAR(64) PRIMARY KEY,
            user_id VARCHAR(64) NOT NULL,
            title VARCHAR(255),
            content {t['json']},
            saved_at {t['ts']} NOT NULL
        )
        """,
        f"""
        CREATE TABLE IF NOT EXISTS career_goals (
            id VARCHAR(64) PRIMARY KEY,
            user_id VARCHAR(64) NOT NULL,
            goal TEXT NOT NULL,
            completed BOOLEAN NOT NULL DEFAULT FALSE,
            created_at {t['ts']} NOT NULL
        )
        """,
        f"""
        CREATE TABLE IF NOT EXISTS skills (
            id VARCHAR(64) PRIMARY KEY,
            user_id VARCHAR(64) NOT NULL,
            category VARCHAR(100),
            skill_name VARCHAR(100) NOT NULL,
            rating INTEGER CHECK (rating BETWEEN 1 AND 10),
            created_at {t['ts']} NOT NULL
        )
        """,
        f"""
        CREATE TABLE IF NOT EXISTS achievements (
            id VARCHAR(64) PRIMARY KEY,
            user_id VARCHAR(64) NOT NULL,
            title VARCHAR(255) NOT NULL,
            description TEXT,
            icon VARCHAR(50),
            created_at {t['ts']} NOT NULL
        )
        """,
    ]


def init_schema() -> None:
    """Create all tables if they do not exist."""
    with engine.begin() as conn:
        for statement in schema_statements(engine.dialect.name):
            conn.execute(text(statement))
    logger.info("Schema ready (%s)", engine.dialect.name)


def truncate_all() -> None:
    """Delete every row. Used by the test suite."""
    with engine.begin() as conn:
        for table in TABLES:
            conn.execute(text(f"DELETE FROM {table}"))
