"""
Query history - append-only record of successful AI answers.

Rows are written after the completion API returned a valid payload and are
only read back for display (dashboard, history page).
"""

import uuid
from datetime import datetime, timezone
from typing import List, Optional

from sqlalchemy import Integer, String, Text

from career_ai.core.config import get_settings
from career_ai.db.postgres import (
    TIMESTAMP, get_db_session, typed_text, to_json_param, from_json_column
)


def summarize_input(profile_text: str, max_chars: Optional[int] = None) -> str:
    max_chars = max_chars or get_settings().history_summary_chars
    text = " ".join((profile_text or "").split())
    if len(text) <= max_chars:
        return text
    return text[:max_chars].rstrip() + "..."


class HistoryService:

    def record(self, user_id: str, query_type: str, profile_text: str, response_payload: dict) -> str:
        entry_id = uuid.uuid4().hex
        with get_db_session() as db:
            db.execute(
                typed_text("""
                    INSERT INTO career_query_history
                        (id, user_id, query_type, input_summary, model_response, created_at)
                    VALUES (:id, :user_id, :query_type, :input_summary, :model_response, :created_at)
                """, timestamps=["created_at"]),
                {
                    "id": entry_id,
                    "user_id": user_id,
                    "query_type": query_type,
                    "input_summary": summarize_input(profile_text),
                    "model_response": to_json_param(response_payload),
                    "created_at": datetime.now(timezone.utc)
                }
            )
        return entry_id

    def list_recent(self, user_id: str, limit: int = 20) -> List[dict]:
        with get_db_session() as db:
            result = db.execute(
                typed_text(
                    """
                    SELECT id, query_type, input_summary, model_response, created_at
                    FROM career_query_history
                    WHERE user_id = :user_id
                    ORDER BY created_at DESC
                    LIMIT :limit
                    """,
                    id=String, query_type=String, input_summary=Text,
                    model_response=Text, created_at=TIMESTAMP
                ),
                {"user_id": user_id, "limit": limit}
            )
            rows = result.fetchall()

        return [
            {
                "id": r.id,
                "query_type": r.query_type,
                "input_summary": r.input_summary,
                "model_response": from_json_column(r.model_response),
                "created_at": r.created_at,
            }
            for r in rows
        ]

    def count(self, user_id: str) -> int:
        with get_db_session() as db:
            result = db.execute(
                typed_text("SELECT COUNT(*) AS n FROM career_query_history WHERE user_id = :user_id", n=Integer),
                {"user_id": user_id}
            )
            return int(result.scalar() or 0)
