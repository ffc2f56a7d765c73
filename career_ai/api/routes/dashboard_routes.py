"""
Dashboard Route

GET /dashboard - Counts (queries, saved careers, achievements, skills, open goals), today's quota, top skills, open goals and recent activity
"""

from fastapi import APIRouter, Depends
from sqlalchemy import Integer, String

from career_ai.db.postgres import get_db_session, typed_text
from career_ai.core.auth import get_current_user
from career_ai.api.routes.career_routes import list_saved_careers, list_open_goals, list_skills
from career_ai.api.routes.guidance_routes import get_quota_tracker
from career_ai.services.history_service import HistoryService
from career_ai.services.quota_tracker import QuotaTracker
from career_ai.schemas.schemas import DashboardResponse

router = APIRouter(prefix="/dashboard", tags=["Dashboard"])

RECENT_ITEMS = 2
MAX_ACTIVITY = 4


def _count(db, table: str, user_id: str, extra: str = "") -> int:
    result = db.execute(
        typed_text(f"SELECT COUNT(*) AS n FROM {table} WHERE user_id = :user_id {extra}", n=Integer),
        {"user_id": user_id}
    )
    return int(result.scalar() or 0)


@router.get("", response_model=DashboardResponse)
def get_dashboard(
    user: dict = Depends(get_current_user),
    tracker: QuotaTracker = Depends(get_quota_tracker)
):
    user_id = user["user_id"]

    with get_db_session() as db:
        name_row = db.execute(
            typed_text("SELECT full_name FROM profiles WHERE id = :id", full_name=String),
            {"id": user_id}
        ).fetchone()
        metrics = {
            "career_queries": HistoryService().count(user_id),
            "saved_careers": _count(db, "saved_careers", user_id),
            "achievements": _count(db, "achievements", user_id),
            "skills_assessed": _count(db, "skills", user_id),
            "open_goals": _count(db, "career_goals", user_id, "AND completed = FALSE"),
        }

    quota = tracker.peek(user_id)

    activity = []
    for entry in HistoryService().list_recent(user_id, limit=RECENT_ITEMS):
        activity.append({
            "action": f"Used {entry['query_type']} career guidance",
            "time": entry["created_at"],
        })
    for career in list_saved_careers(user_id, limit=RECENT_ITEMS):
        activity.append({
            "action": f"Saved '{career['title']}' career",
            "time": career["saved_at"],
        })
    activity.sort(key=lambda item: item["time"], reverse=True)

    return {
        "full_name": name_row.full_name if name_row else None,
        "metrics": metrics,
        "quota": {
            "allowed": quota.allowed,
            "remaining": quota.remaining,
            "limit": quota.limit,
            "used": quota.used,
            "plan": quota.plan,
        },
        "top_skills": list_skills(user_id, limit=5),
        "goals": list_open_goals(user_id, limit=3),
        "recent_activity": activity[:MAX_ACTIVITY],
    }
