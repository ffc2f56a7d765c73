"""
Career Data Routes

GET /careers/saved - List saved careers (newest first)
POST /careers/saved - Save a career recommendation
DELETE /careers/saved/{career_id} - Remove a saved career
GET /goals - List open career goals
POST /goals - Add a goal
PATCH /goals/{goal_id}/complete - Mark a goal completed
GET /skills - Get the skill assessment
PUT /skills - Replace the whole skill assessment
GET /achievements - List achievements (newest first)
POST /achievements - Record an achievement
"""

import uuid
from datetime import datetime, timezone
from typing import List

from fastapi import APIRouter, HTTPException, Depends, Query
from sqlalchemy import Boolean, Integer, String, Text, text

from career_ai.db.postgres import TIMESTAMP, get_db_session, typed_text, to_json_param, from_json_column
from career_ai.core.auth import get_current_user
from career_ai.schemas.schemas import (
    SavedCareerCreate, SavedCareerResponse, GoalCreate, GoalResponse,
    SkillsUpdate, SkillResponse, AchievementCreate, AchievementResponse, MessageResponse
)

router = APIRouter(tags=["Career Data"])


# ============================================================
# QUERIES (shared with the dashboard)
# ============================================================

def list_saved_careers(user_id: str, limit: int = 100) -> List[dict]:
    with get_db_session() as db:
        result = db.execute(
            typed_text(
                """
                SELECT id, title, content, saved_at FROM saved_careers
                WHERE user_id = :user_id ORDER BY saved_at DESC LIMIT :limit
                """,
                id=String, title=String, content=Text, saved_at=TIMESTAMP
            ),
            {"user_id": user_id, "limit": limit}
        )
        rows = result.fetchall()
    return [
        {
            "id": r.id,
            "title": r.title or "Unknown Career",
            "content": from_json_column(r.content, {}),
            "saved_at": r.saved_at,
        }
        for r in rows
    ]


def list_open_goals(user_id: str, limit: int = 50) -> List[dict]:
    with get_db_session() as db:
        result = db.execute(
            typed_text(
                """
                SELECT id, goal, completed, created_at FROM career_goals
                WHERE user_id = :user_id AND completed = FALSE
                ORDER BY created_at DESC LIMIT :limit
                """,
                id=String, goal=Text, completed=Boolean, created_at=TIMESTAMP
            ),
            {"user_id": user_id, "limit": limit}
        )
        return [dict(r._mapping) for r in result.fetchall()]


def list_skills(user_id: str, limit: int = 200) -> List[dict]:
    with get_db_session() as db:
        result = db.execute(
            typed_text(
                """
                SELECT id, category, skill_name, rating FROM skills
                WHERE user_id = :user_id
                ORDER BY rating DESC, skill_name LIMIT :limit
                """,
                id=String, category=String, skill_name=String, rating=Integer
            ),
            {"user_id": user_id, "limit": limit}
        )
        return [dict(r._mapping) for r in result.fetchall()]


def list_achievements(user_id: str, limit: int = 100) -> List[dict]:
    with get_db_session() as db:
        result = db.execute(
            typed_text(
                """
                SELECT id, title, description, icon, created_at FROM achievements
                WHERE user_id = :user_id ORDER BY created_at DESC LIMIT :limit
                """,
                id=String, title=String, description=Text, icon=String, created_at=TIMESTAMP
            ),
            {"user_id": user_id, "limit": limit}
        )
        return [dict(r._mapping) for r in result.fetchall()]


# ============================================================
# SAVED CAREERS
# ============================================================

@router.get("/careers/saved", response_model=List[SavedCareerResponse])
def get_saved_careers(user: dict = Depends(get_current_user)):
    """Saved careers, newest first."""
    return list_saved_careers(user["user_id"])


@router.post("/careers/saved", response_model=SavedCareerResponse, status_code=201)
def save_career(data: SavedCareerCreate, user: dict = Depends(get_current_user)):
    """Save a career recommendation with its full content."""
    career = {
        "id": uuid.uuid4().hex,
        "title": data.title.strip(),
        "content": data.content,
        "saved_at": datetime.now(timezone.utc),
    }
    with get_db_session() as db:
        db.execute(
            typed_text("""
                INSERT INTO saved_careers (id, user_id, title, content, saved_at)
                VALUES (:id, :user_id, :title, :content, :saved_at)
            """, timestamps=["saved_at"]),
            {**career, "user_id": user["user_id"], "content": to_json_param(data.content)}
        )
    return career


@router.delete("/careers/saved/{career_id}", response_model=MessageResponse)
def remove_saved_career(career_id: str, user: dict = Depends(get_current_user)):
    """Remove a saved career. Only the owner can remove it."""
    with get_db_session() as db:
        result = db.execute(
            text("DELETE FROM saved_careers WHERE id = :id AND user_id = :user_id"),
            {"id": career_id, "user_id": user["user_id"]}
        )
        if result.rowcount == 0:
            raise HTTPException(status_code=404, detail="Saved career not found")

    return MessageResponse(message="Career removed from your saved list")


# ============================================================
# GOALS
# ============================================================

@router.get("/goals", response_model=List[GoalResponse])
def get_goals(
    limit: int = Query(50, ge=1, le=200),
    user: dict = Depends(get_current_user)
):
    """Open (not completed) goals, newest first."""
    return list_open_goals(user["user_id"], limit=limit)


@router.post("/goals", response_model=GoalResponse, status_code=201)
def add_goal(data: GoalCreate, user: dict = Depends(get_current_user)):
    goal = {
        "id": uuid.uuid4().hex,
        "goal": data.goal,
        "completed": False,
        "created_at": datetime.now(timezone.utc),
    }
    with get_db_session() as db:
        db.execute(
            typed_text("""
                INSERT INTO career_goals (id, user_id, goal, completed, created_at)
                VALUES (:id, :user_id, :goal, FALSE, :created_at)
            """, timestamps=["created_at"]),
            {"id": goal["id"], "user_id": user["user_id"], "goal": goal["goal"], "created_at": goal["created_at"]}
        )
    return goal


@router.patch("/goals/{goal_id}/complete", response_model=MessageResponse)
def complete_goal(goal_id: str, user: dict = Depends(get_current_user)):
    with get_db_session() as db:
        result = db.execute(
            text("UPDATE career_goals SET completed = TRUE WHERE id = :id AND user_id = :user_id"),
            {"id": goal_id, "user_id": user["user_id"]}
        )
        if result.rowcount == 0:
            raise HTTPException(status_code=404, detail="Goal not found")

    return MessageResponse(message="Goal completed")


# ============================================================
# SKILLS
# ============================================================

@router.get("/skills", response_model=List[SkillResponse])
def get_skills(user: dict = Depends(get_current_user)):
    """Skill assessment, highest rated first."""
    return list_skills(user["user_id"])


@router.put("/skills", response_model=List[SkillResponse])
def replace_skills(data: SkillsUpdate, user: dict = Depends(get_current_user)):
    """
    Replace the whole assessment: existing ratings are deleted and the
    submitted list is inserted in one transaction.
    """
    seen = set()
    for skill in data.skills:
        key = (skill.category.strip().lower(), skill.skill_name.strip().lower())
        if key in seen:
            raise HTTPException(status_code=400, detail=f"Duplicate skill: {skill.skill_name}")
        seen.add(key)

    now = datetime.now(timezone.utc)
    with get_db_session() as db:
        db.execute(
            text("DELETE FROM skills WHERE user_id = :user_id"),
            {"user_id": user["user_id"]}
        )
        insert = typed_text("""
            INSERT INTO skills (id, user_id, category, skill_name, rating, created_at)
            VALUES (:id, :user_id, :category, :skill_name, :rating, :created_at)
        """, timestamps=["created_at"])
        for skill in data.skills:
            db.execute(insert, {
                "id": uuid.uuid4().hex,
                "user_id": user["user_id"],
                "category": skill.category.strip(),
                "skill_name": skill.skill_name.strip(),
                "rating": skill.rating,
                "created_at": now
            })

    return list_skills(user["user_id"])


# ============================================================
# ACHIEVEMENTS
# ============================================================

@router.get("/achievements", response_model=List[AchievementResponse])
def get_achievements(
    limit: int = Query(100, ge=1, le=200),
    user: dict = Depends(get_current_user)
):
    return list_achievements(user["user_id"], limit=limit)


@router.post("/achievements", response_model=AchievementResponse, status_code=201)
def add_achievement(data: AchievementCreate, user: dict = Depends(get_current_user)):
    achievement = {
        "id": uuid.uuid4().hex,
        "title": data.title,
        "description": data.description,
        "icon": data.icon,
        "created_at": datetime.now(timezone.utc),
    }
    with get_db_session() as db:
        db.execute(
            typed_text("""
                INSERT INTO achievements (id, user_id, title, description, icon, created_at)
                VALUES (:id, :user_id, :title, :description, :icon, :created_at)
            """, timestamps=["created_at"]),
            {**achievement, "user_id": user["user_id"]}
        )
    return achievement
