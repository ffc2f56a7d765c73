"""
Profile Routes

GET /profile - Get own profile (includes plan and today's counter)
PUT /profile - Update profile fields. Only provided fields are updated.

The plan and quota columns are not editable here: plans are set by billing
and the counter only by the quota tracker.
"""

from datetime import datetime, timezone

from fastapi import APIRouter, HTTPException, Depends
from sqlalchemy import Integer, String, Text

from career_ai.db.postgres import get_db_session, typed_text, to_json_param, from_json_column
from career_ai.core.auth import get_current_user
from career_ai.schemas.schemas import ProfileUpdate, ProfileResponse, MessageResponse

router = APIRouter(prefix="/profile", tags=["Profile"])

PROFILE_FIELDS = ["full_name", "education", "experience_level", "location", "interests", "goals"]
LIST_FIELDS = {"interests", "goals"}


def load_profile(user_id: str) -> dict:
    with get_db_session() as db:
        result = db.execute(
            typed_text(
                """
                SELECT id, email, full_name, education, experience_level, location,
                       interests, goals, subscription_plan, queries_today
                FROM profiles WHERE id = :id
                """,
                id=String, email=String, full_name=String, education=Text,
                experience_level=String, location=String, interests=Text, goals=Text,
                subscription_plan=String, queries_today=Integer
            ),
            {"id": user_id}
        )
        row = result.fetchone()

    if not row:
        raise HTTPException(status_code=404, detail="Profile not found")

    return {
        "user_id": row.id,
        "email": row.email,
        "full_name": row.full_name,
        "education": row.education,
        "experience_level": row.experience_level,
        "location": row.location,
        "interests": from_json_column(row.interests, []),
        "goals": from_json_column(row.goals, []),
        "subscription_plan": row.subscription_plan,
        "queries_today": row.queries_today or 0,
    }


@router.get("", response_model=ProfileResponse)
def get_profile(user: dict = Depends(get_current_user)):
    """Get current user's profile."""
    return ProfileResponse(**load_profile(user["user_id"]))


@router.put("", response_model=MessageResponse)
def update_profile(data: ProfileUpdate, user: dict = Depends(get_current_user)):
    """Update profile. Only provided fields are updated."""
    updates = []
    params = {"id": user["user_id"], "updated_at": datetime.now(timezone.utc)}

    for field in PROFILE_FIELDS:
        value = getattr(data, field)
        if value is None:
            continue
        if field in LIST_FIELDS:
            value = to_json_param([str(v).strip() for v in value if str(v).strip()])
        elif hasattr(value, "value"):
            value = value.value
        updates.append(f"{field} = :{field}")
        params[field] = value

    if not updates:
        raise HTTPException(status_code=400, detail="No fields to update")

    with get_db_session() as db:
        result = db.execute(
            typed_text(
                f"UPDATE profiles SET {', '.join(updates)}, updated_at = :updated_at WHERE id = :id",
                timestamps=["updated_at"]
            ),
            params
        )
        if result.rowcount == 0:
            raise HTTPException(status_code=404, detail="Profile not found")

    return MessageResponse(message="Profile updated successfully")
