"""
Pydantic Schemas - Request/Response Validation

All API request and response schemas in one file for simplicity.
"""

from pydantic import BaseModel, EmailStr, Field, field_validator
from typing import Optional, List, Any, Dict
from datetime import datetime
from enum import Enum


# ============================================================
# ENUMS
# ============================================================

class QueryType(str, Enum):
    basic = "basic"
    detailed = "detailed"
    interview = "interview"
    resume = "resume"
    roadmap = "roadmap"
    salary_insights = "salary_insights"


class ExperienceLevel(str, Enum):
    student = "student"
    entry = "entry"
    mid = "mid"
    senior = "senior"
    executive = "executive"


# ============================================================
# AUTH SCHEMAS
# ============================================================

class RegisterRequest(BaseModel):
    email: EmailStr
    password: str = Field(..., min_length=8)
    full_name: Optional[str] = Field(None, max_length=200)

class LoginRequest(BaseModel):
    email: EmailStr
    password: str

class TokenResponse(BaseModel):
    access_token: str
    token_type: str = "bearer"
    user_id: str

class UserResponse(BaseModel):
    user_id: str
    email: str
    is_active: bool
    created_at: datetime


# ============================================================
# GUIDANCE SCHEMAS
# ============================================================

class GuidanceRequest(BaseModel):
    query_type: QueryType
    profile_text: str = Field(..., min_length=1)
    extra_context: Optional[Dict[str, Any]] = None

    @field_validator("profile_text")
    @classmethod
    def profile_text_not_blank(cls, v: str) -> str:
        v = v.strip()
        if not v:
            raise ValueError("profile_text must not be blank")
        return v

class QuotaResponse(BaseModel):
    allowed: bool
    remaining: int
    limit: int
    used: int
    plan: str

class PlanResponse(BaseModel):
    plan: str
    label: str
    daily_limit: int

class HistoryEntry(BaseModel):
    id: str
    query_type: str
    input_summary: Optional[str] = None
    model_response: Optional[Any] = None
    created_at: datetime


# ============================================================
# PROFILE SCHEMAS
# ============================================================

class ProfileUpdate(BaseModel):
    full_name: Optional[str] = Field(None, min_length=1, max_length=200)
    education: Optional[str] = None
    experience_level: Optional[ExperienceLevel] = None
    location: Optional[str] = Field(None, max_length=200)
    interests: Optional[List[str]] = None
    goals: Optional[List[str]] = None

class ProfileResponse(BaseModel):
    user_id: str
    email: Optional[str] = None
    full_name: Optional[str] = None
    education: Optional[str] = None
    experience_level: Optional[str] = None
    location: Optional[str] = None
    interests: List[str] = []
    goals: List[str] = []
    subscription_plan: str
    queries_today: int


# ============================================================
# SAVED CAREERS / GOALS / SKILLS / ACHIEVEMENTS
# ============================================================

class SavedCareerCreate(BaseModel):
    title: str = Field(..., min_length=1, max_length=255)
    content: Dict[str, Any] = {}

class SavedCareerResponse(BaseModel):
    id: str
    title: str
    content: Dict[str, Any] = {}
    saved_at: datetime

class GoalCreate(BaseModel):
    goal: str = Field(..., min_length=1, max_length=500)

    @field_validator("goal")
    @classmethod
    def goal_not_blank(cls, v: str) -> str:
        v = v.strip()
        if not v:
            raise ValueError("goal must not be blank")
        return v

class GoalResponse(BaseModel):
    id: str
    goal: str
    completed: bool
    created_at: datetime

class SkillRating(BaseModel):
    category: str = Field(..., min_length=1, max_length=100)
    skill_name: str = Field(..., min_length=1, max_length=100)
    rating: int = Field(..., ge=1, le=10)

class SkillsUpdate(BaseModel):
    skills: List[SkillRating]

class SkillResponse(BaseModel):
    id: str
    category: Optional[str] = None
    skill_name: str
    rating: Optional[int] = None

class AchievementCreate(BaseModel):
    title: str = Field(..., min_length=1, max_length=255)
    description: Optional[str] = None
    icon: Optional[str] = Field(None, max_length=50)

    @field_validator("title")
    @classmethod
    def title_not_blank(cls, v: str) -> str:
        v = v.strip()
        if not v:
            raise ValueError("title must not be blank")
        return v

class AchievementResponse(BaseModel):
    id: str
    title: str
    description: Optional[str] = None
    icon: Optional[str] = None
    created_at: datetime


# ============================================================
# DASHBOARD
# ============================================================

class DashboardMetrics(BaseModel):
    career_queries: int
    saved_careers: int
    achievements: int
    skills_assessed: int
    open_goals: int

class ActivityItem(BaseModel):
    action: str
    time: datetime

class DashboardResponse(BaseModel):
    full_name: Optional[str] = None
    metrics: DashboardMetrics
    quota: QuotaResponse
    top_skills: List[SkillResponse] = []
    goals: List[GoalResponse] = []
    recent_activity: List[ActivityItem] = []


# ============================================================
# COMMON
# ============================================================

class MessageResponse(BaseModel):
    message: str
    success: bool = True
