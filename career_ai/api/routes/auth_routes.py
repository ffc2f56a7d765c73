"""
Authentication Routes

POST /auth/register - Register new user (creates the profile and quota record)
POST /auth/login - Login and get JWT token
GET /auth/me - Get current user info
"""

import uuid
from datetime import datetime, timezone

from fastapi import APIRouter, HTTPException, Depends
from sqlalchemy import Boolean, String
from sqlalchemy import text
from sqlalchemy.exc import IntegrityError

from career_ai.db.postgres import TIMESTAMP, get_db_session, typed_text
from career_ai.core.auth import hash_password, verify_password, create_access_token, get_current_user
from career_ai.services.plans import DEFAULT_PLAN
from career_ai.schemas.schemas import (
    RegisterRequest, LoginRequest, TokenResponse, UserResponse, MessageResponse
)

router = APIRouter(prefix="/auth", tags=["Authentication"])


@router.post("/register", response_model=MessageResponse, status_code=201)
def register(request: RegisterRequest):
    """
    Register a new user account.

    Creates the user and its profile row on the free plan, so the daily
    quota record exists from the first login.
    """
    email = request.email.lower()
    try:
        with get_db_session() as db:
            # Check email exists
            result = db.execute(
                text("SELECT id FROM users WHERE email = :email"),
                {"email": email}
            )
            if result.fetchone():
                raise HTTPException(status_code=400, detail="Email already registered")

            user_id = uuid.uuid4().hex
            now = datetime.now(timezone.utc)
            db.execute(
                typed_text("""
                    INSERT INTO users (id, email, password_hash, is_active, created_at)
                    VALUES (:id, :email, :password_hash, TRUE, :created_at)
                """, timestamps=["created_at"]),
                {
                    "id": user_id,
                    "email": email,
                    "password_hash": hash_password(request.password),
                    "created_at": now
                }
            )
            db.execute(
                typed_text("""
                    INSERT INTO profiles (id, full_name, email, subscription_plan, queries_today,
                                          last_query_reset, created_at, updated_at)
                    VALUES (:id, :full_name, :email, :plan, 0, :now, :now, :now)
                """, timestamps=["now"]),
                {
                    "id": user_id,
                    "full_name": request.full_name,
                    "email": email,
                    "plan": DEFAULT_PLAN,
                    "now": now
                }
            )
    except IntegrityError:
        # A concurrent registration took the email between the check and the insert
        raise HTTPException(status_code=400, detail="Email already registered")

    return MessageResponse(message="Registered successfully. Please login.")


@router.post("/login", response_model=TokenResponse)
def login(request: LoginRequest):
    """
    Login and receive JWT access token.

    Include token in requests: Authorization: Bearer <token>
    """
    with get_db_session() as db:
        result = db.execute(
            text("SELECT id, password_hash, is_active FROM users WHERE email = :email"),
            {"email": request.email.lower()}
        )
        user = result.fetchone()

    if not user:
        raise HTTPException(status_code=401, detail="Invalid email or password")

    user_id, password_hash, is_active = user

    if not is_active:
        raise HTTPException(status_code=403, detail="Account deactivated")

    if not verify_password(request.password, password_hash):
        raise HTTPException(status_code=401, detail="Invalid email or password")

    token = create_access_token(data={"sub": user_id})

    return TokenResponse(access_token=token, user_id=user_id)


@router.get("/me", response_model=UserResponse)
def get_me(user: dict = Depends(get_current_user)):
    """Get current authenticated user's info."""
    with get_db_session() as db:
        result = db.execute(
            typed_text(
                "SELECT id, email, is_active, created_at FROM users WHERE id = :id",
                id=String, email=String, is_active=Boolean, created_at=TIMESTAMP
            ),
            {"id": user["user_id"]}
        )
        row = result.fetchone()

    return UserResponse(
        user_id=row[0], email=row[1], is_active=row[2], created_at=row[3]
    )
