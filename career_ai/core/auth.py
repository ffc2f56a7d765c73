"""
Authentication Utility - JWT and Password handling.

Provides:
- Password hashing with bcrypt
- JWT token creation/verification
- FastAPI dependency for protected routes
"""

from datetime import datetime, timedelta, timezone
from typing import Optional
from jose import JWTError, jwt
from passlib.context import CryptContext
from fastapi import Depends
from fastapi.security import HTTPBearer, HTTPAuthorizationCredentials
from sqlalchemy import text

from career_ai.core.config import get_settings
from career_ai.core.errors import AuthenticationRequired
from career_ai.db.postgres import get_db_session

settings = get_settings()

# Password hashing
pwd_context = CryptContext(schemes=["bcrypt"], deprecated="auto")

# Bearer token extractor; a missing header is reported as 401 by us, not 403 by FastAPI
bearer_scheme = HTTPBearer(auto_error=False)


def hash_password(password: str) -> str:
    """Hash password with bcrypt."""
    return pwd_context.hash(password)


def verify_password(plain_password: str, hashed_password: str) -> bool:
    """Verify password against hash."""
    return pwd_context.verify(plain_password, hashed_password)


def create_access_token(data: dict, expires_delta: Optional[timedelta] = None) -> str:
    """Create JWT access token."""
    to_encode = data.copy()
    expire = datetime.now(timezone.utc) + (expires_delta or timedelta(minutes=settings.jwt_expire_minutes))
    to_encode.update({"exp": expire})
    return jwt.encode(to_encode, settings.jwt_secret_key, algorithm=settings.jwt_algorithm)


def decode_token(token: str) -> Optional[dict]:
    """Decode and verify JWT token."""
    try:
        return jwt.decode(token, settings.jwt_secret_key, algorithms=[settings.jwt_algorithm])
    except JWTError:
        return None


def get_current_user(
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(bearer_scheme)
) -> dict:
    """
    FastAPI dependency - Get current authenticated user.

    Usage:
        @app.get("/protected")
        def route(user: dict = Depends(get_current_user)):
            return user
    """
    if credentials is None:
        raise AuthenticationRequired()

    payload = decode_token(credentials.credentials)
    if not payload:
        raise AuthenticationRequired("Invalid or expired token")

    user_id = payload.get("sub")
    if not user_id:
        raise AuthenticationRequired("Invalid or expired token")

    # Verify user exists
    with get_db_session() as db:
        result = db.execute(
            text("SELECT id, email, is_active FROM users WHERE id = :id"),
            {"id": str(user_id)}
        )
        user = result.fetchone()

    if not user or not user[2]:
        raise AuthenticationRequired("Invalid or expired token")

    return {"user_id": user[0], "email": user[1]}
