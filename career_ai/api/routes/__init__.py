"""
API Routes - Combines all route modules into single router.
"""

from fastapi import APIRouter

from career_ai.api.routes.auth_routes import router as auth_router
from career_ai.api.routes.guidance_routes import router as guidance_router
from career_ai.api.routes.profile_routes import router as profile_router
from career_ai.api.routes.career_routes import router as career_router
from career_ai.api.routes.dashboard_routes import router as dashboard_router

# Main API router
api_router = APIRouter()

# Include all sub-routers
api_router.include_router(auth_router)
api_router.include_router(guidance_router)
api_router.include_router(profile_router)
api_router.include_router(career_router)
api_router.include_router(dashboard_router)
