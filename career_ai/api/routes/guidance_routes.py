"""
Guidance Routes

POST /guidance/query - Run one AI career-guidance query (metered)
GET /guidance/quota - Today's usage for the current user (not metered)
GET /guidance/plans - Plans and their daily limits
GET /guidance/history - Recent successful queries
"""

from typing import List

from fastapi import APIRouter, Depends, Query

from career_ai.core.auth import get_current_user
from career_ai.schemas.schemas import GuidanceRequest, QuotaResponse, PlanResponse, HistoryEntry
from career_ai.services.guidance_service import GuidanceService, get_guidance_service
from career_ai.services.history_service import HistoryService
from career_ai.services.plans import get_plan_catalog
from career_ai.services.quota_tracker import QuotaTracker

router = APIRouter(prefix="/guidance", tags=["Guidance"])


def get_quota_tracker() -> QuotaTracker:
    return QuotaTracker()


@router.post("/query")
def run_query(
    request: GuidanceRequest,
    user: dict = Depends(get_current_user),
    service: GuidanceService = Depends(get_guidance_service)
):
    """
    Get AI guidance for one query type.

    Responses:
    - 200: kind-specific fields + queriesRemaining + plan
    - 429: daily limit reached, with limit, plan and upgradeMessage
    - 500: AI service failure (the query still counts toward today's quota)
    """
    return service.run(user["user_id"], request)


@router.get("/quota", response_model=QuotaResponse)
def get_quota(
    user: dict = Depends(get_current_user),
    tracker: QuotaTracker = Depends(get_quota_tracker)
):
    """Current usage. Does not consume a query."""
    status = tracker.peek(user["user_id"])
    return QuotaResponse(
        allowed=status.allowed,
        remaining=status.remaining,
        limit=status.limit,
        used=status.used,
        plan=status.plan
    )


@router.get("/plans", response_model=List[PlanResponse])
def list_plans():
    """Subscription plans and daily query limits."""
    return get_plan_catalog()


@router.get("/history", response_model=List[HistoryEntry])
def get_history(
    limit: int = Query(20, ge=1, le=100),
    user: dict = Depends(get_current_user)
):
    """Most recent successful guidance queries, newest first."""
    return HistoryService().list_recent(user["user_id"], limit=limit)
