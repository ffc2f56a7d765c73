"""
Guidance Service - one AI career-guidance request, end to end.

WORKFLOW:
1. Meter: QuotaTracker.check_and_consume (deny -> QuotaExceeded)
2. Build the prompt for the query type
3. Call the completion API, get a validated JSON payload
4. Append the answer to the user's history
5. Return payload + queriesRemaining + plan

The quota unit is consumed before the completion call. If the call fails the
unit stays consumed unless REFUND_ON_GATEWAY_FAILURE is set.
"""

import logging
from typing import Optional

from sqlalchemy.exc import SQLAlchemyError

from career_ai.core.config import Settings, get_settings
from career_ai.core.errors import (
    GatewayError, InputValidationError, MalformedResponse, QuotaExceeded, StoreUnavailable
)
from career_ai.schemas.schemas import GuidanceRequest
from career_ai.services.history_service import HistoryService
from career_ai.services.llm_client import LLMClient, get_llm_client
from career_ai.services.plans import build_upgrade_message, plan_limit_table
from career_ai.services.prompt_templates import build_prompt
from career_ai.services.quota_tracker import QuotaTracker

logger = logging.getLogger(__name__)


class GuidanceService:

    def __init__(
        self,
        llm_client: Optional[LLMClient] = None,
        quota_tracker: Optional[QuotaTracker] = None,
        history: Optional[HistoryService] = None,
        settings: Optional[Settings] = None,
    ):
        self.settings = settings or get_settings()
        self.llm_client = llm_client or get_llm_client()
        self.quota_tracker = quota_tracker or QuotaTracker(settings=self.settings)
        self.history = history or HistoryService()

    def run(self, user_id: str, request: GuidanceRequest) -> dict:
        kind = request.query_type
        if not (request.profile_text or "").strip():
            raise InputValidationError()

        decision = self.quota_tracker.check_and_consume(user_id)
        if not decision.allowed:
            raise QuotaExceeded(
                limit=decision.limit,
                plan=decision.plan,
                upgrade_message=build_upgrade_message(
                    decision.plan, decision.limit, plan_limit_table(self.settings)
                )
            )

        system_prompt, user_content = build_prompt(kind, request.profile_text, request.extra_context)
        logger.info("Processing %s request for profile: %.100s", kind.value, request.profile_text)

        try:
            payload = self.llm_client.complete_json(system_prompt, user_content, kind)
        except (GatewayError, MalformedResponse) as e:
            logger.error("%s for %s request (user=%s): %s", type(e).__name__, kind.value, user_id, e)
            if self.settings.refund_on_gateway_failure:
                self._refund(user_id, decision)
            raise

        try:
            self.history.record(user_id, kind.value, request.profile_text, payload)
        except SQLAlchemyError:
            # The answer is already paid for; the user still gets it.
            logger.exception("Failed to record history for user=%s", user_id)

        logger.info("Successfully generated %s response (remaining=%s)", kind.value, decision.remaining)
        return {
            **payload,
            "model": self.llm_client.model,
            "provider": self.llm_client.provider,
            "queriesRemaining": decision.remaining,
            "plan": decision.plan,
        }

    def _refund(self, user_id: str, decision) -> None:
        try:
            self.quota_tracker.refund(user_id, decision)
        except StoreUnavailable:
            logger.exception("Quota refund failed for user=%s", user_id)


_guidance_service: GuidanceService = None


def get_guidance_service() -> GuidanceService:
    """Get or create the guidance service (singleton pattern)"""
    global _guidance_service
    if _guidance_service is None:
        _guidance_service = GuidanceService()
    return _guidance_service
