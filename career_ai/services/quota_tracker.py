"""
Quota Tracker - per-user daily metering of AI queries.

One row in `profiles` holds the counter for a user:
    subscription_plan, queries_today, last_query_reset

check_and_consume() runs read -> decide -> write, where the write is a single
conditional UPDATE ... RETURNING guarded by the reset timestamp that was read
(compare-and-swap) and, for same-day increments, by `queries_today < limit`.
A concurrent request that changed the row first makes the guard miss; we then
re-read and decide again. Two requests can never both take the last unit.

Policy:
- Days are UTC calendar days. A NULL reset timestamp counts as a past day.
- A reset on day rollover is persisted even when the call is then denied.
- Any store failure raises StoreUnavailable: deny, never grant unmetered.
- Usage is billed on attempt. A consumed unit is not refunded when the
  gateway fails or the client disconnects, unless REFUND_ON_GATEWAY_FAILURE
  is enabled (see refund()).
"""

import logging
from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Any, Callable, Dict, Optional

from sqlalchemy import Integer, String, bindparam, text
from sqlalchemy.exc import SQLAlchemyError

from career_ai.core.config import Settings, get_settings
from career_ai.core.errors import RecordNotFound, StoreUnavailable
from career_ai.db.postgres import TIMESTAMP, get_db_session
from career_ai.services.plans import DEFAULT_PLAN, normalize_plan, plan_limit_table, resolve_limit

logger = logging.getLogger(__name__)

_LOAD_SQL = """
    SELECT subscription_plan, queries_today, last_query_reset
    FROM profiles WHERE id = :user_id
"""

_INCREMENT_SQL = """
    UPDATE profiles
    SET queries_today = queries_today + 1, updated_at = :now
    WHERE id = :user_id AND queries_today < :limit AND {guard}
    RETURNING queries_today, last_query_reset
"""

_RESET_SQL = """
    UPDATE profiles
    SET queries_today = :start_count, last_query_reset = :now, updated_at = :now
    WHERE id = :user_id AND {guard}
    RETURNING queries_today, last_query_reset
"""

_REFUND_SQL = """
    UPDATE profiles
    SET queries_today = queries_today - 1, updated_at = :now
    WHERE id = :user_id AND queries_today > 0 AND last_query_reset = :prev_reset
"""


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


def as_utc(value: Optional[datetime]) -> Optional[datetime]:
    """Stored timestamps without tzinfo are UTC."""
    if value is None:
        return None
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc)


def is_new_day(last_reset: Optional[datetime], now: datetime) -> bool:
    last_reset = as_utc(last_reset)
    if last_reset is None:
        return True
    return last_reset.date() != as_utc(now).date()


@dataclass
class QuotaDecision:
    allowed: bool
    remaining: int
    limit: int
    plan: str
    used: int = 0
    reset_at: Optional[datetime] = None

    def to_dict(self) -> Dict[str, Any]:
        return {
            "allowed": self.allowed,
            "remaining": self.remaining,
            "limit": self.limit,
            "plan": self.plan,
        }


def _guarded(sql: str, prev_reset: Optional[datetime], **columns):
    guard = "last_query_reset IS NULL" if prev_reset is None else "last_query_reset = :prev_reset"
    params = [bindparam("now", type_=TIMESTAMP)]
    if prev_reset is not None:
        params.append(bindparam("prev_reset", type_=TIMESTAMP))
    stmt = text(sql.format(guard=guard)).bindparams(*params)
    if columns:
        return stmt.columns(**columns)
    return stmt


class QuotaTracker:
    """
    Gate and meter per-user daily usage of the completion API.

    Args:
        session_factory: context manager yielding a SQLAlchemy session
        settings: plan limits, retry budget
        clock: returns the current time (UTC)
    """

    def __init__(
        self,
        session_factory: Callable = get_db_session,
        settings: Optional[Settings] = None,
        clock: Callable[[], datetime] = utcnow,
    ):
        self.session_factory = session_factory
        self.settings = settings or get_settings()
        self.clock = clock
        self.max_attempts = max(1, int(self.settings.quota_max_attempts))

    # ------------------------------------------------------------
    # Public API
    # ------------------------------------------------------------

    def check_and_consume(self, user_id: str) -> QuotaDecision:
        """
        Decide whether user_id may run one more AI query today and, if so,
        record it.

        Raises:
            RecordNotFound: no profiles row for the user
            StoreUnavailable: the store failed, or the row kept changing
                under us for max_attempts rounds
        """
        for attempt in range(1, self.max_attempts + 1):
            now = self.clock()
            try:
                with self.session_factory() as db:
                    record = self._load(db, user_id)
                    decision = self._decide_and_write(db, user_id, record, now)
            except SQLAlchemyError as e:
                logger.error("Quota store failure for user=%s: %s", user_id, e)
                raise StoreUnavailable() from e

            if decision is not None:
                logger.info(
                    "Quota check user=%s plan=%s allowed=%s used=%s limit=%s",
                    user_id, decision.plan, decision.allowed, decision.used, decision.limit
                )
                return decision
            logger.info("Quota row for user=%s changed concurrently (attempt %s)", user_id, attempt)

        logger.warning("Quota update for user=%s not settled after %s attempts", user_id, self.max_attempts)
        raise StoreUnavailable("Could not settle quota update")

    def peek(self, user_id: str) -> QuotaDecision:
        """Current status without consuming; `allowed` is the answer for the next call."""
        try:
            with self.session_factory() as db:
                record = self._load(db, user_id)
        except SQLAlchemyError as e:
            logger.error("Quota store failure for user=%s: %s", user_id, e)
            raise StoreUnavailable() from e

        plan, limit = self._plan_and_limit(record["plan"])
        used = 0 if is_new_day(record["last_reset"], self.clock()) else record["used"]
        return QuotaDecision(
            allowed=used < limit,
            remaining=max(0, limit - used),
            limit=limit,
            plan=plan,
            used=used,
            reset_at=record["last_reset"],
        )

    def refund(self, user_id: str, decision: QuotaDecision) -> bool:
        """
        Give back one consumed unit. Only applies to the same day the unit was
        taken (the row must still carry decision.reset_at).
        """
        if not decision.allowed or decision.reset_at is None:
            return False
        stmt = _guarded(_REFUND_SQL, decision.reset_at)
        try:
            with self.session_factory() as db:
                result = db.execute(
                    stmt,
                    {"user_id": user_id, "now": self.clock(), "prev_reset": decision.reset_at}
                )
                refunded = (result.rowcount or 0) > 0
        except SQLAlchemyError as e:
            logger.error("Quota refund failed for user=%s: %s", user_id, e)
            raise StoreUnavailable() from e
        logger.info("Quota refund user=%s applied=%s", user_id, refunded)
        return refunded

    # ------------------------------------------------------------
    # Internals
    # ------------------------------------------------------------

    def _plan_and_limit(self, raw_plan):
        table = plan_limit_table(self.settings)
        plan = normalize_plan(raw_plan) or DEFAULT_PLAN
        return plan, resolve_limit(plan, table)

    def _load(self, db, user_id: str) -> dict:
        stmt = text(_LOAD_SQL).columns(
            subscription_plan=String, queries_today=Integer, last_query_reset=TIMESTAMP
        )
        row = db.execute(stmt, {"user_id": user_id}).first()
        if row is None:
            raise RecordNotFound()
        return {
            "plan": row.subscription_plan,
            "used": max(0, int(row.queries_today or 0)),
            "last_reset": row.last_query_reset,
        }

    def _decide_and_write(self, db, user_id: str, record: dict, now: datetime) -> Optional[QuotaDecision]:
        """Returns None when the guarded write lost a race."""
        plan, limit = self._plan_and_limit(record["plan"])
        prev_reset = record["last_reset"]
        rolled = is_new_day(prev_reset, now)
        used = 0 if rolled else record["used"]
        allowed = used < limit

        if not rolled and not allowed:
            return QuotaDecision(False, 0, limit, plan, used, prev_reset)

        params = {"user_id": user_id, "now": now, "prev_reset": prev_reset}
        if rolled:
            stmt = _guarded(_RESET_SQL, prev_reset, queries_today=Integer, last_query_reset=TIMESTAMP)
            params["start_count"] = 1 if allowed else 0
        else:
            stmt = _guarded(_INCREMENT_SQL, prev_reset, queries_today=Integer, last_query_reset=TIMESTAMP)
            params["limit"] = limit
        if prev_reset is None:
            params.pop("prev_reset")

        row = db.execute(stmt, params).first()
        if row is None:
            return None

        used_after = int(row.queries_today)
        if not allowed:
            return QuotaDecision(False, 0, limit, plan, used_after, row.last_query_reset)
        return QuotaDecision(
            allowed=True,
            remaining=max(0, limit - used_after),
            limit=limit,
            plan=plan,
            used=used_after,
            reset_at=row.last_query_reset,
        )
