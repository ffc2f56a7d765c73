"""
Subscription plans and their daily AI query ceilings.

Plan changes come from billing, outside this service. Here a plan is only a
name that resolves to a daily limit; unknown names get the smallest limit.
"""

from typing import Dict, List, Optional

from career_ai.core.config import Settings, get_settings

DEFAULT_PLAN = "free"
PLAN_ORDER = ["free", "premium", "pro"]

PLAN_LABELS = {
    "free": "Free",
    "premium": "Premium",
    "pro": "Pro",
}


def plan_limit_table(settings: Optional[Settings] = None) -> Dict[str, int]:
    settings = settings or get_settings()
    return {
        "free": settings.plan_limit_free,
        "premium": settings.plan_limit_premium,
        "pro": settings.plan_limit_pro,
    }


def normalize_plan(plan) -> str:
    return str(plan or "").strip().lower()


def resolve_limit(plan, table: Optional[Dict[str, int]] = None) -> int:
    """Daily limit for a plan; unrecognized plans fall back to the most restrictive tier."""
    table = table if table is not None else plan_limit_table()
    key = normalize_plan(plan)
    if key in table:
        return int(table[key])
    return min(int(v) for v in table.values())


def next_plan(plan) -> Optional[str]:
    key = normalize_plan(plan)
    if key not in PLAN_ORDER:
        return PLAN_ORDER[1]
    index = PLAN_ORDER.index(key)
    if index + 1 < len(PLAN_ORDER):
        return PLAN_ORDER[index + 1]
    return None


def build_upgrade_message(plan, limit: int, table: Optional[Dict[str, int]] = None) -> str:
    table = table if table is not None else plan_limit_table()
    label = PLAN_LABELS.get(normalize_plan(plan), "current")
    upgrade_to = next_plan(plan)
    message = f"You have used all {limit} queries included in your {label} plan for today."
    if upgrade_to is None:
        return f"{message} Your quota resets at midnight UTC."
    return (
        f"{message} Upgrade to {PLAN_LABELS[upgrade_to]} for "
        f"{table[upgrade_to]} queries per day, or try again after midnight UTC."
    )


def get_plan_catalog(table: Optional[Dict[str, int]] = None) -> List[dict]:
    table = table if table is not None else plan_limit_table()
    return [
        {"plan": key, "label": PLAN_LABELS[key], "daily_limit": table[key]}
        for key in PLAN_ORDER
    ]
