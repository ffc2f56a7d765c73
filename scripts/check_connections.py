#!/usr/bin/env python3
"""
Connection Check Script

Run this to verify the database and the LLM API are reachable.
Usage: python scripts/check_connections.py
"""
import sys
sys.path.insert(0, '.')

from career_ai.core.config import get_settings
from career_ai.core.log import setup_logging
from career_ai.db.postgres import test_postgres_connection
from career_ai.services.llm_client import get_llm_client


def main() -> int:
    settings = get_settings()
    setup_logging(settings.log_level)
    ok = True

    print("=" * 50)
    print("CAREER GUIDANCE API - CONNECTION CHECK")
    print("=" * 50)

    print("\n[1] Checking database...")
    if settings.database_url:
        print(f"    URL: {settings.database_url.split('@')[-1]}")
    else:
        print(f"    URL: postgresql://{settings.postgres_user}:****@{settings.postgres_host}:{settings.postgres_port}/{settings.postgres_db}")
    if test_postgres_connection():
        print("    ✅ Database: CONNECTED")
    else:
        print("    ❌ Database: FAILED")
        ok = False

    print(f"\n[2] Checking {settings.llm_provider} API...")
    if settings.llm_api_key:
        print(f"    Base URL: {settings.llm_base_url}")
        print(f"    Model: {settings.llm_model}")
        if get_llm_client().test_connection():
            print(f"    ✅ {settings.llm_provider}: CONNECTED")
        else:
            print(f"    ❌ {settings.llm_provider}: FAILED")
            ok = False
    else:
        print("    ⚠️  LLM_API_KEY not configured (guidance queries will fail)")
        ok = False

    print("\n" + "=" * 50)
    print("Connection check complete!")
    print("=" * 50)
    return 0 if ok else 1


if __name__ == "__main__":
    sys.exit(main())
