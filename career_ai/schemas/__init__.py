"""
Schemas module - Request/Response schemas for API endpoints.

All schemas live in career_ai.schemas.schemas:
- Request schemas (what the API accepts)
- Response schemas (what the API returns)
"""

from career_ai.schemas.schemas import QueryType, GuidanceRequest

__all__ = ["QueryType", "GuidanceRequest"]
