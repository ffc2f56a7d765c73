"""
Career Guidance API
AI career guidance (recommendations, resume tips, interview prep, salary
insights, roadmaps) metered by a per-user daily query quota.

Architecture:
- PostgreSQL: profiles + quota counters, query history, saved careers, goals, skills
- LLM API (OpenAI-compatible): turns a profile into structured JSON guidance
"""

__version__ = "1.0.0"
