"""
Career Guidance API - Main Application

FastAPI backend with:
- PostgreSQL for profiles, daily quota counters and history
- An OpenAI-compatible LLM API (Groq by default) for guidance content
- JWT authentication

Run: uvicorn career_ai.main:app --reload
"""

import logging

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from sqlalchemy.exc import SQLAlchemyError

from career_ai.api.routes import api_router
from career_ai.core.config import get_settings
from career_ai.core.errors import (
    AuthenticationRequired,
    RecordNotFound,
    InputValidationError,
    QuotaExceeded,
    GatewayError,
    MalformedResponse,
    StoreUnavailable,
)
from career_ai.core.log import setup_logging, set_request_id, reset_request_id, get_request_id
from career_ai.db.postgres import test_postgres_connection
from career_ai.db.schema import init_schema

settings = get_settings()
setup_logging(settings.log_level)
logger = logging.getLogger(__name__)

# Create FastAPI app
app = FastAPI(
    title="Career Guidance API",
    description="""
    AI career guidance with per-user daily query limits.

    ## Features
    - **Authentication**: JWT-based auth
    - **Guidance**: career recommendations, resume tips, interview prep,
      salary insights and roadmaps from an LLM
    - **Quota**: daily query limits per subscription plan (Free / Premium / Pro)
    - **Career data**: saved careers, goals, skill assessment, dashboard
    """,
    version="1.0.0",
    docs_url="/docs",
    redoc_url="/redoc"
)

# CORS middleware (allow all for development)
app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.middleware("http")
async def bind_request_id(request: Request, call_next):
    token = set_request_id(request.headers.get("X-Request-Id"))
    try:
        response = await call_next(request)
        response.headers["X-Request-Id"] = get_request_id()
        return response
    finally:
        reset_request_id(token)


# ============================================================
# ERROR HANDLERS
# ============================================================

def _error(status_code: int, message: str, **extra) -> JSONResponse:
    return JSONResponse(status_code=status_code, content={"error": message, **extra})


@app.exception_handler(AuthenticationRequired)
async def authentication_required_handler(request: Request, exc: AuthenticationRequired):
    return _error(401, exc.message)


@app.exception_handler(RecordNotFound)
async def record_not_found_handler(request: Request, exc: RecordNotFound):
    # A token without a quota record is treated like an invalid credential
    logger.warning("No quota record for authenticated user on %s", request.url.path)
    return _error(401, exc.message)


@app.exception_handler(InputValidationError)
async def input_validation_handler(request: Request, exc: InputValidationError):
    return _error(400, exc.message)


@app.exception_handler(RequestValidationError)
async def request_validation_handler(request: Request, exc: RequestValidationError):
    message = InputValidationError.public_message if request.url.path.startswith("/api/guidance") else "Invalid request"
    return _error(400, message, detail=jsonable_errors(exc))


@app.exception_handler(QuotaExceeded)
async def quota_exceeded_handler(request: Request, exc: QuotaExceeded):
    return _error(429, exc.message, limit=exc.limit, plan=exc.plan, upgradeMessage=exc.upgrade_message)


@app.exception_handler(GatewayError)
async def gateway_error_handler(request: Request, exc: GatewayError):
    logger.error("Gateway error on %s: %s (status=%s)", request.url.path, exc, exc.status_code)
    return _error(500, GatewayError.public_message)


@app.exception_handler(MalformedResponse)
async def malformed_response_handler(request: Request, exc: MalformedResponse):
    logger.error("Malformed AI response on %s: %s | raw=%.300r", request.url.path, exc, exc.raw_content)
    return _error(500, MalformedResponse.public_message)


@app.exception_handler(StoreUnavailable)
async def store_unavailable_handler(request: Request, exc: StoreUnavailable):
    logger.error("Store unavailable on %s: %s", request.url.path, exc)
    return _error(503, StoreUnavailable.public_message)


def jsonable_errors(exc: RequestValidationError) -> list:
    return [
        {"loc": list(err.get("loc", ())), "msg": err.get("msg", "")}
        for err in exc.errors()
    ]


# Include API routes
app.include_router(api_router, prefix="/api")


# Startup event
@app.on_event("startup")
async def startup_event():
    """Create tables on startup."""
    try:
        init_schema()
    except SQLAlchemyError as e:
        logger.warning("Schema initialization failed: %s", e)


@app.get("/", tags=["Health"])
async def root():
    return {"status": "healthy", "app": "Career Guidance API"}


@app.get("/health", tags=["Health"])
def health_check():
    """Detailed health check."""
    return {
        "status": "healthy",
        "database": "connected" if test_postgres_connection() else "disconnected"
    }
