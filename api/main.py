"""
ReasonBridge API — Main Application

POST  /responses                  — Register a response's text
GET   /responses/{id}/feedback    — Feedback rows for a response
GET   /responses/{id}/clarity     — Clarity metrics for a response
POST  /feedback                   — Request (and persist) feedback
POST  /feedback/preview           — Live preview, never persisted
GET   /feedback/analytics         — Rollup over stored feedback
GET   /feedback/{id}              — One feedback row
PATCH /feedback/{id}/dismiss      — Soft-delete
PATCH /feedback/{id}/acknowledge  — Mark acknowledged
PATCH /feedback/{id}/rating       — HELPFUL / NOT_HELPFUL
PATCH /feedback/{id}/revised      — Mark revised
GET   /patterns                   — Loaded pattern groups
GET   /health                     — Health check
"""

from __future__ import annotations

import time
from contextlib import asynccontextmanager
from datetime import datetime
from typing import Optional

from fastapi import Depends, FastAPI, Query
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from starlette.requests import Request

from reasonbridge import __version__
from reasonbridge.aggregator import should_display
from reasonbridge.auth import AUTH_ENABLED, require_api_key
from reasonbridge.cache import preview_cache
from reasonbridge.config import settings
from reasonbridge.detector import feedback_orchestrator
from reasonbridge.exceptions import AnalysisUnavailableError, NotFoundError
from reasonbridge.logging import get_logger, setup_logging
from reasonbridge.models import FeedbackType
from reasonbridge.patterns import get_pattern_summary
from reasonbridge.rate_limit import PREVIEW_LIMITS, check_rate_limit
from reasonbridge.schemas.feedback import (
    ClarityMetricsResponse,
    CreateResponseRequest,
    DismissFeedbackRequest,
    FeedbackAnalyticsResponse,
    FeedbackResponse,
    HealthResponse,
    PatternsResponse,
    PreviewFeedbackRequest,
    PreviewFeedbackResponse,
    RateFeedbackRequest,
    RequestFeedbackRequest,
    ResponseRecord,
)
from reasonbridge.service import feedback_service
from reasonbridge.store import feedback_store

logger = get_logger("api")


# ============================================================
# STARTUP / SHUTDOWN
# ============================================================

@asynccontextmanager
async def lifespan(app: FastAPI):
    setup_logging()
    logger.info(f"ReasonBridge API starting (auth_enabled={AUTH_ENABLED})")
    yield
    logger.info("ReasonBridge API shutting down")


app = FastAPI(
    title="ReasonBridge Feedback API",
    description="Rule-based feedback on discussion responses: fallacies, tone, sourcing, bias",
    version=__version__,
    lifespan=lifespan,
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=[o.strip() for o in settings.CORS_ORIGINS.split(",")],
    allow_methods=["GET", "POST", "PATCH", "OPTIONS"],
    allow_headers=["X-API-Key", "Content-Type", "Authorization"],
    allow_credentials=False,
)


# ============================================================
# ERROR HANDLERS
# ============================================================

@app.exception_handler(NotFoundError)
async def not_found_handler(request: Request, exc: NotFoundError):
    return JSONResponse(status_code=404, content={"detail": str(exc)})


@app.exception_handler(AnalysisUnavailableError)
async def analysis_unavailable_handler(request: Request, exc: AnalysisUnavailableError):
    logger.warning(
        "Analysis unavailable",
        extra={"error": str(exc), "path": request.url.path},
    )
    return JSONResponse(
        status_code=503,
        content={
            "detail": "Feedback analysis is temporarily unavailable. "
                      "You can still post your response.",
        },
    )


@app.exception_handler(Exception)
async def global_error_handler(request: Request, exc: Exception):
    """Catch unhandled exceptions — return structured error, don't leak internals."""
    logger.error(
        f"Unhandled exception: {type(exc).__name__}",
        extra={"error": str(exc), "path": request.url.path, "method": request.method},
        exc_info=True,
    )
    return JSONResponse(
        status_code=500,
        content={"detail": "Internal server error. The request could not be completed."},
    )


def _caller(request: Request, key_id: Optional[str]) -> Optional[str]:
    """Rate-limit bucket: key hash when auth is on, else client host."""
    if key_id:
        return key_id
    return request.client.host if request.client else None


# ============================================================
# RESPONSES
# ============================================================

@app.post("/responses", response_model=ResponseRecord, status_code=201)
async def create_response(
    body: CreateResponseRequest,
    key_id: Optional[str] = Depends(require_api_key),
):
    """Register response text so feedback can be requested against it."""
    return feedback_store.add_response(body.content)


@app.get("/responses/{response_id}/feedback", response_model=list[FeedbackResponse])
async def list_response_feedback(
    response_id: str,
    key_id: Optional[str] = Depends(require_api_key),
):
    rows = feedback_service.list_feedback_for_response(response_id)
    return [f.to_dict() for f in rows]


@app.get("/responses/{response_id}/clarity", response_model=ClarityMetricsResponse)
async def response_clarity(
    response_id: str,
    key_id: Optional[str] = Depends(require_api_key),
):
    """Clarity metrics derived from the response's displayed feedback."""
    return feedback_service.clarity_for_response(response_id).to_dict()


# ============================================================
# FEEDBACK
# ============================================================

@app.post("/feedback", response_model=list[FeedbackResponse], status_code=201)
async def request_feedback(
    body: RequestFeedbackRequest,
    request: Request,
    key_id: Optional[str] = Depends(require_api_key),
):
    """Analyze a stored response and persist the resulting feedback."""
    check_rate_limit(_caller(request, key_id))
    created = feedback_service.request_feedback(
        body.response_id, content=body.content, sensitivity=body.sensitivity,
    )
    return [f.to_dict() for f in created]


@app.post("/feedback/preview", response_model=PreviewFeedbackResponse)
async def preview_feedback(
    body: PreviewFeedbackRequest,
    request: Request,
    key_id: Optional[str] = Depends(require_api_key),
):
    """Live feedback for a draft. Nothing is stored."""
    check_rate_limit(_caller(request, key_id), PREVIEW_LIMITS, scope="preview")
    sensitivity = body.sensitivity.value

    cached = await preview_cache.get(body.content, sensitivity)
    if cached is not None:
        return cached

    start = time.time()
    result = feedback_orchestrator.preview(body.content, body.sensitivity)
    payload = result.to_dict()
    for item, candidate in zip(payload["feedback"], result.feedback):
        item["should_display"] = should_display(candidate)

    await preview_cache.put(body.content, sensitivity, payload)

    logger.info(
        f"Preview complete: {result.summary}",
        extra={
            "sensitivity": sensitivity,
            "candidates": result.issue_count,
            "ready_to_post": result.ready_to_post,
            "duration_ms": int((time.time() - start) * 1000),
            "key_id": key_id,
        },
    )
    return payload


@app.get("/feedback/analytics", response_model=FeedbackAnalyticsResponse)
async def feedback_analytics(
    start: Optional[datetime] = None,
    end: Optional[datetime] = None,
    feedback_type: Optional[FeedbackType] = Query(None, alias="type"),
    response_id: Optional[str] = None,
    key_id: Optional[str] = Depends(require_api_key),
):
    """Acknowledgment, revision and dismissal rollup. Defaults to the last 30 days."""
    analytics = feedback_service.get_analytics(
        start=start, end=end, feedback_type=feedback_type, response_id=response_id,
    )
    return analytics.to_dict()


@app.get("/feedback/{feedback_id}", response_model=FeedbackResponse)
async def get_feedback(
    feedback_id: str,
    key_id: Optional[str] = Depends(require_api_key),
):
    return feedback_service.get_feedback_by_id(feedback_id).to_dict()


@app.patch("/feedback/{feedback_id}/dismiss", response_model=FeedbackResponse)
async def dismiss_feedback(
    feedback_id: str,
    body: Optional[DismissFeedbackRequest] = None,
    key_id: Optional[str] = Depends(require_api_key),
):
    reason = body.dismissal_reason if body else None
    return feedback_service.dismiss_feedback(feedback_id, reason).to_dict()


@app.patch("/feedback/{feedback_id}/acknowledge", response_model=FeedbackResponse)
async def acknowledge_feedback(
    feedback_id: str,
    key_id: Optional[str] = Depends(require_api_key),
):
    return feedback_service.acknowledge_feedback(feedback_id).to_dict()


@app.patch("/feedback/{feedback_id}/rating", response_model=FeedbackResponse)
async def rate_feedback(
    feedback_id: str,
    body: RateFeedbackRequest,
    key_id: Optional[str] = Depends(require_api_key),
):
    return feedback_service.rate_feedback(feedback_id, body.rating).to_dict()


@app.patch("/feedback/{feedback_id}/revised", response_model=FeedbackResponse)
async def mark_revised(
    feedback_id: str,
    key_id: Optional[str] = Depends(require_api_key),
):
    return feedback_service.mark_revised(feedback_id).to_dict()


# ============================================================
# META
# ============================================================

@app.get("/patterns", response_model=PatternsResponse)
async def get_patterns(
    category: str = Query("all", pattern="^(all|fallacy|tone|clarity)$"),
    key_id: Optional[str] = Depends(require_api_key),
):
    """Describe the loaded pattern groups."""
    patterns = get_pattern_summary(category)
    return {
        "category": category,
        "total_groups": len(patterns),
        "total_patterns": sum(p["pattern_count"] for p in patterns),
        "patterns": patterns,
    }


@app.get("/health", response_model=HealthResponse)
async def health():
    """Health check — no auth required."""
    return {
        "status": "operational",
        "version": __version__,
        "feedback_entries": feedback_store.count_feedback(),
        "response_entries": feedback_store.count_responses(),
        "auth_enabled": AUTH_ENABLED,
        "preview_cache": preview_cache.stats,
    }


# ============================================================
# MIDDLEWARE
# ============================================================

@app.middleware("http")
async def add_security_headers(request: Request, call_next):
    response = await call_next(request)
    response.headers["X-ReasonBridge-Version"] = __version__
    response.headers["X-Content-Type-Options"] = "nosniff"
    response.headers["X-Frame-Options"] = "DENY"
    response.headers["Referrer-Policy"] = "strict-origin-when-cross-origin"
    return response


_MAX_BODY_BYTES = 1_048_576  # 1 MB


@app.middleware("http")
async def enforce_body_size_limit(request: Request, call_next):
    """Reject requests exceeding 1MB."""
    content_length = request.headers.get("content-length")
    if content_length:
        try:
            if int(content_length) > _MAX_BODY_BYTES:
                return JSONResponse(
                    status_code=413,
                    content={"detail": "Request body too large."},
                )
        except ValueError:
            pass  # Malformed content-length; let the framework handle it

    if request.method in ("POST", "PUT", "PATCH"):
        body = await request.body()
        if len(body) > _MAX_BODY_BYTES:
            return JSONResponse(
                status_code=413,
                content={"detail": "Request body too large."},
            )

    return await call_next(request)


@app.middleware("http")
async def log_requests(request: Request, call_next):
    """Log every API request with method, path, status, duration."""
    path = request.url.path
    if path == "/health":
        return await call_next(request)

    start = time.time()
    response = await call_next(request)
    duration_ms = round((time.time() - start) * 1000, 1)

    logger.info(
        f"{request.method} {path} → {response.status_code} ({duration_ms}ms)",
        extra={
            "method": request.method,
            "path": path,
            "status_code": response.status_code,
            "duration_ms": duration_ms,
        },
    )
    return response


if __name__ == "__main__":
    import uvicorn

    uvicorn.run("api.main:app", host=settings.HOST, port=settings.PORT)
