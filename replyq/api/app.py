"""FastAPI server for the ReplyQ generation backend"""

from __future__ import annotations

from typing import Any

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from replyq.api.routes.generate import router as generate_router
from replyq.api.routes.health import router as health_router
from replyq.config import APP_VERSION, EXTENSION_ID, is_development, is_production
from replyq.infrastructure.env import ensure_env_loaded
from replyq.observability.logging import get_logger
from replyq.observability.telemetry import counter, log_event

ensure_env_loaded()

app = FastAPI(
    title="ReplyQ API",
    version=APP_VERSION,
    docs_url=None if is_production() else "/docs",
    redoc_url=None,
)

logger = get_logger(__name__)


# Malformed bodies use the same {"error": ...} shape as every other failure
@app.exception_handler(RequestValidationError)
async def validation_exception_handler(
    request: Request, exc: RequestValidationError
) -> JSONResponse:
    logger.warning("Validation error on %s: %d error(s)", request.url.path, len(exc.errors()))
    counter("api.validation_errors")

    return JSONResponse(
        status_code=status.HTTP_400_BAD_REQUEST,
        content={
            "error": "Invalid request format",
            "invalid_fields": [str(err["loc"][-1]) for err in exc.errors()],
        },
    )


ALLOWED_ORIGINS = ["https://mail.google.com"]

if EXTENSION_ID:
    ALLOWED_ORIGINS.append(f"chrome-extension://{EXTENSION_ID}")

if is_development():
    ALLOWED_ORIGINS.extend(
        [
            "http://localhost:3000",
            "http://localhost:8000",
            "http://127.0.0.1:3000",
            "http://127.0.0.1:8000",
        ]
    )

app.add_middleware(
    CORSMiddleware,
    allow_origins=ALLOWED_ORIGINS,
    allow_credentials=False,
    allow_methods=["GET", "POST", "OPTIONS"],
    allow_headers=["Content-Type"],
)

app.include_router(health_router)
app.include_router(generate_router)

log_event("api.startup", service="replyq", version=APP_VERSION)


@app.get("/")
def root() -> dict[str, Any]:
    return {
        "service": "ReplyQ API",
        "version": APP_VERSION,
        "status": "running",
        "endpoints": {
            "health": "/health",
            "generate": "/generate",
        },
    }
