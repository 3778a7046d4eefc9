"""
Application-wide settings and environment configuration
"""

from __future__ import annotations

from pathlib import Path

from replyq.infrastructure.env import get_optional_env

# Project paths
REPLYQ_ROOT = Path(__file__).parent.parent

# Environment
ENV = get_optional_env("REPLYQ_ENV", "development")
DEBUG = ENV == "development"

# Backend server (the /generate service)
API_HOST = get_optional_env("API_HOST", "0.0.0.0")
API_PORT = int(get_optional_env("API_PORT", "3000"))

# Google Cloud / Gemini
GOOGLE_CLOUD_PROJECT = get_optional_env("GOOGLE_CLOUD_PROJECT") or None
GEMINI_MODEL = get_optional_env("GEMINI_MODEL", "gemini-1.5-flash")
GEMINI_LOCATION = get_optional_env("GEMINI_LOCATION", "us-central1")

# Upstream Google APIs consumed by the pipeline
GMAIL_API_BASE = get_optional_env(
    "REPLYQ_GMAIL_API_BASE", "https://gmail.googleapis.com/gmail/v1/users/me"
)
PEOPLE_API_URL = get_optional_env(
    "REPLYQ_PEOPLE_API_URL", "https://people.googleapis.com/v1/people/me"
)

# Generation backend consumed by the pipeline
BACKEND_URL = get_optional_env("REPLYQ_BACKEND_URL", "http://localhost:3000/generate")

# Browser extension origin allowed by CORS (empty = not configured)
EXTENSION_ID = get_optional_env("REPLYQ_EXTENSION_ID", "")

# Single SQLite database for persisted state (identity cache)
DB_PATH = Path(get_optional_env("REPLYQ_DB_PATH", str(REPLYQ_ROOT / "data" / "replyq.db")))


def is_production() -> bool:
    """Check if running in production"""
    return ENV == "production"


def is_development() -> bool:
    """Check if running in development"""
    return ENV == "development"
