"""Centralized configuration for the ReplyQ pipeline.

Re-exports everything from replyq.infrastructure.settings so callers have one
import point, then adds typed constants for context composition and request
pacing. Environment variable overrides use safe defaults so nothing extra is
required to run locally.
"""

from __future__ import annotations

from replyq.infrastructure.env import get_optional_env
from replyq.infrastructure.settings import *  # noqa: F401, F403

# --- App ---
APP_VERSION: str = "0.1.0"

# --- Context composition ---
RECENT_MESSAGE_COUNT: int = 3
MESSAGE_MAX_CHARS: int = 1000
SNIPPET_CHARS: int = 200
TRUNCATION_MARKER: str = "... [message truncated]"

# --- Outbound request pacing ---
# Fixed delay before every outbound call. Not a backoff: nothing is retried.
REQUEST_DELAY_SECONDS: float = float(get_optional_env("REPLYQ_REQUEST_DELAY_SECONDS", "2.0"))

# --- Identity cache ---
IDENTITY_CACHE_KEY: str = "firstName"

# --- Database ---
DB_CONNECT_TIMEOUT: float = float(get_optional_env("REPLYQ_DB_CONNECT_TIMEOUT", "30.0"))
DB_RETRY_MAX: int = int(get_optional_env("REPLYQ_DB_RETRY_MAX", "5"))
DB_RETRY_BASE_DELAY: float = float(get_optional_env("REPLYQ_DB_RETRY_BASE_DELAY", "0.1"))
DB_RETRY_MAX_DELAY: float = float(get_optional_env("REPLYQ_DB_RETRY_MAX_DELAY", "2.0"))
DB_RETRY_JITTER: float = float(get_optional_env("REPLYQ_DB_RETRY_JITTER", "0.1"))
