"""
Gemini Model Manager - Singleton for shared model instance.

Used by the /generate backend. Supports two SDKs:
  1. Vertex AI SDK (production): uses GOOGLE_CLOUD_PROJECT + service account
  2. google-generativeai (local dev): uses GOOGLE_API_KEY
"""

from __future__ import annotations

import os
from functools import lru_cache

from replyq.config import GEMINI_LOCATION, GEMINI_MODEL, GOOGLE_CLOUD_PROJECT
from replyq.observability.logging import get_logger

logger = get_logger(__name__)


class GeminiInitializationError(RuntimeError):
    """Raised when Gemini model cannot be initialized."""


@lru_cache(maxsize=1)
def get_gemini_model():
    """
    Get or create the shared Gemini model instance.

    Tries Vertex AI first when a Google Cloud project is configured, otherwise
    (or when the Vertex SDK is missing) uses google-generativeai with
    GOOGLE_API_KEY.

    Returns:
        GenerativeModel: Shared Gemini model

    Raises:
        GeminiInitializationError: If model cannot be initialized
    """
    project = os.getenv("GOOGLE_CLOUD_PROJECT") or GOOGLE_CLOUD_PROJECT
    location = os.getenv("GEMINI_LOCATION") or GEMINI_LOCATION
    model_name = os.getenv("GEMINI_MODEL") or GEMINI_MODEL

    if project:
        try:
            import vertexai
            from vertexai.generative_models import GenerativeModel

            vertexai.init(project=project, location=location)
            model = GenerativeModel(model_name)

            logger.info(
                "Initialized Gemini model (Vertex AI): project=%s, location=%s, model=%s",
                project,
                location,
                model_name,
            )
            return model

        except ImportError:
            logger.info("Vertex AI SDK not installed, trying google-generativeai")
        except Exception as e:
            logger.error("Failed to initialize Vertex AI model: %s", e)
            raise GeminiInitializationError(f"Failed to initialize Gemini: {e}") from e

    try:
        import google.generativeai as genai

        api_key = os.getenv("GOOGLE_API_KEY")
        if not api_key:
            raise GeminiInitializationError(
                "Neither GOOGLE_CLOUD_PROJECT nor GOOGLE_API_KEY is set."
            )

        genai.configure(api_key=api_key)
        model = genai.GenerativeModel(model_name)

        logger.info("Initialized Gemini model (google-generativeai): model=%s", model_name)
        return model

    except ImportError as e:
        raise GeminiInitializationError(
            "No Gemini SDK available. Install google-cloud-aiplatform or google-generativeai."
        ) from e


def clear_model_cache() -> None:
    """
    Clear the cached model instance.

    Useful for testing or when reconfiguration is needed.
    """
    get_gemini_model.cache_clear()
    logger.info("Cleared Gemini model cache")
