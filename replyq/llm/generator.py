"""Server-side reply generation.

Wraps the client's prompt in a fixed framing instruction and calls Gemini
once. No retries: a failure is reported to the client as a 500.
"""

from __future__ import annotations

from google.api_core.exceptions import (
    DeadlineExceeded,
    GoogleAPIError,
    ResourceExhausted,
    ServiceUnavailable,
)

from replyq.llm.gemini import get_gemini_model
from replyq.llm.prompts import GENERATION_WRAPPER, PromptLoader, get_prompt_loader
from replyq.observability.logging import get_logger
from replyq.observability.telemetry import counter, time_block

logger = get_logger(__name__)


class GenerationError(RuntimeError):
    """Raised when the model call fails or returns no text."""


def frame_prompt(prompt: str, loader: PromptLoader | None = None) -> str:
    loader = loader or get_prompt_loader()
    return loader.render(GENERATION_WRAPPER, prompt=prompt).rstrip("\n")


def generate_reply_text(prompt: str) -> str:
    """
    Generate the body of an email reply for the composed prompt.

    Raises:
        GenerationError: On model errors or an empty response
        GeminiInitializationError: If no model can be initialized
    """
    model = get_gemini_model()

    try:
        with time_block("backend.gemini.latency"):
            response = model.generate_content(frame_prompt(prompt))
        text = response.text
    except DeadlineExceeded as e:
        counter("backend.gemini.timeout")
        raise GenerationError(f"LLM call timed out: {e}") from e
    except ResourceExhausted as e:
        counter("backend.gemini.rate_limited")
        raise GenerationError(f"LLM rate limited: {e}") from e
    except ServiceUnavailable as e:
        counter("backend.gemini.service_unavailable")
        raise GenerationError(f"LLM service unavailable: {e}") from e
    except GoogleAPIError as e:
        counter("backend.gemini.error")
        raise GenerationError(f"LLM call failed: {e}") from e
    except ValueError as e:
        # response.text raises ValueError when the candidate was blocked
        counter("backend.gemini.blocked")
        raise GenerationError(f"LLM returned no text: {e}") from e

    if not text:
        counter("backend.gemini.empty")
        raise GenerationError("LLM returned an empty reply")

    counter("backend.gemini.success")
    return text
