"""POST /generate - turn a composed prompt into reply text.

Contract:
    200 {"text": "..."}      reply generated
    400 {"error": "..."}     prompt missing or empty
    500 {"error": "..."}     model failure

No authentication, rate limiting or payload size checks happen here; the
client bounds the prompt before sending it.
"""

from __future__ import annotations

from fastapi import APIRouter, status
from fastapi.responses import JSONResponse

from replyq.api.models import ErrorResponse, GenerateRequest, GenerateResponse
from replyq.llm.gemini import GeminiInitializationError
from replyq.llm.generator import GenerationError, generate_reply_text
from replyq.observability.logging import get_logger
from replyq.observability.telemetry import counter
from replyq.utils.redaction import redact_prompt

router = APIRouter(tags=["generate"])
logger = get_logger(__name__)


@router.post(
    "/generate",
    response_model=GenerateResponse,
    responses={400: {"model": ErrorResponse}, 500: {"model": ErrorResponse}},
)
def generate(request: GenerateRequest) -> GenerateResponse | JSONResponse:
    if not request.prompt or not request.prompt.strip():
        counter("api.generate.missing_prompt")
        return JSONResponse(
            status_code=status.HTTP_400_BAD_REQUEST,
            content=ErrorResponse(error="Missing prompt").model_dump(),
        )

    logger.info("Generating reply for prompt %s", redact_prompt(request.prompt))
    try:
        text = generate_reply_text(request.prompt)
    except (GenerationError, GeminiInitializationError) as e:
        counter("api.generate.error")
        logger.error("Error in /generate: %s", e)
        return JSONResponse(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            content=ErrorResponse(error=str(e) or "Internal Server Error").model_dump(),
        )

    counter("api.generate.success")
    return GenerateResponse(text=text)
