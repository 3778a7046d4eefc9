"""Pydantic request/response models for the ReplyQ generation API."""

from __future__ import annotations

from pydantic import BaseModel


class GenerateRequest(BaseModel):
    """Body of POST /generate. A missing prompt is reported as 400, not 422."""

    prompt: str | None = None


class GenerateResponse(BaseModel):
    text: str


class ErrorResponse(BaseModel):
    """Standard error response."""

    error: str
