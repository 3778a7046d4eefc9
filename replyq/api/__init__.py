"""ReplyQ generation backend (FastAPI)."""

from __future__ import annotations


def main() -> None:
    """Run the backend with uvicorn on API_HOST:API_PORT."""
    import uvicorn

    from replyq.config import API_HOST, API_PORT

    uvicorn.run("replyq.api.app:app", host=API_HOST, port=API_PORT)
