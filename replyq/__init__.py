"""ReplyQ - AI-drafted replies for the Gmail conversation in view"""

from __future__ import annotations

__version__ = "0.1.0"


def __getattr__(name: str):
    """
    Lazy imports to avoid loading requests/bs4 when only importing lightweight modules.
    """
    if name == "ReplyPipeline":
        from replyq.pipeline.reply_pipeline import ReplyPipeline

        return ReplyPipeline
    if name == "build_pipeline":
        from replyq.pipeline.reply_pipeline import build_pipeline

        return build_pipeline

    msg = f"module {__name__!r} has no attribute {name!r}"
    raise AttributeError(msg)


__all__ = ["ReplyPipeline", "build_pipeline"]
