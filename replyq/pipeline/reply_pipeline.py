"""
Reply pipeline - one user-triggered run from page to compose box.

State machine per run:

    IDLE -> LOCATING -> RESOLVING -> COMPOSING -> GENERATING -> INJECTING -> IDLE

Stages run strictly in sequence; each stage's output is the next stage's only
input. Any ReplyAssistError ends the run back in IDLE with a status string for
the user; nothing is retried. Anything else is a bug and propagates.
"""

from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path

import requests

from replyq.config import BACKEND_URL
from replyq.drafting.composer import compose
from replyq.exceptions import LocatorNotFound, ReplyAssistError
from replyq.gmail.auth import TokenProvider
from replyq.gmail.identity import IdentityResolver
from replyq.gmail.thread_resolver import ThreadResolver
from replyq.host.surface import HostSurface
from replyq.llm.gateway import GenerationGateway, get_generation_gateway
from replyq.observability.logging import get_logger
from replyq.observability.telemetry import counter, log_event
from replyq.pipeline.injector import ReplyInjector
from replyq.pipeline.locator import ActiveItemLocator
from replyq.pipeline.status import LoggingStatusReporter, StatusReporter
from replyq.storage.identity_cache import IdentityCache
from replyq.storage.models import Thread

logger = get_logger(__name__)

STATUS_PREPARING = "Preparing reply..."
STATUS_REQUESTING = "Requesting AI reply from backend..."
STATUS_INSERTED = "Reply inserted into Gmail compose box!"

Composer = Callable[[Thread, str, str], str]


class PipelineState(str, Enum):
    IDLE = "idle"
    LOCATING = "locating"
    RESOLVING = "resolving"
    COMPOSING = "composing"
    GENERATING = "generating"
    INJECTING = "injecting"


@dataclass
class PipelineResult:
    """
    State and outcome of one run.

    Each run owns its result, so runs sharing a pipeline instance never see
    each other's stage. `reply_text` is set as soon as generation succeeds.
    """

    ok: bool = False
    status: str = ""
    stages: list[PipelineState] = field(default_factory=list)
    reply_text: str | None = None
    error: ReplyAssistError | None = None
    failed_stage: PipelineState | None = None
    state: PipelineState = PipelineState.IDLE

    @property
    def generation_succeeded(self) -> bool:
        return self.reply_text is not None


class ReplyPipeline:
    def __init__(
        self,
        host: HostSurface,
        token_provider: TokenProvider,
        resolver: ThreadResolver,
        identity: IdentityResolver,
        gateway: GenerationGateway,
        reporter: StatusReporter | None = None,
        composer: Composer = compose,
    ):
        self.locator = ActiveItemLocator(host)
        self.injector = ReplyInjector(host)
        self.token_provider = token_provider
        self.resolver = resolver
        self.identity = identity
        self.gateway = gateway
        self.reporter = reporter or LoggingStatusReporter()
        self.composer = composer

    def _enter(self, state: PipelineState, result: PipelineResult) -> None:
        result.state = state
        result.stages.append(state)

    def run(self, user_instructions: str = "") -> PipelineResult:
        """
        Draft a reply for the conversation in view and insert it.

        Args:
            user_instructions: Free text from the user, passed to the prompt verbatim

        Returns:
            PipelineResult; `status` has already been sent to the reporter
        """
        result = PipelineResult()
        try:
            self._enter(PipelineState.LOCATING, result)
            ref = self.locator.locate()
            if ref is None:
                raise LocatorNotFound()
            self.reporter.report(STATUS_PREPARING)

            self._enter(PipelineState.RESOLVING, result)
            thread = self.resolver.resolve(ref, self.token_provider.get_token())

            self._enter(PipelineState.COMPOSING, result)
            first_name = self.identity.resolve_first_name(self.token_provider)
            prompt = self.composer(thread, first_name, user_instructions)

            self._enter(PipelineState.GENERATING, result)
            self.reporter.report(STATUS_REQUESTING)
            result.reply_text = self.gateway.generate(prompt)

            self._enter(PipelineState.INJECTING, result)
            self.injector.inject(result.reply_text)

        except ReplyAssistError as e:
            result.error = e
            result.failed_stage = result.state
            result.status = e.user_message()
            counter(f"pipeline.failed.{result.state.value}")
            log_event(
                "pipeline.failed",
                stage=result.state.value,
                error=type(e).__name__,
                advisory=e.advisory,
            )
        else:
            result.ok = True
            result.status = STATUS_INSERTED
            counter("pipeline.success")
        finally:
            result.state = PipelineState.IDLE

        self.reporter.report(result.status)
        return result


def build_pipeline(
    host: HostSurface,
    token_provider: TokenProvider,
    reporter: StatusReporter | None = None,
    session: requests.Session | None = None,
    backend_url: str | None = None,
    db_path: Path | str | None = None,
) -> ReplyPipeline:
    """
    Assemble a pipeline with default collaborators.

    Without a custom session or backend URL the process-wide gateway is used,
    so the single-flight guard spans every pipeline in the process.
    """
    if session is None and backend_url is None:
        gateway = get_generation_gateway()
    else:
        gateway = GenerationGateway(session=session, backend_url=backend_url or BACKEND_URL)

    return ReplyPipeline(
        host=host,
        token_provider=token_provider,
        resolver=ThreadResolver(session=session),
        identity=IdentityResolver(cache=IdentityCache(db_path), session=session),
        gateway=gateway,
        reporter=reporter,
    )
