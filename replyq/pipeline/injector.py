"""Reply injector: write generated text into the compose body."""

from __future__ import annotations

from replyq.exceptions import NoTargetSurface
from replyq.host.surface import HostSurface
from replyq.observability.logging import get_logger
from replyq.observability.telemetry import counter

logger = get_logger(__name__)


class ReplyInjector:
    def __init__(self, host: HostSurface):
        self.host = host

    def inject(self, text: str) -> None:
        """
        Replace the chosen compose body's content with `text` and focus it.

        Raises:
            NoTargetSurface: No compose body is open (advisory, logged)
        """
        target = self.host.find_reply_target()
        if target is None:
            counter("injector.no_target")
            logger.warning("No Gmail compose box found.")
            raise NoTargetSurface()

        target.write_text(text)
        target.focus()
        counter("injector.inserted")
