"""Active-item locator: which message is the user looking at?"""

from __future__ import annotations

from replyq.host.surface import HostSurface
from replyq.observability.telemetry import counter


class ActiveItemLocator:
    def __init__(self, host: HostSurface):
        self.host = host

    def locate(self) -> str | None:
        """Message id of the item in view, or None when the page shows none."""
        ref = self.host.find_active_item_ref()
        counter("locator.found" if ref else "locator.not_found")
        return ref
