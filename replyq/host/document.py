"""
HostSurface over an HTML snapshot of the Gmail page, using BeautifulSoup.

Focus is tracked explicitly (there is no live document.activeElement), and
written replies are visible through render().
"""

from __future__ import annotations

from bs4 import BeautifulSoup, Tag

from replyq.host.surface import select_reply_target

ACTIVE_ITEM_ATTR = "data-legacy-message-id"
REPLY_SURFACE_SELECTOR = "div[contenteditable='true'][aria-label='Message Body']"


class DocumentReplySurface:
    """A compose body element inside a DocumentHostSurface."""

    def __init__(self, element: Tag, host: DocumentHostSurface):
        self.element = element
        self.host = host

    def has_focus(self) -> bool:
        return self.host.active_element is self.element

    def contains_focus(self) -> bool:
        active = self.host.active_element
        if active is None:
            return False
        return any(parent is self.element for parent in active.parents)

    def write_text(self, text: str) -> None:
        self.element.clear()
        lines = text.split("\n")
        for i, line in enumerate(lines):
            if i:
                self.element.append(self.host.soup.new_tag("br"))
            if line:
                self.element.append(line)

    def text(self) -> str:
        """Current content, with <br> read back as newlines."""
        parts: list[str] = []
        for node in self.element.children:
            if isinstance(node, Tag) and node.name == "br":
                parts.append("\n")
            elif isinstance(node, Tag):
                parts.append(node.get_text())
            else:
                parts.append(str(node))
        return "".join(parts)

    def focus(self) -> None:
        self.host.active_element = self.element


class DocumentHostSurface:
    def __init__(self, markup: str, parser: str = "html.parser"):
        self.soup = BeautifulSoup(markup, parser)
        self.active_element: Tag | None = None

    def find_active_item_ref(self) -> str | None:
        element = self.soup.find(attrs={ACTIVE_ITEM_ATTR: True})
        if element is None:
            return None
        return element.get(ACTIVE_ITEM_ATTR) or None

    def reply_surfaces(self) -> list[DocumentReplySurface]:
        return [
            DocumentReplySurface(element, self)
            for element in self.soup.select(REPLY_SURFACE_SELECTOR)
        ]

    def find_reply_target(self) -> DocumentReplySurface | None:
        return select_reply_target(self.reply_surfaces())

    def focus(self, selector: str) -> None:
        """Move focus to the first element matching a CSS selector."""
        self.active_element = self.soup.select_one(selector)

    def render(self) -> str:
        return str(self.soup)
