"""
document.py — Read-only view over a parsed HTML page.

The checks in analyzer.py only talk to this class, so the parsing backend
(BeautifulSoup + soupsieve selectors today) can change without touching them.
"""

from bs4 import BeautifulSoup, Tag


class Document:
    def __init__(self, html: str):
        self._soup = BeautifulSoup(html, "html.parser")

    # ── Queries ────────────────────────────────────────────────────────────────

    def select(self, selector: str) -> list:
        """All elements matching a CSS selector, in document order."""
        return self._soup.select(selector)

    def select_one(self, selector: str) -> Tag | None:
        return self._soup.select_one(selector)

    def count(self, selector: str) -> int:
        return len(self.select(selector))

    def exists(self, selector: str) -> bool:
        return self.select_one(selector) is not None

    def text(self, selector: str) -> str:
        """Concatenated text of every match; empty string when nothing matches."""
        return "".join(self.tag_text(el) for el in self.select(selector))

    def attr(self, selector: str, name: str) -> str | None:
        """Attribute of the first match, or None."""
        el = self.select_one(selector)
        if el is None:
            return None
        return self.attr_of(el, name)

    # ── Element helpers ────────────────────────────────────────────────────────

    @staticmethod
    def tag_text(el: Tag) -> str:
        return el.get_text()

    @staticmethod
    def attr_of(el: Tag, name: str) -> str | None:
        value = el.get(name)
        # bs4 returns multi-valued attributes (rel, class) as lists
        if isinstance(value, list):
            return " ".join(value)
        return value

    @staticmethod
    def has_attr(el: Tag, name: str) -> bool:
        return el.has_attr(name)

    @staticmethod
    def previous_sibling_is(el: Tag, name: str) -> bool:
        """True if the element immediately before `el` is a <name> element."""
        for prev in el.previous_siblings:
            if isinstance(prev, Tag):
                return prev.name == name
        return False

    @staticmethod
    def parent_is(el: Tag, name: str) -> bool:
        return el.parent is not None and el.parent.name == name
