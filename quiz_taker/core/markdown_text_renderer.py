"""Markdown + LaTeX helpers for question and option text.

Architecture note:
    Quiz authors write question text as markdown with ``$...$`` math. The
    presentation layer wants HTML (MathJax does the math at display time),
    while the accessibility narrator needs a plain sentence it can speak.
    Both views come from the same markdown-it parse so they never disagree
    about what the text says.
"""

from __future__ import annotations

from dataclasses import dataclass, field

from markdown_it import MarkdownIt
from markdown_it.token import Token


@dataclass(slots=True)
class MarkdownTextRenderer:
    """Converts markdown-with-math into HTML fragments or plain text."""

    enable_html: bool = False
    _markdown: MarkdownIt = field(init=False, repr=False)

    def __post_init__(self) -> None:
        self._markdown = MarkdownIt("commonmark", {"html": self.enable_html}).enable(
            "strikethrough"
        )

    def _parse(self, markdown_text: str) -> list[Token]:
        return self._markdown.parse(markdown_text.strip())

    def render_fragment(self, markdown_text: str) -> str:
        """Render question markdown as HTML for the presentation layer."""
        tokens = self._parse(markdown_text)
        if not tokens:
            return "<p><em>No content provided.</em></p>"
        return self._markdown.renderer.render(tokens, self._markdown.options, {})

    def to_plain_text(self, markdown_text: str) -> str:
        """Flatten markdown to a single line suitable for narration."""

        pieces = [
            _flatten_inline(block.children or [])
            for block in self._parse(markdown_text)
            if block.type == "inline"
        ]
        return " ".join(piece for piece in pieces if piece).strip()


def _flatten_inline(children: list[Token]) -> str:
    parts: list[str] = []
    for child in children:
        if child.type in ("text", "code_inline"):
            parts.append(child.content)
        elif child.type in ("softbreak", "hardbreak"):
            parts.append(" ")
        elif child.type == "image":
            parts.append(child.content)
    return " ".join("".join(parts).split())


renderer = MarkdownTextRenderer()
# Shared instance; MarkdownIt is safe for read-only renders from the Qt thread.
