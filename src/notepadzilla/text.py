"""Plain-text projection of note HTML and human-readable time labels."""
from __future__ import annotations
from datetime import datetime
from html.parser import HTMLParser
from typing import List

PREVIEW_LENGTH = 100

_BLOCK_TAGS = frozenset({
    "address", "article", "aside", "blockquote", "br", "dd", "div", "dl", "dt",
    "figcaption", "figure", "footer", "h1", "h2", "h3", "h4", "h5", "h6",
    "header", "hr", "li", "main", "nav", "ol", "p", "pre", "section", "table",
    "td", "th", "tr", "ul",
})
_SKIPPED_TAGS = frozenset({"script", "style", "template"})


class _TextExtractor(HTMLParser):
    """Collects text nodes; block elements contribute a line break."""

    def __init__(self) -> None:
        super().__init__(convert_charrefs=True)
        self._parts: List[str] = []
        self._skip_depth = 0

    def handle_starttag(self, tag, attrs):
        if tag in _SKIPPED_TAGS:
            self._skip_depth += 1
        elif tag in _BLOCK_TAGS:
            self._parts.append("\n")

    def handle_startendtag(self, tag, attrs):
        if tag in _BLOCK_TAGS:
            self._parts.append("\n")

    def handle_endtag(self, tag):
        if tag in _SKIPPED_TAGS:
            if self._skip_depth:
                self._skip_depth -= 1
        elif tag in _BLOCK_TAGS:
            self._parts.append("\n")

    def handle_data(self, data):
        if not self._skip_depth:
            self._parts.append(data)

    def text(self) -> str:
        return "".join(self._parts)


def _extract(content: str) -> str:
    parser = _TextExtractor()
    parser.feed(content or "")
    parser.close()
    return parser.text()


def plain_text(content: str) -> str:
    """Markup stripped, whitespace runs collapsed to single spaces."""
    return " ".join(_extract(content).split())


def text_lines(content: str) -> str:
    """Markup stripped, one line per block; blank lines dropped."""
    lines = (" ".join(line.split()) for line in _extract(content).split("\n"))
    return "\n".join(line for line in lines if line)


def make_preview(text: str, max_length: int = PREVIEW_LENGTH) -> str:
    if len(text) <= max_length:
        return text
    return text[:max_length] + "..."


def word_count(text: str) -> int:
    return len(text.split())


def relative_time_label(timestamp: datetime, now: datetime) -> str:
    seconds = (now - timestamp).total_seconds()
    if seconds < 60:
        return "Just now"
    if seconds < 3600:
        return f"{int(seconds // 60)} minutes ago"
    if seconds < 86400:
        return f"{int(seconds // 3600)} hours ago"
    return timestamp.astimezone().strftime("%x")
