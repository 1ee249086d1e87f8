"""
Export of a note to downloadable plain formats.

All functions are pure: the same title, content and export date always give
the same payload. Delivering the bytes to the user is left to the caller.
"""
from __future__ import annotations
import datetime
import html
from enum import Enum

from pydantic import BaseModel

from .text import text_lines

APP_NAME = "NotepadZilla"
DEFAULT_EXPORT_NAME = "notepadzilla_note"

HTML_CONTENT_TYPE = "text/html"
TEXT_CONTENT_TYPE = "text/plain"
DOCX_CONTENT_TYPE = "application/vnd.openxmlformats-officedocument.wordprocessingml.document"


class ExportFormat(str, Enum):
    html = "html"
    text = "text"
    docx = "docx"


class ExportPayload(BaseModel):
    filename: str
    content_type: str
    data: bytes


_HTML_TEMPLATE = """<!DOCTYPE html>
<html>
<head>
    <meta charset="UTF-8">
    <title>{title}</title>
    <style>
        body {{
            font-family: Arial, sans-serif;
            line-height: 1.6;
            padding: 40px;
            max-width: 800px;
            margin: 0 auto;
            color: #333;
        }}
        h1 {{
            color: #2563eb;
            border-bottom: 2px solid #e5e7eb;
            padding-bottom: 10px;
            margin-bottom: 20px;
        }}
        .content {{
            margin-top: 20px;
        }}
        .footer {{
            margin-top: 40px;
            padding-top: 20px;
            border-top: 1px solid #e5e7eb;
            color: #6b7280;
            font-size: 0.9rem;
            text-align: center;
        }}
    </style>
</head>
<body>
    <h1>{title}</h1>
    <div class="content">{content}</div>
    <div class="footer">
        Exported from {app} on {date}
    </div>
</body>
</html>
"""


def _sanitize_filename(name: str) -> str:
    bad = '<>:"/\\|?*'
    for ch in bad:
        name = name.replace(ch, '_')
    return name


def _export_title(title: str) -> str:
    return (title or "").strip() or DEFAULT_EXPORT_NAME


def _format_date(exported_on: datetime.date) -> str:
    return exported_on.strftime("%x")


def export_html(title: str, content: str, exported_on: datetime.date) -> ExportPayload:
    """A standalone HTML page with the note body embedded verbatim."""
    title = _export_title(title)
    document = _HTML_TEMPLATE.format(
        title=html.escape(title),
        content=content or "",
        app=APP_NAME,
        date=_format_date(exported_on),
    )
    return ExportPayload(
        filename=f"{_sanitize_filename(title)}.html",
        content_type=HTML_CONTENT_TYPE,
        data=document.encode("utf-8"),
    )


def export_text(title: str, content: str, exported_on: datetime.date) -> ExportPayload:
    title = _export_title(title)
    body = f"{title}\n\n{text_lines(content)}\n\n---\nExported from {APP_NAME} on {_format_date(exported_on)}"
    return ExportPayload(
        filename=f"{_sanitize_filename(title)}.txt",
        content_type=TEXT_CONTENT_TYPE,
        data=body.encode("utf-8"),
    )


def export_docx(title: str, content: str, exported_on: datetime.date) -> ExportPayload:
    """
    Word-processor stand-in: plain text under a `Title:` line, labelled with
    the docx content type. Not an OOXML package.
    """
    title = _export_title(title)
    body = f"Title: {title}\n\n{text_lines(content)}\n\nExported from {APP_NAME}"
    return ExportPayload(
        filename=f"{_sanitize_filename(title)}.docx",
        content_type=DOCX_CONTENT_TYPE,
        data=body.encode("utf-8"),
    )


_EXPORTERS = {
    ExportFormat.html: export_html,
    ExportFormat.text: export_text,
    ExportFormat.docx: export_docx,
}


def export_note(fmt: ExportFormat | str, title: str, content: str, exported_on: datetime.date) -> ExportPayload:
    return _EXPORTERS[ExportFormat(fmt)](title, content, exported_on)
