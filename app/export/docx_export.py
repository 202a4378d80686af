# app/export/docx_export.py
"""
Evolution export
Word (.docx) and HTML renditions of a note, ready to paste or attach to the chart.

Formatting rules, applied line by line:
- separator lines (───) become blank paragraphs
- "LABEL:" lines in capitals, the INTERCONSULTA header and the signature are bold
- everything else is plain Arial 10pt
"""
import html
import io
import logging
import re
from datetime import datetime
from typing import Optional

from docx import Document
from docx.shared import Pt

from app.helpers.time import utcnow

logger = logging.getLogger(__name__)

DOCX_MEDIA_TYPE = "application/vnd.openxmlformats-officedocument.wordprocessingml.document"

FONT_NAME = "Arial"
FONT_SIZE = Pt(10)

SEPARATOR = "───"
HEADER_PATTERN = re.compile(r"^[A-Z\s]+:$")
BOLD_PREFIXES = ("INTERCONSULTA", "Avaliado por")


def is_separator(line: str) -> bool:
    return SEPARATOR in line


def is_header(line: str) -> bool:
    return bool(HEADER_PATTERN.match(line)) or line.startswith(BOLD_PREFIXES)


def export_filename(patient_name: Optional[str], evolution_id: int, extension: str = "docx",
                    today: Optional[datetime] = None) -> str:
    if not patient_name:
        return f"evolucao-{evolution_id}.{extension}"
    slug = re.sub(r"\s+", "_", patient_name.strip())
    day = (today or utcnow()).date().isoformat()
    return f"evolucao-{slug}-{day}.{extension}"


def render_docx(content: str) -> bytes:
    """Note text -> .docx bytes."""
    document = Document()
    for line in content.split("\n"):
        paragraph = document.add_paragraph()
        if is_separator(line):
            continue
        run = paragraph.add_run(line)
        run.font.name = FONT_NAME
        run.font.size = FONT_SIZE
        run.bold = is_header(line)

    buffer = io.BytesIO()
    document.save(buffer)
    data = buffer.getvalue()
    logger.info(f"📄 DOCX rendered: {len(data)} bytes")
    return data


def render_html(content: str, title: str = "Evolução") -> str:
    """Note text -> standalone HTML page with the same line rules."""
    paragraphs = []
    for line in content.split("\n"):
        if is_separator(line):
            paragraphs.append("<p>&nbsp;</p>")
        elif is_header(line):
            paragraphs.append(f"<p><strong>{html.escape(line)}</strong></p>")
        else:
            paragraphs.append(f"<p>{html.escape(line) or '&nbsp;'}</p>")

    body = "\n".join(paragraphs)
    return (
        "<!DOCTYPE html>\n"
        '<html lang="pt-BR">\n<head>\n<meta charset="utf-8">\n'
        f"<title>{html.escape(title)}</title>\n"
        "<style>body { font-family: Arial, sans-serif; font-size: 10pt; } p { margin: 0; }</style>\n"
        f"</head>\n<body>\n{body}\n</body>\n</html>\n"
    )
