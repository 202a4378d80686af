# tests/test_export.py
import io
from datetime import datetime, timezone

from docx import Document

from app.export.docx_export import export_filename, is_header, is_separator, render_docx, render_html

NOTE = (
    "INTERCONSULTA HEMATOINFECTO - 03/07/2024\n"
    "───────────────────────────────────\n"
    "HD INFECTO:\n"
    "Neutropenia febril\n"
    "Avaliado por Dr. X"
)


def test_line_rules():
    assert is_separator("───────")
    assert is_header("HD INFECTO:")
    assert is_header("INTERCONSULTA HEMATOINFECTO")
    assert is_header("Avaliado por Dr. X")
    assert not is_header("Neutropenia febril")
    assert not is_header("Hb: 8,2")


def test_render_docx_formats_each_line():
    document = Document(io.BytesIO(render_docx(NOTE)))
    paragraphs = document.paragraphs

    assert [p.text for p in paragraphs] == [
        "INTERCONSULTA HEMATOINFECTO - 03/07/2024",
        "",
        "HD INFECTO:",
        "Neutropenia febril",
        "Avaliado por Dr. X",
    ]
    assert paragraphs[1].runs == []
    bold = [p.runs[0].bold for p in paragraphs if p.runs]
    assert bold == [True, True, False, True]
    assert all(p.runs[0].font.name == "Arial" for p in paragraphs if p.runs)
    assert all(p.runs[0].font.size.pt == 10 for p in paragraphs if p.runs)


def test_render_html_escapes_and_bolds():
    page = render_html("HD INFECTO:\nPCR < 5\n───", title="evolucao")
    assert "<p><strong>HD INFECTO:</strong></p>" in page
    assert "<p>PCR &lt; 5</p>" in page
    assert "<p>&nbsp;</p>" in page
    assert "<title>evolucao</title>" in page


def test_export_filename():
    today = datetime(2024, 7, 3, tzinfo=timezone.utc)
    assert export_filename("Maria da Silva", 7, today=today) == "evolucao-Maria_da_Silva-2024-07-03.docx"
    assert export_filename(None, 7) == "evolucao-7.docx"
    assert export_filename("Ana", 1, extension="html", today=today) == "evolucao-Ana-2024-07-03.html"
