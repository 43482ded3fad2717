"""
python-docx helpers around the pandoc output.

- inventory_docx(): headings/paragraphs/tables of a produced document
- create_reference_docx(): build the journal's reference style template
"""
from __future__ import annotations
from typing import Optional
from pathlib import Path
import logging
import subprocess

from docx import Document
from docx.shared import Pt, Cm
from docx.oxml.ns import qn

from latex2docx.errors import ConversionError
from latex2docx.models import OutputInventory

logger = logging.getLogger(__name__)

# Journal layout
BODY_FONT = "Times New Roman"
BODY_SIZE_PT = 12
BODY_LINE_SPACING = 1.5
FOOTNOTE_SIZE_PT = 10
FOOTNOTE_LINE_SPACING = 1.0
FIRST_LINE_INDENT_CM = 1.25
MARGIN_CM = 2.54

# Paragraph styles pandoc uses for running text
BODY_STYLES = ["Normal", "Body Text", "First Paragraph"]
FOOTNOTE_STYLES = ["Footnote Text"]
HEADING_STYLES = ["Title", "Heading 1", "Heading 2", "Heading 3", "Heading 4"]


def inventory_docx(docx_path: str) -> OutputInventory:
    """Count headings, paragraphs and tables. Never raises."""
    try:
        doc = Document(docx_path)
    except Exception as e:
        logger.warning(f"Could not read {docx_path}: {type(e).__name__}: {e}")
        return OutputInventory(status="failed", message=f"{type(e).__name__}: {e}")

    inv = OutputInventory(status="ok", table_count=len(doc.tables))
    for p in doc.paragraphs:
        if not p.text.strip():
            continue
        style = p.style.name if p.style else ""
        if style.lower().startswith("heading") or style == "Title":
            inv.headings.append(p.text.strip())
        else:
            inv.paragraph_count += 1
    return inv


def _get_style(doc, name: str):
    try:
        return doc.styles[name]
    except KeyError:
        return None


def _set_font(style, name: str, size_pt: int) -> None:
    style.font.name = name
    style.font.size = Pt(size_pt)
    # font.name sets w:ascii and w:hAnsi only
    rfonts = style.element.get_or_add_rPr().find(qn("w:rFonts"))
    if rfonts is not None:
        rfonts.set(qn("w:cs"), name)


def apply_journal_styles(doc) -> None:
    """Apply journal fonts, spacing, indents and margins to a document in place."""
    for name in BODY_STYLES:
        style = _get_style(doc, name)
        if style is None:
            continue
        _set_font(style, BODY_FONT, BODY_SIZE_PT)
        style.paragraph_format.line_spacing = BODY_LINE_SPACING
        style.paragraph_format.first_line_indent = Cm(FIRST_LINE_INDENT_CM)

    for name in FOOTNOTE_STYLES:
        style = _get_style(doc, name)
        if style is None:
            continue
        _set_font(style, BODY_FONT, FOOTNOTE_SIZE_PT)
        style.paragraph_format.line_spacing = FOOTNOTE_LINE_SPACING
        style.paragraph_format.first_line_indent = Cm(0)

    for name in HEADING_STYLES:
        style = _get_style(doc, name)
        if style is not None:
            style.font.name = BODY_FONT

    for section in doc.sections:
        section.top_margin = Cm(MARGIN_CM)
        section.bottom_margin = Cm(MARGIN_CM)
        section.left_margin = Cm(MARGIN_CM)
        section.right_margin = Cm(MARGIN_CM)


def create_reference_docx(out_path: str, pandoc: Optional[str] = None) -> str:
    """
    Build the journal reference template at ``out_path``.

    Starts from pandoc's own reference.docx so every style pandoc emits is
    present; without pandoc, python-docx's default template is used.
    """
    out = Path(out_path)
    out.parent.mkdir(parents=True, exist_ok=True)

    if pandoc:
        cmd = [pandoc, "-o", str(out), "--print-default-data-file", "reference.docx"]
        logger.info(f"Extracting pandoc reference.docx: {' '.join(cmd)}")
        result = subprocess.run(cmd, capture_output=True, text=True)
        if result.returncode != 0:
            raise ConversionError(
                f"pandoc could not export reference.docx: {result.stderr.strip()}",
                returncode=result.returncode,
                stderr=result.stderr,
            )
        doc = Document(str(out))
    else:
        logger.info("pandoc unavailable, starting from python-docx default template")
        doc = Document()

    apply_journal_styles(doc)
    doc.save(str(out))
    return str(out)
