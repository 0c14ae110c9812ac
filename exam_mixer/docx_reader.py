"""
docx_reader.py
--------------
Read exam sources into the annotated plain text the parser consumes.

Supported sources:
- .docx: paragraphs and table rows in document order. A bold or
  underlined run holding a lone option letter ("B", "B.", "B)") is how
  teachers mark the correct answer, so it is prefixed with {{ANS:B}}.
- .html / .htm / .doc (Word HTML export): parsed with
  BeautifulSoup; the same tagging on <b>/<strong>/<u>/<em> runs, then
  block elements become line breaks and the text is extracted.
- .txt: read as UTF-8.
"""

from __future__ import annotations

from pathlib import Path
from typing import Iterable, List
import logging
import re

from bs4 import BeautifulSoup
from docx import Document
from docx.table import Table
from docx.text.paragraph import Paragraph


logger = logging.getLogger(__name__)

ANSWER_RUN_RE = re.compile(r"^\s*([A-D])\s*[.:)]?\s*$")
ANSWER_TAGS = ["b", "strong", "u", "em"]
BLOCK_TAGS = ["p", "div", "h1", "h2", "h3", "h4", "h5", "h6", "tr", "li", "table"]
BLANK_LINES_RE = re.compile(r"\n\s*\n")

TEXT_SUFFIXES = {".txt"}
HTML_SUFFIXES = {".html", ".htm", ".doc"}


class SourceReadError(Exception):
    """A source file could not be turned into exam text; message is user-facing."""


def answer_marker(letter: str) -> str:
    return f"{{{{ANS:{letter.upper()}}}}}"


def paragraph_text(paragraph: Paragraph) -> str:
    parts: List[str] = []
    for run in paragraph.runs:
        m = ANSWER_RUN_RE.match(run.text or "")
        if m and (run.bold or run.underline):
            parts.append(f" {answer_marker(m.group(1))} ")
        parts.append(run.text or "")
    return "".join(parts).strip()


def table_lines(table: Table) -> Iterable[str]:
    for row in table.rows:
        seen = set()
        cells: List[str] = []
        for cell in row.cells:
            # merged cells are repeated once per grid column
            if id(cell._tc) in seen:
                continue
            seen.add(id(cell._tc))
            text = "\n".join(paragraph_text(p) for p in cell.paragraphs).strip()
            if text:
                cells.append(text)
        if cells:
            yield "   ".join(cells)


def read_docx(file_path: Path) -> str:
    doc = Document(str(file_path))
    lines: List[str] = []
    for block in doc.iter_inner_content():
        if isinstance(block, Paragraph):
            text = paragraph_text(block)
            if text:
                lines.append(text)
        else:
            lines.extend(table_lines(block))
    return "\n".join(lines)


def html_to_text(html: str, tag_answers: bool = True) -> str:
    soup = BeautifulSoup(html, "html.parser")
    for name in ("head", "style", "script"):
        for tag in soup.find_all(name):
            tag.decompose()

    if tag_answers:
        for tag in soup.find_all(ANSWER_TAGS):
            # <b><u>B</u></b> is one mark
            if tag.find_parent(ANSWER_TAGS) is not None:
                continue
            m = ANSWER_RUN_RE.match(tag.get_text())
            if m:
                tag.insert_before(f" {answer_marker(m.group(1))} ")

    for br in soup.find_all("br"):
        br.replace_with("\n")
    for cell in soup.find_all(["td", "th"]):
        cell.append(" ")
    for block in soup.find_all(BLOCK_TAGS):
        block.append("\n\n")

    # separator-less get_text keeps "<b>B</b>. fast" on one line
    text = soup.get_text()
    text = "\n".join(line.strip() for line in text.split("\n"))
    return BLANK_LINES_RE.sub("\n\n", text).strip()


def read_source(file_path: Path) -> str:
    """Read any supported source file; raise SourceReadError otherwise."""
    path = Path(file_path)
    suffix = path.suffix.lower()
    if suffix not in TEXT_SUFFIXES | HTML_SUFFIXES | {".docx"}:
        raise SourceReadError("Vui lòng tải lên file .docx hoặc .txt, hoặc dán nội dung vào khung.")
    try:
        if suffix == ".docx":
            text = read_docx(path)
        elif suffix in HTML_SUFFIXES:
            text = html_to_text(path.read_text(encoding="utf-8-sig", errors="replace"))
        else:
            text = path.read_text(encoding="utf-8-sig")
    except Exception as exc:
        logger.error("Failed to read %s: %s", path, exc)
        raise SourceReadError("Không thể đọc file.") from exc
    logger.info("Read %d characters from %s", len(text), path.name)
    return text
