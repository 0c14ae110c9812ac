"""
text_processor.py
-----------------
Regex helpers shared by the parser and shuffler: line cleanup, answer
markers, answer-key tables, gap markers and numbered header ranges.
"""

from __future__ import annotations

from typing import Dict, List, Mapping, Optional, Tuple
import re


NBSP_RE = re.compile(r"[\u00a0\u3000]")
# "rude.A. polite" / "rude. B) kind" -> option moved onto its own line
INLINE_OPTION_RE = re.compile(r"([a-z0-9])\.\s*([A-D][.)])")
OPTION_ROW_RE = re.compile(r"^\s*(?:\{\{ANS:[A-D]\}\}\s*)?A[.)]\s")
OPTION_ROW_SPLIT_RE = re.compile(r"[ \t]+(?=(?:\{\{ANS:[A-D]\}\}\s*)?[B-D][.)]\s)")
INLINE_TAG_RE = re.compile(r"</?(?:b|u|strong|em|i|span)\b[^>]*>", re.IGNORECASE)

ANSWER_MARKER_RE = re.compile(r"\{\{ANS:([A-D])\}\}", re.IGNORECASE)
ANSWER_KEY_HEADING_RE = re.compile(
    r"^(?:Answer Key|Đáp án|KEY|ĐÁP ÁN)(?:\b.*(?:Code|Mã đề).*)?$", re.IGNORECASE
)
ANSWER_KEY_PAIR_RE = re.compile(r"(\d+)[.\s:-]*([A-D])", re.IGNORECASE)

LIST_ITEM_RE = re.compile(r"^(?:[a-z]\.|[0-9]{1,2}\.|-)\s")
GAP_MARKER_RE = re.compile(r"\(\d+\)")
GAP_REFERENCE_RE = re.compile(r"Gap \d+", re.IGNORECASE)
QUESTION_PREFIX_RE = re.compile(
    r"^(?:Question\s*\d+[.:]?|Gap\s*\d+[.:]?|Câu\s*\d+[.:]?|\(\d+\))\s*", re.IGNORECASE
)
GAP_SUFFIX_RE = re.compile(r"\s*Gap\s*\d+[.:]?$", re.IGNORECASE)
HEADER_RANGE_RE = re.compile(r"(\b\d+\b)(\s*(?:to|-|–|đến)\s*)(\b\d+\b)", re.IGNORECASE)
GAP_TOKEN_RE = re.compile(r"\{\{GAP_TOKEN_(\d+)\}\}")


def normalize_text(text: str) -> str:
    text = text.replace("\r\n", "\n").replace("\r", "\n")
    text = INLINE_OPTION_RE.sub(r"\1.\n\2", text)
    return "\n".join(split_option_row(line) for line in text.split("\n"))


def split_option_row(line: str) -> str:
    """Break "A. x   B. y   C. z" (all options on one line) into one option per line."""
    if not OPTION_ROW_RE.match(line):
        return line
    return OPTION_ROW_SPLIT_RE.sub("\n", line)


def clean_line(line: str) -> str:
    line = INLINE_TAG_RE.sub("", line)
    return NBSP_RE.sub(" ", line).strip()


def extract_answer_marker(line: str) -> Tuple[str, Optional[str]]:
    """Strip every {{ANS:X}} marker; return the cleaned line and the last letter."""
    found = ANSWER_MARKER_RE.findall(line)
    if not found:
        return line, None
    return ANSWER_MARKER_RE.sub("", line).strip(), found[-1].upper()


def split_answer_key(lines: List[str]) -> Tuple[List[str], Dict[int, str]]:
    """Cut a trailing answer-key block off `lines`.

    The block starts at the last line that announces a key ("Answer Key",
    "Đáp án", ...). Returns the remaining content lines and the
    original-number -> letter table read from the block.
    """
    for i in range(len(lines) - 1, -1, -1):
        if ANSWER_KEY_HEADING_RE.match(clean_line(lines[i])):
            key_text = " ".join(lines[i + 1:])
            table = {int(num): letter.upper() for num, letter in ANSWER_KEY_PAIR_RE.findall(key_text)}
            return lines[:i], table
    return lines, {}


def is_list_item(line: str) -> bool:
    return bool(LIST_ITEM_RE.match(line))


def has_gap_markers(text: str) -> bool:
    return bool(GAP_MARKER_RE.search(text))


def mentions_gap(text: str) -> bool:
    return bool(GAP_REFERENCE_RE.search(text))


def strip_question_prefixes(content: str) -> str:
    """Remove stacked "Question N." / "Gap N." / "(N)" prefixes and a trailing "Gap N"."""
    prev = None
    while content != prev:
        prev = content
        content = QUESTION_PREFIX_RE.sub("", content)
        content = GAP_SUFFIX_RE.sub("", content)
    return content.strip()


def rewrite_gap_markers(passage: str, mapping: Mapping[int, int]) -> str:
    # Two phases so that renaming (2)->(5) cannot be caught again by (5)->(3).
    text = passage
    for old, new in mapping.items():
        text = text.replace(f"({old})", f"{{{{GAP_TOKEN_{new}}}}}")
    return GAP_TOKEN_RE.sub(r"(\1)", text)


def rewrite_header_range(header: str, start: int, end: int) -> str:
    return HEADER_RANGE_RE.sub(lambda m: f"{start}{m.group(2)}{end}", header)
