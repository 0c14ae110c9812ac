"""
pipeline.py
-----------
One parse, many independently shuffled exam codes.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import List, Optional
import logging
import random
import re

from .models import ExamData
from .parser import parse_exam_text
from .shuffler import shuffle_exam
from .html_generator import render_exam_html


logger = logging.getLogger(__name__)

FIRST_CODE = 101
CODE_SPLIT_RE = re.compile(r"[,;\s]+")


class NoQuestionsFoundError(Exception):
    """The text parsed, but nothing in it looked like a question."""

    def __init__(self, message: str = "Không tìm thấy câu hỏi. Hãy kiểm tra định dạng hoặc dùng Chuẩn hóa AI."):
        super().__init__(message)


@dataclass(frozen=True)
class GeneratedExam:
    code: str
    exam: ExamData
    html: str


def resolve_exam_codes(codes: Optional[str] = None, quantity: int = 4) -> List[str]:
    """Explicit codes ("101, 102; 103") win; otherwise `quantity` codes from 101 up."""
    if codes is not None:
        parsed = [c for c in CODE_SPLIT_RE.split(codes.strip()) if c]
        return parsed or [str(FIRST_CODE)]
    qty = quantity if quantity > 0 else 1
    return [str(FIRST_CODE + i) for i in range(qty)]


def generate_exams(
    text: str,
    codes: List[str],
    rng: Optional[random.Random] = None,
    title: str = "Exam",
) -> List[GeneratedExam]:
    if not text or not text.strip():
        raise NoQuestionsFoundError("Không có nội dung.")
    parsed = parse_exam_text(text, title=title)
    if not parsed.sections:
        raise NoQuestionsFoundError()

    rng = rng or random.Random()
    results = []
    for code in codes:
        variant = shuffle_exam(parsed, rng)
        results.append(GeneratedExam(code=code, exam=variant, html=render_exam_html(variant, code)))
        logger.info("Exam %s: %d questions", code, len(variant.questions))
    return results
