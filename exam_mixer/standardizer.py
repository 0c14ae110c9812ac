"""
standardizer.py
---------------
Rewrite raw exam text into the convention the parser reads best, using
Google Gemini. Failures surface as localized messages; nothing is retried.
"""

from __future__ import annotations

from typing import Optional
import logging
import os

import google.generativeai as genai


logger = logging.getLogger(__name__)

DEFAULT_MODEL = "gemini-2.5-flash"
API_KEY_ENV_VARS = ("GEMINI_API_KEY", "API_KEY")

SYSTEM_INSTRUCTION = """
You are an expert assistant for English teachers in Vietnam. Standardize English exam content into a strict, clean format.

INPUT: Raw text from a PDF, Word document, or OCR scan. It may contain questions, reading passages, and answers.
The input may contain markers like "{{ANS:A}}": the correct answer for that question is A.

OUTPUT: A clean text block following these rules:

1. Sections: group related questions and start each group with one tag:
   [SECTION: PHONETICS] (pronunciation/stress)
   [SECTION: DISCRETE] (grammar, vocabulary, speaking)
   [SECTION: READING] (read a text and answer questions)
   [SECTION: CLOZE] (read a text and fill in gaps)
   Enclose any reading passage in [PASSAGE_START] and [PASSAGE_END].
   In cloze passages mark the gaps as (1), (2), (3)... matching the question numbers.
   Keep instructions such as "Mark the letter A, B, C, or D ...".

2. Questions: "Question X. [question text]".
   For cloze questions never write "Gap X", "Number X" or "(X)" in the question text.
   Put every sub-part of an ordering question (a, b, c, ...) on its own line ("a. Text...").

3. Options, one per line, with no other numbering before the letter:
   A. [option text]
   B. [option text]
   C. [option text]
   D. [option text]

4. Answers: after the options write "Answer: [Letter]".
   Convert "{{ANS:X}}" to "Answer: X"; also use answer keys at the end or bold/underlined letters.
   Omit the Answer line when no answer is known.

EXAMPLE OUTPUT:

[SECTION: CLOZE]
Read the following passage and mark the letter A, B, C, or D.
[PASSAGE_START]
Environmental pollution is a term that (1) ___ to all the ways.
[PASSAGE_END]
Question 1.
A. refers
B. attends
C. directs
D. aims
Answer: A

Fix OCR errors (e.g. "1.D" -> "Answer: D") but do not change the content or meaning. Keep Vietnamese instructions intact.
"""


class StandardizationError(Exception):
    """The AI service call failed (network, quota, bad key)."""

    default_message = "Lỗi AI: Vui lòng kiểm tra lại API Key hoặc kết nối mạng."

    def __init__(self, message: Optional[str] = None):
        super().__init__(message or self.default_message)


class MissingCredentialError(StandardizationError):
    default_message = "Vui lòng nhập API Key trong phần Cài đặt."


class EmptyInputError(StandardizationError):
    default_message = "Vui lòng nhập nội dung."


def resolve_api_key(api_key: Optional[str] = None) -> Optional[str]:
    if api_key:
        return api_key
    for name in API_KEY_ENV_VARS:
        value = os.environ.get(name)
        if value:
            return value
    return None


def standardize_exam_content(raw_text: str, api_key: Optional[str] = None, model_name: str = DEFAULT_MODEL) -> str:
    key = resolve_api_key(api_key)
    if not key:
        raise MissingCredentialError()
    if not raw_text or not raw_text.strip():
        raise EmptyInputError()

    try:
        genai.configure(api_key=key)
        model = genai.GenerativeModel(model_name, system_instruction=SYSTEM_INSTRUCTION)
        response = model.generate_content(raw_text, generation_config={"temperature": 0.1})
        text = getattr(response, "text", "") or ""
    except Exception as exc:
        logger.error("Gemini call failed: %s", exc)
        raise StandardizationError() from exc

    logger.info("Standardized %d -> %d characters with %s", len(raw_text), len(text), model_name)
    return text
