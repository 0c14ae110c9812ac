"""
parser.py
---------
Turn loosely structured exam text into an ExamData model.

Accepted input (any mix of the following):
- the standardized convention:
    [SECTION: CLOZE]
    Read the following passage and mark the letter A, B, C, or D ...
    [PASSAGE_START]
    Pollution is a term that (1) ___ to all the ways ...
    [PASSAGE_END]
    Question 1.
    A. refers
    B. attends
    Answer: A
- free-form paste or Word extraction: "Câu 3:", "12.", "A)" options,
  instruction lines such as "Mark the letter ...", {{ANS:X}} markers,
  and a trailing "Answer Key" / "Đáp án" table ("1. A 2. C ...").

The parse is a single forward fold over the lines. Each line runs through
RULES in order; the first handler that returns a new state wins. The
parser never raises: unrecognizable input yields an exam with no sections.
"""

from __future__ import annotations

from dataclasses import dataclass, replace
from typing import Callable, Dict, List, Optional, Tuple
import logging
import re
import uuid

from .models import ExamData, Option, Question, QuestionType, Section
from . import text_processor as tp


logger = logging.getLogger(__name__)

SECTION_TAG_RE = re.compile(r"^\[SECTION:\s*(.*)\]", re.IGNORECASE)
PASSAGE_START_RE = re.compile(r"^\[PASSAGE_START\]", re.IGNORECASE)
PASSAGE_END_RE = re.compile(r"^\[PASSAGE_END\]", re.IGNORECASE)
INSTRUCTION_RE = re.compile(
    r"^(Mark the letter|Read the following|Choose the|Circle the|Đọc đoạn văn|"
    r"Chọn đáp án|Bài tập|Indicate the word)",
    re.IGNORECASE,
)
QUESTION_RE = re.compile(r"^(?:Question|Câu|Q)\s*(\d+)[.:]\s*(.*)", re.IGNORECASE)
NUMBERED_RE = re.compile(r"^(\d+)[.:]\s+(.*)")
OPTION_RE = re.compile(r"^([A-D])[.)]\s+(.*)")
ANSWER_LINE_RE = re.compile(
    r"^(?i:Answer|Đáp án|Key)\s*(?:[:.\-]\s*([A-D])\b|[:.\-]?\s*([A-Da-d])[.)]?\s*$)"
)

LONG_LINE = 150


@dataclass(frozen=True)
class ParseState:
    sections: Tuple[Section, ...] = ()
    section: Optional[Section] = None
    forced: bool = False
    question: Optional[Question] = None
    in_passage: bool = False
    passage_buffer: Tuple[str, ...] = ()
    pending_answer: Optional[str] = None


Handler = Callable[[str, ParseState], Optional[ParseState]]


def _new_id(prefix: str) -> str:
    return f"{prefix}-{uuid.uuid4().hex[:12]}"


def _join(existing: str, addition: str, sep: str) -> str:
    return f"{existing}{sep}{addition}" if existing else addition


def detect_type(section: Section) -> QuestionType:
    """Infer a section's type from its text when no [SECTION: ...] tag forced it."""
    combined = (section.header or "") + (section.passage or "")
    q_content = " ".join(q.content for q in section.questions)
    if tp.has_gap_markers(combined) or tp.mentions_gap(q_content):
        return QuestionType.CLOZE
    if section.passage and section.questions:
        return QuestionType.READING
    return QuestionType.DISCRETE


def normalize_question(question: Question) -> Question:
    """Relabel options A.. by position and drop an answer that names no option."""
    labels = [o.label for o in question.options]
    expected = [chr(ord("A") + i) for i in range(len(labels))]
    options = question.options
    answer = question.answer
    if labels != expected:
        if answer in labels:
            answer = expected[labels.index(answer)]
        options = tuple(Option(label=expected[i], content=o.content) for i, o in enumerate(options))
    if answer is not None and answer not in expected:
        logger.warning(
            "Question %d: answer %s matches no option, dropped", question.original_number, answer
        )
        answer = None
    return replace(question, options=options, answer=answer)


# --- state transitions -------------------------------------------------------

def _flush_passage(state: ParseState) -> ParseState:
    if not state.in_passage and not state.passage_buffer:
        return state
    section = state.section
    if section is not None and state.passage_buffer:
        section = replace(section, passage=_join(section.passage, "\n".join(state.passage_buffer), "\n"))
    return replace(state, section=section, in_passage=False, passage_buffer=())


def _finalize_question(state: ParseState) -> ParseState:
    if state.question is None:
        return state
    section = state.section
    if section is not None:
        section = replace(section, questions=section.questions + (normalize_question(state.question),))
    return replace(state, section=section, question=None)


def _close_section(state: ParseState) -> ParseState:
    state = _finalize_question(_flush_passage(state))
    section = state.section
    if section is None:
        return state
    if not state.forced:
        section = replace(section, type=detect_type(section))
    if section.questions or section.passage:
        logger.debug(
            "Closed %s section with %d questions", section.type.value, len(section.questions)
        )
        return replace(state, sections=state.sections + (section,), section=None, forced=False)
    return replace(state, section=None, forced=False)


def _open_section(
    state: ParseState, header: str = "", forced_type: Optional[QuestionType] = None
) -> ParseState:
    state = _close_section(state)
    section = Section(
        id=_new_id("sec"),
        type=forced_type or QuestionType.DISCRETE,
        header=header,
    )
    return replace(state, section=section, forced=forced_type is not None, pending_answer=None)


# --- classification rules, in priority order ---------------------------------

def _on_section_tag(line: str, state: ParseState) -> Optional[ParseState]:
    m = SECTION_TAG_RE.match(line)
    if not m:
        return None
    kind = m.group(1).upper()
    forced = QuestionType.DISCRETE
    if "CLOZE" in kind:
        forced = QuestionType.CLOZE
    elif "READING" in kind:
        forced = QuestionType.READING
    return _open_section(state, "", forced)


def _on_passage(line: str, state: ParseState) -> Optional[ParseState]:
    # markers never carry across a passage boundary
    if PASSAGE_START_RE.match(line):
        return replace(_finalize_question(state), in_passage=True, pending_answer=None)
    if PASSAGE_END_RE.match(line):
        return replace(_flush_passage(state), pending_answer=None)
    if state.in_passage:
        return replace(state, passage_buffer=state.passage_buffer + (line,), pending_answer=None)
    return None


def _on_instruction(line: str, state: ParseState) -> Optional[ParseState]:
    if not INSTRUCTION_RE.match(line):
        return None
    section = state.section
    if section.questions or section.passage or state.question is not None:
        return _open_section(state, line)
    if not section.header:
        return replace(state, section=replace(section, header=line))
    return None


def _on_question(line: str, state: ParseState) -> Optional[ParseState]:
    m = QUESTION_RE.match(line) or NUMBERED_RE.match(line)
    if not m:
        return None
    state = _flush_passage(_finalize_question(state))
    number = int(m.group(1))
    question = Question(
        id=_new_id("q"),
        number=number,
        original_number=number,
        content=m.group(2).strip(),
        answer=state.pending_answer,
    )
    return replace(state, question=question, pending_answer=None)


def _on_option(line: str, state: ParseState) -> Optional[ParseState]:
    m = OPTION_RE.match(line)
    if not m or state.question is None:
        return None
    question = state.question
    question = replace(
        question,
        options=question.options + (Option(label=m.group(1).upper(), content=m.group(2).strip()),),
        answer=state.pending_answer or question.answer,
    )
    return replace(state, question=question, pending_answer=None)


def _on_answer_line(line: str, state: ParseState) -> Optional[ParseState]:
    m = ANSWER_LINE_RE.match(line)
    if not m or state.question is None:
        return None
    letter = m.group(1) or m.group(2)
    return replace(state, question=replace(state.question, answer=letter.upper()))


def _on_fallback(line: str, state: ParseState) -> Optional[ParseState]:
    if state.question is not None:
        sep = "\n" if tp.is_list_item(line) else " "
        content = _join(state.question.content, line, sep)
        return replace(state, question=replace(state.question, content=content))
    section = state.section
    if len(line) > LONG_LINE or section.passage:
        section = replace(section, passage=_join(section.passage, line, "\n"))
    else:
        section = replace(section, header=_join(section.header, line, "\n"))
    return replace(state, section=section)


RULES: List[Tuple[str, Handler]] = [
    ("section_tag", _on_section_tag),
    ("passage", _on_passage),
    ("instruction", _on_instruction),
    ("question", _on_question),
    ("option", _on_option),
    ("answer_line", _on_answer_line),
    ("fallback", _on_fallback),
]


def classify_line(line: str, state: ParseState) -> Tuple[str, ParseState]:
    """Apply the first matching rule; return its name and the new state."""
    for name, handler in RULES:
        new_state = handler(line, state)
        if new_state is not None:
            return name, new_state
    return "none", state


def _apply_answer_key(section: Section, key: Dict[int, str]) -> Section:
    questions = []
    for q in section.questions:
        letter = key.get(q.original_number)
        if q.answer is None and letter and q.option_for(letter) is not None:
            q = replace(q, answer=letter)
        questions.append(q)
    return replace(section, questions=tuple(questions))


def parse_exam_text(raw_text: str, title: str = "Exam") -> ExamData:
    lines = tp.normalize_text(raw_text or "").split("\n")
    lines, answer_key = tp.split_answer_key(lines)
    if answer_key:
        logger.debug("Answer key table with %d entries", len(answer_key))

    state = _open_section(ParseState())
    for raw in lines:
        line, marker = tp.extract_answer_marker(tp.clean_line(raw))
        if marker:
            state = replace(state, pending_answer=marker)
        if not line:
            continue
        _, state = classify_line(line, state)
    state = _close_section(state)

    sections = tuple(_apply_answer_key(sec, answer_key) for sec in state.sections)
    exam = ExamData(title=title, sections=sections)
    logger.info("Parsed %d sections, %d questions", len(sections), len(exam.questions))
    return exam
