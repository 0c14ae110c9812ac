"""
shuffler.py
-----------
Produce a randomized variant of a parsed exam.

Sections are permuted, questions are permuted inside every non-cloze
section, and options are permuted inside every question. Display numbers
are reassigned 1..N across the whole exam, answers follow the option that
held the correct content, and cloze passages / header ranges are rewritten
to the new numbers. The input is never mutated: every call builds a fresh
ExamData, so one parse can feed any number of exam codes.
"""

from __future__ import annotations

from dataclasses import replace
from typing import Dict, List, Optional, Sequence, Tuple, TypeVar
import logging
import random

from .models import ExamData, Option, Question, QuestionType, Section
from . import text_processor as tp


logger = logging.getLogger(__name__)

T = TypeVar("T")


def shuffle_array(items: Sequence[T], rng: random.Random) -> List[T]:
    """Uniform permutation (Fisher-Yates via Random.shuffle) of a copy of `items`."""
    arr = list(items)
    rng.shuffle(arr)
    return arr


def shuffle_options(question: Question, rng: random.Random) -> Question:
    order = shuffle_array(range(len(question.options)), rng)
    correct = question.option_for(question.answer)
    options: List[Option] = []
    answer: Optional[str] = None
    for idx, old_idx in enumerate(order):
        old = question.options[old_idx]
        label = chr(ord("A") + idx)
        options.append(Option(label=label, content=old.content))
        # Follow the correct option by identity; option texts may repeat.
        if correct is not None and old is correct:
            answer = label
    return replace(question, options=tuple(options), answer=answer)


def shuffle_section(
    section: Section, start: int, rng: random.Random
) -> Tuple[Section, int]:
    """Shuffle one section whose first question gets number `start`.

    Returns the new section and the next free question number.
    """
    is_cloze = section.type == QuestionType.CLOZE
    ordered = list(section.questions) if is_cloze else shuffle_array(section.questions, rng)

    counter = start
    gap_map: Dict[int, int] = {}
    questions: List[Question] = []
    for q in ordered:
        gap_map[q.original_number] = counter
        q = shuffle_options(q, rng)
        questions.append(replace(q, number=counter, content=tp.strip_question_prefixes(q.content)))
        counter += 1

    passage = section.passage
    if is_cloze and passage:
        passage = tp.rewrite_gap_markers(passage, gap_map)

    header = section.header
    if header and questions:
        header = tp.rewrite_header_range(header, start, counter - 1)

    new_section = replace(section, header=header, passage=passage, questions=tuple(questions))
    return new_section, counter


def shuffle_exam(exam: ExamData, rng: Optional[random.Random] = None) -> ExamData:
    rng = rng or random.Random()
    counter = 1
    sections: List[Section] = []
    for section in shuffle_array(exam.sections, rng):
        new_section, counter = shuffle_section(section, counter, rng)
        sections.append(new_section)
    logger.debug("Shuffled %d sections, %d questions", len(sections), counter - 1)
    return replace(exam, sections=tuple(sections))
