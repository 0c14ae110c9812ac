"""Shared pytest fixtures."""

import random

import pytest

from exam_mixer.models import ExamData, Option, Question, QuestionType, Section
from exam_mixer.parser import parse_exam_text


STANDARD_EXAM = """[SECTION: DISCRETE]
Mark the letter A, B, C, or D to indicate the correct answer to each of the following questions.
Question 1. She runs very ___.
A. slow
B. fast
C. slowly
D. fastly
Answer: B
Question 2. They ___ football every Sunday.
A. plays
B. play
C. playing
D. played
Answer: B
[SECTION: CLOZE]
Read the following passage and mark the letter A, B, C, or D to indicate the correct option that best fits each of the numbered blanks from 3 to 5.
[PASSAGE_START]
Pollution is a problem that (3) ___ everyone. Cars (4) ___ smoke into the air, and factories (5) ___ waste into rivers.
[PASSAGE_END]
Question 3.
A. affects
B. effects
C. infects
D. defects
Answer: A
Question 4.
A. give
B. take
C. release
D. hold
Answer: C
Question 5.
A. dump
B. jump
C. pump
D. bump
Answer: A
[SECTION: READING]
Read the following passage and answer the questions from 6 to 7.
[PASSAGE_START]
Tom lives in a small village. He walks to school every day.
[PASSAGE_END]
Question 6. Where does Tom live?
A. In a city
B. In a village
C. In a town
D. On a farm
Answer: B
Question 7. How does Tom go to school?
A. By bus
B. By bike
C. On foot
D. By car
Answer: C
"""


class ReverseRandom:
    """Deterministic stand-in for random.Random: every shuffle reverses."""

    def shuffle(self, x):
        x.reverse()


def make_question(number, contents, answer=None, content=""):
    options = tuple(Option(label=chr(ord("A") + i), content=c) for i, c in enumerate(contents))
    return Question(
        id=f"q{number}",
        number=number,
        original_number=number,
        content=content,
        options=options,
        answer=answer,
    )


@pytest.fixture
def standard_text():
    return STANDARD_EXAM


@pytest.fixture
def standard_exam():
    return parse_exam_text(STANDARD_EXAM)


@pytest.fixture
def rng():
    """Seeded random source so shuffles are reproducible."""
    return random.Random(2025)


@pytest.fixture
def reverse_rng():
    return ReverseRandom()


@pytest.fixture
def cloze_after_discrete():
    """Cloze section (questions 1-3) listed before a six-question discrete section."""
    cloze = Section(
        id="sec-cloze",
        type=QuestionType.CLOZE,
        header="Read the passage and fill in the blanks. Questions 1 to 3",
        passage="The cat (1) ___ on the mat, (2) ___ milk and (3) ___ asleep.",
        questions=(
            make_question(1, ["sat", "sit", "sits", "sitting"], "A"),
            make_question(2, ["drank", "drink", "drinks", "drunk"], "A"),
            make_question(3, ["fell", "fall", "falls", "fallen"], "A"),
        ),
    )
    discrete = Section(
        id="sec-discrete",
        type=QuestionType.DISCRETE,
        questions=tuple(
            make_question(n, [f"opt{n}a", f"opt{n}b", f"opt{n}c", f"opt{n}d"], "B", content=f"Item {n}")
            for n in range(4, 10)
        ),
    )
    return ExamData(title="Exam", sections=(cloze, discrete))
