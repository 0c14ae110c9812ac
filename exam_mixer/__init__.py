"""exam-mixer: parse, shuffle and render English exam papers."""

from .models import ExamData, Option, Question, QuestionType, Section
from .parser import parse_exam_text
from .shuffler import shuffle_exam
from .html_generator import render_exam_html

__all__ = [
    "ExamData",
    "Option",
    "Question",
    "QuestionType",
    "Section",
    "parse_exam_text",
    "shuffle_exam",
    "render_exam_html",
]

__version__ = "0.1.0"
