"""
models.py
---------
Exam data model shared by the parser, shuffler and renderer.

All records are frozen; the parser builds them once and the shuffler builds
new ones with `dataclasses.replace`, so one parsed exam can be shuffled any
number of times without the variants sharing state.

Dict form (stable interchange, e.g. JSON dumps in tests):
{
  'title': str,
  'sections': [{
      'id': str, 'type': 'DISCRETE'|'READING'|'CLOZE',
      'header': str, 'passage': str,
      'questions': [{
          'id': str, 'number': int, 'originalNumber': int,
          'content': str, 'answer': Optional[str],
          'options': [{'label': str, 'content': str}],
      }],
  }],
}
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Dict, Optional, Tuple


class QuestionType(str, Enum):
    DISCRETE = "DISCRETE"
    READING = "READING"  # read a passage, answer questions about it
    CLOZE = "CLOZE"  # fill numbered gaps in a passage


@dataclass(frozen=True)
class Option:
    label: str
    content: str

    def to_dict(self) -> Dict:
        return {"label": self.label, "content": self.content}

    @classmethod
    def from_dict(cls, data: Dict) -> "Option":
        return cls(label=data["label"], content=data.get("content", ""))


@dataclass(frozen=True)
class Question:
    id: str
    number: int
    original_number: int
    content: str = ""
    options: Tuple[Option, ...] = ()
    answer: Optional[str] = None

    def option_for(self, label: Optional[str]) -> Optional[Option]:
        """Return the option carrying `label`, if any."""
        if label is None:
            return None
        for opt in self.options:
            if opt.label == label:
                return opt
        return None

    def to_dict(self) -> Dict:
        return {
            "id": self.id,
            "number": self.number,
            "originalNumber": self.original_number,
            "content": self.content,
            "options": [o.to_dict() for o in self.options],
            "answer": self.answer,
        }

    @classmethod
    def from_dict(cls, data: Dict) -> "Question":
        number = int(data["number"])
        return cls(
            id=data.get("id", ""),
            number=number,
            original_number=int(data.get("originalNumber", number)),
            content=data.get("content", ""),
            options=tuple(Option.from_dict(o) for o in data.get("options", [])),
            answer=data.get("answer"),
        )


@dataclass(frozen=True)
class Section:
    id: str
    type: QuestionType = QuestionType.DISCRETE
    header: str = ""
    passage: str = ""
    questions: Tuple[Question, ...] = ()

    def to_dict(self) -> Dict:
        return {
            "id": self.id,
            "type": self.type.value,
            "header": self.header,
            "passage": self.passage,
            "questions": [q.to_dict() for q in self.questions],
        }

    @classmethod
    def from_dict(cls, data: Dict) -> "Section":
        return cls(
            id=data.get("id", ""),
            type=QuestionType(data.get("type", QuestionType.DISCRETE.value)),
            header=data.get("header") or "",
            passage=data.get("passage") or "",
            questions=tuple(Question.from_dict(q) for q in data.get("questions", [])),
        )


@dataclass(frozen=True)
class ExamData:
    title: str = "Exam"
    sections: Tuple[Section, ...] = field(default_factory=tuple)

    @property
    def questions(self) -> Tuple[Question, ...]:
        """All questions in section order."""
        return tuple(q for sec in self.sections for q in sec.questions)

    def to_dict(self) -> Dict:
        return {
            "title": self.title,
            "sections": [s.to_dict() for s in self.sections],
        }

    @classmethod
    def from_dict(cls, data: Dict) -> "ExamData":
        return cls(
            title=data.get("title", "Exam"),
            sections=tuple(Section.from_dict(s) for s in data.get("sections", [])),
        )
