"""
html_generator.py
-----------------
Render an exam variant as a Word-compatible HTML document.

One document per exam code: title with the code, sections (header,
passage, numbered questions with lettered options) and an answer-key
table of ANSWER_COLUMNS columns at the end. Saved with a .doc suffix,
Word opens it directly.
"""

from __future__ import annotations

from datetime import date
from pathlib import Path
from typing import Dict, List, Optional, Tuple

from .models import ExamData, Question, Section


ANSWER_COLUMNS = 10

HEADER_TMPL = """<html xmlns:o='urn:schemas-microsoft-com:office:office' xmlns:w='urn:schemas-microsoft-com:office:word' xmlns='http://www.w3.org/TR/REC-html40'>
<head>
  <meta charset="utf-8">
  <title>%TITLE%</title>
  <style>
    body { font-family: 'Be Vietnam Pro', 'Times New Roman', serif; font-size: 12pt; line-height: 1.4; color: #000; }
    p { margin: 5px 0; }
    .exam-title { text-align: center; text-transform: uppercase; }
    .section-header { font-weight: bold; margin-top: 15px; margin-bottom: 5px; }
    .passage { background: #f9f9f9; padding: 10px; border: 1px dashed #ccc; margin-bottom: 10px; font-style: italic; }
    .question { margin-bottom: 5px; }
    .question-label, .option-label { font-weight: bold; }
    .options { margin-left: 15px; margin-bottom: 10px; }
    .option { margin: 2px 0; }
    .answer-key { margin-top: 30px; border-top: 2px solid #000; padding-top: 20px; }
    .answer-key h3 { text-align: center; color: #1d4ed8; }
    table { border-collapse: collapse; width: 100%; font-size: 11pt; border: 2px solid #000; }
    td { border: 1px solid #000; padding: 8px; text-align: center; font-weight: bold; color: #1e3a8a; }
  </style>
</head>
<body>
<h2 class="exam-title">MÃ ĐỀ: %CODE%</h2>
"""


FOOTER_TMPL = """
</body>
</html>
"""


def html_escape(s: str) -> str:
    repl = {
        "&": "&amp;",
        "<": "&lt;",
        ">": "&gt;",
        '"': "&quot;",
    }
    out = []
    for ch in s:
        out.append(repl.get(ch, ch))
    return "".join(out).replace("\n", "<br/>")


def render_section(section: Section) -> List[str]:
    body = []
    if section.header:
        body.append(f"<div class='section-header'>{html_escape(section.header)}</div>")
    if section.passage:
        body.append(f"<div class='passage'>{html_escape(section.passage)}</div>")
    for q in section.questions:
        body.extend(render_question(q))
    return body


def render_question(q: Question) -> List[str]:
    body = [
        f"<p class='question'><span class='question-label'>Question {q.number}.</span> "
        f"{html_escape(q.content)}</p>",
        "<div class='options'>",
    ]
    for opt in q.options:
        body.append(
            f"<p class='option'><span class='option-label'>{opt.label}.</span> {html_escape(opt.content)}</p>"
        )
    body.append("</div>")
    return body


def render_answer_table(answers: List[Tuple[int, str]], exam_code: str) -> str:
    """Row-major grid of "N. X" cells; the last row is padded with blank cells."""
    rows = []
    for r in range(0, len(answers), ANSWER_COLUMNS):
        cells = [f"<td>{num}. {ans}</td>" for num, ans in answers[r:r + ANSWER_COLUMNS]]
        cells.extend("<td></td>" for _ in range(ANSWER_COLUMNS - len(cells)))
        rows.append("<tr>" + "".join(cells) + "</tr>")
    return (
        "<div class='answer-key'>\n"
        f"<h3>ĐÁP ÁN - MÃ ĐỀ: {html_escape(exam_code)}</h3>\n"
        "<table>\n" + "\n".join(rows) + "\n</table>\n</div>"
    )


def render_exam_html(exam: ExamData, exam_code: str) -> str:
    header = HEADER_TMPL.replace("%TITLE%", html_escape(exam.title)).replace("%CODE%", html_escape(exam_code))

    body: List[str] = []
    answers: List[Tuple[int, str]] = []
    for section in exam.sections:
        body.extend(render_section(section))
        answers.extend((q.number, q.answer or "") for q in section.questions)

    body.append(render_answer_table(answers, exam_code))
    return header + "\n".join(body) + FOOTER_TMPL


def export_filename(exam_code: str, day: date) -> str:
    return f"De_Thi_{exam_code}_{day.isoformat()}.doc"


def write_exam_files(exams: List[Tuple[str, str]], out_dir: str, day: Optional[date] = None) -> Dict[str, str]:
    """Write (code, html) pairs to `out_dir`; return code -> written path."""
    day = day or date.today()
    path = Path(out_dir)
    path.mkdir(parents=True, exist_ok=True)
    written: Dict[str, str] = {}
    for code, html in exams:
        target = path / export_filename(code, day)
        # BOM so Word picks UTF-8 for the HTML body
        target.write_text(html, encoding="utf-8-sig")
        written[code] = str(target)
    return written
