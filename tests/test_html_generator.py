"""Tests for the Word-HTML renderer."""

import re
from datetime import date

from conftest import make_question
from exam_mixer.html_generator import (
    ANSWER_COLUMNS,
    export_filename,
    render_exam_html,
    write_exam_files,
)
from exam_mixer.models import ExamData, Section
from exam_mixer.shuffler import shuffle_exam

CELL_RE = re.compile(r"<td>(.*?)</td>")


def answer_cells(html):
    table = html[html.index("<table>"):html.index("</table>")]
    return CELL_RE.findall(table)


def test_document_shell(standard_exam):
    html = render_exam_html(standard_exam, "101")
    assert html.lstrip().startswith("<html")
    assert "<meta charset=\"utf-8\">" in html
    assert "<style>" in html
    assert "MÃ ĐỀ: 101" in html
    assert "ĐÁP ÁN - MÃ ĐỀ: 101" in html
    assert html.rstrip().endswith("</html>")


def test_question_blocks(standard_exam):
    html = render_exam_html(standard_exam, "101")
    assert html.count("<p class='question'>") == 7
    assert html.count("<p class='option'>") == 28
    assert "Question 1.</span> She runs very ___." in html
    assert "<span class='option-label'>B.</span> fast" in html


def test_sections_render_header_and_passage(standard_exam):
    html = render_exam_html(standard_exam, "101")
    assert html.count("<div class='section-header'>") == 3
    assert html.count("<div class='passage'>") == 2
    assert html.index("(3) ___ everyone") < html.index("Question 3.")


def test_answer_table_matches_questions(standard_exam, rng):
    shuffled = shuffle_exam(standard_exam, rng)
    html = render_exam_html(shuffled, "205")
    cells = answer_cells(html)
    assert len(cells) == ANSWER_COLUMNS
    expected = [f"{q.number}. {q.answer}" for q in shuffled.questions]
    assert cells[:7] == expected
    assert cells[7:] == ["", "", ""]


def test_answer_table_rows():
    questions = tuple(make_question(n, ["x", "y"], "B" if n % 2 else None) for n in range(1, 24))
    exam = ExamData(sections=(Section(id="s", questions=questions),))
    html = render_exam_html(exam, "9")
    assert html.count("<tr>") == 3
    cells = answer_cells(html)
    assert len(cells) == 30
    assert cells[0] == "1. B"
    assert cells[1] == "2. "
    assert cells[22] == "23. B"
    assert cells[23:] == [""] * 7


def test_empty_exam_and_empty_sections():
    html = render_exam_html(ExamData(sections=(Section(id="s"),)), "101")
    assert "<p class='question'>" not in html
    assert answer_cells(html) == []
    assert "<table>" in html


def test_content_is_escaped_and_breaks_kept():
    q = make_question(1, ["<b>", "a & b"], content="a. first\nb. second")
    html = render_exam_html(ExamData(sections=(Section(id="s", questions=(q,)),)), "1<2")
    assert "a. first<br/>b. second" in html
    assert "&lt;b&gt;" in html
    assert "a &amp; b" in html
    assert "MÃ ĐỀ: 1&lt;2" in html


def test_render_is_deterministic_and_read_only(standard_exam):
    before = standard_exam.to_dict()
    assert render_exam_html(standard_exam, "101") == render_exam_html(standard_exam, "101")
    assert standard_exam.to_dict() == before


def test_export_filename():
    assert export_filename("102", date(2026, 3, 9)) == "De_Thi_102_2026-03-09.doc"


def test_write_exam_files(tmp_path):
    written = write_exam_files([("101", "<html>Đề</html>"), ("102", "<html/>")], str(tmp_path / "out"), date(2026, 1, 2))
    assert sorted(written) == ["101", "102"]
    path = tmp_path / "out" / "De_Thi_101_2026-01-02.doc"
    assert written["101"] == str(path)
    raw = path.read_bytes()
    assert raw.startswith(b"\xef\xbb\xbf")
    assert raw.decode("utf-8-sig") == "<html>Đề</html>"
