"""Tests for multi-code generation and the command line."""

import subprocess
import sys
from datetime import date
from pathlib import Path

import pytest

from exam_mixer import cli
from exam_mixer.pipeline import NoQuestionsFoundError, generate_exams, resolve_exam_codes


@pytest.mark.parametrize(
    "codes, quantity, expected",
    [
        ("101, 102;103  104", 4, ["101", "102", "103", "104"]),
        ("  ", 4, ["101"]),
        (None, 3, ["101", "102", "103"]),
        (None, 0, ["101"]),
    ],
)
def test_resolve_exam_codes(codes, quantity, expected):
    assert resolve_exam_codes(codes, quantity) == expected


def test_generate_exams_are_independent(standard_text, rng):
    exams = generate_exams(standard_text, ["101", "102", "103"], rng)
    assert [e.code for e in exams] == ["101", "102", "103"]
    for e in exams:
        assert [q.number for q in e.exam.questions] == list(range(1, 8))
        assert f"MÃ ĐỀ: {e.code}" in e.html
        by_original = {q.original_number: q.option_for(q.answer).content for q in e.exam.questions}
        assert by_original == {1: "fast", 2: "play", 3: "affects", 4: "release", 5: "dump", 6: "In a village", 7: "On foot"}


@pytest.mark.parametrize("text", ["", "   \n"])
def test_empty_text(text):
    with pytest.raises(NoQuestionsFoundError):
        generate_exams(text, ["101"])


def test_no_questions_found():
    with pytest.raises(NoQuestionsFoundError, match="Không tìm thấy câu hỏi"):
        generate_exams("just a title line", ["101"])


def test_cli_writes_one_file_per_code(tmp_path, standard_text):
    source = tmp_path / "exam.txt"
    source.write_text(standard_text, encoding="utf-8")
    out_dir = tmp_path / "out"
    dump = tmp_path / "parsed.json"

    rc = cli.main([
        "--input", str(source), "--codes", "101,102", "--seed", "3",
        "--out-dir", str(out_dir), "--dump-json", str(dump),
    ])

    assert rc == 0
    today = date.today().isoformat()
    assert sorted(p.name for p in out_dir.iterdir()) == [f"De_Thi_101_{today}.doc", f"De_Thi_102_{today}.doc"]
    assert '"originalNumber": 7' in dump.read_text(encoding="utf-8")


def test_cli_config_file(tmp_path, standard_text):
    source = tmp_path / "exam.txt"
    source.write_text(standard_text, encoding="utf-8")
    config = tmp_path / "config.json"
    config.write_text(
        '{"exam_quantity": 2, "output_dir": "%s", "seed": 1}' % (tmp_path / "cfg_out").as_posix(),
        encoding="utf-8",
    )

    assert cli.main(["--config", str(config), "--input", str(source)]) == 0
    assert len(list((tmp_path / "cfg_out").iterdir())) == 2


def test_cli_reports_user_errors(tmp_path):
    source = tmp_path / "empty.txt"
    source.write_text("nothing to see", encoding="utf-8")
    assert cli.main(["--input", str(source), "--out-dir", str(tmp_path / "out")]) == 1
    assert not (tmp_path / "out").exists()


def test_load_config_defaults():
    cfg = cli.load_config(None)
    assert cfg["exam_quantity"] == 4
    assert cfg["seed"] is None


def test_package_runs_as_module(tmp_path, standard_text):
    source = tmp_path / "exam.txt"
    source.write_text(standard_text, encoding="utf-8")
    out_dir = tmp_path / "out"

    result = subprocess.run(
        [sys.executable, "-m", "exam_mixer", "--input", str(source), "--quantity", "1", "--out-dir", str(out_dir)],
        cwd=Path(__file__).resolve().parents[1],
        capture_output=True,
        text=True,
    )

    assert result.returncode == 0, result.stderr
    assert "[exam_mixer.cli] Wrote 101" in result.stdout
    assert len(list(out_dir.iterdir())) == 1
