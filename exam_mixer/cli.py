"""
Main entry to mix English exam papers into several shuffled codes.

Usage:
  exam-mixer --input de_goc.docx --codes "101, 102, 103"
  python -m exam_mixer --input de_goc.txt --quantity 4 --seed 2025 --out-dir out
  exam-mixer --config config.json --input raw.txt --standardize

config.json keys (all optional): exam_title, exam_codes, exam_quantity,
output_dir, seed, standardize, gemini_model.
"""

from __future__ import annotations

import argparse
import json
import logging
import random
from pathlib import Path
from typing import List, Optional

from . import docx_reader
from . import pipeline
from . import standardizer
from . import html_generator as hg
from .logging_config import setup_logging
from .parser import parse_exam_text

logger = logging.getLogger(__name__)

DEFAULT_CONFIG = {
    "exam_title": "Exam",
    "exam_codes": None,
    "exam_quantity": 4,
    "output_dir": ".",
    "seed": None,
    "standardize": False,
    "gemini_model": standardizer.DEFAULT_MODEL,
}

USER_ERRORS = (
    docx_reader.SourceReadError,
    standardizer.StandardizationError,
    pipeline.NoQuestionsFoundError,
)


def load_config(path: Optional[str]) -> dict:
    cfg = dict(DEFAULT_CONFIG)
    if path:
        with open(path, "r", encoding="utf-8") as f:
            cfg.update(json.load(f))
    return cfg


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Shuffle an English exam into several codes (Word .doc output)")
    parser.add_argument("--config", default=None, help="Path to config.json")
    parser.add_argument("--input", required=True, help="Exam source: .docx, .txt or Word HTML")
    parser.add_argument("--codes", default=None, help='Explicit exam codes, e.g. "101, 102, 103"')
    parser.add_argument("--quantity", type=int, default=None, help="Number of codes to generate from 101")
    parser.add_argument("--seed", type=int, default=None, help="Random seed override")
    parser.add_argument("--out-dir", default=None, help="Output directory")
    parser.add_argument("--standardize", action="store_true", help="Run the text through Gemini first")
    parser.add_argument("--api-key", default=None, help="Gemini API key (else GEMINI_API_KEY/API_KEY)")
    parser.add_argument("--dump-json", default=None, help="Also write the parsed exam as JSON here")
    parser.add_argument("--verbose", action="store_true", help="Debug logging")
    parser.add_argument("--log-file", default=None, help="Append debug log to this file")
    return parser


def main(argv: Optional[List[str]] = None) -> int:
    args = build_parser().parse_args(argv)
    setup_logging(verbose=args.verbose, log_file=Path(args.log_file) if args.log_file else None)

    cfg = load_config(args.config)
    seed = args.seed if args.seed is not None else cfg.get("seed")
    rng = random.Random(seed)
    codes_arg = args.codes if args.codes is not None else cfg.get("exam_codes")
    if isinstance(codes_arg, list):
        codes_arg = ", ".join(str(c) for c in codes_arg)
    quantity = args.quantity if args.quantity is not None else int(cfg.get("exam_quantity", 4))
    out_dir = args.out_dir or cfg.get("output_dir", ".")

    try:
        logger.info("Reading %s", args.input)
        text = docx_reader.read_source(Path(args.input))
        if args.standardize or cfg.get("standardize"):
            logger.info("Standardizing with %s", cfg.get("gemini_model"))
            text = standardizer.standardize_exam_content(
                text, api_key=args.api_key, model_name=cfg.get("gemini_model", standardizer.DEFAULT_MODEL)
            )
        codes = pipeline.resolve_exam_codes(codes_arg, quantity)
        exams = pipeline.generate_exams(text, codes, rng, title=cfg.get("exam_title", "Exam"))
    except USER_ERRORS as exc:
        logger.error("%s", exc)
        return 1

    if args.dump_json:
        parsed = parse_exam_text(text, title=cfg.get("exam_title", "Exam"))
        Path(args.dump_json).write_text(json.dumps(parsed.to_dict(), ensure_ascii=False, indent=2), encoding="utf-8")
        logger.info("Wrote parsed exam to %s", args.dump_json)

    written = hg.write_exam_files([(e.code, e.html) for e in exams], out_dir)
    for code, path in written.items():
        logger.info("Wrote %s: %s", code, path)
    return 0
