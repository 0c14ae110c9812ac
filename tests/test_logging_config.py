"""Tests for the command-line logging setup."""

import logging

import pytest

from exam_mixer.logging_config import setup_logging


@pytest.fixture
def restore_root_logger():
    root = logging.getLogger()
    handlers, level = root.handlers[:], root.level
    yield root
    for handler in root.handlers[:]:
        if handler not in handlers:
            root.removeHandler(handler)
            handler.close()
    root.setLevel(level)


def test_log_file_gets_module_prefixed_lines(tmp_path, restore_root_logger):
    log_file = tmp_path / "logs" / "run.log"
    setup_logging(verbose=True, log_file=log_file)
    logging.getLogger("exam_mixer.parser").debug("Parsed %d sections", 3)
    logging.getLogger("grpc").info("channel noise")
    for handler in restore_root_logger.handlers:
        handler.flush()

    assert log_file.read_text(encoding="utf-8") == "[exam_mixer.parser] Parsed 3 sections\n"


def test_default_level_is_info(restore_root_logger):
    setup_logging()
    assert restore_root_logger.level == logging.INFO
    assert len(restore_root_logger.handlers) == 1
