"""Unit tests for logging setup."""

import pytest
from loguru import logger

from civic_lens.core.logging import REDACTED, redact_secrets, setup_logging


@pytest.fixture(autouse=True)
def _reset_loguru():
    """Drop sinks bound to per-test streams and files."""
    yield
    logger.remove()


def test_file_sink_created(tmp_path):
    log_dir = tmp_path / "logs"
    setup_logging("debug", log_dir=str(log_dir))
    logger.info("hello from test")
    logger.complete()

    log_file = log_dir / "civic-lens.log"
    assert log_file.exists()
    assert "hello from test" in log_file.read_text()


def test_stderr_only(capsys):
    setup_logging("WARNING")
    logger.info("quiet")
    logger.warning("loud")
    captured = capsys.readouterr()
    assert "loud" in captured.err
    assert "quiet" not in captured.err


def test_secrets_are_redacted(capsys):
    setup_logging("INFO")
    logger.error("Request failed with Authorization: Bearer abc.def-123 and key sk-proj-ABCDEFGH1234")
    captured = capsys.readouterr()
    assert "abc.def-123" not in captured.err
    assert "sk-proj-ABCDEFGH1234" not in captured.err
    assert REDACTED in captured.err


def test_redact_secrets_leaves_plain_text():
    assert redact_secrets("Job resp_1 completed after 3 poll(s)") == "Job resp_1 completed after 3 poll(s)"


def test_json_sink_is_opt_in(capsys):
    setup_logging("INFO")
    logger.bind(json_output=True).info("structured")
    captured = capsys.readouterr()
    assert '"message": "structured"' in captured.err
