"""Loguru configuration for the CLI and library code.

Human-readable records go to stderr.  Records bound with
``json_output=True`` are additionally emitted as serialized JSON, and a
rotating file sink is added when ``log_dir`` is set.  Every record passes
through a patcher that masks backend credentials, since transport errors
and raw job payloads are logged verbatim.
"""

import re
import sys
from pathlib import Path
from typing import Any

from loguru import logger

_LOG_FORMAT = "{time:YYYY-MM-DD HH:mm:ss.SSS} | {level:<8} | {name}:{function}:{line} | {message}"
_LOG_FILE_NAME = "civic-lens.log"

_SECRET_PATTERNS = (
    re.compile(r"\bsk-[A-Za-z0-9_-]{8,}"),
    re.compile(r"(?i)\bbearer\s+[A-Za-z0-9._~+/=-]+"),
)
REDACTED = "[redacted]"


def redact_secrets(text: str) -> str:
    """Mask API keys and bearer tokens in a log message."""
    for pattern in _SECRET_PATTERNS:
        text = pattern.sub(REDACTED, text)
    return text


def _redact_record(record: Any) -> None:
    record["message"] = redact_secrets(record["message"])


def setup_logging(log_level: str = "INFO", log_dir: str | None = None) -> None:
    """Configure Loguru sinks.

    Args:
        log_level: Minimum log level to emit.
        log_dir: Optional directory for log files.  When set, a rotating
            file sink is added (rotated every 24 hours, retained 7 days).
    """
    level = log_level.upper()
    logger.remove()
    logger.configure(patcher=_redact_record)

    logger.add(sys.stderr, level=level, format=_LOG_FORMAT, serialize=False)
    logger.add(
        sys.stderr,
        level=level,
        serialize=True,
        filter=lambda record: record["extra"].get("json_output", False),
    )

    if log_dir:
        log_path = Path(log_dir)
        log_path.mkdir(parents=True, exist_ok=True)
        logger.add(
            log_path / _LOG_FILE_NAME,
            level=level,
            format=_LOG_FORMAT,
            rotation="24h",
            retention="7 days",
        )
    logger.debug("Logging configured at {} (file sink: {})", level, bool(log_dir))
