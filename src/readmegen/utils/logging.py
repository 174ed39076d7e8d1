"""Log output for the readmegen CLI.

Provides three output modes:
- Human mode: [LEVEL] message (colored if TTY)
- Verbose mode: [LEVEL][HH:MM:SS] message
- CI/JSON mode: {"level":"...","ts":"...","msg":"..."}

Logs go to stderr by default so that generated README and prompt text on
stdout can be piped cleanly. Provider error messages sometimes echo the
request, so every handler masks GitHub tokens and Groq API keys.
"""

import json
import logging
import re
import sys
from datetime import UTC, datetime
from enum import Enum
from typing import Any, TextIO


class LogMode(Enum):
    """Logging output mode."""

    HUMAN = "human"
    VERBOSE = "verbose"
    JSON = "json"


RESET = "\033[0m"

LEVEL_COLORS = {
    logging.DEBUG: "\033[90m",
    logging.INFO: "\033[32m",
    logging.WARNING: "\033[33m",
    logging.ERROR: "\033[31m",
    logging.CRITICAL: "\033[31m",
}

# ghp_/gho_/ghs_... classic tokens, fine-grained PATs, Groq keys
SECRET_PATTERN = re.compile(
    r"\b(?:gh[pousr]_[A-Za-z0-9]{20,}|github_pat_[A-Za-z0-9_]{20,}|gsk_[A-Za-z0-9]{20,})"
)
REDACTED = "[redacted]"


def redact(text: str) -> str:
    """Mask credential-shaped substrings."""
    return SECRET_PATTERN.sub(REDACTED, text)


class SecretRedactionFilter(logging.Filter):
    """Rewrites the record message with credentials masked."""

    def filter(self, record: logging.LogRecord) -> bool:
        message = record.getMessage()
        masked = redact(message)
        if masked != message:
            record.msg = masked
            record.args = None
        return True


class TextFormatter(logging.Formatter):
    """Plain text output: ``[LEVEL] message`` or ``[LEVEL][HH:MM:SS] message``."""

    def __init__(self, use_colors: bool = True, timestamps: bool = False) -> None:
        super().__init__()
        self.use_colors = use_colors
        self.timestamps = timestamps

    def format(self, record: logging.LogRecord) -> str:
        tag = f"[{record.levelname}]"
        if self.use_colors:
            tag = f"{LEVEL_COLORS.get(record.levelno, RESET)}{tag}{RESET}"
        if self.timestamps:
            tag += datetime.now().strftime("[%H:%M:%S]")
        return f"{tag} {record.getMessage()}"


class JSONFormatter(logging.Formatter):
    """JSON lines output, one object per record.

    Format: {"level":"INFO","ts":"2026-01-31T19:45:23+00:00","msg":"..."}
    Fields passed to ``ReadmeGenLogger.structured`` are merged in.
    """

    def format(self, record: logging.LogRecord) -> str:
        entry: dict[str, Any] = {
            "level": record.levelname,
            "ts": datetime.now(UTC).isoformat(),
            "msg": record.getMessage(),
        }
        entry.update(getattr(record, "extra_data", {}))
        return json.dumps(entry, default=str)


class ReadmeGenLogger(logging.Logger):
    """Logger with structured logging support."""

    def structured(self, level: int, msg: str, **fields: Any) -> None:
        """Log ``msg`` with extra fields that only show up in JSON mode."""
        if self.isEnabledFor(level):
            self._log(level, msg, (), extra={"extra_data": fields} if fields else None)


logging.setLoggerClass(ReadmeGenLogger)


def get_logger(name: str = "readmegen") -> ReadmeGenLogger:
    """Get a readmegen logger instance."""
    return logging.getLogger(name)  # type: ignore


def setup_logging(
    mode: LogMode = LogMode.HUMAN,
    level: int = logging.INFO,
    stream: TextIO | None = None,
) -> None:
    """Configure the ``readmegen`` logger hierarchy.

    Args:
        mode: Output mode (human, verbose, json)
        level: Minimum log level
        stream: Output stream (default: stderr)
    """
    stream = stream or sys.stderr
    use_colors = hasattr(stream, "isatty") and stream.isatty()

    if mode == LogMode.JSON:
        formatter: logging.Formatter = JSONFormatter()
    else:
        formatter = TextFormatter(use_colors=use_colors, timestamps=mode == LogMode.VERBOSE)

    handler = logging.StreamHandler(stream)
    handler.setFormatter(formatter)
    handler.addFilter(SecretRedactionFilter())

    logger = logging.getLogger("readmegen")
    logger.setLevel(level)
    logger.handlers.clear()
    logger.addHandler(handler)


def configure_from_cli(verbose: bool = False, quiet: bool = False, ci: bool = False) -> None:
    """Configure logging based on CLI flags.

    ``--ci`` selects JSON lines, ``--verbose`` adds timestamps and debug
    output, ``--quiet`` keeps only warnings and errors.
    """
    mode = LogMode.JSON if ci else LogMode.VERBOSE if verbose else LogMode.HUMAN

    if quiet:
        level = logging.WARNING
    elif verbose:
        level = logging.DEBUG
    else:
        level = logging.INFO

    setup_logging(mode=mode, level=level)
