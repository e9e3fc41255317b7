"""
Logging setup for pipeline runs.

Two loggers are configured:
- ``docforge``: run events, to a Rich console handler and an optional
  per-run log file (JSON lines or plain text)
- ``docforge.llm``: one JSON line per provider exchange, written only when
  a log directory is given

Structured fields are passed as ``extra`` keyword arguments through
``log_event``/``log_warning`` and end up as top-level keys in JSON lines.
"""

from __future__ import annotations

from datetime import datetime, timezone
import json
import logging
from pathlib import Path
import re
from typing import Any

from rich.logging import RichHandler

from ..config import LoggingConfig


RUN_LOGGER = "docforge"
LLM_LOGGER = "docforge.llm"

_URL_RE = re.compile(r"https?://\S+")
_EMAIL_RE = re.compile(r"[\w.+-]+@[\w-]+(?:\.[\w-]+)+")

# Attributes every LogRecord carries; anything else came in through ``extra``.
_STANDARD_ATTRS = frozenset(logging.makeLogRecord({}).__dict__) | {"message", "asctime", "taskName"}


def setup_logging(cfg: LoggingConfig, log_dir: Path | None) -> logging.Logger:
    level = _level_from_string(cfg.level)
    logger = _reset_logger(RUN_LOGGER, level)

    if cfg.console:
        console = RichHandler(rich_tracebacks=True, show_time=False, show_path=False)
        console.setFormatter(logging.Formatter("%(message)s"))
        console.setLevel(level)
        logger.addHandler(console)

    if cfg.file and log_dir is not None:
        formatter = JsonlFormatter() if cfg.format == "jsonl" else logging.Formatter(
            "%(asctime)s %(levelname)s %(message)s"
        )
        logger.addHandler(_file_handler(log_dir / cfg.filename, formatter, level))

    return logger


def setup_llm_logger(cfg: LoggingConfig, log_dir: Path | None) -> logging.Logger | None:
    if not cfg.llm_log_enabled or log_dir is None:
        return None
    level = _level_from_string(cfg.level)
    logger = _reset_logger(LLM_LOGGER, level)
    logger.addHandler(_file_handler(log_dir / cfg.llm_log_file, JsonlFormatter(), level))
    return logger


def log_event(logger: logging.Logger | None, message: str, **fields: Any) -> None:
    if logger is not None:
        logger.info(message, extra=fields)


def log_warning(logger: logging.Logger | None, message: str, **fields: Any) -> None:
    if logger is not None:
        logger.warning(message, extra=fields)


def redact_text(text: str, mode: str) -> str:
    """Apply a redaction mode to prompt or response text.

    Modes: ``none`` keeps text as is, ``redact_content`` drops it entirely,
    ``redact_contacts`` masks URLs and e-mail addresses found in document
    excerpts. Unknown modes keep the text.
    """
    if mode == "redact_content":
        return ""
    if mode == "redact_contacts":
        text = _URL_RE.sub("[REDACTED_URL]", text)
        return _EMAIL_RE.sub("[REDACTED_EMAIL]", text)
    return text


def truncate_text(text: str, max_chars: int = 20000) -> str:
    if len(text) <= max_chars:
        return text
    return f"{text[:max_chars]}...(truncated)"


class JsonlFormatter(logging.Formatter):
    """Render a record and its ``extra`` fields as one JSON object."""

    def format(self, record: logging.LogRecord) -> str:
        payload: dict[str, Any] = {
            "timestamp": datetime.fromtimestamp(record.created, tz=timezone.utc).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
        }
        for key, value in record.__dict__.items():
            if key not in _STANDARD_ATTRS:
                payload[key] = value
        if record.exc_info:
            payload["exception"] = self.formatException(record.exc_info)
        return json.dumps(payload, ensure_ascii=False, default=str)


def _reset_logger(name: str, level: int) -> logging.Logger:
    logger = logging.getLogger(name)
    for handler in list(logger.handlers):
        logger.removeHandler(handler)
        handler.close()
    logger.setLevel(level)
    logger.propagate = False
    return logger


def _file_handler(path: Path, formatter: logging.Formatter, level: int) -> logging.Handler:
    path.parent.mkdir(parents=True, exist_ok=True)
    handler = logging.FileHandler(path, encoding="utf-8")
    handler.setFormatter(formatter)
    handler.setLevel(level)
    return handler


def _level_from_string(level: str) -> int:
    value = logging.getLevelName(level.upper())
    return value if isinstance(value, int) else logging.INFO
