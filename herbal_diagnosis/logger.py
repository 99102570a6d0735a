"""
Name: Structured Logger Configuration

Responsibilities:
  - Configure JSON-structured logging for the diagnosis service
  - Carry pipeline fields passed through `extra=` (timings, counts, causes)
  - Include stack traces for exceptions

Collaborators:
  - config.py: log_level / log_json
  - Python logging module (stdlib)

Constraints:
  - JSON format for log aggregation compatibility
  - Never log secrets (API keys, tokens)

Notes:
  - Import as: from herbal_diagnosis.logger import logger
"""

import json
import logging
import sys
import traceback
from datetime import datetime, timezone
from typing import Any

from pydantic import ValidationError

# R: LogRecord attributes that are not user-provided extras
_INTERNAL_KEYS = {
    "name", "msg", "args", "created", "filename", "funcName",
    "levelname", "levelno", "lineno", "module", "msecs",
    "pathname", "process", "processName", "relativeCreated",
    "stack_info", "exc_info", "exc_text", "thread", "threadName",
    "taskName", "message",
}


class JSONFormatter(logging.Formatter):
    """
    R: Format logs as JSON.

    Includes:
      - timestamp (ISO 8601)
      - level, logger, message
      - module, function, line
      - extra fields from the log call (sensitive keys dropped)
      - exception stack trace (if present)
    """

    # R: Fields that should never be logged (security)
    SENSITIVE_KEYS = {
        "password", "api_key", "secret", "token", "authorization",
        "google_api_key", "openai_api_key",
    }

    def format(self, record: logging.LogRecord) -> str:
        log_obj: dict[str, Any] = {
            "timestamp": datetime.now(timezone.utc).isoformat(),
            "level": record.levelname,
            "message": record.getMessage(),
            "logger": record.name,
            "module": record.module,
            "function": record.funcName,
            "line": record.lineno,
        }

        for key, value in record.__dict__.items():
            if key in _INTERNAL_KEYS:
                continue
            if key.lower() in self.SENSITIVE_KEYS:
                continue
            log_obj[key] = value

        if record.exc_info:
            log_obj["exception"] = {
                "type": record.exc_info[0].__name__ if record.exc_info[0] else None,
                "message": str(record.exc_info[1]) if record.exc_info[1] else None,
                "stacktrace": traceback.format_exception(*record.exc_info),
            }

        return json.dumps(log_obj, ensure_ascii=False, default=str)


def setup_logger(name: str = "herbal-diagnosis") -> logging.Logger:
    """
    R: Configure and return the service logger.

    Respects LOG_LEVEL / LOG_JSON when settings are loadable; falls back to
    INFO + JSON otherwise (e.g. provider credentials missing at import time).
    """
    log = logging.getLogger(name)

    level = "INFO"
    use_json = True
    try:
        from .config import get_settings

        settings = get_settings()
        level = (settings.log_level or "INFO").upper()
        use_json = settings.log_json
    except ValidationError:
        # R: Settings are validated again (and reported) at startup
        pass

    log.setLevel(getattr(logging, level, logging.INFO))

    # R: Avoid duplicate handlers on reimport
    if not log.handlers:
        handler = logging.StreamHandler(sys.stdout)
        handler.setFormatter(
            JSONFormatter() if use_json else logging.Formatter("%(levelname)s %(message)s")
        )
        log.addHandler(handler)

    return log


# R: Global logger instance
logger = setup_logger()
