"""
Logging configuration for Support Desk.

Single 'supportdesk' logger used across all modules.

  Log file : logs/supportdesk.log
  Rotation : 5 MB × 3 backups
  Level    : LOG_LEVEL env var (DEBUG / INFO / WARNING / ERROR / CRITICAL)
             defaults to INFO when unset
  Stderr   : LOG_TO_STDERR=1 adds a console handler (WARNING and up)

Usage
-----
    from supportdesk.logging_config import configure_logging, log_call

    configure_logging()

    @log_call
    def make_contact(request):
        ...

Log format per line
-------------------
    2026-10-19 09:12:44 | DEBUG    | CALL make_contact | args=(ContactRequest(...))
    2026-10-19 09:12:44 | INFO     | OK   make_contact | 18ms
    2026-10-19 09:12:45 | WARNING  | FAIL reply_problem | ContactNotFound: Contact 9 not found | 2ms
    2026-10-19 09:12:46 | ERROR    | FAIL reply_problem | OperationalError: ... | 30001ms

Business errors (SupportDeskError) are expected outcomes for a caller and are
logged at WARNING. Anything else is logged at ERROR.

Client e-mail addresses and reply notes are masked in CALL lines, whether
passed by keyword, by position, or as fields of a request dataclass.
"""

import dataclasses
import functools
import inspect
import logging
import logging.handlers
import os
import time
from pathlib import Path

from supportdesk.exceptions import SupportDeskError

_LOG_DIR = Path(__file__).parent.parent / "logs"
_LOG_FILE = _LOG_DIR / "supportdesk.log"
_FORMAT = "%(asctime)s | %(levelname)-8s | %(message)s"
_DATE_FORMAT = "%Y-%m-%d %H:%M:%S"
_MAX_BYTES = 5 * 1024 * 1024  # 5 MB
_BACKUP_COUNT = 3

# Argument and dataclass field names whose values never reach the log file
_MASKED_NAMES = {"email", "client_email", "notes"}
_MASK = "***"


def configure_logging() -> logging.Logger:
    """
    Set up the supportdesk logger. Idempotent, so every CLI entry may call it.
    Returns the configured logger.
    """
    logger = logging.getLogger("supportdesk")
    if logger.handlers:
        return logger

    _LOG_DIR.mkdir(exist_ok=True)

    level_name = os.environ.get("LOG_LEVEL", "INFO").upper()
    logger.setLevel(getattr(logging, level_name, logging.INFO))

    formatter = logging.Formatter(_FORMAT, datefmt=_DATE_FORMAT)

    file_handler = logging.handlers.RotatingFileHandler(
        _LOG_FILE,
        maxBytes=_MAX_BYTES,
        backupCount=_BACKUP_COUNT,
        encoding="utf-8",
    )
    file_handler.setFormatter(formatter)
    logger.addHandler(file_handler)

    if os.environ.get("LOG_TO_STDERR", "").lower() in ("1", "true", "yes"):
        console = logging.StreamHandler()
        console.setLevel(logging.WARNING)
        console.setFormatter(formatter)
        logger.addHandler(console)

    return logger


def _shown(name, value) -> str:
    if value is None:
        return repr(value)
    if name in _MASKED_NAMES:
        return _MASK
    if dataclasses.is_dataclass(value) and not isinstance(value, type):
        hidden = {
            f.name: _MASK for f in dataclasses.fields(value)
            if f.name in _MASKED_NAMES and getattr(value, f.name) is not None
        }
        if hidden:
            return repr(dataclasses.replace(value, **hidden))
    return repr(value)


def _positional_names(func) -> list:
    names = []
    for param in inspect.signature(func).parameters.values():
        if param.kind not in (param.POSITIONAL_ONLY, param.POSITIONAL_OR_KEYWORD):
            break
        names.append(param.name)
    return names


def _format_args(names, args, kwargs) -> str:
    parts = [
        _shown(names[i] if i < len(names) else None, a)
        for i, a in enumerate(args)
    ]
    for key, value in kwargs.items():
        parts.append(f"{key}={_shown(key, value)}")
    return ", ".join(parts) if parts else "—"


def log_call(func):
    """
    Decorator: logs entry, clean exit, and exceptions for any function.

    - DEBUG   on entry          : CALL <name> | args=(...)
    - INFO    on success        : OK   <name> | <N>ms
    - WARNING on business error : FAIL <name> | ExcType: message | <N>ms
    - ERROR   on anything else  : FAIL <name> | ExcType: message | <N>ms
    The exception is always re-raised.
    """
    names = _positional_names(func)

    @functools.wraps(func)
    def wrapper(*args, **kwargs):
        logger = logging.getLogger("supportdesk")
        name = func.__name__
        start = time.perf_counter()
        logger.debug(f"CALL {name} | args=({_format_args(names, args, kwargs)})")

        try:
            result = func(*args, **kwargs)
        except SupportDeskError as exc:
            ms = int((time.perf_counter() - start) * 1000)
            logger.warning(f"FAIL {name} | {type(exc).__name__}: {exc} | {ms}ms")
            raise
        except Exception as exc:
            ms = int((time.perf_counter() - start) * 1000)
            logger.error(f"FAIL {name} | {type(exc).__name__}: {exc} | {ms}ms")
            raise

        ms = int((time.perf_counter() - start) * 1000)
        logger.info(f"OK   {name} | {ms}ms")
        return result

    return wrapper
