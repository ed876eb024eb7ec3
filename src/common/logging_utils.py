"""Centralized logging setup and structured-trace helpers.

Every module logs through ``logging.getLogger(__name__)``; this module owns the
root configuration and the small helpers used to attach structured context to
DEBUG traces without leaking credentials into log output.
"""
from __future__ import annotations

import logging
import os
import time
from typing import Any, Dict, Optional
from urllib.parse import parse_qsl, urlencode, urlsplit, urlunsplit

from constants import Constants

_SENSITIVE_QUERY_KEYS = {"token", "access_token", "api_key", "apikey", "key", "secret", "password"}
_REDACTED = "REDACTED"


def _level_from_env() -> int:
    name = os.environ.get(Constants.ENV_LOG_LEVEL, "INFO").strip().upper()
    level = logging.getLevelName(name)
    return level if isinstance(level, int) else logging.INFO


def configure_logging(level: Optional[str] = None, log_file: Optional[str] = None) -> None:
    """Configure the root logger once per process.

    Args:
        level: Explicit level name; wins over the BREWVER_LOG_LEVEL environment variable.
        log_file: Optional path that receives a copy of all log records.
    """
    root = logging.getLogger()
    if not any(getattr(h, "_brewver", False) for h in root.handlers):
        handler = logging.StreamHandler()
        handler.setFormatter(logging.Formatter(Constants.LOG_FORMAT))
        handler._brewver = True  # type: ignore[attr-defined]
        root.addHandler(handler)

    if level:
        root.setLevel(getattr(logging, str(level).upper(), logging.INFO))
    else:
        root.setLevel(_level_from_env())

    if log_file:
        file_handler = logging.FileHandler(log_file, encoding="utf-8")
        file_handler.setFormatter(logging.Formatter(Constants.LOG_FILE_FORMAT))
        root.addHandler(file_handler)
        logging.getLogger(__name__).info("Logging to file: %s", log_file)


def is_debug_enabled(logger: logging.Logger) -> bool:
    """Return True when DEBUG records from ``logger`` would be emitted."""
    return logger.isEnabledFor(logging.DEBUG)


def extra_context(**fields: Any) -> Dict[str, Any]:
    """Build an ``extra=`` mapping for structured log records, dropping empty values."""
    return {k: v for k, v in fields.items() if v is not None}


def safe_url(url: str) -> str:
    """Strip userinfo and redact credential-like query parameters from a URL."""
    try:
        parts = urlsplit(url)
    except ValueError:
        return url
    netloc = parts.hostname or ""
    if parts.port:
        netloc = f"{netloc}:{parts.port}"
    query = urlencode(
        [
            (k, _REDACTED if k.lower() in _SENSITIVE_QUERY_KEYS else v)
            for k, v in parse_qsl(parts.query, keep_blank_values=True)
        ],
        safe="/",
    )
    return urlunsplit((parts.scheme, netloc, parts.path, query, parts.fragment))


class Timer:
    """Context manager measuring wall-clock duration in milliseconds."""

    def __init__(self) -> None:
        self._start = 0.0
        self._end: Optional[float] = None

    def __enter__(self) -> "Timer":
        self._start = time.perf_counter()
        return self

    def __exit__(self, *exc: Any) -> None:
        self._end = time.perf_counter()

    def duration_ms(self) -> int:
        end = self._end if self._end is not None else time.perf_counter()
        return int((end - self._start) * 1000)
