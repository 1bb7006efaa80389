"""Logging filters that scrub sensitive content."""

from __future__ import annotations

import logging
import re

_REDACTED = "**REDACTED**"

_SENSITIVE_PATTERNS = (
    re.compile(r"Bearer\s+[\w\.-]+", re.IGNORECASE),
    re.compile(r"(\"(?:access_token|client_phone)\"\s*:\s*)\"[^\"]+\"", re.IGNORECASE),
)


def redact(text: str) -> str:
    text = _SENSITIVE_PATTERNS[0].sub(f"Bearer {_REDACTED}", text)
    return _SENSITIVE_PATTERNS[1].sub(rf'\1"{_REDACTED}"', text)


class SensitiveFilter(logging.Filter):
    """Mask bearer tokens and client phone numbers before records are emitted."""

    def filter(self, record: logging.LogRecord) -> bool:
        if isinstance(record.msg, str):
            record.msg = redact(record.msg)
        if isinstance(record.args, tuple):
            record.args = tuple(
                redact(arg) if isinstance(arg, str) else arg for arg in record.args
            )
        return True


__all__ = ["SensitiveFilter", "redact"]
