"""
Secure Logging - log output with tenant contact details masked

Ticket descriptions and notes are free text written by tenants and staff, so
they regularly carry phone numbers, e-mail addresses and door codes. This
module masks those before a record reaches any handler.

Usage:
    from maintenance_desk.utils.secure_logging import configure_secure_logging

    configure_secure_logging(level=logging.INFO, format_type="json")
"""

import re
import json
import logging
from logging import LogRecord, Filter, Formatter
from typing import Any, Callable, Dict, List, Optional, Tuple, Union

Replacement = Union[str, Callable[[re.Match], str]]

SENSITIVE_PATTERNS: List[Tuple[re.Pattern, Replacement]] = [
    # Bearer/Auth tokens
    (re.compile(r'(Bearer\s+)[a-zA-Z0-9_.-]+', re.IGNORECASE), r'\1[TOKEN_REDACTED]'),
    (re.compile(r'(password|passwd|secret|token)["\s:=]+["\']?([^\s"\']{4,})["\']?', re.IGNORECASE), r'\1=[REDACTED]'),

    # Gate, lockbox and door codes left in access instructions
    (re.compile(r'((?:gate|door|lockbox|access|alarm)\s*code\s*(?:is|:|=)?\s*)([0-9#*]{3,})', re.IGNORECASE), r'\1[CODE_REDACTED]'),

    # Email addresses
    (re.compile(r'([a-zA-Z0-9._%+-]+)@([a-zA-Z0-9.-]+)\.([a-zA-Z]{2,})'),
     lambda m: f"{m.group(1)[:1]}***@***.{m.group(3)}"),

    # Phone numbers (North American and international)
    (re.compile(r'(?<![\w-])(?:\+?\d{1,2}[\s.-]?)?\(?\d{3}\)?[\s.-]?\d{3}[\s.-]?(\d{4})(?![\w-])'), r'***-***-\1'),
]

_RESERVED_ATTRS = frozenset({
    'msg', 'args', 'name', 'levelname', 'levelno', 'pathname', 'filename',
    'module', 'lineno', 'funcName', 'created', 'msecs', 'relativeCreated',
    'thread', 'threadName', 'processName', 'process', 'exc_info', 'exc_text',
    'stack_info', 'taskName', 'message',
})


def mask_sensitive(text: str, patterns: Optional[List[Tuple[re.Pattern, Replacement]]] = None) -> str:
    """Apply every masking pattern to ``text``."""
    if not text:
        return text
    for pattern, replacement in patterns or SENSITIVE_PATTERNS:
        text = pattern.sub(replacement, text)
    return text


class SensitiveDataFilter(Filter):
    """Logging filter that masks contact details and credentials in records."""

    def __init__(self, name: str = '', additional_patterns: Optional[List[Tuple[re.Pattern, Replacement]]] = None):
        super().__init__(name)
        self.patterns = SENSITIVE_PATTERNS.copy()
        if additional_patterns:
            self.patterns.extend(additional_patterns)

    def filter(self, record: LogRecord) -> bool:
        # Render first so %-style args are masked together with the template
        record.msg = mask_sensitive(record.getMessage(), self.patterns)
        record.args = None

        for key, value in list(record.__dict__.items()):
            if key in _RESERVED_ATTRS or key.startswith('_'):
                continue
            if isinstance(value, str):
                setattr(record, key, mask_sensitive(value, self.patterns))
            elif isinstance(value, dict):
                setattr(record, key, self._mask_dict(value))

        return True

    def _mask_dict(self, data: Dict[str, Any]) -> Dict[str, Any]:
        result = {}
        for key, value in data.items():
            if isinstance(value, str):
                result[key] = mask_sensitive(value, self.patterns)
            elif isinstance(value, dict):
                result[key] = self._mask_dict(value)
            else:
                result[key] = value
        return result


class SecureFormatter(Formatter):
    """Human-readable formatter with an optional trace ID column."""

    def __init__(self, fmt: Optional[str] = None, datefmt: Optional[str] = None, include_trace_id: bool = True):
        if fmt is None:
            if include_trace_id:
                fmt = '%(asctime)s - %(name)s - %(levelname)s - [%(trace_id)s] - %(message)s'
            else:
                fmt = '%(asctime)s - %(name)s - %(levelname)s - %(message)s'
        super().__init__(fmt, datefmt)
        self.include_trace_id = include_trace_id

    def format(self, record: LogRecord) -> str:
        if self.include_trace_id and not hasattr(record, 'trace_id'):
            record.trace_id = '-'
        return super().format(record)


class JSONSecureFormatter(Formatter):
    """One JSON object per record, for log aggregation."""

    def format(self, record: LogRecord) -> str:
        log_data = {
            'timestamp': self.formatTime(record),
            'level': record.levelname,
            'logger': record.name,
            'message': record.getMessage(),
        }

        if record.exc_info:
            log_data['exception'] = self.formatException(record.exc_info)

        for key, value in record.__dict__.items():
            if key not in _RESERVED_ATTRS and not key.startswith('_'):
                log_data[key] = value

        return json.dumps(log_data, default=str)


def configure_secure_logging(
    level: int = logging.INFO,
    format_type: str = 'text',
    include_trace_id: bool = True,
    additional_patterns: Optional[List[Tuple[re.Pattern, Replacement]]] = None,
) -> None:
    """
    Replace the root handlers with one masked console handler.

    Args:
        level: Logging level
        format_type: 'text' for human-readable, 'json' for structured logs
        include_trace_id: Include trace_id in text output
        additional_patterns: Extra (pattern, replacement) pairs to mask
    """
    root_logger = logging.getLogger()
    root_logger.setLevel(level)

    for handler in root_logger.handlers[:]:
        root_logger.removeHandler(handler)

    console_handler = logging.StreamHandler()
    console_handler.setLevel(level)
    console_handler.addFilter(SensitiveDataFilter(additional_patterns=additional_patterns))

    if format_type == 'json':
        console_handler.setFormatter(JSONSecureFormatter())
    else:
        console_handler.setFormatter(SecureFormatter(include_trace_id=include_trace_id))

    root_logger.addHandler(console_handler)


__all__ = [
    'SensitiveDataFilter',
    'SecureFormatter',
    'JSONSecureFormatter',
    'SENSITIVE_PATTERNS',
    'mask_sensitive',
    'configure_secure_logging',
]
