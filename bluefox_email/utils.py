"""
Shared helpers for the Bluefox client.

Provides:
- UNSET sentinel for "value not supplied"
- Request body cleanup (strip_undefined_keys)
- Debug/error logging helpers with readable formatting of nested data
"""

import dataclasses
import logging
from typing import Any, Dict

logger = logging.getLogger(__name__)


class _Unset:
    """Marker for a field the caller did not supply."""

    _instance = None

    def __new__(cls):
        if cls._instance is None:
            cls._instance = super().__new__(cls)
        return cls._instance

    def __bool__(self) -> bool:
        return False

    def __repr__(self) -> str:
        return 'UNSET'


UNSET: Any = _Unset()


def strip_undefined_keys(body: Any) -> Any:
    """Remove keys whose value is UNSET from a request body.

    Only the top level is cleaned. Lists pass through unchanged and
    falsy values such as None, 0, False or "" are kept.

    Args:
        body: Request body (usually a dict)

    Returns:
        A shallow copy of the dict without UNSET values, or the input
        unchanged if it is not a dict.

    Example:
        strip_undefined_keys({'emails': ['a@b.com'], 'data': UNSET})
        # -> {'emails': ['a@b.com']}
    """
    if not isinstance(body, dict):
        return body
    return {key: value for key, value in body.items() if value is not UNSET}


# =========================================================================
# Logging
# =========================================================================

def format_debug(data: Any, max_depth: int = 5) -> str:
    """Render arbitrary (nested) data as a single readable line.

    Args:
        data: Data to render
        max_depth: Nesting level after which values are shown as [Truncated]

    Returns:
        Formatted string
    """
    seen = set()

    def _format(item: Any, depth: int) -> str:
        if depth > max_depth:
            return '[Truncated]'

        if item is None or item is UNSET:
            return repr(item)
        if isinstance(item, (str, int, float, bool)):
            return repr(item)

        if id(item) in seen:
            return '[Circular]'
        seen.add(id(item))
        try:
            if isinstance(item, BaseException):
                return f"Error({type(item).__name__}): {item}"
            if isinstance(item, dict):
                inner = ', '.join(
                    f"{key}: {_format(value, depth + 1)}" for key, value in item.items()
                )
                return f"Object {{{inner}}}"
            if isinstance(item, (list, tuple)):
                inner = ', '.join(_format(el, depth + 1) for el in item)
                return f"Array({len(item)}) [{inner}]"
            if isinstance(item, (set, frozenset)):
                inner = ', '.join(_format(el, depth + 1) for el in item)
                return f"Set({len(item)}) {{{inner}}}"
            if dataclasses.is_dataclass(item) and not isinstance(item, type):
                fields = {f.name: getattr(item, f.name) for f in dataclasses.fields(item)}
                inner = ', '.join(
                    f"{key}: {_format(value, depth + 1)}" for key, value in fields.items()
                )
                return f"{type(item).__name__} {{{inner}}}"
            if callable(item):
                return f"Function({getattr(item, '__name__', 'anonymous')})"
            return str(item)
        finally:
            seen.discard(id(item))

    return _format(data, 0)


def log_debug(name: str, data: Any, max_depth: int = 5):
    """Log a labelled debug entry.

    Args:
        name: Label for the log line (e.g. "SubscriberAdd.Input")
        data: Data to include
        max_depth: Maximum nesting depth rendered
    """
    if logger.isEnabledFor(logging.DEBUG):
        logger.debug(f"[{name}] - {format_debug(data, max_depth)}")


def log_error(name: str, error: Any):
    """Log a labelled error entry.

    Exceptions are logged with name, message and traceback; anything
    else is formatted like log_debug.

    Args:
        name: Label for the log line
        error: Exception or arbitrary error data
    """
    if isinstance(error, BaseException):
        logger.error(f"[{name}] - {type(error).__name__}: {error}",
                     exc_info=(type(error), error, error.__traceback__))
    else:
        logger.error(f"[{name}] - {format_debug(error)}")


def redact_headers(headers: Dict[str, str]) -> Dict[str, str]:
    """Return a copy of headers with the Authorization value masked."""
    redacted = dict(headers or {})
    for key in list(redacted):
        if key.lower() == 'authorization':
            redacted[key] = 'Bearer [REDACTED]'
    return redacted
