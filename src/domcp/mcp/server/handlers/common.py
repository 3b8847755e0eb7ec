"""Common helpers for MCP handler functions.

- Error-as-JSON wrapping
- Argument extraction from loosely-typed tool arguments
"""

from __future__ import annotations

import json
import logging
from collections.abc import Callable
from functools import wraps
from typing import Any

from domcp.core.errors import DomcpError

logger = logging.getLogger("domcp.mcp")


def handler_error_json(
    fn: Callable[..., str],
) -> Callable[..., str]:
    """Decorator that wraps handler errors into JSON error responses.

    Catches DomcpError, logs it, and returns ``{"error": "<message>"}``.
    """

    @wraps(fn)
    def wrapper(*args: Any, **kwargs: Any) -> str:
        try:
            return fn(*args, **kwargs)
        except DomcpError as e:
            logger.debug("Handler %s failed: %s", fn.__name__, e, exc_info=True)
            return json.dumps({"error": str(e)}, indent=2)

    return wrapper


def arg_str(args: dict[str, Any], key: str) -> str:
    """String argument, ``""`` when missing or not a string."""
    value = args.get(key)
    return value if isinstance(value, str) else ""


def opt_str(args: dict[str, Any], key: str) -> str | None:
    """String argument, ``None`` when missing or not a string."""
    value = args.get(key)
    return value if isinstance(value, str) else None


def opt_bool(args: dict[str, Any], key: str) -> bool | None:
    value = args.get(key)
    return value if isinstance(value, bool) else None


def opt_list(args: dict[str, Any], key: str) -> list[Any] | None:
    value = args.get(key)
    return value if isinstance(value, list) else None


def opt_str_list(args: dict[str, Any], key: str) -> list[str] | None:
    """List of strings, dropping non-string items; ``None`` when missing."""
    value = opt_list(args, key)
    if value is None:
        return None
    return [item for item in value if isinstance(item, str)]


def opt_dict_list(args: dict[str, Any], key: str) -> list[dict[str, Any]] | None:
    value = opt_list(args, key)
    if value is None:
        return None
    return [item for item in value if isinstance(item, dict)]


def to_json(data: Any) -> str:
    return json.dumps(data, indent=2)
