"""
String utility functions for DOMCP.

Provides the name normalization used to turn artifact names into file names.
"""

from __future__ import annotations


def to_snake(name: str) -> str:
    """
    Convert a PascalCase or camelCase name to snake_case.

    An underscore is inserted before an uppercase character (not the first
    one) when the previous character is lowercase or the next character is
    lowercase, so runs of capitals stay glued together as acronyms.

    Args:
        name: Name to convert

    Returns:
        Lower-case, underscore-separated name

    Examples:
        >>> to_snake("UserService")
        'user_service'
        >>> to_snake("UserID")
        'user_id'
        >>> to_snake("HTMLParser")
        'html_parser'
        >>> to_snake("getHTTPResponse")
        'get_http_response'
        >>> to_snake("already_snake")
        'already_snake'
    """
    result: list[str] = []
    last = len(name) - 1
    for i, ch in enumerate(name):
        if ch.isupper() and i > 0:
            prev_lower = name[i - 1].islower()
            next_lower = i < last and name[i + 1].islower()
            if prev_lower or next_lower:
                result.append("_")
        result.append(_ascii_lower(ch))
    return "".join(result)


def _ascii_lower(ch: str) -> str:
    # Only ASCII letters are folded; other characters pass through untouched
    if "A" <= ch <= "Z":
        return chr(ord(ch) + 32)
    return ch


__all__ = ["to_snake"]
