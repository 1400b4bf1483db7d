"""Small helpers for turning user-entered names into identifiers."""

from __future__ import annotations

import re

_INVALID_CHARS = re.compile(r"[^A-Za-z0-9_]")
_IDENTIFIER = re.compile(r"^[A-Za-z_][A-Za-z0-9_]*$")
_DOTTED_IDENTIFIER = re.compile(r"^[A-Za-z_][A-Za-z0-9_]*(\.[A-Za-z_][A-Za-z0-9_]*)*$")


def sanitize_identifier(name: str) -> str:
    """Replace every character outside ``[A-Za-z0-9_]`` with ``_``.

    The mapping is per character, so the result always has the same
    length as the input. Names that start with a digit are left as they
    are.

    Args:
        name: Raw layer name.

    Returns:
        The sanitized identifier.
    """
    return _INVALID_CHARS.sub("_", name)


def is_identifier(value: str) -> bool:
    """Return True if ``value`` is a single C# style identifier."""
    return isinstance(value, str) and bool(_IDENTIFIER.match(value))


def is_dotted_identifier(value: str) -> bool:
    """Return True for identifiers joined by dots, such as ``Game.Core``."""
    return isinstance(value, str) and bool(_DOTTED_IDENTIFIER.match(value))
