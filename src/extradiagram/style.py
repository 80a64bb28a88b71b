"""Style strings: parsing and in-place editing.

A style string is a semicolon-separated list of tokens, each either the
name of a style in the style sheet or a key=value pair:

    rounded;strokeColor=red;fontSize=12

The value "none" removes a key while resolving. A leading ";" makes the
string ignore the default style of the cell.

set_style and set_style_flag edit the raw string in place, so token order
and unknown tokens survive an edit.
"""

from __future__ import annotations

import math
import re
from collections.abc import Iterable, Mapping
from typing import TYPE_CHECKING, Any

if TYPE_CHECKING:
    from .model import Cell

NONE = "none"

_NUMERIC_RE = re.compile(r"^\s*[+-]?(\d+\.?\d*|\.\d+)([eE][+-]?\d+)?\s*$")
_INTEGER_RE = re.compile(r"^\s*[+-]?\d+\s*$")

StyleValue = str | int | float

# ---------------------------------------------------------------------------
# Values
# ---------------------------------------------------------------------------


def is_numeric(value: Any) -> bool:
    """True for finite decimal numbers and strings that spell one."""
    if isinstance(value, bool):
        return False
    if isinstance(value, int | float):
        return math.isfinite(value)
    if isinstance(value, str):
        return _NUMERIC_RE.match(value) is not None
    return False


def coerce_value(value: str) -> StyleValue:
    """Convert numeric-looking strings to int or float, keep others."""
    if not is_numeric(value):
        return value
    if _INTEGER_RE.match(value):
        return int(value)
    return float(value)


def format_value(value: Any) -> str:
    """Format a style or attribute value for writing."""
    if isinstance(value, bool):
        return "1" if value else "0"
    if isinstance(value, float) and value.is_integer():
        return str(int(value))
    return str(value)


# ---------------------------------------------------------------------------
# Parsing
# ---------------------------------------------------------------------------


def parse_style(style: str | None) -> list[tuple[str, str | None]]:
    """Split a style string into (name, None) and (key, value) tokens.

    Values are kept as strings. Empty tokens are dropped.
    """
    tokens: list[tuple[str, str | None]] = []
    if not style:
        return tokens
    for token in style.split(";"):
        if not token:
            continue
        key, sep, value = token.partition("=")
        tokens.append((key, value) if sep else (token, None))
    return tokens


def to_style_string(style: Mapping[str, Any]) -> str:
    """Write a resolved style map as key=value pairs."""
    return "".join(f"{key}={format_value(value)};" for key, value in style.items())


# ---------------------------------------------------------------------------
# Style names
# ---------------------------------------------------------------------------


def get_stylename(style: str | None) -> str:
    """Return the first token if it is a style name, else ""."""
    if style:
        stylename = style.split(";")[0]
        if "=" not in stylename:
            return stylename
    return ""


def get_stylenames(style: str | None) -> list[str]:
    if not style:
        return []
    return [token for token in style.split(";") if token and "=" not in token]


def index_of_stylename(style: str | None, stylename: str) -> int:
    """Return the character offset of a style name token, or -1."""
    if style and stylename:
        pos = 0
        for token in style.split(";"):
            if token == stylename:
                return pos
            pos += len(token) + 1
    return -1


def add_stylename(style: str | None, stylename: str) -> str:
    style = style or ""
    if index_of_stylename(style, stylename) < 0:
        if style and not style.endswith(";"):
            style += ";"
        style += stylename
    return style


def remove_stylename(style: str | None, stylename: str) -> str:
    if not style:
        return ""
    return ";".join(token for token in style.split(";") if token != stylename)


def remove_all_stylenames(style: str | None) -> str:
    if not style:
        return ""
    return ";".join(token for token in style.split(";") if "=" in token)


# ---------------------------------------------------------------------------
# In-place editing
# ---------------------------------------------------------------------------


def _index_of_key(style: str, key: str) -> int:
    """Return the offset of the key=value token for key, or -1."""
    if style.startswith(key + "="):
        return 0
    index = style.find(";" + key + "=")
    return index + 1 if index >= 0 else -1


def set_style(style: str | None, key: str, value: Any) -> str:
    """Set or remove key in a style string.

    A value of None, "" or "none" removes the key. Other tokens keep their
    position.
    """
    is_value = value is not None and value != "" and value != NONE
    text = format_value(value) if is_value else ""

    if not style:
        return f"{key}={text};" if is_value else ""

    if style.startswith(key + "="):
        end = style.find(";")
        if is_value:
            return f"{key}={text}" + (";" if end < 0 else style[end:])
        return "" if end < 0 or end == len(style) - 1 else style[end + 1 :]

    index = style.find(";" + key + "=")
    if index < 0:
        if is_value:
            sep = "" if style.endswith(";") else ";"
            return f"{style}{sep}{key}={text};"
        return style

    end = style.find(";", index + 1)
    if is_value:
        return style[: index + 1] + f"{key}={text}" + (";" if end < 0 else style[end:])
    return style[:index] + (";" if end < 0 else style[end:])


def set_style_flag(style: str | None, key: str, flag: int, value: bool | None = None) -> str:
    """Set, clear or toggle a bit in the integer value of key.

    Args:
        style: The style string to edit
        key: Key whose value is a bitmask
        flag: The bit(s) to change
        value: True sets the flag, False clears it, None toggles it
    """
    initial = 0 if value is False else flag

    if not style:
        return f"{key}={initial}"

    index = _index_of_key(style, key)
    if index < 0:
        sep = "" if style.endswith(";") else ";"
        return f"{style}{sep}{key}={initial}"

    cont = style.find(";", index)
    start = index + len(key) + 1
    current = style[start:] if cont < 0 else style[start:cont]
    bits = _to_int(current)

    if value is None:
        bits ^= flag
    elif value:
        bits |= flag
    else:
        bits &= ~flag

    return style[:index] + f"{key}={bits}" + (style[cont:] if cont >= 0 else "")


def _to_int(text: str) -> int:
    try:
        return int(float(text))
    except (ValueError, OverflowError):
        return 0


def set_cells_style(cells: Iterable[Cell | None], key: str, value: Any) -> None:
    """Apply set_style to the style of every given cell."""
    for cell in cells:
        if cell is not None:
            cell.style = set_style(cell.style, key, value)


def set_cells_style_flag(
    cells: Iterable[Cell | None], key: str, flag: int, value: bool | None = None
) -> None:
    """Apply set_style_flag to the style of every given cell."""
    for cell in cells:
        if cell is not None:
            cell.style = set_style_flag(cell.style, key, flag, value)
