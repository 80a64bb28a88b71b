"""Ordinal paths of cells in a cell tree.

A path is the dot-joined list of child indices leading from the root to a
cell, root excluded: the root's path is "" and its second child is "1".
Paths order cells in depth-first pre-order.
"""

from __future__ import annotations

from collections.abc import Iterable, Sequence
from functools import cmp_to_key
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from .model import Cell

PATH_SEPARATOR = "."


def create(cell: Cell | None) -> str:
    """Create the path of a cell relative to the root of its tree."""
    result = ""
    if cell is not None:
        parent = cell.get_parent()
        while parent is not None:
            index = parent.get_index(cell)
            result = f"{index}{PATH_SEPARATOR}{result}"
            cell = parent
            parent = cell.get_parent()

    if len(result) > 1:
        result = result[:-1]
    return result


def get_parent_path(path: str | None) -> str | None:
    """Return the path of the parent, or None for the root path."""
    if path is not None:
        index = path.rfind(PATH_SEPARATOR)
        if index >= 0:
            return path[:index]
        if len(path) > 0:
            return ""
    return None


def resolve(root: Cell, path: str | None) -> Cell:
    """Descend from root along path.

    The tree must have the same shape as when the path was created.
    """
    parent = root
    if path:
        for token in path.split(PATH_SEPARATOR):
            parent = parent.get_child_at(int(token))
    return parent


def compare(p1: str | Sequence[str], p2: str | Sequence[str]) -> int:
    """Compare two paths in pre-order.

    Segments are compared as integers; a path sorts after its prefixes.

    Returns:
        -1, 0 or 1
    """
    s1 = _segments(p1)
    s2 = _segments(p2)

    comp = 0
    for a, b in zip(s1, s2):
        if a != b:
            if len(a) == 0 or len(b) == 0:
                comp = 1 if a > b else -1
            else:
                t1 = int(a)
                t2 = int(b)
                comp = 0 if t1 == t2 else (1 if t1 > t2 else -1)
            break

    if comp == 0 and len(s1) != len(s2):
        comp = 1 if len(s1) > len(s2) else -1
    return comp


def sort_cells(cells: Iterable[Cell], ascending: bool = True) -> list[Cell]:
    """Sort cells by their paths (pre-order), ancestors before descendants."""
    ordered = list(cells)
    paths = {id(cell): _segments(create(cell)) for cell in ordered}
    return sorted(
        ordered,
        key=cmp_to_key(lambda a, b: compare(paths[id(a)], paths[id(b)])),
        reverse=not ascending,
    )


def _segments(path: str | Sequence[str]) -> list[str]:
    if isinstance(path, str):
        return path.split(PATH_SEPARATOR) if path else []
    return list(path)
