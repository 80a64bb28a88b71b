"""Tests for ordinal cell paths."""

from __future__ import annotations

from extradiagram import cell_path
from extradiagram.model import Cell


def _make_tree() -> tuple[Cell, Cell, Cell, Cell]:
    """root -> [a, b -> [c]]"""
    root = Cell()
    a = Cell()
    b = Cell()
    c = Cell()
    root.insert(a)
    root.insert(b)
    b.insert(c)
    return root, a, b, c


class TestCreate:
    def test_root_path_is_empty(self) -> None:
        root, _, _, _ = _make_tree()
        assert cell_path.create(root) == ""

    def test_nested_paths(self) -> None:
        _, a, b, c = _make_tree()
        assert cell_path.create(a) == "0"
        assert cell_path.create(b) == "1"
        assert cell_path.create(c) == "1.0"

    def test_none(self) -> None:
        assert cell_path.create(None) == ""


class TestParentPath:
    def test_parent_paths(self) -> None:
        assert cell_path.get_parent_path("1.0") == "1"
        assert cell_path.get_parent_path("1") == ""
        assert cell_path.get_parent_path("") is None
        assert cell_path.get_parent_path(None) is None


class TestResolve:
    def test_resolve_inverts_create(self) -> None:
        root, a, b, c = _make_tree()
        for cell in (root, a, b, c):
            assert cell_path.resolve(root, cell_path.create(cell)) is cell


class TestCompare:
    def test_segments_compare_as_integers(self) -> None:
        assert cell_path.compare("2", "10") == -1
        assert cell_path.compare("1.2", "1.10") == -1
        assert cell_path.compare("10", "2") == 1

    def test_prefix_sorts_first(self) -> None:
        assert cell_path.compare("1", "1.0") == -1
        assert cell_path.compare("1.0", "1") == 1
        assert cell_path.compare("", "0") == -1

    def test_equal(self) -> None:
        assert cell_path.compare("1.0", "1.0") == 0
        assert cell_path.compare(["1", "0"], "1.0") == 0


class TestSortCells:
    def test_pre_order(self) -> None:
        root, a, b, c = _make_tree()
        assert cell_path.sort_cells([c, root, b, a]) == [root, a, b, c]

    def test_descending(self) -> None:
        _, a, b, c = _make_tree()
        assert cell_path.sort_cells([a, c, b], ascending=False) == [c, b, a]
