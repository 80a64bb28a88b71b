"""Shared test fixtures for extradiagram."""

from __future__ import annotations

import os
from collections.abc import Iterator
from pathlib import Path

import pytest
from loguru import logger

from extradiagram.config import get_settings
from extradiagram.model import Cell, Geometry, GraphModel
from extradiagram.registry import CodecRegistry, build_default_registry


@pytest.fixture(autouse=True)
def clean_settings(monkeypatch: pytest.MonkeyPatch, tmp_path: Path) -> Iterator[None]:
    """Isolate tests from EXTRADIAGRAM_* variables and any local .env file."""
    for key in list(os.environ):
        if key.upper().startswith("EXTRADIAGRAM_"):
            monkeypatch.delenv(key)
    monkeypatch.chdir(tmp_path)
    get_settings.cache_clear()
    yield
    get_settings.cache_clear()


@pytest.fixture
def log_messages() -> Iterator[list[str]]:
    """Collect the messages logged through loguru while the test runs."""
    messages: list[str] = []
    handler_id = logger.add(lambda m: messages.append(m.record["message"]), level="DEBUG")
    yield messages
    logger.remove(handler_id)


@pytest.fixture
def registry() -> CodecRegistry:
    return build_default_registry()


@pytest.fixture
def model() -> GraphModel:
    """A model with two vertices on the default layer joined by an edge.

    Ids: root "0", layer "1", vertices "2" and "3", edge "4".
    """
    graph = GraphModel()
    layer = graph.get_default_parent()
    assert layer is not None
    a = Cell(value="A", vertex=True, geometry=Geometry(x=10, y=20, width=80, height=30))
    b = Cell(value="B", vertex=True, style="rounded=1;fillColor=#FF0000")
    edge = Cell(value="", edge=True, geometry=Geometry(relative=True))
    graph.add(layer, a)
    graph.add(layer, b)
    graph.add(layer, edge)
    a.insert_edge(edge, True)
    b.insert_edge(edge, False)
    return graph
