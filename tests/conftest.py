from __future__ import annotations

import os
from collections.abc import Callable, Generator

import pytest

from adapters.layout.grid import DepthFirstLayoutEngine
from app.config import AppSettings, DiagramSettings
from domain.models import Automaton, LayoutConfig
from domain.services.build_diagram import AutomatonDiagramBuilder


def _clear_diagram_env() -> None:
    for key in list(os.environ):
        if key.startswith("AUTOMATON_DIAGRAM_"):
            os.environ.pop(key, None)


_clear_diagram_env()


@pytest.fixture(autouse=True)
def clear_diagram_env() -> Generator[None, None, None]:
    _clear_diagram_env()
    yield
    _clear_diagram_env()


@pytest.fixture
def layout_config() -> LayoutConfig:
    return LayoutConfig()


@pytest.fixture
def layout_engine() -> DepthFirstLayoutEngine:
    return DepthFirstLayoutEngine()


@pytest.fixture
def diagram_builder(
    layout_engine: DepthFirstLayoutEngine, layout_config: LayoutConfig
) -> AutomatonDiagramBuilder:
    return AutomatonDiagramBuilder(layout_engine, layout_config)


@pytest.fixture
def single_state() -> Automaton:
    return Automaton.model_validate({"states": [{}]})


@pytest.fixture
def ping_pong() -> Automaton:
    return Automaton.model_validate(
        {
            "states": [
                {"branches": {"a": [1]}},
                {"branches": {"b": [0]}, "accepts": True},
            ]
        }
    )


@pytest.fixture
def app_settings_factory() -> Callable[..., AppSettings]:
    def _factory(**overrides: object) -> AppSettings:
        return AppSettings(diagram=DiagramSettings().model_copy(update=overrides))

    return _factory
