"""Shared fixtures for the goapkit test suite."""
from __future__ import annotations

import io
from pathlib import Path
from typing import TYPE_CHECKING

import pytest

from goapkit.core.models import Action, Goal
from goapkit.core.planner import GOAPPlanner
from goapkit.io.logging import StructuredLogger

if TYPE_CHECKING:
    from goapkit.core.models import StateView


HOUSE_DOMAIN_TOML = """
resources = []

[initial_state]
wood = 0
house = false

[goal]
name = "Shelter"
conditions = [{ key = "house", value = true }]

[[actions]]
name = "CollectWood"
cost = 1
effects = [{ key = "wood", delta = 5 }]

[[actions]]
name = "BuildHouse"
cost = 2
preconditions = [{ key = "wood", value = 10, operator = "greaterThanOrEqual" }]
effects = [{ key = "wood", delta = -10 }, { key = "house", value = true }]
"""


@pytest.fixture
def planner() -> GOAPPlanner:
    """Return a planner with default settings and no registered actions."""
    return GOAPPlanner()


@pytest.fixture
def log_stream() -> io.StringIO:
    """Return an in-memory stream capturing log output."""
    return io.StringIO()


@pytest.fixture
def json_logger(log_stream: io.StringIO) -> StructuredLogger:
    """Return a DEBUG-level JSON logger writing to ``log_stream``."""
    return StructuredLogger(name="goapkit.test", json_mode=True, stream=log_stream, level="DEBUG")


@pytest.fixture
def house_actions() -> list[Action]:
    """CollectWood adds five wood for 1; BuildHouse spends ten wood for 2."""

    def add_wood(state: StateView) -> int:
        return state["wood"] + 5

    def spend_wood(state: StateView) -> int:
        return state["wood"] - 10

    return [
        Action(name="CollectWood", cost=1, effects=[{"key": "wood", "value": add_wood}]),
        Action(
            name="BuildHouse",
            cost=2,
            preconditions=[{"key": "wood", "value": 10, "operator": "greater_than_or_equal"}],
            effects=[
                {"key": "wood", "value": spend_wood},
                {"key": "house", "value": True},
            ],
        ),
    ]


@pytest.fixture
def house_goal() -> Goal:
    """Goal requiring a built house."""
    return Goal(name="Shelter", conditions=[{"key": "house", "value": True}])


@pytest.fixture
def house_domain_file(tmp_path: Path) -> Path:
    """Write the house-building domain to disk and return its path."""
    path = tmp_path / "house.toml"
    path.write_text(HOUSE_DOMAIN_TOML, encoding="utf-8")
    return path
