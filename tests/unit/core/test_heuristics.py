"""Tests for the forward-cost heuristics."""

from __future__ import annotations

import pytest

from goapkit.core import (
    Action,
    GOAPPlanner,
    Goal,
    GoalDistanceHeuristic,
    GoalMarkerHeuristic,
    HeuristicKind,
    HeuristicSettings,
    NullHeuristic,
    build_heuristic,
)


@pytest.fixture
def marker_goal() -> Goal:
    """Goal expressed through the ``goal`` marker key."""
    return Goal(name="marker", conditions=[{"key": "goal", "value": True}])


@pytest.fixture
def build_action() -> Action:
    """Goal action needing ten wood."""
    return Action(
        name="Build",
        cost=2,
        preconditions=[{"key": "wood", "value": 10, "operator": "greater_than_or_equal"}],
        effects=[{"key": "goal", "value": True}],
    )


def test_estimate_is_zero_without_marker_actions(marker_goal: Goal) -> None:
    """Actions that never set the marker contribute no guidance."""
    heuristic = GoalMarkerHeuristic()
    actions = [Action(name="Build", cost=5, effects=[{"key": "house", "value": True}])]

    assert heuristic.estimate({"wood": 0}, marker_goal, actions) == 0.0
    assert heuristic.progress({"wood": 0}, actions) == 0.0


def test_estimate_adds_replenishment_and_action_cost(marker_goal: Goal, build_action: Action) -> None:
    """Missing wood is bought back at five units per cost unit."""
    heuristic = GoalMarkerHeuristic()

    assert heuristic.estimate({"wood": 3}, marker_goal, [build_action]) == 4.0
    assert heuristic.estimate({"wood": 10}, marker_goal, [build_action]) == 2.0
    assert heuristic.estimate({"wood": 12}, marker_goal, [build_action]) == 2.0


def test_estimate_takes_cheapest_goal_action(marker_goal: Goal) -> None:
    """The projection is the minimum over all marker actions."""
    heuristic = GoalMarkerHeuristic()
    actions = [
        Action(name="Slow", cost=2, effects=[{"key": "goal", "value": True}]),
        Action(name="Fast", cost=1, effects=[{"key": "goal", "value": True}]),
    ]

    assert heuristic.estimate({}, marker_goal, actions) == 1.0


def test_computed_cost_is_projected_at_required_resource_level(marker_goal: Goal) -> None:
    """Computed costs are evaluated with ``resources`` raised to the threshold."""
    heuristic = GoalMarkerHeuristic()
    cheap = Action(
        name="CheapPath",
        cost=lambda state: state["resources"] * 0.5,
        preconditions=[{"key": "resources", "value": 9, "operator": "greater_than"}],
        effects=[{"key": "goal", "value": True}],
    )

    assert heuristic.estimate({"resources": 0}, marker_goal, [cheap]) == 6.5


def test_progress_caps_each_threshold_at_one(build_action: Action) -> None:
    """Progress grows towards each threshold and saturates once it is met."""
    heuristic = GoalMarkerHeuristic()

    assert heuristic.progress({}, [build_action]) == 0.0
    assert heuristic.progress({"wood": 5}, [build_action]) == 0.5
    assert heuristic.progress({"wood": 20}, [build_action]) == 1.0


def test_marker_key_is_configurable(build_action: Action) -> None:
    """A different marker key selects a different set of goal actions."""
    heuristic = GoalMarkerHeuristic(marker_key="done")
    finisher = Action(name="Finish", cost=3, effects=[{"key": "done", "value": True}])
    goal = Goal(name="done", conditions=[{"key": "done", "value": True}])

    assert heuristic.goal_actions([build_action, finisher]) == [finisher]
    assert heuristic.estimate({}, goal, [build_action, finisher]) == 3.0


def test_goal_distance_counts_unmet_conditions() -> None:
    """Numeric gaps count their distance, other unmet conditions count one."""
    heuristic = GoalDistanceHeuristic()
    goal = Goal(
        name="mixed",
        conditions=[{"key": "value", "value": 10}, {"key": "lit", "value": True}],
    )
    gated = Action(
        name="Gate",
        cost=1,
        preconditions=[{"key": "wood", "value": 10, "operator": "greater_than_or_equal"}],
    )

    assert heuristic.estimate({"value": 4, "lit": False}, goal, []) == 7.0
    assert heuristic.estimate({"value": 10, "lit": True}, goal, []) == 0.0
    assert heuristic.estimate({"value": 10, "lit": True, "wood": 0}, goal, [gated]) == 2.0


@pytest.mark.parametrize(
    ("kind", "expected"),
    [
        (HeuristicKind.goal_marker, GoalMarkerHeuristic),
        (HeuristicKind.goal_distance, GoalDistanceHeuristic),
        (HeuristicKind.none, NullHeuristic),
    ],
)
def test_build_heuristic_selects_strategy(kind: HeuristicKind, expected: type) -> None:
    """Configuration names map onto strategy classes."""
    assert isinstance(build_heuristic(kind), expected)


def test_build_heuristic_applies_settings() -> None:
    """Settings flow into the goal-marker strategy."""
    heuristic = build_heuristic(
        HeuristicKind.goal_marker,
        HeuristicSettings(marker_key="done", replenish_rate=2.0, projected_resource_key="gold"),
    )

    assert heuristic == GoalMarkerHeuristic(marker_key="done", replenish_rate=2.0, projected_resource_key="gold")


@pytest.mark.parametrize("heuristic", [NullHeuristic(), GoalDistanceHeuristic(), GoalMarkerHeuristic()])
def test_every_strategy_finds_the_house_plan(
    heuristic: object,
    house_actions: list[Action],
    house_goal: Goal,
) -> None:
    """Swapping strategies keeps the optimal plan on this small domain."""
    planner = GOAPPlanner(heuristic=heuristic)  # type: ignore[arg-type]
    for action in house_actions:
        planner.add_action(action)

    plan = planner.plan({"wood": 0, "house": False}, house_goal)

    assert plan.action_names == ["CollectWood", "CollectWood", "BuildHouse"]
