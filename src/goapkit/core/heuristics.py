"""Forward-cost estimates and frontier tie-break strategies for the planner."""

from __future__ import annotations

import math
from typing import TYPE_CHECKING, Protocol

from pydantic import BaseModel, ConfigDict, Field

from .evaluation import condition_holds, is_number, resolve, step_cost
from .models import Computed, HeuristicKind, HeuristicSettings, Operator

if TYPE_CHECKING:  # pragma: no cover - typing helpers only
    from collections.abc import Sequence

    from .models import Action, Goal, StateView


_LOWER_BOUND_OPERATORS = (Operator.greater_than, Operator.greater_than_or_equal)


def _numeric(value: object) -> float:
    """Read a state value as a number, treating anything non-numeric as zero."""
    return float(value) if is_number(value) else 0.0


class Heuristic(Protocol):
    """Strategy consulted by :class:`goapkit.core.planner.GOAPPlanner`."""

    def estimate(self, state: StateView, goal: Goal, actions: Sequence[Action]) -> float:
        """Return the projected remaining cost from ``state``."""
        ...

    def progress(self, state: StateView, actions: Sequence[Action]) -> float:
        """Return a score used to break priority ties; higher leaves the frontier first."""
        ...


class NullHeuristic:
    """No guidance at all: the search degrades to uniform-cost order."""

    def estimate(self, state: StateView, goal: Goal, actions: Sequence[Action]) -> float:
        del state, goal, actions
        return 0.0

    def progress(self, state: StateView, actions: Sequence[Action]) -> float:
        del state, actions
        return 0.0


class GoalMarkerHeuristic(BaseModel):
    """Projection built around actions that set ``marker_key`` to ``True``.

    Only those "goal actions" are considered. For each one, every numeric
    lower-bound precondition still unmet (``current <= target``) is assumed to
    be closed by replenishing ``replenish_rate`` units per unit of cost, and
    the action's own cost is added; a computed cost is evaluated with
    ``projected_resource_key`` raised to the highest threshold involved. The
    estimate is the cheapest such projection, or zero when no action follows
    the marker convention. Goals keyed on anything else get no guidance.
    """

    marker_key: str = "goal"
    replenish_rate: float = Field(default=5.0, gt=0.0)
    projected_resource_key: str = "resources"

    model_config = ConfigDict(frozen=True, extra="forbid")

    def goal_actions(self, actions: Sequence[Action]) -> list[Action]:
        """Return the actions carrying a literal ``marker_key = True`` effect."""
        return [
            action
            for action in actions
            if any(effect.key == self.marker_key and effect.value is True for effect in action.effects)
        ]

    def progress(self, state: StateView, actions: Sequence[Action]) -> float:
        """Sum how far ``state`` is towards each goal action's numeric thresholds, capped at 1 each."""
        total = 0.0
        for action in self.goal_actions(actions):
            for condition in action.preconditions:
                if condition.operator not in _LOWER_BOUND_OPERATORS:
                    continue
                target = resolve(condition.value, state)
                if not is_number(target):
                    continue
                current = _numeric(state.get(condition.key))
                if target > 0:
                    total += min(1.0, current / target)
                elif current > 0:
                    total += 1.0
        return total

    def estimate(self, state: StateView, goal: Goal, actions: Sequence[Action]) -> float:
        """Return the cheapest projected cost over the goal actions."""
        del goal  # the marker convention ignores the goal's own conditions
        best: float | None = None
        for action in self.goal_actions(actions):
            projection = 0.0
            required = 0.0
            for condition in action.preconditions:
                if condition.operator not in _LOWER_BOUND_OPERATORS:
                    continue
                target = resolve(condition.value, state)
                if not is_number(target):
                    continue
                current = _numeric(state.get(condition.key))
                if current <= target:
                    projection += math.ceil((target - current) / self.replenish_rate)
                    required = max(required, target)
            if isinstance(action.cost, Computed):
                projected_state = {**state, self.projected_resource_key: required}
                projection += step_cost(action, projected_state)
            else:
                projection += float(action.cost)
            if best is None or projection < best:
                best = projection
        return best if best is not None else 0.0


class GoalDistanceHeuristic(BaseModel):
    """Estimate based on the goal's unmet conditions.

    Each unmet numeric goal condition contributes its absolute distance, any
    other unmet condition contributes one. The largest shortfall against any
    action's numeric lower-bound precondition adds a replenishment estimate.
    """

    replenish_rate: float = Field(default=5.0, gt=0.0)

    model_config = ConfigDict(frozen=True, extra="forbid")

    def estimate(self, state: StateView, goal: Goal, actions: Sequence[Action]) -> float:
        estimate = 0.0
        shortfall = 0.0
        for action in actions:
            for condition in action.preconditions:
                if condition.operator not in _LOWER_BOUND_OPERATORS:
                    continue
                required = resolve(condition.value, state)
                if not is_number(required):
                    continue
                current = _numeric(state.get(condition.key))
                if current <= required:
                    shortfall = max(shortfall, required - current)
        if shortfall > 0:
            estimate += math.ceil(shortfall / self.replenish_rate)

        for condition in goal.conditions:
            if condition_holds(state, condition):
                continue
            expected = resolve(condition.value, state)
            actual = state.get(condition.key)
            if is_number(expected) and is_number(actual):
                estimate += abs(actual - expected)
            else:
                estimate += 1.0
        return estimate

    def progress(self, state: StateView, actions: Sequence[Action]) -> float:
        del state, actions
        return 0.0


def build_heuristic(kind: HeuristicKind, settings: HeuristicSettings | None = None) -> Heuristic:
    """Instantiate the heuristic strategy named by ``kind``."""
    settings = settings or HeuristicSettings()
    if kind is HeuristicKind.goal_marker:
        return GoalMarkerHeuristic(
            marker_key=settings.marker_key,
            replenish_rate=settings.replenish_rate,
            projected_resource_key=settings.projected_resource_key,
        )
    if kind is HeuristicKind.goal_distance:
        return GoalDistanceHeuristic(replenish_rate=settings.replenish_rate)
    return NullHeuristic()


__all__ = [
    "GoalDistanceHeuristic",
    "GoalMarkerHeuristic",
    "Heuristic",
    "NullHeuristic",
    "build_heuristic",
]
