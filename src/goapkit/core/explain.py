"""Utilities for explaining action plans to users."""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING, Any

from .evaluation import CONSUMED_SUFFIX, apply_effects, step_cost

if TYPE_CHECKING:  # pragma: no cover - typing helpers only
    from collections.abc import Collection, Iterable

    from .models import Action, StateView, WorldState


@dataclass(frozen=True, slots=True)
class ActionExplanation:
    """What a single planned action costs and which keys it changes."""

    index: int
    action: Action
    cost: float
    changes: dict[str, tuple[Any, Any]]
    state_after: WorldState


def explain_plan(
    actions: Iterable[Action],
    initial_state: StateView,
    *,
    resource_keys: Collection[str] = frozenset(),
) -> list[ActionExplanation]:
    """Replay ``actions`` from ``initial_state`` and describe each step.

    Args:
        actions: The planned actions, in order.
        initial_state: The state the plan starts from.
        resource_keys: Resource keys tracked by the planner, so costs match
            what the search accounted.

    Returns:
        One :class:`ActionExplanation` per action. Costs follow the planner:
        computed costs are evaluated on the state after the action's effects.
        Consumed flags are left out of ``changes``.

    """
    explanations: list[ActionExplanation] = []
    state: WorldState = dict(initial_state)

    for index, action in enumerate(actions, start=1):
        after = apply_effects(state, action.effects, resource_keys)
        changes = {
            key: (state.get(key), value)
            for key, value in after.items()
            if not key.endswith(CONSUMED_SUFFIX) and (key not in state or state[key] != value)
        }
        explanations.append(
            ActionExplanation(
                index=index,
                action=action,
                cost=step_cost(action, after),
                changes=changes,
                state_after=after,
            ),
        )
        state = after

    return explanations


def total_cost(explanations: Iterable[ActionExplanation]) -> float:
    """Return the summed cost of explained steps."""
    return sum(explanation.cost for explanation in explanations)


__all__ = ["ActionExplanation", "explain_plan", "total_cost"]
