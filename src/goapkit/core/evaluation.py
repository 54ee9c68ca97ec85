"""Condition evaluation, effect application and state hashing.

Every function here is pure: world states go in as mappings and come out as
new dictionaries, so search branches and the executing agent can share
ancestor states without interfering with each other.
"""

from __future__ import annotations

import json
from typing import TYPE_CHECKING, Any

from .models import Computed, Operator

if TYPE_CHECKING:  # pragma: no cover - typing helpers only
    from collections.abc import Collection, Iterable

    from .models import Action, Condition, Effect, Goal, StateView, WorldState


CONSUMED_SUFFIX = "_consumed"

_EMPTY: frozenset[str] = frozenset()


def consumed_key(key: str) -> str:
    """Return the companion flag key tracking consumption of resource ``key``."""
    return f"{key}{CONSUMED_SUFFIX}"


def is_number(value: Any) -> bool:
    """Return ``True`` for ints and floats, excluding booleans."""
    return isinstance(value, (int, float)) and not isinstance(value, bool)


def resolve(value: Any, state: StateView) -> Any:
    """Evaluate ``value`` against ``state`` when it is computed."""
    if isinstance(value, Computed):
        return value.evaluate(state)
    return value


def _strict_equals(left: Any, right: Any) -> bool:
    if isinstance(left, bool) != isinstance(right, bool):
        return False
    return bool(left == right)


def compare(actual: Any, expected: Any, operator: Operator) -> bool:
    """Compare a state value with an expected value.

    Ordering operators on values that cannot be ordered against each other,
    such as a missing key against a number, evaluate to ``False``.
    """
    if operator is Operator.equals:
        return _strict_equals(actual, expected)
    if operator is Operator.not_equals:
        return not _strict_equals(actual, expected)
    if actual is None or expected is None:
        return False
    try:
        if operator is Operator.greater_than:
            return bool(actual > expected)
        if operator is Operator.less_than:
            return bool(actual < expected)
        if operator is Operator.greater_than_or_equal:
            return bool(actual >= expected)
        return bool(actual <= expected)
    except TypeError:
        return False


def condition_holds(state: StateView, condition: Condition) -> bool:
    """Return ``True`` when ``condition`` holds in ``state``."""
    expected = resolve(condition.value, state)
    return compare(state.get(condition.key), expected, condition.operator)


def preconditions_hold(
    state: StateView,
    preconditions: Iterable[Condition],
    resource_keys: Collection[str] = _EMPTY,
) -> bool:
    """Return ``True`` when every precondition holds.

    A ``greater_than_or_equal`` gate on a resource key fails while that
    resource's consumed flag is set, whatever the numeric value says.
    """
    for condition in preconditions:
        if (
            condition.key in resource_keys
            and condition.operator is Operator.greater_than_or_equal
            and state.get(consumed_key(condition.key))
        ):
            return False
        if not condition_holds(state, condition):
            return False
    return True


def goal_satisfied(state: StateView, goal: Goal) -> bool:
    """Return ``True`` when all of ``goal``'s conditions hold in ``state``."""
    return all(condition_holds(state, condition) for condition in goal.conditions)


def apply_effects(
    state: StateView,
    effects: Iterable[Effect],
    resource_keys: Collection[str] = _EMPTY,
) -> WorldState:
    """Return a new state with ``effects`` folded in from left to right.

    Computed effects observe the changes made by earlier effects of the same
    application. Writes to resource keys maintain the consumed flag: a numeric
    decrease sets it, any other numeric change clears it.
    """
    new_state: WorldState = dict(state)
    for effect in effects:
        previous = new_state.get(effect.key)
        value = resolve(effect.value, new_state)
        if effect.key in resource_keys and is_number(value) and is_number(previous):
            if value < previous:
                new_state[consumed_key(effect.key)] = True
            else:
                new_state.pop(consumed_key(effect.key), None)
        new_state[effect.key] = value
    return new_state


def step_cost(action: Action, successor: StateView) -> float:
    """Return the cost of ``action``.

    Literal costs are returned as-is; computed costs are evaluated against
    ``successor``, the state produced by applying the action's effects.
    """
    if isinstance(action.cost, Computed):
        return float(action.cost.evaluate(successor))
    return float(action.cost)


def _canonical(value: Any) -> Any:
    if isinstance(value, float) and value.is_integer():
        return int(value)
    return value


def state_hash(state: StateView) -> str:
    """Return a canonical string identifying the content of ``state``.

    Key order does not matter; consumed flags are listed apart from the
    regular keys.
    """
    regular = sorted((key, _canonical(value)) for key, value in state.items() if not key.endswith(CONSUMED_SUFFIX))
    consumed = sorted((key, _canonical(value)) for key, value in state.items() if key.endswith(CONSUMED_SUFFIX))
    return json.dumps({"state": regular, "consumed": consumed}, default=repr)


__all__ = [
    "CONSUMED_SUFFIX",
    "apply_effects",
    "compare",
    "condition_holds",
    "consumed_key",
    "goal_satisfied",
    "is_number",
    "preconditions_hold",
    "resolve",
    "state_hash",
    "step_cost",
]
