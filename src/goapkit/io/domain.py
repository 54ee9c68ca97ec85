"""Planning domain files: initial state, goal, actions and resources in TOML.

Example::

    resources = ["wood"]

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

Effects take either a literal ``value`` or a numeric ``delta`` added to the
key's current value.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from typing import TYPE_CHECKING

from pydantic import BaseModel, ConfigDict, Field, model_validator

from goapkit.core.evaluation import is_number
from goapkit.core.models import Action, Computed, Condition, Effect, Goal
from goapkit.io.config import read_toml

if TYPE_CHECKING:  # pragma: no cover - typing helpers only
    from goapkit.core.models import StateView, WorldState
    from goapkit.core.planner import GOAPPlanner


Scalar = bool | int | float | str


def _increment(key: str, delta: int | float) -> Computed:
    def add_delta(state: StateView) -> int | float:
        current = state.get(key)
        return (current if is_number(current) else 0) + delta

    sign = "+" if delta >= 0 else "-"
    return Computed(add_delta, description=f"{key} {sign} {abs(delta)}")


class EffectEntry(BaseModel):
    """Effect as written in a domain file."""

    key: str
    value: Scalar | None = None
    delta: int | float | None = None

    model_config = ConfigDict(extra="forbid")

    @model_validator(mode="after")
    def _value_or_delta(self) -> EffectEntry:
        if self.value is not None and self.delta is not None:
            msg = f"effect on '{self.key}' sets both 'value' and 'delta'"
            raise ValueError(msg)
        if self.value is None and self.delta is None:
            msg = f"effect on '{self.key}' needs 'value' or 'delta'"
            raise ValueError(msg)
        return self

    def to_effect(self) -> Effect:
        """Compile into a core :class:`Effect`."""
        if self.delta is not None:
            return Effect(key=self.key, value=_increment(self.key, self.delta))
        return Effect(key=self.key, value=self.value)


class ActionEntry(BaseModel):
    """Action as written in a domain file; costs are literal."""

    name: str
    cost: float = Field(default=1.0, ge=0.0)
    preconditions: list[Condition] = Field(default_factory=list)
    effects: list[EffectEntry] = Field(default_factory=list)

    model_config = ConfigDict(extra="forbid")

    def to_action(self) -> Action:
        """Compile into a core :class:`Action`."""
        return Action(
            name=self.name,
            cost=self.cost,
            preconditions=tuple(self.preconditions),
            effects=tuple(effect.to_effect() for effect in self.effects),
        )


class DomainFile(BaseModel):
    """Schema of a domain TOML document."""

    initial_state: dict[str, Scalar] = Field(default_factory=dict)
    goal: Goal
    actions: list[ActionEntry] = Field(default_factory=list)
    resources: list[str] = Field(default_factory=list)

    model_config = ConfigDict(extra="forbid")


@dataclass(frozen=True, slots=True)
class DomainSpec:
    """A loaded planning problem ready to hand to a planner."""

    initial_state: WorldState
    goal: Goal
    actions: list[Action] = field(default_factory=list)
    resources: list[str] = field(default_factory=list)

    def register(self, planner: GOAPPlanner) -> None:
        """Add this domain's actions and resource keys to ``planner``."""
        for action in self.actions:
            planner.add_action(action)
        for key in self.resources:
            planner.mark_as_resource(key)


def load_domain(
    *,
    path: Path | str | None = None,
    data: str | bytes | None = None,
) -> DomainSpec:
    """Load and validate a domain from TOML; exactly one of ``path`` or ``data``."""
    raw = read_toml(path=Path(path) if path is not None else None, data=data)
    parsed = DomainFile.model_validate(raw)
    return DomainSpec(
        initial_state=dict(parsed.initial_state),
        goal=parsed.goal,
        actions=[entry.to_action() for entry in parsed.actions],
        resources=list(parsed.resources),
    )


__all__ = ["ActionEntry", "DomainFile", "DomainSpec", "EffectEntry", "load_domain"]
