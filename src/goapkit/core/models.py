"""Core data models for goapkit."""

from __future__ import annotations

import re
import typing
from collections.abc import Callable, Mapping
from enum import Enum
from types import MappingProxyType

from pydantic import BaseModel, ConfigDict, Field, field_validator

WorldState = dict[str, typing.Any]
"""Symbolic world state: string keys mapped to booleans, numbers or strings."""

StateView = Mapping[str, typing.Any]


class Operator(str, Enum):
    """Comparison operators supported by conditions."""

    equals = "equals"
    not_equals = "not_equals"
    greater_than = "greater_than"
    less_than = "less_than"
    greater_than_or_equal = "greater_than_or_equal"
    less_than_or_equal = "less_than_or_equal"

    @classmethod
    def parse(cls, value: typing.Any) -> typing.Any:
        """Map camelCase spellings such as ``greaterThanOrEqual`` onto members."""
        if isinstance(value, str) and not isinstance(value, Operator):
            return re.sub(r"(?<!^)(?=[A-Z])", "_", value).lower()
        return value


class Computed:
    """A value derived from the world state it is evaluated against.

    Functions receive a read-only view of the state and must be pure: the
    planner evaluates them many times while exploring alternative branches.
    """

    __slots__ = ("_function", "description")

    def __init__(self, function: Callable[[StateView], typing.Any], description: str = "") -> None:
        """Wrap ``function`` with an optional human readable ``description``."""
        self._function = function
        self.description = description or getattr(function, "__name__", "computed")

    def evaluate(self, state: StateView) -> typing.Any:
        """Return the value for ``state``."""
        return self._function(MappingProxyType(state))

    def __repr__(self) -> str:
        return f"Computed({self.description!r})"


def as_value(value: typing.Any) -> typing.Any:
    """Wrap bare callables into :class:`Computed`, leaving literals untouched."""
    if isinstance(value, Computed) or not callable(value):
        return value
    return Computed(value)


class Condition(BaseModel):
    """A test against one key of the world state, used for preconditions and goals."""

    key: str
    value: typing.Any = None
    operator: Operator = Operator.equals

    model_config = ConfigDict(frozen=True, extra="forbid", arbitrary_types_allowed=True)

    @field_validator("value", mode="before")
    @classmethod
    def _wrap_callable(cls, value: typing.Any) -> typing.Any:
        return as_value(value)

    @field_validator("operator", mode="before")
    @classmethod
    def _normalise_operator(cls, value: typing.Any) -> typing.Any:
        return Operator.parse(value)


class Effect(BaseModel):
    """Assignment of a literal or computed value to one key of the world state."""

    key: str
    value: typing.Any = None

    model_config = ConfigDict(frozen=True, extra="forbid", arbitrary_types_allowed=True)

    @field_validator("value", mode="before")
    @classmethod
    def _wrap_callable(cls, value: typing.Any) -> typing.Any:
        return as_value(value)


class Action(BaseModel):
    """A named, costed state transformation gated by preconditions.

    ``execute`` is only used by :class:`goapkit.core.agent.Agent`; it may be a
    plain function or a coroutine function.
    """

    name: str
    cost: float | Computed
    preconditions: tuple[Condition, ...] = ()
    effects: tuple[Effect, ...] = ()
    execute: Callable[[], typing.Any] | None = None

    model_config = ConfigDict(frozen=True, extra="forbid", arbitrary_types_allowed=True)

    @field_validator("cost", mode="before")
    @classmethod
    def _wrap_callable(cls, value: typing.Any) -> typing.Any:
        return as_value(value)


class Goal(BaseModel):
    """A set of conditions a plan must establish."""

    name: str
    conditions: tuple[Condition, ...] = ()
    # Reserved; the search does not rank goals.
    priority: float | None = None

    model_config = ConfigDict(frozen=True, extra="forbid")


class Plan(BaseModel):
    """Outcome of a search: the cheapest action sequence found plus search statistics."""

    actions: list[Action]
    cost: float = 0.0
    found: bool = False
    iterations: int = 0
    expansions: int = 0
    notes: list[str] = Field(default_factory=list)

    model_config = ConfigDict(frozen=True, extra="forbid")

    @property
    def action_names(self) -> list[str]:
        """Return the names of the planned actions in order."""
        return [action.name for action in self.actions]


class HeuristicKind(str, Enum):
    """Forward-cost strategies selectable from configuration."""

    goal_marker = "goal_marker"
    goal_distance = "goal_distance"
    none = "none"


class LogLevel(str, Enum):
    """Minimum level emitted by :class:`goapkit.io.logging.StructuredLogger`."""

    debug = "DEBUG"
    info = "INFO"
    warning = "WARNING"
    error = "ERROR"


class HeuristicSettings(BaseModel):
    """Tunables for the goal-marker and goal-distance heuristics."""

    marker_key: str = "goal"
    replenish_rate: float = Field(default=5.0, gt=0.0)
    projected_resource_key: str = "resources"

    model_config = ConfigDict(frozen=True, extra="forbid")


class PlannerSettings(BaseModel):
    """Search budget and strategy selection."""

    max_iterations: int = Field(default=1000, ge=1)
    max_state_visits: int = Field(default=10, ge=0)
    heuristic: HeuristicKind = HeuristicKind.goal_marker
    resource_keys: list[str] = Field(default_factory=list)

    model_config = ConfigDict(extra="forbid")


class LoggingSettings(BaseModel):
    """Structured logging options."""

    json_mode: bool = False
    level: LogLevel = LogLevel.info

    model_config = ConfigDict(extra="forbid")

    @field_validator("level", mode="before")
    @classmethod
    def _upper_level(cls, value: typing.Any) -> typing.Any:
        return value.upper() if isinstance(value, str) else value


class Config(BaseModel):
    """Top level configuration schema validated from TOML files."""

    planner: PlannerSettings = Field(default_factory=PlannerSettings)
    heuristic: HeuristicSettings = Field(default_factory=HeuristicSettings)
    logging: LoggingSettings = Field(default_factory=LoggingSettings)

    model_config = ConfigDict(extra="forbid")


__all__ = [
    "Action",
    "Computed",
    "Condition",
    "Config",
    "Effect",
    "Goal",
    "HeuristicKind",
    "HeuristicSettings",
    "LogLevel",
    "LoggingSettings",
    "Operator",
    "Plan",
    "PlannerSettings",
    "StateView",
    "WorldState",
    "as_value",
]
