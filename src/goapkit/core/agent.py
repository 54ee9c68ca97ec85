"""Execution wrapper applying planned actions to a live world state."""

from __future__ import annotations

import inspect
from dataclasses import dataclass, field
from typing import TYPE_CHECKING

from .evaluation import apply_effects
from .planner import GOAPPlanner

if TYPE_CHECKING:  # pragma: no cover - typing helpers only
    from goapkit.io.logging import StructuredLogger

    from .models import Action, Goal, StateView, WorldState


@dataclass(slots=True, frozen=True)
class ExecutionResult:
    """Outcome of a single :meth:`Agent.execute_plan` call."""

    success: bool
    executed_actions: list[Action] = field(default_factory=list)
    error: str | None = None


class Agent:
    """Plan towards goals and execute the plans against the agent's own state.

    Actions run one at a time; an ``execute`` callable returning an awaitable
    is awaited before the action's effects are applied. Any exception rolls
    the state back to what it was before the plan started.
    """

    def __init__(
        self,
        initial_state: StateView,
        *,
        planner: GOAPPlanner | None = None,
        logger: StructuredLogger | None = None,
    ) -> None:
        """Create an agent starting from a copy of ``initial_state``."""
        self._world_state: WorldState = dict(initial_state)
        self._planner = planner if planner is not None else GOAPPlanner()
        self._logger = logger
        self._current_plan: list[Action] = []
        self._last_result: ExecutionResult | None = None

    @property
    def planner(self) -> GOAPPlanner:
        """Return the planner used to build plans."""
        return self._planner

    @property
    def current_plan(self) -> list[Action]:
        """Return the most recently computed plan."""
        return list(self._current_plan)

    @property
    def last_result(self) -> ExecutionResult | None:
        """Return the outcome of the latest execution attempt."""
        return self._last_result

    def add_action(self, action: Action) -> None:
        """Make ``action`` available to the planner."""
        self._planner.add_action(action)

    def current_state(self) -> WorldState:
        """Return a copy of the live world state."""
        return dict(self._world_state)

    async def execute_plan(self, goal: Goal) -> bool:
        """Plan towards ``goal`` and run the plan, returning ``True`` on success."""
        self._current_plan = self._planner.find_plan(self._world_state, goal)
        if not self._current_plan:
            self._last_result = ExecutionResult(success=False, error="no plan found")
            self._log_info("no plan found", goal=goal.name)
            return False

        snapshot = dict(self._world_state)
        executed: list[Action] = []
        try:
            for action in self._current_plan:
                if action.execute is not None:
                    outcome = action.execute()
                    if inspect.isawaitable(outcome):
                        await outcome
                self._world_state = apply_effects(self._world_state, action.effects)
                executed.append(action)
        except Exception as error:
            self._world_state = snapshot
            self._last_result = ExecutionResult(success=False, executed_actions=executed, error=str(error))
            if self._logger is not None:
                self._logger.error(
                    "plan execution failed; state rolled back",
                    goal=goal.name,
                    action=self._current_plan[len(executed)].name,
                    error=str(error),
                )
            return False

        self._last_result = ExecutionResult(success=True, executed_actions=executed)
        self._log_info("plan executed", goal=goal.name, actions=[action.name for action in executed])
        return True

    def _log_info(self, message: str, **fields: object) -> None:
        if self._logger is not None:
            self._logger.info(message, **fields)


__all__ = ["Agent", "ExecutionResult"]
