"""Best-first GOAP planner over symbolic world states."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import TYPE_CHECKING

from .evaluation import apply_effects, goal_satisfied, preconditions_hold, state_hash, step_cost
from .heuristics import GoalMarkerHeuristic
from .models import Action, Plan
from .queue import OrderingQueue

if TYPE_CHECKING:  # pragma: no cover - typing helpers only
    from goapkit.io.logging import StructuredLogger

    from .heuristics import Heuristic
    from .models import Goal, StateView, WorldState


@dataclass(slots=True)
class PlanningDomain:
    """Registered actions and resource keys shared by every search of a planner.

    The registries persist across searches until changed. They are not locked;
    callers must serialise mutation against concurrent searches.
    """

    actions: list[Action] = field(default_factory=list)
    resource_keys: set[str] = field(default_factory=set)

    def add_action(self, action: Action) -> None:
        """Register ``action``; duplicate names are allowed."""
        self.actions.append(action)

    def remove_action(self, name: str) -> None:
        """Drop every registered action called ``name``."""
        self.actions = [action for action in self.actions if action.name != name]

    def mark_as_resource(self, key: str) -> None:
        """Track consumption of state ``key``."""
        self.resource_keys.add(key)

    def clear_resource_tracking(self) -> None:
        """Forget every resource key."""
        self.resource_keys.clear()


@dataclass(frozen=True, slots=True)
class _PlanNode:
    state: WorldState
    actions: tuple[Action, ...]
    cost: float
    priority: float
    progress: float


def _compare_nodes(left: _PlanNode, right: _PlanNode) -> float:
    # Equal priority: the node closer to the goal actions' thresholds goes first.
    if left.priority == right.priority:
        return right.progress - left.progress
    return left.priority - right.priority


class GOAPPlanner:
    """Find the cheapest action sequence reaching a goal within an iteration budget.

    The frontier is ordered by accumulated cost plus the heuristic's forward
    estimate. The estimate is not admissible, so plans are best-effort; the
    search stops after ``max_iterations`` dequeues and skips states whose hash
    has already been dequeued more than ``max_state_visits`` times.
    """

    DEFAULT_MAX_ITERATIONS = 1000
    DEFAULT_MAX_STATE_VISITS = 10

    def __init__(
        self,
        *,
        domain: PlanningDomain | None = None,
        heuristic: Heuristic | None = None,
        max_iterations: int = DEFAULT_MAX_ITERATIONS,
        max_state_visits: int = DEFAULT_MAX_STATE_VISITS,
        logger: StructuredLogger | None = None,
    ) -> None:
        """Create a planner over ``domain`` (a fresh one when omitted)."""
        self._domain = domain if domain is not None else PlanningDomain()
        self._heuristic: Heuristic = heuristic if heuristic is not None else GoalMarkerHeuristic()
        self._max_iterations = max_iterations
        self._max_state_visits = max_state_visits
        self._logger = logger

    @property
    def domain(self) -> PlanningDomain:
        """Return the registries this planner searches over."""
        return self._domain

    @property
    def heuristic(self) -> Heuristic:
        """Return the forward-cost strategy."""
        return self._heuristic

    @property
    def actions(self) -> tuple[Action, ...]:
        """Return a snapshot of the registered actions."""
        return tuple(self._domain.actions)

    @property
    def resource_keys(self) -> frozenset[str]:
        """Return a snapshot of the tracked resource keys."""
        return frozenset(self._domain.resource_keys)

    def add_action(self, action: Action) -> None:
        """Register ``action`` for future searches."""
        self._domain.add_action(action)

    def remove_action(self, name: str) -> None:
        """Unregister every action called ``name``."""
        self._domain.remove_action(name)

    def mark_as_resource(self, key: str) -> None:
        """Track consumption of state ``key`` during search."""
        self._domain.mark_as_resource(key)

    def clear_resource_tracking(self) -> None:
        """Stop tracking every resource key."""
        self._domain.clear_resource_tracking()

    def find_plan(self, initial_state: StateView, goal: Goal) -> list[Action]:
        """Return the cheapest action sequence found, or an empty list.

        An empty list covers unreachable goals and exhausted budgets alike.
        ``initial_state`` is never modified.
        """
        return list(self.plan(initial_state, goal).actions)

    def plan(self, initial_state: StateView, goal: Goal) -> Plan:
        """Run the search and return the best plan together with search statistics."""
        actions = tuple(self._domain.actions)
        resource_keys = frozenset(self._domain.resource_keys)
        heuristic = self._heuristic

        frontier: OrderingQueue[_PlanNode] = OrderingQueue(_compare_nodes)
        start: WorldState = dict(initial_state)
        frontier.insert(
            _PlanNode(
                state=start,
                actions=(),
                cost=0.0,
                priority=0.0,
                progress=heuristic.progress(start, actions),
            ),
        )

        visits: dict[str, int] = {}
        iterations = 0
        expansions = 0
        best_actions: tuple[Action, ...] | None = None
        best_cost = float("inf")

        while not frontier.is_empty() and iterations < self._max_iterations:
            iterations += 1
            current = frontier.remove_min()
            if current is None:
                continue

            if goal_satisfied(current.state, goal):
                if current.cost < best_cost:
                    best_actions = current.actions
                    best_cost = current.cost
                continue

            key = state_hash(current.state)
            visit_count = visits.get(key, 0)
            if visit_count > self._max_state_visits:
                continue
            visits[key] = visit_count + 1
            expansions += 1

            for action in actions:
                if not preconditions_hold(current.state, action.preconditions, resource_keys):
                    continue
                successor = apply_effects(current.state, action.effects, resource_keys)
                total_cost = current.cost + step_cost(action, successor)
                if total_cost >= best_cost:
                    continue

                projected = heuristic.estimate(successor, goal, actions)
                frontier.insert(
                    _PlanNode(
                        state=successor,
                        actions=(*current.actions, action),
                        cost=total_cost,
                        priority=total_cost + projected,
                        progress=heuristic.progress(successor, actions),
                    ),
                )

        found = best_actions is not None
        result = Plan(
            actions=list(best_actions or ()),
            cost=best_cost if found else 0.0,
            found=found,
            iterations=iterations,
            expansions=expansions,
            notes=[
                f"goal={goal.name}",
                f"heuristic={type(heuristic).__name__}",
                f"budget_exhausted={iterations >= self._max_iterations and not frontier.is_empty()}",
            ],
        )
        if self._logger is not None:
            self._logger.debug(
                "plan search finished",
                goal=goal.name,
                found=found,
                cost=result.cost,
                steps=len(result.actions),
                iterations=iterations,
                expansions=expansions,
            )
        return result


__all__ = ["GOAPPlanner", "PlanningDomain"]
