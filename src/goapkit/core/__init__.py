"""Core GOAP components for goapkit."""

from .agent import Agent, ExecutionResult
from .evaluation import apply_effects, condition_holds, goal_satisfied, state_hash
from .explain import ActionExplanation, explain_plan
from .heuristics import (
    GoalDistanceHeuristic,
    GoalMarkerHeuristic,
    Heuristic,
    NullHeuristic,
    build_heuristic,
)
from .models import (
    Action,
    Computed,
    Condition,
    Config,
    Effect,
    Goal,
    HeuristicKind,
    HeuristicSettings,
    LoggingSettings,
    LogLevel,
    Operator,
    Plan,
    PlannerSettings,
    WorldState,
)
from .planner import GOAPPlanner, PlanningDomain
from .queue import OrderingQueue

__all__ = [
    "Action",
    "ActionExplanation",
    "Agent",
    "Computed",
    "Condition",
    "Config",
    "Effect",
    "ExecutionResult",
    "GOAPPlanner",
    "Goal",
    "GoalDistanceHeuristic",
    "GoalMarkerHeuristic",
    "Heuristic",
    "HeuristicKind",
    "HeuristicSettings",
    "LogLevel",
    "LoggingSettings",
    "NullHeuristic",
    "Operator",
    "OrderingQueue",
    "Plan",
    "PlannerSettings",
    "PlanningDomain",
    "WorldState",
    "apply_effects",
    "build_heuristic",
    "condition_holds",
    "explain_plan",
    "goal_satisfied",
    "state_hash",
]
