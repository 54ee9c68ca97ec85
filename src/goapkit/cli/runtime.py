"""Helpers shared across CLI commands for planning and execution."""

from __future__ import annotations

import io
import sys
from dataclasses import dataclass
from typing import TYPE_CHECKING

from goapkit.core.agent import Agent
from goapkit.core.heuristics import build_heuristic
from goapkit.core.models import Config, LogLevel
from goapkit.core.planner import GOAPPlanner
from goapkit.io import StructuredLogger, load_config

if TYPE_CHECKING:
    from pathlib import Path

    from goapkit.io.domain import DomainSpec


@dataclass(slots=True)
class WorkflowContext:
    """Container bundling CLI dependencies for planning and execution."""

    config: Config
    domain: DomainSpec
    logger: StructuredLogger
    planner: GOAPPlanner

    def build_agent(self) -> Agent:
        """Return an agent starting from the domain's initial state."""
        return Agent(self.domain.initial_state, planner=self.planner, logger=self.logger)


def default_config() -> Config:
    """Return the default configuration used when no config file is provided."""
    return Config()


def load_cli_config(config_path: Path | None) -> Config:
    """Load configuration from ``config_path`` or fall back to defaults."""
    if config_path is None:
        return default_config()
    return load_config(path=config_path)


def build_planner(config: Config, logger: StructuredLogger | None = None) -> GOAPPlanner:
    """Create a planner configured from ``config``, with its resource keys marked."""
    planner = GOAPPlanner(
        heuristic=build_heuristic(config.planner.heuristic, config.heuristic),
        max_iterations=config.planner.max_iterations,
        max_state_visits=config.planner.max_state_visits,
        logger=logger,
    )
    for key in config.planner.resource_keys:
        planner.mark_as_resource(key)
    return planner


def build_workflow_context(
    domain: DomainSpec,
    config: Config,
    *,
    json_logs: bool,
    silence_logs: bool,
) -> WorkflowContext:
    """Assemble the context required by CLI commands."""
    stream = io.StringIO() if silence_logs else sys.stderr
    logger = StructuredLogger(
        name="goapkit.cli",
        json_mode=json_logs or config.logging.json_mode,
        stream=stream,
        level=config.logging.level if not silence_logs else LogLevel.error,
    )
    planner = build_planner(config, logger)
    domain.register(planner)
    return WorkflowContext(config=config, domain=domain, logger=logger, planner=planner)


__all__ = [
    "WorkflowContext",
    "build_planner",
    "build_workflow_context",
    "default_config",
    "load_cli_config",
]
