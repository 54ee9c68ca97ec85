"""CLI entry point for goapkit built with Typer."""

from __future__ import annotations

import asyncio
import json
import sys
from dataclasses import dataclass
from pathlib import Path
from typing import TYPE_CHECKING, Annotated, Any

import typer
from pydantic import ValidationError

from goapkit.cli.runtime import WorkflowContext, build_workflow_context, load_cli_config
from goapkit.core.explain import explain_plan, total_cost
from goapkit.io.domain import load_domain

if TYPE_CHECKING:
    from collections.abc import Sequence

    from goapkit.core.models import Plan


app = typer.Typer(add_completion=False, no_args_is_help=True)


@dataclass(frozen=True, slots=True)
class PlanComputation:
    """Container describing a freshly computed plan for a domain."""

    context: WorkflowContext
    plan: Plan


def _emit_json(payload: Any) -> None:
    typer.echo(json.dumps(payload, ensure_ascii=False, default=repr))


def _prepare_context(
    domain_path: Path,
    config_path: Path | None,
    *,
    json_logs: bool,
    silence_logs: bool,
) -> WorkflowContext:
    try:
        config = load_cli_config(config_path)
        domain = load_domain(path=domain_path)
    except FileNotFoundError as exc:
        typer.echo(f"File not found: {exc}", err=True)
        raise typer.Exit(code=2) from exc
    except (ValueError, ValidationError) as exc:
        typer.echo(str(exc), err=True)
        raise typer.Exit(code=2) from exc

    return build_workflow_context(
        domain,
        config,
        json_logs=json_logs,
        silence_logs=silence_logs,
    )


def _compute_plan(context: WorkflowContext) -> PlanComputation:
    plan = context.planner.plan(context.domain.initial_state, context.domain.goal)
    return PlanComputation(context=context, plan=plan)


def _plan_payload(computation: PlanComputation) -> dict[str, Any]:
    plan = computation.plan
    return {
        "goal": computation.context.domain.goal.name,
        "found": plan.found,
        "cost": plan.cost,
        "actions": plan.action_names,
        "iterations": plan.iterations,
        "expansions": plan.expansions,
        "notes": list(plan.notes),
    }


def _exit_when_missing(plan: Plan) -> None:
    if not plan.found:
        raise typer.Exit(code=1)


@app.callback()
def cli_root() -> None:
    """Top-level CLI group for goapkit."""


DomainArgument = Annotated[Path, typer.Argument(help="Path to a domain TOML file.")]
ConfigOption = Annotated[Path | None, typer.Option(help="Path to a configuration TOML.")]
JsonFlag = Annotated[
    bool,
    typer.Option("--json", "--json-output", help="Emit JSON instead of text."),
]


@app.command("plan")
def plan_command(
    domain: DomainArgument,
    config: ConfigOption = None,
    json_output: JsonFlag = False,
) -> None:
    """Compute and display the cheapest plan for the domain's goal."""
    context = _prepare_context(domain, config, json_logs=json_output, silence_logs=json_output)
    computation = _compute_plan(context)
    plan = computation.plan

    if json_output:
        _emit_json(_plan_payload(computation))
        _exit_when_missing(plan)
        return

    if not plan.found:
        typer.echo(f"No plan found for goal '{context.domain.goal.name}' after {plan.iterations} iterations.")
        raise typer.Exit(code=1)

    lines: list[str] = [
        f"Goal: {context.domain.goal.name}",
        f"Total cost: {plan.cost:.2f}",
        "Actions:",
    ]
    lines.extend(f"  {index}. {name}" for index, name in enumerate(plan.action_names, start=1))
    typer.echo("\n".join(lines))


@app.command("explain")
def explain_command(
    domain: DomainArgument,
    config: ConfigOption = None,
    json_output: JsonFlag = False,
) -> None:
    """Explain the cost and state changes of each planned action."""
    context = _prepare_context(domain, config, json_logs=json_output, silence_logs=json_output)
    computation = _compute_plan(context)
    plan = computation.plan
    explanations = explain_plan(
        plan.actions,
        context.domain.initial_state,
        resource_keys=context.planner.resource_keys,
    )

    if json_output:
        payload = _plan_payload(computation)
        payload["steps"] = [
            {
                "index": explanation.index,
                "action": explanation.action.name,
                "cost": explanation.cost,
                "changes": {key: list(change) for key, change in explanation.changes.items()},
            }
            for explanation in explanations
        ]
        _emit_json(payload)
        _exit_when_missing(plan)
        return

    if not plan.found:
        typer.echo(f"No plan found for goal '{context.domain.goal.name}'.")
        raise typer.Exit(code=1)

    lines = [
        f"Goal: {context.domain.goal.name}",
        f"Total cost: {total_cost(explanations):.2f}",
        "Steps:",
    ]
    for explanation in explanations:
        lines.append(f"  {explanation.index}. {explanation.action.name} (cost={explanation.cost:.2f})")
        lines.extend(
            f"     {key}: {json.dumps(before)} -> {json.dumps(after)}"
            for key, (before, after) in explanation.changes.items()
        )
    if plan.notes:
        lines.append("Notes:")
        lines.extend(f"  - {note}" for note in plan.notes)
    typer.echo("\n".join(lines))


@app.command("run")
def run_command(
    domain: DomainArgument,
    config: ConfigOption = None,
    json_output: JsonFlag = False,
) -> None:
    """Execute the plan with an agent and report the resulting world state."""
    context = _prepare_context(domain, config, json_logs=json_output, silence_logs=json_output)
    agent = context.build_agent()
    success = asyncio.run(agent.execute_plan(context.domain.goal))
    result = agent.last_result
    executed = [action.name for action in result.executed_actions] if result is not None else []

    if json_output:
        _emit_json(
            {
                "goal": context.domain.goal.name,
                "success": success,
                "executed_actions": executed,
                "final_state": agent.current_state(),
                "error": result.error if result is not None else None,
            },
        )
    else:
        lines = [
            f"Goal: {context.domain.goal.name}",
            f"Result: {'success' if success else 'failed'}",
            f"Executed actions: {len(executed)}",
        ]
        lines.extend(f"  {index}. {name}" for index, name in enumerate(executed, start=1))
        lines.append("Final state:")
        lines.extend(f"  {key} = {json.dumps(value)}" for key, value in sorted(agent.current_state().items()))
        typer.echo("\n".join(lines))

    if not success:
        raise typer.Exit(code=1)


def main(argv: Sequence[str] | None = None) -> int:
    """Execute the goapkit CLI and return the exit status."""
    command = typer.main.get_command(app)
    args = list(argv) if argv is not None else sys.argv[1:]
    try:
        result = command.main(args=args, prog_name="goapkit", standalone_mode=False)
    except SystemExit as exc:  # pragma: no cover - Typer propagates exit codes via SystemExit
        return int(exc.code or 0)
    return result if isinstance(result, int) else 0


if __name__ == "__main__":  # pragma: no cover - CLI invocation
    raise SystemExit(main())
