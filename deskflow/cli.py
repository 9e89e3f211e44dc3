"""Command line interface for running deskflow workflows."""

from __future__ import annotations

import asyncio
import json
import logging
from pathlib import Path
from typing import List, NoReturn, Optional

import typer

from deskflow import DeskflowConfig, build_core, load_config
from deskflow.cli_utils.fs import _iter_workflow_files
from deskflow.cli_utils.workflow import (
    _analyze_workflow_file,
    _format_workflow_path,
    load_workflow_file,
    parse_variables,
)
from deskflow.contracts import ExecutionStatus, WorkflowExecution
from deskflow.errors import DeskflowError
from deskflow.persistence import ExecutionRepository, create_repository
from deskflow.security import AutoApproveGate, PromptGate, SafetyPolicy

app = typer.Typer(help="CLI for deskflow workflows")

# Command groups
workflow_app = typer.Typer(help="Commands for running and inspecting workflows")
template_app = typer.Typer(help="Commands for built-in workflow templates")

app.add_typer(workflow_app, name="workflow")
app.add_typer(template_app, name="template")


@app.callback()
def main(
    ctx: typer.Context,
    config: Optional[Path] = typer.Option(None, help="Path to a deskflow YAML config"),
) -> None:
    """Deskflow CLI entry point."""
    loaded = load_config(str(config) if config else None)
    logging.basicConfig(
        level=loaded.log_level.upper(),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
    ctx.obj = loaded


def _fail(message: str) -> NoReturn:
    typer.secho(message, fg=typer.colors.RED)
    raise typer.Exit(code=1)


def _config(ctx: typer.Context) -> DeskflowConfig:
    return ctx.obj if isinstance(ctx.obj, DeskflowConfig) else load_config()


def _repository(ctx: typer.Context) -> ExecutionRepository:
    config = _config(ctx)
    return create_repository(config.database_url, config)


def _print_execution(execution: WorkflowExecution) -> None:
    typer.echo(f"Workflow {execution.workflow} ({execution.id}): {execution.status.value}")
    for step in execution.steps:
        line = f"- {step.name} [{step.action_type}]: {step.status.value}"
        if step.duration_ms is not None:
            line += f" ({step.duration_ms}ms)"
        if step.error:
            line += f" - {step.error}"
        typer.echo(line)
    if execution.error:
        typer.echo(f"Error: {execution.error}")


@app.command("actions")
def list_actions(ctx: typer.Context) -> None:
    """List action types registered with the built-in providers."""
    core = build_core(_config(ctx))
    for descriptor in core.registry.describe():
        flag = " (requires confirmation)" if descriptor.dangerous else ""
        description = descriptor.description or ""
        typer.echo(f"{descriptor.action_type}\t{description}{flag}")


@template_app.command("list")
def template_list(ctx: typer.Context) -> None:
    """List available workflow templates and the variables they expect."""
    core = build_core(_config(ctx))
    catalog = core.engine.templates
    for name in catalog.names():
        template = catalog.get(name)
        variables = ", ".join(catalog.variables(name)) or "(none)"
        typer.echo(f"{name}\t{template.get('description') or ''}")
        typer.echo(f"  Variables: {variables}")


@template_app.command("show")
def template_show(
    ctx: typer.Context,
    name: str,
    var: Optional[List[str]] = typer.Option(None, "--var", help="Variable as key=value"),
) -> None:
    """Print a template, instantiated with any given variables, as YAML."""
    import yaml

    core = build_core(_config(ctx))
    try:
        workflow = core.engine.create_from_template(name, parse_variables(var))
    except (DeskflowError, ValueError) as exc:
        _fail(str(exc))
    typer.echo(yaml.safe_dump(workflow.model_dump(exclude_none=True), sort_keys=False))


@workflow_app.command("validate")
def workflow_validate(ctx: typer.Context, workflow_path: Path) -> None:
    """
    Check a workflow file without running it.

    Reports structural errors (missing action types, non-numeric delays) and
    safety findings (blocked paths, dangerous actions).

    Example:
        deskflow workflow validate ./workflows/backup.yaml
    """
    core = build_core(_config(ctx))
    try:
        data = load_workflow_file(workflow_path)
    except (DeskflowError, OSError) as exc:
        _fail(str(exc))

    report = core.engine.validate_workflow(data, check_safety=True)
    for warning in report.warnings:
        typer.secho(f"warning: {warning}", fg=typer.colors.YELLOW)
    for error in report.errors:
        typer.secho(f"error: {error}", fg=typer.colors.RED)
    if not report.valid:
        raise typer.Exit(code=1)
    typer.echo("Workflow is valid")


@workflow_app.command("run")
def workflow_run(
    ctx: typer.Context,
    workflow_path: Optional[Path] = typer.Argument(None),
    template: Optional[str] = typer.Option(None, help="Run a named template instead"),
    var: Optional[List[str]] = typer.Option(None, "--var", help="Variable as key=value"),
    yes: bool = typer.Option(False, "--yes", "-y", help="Approve confirmations"),
    output: bool = typer.Option(False, help="Print the final context as JSON"),
) -> None:
    """
    Execute a workflow file or template.

    Variables seed the execution context and fill ``{{placeholders}}``.
    Actions that need confirmation are prompted for unless --yes is given.

    Example:
        deskflow workflow run ./backup.yaml --var target=/tmp/out
        deskflow workflow run --template open-website --var url=https://example.com
    """
    if (workflow_path is None) == (template is None):
        _fail("Provide either a workflow file or --template")

    config = _config(ctx)
    policy = SafetyPolicy.from_config(config.safety)
    gate = AutoApproveGate() if yes else PromptGate(policy.sanitize_params)
    core = build_core(config, gate=gate, repository=_repository(ctx))

    try:
        variables = parse_variables(var)
        if template:
            workflow = core.engine.create_from_template(template, variables)
        else:
            workflow = load_workflow_file(workflow_path)
        execution = asyncio.run(core.engine.execute_workflow(workflow, variables))
    except (DeskflowError, ValueError, OSError) as exc:
        _fail(str(exc))

    _print_execution(execution)
    if output:
        typer.echo(json.dumps(execution.context, indent=2, default=str))
    if execution.status != ExecutionStatus.COMPLETED:
        raise typer.Exit(code=1)


@workflow_app.command("discover")
def workflow_discover(
    path: Optional[Path] = None,
    respect_gitignore: bool = typer.Option(
        True, help="Skip files and directories specified in .gitignore files"
    ),
) -> None:
    """Find workflow definition files (YAML or JSON) in a directory."""
    search_path = (path or Path.cwd()).expanduser().resolve()
    typer.echo(f"Discovering workflows in: {search_path}")

    if not search_path.exists():
        _fail("Specified path does not exist")

    discoveries = []
    for candidate in _iter_workflow_files(search_path, respect_gitignore=respect_gitignore):
        try:
            metadata = _analyze_workflow_file(candidate)
        except OSError as exc:
            typer.secho(f"Skipping {candidate}: {exc}", fg=typer.colors.RED)
            continue
        if metadata is not None:
            discoveries.append(metadata)

    if not discoveries:
        typer.echo("No workflows discovered.")
        return

    for item in discoveries:
        display_path = _format_workflow_path(item["path"], search_path)
        description = item["description"] or "No description found"
        actions = item["actions"] or ["(none found)"]
        typer.echo(f"{display_path} - {item['name']}: {description}")
        typer.echo(f"  Actions: {', '.join(actions)}")


@workflow_app.command("list")
def workflow_list(
    ctx: typer.Context,
    limit: int = typer.Option(50, help="Maximum entries to show"),
) -> None:
    """
    List recorded workflow executions with their status.

    Example:
        deskflow workflow list
        # Output: wf_3f2a9c1b7d4e    Open Website    completed
    """
    repo = _repository(ctx)
    executions = asyncio.run(repo.list_executions(limit))
    if not executions:
        typer.echo("No executions found")
        return
    for execution in executions:
        typer.echo(f"{execution.id}\t{execution.workflow}\t{execution.status.value}")


@workflow_app.command("show")
def workflow_show(ctx: typer.Context, execution_id: str) -> None:
    """Show step-by-step details of one recorded execution."""
    repo = _repository(ctx)
    execution = asyncio.run(repo.get_execution(execution_id))
    if execution is None:
        typer.echo("Execution not found")
        raise typer.Exit(code=1)
    _print_execution(execution)
    if execution.context:
        typer.echo(f"Context: {json.dumps(execution.context, default=str)}")


if __name__ == "__main__":  # pragma: no cover - CLI entry point
    app()
