"""
Typer application for inspecting and running Venice AI tools from a shell.

The CLI stands in for a workflow host: it resolves credentials from secrets or
the environment, builds items from an input file, and prints the result items
as JSON.
"""

from __future__ import annotations

import json
from pathlib import Path
from typing import List, Optional, Set

import typer

from ..adapters import ToolExecutionError
from ..adapters.api import VeniceClient, VeniceConnectionAdapter
from ..adapters.tools import build_default_registry
from ..config import CredentialError, SecretsBundle, load_secrets
from ..core import ExecutionContext, ExecutionOptions, ItemParameters, ParameterType, ResultItem, ToolDescriptor, ToolRegistry, configure_logging
from .inputs import InputError, load_items, parse_assignments

app = typer.Typer(
    no_args_is_help=True,
    add_completion=False,
    help=(
        "Venice AI tool adapters.\n\n"
        "Command groups:\n"
        "- tools: list and describe the available tool schemas.\n"
        "- run: execute a tool over a list of items.\n"
        "- verify: check the configured API key against the provider."
    ),
)
tools_app = typer.Typer(help="Inspect registered Venice tools and their parameter schemas.")
app.add_typer(tools_app, name="tools")


@app.callback(invoke_without_command=False)
def main(
    ctx: typer.Context,
    secrets_file: Optional[Path] = typer.Option(
        None,
        "--secrets",
        help="Secrets TOML file with a [venice] section.",
        exists=True,
        dir_okay=False,
        readable=True,
    ),
    log_level: Optional[str] = typer.Option(None, "--log-level", help="Logging level (DEBUG, INFO, WARNING, ...)."),
) -> None:
    """Configure logging and load secrets for child commands."""

    if log_level:
        configure_logging(log_level, force=True)
    state = ctx.ensure_object(dict)
    state["registry"] = build_default_registry()
    state["secrets"] = load_secrets(secrets_file, strict=secrets_file is not None)


def _require_registry(ctx: typer.Context) -> ToolRegistry:
    registry = ctx.ensure_object(dict).get("registry")
    if not isinstance(registry, ToolRegistry):
        raise typer.Exit(code=2)
    return registry


def _require_secrets(ctx: typer.Context) -> SecretsBundle:
    secrets = ctx.ensure_object(dict).get("secrets")
    if not isinstance(secrets, SecretsBundle):
        raise typer.Exit(code=2)
    return secrets


def _text_keys(descriptor: ToolDescriptor) -> Set[str]:
    keys: Set[str] = set()
    for parameter in descriptor.parameters:
        if parameter.type == ParameterType.STRING:
            keys.add(parameter.name)
        for child in parameter.children:
            if child.type == ParameterType.STRING:
                keys.add(f"{parameter.name}.{child.name}")
    return keys


def _write_binaries(results: List[ResultItem], output_dir: Path) -> List[Path]:
    output_dir.mkdir(parents=True, exist_ok=True)
    written: List[Path] = []
    for result in results:
        for name, attachment in result.binary.items():
            file_name = attachment.file_name or f"{name}.bin"
            target = output_dir / f"{result.paired_item}_{file_name}"
            target.write_bytes(attachment.data)
            written.append(target)
    return written


@tools_app.command("list")
def tools_list(ctx: typer.Context) -> None:
    """List registered tools with their descriptions."""

    registry = _require_registry(ctx)
    header = f"{'ID':<24} {'Node':<26} Description"
    typer.echo(header)
    typer.echo("-" * len(header))
    for descriptor in registry.iter_descriptors():
        typer.echo(f"{descriptor.tool_id:<24} {descriptor.node_name:<26} {descriptor.description}")


@tools_app.command("describe")
def tools_describe(
    ctx: typer.Context,
    tool_id: str = typer.Argument(..., help="Identifier of the tool, e.g. venice_chat."),
    output_json: bool = typer.Option(False, "--json", help="Emit the full descriptor as JSON."),
) -> None:
    """Show the schema of a single tool."""

    registry = _require_registry(ctx)
    adapter = registry.get(tool_id)
    if adapter is None:
        typer.echo(f"Tool '{tool_id}' is not registered.", err=True)
        raise typer.Exit(code=1)

    descriptor = adapter.describe()
    if output_json:
        typer.echo(descriptor.to_json())
        return

    typer.echo(f"ID: {descriptor.tool_id}")
    typer.echo(f"Name: {descriptor.display_name}")
    typer.echo(f"Description: {descriptor.description}")
    typer.echo(f"Documentation: {descriptor.documentation_url}")
    typer.echo(f"Credentials: {', '.join(item.name for item in descriptor.credentials)}")
    typer.echo("Parameters:")
    for parameter in descriptor.parameters:
        flag = " (required)" if parameter.required else ""
        typer.echo(f"  {parameter.name} [{parameter.type.value}] default={parameter.default!r}{flag}")
        for child in parameter.children:
            typer.echo(f"    {parameter.name}.{child.name} [{child.type.value}] default={child.default!r}")
        if parameter.options:
            typer.echo(f"    choices: {', '.join(repr(value) for value in parameter.allowed_values())}")


@app.command("run")
def run(
    ctx: typer.Context,
    tool_id: str = typer.Argument(..., help="Identifier of the tool to execute."),
    param: Optional[List[str]] = typer.Option(
        None,
        "--param",
        "-p",
        help="Parameter in the form key=value. Dotted keys set collection options (options.temperature=0.2). Values may reference item fields as {{ field }}.",
    ),
    items_file: Optional[Path] = typer.Option(
        None,
        "--items",
        "-i",
        help="JSON or YAML list of items. Defaults to a single empty item.",
        dir_okay=False,
    ),
    continue_on_fail: bool = typer.Option(False, "--continue-on-fail", help="Record per-item errors instead of aborting."),
    output_dir: Optional[Path] = typer.Option(None, "--output-dir", help="Directory for binary attachments.", file_okay=False),
) -> None:
    """Execute a tool and print one JSON result per input item."""

    registry = _require_registry(ctx)
    adapter = registry.get(tool_id)
    if adapter is None:
        typer.echo(f"Tool '{tool_id}' is not registered.", err=True)
        raise typer.Exit(code=1)

    try:
        parameters = parse_assignments(param, text_keys=_text_keys(adapter.describe()))
        items = load_items(items_file)
    except InputError as exc:
        raise typer.BadParameter(str(exc)) from exc

    context = ExecutionContext.build_default(
        parameters=ItemParameters(parameters),
        options=ExecutionOptions(continue_on_fail=continue_on_fail),
        secrets=_require_secrets(ctx),
    )
    try:
        groups = adapter.execute(items, context)
    except CredentialError as exc:
        typer.echo(str(exc), err=True)
        raise typer.Exit(code=2) from exc
    except ToolExecutionError as exc:
        typer.echo(f"Item {exc.item_index} failed ({exc.kind.value}): {exc.description}", err=True)
        raise typer.Exit(code=1) from exc

    results = groups[0] if groups else []
    typer.echo(json.dumps([result.to_dict() for result in results], ensure_ascii=False, indent=2, default=str))
    if output_dir is not None:
        for path in _write_binaries(results, output_dir):
            typer.echo(f"Wrote {path}", err=True)


@app.command("verify")
def verify(ctx: typer.Context) -> None:
    """Check that the configured credential can reach the Venice API."""

    secrets = _require_secrets(ctx)
    try:
        credential = secrets.venice.to_credential()
    except CredentialError as exc:
        typer.echo(str(exc), err=True)
        raise typer.Exit(code=2) from exc

    result = VeniceConnectionAdapter(client=VeniceClient.from_credential(credential)).verify()
    typer.echo(result.message)
    if result.details:
        typer.echo(json.dumps(result.details, ensure_ascii=False, indent=2, default=str))
    if not result.success:
        raise typer.Exit(code=1)
