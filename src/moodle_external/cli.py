"""Console script for moodle_external."""

import json
import logging
from dataclasses import replace
from pathlib import Path
from typing import Any, Optional

import typer
from dotenv import load_dotenv
from rich.console import Console
from rich.markup import escape
from rich.tree import Tree

from .config.loader import ConfigLoader
from .errors import ExternalValidationError
from .schema.loader import SchemaLoader
from .schema.models import (
    ExternalDescription,
    ExternalValue,
    FunctionDescription,
    MultipleStructure,
    SingleStructure,
)
from .utils.logging import setup_logging
from .validation.validator import clean_returnvalue, validate_parameters

app = typer.Typer(help="Validate values against external function descriptions.")
console = Console()
err_console = Console(stderr=True)


@app.callback()
def main(verbose: bool = typer.Option(False, "--verbose", "-v", help="Enable debug logging.")):
    """Validate values against external function descriptions."""
    load_dotenv()
    setup_logging(logging.DEBUG if verbose else logging.WARNING)


@app.command()
def validate(
    descriptors: Path = typer.Argument(..., help="YAML descriptor file."),
    function: str = typer.Argument(..., help="Function name within the descriptor file."),
    value_file: Path = typer.Argument(..., help="JSON file holding the value to check."),
    returns: bool = typer.Option(False, "--returns", help="Clean a return value instead of parameters."),
    index_paths: Optional[bool] = typer.Option(
        None, "--index-paths/--no-index-paths", help="Include list indices in error paths."
    ),
    max_depth: Optional[int] = typer.Option(None, "--max-depth", help="Maximum nesting depth."),
    config: Optional[Path] = typer.Option(None, "--config", help="YAML settings file."),
):
    """Validate a JSON value against a function's parameters or returns description."""
    settings = ConfigLoader().load_validator(config)
    if index_paths is not None or max_depth is not None:
        settings = replace(
            settings,
            max_depth=settings.max_depth if max_depth is None else max_depth,
            index_list_paths=settings.index_list_paths if index_paths is None else index_paths,
        )

    signature = _load_signature(descriptors, function)
    value = _load_value(value_file)

    try:
        if returns:
            if signature.returns is None:
                console.print(f"[yellow]{function} has no return value description[/yellow]")
                raise typer.Exit(0)
            result = clean_returnvalue(signature.returns, value, settings)
        else:
            result = validate_parameters(signature.parameters, value, settings)
    except ExternalValidationError as e:
        kind = "response" if returns else "parameters"
        err_console.print(f"[red]Invalid {kind}[/red] at [bold]{e.dotted_path or '(root)'}[/bold]")
        err_console.print(f"  {escape(str(e))}")
        raise typer.Exit(1)

    console.print_json(json.dumps(result))


@app.command()
def describe(
    descriptors: Path = typer.Argument(..., help="YAML descriptor file."),
    function: Optional[str] = typer.Argument(None, help="Only describe this function."),
):
    """Print the description tree of one or all functions."""
    if function:
        signatures = [_load_signature(descriptors, function)]
    else:
        signatures = list(_load_all(descriptors).values())

    for signature in signatures:
        tree = Tree(f"[bold]{signature.name}[/bold]" + (f" - {signature.description}" if signature.description else ""))
        params = tree.add("parameters")
        for key, child in signature.parameters.keys.items():
            _add_node(params, key, child)
        if signature.returns is None:
            tree.add("returns: [dim]nothing[/dim]")
        else:
            _add_node(tree, "returns", signature.returns)
        console.print(tree)


def _load_all(descriptors: Path) -> dict[str, FunctionDescription]:
    try:
        return SchemaLoader().load(descriptors)
    except (FileNotFoundError, ValueError) as e:
        err_console.print(f"[red]{escape(str(e))}[/red]")
        raise typer.Exit(2)


def _load_signature(descriptors: Path, function: str) -> FunctionDescription:
    functions = _load_all(descriptors)
    if function not in functions:
        err_console.print(f"[red]Function '{function}' not described in {descriptors}[/red]")
        raise typer.Exit(2)
    return functions[function]


def _load_value(value_file: Path) -> Any:
    try:
        return json.loads(value_file.read_text(encoding="utf-8"))
    except (OSError, ValueError) as e:
        err_console.print(f"[red]Cannot read {escape(str(value_file))}: {escape(str(e))}[/red]")
        raise typer.Exit(2)


def _add_node(parent: Any, label: str, node: ExternalDescription) -> None:
    requirement = f"[dim]{node.required.value}[/dim]"
    if isinstance(node, ExternalValue):
        parent.add(f"{label}: [cyan]{node.type}[/cyan] {requirement} {node.desc}".rstrip())
    elif isinstance(node, SingleStructure):
        branch = parent.add(f"{label}: [magenta]structure[/magenta] {requirement} {node.desc}".rstrip())
        for key, child in node.keys.items():
            _add_node(branch, key, child)
    elif isinstance(node, MultipleStructure):
        branch = parent.add(f"{label}: [magenta]list[/magenta] {requirement} {node.desc}".rstrip())
        _add_node(branch, "item", node.content)


if __name__ == "__main__":
    app()
