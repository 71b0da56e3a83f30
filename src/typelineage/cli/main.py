"""typelineage CLI - Type lineage inspection tool.

This module provides the command-line interface for typelineage,
enabling lineage trees to be shown, compared, and catalogs validated.
"""

from __future__ import annotations

import json
import logging
import traceback
from pathlib import Path
from typing import TYPE_CHECKING, Annotated, Any, Optional

import typer
from dotenv import load_dotenv
from rich.console import Console
from rich.logging import RichHandler
from rich.markup import escape

if TYPE_CHECKING:
    from typelineage.core.models import TypeNode, TypeRef
    from typelineage.core.options import ParseOptions
    from typelineage.oracles.base import TypeOracle

# Load environment variables from .env file
load_dotenv()

app = typer.Typer(
    name="typelineage",
    help="Build and structurally compare type lineage trees",
    no_args_is_help=True,
)

# Rich console for formatted output
console = Console()
err_console = Console(stderr=True)

# Global verbose flag
_verbose: bool = False


def set_verbose(verbose: bool) -> None:
    """Set global verbose mode."""
    global _verbose
    _verbose = verbose


def is_verbose() -> bool:
    """Check if verbose mode is enabled."""
    return _verbose


def print_exception(e: Exception) -> None:
    """Print exception details in verbose mode."""
    if _verbose:
        err_console.print("\n[dim]--- Traceback (verbose mode) ---[/dim]")
        err_console.print(f"[dim]{escape(traceback.format_exc())}[/dim]")


@app.callback()
def main_callback(
    verbose: Annotated[
        bool,
        typer.Option("--verbose", "-v", help="Enable debug logging and full tracebacks"),
    ] = False,
) -> None:
    """typelineage CLI - Type lineage trees and structural comparison."""
    from typelineage.core.config import get_config

    set_verbose(verbose)
    logging.basicConfig(
        level=logging.DEBUG if verbose else get_config().log_level.upper(),
        format="%(message)s",
        handlers=[RichHandler(console=err_console, show_path=False)],
        force=True,
    )


CatalogOption = Annotated[
    Optional[Path],
    typer.Option("--catalog", "-c", help="Declared type catalog (JSON) to resolve names against"),
]
ClassFilterOption = Annotated[
    Optional[str],
    typer.Option("--class-filter", help="Regex of super-classes to ignore"),
]
ClassParamFilterOption = Annotated[
    Optional[str],
    typer.Option("--class-param-filter", help="Regex of class type parameters to ignore"),
]
InterfaceFilterOption = Annotated[
    Optional[str],
    typer.Option("--interface-filter", help="Regex of interfaces to ignore"),
]
InterfaceParamFilterOption = Annotated[
    Optional[str],
    typer.Option("--interface-param-filter", help="Regex of type arguments to ignore"),
]
JsonOption = Annotated[
    bool,
    typer.Option("--json", help="Output machine-readable JSON"),
]


def build_options(
    class_filter: str | None,
    class_param_filter: str | None,
    interface_filter: str | None,
    interface_param_filter: str | None,
) -> ParseOptions:
    """Build ParseOptions, falling back to configured defaults for unset filters."""
    from pydantic import ValidationError

    from typelineage.core.config import get_config
    from typelineage.core.options import ParseOptions

    config = get_config()
    try:
        return ParseOptions(
            class_filter=class_filter if class_filter is not None else config.class_filter,
            class_param_filter=(
                class_param_filter if class_param_filter is not None else config.class_param_filter
            ),
            interface_filter=(
                interface_filter if interface_filter is not None else config.interface_filter
            ),
            interface_param_filter=(
                interface_param_filter
                if interface_param_filter is not None
                else config.interface_param_filter
            ),
        )
    except ValidationError as e:
        err_console.print("[red]Error:[/red] Invalid filter pattern")
        for err in e.errors():
            err_console.print(f"  - {escape(err['msg'])}")
        print_exception(e)
        raise typer.Exit(1)


def get_oracle(catalog: Path | None) -> TypeOracle:
    """Get the catalog oracle for ``catalog``, or the Python oracle when None."""
    from typelineage.oracles.catalog import CatalogError, CatalogTypeOracle, load_catalog
    from typelineage.parser import default_oracle

    if catalog is None:
        return default_oracle()
    try:
        return CatalogTypeOracle(load_catalog(catalog))
    except CatalogError as e:
        err_console.print(f"[red]Error:[/red] {escape(e.message)}")
        if e.details:
            err_console.print(f"  {escape(e.details)}")
        print_exception(e)
        raise typer.Exit(1)


def parse_target(target: str, options: ParseOptions, oracle: TypeOracle) -> TypeNode:
    """Parse a command-line target into a type tree, exiting on failure."""
    from typelineage.core.signature import SignatureError, parse_reference
    from typelineage.oracles.catalog import CatalogTypeOracle
    from typelineage.parser import HierarchyParser

    parser = HierarchyParser(options, oracle)
    try:
        if isinstance(oracle, CatalogTypeOracle):
            return parser.parse(target)
        return parser.parse(_python_handle(parse_reference(target), oracle))
    except (SignatureError, LookupError) as e:
        err_console.print(f"[red]Error:[/red] {escape(str(e))}")
        print_exception(e)
        raise typer.Exit(1)


def _python_handle(reference: TypeRef, oracle: TypeOracle) -> Any:
    """Turn a written reference into a live Python type, parameterizing generics."""
    from typelineage.core.models import PlainRef
    from typelineage.core.signature import is_placeholder

    if isinstance(reference, PlainRef):
        handle = oracle.lookup(reference.name)
        if handle is not None:
            return handle
        if is_placeholder(reference.name):
            return Any
        raise LookupError(f"Cannot resolve type '{reference.name}'")

    raw = oracle.lookup(reference.raw_name)
    if raw is None:
        raise LookupError(f"Cannot resolve type '{reference.raw_name}'")
    args = tuple(_python_handle(arg, oracle) for arg in reference.args)
    try:
        return raw[args]
    except TypeError as e:
        raise LookupError(f"Type '{reference.raw_name}' cannot be parameterized: {e}") from e


@app.command()
def show(
    target: Annotated[
        str,
        typer.Argument(help="Dotted Python type path, or a type signature with --catalog"),
    ],
    catalog: CatalogOption = None,
    class_filter: ClassFilterOption = None,
    class_param_filter: ClassParamFilterOption = None,
    interface_filter: InterfaceFilterOption = None,
    interface_param_filter: InterfaceParamFilterOption = None,
    json_output: JsonOption = False,
    render: Annotated[
        bool,
        typer.Option("--render", help="Print the one-line rendering"),
    ] = False,
) -> None:
    """Show the lineage tree of a type.

    Example:
        typelineage show collections.OrderedDict
        typelineage show 'java.util.ArrayList<java.lang.String>' --catalog jdk.json
    """
    from typelineage.cli._tables import build_type_tree
    from typelineage.core.serializer import serialize

    options = build_options(class_filter, class_param_filter, interface_filter, interface_param_filter)
    oracle = get_oracle(catalog)
    node = parse_target(target, options, oracle)

    if json_output:
        typer.echo(serialize(node))
        return
    if render:
        typer.echo(node.render())
        return
    console.print(build_type_tree(node))


@app.command()
def compare(
    source: Annotated[str, typer.Argument(help="Source type")],
    target: Annotated[str, typer.Argument(help="Target type")],
    catalog: CatalogOption = None,
    class_filter: ClassFilterOption = None,
    class_param_filter: ClassParamFilterOption = None,
    interface_filter: InterfaceFilterOption = None,
    interface_param_filter: InterfaceParamFilterOption = None,
    json_output: JsonOption = False,
) -> None:
    """Structurally compare the lineage trees of two types.

    Exits with status 1 when the trees do not match.

    Example:
        typelineage compare builtins.bool builtins.bool
    """
    from typelineage.cli._tables import format_compatibility
    from typelineage.core.errors import TypeMismatchError
    from typelineage.core.models import Compatibility

    options = build_options(class_filter, class_param_filter, interface_filter, interface_param_filter)
    oracle = get_oracle(catalog)
    source_node = parse_target(source, options, oracle)
    target_node = parse_target(target, options, oracle)

    output: dict[str, Any] = {
        "source": source_node.render(),
        "target": target_node.render(),
    }
    try:
        result = source_node.compare(target_node)
    except TypeMismatchError as e:
        if json_output:
            output.update(
                compatibility=Compatibility.MISMATCH.name,
                value=Compatibility.MISMATCH.value,
                message=e.message,
            )
            typer.echo(json.dumps(output, ensure_ascii=False, indent=2))
        else:
            err_console.print(f"[red]Mismatch:[/red] {escape(e.message)}")
        raise typer.Exit(1)

    if json_output:
        output.update(compatibility=result.name, value=result.value)
        typer.echo(json.dumps(output, ensure_ascii=False, indent=2))
        return

    console.print(f"[blue]Source:[/blue] {escape(output['source'])}")
    console.print(f"[blue]Target:[/blue] {escape(output['target'])}")
    console.print(f"[blue]Result:[/blue] {format_compatibility(result)}")


@app.command()
def validate(
    catalog: Annotated[Path, typer.Argument(help="Type catalog (JSON) to validate")],
) -> None:
    """Validate a declared type catalog.

    Example:
        typelineage validate jdk.json
    """
    from typelineage.cli._tables import build_validation_table
    from typelineage.core.validator import validate_catalog
    from typelineage.oracles.catalog import CatalogError, load_catalog

    try:
        loaded = load_catalog(catalog)
    except CatalogError as e:
        err_console.print(f"[red]Error:[/red] {escape(e.message)}")
        if e.details:
            err_console.print(f"  {escape(e.details)}")
        print_exception(e)
        raise typer.Exit(1)

    result = validate_catalog(loaded)
    if result.is_valid:
        console.print(f"[green]Catalog is valid[/green] ({len(loaded.types)} types)")
        return

    console.print(build_validation_table(result))
    err_console.print(f"[red]Error:[/red] {len(result.errors)} problem(s) found")
    raise typer.Exit(1)


if __name__ == "__main__":
    app()
