"""Rich renderables used by the CLI.

Kept separate to reduce duplication and keep the command module smaller.
"""

from __future__ import annotations

from rich.markup import escape
from rich.table import Table
from rich.tree import Tree

from typelineage.core.models import Compatibility, TypeNode
from typelineage.core.validator import ValidationResult

_COMPATIBILITY_STYLES = {
    Compatibility.EXACT: "green",
    Compatibility.SOURCE_UNKNOWN: "yellow",
    Compatibility.TARGET_UNKNOWN: "yellow",
    Compatibility.BOTH_UNKNOWN: "yellow",
    Compatibility.MISMATCH: "red",
}


def build_type_tree(node: TypeNode) -> Tree:
    """Build a rich Tree mirroring a type tree; unknown types are dimmed."""
    tree = Tree(_label(node))
    _add_branches(tree, node)
    return tree


def _add_branches(branch: Tree, node: TypeNode) -> None:
    for child in node.children:
        _add_branches(branch.add(_label(child)), child)


def _label(node: TypeNode) -> str:
    name = escape(node.name)
    return f"[dim]{name}[/dim]" if node.is_unknown else f"[cyan]{name}[/cyan]"


def format_compatibility(compatibility: Compatibility) -> str:
    """Format a classification as ``NAME (value)`` with its color."""
    style = _COMPATIBILITY_STYLES[compatibility]
    return f"[{style}]{compatibility.name} ({compatibility.value})[/{style}]"


def build_validation_table(result: ValidationResult) -> Table:
    """Build validation problems table for `validate`."""
    table = Table(show_header=True, title="Catalog Problems")
    table.add_column("Type", style="cyan")
    table.add_column("Problem")
    table.add_column("Field")
    table.add_column("Reference")
    for error in result.errors:
        table.add_row(
            escape(error.type_name),
            error.error_type.value,
            error.field_name,
            escape(error.invalid_ref),
        )
    return table
