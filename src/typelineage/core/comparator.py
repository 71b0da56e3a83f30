"""Structural comparison of type trees.

Two trees are walked in lockstep. Equal names with equal child counts recurse
positionally; the TOP sentinel acts as a wildcard on either side. Anything
else is a mismatch.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from typelineage.core.errors import TypeMismatchError
from typelineage.core.models import TOP_TYPE, Compatibility

if TYPE_CHECKING:
    from typelineage.core.models import TypeNode


def compare_types(source: TypeNode, target: TypeNode | None) -> Compatibility:
    """Compare a source tree against a target tree.

    Args:
        source: Tree acting as the source.
        target: Tree to compare against.

    Returns:
        EXACT (0) when the trees match, SOURCE_UNKNOWN (1) when only the source
        holds unknown types, TARGET_UNKNOWN (2) when only the target does and
        BOTH_UNKNOWN (3) when both do.

    Raises:
        TypeMismatchError: If ``target`` is None, two names differ without a
            wildcard on either side, or equal names have different child counts.
    """
    if target is None:
        raise TypeMismatchError(
            f"Source type '{source.name}' cannot be compared to a missing target type",
            source.name,
        )

    if source.name != target.name:
        if source.name == TOP_TYPE:
            return Compatibility.SOURCE_UNKNOWN
        if target.name == TOP_TYPE:
            return Compatibility.TARGET_UNKNOWN
        raise TypeMismatchError(
            f"Source type '{source.name}' does not match target type '{target.name}'",
            source.name,
            target.name,
        )

    # Matching wildcards are optimistically compatible, never an exact match.
    if source.name == TOP_TYPE:
        return Compatibility.BOTH_UNKNOWN

    if len(source.children) != len(target.children):
        raise _child_count_mismatch(source, target)

    total = Compatibility.EXACT
    for source_child, target_child in zip(source.children, target.children):
        # SOURCE_UNKNOWN and TARGET_UNKNOWN are bit flags; BOTH_UNKNOWN absorbs.
        total = Compatibility(total | compare_types(source_child, target_child))
    return total


def _child_count_mismatch(source: TypeNode, target: TypeNode) -> TypeMismatchError:
    """Build the error for two equally named nodes with different child counts."""
    source_children = [child.name for child in source.children]
    target_children = [child.name for child in target.children]

    message = f"Source type '{source.name}' has {len(source_children)} children"
    if source_children:
        message += f" ({', '.join(source_children)})"
    message += f" while '{target.name}' has {len(target_children)} children"
    if target_children:
        message += f" ({', '.join(target_children)})"

    return TypeMismatchError(
        message,
        source.name,
        target.name,
        source_children=source_children,
        target_children=target_children,
    )
