"""Type tree data models for typelineage.

This module defines the TypeNode tree produced by the hierarchy parser and
consumed by the structural comparator, together with the reserved sentinel
names and the compatibility classification.
"""

from __future__ import annotations

import re
from collections.abc import Iterator
from dataclasses import dataclass, field
from enum import IntEnum
from typing import Any, Union

from pydantic import BaseModel, Field

# Unknown, erased or generic types collapse to this name.
TOP_TYPE = "builtins.object"

# Name of the node produced when parsing an absent value.
NULL_TYPE = "builtins.NoneType"


class Compatibility(IntEnum):
    """Outcome of structurally comparing a source tree with a target tree."""

    MISMATCH = -1
    EXACT = 0
    SOURCE_UNKNOWN = 1
    TARGET_UNKNOWN = 2
    BOTH_UNKNOWN = 3


@dataclass(frozen=True)
class PlainRef:
    """Reference to a type used without type arguments.

    ``handle`` is None when the reference is only known by name (type
    variables, forward references, textual signatures).
    """

    name: str
    handle: Any = field(default=None, compare=False)


@dataclass(frozen=True)
class ParameterizedRef:
    """Reference to a generic type applied to ordered type arguments."""

    raw_name: str
    raw: Any = field(default=None, compare=False)
    args: tuple[TypeRef, ...] = ()


TypeRef = Union[PlainRef, ParameterizedRef]


class TypeNode(BaseModel):
    """One resolved type and its ordered structural children.

    Children are laid out as declared type parameters first, then implemented
    interfaces, then the super-type. Comparison is positional, so this order
    is part of the contract.
    """

    name: str = Field(..., min_length=1, description="Canonical type name")
    children: list[TypeNode] = Field(
        default_factory=list, description="Ordered child type nodes"
    )

    @property
    def is_unknown(self) -> bool:
        """Whether this node is the TOP sentinel."""
        return self.name == TOP_TYPE

    def add_child(self, child: TypeNode | None) -> TypeNode:
        """Append a child node, ignoring None.

        Args:
            child: Node to append.

        Returns:
            This node, for chaining.
        """
        if child is not None:
            self.children.append(child)
        return self

    def walk(self) -> Iterator[TypeNode]:
        """Yield this node and all descendants in depth-first pre-order."""
        yield self
        for child in self.children:
            yield from child.walk()

    def has_unknowns(self) -> bool:
        """Whether the TOP sentinel appears anywhere in this tree."""
        return any(node.is_unknown for node in self.walk())

    def first_child_matching(self, pattern: str | None) -> TypeNode | None:
        """Find the first node whose name fully matches a regular expression.

        The search covers this node and all of its descendants, depth-first
        and pre-order.

        Args:
            pattern: Regular expression matched against whole names.

        Returns:
            The first matching node, or None if nothing matches or
            ``pattern`` is None.
        """
        if pattern is None:
            return None
        regex = re.compile(pattern)
        for node in self.walk():
            if regex.fullmatch(node.name):
                return node
        return None

    def compare(self, target: TypeNode | None) -> Compatibility:
        """Compare this tree (the source) against ``target``.

        Args:
            target: Tree to compare against.

        Returns:
            EXACT, SOURCE_UNKNOWN, TARGET_UNKNOWN or BOTH_UNKNOWN.

        Raises:
            TypeMismatchError: If the trees cannot be reconciled or
                ``target`` is None.
        """
        from typelineage.core.comparator import compare_types

        return compare_types(self, target)

    def compare_to(self, target: TypeNode | None) -> Compatibility:
        """Compare like :meth:`compare` but return MISMATCH instead of raising."""
        from typelineage.core.errors import TypeMismatchError

        try:
            return self.compare(target)
        except TypeMismatchError:
            return Compatibility.MISMATCH

    def render(self) -> str:
        """Render as ``name<child1, child2, ...>``; leaves render as the bare name."""
        if not self.children:
            return self.name
        inner = ", ".join(child.render() for child in self.children)
        return f"{self.name}<{inner}>"

    def __str__(self) -> str:
        return self.render()
