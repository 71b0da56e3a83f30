"""Hierarchy parser building TypeNode trees.

The parser climbs a type's super-type chain and, at every level, its
implemented interfaces, attaching resolved generic arguments as children.
All structural questions are delegated to a TypeOracle; the parser itself
only applies the exclusion filters and lays the children out in order:
declared type parameters, then interfaces, then the super-type.
"""

from __future__ import annotations

import logging
from functools import lru_cache
from typing import Any

from typelineage.core.errors import fail_if_none
from typelineage.core.models import (
    NULL_TYPE,
    TOP_TYPE,
    ParameterizedRef,
    PlainRef,
    TypeNode,
)
from typelineage.core.options import DEFAULT_PARSE_OPTIONS, ParseOptions
from typelineage.core.signature import is_placeholder
from typelineage.oracles.base import TypeOracle

logger = logging.getLogger(__name__)


class HierarchyParser:
    """Builds type trees with a fixed set of exclusion filters.

    Example:
        >>> parser = HierarchyParser(ParseOptions(class_filter=r".*Base"))
        >>> parser.parse(MyClass).render()
    """

    def __init__(self, options: ParseOptions, oracle: TypeOracle | None = None) -> None:
        """Initialize the parser.

        Args:
            options: Exclusion filters to apply. Required.
            oracle: Source of type-structure answers. Defaults to the shared
                PythonTypeOracle.

        Raises:
            PreconditionError: If ``options`` is None.
        """
        self._options = fail_if_none(options, "options cannot be None")
        self._oracle = oracle if oracle is not None else default_oracle()

    @property
    def options(self) -> ParseOptions:
        return self._options

    @property
    def oracle(self) -> TypeOracle:
        return self._oracle

    def parse(self, value: Any) -> TypeNode:
        """Build the type tree for a type handle or for the runtime type of a value.

        Args:
            value: A type handle, any other value, or None.

        Returns:
            Fresh TypeNode tree. None yields a single NULL-type leaf.
        """
        if value is None:
            return TypeNode(name=NULL_TYPE)

        if self._oracle.is_type_handle(value):
            handle = self._oracle.boxed(value)
        else:
            handle = self._oracle.runtime_type(value)

        reference = self._oracle.reference(handle)
        if isinstance(reference, ParameterizedRef):
            return self._build_parameterized(reference, frozenset())
        if reference.handle is None:
            # Type variables and forward references name a type without being one.
            resolved = self._plain_handle(reference)
            if resolved is None:
                return TypeNode(name=self._resolve_name(reference.name))
            handle = resolved
        return self._build_class(handle, frozenset())

    def _build_class(self, handle: Any, path: frozenset[str]) -> TypeNode:
        name = self._oracle.canonical_name(handle)
        node = TypeNode(name=name)
        if name in path:
            logger.debug(f"Cycle detected at {name}, emitting leaf")
            return node
        path = path | {name}

        for param in self._oracle.type_parameters(handle):
            resolved = self._resolve_name(param)
            if self._options.excludes_class_param(resolved):
                logger.debug(f"Excluded type parameter {param} of {name}")
                continue
            node.add_child(TypeNode(name=resolved))

        self._add_interfaces(handle, node, path)
        self._add_super_type(handle, node, path)
        return node

    def _build_parameterized(self, reference: ParameterizedRef, path: frozenset[str]) -> TypeNode:
        name = self._raw_name(reference)
        node = TypeNode(name=name)

        for arg in reference.args:
            if isinstance(arg, ParameterizedRef):
                if self._options.excludes_interface_param(self._raw_name(arg)):
                    logger.debug(f"Excluded type argument {arg.raw_name} of {name}")
                    continue
                node.add_child(self._build_parameterized(arg, path))
            else:
                resolved = self._plain_name(arg)
                if self._options.excludes_interface_param(resolved):
                    logger.debug(f"Excluded type argument {arg.name} of {name}")
                    continue
                node.add_child(TypeNode(name=resolved))

        raw = reference.raw
        if raw is None:
            raw = self._plain_handle(PlainRef(name=reference.raw_name))
        if raw is None:
            return node
        if name in path:
            # Arguments are finite; only the hierarchy behind the raw type can loop.
            logger.debug(f"Cycle detected at {name}, skipping its hierarchy")
            return node

        path = path | {name}
        self._add_interfaces(raw, node, path)
        self._add_super_type(raw, node, path)
        return node

    def _add_interfaces(self, handle: Any, parent: TypeNode, path: frozenset[str]) -> None:
        for reference in self._oracle.interfaces(handle):
            if isinstance(reference, ParameterizedRef):
                if self._options.excludes_interface(self._raw_name(reference)):
                    logger.debug(f"Excluded interface {reference.raw_name} of {parent.name}")
                    continue
                parent.add_child(self._build_parameterized(reference, path))
            else:
                # Plain interfaces are leaves; their own hierarchy is not walked.
                resolved = self._plain_name(reference)
                if self._options.excludes_interface(resolved):
                    logger.debug(f"Excluded interface {reference.name} of {parent.name}")
                    continue
                parent.add_child(TypeNode(name=resolved))

    def _add_super_type(self, handle: Any, parent: TypeNode, path: frozenset[str]) -> None:
        reference = self._oracle.super_type(handle)
        if reference is None:
            return

        if isinstance(reference, ParameterizedRef):
            raw = reference.raw
            if raw is not None and self._oracle.is_top(raw):
                return
            if self._options.excludes_class(self._raw_name(reference)):
                logger.debug(f"Excluded super-type {reference.raw_name} of {parent.name}")
                return
            parent.add_child(self._build_parameterized(reference, path))
            return

        super_handle = self._plain_handle(reference)
        if super_handle is None:
            parent.add_child(TypeNode(name=self._resolve_name(reference.name)))
            return
        if self._oracle.is_top(super_handle):
            return
        name = self._oracle.canonical_name(super_handle)
        if self._options.excludes_class(name):
            logger.debug(f"Excluded super-type {name} of {parent.name}")
            return
        parent.add_child(self._build_class(super_handle, path))

    def _raw_name(self, reference: ParameterizedRef) -> str:
        if reference.raw is not None:
            return self._oracle.canonical_name(reference.raw)
        return self._resolve_name(reference.raw_name)

    def _plain_name(self, reference: PlainRef) -> str:
        if reference.handle is not None:
            return self._oracle.canonical_name(reference.handle)
        return self._resolve_name(reference.name)

    def _plain_handle(self, reference: PlainRef) -> Any | None:
        if reference.handle is not None:
            return reference.handle
        if is_placeholder(reference.name):
            return None
        return self._oracle.lookup(reference.name)

    def _resolve_name(self, name: str) -> str:
        """Resolve a written type name, collapsing placeholders to TOP.

        A name that is not namespace-qualified (``T``, ``K``, ``?``) is a
        placeholder. Qualified names are looked up through the oracle.
        """
        if is_placeholder(name):
            return TOP_TYPE
        handle = self._oracle.lookup(name)
        if handle is None:
            logger.debug(f"Could not resolve type {name}, using {TOP_TYPE}")
            return TOP_TYPE
        return self._oracle.canonical_name(handle)


@lru_cache(maxsize=1)
def default_oracle() -> TypeOracle:
    """Get the shared PythonTypeOracle used when no oracle is given."""
    from typelineage.oracles.python import PythonTypeOracle

    return PythonTypeOracle()


def parse(
    value: Any,
    options: ParseOptions | None = None,
    oracle: TypeOracle | None = None,
) -> TypeNode:
    """Build the type tree for a type handle or a value.

    Args:
        value: A type handle, any other value, or None.
        options: Exclusion filters. None applies no filtering.
        oracle: Source of type-structure answers. Defaults to the shared
            PythonTypeOracle.

    Returns:
        Fresh TypeNode tree.
    """
    return HierarchyParser(
        options if options is not None else DEFAULT_PARSE_OPTIONS, oracle
    ).parse(value)

