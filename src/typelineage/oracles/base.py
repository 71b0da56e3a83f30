"""Base class for type oracles.

A type oracle answers structural questions about an opaque type handle: its
canonical name, its declared type parameters and its super-type and interface
references. The hierarchy parser never introspects handles itself; it only
consumes these answers.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Any

from typelineage.core.models import TypeRef


class TypeOracle(ABC):
    """Abstract source of type-structure answers.

    Subclasses decide what a handle is (a live class, a declared name, ...)
    and how references to other types are discovered.
    """

    @abstractmethod
    def canonical_name(self, handle: Any) -> str:
        """Return the canonical, namespace-qualified name of a handle."""
        ...

    @abstractmethod
    def reference(self, handle: Any) -> TypeRef:
        """Describe a handle as a plain or parameterized reference."""
        ...

    @abstractmethod
    def type_parameters(self, handle: Any) -> list[str]:
        """Return the names of the type parameters a handle declares, in order."""
        ...

    @abstractmethod
    def super_type(self, handle: Any) -> TypeRef | None:
        """Return the reference to a handle's super-type, if it has one."""
        ...

    @abstractmethod
    def interfaces(self, handle: Any) -> list[TypeRef]:
        """Return references to the interfaces a handle implements, in order."""
        ...

    @abstractmethod
    def lookup(self, name: str) -> Any | None:
        """Resolve a qualified type name to a handle.

        Returns:
            The handle, or None when the name cannot be resolved.
        """
        ...

    @abstractmethod
    def is_type_handle(self, obj: Any) -> bool:
        """Whether ``obj`` is itself a type handle rather than a value."""
        ...

    def runtime_type(self, value: Any) -> Any:
        """Return the handle describing the runtime type of a value."""
        return type(value)

    def boxed(self, handle: Any) -> Any:
        """Map a primitive handle to its boxed equivalent.

        The default implementation has no primitives and returns ``handle``.
        """
        return handle

    @abstractmethod
    def is_top(self, handle: Any) -> bool:
        """Whether ``handle`` is the universal top type of the type system."""
        ...
