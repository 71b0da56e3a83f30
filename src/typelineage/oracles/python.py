"""Type oracle over live Python classes and ``typing`` generics.

Handles are classes, generic aliases (``Box[int]``, ``list[str]``), type
variables and forward references. Python has no interfaces, so bases are
split by role: the first base that is neither a Protocol nor a purely abstract
class is the super-type and every other base is treated as an implemented
interface.
"""

from __future__ import annotations

import abc
import inspect
import logging
import pydoc
from functools import lru_cache
from typing import (
    Annotated,
    Any,
    ForwardRef,
    Generic,
    ParamSpec,
    Protocol,
    TypeVar,
    get_args,
    get_origin,
)

from typelineage.core.models import TOP_TYPE, ParameterizedRef, PlainRef, TypeRef
from typelineage.oracles.base import TypeOracle

logger = logging.getLogger(__name__)

# Bases that declare generic-ness or abstractness but are not lineage edges.
_MARKER_BASES: tuple[Any, ...] = (object, Generic, Protocol, abc.ABC)


class PythonTypeOracle(TypeOracle):
    """Answers type-structure questions by introspecting Python objects."""

    def __init__(self, cache_size: int | None = None) -> None:
        """Initialize the oracle.

        Args:
            cache_size: Maximum number of name lookups to keep cached.
                Defaults to the configured ``resolution_cache_size``.
        """
        if cache_size is None:
            from typelineage.core.config import get_config

            cache_size = get_config().resolution_cache_size
        self._locate = lru_cache(maxsize=cache_size)(_locate_type)

    def canonical_name(self, handle: Any) -> str:
        if self.is_top(handle):
            return TOP_TYPE
        origin = get_origin(handle)
        if origin is not None:
            return self.canonical_name(origin)
        if isinstance(handle, (TypeVar, ParamSpec)):
            return handle.__name__
        if isinstance(handle, ForwardRef):
            return handle.__forward_arg__
        if isinstance(handle, str):
            return handle

        module = getattr(handle, "__module__", None)
        qualname = getattr(handle, "__qualname__", None) or getattr(handle, "__name__", None)
        if isinstance(module, str) and isinstance(qualname, str):
            return f"{module}.{qualname}"
        return TOP_TYPE

    def reference(self, handle: Any) -> TypeRef:
        origin = get_origin(handle)
        if origin is Annotated:
            return self.reference(get_args(handle)[0])
        if origin is not None:
            args = get_args(handle)
            if args:
                return ParameterizedRef(
                    raw_name=self.canonical_name(origin),
                    raw=origin,
                    args=tuple(self._argument(arg) for arg in args),
                )
            handle = origin
        return PlainRef(
            name=self.canonical_name(handle),
            handle=handle if isinstance(handle, type) else None,
        )

    def type_parameters(self, handle: Any) -> list[str]:
        if not isinstance(handle, type):
            return []
        return [
            getattr(param, "__name__", str(param))
            for param in getattr(handle, "__parameters__", ())
        ]

    def super_type(self, handle: Any) -> TypeRef | None:
        primary, _ = self._split_bases(handle)
        return self.reference(primary) if primary is not None else None

    def interfaces(self, handle: Any) -> list[TypeRef]:
        _, others = self._split_bases(handle)
        return [self.reference(base) for base in others]

    def lookup(self, name: str) -> Any | None:
        return self._locate(name)

    def is_type_handle(self, obj: Any) -> bool:
        return (
            isinstance(obj, (type, TypeVar, ParamSpec, ForwardRef))
            or get_origin(obj) is not None
            or obj is Any
        )

    def is_top(self, handle: Any) -> bool:
        return handle is object or handle is Any

    def _argument(self, arg: Any) -> TypeRef:
        # Callable[[int, str], bool] nests its parameter types in a list.
        if isinstance(arg, list):
            return ParameterizedRef(
                raw_name=self.canonical_name(list),
                raw=list,
                args=tuple(self._argument(item) for item in arg),
            )
        return self.reference(arg)

    def _split_bases(self, handle: Any) -> tuple[Any | None, list[Any]]:
        """Split declared bases into the super-type and the interfaces.

        Returns:
            Tuple of (primary base or None, remaining bases in declaration order).
        """
        if not isinstance(handle, type):
            return None, []

        # __orig_bases__ must come from the class itself, never a parent.
        declared = vars(handle).get("__orig_bases__", handle.__bases__)
        if not all(_is_class_base(base) for base in declared):
            # NamedTuple and TypedDict record their factory function as a base.
            declared = handle.__bases__
        bases = [base for base in declared if not _is_marker(base)]

        for index, base in enumerate(bases):
            if not _is_interface(get_origin(base) or base):
                return base, bases[:index] + bases[index + 1:]
        return None, bases


def _is_marker(base: Any) -> bool:
    origin = get_origin(base) or base
    return any(origin is marker for marker in _MARKER_BASES)


def _is_class_base(base: Any) -> bool:
    return isinstance(base, type) or get_origin(base) is not None


def _is_interface(cls: Any) -> bool:
    """Whether a base class plays the role of an interface.

    Protocols are interfaces. An abstract class is one only when every base
    it extends is a marker or itself an interface; an abstract class built
    on a concrete class is an ordinary super-type.
    """
    if not isinstance(cls, type):
        return True
    if getattr(cls, "_is_protocol", False):
        return True
    if not inspect.isabstract(cls):
        return False
    return all(_is_marker(base) or _is_interface(base) for base in cls.__bases__)


def _locate_type(name: str) -> Any | None:
    """Import the object a dotted name refers to, if it is a type."""
    try:
        found = pydoc.locate(name)
    except pydoc.ErrorDuringImport as e:
        logger.debug(f"Failed to import while locating {name}: {e}")
        return None
    if isinstance(found, type) or get_origin(found) is not None:
        return found
    return None
