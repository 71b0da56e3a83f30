"""Primitive type names and their boxed equivalents.

Declared catalogs may reference JVM-style primitives (``int``, ``boolean``,
...). Type trees only ever name the boxed form.
"""

from __future__ import annotations

from enum import Enum

from typelineage.core.models import NULL_TYPE

NULL_STRING = "null"


class PrimitiveType(str, Enum):
    """Primitive names mapped to the boxed type used in type trees."""

    SHORT = "short"
    INT = "int"
    LONG = "long"
    FLOAT = "float"
    DOUBLE = "double"
    BYTE = "byte"
    CHAR = "char"
    BOOLEAN = "boolean"
    VOID = "void"
    NULL = NULL_STRING

    @property
    def boxed_name(self) -> str:
        """Qualified name of the boxed equivalent."""
        return _BOXED_NAMES[self]

    @classmethod
    def from_name(cls, name: str | None) -> PrimitiveType | None:
        """Look up a primitive by its primitive or boxed name.

        Matching is case-insensitive. None and ``"null"`` map to NULL.

        Args:
            name: Primitive name (e.g. "int") or boxed name
                (e.g. "java.lang.Integer").

        Returns:
            The matching PrimitiveType, or None if ``name`` is neither.
        """
        if name is None or name.strip().lower() == NULL_STRING:
            return cls.NULL
        lowered = name.strip().lower()
        for primitive in cls:
            if lowered in (primitive.value, primitive.boxed_name.lower()):
                return primitive
        return None


_BOXED_NAMES: dict[PrimitiveType, str] = {
    PrimitiveType.SHORT: "java.lang.Short",
    PrimitiveType.INT: "java.lang.Integer",
    PrimitiveType.LONG: "java.lang.Long",
    PrimitiveType.FLOAT: "java.lang.Float",
    PrimitiveType.DOUBLE: "java.lang.Double",
    PrimitiveType.BYTE: "java.lang.Byte",
    PrimitiveType.CHAR: "java.lang.Character",
    PrimitiveType.BOOLEAN: "java.lang.Boolean",
    PrimitiveType.VOID: "java.lang.Void",
    PrimitiveType.NULL: NULL_TYPE,
}
