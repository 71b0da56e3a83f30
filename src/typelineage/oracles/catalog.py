"""Type oracle over declared type catalogs.

A catalog is a JSON document declaring types by qualified name together with
their type parameters, super-type and implemented interfaces, each written as
a textual generic signature:

    {
      "top_type": "java.lang.Object",
      "types": [
        {"name": "java.util.ArrayList", "type_params": ["E"],
         "extends": "java.util.AbstractList<E>",
         "implements": ["java.util.List<E>", "java.util.RandomAccess"]}
      ]
    }

Handles are type names (or signatures). Qualified names that are not declared
resolve to leaf types with no hierarchy of their own.
"""

from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Any

from pydantic import BaseModel, Field, ValidationError

from typelineage.core.models import TOP_TYPE, ParameterizedRef, PlainRef, TypeRef
from typelineage.core.primitives import PrimitiveType
from typelineage.core.signature import is_placeholder, parse_reference
from typelineage.oracles.base import TypeOracle

logger = logging.getLogger(__name__)

DEFAULT_TOP_TYPE = "java.lang.Object"


class CatalogError(Exception):
    """Error reading or validating a type catalog."""

    def __init__(self, message: str, details: str | None = None) -> None:
        super().__init__(message)
        self.message = message
        self.details = details


class TypeDeclaration(BaseModel):
    """A single declared type."""

    name: str = Field(..., min_length=1, description="Qualified type name")
    type_params: list[str] = Field(
        default_factory=list, description="Declared type parameter names"
    )
    extends: str | None = Field(None, description="Super-type signature")
    implements: list[str] = Field(
        default_factory=list, description="Implemented interface signatures"
    )


class TypeCatalog(BaseModel):
    """A set of declared types sharing one universal top type."""

    top_type: str = Field(DEFAULT_TOP_TYPE, min_length=1, description="Universal top type")
    types: list[TypeDeclaration] = Field(default_factory=list)


def load_catalog(path: str | Path) -> TypeCatalog:
    """Load a type catalog from a JSON file.

    Args:
        path: Path to the catalog file.

    Returns:
        The validated TypeCatalog.

    Raises:
        CatalogError: If the file cannot be read, is not JSON or does not
            describe a catalog.
    """
    try:
        text = Path(path).read_text(encoding="utf-8")
    except OSError as e:
        raise CatalogError(
            message=f"Failed to read catalog {path}",
            details=str(e),
        ) from e

    try:
        return TypeCatalog.model_validate(json.loads(text))
    except json.JSONDecodeError as e:
        raise CatalogError(
            message="Invalid JSON format",
            details=f"Line {e.lineno}, column {e.colno}: {e.msg}",
        ) from e
    except ValidationError as e:
        error_details = []
        for err in e.errors():
            loc = ".".join(str(x) for x in err["loc"])
            error_details.append(f"{loc}: {err['msg']}")
        raise CatalogError(
            message="Catalog validation failed",
            details="; ".join(error_details),
        ) from e


class CatalogTypeOracle(TypeOracle):
    """Answers type-structure questions from a TypeCatalog.

    Signatures are parsed on demand, so a malformed ``extends`` or
    ``implements`` entry surfaces as a SignatureError while parsing the
    type that declares it. Run ``validate_catalog`` first to catch these up
    front.
    """

    def __init__(self, catalog: TypeCatalog) -> None:
        self._catalog = catalog
        self._declarations: dict[str, TypeDeclaration] = {}
        for declaration in catalog.types:
            if declaration.name in self._declarations:
                logger.warning(
                    f"Duplicate declaration of {declaration.name} in catalog, keeping the first"
                )
                continue
            self._declarations[declaration.name] = declaration

    @property
    def catalog(self) -> TypeCatalog:
        return self._catalog

    def declaration(self, name: str) -> TypeDeclaration | None:
        """Get the declaration for a type name, if the catalog declares it."""
        return self._declarations.get(name)

    def canonical_name(self, handle: Any) -> str:
        name = self.boxed(_require_name(handle))
        if self.is_top(name):
            return TOP_TYPE
        return name

    def reference(self, handle: Any) -> TypeRef:
        return self._attach(parse_reference(_require_name(handle)))

    def type_parameters(self, handle: Any) -> list[str]:
        declaration = self._declarations.get(handle)
        return list(declaration.type_params) if declaration else []

    def super_type(self, handle: Any) -> TypeRef | None:
        declaration = self._declarations.get(handle)
        if declaration is None or declaration.extends is None:
            return None
        return self.reference(declaration.extends)

    def interfaces(self, handle: Any) -> list[TypeRef]:
        declaration = self._declarations.get(handle)
        if declaration is None:
            return []
        return [self.reference(signature) for signature in declaration.implements]

    def lookup(self, name: str) -> Any | None:
        boxed = self.boxed(name)
        if is_placeholder(boxed):
            return None
        return boxed

    def is_type_handle(self, obj: Any) -> bool:
        return isinstance(obj, str)

    def runtime_type(self, value: Any) -> Any:
        raise TypeError(
            f"Catalog types are referenced by name, got {type(value).__name__}"
        )

    def boxed(self, handle: Any) -> Any:
        if not isinstance(handle, str):
            return handle
        primitive = PrimitiveType.from_name(handle)
        return primitive.boxed_name if primitive is not None else handle

    def is_top(self, handle: Any) -> bool:
        return handle in (self._catalog.top_type, TOP_TYPE)

    def _attach(self, reference: TypeRef) -> TypeRef:
        """Give written references their name as handle, boxing primitives."""
        if isinstance(reference, ParameterizedRef):
            raw = self.lookup(reference.raw_name)
            return ParameterizedRef(
                raw_name=raw if raw is not None else reference.raw_name,
                raw=raw,
                args=tuple(self._attach(arg) for arg in reference.args),
            )
        handle = self.lookup(reference.name)
        return PlainRef(
            name=handle if handle is not None else reference.name,
            handle=handle,
        )


def _require_name(handle: Any) -> str:
    if not isinstance(handle, str):
        raise TypeError(f"Catalog type handles are names, got {type(handle).__name__}")
    return handle
