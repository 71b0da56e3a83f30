"""Type catalog validation module.

This module provides validation for declared type catalogs, ensuring every
signature parses, declarations are unique and the declared hierarchy is
acyclic before the catalog is used for parsing.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import TYPE_CHECKING

from typelineage.core.models import ParameterizedRef, PlainRef, TypeRef
from typelineage.core.primitives import PrimitiveType
from typelineage.core.signature import WILDCARD, SignatureError, parse_reference

if TYPE_CHECKING:
    from typelineage.oracles.catalog import TypeCatalog


class ValidationErrorType(str, Enum):
    """Types of validation errors."""

    DUPLICATE_DECLARATION = "duplicate_declaration"
    MALFORMED_SIGNATURE = "malformed_signature"
    UNDECLARED_TYPE_PARAMETER = "undeclared_type_parameter"
    CYCLIC_HIERARCHY = "cyclic_hierarchy"


@dataclass
class ValidationError:
    """A single validation error."""

    error_type: ValidationErrorType
    type_name: str
    field_name: str
    invalid_ref: str
    message: str


@dataclass
class ValidationResult:
    """Result of catalog validation."""

    is_valid: bool
    errors: list[ValidationError] = field(default_factory=list)

    def add_error(
        self,
        error_type: ValidationErrorType,
        type_name: str,
        field_name: str,
        invalid_ref: str,
        message: str,
    ) -> None:
        """Add a validation error."""
        self.errors.append(
            ValidationError(
                error_type=error_type,
                type_name=type_name,
                field_name=field_name,
                invalid_ref=invalid_ref,
                message=message,
            )
        )
        self.is_valid = False


def validate_catalog(catalog: TypeCatalog) -> ValidationResult:
    """Validate a type catalog for consistency.

    Args:
        catalog: The catalog to validate.

    Returns:
        ValidationResult containing validation status and any errors found.
    """
    result = ValidationResult(is_valid=True)

    # Check for duplicate declarations
    seen: set[str] = set()
    for declaration in catalog.types:
        if declaration.name in seen:
            result.add_error(
                error_type=ValidationErrorType.DUPLICATE_DECLARATION,
                type_name=declaration.name,
                field_name="name",
                invalid_ref=declaration.name,
                message=f"Type '{declaration.name}' is declared more than once",
            )
        seen.add(declaration.name)

    # Check signatures and the type variables they use
    edges: dict[str, list[str]] = {}
    for declaration in catalog.types:
        signatures = []
        if declaration.extends is not None:
            signatures.append(("extends", declaration.extends))
        signatures.extend(("implements", signature) for signature in declaration.implements)

        targets = edges.setdefault(declaration.name, [])
        for field_name, signature in signatures:
            try:
                reference = parse_reference(signature)
            except SignatureError as e:
                result.add_error(
                    error_type=ValidationErrorType.MALFORMED_SIGNATURE,
                    type_name=declaration.name,
                    field_name=field_name,
                    invalid_ref=signature,
                    message=f"Type '{declaration.name}' has malformed {field_name} signature: {e}",
                )
                continue

            targets.append(_raw_name(reference))
            for variable in _type_variables(reference):
                if variable not in declaration.type_params:
                    result.add_error(
                        error_type=ValidationErrorType.UNDECLARED_TYPE_PARAMETER,
                        type_name=declaration.name,
                        field_name=field_name,
                        invalid_ref=variable,
                        message=f"Type '{declaration.name}' uses undeclared type "
                        f"parameter '{variable}' in {field_name}",
                    )

    return _validate_hierarchy(edges, result)


def _validate_hierarchy(
    edges: dict[str, list[str]],
    result: ValidationResult,
) -> ValidationResult:
    """Report every declared type that can reach itself.

    Args:
        edges: Raw super-type and interface names per declared type.
        result: The validation result to update.

    Returns:
        Updated ValidationResult.
    """
    for name in edges:
        stack = list(edges[name])
        visited: set[str] = set()
        while stack:
            current = stack.pop()
            if current == name:
                result.add_error(
                    error_type=ValidationErrorType.CYCLIC_HIERARCHY,
                    type_name=name,
                    field_name="extends",
                    invalid_ref=name,
                    message=f"Type '{name}' is its own ancestor",
                )
                break
            if current in visited:
                continue
            visited.add(current)
            stack.extend(edges.get(current, ()))

    return result


def _raw_name(reference: TypeRef) -> str:
    if isinstance(reference, ParameterizedRef):
        return reference.raw_name
    return reference.name


def _type_variables(reference: TypeRef) -> list[str]:
    """Bare identifiers used anywhere in a reference, in order of appearance."""
    if isinstance(reference, PlainRef):
        name = reference.name
        if "." in name or name == WILDCARD or name.endswith("[]"):
            return []
        if PrimitiveType.from_name(name) is not None:
            return []
        return [name]

    variables = []
    for arg in reference.args:
        variables.extend(_type_variables(arg))
    return variables
