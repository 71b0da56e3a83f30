"""Core module containing type tree models, comparison, serializer, and validator."""

from typelineage.core.comparator import compare_types
from typelineage.core.errors import PreconditionError, TypeMismatchError, fail_if_none
from typelineage.core.models import (
    NULL_TYPE,
    TOP_TYPE,
    Compatibility,
    ParameterizedRef,
    PlainRef,
    TypeNode,
    TypeRef,
)
from typelineage.core.options import DEFAULT_PARSE_OPTIONS, ParseOptions
from typelineage.core.serializer import (
    SerializationError,
    deserialize,
    deserialize_from_dict,
    serialize,
    serialize_to_dict,
)
from typelineage.core.signature import SignatureError, parse_reference, signature_node
from typelineage.core.validator import (
    ValidationError,
    ValidationErrorType,
    ValidationResult,
    validate_catalog,
)

__all__ = [
    "Compatibility",
    "DEFAULT_PARSE_OPTIONS",
    "NULL_TYPE",
    "ParameterizedRef",
    "ParseOptions",
    "PlainRef",
    "PreconditionError",
    "SerializationError",
    "SignatureError",
    "TOP_TYPE",
    "TypeMismatchError",
    "TypeNode",
    "TypeRef",
    "ValidationError",
    "ValidationErrorType",
    "ValidationResult",
    "compare_types",
    "deserialize",
    "deserialize_from_dict",
    "fail_if_none",
    "parse_reference",
    "serialize",
    "serialize_to_dict",
    "signature_node",
    "validate_catalog",
]
