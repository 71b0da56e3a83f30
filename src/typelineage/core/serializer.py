"""TypeNode serialization and deserialization.

This module provides functions to serialize type trees to JSON and deserialize
JSON back to TypeNode structures, so parsed lineages can be stored and
compared later without re-parsing.
"""

from __future__ import annotations

import json
from typing import Any

from pydantic import ValidationError

from typelineage.core.models import TypeNode


class SerializationError(Exception):
    """Error during serialization or deserialization."""

    def __init__(self, message: str, details: str | None = None) -> None:
        super().__init__(message)
        self.message = message
        self.details = details


def serialize(node: TypeNode) -> str:
    """Serialize a type tree to JSON string.

    Args:
        node: Root of the tree to serialize.

    Returns:
        JSON string representation of the tree.

    Raises:
        SerializationError: If serialization fails.
    """
    try:
        data = node.model_dump(mode="json")
        return json.dumps(data, indent=2, ensure_ascii=False)
    except Exception as e:
        raise SerializationError(
            message="Failed to serialize type tree",
            details=str(e),
        ) from e


def deserialize(json_str: str) -> TypeNode:
    """Deserialize a JSON string to a type tree.

    Args:
        json_str: JSON string representation of a tree.

    Returns:
        The deserialized TypeNode.

    Raises:
        SerializationError: If deserialization fails with detailed error info.
    """
    try:
        data = json.loads(json_str)
    except json.JSONDecodeError as e:
        raise SerializationError(
            message="Invalid JSON format",
            details=f"Line {e.lineno}, column {e.colno}: {e.msg}",
        ) from e
    return deserialize_from_dict(data)


def serialize_to_dict(node: TypeNode) -> dict[str, Any]:
    """Serialize a type tree to a dictionary.

    Args:
        node: Root of the tree to serialize.

    Returns:
        Dictionary representation of the tree.
    """
    return node.model_dump(mode="json")


def deserialize_from_dict(data: dict[str, Any]) -> TypeNode:
    """Deserialize a dictionary to a type tree.

    Args:
        data: Dictionary representation of a tree.

    Returns:
        The deserialized TypeNode.

    Raises:
        SerializationError: If deserialization fails.
    """
    try:
        return TypeNode.model_validate(data)
    except ValidationError as e:
        error_details = []
        for err in e.errors():
            loc = ".".join(str(x) for x in err["loc"])
            error_details.append(f"{loc}: {err['msg']}")
        raise SerializationError(
            message="Type tree validation failed",
            details="; ".join(error_details),
        ) from e
