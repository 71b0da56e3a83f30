"""Exceptions raised by typelineage.

Only comparison surfaces ``TypeMismatchError``; resolution problems met while
parsing degrade to the TOP sentinel instead of raising.
"""

from __future__ import annotations

from typing import TypeVar

T = TypeVar("T")


class TypeMismatchError(Exception):
    """Two type trees cannot be reconciled into a compatible shape."""

    def __init__(
        self,
        message: str,
        source: str,
        target: str | None = None,
        source_children: list[str] | None = None,
        target_children: list[str] | None = None,
    ) -> None:
        super().__init__(message)
        self.message = message
        self.source = fail_if_none(source, "source cannot be None")
        self.target = target
        self.source_children = source_children
        self.target_children = target_children


class PreconditionError(ValueError):
    """A required argument was None."""


def fail_if_none(reference: T | None, message: str) -> T:
    """Return ``reference`` unchanged, raising if it is None.

    Args:
        reference: Value that must be present.
        message: Error message used when the check fails.

    Returns:
        The validated reference.

    Raises:
        PreconditionError: If ``reference`` is None.
    """
    if reference is None:
        raise PreconditionError(message)
    return reference
