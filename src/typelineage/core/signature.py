"""Textual generic signatures.

Parses signatures such as ``java.util.Map<java.lang.String, V>`` or
``pkg.Box[builtins.int]`` into type references with a small recursive-descent
reader. Arguments are split only at the top nesting level of each matched
``<...>`` or ``[...]`` pair.
"""

from __future__ import annotations

import re

from typelineage.core.models import (
    TOP_TYPE,
    ParameterizedRef,
    PlainRef,
    TypeNode,
    TypeRef,
)
from typelineage.core.primitives import PrimitiveType

WILDCARD = "?"

_IDENTIFIER = re.compile(r"[A-Za-z_$][\w$]*")
_QUALIFIED_NAME = re.compile(r"[A-Za-z_$][\w$]*(?:\.[A-Za-z_$][\w$]*)+")
_CLOSERS = {"<": ">", "[": "]"}
_BOUND_KEYWORDS = ("extends", "super")


class SignatureError(ValueError):
    """A textual signature could not be parsed."""

    def __init__(self, message: str, text: str, position: int) -> None:
        super().__init__(f"{message} at position {position} in '{text}'")
        self.text = text
        self.position = position


def is_placeholder(name: str) -> bool:
    """Whether a type name can only be an unresolved placeholder.

    Anything that is not a namespace-qualified identifier (``T``, ``?``,
    ``String[]``) is presumed to be a type variable or otherwise erased.
    """
    return _QUALIFIED_NAME.fullmatch(name) is None


def parse_reference(text: str) -> TypeRef:
    """Parse a textual signature into a type reference.

    Args:
        text: Signature such as ``a.b.C<x.Y, z.W<Q>>``.

    Returns:
        PlainRef for unparameterized names, ParameterizedRef otherwise.

    Raises:
        SignatureError: If the text is not a well-formed signature.
    """
    reader = _SignatureReader(text)
    reference = reader.read_reference()
    reader.skip_whitespace()
    if not reader.at_end():
        raise reader.error(f"Unexpected '{reader.peek()}'")
    return reference


def signature_node(text: str) -> TypeNode:
    """Build a type tree describing the shape written in a signature.

    Only the written arguments become children; no hierarchy is walked.
    Placeholders collapse to the TOP sentinel and primitives to their boxed
    names.

    Raises:
        SignatureError: If the text is not a well-formed signature.
    """
    return reference_node(parse_reference(text))


def reference_node(reference: TypeRef) -> TypeNode:
    """Convert a parsed reference into a shape-only type tree."""
    if isinstance(reference, PlainRef):
        return TypeNode(name=plain_type_name(reference.name))
    node = TypeNode(name=plain_type_name(reference.raw_name))
    for arg in reference.args:
        node.add_child(reference_node(arg))
    return node


def plain_type_name(name: str) -> str:
    """Normalize a written type name: box primitives, erase placeholders."""
    primitive = PrimitiveType.from_name(name)
    if primitive is not None:
        return primitive.boxed_name
    return TOP_TYPE if is_placeholder(name) else name


class _SignatureReader:
    def __init__(self, text: str) -> None:
        self.text = text
        self.pos = 0

    def at_end(self) -> bool:
        return self.pos >= len(self.text)

    def peek(self) -> str:
        return "" if self.at_end() else self.text[self.pos]

    def skip_whitespace(self) -> None:
        while not self.at_end() and self.text[self.pos].isspace():
            self.pos += 1

    def error(self, message: str) -> SignatureError:
        return SignatureError(message, self.text, self.pos)

    def expect(self, char: str) -> None:
        self.skip_whitespace()
        if self.peek() != char:
            found = self.peek() or "end of input"
            raise self.error(f"Expected '{char}' but found '{found}'")
        self.pos += 1

    def read_reference(self) -> TypeRef:
        self.skip_whitespace()
        if self.peek() == WILDCARD:
            self.pos += 1
            self._skip_wildcard_bound()
            return PlainRef(name=WILDCARD)

        name = self._read_qualified_name()
        self.skip_whitespace()
        opener = self.peek()
        if opener == "<" or (opener == "[" and not self._at_array_suffix()):
            self.pos += 1
            args = self._read_arguments(_CLOSERS[opener])
            return ParameterizedRef(raw_name=name, args=tuple(args))

        while self._at_array_suffix():
            self.expect("[")
            self.expect("]")
            name += "[]"
            self.skip_whitespace()
        return PlainRef(name=name)

    def _read_arguments(self, closer: str) -> list[TypeRef]:
        args = [self.read_reference()]
        self.skip_whitespace()
        while self.peek() == ",":
            self.pos += 1
            args.append(self.read_reference())
            self.skip_whitespace()
        self.expect(closer)
        return args

    def _read_qualified_name(self) -> str:
        parts = [self._read_identifier()]
        while self.peek() == ".":
            self.pos += 1
            parts.append(self._read_identifier())
        return ".".join(parts)

    def _read_identifier(self) -> str:
        self.skip_whitespace()
        match = _IDENTIFIER.match(self.text, self.pos)
        if match is None:
            found = self.peek() or "end of input"
            raise self.error(f"Expected a type name but found '{found}'")
        self.pos = match.end()
        return match.group()

    def _at_array_suffix(self) -> bool:
        if self.peek() != "[":
            return False
        lookahead = self.pos + 1
        while lookahead < len(self.text) and self.text[lookahead].isspace():
            lookahead += 1
        return lookahead < len(self.text) and self.text[lookahead] == "]"

    def _skip_wildcard_bound(self) -> None:
        # Bounds are not resolved; a bounded wildcard is still unknown.
        self.skip_whitespace()
        for keyword in _BOUND_KEYWORDS:
            end = self.pos + len(keyword)
            if self.text.startswith(keyword, self.pos) and (
                end >= len(self.text) or not (self.text[end].isalnum() or self.text[end] in "_$")
            ):
                self.pos = end
                self.read_reference()
                return
