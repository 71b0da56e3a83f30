"""Exclusion filters applied while parsing a type tree."""

from __future__ import annotations

import re

from pydantic import BaseModel, Field, field_validator


class ParseOptions(BaseModel):
    """Name patterns excluding parts of a hierarchy from the parsed tree.

    Each pattern is a regular expression that must match a whole canonical
    name. An excluded super-type or interface is dropped together with
    everything behind it in that branch.
    """

    class_filter: str | None = Field(None, description="Super-classes to ignore")
    class_param_filter: str | None = Field(
        None, description="Declared type parameters of classes to ignore"
    )
    interface_filter: str | None = Field(None, description="Interfaces to ignore")
    interface_param_filter: str | None = Field(
        None, description="Type arguments of parameterized references to ignore"
    )

    model_config = {"frozen": True}

    @field_validator(
        "class_filter",
        "class_param_filter",
        "interface_filter",
        "interface_param_filter",
    )
    @classmethod
    def _check_pattern(cls, value: str | None) -> str | None:
        if value is not None:
            try:
                re.compile(value)
            except re.error as e:
                raise ValueError(f"Invalid pattern '{value}': {e}") from e
        return value

    def excludes_class(self, name: str) -> bool:
        return _matches(self.class_filter, name)

    def excludes_class_param(self, name: str) -> bool:
        return _matches(self.class_param_filter, name)

    def excludes_interface(self, name: str) -> bool:
        return _matches(self.interface_filter, name)

    def excludes_interface_param(self, name: str) -> bool:
        return _matches(self.interface_param_filter, name)


def _matches(pattern: str | None, name: str) -> bool:
    return pattern is not None and re.fullmatch(pattern, name) is not None


DEFAULT_PARSE_OPTIONS = ParseOptions()
