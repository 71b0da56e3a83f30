"""Global configuration for typelineage.

This module provides centralized configuration management with support for
environment variables and sensible defaults. Configuration only feeds the
command-line interface and the default oracle's cache; ``parse()`` called
without options never reads it.
"""

from __future__ import annotations

from functools import lru_cache

from pydantic import Field
from pydantic_settings import BaseSettings

from typelineage.core.options import ParseOptions


class LineageConfig(BaseSettings):
    """typelineage configuration settings.

    Values can be overridden via environment variables with TYPELINEAGE_ prefix.
    Example: TYPELINEAGE_CLASS_FILTER=".*Base" sets the default class filter.
    """

    # Default exclusion filters
    class_filter: str | None = Field(
        default=None,
        description="Default pattern of super-classes to ignore",
    )
    class_param_filter: str | None = Field(
        default=None,
        description="Default pattern of class type parameters to ignore",
    )
    interface_filter: str | None = Field(
        default=None,
        description="Default pattern of interfaces to ignore",
    )
    interface_param_filter: str | None = Field(
        default=None,
        description="Default pattern of interface type arguments to ignore",
    )

    # Name resolution
    resolution_cache_size: int = Field(
        default=1024,
        ge=16,
        le=65536,
        description="Maximum number of cached type name lookups",
    )

    # Logging
    log_level: str = Field(
        default="WARNING",
        description="Log level used by the command-line interface",
    )

    model_config = {
        "env_prefix": "TYPELINEAGE_",
        "env_file": ".env",
        "env_file_encoding": "utf-8",
        "extra": "ignore",
    }

    def default_options(self) -> ParseOptions:
        """Build ParseOptions from the configured default filters."""
        return ParseOptions(
            class_filter=self.class_filter,
            class_param_filter=self.class_param_filter,
            interface_filter=self.interface_filter,
            interface_param_filter=self.interface_param_filter,
        )


@lru_cache
def get_config() -> LineageConfig:
    """Get cached configuration instance.

    Returns:
        LineageConfig singleton instance.
    """
    return LineageConfig()


def reload_config() -> LineageConfig:
    """Reload configuration (clears cache).

    Returns:
        Fresh LineageConfig instance.
    """
    get_config.cache_clear()
    return get_config()
