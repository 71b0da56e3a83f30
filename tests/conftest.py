"""Shared pytest fixtures for typelineage tests."""

import json
from pathlib import Path
from typing import Any

import pytest
from dotenv import load_dotenv
from hypothesis import settings

from typelineage.oracles.catalog import CatalogTypeOracle, TypeCatalog

# Load environment variables from .env file
load_dotenv()

# Configure hypothesis for property-based testing
settings.register_profile("ci", max_examples=100, deadline=None)
settings.register_profile("dev", max_examples=20, deadline=None)
settings.load_profile("dev")


JDK_CATALOG: dict[str, Any] = {
    "top_type": "java.lang.Object",
    "types": [
        {"name": "java.io.Serializable"},
        {"name": "java.lang.Comparable", "type_params": ["T"]},
        {"name": "java.lang.Iterable", "type_params": ["T"]},
        {
            "name": "java.lang.String",
            "extends": "java.lang.Object",
            "implements": ["java.io.Serializable", "java.lang.Comparable<java.lang.String>"],
        },
        {
            "name": "java.util.Collection",
            "type_params": ["E"],
            "implements": ["java.lang.Iterable<E>"],
        },
        {
            "name": "java.util.List",
            "type_params": ["E"],
            "implements": ["java.util.Collection<E>"],
        },
        {
            "name": "java.util.AbstractList",
            "type_params": ["E"],
            "implements": ["java.util.List<E>"],
        },
        {
            "name": "java.util.ArrayList",
            "type_params": ["E"],
            "extends": "java.util.AbstractList<E>",
            "implements": [
                "java.util.List<E>",
                "java.util.RandomAccess",
                "java.io.Serializable",
            ],
        },
        {
            "name": "java.util.function.Function",
            "type_params": ["T", "R"],
        },
    ],
}


@pytest.fixture
def jdk_catalog() -> TypeCatalog:
    """Provide a small JDK-like type catalog."""
    return TypeCatalog.model_validate(JDK_CATALOG)


@pytest.fixture
def jdk_oracle(jdk_catalog: TypeCatalog) -> CatalogTypeOracle:
    """Provide a catalog oracle over the JDK-like catalog."""
    return CatalogTypeOracle(jdk_catalog)


@pytest.fixture
def jdk_catalog_file(tmp_path: Path) -> Path:
    """Write the JDK-like catalog to a temporary JSON file."""
    path = tmp_path / "jdk.json"
    path.write_text(json.dumps(JDK_CATALOG), encoding="utf-8")
    return path
