"""Type oracles answering structural questions about type handles."""

from typelineage.oracles.base import TypeOracle
from typelineage.oracles.catalog import (
    CatalogError,
    CatalogTypeOracle,
    TypeCatalog,
    TypeDeclaration,
    load_catalog,
)
from typelineage.oracles.python import PythonTypeOracle

__all__ = [
    "CatalogError",
    "CatalogTypeOracle",
    "PythonTypeOracle",
    "TypeCatalog",
    "TypeDeclaration",
    "TypeOracle",
    "load_catalog",
]
