"""
Catalog — Named convenience constructors for common line prefixes

DEFAULT_CATALOG holds the built-ins (bullets, comment markers, citation
markers). Names from it can be listed in config (catalog.global_functions)
to be applied globally once the host is available.
"""

from .base import PatternCatalog, CatalogFunction, SUGGESTION_THRESHOLD
from .builtins import DEFAULT_CATALOG

__all__ = [
    "PatternCatalog", "CatalogFunction", "SUGGESTION_THRESHOLD",
    "DEFAULT_CATALOG",
]
