"""
PatternCatalog — Named convenience constructors

Each catalog function packages one literal (matcher, classification) pair
(or one classification removal) and hands it to the registry. The catalog
maps names to those functions so they can be listed, looked up, and
referenced from configuration.

Usage:
    catalog = PatternCatalog()

    @catalog.function("html-bullet", "Treat <li> as a bullet")
    def html_bullet(registry, context_id=None, global_scope=False):
        registry.register_add(("<li>", "bullet"), context_id, global_scope)

    catalog.get("html-bullet").apply(registry, context_id=ctx)
"""

from dataclasses import dataclass
from typing import Callable, Dict, List, Optional, TYPE_CHECKING

from rapidfuzz import fuzz

if TYPE_CHECKING:
    from ..core.registry import PatternRegistry


# Minimum similarity (0-100) for a "did you mean" suggestion
SUGGESTION_THRESHOLD = 60.0


@dataclass(frozen=True)
class CatalogFunction:
    """A named catalog entry."""
    name: str
    description: str
    fn: Callable[..., None]

    def apply(
        self,
        registry: 'PatternRegistry',
        context_id: Optional[str] = None,
        global_scope: bool = False
    ) -> None:
        self.fn(registry, context_id=context_id, global_scope=global_scope)


class PatternCatalog:
    """Registry of catalog functions, in registration order."""

    def __init__(self):
        self._functions: Dict[str, CatalogFunction] = {}

    def register(self, function: CatalogFunction) -> None:
        """
        Register a catalog function.

        Raises:
            ValueError: If the name is already taken by a different function
        """
        existing = self._functions.get(function.name)
        if existing is not None and existing.fn is not function.fn:
            raise ValueError(f"Catalog function '{function.name}' already registered")
        self._functions[function.name] = function

    def function(self, name: str, description: str = ""):
        """Decorator form of register()."""
        def decorator(fn: Callable[..., None]) -> Callable[..., None]:
            self.register(CatalogFunction(name=name, description=description, fn=fn))
            return fn
        return decorator

    def get(self, name: str) -> CatalogFunction:
        """
        Look up a catalog function by name.

        Raises:
            KeyError: If unknown (message carries a suggestion when one is close)
        """
        function = self._functions.get(name)
        if function is not None:
            return function
        message = f"Unknown catalog function: {name}"
        suggestion = self.suggest(name)
        if suggestion:
            message += f". Did you mean '{suggestion}'?"
        raise KeyError(message)

    def suggest(self, name: str) -> Optional[str]:
        """Closest registered name, if any is similar enough."""
        best_name, best_score = None, 0.0
        for candidate in self._functions:
            score = fuzz.ratio(name.lower(), candidate)
            if score > best_score:
                best_name, best_score = candidate, score
        return best_name if best_score >= SUGGESTION_THRESHOLD else None

    def unknown(self, names: List[str]) -> List[str]:
        """Names from `names` that are not registered."""
        return [n for n in names if n not in self._functions]

    def names(self) -> List[str]:
        return list(self._functions.keys())

    def functions(self) -> List[CatalogFunction]:
        return list(self._functions.values())

    def __contains__(self, name: str) -> bool:
        return name in self._functions

    def __len__(self) -> int:
        return len(self._functions)
