"""
Host — In-process model of the reflow engine the tables belong to

The real engine is an external collaborator. This module models only the
parts the registry talks to:
- Table storage: one shared default table plus per-context overrides
- Availability: a signal fired when the engine finishes initializing
- Context lifecycle: contexts are created and destroyed, each with its
  own destroy hooks

Usage:
    host = HostEngine()
    ctx = host.create_context("notes.txt")
    host.on_initialized(callback)
    host.initialize()            # seeds DEFAULT_TABLE, fires callback
    host.effective_table(ctx)    # override if present, else shared table
"""

import itertools
import logging
from dataclasses import dataclass, field
from typing import Callable, Dict, List, Optional, Iterable

from .entries import PatternTable, make_table


logger = logging.getLogger(__name__)


# Built-in table the engine ships with. The first entry is the
# beginning-of-line sentinel and must stay first.
DEFAULT_TABLE: PatternTable = make_table(
    ("^", "beginning-of-line"),
    ("[ \t]+", "space"),
    ("#+", "sh-comment"),
    ("//+", "c++-comment"),
    (">+", "citation->"),
    ("\\w*>", "citation->"),
    ("[-*o]", "bullet"),
    ("[0-9]+\\.", "bullet"),
)

BOL_SENTINEL = DEFAULT_TABLE[0]


class PatternTableStore:
    """
    Storage for the shared default table and per-context overrides.

    A context with no override sees the shared table. An override is
    created from the shared table the first time it is needed and lives
    until the context is destroyed.
    """

    def __init__(self, shared: Iterable = ()):
        self._shared: PatternTable = tuple(shared)
        self._overrides: Dict[str, PatternTable] = {}

    def get_shared(self) -> PatternTable:
        return self._shared

    def set_shared(self, table: PatternTable) -> None:
        self._shared = tuple(table)

    def has_override(self, context_id: str) -> bool:
        return context_id in self._overrides

    def get_local(self, context_id: str) -> PatternTable:
        """Table a context sees: its override, or the shared table."""
        return self._overrides.get(context_id, self._shared)

    def ensure_override(self, context_id: str) -> PatternTable:
        """Create the context's override from the shared table if absent."""
        if context_id not in self._overrides:
            self._overrides[context_id] = self._shared
        return self._overrides[context_id]

    def set_local(self, context_id: str, table: PatternTable) -> None:
        self._overrides[context_id] = tuple(table)

    def drop_override(self, context_id: str) -> bool:
        """Discard a context's override. Returns True if one existed."""
        return self._overrides.pop(context_id, None) is not None

    def overrides(self) -> List[str]:
        """Context ids that currently have an override."""
        return list(self._overrides.keys())


@dataclass
class EditingContext:
    """One open document/session as the host sees it."""
    id: str
    name: str
    destroy_hooks: List[Callable[[str], None]] = field(default_factory=list)


class HostEngine:
    """
    Minimal reflow host: table storage, availability signal, contexts.

    initialize() may be called more than once (an engine reload). The
    built-in table is seeded only the first time; every call fires the
    availability signal again.
    """

    def __init__(self, builtin_table: Optional[PatternTable] = None):
        self.builtin_table: PatternTable = tuple(builtin_table) if builtin_table is not None else DEFAULT_TABLE
        self.tables = PatternTableStore()
        self._initialized = False
        self._seeded = False
        self._init_subscribers: List[Callable[[], None]] = []
        self._created_subscribers: List[Callable[[str], None]] = []
        self._contexts: Dict[str, EditingContext] = {}
        self._ids = itertools.count(1)

    # -------------------------------------------------------------------------
    # Availability
    # -------------------------------------------------------------------------

    @property
    def is_initialized(self) -> bool:
        return self._initialized

    def on_initialized(self, callback: Callable[[], None]) -> bool:
        """
        Subscribe to the availability signal.

        Returns:
            True if subscribed, False if callback was already subscribed
        """
        if callback in self._init_subscribers:
            return False
        self._init_subscribers.append(callback)
        return True

    def unsubscribe_initialized(self, callback: Callable[[], None]) -> bool:
        if callback not in self._init_subscribers:
            return False
        self._init_subscribers.remove(callback)
        return True

    def initialize(self) -> None:
        """Finish engine initialization and fire the availability signal."""
        if not self._seeded:
            self.tables.set_shared(self.builtin_table)
            self._seeded = True
        self._initialized = True
        logger.debug("Host initialized; notifying %d subscriber(s)", len(self._init_subscribers))
        for callback in list(self._init_subscribers):
            callback()

    def unload(self) -> None:
        """Mark the engine unavailable. Tables are kept."""
        self._initialized = False

    # -------------------------------------------------------------------------
    # Contexts
    # -------------------------------------------------------------------------

    def create_context(self, name: Optional[str] = None) -> str:
        """
        Create a context and return its id.

        Raises:
            ValueError: If a context with that name is already live
        """
        if name is not None and name in self._contexts:
            raise ValueError(f"Context '{name}' already exists")
        context_id = name if name is not None else f"ctx-{next(self._ids)}"
        while context_id in self._contexts:
            context_id = f"ctx-{next(self._ids)}"
        self._contexts[context_id] = EditingContext(id=context_id, name=name or context_id)
        for callback in list(self._created_subscribers):
            callback(context_id)
        return context_id

    def destroy_context(self, context_id: str) -> bool:
        """
        Destroy a context: run its destroy hooks, then drop its override.

        Returns:
            True if destroyed, False if no such context
        """
        context = self._contexts.get(context_id)
        if context is None:
            return False
        for hook in list(context.destroy_hooks):
            hook(context_id)
        self.tables.drop_override(context_id)
        del self._contexts[context_id]
        return True

    def has_context(self, context_id: str) -> bool:
        return context_id in self._contexts

    def contexts(self) -> List[str]:
        """Live context ids in creation order."""
        return list(self._contexts.keys())

    def on_context_created(self, callback: Callable[[str], None]) -> None:
        self._created_subscribers.append(callback)

    def add_destroy_hook(self, context_id: str, hook: Callable[[str], None]) -> bool:
        context = self._contexts.get(context_id)
        if context is None or hook in context.destroy_hooks:
            return False
        context.destroy_hooks.append(hook)
        return True

    def remove_destroy_hook(self, context_id: str, hook: Callable[[str], None]) -> bool:
        context = self._contexts.get(context_id)
        if context is None or hook not in context.destroy_hooks:
            return False
        context.destroy_hooks.remove(hook)
        return True

    def destroy_hooks(self, context_id: str) -> List[Callable[[str], None]]:
        context = self._contexts.get(context_id)
        return list(context.destroy_hooks) if context else []

    # -------------------------------------------------------------------------
    # Table view
    # -------------------------------------------------------------------------

    def effective_table(self, context_id: Optional[str] = None) -> PatternTable:
        """The table the engine would consult for a context (or globally)."""
        if context_id is None:
            return self.tables.get_shared()
        return self.tables.get_local(context_id)
