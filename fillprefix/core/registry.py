"""
PatternRegistry — Deferred registration into the host's pattern tables

Callers add and remove table entries without caring whether the host
engine is up yet:
- Host available: the change is applied now, to the shared table (global)
  or to the calling context's override (local)
- Host not available: the change is queued as a DeferredMutation in the
  global queue or the context's queue

When the host fires its availability signal, flush() replays the global
queue first, then each live context's queue, and clears them. A queue is
never replayed twice; a later signal (engine reload) only sees mutations
queued since.

Usage:
    host = HostEngine()
    registry = PatternRegistry(host)
    ctx = host.create_context("draft.txt")

    registry.register_add(("<li>", "bullet"), global_scope=True)
    registry.register_add(("%+", "postscript-comment"), context_id=ctx)

    host.initialize()    # flush runs here
"""

import logging
from dataclasses import dataclass, field
from typing import Dict, Iterable, List, Optional, TYPE_CHECKING

from .entries import DeferredMutation, TableChange
from .host import HostEngine
from .mutator import apply_change
from .queues import PendingQueues
from .scope import FlushContext, GLOBAL_FLUSH, LOCAL_FLUSH, TableScope, resolve_scope

if TYPE_CHECKING:
    from ..catalog import PatternCatalog


logger = logging.getLogger(__name__)


@dataclass
class FlushReport:
    """What one flush applied and discarded."""
    flush_number: int
    global_applied: int = 0
    local_applied: Dict[str, int] = field(default_factory=dict)
    discarded: int = 0

    @property
    def total_applied(self) -> int:
        return self.global_applied + sum(self.local_applied.values())

    @property
    def is_noop(self) -> bool:
        return self.total_applied == 0 and self.discarded == 0

    def to_dict(self) -> dict:
        return {
            "flush_number": self.flush_number,
            "global_applied": self.global_applied,
            "local_applied": dict(self.local_applied),
            "discarded": self.discarded,
        }


class PatternRegistry:
    """
    Availability gate and flush coordinator over a HostEngine.

    Subscribes flush() to the host's availability signal exactly once,
    at construction.
    """

    def __init__(
        self,
        host: HostEngine,
        queues: Optional[PendingQueues] = None,
        catalog: Optional['PatternCatalog'] = None
    ):
        self.host = host
        self.pending = queues if queues is not None else PendingQueues()
        self._catalog = catalog
        self._available = host.is_initialized
        self._flush_count = 0
        self._applied_catalog: List[str] = []
        self.last_report: Optional[FlushReport] = None

        host.on_initialized(self.flush)

    # -------------------------------------------------------------------------
    # State
    # -------------------------------------------------------------------------

    @property
    def is_available(self) -> bool:
        """True once flushed (or built on a live host) while the host is up."""
        return self._available and self.host.is_initialized

    @property
    def has_flushed(self) -> bool:
        return self._flush_count > 0

    @property
    def flush_count(self) -> int:
        return self._flush_count

    @property
    def catalog(self) -> 'PatternCatalog':
        if self._catalog is None:
            from ..catalog import DEFAULT_CATALOG
            self._catalog = DEFAULT_CATALOG
        return self._catalog

    @property
    def applied_catalog(self) -> List[str]:
        """Catalog names applied globally through set_global_catalog()."""
        return list(self._applied_catalog)

    # -------------------------------------------------------------------------
    # Registration API
    # -------------------------------------------------------------------------

    def register_add(self, entry, context_id: Optional[str] = None, global_scope: bool = False) -> None:
        """Add an entry (appended; no-op if already present)."""
        self.dispatch(TableChange.add(entry), context_id=context_id, global_scope=global_scope)

    def register_remove_exact(self, entry, context_id: Optional[str] = None, global_scope: bool = False) -> None:
        """Remove one exact (matcher, classification) entry."""
        self.dispatch(TableChange.remove_exact(entry), context_id=context_id, global_scope=global_scope)

    def register_remove_by_classification(
        self,
        classification: str,
        context_id: Optional[str] = None,
        global_scope: bool = False
    ) -> None:
        """Remove every entry tagged `classification`."""
        self.dispatch(
            TableChange.remove_by_classification(classification),
            context_id=context_id,
            global_scope=global_scope,
        )

    def dispatch(
        self,
        change: TableChange,
        context_id: Optional[str] = None,
        global_scope: bool = False,
        flush: Optional[FlushContext] = None
    ) -> TableScope:
        """
        Apply a change now or queue it, depending on host availability.

        Args:
            change: The table change
            context_id: Calling context (required for local scope)
            global_scope: Explicitly target the shared table
            flush: Flush state when called during a replay

        Returns:
            The scope the change was resolved to

        Raises:
            ValueError: Local scope without a known context
        """
        scope = resolve_scope(global_scope, flush)
        if scope == TableScope.LOCAL:
            self._check_context(context_id)
        else:
            context_id = None

        if self.is_available:
            self._apply(change, scope, context_id)
        else:
            self._defer(DeferredMutation(change=change, scope=scope, context_id=context_id))
        return scope

    # -------------------------------------------------------------------------
    # Flush
    # -------------------------------------------------------------------------

    def flush(self) -> FlushReport:
        """
        Drain pending queues. Runs on every host availability signal.

        Global queue first, so local changes land on top of the global
        baseline. Contexts are drained in creation order.

        Called while the host is down, nothing is drained: the host would
        reseed the shared table over anything written now.
        """
        if not self.host.is_initialized:
            logger.debug("Flush skipped: host not initialized")
            return FlushReport(flush_number=self._flush_count)

        self._available = True
        self._flush_count += 1
        report = FlushReport(flush_number=self._flush_count)

        for mutation in self.pending.take_global():
            self._replay(mutation, GLOBAL_FLUSH)
            report.global_applied += 1

        live = set(self.host.contexts())
        for context_id in self.pending.pending_contexts():
            if context_id not in live:
                report.discarded += self.pending.discard(context_id)

        for context_id in self.host.contexts():
            mutations = self.pending.take_local(context_id)
            self.host.remove_destroy_hook(context_id, self._discard_on_destroy)
            if not mutations:
                continue
            for mutation in mutations:
                self._replay(mutation, LOCAL_FLUSH)
            report.local_applied[context_id] = len(mutations)

        if report.is_noop:
            logger.debug("Flush #%d: nothing pending", report.flush_number)
        else:
            logger.info(
                "Flush #%d: %d global, %d local in %d context(s), %d discarded",
                report.flush_number, report.global_applied,
                sum(report.local_applied.values()), len(report.local_applied),
                report.discarded,
            )
        self.last_report = report
        return report

    # -------------------------------------------------------------------------
    # Catalog
    # -------------------------------------------------------------------------

    def apply_catalog(
        self,
        name: str,
        context_id: Optional[str] = None,
        global_scope: bool = False,
        catalog: Optional['PatternCatalog'] = None
    ) -> None:
        """
        Run one catalog function through the registration API.

        Raises:
            KeyError: Unknown catalog function
        """
        function = (catalog or self.catalog).get(name)
        function.apply(self, context_id=context_id, global_scope=global_scope)

    def set_global_catalog(
        self,
        names: Iterable[str],
        catalog: Optional['PatternCatalog'] = None
    ) -> List[str]:
        """
        Apply the configured global catalog list.

        Only names not applied before are run, in list order. Names dropped
        from the list keep their entries.

        Returns:
            Names applied by this call

        Raises:
            KeyError: Unknown catalog function (nothing is applied)
        """
        catalog = catalog or self.catalog
        new_names: List[str] = []
        for name in names:
            catalog.get(name)
            if name not in self._applied_catalog and name not in new_names:
                new_names.append(name)

        for name in new_names:
            self.apply_catalog(name, global_scope=True, catalog=catalog)
            self._applied_catalog.append(name)

        if new_names:
            logger.debug("Global catalog applied: %s", ", ".join(new_names))
        return new_names

    # -------------------------------------------------------------------------
    # Internals
    # -------------------------------------------------------------------------

    def _check_context(self, context_id: Optional[str]) -> None:
        if context_id is None:
            raise ValueError("Local registration requires a context id")
        if not self.host.has_context(context_id):
            raise ValueError(f"Unknown context: {context_id}")

    def _apply(self, change: TableChange, scope: TableScope, context_id: Optional[str]) -> None:
        tables = self.host.tables
        if scope == TableScope.GLOBAL:
            tables.set_shared(apply_change(tables.get_shared(), change))
        else:
            current = tables.ensure_override(context_id)
            tables.set_local(context_id, apply_change(current, change))
        logger.debug("Applied %s [%s%s]", change.describe(), scope.value,
                     f" {context_id}" if context_id else "")

    def _defer(self, mutation: DeferredMutation) -> None:
        self.pending.enqueue(mutation)
        if not mutation.is_global:
            self.host.add_destroy_hook(mutation.context_id, self._discard_on_destroy)
        logger.debug("Deferred %s [%s%s]", mutation.change.describe(), mutation.scope.value,
                     f" {mutation.context_id}" if mutation.context_id else "")

    def _replay(self, mutation: DeferredMutation, flush: FlushContext) -> None:
        scope = resolve_scope(mutation.is_global, flush)
        context_id = None if scope == TableScope.GLOBAL else mutation.context_id
        self._apply(mutation.change, scope, context_id)

    def _discard_on_destroy(self, context_id: str) -> None:
        dropped = self.pending.discard(context_id)
        if dropped:
            logger.debug("Context %s destroyed; discarded %d pending mutation(s)", context_id, dropped)
