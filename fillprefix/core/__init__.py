"""
Core — Pattern table registration layer

Contains:
- Entries: PatternEntry, TableChange, DeferredMutation
- Mutator: pure add/remove transforms over a table
- Scope: global vs local resolution
- Host: in-process model of the reflow engine (storage, signal, contexts)
- Queues: pending global and per-context mutations
- Registry: availability gate, flush coordinator, registration API
"""

from .scope import (
    TableScope, FlushContext, GLOBAL_FLUSH, LOCAL_FLUSH,
    resolve_scope, scope_from_string,
)
from .entries import PatternEntry, PatternTable, ChangeOp, TableChange, DeferredMutation, make_table
from .mutator import add_entry, remove_entry, remove_classification, apply_change, apply_changes
from .host import HostEngine, PatternTableStore, EditingContext, DEFAULT_TABLE, BOL_SENTINEL
from .queues import PendingQueues, QueueStats
from .registry import PatternRegistry, FlushReport

__all__ = [
    # Scope
    "TableScope", "FlushContext", "GLOBAL_FLUSH", "LOCAL_FLUSH",
    "resolve_scope", "scope_from_string",
    # Entries
    "PatternEntry", "PatternTable", "ChangeOp", "TableChange", "DeferredMutation", "make_table",
    # Mutator
    "add_entry", "remove_entry", "remove_classification", "apply_change", "apply_changes",
    # Host
    "HostEngine", "PatternTableStore", "EditingContext", "DEFAULT_TABLE", "BOL_SENTINEL",
    # Queues
    "PendingQueues", "QueueStats",
    # Registry
    "PatternRegistry", "FlushReport",
]
