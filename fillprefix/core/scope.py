"""
Scope — Where a table mutation lands

Two targets:
- Global: the shared default table, seen by every context without an
  override (including contexts created later)
- Local: one context's own table override

Resolution order is explicit > flush > default:
a call that asks for global scope is global; otherwise a replay happening
inside the global part of a flush is global; otherwise it is local.
The flush state is passed in as a FlushContext value, never read from
module state, so resolve_scope() stays pure.
"""

from dataclasses import dataclass
from enum import Enum
from typing import Optional


class TableScope(Enum):
    """Which table a mutation targets."""
    GLOBAL = "global"  # Shared default table
    LOCAL = "local"    # Per-context override


@dataclass(frozen=True)
class FlushContext:
    """State of an in-progress flush, threaded through replayed dispatches."""
    global_flush: bool = False


GLOBAL_FLUSH = FlushContext(global_flush=True)
LOCAL_FLUSH = FlushContext(global_flush=False)


def resolve_scope(explicit_global: bool = False, flush: Optional[FlushContext] = None) -> TableScope:
    """Resolve the target scope for a registration call."""
    if explicit_global:
        return TableScope.GLOBAL
    if flush is not None and flush.global_flush:
        return TableScope.GLOBAL
    return TableScope.LOCAL


def scope_from_string(s: Optional[str]) -> TableScope:
    """Parse scope from string, defaulting to LOCAL."""
    if s is None:
        return TableScope.LOCAL
    try:
        return TableScope(s.lower())
    except ValueError:
        return TableScope.LOCAL
