"""
fillprefix — Deferred registration for line-prefix pattern tables

Adds and removes (matcher, classification) entries in a paragraph-fill
engine's pattern table, for one context or globally, whether or not the
engine is initialized yet. Changes made early are queued and replayed
once the engine signals it is available.

Usage:
    from fillprefix import HostEngine, PatternRegistry

    host = HostEngine()
    registry = PatternRegistry(host)
    registry.register_add(("<li>", "bullet"), global_scope=True)
    host.initialize()
"""

__version__ = "0.1.0"

# Core layer
from .core.entries import PatternEntry, PatternTable, TableChange, DeferredMutation, ChangeOp
from .core.scope import TableScope, FlushContext, resolve_scope
from .core.mutator import add_entry, remove_entry, remove_classification, apply_change, apply_changes
from .core.host import HostEngine, PatternTableStore, DEFAULT_TABLE
from .core.queues import PendingQueues
from .core.registry import PatternRegistry, FlushReport

# Catalog
from .catalog import PatternCatalog, CatalogFunction, DEFAULT_CATALOG

# Config (stays at root)
from .config import Config, ConfigManager, get_config

__all__ = [
    # Core
    'PatternEntry', 'PatternTable', 'TableChange', 'DeferredMutation', 'ChangeOp',
    'TableScope', 'FlushContext', 'resolve_scope',
    'add_entry', 'remove_entry', 'remove_classification', 'apply_change', 'apply_changes',
    'HostEngine', 'PatternTableStore', 'DEFAULT_TABLE',
    'PendingQueues',
    'PatternRegistry', 'FlushReport',
    # Catalog
    'PatternCatalog', 'CatalogFunction', 'DEFAULT_CATALOG',
    # Config
    'Config', 'ConfigManager', 'get_config',
]
