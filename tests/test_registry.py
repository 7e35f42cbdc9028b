"""
Tests for PatternRegistry — availability gate and flush coordinator

These tests validate:
- Immediate vs deferred application
- Deferral transparency (drain order == call order within a queue)
- Scope isolation between contexts and the shared table
- Flush-once: a second signal never replays drained work
- Context destruction discarding undrained local queues
- Global catalog list applying only newly added names
"""

import pytest

from fillprefix.core.entries import PatternEntry, TableChange
from fillprefix.core.host import DEFAULT_TABLE, HostEngine
from fillprefix.core.registry import PatternRegistry
from fillprefix.core.scope import GLOBAL_FLUSH, TableScope
from tests.factories import RegistryTestFactory, SMALL_TABLE, entry


LI = entry("<li>", "bullet")
PS = entry("%+", "postscript-comment")
ARROW = entry("->", "citation->")


class TestImmediateApplication:
    """Host available: changes land at once."""

    def test_global_add_applies_to_shared(self, registry_factory):
        registry_factory.initialize()
        registry_factory.registry.register_add(LI, global_scope=True)
        assert registry_factory.shared() == DEFAULT_TABLE + (LI,)
        assert len(registry_factory.registry.pending) == 0

    def test_local_add_creates_override_from_shared(self, registry_factory):
        registry_factory.initialize()
        ctx = registry_factory.context("a")
        registry_factory.registry.register_add(PS, context_id=ctx)
        assert registry_factory.host.tables.has_override(ctx)
        assert registry_factory.local(ctx) == DEFAULT_TABLE + (PS,)
        assert registry_factory.shared() == DEFAULT_TABLE

    def test_registry_on_live_host_is_available(self):
        host = HostEngine()
        host.initialize()
        registry = PatternRegistry(host)
        assert registry.is_available
        registry.register_add(LI, global_scope=True)
        assert host.effective_table()[-1] == LI

    def test_dispatch_returns_resolved_scope(self, registry_factory):
        ctx = registry_factory.context()
        registry = registry_factory.registry
        assert registry.dispatch(TableChange.add(LI), context_id=ctx) == TableScope.LOCAL
        assert registry.dispatch(TableChange.add(LI), global_scope=True) == TableScope.GLOBAL
        assert registry.dispatch(TableChange.add(LI), flush=GLOBAL_FLUSH) == TableScope.GLOBAL

    def test_global_call_ignores_context(self, registry_factory):
        registry_factory.initialize()
        ctx = registry_factory.context("a")
        registry_factory.registry.register_add(LI, context_id=ctx, global_scope=True)
        assert LI in registry_factory.shared()
        assert not registry_factory.host.tables.has_override(ctx)

    def test_identical_calls_are_idempotent(self, registry_factory):
        registry_factory.initialize()
        ctx = registry_factory.context()
        for _ in range(2):
            registry_factory.registry.register_add(PS, context_id=ctx)
            registry_factory.registry.register_remove_by_classification("citation->", context_id=ctx)
        table = registry_factory.local(ctx)
        assert table.count(PS) == 1
        assert all(e.classification != "citation->" for e in table)


class TestContractViolations:

    def test_local_without_context(self, registry):
        with pytest.raises(ValueError):
            registry.register_add(LI)

    def test_local_with_unknown_context(self, registry):
        with pytest.raises(ValueError):
            registry.register_add(LI, context_id="ghost")

    def test_wrong_entry_shape(self, registry):
        with pytest.raises(TypeError):
            registry.register_add(("<li>",), global_scope=True)


class TestDeferral:
    """Host not available: changes are queued, never errors."""

    def test_global_is_queued(self, registry_factory):
        registry = registry_factory.registry
        registry.register_add(LI, global_scope=True)
        assert registry.pending.global_count() == 1
        assert registry_factory.shared() == ()

    def test_local_is_queued_with_destroy_hook(self, registry_factory):
        ctx = registry_factory.context("a")
        registry = registry_factory.registry
        registry.register_add(PS, context_id=ctx)
        assert registry.pending.local_count(ctx) == 1
        assert not registry_factory.host.tables.has_override(ctx)
        assert len(registry_factory.host.destroy_hooks(ctx)) == 1

    def test_destroy_hook_added_once_per_context(self, registry_factory):
        ctx = registry_factory.context("a")
        registry_factory.registry.register_add(PS, context_id=ctx)
        registry_factory.registry.register_add(LI, context_id=ctx)
        assert len(registry_factory.host.destroy_hooks(ctx)) == 1

    def test_scenario_global_and_local_before_availability(self, registry_factory):
        """
        Global <li> bullet and local postscript comment for A, then the host
        comes up: shared gets the bullet, A gets shared plus the comment,
        a context created afterwards sees the shared table only.
        """
        registry = registry_factory.registry
        a = registry_factory.context("A")
        registry.register_add(("<li>", "bullet"), global_scope=True)
        registry.register_add(("%+", "postscript-comment"), context_id=a)

        registry_factory.initialize()

        shared = registry_factory.shared()
        assert LI in shared
        assert registry_factory.local(a) == shared + (PS,)

        b = registry_factory.context("B")
        assert registry_factory.local(b) == shared
        assert not registry_factory.host.tables.has_override(b)

    def test_global_applied_before_local(self, registry_factory):
        """Local deltas land on top of the global baseline."""
        registry = registry_factory.registry
        a = registry_factory.context("A")
        registry.register_add(ARROW, context_id=a)
        registry.register_remove_by_classification("citation->", global_scope=True)

        registry_factory.initialize()

        assert all(e.classification != "citation->" for e in registry_factory.shared())
        local_citations = [e for e in registry_factory.local(a) if e.classification == "citation->"]
        assert local_citations == [ARROW]

    def test_deferred_add_then_remove_nets_out(self, small_factory):
        registry = small_factory.registry
        registry.register_add(ARROW, global_scope=True)
        registry.register_remove_by_classification("citation->", global_scope=True)
        small_factory.initialize()
        assert all(e.classification != "citation->" for e in small_factory.shared())


def _global_ops(registry):
    registry.register_add(LI, global_scope=True)
    registry.register_add(ARROW, global_scope=True)
    registry.register_remove_exact(entry(">+", "citation->"), global_scope=True)
    registry.register_add(PS, global_scope=True)
    registry.register_remove_by_classification("space", global_scope=True)
    registry.register_add(LI, global_scope=True)


def _local_ops(registry, ctx):
    registry.register_add(PS, context_id=ctx)
    registry.register_remove_by_classification("citation->", context_id=ctx)
    registry.register_add(ARROW, context_id=ctx)
    registry.register_remove_exact(PS, context_id=ctx)
    registry.register_add(PS, context_id=ctx)


class TestDeferralTransparency:
    """Deferred then flushed == applied directly, in call order."""

    def test_global_sequence(self):
        direct = RegistryTestFactory(builtin_table=SMALL_TABLE)
        direct.initialize()
        _global_ops(direct.registry)

        deferred = RegistryTestFactory(builtin_table=SMALL_TABLE)
        _global_ops(deferred.registry)
        deferred.initialize()

        assert deferred.shared() == direct.shared()

    def test_local_sequence(self):
        direct = RegistryTestFactory(builtin_table=SMALL_TABLE)
        direct.initialize()
        ctx = direct.context("a")
        _local_ops(direct.registry, ctx)

        deferred = RegistryTestFactory(builtin_table=SMALL_TABLE)
        ctx = deferred.context("a")
        _local_ops(deferred.registry, ctx)
        deferred.initialize()

        assert deferred.local(ctx) == direct.local(ctx)
        assert deferred.shared() == direct.shared()

    def test_globals_then_locals(self):
        direct = RegistryTestFactory(builtin_table=SMALL_TABLE)
        direct.initialize()
        ctx = direct.context("a")
        _global_ops(direct.registry)
        _local_ops(direct.registry, ctx)

        deferred = RegistryTestFactory(builtin_table=SMALL_TABLE)
        ctx = deferred.context("a")
        _global_ops(deferred.registry)
        _local_ops(deferred.registry, ctx)
        deferred.initialize()

        assert deferred.shared() == direct.shared()
        assert deferred.local(ctx) == direct.local(ctx)


class TestScopeIsolation:

    def test_local_does_not_leak(self, registry_factory):
        a = registry_factory.context("A")
        b = registry_factory.context("B")
        registry_factory.initialize()
        registry_factory.registry.register_add(PS, context_id=a)
        registry_factory.registry.register_remove_by_classification("bullet", context_id=a)

        assert registry_factory.shared() == DEFAULT_TABLE
        assert registry_factory.local(b) == DEFAULT_TABLE
        assert not registry_factory.host.tables.has_override(b)

    def test_deferred_local_does_not_leak(self, registry_factory):
        a = registry_factory.context("A")
        b = registry_factory.context("B")
        registry_factory.registry.register_add(PS, context_id=a)
        report = registry_factory.initialize()

        assert report.local_applied == {"A": 1}
        assert PS not in registry_factory.shared()
        assert PS not in registry_factory.local(b)

    def test_global_after_override_skips_that_context(self, registry_factory):
        """A context with its own override does not follow later global changes."""
        registry_factory.initialize()
        a = registry_factory.context("A")
        registry_factory.registry.register_add(PS, context_id=a)
        registry_factory.registry.register_add(LI, global_scope=True)
        assert LI not in registry_factory.local(a)
        b = registry_factory.context("B")
        assert LI in registry_factory.local(b)


class TestFlushOnce:

    def test_second_signal_is_noop(self, registry_factory):
        registry = registry_factory.registry
        a = registry_factory.context("A")
        registry.register_add(LI, global_scope=True)
        registry.register_add(PS, context_id=a)

        first = registry_factory.initialize()
        shared, local = registry_factory.shared(), registry_factory.local(a)

        second = registry_factory.initialize()

        assert first.total_applied == 2
        assert second.is_noop
        assert second.flush_number == 2
        assert registry_factory.shared() == shared
        assert registry_factory.local(a) == local
        assert registry.pending.stats.total_drained == 2

    def test_flush_clears_destroy_hooks(self, registry_factory):
        a = registry_factory.context("A")
        registry_factory.registry.register_add(PS, context_id=a)
        registry_factory.initialize()
        assert registry_factory.host.destroy_hooks(a) == []

    def test_reload_drains_only_new_work(self, registry_factory):
        registry = registry_factory.registry
        host = registry_factory.host
        registry.register_add(LI, global_scope=True)
        registry_factory.initialize()

        host.unload()
        assert not registry.is_available
        registry.register_add(PS, global_scope=True)
        assert registry.pending.global_count() == 1

        report = registry_factory.initialize()
        assert report.global_applied == 1
        assert registry_factory.shared().count(LI) == 1
        assert registry_factory.shared()[-1] == PS

    def test_flush_before_host_keeps_queues(self, registry_factory):
        """A direct flush() while the host is down drains nothing."""
        registry = registry_factory.registry
        a = registry_factory.context("A")
        registry.register_add(LI, global_scope=True)
        registry.register_add(PS, context_id=a)

        report = registry.flush()

        assert report.is_noop
        assert not registry.is_available
        assert not registry.has_flushed
        assert registry.pending.global_count() == 1
        assert registry.pending.local_count(a) == 1

        registry_factory.initialize()
        assert LI in registry_factory.shared()
        assert registry_factory.local(a)[-1] == PS

    def test_subscribed_once(self, registry_factory):
        registry_factory.initialize()
        registry_factory.initialize()
        assert registry_factory.registry.flush_count == 2
        assert registry_factory.registry.has_flushed


class TestContextLifecycle:

    def test_destroyed_context_queue_discarded(self, registry_factory):
        registry = registry_factory.registry
        a = registry_factory.context("A")
        registry.register_add(PS, context_id=a)
        registry_factory.host.destroy_context(a)

        assert registry.pending.is_empty()
        report = registry_factory.initialize()
        assert report.local_applied == {}
        assert registry.pending.stats.total_discarded == 1

    def test_context_created_after_flush_sees_shared(self, registry_factory):
        registry_factory.registry.register_add(LI, global_scope=True)
        registry_factory.initialize()
        c = registry_factory.context("C")
        assert registry_factory.local(c)[-1] == LI

    def test_report_counts_per_context(self, registry_factory):
        registry = registry_factory.registry
        a = registry_factory.context("A")
        b = registry_factory.context("B")
        registry.register_add(PS, context_id=a)
        registry.register_add(LI, context_id=b)
        registry.register_add(ARROW, context_id=b)
        report = registry_factory.initialize()
        assert report.local_applied == {"A": 1, "B": 2}
        assert report.to_dict()["global_applied"] == 0


class TestGlobalCatalog:

    def test_applies_names_in_order(self, registry_factory):
        registry_factory.initialize()
        applied = registry_factory.registry.set_global_catalog(["html-bullet", "postscript-comment"])
        assert applied == ["html-bullet", "postscript-comment"]
        assert registry_factory.shared()[-2:] == (LI, PS)

    def test_only_new_names_applied(self, registry_factory):
        registry = registry_factory.registry
        registry_factory.initialize()
        registry.set_global_catalog(["html-bullet"])
        registry.register_remove_exact(LI, global_scope=True)

        applied = registry.set_global_catalog(["html-bullet", "arrow-citation"])

        assert applied == ["arrow-citation"]
        assert LI not in registry_factory.shared()
        assert registry.applied_catalog == ["html-bullet", "arrow-citation"]

    def test_same_list_twice_is_noop(self, registry_factory):
        registry = registry_factory.registry
        registry.set_global_catalog(["html-bullet"])
        assert registry.set_global_catalog(["html-bullet"]) == []
        assert registry.pending.global_count() == 1

    def test_before_availability_is_deferred(self, registry_factory):
        registry_factory.registry.set_global_catalog(["no-citations"])
        assert registry_factory.registry.pending.global_count() == 1
        registry_factory.initialize()
        assert all(e.classification != "citation->" for e in registry_factory.shared())

    def test_unknown_name_applies_nothing(self, registry_factory):
        registry = registry_factory.registry
        registry_factory.initialize()
        with pytest.raises(KeyError):
            registry.set_global_catalog(["html-bullet", "html-bulet"])
        assert LI not in registry_factory.shared()
        assert registry.applied_catalog == []

    def test_apply_catalog_locally(self, registry_factory):
        registry_factory.initialize()
        ctx = registry_factory.context("A")
        registry_factory.registry.apply_catalog("lisp-comment", context_id=ctx)
        assert registry_factory.local(ctx)[-1] == PatternEntry(";+", "lisp-comment")
        assert registry_factory.shared() == DEFAULT_TABLE
