"""Tests for trafficlens.subscriptions.SubscriptionRegistry."""

from __future__ import annotations

from unittest.mock import MagicMock

from trafficlens.subscriptions import SubscriptionRegistry


class TestSubscriptionRegistry:
    """Test ordering, identity-based removal and snapshot iteration."""

    def test_subscribe_appends_in_order(self):
        reg = SubscriptionRegistry()
        a, b = MagicMock(), MagicMock()
        reg.subscribe(a)
        reg.subscribe(b)

        assert reg.snapshot() == (a, b)
        assert len(reg) == 2

    def test_dispose_restores_count(self):
        reg = SubscriptionRegistry()
        reg.subscribe(MagicMock())
        before = len(reg)

        dispose = reg.subscribe(MagicMock())
        dispose()

        assert len(reg) == before

    def test_dispose_is_idempotent(self):
        reg = SubscriptionRegistry()
        keep = MagicMock()
        reg.subscribe(keep)
        dispose = reg.subscribe(MagicMock())

        dispose()
        dispose()

        assert reg.snapshot() == (keep,)

    def test_dispose_after_other_mutations(self):
        reg = SubscriptionRegistry()
        a, b, c = MagicMock(), MagicMock(), MagicMock()
        dispose_a = reg.subscribe(a)
        dispose_b = reg.subscribe(b)
        reg.subscribe(c)

        dispose_a()
        dispose_b()

        assert reg.snapshot() == (c,)

    def test_duplicate_callback_not_deduplicated(self):
        """The same callable subscribed twice is called twice; one disposer removes one."""
        reg = SubscriptionRegistry()
        cb = MagicMock()
        dispose_first = reg.subscribe(cb)
        reg.subscribe(cb)

        assert len(reg) == 2
        dispose_first()
        assert reg.snapshot() == (cb,)

    def test_snapshot_is_stable_during_mutation(self):
        reg = SubscriptionRegistry()
        a = MagicMock()
        dispose_a = reg.subscribe(a)
        snap = reg.snapshot()

        dispose_a()
        reg.subscribe(MagicMock())

        assert snap == (a,)

    def test_subscribe_during_fanout_not_called_this_round(self):
        reg = SubscriptionRegistry()
        late = MagicMock()

        def adder(value):
            reg.subscribe(late)

        reg.subscribe(adder)
        for cb in reg.snapshot():
            cb(1)

        late.assert_not_called()
        assert len(reg) == 2
