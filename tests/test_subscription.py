# Copyright 2025 Softwell S.r.l. - Genropy Team
# SPDX-License-Identifier: Apache-2.0

"""Tests for PathStore subscriptions and notification fan-out."""

import pytest

from genro_pathstore import ABSENT, ROOT, PathStore


class Recorder:
    """Callable collecting (subkey, value, old_value) notifications."""

    def __init__(self):
        self.events = []

    def __call__(self, subkey, value, old_value):
        self.events.append((subkey, value, old_value))

    def on_change(self, subkey, value, old_value):
        self.events.append((subkey, value, old_value))


class TestWatch:
    """Tests for watch and ancestor-chain notification."""

    def test_watch_exact_key(self):
        """Test a watcher on the changed key gets ROOT as subkey."""
        store = PathStore()
        rec = Recorder()
        store.watch('a.b', rec)
        store.set('a.b', 1)
        assert rec.events == [(ROOT, 1, ABSENT)]

    def test_ancestor_fan_out(self):
        """Test watchers on ancestors get the key relative to themselves."""
        store = PathStore()
        on_a = Recorder()
        on_ab = Recorder()
        store.watch('a', on_a)
        store.watch('a.b', on_ab)
        store.set('a.b.c', 5)
        assert on_a.events == [('b.c', 5, ABSENT)]
        assert on_ab.events == [('c', 5, ABSENT)]

    def test_root_watcher_sees_everything(self):
        """Test a ROOT watcher receives full keys."""
        store = PathStore()
        rec = Recorder()
        store.watch(ROOT, rec)
        store.set('x', 1)
        store.set('y.z', 2)
        store.set(ROOT, 0)
        assert rec.events == [('x', 1, ABSENT), ('y.z', 2, ABSENT), (ROOT, 0, ABSENT)]

    def test_empty_string_watches_root(self):
        """Test '' and ROOT are the same channel."""
        store = PathStore()
        rec = Recorder()
        store.watch('', rec)
        store.set('x', 1)
        assert rec.events == [('x', 1, ABSENT)]

    def test_sibling_not_notified(self):
        """Test watchers on unrelated keys stay silent."""
        store = PathStore()
        rec = Recorder()
        store.watch('a.c', rec)
        store.watch('a.b.c.d', rec)
        store.set('a.b.c', 1)
        assert rec.events == []

    def test_fan_out_order_root_first(self):
        """Test ancestors are notified from ROOT down to the key."""
        store = PathStore()
        order = []
        for key in ('a.b', ROOT, 'a'):
            store.watch(key, lambda subkey, value, old, key=key: order.append(key))
        store.set('a.b', 1)
        assert order == [ROOT, 'a', 'a.b']

    def test_overwrite_reports_old_value(self):
        """Test the previous value is passed on overwrite."""
        store = PathStore({'k': 1})
        rec = Recorder()
        store.watch('k', rec)
        store.set('k', 2)
        assert rec.events == [(ROOT, 2, 1)]

    def test_set_on_promoted_node(self):
        """Test writing a node's own value reports its old own value."""
        store = PathStore({'a': 1, 'a.b': 2})
        rec = Recorder()
        store.watch('a', rec)
        store.set('a', 3)
        assert rec.events == [(ROOT, 3, 1)]

    def test_delete_notifies(self):
        """Test deletion sends ABSENT as new value."""
        store = PathStore({'a.b': 1})
        rec = Recorder()
        store.watch('a', rec)
        assert store.delete('a.b') is True
        assert rec.events == [('b', ABSENT, 1)]

    def test_noop_delete_silent(self):
        """Test deleting a missing key notifies nobody."""
        store = PathStore()
        rec = Recorder()
        store.watch(ROOT, rec)
        store.delete('missing')
        assert rec.events == []

    def test_numeric_watch_key(self):
        """Test non-string watch keys are normalized like store keys."""
        store = PathStore()
        rec = Recorder()
        store.watch(7, rec)
        store.set('7.x', 1)
        assert rec.events == [('x', 1, ABSENT)]

    def test_multiple_callbacks_in_order(self):
        """Test subscribers of one key run in subscription order."""
        store = PathStore()
        calls = []
        store.watch('k', lambda *args: calls.append('first'))
        store.watch('k', lambda *args: calls.append('second'))
        store.set('k', 1)
        assert calls == ['first', 'second']

    def test_notification_is_synchronous(self):
        """Test callbacks have run when set() returns."""
        store = PathStore()
        seen = []
        store.watch('k', lambda subkey, value, old: seen.append(store.get('k')))
        store.set('k', 'v')
        assert seen == ['v']

    def test_non_callable_rejected(self):
        """Test watch requires a callable."""
        store = PathStore()
        with pytest.raises(TypeError):
            store.watch('k', 'not callable')

    def test_callback_error_propagates(self):
        """Test exceptions from callbacks reach the caller after the write."""
        store = PathStore()

        def boom(subkey, value, old):
            raise RuntimeError('boom')

        store.watch('k', boom)
        with pytest.raises(RuntimeError, match='boom'):
            store.set('k', 1)
        assert store.get('k') == 1

    def test_delete_tree_notifies_each_value(self):
        """Test delete_tree sends one notification per removed value."""
        store = PathStore({'a': 1, 'a.b': 2, 'a.c': 3})
        rec = Recorder()
        store.watch('a', rec)
        store.delete_tree('a')
        assert rec.events == [
            ('b', ABSENT, 2),
            ('c', ABSENT, 3),
            (ROOT, ABSENT, 1),
        ]


class TestUnwatch:
    """Tests for unwatch and subscription bookkeeping."""

    def test_unwatch_callback(self):
        """Test an unwatched callback is no longer called."""
        store = PathStore()
        rec = Recorder()
        store.watch('k', rec)
        assert store.unwatch('k', rec) == 1
        store.set('k', 1)
        assert rec.events == []
        assert store.watchers('k') == 0
        assert store.watched_keys() == []

    def test_unwatch_bound_method(self):
        """Test a bound method can be removed with a fresh bound method."""
        store = PathStore()
        rec = Recorder()
        store.watch('k', rec.on_change)
        assert store.unwatch('k', rec.on_change) == 1

    def test_unwatch_by_context(self):
        """Test context selects which subscriptions are removed."""
        store = PathStore()
        rec = Recorder()
        owner_a, owner_b = object(), object()
        store.watch('k', rec, owner_a)
        store.watch('k', rec, owner_b)
        assert store.unwatch('k', rec, owner_a) == 1
        store.set('k', 1)
        assert rec.events == [(ROOT, 1, ABSENT)]

    def test_unwatch_context_only(self):
        """Test unwatch with only a context removes all its callbacks."""
        store = PathStore()
        owner = object()
        store.watch('k', Recorder(), owner)
        store.watch('k', Recorder(), owner)
        store.watch('k', Recorder())
        assert store.unwatch('k', context=owner) == 2
        assert store.watchers('k') == 1

    def test_unwatch_all(self):
        """Test unwatch without callback removes every subscriber."""
        store = PathStore()
        store.watch('k', Recorder())
        store.watch('k', Recorder())
        assert store.unwatch('k') == 2
        assert store.watchers('k') == 0

    def test_unwatch_unknown(self):
        """Test unwatching something never watched removes nothing."""
        store = PathStore()
        store.watch('k', Recorder())
        assert store.unwatch('other', Recorder()) == 0
        assert store.unwatch('k', Recorder()) == 0
        assert store.watchers('k') == 1

    def test_unwatch_during_dispatch(self):
        """Test a callback removing itself does not skip the others."""
        store = PathStore()
        rec = Recorder()

        def once(subkey, value, old):
            store.unwatch('k', once)

        store.watch('k', once)
        store.watch('k', rec)
        store.set('k', 1)
        store.set('k', 2)
        assert rec.events == [(ROOT, 1, ABSENT), (ROOT, 2, 1)]
        assert store.watchers('k') == 1


class TestWatchAndEnum:
    """Tests for watch_and_enum."""

    def test_replays_current_values(self):
        """Test the callback runs once per existing value before returning."""
        store = PathStore({'x': 1, 'y': 2})
        rec = Recorder()
        store.watch_and_enum(ROOT, rec)
        assert rec.events == [('x', 1, ABSENT), ('y', 2, ABSENT)]

    def test_then_receives_updates(self):
        """Test live updates follow the replay."""
        store = PathStore({'a.x': 1})
        rec = Recorder()
        store.watch_and_enum('a', rec)
        store.set('a.y', 2)
        assert rec.events == [('x', 1, ABSENT), ('y', 2, ABSENT)]

    def test_replays_own_value_once(self):
        """Test a promoted node's own value is replayed once."""
        store = PathStore({'a': 1, 'a.b': 2})
        rec = Recorder()
        store.watch_and_enum('a', rec)
        assert rec.events == [('b', 2, ABSENT), (ROOT, 1, ABSENT)]

    def test_empty_prefix(self):
        """Test nothing is replayed for an empty prefix."""
        store = PathStore({'other': 1})
        rec = Recorder()
        store.watch_and_enum('a', rec)
        assert rec.events == []
        assert store.watchers('a') == 1


class TestIgnoreSameValueNotification:
    """Tests for notifications with ignore_same_value."""

    def test_only_first_write_notifies(self):
        """Test a skipped write notifies nobody."""
        store = PathStore(ignore_same_value=True)
        rec = Recorder()
        store.watch('k', rec)
        assert store.set('k', 7) is True
        assert store.set('k', 7) is False
        assert rec.events == [(ROOT, 7, ABSENT)]
