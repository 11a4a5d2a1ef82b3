# Copyright 2025 Softwell S.r.l. - Genropy Team
# SPDX-License-Identifier: Apache-2.0

"""Subscription and notification support for PathStore.

Subscribers are registered on an exact key. Every mutation of a key K is
emitted on each key of K's ancestor chain, ROOT first, so a subscriber on a
prefix observes every change beneath it. The callback receives the changed
key relative to the key it watches, the new value and the previous value::

    store.watch('config', on_config)
    store.set('config.db.host', 'localhost')
    # on_config('db.host', 'localhost', ABSENT)

Dispatch is synchronous: all callbacks have run when set()/delete() returns.
"""

from __future__ import annotations

import logging
from typing import Any, Callable, NamedTuple

from ..node import ABSENT
from ..paths import ParsedPath, normalize_key

logger = logging.getLogger(__name__)

SubscriberCallback = Callable[[Any, Any, Any], Any]
"""Signature: callback(subkey, value, old_value)."""


class Subscription(NamedTuple):
    """A registered callback with its optional binding context."""

    callback: SubscriberCallback
    context: Any = None

    def matches(self, callback: SubscriberCallback | None, context: Any) -> bool:
        """True if this subscription matches a callback/context filter.

        None in either position matches anything. Callbacks compare by
        equality so that two bound methods of the same object match.
        """
        if callback is not None and self.callback != callback:
            return False
        if context is not None and self.context is not context:
            return False
        return True


class SubscriptionMixin:
    """Mixin adding watch/unwatch and ancestor-chain notification.

    The host class must set self._subscribers to an empty dict and provide
    enum(key, visitor) for watch_and_enum().
    """

    __slots__ = ()

    _subscribers: dict[str | None, list[Subscription]]

    def watch(
        self,
        key: Any,
        callback: SubscriberCallback,
        context: Any = None,
    ) -> None:
        """Subscribe callback to changes at key or beneath it.

        Args:
            key: Exact key to watch. ROOT (None) watches the whole store.
            callback: Called as callback(subkey, value, old_value), where
                subkey is the changed key relative to key (ROOT when key
                itself changed), value is the new value (ABSENT on delete)
                and old_value the previous one (ABSENT if there was none).
            context: Optional owner token, used by unwatch() to select
                subscriptions.

        Raises:
            TypeError: If callback is not callable.
        """
        if not callable(callback):
            raise TypeError(f"callback must be callable, not {type(callback).__name__}")
        key = normalize_key(key)
        self._subscribers.setdefault(key, []).append(Subscription(callback, context))
        logger.debug(f"watch: key={key!r} callback={callback!r}")

    def unwatch(
        self,
        key: Any,
        callback: SubscriberCallback | None = None,
        context: Any = None,
    ) -> int:
        """Remove subscriptions on key matching callback and context.

        A None callback or context matches any, so unwatch(key) removes every
        subscriber of key and unwatch(key, context=owner) removes all of
        owner's subscriptions on key.

        Returns:
            Number of removed subscriptions.
        """
        key = normalize_key(key)
        subscriptions = self._subscribers.get(key)
        if not subscriptions:
            return 0
        kept = [s for s in subscriptions if not s.matches(callback, context)]
        removed = len(subscriptions) - len(kept)
        if kept:
            self._subscribers[key] = kept
        else:
            del self._subscribers[key]
        if removed:
            logger.debug(f"unwatch: key={key!r} removed={removed}")
        return removed

    def watch_and_enum(
        self,
        key: Any,
        callback: SubscriberCallback,
        context: Any = None,
    ) -> None:
        """Subscribe callback to key, then replay the current values under key.

        After subscribing, callback is called once per value currently stored
        at or beneath key, as callback(subkey, value, ABSENT). Both steps run
        before this method returns, so no change can slip in between them.
        """
        self.watch(key, callback, context)
        self.enum(key, lambda subkey, value: callback(subkey, value, ABSENT), context)

    def watchers(self, key: Any) -> int:
        """Return the number of subscriptions registered on key."""
        return len(self._subscribers.get(normalize_key(key), ()))

    def watched_keys(self) -> list[str | None]:
        """Return the keys that have at least one subscription."""
        return list(self._subscribers)

    def _notify(self, parsed: ParsedPath, value: Any, old_value: Any) -> None:
        """Emit a change on every key of the ancestor chain, ROOT first.

        Subscribers of each key are called in subscription order over a
        snapshot of the list, so callbacks may watch/unwatch freely.
        """
        if not self._subscribers:
            return
        for key, subkey in zip(parsed.keys, parsed.subkeys):
            subscriptions = self._subscribers.get(key)
            if not subscriptions:
                continue
            for subscription in tuple(subscriptions):
                subscription.callback(subkey, value, old_value)
