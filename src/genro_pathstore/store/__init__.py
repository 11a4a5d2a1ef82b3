# Copyright 2025 Softwell S.r.l. - Genropy Team
# SPDX-License-Identifier: Apache-2.0

"""PathStore package - Hierarchical key-value container.

This package provides the PathStore class, a key-value store addressed by
dotted paths where any path can hold a value and children at once, with
prefix-scoped change subscriptions.

The package is organized into:
- core: Main PathStore class with lookup, mutation, compaction and enumeration
- loading: Functions for loading data from mappings, pairs or another PathStore
- subscription: Watch/unwatch and ancestor-chain notification

Example:
    >>> from genro_pathstore import PathStore
    >>> store = PathStore()
    >>> store.set('config.name', 'MyApp')
    True
    >>> store['config.name']
    'MyApp'
"""

from .core import PathStore
from .subscription import Subscription, SubscriberCallback

__all__ = ["PathStore", "Subscription", "SubscriberCallback"]
