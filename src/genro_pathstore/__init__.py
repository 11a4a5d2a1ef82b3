# Copyright 2025 Softwell S.r.l. - Genropy Team
# SPDX-License-Identifier: Apache-2.0

"""Genro-PathStore - Hierarchical key-value store with prefix subscriptions.

A lightweight, zero-dependency library providing a path-addressed store
for the Genro ecosystem (Genro Kyō).
"""

import logging

__version__ = "0.1.0"

from .exceptions import (
    InvalidPathError,
    PathStoreConfigError,
    PathStoreError,
)
from .node import ABSENT, PathNode
from .paths import ROOT, ParsedPath, join_path, parse_path, split_path
from .store import PathStore, Subscription

logging.getLogger(__name__).addHandler(logging.NullHandler())

__all__ = [
    # Core classes
    "PathStore",
    "PathNode",
    "Subscription",
    # Sentinels
    "ABSENT",
    "ROOT",
    # Paths
    "ParsedPath",
    "parse_path",
    "split_path",
    "join_path",
    # Exceptions
    "PathStoreError",
    "InvalidPathError",
    "PathStoreConfigError",
]
