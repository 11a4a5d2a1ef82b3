# Copyright 2025 Softwell S.r.l. - Genropy Team
# SPDX-License-Identifier: Apache-2.0

"""Loading functions for populating a PathStore from other sources.

Sources are flat: every entry is a full key and the value to store there.
Values are stored as they are, so a dict value is a leaf, not a subtree.
"""

from __future__ import annotations

from collections.abc import Iterable, Mapping
from typing import TYPE_CHECKING, Any

from ..paths import join_path

if TYPE_CHECKING:
    from .core import PathStore


def load_from_mapping(store: PathStore, source: Mapping[Any, Any]) -> None:
    """Set every key of source to its value, in mapping order.

    Example:
        >>> load_from_mapping(store, {'db.host': 'localhost', 'db.port': 5432})
    """
    for key, value in source.items():
        store.set(key, value)


def load_from_pairs(store: PathStore, source: Iterable[Any]) -> None:
    """Set values from an iterable of (key, value) pairs.

    Raises:
        TypeError: If an item is not a (key, value) pair.
    """
    for item in source:
        try:
            key, value = item
        except (TypeError, ValueError):
            raise TypeError(f"expected (key, value) pair, got {item!r}") from None
        store.set(key, value)


def load_from_pathstore(store: PathStore, source: PathStore) -> None:
    """Copy every value of another PathStore.

    Keys are rebuilt with the target's separator, so stores with different
    separators can be merged.

    Raises:
        InvalidPathError: If a source segment contains the target's separator.
    """
    for subkey, value in list(source.enum(None)):
        store.set(join_path(*source._split(subkey), separator=store.separator), value)


def load_source(store: PathStore, source: Any) -> None:
    """Dispatch to the loading function matching the type of source.

    Raises:
        TypeError: If source is a string or not iterable.
    """
    from .core import PathStore

    if isinstance(source, PathStore):
        load_from_pathstore(store, source)
    elif isinstance(source, Mapping):
        load_from_mapping(store, source)
    elif isinstance(source, Iterable) and not isinstance(source, (str, bytes)):
        load_from_pairs(store, source)
    else:
        raise TypeError(
            f"source must be a mapping, an iterable of pairs or a PathStore, "
            f"not {type(source).__name__}"
        )
