# Copyright 2025 Softwell S.r.l. - Genropy Team
# SPDX-License-Identifier: Apache-2.0

"""PathStore - A hierarchical key-value store addressed by paths.

This module provides the PathStore class, the core container of the
genro-pathstore library. Values are stored at separator-delimited paths
('a.b.c') and any path may hold a value, children, or both at the same
time, like a filesystem where a directory can also carry content.

Key Features:
    - **Values at any depth**: 'a' and 'a.b' can both hold a value
    - **Transparent compaction**: a value gets wrapped into a PathNode only
      when something is stored beneath it, and is unwrapped again when its
      children go away; empty nodes are pruned immediately
    - **Subtree enumeration**: depth-first walk of every value under a prefix
    - **Prefix subscriptions**: a watcher on 'a' is notified of changes to
      'a', 'a.b', 'a.b.c', ... with the changed key relative to 'a'

Tree Layout:
    The root is always a PathNode. A child is either a PathNode or the stored
    value itself (a leaf). A PathNode keeps its own value in a separate slot,
    so promoting a leaf never loses it::

        store.set('a', 1)         # root.children = {'a': 1}
        store.set('a.b', 2)       # root.children = {'a': PathNode({'b': 2}, value=1)}
        store.delete('a.b')       # root.children = {'a': 1}

Example:
    Basic usage::

        store = PathStore()
        store.set('config.database.host', 'localhost')
        store.set('config.database.port', 5432)

        store.get('config.database.host')  # 'localhost'
        store.items('config')
        # [('config.database.host', 'localhost'), ('config.database.port', 5432)]

    With subscriptions::

        store.watch('config', lambda subkey, value, old: print(subkey, value, old))
        store.set('config.database.port', 5433)  # database.port 5433 5432
"""

from __future__ import annotations

import logging
from typing import Any, Callable, Iterator

from ..exceptions import InvalidPathError, PathStoreConfigError
from ..node import ABSENT, PathNode, is_node
from ..paths import DEFAULT_SEPARATOR, ROOT, ParsedPath, concat_keys, normalize_key, parse_path
from .loading import load_source
from .subscription import SubscriptionMixin

logger = logging.getLogger(__name__)

_SCALAR_TYPES = (bool, int, float, complex, str, bytes)


def _same_value(old: Any, new: Any) -> bool:
    """True if writing new over old would not change the store.

    Identity for everything; equality too for immutable scalars of the
    same type, so that set('k', 7) twice counts as the same value.
    """
    if old is new:
        return True
    return type(old) is type(new) and type(new) in _SCALAR_TYPES and old == new


class PathStore(SubscriptionMixin):
    """A hierarchical key-value store with prefix subscriptions.

    PathStore provides:
    - set(key, value) / delete(key): Mutate, notifying watchers
    - get(key) / has(key): Lookup, never raising for unknown keys
    - enum(key, visitor): Depth-first walk of the values under key
    - watch / unwatch / watch_and_enum: Prefix-scoped change notification

    Keys are strings of segments joined by the separator. ROOT (None) or ''
    is the empty path, which can hold a value like any other.

    Example:
        >>> store = PathStore({'a': 1})
        >>> store.set('a.b', 2)
        True
        >>> store.get('a'), store.get('a.b')
        (1, 2)
    """

    __slots__ = ('_root', '_separator', '_ignore_same_value', '_subscribers')

    def __init__(
        self,
        source: Any = None,
        *,
        separator: str = DEFAULT_SEPARATOR,
        ignore_same_value: bool = False,
    ) -> None:
        """Initialize a PathStore.

        Args:
            source: Optional initial data. Can be:
                - Mapping of full keys to values: {'a.b': 1, 'c': 2}
                - Iterable of (key, value) pairs
                - PathStore: Copy its values
            separator: Single character separating path segments.
            ignore_same_value: If True, writes that would store the same value
                again are skipped: set() returns False and no watcher fires.

        Raises:
            PathStoreConfigError: If separator is not a single character.
            TypeError: If source is of an unsupported type.

        Example:
            >>> PathStore({'db.host': 'localhost', 'db.port': 5432})
            >>> PathStore([('x', 1), ('y', 2)], separator='/')
            >>> PathStore(ignore_same_value=True)
        """
        if not isinstance(separator, str) or len(separator) != 1:
            raise PathStoreConfigError(
                f"separator must be a single character, not {separator!r}"
            )
        self._separator = separator
        self._ignore_same_value = bool(ignore_same_value)
        self._root = PathNode()
        self._subscribers = {}

        if source is not None:
            load_source(self, source)

    # ==================== Special Methods ====================

    def __repr__(self) -> str:
        """Return string representation showing the stored keys."""
        return f"PathStore({self.keys()})"

    def __len__(self) -> int:
        """Return the number of stored values."""
        return sum(1 for _ in self._walk(self._root, ROOT))

    def __bool__(self) -> bool:
        """True if at least one value is stored."""
        return not self._root.is_empty

    def __iter__(self) -> Iterator[str | None]:
        """Iterate over the full keys of all stored values."""
        for key, _ in self.iter_items():
            yield key

    def __contains__(self, key: Any) -> bool:
        """Check if a value is stored at key. Malformed keys are never stored."""
        try:
            return self.has(key)
        except InvalidPathError:
            return False

    def __getitem__(self, key: Any) -> Any:
        """Get the value at key.

        Raises:
            KeyError: If no value is stored at key.
        """
        value = self.get(key, ABSENT)
        if value is ABSENT:
            raise KeyError(key)
        return value

    def __setitem__(self, key: Any, value: Any) -> None:
        """Set the value at key (ABSENT deletes it)."""
        self.set(key, value)

    def __delitem__(self, key: Any) -> None:
        """Delete the value at key.

        Raises:
            KeyError: If no value is stored at key.
        """
        if not self.delete(key):
            raise KeyError(key)

    @property
    def separator(self) -> str:
        """The path segment separator."""
        return self._separator

    @property
    def ignore_same_value(self) -> bool:
        """True if writes of an unchanged value are skipped."""
        return self._ignore_same_value

    # ==================== Path Utilities ====================

    def _parse(self, key: Any) -> ParsedPath:
        """Parse key with this store's separator."""
        return parse_path(key, self._separator)

    def _split(self, key: Any) -> tuple[str, ...]:
        """Return the segments of key."""
        return self._parse(key).path

    def _locate(self, key: Any) -> Any:
        """Return the PathNode or leaf stored at key, or ABSENT.

        The walk fails as soon as it meets a leaf with segments left, since
        nothing can be stored beneath a plain value.
        """
        node = self._root
        for segment in self._split(key):
            if not is_node(node):
                return ABSENT
            node = node.children.get(segment, ABSENT)
            if node is ABSENT:
                return ABSENT
        return node

    # ==================== Core API ====================

    def get(self, key: Any, default: Any = None) -> Any:
        """Get the value stored at key.

        Args:
            key: Path to read. ROOT reads the root's own value.
            default: Returned when no value is stored at key.

        Returns:
            The leaf at key, the own value of the node at key, or default.

        Example:
            >>> store.get('config.database.host')
            'localhost'
            >>> store.get('missing', 'fallback')
            'fallback'
        """
        node = self._locate(key)
        if is_node(node):
            node = node.value
        return default if node is ABSENT else node

    def has(self, key: Any) -> bool:
        """True if a value is stored at key.

        A path with children but no own value does not count.
        """
        node = self._locate(key)
        if is_node(node):
            return node.has_value
        return node is not ABSENT

    def set(self, key: Any, value: Any) -> bool:
        """Set the value at key, creating intermediate nodes as needed.

        If an intermediate path holds a plain value, that value is kept as
        the own value of a new node so that both survive. Setting ABSENT
        deletes the value at key.

        Args:
            key: Path to write. ROOT writes the root's own value.
            value: The value to store, or ABSENT to delete.

        Returns:
            True if the store changed and watchers were notified.

        Raises:
            TypeError: If value is a PathNode.

        Example:
            >>> store.set('a', 1)
            True
            >>> store.set('a.b', 2)  # 'a' keeps its value
            True
        """
        parsed = self._parse(key)
        if value is ABSENT:
            old_value = self._delete(parsed.path)
            if old_value is ABSENT:
                return False
            logger.debug("delete: key=%r", parsed.keys[-1])
        else:
            if is_node(value):
                raise TypeError("PathNode instances cannot be stored as values")
            changed, old_value = self._set(parsed.path, value)
            if not changed:
                return False
            logger.debug("set: key=%r", parsed.keys[-1])
        self._notify(parsed, value, old_value)
        return True

    def delete(self, key: Any) -> bool:
        """Delete the value at key, pruning nodes left empty.

        Children of key are not affected; use delete_tree() to remove them.

        Returns:
            True if a value was removed, False if there was none.
        """
        return self.set(key, ABSENT)

    def _set(self, path: tuple[str, ...], value: Any) -> tuple[bool, Any]:
        """Store value at path.

        Returns:
            Tuple of (changed, old_value). changed is False only when
            ignore_same_value skipped the write.
        """
        if not path:
            old_value = self._root.value
            if self._ignore_same_value and _same_value(old_value, value):
                return False, old_value
            self._root.value = value
            return True, old_value

        *parents, label = path
        node = self._root
        for segment in parents:
            child = node.children.get(segment, ABSENT)
            if child is ABSENT:
                child = node.children[segment] = PathNode()
            elif not is_node(child):
                # Promote leaf to node, keeping it as own value
                child = node.children[segment] = PathNode(child)
            node = child

        child = node.children.get(label, ABSENT)
        if is_node(child):
            old_value = child.value
            if self._ignore_same_value and _same_value(old_value, value):
                return False, old_value
            child.value = value
            return True, old_value
        if self._ignore_same_value and _same_value(child, value):
            return False, child
        node.children[label] = value
        return True, child

    def _delete(self, path: tuple[str, ...]) -> Any:
        """Remove the value at path and return it (ABSENT if none)."""
        _, old_value = self._delete_clean(self._root, path, 0)
        return old_value

    def _delete_clean(self, node: Any, path: tuple[str, ...], index: int) -> tuple[bool, Any]:
        """Recursively remove the value at path[index:] below node.

        Returns:
            Tuple of (emptied, old_value). emptied tells the caller that node
            now holds nothing and must be unlinked.
        """
        if not is_node(node):
            if index < len(path):
                return False, ABSENT
            return True, node

        if index < len(path):
            segment = path[index]
            if segment not in node.children:
                return node.is_empty, ABSENT
            child = node.children[segment]
            emptied, old_value = self._delete_clean(child, path, index + 1)
            if emptied:
                del node.children[segment]
            elif is_node(child) and not child.children:
                # Demote: no children left, keep only the value
                node.children[segment] = child.value
        else:
            old_value = node.value
            node.value = ABSENT
        return node.is_empty, old_value

    # ==================== Enumeration ====================

    def enum(
        self,
        key: Any = ROOT,
        visitor: Callable[[str | None, Any], Any] | None = None,
        context: Any = None,
    ) -> Iterator[tuple[str | None, Any]] | None:
        """Walk every value stored at key or beneath it, depth-first.

        Children are visited in insertion order; a node's own value comes
        after its children. Keys are reported relative to key, with ROOT
        standing for key itself.

        Args:
            key: Path to start from. Unknown paths visit nothing.
            visitor: Optional function called as visitor(subkey, value).
                If provided, enum returns None.
            context: Accepted for symmetry with watch(); it is an owner
                token only and is not passed to visitor.

        Yields:
            Tuples of (subkey, value) if no visitor provided.

        Example:
            >>> store.set('a', 1)
            >>> store.set('a.b', 2)
            >>> list(store.enum('a'))
            [('b', 2), (None, 1)]

            >>> store.enum(None, lambda subkey, value: print(subkey, value))
            a.b 2
            a 1
        """
        subject = self._locate(key)
        if visitor is not None:
            if subject is not ABSENT:
                for subkey, value in self._walk(subject, ROOT):
                    visitor(subkey, value)
            return None
        if subject is ABSENT:
            return iter(())
        return self._walk(subject, ROOT)

    def _walk(self, subject: Any, prefix: str | None) -> Iterator[tuple[str | None, Any]]:
        """Yield (subkey, value) for subject and its descendants."""
        if not is_node(subject):
            yield prefix, subject
            return
        for segment, child in list(subject.children.items()):
            subkey = segment if prefix is ROOT else f"{prefix}{self._separator}{segment}"
            yield from self._walk(child, subkey)
        if subject.value is not ABSENT:
            yield prefix, subject.value

    def iter_items(self, prefix: Any = ROOT) -> Iterator[tuple[str | None, Any]]:
        """Yield (full_key, value) for every value under prefix."""
        prefix = normalize_key(prefix)
        for subkey, value in self.enum(prefix):
            yield concat_keys(prefix, subkey, self._separator), value

    def keys(self, prefix: Any = ROOT) -> list[str | None]:
        """Return the full keys of the values under prefix."""
        return [key for key, _ in self.iter_items(prefix)]

    def values(self, prefix: Any = ROOT) -> list[Any]:
        """Return the values under prefix."""
        return [value for _, value in self.iter_items(prefix)]

    def items(self, prefix: Any = ROOT) -> list[tuple[str | None, Any]]:
        """Return (full_key, value) pairs for the values under prefix."""
        return list(self.iter_items(prefix))

    def as_dict(self, prefix: Any = ROOT) -> dict[str | None, Any]:
        """Return a flat {full_key: value} dict of the values under prefix."""
        return dict(self.iter_items(prefix))

    # ==================== Bulk Operations ====================

    def delete_tree(self, prefix: Any = ROOT, ignore_root_value: bool = False) -> int:
        """Delete every value at prefix or beneath it.

        Values are deleted one by one, so watchers see one notification
        per removed value.

        Args:
            prefix: Path of the subtree to remove. ROOT empties the store.
            ignore_root_value: If True, the value at prefix itself is kept.

        Returns:
            Number of deleted values.
        """
        prefix = normalize_key(prefix)
        subkeys = [subkey for subkey, _ in self.enum(prefix)]
        deleted = 0
        for subkey in subkeys:
            if subkey is ROOT and ignore_root_value:
                continue
            if self.delete(concat_keys(prefix, subkey, self._separator)):
                deleted += 1
        logger.debug("delete_tree: prefix=%r deleted=%d", prefix, deleted)
        return deleted

    def clear(self) -> None:
        """Delete all values, notifying watchers of each deletion."""
        self.delete_tree(ROOT)

    def update(self, source: Any) -> None:
        """Set values from another source.

        Args:
            source: Mapping of full keys to values, iterable of
                (key, value) pairs, or another PathStore.

        Example:
            >>> store.update({'config.debug': True, 'config.level': 3})
        """
        load_source(self, source)
