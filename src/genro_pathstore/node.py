# Copyright 2025 Softwell S.r.l. - Genropy Team
# SPDX-License-Identifier: Apache-2.0

"""PathStore node classes."""

from __future__ import annotations

from typing import Any


class _Absent:
    """Type of the ABSENT sentinel."""

    __slots__ = ()
    _instance: _Absent | None = None

    def __new__(cls) -> _Absent:
        if cls._instance is None:
            cls._instance = super().__new__(cls)
        return cls._instance

    def __repr__(self) -> str:
        return 'ABSENT'

    def __bool__(self) -> bool:
        return False

    def __reduce__(self) -> str:
        return 'ABSENT'


ABSENT: Any = _Absent()
"""Marker for "no value at this path". None is a regular value."""


class PathNode:
    """A container in a PathStore tree.

    Each node has:
    - children: Mapping of segment to child, where a child is either another
      PathNode or a plain stored value (a leaf)
    - value: The value stored at the node's own path, or ABSENT

    A node exists only while it has an own value or at least one child;
    the store prunes it as soon as it becomes empty (the root excepted).

    Example:
        >>> node = PathNode(value='Alice')
        >>> node.children['age'] = 30
        >>> node.has_value, len(node)
        (True, 1)
    """

    __slots__ = ('children', 'value')

    def __init__(self, value: Any = ABSENT) -> None:
        self.children: dict[str, Any] = {}
        self.value = value

    def __repr__(self) -> str:
        return f"PathNode({list(self.children)}, value={self.value!r})"

    def __len__(self) -> int:
        """Return the number of direct children."""
        return len(self.children)

    @property
    def has_value(self) -> bool:
        """True if the node's own-value slot is set."""
        return self.value is not ABSENT

    @property
    def is_empty(self) -> bool:
        """True if the node has neither an own value nor children."""
        return self.value is ABSENT and not self.children


def is_node(obj: Any) -> bool:
    """True if obj is a PathNode; anything else in the tree is a leaf."""
    return isinstance(obj, PathNode)
