# Copyright 2025 Softwell S.r.l. - Genropy Team
# SPDX-License-Identifier: Apache-2.0

"""Path parsing for PathStore keys.

A key is either ROOT (the empty path) or a string of segments joined by a
single separator character. Parsing a key produces, besides its segments,
the chain of ancestor keys from ROOT down to the key itself and, for each
ancestor, the remaining part of the key relative to it::

    >>> parsed = parse_path('a.b.c')
    >>> parsed.path
    ('a', 'b', 'c')
    >>> parsed.keys
    (None, 'a', 'a.b', 'a.b.c')
    >>> parsed.subkeys
    ('a.b.c', 'b.c', 'c', None)

The ancestor chain drives notification fan-out: a watcher on 'a' is told
that 'b.c' changed, a watcher on 'a.b.c' is told that ROOT (itself) changed.
"""

from __future__ import annotations

from typing import Any, NamedTuple

from .exceptions import InvalidPathError

ROOT = None
"""Key of the store root (the empty path)."""

DEFAULT_SEPARATOR = '.'


class ParsedPath(NamedTuple):
    """A key decomposed into segments and its ancestor chain.

    Attributes:
        path: The key's segments, empty for ROOT.
        keys: Full key of every ancestor, ROOT first, the key itself last.
        subkeys: The key relative to each ancestor in keys; ROOT for the
            key itself.
    """

    path: tuple[str, ...]
    keys: tuple[str | None, ...]
    subkeys: tuple[str | None, ...]

    @property
    def depth(self) -> int:
        """Number of segments in the key (0 for ROOT)."""
        return len(self.path)


def normalize_key(key: Any) -> str | None:
    """Return the canonical form of a key.

    None and '' both mean ROOT. Non-string keys (e.g. integers) are
    converted with str().
    """
    if key is None:
        return ROOT
    if not isinstance(key, str):
        key = str(key)
    return key or ROOT


def parse_path(key: Any, separator: str = DEFAULT_SEPARATOR) -> ParsedPath:
    """Split a key into segments, ancestor keys and relative subkeys.

    Args:
        key: The key to parse (ROOT, '', a string or any str()-able value).
        separator: The segment separator.

    Returns:
        ParsedPath with len(keys) == len(subkeys) == depth + 1.

    Raises:
        InvalidPathError: If the key contains an empty segment.
    """
    key = normalize_key(key)
    if key is ROOT:
        return ParsedPath((), (ROOT,), (ROOT,))

    path: list[str] = []
    keys: list[str | None] = [ROOT]
    subkeys: list[str | None] = []
    pos = 0
    while True:
        end = key.find(separator, pos)
        if end == -1:
            end = len(key)
        if end == pos:
            raise InvalidPathError(f"Empty segment at position {pos} in key {key!r}")
        path.append(key[pos:end])
        keys.append(key[:end])
        subkeys.append(key[pos:])
        if end == len(key):
            break
        pos = end + 1
        if pos == len(key):
            raise InvalidPathError(f"Key {key!r} ends with separator {separator!r}")
    subkeys.append(ROOT)
    return ParsedPath(tuple(path), tuple(keys), tuple(subkeys))


def split_path(key: Any, separator: str = DEFAULT_SEPARATOR) -> tuple[str, ...]:
    """Return only the segments of a key."""
    return parse_path(key, separator).path


def join_path(*segments: Any, separator: str = DEFAULT_SEPARATOR) -> str | None:
    """Build a key from segments.

    ROOT segments are skipped, so join_path(prefix, subkey) works when either
    side is ROOT. Returns ROOT when every segment is ROOT.

    Raises:
        InvalidPathError: If a segment is empty or contains the separator.

    Example:
        >>> join_path('config', 'db', 'host')
        'config.db.host'
        >>> join_path(None, 'x')
        'x'
    """
    parts: list[str] = []
    for segment in segments:
        if segment is ROOT:
            continue
        segment = str(segment)
        if not segment:
            raise InvalidPathError("Empty path segment")
        if separator in segment:
            raise InvalidPathError(
                f"Segment {segment!r} contains separator {separator!r}"
            )
        parts.append(segment)
    if not parts:
        return ROOT
    return separator.join(parts)


def concat_keys(prefix: str | None, subkey: str | None, separator: str = DEFAULT_SEPARATOR) -> str | None:
    """Join an already-valid prefix and a relative key without re-validating.

    Used to turn relative keys reported by enumeration back into full keys.
    """
    if prefix is ROOT:
        return subkey
    if subkey is ROOT:
        return prefix
    return f"{prefix}{separator}{subkey}"
