# Copyright 2025 Softwell S.r.l. - Genropy Team
# SPDX-License-Identifier: Apache-2.0

"""PathStore exceptions."""

from __future__ import annotations


class PathStoreError(Exception):
    """Base exception for PathStore errors."""

    pass


class InvalidPathError(PathStoreError, ValueError):
    """Raised when a key or a path segment is malformed.

    Empty segments ('a..b', '.a', 'a.') are rejected when a key is parsed,
    and segments containing the separator are rejected when a key is built
    with join_path().
    """

    pass


class PathStoreConfigError(PathStoreError, ValueError):
    """Raised when a PathStore is constructed with invalid options."""

    pass
