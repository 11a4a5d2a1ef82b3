# Copyright 2025 Softwell S.r.l. - Genropy Team
# SPDX-License-Identifier: Apache-2.0

"""Example: live configuration tree with prefix watchers.

A service keeps its configuration in a PathStore and reacts to changes of
the 'database' section only, while an audit log watches everything.

Run with:
    python examples/config_watch.py
"""

from __future__ import annotations

from genro_pathstore import ABSENT, ROOT, PathStore


def describe(subkey, value, old_value):
    if value is ABSENT:
        return f"{subkey} removed (was {old_value!r})"
    if old_value is ABSENT:
        return f"{subkey} = {value!r}"
    return f"{subkey}: {old_value!r} -> {value!r}"


class DatabaseSection:
    """Rebuilds its connection string whenever 'database' changes."""

    def __init__(self, store: PathStore) -> None:
        self.store = store
        self.dsn = None
        store.watch_and_enum('database', self.on_change, context=self)

    def on_change(self, subkey, value, old_value):
        host = self.store.get('database.host', 'localhost')
        port = self.store.get('database.port', 5432)
        self.dsn = f"postgresql://{host}:{port}/{self.store.get('database', 'app')}"
        print(f"  [database] {describe(subkey, value, old_value)} -> {self.dsn}")

    def close(self) -> None:
        self.store.unwatch('database', context=self)


def main() -> None:
    store = PathStore({
        'database': 'orders',
        'database.host': 'db.internal',
        'cache.ttl': 60,
    }, ignore_same_value=True)

    store.watch(ROOT, lambda *change: print(f"  [audit] {describe(*change)}"))
    section = DatabaseSection(store)

    print("Update port:")
    store.set('database.port', 5433)

    print("Same value again (skipped):")
    store.set('database.port', 5433)

    print("Unrelated change:")
    store.set('cache.ttl', 120)

    print("Drop database overrides, keep the name:")
    store.delete_tree('database', ignore_root_value=True)

    section.close()
    print("Final contents:", store.as_dict())


if __name__ == '__main__':
    main()
