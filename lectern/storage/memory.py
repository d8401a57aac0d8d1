"""Process-local record store, used for tests and local development."""

from __future__ import annotations

import copy
import typing as t
from collections.abc import Mapping

from .record import Item, RecordStore, UniqueConstraintError
from .schema import Tables, TableSpec


class MemoryRecordStore(RecordStore):
    """Dict-backed store with the same index semantics as the SQL backend.

    Items are deep-copied on the way in and out, so callers never share
    mutable state with the store.
    """

    def __init__(self, tables: Mapping[str, TableSpec] = Tables) -> None:
        super().__init__(tables)
        self._items: dict[str, dict[str, Item]] = {name: {} for name in self.tables}
        # (table, index) -> value -> keys, kept in insertion order
        self._indexes: dict[tuple[str, str], dict[str, dict[str, None]]] = {
            (name, index): {} for name, spec in self.tables.items() for index in spec.indexes
        }

    async def get(self, table: str, key: str) -> Item | None:
        self.spec(table)
        item = self._items[table].get(key)
        return copy.deepcopy(item) if item is not None else None

    async def put(self, table: str, item: Item) -> Item:
        spec = self.spec(table)
        key = spec.key_of(item)
        self._write(spec, key, copy.deepcopy(item))
        return copy.deepcopy(item)

    async def scan(self, table: str) -> list[Item]:
        self.spec(table)
        return [copy.deepcopy(item) for item in self._items[table].values()]

    async def update_fields(self, table: str, key: str, fields: Mapping[str, t.Any]) -> Item | None:
        spec = self.spec(table)
        self.check_fields(table, key, fields)
        current = self._items[table].get(key)
        if current is None:
            return None
        merged = {**current, **copy.deepcopy(dict(fields))}
        self._write(spec, key, merged)
        return copy.deepcopy(merged)

    async def delete(self, table: str, key: str) -> bool:
        spec = self.spec(table)
        item = self._items[table].pop(key, None)
        if item is None:
            return False
        self._unindex(spec, key, item)
        return True

    async def query(self, table: str, index: str, value: str) -> list[Item]:
        self.index(table, index)
        keys = self._indexes[(table, index)].get(str(value), {})
        return [copy.deepcopy(self._items[table][k]) for k in keys]

    def _write(self, spec: TableSpec, key: str, item: Item) -> None:
        for name, index in spec.indexes.items():
            if not index.unique:
                continue
            entries = self._indexes[(spec.name, name)]
            for value in index.values(item):
                if any(k != key for k in entries.get(value, {})):
                    raise UniqueConstraintError(spec.name, name, value)

        previous = self._items[spec.name].get(key)
        if previous is not None:
            self._unindex(spec, key, previous)
        self._items[spec.name][key] = item
        for name, index in spec.indexes.items():
            entries = self._indexes[(spec.name, name)]
            for value in index.values(item):
                entries.setdefault(value, {})[key] = None

    def _unindex(self, spec: TableSpec, key: str, item: Item) -> None:
        for name, index in spec.indexes.items():
            entries = self._indexes[(spec.name, name)]
            for value in index.values(item):
                keys = entries.get(value)
                if keys is None:
                    continue
                keys.pop(key, None)
                if not keys:
                    del entries[value]
