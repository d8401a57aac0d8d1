"""The record store contract shared by every backend."""

from __future__ import annotations

import abc
import typing as t
from collections.abc import Mapping

from .schema import IndexSpec, Tables, TableSpec

Item = dict[str, t.Any]


class StoreError(Exception):
    """A record store failure that must not be retried."""


class StoreUnavailableError(StoreError):
    """A transient failure (timeout, dropped connection); idempotent reads may be retried."""


class UniqueConstraintError(StoreError):
    def __init__(self, table: str, index: str, value: str):
        super().__init__(f"{table}.{index} already holds {value!r}")
        self.table = table
        self.index = index
        self.value = value


class RecordStore(abc.ABC):
    """Keyed JSON documents in a fixed set of logical tables.

    Items are plain dicts. Every call is a suspension point and no call spans
    more than one record, so there are no cross-record transactions.
    """

    tables: Mapping[str, TableSpec]

    def __init__(self, tables: Mapping[str, TableSpec] = Tables) -> None:
        self.tables = tables

    def spec(self, table: str) -> TableSpec:
        try:
            return self.tables[table]
        except KeyError:
            raise StoreError(f"unknown table {table!r}") from None

    def index(self, table: str, index: str) -> IndexSpec:
        spec = self.spec(table)
        try:
            return spec.indexes[index]
        except KeyError:
            raise StoreError(f"table {table!r} has no index {index!r}") from None

    async def initialize(self) -> None:
        """Create whatever the backend needs before first use."""
        return None

    async def close(self) -> None:
        return None

    @abc.abstractmethod
    async def get(self, table: str, key: str) -> Item | None: ...

    @abc.abstractmethod
    async def put(self, table: str, item: Item) -> Item:
        """Insert or fully replace the item stored under its key."""
        ...

    @abc.abstractmethod
    async def scan(self, table: str) -> list[Item]:
        """Every item in `table`; O(n), prefer `query` where an index exists."""
        ...

    @abc.abstractmethod
    async def update_fields(self, table: str, key: str, fields: Mapping[str, t.Any]) -> Item | None:
        """Change only the supplied fields and return the whole updated item.

        Returns None when no item is stored under `key`.
        """
        ...

    @abc.abstractmethod
    async def delete(self, table: str, key: str) -> bool: ...

    @abc.abstractmethod
    async def query(self, table: str, index: str, value: str) -> list[Item]:
        """Items whose indexed attribute equals, or for lists contains, `value`."""
        ...

    def check_fields(self, table: str, key: str, fields: Mapping[str, t.Any]) -> None:
        spec = self.spec(table)
        if spec.key in fields and str(fields[spec.key]) != key:
            raise StoreError(f"cannot change the key of {table}/{key}")
