"""SQLAlchemy-backed record store.

Each logical table lives in the shared `records` table as JSON documents.
Secondary index rows are rewritten in the same transaction as the record they
describe, so an index never disagrees with a committed record.
"""

from __future__ import annotations

import contextlib
import logging
import typing as t
from collections.abc import AsyncIterator, Mapping

import sqlalchemy as sqla
import sqlalchemy.exc
from sqlalchemy.engine.url import URL
from sqlalchemy.ext.asyncio import async_sessionmaker, AsyncSession, create_async_engine

import lectern.lib.json as json

from .record import Item, RecordStore, StoreError, StoreUnavailableError, UniqueConstraintError
from .retry import retry_reads, RetryPolicy
from .schema import Tables, TableSpec
from .table import metadata, record_index, records, unique_index

logger = logging.getLogger(__name__)


class SQLRecordStore(RecordStore):
    def __init__(
        self,
        dsn: URL | str,
        *,
        tables: Mapping[str, TableSpec] = Tables,
        retry: RetryPolicy = RetryPolicy(),
        echo: bool = False,
    ) -> None:
        super().__init__(tables)
        self.retry = retry
        self.engine = create_async_engine(
            dsn, echo=echo, json_serializer=json.dumps, json_deserializer=json.loads
        )
        self._sessionmaker = async_sessionmaker(self.engine, expire_on_commit=False, autoflush=False)

    async def initialize(self) -> None:
        async with self.engine.begin() as conn:
            await conn.run_sync(metadata.create_all)
        logger.info("record tables ready", extra={"url": self.engine.url.render_as_string(hide_password=True)})

    async def close(self) -> None:
        await self.engine.dispose()

    @contextlib.asynccontextmanager
    async def _transaction(self) -> AsyncIterator[AsyncSession]:
        try:
            async with self._sessionmaker.begin() as session:
                yield session
        except (sqlalchemy.exc.OperationalError, sqlalchemy.exc.InterfaceError, TimeoutError) as e:
            raise StoreUnavailableError(str(e)) from e
        except sqlalchemy.exc.SQLAlchemyError as e:
            raise StoreError(str(e)) from e

    @retry_reads
    async def get(self, table: str, key: str) -> Item | None:
        self.spec(table)
        async with self._transaction() as session:
            stmt = sqla.select(records.item).where(records.table_name == table, records.record_key == key)
            return (await session.execute(stmt)).scalar_one_or_none()

    async def put(self, table: str, item: Item) -> Item:
        spec = self.spec(table)
        key = spec.key_of(item)
        async with self._transaction() as session:
            stmt = sqla.select(records.record_key).where(records.table_name == table, records.record_key == key)
            exists = (await session.execute(stmt)).first() is not None
            await self._write(session, spec, key, item, exists=exists)
        return item

    @retry_reads
    async def scan(self, table: str) -> list[Item]:
        self.spec(table)
        async with self._transaction() as session:
            stmt = sqla.select(records.item).where(records.table_name == table).order_by(records.record_key)
            return list((await session.execute(stmt)).scalars())

    async def update_fields(self, table: str, key: str, fields: Mapping[str, t.Any]) -> Item | None:
        spec = self.spec(table)
        self.check_fields(table, key, fields)
        async with self._transaction() as session:
            stmt = (
                sqla.select(records.item)
                .where(records.table_name == table, records.record_key == key)
                .with_for_update()
            )
            current = (await session.execute(stmt)).scalar_one_or_none()
            if current is None:
                return None
            merged = {**current, **fields}
            await self._write(session, spec, key, merged, exists=True)
        return merged

    async def delete(self, table: str, key: str) -> bool:
        self.spec(table)
        async with self._transaction() as session:
            await self._unindex(session, table, key)
            stmt = sqla.delete(records).where(records.table_name == table, records.record_key == key)
            result = await session.execute(stmt)
            return result.rowcount > 0  # pyright: ignore [reportAttributeAccessIssue]

    @retry_reads
    async def query(self, table: str, index: str, value: str) -> list[Item]:
        self.index(table, index)
        async with self._transaction() as session:
            stmt = (
                sqla.select(records.item)
                .join(
                    record_index,
                    sqla.and_(
                        record_index.table_name == records.table_name,
                        record_index.record_key == records.record_key,
                    ),
                )
                .where(
                    record_index.table_name == table,
                    record_index.index_name == index,
                    record_index.value == str(value),
                )
                .order_by(records.record_key)
            )
            return list((await session.execute(stmt)).scalars())

    async def _write(self, session: AsyncSession, spec: TableSpec, key: str, item: Item, *, exists: bool) -> None:
        if exists:
            await self._unindex(session, spec.name, key)
            await session.execute(
                sqla.update(records)
                .where(records.table_name == spec.name, records.record_key == key)
                .values(item=item)
            )
        else:
            await session.execute(sqla.insert(records).values(table_name=spec.name, record_key=key, item=item))

        for name, index in spec.indexes.items():
            for value in index.values(item):
                if index.unique:
                    # a failed claim aborts the whole transaction, record included
                    try:
                        await session.execute(
                            sqla.insert(unique_index).values(
                                table_name=spec.name, index_name=name, value=value, record_key=key
                            )
                        )
                    except sqlalchemy.exc.IntegrityError as e:
                        raise UniqueConstraintError(spec.name, name, value) from e
                await session.execute(
                    sqla.insert(record_index).values(
                        table_name=spec.name, index_name=name, value=value, record_key=key
                    )
                )

    async def _unindex(self, session: AsyncSession, table: str, key: str) -> None:
        await session.execute(
            sqla.delete(record_index).where(record_index.table_name == table, record_index.record_key == key)
        )
        await session.execute(
            sqla.delete(unique_index).where(unique_index.table_name == table, unique_index.record_key == key)
        )
