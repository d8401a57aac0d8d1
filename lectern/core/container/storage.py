from __future__ import annotations

from pathlib import Path

from dependency_injector.containers import DeclarativeContainer
from dependency_injector.providers import Configuration, Dependency, Provider, Singleton
from sqlalchemy.engine.url import URL as DSN

from lectern.storage.memory import MemoryRecordStore
from lectern.storage.object import LocalObjectStore, ObjectStore
from lectern.storage.record import RecordStore
from lectern.storage.retry import RetryPolicy
from lectern.storage.sql import SQLRecordStore

from ..config.secrets import SQLSecrets
from ..config.storage import ObjectSettings, RecordSettings
from ..provider import LoggingProvider


def provide_record_store(config: RecordSettings, secrets: SQLSecrets, logging: LoggingProvider) -> RecordStore:
    logger = logging.get_logger()
    if config.backend == "memory":
        logger.info("using in-memory record store")
        return MemoryRecordStore()

    sql = config.sql
    assert sql is not None
    dsn = DSN.create(
        sql.driver,
        database=sql.database,
        username=secrets.username.get_secret_value() if secrets.username else None,
        password=secrets.password.get_secret_value() if secrets.password else None,
        port=sql.port,
        host=str(sql.host) if sql.host else None,
    )
    retry = RetryPolicy(
        attempts=config.retry.attempts,
        base_delay=config.retry.base_delay,
        max_delay=config.retry.max_delay,
    )
    logger.info(
        "initialized SQL record store",
        extra={
            "driver": sql.driver,
            "database": sql.database,
            "host": sql.host,
            "port": sql.port,
        },
    )
    return SQLRecordStore(dsn, retry=retry, echo=sql.echo)


def provide_object_store(config: ObjectSettings, state_path: Path) -> ObjectStore:
    base_path = config.local_path or (state_path / "uploads")
    return LocalObjectStore(base_path, url_prefix=config.url_prefix)


class StorageContainer(DeclarativeContainer):
    config = Configuration(strict=True)
    secrets = Configuration()
    logging: Provider[LoggingProvider] = Dependency()
    state_path: Provider[Path] = Dependency()

    records: Provider[RecordStore] = Singleton(
        provide_record_store,
        config=config.records.as_(RecordSettings),
        secrets=secrets.sql.as_(lambda v: SQLSecrets.model_validate(v or {})),
        logging=logging,
    )
    object_store: Provider[ObjectStore] = Singleton(
        provide_object_store,
        config=config.object.as_(ObjectSettings),
        state_path=state_path,
    )

