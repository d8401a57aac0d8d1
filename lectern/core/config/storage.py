from __future__ import annotations

import typing as t
from pathlib import Path

import annotated_types as ant
import pydantic as p

from .base import BaseSettings


class ObjectSettings(BaseSettings):
    """Object storage settings for course media uploads."""

    backend: t.Literal["local"] = "local"
    local_path: Path | None = None
    url_prefix: str = "/uploads"


class SQLSettings(BaseSettings):
    driver: t.Literal["sqlite+aiosqlite", "postgresql+psycopg"] = "sqlite+aiosqlite"
    host: p.IPvAnyAddress | str | None = None
    port: int | None = None
    database: str
    echo: bool = False


class RetrySettings(BaseSettings):
    """Backoff for idempotent reads; writes are never retried."""

    attempts: t.Annotated[int, ant.Ge(1)] = 3
    base_delay: t.Annotated[float, ant.Ge(0)] = 0.05
    max_delay: t.Annotated[float, ant.Gt(0)] = 1.0


class RecordSettings(BaseSettings):
    backend: t.Literal["memory", "sql"] = "memory"
    sql: SQLSettings | None = None
    retry: RetrySettings = RetrySettings()

    @p.model_validator(mode="after")
    def check_backend(self) -> t.Self:
        if self.backend == "sql" and self.sql is None:
            raise ValueError("storage.records.sql is required when backend is 'sql'")
        return self


class StorageSettings(BaseSettings):
    records: RecordSettings = RecordSettings()
    object: ObjectSettings = ObjectSettings()
