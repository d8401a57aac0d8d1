from __future__ import annotations

import typing as t
from pathlib import Path

import pytest

from lectern.storage.memory import MemoryRecordStore
from lectern.storage.record import RecordStore
from lectern.storage.retry import RetryPolicy
from lectern.storage.sql import SQLRecordStore


@pytest.fixture(params=["memory", "sql"])
async def record_store(
    request: pytest.FixtureRequest, anyio_backend: str, tmp_path: Path
) -> t.AsyncGenerator[RecordStore]:
    """Each backend in turn; both must honour the same contract."""
    if request.param == "memory":
        records: RecordStore = MemoryRecordStore()
    else:
        records = SQLRecordStore(
            f"sqlite+aiosqlite:///{tmp_path / 'records.db'}",
            retry=RetryPolicy(attempts=2, base_delay=0.0),
        )
    await records.initialize()

    yield records

    await records.close()
