"""CLI commands for the record store."""

from __future__ import annotations

import asyncio

import lectern.lib.cli as click
from lectern.core import di
from lectern.storage.record import RecordStore


@click.group("storage")
def storage():
    """Manage the record store."""
    ...


@storage.command("init")
@di.inject
def storage_init(records: RecordStore = di.Provide["storage.records"]) -> None:
    """Create the record tables and indexes if they do not exist yet."""

    async def run() -> None:
        await records.initialize()
        await records.close()

    asyncio.run(run())
    click.echo(f"Initialized {type(records).__name__}")
