from __future__ import annotations

from dependency_injector.containers import DeclarativeContainer
from dependency_injector.providers import Dependency, Factory, Provider

from lectern.catalog.resolver import ReferenceResolver
from lectern.catalog.sync import Synchronizer
from lectern.storage.record import RecordStore


class CatalogContainer(DeclarativeContainer):
    """Reference resolution and snapshot fan-out, bound to the active record store."""

    records: Provider[RecordStore] = Dependency()

    resolver: Provider[ReferenceResolver] = Factory(ReferenceResolver, store=records)
    synchronizer: Provider[Synchronizer] = Factory(Synchronizer, store=records, resolver=resolver)
