"""Cross-entity reference resolution and snapshot synchronization."""

__all__ = [
    "Enrollment",
    "ReferenceResolver",
    "Synchronizer",
    "SyncReport",
]

# lectern.core builds its containers from this package, so it must load first
import lectern.core  # noqa: F401

from .resolver import ReferenceResolver
from .sync import Enrollment, Synchronizer, SyncReport
