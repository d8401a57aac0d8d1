__all__ = [
    "AuthContainer",
    "BootConfiguration",
    "CatalogContainer",
    "LecternContainer",
    "StorageContainer",
]

from .auth import AuthContainer
from .catalog import CatalogContainer
from .lectern import BootConfiguration, LecternContainer
from .storage import StorageContainer
