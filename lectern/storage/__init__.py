import importlib
import sys
import types
import typing as t

from .record import Item, RecordStore, StoreError, StoreUnavailableError, UniqueConstraintError

__all__ = [
    "Item",
    "RecordStore",
    "StoreError",
    "StoreUnavailableError",
    "UniqueConstraintError",
    # Repository modules
    "book",
    "course",
    "user",
]

if t.TYPE_CHECKING:
    from . import book, course, user


def __getattr__(name: str) -> types.ModuleType:
    if name in __all__:
        module = importlib.import_module(f"{__name__}.{name}")
        setattr(sys.modules[__name__], name, module)
        return module
    raise AttributeError(f"module {__name__} has no attribute {name}")
