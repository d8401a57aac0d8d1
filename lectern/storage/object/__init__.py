"""Object storage abstraction for course media uploads."""

from .store import LocalObjectStore, ObjectStore, UploadResult

__all__ = ["LocalObjectStore", "ObjectStore", "UploadResult"]
