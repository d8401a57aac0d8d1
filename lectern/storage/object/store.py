"""Blob storage for course media.

Objects are addressed by a relative POSIX key such as
``courses/<key>/image/<uuid>-cover.png``; the store decides where the bytes
live and which URL serves them.
"""

from __future__ import annotations

import abc
import asyncio
from pathlib import Path, PurePosixPath

import pydantic as p


class UploadResult(p.BaseModel):
    model_config = p.ConfigDict(frozen=True)

    key: str
    url: str
    size: int
    content_type: str


class ObjectStore(abc.ABC):
    @abc.abstractmethod
    async def upload(self, key: str, data: bytes, content_type: str = "application/octet-stream") -> UploadResult:
        """Store `data` under `key`, replacing any object already there.

        Raises:
            ValueError: if `key` is absolute or climbs out of the store
            OSError: if the bytes could not be written
        """
        ...

    @abc.abstractmethod
    async def delete(self, key: str) -> bool:
        """Remove the object; False if there was none."""
        ...

    @abc.abstractmethod
    def get_url(self, key: str) -> str: ...


class LocalObjectStore(ObjectStore):
    """Files under `base_path`, served by the web app at `url_prefix`."""

    def __init__(self, base_path: Path, url_prefix: str = "/uploads") -> None:
        self.base_path = base_path
        self.url_prefix = "/" + url_prefix.strip("/")
        self.base_path.mkdir(parents=True, exist_ok=True)

    def _path(self, key: str) -> Path:
        pure = PurePosixPath(key)
        if not pure.parts or pure.is_absolute() or ".." in pure.parts:
            raise ValueError(f"invalid object key: {key!r}")
        return self.base_path.joinpath(*pure.parts)

    async def upload(self, key: str, data: bytes, content_type: str = "application/octet-stream") -> UploadResult:
        path = self._path(key)

        def write() -> None:
            path.parent.mkdir(parents=True, exist_ok=True)
            path.write_bytes(data)

        await asyncio.to_thread(write)
        return UploadResult(key=key, url=self.get_url(key), size=len(data), content_type=content_type)

    async def delete(self, key: str) -> bool:
        path = self._path(key)
        try:
            await asyncio.to_thread(path.unlink)
        except FileNotFoundError:
            return False
        return True

    def get_url(self, key: str) -> str:
        return f"{self.url_prefix}/{key}"
