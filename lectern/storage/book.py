from __future__ import annotations

import datetime
import typing as t

from lectern.core import di
from lectern.lib import NotSet
from lectern.model import Book, BookID

from .record import Item, RecordStore

TABLE = "books"


def _load(item: Item | None) -> Book | None:
    return Book.model_validate(item) if item is not None else None


async def get(book_id: BookID, *, store: RecordStore = di.Provide["storage.records"]) -> Book | None:
    return _load(await store.get(TABLE, book_id))


async def find(*, store: RecordStore = di.Provide["storage.records"]) -> tuple[Book, ...]:
    return tuple(Book.model_validate(item) for item in await store.scan(TABLE))


async def create(
    *,
    name: str,
    description: str | None = None,
    price: int | None = None,
    cover: str | None = None,
    link: str | None = None,
    store: RecordStore = di.Provide["storage.records"],
) -> Book:
    now = datetime.datetime.now(datetime.UTC)
    book = Book(
        book_id=BookID(),
        book_name=name,
        book_description=description,
        book_price=price,
        book_cover=cover,
        book_link=link,
        create_time=now,
        update_time=now,
    )
    await store.put(TABLE, book.model_dump(mode="json"))
    return book


async def update(
    book_id: BookID,
    *,
    name: str | NotSet = NotSet(),
    description: str | None | NotSet = NotSet(),
    price: int | None | NotSet = NotSet(),
    cover: str | None | NotSet = NotSet(),
    link: str | None | NotSet = NotSet(),
    store: RecordStore = di.Provide["storage.records"],
) -> Book | None:
    """Update a book; only supplied fields change. Returns None if it does not exist."""
    fields = {
        "book_name": name,
        "book_description": description,
        "book_price": price,
        "book_cover": cover,
        "book_link": link,
    }
    values: dict[str, t.Any] = {k: v for k, v in fields.items() if not isinstance(v, NotSet)}
    values["update_time"] = datetime.datetime.now(datetime.UTC).isoformat()
    return _load(await store.update_fields(TABLE, book_id, values))


async def delete(book_id: BookID, *, store: RecordStore = di.Provide["storage.records"]) -> bool:
    return await store.delete(TABLE, book_id)
