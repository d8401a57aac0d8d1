"""View models for books."""

from __future__ import annotations

import datetime

import pydantic as p

from lectern.model import Book, BookID


class BookCreateRequest(p.BaseModel):
    book_name: str = p.Field(min_length=1)
    book_description: str | None = None
    book_price: p.PositiveInt | None = None
    book_cover: str | None = None
    book_link: p.HttpUrl | None = None


class BookUpdateRequest(p.BaseModel):
    book_name: str | None = p.Field(default=None, min_length=1)
    book_description: str | None = None
    book_price: p.PositiveInt | None = None
    book_cover: str | None = None
    book_link: p.HttpUrl | None = None


class BookResponse(p.BaseModel):
    book_id: BookID
    book_name: str
    book_description: str | None = None
    book_price: int | None = None
    book_cover: str | None = None
    book_link: str | None = None
    create_time: datetime.datetime | None = None
    update_time: datetime.datetime | None = None

    @classmethod
    def of(cls, book: Book) -> BookResponse:
        return cls.model_validate(book.model_dump())


class BookEnvelope(p.BaseModel):
    message: str | None = None
    book: BookResponse
    warnings: list[str] = []


class BookListResponse(p.BaseModel):
    books: list[BookResponse]
