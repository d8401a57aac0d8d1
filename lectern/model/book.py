from .base import WithTimestamps
from .id import BookID


class Book(WithTimestamps):
    book_id: BookID
    book_name: str
    book_description: str | None = None
    book_price: int | None = None
    book_cover: str | None = None
    book_link: str | None = None
