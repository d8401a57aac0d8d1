"""Logical tables, their keys and their secondary indexes."""

from __future__ import annotations

import typing as t
from collections.abc import Mapping

from lectern.lib.util import dedupe

if t.TYPE_CHECKING:
    from .record import Item


class IndexSpec(t.NamedTuple):
    """A secondary index over one attribute.

    A list-valued attribute is indexed once per element, so a lookup by any
    element finds the record.
    """

    attribute: str
    unique: bool = False

    def values(self, item: Item) -> list[str]:
        v = item.get(self.attribute)
        if v is None:
            return []
        if isinstance(v, (list, tuple, set, frozenset)):
            return dedupe(str(x) for x in t.cast(t.Iterable[t.Any], v))
        return [str(v)]


class TableSpec(t.NamedTuple):
    name: str
    key: str
    indexes: Mapping[str, IndexSpec] = {}

    def key_of(self, item: Item) -> str:
        try:
            return str(item[self.key])
        except KeyError:
            raise ValueError(f"{self.name} record is missing its key attribute {self.key!r}") from None


Users = TableSpec(
    "users",
    "user_id",
    {
        "user_email": IndexSpec("user_email", unique=True),
        "user_courses": IndexSpec("user_courses"),
        "user_books": IndexSpec("user_books"),
    },
)
Courses = TableSpec(
    "courses",
    "course_id",
    {
        "course_instructor_ids": IndexSpec("course_instructor_ids"),
    },
)
Books = TableSpec("books", "book_id")

Tables: Mapping[str, TableSpec] = {spec.name: spec for spec in (Users, Courses, Books)}
