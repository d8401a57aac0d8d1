from __future__ import annotations

import re
import typing as t

import pydantic as p
import pydantic_core.core_schema as core_schema
import shortuuid

Separator = "$"
KeyLength = 22


class ShortUUIDKey(str):
    """An entity ID: a four-letter prefix, ``$``, then a 22-character shortuuid.

    ``UserID()`` mints a new ID. ``UserID(s)`` accepts only a well-formed ID
    with the user prefix and raises ValueError for anything else, which the
    web layer reports as a 400.
    """

    prefix: t.ClassVar[str]
    pattern: t.ClassVar[re.Pattern[str]]

    def __init_subclass__(cls, prefix: str, **kwargs: t.Any) -> None:
        super().__init_subclass__(**kwargs)
        if len(prefix) != 4:
            raise TypeError(f"{cls.__name__}: prefix must have 4 characters, got {prefix!r}")
        cls.prefix = prefix
        cls.pattern = re.compile(
            re.escape(prefix + Separator) + f"[{re.escape(shortuuid.get_alphabet())}]{{{KeyLength}}}"
        )

    def __new__(cls, value: str | None = None, /) -> t.Self:
        if value is None:
            return super().__new__(cls, f"{cls.prefix}{Separator}{shortuuid.uuid()}")
        if not isinstance(value, str) or cls.pattern.fullmatch(value) is None:
            raise ValueError(f"invalid {cls.__name__}: {value!r}")
        return super().__new__(cls, value)

    @classmethod
    def __get_pydantic_core_schema__(cls, source: t.Any, handler: p.GetCoreSchemaHandler) -> core_schema.CoreSchema:
        return core_schema.no_info_after_validator_function(
            cls,
            core_schema.str_schema(),
            serialization=core_schema.to_string_ser_schema(),
        )

    @property
    def key(self) -> str:
        """The shortuuid part, without prefix; used to name object store paths."""
        return self[len(self.prefix) + len(Separator) :]

    def __repr__(self) -> str:
        return f"{type(self).__name__}({str(self)!r})"


# fmt: off
class UserID(ShortUUIDKey, prefix="user"): ...
class CourseID(ShortUUIDKey, prefix="crse"): ...
class BookID(ShortUUIDKey, prefix="book"): ...
# fmt: on
