"""Click, plus the parameter types lectern commands need.

Commands import this module as `click`.
"""

from __future__ import annotations

import enum
import pathlib
import typing as t

import click
import pydantic as p
from click import *  # noqa: F401, F403 # pyright: ignore [reportWildcardImportFromLibrary]

E = t.TypeVar("E", bound=enum.Enum)


class EnumType(click.ParamType, t.Generic[E]):
    """Accepts an enum member by value, e.g. `--env test` or `--state inactive`."""

    def __init__(self, enum_cls: type[E]):
        self.enum_cls = enum_cls
        self.name = enum_cls.__name__

    def convert(self, value: t.Any, param: click.Parameter | None, ctx: click.Context | None) -> E:
        if isinstance(value, self.enum_cls):
            return value
        try:
            return self.enum_cls(value)
        except ValueError:
            choices = ", ".join(str(m.value) for m in self.enum_cls)
            self.fail(f"{value!r} is not one of: {choices}", param, ctx)

    def get_metavar(self, param: click.Parameter, ctx: click.Context | None = None) -> str:
        return "[" + "|".join(str(m.value) for m in self.enum_cls) + "]"


class ConfigRootType(click.ParamType):
    """A configuration directory, given as a path or a file:// URL."""

    name = "DIRECTORY"

    def convert(self, value: t.Any, param: click.Parameter | None, ctx: click.Context | None) -> p.FileUrl:
        if isinstance(value, p.FileUrl):
            return value
        if isinstance(value, str) and "://" in value:
            url = p.AnyUrl(value)
            if url.scheme != "file" or url.path is None:
                self.fail(f"{value}: only file:// URLs are supported", param, ctx)
            path = pathlib.Path(url.path)
        else:
            path = pathlib.Path(value)
        if not path.is_dir():
            self.fail(f"{value}: not a directory", param, ctx)
        return p.FileUrl(f"file://{path.resolve()}")
