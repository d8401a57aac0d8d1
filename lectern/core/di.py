"""Wiring helpers; call sites import only this module so that they stay off the container import chain."""

from __future__ import annotations

__all__ = [
    "Container",
    "NotReady",
    "Provider",
    "Provide",
    "as_",
    "inject",
]

import typing as t

from dependency_injector.containers import Container
from dependency_injector.providers import Provider
from dependency_injector.wiring import inject, Provide, TypeModifier

from lectern.lib.sentinel import NotReady

T = t.TypeVar("T")


def as_(type_: type[T]) -> TypeModifier:
    """Validate an injected configuration mapping into `type_`, e.g. a settings model."""
    return TypeModifier(type_)
