from __future__ import annotations

import typing as t


class Sentinel(object):
    """One instance per subclass, so markers can be compared with `is`."""

    __slots__ = ()
    _instances: t.ClassVar[dict[type, Sentinel]] = {}

    def __new__(cls) -> t.Self:
        if cls not in Sentinel._instances:
            Sentinel._instances[cls] = super().__new__(cls)
        return t.cast(t.Self, Sentinel._instances[cls])

    def __reduce__(self) -> tuple[type, tuple[()]]:
        return type(self), ()

    def __repr__(self) -> str:
        return f"<{type(self).__name__}>"


class NotReady(Sentinel):
    """Stands in for a container value that only exists after boot."""

    __slots__ = ()


class NotSet(Sentinel):
    """Marks a keyword argument the caller did not supply, where None is a meaningful value."""

    __slots__ = ()

    def __bool__(self) -> bool:
        return False
