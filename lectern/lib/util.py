import typing as t
from collections.abc import Iterable, Mapping

KT = t.TypeVar("KT")
VT = t.TypeVar("VT")
T = t.TypeVar("T")
H = t.TypeVar("H", bound=t.Hashable)
RecursiveMapping = VT | Mapping[KT, "RecursiveMapping[KT, VT]"]


def deep_update(
    d1: dict[KT, RecursiveMapping[KT, VT]], d2: Mapping[KT, RecursiveMapping[KT, VT]]
) -> dict[KT, RecursiveMapping[KT, VT]]:
    result = d1.copy()
    for k, v in d2.items():
        if isinstance(v, Mapping) and k in result and isinstance(result[k], Mapping):
            result[k] = deep_update(result[k], v)  # type: ignore
        else:
            result[k] = v
    return result


def dedupe(items: Iterable[H]) -> list[H]:
    """Drop repeated items, keeping the first occurrence of each."""
    seen: set[H] = set()
    result: list[H] = []
    for item in items:
        if item not in seen:
            seen.add(item)
            result.append(item)
    return result


def replace_or_append(items: Iterable[T], item: T, key: t.Callable[[T], t.Hashable]) -> list[T]:
    """Replace every element whose key matches `item`'s key with `item`, or append it.

    The result never holds more than one element with that key.
    """
    k = key(item)
    result: list[T] = []
    placed = False
    for existing in items:
        if key(existing) == k:
            if not placed:
                result.append(item)
                placed = True
        else:
            result.append(existing)
    if not placed:
        result.append(item)
    return result
