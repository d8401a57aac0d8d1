__all__ = [
    "NotSet",
    "NotReady",
]

from .sentinel import NotReady, NotSet
