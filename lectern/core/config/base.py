import typing as t

from pydantic_settings import BaseSettings as PydanticBaseSettings


class BaseSettings(PydanticBaseSettings):
    """Settings model that may be built from a plain dict and dumps by alias.

    Dumping by alias matters for `logging.yaml`, whose `()` and `class` keys
    are aliased fields and must survive the trip into `dictConfig`.
    """

    def __init__(self, cf: dict[str, t.Any] | None = None, **kwargs: t.Any):
        super().__init__(**{**(cf or {}), **kwargs})

    def model_dump(self, *, by_alias: bool | None = True, **kwargs: t.Any) -> dict[str, t.Any]:  # pyright: ignore [reportIncompatibleMethodOverride]
        return super().model_dump(by_alias=by_alias, **kwargs)
