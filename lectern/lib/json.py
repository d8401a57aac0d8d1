"""JSON encoding shared by the SQL record store, API responses and log extras."""

from __future__ import annotations

import datetime
import enum
import json
import pathlib
import typing as t

import fastapi.responses
import pydantic as p

JSONPrimitive = str | int | float | bool | None
JSONValue = JSONPrimitive | list["JSONValue"] | dict[str, "JSONValue"]


class JSONEncoder(json.JSONEncoder):
    def default(self, o: t.Any) -> JSONValue:
        match o:
            case p.BaseModel():
                return o.model_dump(mode="json")
            case datetime.date() | datetime.time():
                return o.isoformat()
            case enum.Enum():
                return o.value
            case set() | frozenset():
                return sorted(o, key=str)
            case pathlib.PurePath():
                return str(o)
            case p.SecretStr() | p.Secret():
                return str(o)
        return super().default(o)


def dumps(obj: t.Any, **kwargs: t.Any) -> str:
    kwargs.setdefault("cls", JSONEncoder)
    return json.dumps(obj, **kwargs)


def loads(s: str | bytes | bytearray) -> JSONValue:
    return json.loads(s)


class FastAPIJSONResponse(fastapi.responses.JSONResponse):
    """Compact UTF-8 response body, encoded the same way records are stored."""

    def render(self, content: t.Any) -> bytes:
        return dumps(content, ensure_ascii=False, allow_nan=False, separators=(",", ":")).encode("utf-8")
