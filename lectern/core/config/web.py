from __future__ import annotations

import typing as t

import annotated_types as ant
import pydantic as p

from .base import BaseSettings


class WebSettings(BaseSettings):
    market: MarketWebSettings


class ServeSettings(BaseSettings):
    host: p.IPvAnyAddress
    port: t.Annotated[int, ant.Gt(0), ant.Le(65535)]


class AuthSettings(BaseSettings):
    """Authentication settings for JWT tokens and password hashing."""

    jwt_algorithm: t.Literal["HS256"] = "HS256"
    access_token_expire_minutes: t.Annotated[int, ant.Gt(1)] = 60
    bcrypt_rounds: t.Annotated[int, ant.Ge(4), ant.Le(31)] = 10


class MarketWebSettings(BaseSettings):
    """Settings for the course and book marketplace API."""

    backend: ServeSettings
    frontend: ServeSettings | None = None
    auth: AuthSettings = AuthSettings()
    cors_origins: list[str] = []
    max_upload_bytes: t.Annotated[int, ant.Gt(0)] = 50 * 1024 * 1024
