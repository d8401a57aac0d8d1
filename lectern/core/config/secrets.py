from __future__ import annotations

import pydantic as p
from pydantic_settings import BaseSettings as PydanticBaseSettings
from pydantic_settings import PydanticBaseSettingsSource, SettingsConfigDict

from lectern.model import BaseModel, DeploymentEnvironment

from .base import BaseSettings


class SQLSecrets(BaseModel):
    username: p.Secret[str] | None = None
    password: p.Secret[str] | None = None


class AuthSecrets(BaseModel):
    jwt: p.Secret[str]


class Secrets(BaseSettings):
    """Credentials, read only from the process environment.

    Nested values use double underscores, e.g. ``LECTERN_SECRETS__AUTH__JWT``
    or ``LECTERN_SECRETS__SQL__PASSWORD``; nothing secret lives in YAML.
    """

    model_config = SettingsConfigDict(env_prefix="LECTERN_SECRETS__", env_nested_delimiter="__")

    root: p.AnyUrl
    env: DeploymentEnvironment

    auth: AuthSecrets | None = None
    sql: SQLSecrets = SQLSecrets()

    @classmethod
    def settings_customise_sources(
        cls,
        settings_cls: type[PydanticBaseSettings],
        init_settings: PydanticBaseSettingsSource,
        env_settings: PydanticBaseSettingsSource,
        dotenv_settings: PydanticBaseSettingsSource,
        file_secret_settings: PydanticBaseSettingsSource,
    ) -> tuple[PydanticBaseSettingsSource, ...]:
        return init_settings, env_settings
