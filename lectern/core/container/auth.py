from __future__ import annotations

from dependency_injector.containers import DeclarativeContainer
from dependency_injector.providers import Configuration, Dependency, Factory, Provider, Singleton

from lectern.auth.jwt import JWTManager
from lectern.auth.local import LocalAuthProvider
from lectern.storage.record import RecordStore


class AuthContainer(DeclarativeContainer):
    """Token signing and password login.

    `config` is the market app's `auth` block; `secrets` holds the JWT signing key.
    """

    config: Configuration = Configuration()
    secrets: Configuration = Configuration()
    records: Provider[RecordStore] = Dependency()

    jwt_manager: Provider[JWTManager] = Singleton(
        JWTManager,
        secret_key=secrets.jwt,
        algorithm=config.jwt_algorithm,
        access_token_expire_minutes=config.access_token_expire_minutes,
    )
    local: Provider[LocalAuthProvider] = Factory(LocalAuthProvider, store=records, bcrypt_rounds=config.bcrypt_rounds)
