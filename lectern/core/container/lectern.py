from __future__ import annotations

import types
from pathlib import Path

import pydantic as p
import xdg_base_dirs as xdg
from dependency_injector.containers import DeclarativeContainer
from dependency_injector.providers import Configuration, Container, Object, Provider, Resource, Singleton

from lectern.model import BaseModel, DeploymentEnvironment

from ..config import Secrets, Settings
from ..di import NotReady
from ..provider import LoggingProvider
from .auth import AuthContainer
from .catalog import CatalogContainer
from .storage import StorageContainer


def provide_state_path() -> Path:
    """Per-user state directory; local uploads default to living under it."""
    path = xdg.xdg_state_home() / "lectern"
    path.mkdir(parents=True, exist_ok=True)
    return path


class BootConfiguration(BaseModel):
    """What the CLI booted with, so a uvicorn worker process can boot identically."""

    debug: bool
    env: DeploymentEnvironment
    config_root: p.AnyUrl
    override: tuple[str, ...] = ()


class LecternContainer(DeclarativeContainer):
    config: Configuration = Configuration()
    secrets: Configuration = Configuration()

    debug: Provider[bool] = Singleton(bool)
    env: Provider[DeploymentEnvironment] = Singleton(DeploymentEnvironment, DeploymentEnvironment.Local.value)
    state_path: Provider[Path] = Resource(provide_state_path)

    logging: Provider[LoggingProvider] = Resource(LoggingProvider, config=config.logging, debug=debug)
    storage: Provider[StorageContainer] = Container(
        StorageContainer, config=config.storage, secrets=secrets, logging=logging, state_path=state_path
    )
    # the market app's auth block carries token lifetime and bcrypt cost
    auth: Provider[AuthContainer] = Container(
        AuthContainer,
        config=config.web.market.auth,
        secrets=secrets.auth,
        records=storage.records,
    )
    catalog: Provider[CatalogContainer] = Container(CatalogContainer, records=storage.records)

    _boot_config: Provider[BootConfiguration | NotReady] = Object(NotReady())

    @staticmethod
    def boot(
        ct: LecternContainer,
        /,
        debug: bool,
        env: DeploymentEnvironment,
        config_root: p.AnyUrl,
        override: tuple[str, ...] | None = None,
        wiring: tuple[str | types.ModuleType, ...] | None = None,
    ):
        """Load settings and secrets for `env`, wire the package and start logging.

        Raises:
            ValueError: if `config_root` is not a file:// URL
        """
        if config_root.scheme != "file":
            raise ValueError(f"unsupported scheme for config root: {config_root.scheme}")
        boot_cf = BootConfiguration(debug=debug, env=env, config_root=config_root, override=override or ())

        ct.debug.override(boot_cf.debug)
        ct.env.override(boot_cf.env)
        ct.config.from_pydantic(Settings(env=env, root=config_root, override=boot_cf.override))
        ct.secrets.from_pydantic(Secrets(env=env, root=config_root))
        ct.wire(packages=["lectern"])
        if wiring:
            ct.wire(modules=wiring)

        logger = ct.logging().get_logger()
        for key, _, value in (o.partition("=") for o in boot_cf.override):
            logger.info("configuration override", extra={"key": key, "value": value})
        logger.debug("boot finished", extra={"config": str(config_root), "env": env.value, "debug": debug})

        ct._boot_config.override(boot_cf)
