import os

import uvicorn

import lectern.lib.cli as click
from lectern.core import BootConfiguration, di
from lectern.core.config import LoggingSettings, MarketWebSettings
from lectern.web.market.main import BootVariable


@click.group()
def web():
    """Run the marketplace API."""
    ...


@web.command(name="serve")
@click.option("-w", "--workers", type=click.IntRange(min=1), default=1)
@click.option("--reload", is_flag=True, default=False, help="restart when source files change")
@di.inject
def serve(
    workers: int,
    reload: bool,
    boot_cf: BootConfiguration = di.Provide["_boot_config"],
    logging_cf: LoggingSettings = di.Provide["config.logging", di.as_(LoggingSettings)],  # noqa: B008
    market_cf: MarketWebSettings = di.Provide["config.web.market", di.as_(MarketWebSettings)],  # noqa: B008
):
    """Serve the API with uvicorn.

    Worker processes boot their own container from the same environment,
    config root and overrides as this command.
    """
    os.environ[BootVariable] = boot_cf.model_dump_json()
    uvicorn.run(
        "lectern.web.market.main:create_app",
        factory=True,
        host=str(market_cf.backend.host),
        port=market_cf.backend.port,
        reload=reload,
        workers=workers,
        log_config=logging_cf.model_dump(),
    )
