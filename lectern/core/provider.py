import logging
import logging.config
import sys
import typing as t


class LoggingProvider(object):
    """Applies the `logging.yaml` dictConfig once, when the container starts the resource."""

    def __init__(self, config: dict[str, t.Any], debug: bool):
        logging.config.dictConfig(config)
        # warnings.warn() output is routed through the `py.warnings` logger
        logging.captureWarnings(debug)

    def get_logger(self, name: str | None = None) -> logging.Logger:
        """Return the logger called `name`, or the calling module's logger by default."""
        if name is None:
            name = t.cast(str, sys._getframe(1).f_globals["__name__"])  # pyright: ignore [reportPrivateUsage]
        return logging.getLogger(name)
