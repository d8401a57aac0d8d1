"""Schema for `logging.yaml`.

The validated settings are dumped by alias and handed to
`logging.config.dictConfig`, both at boot and by `web serve` for uvicorn.
"""

import pathlib
import typing as t

import pydantic as p

from .base import BaseSettings

LogLevel = t.Literal["NOTSET", "DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"]


class FormatterSettings(BaseSettings):
    factory: t.Literal["lectern.lib.logging.ExtraFormatter"] = p.Field(alias="()")
    base: str = "ext://colorlog.ColoredFormatter"
    format: str | None = None
    datefmt: str | None = None
    log_colors: dict[str, str] = {}
    indent: bool = False
    no_color: bool = False


class StreamHandlerSettings(BaseSettings):
    handler: t.Literal["colorlog.StreamHandler"] = p.Field(alias="class")
    formatter: str
    level: LogLevel = "NOTSET"
    stream: str = "ext://sys.stderr"


class FileHandlerSettings(BaseSettings):
    handler: t.Literal["logging.FileHandler"] = p.Field(alias="class")
    formatter: str
    level: LogLevel = "NOTSET"
    filename: pathlib.Path
    encoding: str = "utf-8"


HandlerSettings = t.Annotated[StreamHandlerSettings | FileHandlerSettings, p.Field(discriminator="handler")]


class LoggerSettings(BaseSettings):
    level: LogLevel = "NOTSET"
    propagate: bool = True
    handlers: list[str] = []


class RootLoggerSettings(BaseSettings):
    handlers: list[str]
    level: LogLevel = "WARNING"


class LoggingSettings(BaseSettings):
    version: t.Literal[1] = 1
    disable_existing_loggers: bool = False
    formatters: dict[str, FormatterSettings]
    handlers: dict[str, HandlerSettings]
    root: RootLoggerSettings
    loggers: dict[str, LoggerSettings] = {}
