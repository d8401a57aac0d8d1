import json
import logging
import sys
import typing as t

import pygments
from pygments.formatters import Terminal256Formatter
from pygments.lexers.data import JsonLexer  # pyright: ignore [reportMissingTypeStubs]
from pygments.style import Style
from pygments.token import Keyword, Name, Number, Punctuation, String

from lectern.lib.json import JSONEncoder, JSONValue

# attributes of every LogRecord, plus those that formatters or uvicorn attach
ReservedKeys = frozenset(logging.makeLogRecord({}).__dict__) | {
    "asctime",
    "color_message",
    "log_color",
    "message",
    "taskName",
}


class ExtraStyle(Style):
    styles = {
        Keyword: "ansimagenta",
        Name.Tag: "ansicyan",
        Number: "ansiyellow",
        Punctuation: "ansigray",
        String: "ansigreen",
    }


class ExtraEncoder(JSONEncoder):
    """Falls back to repr() so that a log call never raises on an odd extra."""

    def default(self, o: t.Any) -> JSONValue:
        try:
            return super().default(o)
        except TypeError:
            return repr(o)


class ExtraFormatter(logging.Formatter):
    """Formats with `base`, then appends the record's `extra={...}` fields as one JSON object.

    The JSON is syntax-highlighted when stderr is a terminal and `no_color` is
    not set. Remaining keyword arguments, such as colorlog's `log_colors`, go
    to `base`.
    """

    def __init__(
        self,
        base: type[logging.Formatter],
        format: str | None = None,
        datefmt: str | None = None,
        style: t.Literal["%", "{", "$"] = "%",
        indent: bool = False,
        no_color: bool = False,
        **kwargs: t.Any,
    ):
        super().__init__(format, datefmt, style)
        self.base = base(format, datefmt, style, **kwargs)
        self.indent = 2 if indent else None
        self.highlight = not no_color and sys.stderr.isatty()

    def format(self, record: logging.LogRecord) -> str:
        message = self.base.format(record)
        extra = {k: v for k, v in record.__dict__.items() if k not in ReservedKeys}
        if not extra:
            return message

        rendered = json.dumps(extra, cls=ExtraEncoder, sort_keys=True, indent=self.indent)
        if self.highlight:
            rendered = pygments.highlight(rendered, JsonLexer(), Terminal256Formatter(style=ExtraStyle))
        return f"{message} {rendered.strip()}"
