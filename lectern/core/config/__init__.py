__all__ = [
    "AuthSettings",
    "LoggingSettings",
    "MarketWebSettings",
    "ObjectSettings",
    "RecordSettings",
    "Secrets",
    "Settings",
    "StorageSettings",
    "WebSettings",
]


from .logging import LoggingSettings
from .secrets import Secrets
from .settings import Settings
from .storage import ObjectSettings, RecordSettings, StorageSettings
from .web import AuthSettings, MarketWebSettings, WebSettings
