__all__ = [
    "BootConfiguration",
    "di",
    "LecternContainer",
    "LoggingProvider",
    "Settings",
    "Secrets",
]


from . import di
from .config import Secrets, Settings
from .container import BootConfiguration, LecternContainer
from .provider import LoggingProvider
