"""Public API for deploy-stager"""

from .exceptions import (
    StagerError,
    CommandFailedError,
    ConfigError,
    MissingParameterError,
    FilesystemError,
    CrossDeviceError,
)
from .stager import Stager, deploy

__all__ = [
    "Stager",
    "deploy",
    "StagerError",
    "CommandFailedError",
    "ConfigError",
    "MissingParameterError",
    "FilesystemError",
    "CrossDeviceError",
]
