"""Deploy Stager - stage a revision, ship it as one archive, unpack it remotely.

The staging tree is built from a hardlinked copy cache (or a fresh
checkout), optionally built, filtered through exclusion patterns, marked
with a REVISION file, compressed, uploaded and unpacked on the remote host
in a single command. Local temporaries are always removed afterwards.
"""

from .__version__ import __version__, __version_info__, __author__, __license__

# Core API
from .api.stager import Stager, deploy

# Data models
from .models import StrategyConfig, StageResult, OperationStatus

# Exceptions
from .api.exceptions import (
    StagerError,
    CommandFailedError,
    ConfigError,
    MissingParameterError,
    FilesystemError,
    CrossDeviceError,
)

__all__ = [
    # Version information
    "__version__",
    "__version_info__",
    "__author__",
    "__license__",

    # Main classes
    "Stager",
    "deploy",

    # Data models
    "StrategyConfig",
    "StageResult",
    "OperationStatus",

    # Exceptions
    "StagerError",
    "CommandFailedError",
    "ConfigError",
    "MissingParameterError",
    "FilesystemError",
    "CrossDeviceError",
]
