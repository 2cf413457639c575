"""Remote transport for deploy-stager"""

from .base import RemoteExecutor
from .local import LocalExecutor
from .ssh import SSHExecutor, parse_host
from .factory import ExecutorFactory
from .selection import (
    ServerSelector,
    RoundRobinSelector,
    WeightedSelector,
    create_selector,
)
from .transport import Transport

__all__ = [
    "RemoteExecutor",
    "LocalExecutor",
    "SSHExecutor",
    "parse_host",
    "ExecutorFactory",
    "ServerSelector",
    "RoundRobinSelector",
    "WeightedSelector",
    "create_selector",
    "Transport",
]
