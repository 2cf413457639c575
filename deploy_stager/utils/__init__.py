"""Utility helpers for deploy-stager"""

from .async_utils import run_async
from .process import CommandOutcome, run_command, join_command

__all__ = [
    "run_async",
    "CommandOutcome",
    "run_command",
    "join_command",
]
