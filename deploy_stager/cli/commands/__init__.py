# deploy_stager/cli/commands/__init__.py
"""CLI commands"""

from . import stage
from . import check

__all__ = [
    "stage",
    "check",
]
