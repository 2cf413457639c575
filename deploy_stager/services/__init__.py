# deploy_stager/services/__init__.py
"""Business logic services for deploy-stager"""

from .config_service import ConfigService
from .stage_service import RsyncStrategy

__all__ = [
    "ConfigService",
    "RsyncStrategy",
]
