"""Data models for deploy-stager"""

from .config import StrategyConfig
from .result import StageResult, OperationStatus, ErrorDetail

__all__ = [
    "StrategyConfig",
    "StageResult",
    "OperationStatus",
    "ErrorDetail",
]
