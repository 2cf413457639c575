"""CLI utility functions"""

from .output import (
    format_stage_result,
    format_stage_error,
    format_check_result,
)

__all__ = [
    'format_stage_result',
    'format_stage_error',
    'format_check_result',
]
