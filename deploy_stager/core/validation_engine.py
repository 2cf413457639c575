# deploy_stager/core/validation_engine.py
"""Validation engine for configuration and dependency checks"""

from dataclasses import dataclass, field
from typing import Any, Dict, List

import jsonschema

from .compression import get_supported_compressions

_string_or_list = {
    "anyOf": [
        {"type": "string"},
        {"type": "array", "items": {"type": "string"}},
    ]
}

CONFIG_SCHEMA: Dict[str, Any] = {
    "type": "object",
    "required": ["release_path", "releases_path"],
    "properties": {
        "application": {"type": "string"},
        "release_path": {"type": "string", "minLength": 1},
        "releases_path": {"type": "string", "minLength": 1},
        "build_script": {"type": ["string", "null"]},
        "rsync_exclude": _string_or_list,
        "checkout_strategy": {"type": "string", "pattern": "^:?(checkout|export)$"},
        "copy_dir": {"type": "string"},
        "copy_cache": {"type": ["string", "boolean", "null"]},
        "copy_remote_dir": {"type": "string"},
        "copy_compression": {"type": "string"},
        "copy_local_tar": {"type": "string"},
        "copy_remote_tar": {"type": "string"},
        "rsync_server": {
            "anyOf": [
                {"type": "string"},
                {"type": "array", "items": {"type": "string"}},
                {"type": "object", "additionalProperties": {"type": "number", "minimum": 0}},
            ]
        },
        "rsync_server_selection": {"type": "string"},
        "scm": {"type": "string"},
        "repository": {"type": "string"},
        "branch": {"type": "string"},
        "host": {"type": "string"},
        "ssh_port": {"type": "integer", "minimum": 1, "maximum": 65535},
        "command_timeout": {"type": ["number", "null"], "exclusiveMinimum": 0},
    },
}


@dataclass
class ValidationResult:
    """Validation result container"""
    is_valid: bool = True
    errors: List[str] = field(default_factory=list)
    info: List[str] = field(default_factory=list)

    def add_error(self, message: str) -> None:
        """Add error message"""
        self.errors.append(message)
        self.is_valid = False

    def add_success(self, message: str) -> None:
        """Add success info message"""
        self.info.append(f"✓ {message}")

    def __str__(self) -> str:
        lines = []

        if self.errors:
            lines.append("Errors:")
            for error in self.errors:
                lines.append(f"  ✗ {error}")

        if self.info:
            lines.append("Info:")
            for info in self.info:
                lines.append(f"  {info}")

        if self.is_valid and not self.errors:
            lines.append("✓ All validations passed")

        return '\n'.join(lines)


class ValidationEngine:
    """Execute validation operations"""

    def validate_config(self, config: Dict[str, Any]) -> ValidationResult:
        """
        Validate a strategy configuration mapping

        Args:
            config: Configuration dictionary

        Returns:
            ValidationResult
        """
        result = ValidationResult()

        validator = jsonschema.Draft7Validator(CONFIG_SCHEMA)
        for error in sorted(validator.iter_errors(config), key=lambda e: list(e.path)):
            location = ".".join(str(p) for p in error.path) or "<root>"
            result.add_error(f"{location}: {error.message}")

        compression = config.get("copy_compression")
        if compression is not None:
            name = str(compression).lstrip(":").lower()
            if name not in get_supported_compressions():
                result.add_error(
                    f"copy_compression: invalid compression type {compression!r} "
                    f"(expected one of: {', '.join(get_supported_compressions())})"
                )

        if result.is_valid:
            result.add_success("Configuration validates against schema")

        return result
