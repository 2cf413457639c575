"""Configuration loading service"""

import os
from pathlib import Path
from typing import Any, Dict, Optional, Union

import yaml

from ..api.exceptions import ConfigError
from ..core.validation_engine import ValidationEngine
from ..models.config import StrategyConfig


class ConfigService:
    """Load and validate a strategy configuration file"""

    def __init__(self, config_path: Union[str, Path]):
        """Initialize config service

        Args:
            config_path: YAML configuration file
        """
        self.config_path = Path(config_path)
        self._data: Optional[Dict[str, Any]] = None

    @property
    def data(self) -> Dict[str, Any]:
        """Raw configuration mapping (lazy load)"""
        if self._data is None:
            self.load_config()
        return self._data

    def load_config(self, overrides: Optional[Dict[str, Any]] = None) -> Dict[str, Any]:
        """Load configuration from file

        Args:
            overrides: Values that replace keys from the file

        Returns:
            Validated configuration mapping

        Raises:
            ConfigError: If the file is missing, unparsable or invalid
        """
        if not self.config_path.exists():
            raise ConfigError(f"Configuration file not found: {self.config_path}")

        with open(self.config_path, 'r') as f:
            content = f.read()

        # Simple environment variable expansion
        content = os.path.expandvars(content)

        try:
            data = yaml.safe_load(content) or {}
        except yaml.YAMLError as e:
            raise ConfigError(f"Invalid YAML in {self.config_path}: {e}")

        if not isinstance(data, dict):
            raise ConfigError(f"Configuration must be a mapping: {self.config_path}")

        if overrides:
            data.update({k: v for k, v in overrides.items() if v is not None})

        validation = ValidationEngine().validate_config(data)
        if not validation.is_valid:
            raise ConfigError(
                f"Invalid configuration in {self.config_path}:\n" +
                "\n".join(f"  {error}" for error in validation.errors)
            )

        self._data = data
        return data

    def snapshot(self, cwd: Optional[str] = None) -> StrategyConfig:
        """Resolve the loaded configuration; relative paths follow cwd"""
        return StrategyConfig.from_dict(self.data, cwd=cwd)
