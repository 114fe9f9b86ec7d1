"""
Configuration Loader Module
Loads config.yaml and exposes settings by dotted path or attribute access
"""
import os
from pathlib import Path
from typing import Any, Dict

import yaml

from .exceptions import ConfigurationError

CONFIG_ENV_VAR = 'FACE_SHAPE_CONFIG_PATH'
DEFAULT_CONFIG_PATH = Path(__file__).parent.parent / "config.yaml"


def _wrap(value: Any) -> Any:
    return ConfigSection(value) if isinstance(value, dict) else value


class ConfigSection:
    """Read-only view of a nested config mapping"""

    def __init__(self, data: Dict[str, Any]):
        self._data = data

    def get(self, key_path: str, default: Any = None) -> Any:
        """
        Nested value by dotted key path, default when any step is missing

        Example:
            >>> config.get('logging.console.level')
            'INFO'
        """
        value = self._data
        for key in key_path.split('.'):
            if not isinstance(value, dict) or key not in value:
                return default
            value = value[key]
        return value

    def __getattr__(self, name: str):
        if name.startswith('_'):
            raise AttributeError(f"'{self.__class__.__name__}' has no attribute '{name}'")
        if name not in self._data:
            raise AttributeError(f"{self.__class__.__name__} has no key '{name}'")
        return _wrap(self._data[name])

    def __contains__(self, key: str) -> bool:
        return key in self._data

    def to_dict(self) -> Dict[str, Any]:
        return dict(self._data)

    def __repr__(self):
        return f"ConfigSection({list(self._data.keys())})"


class Config(ConfigSection):
    """
    Configuration file

    Path resolution: explicit argument, then $FACE_SHAPE_CONFIG_PATH, then
    the config.yaml shipped with the package.

    Usage:
        config = Config()
        k = config.get('classifier.k')
        # or
        k = config.classifier.k
    """

    def __init__(self, config_path: str = None):
        if config_path is None:
            config_path = os.environ.get(CONFIG_ENV_VAR) or DEFAULT_CONFIG_PATH

        self.config_path = Path(config_path)
        super().__init__({})
        self._load_config()

    def _load_config(self):
        if not self.config_path.exists():
            raise ConfigurationError(
                f"Config file not found: {self.config_path}\n"
                f"Please create config.yaml or set {CONFIG_ENV_VAR} environment variable."
            )

        try:
            with open(self.config_path, 'r', encoding='utf-8') as f:
                data = yaml.safe_load(f)
        except yaml.YAMLError as e:
            raise ConfigurationError(f"Invalid YAML format in {self.config_path}: {e}")

        if data is None:
            data = {}
        if not isinstance(data, dict):
            raise ConfigurationError(f"Top level of {self.config_path} must be a mapping")
        self._data = data

    def reload(self):
        """Re-read the config file"""
        self._load_config()

    def __repr__(self):
        return f"Config(path={self.config_path})"


_global_config: Config = None


def get_config() -> Config:
    """
    Process-wide Config instance

    Example:
        >>> config = get_config()
        >>> config.classifier.k
        3
    """
    global _global_config

    if _global_config is None:
        _global_config = Config()

    return _global_config


def reload_config():
    """Reload the global configuration"""
    global _global_config
    if _global_config is not None:
        _global_config.reload()


def load_config(config_path: str) -> Config:
    """Replace the global configuration with the file at config_path"""
    global _global_config
    _global_config = Config(config_path)
    return _global_config
