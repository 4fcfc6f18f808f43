"""
Configuration management module for the Deltacloud client.
Loads and validates configuration from config.yaml.
"""

from pathlib import Path
from typing import Any, Dict, Optional
import yaml


class ConfigError(Exception):
    """Raised when configuration is invalid or missing."""
    pass


class Config:
    """
    Configuration manager for the Deltacloud client.
    Loads configuration from config.yaml and provides validated access to settings.
    """

    REQUIRED_FIELDS = [
        'cloud.url',
    ]

    def __init__(self, config_path: str = None, overrides: Optional[Dict[str, Any]] = None):
        """
        Initialize configuration.

        Args:
            config_path: Path to config.yaml. If None, uses config/config.yaml in the project root.
            overrides: Dot-notation keys that replace file values (None values are ignored).
                When no config_path is given and the default file is missing, the
                configuration is built from the overrides alone.
        """
        overrides = {k: v for k, v in (overrides or {}).items() if v is not None}
        explicit_path = config_path is not None

        if config_path is None:
            config_path = Path(__file__).parent.parent.parent / "config" / "config.yaml"
        else:
            config_path = Path(config_path)

        if config_path.exists():
            self._config = self._load(config_path)
        elif not explicit_path and overrides:
            self._config = {}
        else:
            raise ConfigError(
                f"Configuration file not found: {config_path}\n"
                f"Please copy config/config.example.yaml to config/config.yaml and configure it."
            )

        for key, value in overrides.items():
            self._set_nested(key, value)

        self._validate_config()

    @staticmethod
    def _load(config_path: Path) -> Dict[str, Any]:
        try:
            with open(config_path, 'r', encoding='utf-8') as f:
                data = yaml.safe_load(f)
        except yaml.YAMLError as e:
            raise ConfigError(f"Invalid YAML in configuration file: {e}")
        except OSError as e:
            raise ConfigError(f"Error reading configuration file: {e}")

        if data is None:
            return {}
        if not isinstance(data, dict):
            raise ConfigError("Configuration file must contain a mapping at the top level")
        return data

    def _set_nested(self, key: str, value: Any) -> None:
        """Set a nested configuration value using dot notation."""
        keys = key.split('.')
        node = self._config
        for k in keys[:-1]:
            if not isinstance(node.get(k), dict):
                node[k] = {}
            node = node[k]
        node[keys[-1]] = value

    def _validate_config(self):
        """Validate that all required configuration is present."""
        missing_fields = [
            field for field in self.REQUIRED_FIELDS if not self._get_nested(field)
        ]

        if missing_fields:
            raise ConfigError(
                f"Missing required configuration fields:\n" +
                "\n".join(f"  - {field}" for field in missing_fields)
            )

        timeout = self.transport_timeout
        if not isinstance(timeout, (int, float)) or timeout <= 0:
            raise ConfigError(
                f"Invalid transport.timeout '{timeout}'. Must be a positive number of seconds."
            )

    def _get_nested(self, key: str, default=None) -> Any:
        """
        Get a nested configuration value using dot notation.

        Args:
            key: Dot-separated key (e.g., 'cloud.url')
            default: Default value if key not found

        Returns:
            Configuration value or default
        """
        keys = key.split('.')
        value = self._config

        for k in keys:
            if isinstance(value, dict) and k in value:
                value = value[k]
            else:
                return default

        return value

    @property
    def cloud_url(self) -> str:
        """Get base URL of the Deltacloud API."""
        return self._get_nested('cloud.url')

    @property
    def cloud_username(self) -> Optional[str]:
        return self._get_nested('cloud.username')

    @property
    def cloud_password(self) -> Optional[str]:
        return self._get_nested('cloud.password')

    @property
    def transport_timeout(self) -> int:
        """Get request timeout in seconds."""
        return self._get_nested('transport.timeout', 30)

    @property
    def transport_verify_ssl(self) -> bool:
        return bool(self._get_nested('transport.verify_ssl', True))

    @property
    def log_level(self) -> str:
        return self._get_nested('logging.level', 'INFO')

    @property
    def log_file(self) -> Path:
        """Get log file path."""
        return Path(self._get_nested('logging.file', './logs/deltacloud-client.log'))

    @property
    def log_max_size_mb(self) -> int:
        """Get maximum log file size in MB."""
        return self._get_nested('logging.max_size_mb', 10)

    @property
    def log_backup_count(self) -> int:
        """Get number of backup log files to keep."""
        return self._get_nested('logging.backup_count', 5)
