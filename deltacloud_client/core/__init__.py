"""Core infrastructure modules."""

from deltacloud_client.core.config import Config, ConfigError
from deltacloud_client.core.logger import Logger, get_logger

__all__ = ['Config', 'ConfigError', 'Logger', 'get_logger']
