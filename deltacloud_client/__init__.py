"""
Deltacloud API Client Package
Manages instances, images, keys, realms and hardware profiles on a Deltacloud server.
"""

__version__ = '1.0.0'

from deltacloud_client.core.config import Config, ConfigError
from deltacloud_client.core.logger import Logger, get_logger
from deltacloud_client.handlers.client import DeltaCloudClient
from deltacloud_client.handlers.errors import (
    DeltaCloudAuthError,
    DeltaCloudClientError,
    DeltaCloudNotFoundError,
    DeltaCloudUnmarshallingError,
)
from deltacloud_client.handlers.request_builder import DeltaCloudRequest, RequestBuilder
from deltacloud_client.handlers.transport import RequestsTransport, Transport
from deltacloud_client.models import (
    API,
    Action,
    Driver,
    HardwareProfile,
    Image,
    Instance,
    Key,
    Property,
    Realm,
)

__all__ = [
    'Config',
    'ConfigError',
    'Logger',
    'get_logger',
    'DeltaCloudClient',
    'DeltaCloudClientError',
    'DeltaCloudAuthError',
    'DeltaCloudNotFoundError',
    'DeltaCloudUnmarshallingError',
    'DeltaCloudRequest',
    'RequestBuilder',
    'Transport',
    'RequestsTransport',
    'API',
    'Action',
    'Driver',
    'HardwareProfile',
    'Image',
    'Instance',
    'Key',
    'Property',
    'Realm',
]
