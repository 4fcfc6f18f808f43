"""Request building, transport, unmarshalling and the client facade."""

from deltacloud_client.handlers.errors import (
    DeltaCloudAuthError,
    DeltaCloudClientError,
    DeltaCloudNotFoundError,
    DeltaCloudUnmarshallingError,
)
from deltacloud_client.handlers.request_builder import DeltaCloudRequest, RequestBuilder
from deltacloud_client.handlers.transport import RequestsTransport, Transport
from deltacloud_client.handlers.client import DeltaCloudClient

__all__ = [
    'DeltaCloudAuthError',
    'DeltaCloudClientError',
    'DeltaCloudNotFoundError',
    'DeltaCloudUnmarshallingError',
    'DeltaCloudRequest',
    'RequestBuilder',
    'RequestsTransport',
    'Transport',
    'DeltaCloudClient',
]
