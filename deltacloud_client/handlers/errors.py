"""
Exception types raised by the Deltacloud client.
"""

from typing import Optional


class DeltaCloudClientError(Exception):
    """Raised when a Deltacloud operation fails."""

    def __init__(self, message: str, status_code: Optional[int] = None):
        super().__init__(message)
        self.status_code = status_code


class DeltaCloudAuthError(DeltaCloudClientError):
    """Raised when the server rejects the supplied credentials."""
    pass


class DeltaCloudNotFoundError(DeltaCloudClientError):
    """Raised when the requested resource does not exist."""
    pass


class DeltaCloudUnmarshallingError(DeltaCloudClientError):
    """Raised when a response body cannot be turned into domain objects."""
    pass
