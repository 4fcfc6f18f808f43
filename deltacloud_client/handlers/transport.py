"""
HTTP transport module for the Deltacloud client.
Sends request descriptors to the server and returns raw response bodies.
"""

from typing import Optional
import requests
from requests.exceptions import RequestException, Timeout, ConnectionError

from deltacloud_client.handlers.errors import (
    DeltaCloudAuthError,
    DeltaCloudClientError,
    DeltaCloudNotFoundError,
)
from deltacloud_client.handlers.request_builder import DeltaCloudRequest


class Transport:
    """
    Contract for components that perform the actual network call.
    Implementations raise DeltaCloudClientError for every transport-level fault.
    """

    def request(self, request: DeltaCloudRequest) -> bytes:
        raise NotImplementedError


class RequestsTransport(Transport):
    """
    Transport built on the requests library.
    Applies optional basic-auth credentials to every request.
    """

    def __init__(self, username: Optional[str] = None, password: Optional[str] = None,
                 timeout: int = 30, verify_ssl: bool = True):
        """
        Initialize transport.

        Args:
            username: Optional user name for basic authentication
            password: Optional password for basic authentication
            timeout: Request timeout in seconds
            verify_ssl: Whether to verify TLS certificates
        """
        self.username = username
        self.password = password
        self.timeout = timeout
        self.verify_ssl = verify_ssl
        self.logger = None

    def _get_logger(self):
        """Lazy logger initialization."""
        if self.logger is None:
            from deltacloud_client.core.logger import get_logger
            self.logger = get_logger()
        return self.logger

    @property
    def auth(self):
        if self.username is None and self.password is None:
            return None
        return (self.username or '', self.password or '')

    def request(self, request: DeltaCloudRequest) -> bytes:
        """
        Send a request and return the response body.

        Args:
            request: Request descriptor built by RequestBuilder

        Returns:
            Raw response body

        Raises:
            DeltaCloudClientError: If the request fails or the server answers with an error
        """
        headers = {'Accept': 'application/xml'}

        try:
            self._get_logger().info(f"{request.method} {request.url}")
            if request.params:
                self._get_logger().debug(f"Form parameters: {dict(request.params)}")

            response = requests.request(
                request.method,
                request.url,
                data=list(request.params) or None,
                headers=headers,
                auth=self.auth,
                timeout=self.timeout,
                verify=self.verify_ssl
            )
        except Timeout:
            raise DeltaCloudClientError(
                f"Request to {request.url} timed out after {self.timeout} seconds"
            )
        except ConnectionError as e:
            raise DeltaCloudClientError(f"Connection error on {request.url}: {e}")
        except RequestException as e:
            raise DeltaCloudClientError(f"HTTP request to {request.url} failed: {e}")

        self._get_logger().info(f"Received response: HTTP {response.status_code}")
        self._check_status(request, response)

        self._get_logger().debug(f"Response length: {len(response.content)} bytes")
        return response.content

    def _check_status(self, request: DeltaCloudRequest, response) -> None:
        """Raise the matching client error for non-2xx responses."""
        status = response.status_code

        if status in (401, 403):
            raise DeltaCloudAuthError(
                f"Authentication failed (HTTP {status}) on {request.url}. "
                "Check user name and password.",
                status
            )
        elif status == 404:
            raise DeltaCloudNotFoundError(
                f"Resource not found (HTTP 404): {request.url}",
                status
            )
        elif status >= 500:
            raise DeltaCloudClientError(
                f"Server error (HTTP {status}) on {request.url}. "
                f"Response: {response.text[:200]}",
                status
            )
        elif not 200 <= status < 300:
            raise DeltaCloudClientError(
                f"Unexpected response (HTTP {status}) on {request.url}: "
                f"{response.text[:500]}",
                status
            )
