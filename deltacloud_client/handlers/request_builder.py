"""
Request construction for the Deltacloud REST API.
Each builder method returns an immutable request descriptor; no I/O happens here.
"""

from dataclasses import dataclass
from typing import Optional, Tuple
from urllib.parse import urlparse

from deltacloud_client.handlers.errors import DeltaCloudClientError
from deltacloud_client.models import Action


INSTANCES = 'instances'
IMAGES = 'images'
REALMS = 'realms'
HARDWARE_PROFILES = 'hardware_profiles'
KEYS = 'keys'


@dataclass(frozen=True)
class DeltaCloudRequest:
    """A single HTTP request against the Deltacloud API."""

    url: str
    method: str = 'GET'
    params: Tuple[Tuple[str, str], ...] = ()


def validate_base_url(url: str) -> str:
    """
    Check that a base URL can be used to reach a Deltacloud server.

    Args:
        url: Base URL of the API entry point

    Returns:
        The URL without trailing slashes

    Raises:
        DeltaCloudClientError: If the URL is empty or malformed
    """
    if not url or not isinstance(url, str):
        raise DeltaCloudClientError("Base URL of the cloud must not be empty")

    parsed = urlparse(url.strip())
    if parsed.scheme not in ('http', 'https') or not parsed.netloc:
        raise DeltaCloudClientError(
            f"Malformed base URL \"{url}\": expected http(s)://host[:port]/path"
        )
    return url.strip().rstrip('/')


class RequestBuilder:
    """
    Composes request descriptors for every Deltacloud operation.
    """

    def __init__(self, base_url: str):
        """
        Initialize request builder.

        Args:
            base_url: Base URL of the API entry point, e.g. http://host/api
        """
        self.base_url = validate_base_url(base_url)

    def _collection_url(self, collection: str) -> str:
        return f"{self.base_url}/{collection}"

    def _resource_url(self, collection: str, resource_id: str) -> str:
        if resource_id is None or not str(resource_id).strip():
            raise DeltaCloudClientError(
                f"A resource id is required to look up {collection}"
            )
        return f"{self.base_url}/{collection}/{str(resource_id).strip()}"

    def api(self) -> DeltaCloudRequest:
        """Request for the API entry point (driver and capabilities)."""
        return DeltaCloudRequest(self.base_url)

    def list_instances(self) -> DeltaCloudRequest:
        return DeltaCloudRequest(self._collection_url(INSTANCES))

    def get_instance(self, instance_id: str) -> DeltaCloudRequest:
        return DeltaCloudRequest(self._resource_url(INSTANCES, instance_id))

    def create_instance(self, image_id: str, name: Optional[str] = None,
                        profile_id: Optional[str] = None,
                        realm_id: Optional[str] = None,
                        key_id: Optional[str] = None,
                        memory: Optional[str] = None,
                        storage: Optional[str] = None) -> DeltaCloudRequest:
        """
        Request that launches a new instance.

        Only the parameters that were supplied are sent to the server.

        Raises:
            DeltaCloudClientError: If no image id is given
        """
        if not image_id:
            raise DeltaCloudClientError("An image id is required to create an instance")

        candidates = (
            ('image_id', image_id),
            ('name', name),
            ('hwp_id', profile_id),
            ('realm_id', realm_id),
            ('keyname', key_id),
            ('hwp_memory', memory),
            ('hwp_storage', storage),
        )
        params = tuple((key, str(value)) for key, value in candidates if value is not None)
        return DeltaCloudRequest(self._collection_url(INSTANCES), 'POST', params)

    def list_images(self) -> DeltaCloudRequest:
        return DeltaCloudRequest(self._collection_url(IMAGES))

    def get_image(self, image_id: str) -> DeltaCloudRequest:
        return DeltaCloudRequest(self._resource_url(IMAGES, image_id))

    def list_profiles(self) -> DeltaCloudRequest:
        return DeltaCloudRequest(self._collection_url(HARDWARE_PROFILES))

    def get_profile(self, profile_id: str) -> DeltaCloudRequest:
        return DeltaCloudRequest(self._resource_url(HARDWARE_PROFILES, profile_id))

    def list_realms(self) -> DeltaCloudRequest:
        return DeltaCloudRequest(self._collection_url(REALMS))

    def get_realm(self, realm_id: str) -> DeltaCloudRequest:
        return DeltaCloudRequest(self._resource_url(REALMS, realm_id))

    def list_keys(self) -> DeltaCloudRequest:
        return DeltaCloudRequest(self._collection_url(KEYS))

    def get_key(self, key_id: str) -> DeltaCloudRequest:
        return DeltaCloudRequest(self._resource_url(KEYS, key_id))

    def create_key(self, name: str) -> DeltaCloudRequest:
        if not name:
            raise DeltaCloudClientError("A key name is required to create a key")
        return DeltaCloudRequest(self._collection_url(KEYS), 'POST', (('name', name),))

    @staticmethod
    def perform_action(action: Action) -> DeltaCloudRequest:
        """Request that follows an action link taken from a previous response."""
        if not action.url:
            raise DeltaCloudClientError(f"Action \"{action.name}\" has no URL")
        return DeltaCloudRequest(action.url, (action.method or 'GET').upper())
