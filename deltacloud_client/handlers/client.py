"""
Client facade for the Deltacloud REST API.
Builds requests, sends them through a transport and unmarshals the responses.
"""

from typing import Callable, List, Optional

from deltacloud_client.handlers.errors import DeltaCloudClientError
from deltacloud_client.handlers.request_builder import DeltaCloudRequest, RequestBuilder
from deltacloud_client.handlers.transport import RequestsTransport, Transport
from deltacloud_client.handlers.unmarshallers import (
    APIUnmarshaller,
    HardwareProfileUnmarshaller,
    HardwareProfilesUnmarshaller,
    ImageUnmarshaller,
    ImagesUnmarshaller,
    InstanceUnmarshaller,
    InstancesUnmarshaller,
    KeyUnmarshaller,
    KeysUnmarshaller,
    RealmUnmarshaller,
    RealmsUnmarshaller,
)
from deltacloud_client.models import (
    API,
    Action,
    Driver,
    HardwareProfile,
    Image,
    Instance,
    Key,
    Realm,
)


class DeltaCloudClient:
    """
    Talks to a Deltacloud server rooted at a base URL.

    Every operation raises DeltaCloudClientError on failure, except
    get_server_type which reports Driver.UNKNOWN instead.
    """

    def __init__(self, url: str, username: Optional[str] = None,
                 password: Optional[str] = None, transport: Optional[Transport] = None,
                 timeout: int = 30, verify_ssl: bool = True):
        """
        Initialize client.

        Args:
            url: Base URL of the API entry point, e.g. http://localhost:3001/api
            username: Optional user name, applied by the default transport
            password: Optional password, applied by the default transport
            transport: Transport to use instead of RequestsTransport
            timeout: Request timeout in seconds for the default transport
            verify_ssl: Whether the default transport verifies TLS certificates

        Raises:
            DeltaCloudClientError: If the base URL is malformed
        """
        self.builder = RequestBuilder(url)
        self.base_url = self.builder.base_url
        if transport is None:
            transport = RequestsTransport(username, password, timeout, verify_ssl)
        self.transport = transport
        self.logger = None

    @classmethod
    def from_config(cls, config, transport: Optional[Transport] = None) -> 'DeltaCloudClient':
        """Create a client from a loaded Config."""
        return cls(
            config.cloud_url,
            config.cloud_username,
            config.cloud_password,
            transport=transport,
            timeout=config.transport_timeout,
            verify_ssl=config.transport_verify_ssl
        )

    def _get_logger(self):
        """Lazy logger initialization."""
        if self.logger is None:
            from deltacloud_client.core.logger import get_logger
            self.logger = get_logger()
        return self.logger

    def request(self, request: DeltaCloudRequest) -> bytes:
        return self.transport.request(request)

    def _execute(self, description: str, build: Callable[[], DeltaCloudRequest],
                 unmarshal: Callable[[bytes], object]):
        """
        Run one operation: build the request, send it and unmarshal the body.

        Client errors propagate unchanged; anything else is wrapped.
        """
        try:
            return unmarshal(self.request(build()))
        except DeltaCloudClientError:
            raise
        except Exception as e:
            raise DeltaCloudClientError(
                f"could not {description} on cloud at \"{self.base_url}\": {e}"
            ) from e

    def get_server_type(self) -> Driver:
        """
        Return the driver the server runs.

        Any failure is reported as Driver.UNKNOWN rather than raised.
        """
        try:
            return self.get_api().driver
        except DeltaCloudClientError as e:
            self._get_logger().warning(
                f"Could not determine server type at {self.base_url}: {e}"
            )
            return Driver.UNKNOWN

    def get_api(self) -> API:
        return self._execute(
            'get api', self.builder.api, APIUnmarshaller().unmarshal
        )

    def create_instance(self, image_id: str, name: Optional[str] = None,
                        profile_id: Optional[str] = None, realm_id: Optional[str] = None,
                        key_id: Optional[str] = None, memory: Optional[str] = None,
                        storage: Optional[str] = None) -> Instance:
        """
        Launch a new instance from an image.

        Returns:
            The instance as reported by the server
        """
        instance = self._execute(
            'create instance',
            lambda: self.builder.create_instance(
                image_id, name, profile_id, realm_id, key_id, memory, storage
            ),
            InstanceUnmarshaller().unmarshal
        )
        # Servers omit the key name from the creation response
        if key_id is not None:
            instance.key_id = key_id
        self._get_logger().info(f"Created instance {instance.id} from image {image_id}")
        return instance

    def list_instances(self) -> List[Instance]:
        return self._execute(
            'get instances', self.builder.list_instances,
            InstancesUnmarshaller().unmarshal
        )

    def get_instance(self, instance_id: str) -> Instance:
        return self._execute(
            f'get instance "{instance_id}"',
            lambda: self.builder.get_instance(instance_id),
            InstanceUnmarshaller().unmarshal
        )

    def list_images(self) -> List[Image]:
        return self._execute(
            'get images', self.builder.list_images, ImagesUnmarshaller().unmarshal
        )

    def get_image(self, image_id: str) -> Image:
        return self._execute(
            f'get image "{image_id}"',
            lambda: self.builder.get_image(image_id),
            ImageUnmarshaller().unmarshal
        )

    def list_profiles(self) -> List[HardwareProfile]:
        return self._execute(
            'get hardware profiles', self.builder.list_profiles,
            HardwareProfilesUnmarshaller().unmarshal
        )

    def get_profile(self, profile_id: str) -> HardwareProfile:
        return self._execute(
            f'get hardware profile "{profile_id}"',
            lambda: self.builder.get_profile(profile_id),
            HardwareProfileUnmarshaller().unmarshal
        )

    def list_realms(self) -> List[Realm]:
        return self._execute(
            'get realms', self.builder.list_realms, RealmsUnmarshaller().unmarshal
        )

    def get_realm(self, realm_id: str) -> Realm:
        return self._execute(
            f'get realm "{realm_id}"',
            lambda: self.builder.get_realm(realm_id),
            RealmUnmarshaller().unmarshal
        )

    def create_key(self, name: str) -> Key:
        key = self._execute(
            f'create key "{name}"',
            lambda: self.builder.create_key(name),
            KeyUnmarshaller().unmarshal
        )
        self._get_logger().info(f"Created key {key.id}")
        return key

    def list_keys(self) -> List[Key]:
        return self._execute(
            'get keys', self.builder.list_keys, KeysUnmarshaller().unmarshal
        )

    def get_key(self, key_id: str) -> Key:
        return self._execute(
            f'get key "{key_id}"',
            lambda: self.builder.get_key(key_id),
            KeyUnmarshaller().unmarshal
        )

    def perform_action(self, action: Optional[Action]) -> Optional[bytes]:
        """
        Follow an action link obtained from a previous response.

        Args:
            action: Action to perform; nothing is sent when None

        Returns:
            Raw response body, or None when no action was given
        """
        if action is None:
            return None
        self._get_logger().info(f"Performing action {action.name} ({action.method} {action.url})")
        return self._execute(
            f'perform action "{action.name}"',
            lambda: self.builder.perform_action(action),
            lambda body: body
        )
