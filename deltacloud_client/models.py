"""
Domain objects returned by the Deltacloud client.

Every record is populated by an unmarshaller from a single XML element.
Scalar fields hold the raw strings found in the response, or None when
the element or attribute was absent.
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Dict, List, Optional


class Driver(Enum):
    """Cloud driver a Deltacloud server is running."""

    UNKNOWN = 'unknown'
    MOCK = 'mock'
    EC2 = 'ec2'
    RHEVM = 'rhevm'
    VSPHERE = 'vsphere'
    OPENSTACK = 'openstack'
    RACKSPACE = 'rackspace'
    GOGRID = 'gogrid'

    @classmethod
    def from_name(cls, name: Optional[str]) -> 'Driver':
        """Map a driver name to a member, falling back to UNKNOWN."""
        if not name:
            return cls.UNKNOWN
        try:
            return cls(name.strip().lower())
        except ValueError:
            return cls.UNKNOWN


@dataclass
class Action:
    """A follow-up operation the server allows on a resource."""

    name: Optional[str] = None
    url: Optional[str] = None
    method: str = 'GET'


@dataclass
class API:
    driver: Driver = Driver.UNKNOWN
    version: Optional[str] = None
    entry_points: Dict[str, str] = field(default_factory=dict)


@dataclass
class Realm:
    id: Optional[str] = None
    url: Optional[str] = None
    name: Optional[str] = None
    limit: Optional[str] = None
    state: Optional[str] = None


@dataclass
class Image:
    id: Optional[str] = None
    url: Optional[str] = None
    name: Optional[str] = None
    owner_id: Optional[str] = None
    description: Optional[str] = None
    architecture: Optional[str] = None
    state: Optional[str] = None
    actions: List[Action] = field(default_factory=list)


@dataclass
class Key:
    id: Optional[str] = None
    url: Optional[str] = None
    type: Optional[str] = None
    fingerprint: Optional[str] = None
    pem: Optional[str] = None
    state: Optional[str] = None
    actions: List[Action] = field(default_factory=list)


@dataclass
class Property:
    """A single hardware profile property such as memory or cpu."""

    name: Optional[str] = None
    kind: Optional[str] = None
    unit: Optional[str] = None
    value: Optional[str] = None
    range_first: Optional[str] = None
    range_last: Optional[str] = None
    enums: List[str] = field(default_factory=list)


@dataclass
class HardwareProfile:
    id: Optional[str] = None
    url: Optional[str] = None
    name: Optional[str] = None
    properties: List[Property] = field(default_factory=list)

    def get_property(self, name: str) -> Optional[Property]:
        for prop in self.properties:
            if prop.name == name:
                return prop
        return None

    @property
    def memory(self) -> Optional[Property]:
        return self.get_property('memory')

    @property
    def storage(self) -> Optional[Property]:
        return self.get_property('storage')

    @property
    def cpu(self) -> Optional[Property]:
        return self.get_property('cpu')

    @property
    def architecture(self) -> Optional[Property]:
        return self.get_property('architecture')


@dataclass
class Instance:
    id: Optional[str] = None
    url: Optional[str] = None
    name: Optional[str] = None
    owner_id: Optional[str] = None
    image_id: Optional[str] = None
    profile_id: Optional[str] = None
    realm_id: Optional[str] = None
    state: Optional[str] = None
    key_id: Optional[str] = None
    memory: Optional[str] = None
    storage: Optional[str] = None
    cpu: Optional[str] = None
    public_addresses: List[str] = field(default_factory=list)
    private_addresses: List[str] = field(default_factory=list)
    actions: List[Action] = field(default_factory=list)

    def get_action(self, name: str) -> Optional[Action]:
        """Return the action with the given name, or None."""
        for action in self.actions:
            if action.name == name:
                return action
        return None

    def can(self, name: str) -> bool:
        return self.get_action(name) is not None

    def is_running(self) -> bool:
        return (self.state or '').upper() == 'RUNNING'
