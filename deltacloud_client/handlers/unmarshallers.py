"""
XML unmarshalling module for the Deltacloud client.
Turns XML response bodies into domain objects using per-resource field tables.
"""

from typing import Any, Dict, List, Optional, Union
from lxml import etree

from deltacloud_client.handlers.errors import DeltaCloudUnmarshallingError
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


# Responses are untrusted: no entity expansion, no external fetches
_PARSER = etree.XMLParser(resolve_entities=False, no_network=True, remove_comments=True)


def parse_document(source: Union[bytes, str, Any]) -> etree._Element:
    """
    Parse an XML response body.

    Args:
        source: Body as bytes, str or a readable binary stream

    Returns:
        Root element of the document

    Raises:
        DeltaCloudUnmarshallingError: If the body is empty or not well-formed XML
    """
    if hasattr(source, 'read'):
        source = source.read()
    if isinstance(source, str):
        source = source.encode('utf-8')
    if not source or not source.strip():
        raise DeltaCloudUnmarshallingError("Cannot unmarshal an empty response")

    try:
        return etree.fromstring(source, _PARSER)
    except etree.XMLSyntaxError as e:
        raise DeltaCloudUnmarshallingError(f"Malformed XML in response: {e}")


def _local_name(element: etree._Element) -> str:
    return etree.QName(element).localname


def _text(element: Optional[etree._Element]) -> Optional[str]:
    if element is None:
        return None
    return (element.text or '').strip()


class Attribute:
    """Field rule: attribute of the resource element."""

    def __init__(self, name: str):
        self.name = name

    def extract(self, element: etree._Element) -> Optional[str]:
        return element.get(self.name)


class ChildText:
    """Field rule: text of the first child matching a path."""

    def __init__(self, path: str):
        self.path = path

    def extract(self, element: etree._Element) -> Optional[str]:
        return _text(element.find(self.path))


class ChildAttribute:
    """Field rule: attribute of the first child matching a path."""

    def __init__(self, path: str, name: str):
        self.path = path
        self.name = name

    def extract(self, element: etree._Element) -> Optional[str]:
        child = element.find(self.path)
        if child is None:
            return None
        return child.get(self.name)


class PropertyValue:
    """Field rule: value of a named property of the embedded hardware profile."""

    def __init__(self, name: str):
        self.name = name

    def extract(self, element: etree._Element) -> Optional[str]:
        for prop in element.iterfind('hardware_profile/property'):
            if prop.get('name') == self.name:
                return prop.get('value')
        return None


def unmarshal_actions(element: etree._Element) -> List[Action]:
    """Collect the action links of a resource element."""
    return [
        Action(
            name=link.get('rel'),
            url=link.get('href'),
            method=(link.get('method') or 'GET').upper()
        )
        for link in element.iterfind('actions/link')
    ]


class ElementUnmarshaller:
    """
    Populates a domain object from a single XML element.

    Subclasses name the element tag, the model class and a field table
    mapping attribute names of the model to extraction rules.
    """

    tag: str = None
    model: type = None
    fields: Dict[str, Any] = {}

    def unmarshal(self, source, target=None):
        """
        Unmarshal a document whose root is the resource element.

        Args:
            source: Response body
            target: Object to populate; a new model instance if omitted

        Returns:
            The populated object

        Raises:
            DeltaCloudUnmarshallingError: If the document has an unexpected shape
        """
        root = parse_document(source)
        if _local_name(root) != self.tag:
            raise DeltaCloudUnmarshallingError(
                f"Expected <{self.tag}> document, got <{_local_name(root)}>"
            )
        return self.populate(root, target if target is not None else self.model())

    def populate(self, element: etree._Element, target):
        for field_name, rule in self.fields.items():
            setattr(target, field_name, rule.extract(element))
        self._populate_extra(element, target)
        return target

    def _populate_extra(self, element: etree._Element, target) -> None:
        """Hook for fields that are not a single string."""
        pass


class CollectionUnmarshaller:
    """
    Populates a list of domain objects from a collection document.
    """

    collection_tag: str = None
    element_unmarshaller: type = None

    def unmarshal(self, source, target: Optional[list] = None) -> list:
        """
        Unmarshal every resource element of a collection document.

        Args:
            source: Response body
            target: List to append to; a new list if omitted

        Returns:
            The list, with one object per element in document order

        Raises:
            DeltaCloudUnmarshallingError: If the document has an unexpected shape
        """
        root = parse_document(source)
        if _local_name(root) != self.collection_tag:
            raise DeltaCloudUnmarshallingError(
                f"Expected <{self.collection_tag}> document, got <{_local_name(root)}>"
            )

        unmarshaller = self.element_unmarshaller()
        items = target if target is not None else []
        for element in root:
            if not isinstance(element.tag, str) or _local_name(element) != unmarshaller.tag:
                continue
            items.append(unmarshaller.populate(element, unmarshaller.model()))
        return items


class APIUnmarshaller(ElementUnmarshaller):
    tag = 'api'
    model = API
    fields = {
        'version': Attribute('version'),
    }

    def _populate_extra(self, element, api):
        api.driver = Driver.from_name(element.get('driver'))
        api.entry_points = {
            link.get('rel'): link.get('href')
            for link in element.iterfind('link')
            if link.get('rel')
        }


class RealmUnmarshaller(ElementUnmarshaller):
    tag = 'realm'
    model = Realm
    fields = {
        'id': Attribute('id'),
        'url': Attribute('href'),
        'name': ChildText('name'),
        'limit': ChildText('limit'),
        'state': ChildText('state'),
    }


class ImageUnmarshaller(ElementUnmarshaller):
    tag = 'image'
    model = Image
    fields = {
        'id': Attribute('id'),
        'url': Attribute('href'),
        'name': ChildText('name'),
        'owner_id': ChildText('owner_id'),
        'description': ChildText('description'),
        'architecture': ChildText('architecture'),
        'state': ChildText('state'),
    }

    def _populate_extra(self, element, image):
        image.actions = unmarshal_actions(element)


class KeyUnmarshaller(ElementUnmarshaller):
    tag = 'key'
    model = Key
    fields = {
        'id': Attribute('id'),
        'url': Attribute('href'),
        'type': Attribute('type'),
        'fingerprint': ChildText('fingerprint'),
        'pem': ChildText('pem'),
        'state': ChildText('state'),
    }

    def _populate_extra(self, element, key):
        if key.pem:
            # PEM blocks come indented inside the element
            key.pem = '\n'.join(
                line.strip() for line in key.pem.splitlines() if line.strip()
            )
        key.actions = unmarshal_actions(element)


class HardwareProfileUnmarshaller(ElementUnmarshaller):
    tag = 'hardware_profile'
    model = HardwareProfile
    fields = {
        'id': Attribute('id'),
        'url': Attribute('href'),
        'name': ChildText('name'),
    }

    def _populate_extra(self, element, profile):
        profile.properties = [
            self._unmarshal_property(prop) for prop in element.iterfind('property')
        ]

    @staticmethod
    def _unmarshal_property(element) -> Property:
        prop = Property(
            name=element.get('name'),
            kind=element.get('kind'),
            unit=element.get('unit'),
            value=element.get('value'),
        )
        range_element = element.find('range')
        if range_element is not None:
            prop.range_first = range_element.get('first')
            prop.range_last = range_element.get('last')
        prop.enums = [
            entry.get('value')
            for entry in element.iterfind('enum/entry')
            if entry.get('value') is not None
        ]
        return prop


class InstanceUnmarshaller(ElementUnmarshaller):
    tag = 'instance'
    model = Instance
    fields = {
        'id': Attribute('id'),
        'url': Attribute('href'),
        'name': ChildText('name'),
        'owner_id': ChildText('owner_id'),
        'image_id': ChildAttribute('image', 'id'),
        'profile_id': ChildAttribute('hardware_profile', 'id'),
        'realm_id': ChildAttribute('realm', 'id'),
        'state': ChildText('state'),
        'key_id': ChildText('authentication/login/keyname'),
        'memory': PropertyValue('memory'),
        'storage': PropertyValue('storage'),
        'cpu': PropertyValue('cpu'),
    }

    def _populate_extra(self, element, instance):
        instance.public_addresses = self._addresses(element, 'public_addresses')
        instance.private_addresses = self._addresses(element, 'private_addresses')
        instance.actions = unmarshal_actions(element)

    @staticmethod
    def _addresses(element, container: str) -> List[str]:
        return [
            _text(address)
            for address in element.iterfind(f'{container}/address')
            if _text(address)
        ]


class RealmsUnmarshaller(CollectionUnmarshaller):
    collection_tag = 'realms'
    element_unmarshaller = RealmUnmarshaller


class ImagesUnmarshaller(CollectionUnmarshaller):
    collection_tag = 'images'
    element_unmarshaller = ImageUnmarshaller


class KeysUnmarshaller(CollectionUnmarshaller):
    collection_tag = 'keys'
    element_unmarshaller = KeyUnmarshaller


class HardwareProfilesUnmarshaller(CollectionUnmarshaller):
    collection_tag = 'hardware_profiles'
    element_unmarshaller = HardwareProfileUnmarshaller


class InstancesUnmarshaller(CollectionUnmarshaller):
    collection_tag = 'instances'
    element_unmarshaller = InstanceUnmarshaller
