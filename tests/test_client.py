import pytest

from deltacloud_client.handlers.client import DeltaCloudClient
from deltacloud_client.handlers.errors import (
    DeltaCloudAuthError,
    DeltaCloudClientError,
    DeltaCloudUnmarshallingError,
)
from deltacloud_client.handlers.transport import RequestsTransport
from deltacloud_client.models import Action, Driver

from tests.conftest import BASE_URL, FakeTransport


class TestConstruction:

    def test_malformed_url_fails_at_construction(self):
        with pytest.raises(DeltaCloudClientError, match='Malformed base URL'):
            DeltaCloudClient('localhost:3001')

    def test_default_transport_carries_credentials(self):
        client = DeltaCloudClient(BASE_URL, 'mockuser', 'mockpassword', timeout=5)

        assert isinstance(client.transport, RequestsTransport)
        assert client.transport.auth == ('mockuser', 'mockpassword')
        assert client.transport.timeout == 5


class TestServerType:

    def test_driver_from_api(self, client):
        assert client.get_server_type() is Driver.MOCK

    def test_transport_failure_yields_unknown(self):
        client = DeltaCloudClient(BASE_URL, transport=FakeTransport(
            error=DeltaCloudClientError('Connection error on http://localhost:3001/api')
        ))
        assert client.get_server_type() is Driver.UNKNOWN

    def test_foreign_failure_yields_unknown(self):
        client = DeltaCloudClient(BASE_URL, transport=FakeTransport(error=OSError('boom')))
        assert client.get_server_type() is Driver.UNKNOWN

    def test_garbage_response_yields_unknown(self):
        client = DeltaCloudClient(BASE_URL, transport=FakeTransport({BASE_URL: b'<html>'}))
        assert client.get_server_type() is Driver.UNKNOWN

    def test_get_api_propagates_failures(self):
        client = DeltaCloudClient(BASE_URL, transport=FakeTransport(error=OSError('boom')))
        with pytest.raises(DeltaCloudClientError):
            client.get_api()


class TestOperations:

    def test_list_realms(self, client, transport):
        realms = client.list_realms()

        assert [realm.id for realm in realms] == ['us', 'eu']
        assert transport.last_request.url == f'{BASE_URL}/realms'

    def test_get_realm(self, client):
        assert client.get_realm('us').limit == '10'

    def test_list_images(self, client):
        assert len(client.list_images()) == 3

    def test_get_image(self, client, transport):
        transport.responses[f'{BASE_URL}/images/img9'] = b"<image id='img9'><name>Nine</name></image>"
        image = client.get_image('img9')

        assert image.id == 'img9'
        assert image.name == 'Nine'

    def test_list_and_get_profiles(self, client):
        assert [p.id for p in client.list_profiles()] == ['m1-small', 'm1-large']
        assert client.get_profile('m1-large').memory.kind == 'range'

    def test_list_and_get_instances(self, client):
        assert [i.id for i in client.list_instances()] == ['inst0', 'inst1', 'inst2']
        assert client.get_instance('inst1').key_id == 'test-key'

    def test_keys(self, client, transport):
        assert [k.id for k in client.list_keys()] == ['test-key', 'other-key']
        assert client.get_key('test-key').state == 'AVAILABLE'

        key = client.create_key('test-key')
        assert key.id == 'test-key'
        assert transport.last_request.method == 'POST'
        assert transport.last_request.params == (('name', 'test-key'),)


class TestCreateInstance:

    def test_sends_parameters(self, client, transport):
        instance = client.create_instance('img1', name='web', profile_id='m1-small', realm_id='us')

        assert instance.id == 'inst3'
        assert instance.state == 'PENDING'
        assert transport.last_request.method == 'POST'
        assert dict(transport.last_request.params) == {
            'image_id': 'img1', 'name': 'web', 'hwp_id': 'm1-small', 'realm_id': 'us',
        }

    def test_key_id_is_kept_when_server_omits_it(self, client):
        instance = client.create_instance('img1', key_id='test-key')
        assert instance.key_id == 'test-key'

    def test_key_id_unset_without_key(self, client):
        assert client.create_instance('img1').key_id is None


class TestPerformAction:

    def test_returns_raw_body(self, client, transport):
        instance = client.get_instance('inst1')
        body = client.perform_action(instance.get_action('reboot'))

        assert body.startswith(b'<?xml')
        assert transport.last_request.method == 'POST'
        assert transport.last_request.url == f'{BASE_URL}/instances/inst1/reboot'

    def test_none_action_sends_nothing(self, client, transport):
        assert client.perform_action(None) is None
        assert transport.requests == []

    def test_action_without_url_fails(self, client):
        with pytest.raises(DeltaCloudClientError):
            client.perform_action(Action('reboot'))


class TestErrorPolicy:

    @pytest.mark.parametrize('operation,args', [
        ('list_instances', ()),
        ('get_instance', ('inst1',)),
        ('create_instance', ('img1',)),
        ('list_images', ()),
        ('get_image', ('img1',)),
        ('list_profiles', ()),
        ('get_profile', ('m1-small',)),
        ('list_realms', ()),
        ('get_realm', ('us',)),
        ('list_keys', ()),
        ('get_key', ('test-key',)),
        ('create_key', ('test-key',)),
    ])
    def test_client_errors_propagate_unchanged(self, operation, args):
        error = DeltaCloudAuthError('Authentication failed (HTTP 401)', 401)
        client = DeltaCloudClient(BASE_URL, transport=FakeTransport(error=error))

        with pytest.raises(DeltaCloudAuthError) as excinfo:
            getattr(client, operation)(*args)
        assert excinfo.value is error

    def test_foreign_errors_are_wrapped(self):
        cause = OSError('socket closed')
        client = DeltaCloudClient(BASE_URL, transport=FakeTransport(error=cause))

        with pytest.raises(DeltaCloudClientError) as excinfo:
            client.list_realms()
        assert str(excinfo.value).startswith(f'could not get realms on cloud at "{BASE_URL}"')
        assert excinfo.value.__cause__ is cause

    def test_unmarshalling_errors_propagate(self):
        client = DeltaCloudClient(
            BASE_URL, transport=FakeTransport({f'{BASE_URL}/realms': b'<realms>'})
        )
        with pytest.raises(DeltaCloudUnmarshallingError):
            client.list_realms()

    def test_missing_resource(self, client):
        with pytest.raises(DeltaCloudClientError) as excinfo:
            client.get_realm('nowhere')
        assert excinfo.value.status_code == 404
