"""Tests for the ingress watcher, with the Kubernetes API replaced by fakes."""

from types import SimpleNamespace

import pytest
from kubernetes import client
from kubernetes.client.rest import ApiException

from ingress_claim.index import ClaimStore
from ingress_claim.ingress import IngressIdentity
from ingress_claim.watcher import IngressWatcher, ResourceVersionExpired

from helpers import BACKEND, ingress_dict


def ats_obj(name, domain, resource_version='1'):
    obj = ingress_dict(name, 'ns', {'default_domain': domain, 'ports': '80'}, backend=BACKEND)
    obj['metadata']['resourceVersion'] = resource_version
    return obj


class FakeNetworkingApi:
    def __init__(self, *listings):
        self.listings = list(listings)
        self.list_calls = 0
        self.api_client = client.ApiClient()

    def list_ingress_for_all_namespaces(self, **kwargs):
        items, resource_version = self.listings[min(self.list_calls, len(self.listings) - 1)]
        self.list_calls += 1
        return SimpleNamespace(items=items, metadata=SimpleNamespace(resource_version=resource_version))


class FakeWatch:
    def __init__(self, events):
        self.events = events
        self.kwargs = None
        self.stopped = False

    def stream(self, func, **kwargs):
        self.kwargs = kwargs
        yield from self.events

    def stop(self):
        self.stopped = True


@pytest.fixture
def store(registry):
    return ClaimStore(registry.index_functions())


def test_relist_fills_store_and_marks_synced(store):
    api = FakeNetworkingApi(([ats_obj('ing1', 'a.com')], '10'))
    watcher = IngressWatcher(store, networking_api=api)

    assert not watcher.has_synced()
    assert watcher.relist() == '10'
    assert watcher.has_synced()
    assert watcher.wait_for_sync(0)
    assert store.has_synced()
    assert store.by_index('ATS', 'a.com') == [IngressIdentity('ns', 'ing1')]


def test_relist_converts_client_models(store):
    model = client.V1Ingress(
        metadata=client.V1ObjectMeta(name='ing1', namespace='ns',
                                     annotations={'default_domain': 'A.com', 'ports': '80'}),
        spec=client.V1IngressSpec(default_backend=client.V1IngressBackend(
            service=client.V1IngressServiceBackend(name='svc', port=client.V1ServiceBackendPort(number=80)))),
    )
    watcher = IngressWatcher(store, networking_api=FakeNetworkingApi(([model], '3')))
    watcher.relist()

    stored = store.get(IngressIdentity('ns', 'ing1'))
    assert stored.default_backend == {'service': {'name': 'svc', 'port': {'number': 80}}}
    assert store.by_index('ATS', 'a.com') == [IngressIdentity('ns', 'ing1')]


def test_relist_skips_undecodable_items(store):
    bad = {'metadata': {'name': 'bad', 'namespace': 'ns', 'annotations': {'ports': 80}}}
    bad_paths = ats_obj('bad-paths', 'b.com')
    bad_paths['spec']['rules'] = [{'host': 'b.com', 'http': {'paths': 5}}]
    listing = ([bad, bad_paths, ats_obj('ok', 'a.com')], '1')
    watcher = IngressWatcher(store, networking_api=FakeNetworkingApi(listing))
    watcher.relist()

    assert store.list_keys() == [IngressIdentity('ns', 'ok')]


def test_watch_events_update_store(store):
    events = [
        {'type': 'ADDED', 'object': ats_obj('ing1', 'a.com', '11')},
        {'type': 'MODIFIED', 'object': ats_obj('ing1', 'b.com', '12')},
        {'type': 'ADDED', 'object': ats_obj('ing2', 'c.com', '13')},
        {'type': 'DELETED', 'object': ats_obj('ing2', 'c.com', '14')},
        {'type': 'BOOKMARK', 'object': {'metadata': {'resourceVersion': '15'}}},
    ]
    fake_watch = FakeWatch(events)
    watcher = IngressWatcher(store, networking_api=FakeNetworkingApi(([], '10')),
                             watch_factory=lambda: fake_watch)
    watcher.relist()

    assert watcher.watch_from('10') == '15'
    assert fake_watch.kwargs['resource_version'] == '10'
    assert store.by_index('ATS', 'a.com') == []
    assert store.by_index('ATS', 'b.com') == [IngressIdentity('ns', 'ing1')]
    assert store.by_index('ATS', 'c.com') == []


def test_expired_watch_error_event(store):
    watcher = IngressWatcher(store, networking_api=FakeNetworkingApi(([], '1')))
    with pytest.raises(ResourceVersionExpired):
        watcher.handle_event({'type': 'ERROR', 'object': {'code': 410, 'message': 'too old'}})


def test_other_watch_error_event(store):
    watcher = IngressWatcher(store, networking_api=FakeNetworkingApi(([], '1')))
    with pytest.raises(ApiException):
        watcher.handle_event({'type': 'ERROR', 'object': {'code': 500, 'message': 'boom'}})


def test_undecodable_event_is_ignored(store):
    watcher = IngressWatcher(store, networking_api=FakeNetworkingApi(([], '1')))
    event = {'type': 'ADDED', 'object': {'metadata': {'name': 'x', 'resourceVersion': '7', 'annotations': 'bad'}}}

    assert watcher.handle_event(event) == '7'
    assert len(store) == 0


def test_run_relists_after_expiry_and_stops(store):
    api = FakeNetworkingApi(([ats_obj('ing1', 'a.com')], '1'), ([ats_obj('ing2', 'b.com')], '2'))
    watches = []

    def watch_factory():
        if not watches:
            fake = FakeWatch([{'type': 'ERROR', 'object': {'code': 410, 'message': 'too old'}}])
        else:
            watcher.stop()
            fake = FakeWatch([])
        watches.append(fake)
        return fake

    watcher = IngressWatcher(store, networking_api=api, watch_factory=watch_factory, retry_delay=0.01)
    watcher.run()

    assert api.list_calls == 2
    assert store.list_keys() == [IngressIdentity('ns', 'ing2')]


class GoneWatch(FakeWatch):
    """Stream that fails the way the client reports an expired resourceVersion"""

    def stream(self, func, **kwargs):
        self.kwargs = kwargs
        raise ApiException(status=410, reason='Gone')
        yield


def test_run_relists_after_gone_api_exception(store):
    api = FakeNetworkingApi(([ats_obj('ing1', 'a.com')], '1'), ([ats_obj('ing2', 'b.com')], '2'))
    watches = []

    def watch_factory():
        if not watches:
            fake = GoneWatch([])
        else:
            watcher.stop()
            fake = FakeWatch([])
        watches.append(fake)
        return fake

    watcher = IngressWatcher(store, networking_api=api, watch_factory=watch_factory, retry_delay=5)
    watcher.run()

    assert api.list_calls == 2
    assert watches[0].kwargs['resource_version'] == '1'
    assert watches[1].kwargs['resource_version'] == '2'
    assert store.list_keys() == [IngressIdentity('ns', 'ing2')]


def test_start_and_stop_thread(store):
    watcher = IngressWatcher(store, networking_api=FakeNetworkingApi(([], '1')),
                             watch_factory=lambda: FakeWatch([]), retry_delay=0.01)
    watcher.start()
    assert watcher.wait_for_sync(5)
    watcher.stop()

    assert not watcher._thread.is_alive()
