"""
Ingress watcher
Lists every ingress in the cluster into the claim store, then follows the
watch stream so the store keeps reflecting cluster state
"""

import logging
import threading
from typing import Any, Callable, Dict, Optional

from kubernetes import client, config, watch
from kubernetes.client.rest import ApiException

from .errors import IngressClaimError
from .index import ClaimStore
from .ingress import Ingress

logger = logging.getLogger(__name__)

# Seconds before the server closes a watch; the loop resumes from the last resourceVersion
WATCH_TIMEOUT = 300

# Seconds stop() waits for the watch thread to finish
STOP_TIMEOUT = 5


def load_kube_config() -> None:
    """Load Kubernetes config from service account, falling back to kubeconfig"""
    try:
        config.load_incluster_config()
    except config.ConfigException:
        config.load_kube_config()


class ResourceVersionExpired(Exception):
    """Watch resourceVersion is too old, a full relist is needed"""


class IngressWatcher:
    """Keeps a ClaimStore synchronized with cluster ingresses"""

    def __init__(self, store: ClaimStore, networking_api: Optional[client.NetworkingV1Api] = None,
                 watch_factory: Callable[[], Any] = watch.Watch, retry_delay: float = 5):
        self.store = store
        self.api = networking_api or client.NetworkingV1Api()
        self.retry_delay = retry_delay
        self._watch_factory = watch_factory
        self._watch = None
        self._thread: Optional[threading.Thread] = None
        self._stopped = threading.Event()
        self._synced = threading.Event()

    def start(self) -> None:
        logger.info("Starting Ingress informer...")
        self._thread = threading.Thread(target=self.run, name='ingress-watcher', daemon=True)
        self._thread.start()

    def stop(self) -> None:
        self._stopped.set()
        if self._watch is not None:
            self._watch.stop()
        if self._thread is not None and self._thread is not threading.current_thread():
            self._thread.join(timeout=STOP_TIMEOUT)

    def wait_for_sync(self, timeout: Optional[float] = None) -> bool:
        logger.debug("Waiting for the cache to be synced...")
        return self._synced.wait(timeout)

    def has_synced(self) -> bool:
        return self._synced.is_set()

    def run(self) -> None:
        resource_version = None
        while not self._stopped.is_set():
            try:
                if resource_version is None:
                    resource_version = self.relist()
                resource_version = self.watch_from(resource_version)
            except ResourceVersionExpired:
                logger.info("Ingress watch expired, relisting")
                resource_version = None
            except ApiException as e:
                if e.status == 410:
                    logger.info("Ingress watch expired, relisting")
                    resource_version = None
                    continue
                logger.error(f"Ingress watch failed: {e.status} {e.reason}")
                self._stopped.wait(self.retry_delay)
            except Exception as e:
                logger.error(f"Ingress watch failed: {e}", exc_info=True)
                self._stopped.wait(self.retry_delay)
        logger.info("Ingress informer stopped")

    def relist(self) -> str:
        """Replace the store with a fresh listing; returns the list resourceVersion"""
        result = self.api.list_ingress_for_all_namespaces()
        ingresses = []
        for item in result.items:
            try:
                ingresses.append(Ingress.from_dict(self._to_dict(item)))
            except IngressClaimError as e:
                logger.warning(f"Skipping undecodable Ingress in listing: {e}")
        self.store.replace(ingresses)
        self._synced.set()
        return result.metadata.resource_version

    def watch_from(self, resource_version: str) -> str:
        """Apply watch events until the stream ends; returns the last seen resourceVersion"""
        self._watch = self._watch_factory()
        stream = self._watch.stream(
            self.api.list_ingress_for_all_namespaces,
            resource_version=resource_version,
            timeout_seconds=WATCH_TIMEOUT,
        )
        for event in stream:
            if self._stopped.is_set():
                break
            resource_version = self.handle_event(event) or resource_version
        return resource_version

    def handle_event(self, event: Dict[str, Any]) -> Optional[str]:
        event_type = event.get('type')
        obj = self._to_dict(event.get('object'))

        if event_type == 'ERROR':
            if obj.get('code') == 410:
                raise ResourceVersionExpired(obj.get('message', ''))
            raise ApiException(status=obj.get('code'), reason=obj.get('message'))

        metadata = obj.get('metadata') or {}
        if event_type == 'BOOKMARK':
            return metadata.get('resourceVersion')

        try:
            ingress = Ingress.from_dict(obj)
        except IngressClaimError as e:
            logger.warning(f"Ignoring undecodable {event_type} event: {e}")
            return metadata.get('resourceVersion')

        if event_type in ('ADDED', 'MODIFIED'):
            logger.debug(f"{event_type} Ingress {ingress.identity}")
            self.store.update(ingress)
        elif event_type == 'DELETED':
            logger.debug(f"DELETED Ingress {ingress.identity}")
            self.store.delete(ingress)
        else:
            logger.warning(f"Unknown watch event type: {event_type}")

        return metadata.get('resourceVersion')

    def _to_dict(self, obj: Any) -> Dict[str, Any]:
        if obj is None:
            return {}
        if isinstance(obj, dict):
            return obj
        # V1Ingress -> camelCase JSON shape, same as admission requests
        return self.api.api_client.sanitize_for_serialization(obj)
