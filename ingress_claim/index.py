"""
Domain claim index
ClaimStore keeps the watched ingresses with one domain index per provider;
DomainClaimIndex is the read side used by admission decisions, bound to a
store only once the store has been fully listed
"""

import logging
import threading
from typing import Callable, Dict, Iterable, List, Optional, Set

from .errors import IndexTimeoutError, IndexUnavailableError
from .ingress import Ingress, IngressIdentity, sanitize

logger = logging.getLogger(__name__)

IndexFunction = Callable[[Ingress], List[str]]
Indices = Dict[str, Dict[str, Set[IngressIdentity]]]


class ClaimStore:
    """Thread-safe ingress store with per-provider domain indices"""

    def __init__(self, index_functions: Dict[str, IndexFunction]):
        self._index_functions = dict(index_functions)
        self._lock = threading.Lock()
        self._items: Dict[IngressIdentity, Ingress] = {}
        self._keys: Dict[IngressIdentity, Dict[str, List[str]]] = {}
        self._indices: Indices = {name: {} for name in self._index_functions}
        self._synced = False

    def _index_keys(self, ingress: Ingress) -> Dict[str, List[str]]:
        # Computed before taking the lock so a failing index function leaves the store untouched
        return {name: fn(ingress) for name, fn in self._index_functions.items()}

    def add(self, ingress: Ingress) -> None:
        keys = self._index_keys(ingress)
        with self._lock:
            self._remove(ingress.identity)
            self._insert(ingress, keys)

    update = add

    def delete(self, ingress: Ingress) -> None:
        with self._lock:
            self._remove(ingress.identity)

    def replace(self, ingresses: Iterable[Ingress]) -> None:
        """Swap in a complete listing and mark the store as synced"""
        computed = [(ingress, self._index_keys(ingress)) for ingress in ingresses]
        with self._lock:
            self._items = {}
            self._keys = {}
            self._indices = {name: {} for name in self._index_functions}
            for ingress, keys in computed:
                self._insert(ingress, keys)
            self._synced = True
        logger.info(f"Claim store synced with {len(computed)} ingresses")

    def _insert(self, ingress: Ingress, keys: Dict[str, List[str]]) -> None:
        identity = ingress.identity
        self._items[identity] = ingress
        self._keys[identity] = keys
        for name, domains in keys.items():
            index = self._indices[name]
            for domain in domains:
                index.setdefault(domain, set()).add(identity)

    def _remove(self, identity: IngressIdentity) -> None:
        self._items.pop(identity, None)
        keys = self._keys.pop(identity, {})
        for name, domains in keys.items():
            index = self._indices[name]
            for domain in domains:
                owners = index.get(domain)
                if owners is None:
                    continue
                owners.discard(identity)
                if not owners:
                    del index[domain]

    def by_index(self, index_name: str, key: str,
                 timeout: Optional[float] = None) -> List[IngressIdentity]:
        """Identities indexed under ``key`` in the named index"""
        if not self._lock.acquire(timeout=-1 if timeout is None else timeout):
            raise IndexTimeoutError(
                f"Timed out after {timeout}s reading the {index_name} domain index, retry the request"
            )
        try:
            index = self._indices.get(index_name)
            if index is None:
                raise IndexUnavailableError(f"Index with name {index_name} does not exist")
            return sorted(index.get(key, ()))
        finally:
            self._lock.release()

    def get(self, identity: IngressIdentity) -> Optional[Ingress]:
        with self._lock:
            return self._items.get(identity)

    def list_keys(self) -> List[IngressIdentity]:
        with self._lock:
            return sorted(self._items)

    def has_synced(self) -> bool:
        return self._synced

    def __len__(self):
        with self._lock:
            return len(self._items)


class DomainClaimIndex:
    """Read-only view over a claim store; unusable until a synced store is bound"""

    def __init__(self, lookup_timeout: Optional[float] = None):
        self.lookup_timeout = lookup_timeout
        self._source: Optional[ClaimStore] = None

    def set_source(self, source: ClaimStore) -> None:
        self._source = source
        logger.info("Domain claim index bound to ingress store")

    @property
    def ready(self) -> bool:
        return self._source is not None and self._source.has_synced()

    def lookup_by_domain(self, provider: str, domain: str) -> List[IngressIdentity]:
        """Ingresses claiming ``domain`` under ``provider``"""
        if not self.ready:
            raise IndexUnavailableError(
                "Domain claim index has not completed its initial sync, retry the request"
            )
        return self._source.by_index(provider, sanitize(domain), timeout=self.lookup_timeout)
