"""Pytest configuration and fixtures."""

import pytest

from ingress_claim.engine import AdmissionDecisionEngine
from ingress_claim.index import ClaimStore, DomainClaimIndex
from ingress_claim.providers import ProviderRegistry


@pytest.fixture
def registry() -> ProviderRegistry:
    return ProviderRegistry.from_names(['ATS', 'istio'])


@pytest.fixture
def store(registry: ProviderRegistry) -> ClaimStore:
    store = ClaimStore(registry.index_functions())
    store.replace([])
    return store


@pytest.fixture
def index(store: ClaimStore) -> DomainClaimIndex:
    index = DomainClaimIndex(lookup_timeout=1)
    index.set_source(store)
    return index


@pytest.fixture
def engine(registry: ProviderRegistry, index: DomainClaimIndex) -> AdmissionDecisionEngine:
    return AdmissionDecisionEngine(registry, index)
