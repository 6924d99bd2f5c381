"""Tests for provider registration and resolution."""

import pytest

from ingress_claim.errors import NotAnIngressError
from ingress_claim.ingress import Ingress
from ingress_claim.providers import ATSProvider, IstioProvider, ProviderRegistry

from helpers import ats_ingress, ingress_dict, istio_ingress


def test_default_provider_is_ats(registry):
    assert registry.default().name == 'ATS'


@pytest.mark.parametrize("annotations, expected", [
    ({}, 'ATS'),
    ({'kubernetes.io/ingress.class': 'ATS'}, 'ATS'),
    ({'kubernetes.io/ingress.class': 'other'}, 'ATS'),
    ({'kubernetes.io/ingress.class': 'istio'}, 'istio'),
])
def test_resolve(registry, annotations, expected):
    ingress = Ingress.from_dict(ingress_dict(annotations=annotations))
    assert registry.resolve(ingress).name == expected


def test_resolve_is_independent_of_registration_order():
    registry = ProviderRegistry([IstioProvider(), ATSProvider()])
    assert registry.resolve(istio_ingress()).name == 'istio'
    assert registry.resolve(ats_ingress()).name == 'ATS'


def test_by_name(registry):
    assert registry.by_name('ATS').name == 'ATS'
    assert registry.by_name('istio').name == 'istio'
    assert registry.by_name('nginx') is None


def test_names_follow_registration_order():
    assert ProviderRegistry.from_names(['istio', 'ATS']).names == ['istio', 'ATS']


def test_from_names_ignores_blank_entries():
    assert ProviderRegistry.from_names([' ATS ', '']).names == ['ATS']


def test_from_names_rejects_unknown_provider():
    with pytest.raises(ValueError, match="Unknown provider nginx"):
        ProviderRegistry.from_names(['ATS', 'nginx'])


def test_default_provider_must_be_registered():
    with pytest.raises(ValueError, match="Default provider ATS"):
        ProviderRegistry.from_names(['istio'])


def test_duplicate_registration_rejected():
    with pytest.raises(ValueError, match="registered twice"):
        ProviderRegistry([ATSProvider(), ATSProvider()])


def test_index_functions(registry):
    functions = registry.index_functions()
    assert set(functions) == {'ATS', 'istio'}
    assert functions['istio'](istio_ingress()) == ['x.com', 'y.com']
    assert functions['ATS'](istio_ingress()) == []
    with pytest.raises(NotAnIngressError):
        functions['ATS']('not an ingress')
