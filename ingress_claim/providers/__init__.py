from .ats import ALIASES, ATS, DEFAULT_DOMAIN, PORTS, ATSProvider
from .base import INGRESS_CLASS, ClaimProvider
from .istio import ISTIO, IstioProvider
from .registry import PROVIDER_KINDS, ProviderRegistry

__all__ = [
    'ALIASES',
    'ATS',
    'ATSProvider',
    'ClaimProvider',
    'DEFAULT_DOMAIN',
    'INGRESS_CLASS',
    'ISTIO',
    'IstioProvider',
    'PORTS',
    'PROVIDER_KINDS',
    'ProviderRegistry',
]
