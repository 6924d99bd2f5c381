"""
Ingress Claim
Admission webhook that rejects an ingress claiming a domain already owned by
another ingress of the same claim provider
"""

from .engine import AdmissionDecisionEngine, Verdict
from .index import ClaimStore, DomainClaimIndex
from .ingress import Ingress, IngressIdentity, IngressRule, sanitize
from .providers import ProviderRegistry

__version__ = '0.1.0'

__all__ = [
    'AdmissionDecisionEngine',
    'ClaimStore',
    'DomainClaimIndex',
    'Ingress',
    'IngressIdentity',
    'IngressRule',
    'ProviderRegistry',
    'Verdict',
    'sanitize',
]
