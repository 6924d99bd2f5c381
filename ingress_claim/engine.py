"""
Admission decision engine
Resolves the claim provider for an ingress, runs its structural checks and
rejects the ingress when one of its domains belongs to another ingress
"""

import logging
from dataclasses import dataclass

from .errors import (
    DecodeError,
    DomainConflictError,
    IndexUnavailableError,
    IngressClaimError,
    ResourceMismatchError,
    SemanticValidationError,
)
from .index import DomainClaimIndex
from .ingress import Ingress
from .providers.base import ClaimProvider
from .providers.registry import ProviderRegistry
from .review import AdmissionRequest

logger = logging.getLogger(__name__)

INGRESS_GROUPS = ('networking.k8s.io', 'extensions')
INGRESS_RESOURCE = 'ingresses'

# Operations that can change the domains an ingress claims
CHECKED_OPERATIONS = ('CREATE', 'UPDATE')


@dataclass(frozen=True)
class Verdict:
    allowed: bool
    reason: str = ''

    @classmethod
    def allow(cls) -> 'Verdict':
        return cls(True)

    @classmethod
    def deny(cls, reason: str) -> 'Verdict':
        return cls(False, reason)


class AdmissionDecisionEngine:
    """Stateless per-request evaluation over a shared registry and index"""

    def __init__(self, registry: ProviderRegistry, index: DomainClaimIndex, admit_all: bool = False):
        self.registry = registry
        self.index = index
        self.admit_all = admit_all

    def decide(self, request: AdmissionRequest) -> Verdict:
        """Allow or deny a single ingress admission request"""
        if self.admit_all:
            logger.warning("admitAll flag is set to true. Allowing Ingress admission review request "
                           "to pass through without validation.")
            return Verdict.allow()

        try:
            self._evaluate(request)
        except IngressClaimError as e:
            return Verdict.deny(str(e))
        return Verdict.allow()

    def _evaluate(self, request: AdmissionRequest) -> None:
        if not self.index.ready:
            raise IndexUnavailableError(
                "Domain claim index has not completed its initial sync, retry the request"
            )

        resource = request.resource
        if resource.group not in INGRESS_GROUPS or resource.resource != INGRESS_RESOURCE:
            raise ResourceMismatchError(f"Incoming resource: {resource} is not an Ingress resource")

        if request.operation not in CHECKED_OPERATIONS:
            logger.debug(f"Skipping checks for {request.operation} on {request.namespace}/{request.name}")
            return

        ingress = self.decode_ingress(request)
        logger.debug(f"Decoded Ingress {ingress}")

        provider = self.registry.resolve(ingress)
        logger.debug(f"Ingress {ingress.identity} resolved to provider {provider.name}")

        error = provider.validate_semantics(ingress)
        if error is not None:
            raise SemanticValidationError(ingress, f"Ingress validation checks failed: {error}")

        self.check_domain_claims(ingress, provider)
        logger.info(f"Ingress {ingress.name} in namespace {ingress.namespace} contains no duplicate domains.")

    def decode_ingress(self, request: AdmissionRequest) -> Ingress:
        if request.object is None:
            raise DecodeError("Admission review request does not carry an Ingress object")
        try:
            return Ingress.from_dict(request.object, namespace=request.namespace)
        except DecodeError as e:
            raise DecodeError(
                "Failed to decode the raw object resource on the admission review request "
                f"into an Ingress resource: {e}"
            ) from e

    def check_domain_claims(self, ingress: Ingress, provider: ClaimProvider) -> None:
        """Raise DomainConflictError on the first domain owned by another ingress"""
        for domain in provider.get_domains(ingress):
            for owner in self.index.lookup_by_domain(provider.name, domain):
                if owner != ingress.identity:
                    raise DomainConflictError(domain, owner)
