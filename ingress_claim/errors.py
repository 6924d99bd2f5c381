"""
Error taxonomy for admission decisions
Every error here ends a single admission request with a Deny verdict
"""


class IngressClaimError(Exception):
    """Base class for all admission errors"""


class DecodeError(IngressClaimError):
    """Malformed admission payload or ingress body"""


class ResourceMismatchError(IngressClaimError):
    """Admission request targets something other than an ingress"""


class NotAnIngressError(IngressClaimError):
    """Index function was handed an object that is not an ingress"""

    def __init__(self, obj):
        super().__init__(f"Resource is not an Ingress kind: {type(obj).__name__}")
        self.obj = obj


class SemanticValidationError(IngressClaimError):
    """Provider specific structural rule violated"""

    def __init__(self, ingress, message):
        super().__init__(message)
        self.namespace = ingress.namespace
        self.name = ingress.name


class DomainConflictError(IngressClaimError):
    """Claimed domain already belongs to a different ingress"""

    def __init__(self, domain, owner):
        super().__init__(
            f"Domain {domain} already exists. Ingress {owner.name} in namespace "
            f"{owner.namespace} owns this domain."
        )
        self.domain = domain
        self.owner = owner


class IndexUnavailableError(IngressClaimError):
    """Domain claim index not synced yet, or provider index missing"""


class IndexTimeoutError(IndexUnavailableError):
    """Index read stalled; the caller may retry the admission"""
