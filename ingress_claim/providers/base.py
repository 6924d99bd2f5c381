"""
Claim provider interface
A provider recognizes the ingresses it owns and knows how they declare hosts
"""

from abc import ABC, abstractmethod
from typing import Any, Dict, List, Optional, Tuple

from ..errors import NotAnIngressError, SemanticValidationError
from ..ingress import Ingress

# Annotation selecting the controller class responsible for an ingress
INGRESS_CLASS = 'kubernetes.io/ingress.class'


class ClaimProvider(ABC):
    """Base class for ingress claim providers"""

    name: str = ''

    @abstractmethod
    def serves_ingress(self, ingress: Ingress) -> bool:
        """Check if the ingress falls under this provider class"""

    @abstractmethod
    def get_domains(self, ingress: Ingress) -> List[str]:
        """Sanitized domains claimed by the ingress, empty if not served"""

    @abstractmethod
    def validate_semantics(self, ingress: Ingress) -> Optional[SemanticValidationError]:
        """Provider specific checks; returns the first failure or None"""

    def claim_domains(self, obj: Any) -> Tuple[str, List[str]]:
        """Index function: domains this provider claims for a stored object"""
        ingress = as_ingress(obj)
        if not self.serves_ingress(ingress):
            return self.name, []
        return self.name, self.get_domains(ingress)

    def _fail(self, ingress: Ingress, reason: str) -> SemanticValidationError:
        return SemanticValidationError(
            ingress, f"Ingress {ingress.name} in namespace {ingress.namespace} {reason}"
        )

    def __repr__(self):
        return f"<{type(self).__name__} {self.name}>"


def ingress_class(ingress: Ingress) -> Optional[str]:
    return ingress.annotations.get(INGRESS_CLASS)


def as_ingress(obj: Any) -> Ingress:
    """Accept an Ingress or an ingress-shaped mapping, reject anything else"""
    if isinstance(obj, Ingress):
        return obj
    if isinstance(obj, dict) and obj.get('kind', 'Ingress') == 'Ingress' and 'metadata' in obj:
        return Ingress.from_dict(obj)
    raise NotAnIngressError(obj)


def annotation_list(annotations: Dict[str, str], key: str) -> List[str]:
    """Comma-separated annotation value split into raw entries"""
    value = annotations.get(key)
    if value is None:
        return []
    return value.split(',')
