"""
Istio claim provider
Only serves ingresses explicitly annotated for istio; domains are rule hosts
"""

from typing import List, Optional

from ..errors import SemanticValidationError
from ..ingress import Ingress, append_non_empty, sanitize
from .base import ClaimProvider, ingress_class

ISTIO = 'istio'


class IstioProvider(ClaimProvider):
    """Serves ingresses whose class annotation is exactly 'istio'"""

    name = ISTIO

    def serves_ingress(self, ingress: Ingress) -> bool:
        return ingress_class(ingress) == ISTIO

    def get_domains(self, ingress: Ingress) -> List[str]:
        hosts = []
        if self.serves_ingress(ingress):
            append_non_empty(hosts, *(rule.host for rule in ingress.rules))
        return hosts

    def validate_semantics(self, ingress: Ingress) -> Optional[SemanticValidationError]:
        if not self.serves_ingress(ingress):
            return None

        if ingress.default_backend is not None:
            return self._fail(
                ingress,
                "specifies a default backend which is currently NOT supported for provider "
                f"class: {ISTIO}"
            )

        for rule in ingress.rules:
            if not sanitize(rule.host):
                return self._fail(
                    ingress,
                    "specifies an IngressRule without a Host which is currently NOT supported "
                    f"for provider class: {ISTIO}"
                )

        return None
