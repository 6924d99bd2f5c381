"""
ATS claim provider
Default owner of every ingress; domains come from annotations
"""

from typing import List, Optional

from ..errors import SemanticValidationError
from ..ingress import Ingress, append_non_empty, sanitize
from .base import ClaimProvider, annotation_list, ingress_class

ATS = 'ATS'

# Default domain of the ingress
DEFAULT_DOMAIN = 'default_domain'

# Domain aliases, comma separated
ALIASES = 'aliases'

# Ports, comma separated
PORTS = 'ports'


class ATSProvider(ClaimProvider):
    """Serves ingresses with no class annotation or class ATS"""

    name = ATS

    def serves_ingress(self, ingress: Ingress) -> bool:
        cls = ingress_class(ingress)
        return cls is None or cls == ATS

    def get_domains(self, ingress: Ingress) -> List[str]:
        domains = []
        if self.serves_ingress(ingress):
            append_non_empty(domains, self.get_default_domain(ingress))
            append_non_empty(domains, *self.get_aliases(ingress))
        return domains

    def validate_semantics(self, ingress: Ingress) -> Optional[SemanticValidationError]:
        if not self.serves_ingress(ingress):
            return None

        if ingress.default_backend is None:
            return self._fail(ingress, "does not have a default backend specified.")

        if not self.get_ports(ingress):
            return self._fail(ingress, "does not have a ports annotation specified.")

        if not self.get_default_domain(ingress):
            return self._fail(ingress, "does not have a default_domain annotation specified.")

        return None

    def get_default_domain(self, ingress: Ingress) -> str:
        return sanitize(ingress.annotations.get(DEFAULT_DOMAIN))

    def get_aliases(self, ingress: Ingress) -> List[str]:
        return append_non_empty([], *annotation_list(ingress.annotations, ALIASES))

    def get_ports(self, ingress: Ingress) -> List[str]:
        return append_non_empty([], *annotation_list(ingress.annotations, PORTS))
