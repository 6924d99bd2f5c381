"""
Provider registry
Resolves an ingress, or a provider name, to its claim provider
"""

import logging
from typing import Callable, Dict, Iterable, List, Optional

from ..ingress import Ingress
from .ats import ATS, ATSProvider
from .base import ClaimProvider
from .istio import ISTIO, IstioProvider

logger = logging.getLogger(__name__)

# Provider kinds that can be enabled through configuration
PROVIDER_KINDS: Dict[str, Callable[[], ClaimProvider]] = {
    ATS: ATSProvider,
    ISTIO: IstioProvider,
}


class ProviderRegistry:
    """Holds registered providers in resolution order"""

    def __init__(self, providers: Iterable[ClaimProvider], default: str = ATS):
        self._providers: Dict[str, ClaimProvider] = {}
        for provider in providers:
            if provider.name in self._providers:
                raise ValueError(f"Provider {provider.name} registered twice")
            self._providers[provider.name] = provider

        if default not in self._providers:
            raise ValueError(f"Default provider {default} is not registered")
        self._default = self._providers[default]

    @classmethod
    def from_names(cls, names: Iterable[str]) -> 'ProviderRegistry':
        """Build a registry from configured provider identities"""
        providers = []
        for name in names:
            name = name.strip()
            if not name:
                continue
            if name not in PROVIDER_KINDS:
                raise ValueError(
                    f"Unknown provider {name}, expected one of {', '.join(PROVIDER_KINDS)}"
                )
            providers.append(PROVIDER_KINDS[name]())
        registry = cls(providers)
        logger.info(f"Registered ingress claim providers: {', '.join(registry.names)}")
        return registry

    @property
    def names(self) -> List[str]:
        return list(self._providers)

    def default(self) -> ClaimProvider:
        return self._default

    def resolve(self, ingress: Ingress) -> ClaimProvider:
        """First provider serving the ingress, else the default"""
        for provider in self._providers.values():
            if provider.serves_ingress(ingress):
                return provider
        return self._default

    def by_name(self, name: str) -> Optional[ClaimProvider]:
        return self._providers.get(name)

    def index_functions(self) -> Dict[str, Callable]:
        """Per-provider functions mapping a stored object to its claimed domains"""
        return {
            name: (lambda obj, p=provider: p.claim_domains(obj)[1])
            for name, provider in self._providers.items()
        }
