"""Builders for ingress objects and admission requests used across tests."""

from typing import Any, Dict, List, Optional

from ingress_claim.ingress import Ingress
from ingress_claim.review import AdmissionRequest

BACKEND = {'service': {'name': 'test-svc', 'port': {'number': 80}}}


def ingress_dict(name: str = 'test-ingress', namespace: str = 'test-namespace',
                 annotations: Optional[Dict[str, str]] = None,
                 rules: Optional[List[Dict[str, Any]]] = None,
                 backend: Optional[Dict[str, Any]] = None) -> Dict[str, Any]:
    spec: Dict[str, Any] = {}
    if backend is not None:
        spec['defaultBackend'] = backend
    if rules is not None:
        spec['rules'] = rules
    return {
        'apiVersion': 'networking.k8s.io/v1',
        'kind': 'Ingress',
        'metadata': {'name': name, 'namespace': namespace, 'annotations': annotations or {}},
        'spec': spec,
    }


def ats_ingress(name: str = 'test-ingress', namespace: str = 'test-namespace',
                default_domain: str = 'app-domain-test.company.com',
                aliases: str = 'app-domain-default.company.com, app-domain-alias.company.com',
                ports: str = '80') -> Ingress:
    annotations = {'default_domain': default_domain, 'aliases': aliases, 'ports': ports}
    return Ingress.from_dict(ingress_dict(name, namespace, annotations, backend=BACKEND))


def istio_ingress(name: str = 'test-ingress', namespace: str = 'test-namespace',
                  hosts: tuple = ('x.com', 'y.com')) -> Ingress:
    rules = [{'host': host} for host in hosts]
    return Ingress.from_dict(
        ingress_dict(name, namespace, {'kubernetes.io/ingress.class': 'istio'}, rules)
    )


def admission_request(obj: Any, operation: str = 'CREATE',
                      resource: Optional[Dict[str, str]] = None) -> AdmissionRequest:
    metadata = obj.get('metadata', {}) if isinstance(obj, dict) else {}
    return AdmissionRequest.model_validate({
        'uid': 'b6a9a4e5-0000-4000-8000-000000000001',
        'kind': {'group': 'networking.k8s.io', 'version': 'v1', 'kind': 'Ingress'},
        'resource': resource or {'group': 'networking.k8s.io', 'version': 'v1', 'resource': 'ingresses'},
        'name': metadata.get('name', ''),
        'namespace': metadata.get('namespace', ''),
        'operation': operation,
        'userInfo': {'username': 'tester'},
        'object': obj,
    })
