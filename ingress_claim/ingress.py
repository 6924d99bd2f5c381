"""
Read-only ingress snapshots
Built from the camelCase JSON shape the API server sends on admission
requests and watch events
"""

from dataclasses import dataclass, field
from typing import Any, Dict, List, NamedTuple, Optional, Tuple

from .errors import DecodeError


def sanitize(value: Optional[str]) -> str:
    """Lower-case a string and drop every whitespace character"""
    if not value:
        return ''
    return ''.join(value.split()).lower()


def append_non_empty(items: List[str], *values: str) -> List[str]:
    """Append sanitized values, skipping empties and repeats"""
    for value in values:
        value = sanitize(value)
        if value and value not in items:
            items.append(value)
    return items


class IngressIdentity(NamedTuple):
    namespace: str
    name: str

    def __str__(self):
        return f"{self.namespace}/{self.name}"


@dataclass(frozen=True)
class IngressRule:
    host: str = ''


@dataclass(frozen=True)
class Ingress:
    namespace: str
    name: str
    annotations: Dict[str, str] = field(default_factory=dict)
    rules: Tuple[IngressRule, ...] = ()
    default_backend: Optional[Dict[str, Any]] = None

    @property
    def identity(self) -> IngressIdentity:
        return IngressIdentity(self.namespace, self.name)

    @classmethod
    def from_dict(cls, obj: Any, namespace: str = '') -> 'Ingress':
        """Parse an ingress object; ``namespace`` fills in a missing metadata.namespace"""
        if not isinstance(obj, dict):
            raise DecodeError(f"expected an object, got {type(obj).__name__}")

        metadata = _mapping(obj, 'metadata')
        spec = _mapping(obj, 'spec')

        annotations = _mapping(metadata, 'annotations')
        for key, value in annotations.items():
            if not isinstance(value, str):
                raise DecodeError(f"annotation {key} must be a string")

        # networking.k8s.io/v1 renamed spec.backend to spec.defaultBackend
        backend = spec.get('defaultBackend')
        if backend is None:
            backend = spec.get('backend')
        if backend is not None and not isinstance(backend, dict):
            raise DecodeError("spec.defaultBackend must be an object")

        raw_rules = spec.get('rules') or []
        if not isinstance(raw_rules, list):
            raise DecodeError("spec.rules must be a list")
        rules = tuple(_parse_rule(rule) for rule in raw_rules)

        return cls(
            namespace=_string(metadata, 'namespace') or namespace,
            name=_string(metadata, 'name'),
            annotations=dict(annotations),
            rules=rules,
            default_backend=backend,
        )


def _parse_rule(rule: Any) -> IngressRule:
    if not isinstance(rule, dict):
        raise DecodeError("spec.rules entries must be objects")
    paths = _mapping(rule, 'http').get('paths')
    if paths is not None and not isinstance(paths, list):
        raise DecodeError("spec.rules[].http.paths must be a list")
    return IngressRule(host=_string(rule, 'host'))


def _mapping(obj: Dict[str, Any], key: str) -> Dict[str, Any]:
    value = obj.get(key)
    if value is None:
        return {}
    if not isinstance(value, dict):
        raise DecodeError(f"{key} must be an object")
    return value


def _string(obj: Dict[str, Any], key: str) -> str:
    value = obj.get(key)
    if value is None:
        return ''
    if not isinstance(value, str):
        raise DecodeError(f"{key} must be a string")
    return value
