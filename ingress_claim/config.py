"""
Service configuration
Defaults come from environment variables; command-line flags override them
"""

import argparse
import os
from dataclasses import dataclass, field
from typing import List, Optional, Sequence

ENV_PREFIX = 'INGRESS_CLAIM_'


def _env(name: str, default: str) -> str:
    return os.getenv(ENV_PREFIX + name, default)


def _env_bool(name: str, default: bool = False) -> bool:
    value = os.getenv(ENV_PREFIX + name)
    if value is None:
        return default
    return value.strip().lower() in ('1', 'true', 'yes')


def _split(value: str) -> List[str]:
    return [item.strip() for item in value.split(',') if item.strip()]


@dataclass
class Settings:
    port: int = 443
    log_file: str = '/var/log/k8s-ingress-claim.log'
    log_level: str = 'info'
    cert_file: str = '/etc/ssl/certs/k8s-ingress-claim/server.crt'
    key_file: str = '/etc/ssl/certs/k8s-ingress-claim/server-key.pem'
    client_ca_file: str = '/var/run/secrets/kubernetes.io/serviceaccount/ca.crt'
    client_auth: bool = False
    admit_all: bool = False
    providers: List[str] = field(default_factory=lambda: ['ATS', 'istio'])
    sync_timeout: float = 60
    lookup_timeout: float = 2

    @classmethod
    def from_env(cls) -> 'Settings':
        defaults = cls()
        return cls(
            port=int(_env('PORT', str(defaults.port))),
            log_file=_env('LOG_FILE', defaults.log_file),
            log_level=_env('LOG_LEVEL', defaults.log_level),
            cert_file=_env('CERT_FILE', defaults.cert_file),
            key_file=_env('KEY_FILE', defaults.key_file),
            client_ca_file=_env('CLIENT_CA_FILE', defaults.client_ca_file),
            client_auth=_env_bool('CLIENT_AUTH', defaults.client_auth),
            admit_all=_env_bool('ADMIT_ALL', defaults.admit_all),
            providers=_split(_env('PROVIDERS', ','.join(defaults.providers))),
            sync_timeout=float(_env('SYNC_TIMEOUT', str(defaults.sync_timeout))),
            lookup_timeout=float(_env('LOOKUP_TIMEOUT', str(defaults.lookup_timeout))),
        )


def _flag(value: str) -> bool:
    lowered = value.strip().lower()
    if lowered in ('1', 'true', 'yes'):
        return True
    if lowered in ('0', 'false', 'no'):
        return False
    raise argparse.ArgumentTypeError(f"expected a boolean, got {value!r}")


def build_parser(defaults: Settings) -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog='ingress-claim',
        description='Admission webhook rejecting ingresses that claim an already claimed domain',
    )
    parser.add_argument('--port', type=int, default=defaults.port, help='HTTPS server port.')
    parser.add_argument('--logFile', dest='log_file', default=defaults.log_file,
                        help='Log file name and full path.')
    parser.add_argument('--logLevel', dest='log_level', default=defaults.log_level,
                        help='The log level.')
    parser.add_argument('--certFile', dest='cert_file', default=defaults.cert_file,
                        help='The cert file for the https server.')
    parser.add_argument('--keyFile', dest='key_file', default=defaults.key_file,
                        help='The key file for the https server.')
    parser.add_argument('--clientCAFile', dest='client_ca_file', default=defaults.client_ca_file,
                        help='The cluster root CA that signs the apiserver cert.')
    parser.add_argument('--clientAuth', dest='client_auth', type=_flag, nargs='?', const=True,
                        default=defaults.client_auth,
                        help='True to verify client cert/auth during TLS handshake.')
    parser.add_argument('--admitAll', dest='admit_all', type=_flag, nargs='?', const=True,
                        default=defaults.admit_all,
                        help='True to admit all ingress without validation.')
    parser.add_argument('--providers', type=_split, default=defaults.providers,
                        help='Comma separated ingress claim providers to register.')
    parser.add_argument('--syncTimeout', dest='sync_timeout', type=float, default=defaults.sync_timeout,
                        help='Seconds to wait for the initial ingress listing.')
    parser.add_argument('--lookupTimeout', dest='lookup_timeout', type=float,
                        default=defaults.lookup_timeout,
                        help='Seconds an admission waits on the domain index before denying.')
    return parser


def load_settings(argv: Optional[Sequence[str]] = None) -> Settings:
    args = build_parser(Settings.from_env()).parse_args(argv)
    return Settings(**vars(args))
