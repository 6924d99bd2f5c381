#!/usr/bin/env python3
"""
Ingress Claim Webhook Service
Validating admission webhook that keeps ingress domains unique per claim provider
"""

import logging
import signal
import ssl
import sys
from typing import Optional, Sequence

import uvicorn

from .config import Settings, load_settings
from .engine import AdmissionDecisionEngine
from .index import ClaimStore, DomainClaimIndex
from .log import configure_logging
from .providers.registry import ProviderRegistry
from .watcher import IngressWatcher, load_kube_config
from .webhook import create_app

logger = logging.getLogger(__name__)


def signal_handler(signum, frame):
    """Handle shutdown signals received before the server takes over"""
    logger.info(f"[shutdown] Received signal {signum}, initiating graceful shutdown...")
    raise SystemExit(0)


def build_server(app, settings: Settings) -> uvicorn.Server:
    server_config = uvicorn.Config(
        app,
        host='0.0.0.0',
        port=settings.port,
        ssl_certfile=settings.cert_file,
        ssl_keyfile=settings.key_file,
        ssl_ca_certs=settings.client_ca_file,
        ssl_cert_reqs=ssl.CERT_REQUIRED if settings.client_auth else ssl.CERT_NONE,
        log_config=None,
        access_log=False,
    )
    return uvicorn.Server(server_config)


def main(argv: Optional[Sequence[str]] = None) -> int:
    settings = load_settings(argv)
    configure_logging(settings.log_level, settings.log_file)

    signal.signal(signal.SIGTERM, signal_handler)
    signal.signal(signal.SIGINT, signal_handler)

    try:
        registry = ProviderRegistry.from_names(settings.providers)
        load_kube_config()
    except Exception as e:
        logger.critical(f"FATAL ERROR: {e}")
        return 1

    if settings.admit_all:
        logger.warning("admitAll is enabled, every ingress admission request will be allowed")

    store = ClaimStore(registry.index_functions())
    index = DomainClaimIndex(lookup_timeout=settings.lookup_timeout)
    engine = AdmissionDecisionEngine(registry, index, admit_all=settings.admit_all)

    watcher = IngressWatcher(store)
    watcher.start()
    try:
        if not watcher.wait_for_sync(settings.sync_timeout):
            logger.critical("FATAL ERROR: Timed out waiting for the cache to sync")
            return 1
        index.set_source(store)

        server = build_server(create_app(engine), settings)
        logger.info(f"HTTPS server listening on port:{settings.port} "
                    f"with ClientAuthEnabled:{settings.client_auth}")
        try:
            server.run()
        except SystemExit:
            # uvicorn re-raises the shutdown signal once it has drained connections
            logger.info("[shutdown] HTTPS server stopped")
        except OSError as e:
            logger.critical(f"FATAL ERROR: Unable to start the HTTPS server: {e}")
            return 1
    finally:
        watcher.stop()

    logger.info("[shutdown] Service stopped cleanly")
    return 0


if __name__ == '__main__':
    sys.exit(main())
