"""
Verifier construction from configuration.

There is no process-wide default verifier: callers build one explicitly and
pass it to whatever needs it.
"""

from typing import Optional

import httpx

from idtoken_shared.config import VerifierConfig, get_config
from idtoken_shared.logging import get_logger
from idtoken_shared.metrics import MetricsCollector
from .certs.provider import CachedURLCertsProvider, CertsProvider, StaticCertsProvider
from .validation.verifier import GoogleTokenVerifier


def create_certs_provider(
    config: VerifierConfig,
    *,
    client: Optional[httpx.Client] = None,
    metrics: Optional[MetricsCollector] = None,
) -> CertsProvider:
    """Build the provider named by the configuration."""
    if config.static_certs_path:
        provider = StaticCertsProvider()
        provider.load_from_source(config.static_certs_path)
        return provider

    return CachedURLCertsProvider(
        config.certs_url,
        refresh_lead_time=config.refresh_lead_time_seconds,
        timeout=config.fetch_timeout_seconds,
        client=client,
        metrics=metrics,
    )


def create_verifier(
    config: Optional[VerifierConfig] = None,
    *,
    client: Optional[httpx.Client] = None,
) -> GoogleTokenVerifier:
    """Build a verifier and its certs provider from configuration."""
    config = config or get_config()
    metrics = MetricsCollector()
    provider = create_certs_provider(config, client=client, metrics=metrics)
    get_logger("idtoken.bootstrap").info(
        "Verifier created",
        env=config.env,
        provider=type(provider).__name__
    )
    return GoogleTokenVerifier(provider, metrics=metrics)
