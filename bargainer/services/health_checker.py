# bargainer/services/health_checker.py

"""Provider connectivity health checker."""

import asyncio
import logging
import time
from dataclasses import dataclass

from bargainer.providers.base_provider import BaseProvider

logger = logging.getLogger("bargainer.health")

_HEALTH_TIMEOUT = 10  # seconds per provider
_SLOW_MS = 5000


@dataclass
class HealthResult:
    """Result of a single provider health check."""

    source_id: str
    status: str  # "ok", "slow", "down"
    latency_ms: float
    message: str


def probe_provider(provider: BaseProvider) -> HealthResult:
    """GET the provider's base URL and classify the outcome.

    Any HTTP answer below 500 counts as reachable: API roots often
    reply 401/404 without credentials or a path.
    """
    source_id = provider.get_source_name()
    start = time.monotonic()
    try:
        resp = provider.session.get(
            provider.base_url,
            headers=provider._build_headers(),
            timeout=_HEALTH_TIMEOUT,
        )
        elapsed_ms = (time.monotonic() - start) * 1000

        if resp.status_code >= 500:
            return HealthResult(
                source_id=source_id,
                status="down",
                latency_ms=elapsed_ms,
                message=f"HTTP {resp.status_code}",
            )

        if elapsed_ms > _SLOW_MS:
            return HealthResult(
                source_id=source_id,
                status="slow",
                latency_ms=elapsed_ms,
                message="High latency",
            )

        return HealthResult(
            source_id=source_id,
            status="ok",
            latency_ms=elapsed_ms,
            message=(
                "" if resp.status_code == 200
                else f"HTTP {resp.status_code}"
            ),
        )

    except Exception as exc:
        elapsed_ms = (time.monotonic() - start) * 1000
        return HealthResult(
            source_id=source_id,
            status="down",
            latency_ms=elapsed_ms,
            message=str(exc)[:80],
        )


class HealthChecker:
    """Runs concurrent health probes against registered providers."""

    def __init__(self, providers: list[BaseProvider]) -> None:
        self.providers = providers

    async def check_all(self) -> list[HealthResult]:
        """Probe every provider concurrently."""
        tasks = [
            asyncio.to_thread(probe_provider, provider)
            for provider in self.providers
        ]
        results: list[HealthResult] = list(await asyncio.gather(*tasks))
        for r in results:
            logger.info(
                "Health check %s: %s (%.0fms) %s",
                r.source_id,
                r.status,
                r.latency_ms,
                r.message,
            )
        return results
