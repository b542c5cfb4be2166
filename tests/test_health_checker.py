# tests/test_health_checker.py

"""Tests for the provider health checker service."""

import unittest
from unittest.mock import MagicMock, patch

from bargainer.services.health_checker import (
    HealthChecker,
    HealthResult,
    probe_provider,
)


def _make(
    source_id: str = "dealnews",
    status_code: int | None = 200,
    error: Exception | None = None,
) -> MagicMock:
    """Build a mock provider whose session answers with *status_code*."""
    provider = MagicMock()
    provider.get_source_name.return_value = source_id
    provider.base_url = f"https://{source_id}.example.com"
    provider._build_headers.return_value = {"Accept": "*/*"}
    if error is not None:
        provider.session.get.side_effect = error
    else:
        resp = MagicMock()
        resp.status_code = status_code
        provider.session.get.return_value = resp
    return provider


class TestProbeProvider(unittest.TestCase):
    """Tests for the per-provider health probe."""

    def test_ok_status(self) -> None:
        result = probe_provider(_make())
        self.assertEqual(result.status, "ok")
        self.assertEqual(result.message, "")
        self.assertGreaterEqual(result.latency_ms, 0)

    def test_client_error_still_reachable(self) -> None:
        """A 401 from an API root means the host answered."""
        result = probe_provider(_make(status_code=401))
        self.assertEqual(result.status, "ok")
        self.assertIn("401", result.message)

    def test_down_on_server_error(self) -> None:
        result = probe_provider(_make(status_code=503))
        self.assertEqual(result.status, "down")
        self.assertIn("503", result.message)

    def test_down_on_exception(self) -> None:
        result = probe_provider(
            _make(error=ConnectionError("Connection refused"))
        )
        self.assertEqual(result.status, "down")
        self.assertIn("Connection refused", result.message)

    @patch("bargainer.services.health_checker.time.monotonic")
    def test_slow_status(self, mock_monotonic: MagicMock) -> None:
        mock_monotonic.side_effect = [0.0, 6.0]
        result = probe_provider(_make())
        self.assertEqual(result.status, "slow")
        self.assertEqual(result.latency_ms, 6000.0)

    def test_probes_base_url_with_provider_headers(self) -> None:
        provider = _make()
        probe_provider(provider)
        args, kwargs = provider.session.get.call_args
        self.assertEqual(args[0], "https://dealnews.example.com")
        self.assertEqual(kwargs["headers"], {"Accept": "*/*"})


class TestHealthChecker(unittest.IsolatedAsyncioTestCase):
    """HealthChecker.check_all probes every provider."""

    async def test_check_all(self) -> None:
        checker = HealthChecker([
            _make("slickdeals"),
            _make("dealnews", error=TimeoutError("timed out")),
        ])
        results = await checker.check_all()
        self.assertEqual(len(results), 2)
        self.assertTrue(all(isinstance(r, HealthResult) for r in results))
        self.assertEqual(
            {r.source_id: r.status for r in results},
            {"slickdeals": "ok", "dealnews": "down"},
        )

    async def test_empty(self) -> None:
        self.assertEqual(await HealthChecker([]).check_all(), [])


if __name__ == "__main__":
    unittest.main()
