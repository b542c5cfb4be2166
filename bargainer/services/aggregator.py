# bargainer/services/aggregator.py

"""Fans requests out to deal providers and merges what comes back."""

import asyncio
import logging
import math
from collections.abc import Callable, Mapping
from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass, field
from typing import Any

from bargainer.config.settings import Settings
from bargainer.filters.deal_comparator import compare_deals
from bargainer.filters.deal_filter import apply_search_filters, filter_deals
from bargainer.filters.deal_sorter import sort_deals
from bargainer.filters.deal_validator import DealValidator
from bargainer.models.deal import Deal
from bargainer.models.search_params import DealFilter, SearchParams
from bargainer.providers.base_provider import DealProvider

logger = logging.getLogger("bargainer.aggregator")


@dataclass
class SourceReport:
    """Outcome of one provider call within a fan-out."""

    source: str
    status: str  # "ok", "error", "timeout"
    count: int = 0
    message: str = ""


@dataclass
class AggregateResult:
    """Merged deals plus per-source diagnostics."""

    deals: list[Deal] = field(default_factory=list)
    reports: list[SourceReport] = field(default_factory=list)
    invalid_count: int = 0
    excluded_count: int = 0

    @property
    def failed_sources(self) -> list[str]:
        """Names of providers that raised or timed out."""
        return [r.source for r in self.reports if r.status != "ok"]


class DealAggregator:
    """Coordinates provider fan-out, filtering, ranking and comparison.

    The provider registry belongs to this instance; it is only changed
    through :meth:`add_provider` / :meth:`remove_provider` and is read
    without locking while requests are in flight.

    Provider calls run on a thread pool owned by the aggregator, not on
    the event loop's default executor, so a call abandoned after its
    timeout does not hold up ``asyncio.run`` on exit. Call :meth:`close`
    when done.
    """

    def __init__(
        self,
        providers: Mapping[str, DealProvider] | None = None,
        provider_timeout: float | None = None,
    ) -> None:
        self._providers: dict[str, DealProvider] = dict(providers or {})
        self.provider_timeout = (
            provider_timeout
            if provider_timeout is not None
            else Settings.PROVIDER_TIMEOUT
        )
        self._executor = ThreadPoolExecutor(
            thread_name_prefix="bargainer-provider"
        )

    def close(self) -> None:
        """Release the worker pool without waiting for abandoned calls."""
        self._executor.shutdown(wait=False, cancel_futures=True)

    def _run(
        self, func: Callable[..., Any], *args: Any,
    ) -> "asyncio.Future[Any]":
        """Schedule a blocking provider call on the aggregator's pool."""
        loop = asyncio.get_running_loop()
        return loop.run_in_executor(self._executor, func, *args)

    # ── Registry ─────────────────────────────────────────

    def add_provider(self, name: str, provider: DealProvider) -> None:
        """Register *provider* under *name* (replaces an existing one)."""
        self._providers[name] = provider
        logger.info("Registered provider '%s'", name)

    def remove_provider(self, name: str) -> None:
        """Unregister *name*; unknown names are ignored."""
        if self._providers.pop(name, None) is not None:
            logger.info("Removed provider '%s'", name)

    def get_providers(self) -> list[str]:
        """Registered provider names in registration order."""
        return list(self._providers)

    def _select(self, sources: list[str] | None) -> list[str]:
        """Requested registered providers, or all when none requested."""
        if sources:
            return [s for s in sources if s in self._providers]
        return list(self._providers)

    # ── Fan-out ──────────────────────────────────────────

    async def _call_one(
        self,
        name: str,
        call: Callable[[DealProvider], list[Deal]],
    ) -> tuple[list[Deal], SourceReport]:
        """Run one blocking provider call in a thread, bounded by the timeout.

        Never raises: failures become an empty list plus a report.
        """
        provider = self._providers[name]
        try:
            deals = await asyncio.wait_for(
                self._run(call, provider),
                timeout=self.provider_timeout,
            )
        except asyncio.TimeoutError:
            logger.warning(
                "Provider '%s' timed out after %.1fs",
                name,
                self.provider_timeout,
            )
            return [], SourceReport(
                source=name,
                status="timeout",
                message=f"timed out after {self.provider_timeout:g}s",
            )
        except Exception as exc:
            logger.error(
                "Provider '%s' failed: %s", name, exc, exc_info=True,
            )
            return [], SourceReport(
                source=name, status="error", message=str(exc),
            )
        return list(deals), SourceReport(
            source=name, status="ok", count=len(deals),
        )

    async def _fan_out(
        self,
        names: list[str],
        call: Callable[[DealProvider], list[Deal]],
    ) -> AggregateResult:
        """Call every named provider concurrently and wait for all."""
        result = AggregateResult()
        if not names:
            return result

        outcomes = await asyncio.gather(
            *(self._call_one(name, call) for name in names)
        )

        merged: list[Deal] = []
        for deals, report in outcomes:
            merged.extend(deals)
            result.reports.append(report)

        result.deals, result.invalid_count = DealValidator.validate(
            merged
        )
        return result

    # ── Operations ───────────────────────────────────────

    async def collect_search(
        self, params: SearchParams,
    ) -> AggregateResult:
        """Search, filter, sort and truncate, keeping diagnostics."""
        names = self._select(params.sources)
        logger.info(
            "Searching '%s' across %d providers: %s",
            params.query,
            len(names),
            ", ".join(names),
        )
        result = await self._fan_out(
            names, lambda p: p.search_deals(params)
        )

        total = len(result.deals)
        filtered, result.excluded_count = apply_search_filters(
            result.deals, params
        )
        ordered = sort_deals(
            filtered,
            params.sort_by or Settings.DEFAULT_SORT_BY,
            params.sort_order or Settings.DEFAULT_SORT_ORDER,
        )
        result.deals = ordered[: params.limit]

        logger.info(
            "Search '%s': %d merged, %d excluded, %d returned, "
            "%d failed sources",
            params.query,
            total,
            result.excluded_count,
            len(result.deals),
            len(result.failed_sources),
        )
        return result

    async def search_deals(self, params: SearchParams) -> list[Deal]:
        """Deals matching *params* from the selected providers."""
        result = await self.collect_search(params)
        return result.deals

    async def collect_top_deals(
        self,
        limit: int = Settings.DEFAULT_LIMIT,
        sources: list[str] | None = None,
    ) -> AggregateResult:
        """Top deals with diagnostics.

        Each provider is asked for ``ceil(limit / n)`` deals, an even
        split rather than a true global top-k.
        """
        names = self._select(sources)
        if not names:
            return AggregateResult()

        per_provider = math.ceil(limit / len(names))
        result = await self._fan_out(
            names, lambda p: p.get_top_deals(per_provider)
        )
        result.deals = sort_deals(result.deals, "popularity", "desc")[
            :limit
        ]
        return result

    async def get_top_deals(
        self,
        limit: int = Settings.DEFAULT_LIMIT,
        sources: list[str] | None = None,
    ) -> list[Deal]:
        """Most popular deals across the selected providers."""
        result = await self.collect_top_deals(limit, sources)
        return result.deals

    async def get_deal_details(
        self, deal_id: str, source: str | None = None,
    ) -> Deal | None:
        """Resolve one deal.

        With a registered *source* the call is delegated there.
        Otherwise providers are tried one at a time, in registration
        order, and the first hit wins.
        """
        if source and source in self._providers:
            names = [source]
        else:
            names = list(self._providers)

        for name in names:
            provider = self._providers[name]
            try:
                deal = await asyncio.wait_for(
                    self._run(provider.get_deal_details, deal_id),
                    timeout=self.provider_timeout,
                )
            except asyncio.TimeoutError:
                logger.warning(
                    "Provider '%s' timed out resolving deal %s",
                    name,
                    deal_id,
                )
                continue
            except Exception as exc:
                logger.error(
                    "Provider '%s' failed resolving deal %s: %s",
                    name,
                    deal_id,
                    exc,
                    exc_info=True,
                )
                continue
            if deal is not None and DealValidator.problem(deal) is None:
                return deal

        logger.info("Deal %s not found", deal_id)
        return None

    @staticmethod
    def filter_deals(
        deals: list[Deal], criteria: DealFilter,
    ) -> list[Deal]:
        """Pure filter over an already-fetched set."""
        return filter_deals(deals, criteria)

    @staticmethod
    def compare_deals(deals: list[Deal]) -> list[Deal]:
        """One best deal per near-duplicate group."""
        return compare_deals(deals)
