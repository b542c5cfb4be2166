# bargainer/tools/deal_tools.py

"""Tool-call façade over the deal aggregator.

Every tool takes a JSON object and returns a JSON-serialisable result
of the form ``{"content": [{"type": "text", "text": "<json>"}]}``.
Failures (bad parameters, unknown tool names, unexpected errors) come
back as an ``Error: ...`` text result; nothing is raised to the caller.
"""

import json
import logging
from collections.abc import Awaitable, Callable
from dataclasses import dataclass
from typing import Any

from pydantic import BaseModel

from bargainer.filters.deal_validator import DealValidator
from bargainer.models.deal import SUMMARY_FIELDS, Deal
from bargainer.services.aggregator import DealAggregator
from bargainer.tools.schemas import (
    CompareDealsArgs,
    DealDetailsArgs,
    FilterDealsArgs,
    NoArgs,
    SearchDealsArgs,
    TopDealsArgs,
)

logger = logging.getLogger("bargainer.tools")

TOP_DEAL_FIELDS: tuple[str, ...] = (
    "id",
    "title",
    "price",
    "original_price",
    "discount_percentage",
    "rating",
    "store",
    "url",
    "source",
    "popularity",
)

Payload = dict[str, Any]


@dataclass(frozen=True)
class ToolSpec:
    """Name, description and argument model of one tool."""

    name: str
    description: str
    args_model: type[BaseModel]

    def definition(self) -> dict[str, Any]:
        return {
            "name": self.name,
            "description": self.description,
            "inputSchema": self.args_model.model_json_schema(
                by_alias=True
            ),
        }


TOOL_SPECS: tuple[ToolSpec, ...] = (
    ToolSpec(
        "search_deals",
        "Search for deals across multiple sources based on text "
        "query and filters",
        SearchDealsArgs,
    ),
    ToolSpec(
        "get_top_deals",
        "Get top/trending deals from all or specific sources",
        TopDealsArgs,
    ),
    ToolSpec(
        "filter_deals",
        "Filter deals using advanced criteria",
        FilterDealsArgs,
    ),
    ToolSpec(
        "get_deal_details",
        "Get detailed information about a specific deal",
        DealDetailsArgs,
    ),
    ToolSpec(
        "compare_deals",
        "Compare similar deals and find the best options",
        CompareDealsArgs,
    ),
    ToolSpec(
        "get_available_sources",
        "Get list of available deal sources/providers",
        NoArgs,
    ),
)


def text_result(payload: Payload) -> dict[str, Any]:
    """Wrap a payload as a single JSON text block."""
    return {
        "content": [
            {"type": "text", "text": json.dumps(payload, indent=2)},
        ],
    }


def error_result(message: str) -> dict[str, Any]:
    """Wrap an error message as a text block flagged as an error."""
    return {
        "content": [{"type": "text", "text": f"Error: {message}"}],
        "isError": True,
    }


def load_deals(raw_deals: list[dict[str, Any]]) -> list[Deal]:
    """Rebuild caller-supplied deals, dropping ones that fail validation."""
    deals: list[Deal] = []
    for raw in raw_deals:
        try:
            deals.append(Deal.from_dict(raw))
        except (TypeError, ValueError) as exc:
            logger.debug("Skipped unreadable deal input: %s", exc)
    valid, _dropped = DealValidator.validate(deals)
    return valid


class DealTools:
    """Dispatches named tool calls to a :class:`DealAggregator`."""

    def __init__(self, aggregator: DealAggregator) -> None:
        self.aggregator = aggregator
        self._handlers: dict[
            str, Callable[[dict[str, Any]], Awaitable[Payload]]
        ] = {
            "search_deals": self._search_deals,
            "get_top_deals": self._get_top_deals,
            "filter_deals": self._filter_deals,
            "get_deal_details": self._get_deal_details,
            "compare_deals": self._compare_deals,
            "get_available_sources": self._get_available_sources,
        }

    @staticmethod
    def list_tools() -> list[dict[str, Any]]:
        """Definitions (name, description, JSON input schema) of all tools."""
        return [spec.definition() for spec in TOOL_SPECS]

    async def call_tool(
        self, name: str, arguments: dict[str, Any] | None = None,
    ) -> dict[str, Any]:
        """Run tool *name* with *arguments*; never raises."""
        try:
            handler = self._handlers.get(name)
            if handler is None:
                raise ValueError(f"Unknown tool: {name}")
            payload = await handler(arguments or {})
            return text_result(payload)
        except Exception as exc:
            logger.warning(
                "Tool '%s' failed: %s", name, exc, exc_info=True,
            )
            return error_result(str(exc) or type(exc).__name__)

    # ── Handlers ─────────────────────────────────────────

    async def _search_deals(self, arguments: dict[str, Any]) -> Payload:
        params = SearchDealsArgs.model_validate(arguments)
        result = await self.aggregator.collect_search(params)
        return {
            "success": True,
            "results": len(result.deals),
            "deals": [d.to_dict(SUMMARY_FIELDS) for d in result.deals],
            "failed_sources": result.failed_sources,
        }

    async def _get_top_deals(self, arguments: dict[str, Any]) -> Payload:
        args = TopDealsArgs.model_validate(arguments)
        result = await self.aggregator.collect_top_deals(
            args.limit, args.sources
        )
        return {
            "success": True,
            "results": len(result.deals),
            "deals": [d.to_dict(TOP_DEAL_FIELDS) for d in result.deals],
            "failed_sources": result.failed_sources,
        }

    async def _filter_deals(self, arguments: dict[str, Any]) -> Payload:
        args = FilterDealsArgs.model_validate(arguments)
        deals = load_deals(args.deals)
        filtered = self.aggregator.filter_deals(deals, args)
        return {
            "success": True,
            "original_count": len(args.deals),
            "filtered_count": len(filtered),
            "deals": [d.to_dict() for d in filtered],
        }

    async def _get_deal_details(self, arguments: dict[str, Any]) -> Payload:
        args = DealDetailsArgs.model_validate(arguments)
        deal = await self.aggregator.get_deal_details(
            args.deal_id, args.source
        )
        return {
            "success": deal is not None,
            "deal": deal.to_dict() if deal is not None else None,
        }

    async def _compare_deals(self, arguments: dict[str, Any]) -> Payload:
        args = CompareDealsArgs.model_validate(arguments)
        deals = load_deals(args.deals)
        best = self.aggregator.compare_deals(deals)
        return {
            "success": True,
            "original_count": len(args.deals),
            "best_deals_count": len(best),
            "best_deals": [d.to_dict() for d in best],
        }

    async def _get_available_sources(
        self, arguments: dict[str, Any],
    ) -> Payload:
        NoArgs.model_validate(arguments)
        return {
            "success": True,
            "sources": self.aggregator.get_providers(),
        }
