# bargainer/tools/schemas.py

"""Argument models for each tool; their JSON schemas are the tool inputs."""

from typing import Any

from pydantic import BaseModel, ConfigDict, Field

from bargainer.config.settings import Settings
from bargainer.models.search_params import DealFilter, SearchParams


class _Args(BaseModel):
    model_config = ConfigDict(populate_by_name=True, extra="ignore")


class SearchDealsArgs(SearchParams):
    """Search for deals across sources by text query and filters."""


class TopDealsArgs(_Args):
    """Top / trending deals from all or specific sources."""

    limit: int = Field(
        default=Settings.DEFAULT_LIMIT, ge=1, le=Settings.MAX_LIMIT
    )
    sources: list[str] | None = None


class FilterDealsArgs(DealFilter):
    """Filter a list of deals from an earlier result."""

    deals: list[dict[str, Any]]


class DealDetailsArgs(_Args):
    """Look up one deal by id, optionally at a given source."""

    deal_id: str = Field(alias="dealId", min_length=1)
    source: str | None = None


class CompareDealsArgs(_Args):
    """Group similar deals and keep the best of each group."""

    deals: list[dict[str, Any]]


class NoArgs(_Args):
    """No parameters."""
