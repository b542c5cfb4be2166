# bargainer/models/search_params.py

"""Validated request parameters for searches and filters.

Tool callers send camelCase keys (``minPrice``, ``sortBy``); Python
callers may use the snake_case field names directly.
"""

from typing import Literal

from pydantic import BaseModel, ConfigDict, Field

from bargainer.config.settings import Settings

SortField = Literal["price", "rating", "popularity", "date"]
SortOrder = Literal["asc", "desc"]


class _Params(BaseModel):
    model_config = ConfigDict(populate_by_name=True, extra="ignore")


class SearchParams(_Params):
    """Free-text query plus optional filters, ordering and a cap."""

    query: str
    category: str | None = None
    min_price: float | None = Field(default=None, alias="minPrice", ge=0)
    max_price: float | None = Field(default=None, alias="maxPrice", ge=0)
    min_rating: float | None = Field(
        default=None, alias="minRating", ge=0, le=5
    )
    store: str | None = None
    sort_by: SortField | None = Field(default=None, alias="sortBy")
    sort_order: SortOrder | None = Field(default=None, alias="sortOrder")
    limit: int = Field(
        default=Settings.DEFAULT_LIMIT, ge=1, le=Settings.MAX_LIMIT
    )
    sources: list[str] | None = None


class NumericRange(_Params):
    """Inclusive bounds; either side may be open."""

    min: float | None = None
    max: float | None = None


class DealFilter(_Params):
    """Filter dimensions for :func:`filter_deals`; all are ANDed."""

    categories: list[str] | None = None
    stores: list[str] | None = None
    price_range: NumericRange | None = Field(
        default=None, alias="priceRange"
    )
    rating_range: NumericRange | None = Field(
        default=None, alias="ratingRange"
    )
    tags: list[str] | None = None
