# bargainer/providers/rapidapi_provider.py

"""Provider for a RapidAPI-hosted deals API (key + host headers)."""

import uuid
from typing import Any
from urllib.parse import urlparse

from bargainer.providers.api_provider import ApiProvider


class RapidApiProvider(ApiProvider):
    """Provider for the RapidAPI deals scraper.

    RapidAPI authenticates with ``X-RapidAPI-Key`` and requires the
    upstream hostname in ``X-RapidAPI-Host`` instead of a bearer token.
    """

    SEARCH_PATH = "/search"
    TRENDING_PATH = "/trending"
    DETAIL_PATH = "/deal/{deal_id}"

    SEARCH_KEY = "results"
    TRENDING_KEY = "deals"
    DETAIL_KEY = None

    QUERY_PARAM = "query"

    FIELD_MAP = {
        "id": ("id", "dealId"),
        "title": ("title", "name", "productName"),
        "description": ("description", "summary"),
        "price": ("price", "currentPrice"),
        "original_price": ("originalPrice", "listPrice"),
        "discount": ("savings", "discountAmount"),
        "discount_percentage": ("discountPercent",),
        "rating": ("rating", "stars"),
        "review_count": ("reviewCount", "numReviews"),
        "category": ("category", "department"),
        "store": ("store", "merchant", "retailer"),
        "url": ("url", "link", "dealUrl"),
        "image_url": ("image", "imageUrl", "thumbnail"),
        "expiration_date": ("expires", "expirationDate"),
        "tags": ("tags", "categories"),
        "created_at": ("dateAdded", "publishDate"),
        "popularity": ("popularity", "score"),
        "verified": ("verified", "featured"),
    }

    def _auth_headers(self) -> dict[str, str]:
        if not self.config.api_key:
            return {}
        return {
            "X-RapidAPI-Key": self.config.api_key,
            "X-RapidAPI-Host": urlparse(self.base_url).hostname or "",
        }

    def _fallback_id(self, raw: dict[str, Any]) -> str:
        return f"rapid_{uuid.uuid4().hex[:12]}"
