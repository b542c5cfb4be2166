# bargainer/providers/slickdeals_provider.py

"""Provider for the Slickdeals deals API (bearer-token authenticated)."""

from bargainer.providers.api_provider import ApiProvider


class SlickdealsProvider(ApiProvider):
    """Provider for the Slickdeals community deals API.

    Authenticated with the configured API key as a bearer token
    (the default :meth:`BaseProvider._auth_headers`).
    """

    SEARCH_PATH = "/v2/deals/search"
    TRENDING_PATH = "/v2/deals/trending"
    DETAIL_PATH = "/v2/deals/{deal_id}"

    SEARCH_KEY = "deals"
    TRENDING_KEY = "deals"
    DETAIL_KEY = "deal"

    QUERY_PARAM = "q"

    FIELD_MAP = {
        "id": ("id", "deal_id"),
        "title": ("title", "deal_title"),
        "description": ("description", "deal_description"),
        "price": ("price", "deal_price"),
        "original_price": ("original_price", "list_price"),
        "discount": ("discount_amount",),
        "discount_percentage": ("discount_percentage",),
        "rating": ("rating", "deal_rating"),
        "review_count": ("review_count", "reviews"),
        "category": ("category", "deal_category"),
        "store": ("store", "merchant", "retailer"),
        "url": ("url", "deal_url", "link"),
        "image_url": ("image_url", "thumbnail", "image"),
        "expiration_date": ("expiration_date", "expires_at"),
        "tags": ("tags", "keywords"),
        "created_at": ("created_at", "posted_at"),
        "popularity": ("popularity", "thumbs_up", "likes"),
        "verified": ("verified", "staff_pick"),
    }
