# bargainer/providers/api_provider.py

"""Shared behaviour for JSON deal APIs.

Subclasses only declare their endpoints, the response keys holding the
deals, and a ``FIELD_MAP`` of candidate raw keys per Deal field.
"""

from typing import Any

from bargainer.config.settings import Settings
from bargainer.models.deal import Deal, utc_now_iso
from bargainer.models.search_params import SearchParams
from bargainer.providers import normalizer as norm
from bargainer.providers.base_provider import BaseProvider


class ApiProvider(BaseProvider):
    """One request per operation against a JSON deals API; no retry."""

    SEARCH_PATH: str = "/search"
    TRENDING_PATH: str = "/trending"
    DETAIL_PATH: str = "/deal/{deal_id}"

    # Response keys holding the deal list / single deal (None = whole body)
    SEARCH_KEY: str = "deals"
    TRENDING_KEY: str = "deals"
    DETAIL_KEY: str | None = "deal"

    # Query-string names for search parameters
    QUERY_PARAM: str = "q"

    # Candidate raw keys per Deal field, first match wins
    FIELD_MAP: dict[str, tuple[str, ...]] = {}

    def _fallback_id(self, raw: dict[str, Any]) -> str:
        """Id used when the raw deal carries none."""
        return ""

    def _field(self, raw: dict[str, Any], name: str) -> Any:
        return norm.pick(raw, self.FIELD_MAP.get(name, ()))

    def _text(self, raw: dict[str, Any], name: str) -> str | None:
        return norm.pick_text(raw, self.FIELD_MAP.get(name, ()))

    def _transform(self, raw: dict[str, Any]) -> Deal:
        """Map one raw API deal onto the Deal schema."""
        price = norm.normalize_price(self._field(raw, "price"))
        original = norm.normalize_price(
            self._field(raw, "original_price")
        )
        raw_id = self._field(raw, "id")
        return Deal(
            id=str(raw_id) if raw_id is not None else self._fallback_id(raw),
            title=self._text(raw, "title") or "",
            description=self._text(raw, "description"),
            price=price,
            original_price=original,
            discount=norm.normalize_price(self._field(raw, "discount")),
            discount_percentage=norm.derive_discount_percentage(
                self._field(raw, "discount_percentage"),
                original,
                price,
            ),
            rating=norm.normalize_rating(self._field(raw, "rating")),
            review_count=norm.normalize_count(
                self._field(raw, "review_count")
            ),
            category=self._text(raw, "category"),
            store=(
                self._text(raw, "store") or self.config.display_name
            ),
            url=self._text(raw, "url") or "",
            image_url=self._text(raw, "image_url"),
            expiration_date=self._text(raw, "expiration_date"),
            tags=norm.to_tags(self._field(raw, "tags")),
            source=self.name,
            created_at=self._text(raw, "created_at") or utc_now_iso(),
            popularity=norm.normalize_price(
                self._field(raw, "popularity")
            ),
            verified=norm.to_bool(self._field(raw, "verified")),
        )

    def _parse_deals(self, items: Any) -> list[Deal]:
        """Transform raw items one by one; a bad item is skipped."""
        if not isinstance(items, list):
            return []
        deals: list[Deal] = []
        for raw in items:
            if not isinstance(raw, dict):
                continue
            try:
                deals.append(self._transform(raw))
            except (TypeError, ValueError) as exc:
                self.logger.debug(
                    "[%s] Skipped unparseable deal: %s", self.name, exc,
                )
        return self._finalize(deals)

    def _search_query(self, params: SearchParams) -> dict[str, Any]:
        """Translate search params into the API's query string."""
        query: dict[str, Any] = {self.QUERY_PARAM: params.query}
        if params.category:
            query["category"] = params.category
        if params.min_price is not None:
            query["min_price"] = params.min_price
        if params.max_price is not None:
            query["max_price"] = params.max_price
        if params.store:
            query["store"] = params.store
        query["limit"] = params.limit
        return query

    def search_deals(self, params: SearchParams) -> list[Deal]:
        """Search the API for deals matching the query."""
        try:
            resp = self._fetch_get(
                self.SEARCH_PATH, self._search_query(params)
            )
            if not resp:
                return []
            data: dict[str, Any] = resp.json()
            deals = self._parse_deals(data.get(self.SEARCH_KEY))
            self.logger.info(
                "[%s] Search '%s' returned %d deals",
                self.name,
                params.query,
                len(deals),
            )
            return deals
        except Exception as exc:
            self.logger.error(
                "[%s] Search failed: %s", self.name, exc, exc_info=True
            )
            return []

    def get_top_deals(
        self, limit: int = Settings.DEFAULT_LIMIT,
    ) -> list[Deal]:
        """Fetch trending deals in the API's own order."""
        try:
            resp = self._fetch_get(self.TRENDING_PATH, {"limit": limit})
            if not resp:
                return []
            data: dict[str, Any] = resp.json()
            return self._parse_deals(data.get(self.TRENDING_KEY))
        except Exception as exc:
            self.logger.error(
                "[%s] Top deals failed: %s",
                self.name,
                exc,
                exc_info=True,
            )
            return []

    def get_deal_details(self, deal_id: str) -> Deal | None:
        """Fetch one deal by id; None when missing or on error."""
        try:
            resp = self._fetch_get(
                self.DETAIL_PATH.format(deal_id=deal_id)
            )
            if not resp:
                return None
            data: Any = resp.json()
            raw = (
                data.get(self.DETAIL_KEY)
                if self.DETAIL_KEY is not None and isinstance(data, dict)
                else data
            )
            deals = self._parse_deals([raw])
            return deals[0] if deals else None
        except Exception as exc:
            self.logger.error(
                "[%s] Deal details failed for %s: %s",
                self.name,
                deal_id,
                exc,
                exc_info=True,
            )
            return None
