# bargainer/providers/scraping_provider.py

"""Generic HTML-scraping provider for deal listing sites."""

import json
import time
from typing import Any

import cloudscraper  # type: ignore[import-untyped]
from bs4 import BeautifulSoup, Tag
from curl_cffi import requests as curl_requests

from bargainer.config.settings import Settings
from bargainer.models.deal import Deal, utc_now_iso
from bargainer.models.provider_config import ProviderConfig
from bargainer.models.search_params import SearchParams
from bargainer.providers import normalizer as norm
from bargainer.providers.base_provider import BaseProvider


class ScrapingProvider(BaseProvider):
    """Scrapes deal blocks out of a site's search and hot-deal pages.

    Selectors come from ``selectors.json``; for every field the list is
    tried in priority order and the first match wins.
    """

    SELECTOR_GROUP = "scraping"
    SEARCH_PATH = "/search"
    TOP_PATH = "/hot-deals"
    DETAIL_PATH = "/deal/{deal_id}"

    # Cloudflare challenge page markers (checked before keyword scan)
    _CF_CHALLENGE_MARKERS: list[str] = [
        "challenges.cloudflare.com",
        "cdn-cgi/challenge-platform",
        "just a moment",
        "cf-turnstile",
        "cf_chl_opt",
    ]

    def __init__(self, config: ProviderConfig) -> None:
        super().__init__(config)
        self.selectors: dict[str, list[str]] = self._load_selectors()

    def _load_selectors(self) -> dict[str, list[str]]:
        """Load this provider's selector lists from selectors.json.

        A site-specific entry keyed by provider name overrides the
        generic group field by field.
        """
        with open(self.settings.SELECTORS_PATH) as f:
            all_selectors: dict[str, Any] = json.load(f)
        result: dict[str, list[str]] = {
            **all_selectors.get(self.SELECTOR_GROUP, {}),
            **all_selectors.get(self.name, {}),
        }
        return result

    def _build_headers(self) -> dict[str, str]:
        return {
            **self.settings.DEFAULT_HEADERS,
            "Referer": f"{self.base_url}/",
            **self.config.headers,
        }

    def _wait(self) -> None:
        time.sleep(self.settings.REQUEST_DELAY)

    def _validate_response(
        self, resp: curl_requests.Response,
    ) -> bool:
        """Reject Cloudflare challenge pages and CAPTCHA walls."""
        lower = resp.text.lower()

        for marker in self._CF_CHALLENGE_MARKERS:
            if marker in lower:
                self.logger.warning(
                    "[%s] Cloudflare challenge detected "
                    "(marker: '%s')",
                    self.name,
                    marker,
                )
                return False

        # Skip the keyword scan on real pages to avoid false positives
        has_body_content = "<body" in lower and len(lower) > 5000
        if not has_body_content:
            for keyword in self.settings.CAPTCHA_KEYWORDS:
                if keyword in lower:
                    self.logger.warning(
                        "[%s] CAPTCHA keyword '%s' detected",
                        self.name,
                        keyword,
                    )
                    return False
        return True

    def _remaining(self, deadline: float) -> float:
        """Seconds left before *deadline*, capped at ``REQUEST_TIMEOUT``."""
        return min(
            float(self._request_timeout), deadline - time.monotonic()
        )

    def _get_page(
        self,
        path: str,
        params: dict[str, Any] | None = None,
    ) -> BeautifulSoup | None:
        """Fetch and parse a page, falling back to cloudscraper once.

        The delay, the first request and the fallback together stay
        within ``PROVIDER_TIMEOUT`` seconds.
        """
        deadline = time.monotonic() + self.settings.PROVIDER_TIMEOUT
        self._wait()

        resp = self._fetch_get(
            path, params, timeout=max(self._remaining(deadline), 0.1)
        )
        if resp is not None and self._validate_response(resp):
            return BeautifulSoup(resp.text, "lxml")

        remaining = self._remaining(deadline)
        if remaining <= 0:
            self.logger.warning(
                "[%s] Request budget spent, skipping cloudscraper",
                self.name,
            )
            return None

        self.logger.info(
            "[%s] curl_cffi failed, falling back to cloudscraper",
            self.name,
        )
        try:
            _cs: Any = cloudscraper
            scraper: Any = _cs.create_scraper()
            fallback_resp: Any = scraper.get(
                self._url(path),
                params=params,
                headers=self._build_headers(),
                timeout=remaining,
            )
            if fallback_resp.status_code == 200:
                return BeautifulSoup(str(fallback_resp.text), "lxml")
            self.logger.warning(
                "[%s] cloudscraper got HTTP %d",
                self.name,
                fallback_resp.status_code,
            )
        except Exception as exc:
            self.logger.error(
                "[%s] cloudscraper fallback also failed: %s",
                self.name,
                exc,
                exc_info=True,
            )
        return None

    # ── Extraction ───────────────────────────────────────

    def _select_first(self, node: Tag, key: str) -> Tag | None:
        """First element matching the *key* selectors, in priority order."""
        for selector in self.selectors.get(key, []):
            found = node.select_one(selector)
            if found is not None:
                return found
        return None

    def _text_of(self, node: Tag, key: str) -> str:
        el = self._select_first(node, key)
        return el.get_text(" ", strip=True) if el is not None else ""

    def _attr_of(self, node: Tag, key: str, attr: str) -> str | None:
        el = self._select_first(node, key)
        if el is None:
            return None
        value = el.get(attr)
        if isinstance(value, list):
            value = " ".join(value)
        return value or None

    def _find_blocks(self, soup: BeautifulSoup) -> list[Tag]:
        """Deal blocks from the first block selector that matches."""
        for selector in self.selectors.get("deal_block", []):
            blocks = soup.select(selector)
            if blocks:
                return blocks
        self.logger.warning(
            "[%s] No deal blocks matched; page layout may have changed",
            self.name,
        )
        return []

    def _extract_deal(self, block: Tag) -> Deal | None:
        """Build a Deal from one block; None if it has no title and no link."""
        title = self._text_of(block, "title")
        url = norm.resolve_url(
            self.base_url, self._attr_of(block, "link", "href")
        )
        if not title and not url:
            return None

        price = norm.normalize_price(self._text_of(block, "price"))
        original = norm.normalize_price(
            self._text_of(block, "original_price")
        )
        return Deal(
            id=norm.deal_id_from_url(url) if url else "",
            title=title,
            price=price,
            original_price=original,
            discount_percentage=norm.derive_discount_percentage(
                None, original, price
            ),
            rating=norm.normalize_rating(
                self._text_of(block, "rating") or None
            ),
            store=(
                self._text_of(block, "store")
                or self.config.display_name
            ),
            url=url or "",
            image_url=norm.resolve_url(
                self.base_url, self._attr_of(block, "image", "src")
            ),
            source=self.name,
            created_at=utc_now_iso(),
        )

    def _extract_listing(self, soup: BeautifulSoup) -> list[Deal]:
        deals: list[Deal] = []
        for block in self._find_blocks(soup):
            deal = self._extract_deal(block)
            if deal is not None:
                deals.append(deal)
        return self._finalize(deals)

    def _extract_detail(
        self, soup: BeautifulSoup, deal_id: str,
    ) -> Deal | None:
        """Build a Deal from a single deal page."""
        title = self._text_of(soup, "detail_title")
        if not title:
            return None
        canonical = soup.select_one("link[rel=canonical]")
        href = canonical.get("href") if canonical is not None else None
        url = norm.resolve_url(
            self.base_url,
            href if isinstance(href, str) else None,
        ) or self._url(self.DETAIL_PATH.format(deal_id=deal_id))

        price = norm.normalize_price(self._text_of(soup, "price"))
        original = norm.normalize_price(
            self._text_of(soup, "original_price")
        )
        deals = self._finalize([
            Deal(
                id=deal_id,
                title=title,
                description=(
                    self._text_of(soup, "detail_description") or None
                ),
                price=price,
                original_price=original,
                discount_percentage=norm.derive_discount_percentage(
                    None, original, price
                ),
                rating=norm.normalize_rating(
                    self._text_of(soup, "rating") or None
                ),
                store=(
                    self._text_of(soup, "store")
                    or self.config.display_name
                ),
                url=url,
                source=self.name,
                created_at=utc_now_iso(),
            )
        ])
        return deals[0] if deals else None

    # ── Provider contract ────────────────────────────────

    def search_deals(self, params: SearchParams) -> list[Deal]:
        """Scrape the site's search page for the query."""
        try:
            soup = self._get_page(self.SEARCH_PATH, {"q": params.query})
            if soup is None:
                return []
            deals = self._extract_listing(soup)[: params.limit]
            self.logger.info(
                "[%s] Search '%s' scraped %d deals",
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
        """Scrape the hot-deals page in page order."""
        try:
            soup = self._get_page(self.TOP_PATH)
            if soup is None:
                return []
            return self._extract_listing(soup)[:limit]
        except Exception as exc:
            self.logger.error(
                "[%s] Top deals failed: %s",
                self.name,
                exc,
                exc_info=True,
            )
            return []

    def get_deal_details(self, deal_id: str) -> Deal | None:
        """Scrape a single deal page."""
        try:
            soup = self._get_page(
                self.DETAIL_PATH.format(deal_id=deal_id)
            )
            if soup is None:
                return None
            return self._extract_detail(soup, deal_id)
        except Exception as exc:
            self.logger.error(
                "[%s] Deal details failed for %s: %s",
                self.name,
                deal_id,
                exc,
                exc_info=True,
            )
            return None
