# bargainer/config/settings.py

"""Central configuration for the bargainer deal aggregator."""

import os
from pathlib import Path
from typing import Any

from curl_cffi.requests import BrowserTypeLiteral
from dotenv import load_dotenv

load_dotenv()


class Settings:
    """Central configuration for the bargainer deal aggregator."""

    # --- Networking ---
    REQUEST_TIMEOUT: int = 10           # Seconds before a request times out
    PROVIDER_TIMEOUT: float = 10.0      # Seconds per provider call in a fan-out
    REQUEST_DELAY: float = 1.0          # Politeness delay before scraping a page

    # --- Search defaults ---
    DEFAULT_LIMIT: int = 20
    MAX_LIMIT: int = 100
    DEFAULT_SORT_BY: str = "popularity"
    DEFAULT_SORT_ORDER: str = "desc"

    # --- Comparison ---
    TITLE_KEY_LENGTH: int = 50          # Chars of normalised title used for grouping
    PRICE_TIE_TOLERANCE: float = 5.0    # Prices closer than this compare by rating

    # --- Scrape detection ---
    CAPTCHA_KEYWORDS: list[str] = [
        "captcha",
        "verify you are human",
        "unusual traffic",
        "automated requests",
    ]

    # --- Browser Impersonation ---
    IMPERSONATE_BROWSER: BrowserTypeLiteral = "chrome131"
    DEFAULT_HEADERS: dict[str, str] = {
        "Accept": (
            "text/html,application/xhtml+xml,"
            "application/xml;q=0.9,image/avif,"
            "image/webp,image/apng,*/*;q=0.8"
        ),
        "Accept-Language": "en-US,en;q=0.9",
        "sec-ch-ua": (
            '"Google Chrome";v="131", '
            '"Chromium";v="131", '
            '"Not_A Brand";v="24"'
        ),
        "sec-ch-ua-mobile": "?0",
        "sec-ch-ua-platform": '"Windows"',
        "Upgrade-Insecure-Requests": "1",
    }
    API_HEADERS: dict[str, str] = {
        "Accept": "application/json",
        "Content-Type": "application/json",
    }

    # --- Paths ---
    BASE_DIR: Path = Path(__file__).resolve().parent.parent.parent
    SELECTORS_PATH: Path = (
        BASE_DIR / "bargainer" / "config" / "selectors.json"
    )
    LOGS_DIR: Path = BASE_DIR / "logs"

    # --- Providers (registration order = default fan-out order) ---
    AVAILABLE_SOURCES: list[dict[str, Any]] = [
        {
            "id": "slickdeals",
            "label": "Slickdeals",
            "provider": (
                "bargainer.providers.slickdeals_provider"
                ".SlickdealsProvider"
            ),
            "base_url": os.getenv(
                "SLICKDEALS_BASE_URL", "https://slickdeals.net"
            ),
            "api_key_env": "SLICKDEALS_API_KEY",
            "enabled": True,
        },
        {
            "id": "rapidapi",
            "label": "RapidAPI Deals",
            "provider": (
                "bargainer.providers.rapidapi_provider"
                ".RapidApiProvider"
            ),
            "base_url": os.getenv(
                "RAPIDAPI_DEALS_URL",
                "https://deals-scraper.p.rapidapi.com",
            ),
            "api_key_env": "RAPIDAPI_KEY",
            "enabled": True,
        },
        {
            "id": "dealnews",
            "label": "DealNews",
            "provider": (
                "bargainer.providers.scraping_provider"
                ".ScrapingProvider"
            ),
            "base_url": "https://www.dealnews.com",
            "api_key_env": "",
            "enabled": True,
        },
        {
            "id": "retailmenot",
            "label": "RetailMeNot",
            "provider": (
                "bargainer.providers.scraping_provider"
                ".ScrapingProvider"
            ),
            "base_url": "https://www.retailmenot.com",
            "api_key_env": "",
            "enabled": True,
        },
    ]
