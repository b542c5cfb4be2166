# bargainer/providers/base_provider.py

"""Abstract base class and protocol for all deal providers."""

import logging
from abc import ABC, abstractmethod
from typing import Any, Protocol

from curl_cffi import requests as curl_requests

from bargainer.config.settings import Settings
from bargainer.filters.deal_validator import DealValidator
from bargainer.models.deal import Deal
from bargainer.models.provider_config import ProviderConfig
from bargainer.models.search_params import SearchParams


class DealProvider(Protocol):
    """What the aggregator needs from a provider."""

    def search_deals(self, params: SearchParams) -> list[Deal]: ...

    def get_top_deals(self, limit: int = ...) -> list[Deal]: ...

    def get_deal_details(self, deal_id: str) -> Deal | None: ...


class BaseProvider(ABC):
    """Abstract base class for all deal providers.

    Public operations never raise: transport and parse failures are
    logged and turned into an empty list (or None for details).
    """

    def __init__(self, config: ProviderConfig) -> None:
        self.config = config
        self.name = config.name
        self.base_url = config.base_url.rstrip("/")
        self.logger = logging.getLogger(f"bargainer.{config.name}")
        self.settings = Settings()
        self.session = curl_requests.Session(
            impersonate=self.settings.IMPERSONATE_BROWSER
        )
        self._request_timeout: int = self.settings.REQUEST_TIMEOUT

    def get_source_name(self) -> str:
        """Registry name stamped on every deal this provider emits."""
        return self.name

    def _auth_headers(self) -> dict[str, str]:
        """Credential headers; bearer token by default."""
        if self.config.api_key:
            return {"Authorization": f"Bearer {self.config.api_key}"}
        return {}

    def _build_headers(self) -> dict[str, str]:
        return {
            **self.settings.API_HEADERS,
            **self._auth_headers(),
            **self.config.headers,
        }

    def _url(self, path: str) -> str:
        return f"{self.base_url}/{path.lstrip('/')}"

    def _fetch_get(
        self,
        path: str,
        params: dict[str, Any] | None = None,
        timeout: float | None = None,
    ) -> curl_requests.Response | None:
        """Single GET against the provider; no retry.

        *timeout* overrides ``REQUEST_TIMEOUT`` for this request.
        Returns None on a non-200 status or a transport error.
        """
        url = self._url(path)
        try:
            resp = self.session.get(
                url,
                headers=self._build_headers(),
                params=params,
                timeout=(
                    timeout if timeout is not None
                    else self._request_timeout
                ),
            )
        except Exception as exc:
            self.logger.warning(
                "[%s] Request error for %s: %s",
                self.name,
                url,
                exc,
                exc_info=True,
            )
            return None
        if resp.status_code != 200:
            self.logger.warning(
                "[%s] HTTP %d for %s",
                self.name,
                resp.status_code,
                url,
            )
            return None
        return resp

    def _finalize(self, deals: list[Deal]) -> list[Deal]:
        """Drop invalid records, leaving their siblings untouched."""
        valid, _dropped = DealValidator.validate(deals)
        return valid

    @abstractmethod
    def search_deals(self, params: SearchParams) -> list[Deal]:
        """Search the provider and return validated deals."""
        ...

    @abstractmethod
    def get_top_deals(
        self, limit: int = Settings.DEFAULT_LIMIT,
    ) -> list[Deal]:
        """Return up to *limit* trending deals in the source's order."""
        ...

    @abstractmethod
    def get_deal_details(self, deal_id: str) -> Deal | None:
        """Resolve one deal by its source-local id."""
        ...
