# pocketpal/core/content_clients.py
"""
Clients for the two AI-content endpoints.

Each client walks ``idle -> loading -> ready | failed`` on first load and
``ready -> refreshing -> ready | failed`` on a manual refresh. Failures never
raise out of ``load``/``refresh``: they leave the current items in place and
set a user-facing ``notice``.
"""
import enum
import logging
from typing import Any, Dict, List, Optional

import requests

from pocketpal import config
from pocketpal.core.cache import TTLCache
from pocketpal.core.errors import (
    PocketPalError,
    RemoteReadError,
    UpstreamRateLimited,
    UpstreamUnavailable,
)
from pocketpal.core.models import Insight, NewsItem

logger = logging.getLogger(__name__)

NEWS_CACHE_KEY = "financial_news_cache"

RATE_LIMITED_NOTICE = "Too many requests. Please wait a moment."
INSIGHTS_FAILED_NOTICE = "Couldn't load insights. Try again later."
NEWS_FAILED_NOTICE = "Couldn't load news. Try again later."
STALE_NEWS_NOTICE = "Showing cached news. Refresh later for updates."


class ContentState(enum.Enum):
    IDLE = "idle"
    LOADING = "loading"
    REFRESHING = "refreshing"
    READY = "ready"
    FAILED = "failed"


class FunctionsTransport:
    """POSTs to a named endpoint and returns its JSON body."""

    def __init__(self, base_url: str, api_key: Optional[str] = None,
                 timeout: float = config.REQUEST_TIMEOUT_SECONDS):
        self.base_url = (base_url or "").rstrip("/")
        self.api_key = api_key
        self.timeout = timeout

    def _headers(self) -> Dict[str, str]:
        headers = {"Content-Type": "application/json"}
        if self.api_key:
            headers["Authorization"] = f"Bearer {self.api_key}"
            headers["apikey"] = self.api_key
        return headers

    def invoke(self, name: str, body: Optional[Dict[str, Any]] = None) -> Dict[str, Any]:
        try:
            response = requests.post(
                f"{self.base_url}/{name}",
                json=body or {},
                headers=self._headers(),
                timeout=self.timeout,
            )
        except requests.exceptions.RequestException as e:
            raise RemoteReadError(f"Could not reach {name}: {e}") from e

        try:
            payload = response.json()
        except ValueError:
            payload = None

        if not response.ok:
            message = payload.get("error") if isinstance(payload, dict) else None
            message = message or f"{name} returned HTTP {response.status_code}"
            if response.status_code == 429:
                raise UpstreamRateLimited(message)
            if response.status_code == 402 or response.status_code >= 500:
                raise UpstreamUnavailable(message, status_code=response.status_code)
            raise RemoteReadError(message, status_code=response.status_code)

        if not isinstance(payload, dict):
            raise RemoteReadError(f"{name} returned an unreadable response")
        return payload


class _ContentClient:
    endpoint = ""
    result_key = ""
    item_model = None
    failed_notice = ""

    def __init__(self, transport: FunctionsTransport):
        self.transport = transport
        self.items: List[Any] = []
        self.state = ContentState.IDLE
        self.notice: Optional[str] = None
        self.from_cache = False

    def _request_body(self) -> Optional[Dict[str, Any]]:
        return None

    def _fetch_remote(self) -> Optional[List[Dict[str, Any]]]:
        payload = self.transport.invoke(self.endpoint, self._request_body())
        raw_items = payload.get(self.result_key)
        if raw_items is None:
            return None
        if not isinstance(raw_items, list):
            raise RemoteReadError(f"{self.endpoint} returned an unreadable response")
        return raw_items

    def _parse(self, raw_items: List[Dict[str, Any]]) -> List[Any]:
        return [self.item_model.model_validate(item) for item in raw_items]

    def _begin(self, refresh: bool) -> None:
        self.state = ContentState.REFRESHING if refresh else ContentState.LOADING
        self.notice = None
        self.from_cache = False

    def _failure_notice(self, error: Exception) -> str:
        if isinstance(error, UpstreamRateLimited):
            return RATE_LIMITED_NOTICE
        return self.failed_notice

    def load(self) -> List[Any]:
        return self._fetch(refresh=False)

    def refresh(self) -> List[Any]:
        return self._fetch(refresh=True)

    def _fetch(self, refresh: bool) -> List[Any]:
        raise NotImplementedError


class InsightsClient(_ContentClient):
    """No caching: every load or refresh goes to the network."""

    endpoint = "financial-insights"
    result_key = "insights"
    item_model = Insight
    failed_notice = INSIGHTS_FAILED_NOTICE

    def __init__(self, transport: FunctionsTransport, user_context: Optional[str] = None):
        super().__init__(transport)
        self.user_context = user_context

    def _request_body(self) -> Optional[Dict[str, Any]]:
        return {"userContext": self.user_context} if self.user_context else {}

    def _fetch(self, refresh: bool) -> List[Insight]:
        self._begin(refresh)
        try:
            raw_items = self._fetch_remote()
            if raw_items is not None:
                self.items = self._parse(raw_items)
        except (PocketPalError, ValueError) as e:
            logger.error("Error fetching insights: %s", e)
            self.notice = self._failure_notice(e)
            self.state = ContentState.FAILED
            return self.items
        self.state = ContentState.READY
        return self.items


class NewsClient(_ContentClient):
    """
    Cached for the cache's TTL. A refresh always hits the network, and a failed
    fetch falls back to the last cached news whatever its age.
    """

    endpoint = "financial-news"
    result_key = "news"
    item_model = NewsItem
    failed_notice = NEWS_FAILED_NOTICE

    def __init__(self, transport: FunctionsTransport, cache: TTLCache):
        super().__init__(transport)
        self.cache = cache

    def _fetch(self, refresh: bool) -> List[NewsItem]:
        if not refresh:
            cached = self.cache.get(NEWS_CACHE_KEY)
            if cached is not None:
                self.items = self._parse(cached)
                self.state = ContentState.READY
                self.notice = None
                self.from_cache = True
                return self.items

        self._begin(refresh)
        try:
            raw_items = self._fetch_remote()
            if raw_items is not None:
                self.items = self._parse(raw_items)
                self.cache.set(NEWS_CACHE_KEY, raw_items)
        except (PocketPalError, ValueError) as e:
            logger.error("Error fetching news: %s", e)
            return self._fall_back(e)
        self.state = ContentState.READY
        return self.items

    def _fall_back(self, error: Exception) -> List[NewsItem]:
        stale = self.cache.peek(NEWS_CACHE_KEY)
        if stale is not None:
            self.items = self._parse(stale)
            self.notice = STALE_NEWS_NOTICE
            self.from_cache = True
            self.state = ContentState.READY
            return self.items

        self.notice = self._failure_notice(error)
        self.state = ContentState.FAILED
        return self.items
