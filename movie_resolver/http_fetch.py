from __future__ import annotations

import json
import time
from typing import Any, Callable, Dict, Optional

import httpx
from loguru import logger

from .config import BROWSER_HEADERS, FetcherConfig
from .errors import NetworkError
from .utils.urls import is_fetchable_url


class _RetryableFailure(Exception):
    """One attempt failed in a way the retry loop may re-issue."""

    def __init__(self, label: str, cause: Optional[BaseException] = None) -> None:
        super().__init__(label)
        self.label = label
        self.cause = cause


class Fetcher:
    """
    One logical HTTP GET with timeout, browser headers and bounded retry.

    - every attempt gets its own deadline (config.timeout_ms); a timed-out
      attempt is a retryable failure labelled "timeout"
    - 4xx responses fail immediately, whatever attempts remain
    - URLs httpx cannot send (bad scheme, bad port) fail immediately too
    - other non-2xx statuses and transport errors are retried, up to
      max_retries extra attempts, sleeping base * (attempt + 1) in between
    - retries are invisible to callers: they get the body or a NetworkError

    `client` is the transport seam: pass an httpx.Client built on a
    MockTransport in tests. `sleep` is injectable for the same reason.
    """

    def __init__(
        self,
        config: Optional[FetcherConfig] = None,
        client: Optional[httpx.Client] = None,
        sleep: Callable[[float], None] = time.sleep,
    ) -> None:
        self.config = config or FetcherConfig()
        self._client = client if client is not None else httpx.Client(follow_redirects=True)
        self._sleep = sleep

    def close(self) -> None:
        self._client.close()

    def build_headers(self, overrides: Optional[Dict[str, str]] = None) -> Dict[str, str]:
        headers = dict(BROWSER_HEADERS)
        headers.update(self.config.headers)
        if overrides:
            headers.update(overrides)
        return headers

    def _attempt(self, url: str, headers: Dict[str, str], timeout_s: float) -> httpx.Response:
        try:
            r = self._client.get(url, headers=headers, timeout=httpx.Timeout(timeout_s))
        except (httpx.UnsupportedProtocol, httpx.InvalidURL) as e:
            raise NetworkError(f"Unusable URL {url}: {e}", cause=e) from e
        except httpx.TimeoutException as e:
            raise _RetryableFailure("timeout", e) from e
        except httpx.TransportError as e:
            raise _RetryableFailure(f"transport error: {e}", e) from e

        if 200 <= r.status_code < 300:
            return r
        if 400 <= r.status_code < 500:
            raise NetworkError(f"HTTP {r.status_code} for {url}")
        raise _RetryableFailure(f"HTTP {r.status_code}")

    def fetch(
        self,
        url: str,
        headers: Optional[Dict[str, str]] = None,
        timeout_ms: Optional[int] = None,
        max_retries: Optional[int] = None,
    ) -> httpx.Response:
        """Return the first 2xx response, or raise NetworkError."""
        if not is_fetchable_url(url):
            raise NetworkError(f"Unusable URL {url!r}")
        timeout_ms = self.config.timeout_ms if timeout_ms is None else timeout_ms
        max_retries = self.config.max_retries if max_retries is None else max_retries
        base_delay_s = self.config.retry_base_delay_ms / 1000.0
        req_headers = self.build_headers(headers)

        last: Optional[_RetryableFailure] = None
        for attempt in range(max_retries + 1):
            try:
                return self._attempt(url, req_headers, timeout_ms / 1000.0)
            except _RetryableFailure as e:
                last = e
                if attempt == max_retries:
                    break
                delay = base_delay_s * (attempt + 1)
                logger.warning(
                    "Fetch {} failed ({}); retry {}/{} in {:.1f}s",
                    url, e.label, attempt + 1, max_retries, delay,
                )
                self._sleep(delay)

        label = last.label if last is not None else "unknown failure"
        if label == "timeout":
            label = f"timeout ({timeout_ms}ms)"
        raise NetworkError(
            f"Request to {url} failed after {max_retries + 1} attempts: {label}",
            cause=last.cause if last is not None else None,
        )

    def fetch_text(self, url: str, **kwargs: Any) -> str:
        return self.fetch(url, **kwargs).text

    def fetch_json(self, url: str, **kwargs: Any) -> Any:
        """Decode a JSON body; undecodable payloads surface as NetworkError."""
        r = self.fetch(url, **kwargs)
        try:
            return r.json()
        except (json.JSONDecodeError, UnicodeDecodeError) as e:
            raise NetworkError(f"Invalid JSON from {url}", cause=e) from e
