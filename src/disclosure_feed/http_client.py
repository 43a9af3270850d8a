"""HTTP client with retry and timeout support for extractors."""

from __future__ import annotations

import asyncio
from typing import Any, Dict, Optional

import httpx

from .logging_config import get_logger
from .models import ExtractorConfig, ExtractorStats

logger = get_logger("http_client")

DEFAULT_USER_AGENT = "Disclosure Feed (contact: feeds@example.com)"


class HTTPClient:
    """HTTP client wrapper with retry logic, timeout, and exponential backoff."""

    def __init__(self, config: Optional[ExtractorConfig] = None) -> None:
        self.config = config or ExtractorConfig(name="default")
        self.timeout = httpx.Timeout(
            connect=10.0,
            read=self.config.timeout_seconds,
            write=10.0,
            pool=5.0,
        )
        self.headers = {
            "User-Agent": DEFAULT_USER_AGENT,
            **self.config.headers,
        }

    async def get(
        self,
        url: str,
        *,
        headers: Optional[Dict[str, str]] = None,
        params: Optional[Dict[str, Any]] = None,
        follow_redirects: bool = True,
        stats: Optional[ExtractorStats] = None,
    ) -> httpx.Response:
        merged_headers = {**self.headers, **(headers or {})}

        async with httpx.AsyncClient(
            timeout=self.timeout,
            follow_redirects=follow_redirects,
        ) as client:
            for attempt in range(self.config.max_retries + 1):
                if stats:
                    stats.http_requests += 1
                try:
                    response = await client.request(
                        "GET",
                        url,
                        headers=merged_headers,
                        params=params,
                    )
                    response.raise_for_status()
                    return response

                except httpx.HTTPStatusError as exc:
                    status_code = exc.response.status_code
                    if self._should_retry_status(status_code) and attempt < self.config.max_retries:
                        delay = self._calculate_retry_delay(attempt + 1)
                        if stats:
                            stats.retry_attempts += 1
                        logger.warning(
                            "Request GET %s failed with status %s. Retrying in %.2fs (attempt %s/%s)",
                            url,
                            status_code,
                            delay,
                            attempt + 1,
                            self.config.max_retries,
                        )
                        await asyncio.sleep(delay)
                        continue

                    logger.error("Request GET %s failed with status %s", url, status_code)
                    raise

                except httpx.RequestError as exc:
                    if attempt < self.config.max_retries:
                        delay = self._calculate_retry_delay(attempt + 1)
                        if stats:
                            stats.retry_attempts += 1
                        logger.warning(
                            "Request GET %s failed (%s). Retrying in %.2fs (attempt %s/%s)",
                            url,
                            exc,
                            delay,
                            attempt + 1,
                            self.config.max_retries,
                        )
                        await asyncio.sleep(delay)
                        continue

                    logger.error(
                        "Request GET %s failed after %s attempts: %s",
                        url,
                        attempt + 1,
                        exc,
                    )
                    raise

        raise RuntimeError(f"Request GET {url} failed after retries")

    async def get_json(
        self,
        url: str,
        *,
        headers: Optional[Dict[str, str]] = None,
        stats: Optional[ExtractorStats] = None,
    ) -> Any:
        """GET a URL and decode the JSON body."""
        response = await self.get(
            url,
            headers={"Accept": "application/json", **(headers or {})},
            stats=stats,
        )
        return response.json()

    def _should_retry_status(self, status_code: int) -> bool:
        if status_code >= 500:
            return True
        return status_code in {408, 409, 425, 429}

    def _calculate_retry_delay(self, retry_number: int) -> float:
        delay = self.config.retry_base_delay * (
            self.config.retry_exponential_base ** (retry_number - 1)
        )
        return min(delay, self.config.retry_max_delay)
