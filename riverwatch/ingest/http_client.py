"""Async JSON GET with retry and rate limit handling, shared by the upstream clients."""

import asyncio
import logging
from typing import Any

import httpx

logger = logging.getLogger(__name__)

DEFAULT_USER_AGENT = "riverwatch/0.1.0"
RETRY_STATUS_CODES = (503, 429)


class JsonHttpClient:
    def __init__(
        self,
        base_url: str,
        user_agent: str = DEFAULT_USER_AGENT,
        timeout: float = 30.0,
        max_retries: int = 2,
        retry_base_delay: float = 2.0,
        accept: str = "application/json",
    ):
        self.base_url = base_url
        self.user_agent = user_agent
        self.timeout = timeout
        self.max_retries = max_retries
        self.retry_base_delay = retry_base_delay
        self.accept = accept

    async def get_json(self, url: str, params: dict[str, str] | None = None) -> Any:
        """GET a URL and return its decoded JSON body.

        Retries on 503/429 and transport errors with exponential backoff.
        Raises httpx.HTTPStatusError on any other non-success status.
        """
        headers = {"User-Agent": self.user_agent, "Accept": self.accept}

        async with httpx.AsyncClient(timeout=self.timeout) as client:
            for attempt in range(self.max_retries + 1):
                try:
                    resp = await client.get(url, params=params, headers=headers)
                    if resp.status_code in RETRY_STATUS_CODES and attempt < self.max_retries:
                        delay = self.retry_base_delay * (2**attempt)
                        logger.warning(
                            "%s returned %d, retrying in %.1fs (attempt %d/%d)",
                            url, resp.status_code, delay, attempt + 1, self.max_retries,
                        )
                        await asyncio.sleep(delay)
                        continue
                    resp.raise_for_status()
                    return resp.json()
                except httpx.RequestError as e:
                    if attempt < self.max_retries:
                        delay = self.retry_base_delay * (2**attempt)
                        logger.warning(
                            "Request error for %s, retrying in %.1fs: %s", url, delay, e
                        )
                        await asyncio.sleep(delay)
                        continue
                    raise
