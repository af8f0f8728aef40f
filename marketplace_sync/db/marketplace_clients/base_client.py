"""
Base marketplace REST client with common functionality.

This module provides connection management, authentication, rate limit
handling and error translation for the marketplace API clients.
"""

import asyncio
import logging
from typing import Any, Dict, Optional

import aiohttp
from aiohttp import ClientTimeout

from marketplace_sync.core.config import Settings, get_settings
from marketplace_sync.utils.error_handler import MarketplaceAPIException

logger = logging.getLogger(__name__)

DEFAULT_RETRY_AFTER_SECONDS = 2


def parse_retry_after(value: Optional[str]) -> int:
    """
    Get the delay in seconds from a Retry-After header.

    HTTP-date values and missing or malformed headers fall back to the
    default delay.
    """
    try:
        return max(0, int(value))
    except (TypeError, ValueError):
        return DEFAULT_RETRY_AFTER_SECONDS


class BaseMarketplaceClient:
    """
    Base client for the marketplace REST API.

    Every request carries the bearer token of the account. Rate limited
    requests (HTTP 429) are retried after the delay given by the API;
    network errors are only retried for reads.
    """

    def __init__(self, settings: Optional[Settings] = None, session: Optional[aiohttp.ClientSession] = None):
        """
        Initialize the base marketplace client.

        Args:
            settings: Optional settings, defaults to the global settings
            session: Optional HTTP session, created by initialize() otherwise
        """
        self.settings = settings or get_settings()
        self.base_url = self.settings.marketplace_api_base_url
        self.max_retries = max(1, self.settings.MARKETPLACE_MAX_RETRIES)
        self.session: Optional[aiohttp.ClientSession] = session
        self._owns_session = session is None

    async def initialize(self) -> None:
        """Create the HTTP session if none was given."""
        if self.session is not None:
            return

        timeout = ClientTimeout(total=self.settings.MARKETPLACE_TIMEOUT_SECONDS, connect=10)
        connector = aiohttp.TCPConnector(limit=20, limit_per_host=10)

        self.session = aiohttp.ClientSession(
            timeout=timeout,
            connector=connector,
            headers=self.settings.get_marketplace_headers(),
        )
        self._owns_session = True
        logger.info(f"Marketplace client initialized for {self.base_url}")

    async def close(self) -> None:
        """Close the HTTP session if this client created it."""
        if self.session is not None and self._owns_session:
            await self.session.close()
            logger.info("Marketplace client closed")
        self.session = None

    async def _request(
        self,
        method: str,
        path: str,
        params: Optional[Dict[str, Any]] = None,
        payload: Optional[Dict[str, Any]] = None,
    ) -> Dict[str, Any]:
        """
        Send a request to the marketplace API.

        Args:
            method: HTTP method
            path: Path relative to the API base URL
            params: Query string parameters
            payload: JSON body

        Returns:
            Dict: Decoded JSON response (empty for bodiless responses)

        Raises:
            MarketplaceAPIException: On HTTP errors, exhausted retries, network errors,
                timeouts or undecodable responses
        """
        if self.session is None:
            raise MarketplaceAPIException("Client not initialized. Call initialize() first.", endpoint=path)

        url = f"{self.base_url}{path}"
        retry_network_errors = method.upper() == "GET"

        for attempt in range(self.max_retries):
            is_last_attempt = attempt == self.max_retries - 1

            try:
                async with self.session.request(method, url, params=params, json=payload) as response:
                    if response.status == 429:
                        if is_last_attempt:
                            raise MarketplaceAPIException(
                                f"Rate limit exceeded after {self.max_retries} attempts",
                                api_response_code=429,
                                endpoint=path,
                                rate_limited=True,
                            )
                        retry_after = parse_retry_after(response.headers.get("Retry-After"))
                        logger.warning(f"Rate limit exceeded on {path}, waiting {retry_after}s (attempt {attempt + 1})")
                        await asyncio.sleep(retry_after)
                        continue

                    if response.status >= 400:
                        body = await response.text()
                        raise MarketplaceAPIException(
                            f"HTTP {response.status} on {method} {path}: {body[:500]}",
                            api_response_code=response.status,
                            endpoint=path,
                        )

                    if response.status == 204:
                        return {}

                    return await response.json(content_type=None) or {}

            except MarketplaceAPIException:
                raise

            except (aiohttp.ClientError, asyncio.TimeoutError) as e:
                if not retry_network_errors or is_last_attempt:
                    raise MarketplaceAPIException(f"Network error on {method} {path}: {str(e)}", endpoint=path) from e

                wait_time = min(2**attempt, 10)
                logger.warning(f"Network error on {path}, retrying in {wait_time}s (attempt {attempt + 1})")
                await asyncio.sleep(wait_time)

            except Exception as e:
                raise MarketplaceAPIException(f"Unexpected error on {method} {path}: {str(e)}", endpoint=path) from e

        raise MarketplaceAPIException(f"Request failed after {self.max_retries} attempts", endpoint=path)

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}(base_url={self.base_url})"
