"""HTTP client for the DeFi compare API with endpoint fallback."""
from __future__ import annotations

import logging
import ssl
from typing import Any, Callable

import aiohttp
import certifi

from ..codec import address_data_from_dict, api_response_from_dict, compare_result_from_dict
from ..config import ApiConfig
from ..models import ApiResponse

logger = logging.getLogger(__name__)


class ApiRequestError(RuntimeError):
    """The API answered, but not with a usable response."""


class CompareApiClient:
    """Fetch snapshots and ready-made comparisons, falling back across base URLs."""

    def __init__(self, config: ApiConfig) -> None:
        self.endpoints = [config.base_url, *config.fallback_urls]
        self.timeout = config.timeout
        self.current_endpoint_index = 0

    async def _get_json(self, path: str) -> dict[str, Any]:
        """GET ``path`` against each base URL in turn until one answers."""
        ssl_context = ssl.create_default_context(cafile=certifi.where())

        last_error: Exception | None = None
        for attempt in range(len(self.endpoints)):
            index = (self.current_endpoint_index + attempt) % len(self.endpoints)
            url = f"{self.endpoints[index]}{path}"

            try:
                connector = aiohttp.TCPConnector(ssl=ssl_context)
                async with aiohttp.ClientSession(connector=connector) as session:
                    async with session.get(
                        url,
                        headers={"Content-Type": "application/json"},
                        timeout=aiohttp.ClientTimeout(total=self.timeout),
                    ) as response:
                        if response.status != 200:
                            message = await self._error_message(response)
                            # The server answered; another base URL will not help.
                            raise ApiRequestError(message)

                        body = await response.json()

                        if index != self.current_endpoint_index:
                            logger.info("Switched to API endpoint: %s", self.endpoints[index])
                            self.current_endpoint_index = index

                        return body
            except ApiRequestError:
                raise
            except Exception as e:
                last_error = e
                logger.warning("API endpoint %s failed: %s", url, e)
                if attempt < len(self.endpoints) - 1:
                    logger.info("Trying next endpoint...")
                continue

        raise RuntimeError(f"All API endpoints failed. Last error: {last_error}")

    @staticmethod
    async def _error_message(response: aiohttp.ClientResponse) -> str:
        try:
            body = await response.json()
        except Exception:
            body = None
        if isinstance(body, dict) and body.get("message"):
            return str(body["message"])
        return f"HTTP {response.status}"

    async def _request(
        self,
        path: str,
        parse_data: Callable[[dict[str, Any]], Any] | None,
        what: str,
    ) -> ApiResponse:
        try:
            body = await self._get_json(path)
            if not isinstance(body, dict):
                raise ApiRequestError("Unexpected response body")
            return api_response_from_dict(body, parse_data)
        except Exception as e:
            logger.error("%s failed: %s", what, e)
            return ApiResponse.failure(str(e) or f"{what} failed")

    async def compare_sources(self, address: str) -> ApiResponse:
        """Ask the API to reconcile both sources for ``address``."""
        return await self._request(
            f"/compare/sources/{address}", compare_result_from_dict, "Compare"
        )

    async def get_source_data(self, source_name: str, address: str) -> ApiResponse:
        """Fetch one source's snapshot of ``address``."""
        return await self._request(
            f"/defi/{source_name}/{address}",
            address_data_from_dict,
            f"Fetching {source_name} data",
        )

    async def health_check(self) -> ApiResponse:
        return await self._request("/health", None, "Health check")
