"""Comparison orchestration — fetch, reconcile, scope, remember."""
from __future__ import annotations

import asyncio
import logging
from datetime import datetime, timezone

from ..config import AppConfig
from ..interfaces.data_source import DefiDataSource
from ..models import ApiResponse, DataSourceCompareResult, InvalidPositionError
from ..reconcile import filter_by_chain, reconcile
from ..sources import CompareApiClient
from ..storage import AddressHistory, Favorites

logger = logging.getLogger(__name__)

HISTORY_FILE = "address-history.json"
FAVORITES_FILE = "favorites.json"


class CompareService:
    """Runs comparisons for wallet addresses and keeps search history."""

    def __init__(
        self,
        config: AppConfig,
        client: DefiDataSource | None = None,
        history: AddressHistory | None = None,
        favorites: Favorites | None = None,
    ) -> None:
        self._config = config
        self._client: DefiDataSource = client or CompareApiClient(config.api)

        data_dir = config.storage.path
        self.history = history or AddressHistory(
            data_dir / HISTORY_FILE, max_items=config.storage.max_history
        )
        self.favorites = favorites or Favorites(data_dir / FAVORITES_FILE)

    async def compare(self, address: str, *, local: bool = False) -> ApiResponse:
        """Compare both sources for ``address``.

        By default the API reconciles remotely; ``local`` fetches both
        snapshots and reconciles them here.
        """
        target = address.strip()
        if not target:
            return ApiResponse.failure("Please enter a valid wallet address")

        self.history.add(target)

        if not local:
            response = await self._client.compare_sources(target)
        else:
            response = await self._compare_locally(target)

        if not response.success:
            logger.error("Comparison for %s failed: %s", target, response.error)
        return response

    async def _compare_locally(self, address: str) -> ApiResponse:
        sources = self._config.sources
        response_a, response_b = await asyncio.gather(
            self._client.get_source_data(sources.a.name, address),
            self._client.get_source_data(sources.b.name, address),
        )

        for source, response in ((sources.a, response_a), (sources.b, response_b)):
            if not response.success or response.data is None:
                return ApiResponse.failure(
                    f"{source.label}: {response.error or 'no data returned'}"
                )

        try:
            result = reconcile(
                response_a.data,
                response_b.data,
                usd_precision=self._config.reconcile.usd_precision,
            )
        except InvalidPositionError as e:
            return ApiResponse.failure(f"Malformed snapshot: {e}")

        return ApiResponse(
            success=True,
            data=result,
            timestamp=datetime.now(timezone.utc).isoformat(),
        )

    @staticmethod
    def view(
        result: DataSourceCompareResult, chain: str | None = None
    ) -> DataSourceCompareResult:
        """Scope a completed comparison to one chain (or all with ``None``)."""
        return filter_by_chain(result, chain)

    async def health_check(self) -> ApiResponse:
        return await self._client.health_check()
