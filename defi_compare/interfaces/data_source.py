"""Data source protocol — per-provider snapshot retrieval."""
from typing import Protocol

from ..models import ApiResponse


class DefiDataSource(Protocol):
    """Abstract interface for fetching DeFi snapshots and comparisons."""

    async def get_source_data(self, source_name: str, address: str) -> ApiResponse: ...

    async def compare_sources(self, address: str) -> ApiResponse: ...

    async def health_check(self) -> ApiResponse: ...
