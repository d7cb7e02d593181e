"""Recently searched addresses, newest first."""
from __future__ import annotations

import logging
from pathlib import Path

from .json_file import load_list, normalize_address, save_list

logger = logging.getLogger(__name__)

MAX_HISTORY = 50


class AddressHistory:
    """Address search history persisted as a JSON list."""

    def __init__(self, path: str | Path, max_items: int = MAX_HISTORY) -> None:
        self._path = Path(path)
        self._max_items = max_items
        self._items: list[str] = [
            str(a) for a in load_list(self._path) if isinstance(a, str)
        ]

    @property
    def items(self) -> tuple[str, ...]:
        return tuple(self._items)

    def __contains__(self, address: str) -> bool:
        return normalize_address(address) in self._items

    def add(self, address: str) -> None:
        """Prepend a new address; known addresses keep their position."""
        normalized = normalize_address(address)
        if not normalized or normalized in self._items:
            return
        self._items = [normalized, *self._items][: self._max_items]
        save_list(self._path, self._items)

    def remove(self, address: str) -> None:
        normalized = normalize_address(address)
        self._items = [a for a in self._items if a != normalized]
        save_list(self._path, self._items)

    def clear(self) -> None:
        self._items = []
        save_list(self._path, self._items)
        logger.info("Address history cleared")
