"""Favorite addresses with optional labels."""
from __future__ import annotations

import logging
from dataclasses import dataclass, replace
from datetime import datetime, timezone
from pathlib import Path
from typing import Any

from .json_file import load_list, normalize_address, save_list

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class FavoriteItem:
    address: str
    label: str | None = None
    created_at: str = ""

    def to_dict(self) -> dict[str, Any]:
        raw: dict[str, Any] = {"address": self.address, "createdAt": self.created_at}
        if self.label:
            raw["label"] = self.label
        return raw

    @classmethod
    def from_dict(cls, raw: dict[str, Any]) -> "FavoriteItem":
        return cls(
            address=normalize_address(str(raw["address"])),
            label=raw.get("label") or None,
            created_at=raw.get("createdAt", ""),
        )


class Favorites:
    """Favorite addresses persisted as a JSON list, newest first."""

    def __init__(self, path: str | Path) -> None:
        self._path = Path(path)
        self._items: list[FavoriteItem] = []
        for raw in load_list(self._path):
            if isinstance(raw, dict) and raw.get("address"):
                self._items.append(FavoriteItem.from_dict(raw))

    @property
    def items(self) -> tuple[FavoriteItem, ...]:
        return tuple(self._items)

    def _save(self) -> None:
        save_list(self._path, [item.to_dict() for item in self._items])

    def is_favorite(self, address: str) -> bool:
        return self.get(address) is not None

    def get(self, address: str) -> FavoriteItem | None:
        normalized = normalize_address(address)
        for item in self._items:
            if item.address == normalized:
                return item
        return None

    def add(self, address: str, label: str | None = None) -> None:
        normalized = normalize_address(address)
        if not normalized or self.is_favorite(normalized):
            return
        item = FavoriteItem(
            address=normalized,
            label=label.strip() if label and label.strip() else None,
            created_at=datetime.now(timezone.utc).isoformat(),
        )
        self._items = [item, *self._items]
        self._save()

    def remove(self, address: str) -> None:
        normalized = normalize_address(address)
        self._items = [i for i in self._items if i.address != normalized]
        self._save()

    def toggle(self, address: str) -> bool:
        """Flip favorite state; returns whether the address is now a favorite."""
        if self.is_favorite(address):
            self.remove(address)
            return False
        self.add(address)
        return self.is_favorite(address)

    def update_label(self, address: str, label: str) -> None:
        """Set a label; a blank label clears it."""
        normalized = normalize_address(address)
        new_label = label.strip() or None
        self._items = [
            replace(i, label=new_label) if i.address == normalized else i
            for i in self._items
        ]
        self._save()

    def clear(self) -> None:
        self._items = []
        self._save()
        logger.info("Favorites cleared")
