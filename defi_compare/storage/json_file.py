"""JSON list persistence shared by history and favorites."""
from __future__ import annotations

import json
import logging
import os
import tempfile
from pathlib import Path
from typing import Any

logger = logging.getLogger(__name__)


def normalize_address(address: str) -> str:
    return address.strip().lower()


def load_list(path: Path) -> list[Any]:
    """Read a JSON list from ``path``; anything unreadable yields ``[]``."""
    if not path.exists():
        return []
    try:
        with open(path) as f:
            data = json.load(f)
    except (OSError, ValueError) as e:
        logger.error("Failed to load %s: %s", path, e)
        return []
    if not isinstance(data, list):
        logger.error("Ignoring %s: expected a JSON list", path)
        return []
    return data


def save_list(path: Path, items: list[Any]) -> None:
    """Write ``items`` to ``path`` through a temp file and rename."""
    try:
        path.parent.mkdir(parents=True, exist_ok=True)
        fd, tmp_name = tempfile.mkstemp(dir=path.parent, suffix=".tmp")
        with os.fdopen(fd, "w") as f:
            json.dump(items, f, indent=2)
        os.replace(tmp_name, path)
    except OSError as e:
        logger.error("Failed to save %s: %s", path, e)
