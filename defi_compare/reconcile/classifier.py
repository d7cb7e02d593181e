"""Turn matched position pairs into classified diffs — no I/O."""
from __future__ import annotations

import logging
from typing import Iterable, Optional

from ..models import DiffType, Position, PositionDiff
from .matcher import MatchedPair

logger = logging.getLogger(__name__)

# Value differences are compared at cent precision by default.
DEFAULT_USD_PRECISION = 2


def calc_value_diff_percent(value_a: float, value_diff: float) -> Optional[float]:
    """Percentage change relative to A, or ``None`` when A has no positive base."""
    if value_a <= 0:
        return None
    return value_diff / value_a * 100


def is_unchanged(value_diff: float, usd_precision: int = DEFAULT_USD_PRECISION) -> bool:
    return round(value_diff, usd_precision) == 0


def classify_pair(
    position_a: Position | None,
    position_b: Position | None,
    usd_precision: int = DEFAULT_USD_PRECISION,
) -> PositionDiff:
    """Classify one pair as removed, added, changed or unchanged.

    Display fields come from A when it exists, otherwise from B.
    """
    if position_a is None and position_b is None:
        raise ValueError("A matched pair needs at least one position")

    if position_b is None:
        return PositionDiff(
            protocol=position_a.protocol.name,
            chain=position_a.protocol.chain,
            type=position_a.type,
            diff_type=DiffType.REMOVED,
            position_a=position_a,
        )

    if position_a is None:
        return PositionDiff(
            protocol=position_b.protocol.name,
            chain=position_b.protocol.chain,
            type=position_b.type,
            diff_type=DiffType.ADDED,
            position_b=position_b,
        )

    value_diff = position_b.total_value_usd - position_a.total_value_usd
    diff_type = (
        DiffType.UNCHANGED if is_unchanged(value_diff, usd_precision) else DiffType.CHANGED
    )
    return PositionDiff(
        protocol=position_a.protocol.name,
        chain=position_a.protocol.chain,
        type=position_a.type,
        diff_type=diff_type,
        position_a=position_a,
        position_b=position_b,
        value_diff_usd=value_diff,
        value_diff_percent=calc_value_diff_percent(
            position_a.total_value_usd, value_diff
        ),
    )


def classify_pairs(
    pairs: Iterable[MatchedPair],
    usd_precision: int = DEFAULT_USD_PRECISION,
) -> list[PositionDiff]:
    """Classify every pair, keeping the matcher's order."""
    diffs = [classify_pair(a, b, usd_precision) for a, b in pairs]
    logger.debug("Classified %d position pairs", len(diffs))
    return diffs
