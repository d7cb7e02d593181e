"""Chain-scoped views over an already reconciled result."""
from __future__ import annotations

import logging
from dataclasses import replace
from typing import Sequence

from ..models import (
    AddressDefiData,
    DataSourceCompareResult,
    DiffType,
    PositionDiff,
)
from .summary import summarize

logger = logging.getLogger(__name__)


def _scope_address_data(data: AddressDefiData, chain: str) -> AddressDefiData:
    positions = tuple(p for p in data.positions if p.protocol.chain == chain)
    return replace(
        data,
        positions=positions,
        total_value_usd=sum((p.total_value_usd for p in positions), 0.0),
        chains=(chain,),
    )


def filter_by_chain(
    result: DataSourceCompareResult, chain: str | None
) -> DataSourceCompareResult:
    """Restrict a result to one chain without re-running the matching.

    ``None`` returns ``result`` itself. Otherwise both snapshots and the diffs
    are narrowed to ``chain`` (exact, case-sensitive), side totals are re-added
    from the remaining positions and every summary field is recomputed.
    """
    if chain is None:
        return result

    address_a = _scope_address_data(result.address_a, chain)
    address_b = _scope_address_data(result.address_b, chain)
    diffs = tuple(d for d in result.position_diffs if d.chain == chain)

    logger.debug(
        "Scoped result to chain %s: %d/%d diffs",
        chain, len(diffs), len(result.position_diffs),
    )

    return DataSourceCompareResult(
        address_a=address_a,
        address_b=address_b,
        summary=summarize(diffs, address_a.total_value_usd, address_b.total_value_usd),
        position_diffs=diffs,
    )


def available_chains(result: DataSourceCompareResult) -> list[str]:
    """Sorted union of the chains either source reports."""
    return sorted(set(result.address_a.chains) | set(result.address_b.chains))


def chain_position_counts(result: DataSourceCompareResult) -> dict[str, int]:
    """Number of positions per chain across both sources."""
    counts: dict[str, int] = {}
    for position in (*result.address_a.positions, *result.address_b.positions):
        counts[position.protocol.chain] = counts.get(position.protocol.chain, 0) + 1
    return counts


def group_diffs(
    diffs: Sequence[PositionDiff],
) -> tuple[list[PositionDiff], list[PositionDiff], list[PositionDiff]]:
    """Split diffs into (added, removed, changed); unchanged ones are left out."""
    added = [d for d in diffs if d.diff_type is DiffType.ADDED]
    removed = [d for d in diffs if d.diff_type is DiffType.REMOVED]
    changed = [d for d in diffs if d.diff_type is DiffType.CHANGED]
    return added, removed, changed
