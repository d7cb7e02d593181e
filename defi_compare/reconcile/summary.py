"""Roll per-position diffs up into a comparison summary."""
from __future__ import annotations

from collections import Counter
from typing import Iterable

from ..models import CompareSummary, DiffType, PositionDiff


def calc_total_diff_percent(total_a: float, total_diff: float) -> float:
    """Percentage change of the totals; ``0.0`` when A's total is not positive."""
    if total_a <= 0:
        return 0.0
    return total_diff / total_a * 100


def count_diff_types(diffs: Iterable[PositionDiff]) -> Counter:
    return Counter(d.diff_type for d in diffs)


def summarize(
    diffs: Iterable[PositionDiff],
    total_value_a: float,
    total_value_b: float,
) -> CompareSummary:
    """Build a summary from the diffs and the two side totals.

    The value fields come from the totals handed in, never from re-adding the
    per-position deltas.
    """
    counts = count_diff_types(diffs)
    total_diff = total_value_b - total_value_a

    return CompareSummary(
        total_value_diff_usd=total_diff,
        total_value_diff_percent=calc_total_diff_percent(total_value_a, total_diff),
        positions_only_in_a=counts[DiffType.REMOVED],
        positions_only_in_b=counts[DiffType.ADDED],
        common_positions=counts[DiffType.CHANGED] + counts[DiffType.UNCHANGED],
        changed_positions=counts[DiffType.CHANGED],
    )
