"""Full reconciliation of two address snapshots."""
from __future__ import annotations

import logging
import math
from typing import Iterable

from ..models import (
    AddressDefiData,
    DataSourceCompareResult,
    InvalidPositionError,
    Position,
    PositionType,
)
from .classifier import DEFAULT_USD_PRECISION, classify_pairs
from .matcher import match_positions
from .summary import summarize

logger = logging.getLogger(__name__)


def _is_finite_number(value: object) -> bool:
    return (
        not isinstance(value, bool)
        and isinstance(value, (int, float))
        and math.isfinite(value)
    )


def validate_positions(positions: Iterable[Position], source: str) -> None:
    """Reject the snapshot if any position lacks a chain, type or finite value."""
    for index, position in enumerate(positions):
        what = f"{source} position #{index} ('{position.id}')"
        if position.protocol is None or not position.protocol.chain:
            raise InvalidPositionError(f"{what} has no protocol chain")
        if not isinstance(position.type, PositionType):
            raise InvalidPositionError(f"{what} has invalid type {position.type!r}")
        value = position.total_value_usd
        if not _is_finite_number(value):
            raise InvalidPositionError(f"{what} has invalid totalValueUSD {value!r}")


def validate_total(snapshot: AddressDefiData, source: str) -> None:
    """Reject a snapshot whose total is not a finite number."""
    value = snapshot.total_value_usd
    if not _is_finite_number(value):
        raise InvalidPositionError(f"{source} has invalid totalValueUSD {value!r}")


def reconcile(
    address_a: AddressDefiData,
    address_b: AddressDefiData,
    *,
    usd_precision: int = DEFAULT_USD_PRECISION,
) -> DataSourceCompareResult:
    """Match, classify and summarise the positions of two snapshots.

    Raises:
        InvalidPositionError: A position or snapshot total on either side
            is malformed; the whole comparison is rejected.
    """
    source_a = address_a.source or "source A"
    source_b = address_b.source or "source B"
    validate_total(address_a, source_a)
    validate_total(address_b, source_b)
    validate_positions(address_a.positions, source_a)
    validate_positions(address_b.positions, source_b)

    pairs = match_positions(address_a.positions, address_b.positions)
    diffs = classify_pairs(pairs, usd_precision)
    summary = summarize(diffs, address_a.total_value_usd, address_b.total_value_usd)

    logger.info(
        "Reconciled %s: %d only in A, %d only in B, %d common (%d changed)",
        address_a.address,
        summary.positions_only_in_a,
        summary.positions_only_in_b,
        summary.common_positions,
        summary.changed_positions,
    )

    return DataSourceCompareResult(
        address_a=address_a,
        address_b=address_b,
        summary=summary,
        position_diffs=tuple(diffs),
    )
