"""Pair positions from two sources by protocol, chain and position type."""
from __future__ import annotations

from typing import Optional, Sequence

from ..models import Position, PositionType

MatchKey = tuple[str, str, PositionType]
MatchedPair = tuple[Optional[Position], Optional[Position]]


def match_key(position: Position) -> MatchKey:
    """Identity used to line up the same holding across providers.

    Provider-assigned ``id`` values are unrelated between sources, so the key
    is built from the protocol id and chain (case-insensitive) plus the type.
    """
    return (
        position.protocol.id.strip().lower(),
        position.protocol.chain.strip().lower(),
        position.type,
    )


def _group_by_key(positions: Sequence[Position]) -> dict[MatchKey, list[Position]]:
    groups: dict[MatchKey, list[Position]] = {}
    for position in positions:
        groups.setdefault(match_key(position), []).append(position)
    return groups


def match_positions(
    positions_a: Sequence[Position],
    positions_b: Sequence[Position],
) -> list[MatchedPair]:
    """Pair every position of A and B exactly once.

    Within one key the i-th position of A is paired with the i-th of B; the
    surplus on the longer side stays unmatched. Keys are emitted in order of
    first appearance (A's keys, then keys only B has).
    """
    groups_a = _group_by_key(positions_a)
    groups_b = _group_by_key(positions_b)

    keys = list(groups_a)
    keys.extend(k for k in groups_b if k not in groups_a)

    pairs: list[MatchedPair] = []
    for key in keys:
        side_a = groups_a.get(key, [])
        side_b = groups_b.get(key, [])
        common = min(len(side_a), len(side_b))

        pairs.extend(zip(side_a[:common], side_b[:common]))
        pairs.extend((a, None) for a in side_a[common:])
        pairs.extend((None, b) for b in side_b[common:])

    return pairs
