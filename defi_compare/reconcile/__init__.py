"""Position reconciliation and diff engine."""
from .chain_filter import (
    available_chains,
    chain_position_counts,
    filter_by_chain,
    group_diffs,
)
from .classifier import DEFAULT_USD_PRECISION, classify_pair, classify_pairs
from .engine import reconcile, validate_positions, validate_total
from .matcher import match_key, match_positions
from .summary import summarize

__all__ = [
    "DEFAULT_USD_PRECISION",
    "available_chains",
    "chain_position_counts",
    "classify_pair",
    "classify_pairs",
    "filter_by_chain",
    "group_diffs",
    "match_key",
    "match_positions",
    "reconcile",
    "summarize",
    "validate_positions",
    "validate_total",
]
