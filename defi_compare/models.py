"""Data models — all frozen (immutable)."""
from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from types import MappingProxyType
from typing import Any, Mapping, Optional, Union

# Closed set of values a position's free-form metadata may carry.
MetadataValue = Union[None, bool, int, float, str, list, dict]


class PositionType(str, Enum):
    LENDING = "lending"
    BORROWING = "borrowing"
    LIQUIDITY = "liquidity"
    STAKING = "staking"
    FARMING = "farming"
    WALLET = "wallet"
    OTHER = "other"


class DiffType(str, Enum):
    ADDED = "added"
    REMOVED = "removed"
    CHANGED = "changed"
    UNCHANGED = "unchanged"


class InvalidPositionError(ValueError):
    """A position is missing a field the reconciliation depends on."""


@dataclass(frozen=True)
class Protocol:
    """DeFi protocol a position lives in, on one chain."""

    id: str
    name: str
    chain: str
    logo: str | None = None
    url: str | None = None


@dataclass(frozen=True)
class Token:
    symbol: str
    name: str
    address: str
    decimals: int
    price: float | None = None
    logo: str | None = None


@dataclass(frozen=True)
class TokenBalance:
    """Balance of one token inside a position."""

    token: Token
    balance: str
    balance_formatted: float
    balance_usd: float


@dataclass(frozen=True)
class Position:
    """One protocol holding on one chain, as reported by one source."""

    id: str
    protocol: Protocol
    type: PositionType
    tokens: tuple[TokenBalance, ...] = ()
    total_value_usd: float = 0.0
    apy: float | None = None
    health_factor: float | None = None
    metadata: Mapping[str, MetadataValue] = field(default_factory=dict)

    def __post_init__(self) -> None:
        if not isinstance(self.metadata, MappingProxyType):
            object.__setattr__(self, "metadata", MappingProxyType(dict(self.metadata)))

    @property
    def chain(self) -> str:
        return self.protocol.chain


@dataclass(frozen=True)
class AddressDefiData:
    """One source's full snapshot of an address."""

    address: str
    total_value_usd: float
    positions: tuple[Position, ...] = ()
    chains: tuple[str, ...] = ()
    last_updated: str = ""
    source: str = ""


@dataclass(frozen=True)
class PositionDiff:
    """Outcome of comparing one matched (or unmatched) pair of positions."""

    protocol: str
    chain: str
    type: PositionType
    diff_type: DiffType
    position_a: Position | None = None
    position_b: Position | None = None
    value_diff_usd: float | None = None
    value_diff_percent: float | None = None

    def __post_init__(self) -> None:
        if self.diff_type is DiffType.REMOVED and self.position_b is not None:
            raise ValueError("A removed diff cannot carry a position from source B")
        if self.diff_type is DiffType.ADDED and self.position_a is not None:
            raise ValueError("An added diff cannot carry a position from source A")
        if self.diff_type in (DiffType.CHANGED, DiffType.UNCHANGED) and (
            self.position_a is None or self.position_b is None
        ):
            raise ValueError(
                f"A {self.diff_type.value} diff needs positions from both sources"
            )


@dataclass(frozen=True)
class CompareSummary:
    total_value_diff_usd: float = 0.0
    total_value_diff_percent: float = 0.0
    positions_only_in_a: int = 0
    positions_only_in_b: int = 0
    common_positions: int = 0
    changed_positions: int = 0


@dataclass(frozen=True)
class DataSourceCompareResult:
    """Both snapshots, their summary and the per-position diffs."""

    address_a: AddressDefiData
    address_b: AddressDefiData
    summary: CompareSummary
    position_diffs: tuple[PositionDiff, ...] = ()


@dataclass(frozen=True)
class ApiResponse:
    """Tagged result of a call across the network boundary."""

    success: bool
    data: Optional[Any] = None
    error: str | None = None
    message: str | None = None
    timestamp: str | None = None

    @classmethod
    def failure(cls, error: str) -> "ApiResponse":
        return cls(success=False, error=error)
