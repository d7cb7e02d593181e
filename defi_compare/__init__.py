"""Reconcile one wallet's DeFi positions as reported by two data sources."""
from .models import (
    AddressDefiData,
    CompareSummary,
    DataSourceCompareResult,
    DiffType,
    InvalidPositionError,
    Position,
    PositionDiff,
    PositionType,
)
from .reconcile import filter_by_chain, reconcile

__all__ = [
    "AddressDefiData",
    "CompareSummary",
    "DataSourceCompareResult",
    "DiffType",
    "InvalidPositionError",
    "Position",
    "PositionDiff",
    "PositionType",
    "filter_by_chain",
    "reconcile",
]

__version__ = "0.1.0"
