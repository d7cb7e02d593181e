"""Protocol interfaces for the DeFi source comparer."""
from .data_source import DefiDataSource

__all__ = ["DefiDataSource"]
