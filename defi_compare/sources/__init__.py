"""Clients for the remote DeFi data API."""
from .client import CompareApiClient

__all__ = ["CompareApiClient"]
