"""Persistent address history and favorites."""
from .favorites import FavoriteItem, Favorites
from .history import AddressHistory

__all__ = ["AddressHistory", "FavoriteItem", "Favorites"]
