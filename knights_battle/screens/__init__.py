"""Shared TUI screens for Knight's Battle."""

from .arena import ArenaScreen
from .base import SessionScreen
from .shop import ShopScreen
from .track_select import TrackSelectScreen

__all__ = [
    "ArenaScreen",
    "SessionScreen",
    "ShopScreen",
    "TrackSelectScreen",
]
