"""Core abstractions for Knight's Battle enhancement tracks."""

from .base import EnhancementTrack, TrackInfo
from .registry import TrackRegistry

__all__ = [
    "EnhancementTrack",
    "TrackInfo",
    "TrackRegistry",
]
