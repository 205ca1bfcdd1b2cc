"""Registry for enhancement tracks."""

from typing import Dict, Optional, Type

from .base import EnhancementTrack, TrackInfo


class TrackRegistry:
    """Central registry for all enhancement tracks.

    Use the @TrackRegistry.register decorator to register tracks.

    Example:
        @TrackRegistry.register
        class WeaponTrack(EnhancementTrack):
            ...
    """

    _tracks: Dict[str, Type[EnhancementTrack]] = {}

    @classmethod
    def register(cls, track_class: Type[EnhancementTrack]) -> Type[EnhancementTrack]:
        """Decorator to register a track.

        Args:
            track_class: The track class to register

        Returns:
            The same track class (for decorator chaining)
        """
        info = track_class.get_info()
        cls._tracks[info.id] = track_class
        return track_class

    @classmethod
    def get(cls, track_id: str) -> Optional[Type[EnhancementTrack]]:
        """Get a track by its ID, or None if not found."""
        return cls._tracks.get(track_id)

    @classmethod
    def get_all(cls) -> Dict[str, Type[EnhancementTrack]]:
        """Get all registered tracks."""
        return dict(cls._tracks)

    @classmethod
    def get_all_info(cls) -> list[TrackInfo]:
        """Get info for all tracks, highest level cap first.

        Returns:
            List of TrackInfo, sorted by max level then name
        """
        return sorted(
            [t.get_info() for t in cls._tracks.values()],
            key=lambda x: (-x.max_level, x.name)
        )
