"""Base abstractions for enhancement tracks."""

from abc import ABC, abstractmethod
from dataclasses import dataclass

from knights_battle.models import EnhancementConfig


@dataclass
class TrackInfo:
    """Metadata about an enhancement track for display and configuration.

    Attributes:
        id: Unique identifier (e.g., "weapon", "element")
        name: Display name (e.g., "Weapon Forge")
        description: Brief description for the selection screen
        max_level: Highest reachable level on this track
        uses_scrolls: Whether enhancement scrolls apply
        destroy_resets_weapon: Whether a destroy replaces the whole weapon
        has_refund: Whether a destroy refunds part of the spent gold
    """
    id: str
    name: str
    description: str
    max_level: int
    uses_scrolls: bool = False
    destroy_resets_weapon: bool = False
    has_refund: bool = False


class EnhancementTrack(ABC):
    """Abstract base class for enhancement tracks (plugin pattern).

    Each track (weapon, element) implements this class to register with
    the system.
    """

    @classmethod
    @abstractmethod
    def get_info(cls) -> TrackInfo:
        """Return metadata about this track."""
        pass

    @classmethod
    @abstractmethod
    def get_curve(cls) -> list[tuple[int, EnhancementConfig]]:
        """Return every enhanceable level with its config."""
        pass

    @classmethod
    @abstractmethod
    def get_screen_class(cls) -> type:
        """Return the TUI screen class."""
        pass
