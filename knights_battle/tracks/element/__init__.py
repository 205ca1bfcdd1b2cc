"""Element enhancement track (+0 to +10, keeps the element on destroy)."""

from knights_battle.config import MAX_ELEMENT_LEVEL
from knights_battle.core.base import EnhancementTrack, TrackInfo
from knights_battle.core.registry import TrackRegistry
from knights_battle.tiers import element_curve

from .engine import ElementOutcome, ElementRecord, ElementResolver


@TrackRegistry.register
class ElementTrack(EnhancementTrack):
    """The element altar: bind and empower an element."""

    @classmethod
    def get_info(cls) -> TrackInfo:
        return TrackInfo(
            id="element",
            name="Element Altar",
            description="Bind an element and empower it from +0 to +10",
            max_level=MAX_ELEMENT_LEVEL,
        )

    @classmethod
    def get_curve(cls):
        return element_curve()

    @classmethod
    def get_screen_class(cls) -> type:
        # Import here to avoid circular imports
        from knights_battle.tui import ElementScreen
        return ElementScreen


__all__ = [
    "ElementTrack",
    "ElementOutcome",
    "ElementRecord",
    "ElementResolver",
]
