"""Weapon enhancement track.

Levels +0 to +20 with scroll bonus, leaderboard penalty, Lucky Goddess
blessing and a partial refund when the weapon is destroyed.
"""

from knights_battle.config import MAX_LEVEL
from knights_battle.core.base import EnhancementTrack, TrackInfo
from knights_battle.core.registry import TrackRegistry
from knights_battle.tiers import weapon_curve

from .engine import (
    EnhancementOdds,
    EnhancementOutcome,
    EnhancementRecord,
    EnhancementResolver,
    adjust_odds,
)


@TrackRegistry.register
class WeaponTrack(EnhancementTrack):
    """The main forge: enhance the weapon itself."""

    @classmethod
    def get_info(cls) -> TrackInfo:
        return TrackInfo(
            id="weapon",
            name="Weapon Forge",
            description="Enhance your weapon from +0 to +20",
            max_level=MAX_LEVEL,
            uses_scrolls=True,
            destroy_resets_weapon=True,
            has_refund=True,
        )

    @classmethod
    def get_curve(cls):
        return weapon_curve()

    @classmethod
    def get_screen_class(cls) -> type:
        # Import here to avoid circular imports
        from knights_battle.tui import ForgeScreen
        return ForgeScreen


__all__ = [
    "WeaponTrack",
    "EnhancementOdds",
    "EnhancementOutcome",
    "EnhancementRecord",
    "EnhancementResolver",
    "adjust_odds",
]
