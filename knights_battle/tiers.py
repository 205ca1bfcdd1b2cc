"""Tier curves: level -> cost and base odds.

Both curves are expanded from the band tables in config.py once, at import.
"""

from .config import (
    ELEMENT_TIER_BANDS,
    MAX_ELEMENT_LEVEL,
    MAX_LEVEL,
    WEAPON_TIER_BANDS,
)
from .models import EnhancementConfig


def _expand(bands: list[tuple[int, int, float, float, float]], max_level: int) -> dict[int, EnhancementConfig]:
    table: dict[int, EnhancementConfig] = {}
    for level in range(0, max_level + 1):
        start, cost_per_level, success, maintain, destroy = next(
            band for band in reversed(bands) if band[0] <= level
        )
        cost = cost_per_level if level == 0 else cost_per_level * (level + 1)
        table[level] = EnhancementConfig(
            cost=cost,
            success_chance=success,
            maintain_chance=maintain,
            destroy_chance=destroy,
        )
    return table


# Pre-compute both curves at module level (computed once on import)
_WEAPON_CACHE: dict[int, EnhancementConfig] = _expand(WEAPON_TIER_BANDS, MAX_LEVEL)
_ELEMENT_CACHE: dict[int, EnhancementConfig] = _expand(ELEMENT_TIER_BANDS, MAX_ELEMENT_LEVEL)


def weapon_tier(level: int) -> EnhancementConfig:
    """Cost and odds for enhancing a weapon currently at `level`."""
    try:
        return _WEAPON_CACHE[level]
    except KeyError:
        raise ValueError(f"Weapon level out of range: {level}") from None


def element_tier(element_level: int) -> EnhancementConfig:
    """Cost and odds for enhancing an element currently at `element_level`."""
    try:
        return _ELEMENT_CACHE[element_level]
    except KeyError:
        raise ValueError(f"Element level out of range: {element_level}") from None


def weapon_curve() -> list[tuple[int, EnhancementConfig]]:
    """All enhanceable weapon levels (0..MAX_LEVEL-1) with their config."""
    return [(level, _WEAPON_CACHE[level]) for level in range(MAX_LEVEL)]


def element_curve() -> list[tuple[int, EnhancementConfig]]:
    return [(level, _ELEMENT_CACHE[level]) for level in range(MAX_ELEMENT_LEVEL)]
