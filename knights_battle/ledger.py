"""Economy ledger: the mutation contract over PlayerStats plus shop actions.

Every function validates first and only then builds the new value, so a
rejected action never leaves a partially updated record behind.
"""
import math
from dataclasses import replace

from .config import (
    ATTENDANCE_REWARD,
    ELEMENT_ASSIGN_COST,
    MAX_ELEMENT_LEVEL,
    MAX_LEVEL,
    SCROLL_PRICE,
    SHOWOFF_EXPONENT,
    SHOWOFF_PER_LEVEL,
)
from .errors import InsufficientGold, InvariantViolation
from .models import ElementType, PlayerStats, Weapon, WeaponType


def require_gold(stats: PlayerStats, amount: int) -> None:
    if stats.gold < amount:
        raise InsufficientGold(amount, stats.gold)


def debit(stats: PlayerStats, amount: int) -> PlayerStats:
    """Remove `amount` gold, rejecting the action if the player can't pay."""
    if amount < 0:
        raise ValueError(f"Debit amount must be non-negative, got {amount}")
    require_gold(stats, amount)
    return replace(stats, gold=stats.gold - amount)


def credit(stats: PlayerStats, amount: int) -> PlayerStats:
    if amount < 0:
        raise ValueError(f"Credit amount must be non-negative, got {amount}")
    return replace(stats, gold=stats.gold + amount)


def consume_scroll(stats: PlayerStats) -> tuple[PlayerStats, bool]:
    """Use one scroll if the player has any. Returns (stats, consumed)."""
    if stats.scrolls <= 0:
        return stats, False
    return replace(stats, scrolls=stats.scrolls - 1), True


def record_battle(stats: PlayerStats, won: bool, reward: int) -> PlayerStats:
    stats = credit(stats, reward)
    if won:
        return replace(stats, wins=stats.wins + 1)
    return replace(stats, losses=stats.losses + 1)


def buy_scroll(stats: PlayerStats) -> PlayerStats:
    stats = debit(stats, SCROLL_PRICE)
    return replace(stats, scrolls=stats.scrolls + 1)


def assign_element(weapon: Weapon, stats: PlayerStats, element: ElementType) -> tuple[Weapon, PlayerStats]:
    """Give the weapon an element (or replace the current one) for a flat fee.

    The element level always restarts at 0, even when re-assigning the
    element the weapon already has.
    """
    if element is ElementType.NONE:
        raise ValueError("Cannot assign the empty element")
    stats = debit(stats, ELEMENT_ASSIGN_COST)
    return replace(weapon, element=element, element_level=0), stats


def reset_weapon(weapon_type: WeaponType) -> Weapon:
    """Replace the current weapon with a fresh level 0 weapon of `weapon_type`."""
    return Weapon.fresh(weapon_type)


def claim_attendance(stats: PlayerStats, reward: int = ATTENDANCE_REWARD) -> PlayerStats:
    return credit(stats, reward)


def gift_gold(stats: PlayerStats, amount: int) -> PlayerStats:
    """Administrative grant."""
    if amount <= 0:
        raise ValueError(f"Gift amount must be positive, got {amount}")
    return credit(stats, amount)


def show_off_damage(weapon: Weapon) -> int:
    return (
        weapon.base_damage
        + weapon.level * SHOWOFF_PER_LEVEL
        + math.floor(weapon.level ** SHOWOFF_EXPONENT)
    )


def check_invariants(weapon: Weapon, stats: PlayerStats) -> None:
    """Raise InvariantViolation if either record is out of its valid range."""
    problems = []
    if not 0 <= weapon.level <= MAX_LEVEL:
        problems.append(f"weapon level {weapon.level} outside 0..{MAX_LEVEL}")
    if not 0 <= weapon.element_level <= MAX_ELEMENT_LEVEL:
        problems.append(f"element level {weapon.element_level} outside 0..{MAX_ELEMENT_LEVEL}")
    if weapon.total_enhance_cost < 0:
        problems.append("negative total enhance cost")
    if stats.gold < 0:
        problems.append("negative gold")
    if stats.scrolls < 0:
        problems.append("negative scrolls")
    if stats.wins < 0 or stats.losses < 0:
        problems.append("negative win/loss counter")
    if problems:
        raise InvariantViolation("; ".join(problems))
