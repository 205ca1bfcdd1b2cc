"""Weapon type and element affinity cycles."""
from typing import Optional

from .models import ElementType, Matchup, WeaponType

# Sword > Spear > Axe > Hammer > Sword
WEAPON_ADVANTAGE: dict[WeaponType, WeaponType] = {
    WeaponType.SWORD: WeaponType.SPEAR,    # parries the spear and closes in
    WeaponType.SPEAR: WeaponType.AXE,      # outreaches the axe
    WeaponType.AXE: WeaponType.HAMMER,     # out-swings the hammer
    WeaponType.HAMMER: WeaponType.SWORD,   # shatters the sword
}

# Fire > Curse > Light > Dark > Water > Fire
ELEMENT_ADVANTAGE: dict[ElementType, ElementType] = {
    ElementType.FIRE: ElementType.CURSE,
    ElementType.CURSE: ElementType.LIGHT,
    ElementType.LIGHT: ElementType.DARK,
    ElementType.DARK: ElementType.WATER,
    ElementType.WATER: ElementType.FIRE,
}


def _cycle_lookup(cycle: dict, mine, theirs) -> Matchup:
    if cycle.get(mine) == theirs:
        return Matchup.ADVANTAGE
    if cycle.get(theirs) == mine:
        return Matchup.DISADVANTAGE
    return Matchup.NEUTRAL


def type_advantage(mine: WeaponType, theirs: WeaponType) -> Matchup:
    """How `mine` fares against `theirs` on the weapon 4-cycle."""
    return _cycle_lookup(WEAPON_ADVANTAGE, mine, theirs)


def element_advantage(mine: Optional[ElementType], theirs: Optional[ElementType]) -> Matchup:
    """How `mine` fares against `theirs`; neutral when either side has no element."""
    if mine in (None, ElementType.NONE) or theirs in (None, ElementType.NONE):
        return Matchup.NEUTRAL
    return _cycle_lookup(ELEMENT_ADVANTAGE, mine, theirs)
