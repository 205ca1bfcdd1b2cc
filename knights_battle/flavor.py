"""Narrative text collaborators.

The engine never depends on narrative text numerically. Generators may be
backed by anything (an LLM service, a template bank); when one raises, the
safe_* helpers log a warning and fall back to canned text so the economic
resolution always completes.
"""
from dataclasses import dataclass
from typing import Optional, Protocol

from .logger import ChannelLogger, get_channel
from .models import Weapon


@dataclass(frozen=True, slots=True)
class Flavor:
    """Blacksmith quote plus the weapon's new name and description."""
    quote: str
    weapon_name: str
    description: str


class FlavorGenerator(Protocol):
    def generate_flavor(self, weapon: Weapon, success: bool, new_level: int) -> Flavor:
        ...


class BattleLogGenerator(Protocol):
    def generate_battle_log(self, weapon: Weapon, opponent: str, won: bool) -> str:
        ...


# Name prefixes by level band (first level of band -> prefix)
_TITLE_BANDS: list[tuple[int, str]] = [
    (0, "Enhanced"),
    (5, "Tempered"),
    (8, "Runed"),
    (10, "Heroic"),
    (13, "Legendary"),
    (16, "Mythic"),
    (19, "Godslayer"),
]


def _title_for(level: int) -> str:
    return next(prefix for start, prefix in reversed(_TITLE_BANDS) if start <= level)


class CannedFlavor:
    """Deterministic text used when no generator is configured or it fails."""

    def generate_flavor(self, weapon: Weapon, success: bool, new_level: int) -> Flavor:
        kind = weapon.weapon_type.value
        if success:
            return Flavor(
                quote="The hammer struck true! It is finished.",
                weapon_name=f"{_title_for(new_level)} {kind}",
                description=f"A sturdy {kind.lower()} for a brave knight (+{new_level}).",
            )
        return Flavor(
            quote="Blast! The metal was too weak.",
            weapon_name=weapon.name,
            description=weapon.description or "A sturdy weapon for a brave knight.",
        )

    def generate_battle_log(self, weapon: Weapon, opponent: str, won: bool) -> str:
        if won:
            return f"{weapon.name} (+{weapon.level}) struck down {opponent}!"
        return f"{weapon.name} (+{weapon.level}) fell before {opponent}."


CANNED = CannedFlavor()


def safe_flavor(
    generator: Optional[FlavorGenerator],
    weapon: Weapon,
    success: bool,
    new_level: int,
    logger: Optional[ChannelLogger] = None,
) -> Flavor:
    if generator is None:
        return CANNED.generate_flavor(weapon, success, new_level)
    try:
        return generator.generate_flavor(weapon, success, new_level)
    except Exception as exc:  # collaborator failures never abort resolution
        (logger or get_channel("flavor")).warning("Flavor generation failed, using canned text: %s", exc)
        return CANNED.generate_flavor(weapon, success, new_level)


def safe_battle_log(
    generator: Optional[BattleLogGenerator],
    weapon: Weapon,
    opponent: str,
    won: bool,
    logger: Optional[ChannelLogger] = None,
) -> str:
    if generator is None:
        return CANNED.generate_battle_log(weapon, opponent, won)
    try:
        return generator.generate_battle_log(weapon, opponent, won)
    except Exception as exc:  # collaborator failures never abort resolution
        (logger or get_channel("flavor")).warning("Battle log generation failed, using canned text: %s", exc)
        return CANNED.generate_battle_log(weapon, opponent, won)
