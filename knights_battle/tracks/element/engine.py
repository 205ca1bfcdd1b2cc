"""Element enhancement resolver.

A smaller copy of the weapon mechanic: no scrolls, no rank penalty, no
blessing and no debug boost. A destroyed element keeps its kind and only
drops back to level 0; there is no refund.
"""

import random
from dataclasses import dataclass, replace
from typing import Optional

from knights_battle.config import MAX_ELEMENT_LEVEL
from knights_battle.errors import AlreadyMaxElementLevel, NoElementAssigned
from knights_battle.ledger import debit, require_gold
from knights_battle.logger import ChannelLogger
from knights_battle.models import EnhanceResult, EnhancementConfig, PlayerStats, Weapon
from knights_battle.tiers import element_tier


@dataclass(frozen=True, slots=True)
class ElementRecord:
    result: EnhanceResult
    prev_level: int
    new_level: int
    cost: int


@dataclass(frozen=True, slots=True)
class ElementOutcome:
    weapon: Weapon
    stats: PlayerStats
    record: ElementRecord
    narrative: str


class ElementResolver:
    """Resolves element enhancement attempts."""

    __slots__ = ("rng", "logger")

    def __init__(
        self,
        rng: Optional[random.Random] = None,
        logger: Optional[ChannelLogger] = None,
        seed: Optional[int] = None,
    ):
        self.rng = rng if rng is not None else random.Random(seed)
        self.logger = logger

    def _check(self, weapon: Weapon) -> EnhancementConfig:
        if not weapon.has_element:
            raise NoElementAssigned("Assign an element before enhancing it")
        if weapon.element_level >= MAX_ELEMENT_LEVEL:
            raise AlreadyMaxElementLevel(f"Element is already +{MAX_ELEMENT_LEVEL}")
        return element_tier(weapon.element_level)

    def preview(self, weapon: Weapon) -> EnhancementConfig:
        return self._check(weapon)

    def resolve(self, weapon: Weapon, stats: PlayerStats) -> ElementOutcome:
        """Perform one element enhancement attempt."""
        config = self._check(weapon)
        require_gold(stats, config.cost)
        stats = debit(stats, config.cost)

        roll = self.rng.random()
        prev_level = weapon.element_level
        element_name = weapon.element.value

        if roll < config.success_chance:
            result = EnhanceResult.SUCCESS
            new_level = prev_level + 1
            narrative = f"{element_name} element empowered to +{new_level}!"
        elif roll < config.success_chance + config.maintain_chance:
            result = EnhanceResult.MAINTAIN
            new_level = prev_level
            narrative = f"{element_name} element held at +{prev_level}."
        else:
            result = EnhanceResult.DESTROY
            new_level = 0
            narrative = f"{element_name} element shattered and fell back to +0!"

        weapon = replace(weapon, element_level=new_level)

        if self.logger and self.logger.enabled:
            self.logger.debug(
                "element %s +%d -> +%d %s (roll=%.4f cost=%d)",
                element_name, prev_level, new_level, result.value, roll, config.cost,
            )

        record = ElementRecord(result=result, prev_level=prev_level, new_level=new_level, cost=config.cost)
        return ElementOutcome(weapon=weapon, stats=stats, record=record, narrative=narrative)
