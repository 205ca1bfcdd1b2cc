"""Weapon enhancement resolver.

One call resolves one enhancement attempt: it prices the attempt from the
weapon tier curve, applies scroll / leaderboard / debug modifiers, draws
the Lucky Goddess blessing and the main roll from the supplied RNG, and
returns the new weapon and stats together with a structured record.
"""

import math
import random
from dataclasses import dataclass, replace
from typing import Optional

from knights_battle.config import (
    BLESSING_CHANCE,
    BLESSING_LEVELS,
    DEBUG_BOOST_SUCCESS,
    DESTROY_REFUND_RATE,
    MAX_LEVEL,
    MAX_SUCCESS_CHANCE,
    MIN_SUCCESS_CHANCE,
    RANK_DESTROY_FACTOR,
    RANK_PENALTY,
    REBUILT_DESCRIPTION,
    SCROLL_BONUS,
)
from knights_battle.errors import AlreadyMaxLevel
from knights_battle.flavor import Flavor, FlavorGenerator, safe_flavor
from knights_battle.ledger import consume_scroll, credit, debit, require_gold
from knights_battle.logger import ChannelLogger
from knights_battle.models import (
    EnhanceContext,
    EnhanceResult,
    EnhancementConfig,
    PlayerStats,
    Weapon,
)
from knights_battle.tiers import weapon_tier


@dataclass(frozen=True, slots=True)
class EnhancementOdds:
    """Odds actually used for one attempt after all modifiers."""
    cost: int
    success_chance: float
    maintain_chance: float
    destroy_chance: float
    bonus_chance: float = 0.0
    rank_penalty: float = 0.0
    debug_boost: bool = False

    @property
    def effective_destroy_chance(self) -> float:
        """Share of main rolls that land past success + maintain.

        This is what the draw actually destroys on. It can differ from
        destroy_chance, which is the adjusted table figure.
        """
        return max(1.0 - self.success_chance - self.maintain_chance, 0.0)


@dataclass(frozen=True, slots=True)
class EnhancementRecord:
    """Structured result of one attempt, for persistence and narration."""
    result: EnhanceResult
    prev_level: int
    new_level: int
    cost: int
    refund: Optional[int] = None
    blessing: bool = False
    scroll_used: bool = False
    debug_boost_used: bool = False


@dataclass(frozen=True, slots=True)
class EnhancementOutcome:
    """New state plus what happened."""
    weapon: Weapon
    stats: PlayerStats
    record: EnhancementRecord
    odds: EnhancementOdds
    flavor: Flavor

    @property
    def narrative(self) -> str:
        return self.flavor.quote


def adjust_odds(
    config: EnhancementConfig,
    bonus_chance: float = 0.0,
    rank_penalty: float = 0.0,
    debug_boost: bool = False,
) -> EnhancementOdds:
    """Combine base odds with scroll bonus, rank penalty and debug boost.

    The maintain chance is never adjusted; the draw uses half-open
    intervals [0, success) and [success, success + maintain).
    """
    if debug_boost:
        success = DEBUG_BOOST_SUCCESS
        destroy = 0.0
    else:
        success = min(max(config.success_chance + bonus_chance - rank_penalty, MIN_SUCCESS_CHANCE), MAX_SUCCESS_CHANCE)
        destroy = max(config.destroy_chance - bonus_chance + rank_penalty * RANK_DESTROY_FACTOR, 0.0)
    return EnhancementOdds(
        cost=config.cost,
        success_chance=success,
        maintain_chance=config.maintain_chance,
        destroy_chance=destroy,
        bonus_chance=bonus_chance,
        rank_penalty=rank_penalty,
        debug_boost=debug_boost,
    )


class EnhancementResolver:
    """Resolves weapon enhancement attempts.

    The resolver holds no game state of its own; only the RNG is kept so
    a seeded session is reproducible.
    """

    __slots__ = ("rng", "flavor", "logger")

    def __init__(
        self,
        rng: Optional[random.Random] = None,
        flavor: Optional[FlavorGenerator] = None,
        logger: Optional[ChannelLogger] = None,
        seed: Optional[int] = None,
    ):
        self.rng = rng if rng is not None else random.Random(seed)
        self.flavor = flavor
        self.logger = logger

    def preview(self, weapon: Weapon, stats: PlayerStats, context: EnhanceContext) -> EnhancementOdds:
        """Odds the next attempt would use, without drawing or validating gold."""
        if weapon.level >= MAX_LEVEL:
            raise AlreadyMaxLevel(f"Weapon is already +{MAX_LEVEL}")
        config = weapon_tier(weapon.level)
        bonus = SCROLL_BONUS if context.use_scroll and stats.scrolls > 0 else 0.0
        penalty = RANK_PENALTY if context.is_top_winner else 0.0
        return adjust_odds(config, bonus, penalty, context.debug_boost)

    def resolve(
        self,
        weapon: Weapon,
        stats: PlayerStats,
        context: EnhanceContext = EnhanceContext(),
    ) -> EnhancementOutcome:
        """Perform one enhancement attempt."""
        # Preconditions before any mutation
        if weapon.level >= MAX_LEVEL:
            raise AlreadyMaxLevel(f"Weapon is already +{MAX_LEVEL}")
        config = weapon_tier(weapon.level)
        require_gold(stats, config.cost)

        stats = debit(stats, config.cost)
        scroll_used = False
        if context.use_scroll:
            stats, scroll_used = consume_scroll(stats)

        odds = adjust_odds(
            config,
            bonus_chance=SCROLL_BONUS if scroll_used else 0.0,
            rank_penalty=RANK_PENALTY if context.is_top_winner else 0.0,
            debug_boost=context.debug_boost,
        )

        rng_random = self.rng.random
        blessing = rng_random() < BLESSING_CHANCE
        roll = rng_random()

        prev_level = weapon.level
        new_total = weapon.total_enhance_cost + config.cost
        refund = None

        if blessing or roll < odds.success_chance:
            result = EnhanceResult.SUCCESS
            new_level = min(prev_level + (BLESSING_LEVELS if blessing else 1), MAX_LEVEL)
            flavor = safe_flavor(self.flavor, weapon, True, new_level, self.logger)
            weapon = replace(
                weapon,
                level=new_level,
                name=flavor.weapon_name,
                description=flavor.description,
                total_enhance_cost=new_total,
            )
        elif roll < odds.success_chance + odds.maintain_chance:
            result = EnhanceResult.MAINTAIN
            new_level = prev_level
            flavor = safe_flavor(self.flavor, weapon, False, prev_level, self.logger)
            weapon = replace(weapon, total_enhance_cost=new_total)
        else:
            result = EnhanceResult.DESTROY
            new_level = 0
            refund = math.floor(new_total * DESTROY_REFUND_RATE)
            flavor = safe_flavor(self.flavor, weapon, False, 0, self.logger)
            stats = credit(stats, refund)
            weapon = Weapon.fresh(weapon.weapon_type, REBUILT_DESCRIPTION)

        if self.logger and self.logger.enabled:
            self.logger.debug(
                "enhance +%d -> +%d %s (roll=%.4f success=%.2f blessing=%s scroll=%s cost=%d refund=%s)",
                prev_level, new_level, result.value, roll, odds.success_chance,
                blessing, scroll_used, config.cost, refund,
            )

        record = EnhancementRecord(
            result=result,
            prev_level=prev_level,
            new_level=new_level,
            cost=config.cost,
            refund=refund,
            blessing=blessing,
            scroll_used=scroll_used,
            debug_boost_used=context.debug_boost,
        )
        return EnhancementOutcome(weapon=weapon, stats=stats, record=record, odds=odds, flavor=flavor)
