"""PvP battle resolution against a snapshot of another player's saved state.

Battles are asymmetric: only the attacker's record changes. The opponent is
a point-in-time PlayerSnapshot, so its gold (used for Indomitable Spirit
loot) may be stale by the time the result is persisted.
"""
import math
import random
from dataclasses import dataclass
from enum import Enum
from typing import Optional

from .config import (
    BASE_BATTLE_REWARD,
    BASE_WIN_CHANCE,
    CONSOLATION_RATE,
    ELEMENT_BONUS,
    ELEMENT_LEVEL_BONUS_CAP,
    ELEMENT_LEVEL_BONUS_PER_LEVEL,
    LEVEL_BONUS_CAP,
    LEVEL_BONUS_PER_LEVEL,
    MAX_WIN_CHANCE,
    MIN_WIN_CHANCE,
    POWER_BONUS_CAP,
    POWER_BONUS_SCALE,
    POWER_PER_LEVEL,
    POWER_PER_LEVEL_SQUARED,
    REWARD_PER_OPPONENT_LEVEL,
    SPIRIT_CHANCE,
    SPIRIT_LOOT_RATE,
    SPIRIT_MAX_GAP,
    SPIRIT_MIN_GAP,
    TYPE_BONUS,
    UNDERDOG_BONUS_PER_LEVEL,
)
from .flavor import BattleLogGenerator, safe_battle_log
from .ledger import record_battle
from .logger import ChannelLogger
from .matchups import element_advantage, type_advantage
from .models import Matchup, PlayerSnapshot, PlayerStats, Weapon, describe_weapon


class SpecialEvent(Enum):
    INDOMITABLE_SPIRIT = "indomitable_spirit"


def _clamp(value: float, low: float, high: float) -> float:
    return min(max(value, low), high)


def _matchup_bonus(matchup: Matchup, bonus: float) -> float:
    if matchup is Matchup.ADVANTAGE:
        return bonus
    if matchup is Matchup.DISADVANTAGE:
        return -bonus
    return 0.0


def weapon_power(weapon: Weapon) -> int:
    """Quadratic power curve: base + 30/level + 3/level^2."""
    level = weapon.level
    return weapon.base_damage + level * POWER_PER_LEVEL + level * level * POWER_PER_LEVEL_SQUARED


@dataclass(frozen=True, slots=True)
class WinChance:
    """Every term of the win-probability synthesis, for display and tests."""
    my_power: int
    opponent_power: int
    type_matchup: Matchup
    element_matchup: Matchup
    level_bonus: float
    power_bonus: float
    type_bonus: float
    element_bonus: float
    element_level_bonus: float
    chance: float


def compute_win_chance(mine: Weapon, theirs: Weapon) -> WinChance:
    """Additive terms around 0.5; only the final sum is clamped to [0.2, 0.8]."""
    my_power = weapon_power(mine)
    opponent_power = weapon_power(theirs)

    level_bonus = _clamp((mine.level - theirs.level) * LEVEL_BONUS_PER_LEVEL, -LEVEL_BONUS_CAP, LEVEL_BONUS_CAP)
    if opponent_power > 0:
        power_bonus = _clamp((my_power / opponent_power - 1) * POWER_BONUS_SCALE, -POWER_BONUS_CAP, POWER_BONUS_CAP)
    else:
        power_bonus = POWER_BONUS_CAP
    type_matchup = type_advantage(mine.weapon_type, theirs.weapon_type)
    element_matchup = element_advantage(mine.element, theirs.element)
    type_bonus = _matchup_bonus(type_matchup, TYPE_BONUS)
    element_bonus = _matchup_bonus(element_matchup, ELEMENT_BONUS)
    my_element_level = mine.element_level if mine.has_element else 0
    their_element_level = theirs.element_level if theirs.has_element else 0
    element_level_bonus = _clamp(
        (my_element_level - their_element_level) * ELEMENT_LEVEL_BONUS_PER_LEVEL,
        -ELEMENT_LEVEL_BONUS_CAP,
        ELEMENT_LEVEL_BONUS_CAP,
    )

    chance = _clamp(
        BASE_WIN_CHANCE + level_bonus + power_bonus + type_bonus + element_bonus + element_level_bonus,
        MIN_WIN_CHANCE,
        MAX_WIN_CHANCE,
    )
    return WinChance(
        my_power=my_power,
        opponent_power=opponent_power,
        type_matchup=type_matchup,
        element_matchup=element_matchup,
        level_bonus=level_bonus,
        power_bonus=power_bonus,
        type_bonus=type_bonus,
        element_bonus=element_bonus,
        element_level_bonus=element_level_bonus,
        chance=chance,
    )


def spirit_eligible(my_level: int, opponent_level: int) -> bool:
    """Indomitable Spirit can only trigger against a moderately stronger foe."""
    return SPIRIT_MIN_GAP <= opponent_level - my_level <= SPIRIT_MAX_GAP


def base_reward(opponent_level: int) -> int:
    return BASE_BATTLE_REWARD + opponent_level * REWARD_PER_OPPONENT_LEVEL


def underdog_multiplier(my_level: int, opponent_level: int) -> float:
    return 1 + max(0, opponent_level - my_level) * UNDERDOG_BONUS_PER_LEVEL


def loot_amount(opponent_gold: int) -> int:
    return math.floor(max(opponent_gold, 0) * SPIRIT_LOOT_RATE)


@dataclass(frozen=True, slots=True)
class BattleOutcome:
    is_win: bool
    reward: int
    stats: PlayerStats
    odds: WinChance
    special_event: Optional[SpecialEvent] = None
    looted_gold: int = 0
    multiplier: float = 1.0
    narrative: str = ""


class BattleResolver:
    """Resolves one battle for the attacker. Quota checks live with the caller."""

    __slots__ = ("rng", "battle_log", "logger")

    def __init__(
        self,
        rng: Optional[random.Random] = None,
        battle_log: Optional[BattleLogGenerator] = None,
        logger: Optional[ChannelLogger] = None,
        seed: Optional[int] = None,
    ):
        self.rng = rng if rng is not None else random.Random(seed)
        self.battle_log = battle_log
        self.logger = logger

    def resolve(self, my_weapon: Weapon, my_stats: PlayerStats, opponent: PlayerSnapshot) -> BattleOutcome:
        their_weapon = opponent.weapon
        odds = compute_win_chance(my_weapon, their_weapon)

        rng_random = self.rng.random
        normal_win = rng_random() < odds.chance
        spirit = spirit_eligible(my_weapon.level, their_weapon.level) and rng_random() < SPIRIT_CHANCE

        reward_base = base_reward(their_weapon.level)
        looted = 0
        multiplier = 1.0
        if spirit:
            is_win = True
            looted = loot_amount(opponent.gold)
            reward = reward_base + looted
        elif normal_win:
            is_win = True
            multiplier = underdog_multiplier(my_weapon.level, their_weapon.level)
            reward = math.floor(reward_base * multiplier)
        else:
            is_win = False
            multiplier = CONSOLATION_RATE
            reward = math.floor(reward_base * CONSOLATION_RATE)

        stats = record_battle(my_stats, is_win, reward)
        descriptor = f"@{opponent.username} {describe_weapon(their_weapon)}"
        narrative = safe_battle_log(self.battle_log, my_weapon, descriptor, is_win, self.logger)

        if self.logger and self.logger.enabled:
            self.logger.debug(
                "battle vs %s: chance=%.3f win=%s spirit=%s reward=%d loot=%d",
                opponent.id, odds.chance, is_win, spirit, reward, looted,
            )

        return BattleOutcome(
            is_win=is_win,
            reward=reward,
            stats=stats,
            odds=odds,
            special_event=SpecialEvent.INDOMITABLE_SPIRIT if spirit else None,
            looted_gold=looted,
            multiplier=multiplier,
            narrative=narrative,
        )
