"""Monte Carlo simulation of the weapon forge and battle odds tables."""
import random
from dataclasses import dataclass, field, replace
from enum import Enum
from typing import Optional

from .battle import compute_win_chance
from .config import MAX_LEVEL, SCROLL_PRICE
from .models import EnhanceContext, EnhanceResult, PlayerStats, Weapon, WeaponType
from .tracks.weapon import EnhancementRecord, EnhancementResolver

# Starting gold and scrolls for a simulated player; spend is tracked separately.
_UNLIMITED = 10 ** 15


class ScrollStrategy(Enum):
    """When to spend an enhancement scroll."""
    NEVER = "never"
    ALWAYS = "always"
    FROM_LEVEL = "from_level"    # only at or above scroll_from


@dataclass
class EnhancementStrategy:
    """Configuration for auto-enhancement behavior."""
    scrolls: ScrollStrategy = ScrollStrategy.NEVER
    scroll_from: int = 10
    is_top_winner: bool = False

    def use_scroll_at(self, level: int) -> bool:
        if self.scrolls is ScrollStrategy.ALWAYS:
            return True
        if self.scrolls is ScrollStrategy.FROM_LEVEL:
            return level >= self.scroll_from
        return False


@dataclass
class SimulationResult:
    """Result of one run from the starting level to the target."""
    target_level: int
    total_attempts: int = 0
    successes: int = 0
    maintains: int = 0
    destroys: int = 0
    blessings: int = 0
    scrolls_used: int = 0
    gold_spent: int = 0
    gold_refunded: int = 0
    reached: bool = False
    attempt_history: list[EnhancementRecord] = field(default_factory=list)

    @property
    def net_gold(self) -> int:
        """Enhancement gold minus refunds, plus the shop price of scrolls used."""
        return self.gold_spent - self.gold_refunded + self.scrolls_used * SCROLL_PRICE


class ForgeSimulator:
    """Simulates repeated weapon enhancement."""

    def __init__(self, seed: Optional[int] = None):
        """Initialize simulator with optional random seed."""
        self.rng = random.Random(seed)
        self.resolver = EnhancementResolver(self.rng)

    def simulate_to_target(
        self,
        target_level: int,
        strategy: EnhancementStrategy,
        start_level: int = 0,
        weapon_type: WeaponType = WeaponType.SWORD,
        max_attempts: int = 100_000,
        keep_history: bool = False,
    ) -> SimulationResult:
        """Run until target level is reached (or max_attempts is hit)."""
        if not 0 < target_level <= MAX_LEVEL:
            raise ValueError(f"Target must be between 1 and {MAX_LEVEL}")

        weapon = replace(Weapon.fresh(weapon_type), level=start_level)
        stats = PlayerStats(gold=_UNLIMITED, scrolls=_UNLIMITED)
        result = SimulationResult(target_level=target_level)
        resolve = self.resolver.resolve

        while weapon.level < target_level and result.total_attempts < max_attempts:
            context = EnhanceContext(
                use_scroll=strategy.use_scroll_at(weapon.level),
                is_top_winner=strategy.is_top_winner,
            )
            outcome = resolve(weapon, stats, context)
            record = outcome.record
            weapon, stats = outcome.weapon, outcome.stats

            result.total_attempts += 1
            result.gold_spent += record.cost
            if record.scroll_used:
                result.scrolls_used += 1
            if record.blessing:
                result.blessings += 1
            if record.result is EnhanceResult.SUCCESS:
                result.successes += 1
            elif record.result is EnhanceResult.MAINTAIN:
                result.maintains += 1
            else:
                result.destroys += 1
                result.gold_refunded += record.refund or 0
            if keep_history:
                result.attempt_history.append(record)

        result.reached = weapon.level >= target_level
        return result

    def run_monte_carlo(
        self,
        target_level: int,
        strategy: EnhancementStrategy,
        num_simulations: int = 1_000,
        start_level: int = 0,
    ) -> dict:
        """Run multiple simulations and return statistics."""
        results = [
            self.simulate_to_target(target_level, strategy, start_level=start_level)
            for _ in range(num_simulations)
        ]

        attempts = sorted(r.total_attempts for r in results)
        net_gold = sorted(r.net_gold for r in results)
        destroys = sorted(r.destroys for r in results)
        scrolls = sorted(r.scrolls_used for r in results)
        blessings = sorted(r.blessings for r in results)

        def percentile(data: list, p: float) -> float:
            idx = int(len(data) * p)
            return data[min(idx, len(data) - 1)]

        def average(data: list) -> float:
            return sum(data) / len(data) if data else 0

        return {
            "num_simulations": num_simulations,
            "start_level": start_level,
            "target_level": target_level,
            "strategy": {
                "scrolls": strategy.scrolls.value,
                "scroll_from": strategy.scroll_from,
                "is_top_winner": strategy.is_top_winner,
            },
            "reached": sum(1 for r in results if r.reached),
            "attempts": {
                "average": average(attempts),
                "p50": percentile(attempts, 0.50),
                "p90": percentile(attempts, 0.90),
                "p99": percentile(attempts, 0.99),
                "worst": attempts[-1],
            },
            "gold": {
                "average": average(net_gold),
                "p50": percentile(net_gold, 0.50),
                "p90": percentile(net_gold, 0.90),
                "p99": percentile(net_gold, 0.99),
                "worst": net_gold[-1],
            },
            "destroys": {
                "average": average(destroys),
                "p90": percentile(destroys, 0.90),
                "worst": destroys[-1],
            },
            "scrolls": {
                "average": average(scrolls),
                "p90": percentile(scrolls, 0.90),
                "worst": scrolls[-1],
            },
            "blessings": {
                "average": average(blessings),
                "p90": percentile(blessings, 0.90),
            },
        }


def battle_odds_table(
    levels: list[int],
    my_type: WeaponType = WeaponType.SWORD,
    opponent_type: WeaponType = WeaponType.SWORD,
) -> dict[int, dict[int, float]]:
    """Win chance for every (my level, opponent level) pair, no elements."""
    table: dict[int, dict[int, float]] = {}
    for my_level in levels:
        mine = replace(Weapon.fresh(my_type), level=my_level)
        row: dict[int, float] = {}
        for opponent_level in levels:
            theirs = replace(Weapon.fresh(opponent_type), level=opponent_level)
            row[opponent_level] = compute_win_chance(mine, theirs).chance
        table[my_level] = row
    return table
