"""Weapon enhancement resolver."""
from math import isclose

import pytest

from conftest import ScriptedRandom, make_weapon
from knights_battle.config import MAX_LEVEL, REBUILT_DESCRIPTION
from knights_battle.errors import AlreadyMaxLevel, InsufficientGold
from knights_battle.models import (
    ElementType,
    EnhanceContext,
    EnhanceResult,
    EnhancementConfig,
    PlayerStats,
    Weapon,
    WeaponType,
)
from knights_battle.tiers import weapon_tier
from knights_battle.tracks.weapon import EnhancementResolver, adjust_odds

NO_BLESSING = 0.5
BLESSING = 0.05


def _resolve(weapon, stats, draws, context=EnhanceContext(), flavor=None):
    rng = ScriptedRandom(draws)
    outcome = EnhancementResolver(rng, flavor=flavor).resolve(weapon, stats, context)
    return outcome, rng


def test_level_19_success_reaches_max() -> None:
    weapon = make_weapon(19)
    outcome, _ = _resolve(weapon, PlayerStats(gold=5_000_000), [NO_BLESSING, 0.0])
    assert outcome.record.result is EnhanceResult.SUCCESS
    assert outcome.record.new_level == MAX_LEVEL
    assert outcome.weapon.level == MAX_LEVEL
    assert outcome.weapon.id == weapon.id
    assert outcome.weapon.total_enhance_cost == 1_000_000
    assert outcome.stats.gold == 4_000_000


def test_destroy_refunds_and_rebuilds_weapon() -> None:
    weapon = make_weapon(10, WeaponType.AXE, ElementType.FIRE, 4, total_enhance_cost=50_000)
    outcome, _ = _resolve(weapon, PlayerStats(gold=100_000), [NO_BLESSING, 0.99])

    record = outcome.record
    assert record.result is EnhanceResult.DESTROY
    assert record.cost == 33_000
    assert record.refund == 16_600
    assert record.new_level == 0
    assert outcome.stats.gold == 100_000 - 33_000 + 16_600

    rebuilt = outcome.weapon
    assert rebuilt.level == 0
    assert rebuilt.total_enhance_cost == 0
    assert rebuilt.id != weapon.id
    assert rebuilt.weapon_type is WeaponType.AXE
    assert rebuilt.name == "Blunt Axe"
    assert rebuilt.element is ElementType.NONE
    assert rebuilt.description == REBUILT_DESCRIPTION


def test_maintain_keeps_level_and_adds_cost() -> None:
    weapon = make_weapon(10, total_enhance_cost=1_000)
    outcome, _ = _resolve(weapon, PlayerStats(gold=100_000), [NO_BLESSING, 0.6])
    assert outcome.record.result is EnhanceResult.MAINTAIN
    assert outcome.weapon.level == 10
    assert outcome.weapon.id == weapon.id
    assert outcome.weapon.total_enhance_cost == 34_000
    assert outcome.stats.gold == 67_000
    assert outcome.record.refund is None


def test_outcome_intervals_are_half_open() -> None:
    # level 10: success [0, 0.5), maintain [0.5, 0.9), destroy [0.9, 1)
    stats = PlayerStats(gold=1_000_000)
    assert _resolve(make_weapon(10), stats, [NO_BLESSING, 0.5])[0].record.result is EnhanceResult.MAINTAIN
    assert _resolve(make_weapon(10), stats, [NO_BLESSING, 0.4999])[0].record.result is EnhanceResult.SUCCESS
    assert _resolve(make_weapon(10), stats, [NO_BLESSING, 0.95])[0].record.result is EnhanceResult.DESTROY


def test_insufficient_gold_changes_nothing() -> None:
    weapon = make_weapon(1)
    stats = PlayerStats(gold=50, scrolls=3)
    rng = ScriptedRandom([NO_BLESSING, 0.0])
    with pytest.raises(InsufficientGold) as excinfo:
        EnhancementResolver(rng).resolve(weapon, stats, EnhanceContext(use_scroll=True))
    assert excinfo.value.required == 400
    assert excinfo.value.available == 50
    assert rng.calls == 0
    assert stats.gold == 50 and stats.scrolls == 3
    assert weapon.level == 1


def test_max_level_is_rejected() -> None:
    rng = ScriptedRandom([NO_BLESSING, 0.0])
    with pytest.raises(AlreadyMaxLevel):
        EnhancementResolver(rng).resolve(make_weapon(MAX_LEVEL), PlayerStats(gold=10_000_000))
    assert rng.calls == 0


def test_scroll_is_consumed_and_boosts_success() -> None:
    stats = PlayerStats(gold=100_000, scrolls=2)
    outcome, _ = _resolve(make_weapon(10), stats, [NO_BLESSING, 0.65], EnhanceContext(use_scroll=True))
    assert outcome.record.result is EnhanceResult.SUCCESS
    assert outcome.record.scroll_used
    assert outcome.stats.scrolls == 1
    assert isclose(outcome.odds.success_chance, 0.70)
    assert outcome.odds.destroy_chance == 0.0


def test_scroll_requested_without_scrolls_has_no_bonus() -> None:
    stats = PlayerStats(gold=100_000, scrolls=0)
    outcome, _ = _resolve(make_weapon(10), stats, [NO_BLESSING, 0.65], EnhanceContext(use_scroll=True))
    assert outcome.record.result is EnhanceResult.MAINTAIN
    assert not outcome.record.scroll_used
    assert outcome.stats.scrolls == 0


def test_scroll_kept_when_not_requested() -> None:
    outcome, _ = _resolve(make_weapon(3), PlayerStats(gold=100_000, scrolls=5), [NO_BLESSING, 0.0])
    assert outcome.stats.scrolls == 5
    assert not outcome.record.scroll_used


@pytest.mark.parametrize("level, expected", [(5, 8), (17, 20), (18, 20), (19, 20)])
def test_blessing_jumps_three_levels_capped(level, expected) -> None:
    outcome, _ = _resolve(make_weapon(level), PlayerStats(gold=10_000_000), [BLESSING, 0.99])
    assert outcome.record.result is EnhanceResult.SUCCESS
    assert outcome.record.blessing
    assert outcome.weapon.level == expected


def test_top_winner_penalty() -> None:
    odds = adjust_odds(weapon_tier(10), rank_penalty=0.10)
    assert isclose(odds.success_chance, 0.40)
    assert isclose(odds.destroy_chance, 0.15)
    assert isclose(odds.maintain_chance, 0.40)


@pytest.mark.parametrize(
    "success, bonus, penalty, expected",
    [
        (0.10, 0.0, 0.10, 0.05),
        (0.90, 0.20, 0.0, 0.95),
        (0.20, 0.20, 0.10, 0.30),
    ],
)
def test_success_chance_is_clamped(success, bonus, penalty, expected) -> None:
    config = EnhancementConfig(cost=100, success_chance=success, maintain_chance=1 - success, destroy_chance=0.0)
    assert isclose(adjust_odds(config, bonus, penalty).success_chance, expected)


@pytest.mark.parametrize("level", range(MAX_LEVEL))
@pytest.mark.parametrize("use_scroll", [False, True])
@pytest.mark.parametrize("top_winner", [False, True])
def test_adjusted_odds_stay_in_bounds(level, use_scroll, top_winner) -> None:
    resolver = EnhancementResolver(seed=1)
    odds = resolver.preview(
        make_weapon(level),
        PlayerStats(scrolls=1),
        EnhanceContext(use_scroll=use_scroll, is_top_winner=top_winner),
    )
    assert 0.05 <= odds.success_chance <= 0.95
    assert odds.destroy_chance >= 0.0


def test_debug_boost_forces_high_success_without_destroy() -> None:
    context = EnhanceContext(is_top_winner=True, debug_boost=True)
    outcome, _ = _resolve(make_weapon(19), PlayerStats(gold=5_000_000), [NO_BLESSING, 0.85], context)
    assert outcome.record.result is EnhanceResult.SUCCESS
    assert outcome.record.debug_boost_used
    assert isclose(outcome.odds.success_chance, 0.90)
    assert outcome.odds.destroy_chance == 0.0


def test_flavor_failure_falls_back_to_canned_text() -> None:
    class BrokenFlavor:
        def generate_flavor(self, weapon, success, new_level):
            raise ConnectionError("flavor service down")

    outcome, _ = _resolve(make_weapon(2), PlayerStats(gold=10_000), [NO_BLESSING, 0.0], flavor=BrokenFlavor())
    assert outcome.record.result is EnhanceResult.SUCCESS
    assert outcome.weapon.level == 3
    assert outcome.narrative
    assert outcome.weapon.name


def test_custom_flavor_names_the_weapon() -> None:
    from knights_battle.flavor import Flavor

    class Smith:
        def generate_flavor(self, weapon, success, new_level):
            return Flavor("Behold!", f"Dawnbreaker +{new_level}", "Glows faintly.")

    outcome, _ = _resolve(make_weapon(0), PlayerStats(gold=10_000), [NO_BLESSING, 0.0], flavor=Smith())
    assert outcome.weapon.name == "Dawnbreaker +1"
    assert outcome.weapon.description == "Glows faintly."
    assert outcome.narrative == "Behold!"


def test_starter_success_rate() -> None:
    resolver = EnhancementResolver(seed=20240501)
    starter = Weapon.starter()
    stats = PlayerStats(gold=1_000_000)
    successes = sum(
        resolver.resolve(starter, stats).record.result is EnhanceResult.SUCCESS
        for _ in range(1_000)
    )
    assert 0.90 <= successes / 1_000 <= 1.00


@pytest.mark.parametrize("seed", range(10))
def test_gold_is_conserved_per_attempt(seed) -> None:
    resolver = EnhancementResolver(seed=seed)
    weapon = make_weapon(12)
    stats = PlayerStats(gold=100_000_000, scrolls=50)
    for _ in range(50):
        if weapon.level >= MAX_LEVEL:
            break
        outcome = resolver.resolve(weapon, stats, EnhanceContext(use_scroll=seed % 2 == 0))
        record = outcome.record
        assert outcome.stats.gold == stats.gold - record.cost + (record.refund or 0)
        assert 0 <= outcome.weapon.level <= MAX_LEVEL
        weapon, stats = outcome.weapon, outcome.stats


def test_effective_break_chance_covers_the_rest_of_the_roll() -> None:
    odds = adjust_odds(weapon_tier(10), rank_penalty=0.10)
    assert isclose(odds.destroy_chance, 0.15)
    assert odds.effective_destroy_chance == pytest.approx(0.20)
    assert adjust_odds(weapon_tier(10), debug_boost=True).effective_destroy_chance == 0.0
