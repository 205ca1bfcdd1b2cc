"""Battle win chance and resolution."""
from math import isclose

import pytest

from conftest import ScriptedRandom, make_snapshot, make_weapon
from knights_battle.battle import (
    BattleResolver,
    SpecialEvent,
    base_reward,
    compute_win_chance,
    spirit_eligible,
    underdog_multiplier,
    weapon_power,
)
from knights_battle.config import MAX_LEVEL
from knights_battle.flavor import CANNED
from knights_battle.models import ElementType, Matchup, PlayerStats, WeaponType, describe_weapon

WIN = 0.0
LOSS = 0.99
SPIRIT = 0.01
NO_SPIRIT = 0.99


def _battle(my_level, opponent, draws, stats=None, **weapon_kwargs):
    rng = ScriptedRandom(draws)
    resolver = BattleResolver(rng)
    outcome = resolver.resolve(make_weapon(my_level, **weapon_kwargs), stats or PlayerStats(gold=1_000), opponent)
    return outcome, rng


@pytest.mark.parametrize(
    "weapon_type, level, expected",
    [
        (WeaponType.SWORD, 0, 10),
        (WeaponType.HAMMER, 0, 15),
        (WeaponType.AXE, 5, 12 + 150 + 75),
        (WeaponType.SPEAR, 20, 10 + 600 + 1_200),
    ],
)
def test_weapon_power(weapon_type, level, expected) -> None:
    assert weapon_power(make_weapon(level, weapon_type)) == expected


def test_even_match_is_a_coin_flip() -> None:
    assert isclose(compute_win_chance(make_weapon(7), make_weapon(7)).chance, 0.5)


def test_type_and_element_bonuses() -> None:
    mine = make_weapon(5, WeaponType.SWORD, ElementType.FIRE, 5)
    theirs = make_weapon(5, WeaponType.SPEAR, ElementType.CURSE, 0)
    odds = compute_win_chance(mine, theirs)
    assert odds.type_matchup is Matchup.ADVANTAGE
    assert odds.element_matchup is Matchup.ADVANTAGE
    assert isclose(odds.type_bonus, 0.08)
    assert isclose(odds.element_bonus, 0.05)
    assert isclose(odds.element_level_bonus, 0.04)
    assert isclose(odds.chance, 0.5 + 0.08 + 0.05 + 0.04)


def test_element_level_ignored_without_element() -> None:
    mine = make_weapon(5, element=ElementType.NONE, element_level=9)
    odds = compute_win_chance(mine, make_weapon(5))
    assert odds.element_level_bonus == 0.0


def test_extremes_hit_the_clamp() -> None:
    assert isclose(compute_win_chance(make_weapon(MAX_LEVEL), make_weapon(0)).chance, 0.8)
    assert isclose(compute_win_chance(make_weapon(0), make_weapon(MAX_LEVEL)).chance, 0.2)


@pytest.mark.parametrize("my_level", range(0, MAX_LEVEL + 1, 2))
@pytest.mark.parametrize("their_level", range(0, MAX_LEVEL + 1, 2))
@pytest.mark.parametrize("my_type", list(WeaponType))
@pytest.mark.parametrize(
    "elements",
    [
        (ElementType.NONE, 0, ElementType.NONE, 0),
        (ElementType.FIRE, 10, ElementType.CURSE, 0),
        (ElementType.CURSE, 0, ElementType.FIRE, 10),
    ],
)
def test_win_chance_always_clamped(my_level, their_level, my_type, elements) -> None:
    my_element, my_element_level, their_element, their_element_level = elements
    mine = make_weapon(my_level, my_type, my_element, my_element_level)
    theirs = make_weapon(their_level, WeaponType.HAMMER, their_element, their_element_level)
    assert 0.2 <= compute_win_chance(mine, theirs).chance <= 0.8


@pytest.mark.parametrize("gap, eligible", [(-1, False), (0, False), (2, False), (3, True), (4, True), (5, True), (6, False)])
def test_spirit_eligibility(gap, eligible) -> None:
    assert spirit_eligible(5, 5 + gap) is eligible


@pytest.mark.parametrize("gap", [0, 1, 2, 6, 10])
def test_spirit_never_rolls_outside_gap(gap) -> None:
    opponent = make_snapshot("foe", level=4 + gap, gold=1_000_000)
    # one draw only: a second (spirit) draw would exhaust the script
    outcome, rng = _battle(4, opponent, [LOSS])
    assert outcome.special_event is None
    assert not outcome.is_win
    assert rng.calls == 1


def test_underdog_win_multiplier() -> None:
    opponent = make_snapshot("foe", level=10, gold=500)
    outcome, _ = _battle(6, opponent, [WIN, NO_SPIRIT])
    assert outcome.is_win
    assert outcome.special_event is None
    assert isclose(outcome.multiplier, 3.0)
    assert outcome.reward == 900
    assert outcome.stats.wins == 1
    assert outcome.stats.gold == 1_900


def test_no_underdog_bonus_against_weaker_foe() -> None:
    opponent = make_snapshot("foe", level=2)
    outcome, _ = _battle(9, opponent, [WIN])
    assert outcome.multiplier == 1.0
    assert outcome.reward == base_reward(2) == 140
    assert underdog_multiplier(9, 2) == 1.0


def test_indomitable_spirit_loots_half() -> None:
    opponent = make_snapshot("foe", level=10, gold=10_001)
    outcome, _ = _battle(6, opponent, [LOSS, SPIRIT])
    assert outcome.is_win
    assert outcome.special_event is SpecialEvent.INDOMITABLE_SPIRIT
    assert outcome.looted_gold == 5_000
    assert outcome.reward == 300 + 5_000
    assert outcome.stats.wins == 1
    assert outcome.stats.gold == 1_000 + 5_300


def test_spirit_overrides_normal_win() -> None:
    opponent = make_snapshot("foe", level=9, gold=100)
    outcome, _ = _battle(6, opponent, [WIN, SPIRIT])
    assert outcome.special_event is SpecialEvent.INDOMITABLE_SPIRIT
    assert outcome.looted_gold == 50


def test_loss_pays_consolation() -> None:
    opponent = make_snapshot("foe", level=10)
    outcome, _ = _battle(6, opponent, [LOSS, NO_SPIRIT])
    assert not outcome.is_win
    assert outcome.reward == 60
    assert outcome.stats.losses == 1
    assert outcome.stats.wins == 0
    assert outcome.stats.gold == 1_060


def test_opponent_snapshot_untouched() -> None:
    opponent = make_snapshot("foe", level=10, wins=7, gold=10_000)
    _battle(6, opponent, [LOSS, SPIRIT])
    assert opponent.wins == 7
    assert opponent.gold == 10_000


def test_narrative_falls_back_when_generator_fails() -> None:
    class BrokenLog:
        def generate_battle_log(self, weapon, opponent, won):
            raise TimeoutError("narrator asleep")

    opponent = make_snapshot("foe", level=3, username="Sir Foe")
    resolver = BattleResolver(ScriptedRandom([WIN]), battle_log=BrokenLog())
    weapon = make_weapon(3)
    outcome = resolver.resolve(weapon, PlayerStats(), opponent)
    assert outcome.is_win
    assert "@Sir Foe" in outcome.narrative
    assert outcome.narrative == CANNED.generate_battle_log(weapon, f"@Sir Foe {describe_weapon(opponent.weapon)}", True)
