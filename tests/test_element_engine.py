"""Element enhancement resolver."""
import pytest

from conftest import ScriptedRandom, make_weapon
from knights_battle.config import MAX_ELEMENT_LEVEL
from knights_battle.errors import AlreadyMaxElementLevel, InsufficientGold, NoElementAssigned
from knights_battle.models import ElementType, EnhanceResult, PlayerStats, WeaponType
from knights_battle.tracks.element import ElementResolver


def test_requires_an_element() -> None:
    rng = ScriptedRandom([0.0])
    with pytest.raises(NoElementAssigned):
        ElementResolver(rng).resolve(make_weapon(5), PlayerStats(gold=1_000_000))
    assert rng.calls == 0


def test_max_element_level_is_rejected() -> None:
    weapon = make_weapon(5, element=ElementType.DARK, element_level=MAX_ELEMENT_LEVEL)
    with pytest.raises(AlreadyMaxElementLevel):
        ElementResolver(ScriptedRandom([0.0])).resolve(weapon, PlayerStats(gold=10_000_000))


def test_insufficient_gold() -> None:
    weapon = make_weapon(element=ElementType.FIRE, element_level=3)
    with pytest.raises(InsufficientGold):
        ElementResolver(ScriptedRandom([0.0])).resolve(weapon, PlayerStats(gold=99_999))


def test_success_raises_element_level_only() -> None:
    weapon = make_weapon(7, element=ElementType.WATER, element_level=3, total_enhance_cost=5_000)
    outcome = ElementResolver(ScriptedRandom([0.1])).resolve(weapon, PlayerStats(gold=150_000))
    assert outcome.record.result is EnhanceResult.SUCCESS
    assert outcome.weapon.element_level == 4
    assert outcome.weapon.level == 7
    assert outcome.weapon.total_enhance_cost == 5_000
    assert outcome.stats.gold == 50_000


def test_maintain() -> None:
    weapon = make_weapon(element=ElementType.LIGHT, element_level=3)
    outcome = ElementResolver(ScriptedRandom([0.7])).resolve(weapon, PlayerStats(gold=100_000))
    assert outcome.record.result is EnhanceResult.MAINTAIN
    assert outcome.weapon.element_level == 3
    assert outcome.stats.gold == 0


def test_destroy_keeps_element_and_weapon() -> None:
    weapon = make_weapon(12, WeaponType.HAMMER, ElementType.CURSE, 6)
    outcome = ElementResolver(ScriptedRandom([0.99])).resolve(weapon, PlayerStats(gold=1_000_000))
    assert outcome.record.result is EnhanceResult.DESTROY
    assert outcome.weapon.element is ElementType.CURSE
    assert outcome.weapon.element_level == 0
    assert outcome.weapon.level == 12
    assert outcome.weapon.id == weapon.id
    assert outcome.stats.gold == 1_000_000 - 350_000


def test_low_element_levels_cannot_break() -> None:
    weapon = make_weapon(element=ElementType.FIRE, element_level=1)
    outcome = ElementResolver(ScriptedRandom([0.9999])).resolve(weapon, PlayerStats(gold=100_000))
    assert outcome.record.result is EnhanceResult.MAINTAIN


def test_preview_reports_tier() -> None:
    weapon = make_weapon(element=ElementType.FIRE, element_level=0)
    config = ElementResolver(seed=3).preview(weapon)
    assert config.cost == 5_000
