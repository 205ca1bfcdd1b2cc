from __future__ import annotations

import random
import sys
from dataclasses import replace
from pathlib import Path
from typing import Iterable, Optional

import pytest

sys.path.insert(0, str(Path(__file__).resolve().parent.parent))

from knights_battle.models import (
    ElementType,
    PlayerRecord,
    PlayerSnapshot,
    PlayerStats,
    Weapon,
    WeaponType,
)
from knights_battle.store import MemoryStore


class ScriptedRandom(random.Random):
    """random.Random whose random() returns queued draws in order."""

    def __init__(self, draws: Iterable[float] = ()) -> None:
        super().__init__(0)
        self.draws = list(draws)
        self.calls = 0

    def queue(self, *draws: float) -> None:
        self.draws.extend(draws)

    def getrandbits(self, k: int) -> int:
        # keeps choice() and randrange() on the seeded generator
        return super().getrandbits(k)

    def random(self) -> float:
        if not self.draws:
            raise AssertionError("ScriptedRandom ran out of draws")
        self.calls += 1
        return self.draws.pop(0)


def make_weapon(
    level: int = 0,
    weapon_type: WeaponType = WeaponType.SWORD,
    element: ElementType = ElementType.NONE,
    element_level: int = 0,
    total_enhance_cost: int = 0,
) -> Weapon:
    return replace(
        Weapon.fresh(weapon_type),
        level=level,
        element=element,
        element_level=element_level,
        total_enhance_cost=total_enhance_cost,
    )


def make_snapshot(
    player_id: str,
    level: int = 0,
    wins: int = 0,
    gold: int = 0,
    weapon_type: WeaponType = WeaponType.SWORD,
    element: ElementType = ElementType.NONE,
    element_level: int = 0,
    username: Optional[str] = None,
) -> PlayerSnapshot:
    return PlayerSnapshot(
        id=player_id,
        username=username or player_id,
        wins=wins,
        gold=gold,
        weapon=make_weapon(level, weapon_type, element, element_level),
    )


def make_record(player_id: str, level: int = 0, gold: int = 300_000, wins: int = 0, **weapon_kwargs) -> PlayerRecord:
    return PlayerRecord(
        id=player_id,
        stats=PlayerStats(username=player_id, gold=gold, wins=wins),
        weapon=make_weapon(level, **weapon_kwargs),
    )


@pytest.fixture
def scripted():
    return ScriptedRandom()


@pytest.fixture
def store() -> MemoryStore:
    return MemoryStore()
