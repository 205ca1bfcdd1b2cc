"""Value types shared by the resolvers, the ledger and the store."""
import uuid
from dataclasses import asdict, dataclass, field, replace
from datetime import datetime
from enum import Enum
from typing import Optional

from .config import (
    BASE_DAMAGE,
    BASE_WEAPON_NAMES,
    DEFAULT_BASE_DAMAGE,
    REPLACED_DESCRIPTION,
    STARTER_DESCRIPTION,
    STARTING_GOLD,
    STARTING_SCROLLS,
)


class WeaponType(Enum):
    """Weapon families. Fixed at creation, changed only by a reset."""
    SWORD = "Sword"      # 검
    AXE = "Axe"          # 도끼
    HAMMER = "Hammer"    # 망치
    SPEAR = "Spear"      # 창


class ElementType(Enum):
    """Weapon elements. NONE is equivalent to no element at all."""
    NONE = "None"
    FIRE = "Fire"        # 화염
    WATER = "Water"      # 물
    LIGHT = "Light"      # 빛
    DARK = "Dark"        # 어둠
    CURSE = "Curse"      # 저주


class Matchup(Enum):
    """Result of comparing two weapon types or two elements."""
    ADVANTAGE = "advantage"
    DISADVANTAGE = "disadvantage"
    NEUTRAL = "neutral"


class EnhanceResult(Enum):
    """Outcome branch of a single enhancement attempt."""
    SUCCESS = "success"
    MAINTAIN = "maintain"
    DESTROY = "destroy"


def new_weapon_id() -> str:
    return f"weapon_{uuid.uuid4().hex}"


def base_damage_for(weapon_type: WeaponType) -> int:
    return BASE_DAMAGE.get(weapon_type.value, DEFAULT_BASE_DAMAGE)


@dataclass(frozen=True, slots=True)
class EnhancementConfig:
    """Cost and base odds of one enhancement attempt at a given level."""
    cost: int
    success_chance: float
    maintain_chance: float
    destroy_chance: float


@dataclass(frozen=True, slots=True)
class Weapon:
    """A player's weapon.

    Instances are never mutated; destroying or replacing a weapon produces
    a new instance with a new id so a stale total_enhance_cost cannot leak
    into the replacement.
    """
    id: str
    weapon_type: WeaponType
    name: str
    level: int = 0
    base_damage: int = DEFAULT_BASE_DAMAGE
    description: str = ""
    total_enhance_cost: int = 0
    element: ElementType = ElementType.NONE
    element_level: int = 0

    @property
    def has_element(self) -> bool:
        return self.element is not ElementType.NONE

    @classmethod
    def fresh(cls, weapon_type: WeaponType, description: str = REPLACED_DESCRIPTION) -> "Weapon":
        """Build a level 0 weapon of the given type with a new id."""
        return cls(
            id=new_weapon_id(),
            weapon_type=weapon_type,
            name=BASE_WEAPON_NAMES[weapon_type.value],
            level=0,
            base_damage=base_damage_for(weapon_type),
            description=description,
            total_enhance_cost=0,
        )

    @classmethod
    def starter(cls) -> "Weapon":
        return cls(
            id="starter_sword",
            weapon_type=WeaponType.SWORD,
            name=BASE_WEAPON_NAMES[WeaponType.SWORD.value],
            base_damage=base_damage_for(WeaponType.SWORD),
            description=STARTER_DESCRIPTION,
        )

    def to_dict(self) -> dict:
        data = asdict(self)
        data["weapon_type"] = self.weapon_type.value
        data["element"] = self.element.value
        return data

    @classmethod
    def from_dict(cls, data: dict) -> "Weapon":
        element = data.get("element") or ElementType.NONE.value
        return cls(
            id=data["id"],
            weapon_type=WeaponType(data["weapon_type"]),
            name=data.get("name", ""),
            level=int(data.get("level", 0)),
            base_damage=int(data.get("base_damage", DEFAULT_BASE_DAMAGE)),
            description=data.get("description", ""),
            total_enhance_cost=int(data.get("total_enhance_cost", 0)),
            element=ElementType(element),
            element_level=int(data.get("element_level") or 0),
        )


@dataclass(frozen=True, slots=True)
class PlayerStats:
    """A player's economy counters."""
    username: str = ""
    gold: int = STARTING_GOLD
    scrolls: int = STARTING_SCROLLS
    wins: int = 0
    losses: int = 0

    def to_dict(self) -> dict:
        return asdict(self)

    @classmethod
    def from_dict(cls, data: dict) -> "PlayerStats":
        return cls(
            username=data.get("username", ""),
            gold=int(data.get("gold", 0)),
            scrolls=int(data.get("scrolls", 0)),
            wins=int(data.get("wins", 0)),
            losses=int(data.get("losses", 0)),
        )


@dataclass(frozen=True, slots=True)
class EnhanceContext:
    """Per-attempt modifiers supplied by the caller."""
    use_scroll: bool = False
    is_top_winner: bool = False
    debug_boost: bool = False


@dataclass(frozen=True, slots=True)
class PlayerSnapshot:
    """One row of the population snapshot (leaderboard / opponent pool)."""
    id: str
    username: str
    wins: int
    gold: int
    weapon: Weapon


@dataclass(slots=True)
class PlayerRecord:
    """Everything persisted for one account.

    Besides stats and weapon the record carries the per-account timers:
    the last attendance claim and the daily battle counter (as written by
    DailyBattleQuota.to_dict), so neither resets when the game restarts.
    """
    id: str
    stats: PlayerStats = field(default_factory=PlayerStats)
    weapon: Weapon = field(default_factory=Weapon.starter)
    last_attendance: Optional[datetime] = None
    battle_quota: Optional[dict] = None

    def snapshot(self) -> PlayerSnapshot:
        return PlayerSnapshot(
            id=self.id,
            username=self.stats.username,
            wins=self.stats.wins,
            gold=self.stats.gold,
            weapon=self.weapon,
        )

    def copy(self) -> "PlayerRecord":
        return replace(self, battle_quota=dict(self.battle_quota) if self.battle_quota else None)

    def to_dict(self) -> dict:
        data = {"id": self.id, "stats": self.stats.to_dict(), "weapon": self.weapon.to_dict()}
        if self.last_attendance is not None:
            data["last_attendance"] = self.last_attendance.isoformat()
        if self.battle_quota:
            data["battle_quota"] = dict(self.battle_quota)
        return data

    @classmethod
    def from_dict(cls, data: dict) -> "PlayerRecord":
        last_attendance = data.get("last_attendance")
        return cls(
            id=data["id"],
            stats=PlayerStats.from_dict(data.get("stats", {})),
            weapon=Weapon.from_dict(data["weapon"]) if data.get("weapon") else Weapon.starter(),
            last_attendance=datetime.fromisoformat(last_attendance) if last_attendance else None,
            battle_quota=data.get("battle_quota"),
        )


def describe_weapon(weapon: Weapon, element_label: Optional[str] = None) -> str:
    """Short display string, e.g. "[+7] Shadow Blade (Sword) [Fire+2]"."""
    text = f"[+{weapon.level}] {weapon.name} ({weapon.weapon_type.value})"
    if weapon.has_element:
        label = element_label or weapon.element.value
        text += f" [{label}+{weapon.element_level}]"
    return text
