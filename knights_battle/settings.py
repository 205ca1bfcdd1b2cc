"""Runtime settings loaded from settings.json."""
import json
import logging
from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path
from typing import Optional

from .config import DAILY_BATTLE_LIMIT

DEFAULT_CHANNELS: dict[str, bool] = {
    "enhance": True,
    "element": True,
    "battle": True,
    "economy": True,
    "flavor": True,
    "store": False,
}


class LootPolicy(Enum):
    """What happens to the victim's gold when Indomitable Spirit loots it."""
    REWARD_ONLY = "reward_only"   # attacker is paid, victim keeps the gold
    TRANSFER = "transfer"         # victim is debited (compare-and-swap)


@dataclass
class GameSettings:
    """Configuration for one running game process."""
    log_level: int = logging.INFO
    log_channels: dict[str, bool] = field(default_factory=lambda: DEFAULT_CHANNELS.copy())
    daily_battle_limit: int = DAILY_BATTLE_LIMIT
    loot_policy: LootPolicy = LootPolicy.REWARD_ONLY
    data_path: Path = Path("knights_battle_save.json")
    seed: Optional[int] = None

    @classmethod
    def from_settings(cls, settings_path: Path) -> "GameSettings":
        if not settings_path.exists():
            return cls()
        try:
            data = json.loads(settings_path.read_text())
        except json.JSONDecodeError:
            return cls()

        level_name = str(data.get("logLevel", "INFO")).upper()
        channels = DEFAULT_CHANNELS.copy()
        channels.update(data.get("logChannels", {}))
        try:
            loot_policy = LootPolicy(data.get("lootPolicy", LootPolicy.REWARD_ONLY.value))
        except ValueError:
            loot_policy = LootPolicy.REWARD_ONLY

        return cls(
            log_level=getattr(logging, level_name, logging.INFO),
            log_channels=channels,
            daily_battle_limit=int(data.get("dailyBattleLimit", DAILY_BATTLE_LIMIT)),
            loot_policy=loot_policy,
            data_path=Path(data.get("dataPath", "knights_battle_save.json")),
            seed=data.get("seed"),
        )
