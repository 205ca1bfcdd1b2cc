"""Game balance tables and economy constants.

Values follow the live game balance ("reach +20 within a week" retune).
Tweak values here to adjust enhancement odds, costs and battle scaling.
Nothing else in the package hardcodes a cost or a base probability.
"""

MAX_LEVEL: int = 20
MAX_ELEMENT_LEVEL: int = 10

# Weapon enhancement bands
# Format: (first_level_of_band, cost_per_level, success, maintain, destroy)
# Cost is cost_per_level * (level + 1), except level 0 which is flat.
WEAPON_TIER_BANDS: list[tuple[int, int, float, float, float]] = [
    (0, 100, 0.95, 0.05, 0.00),      # flat 100
    (1, 200, 0.90, 0.10, 0.00),
    (5, 500, 0.80, 0.18, 0.02),
    (8, 1_000, 0.65, 0.30, 0.05),
    (10, 3_000, 0.50, 0.40, 0.10),
    (13, 8_000, 0.40, 0.45, 0.15),
    (16, 20_000, 0.30, 0.50, 0.20),
    (19, 50_000, 0.20, 0.55, 0.25),
]

# Element enhancement bands, same format
ELEMENT_TIER_BANDS: list[tuple[int, int, float, float, float]] = [
    (0, 5_000, 0.90, 0.10, 0.00),    # flat 5000
    (1, 10_000, 0.80, 0.20, 0.00),
    (3, 25_000, 0.60, 0.35, 0.05),
    (5, 50_000, 0.45, 0.45, 0.10),
    (7, 100_000, 0.30, 0.55, 0.15),
]

# Base damage per weapon type (Sword/Spear fall back to the default)
BASE_DAMAGE: dict[str, int] = {
    "Hammer": 15,
    "Axe": 12,
}
DEFAULT_BASE_DAMAGE: int = 10

# Name given to a brand-new (or rebuilt) level 0 weapon
BASE_WEAPON_NAMES: dict[str, str] = {
    "Sword": "Rusty Sword",
    "Axe": "Blunt Axe",
    "Hammer": "Cracked Hammer",
    "Spear": "Bent Spear",
}
STARTER_DESCRIPTION: str = "A sword left unused so long it has rusted."
REBUILT_DESCRIPTION: str = "Forged anew from the remains of a destroyed weapon."
REPLACED_DESCRIPTION: str = "A weapon ready for a new adventure."

# Account creation
STARTING_GOLD: int = 300_000
STARTING_SCROLLS: int = 5

# Enhancement modifiers
SCROLL_BONUS: float = 0.20          # one-shot +20% success per scroll
RANK_PENALTY: float = 0.10          # strict leaderboard leader
RANK_DESTROY_FACTOR: float = 0.5    # share of the penalty added to destroy
MIN_SUCCESS_CHANCE: float = 0.05
MAX_SUCCESS_CHANCE: float = 0.95
BLESSING_CHANCE: float = 0.10       # Lucky Goddess
BLESSING_LEVELS: int = 3
DEBUG_BOOST_SUCCESS: float = 0.90
DESTROY_REFUND_RATE: float = 0.20

# Shop prices
SCROLL_PRICE: int = 100_000
ELEMENT_ASSIGN_COST: int = 50_000

# Attendance reward
ATTENDANCE_INTERVAL_SECONDS: int = 4 * 60 * 60
ATTENDANCE_REWARD: int = 500_000

# Battle
DAILY_BATTLE_LIMIT: int = 20
POWER_PER_LEVEL: int = 30
POWER_PER_LEVEL_SQUARED: int = 3
BASE_WIN_CHANCE: float = 0.5
LEVEL_BONUS_PER_LEVEL: float = 0.05
LEVEL_BONUS_CAP: float = 0.25
POWER_BONUS_SCALE: float = 0.3
POWER_BONUS_CAP: float = 0.15
TYPE_BONUS: float = 0.08
ELEMENT_BONUS: float = 0.05
ELEMENT_LEVEL_BONUS_PER_LEVEL: float = 0.008
ELEMENT_LEVEL_BONUS_CAP: float = 0.08
MIN_WIN_CHANCE: float = 0.20
MAX_WIN_CHANCE: float = 0.80

# Indomitable Spirit: opponent 3-5 levels above, 5% comeback with loot
SPIRIT_MIN_GAP: int = 3
SPIRIT_MAX_GAP: int = 5
SPIRIT_CHANCE: float = 0.05
SPIRIT_LOOT_RATE: float = 0.5

BASE_BATTLE_REWARD: int = 100
REWARD_PER_OPPONENT_LEVEL: int = 20
UNDERDOG_BONUS_PER_LEVEL: float = 0.5
CONSOLATION_RATE: float = 0.2

# Bragging figure posted with a show-off
SHOWOFF_PER_LEVEL: int = 10
SHOWOFF_EXPONENT: float = 1.8

# Activity feed
FEED_MAX_ENTRIES: int = 50
