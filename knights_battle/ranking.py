"""Leaderboard and opponent-pool queries over a population snapshot."""
import random
from typing import Iterable, Optional

from .errors import OpponentNotFound
from .models import PlayerSnapshot


def leaderboard(population: Iterable[PlayerSnapshot]) -> list[PlayerSnapshot]:
    """Players ordered by wins, most first."""
    return sorted(population, key=lambda p: p.wins, reverse=True)


def is_top_winner(population: Iterable[PlayerSnapshot], player_id: str) -> bool:
    """True only for the single player with strictly the most wins.

    A tie for first place, or a population of one, carries no penalty.
    """
    ranked = leaderboard(population)
    if len(ranked) < 2:
        return False
    first, second = ranked[0], ranked[1]
    return first.id == player_id and first.wins > second.wins


def opponent_pool(population: Iterable[PlayerSnapshot], player_id: str) -> list[PlayerSnapshot]:
    return [p for p in population if p.id != player_id]


def find_opponent(population: Iterable[PlayerSnapshot], player_id: str, opponent_id: str) -> PlayerSnapshot:
    if opponent_id == player_id:
        raise OpponentNotFound("You cannot battle yourself")
    for entry in population:
        if entry.id == opponent_id:
            return entry
    raise OpponentNotFound(f"No player with id {opponent_id!r}")


def pick_random_opponent(
    population: Iterable[PlayerSnapshot],
    player_id: str,
    rng: Optional[random.Random] = None,
) -> PlayerSnapshot:
    pool = opponent_pool(population, player_id)
    if not pool:
        raise OpponentNotFound("No other players to battle")
    return (rng or random).choice(pool)
