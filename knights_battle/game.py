"""Game session: the caller that drives the resolvers for one player.

The session owns the player's authoritative in-memory state. It checks the
external preconditions (daily quota, opponent lookup), asks the resolvers
for outcomes, persists the new state and publishes activity events.
"""
import random
from dataclasses import replace
from datetime import datetime
from typing import Callable, Optional, Union

from .config import ELEMENT_ASSIGN_COST, FEED_MAX_ENTRIES, SCROLL_PRICE
from .battle import BattleOutcome, BattleResolver, SpecialEvent, base_reward, loot_amount
from .errors import GameError, StaleRecord
from .events import (
    ActivityEvent,
    ActivityFeed,
    BattleEvent,
    ChatEvent,
    ElementEvent,
    EnhancementEvent,
    ShopEvent,
    ShowoffEvent,
    SystemEvent,
    event_to_dict,
)
from .flavor import BattleLogGenerator, FlavorGenerator
from .ledger import (
    assign_element,
    buy_scroll,
    check_invariants,
    claim_attendance,
    gift_gold,
    record_battle,
    reset_weapon,
    show_off_damage,
)
from .logger import GameLogger, get_channel
from .models import (
    ElementType,
    EnhanceContext,
    PlayerRecord,
    PlayerSnapshot,
    PlayerStats,
    Weapon,
    WeaponType,
)
from .quota import AttendanceClock, DailyBattleQuota
from .ranking import find_opponent, is_top_winner, opponent_pool, pick_random_opponent
from .settings import GameSettings, LootPolicy
from .store import GameStore
from .tracks.element import ElementOutcome, ElementResolver
from .tracks.weapon import EnhancementOutcome, EnhancementResolver

GOLD_CAS_RETRIES = 3

ENHANCE_COMMANDS = {"enhance", "강화"}
BATTLE_COMMANDS = {"battle", "전투"}
SCROLL_COMMANDS = {"scroll", "주문서"}


class GameSession:
    """One player's live session.

    Other players can take gold from this account (loot transfer) while the
    session is open, so every mutating operation reloads the record first
    and saves with the gold it loaded as the expected value.
    """

    def __init__(
        self,
        player_id: str,
        store: GameStore,
        settings: Optional[GameSettings] = None,
        rng: Optional[random.Random] = None,
        flavor: Optional[FlavorGenerator] = None,
        battle_log: Optional[BattleLogGenerator] = None,
        quota: Optional[DailyBattleQuota] = None,
        attendance: Optional[AttendanceClock] = None,
        feed: Optional[ActivityFeed] = None,
        logger: Optional[GameLogger] = None,
        username: str = "",
        clock: Callable[[], datetime] = datetime.now,
    ):
        self.settings = settings or GameSettings()
        self.store = store
        self.rng = rng if rng is not None else random.Random(self.settings.seed)
        self.debug_boost = False

        channel = logger.channel if logger else get_channel
        self.economy_log = channel("economy")
        self.battle_log_channel = channel("battle")
        self.enhancer = EnhancementResolver(self.rng, flavor=flavor, logger=channel("enhance"))
        self.element_enhancer = ElementResolver(self.rng, logger=channel("element"))
        self.battler = BattleResolver(self.rng, battle_log=battle_log, logger=self.battle_log_channel)

        record = store.load(player_id)
        if record is None:
            record = PlayerRecord(id=player_id, stats=PlayerStats(username=username or player_id))
            store.save(record)
            self.economy_log.info("created account %s", player_id)
        self.record = record
        self._stored_gold = record.stats.gold

        self.quota = quota or DailyBattleQuota.from_dict(
            record.battle_quota, limit=self.settings.daily_battle_limit, clock=clock
        )
        self.attendance = attendance or AttendanceClock(clock=clock)
        if self.attendance.last_claim is None:
            self.attendance.last_claim = record.last_attendance

        self.feed = feed if feed is not None else ActivityFeed.from_dicts(store.load_activity())
        self.feed.subscribe(self._persist_activity)

    # -- state -------------------------------------------------------------

    @property
    def player_id(self) -> str:
        return self.record.id

    @property
    def username(self) -> str:
        return self.record.stats.username

    @property
    def weapon(self) -> Weapon:
        return self.record.weapon

    @property
    def stats(self) -> PlayerStats:
        return self.record.stats

    def _sync(self) -> None:
        """Reload the stored record so gold changed by other players is seen."""
        fresh = self.store.load(self.player_id)
        if fresh is not None:
            self.record = fresh
            self._stored_gold = fresh.stats.gold

    def _commit(self, weapon: Optional[Weapon] = None, stats: Optional[PlayerStats] = None, **fields) -> None:
        if weapon is not None:
            fields["weapon"] = weapon
        if stats is not None:
            fields["stats"] = stats
        record = replace(self.record, **fields)
        check_invariants(record.weapon, record.stats)
        if not self.store.save(record, expected_gold=self._stored_gold):
            self._sync()
            raise StaleRecord("Your gold changed while you were acting. Nothing was spent, try again.")
        self.record = record
        self._stored_gold = record.stats.gold

    def save(self) -> None:
        self.store.save(self.record)
        self._stored_gold = self.record.stats.gold

    def _persist_activity(self, event: ActivityEvent) -> None:
        entries = [event_to_dict(event)] + self.store.load_activity()
        self.store.save_activity(entries[:FEED_MAX_ENTRIES])

    def population(self) -> list[PlayerSnapshot]:
        return self.store.list_all_players()

    def is_top_winner(self) -> bool:
        return is_top_winner(self.population(), self.player_id)

    def opponents(self) -> list[PlayerSnapshot]:
        return opponent_pool(self.population(), self.player_id)

    def arm_debug_boost(self) -> None:
        """One-shot 90% success for the next weapon enhancement."""
        self.debug_boost = True

    # -- enhancement -------------------------------------------------------

    def enhancement_context(self, use_scroll: bool = False) -> EnhanceContext:
        return EnhanceContext(
            use_scroll=use_scroll,
            is_top_winner=self.is_top_winner(),
            debug_boost=self.debug_boost,
        )

    def enhance(self, use_scroll: bool = False) -> EnhancementOutcome:
        self._sync()
        outcome = self.enhancer.resolve(self.weapon, self.stats, self.enhancement_context(use_scroll))
        self._commit(outcome.weapon, outcome.stats)
        if outcome.record.debug_boost_used:
            self.debug_boost = False

        record = outcome.record
        self.feed.publish(EnhancementEvent(
            username=self.username,
            result=record.result.value,
            prev_level=record.prev_level,
            new_level=record.new_level,
            weapon_name=outcome.weapon.name,
            weapon_type=outcome.weapon.weapon_type.value,
            cost=record.cost,
            gold_after=outcome.stats.gold,
            quote=outcome.narrative,
            refund=record.refund,
            blessing=record.blessing,
        ))
        return outcome

    def enhance_element(self) -> ElementOutcome:
        self._sync()
        outcome = self.element_enhancer.resolve(self.weapon, self.stats)
        self._commit(outcome.weapon, outcome.stats)
        self.feed.publish(ElementEvent(
            username=self.username,
            element=outcome.weapon.element.value,
            result=outcome.record.result.value,
            prev_level=outcome.record.prev_level,
            new_level=outcome.record.new_level,
            weapon_name=outcome.weapon.name,
            cost=outcome.record.cost,
        ))
        return outcome

    # -- shop --------------------------------------------------------------

    def assign_element(self, element: ElementType) -> Weapon:
        self._sync()
        weapon, stats = assign_element(self.weapon, self.stats, element)
        self._commit(weapon, stats)
        self.economy_log.info("%s bound %s", self.player_id, element.value)
        self.feed.publish(ElementEvent(
            username=self.username,
            element=element.value,
            result="assigned",
            prev_level=0,
            new_level=0,
            weapon_name=weapon.name,
            cost=ELEMENT_ASSIGN_COST,
        ))
        return weapon

    def buy_scroll(self) -> PlayerStats:
        self._sync()
        stats = buy_scroll(self.stats)
        self._commit(stats=stats)
        self.feed.publish(ShopEvent(username=self.username, item="Bought an enhancement scroll", gold_change=-SCROLL_PRICE))
        return stats

    def reset_weapon(self, weapon_type: WeaponType) -> Weapon:
        self._sync()
        weapon = reset_weapon(weapon_type)
        self._commit(weapon=weapon)
        self.feed.publish(ShopEvent(username=self.username, item=f"Switched weapon to {weapon_type.value}; all enhancement reset"))
        return weapon

    def claim_attendance(self) -> int:
        self._sync()
        previous = self.attendance.last_claim
        reward = self.attendance.claim()
        try:
            self._commit(stats=claim_attendance(self.stats, reward), last_attendance=self.attendance.last_claim)
        except GameError:
            self.attendance.last_claim = previous
            raise
        self.feed.publish(SystemEvent(text=f"Attendance checked! +{reward:,}G"))
        return reward

    def gift_gold(self, target_id: str, amount: int) -> bool:
        """Administrative grant to any account. False if the account does not exist."""
        for _ in range(GOLD_CAS_RETRIES):
            target = self.store.load(target_id)
            if target is None:
                return False
            granted = gift_gold(target.stats, amount)
            if self.store.compare_and_swap_gold(target_id, target.stats.gold, granted.gold):
                break
        else:
            raise StaleRecord(f"Could not credit {target_id}: gold kept changing")

        self.economy_log.info("%s gifted %d gold to %s", self.player_id, amount, target_id)
        if target_id == self.player_id:
            self._sync()
        self.feed.publish(SystemEvent(text=f"{target.stats.username} received a gift of {amount:,}G"))
        return True

    # -- battle ------------------------------------------------------------

    def battle(self, opponent_id: Optional[str] = None) -> BattleOutcome:
        self._sync()
        self.quota.check()
        population = self.population()
        if opponent_id is None:
            opponent = pick_random_opponent(population, self.player_id, self.rng)
        else:
            opponent = find_opponent(population, self.player_id, opponent_id)
        self.quota.consume()

        stats_before = self.stats
        outcome = self.battler.resolve(self.weapon, stats_before, opponent)
        if outcome.special_event is SpecialEvent.INDOMITABLE_SPIRIT and self.settings.loot_policy is LootPolicy.TRANSFER:
            outcome = self._transfer_loot(opponent, outcome, stats_before)
        outcome = self._commit_battle(outcome)

        self.feed.publish(BattleEvent(
            username=self.username,
            opponent_name=opponent.username,
            is_win=outcome.is_win,
            reward=outcome.reward,
            my_power=outcome.odds.my_power,
            opponent_power=outcome.odds.opponent_power,
            log=outcome.narrative,
            special_event=outcome.special_event.value if outcome.special_event else None,
            looted_gold=outcome.looted_gold,
            multiplier=outcome.multiplier,
        ))
        return outcome

    def _commit_battle(self, outcome: BattleOutcome) -> BattleOutcome:
        """Save a fought battle. It cannot be undone, so a stale save re-applies the result."""
        for _ in range(GOLD_CAS_RETRIES):
            try:
                self._commit(stats=outcome.stats, battle_quota=self.quota.to_dict())
                return outcome
            except StaleRecord:
                outcome = replace(outcome, stats=record_battle(self.stats, outcome.is_win, outcome.reward))
        raise StaleRecord("Your gold kept changing while the battle was saved")

    def _transfer_loot(self, opponent: PlayerSnapshot, outcome: BattleOutcome, stats_before: PlayerStats) -> BattleOutcome:
        """Debit the victim with compare-and-swap and pay out what was actually taken."""
        looted = 0
        for _ in range(GOLD_CAS_RETRIES):
            fresh = self.store.load(opponent.id)
            if fresh is None:
                break
            attempt = loot_amount(fresh.stats.gold)
            if self.store.compare_and_swap_gold(opponent.id, fresh.stats.gold, fresh.stats.gold - attempt):
                looted = attempt
                break
        else:
            self.battle_log_channel.warning("loot transfer from %s lost the race %d times", opponent.id, GOLD_CAS_RETRIES)

        reward = base_reward(opponent.weapon.level) + looted
        return replace(
            outcome,
            reward=reward,
            looted_gold=looted,
            stats=record_battle(stats_before, True, reward),
        )

    # -- social ------------------------------------------------------------

    def show_off(self) -> ShowoffEvent:
        weapon = self.weapon
        event = ShowoffEvent(
            username=self.username,
            weapon_name=weapon.name,
            weapon_type=weapon.weapon_type.value,
            weapon_level=weapon.level,
            damage=show_off_damage(weapon),
            description=weapon.description,
            element=weapon.element.value if weapon.has_element else None,
            element_level=weapon.element_level if weapon.has_element else 0,
        )
        self.feed.publish(event)
        return event

    def chat(self, text: str) -> Union[EnhancementOutcome, BattleOutcome, PlayerStats, ChatEvent, None]:
        """Post a chat line, or run a slash command (/enhance, /battle, /scroll)."""
        text = text.strip()
        if not text:
            return None
        if text.startswith("/"):
            command = text[1:].lower()
            if command in ENHANCE_COMMANDS:
                return self.enhance()
            if command in BATTLE_COMMANDS:
                return self.battle()
            if command in SCROLL_COMMANDS:
                return self.buy_scroll()
        event = ChatEvent(username=self.username, text=text)
        self.feed.publish(event)
        return event

    def delete_account(self) -> bool:
        return self.store.delete(self.player_id)
