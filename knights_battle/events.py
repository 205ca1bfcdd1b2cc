"""Activity feed events.

Each event kind is its own dataclass with a `kind` tag, so consumers can
match on type instead of probing an optional bag of metadata fields.
"""
import time
from collections import deque
from dataclasses import asdict, dataclass, field
from typing import Callable, ClassVar, Iterator, Optional, Union

from .config import FEED_MAX_ENTRIES
from .utils import format_gold


def _now() -> float:
    return time.time()


@dataclass(frozen=True, slots=True)
class EnhancementEvent:
    kind: ClassVar[str] = "enhancement"
    username: str
    result: str
    prev_level: int
    new_level: int
    weapon_name: str
    weapon_type: str
    cost: int
    gold_after: int
    quote: str = ""
    refund: Optional[int] = None
    blessing: bool = False
    timestamp: float = field(default_factory=_now)

    @property
    def gold_change(self) -> int:
        return -self.cost + (self.refund or 0)

    def message(self) -> str:
        if self.result == "success":
            if self.blessing:
                head = f"Lucky Goddess descends! +{self.prev_level} -> +{self.new_level}"
            else:
                head = f"Enhancement success +{self.prev_level} -> +{self.new_level}"
            return f"{head}: {self.weapon_name}. \"{self.quote}\""
        if self.result == "maintain":
            return (
                f"Enhancement held at +{self.prev_level}: {self.weapon_name}. "
                f"Spent {format_gold(self.cost)}G, {format_gold(self.gold_after)}G left."
            )
        return (
            f"Weapon destroyed at +{self.prev_level}! A new {self.weapon_name} was issued. "
            f"Refund +{format_gold(self.refund or 0)}G, {format_gold(self.gold_after)}G left."
        )


@dataclass(frozen=True, slots=True)
class ElementEvent:
    kind: ClassVar[str] = "element"
    username: str
    element: str
    result: str
    prev_level: int
    new_level: int
    weapon_name: str
    cost: int = 0
    timestamp: float = field(default_factory=_now)

    def message(self) -> str:
        if self.result == "assigned":
            return f"{self.element} element bound to {self.weapon_name}."
        if self.result == "success":
            return f"{self.weapon_name}'s {self.element} element rose to +{self.new_level}!"
        if self.result == "maintain":
            return f"{self.weapon_name}'s {self.element} element held at +{self.prev_level}."
        return f"{self.weapon_name}'s {self.element} element shattered back to +0..."


@dataclass(frozen=True, slots=True)
class BattleEvent:
    kind: ClassVar[str] = "battle"
    username: str
    opponent_name: str
    is_win: bool
    reward: int
    my_power: int
    opponent_power: int
    log: str = ""
    special_event: Optional[str] = None
    looted_gold: int = 0
    multiplier: float = 1.0
    timestamp: float = field(default_factory=_now)

    @property
    def gold_change(self) -> int:
        return self.reward

    def message(self) -> str:
        if self.special_event == "indomitable_spirit":
            return (
                f"Indomitable Spirit! {self.username} overturned @{self.opponent_name} "
                f"and looted {format_gold(self.looted_gold)}G (+{format_gold(self.reward)}G). {self.log}"
            )
        if self.is_win:
            bonus = f" Underdog x{self.multiplier:.1f}!" if self.multiplier > 1 else ""
            return f"Victory over @{self.opponent_name}! +{format_gold(self.reward)}G.{bonus} {self.log}"
        return f"Defeat by @{self.opponent_name}. +{format_gold(self.reward)}G consolation. {self.log}"


@dataclass(frozen=True, slots=True)
class ShowoffEvent:
    kind: ClassVar[str] = "showoff"
    username: str
    weapon_name: str
    weapon_type: str
    weapon_level: int
    damage: int
    description: str = ""
    element: Optional[str] = None
    element_level: int = 0
    timestamp: float = field(default_factory=_now)

    def message(self) -> str:
        element = f" [{self.element}+{self.element_level}]" if self.element else ""
        return (
            f"{self.username} shows off [+{self.weapon_level}] {self.weapon_name}{element}: "
            f"{self.damage:,} attack. \"{self.description}\""
        )


@dataclass(frozen=True, slots=True)
class ShopEvent:
    kind: ClassVar[str] = "shop"
    username: str
    item: str
    gold_change: int = 0
    timestamp: float = field(default_factory=_now)

    def message(self) -> str:
        if self.gold_change:
            sign = "+" if self.gold_change > 0 else "-"
            return f"{self.item} ({sign}{format_gold(abs(self.gold_change))}G)"
        return self.item


@dataclass(frozen=True, slots=True)
class ChatEvent:
    kind: ClassVar[str] = "chat"
    username: str
    text: str
    timestamp: float = field(default_factory=_now)

    def message(self) -> str:
        return f"{self.username}: {self.text}"


@dataclass(frozen=True, slots=True)
class SystemEvent:
    kind: ClassVar[str] = "system"
    text: str
    timestamp: float = field(default_factory=_now)

    def message(self) -> str:
        return self.text


ActivityEvent = Union[
    EnhancementEvent,
    ElementEvent,
    BattleEvent,
    ShowoffEvent,
    ShopEvent,
    ChatEvent,
    SystemEvent,
]

EVENT_TYPES: dict[str, type] = {
    cls.kind: cls
    for cls in (EnhancementEvent, ElementEvent, BattleEvent, ShowoffEvent, ShopEvent, ChatEvent, SystemEvent)
}


def event_to_dict(event: ActivityEvent) -> dict:
    data = asdict(event)
    data["kind"] = event.kind
    return data


def event_from_dict(data: dict) -> ActivityEvent:
    data = dict(data)
    kind = data.pop("kind")
    try:
        cls = EVENT_TYPES[kind]
    except KeyError:
        raise ValueError(f"Unknown event kind: {kind!r}") from None
    return cls(**data)


class ActivityFeed:
    """Bounded, newest-first list of activity events with listeners."""

    def __init__(self, max_entries: int = FEED_MAX_ENTRIES):
        self._entries: deque = deque(maxlen=max_entries)
        self._listeners: list[Callable[[ActivityEvent], None]] = []

    def publish(self, event: ActivityEvent) -> None:
        self._entries.appendleft(event)
        for listener in list(self._listeners):
            listener(event)

    def subscribe(self, listener: Callable[[ActivityEvent], None]) -> Callable[[], None]:
        """Register a listener; returns a function that removes it."""
        self._listeners.append(listener)
        return lambda: self._listeners.remove(listener)

    def __iter__(self) -> Iterator[ActivityEvent]:
        return iter(self._entries)

    def __len__(self) -> int:
        return len(self._entries)

    def of_kind(self, kind: str) -> list[ActivityEvent]:
        return [event for event in self._entries if event.kind == kind]

    def clear(self) -> None:
        self._entries.clear()

    @classmethod
    def from_dicts(cls, entries: list[dict], max_entries: int = FEED_MAX_ENTRIES) -> "ActivityFeed":
        """Rebuild a feed from saved event dicts (newest first)."""
        feed = cls(max_entries)
        feed._entries.extend(event_from_dict(entry) for entry in entries[:max_entries])
        return feed
