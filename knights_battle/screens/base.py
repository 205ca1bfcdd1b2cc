"""Common plumbing for screens that act on the live GameSession."""

from typing import Callable, Optional, TypeVar

from textual.screen import Screen
from textual.widgets import Static

from knights_battle.errors import GameError
from knights_battle.game import GameSession
from knights_battle.models import describe_weapon
from knights_battle.utils import format_gold

T = TypeVar("T")

SESSION_CSS = """
#status-line {
    height: 3;
    padding: 0 1;
    background: $surface;
    border-bottom: solid $primary;
    content-align: left middle;
}

#title {
    text-align: center;
    text-style: bold;
    color: $accent;
    padding: 1;
}

.section-title {
    text-style: bold;
    color: $primary;
    margin-top: 1;
}

#controls {
    height: 3;
    padding: 0 1;
    background: $surface;
}

#controls Button {
    margin-right: 1;
}
"""


class SessionScreen(Screen):
    """Screen bound to the app's GameSession."""

    @property
    def session(self) -> GameSession:
        return self.app.session

    def status_text(self) -> str:
        session = self.session
        stats = session.stats
        return (
            f"{session.username}  |  {describe_weapon(session.weapon)}  |  "
            f"Gold {format_gold(stats.gold)}  |  Scrolls {stats.scrolls}  |  "
            f"W/L {stats.wins}/{stats.losses}  |  Battles left {session.quota.remaining}"
        )

    def refresh_status(self) -> None:
        self.query_one("#status-line", Static).update(self.status_text())

    def attempt(self, action: Callable[[], T]) -> Optional[T]:
        """Run a game action; a rejected action becomes a notification."""
        try:
            result = action()
        except GameError as exc:
            self.notify(str(exc), title="Not allowed", severity="error")
            return None
        self.refresh_status()
        return result
