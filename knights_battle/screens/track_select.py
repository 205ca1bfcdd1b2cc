"""Home screen: pick an enhancement track, the arena or the shop."""

from rich.text import Text
from textual.app import ComposeResult
from textual.binding import Binding
from textual.containers import Container, Horizontal
from textual.widgets import Button, Footer, Header, Input, RichLog, Static, Rule

from knights_battle.core import TrackInfo, TrackRegistry
from knights_battle.events import ActivityEvent

from .arena import ArenaScreen
from .base import SESSION_CSS, SessionScreen
from .shop import ShopScreen

# Feed line colour per event kind
FEED_STYLES: dict[str, str] = {
    "enhancement": "green",
    "element": "cyan",
    "battle": "red",
    "showoff": "magenta",
    "shop": "yellow",
    "chat": "white",
    "system": "bold blue",
}


def feed_line(event: ActivityEvent) -> Text:
    return Text(event.message(), style=FEED_STYLES.get(event.kind, ""))


def track_notes(info: TrackInfo) -> str:
    """Description line plus the rules that set this track apart."""
    notes = []
    if info.uses_scrolls:
        notes.append("scrolls apply")
    if info.destroy_resets_weapon:
        notes.append("a break replaces the weapon")
    else:
        notes.append("a break only resets the level")
    if info.has_refund:
        notes.append("breaks refund part of the gold")
    return f"{info.description} ({'; '.join(notes)})"


class TrackButton(Button):
    """Button representing a selectable enhancement track."""

    def __init__(self, track_info: TrackInfo, index: int):
        self.track_info = track_info
        label = f"[{index}] {track_info.name}  (+0 to +{track_info.max_level})"
        super().__init__(label, id=f"track-btn-{track_info.id}")


class TrackSelectScreen(SessionScreen):
    """Starting screen.

    Lists every registered enhancement track, links to the arena and the
    shop, and shows the shared activity feed with a chat line.
    """

    CSS = SESSION_CSS + """
    TrackSelectScreen {
        layout: vertical;
    }

    #track-list-container {
        height: auto;
        padding: 1 2;
    }

    TrackButton {
        width: 100%;
        margin: 1 0 0 0;
    }

    .track-description {
        color: $text-muted;
        margin-left: 4;
    }

    #feed {
        height: 1fr;
        border: solid $primary;
        margin: 0 1;
    }

    #chat-input {
        margin: 0 1;
    }
    """

    BINDINGS = [
        Binding("q", "quit", "Quit"),
        Binding("a", "arena", "Arena"),
        Binding("s", "shop", "Shop"),
        Binding("1", "select_1", "Select 1", show=False),
        Binding("2", "select_2", "Select 2", show=False),
    ]

    def __init__(self):
        super().__init__()
        self.tracks = TrackRegistry.get_all_info()
        self._unsubscribe = None

    def compose(self) -> ComposeResult:
        yield Header()
        yield Static("", id="status-line")

        with Container(id="track-list-container"):
            yield Static("Knight's Battle", id="title")

            for i, track_info in enumerate(self.tracks, 1):
                yield TrackButton(track_info, i)
                yield Static(track_notes(track_info), classes="track-description")

            yield Rule()
            with Horizontal(id="controls"):
                yield Button("Arena", id="arena-button", variant="primary")
                yield Button("Shop", id="shop-button", variant="default")
                yield Button("Show Off", id="showoff-button", variant="success")

        yield Static("Activity", classes="section-title")
        yield RichLog(id="feed", highlight=True, markup=True, wrap=True)
        yield Input(placeholder="Chat, or /enhance  /battle  /scroll", id="chat-input")

        yield Footer()

    def on_mount(self) -> None:
        feed_log = self.query_one("#feed", RichLog)
        for event in reversed(list(self.session.feed)):
            feed_log.write(feed_line(event))
        self._unsubscribe = self.session.feed.subscribe(self._on_activity)
        self.refresh_status()

    def on_unmount(self) -> None:
        if self._unsubscribe is not None:
            self._unsubscribe()
            self._unsubscribe = None

    def on_screen_resume(self) -> None:
        self.refresh_status()

    def _on_activity(self, event: ActivityEvent) -> None:
        self.query_one("#feed", RichLog).write(feed_line(event))

    def on_button_pressed(self, event: Button.Pressed) -> None:
        """Handle button press events."""
        if isinstance(event.button, TrackButton):
            self._select_track(event.button.track_info)
        elif event.button.id == "arena-button":
            self.action_arena()
        elif event.button.id == "shop-button":
            self.action_shop()
        elif event.button.id == "showoff-button":
            self.attempt(self.session.show_off)

    def on_input_submitted(self, event: Input.Submitted) -> None:
        text = event.value
        event.input.value = ""
        self.attempt(lambda: self.session.chat(text))

    def _select_track(self, track_info: TrackInfo) -> None:
        track_class = TrackRegistry.get(track_info.id)
        if track_class:
            screen_class = track_class.get_screen_class()
            self.app.push_screen(screen_class())

    def _select_by_index(self, index: int) -> None:
        """Select a track by its index (1-based)."""
        if 0 < index <= len(self.tracks):
            self._select_track(self.tracks[index - 1])

    def action_select_1(self) -> None:
        self._select_by_index(1)

    def action_select_2(self) -> None:
        self._select_by_index(2)

    def action_arena(self) -> None:
        self.app.push_screen(ArenaScreen())

    def action_shop(self) -> None:
        self.app.push_screen(ShopScreen())

    def action_quit(self) -> None:
        self.app.exit()
