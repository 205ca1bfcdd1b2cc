"""TUI for Knight's Battle using Textual."""
import argparse
from dataclasses import replace
from pathlib import Path
from typing import Optional

from rich import box
from rich.table import Table
from textual.app import App, ComposeResult
from textual.binding import Binding
from textual.containers import Horizontal, Vertical
from textual.widgets import (
    Button,
    Checkbox,
    Footer,
    Header,
    Label,
    RichLog,
    Select,
    Static,
)

from .core import TrackRegistry
from .errors import GameError
from .game import GameSession
from .logger import GameLogger
from .models import ElementType, EnhanceResult, PlayerRecord, PlayerStats, Weapon, WeaponType
from .screens import TrackSelectScreen
from .screens.base import SESSION_CSS, SessionScreen
from .settings import GameSettings
from .store import GameStore, JsonFileStore
from .tracks.element import ElementOutcome
from .tracks.weapon import EnhancementOdds, EnhancementOutcome
from .utils import format_gold, format_percent

# Local rivals added to an otherwise empty save so the arena has someone to fight
PRACTICE_RIVALS: list[tuple[str, str, WeaponType, int]] = [
    ("rival_squire", "Squire Bram", WeaponType.SPEAR, 2),
    ("rival_knight", "Sir Aldous", WeaponType.AXE, 6),
    ("rival_champion", "Dame Ysolde", WeaponType.HAMMER, 11),
]

TRACK_CSS = SESSION_CSS + """
#track-body {
    height: 1fr;
}

#rates-table {
    width: 50;
    padding: 0 1;
    border-right: solid $primary-darken-2;
}

#action-column {
    width: 1fr;
}

#odds {
    height: auto;
    padding: 0 1;
    color: $text-muted;
}

.option-row {
    height: 3;
    padding: 0 1;
}

.log-container {
    height: 1fr;
    border: solid $primary;
    margin: 0 1;
}
"""


def forge_odds_lines(weapon: Weapon, odds: EnhancementOdds) -> list[str]:
    """Preview text for the next forge attempt."""
    lines = [
        f"Next: +{weapon.level} -> +{weapon.level + 1} for {format_gold(odds.cost)}G",
        f"Success {format_percent(odds.success_chance)}  |  "
        f"Keep {format_percent(odds.maintain_chance)}  |  "
        f"Break {format_percent(odds.effective_destroy_chance)}",
    ]
    if abs(odds.effective_destroy_chance - odds.destroy_chance) > 1e-9:
        lines.append(f"(listed break chance {format_percent(odds.destroy_chance)}; the roll destroys on everything past Keep)")
    if odds.rank_penalty:
        lines.append("First place weighs on you: -10% success")
    if odds.debug_boost:
        lines.append("[magenta]The forge burns with a strange light...[/magenta]")
    lines.append(f"Invested in this weapon: {format_gold(weapon.total_enhance_cost)}G")
    return lines


def _rates_table(curve, current_level: Optional[int]) -> Table:
    """Cost and odds for every level, current row highlighted."""
    table = Table(box=box.SIMPLE, show_edge=False, pad_edge=False)
    table.add_column("Level")
    table.add_column("Cost", justify="right")
    table.add_column("Succ", justify="right", style="green")
    table.add_column("Keep", justify="right", style="yellow")
    table.add_column("Break", justify="right", style="red")
    for level, config in curve:
        table.add_row(
            f"+{level} -> +{level + 1}",
            format_gold(config.cost),
            f"{config.success_chance * 100:.0f}%",
            f"{config.maintain_chance * 100:.0f}%",
            f"{config.destroy_chance * 100:.0f}%",
            style="bold reverse" if level == current_level else None,
        )
    return table


class ForgeScreen(SessionScreen):
    """Weapon enhancement at the blacksmith."""

    CSS = TRACK_CSS
    TRACK_ID = "weapon"

    BINDINGS = [
        Binding("escape", "back", "Back"),
        Binding("e", "enhance", "Enhance"),
        Binding("s", "toggle_scroll", "Scroll"),
        Binding("ctrl+g", "debug_boost", "Boost", show=False),
    ]

    def compose(self) -> ComposeResult:
        yield Header()
        yield Static("", id="status-line")

        with Horizontal(id="track-body"):
            yield Static("", id="rates-table")
            with Vertical(id="action-column"):
                yield Static("Blacksmith's Forge", classes="section-title")
                yield Static("", id="odds")
                with Horizontal(classes="option-row"):
                    yield Checkbox("Use an enhancement scroll (+20% success)", id="use-scroll")
                yield RichLog(id="forge-log", classes="log-container", highlight=True, markup=True, wrap=True)

        with Horizontal(id="controls"):
            yield Button("Back", id="back-button", variant="default")
            yield Button("Enhance", id="enhance-button", variant="success")

        yield Footer()

    def on_mount(self) -> None:
        self.refresh_status()

    @property
    def use_scroll(self) -> bool:
        return self.query_one("#use-scroll", Checkbox).value

    def refresh_status(self) -> None:
        super().refresh_status()
        weapon = self.session.weapon
        curve = TrackRegistry.get(self.TRACK_ID).get_curve()
        self.query_one("#rates-table", Static).update(_rates_table(curve, weapon.level))

        odds_text = self.query_one("#odds", Static)
        try:
            odds = self.session.enhancer.preview(
                weapon, self.session.stats, self.session.enhancement_context(self.use_scroll)
            )
        except GameError as exc:
            odds_text.update(str(exc))
            return
        odds_text.update("\n".join(forge_odds_lines(weapon, odds)))

    def on_checkbox_changed(self, event: Checkbox.Changed) -> None:
        self.refresh_status()

    def on_button_pressed(self, event: Button.Pressed) -> None:
        if event.button.id == "enhance-button":
            self.action_enhance()
        elif event.button.id == "back-button":
            self.action_back()

    def action_enhance(self) -> None:
        outcome = self.attempt(lambda: self.session.enhance(self.use_scroll))
        if outcome is not None:
            self._log_attempt(outcome)

    def _log_attempt(self, outcome: EnhancementOutcome) -> None:
        """Log an enhancement attempt to the RichLog."""
        log = self.query_one("#forge-log", RichLog)
        record = outcome.record

        parts = [f"[bold]+{record.prev_level}[/bold] -> [bold]+{record.prev_level + 1}[/bold]: "]
        if record.result is EnhanceResult.SUCCESS:
            if record.blessing:
                parts.append("[yellow bold]LUCKY GODDESS![/yellow bold]")
            else:
                parts.append("[green]SUCCESS[/green]")
            parts.append(f" [green bold]Now +{record.new_level} {outcome.weapon.name}[/green bold]")
        elif record.result is EnhanceResult.MAINTAIN:
            parts.append("[yellow]HELD[/yellow]")
        else:
            parts.append("[red bold]DESTROYED[/red bold]")
            parts.append(f" [red](refund {format_gold(record.refund or 0)}G)[/red]")

        if record.scroll_used:
            parts.append(" [cyan](scroll)[/cyan]")
        parts.append(f" -{format_gold(record.cost)}G")

        log.write("".join(parts))
        log.write(f"  \"{outcome.narrative}\"")

    def action_toggle_scroll(self) -> None:
        checkbox = self.query_one("#use-scroll", Checkbox)
        checkbox.value = not checkbox.value

    def action_debug_boost(self) -> None:
        self.session.arm_debug_boost()
        self.refresh_status()

    def action_back(self) -> None:
        self.app.pop_screen()


class ElementScreen(SessionScreen):
    """Element binding and enhancement at the altar."""

    CSS = TRACK_CSS
    TRACK_ID = "element"

    BINDINGS = [
        Binding("escape", "back", "Back"),
        Binding("e", "enhance", "Empower"),
    ]

    def compose(self) -> ComposeResult:
        yield Header()
        yield Static("", id="status-line")

        with Horizontal(id="track-body"):
            yield Static("", id="rates-table")
            with Vertical(id="action-column"):
                yield Static("Element Altar", classes="section-title")
                yield Static("", id="odds")
                with Horizontal(classes="option-row"):
                    yield Label("Element: ")
                    yield Select(
                        [(element.value, element) for element in ElementType if element is not ElementType.NONE],
                        value=ElementType.FIRE,
                        allow_blank=False,
                        id="element-select",
                    )
                    yield Button("Bind", id="assign-button", variant="primary")
                yield RichLog(id="element-log", classes="log-container", highlight=True, markup=True, wrap=True)

        with Horizontal(id="controls"):
            yield Button("Back", id="back-button", variant="default")
            yield Button("Empower", id="enhance-button", variant="success")

        yield Footer()

    def on_mount(self) -> None:
        self.refresh_status()

    def refresh_status(self) -> None:
        super().refresh_status()
        weapon = self.session.weapon
        current = weapon.element_level if weapon.has_element else None
        curve = TrackRegistry.get(self.TRACK_ID).get_curve()
        self.query_one("#rates-table", Static).update(_rates_table(curve, current))

        odds_text = self.query_one("#odds", Static)
        try:
            config = self.session.element_enhancer.preview(weapon)
        except GameError as exc:
            odds_text.update(str(exc))
            return
        odds_text.update(
            f"{weapon.element.value} +{weapon.element_level} -> +{weapon.element_level + 1} "
            f"for {format_gold(config.cost)}G\n"
            f"Success {format_percent(config.success_chance)}  |  "
            f"Keep {format_percent(config.maintain_chance)}  |  "
            f"Break {format_percent(config.destroy_chance)}"
        )

    def on_button_pressed(self, event: Button.Pressed) -> None:
        if event.button.id == "enhance-button":
            self.action_enhance()
        elif event.button.id == "assign-button":
            self._assign()
        elif event.button.id == "back-button":
            self.action_back()

    def _assign(self) -> None:
        element = self.query_one("#element-select", Select).value
        weapon = self.attempt(lambda: self.session.assign_element(element))
        if weapon is not None:
            self.query_one("#element-log", RichLog).write(
                f"[cyan]{element.value}[/cyan] bound to {weapon.name}. Element level reset to +0."
            )

    def action_enhance(self) -> None:
        outcome = self.attempt(self.session.enhance_element)
        if outcome is not None:
            self._log_attempt(outcome)

    def _log_attempt(self, outcome: ElementOutcome) -> None:
        log = self.query_one("#element-log", RichLog)
        style = {
            EnhanceResult.SUCCESS: "green",
            EnhanceResult.MAINTAIN: "yellow",
            EnhanceResult.DESTROY: "red",
        }[outcome.record.result]
        log.write(f"[{style}]{outcome.narrative}[/{style}] -{format_gold(outcome.record.cost)}G")

    def action_back(self) -> None:
        self.app.pop_screen()


class KnightsBattleApp(App):
    """Main TUI application."""

    TITLE = "Knight's Battle"
    CSS = """
    Screen {
        background: $surface;
    }
    """

    BINDINGS = [
        Binding("q", "quit", "Quit", show=True),
    ]

    def __init__(self, session: GameSession):
        super().__init__()
        self.session = session

    def on_mount(self) -> None:
        self.push_screen(TrackSelectScreen())


def seed_practice_rivals(store: GameStore) -> None:
    """Add the practice rivals to a save that has no one else in it."""
    for player_id, username, weapon_type, level in PRACTICE_RIVALS:
        if store.load(player_id) is not None:
            continue
        weapon = replace(Weapon.fresh(weapon_type), level=level)
        stats = PlayerStats(username=username, wins=level * 2, losses=level)
        store.save(PlayerRecord(id=player_id, stats=stats, weapon=weapon))


def main():
    """Entry point for the TUI."""
    parser = argparse.ArgumentParser(description="Knight's Battle")
    parser.add_argument("--player", default="player", help="Account id to play as")
    parser.add_argument("--name", default="", help="Display name for a new account")
    parser.add_argument("--settings", type=Path, default=Path("settings.json"), help="Settings file")
    parser.add_argument("--log-file", type=Path, default=Path("knights_battle.log"), help="Log output")
    parser.add_argument(
        "--gift", nargs=2, metavar=("PLAYER", "AMOUNT"),
        help="Credit gold to an account and exit instead of starting the game",
    )
    args = parser.parse_args()

    settings = GameSettings.from_settings(args.settings)
    store = JsonFileStore(settings.data_path)
    if len(store.list_all_players()) <= 1:
        seed_practice_rivals(store)

    with args.log_file.open("a", encoding="utf-8") as log_stream:
        session = GameSession(
            args.player,
            store,
            settings=settings,
            logger=GameLogger(settings, stream=log_stream),
            username=args.name,
        )
        if args.gift:
            target, amount = args.gift
            if not session.gift_gold(target, int(amount)):
                parser.exit(1, f"No account named {target}\n")
            print(f"Gifted {int(amount):,}G to {target}")
            return
        KnightsBattleApp(session).run()


if __name__ == "__main__":
    main()
