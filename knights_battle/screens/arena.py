"""Arena screen: leaderboard, opponent pick and battle log."""

from rich import box
from rich.table import Table
from textual.app import ComposeResult
from textual.binding import Binding
from textual.containers import Horizontal, Vertical
from textual.widgets import Button, Footer, Header, Label, RichLog, Select, Static

from knights_battle.battle import BattleOutcome, compute_win_chance, spirit_eligible
from knights_battle.models import describe_weapon
from knights_battle.ranking import leaderboard
from knights_battle.utils import format_gold, format_percent

from .base import SESSION_CSS, SessionScreen

RANDOM_OPPONENT = "__random__"
LEADERBOARD_SIZE = 10


class ArenaScreen(SessionScreen):
    """PvP against saved snapshots of other players."""

    CSS = SESSION_CSS + """
    ArenaScreen {
        layout: vertical;
    }

    #arena-body {
        height: 1fr;
    }

    #leaderboard {
        width: 40;
        padding: 0 1;
        border-right: solid $primary-darken-2;
    }

    #battle-column {
        width: 1fr;
    }

    #opponent-row {
        height: 3;
        padding: 0 1;
    }

    #opponent-select {
        width: 1fr;
    }

    #odds {
        height: auto;
        padding: 0 1;
        color: $text-muted;
    }

    #battle-log {
        height: 1fr;
        border: solid $primary;
        margin: 0 1;
    }
    """

    BINDINGS = [
        Binding("escape", "back", "Back"),
        Binding("f", "fight", "Fight"),
    ]

    def compose(self) -> ComposeResult:
        yield Header()
        yield Static("", id="status-line")

        with Horizontal(id="arena-body"):
            with Vertical(id="leaderboard"):
                yield Static("Leaderboard", classes="section-title")
                yield Static("", id="leaderboard-text")
            with Vertical(id="battle-column"):
                with Horizontal(id="opponent-row"):
                    yield Label("Opponent: ")
                    yield Select(
                        self._opponent_options(),
                        value=RANDOM_OPPONENT,
                        allow_blank=False,
                        id="opponent-select",
                    )
                yield Static("", id="odds")
                yield RichLog(id="battle-log", highlight=True, markup=True, wrap=True)

        with Horizontal(id="controls"):
            yield Button("Back", id="back-button", variant="default")
            yield Button("Fight!", id="fight-button", variant="error")

        yield Footer()

    def on_mount(self) -> None:
        self.refresh_status()

    def _opponent_options(self) -> list[tuple[str, str]]:
        options = [("Random opponent", RANDOM_OPPONENT)]
        for player in self.session.opponents():
            options.append((f"{player.username} {describe_weapon(player.weapon)}", player.id))
        return options

    def refresh_status(self) -> None:
        super().refresh_status()
        table = Table(box=box.SIMPLE, show_edge=False, pad_edge=False)
        table.add_column("#", justify="right")
        table.add_column("Knight")
        table.add_column("Wins", justify="right")
        table.add_column("Lv", justify="right")
        for rank, player in enumerate(leaderboard(self.session.population())[:LEADERBOARD_SIZE], 1):
            style = "bold green" if player.id == self.session.player_id else None
            table.add_row(str(rank), player.username, str(player.wins), f"+{player.weapon.level}", style=style)
        self.query_one("#leaderboard-text", Static).update(table)
        self._update_odds()

    def _selected_opponent_id(self):
        value = self.query_one("#opponent-select", Select).value
        return None if value in (RANDOM_OPPONENT, Select.BLANK) else value

    def _update_odds(self) -> None:
        opponent_id = self._selected_opponent_id()
        odds = self.query_one("#odds", Static)
        if opponent_id is None:
            odds.update("A random rival will answer your challenge.")
            return
        opponent = next((p for p in self.session.opponents() if p.id == opponent_id), None)
        if opponent is None:
            odds.update("That rival has left the realm.")
            return
        chance = compute_win_chance(self.session.weapon, opponent.weapon)
        text = (
            f"Power {chance.my_power} vs {chance.opponent_power}  |  "
            f"type {chance.type_matchup.value}, element {chance.element_matchup.value}  |  "
            f"win chance {format_percent(chance.chance)}"
        )
        if spirit_eligible(self.session.weapon.level, opponent.weapon.level):
            text += "  |  Indomitable Spirit possible"
        odds.update(text)

    def on_select_changed(self, event: Select.Changed) -> None:
        self._update_odds()

    def on_button_pressed(self, event: Button.Pressed) -> None:
        if event.button.id == "fight-button":
            self.action_fight()
        elif event.button.id == "back-button":
            self.action_back()

    def action_fight(self) -> None:
        opponent_id = self._selected_opponent_id()
        outcome = self.attempt(lambda: self.session.battle(opponent_id))
        if outcome is not None:
            self._log_battle(outcome)

    def _log_battle(self, outcome: BattleOutcome) -> None:
        log = self.query_one("#battle-log", RichLog)
        if outcome.special_event is not None:
            log.write(
                f"[yellow bold]INDOMITABLE SPIRIT![/yellow bold] Looted {format_gold(outcome.looted_gold)}G, "
                f"+{format_gold(outcome.reward)}G"
            )
        elif outcome.is_win:
            bonus = f" [cyan](underdog x{outcome.multiplier:.1f})[/cyan]" if outcome.multiplier > 1 else ""
            log.write(f"[green bold]VICTORY[/green bold] +{format_gold(outcome.reward)}G{bonus}")
        else:
            log.write(f"[red]DEFEAT[/red] +{format_gold(outcome.reward)}G consolation")
        log.write(f"  {outcome.narrative}")

    def action_back(self) -> None:
        self.app.pop_screen()
