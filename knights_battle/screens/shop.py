"""Shop screen: scrolls, weapon replacement and the attendance reward."""

from textual.app import ComposeResult
from textual.binding import Binding
from textual.containers import Horizontal, ScrollableContainer
from textual.widgets import Button, Footer, Header, Label, Select, Static, Rule

from knights_battle.config import ATTENDANCE_REWARD, ELEMENT_ASSIGN_COST, SCROLL_PRICE
from knights_battle.models import WeaponType
from knights_battle.utils import format_gold, format_time

from .base import SESSION_CSS, SessionScreen


class ShopScreen(SessionScreen):
    """Screen for spending (and collecting) gold outside the forge."""

    CSS = SESSION_CSS + """
    ShopScreen {
        layout: vertical;
    }

    #shop-container {
        padding: 1 2;
        height: 1fr;
    }

    .config-row {
        height: 3;
        margin-bottom: 1;
    }

    .config-label {
        width: 30;
        content-align: left middle;
    }

    .config-select {
        width: 20;
    }

    .price-unit {
        width: 30;
        content-align: left middle;
        color: $text-muted;
    }
    """

    BINDINGS = [
        Binding("escape", "back", "Back"),
        Binding("b", "buy_scroll", "Buy Scroll"),
        Binding("c", "claim", "Attendance"),
    ]

    def compose(self) -> ComposeResult:
        yield Header()
        yield Static("", id="status-line")

        with ScrollableContainer(id="shop-container"):
            yield Static("Shop", id="title")
            yield Rule()

            yield Static("Enhancement Scrolls", classes="section-title")
            yield Static("(+20% success on one weapon enhancement)")
            with Horizontal(classes="config-row"):
                yield Label(f"Scroll: {format_gold(SCROLL_PRICE)}G", classes="config-label")
                yield Button("Buy", id="buy-scroll-button", variant="primary")

            yield Rule()

            yield Static("Replace Weapon", classes="section-title")
            yield Static("(The new weapon starts at +0 with no element. Free.)")
            with Horizontal(classes="config-row"):
                yield Label("Weapon type:", classes="config-label")
                yield Select(
                    [(weapon_type.value, weapon_type) for weapon_type in WeaponType],
                    value=self.session.weapon.weapon_type,
                    allow_blank=False,
                    id="weapon-type",
                    classes="config-select",
                )
                yield Button("Replace", id="reset-button", variant="warning")

            yield Rule()

            yield Static("Attendance", classes="section-title")
            with Horizontal(classes="config-row"):
                yield Label(f"Reward: {format_gold(ATTENDANCE_REWARD)}G", classes="config-label")
                yield Button("Check in", id="claim-button", variant="success")
                yield Static("", id="attendance-status", classes="price-unit")

            yield Rule()
            yield Static(f"Element binding costs {format_gold(ELEMENT_ASSIGN_COST)}G at the Element Altar.")

        with Horizontal(id="controls"):
            yield Button("Back", id="back-button", variant="default")

        yield Footer()

    def on_mount(self) -> None:
        self.refresh_status()

    def refresh_status(self) -> None:
        super().refresh_status()
        wait = int(self.session.attendance.time_until_due().total_seconds())
        text = "Ready!" if wait <= 0 else f"Next in {format_time(wait)}"
        self.query_one("#attendance-status", Static).update(text)

    def on_button_pressed(self, event: Button.Pressed) -> None:
        if event.button.id == "buy-scroll-button":
            self.action_buy_scroll()
        elif event.button.id == "reset-button":
            self._reset_weapon()
        elif event.button.id == "claim-button":
            self.action_claim()
        elif event.button.id == "back-button":
            self.action_back()

    def _reset_weapon(self) -> None:
        weapon_type = self.query_one("#weapon-type", Select).value
        weapon = self.attempt(lambda: self.session.reset_weapon(weapon_type))
        if weapon is not None:
            self.notify(f"You now wield a {weapon.name}.", title="Weapon replaced")

    def action_buy_scroll(self) -> None:
        stats = self.attempt(self.session.buy_scroll)
        if stats is not None:
            self.notify(f"You now hold {stats.scrolls} scrolls.", title="Purchased")

    def action_claim(self) -> None:
        reward = self.attempt(self.session.claim_attendance)
        if reward is not None:
            self.notify(f"+{format_gold(reward)}G", title="Attendance checked")

    def action_back(self) -> None:
        self.app.pop_screen()
