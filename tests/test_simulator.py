"""Forge Monte Carlo simulator and the CLI around it."""
import json

import pytest

from knights_battle.cli import STRATEGY_PRESETS, main
from knights_battle.config import SCROLL_PRICE
from knights_battle.simulator import (
    EnhancementStrategy,
    ForgeSimulator,
    ScrollStrategy,
    battle_odds_table,
)


def test_scroll_strategy_thresholds() -> None:
    assert not EnhancementStrategy().use_scroll_at(19)
    assert EnhancementStrategy(scrolls=ScrollStrategy.ALWAYS).use_scroll_at(0)
    from_15 = EnhancementStrategy(scrolls=ScrollStrategy.FROM_LEVEL, scroll_from=15)
    assert not from_15.use_scroll_at(14)
    assert from_15.use_scroll_at(15)


def test_simulation_reaches_target() -> None:
    result = ForgeSimulator(seed=11).simulate_to_target(8, EnhancementStrategy(), keep_history=True)
    assert result.reached
    assert result.total_attempts == len(result.attempt_history)
    assert result.total_attempts == result.successes + result.maintains + result.destroys
    assert result.scrolls_used == 0
    assert result.gold_spent == sum(record.cost for record in result.attempt_history)


def test_scroll_cost_is_counted() -> None:
    result = ForgeSimulator(seed=5).simulate_to_target(3, EnhancementStrategy(scrolls=ScrollStrategy.ALWAYS))
    assert result.scrolls_used == result.total_attempts
    assert result.net_gold == result.gold_spent - result.gold_refunded + result.scrolls_used * SCROLL_PRICE


def test_simulation_respects_attempt_cap() -> None:
    result = ForgeSimulator(seed=2).simulate_to_target(20, EnhancementStrategy(), max_attempts=5)
    assert result.total_attempts == 5
    assert not result.reached


@pytest.mark.parametrize("target", [0, 21])
def test_invalid_target(target) -> None:
    with pytest.raises(ValueError):
        ForgeSimulator(seed=1).simulate_to_target(target, EnhancementStrategy())


def test_monte_carlo_is_reproducible() -> None:
    strategy = STRATEGY_PRESETS["scroll_from_10"]
    first = ForgeSimulator(seed=99).run_monte_carlo(12, strategy, num_simulations=50, start_level=8)
    second = ForgeSimulator(seed=99).run_monte_carlo(12, strategy, num_simulations=50, start_level=8)
    assert first == second
    assert first["reached"] == 50
    assert first["attempts"]["p50"] <= first["attempts"]["p90"] <= first["attempts"]["worst"]
    assert first["strategy"]["scrolls"] == "from_level"


def test_battle_odds_table_is_symmetric() -> None:
    levels = [0, 5, 10, 20]
    table = battle_odds_table(levels)
    for mine in levels:
        assert table[mine][mine] == pytest.approx(0.5)
        for theirs in levels:
            assert table[mine][theirs] == pytest.approx(1 - table[theirs][mine])


def test_cli_show_rates(capsys) -> None:
    main(["--show-rates"])
    out = capsys.readouterr().out
    assert "Weapon Enhancement Rates" in out
    assert "+19 -> +20" in out
    main(["--show-rates", "--element"])
    assert "+9 -> +10" in capsys.readouterr().out


def test_cli_json_simulation(capsys) -> None:
    main(["--target", "5", "--simulations", "20", "--seed", "3", "--json", "--strategy", "scroll_always"])
    stats = json.loads(capsys.readouterr().out)
    assert stats["target_level"] == 5
    assert stats["num_simulations"] == 20
    assert stats["strategy"]["scrolls"] == "always"


def test_cli_battle_odds_json(capsys) -> None:
    main(["--battle-odds", "--json"])
    table = json.loads(capsys.readouterr().out)
    assert table["20"]["0"] == pytest.approx(0.8)


def test_cli_rejects_bad_target(capsys) -> None:
    with pytest.raises(SystemExit):
        main(["--target", "25"])
    assert "Target must be between" in capsys.readouterr().err
