"""Forge preview text and the admin gift flag."""
import json
import logging
import sys

import pytest

from conftest import make_weapon
from knights_battle.logger import ROOT_LOGGER, GameLogger
from knights_battle.models import EnhancementConfig
from knights_battle.store import JsonFileStore
from knights_battle.tiers import weapon_tier
from knights_battle.tracks.weapon import adjust_odds
from knights_battle.tui import forge_odds_lines, main


def test_break_shows_what_the_roll_actually_destroys() -> None:
    odds = adjust_odds(weapon_tier(10), rank_penalty=0.10)
    lines = forge_odds_lines(make_weapon(10), odds)
    assert "Break 20.0%" in lines[1]
    assert any("listed break chance 15.0%" in line for line in lines)
    assert any("First place" in line for line in lines)


def test_listed_break_chance_hidden_when_it_matches() -> None:
    odds = adjust_odds(EnhancementConfig(cost=1_000, success_chance=0.5, maintain_chance=0.3, destroy_chance=0.2))
    lines = forge_odds_lines(make_weapon(3), odds)
    assert "Break 20.0%" in lines[1]
    assert not any("listed break chance" in line for line in lines)
    assert lines[-1].startswith("Invested in this weapon")


@pytest.fixture
def detach_log_handler():
    yield
    logging.getLogger(ROOT_LOGGER).removeHandler(GameLogger._handler)
    GameLogger._handler = None


def test_gift_flag_credits_and_exits(tmp_path, monkeypatch, capsys, detach_log_handler) -> None:
    save = tmp_path / "save.json"
    settings = tmp_path / "settings.json"
    settings.write_text(json.dumps({"dataPath": str(save)}), encoding="utf-8")
    argv = ["knights-battle", "--settings", str(settings), "--log-file", str(tmp_path / "game.log")]

    monkeypatch.setattr(sys, "argv", argv + ["--gift", "rival_squire", "2500"])
    main()
    assert "Gifted 2,500G to rival_squire" in capsys.readouterr().out
    assert JsonFileStore(save).load("rival_squire").stats.gold == 300_000 + 2_500

    monkeypatch.setattr(sys, "argv", argv + ["--gift", "nobody", "10"])
    with pytest.raises(SystemExit) as exc:
        main()
    assert exc.value.code == 1
