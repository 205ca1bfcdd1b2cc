"""Display formatting helpers."""
import pytest

from knights_battle.utils import format_gold, format_percent, format_time


@pytest.mark.parametrize(
    "gold, expected",
    [
        (0, "0"),
        (9_999, "9,999"),
        (16_600, "16.6K"),
        (300_000, "300.0K"),
        (2_500_000, "2.5M"),
        (1_000_000_000, "1.0B"),
    ],
)
def test_format_gold(gold, expected) -> None:
    assert format_gold(gold) == expected


def test_format_time() -> None:
    assert format_time(45) == "45s"
    assert format_time(125) == "2m 5s"
    assert format_time(4 * 3600 + 60) == "4h 1m"


def test_format_percent() -> None:
    assert format_percent(0.95) == "95.0%"
    assert format_percent(0.05) == "5.0%"
