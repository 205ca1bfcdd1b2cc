"""Enhancement track registry."""
from knights_battle.config import MAX_ELEMENT_LEVEL, MAX_LEVEL
from knights_battle.core import TrackRegistry
from knights_battle.screens.track_select import track_notes
from knights_battle.tracks.element import ElementTrack
from knights_battle.tracks.weapon import WeaponTrack


def test_both_tracks_registered() -> None:
    assert TrackRegistry.get("weapon") is WeaponTrack
    assert TrackRegistry.get("element") is ElementTrack
    assert TrackRegistry.get("armor") is None


def test_info_sorted_by_cap() -> None:
    infos = TrackRegistry.get_all_info()
    assert [info.id for info in infos][:2] == ["weapon", "element"]
    assert infos[0].max_level == MAX_LEVEL
    assert infos[1].max_level == MAX_ELEMENT_LEVEL


def test_track_hooks() -> None:
    assert len(WeaponTrack.get_curve()) == MAX_LEVEL
    assert len(ElementTrack.get_curve()) == MAX_ELEMENT_LEVEL
    assert WeaponTrack.get_curve()[0][1].cost == 100
    assert ElementTrack.get_curve()[0][1].cost == 5_000
    info = WeaponTrack.get_info()
    assert info.uses_scrolls and info.has_refund and info.destroy_resets_weapon
    assert not ElementTrack.get_info().uses_scrolls


def test_track_notes_describe_rules() -> None:
    weapon_notes = track_notes(WeaponTrack.get_info())
    assert "scrolls apply" in weapon_notes
    assert "replaces the weapon" in weapon_notes
    assert "refund" in weapon_notes
    element_notes = track_notes(ElementTrack.get_info())
    assert element_notes.startswith(ElementTrack.get_info().description)
    assert "scrolls" not in element_notes
    assert "only resets the level" in element_notes
