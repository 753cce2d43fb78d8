"""Tests for room matching."""

from types import SimpleNamespace

from app.agents.comparison.room_matcher import (
    match_photos_by_room, normalize_room_name, similarity,
)


def _photos(*rooms):
    return [SimpleNamespace(id=f"{room}-{i}", room_name=room) for i, room in enumerate(rooms)]


def test_trailing_space_and_case_share_a_room():
    before = _photos("Quarto 1")
    after = _photos("quarto 1 ")
    pairs = match_photos_by_room(before, after)
    assert len(pairs) == 1
    assert pairs[0].room_name == "Quarto 1"
    assert pairs[0].before_photos == before
    assert pairs[0].after_photos == after


def test_room_only_in_before_set_has_empty_after_side():
    pairs = match_photos_by_room(_photos("Kitchen", "Garage"), _photos("kitchen"))
    by_name = {p.room_name: p for p in pairs}
    assert by_name["Garage"].after_photos == []
    assert not by_name["Garage"].is_complete
    assert by_name["Kitchen"].is_complete


def test_room_only_in_after_set_has_empty_before_side():
    pairs = match_photos_by_room(_photos("Kitchen"), _photos("Kitchen", "Balcony"))
    balcony = [p for p in pairs if p.room_name == "Balcony"][0]
    assert balcony.before_photos == []
    assert len(balcony.after_photos) == 1


def test_keys_are_union_and_every_photo_lands_once_on_its_side():
    before = _photos("Sala", "sala ", "Cozinha", "Banheiro")
    after = _photos("SALA", "Cozinha", "Quarto", "quarto")
    pairs = match_photos_by_room(before, after)

    keys = {normalize_room_name(p.room_name) for p in pairs}
    expected = {normalize_room_name(p.room_name) for p in before + after}
    assert keys == expected
    assert len(keys) == len(pairs)

    placed_before = [ph for p in pairs for ph in p.before_photos]
    placed_after = [ph for p in pairs for ph in p.after_photos]
    assert sorted(ph.id for ph in placed_before) == sorted(ph.id for ph in before)
    assert sorted(ph.id for ph in placed_after) == sorted(ph.id for ph in after)
    for pair in pairs:
        key = normalize_room_name(pair.room_name)
        assert all(normalize_room_name(ph.room_name) == key for ph in pair.before_photos + pair.after_photos)


def test_display_name_is_first_seen_spelling():
    pairs = match_photos_by_room(_photos("living ROOM", "Living Room"), _photos("LIVING ROOM"))
    assert [p.room_name for p in pairs] == ["living ROOM"]


def test_normalize_is_idempotent():
    for name in ["  Quarto 1 ", "SALA", "cozinha", "", "Área de Serviço\t"]:
        once = normalize_room_name(name)
        assert normalize_room_name(once) == once


def test_empty_inputs():
    assert match_photos_by_room([], []) == []


def test_fuzzy_matching_is_off_by_default():
    pairs = match_photos_by_room(_photos("Quarto"), _photos("Quarto1"))
    assert len(pairs) == 2


def test_fuzzy_matching_attaches_close_names():
    pairs = match_photos_by_room(_photos("Quarto", "Cozinha"), _photos("quarto1", "Garagem"),
                                 fuzzy_threshold=0.75)
    by_name = {p.room_name: p for p in pairs}
    assert len(by_name["Quarto"].after_photos) == 1
    assert by_name["Garagem"].before_photos == []


def test_similarity_bounds():
    assert similarity("sala", "sala") == 1.0
    assert similarity("", "") == 1.0
    assert similarity("abc", "xyz") == 0.0
