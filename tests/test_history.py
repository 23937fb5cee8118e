from composition_core.constants import Category, Leg
from composition_core.history import ParticipationIndex, build_participation, is_played
from composition_core.test_helpers import quick_match, quick_team

def test_upcoming_placeholder_is_not_played():
    t = quick_team(1)
    assert not is_played(quick_match(t, 1, [], score="0-0", result="À VENIR"))

def test_real_score_counts_without_roster():
    t = quick_team(1)
    assert is_played(quick_match(t, 1, [], score="3-1", result="VICTOIRE"))

def test_is_played_edge_cases():
    t = quick_team(1)
    assert is_played(quick_match(t, 1, ["a"]))
    assert not is_played(quick_match(t, 1, [], score=""))
    assert not is_played(quick_match(t, 1, [], score="3 à 1"))
    assert not is_played(quick_match(t, 1, [], score="0-0", result="NUL"))
    assert not is_played(quick_match(t, 1, [], score="2-1", result="a venir"))
    assert is_played(quick_match(t, 1, [], score="2-1", result="TBD"), upcoming_labels=["UPCOMING"])

def test_build_participation_counts_per_tier_in_leg():
    t1, t2 = quick_team(1), quick_team(2)
    matches = [
        quick_match(t1, 1, ["a", "b"]),
        quick_match(t2, 2, ["a"]),
        quick_match(t2, 3, ["a"]),
        quick_match(t1, 1, ["a"], leg="second"),
        quick_match(t1, 4, [], score="0-0", result="À VENIR"),
    ]
    assert build_participation(matches, Leg.FIRST) == {"a": {1: 1, 2: 2}, "b": {1: 1}}
    assert build_participation(matches, Leg.SECOND) == {"a": {1: 1}}

def test_build_participation_empty():
    assert build_participation([], Leg.FIRST) == {}

def test_build_participation_category_filter():
    men, women = quick_team(2), quick_team(1, category="women", tid="W1")
    matches = [quick_match(men, 1, ["a"]), quick_match(women, 1, ["a"])]
    assert build_participation(matches, Leg.FIRST, Category.WOMEN) == {"a": {1: 1}}
    assert build_participation(matches, Leg.FIRST) == {"a": {1: 1, 2: 1}}

def test_index_excludes_fixture_and_tracks_rounds():
    t1, t2 = quick_team(1), quick_team(2)
    matches = [
        quick_match(t1, 1, ["a", "b"]),
        quick_match(t2, 1, ["c"]),
        quick_match(t2, 2, ["a"]),
    ]
    idx = ParticipationIndex.build(matches, Leg.FIRST, exclude=("T2", 2))
    assert idx.tally("a") == {1: 1}
    assert idx.round_played("T1", 1)
    assert not idx.round_played("T2", 2)
    assert idx.round_tiers(1) == {"a": 1, "b": 1, "c": 2}
    assert idx.players() == ["a", "b", "c"]
    assert idx.history_for("zz").is_empty()

def test_index_splits_categories():
    men, women = quick_team(3), quick_team(1, category="women", tid="W1")
    matches = [quick_match(men, 1, ["w"]), quick_match(women, 2, ["w"])]
    h = ParticipationIndex.build(matches, Leg.FIRST).history_for("w")
    assert h.tally(Category.WOMEN) == {1: 1}
    assert h.tally(Category.MEN) == {3: 1}
    assert h.tally() == {1: 1, 3: 1}
    assert h.total() == 2

def test_round_tiers_keeps_strongest_team():
    t1, t3 = quick_team(1), quick_team(3)
    matches = [quick_match(t3, 1, ["a"]), quick_match(t1, 1, ["a"])]
    idx = ParticipationIndex.build(matches, Leg.FIRST)
    assert idx.round_tiers(1) == {"a": 1}
    assert idx.round_tiers(1, Category.WOMEN) == {}
