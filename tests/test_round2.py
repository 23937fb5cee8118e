from composition_core.constants import ViolationKind
from composition_core.models import RulesConfig
from composition_core.round2 import check_round2
from composition_core.test_helpers import quick_player

ROSTER = [quick_player("a"), quick_player("b"), quick_player("c"), quick_player("d")]
ROUND1 = {"a": 1, "b": 1, "c": 3, "d": 2}

def test_second_player_from_stronger_team_is_flagged():
    errs = check_round2(ROSTER, 2, ROUND1, 3)
    assert [e.kind for e in errs] == [ViolationKind.ROUND2_QUOTA, ViolationKind.ROUND2_QUOTA]
    assert [e.player for e in errs] == ["b", "d"]

def test_one_player_from_stronger_team_is_fine():
    assert check_round2(ROSTER, 2, {"a": 1, "c": 3}, 3) == []
    # same tier is not stronger
    assert check_round2(ROSTER, 2, {"a": 3, "b": 3, "c": 3}, 3) == []

def test_only_round_two():
    for rnd in (1, 3, 4, 5, 7):
        assert check_round2(ROSTER, rnd, ROUND1, 3) == []

def test_allowance_is_configurable():
    cfg = RulesConfig(round2_max_from_stronger=2)
    errs = check_round2(ROSTER, 2, ROUND1, 3, cfg)
    assert [e.player for e in errs] == ["d"]
