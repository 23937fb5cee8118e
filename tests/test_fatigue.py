from datetime import date, timedelta

from composition_core.fatigue import (
    burnout_dashboard_df, max_streak, player_burnout, team_burnout, team_burnout_report,
)
from composition_core.models import BurnoutConditions
from composition_core.test_helpers import quick_match, quick_player, quick_team

T1, T2 = quick_team(1), quick_team(2)

def test_eight_matches_over_limit():
    matches = [quick_match(T1, r, ["a", "b"] if r <= 7 else ["a"]) for r in range(1, 9)]
    infos = {i.player: i for i in team_burnout(T1, matches, BurnoutConditions(max_matches_per_player=7))}
    assert infos["a"].at_risk
    assert infos["a"].matches_played == 8
    assert "8" in infos["a"].risk_reason and "7" in infos["a"].risk_reason
    assert not infos["b"].at_risk
    assert infos["b"].risk_reason is None
    assert infos["a"].last_match_date == date(2025, 9, 1) + timedelta(days=14 * 7)

def test_consecutive_days_streak():
    start = date(2025, 10, 1)
    matches = [quick_match(T1, r, ["a"], when=start + timedelta(days=r - 1)) for r in range(1, 5)]
    info = player_burnout("a", T1, matches)
    assert info.max_streak == 4
    assert info.at_risk
    assert info.risk_reason == "4 consecutive matches (max 3)"

def test_streak_resets_after_rest():
    start = date(2025, 10, 1)
    offsets = [0, 1, 5, 6, 7, 20]
    matches = [quick_match(T1, r, ["a"], when=start + timedelta(days=d)) for r, d in enumerate(offsets, start=1)]
    assert max_streak(matches, 1) == 3
    assert max_streak(matches, 0) == 1
    assert max_streak(matches, 13) == 6

def test_both_reasons_joined():
    start = date(2025, 10, 1)
    matches = [quick_match(T1, r, ["a"], when=start + timedelta(days=r)) for r in range(1, 10)]
    info = player_burnout("a", T1, matches)
    assert info.risk_reason == "played 9 matches (max 7); 9 consecutive matches (max 3)"

def test_thresholds_overridable_per_call():
    matches = [quick_match(T1, r, ["a"]) for r in range(1, 4)]
    assert not player_burnout("a", T1, matches).at_risk
    strict = BurnoutConditions(max_matches_per_player=2, max_consecutive_matches=3, min_days_between_matches=14)
    info = player_burnout("a", T1, matches, strict)
    assert info.at_risk
    assert info.risk_reason == "played 3 matches (max 2)"

def test_only_team_matches_and_first_appearance_order():
    matches = [
        quick_match(T1, 2, ["b", "a"]),
        quick_match(T1, 1, ["c"]),
        quick_match(T2, 1, ["z"]),
    ]
    assert [i.player for i in team_burnout(T1, matches)] == ["c", "b", "a"]
    assert player_burnout("z", T1, matches) is None

def test_report_partitions_and_dashboard():
    matches = [quick_match(T1, r, ["a", "b"] if r == 1 else ["a"]) for r in range(1, 10)]
    report = team_burnout_report(T1, matches)
    assert [i.player for i in report.at_risk] == ["a"]
    assert [i.player for i in report.safe] == ["b"]
    assert report.conditions == BurnoutConditions()

    df = burnout_dashboard_df(report.at_risk + report.safe, {"a": quick_player("a", name="Alice")})
    assert list(df["player"]) == ["a", "b"]
    assert df.loc[0, "name"] == "Alice"
    assert bool(df.loc[0, "at_risk"])
    assert df.loc[1, "risk_reason"] == ""

def test_empty_dashboard_has_columns():
    df = burnout_dashboard_df([])
    assert df.empty
    assert "at_risk" in df.columns
