"""
Fatigue monitor: flags players a team leans on too often. Reporting only;
nothing here feeds the composition validator.
"""
from __future__ import annotations
from typing import Dict, Iterable, List, Optional

import numpy as np
import pandas as pd

from .models import BurnoutConditions, BurnoutInfo, Match, Player, Team, TeamBurnoutReport

def _team_matches(team: Team, matches: Iterable[Match]) -> List[Match]:
    return [m for m in matches if m.team_id == team.id]

def _by_date(matches: List[Match]) -> List[Match]:
    # undated matches count toward totals but sort last
    return sorted(matches, key=lambda m: (m.date is None, m.date or 0))

def max_streak(matches: List[Match], min_days_between: int) -> int:
    """Longest run of matches whose day gaps are <= min_days_between."""
    dated = [m.date for m in matches if m.date is not None]
    if not dated:
        return 1 if matches else 0
    days = np.array(dated, dtype="datetime64[D]")
    gaps = np.diff(np.sort(days)).astype(int)
    best = cur = 1
    for gap in gaps:
        cur = cur + 1 if gap <= min_days_between else 1
        best = max(best, cur)
    return best

def player_burnout(
    player_id: str,
    team: Team,
    matches: Iterable[Match],
    conditions: Optional[BurnoutConditions] = None,
) -> Optional[BurnoutInfo]:
    cond = conditions or BurnoutConditions()
    played = _by_date([m for m in _team_matches(team, matches) if player_id in m.roster])
    if not played:
        return None

    n = len(played)
    streak = max_streak(played, cond.min_days_between_matches)
    reasons: List[str] = []
    if n > cond.max_matches_per_player:
        reasons.append(f"played {n} matches (max {cond.max_matches_per_player})")
    if streak > cond.max_consecutive_matches:
        reasons.append(f"{streak} consecutive matches (max {cond.max_consecutive_matches})")

    dates = [m.date for m in played if m.date is not None]
    return BurnoutInfo(
        player=player_id,
        team=team.id,
        matches_played=n,
        last_match_date=max(dates) if dates else None,
        max_streak=streak,
        at_risk=bool(reasons),
        risk_reason="; ".join(reasons) or None,
    )

def team_burnout(
    team: Team,
    matches: Iterable[Match],
    conditions: Optional[BurnoutConditions] = None,
) -> List[BurnoutInfo]:
    """One entry per player who appears in any of the team's matches, in order of first appearance."""
    own = _by_date(_team_matches(team, matches))
    seen: Dict[str, None] = {}
    for m in own:
        for pid in m.roster:
            seen.setdefault(pid, None)
    out = [player_burnout(pid, team, own, conditions) for pid in seen]
    return [info for info in out if info is not None]

def team_burnout_report(
    team: Team,
    matches: Iterable[Match],
    conditions: Optional[BurnoutConditions] = None,
) -> TeamBurnoutReport:
    cond = conditions or BurnoutConditions()
    infos = team_burnout(team, matches, cond)
    return TeamBurnoutReport(
        team=team.id,
        conditions=cond,
        at_risk=[i for i in infos if i.at_risk],
        safe=[i for i in infos if not i.at_risk],
    )

def burnout_dashboard_df(infos: List[BurnoutInfo], players: Optional[Dict[str, Player]] = None) -> pd.DataFrame:
    players = players or {}
    rows = []
    for i in infos:
        p = players.get(i.player)
        rows.append({
            "player": i.player,
            "name": p.name if p else "",
            "team": i.team,
            "matches_played": i.matches_played,
            "max_streak": i.max_streak,
            "last_match_date": i.last_match_date,
            "at_risk": i.at_risk,
            "risk_reason": i.risk_reason or "",
        })
    cols = ["player", "name", "team", "matches_played", "max_streak", "last_match_date", "at_risk", "risk_reason"]
    if not rows:
        return pd.DataFrame(columns=cols)
    return pd.DataFrame(rows, columns=cols).sort_values(
        ["at_risk", "matches_played", "player"], ascending=[False, False, True]
    ).reset_index(drop=True)
