from __future__ import annotations
from typing import List, Optional

from .constants import Category, ViolationKind
from .models import Player, RulesConfig, Team, ValidationError

def _fmt_points(p: float) -> str:
    return str(int(p)) if float(p).is_integer() else str(p)

def check_quotas(roster: List[Player], team: Team, config: Optional[RulesConfig] = None) -> List[ValidationError]:
    """Roster-only constraints: foreign cap, women in men's teams, division ranking floors."""
    cfg = config or RulesConfig()
    errors: List[ValidationError] = []

    foreign = [p for p in roster if p.is_foreign(cfg.foreign_nationality_codes)]
    if len(foreign) > cfg.max_foreign:
        errors.append(ValidationError(
            kind=ViolationKind.QUOTA_FOREIGN,
            message=f"{len(foreign)} foreign players (max {cfg.max_foreign})",
            team_tier=team.tier,
        ))

    if team.category == Category.MEN:
        women = [p for p in roster if p.is_female]
        if len(women) > cfg.max_women_in_men_team:
            errors.append(ValidationError(
                kind=ViolationKind.QUOTA_FEMALE,
                message=f"{len(women)} women in a men's team (max {cfg.max_women_in_men_team})",
                team_tier=team.tier,
            ))

    for floor in cfg.floors_for(team.category, team.division):
        below = [p for p in roster if p.points < floor.min_points]
        threshold = _fmt_points(floor.min_points)
        if floor.min_count is None:
            for p in below:
                errors.append(ValidationError(
                    kind=ViolationKind.RANKING_FLOOR,
                    message=f"{p.name or p.license} has {_fmt_points(p.points)} points, "
                            f"{floor.division} requires {threshold}",
                    player=p.license,
                    team_tier=team.tier,
                ))
        elif len(below) > floor.of - floor.min_count:
            errors.append(ValidationError(
                kind=ViolationKind.RANKING_FLOOR,
                message=f"{floor.division} requires at least {floor.min_count} of {floor.of} "
                        f"players with {threshold} points",
                team_tier=team.tier,
            ))
    return errors

def check_slot_order(roster: List[Player], team: Optional[Team] = None) -> List[ValidationError]:
    """Players listed in slot order must not gain points from one slot to the next."""
    errors: List[ValidationError] = []
    for prev, cur in zip(roster, roster[1:]):
        if cur.points > prev.points:
            errors.append(ValidationError(
                kind=ViolationKind.RANKING_ORDER,
                message=f"{cur.name or cur.license} ({_fmt_points(cur.points)}) is listed after "
                        f"{prev.name or prev.license} ({_fmt_points(prev.points)})",
                player=cur.license,
                team_tier=team.tier if team else None,
            ))
    return errors
