from __future__ import annotations
from typing import Dict, List, Optional

from .constants import ViolationKind
from .models import Player, RulesConfig, ValidationError

def check_round2(
    roster: List[Player],
    round_number: int,
    round1_tiers: Dict[str, int],
    team_tier: int,
    config: Optional[RulesConfig] = None,
) -> List[ValidationError]:
    """
    Round 2 of a leg: at most `round2_max_from_stronger` players may come from a
    stronger team they played for in round 1. Extra players are flagged in slot order.
    """
    cfg = config or RulesConfig()
    if round_number != cfg.round2_rule_round:
        return []

    errors: List[ValidationError] = []
    seen = 0
    for p in roster:
        tier = round1_tiers.get(p.license)
        if tier is None or tier >= team_tier:
            continue
        seen += 1
        if seen > cfg.round2_max_from_stronger:
            errors.append(ValidationError(
                kind=ViolationKind.ROUND2_QUOTA,
                message=f"{p.name or p.license} played round 1 for team {tier}; "
                        f"only {cfg.round2_max_from_stronger} such player allowed in team {team_tier}",
                player=p.license,
                team_tier=team_tier,
            ))
    return errors
