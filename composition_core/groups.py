"""
Group ("Paris") league structure.

A division label maps to a number of groups of three; slot order fills group 1
(strongest) first. Article 8 keeps the groups ordered by ranking points and
article 12 caps how many locked players may sit in one group.
"""
from __future__ import annotations
from typing import Dict, Iterable, List, Optional

from .constants import ViolationKind
from .models import GroupStructure, Player, RulesConfig, ValidationError

def structure_for(label: str, structures: Optional[Dict[str, GroupStructure]] = None) -> Optional[GroupStructure]:
    table = structures if structures is not None else RulesConfig().group_structures
    return table.get(label) if label else None

def split_groups(roster: List[Optional[Player]], structure: GroupStructure) -> List[List[Player]]:
    """Consecutive chunks of players_per_group; None marks an empty slot."""
    size = structure.players_per_group
    return [
        [p for p in roster[i * size:(i + 1) * size] if p is not None]
        for i in range(structure.groups)
    ]

def _label(p: Player) -> str:
    return p.name or p.license

def check_group_order(roster: List[Optional[Player]], structure: GroupStructure) -> List[ValidationError]:
    """Article 8: group k players sit between max(group k-1) and min(group k+1)."""
    groups = split_groups(roster, structure)
    errors: List[ValidationError] = []
    for k, group in enumerate(groups):
        upper = groups[k - 1] if k > 0 else []
        lower = groups[k + 1] if k + 1 < len(groups) else []
        ceiling = max((p.points for p in upper), default=None)
        floor = min((p.points for p in lower), default=None)
        for p in group:
            if ceiling is not None and p.points > ceiling:
                errors.append(ValidationError(
                    kind=ViolationKind.GROUP_ORDER,
                    message=f"{_label(p)} in group {k + 1} outranks group {k} (max {ceiling:g})",
                    player=p.license,
                ))
            elif floor is not None and p.points < floor:
                errors.append(ValidationError(
                    kind=ViolationKind.GROUP_ORDER,
                    message=f"{_label(p)} in group {k + 1} is below group {k + 2} (min {floor:g})",
                    player=p.license,
                ))
    return errors

def check_group_lock_cap(
    roster: List[Optional[Player]],
    structure: GroupStructure,
    locked: Iterable[str],
    max_locked: int = 1,
) -> List[ValidationError]:
    """Article 12: over the cap, every locked player of the group is disqualified."""
    locked_ids = set(locked)
    errors: List[ValidationError] = []
    for k, group in enumerate(split_groups(roster, structure)):
        hits = [p for p in group if p.license in locked_ids]
        if len(hits) <= max_locked:
            continue
        for p in hits:
            errors.append(ValidationError(
                kind=ViolationKind.GROUP_LOCK_CAP,
                message=f"{_label(p)} is one of {len(hits)} locked players in group {k + 1} "
                        f"(max {max_locked})",
                player=p.license,
            ))
    return errors
