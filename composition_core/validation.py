"""
Composition validator: one pass over a proposed roster for the selected rule regime.

Classic league: tenure locks (threshold 2, per team category), quotas, optional
slot order and the round-2 rule. Group league: tenure locks (threshold 3, all
categories), group ordering (article 8) and the locked-players cap (article 12).
"""
from __future__ import annotations
import logging
from enum import Enum
from typing import Dict, Iterable, List, Optional, Tuple

from pydantic import BaseModel, ConfigDict, Field, field_validator

from .constants import (
    ActivityStatus, CLASSIC_SLOTS, Category, Gender, Leg, TEMPLATE_SLOTS, ViolationKind, group_slots,
)
from .groups import check_group_lock_cap, check_group_order, structure_for
from .history import ParticipationIndex
from .locks import effective_lock, future_lock, future_lock_group, is_locked_out
from .models import (
    AssignmentPreview, Composition, GroupStructure, Match, Player, RulesConfig, Team,
    ValidationError, ValidationResult,
)
from .quotas import check_quotas, check_slot_order
from .round2 import check_round2

log = logging.getLogger(__name__)

# ---------------------
# Regime
# ---------------------
class Regime(str, Enum):
    CLASSIC = "classic"
    GROUP_LEAGUE = "group_league"

    def lock_threshold(self, config: RulesConfig) -> int:
        if self is Regime.CLASSIC:
            return config.classic_lock_threshold
        return config.group_lock_threshold

    def lock_category(self, team: Team) -> Optional[Category]:
        # group league mixes men's and women's matches
        return team.category if self is Regime.CLASSIC else None

    def max_slots(self, team: Team, config: RulesConfig, template: bool = False) -> Optional[int]:
        if self is Regime.CLASSIC:
            return config.max_template_slots if template else config.max_round_slots
        structure = structure_for(team.division, config.group_structures)
        return structure.total if structure else None

    def slot_labels(self, team: Team, config: RulesConfig, template: bool = False) -> List[str]:
        if self is Regime.CLASSIC:
            return TEMPLATE_SLOTS[:] if template else CLASSIC_SLOTS[:]
        return group_slots(self.max_slots(team, config) or 0)


class RoundContext(BaseModel):
    """Immutable snapshot handed to the validator for one round of one leg."""
    model_config = ConfigDict(frozen=True)

    round_number: int = Field(default=1, ge=1)
    leg: Leg = Leg.FIRST
    players: Dict[str, Player] = Field(default_factory=dict)
    matches: List[Match] = Field(default_factory=list)
    config: RulesConfig = Field(default_factory=RulesConfig)

    @field_validator("players", mode="before")
    @classmethod
    def _players_by_license(cls, v):
        if isinstance(v, dict):
            return v
        return {p.license: p for p in v}

    def index(self, exclude: Optional[Tuple[str, int]] = None) -> ParticipationIndex:
        return ParticipationIndex.build(
            self.matches, self.leg, exclude=exclude, upcoming_labels=self.config.upcoming_result_labels
        )

# ---------------------
# Helpers
# ---------------------
def _label(p: Player) -> str:
    return p.name or p.license

def _check_identity(composition: Composition, team: Team, context: RoundContext) -> None:
    if composition.team_id != team.id:
        raise ValueError(f"Composition is for team {composition.team_id}, not {team.id}")
    if not composition.template and (composition.round_number, composition.leg) != (context.round_number, context.leg):
        raise ValueError(
            f"Composition round {composition.round_number}/{composition.leg.value} does not match "
            f"context round {context.round_number}/{context.leg.value}"
        )

def _group_positions(composition: Composition, structure: GroupStructure,
                     players: Dict[str, Player]) -> List[Optional[Player]]:
    """Place players by numeric slot label when possible, else by slot order."""
    labels = list(composition.slots)
    numeric = all(s.isdigit() for s in labels)
    out: List[Optional[Player]] = [None] * structure.total
    for i, (slot, pid) in enumerate(composition.slots.items()):
        pos = int(slot) - 1 if numeric else i
        if pid and pid in players and 0 <= pos < structure.total:
            out[pos] = players[pid]
    return out

def _slots_outside(composition: Composition, structure: GroupStructure) -> List[Tuple[str, str]]:
    """Filled numeric slots that fall outside 1..total."""
    labels = list(composition.slots)
    if not all(s.isdigit() for s in labels):
        return []
    return [(s, pid) for s, pid in composition.slots.items()
            if pid and not 1 <= int(s) <= structure.total]

def _lock_errors(roster: List[Player], team: Team, index: ParticipationIndex, regime: Regime,
                 config: RulesConfig) -> Tuple[List[ValidationError], Dict[str, int]]:
    errors: List[ValidationError] = []
    locks: Dict[str, int] = {}
    threshold = regime.lock_threshold(config)
    for p in roster:
        lock = effective_lock(p, index.history_for(p.license), index.leg, threshold, regime.lock_category(team))
        if lock is None:
            continue
        locks[p.license] = lock
        if is_locked_out(lock, team.tier):
            errors.append(ValidationError(
                kind=ViolationKind.LOCK,
                message=f"{_label(p)} is locked to team {lock} and cannot play for team {team.tier}",
                player=p.license,
                team_tier=team.tier,
            ))
    return errors, locks

def _classic(composition: Composition, roster: List[Player], team: Team, index: ParticipationIndex,
             context: RoundContext) -> List[ValidationError]:
    cfg = context.config
    errors, _ = _lock_errors(roster, team, index, Regime.CLASSIC, cfg)
    errors += check_quotas(roster, team, cfg)
    if cfg.check_slot_order:
        errors += check_slot_order(roster, team)
    if not composition.template:
        round1 = index.round_tiers(cfg.round2_rule_round - 1, team.category) if cfg.round2_rule_round > 1 else {}
        errors += check_round2(roster, composition.round_number, round1, team.tier, cfg)
    return errors

def _group(composition: Composition, roster: List[Player], team: Team, index: ParticipationIndex,
           context: RoundContext) -> List[ValidationError]:
    cfg = context.config
    errors, locks = _lock_errors(roster, team, index, Regime.GROUP_LEAGUE, cfg)
    structure = structure_for(team.division, cfg.group_structures)
    if structure is None:
        log.debug("no group structure for division %r; group checks skipped", team.division)
        return errors
    for slot, pid in _slots_outside(composition, structure):
        errors.append(ValidationError(
            kind=ViolationKind.ROSTER_SIZE,
            message=f"Slot {slot} is outside the {structure.total} slots of {team.division}",
            player=pid,
            team_tier=team.tier,
        ))
    placed = _group_positions(composition, structure, context.players)
    errors += check_group_order(placed, structure)
    # burned in a stronger team and fielded below it
    locked = [pid for pid, lock in locks.items() if lock < team.tier]
    errors += check_group_lock_cap(placed, structure, locked, cfg.group_max_locked_per_group)
    return errors

# ---------------------
# Public API
# ---------------------
def validate(
    composition: Composition,
    team: Team,
    context: RoundContext,
    regime: Regime = Regime.CLASSIC,
) -> ValidationResult:
    _check_identity(composition, team, context)
    cfg = context.config
    regime = Regime(regime)
    errors: List[ValidationError] = []

    roster: List[Player] = []
    for pid in composition.player_ids():
        player = context.players.get(pid)
        if player is None:
            errors.append(ValidationError(
                kind=ViolationKind.UNKNOWN_PLAYER,
                message=f"Unknown player {pid}",
                player=pid,
                team_tier=team.tier,
            ))
        else:
            roster.append(player)

    limit = regime.max_slots(team, cfg, composition.template)
    count = len(composition.player_ids())
    if limit is not None and count > limit:
        errors.append(ValidationError(
            kind=ViolationKind.ROSTER_SIZE,
            message=f"{count} players assigned, team {team.tier} holds at most {limit}",
            team_tier=team.tier,
        ))

    exclude = None if composition.template else (team.id, composition.round_number)
    index = context.index(exclude=exclude)
    if regime is Regime.CLASSIC:
        errors += _classic(composition, roster, team, index, context)
    else:
        errors += _group(composition, roster, team, index, context)

    log.debug("validated team=%s round=%s regime=%s errors=%d",
              team.id, composition.round_number, regime.value, len(errors))
    return ValidationResult.from_errors(errors)

def predict_lock(player_id: str, team: Team, context: RoundContext, regime: Regime = Regime.CLASSIC,
                 index: Optional[ParticipationIndex] = None) -> Optional[int]:
    """Tier the player would be bound to by playing for `team` this round."""
    regime = Regime(regime)
    index = index or context.index(exclude=(team.id, context.round_number))
    history = index.history_for(player_id)
    threshold = regime.lock_threshold(context.config)
    if regime is Regime.CLASSIC:
        return future_lock(history, team.tier, team.category, threshold=threshold)
    return future_lock_group(history, team.tier, threshold=threshold)

def next_free_slot(composition: Composition, team: Team, config: RulesConfig,
                   regime: Regime = Regime.CLASSIC) -> str:
    regime = Regime(regime)
    taken = {s for s, pid in composition.slots.items() if pid}
    labels = regime.slot_labels(team, config, composition.template)
    for label in labels:
        if label not in taken:
            return label
    # full: the extra slot surfaces as a roster_size violation
    return str(len(taken) + 1) if regime is Regime.GROUP_LEAGUE else f"X{len(taken) + 1}"

def preview_assignment(
    player_id: str,
    composition: Composition,
    team: Team,
    context: RoundContext,
    regime: Regime = Regime.CLASSIC,
    slot: Optional[str] = None,
) -> AssignmentPreview:
    """Simulate dropping a player into the composition before committing it."""
    regime = Regime(regime)
    slot = slot or next_free_slot(composition, team, context.config, regime)
    simulated = composition.with_player(player_id, slot)
    result = validate(simulated, team, context, regime)
    lock = predict_lock(player_id, team, context, regime)
    return AssignmentPreview(player=player_id, slot=slot, result=result, future_lock=lock)

def available_players(
    team: Team,
    context: RoundContext,
    regime: Regime = Regime.CLASSIC,
    unavailable: Iterable[str] = (),
) -> List[Player]:
    """Players who may be picked for `team` this round, strongest first."""
    regime = Regime(regime)
    skip = set(unavailable)
    index = context.index(exclude=(team.id, context.round_number))
    threshold = regime.lock_threshold(context.config)
    out: List[Player] = []
    for p in context.players.values():
        if p.license in skip or p.status == ActivityStatus.INACTIVE:
            continue
        if regime is Regime.CLASSIC and team.category == Category.WOMEN and p.gender != Gender.FEMALE:
            continue
        lock = effective_lock(p, index.history_for(p.license), context.leg, threshold, regime.lock_category(team))
        if is_locked_out(lock, team.tier):
            continue
        out.append(p)
    return sorted(out, key=lambda p: (-p.points, p.license))
