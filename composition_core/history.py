"""
Participation history: which players played which team tiers during a leg.

Everything here is derived from the match list on each call; nothing is cached
between validations.
"""
from __future__ import annotations
import logging
import re
from typing import Dict, Iterable, List, Optional, Set, Tuple

from pydantic import BaseModel, ConfigDict, Field

from .constants import Category, Leg, SCORE_PATTERN, UPCOMING_RESULT_LABELS
from .models import Match

log = logging.getLogger(__name__)

_SCORE_RE = re.compile(SCORE_PATTERN)

TierTally = Dict[int, int]  # tier -> matches played

def is_played(match: Match, upcoming_labels: Optional[Iterable[str]] = None) -> bool:
    """A match counts once a roster is recorded or a real (non 0-0, non upcoming) score exists."""
    if match.roster:
        return True
    m = _SCORE_RE.match(match.score or "")
    if not m:
        return False
    if int(m.group(1)) == 0 and int(m.group(2)) == 0:
        return False
    labels = {str(x).strip().upper() for x in (upcoming_labels or UPCOMING_RESULT_LABELS)}
    return (match.result or "").strip().upper() not in labels

def _played_in_leg(matches: Iterable[Match], leg: Leg, upcoming_labels=None) -> List[Match]:
    leg = Leg(leg)
    return [m for m in matches if m.leg == leg and is_played(m, upcoming_labels)]

def build_participation(
    matches: Iterable[Match],
    leg: Leg,
    category: Optional[Category] = None,
    upcoming_labels: Optional[Iterable[str]] = None,
) -> Dict[str, TierTally]:
    """player -> {tier: count} for the played matches of one leg (optionally one category)."""
    out: Dict[str, TierTally] = {}
    for m in _played_in_leg(matches, leg, upcoming_labels):
        if category is not None and m.category != Category(category):
            continue
        for pid in m.roster:
            tally = out.setdefault(pid, {})
            tally[m.team_tier] = tally.get(m.team_tier, 0) + 1
    return out


class PlayerHistory(BaseModel):
    """One player's tallies for a leg, split by team category."""
    model_config = ConfigDict(frozen=True)

    player: str
    leg: Leg
    by_category: Dict[Category, TierTally] = Field(default_factory=dict)

    def tally(self, category: Optional[Category] = None) -> TierTally:
        if category is not None:
            return dict(self.by_category.get(Category(category), {}))
        merged: TierTally = {}
        for t in self.by_category.values():
            for tier, n in t.items():
                merged[tier] = merged.get(tier, 0) + n
        return merged

    def total(self, category: Optional[Category] = None) -> int:
        return sum(self.tally(category).values())

    def is_empty(self) -> bool:
        return self.total() == 0


class ParticipationIndex:
    """Build once per validation pass, then query."""

    def __init__(
        self,
        leg: Leg,
        histories: Dict[str, Dict[Category, TierTally]],
        played_rounds: Set[Tuple[str, int]],
        round_tiers: Dict[Tuple[int, Category], Dict[str, int]],
    ):
        self.leg = Leg(leg)
        self._histories = histories
        self._played_rounds = played_rounds
        self._round_tiers = round_tiers

    @classmethod
    def build(
        cls,
        matches: Iterable[Match],
        leg: Leg,
        exclude: Optional[Tuple[str, int]] = None,
        upcoming_labels: Optional[Iterable[str]] = None,
    ) -> "ParticipationIndex":
        """`exclude` = (team_id, round_number) of the fixture being composed."""
        histories: Dict[str, Dict[Category, TierTally]] = {}
        played_rounds: Set[Tuple[str, int]] = set()
        round_tiers: Dict[Tuple[int, Category], Dict[str, int]] = {}

        for m in _played_in_leg(matches, leg, upcoming_labels):
            if exclude is not None and (m.team_id, m.round_number) == tuple(exclude):
                continue
            played_rounds.add((m.team_id, m.round_number))
            tiers = round_tiers.setdefault((m.round_number, m.category), {})
            for pid in m.roster:
                tally = histories.setdefault(pid, {}).setdefault(m.category, {})
                tally[m.team_tier] = tally.get(m.team_tier, 0) + 1
                # strongest tier wins if a player shows up twice in one round
                tiers[pid] = min(tiers.get(pid, m.team_tier), m.team_tier)

        log.debug("participation index: leg=%s players=%d rounds=%d",
                  Leg(leg).value, len(histories), len(played_rounds))
        return cls(leg, histories, played_rounds, round_tiers)

    def players(self) -> List[str]:
        return sorted(self._histories)

    def history_for(self, player_id: str) -> PlayerHistory:
        by_cat = {c: dict(t) for c, t in self._histories.get(player_id, {}).items()}
        return PlayerHistory(player=player_id, leg=self.leg, by_category=by_cat)

    def tally(self, player_id: str, category: Optional[Category] = None) -> TierTally:
        return self.history_for(player_id).tally(category)

    def round_played(self, team_id: str, round_number: int) -> bool:
        return (team_id, round_number) in self._played_rounds

    def round_tiers(self, round_number: int, category: Optional[Category] = None) -> Dict[str, int]:
        out: Dict[str, int] = {}
        for (rnd, cat), tiers in self._round_tiers.items():
            if rnd != round_number or (category is not None and cat != Category(category)):
                continue
            for pid, tier in tiers.items():
                out[pid] = min(out.get(pid, tier), tier)
        return out
