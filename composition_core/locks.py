"""
Tenure locks ("brûlage").

A player is bound to the strongest tier t such that their matches at t and at
every stronger tier reach the lock threshold within a leg. From then on they may
only be fielded at t or weaker (larger tier numbers) for the rest of the leg, so
later legal matches never move the lock.
"""
from __future__ import annotations
from typing import Dict, Optional, Union

from .config import DEFAULT_CONFIG
from .constants import Category, GROUP_HINT_SCOPE, Leg
from .history import PlayerHistory, TierTally
from .models import Player

HistoryLike = Union[PlayerHistory, Dict[int, int], None]

CLASSIC_THRESHOLD = DEFAULT_CONFIG["classic_lock_threshold"]
GROUP_THRESHOLD = DEFAULT_CONFIG["group_lock_threshold"]

def _tally(history: HistoryLike, category: Optional[Category] = None) -> TierTally:
    if history is None:
        return {}
    if isinstance(history, PlayerHistory):
        return history.tally(category)
    return {int(t): int(n) for t, n in history.items() if n}

def _bound_tier(tally: TierTally, threshold: int) -> Optional[int]:
    # strongest tier whose matches, together with every stronger tier, reach the threshold
    n = 0
    for tier in sorted(tally):
        n += tally[tier]
        if n >= threshold:
            return tier
    return None

def _predict(tally: TierTally, candidate_tier: int, threshold: int) -> Optional[int]:
    if not tally:
        return None
    after = dict(tally)
    after[candidate_tier] = after.get(candidate_tier, 0) + 1
    return _bound_tier(after, threshold)

def future_lock(
    history: HistoryLike,
    candidate_tier: int,
    category: Optional[Category] = None,
    threshold: int = CLASSIC_THRESHOLD,
) -> Optional[int]:
    """Tier the player would be bound to after one more match at `candidate_tier` (classic league)."""
    return _predict(_tally(history, category), candidate_tier, threshold)

def future_lock_group(
    history: HistoryLike,
    candidate_tier: int,
    category: Optional[Category] = None,
    threshold: int = GROUP_THRESHOLD,
) -> Optional[int]:
    """Group league variant; men's and women's matches count alike."""
    return _predict(_tally(history), candidate_tier, threshold)

def current_lock(
    history: HistoryLike,
    threshold: int = CLASSIC_THRESHOLD,
    category: Optional[Category] = None,
) -> Optional[int]:
    return _bound_tier(_tally(history, category), threshold)

def effective_lock(
    player: Player,
    history: HistoryLike,
    leg: Leg,
    threshold: int = CLASSIC_THRESHOLD,
    category: Optional[Category] = None,
) -> Optional[int]:
    """
    Lock derived from history, combined with the player's cached hint for the leg.
    Classic locks read the hint of the team category; `category=None` reads the group league hint.
    """
    scope = Category(category).value if category is not None else GROUP_HINT_SCOPE
    hint = player.lock_hint(leg, scope)
    locks = [x for x in (current_lock(history, threshold, category), hint) if x is not None]
    return max(locks) if locks else None

def is_locked_out(lock: Optional[int], tier: int) -> bool:
    return lock is not None and tier < lock
