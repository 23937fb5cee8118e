"""
Roster composition eligibility for a table tennis club: tenure locks, FFTT
quotas, the round-2 rule, Paris group-league structure and a fatigue report.
"""
from .constants import Category, Gender, Leg, ViolationKind
from .history import ParticipationIndex, build_participation, is_played
from .locks import current_lock, future_lock, future_lock_group
from .models import (
    BurnoutConditions, BurnoutInfo, Composition, Match, Player, RulesConfig, Team,
    ValidationError, ValidationResult,
)
from .validation import Regime, RoundContext, available_players, preview_assignment, validate

__all__ = [
    "Category", "Gender", "Leg", "ViolationKind",
    "ParticipationIndex", "build_participation", "is_played",
    "current_lock", "future_lock", "future_lock_group",
    "BurnoutConditions", "BurnoutInfo", "Composition", "Match", "Player", "RulesConfig", "Team",
    "ValidationError", "ValidationResult",
    "Regime", "RoundContext", "available_players", "preview_assignment", "validate",
]
