from __future__ import annotations
import re
from datetime import date as Date
from typing import Dict, List, Optional, Tuple

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator

from .config import DEFAULT_CONFIG, default_tables
from .constants import (
    ActivityStatus, Category, Gender, HINT_SCOPES, Leg, ViolationKind, UPCOMING_RESULT_LABELS,
    normalize_gender, normalize_leg,
)

# -----------------
# Snapshot records
# -----------------
class Player(BaseModel):
    model_config = ConfigDict(frozen=True)

    license: str
    name: str = ""
    gender: Gender = Gender.MALE
    nationality: str = "FR"
    points: float = Field(default=500, ge=0)
    status: ActivityStatus = ActivityStatus.ACTIVE
    locked_tiers: Dict[str, Dict[Leg, int]] = Field(default_factory=dict)  # scope -> leg -> cached lock tier

    @field_validator("gender", mode="before")
    @classmethod
    def _gender(cls, v):
        return normalize_gender(v) if isinstance(v, str) else v

    @field_validator("locked_tiers")
    @classmethod
    def _hint_scopes(cls, v: Dict[str, Dict[Leg, int]]) -> Dict[str, Dict[Leg, int]]:
        unknown = [k for k in v if k not in HINT_SCOPES]
        if unknown:
            raise ValueError(f"Unknown lock hint scopes {unknown}; expected {HINT_SCOPES}")
        return v

    @field_validator("nationality")
    @classmethod
    def _nationality(cls, v: str) -> str:
        return v.strip().upper()

    @property
    def is_female(self) -> bool:
        return self.gender == Gender.FEMALE

    def is_foreign(self, codes: List[str]) -> bool:
        return self.nationality in {c.upper() for c in codes}

    def lock_hint(self, leg: Leg, scope: str = "men") -> Optional[int]:
        return self.locked_tiers.get(scope, {}).get(Leg(leg))


class Team(BaseModel):
    model_config = ConfigDict(frozen=True)

    id: str
    tier: int = Field(ge=1)  # 1 = strongest
    category: Category = Category.MEN
    division: str = ""
    name: str = ""


class Match(BaseModel):
    model_config = ConfigDict(frozen=True)

    id: str
    team_id: str
    team_tier: int = Field(ge=1)
    category: Category = Category.MEN
    round_number: int = Field(ge=1)
    leg: Leg = Leg.FIRST
    date: Optional[Date] = None
    opponent: str = ""
    score: str = ""
    result: str = ""
    roster: Tuple[str, ...] = ()

    @field_validator("leg", mode="before")
    @classmethod
    def _leg(cls, v):
        return normalize_leg(v) if isinstance(v, (str, int)) else v

    @field_validator("roster", mode="before")
    @classmethod
    def _roster(cls, v):
        if v is None:
            return ()
        return tuple(str(x).strip() for x in v if x is not None and str(x).strip())


class Composition(BaseModel):
    """Proposed assignment for one (team, round, leg); slots keep insertion order."""
    model_config = ConfigDict(frozen=True)

    team_id: str
    round_number: int = Field(default=1, ge=1)
    leg: Leg = Leg.FIRST
    slots: Dict[str, str] = Field(default_factory=dict)  # slot -> license or ""
    template: bool = False

    @field_validator("slots")
    @classmethod
    def _no_duplicates(cls, v: Dict[str, str]) -> Dict[str, str]:
        seen: Dict[str, str] = {}
        for slot, pid in v.items():
            if not pid:
                continue
            if pid in seen:
                raise ValueError(f"Player {pid} assigned to slots {seen[pid]} and {slot}")
            seen[pid] = slot
        return v

    def player_ids(self) -> List[str]:
        return [pid for pid in self.slots.values() if pid]

    def with_player(self, player_id: str, slot: str) -> "Composition":
        slots = {s: p for s, p in self.slots.items() if p != player_id}
        slots[slot] = player_id
        return self.model_copy(update={"slots": slots})

# ---------------------
# Verdicts
# ---------------------
class ValidationError(BaseModel):
    model_config = ConfigDict(frozen=True)

    kind: ViolationKind
    message: str
    player: Optional[str] = None
    team_tier: Optional[int] = None


class ValidationResult(BaseModel):
    model_config = ConfigDict(frozen=True)

    is_valid: bool
    errors: List[ValidationError] = Field(default_factory=list)

    @classmethod
    def from_errors(cls, errors: List[ValidationError]) -> "ValidationResult":
        return cls(is_valid=not errors, errors=list(errors))

    def kinds(self) -> List[ViolationKind]:
        return [e.kind for e in self.errors]

    def players(self, kind: Optional[ViolationKind] = None) -> List[str]:
        return [e.player for e in self.errors if e.player and (kind is None or e.kind == kind)]


class AssignmentPreview(BaseModel):
    model_config = ConfigDict(frozen=True)

    player: str
    slot: str
    result: ValidationResult
    future_lock: Optional[int] = None

# ---------------------
# Rule tables
# ---------------------
class GroupStructure(BaseModel):
    model_config = ConfigDict(frozen=True)

    groups: int = Field(ge=1)
    players_per_group: int = Field(ge=1)
    total: int = 0

    @model_validator(mode="before")
    @classmethod
    def _fill_total(cls, data):
        if isinstance(data, dict) and not data.get("total"):
            data = dict(data)
            data["total"] = int(data.get("groups", 0)) * int(data.get("players_per_group", 0))
        return data

    @model_validator(mode="after")
    def _consistent(self):
        if self.total != self.groups * self.players_per_group:
            raise ValueError("total must equal groups * players_per_group")
        return self


class RankingFloor(BaseModel):
    """Minimum ranking points for a division; min_count=None means every player."""
    model_config = ConfigDict(frozen=True)

    category: Category
    division: str
    min_points: float = Field(ge=0)
    min_count: Optional[int] = Field(default=None, ge=1)
    of: int = Field(default=4, ge=1)
    aliases: List[str] = Field(default_factory=list)

    def matches(self, division_text: str) -> bool:
        text = division_text or ""
        for label in [self.division] + list(self.aliases):
            words = [re.escape(w) for w in label.split()]
            if not words:
                continue
            pat = r"(?<![\w-])" + r"\s*".join(words) + r"(?!\w)"
            if re.search(pat, text, flags=re.IGNORECASE):
                return True
        return False


class BurnoutConditions(BaseModel):
    model_config = ConfigDict(frozen=True)

    max_matches_per_player: int = Field(default=7, ge=0)
    max_consecutive_matches: int = Field(default=3, ge=0)
    min_days_between_matches: int = Field(default=1, ge=0)


class BurnoutInfo(BaseModel):
    model_config = ConfigDict(frozen=True)

    player: str
    team: str
    matches_played: int
    last_match_date: Optional[Date] = None
    max_streak: int = 0
    at_risk: bool = False
    risk_reason: Optional[str] = None


class TeamBurnoutReport(BaseModel):
    model_config = ConfigDict(frozen=True)

    team: str
    conditions: BurnoutConditions
    at_risk: List[BurnoutInfo] = Field(default_factory=list)
    safe: List[BurnoutInfo] = Field(default_factory=list)


def _table(key: str):
    return lambda: default_tables()[key]


class RulesConfig(BaseModel):
    model_config = ConfigDict(frozen=True)

    classic_lock_threshold: int = Field(default=DEFAULT_CONFIG["classic_lock_threshold"], ge=1)
    group_lock_threshold: int = Field(default=DEFAULT_CONFIG["group_lock_threshold"], ge=1)
    max_round_slots: int = Field(default=DEFAULT_CONFIG["max_round_slots"], ge=1)
    max_template_slots: int = Field(default=DEFAULT_CONFIG["max_template_slots"], ge=1)
    max_foreign: int = Field(default=DEFAULT_CONFIG["max_foreign"], ge=0)
    max_women_in_men_team: int = Field(default=DEFAULT_CONFIG["max_women_in_men_team"], ge=0)
    round2_rule_round: int = Field(default=DEFAULT_CONFIG["round2_rule_round"], ge=1)
    round2_max_from_stronger: int = Field(default=DEFAULT_CONFIG["round2_max_from_stronger"], ge=0)
    group_max_locked_per_group: int = Field(default=DEFAULT_CONFIG["group_max_locked_per_group"], ge=0)
    check_slot_order: bool = DEFAULT_CONFIG["check_slot_order"]
    foreign_nationality_codes: List[str] = Field(
        default_factory=lambda: list(DEFAULT_CONFIG["foreign_nationality_codes"])
    )
    upcoming_result_labels: List[str] = Field(default_factory=lambda: list(UPCOMING_RESULT_LABELS))
    burnout: BurnoutConditions = Field(default_factory=BurnoutConditions)
    ranking_floors: List[RankingFloor] = Field(default_factory=_table("ranking_floors"), validate_default=True)
    group_structures: Dict[str, GroupStructure] = Field(
        default_factory=_table("group_structures"), validate_default=True
    )

    @field_validator("foreign_nationality_codes")
    @classmethod
    def _codes(cls, v: List[str]) -> List[str]:
        if not v:
            raise ValueError("foreign_nationality_codes must be a non-empty list")
        return [c.strip().upper() for c in v]

    def floors_for(self, category: Category, division: str) -> List[RankingFloor]:
        return [f for f in self.ranking_floors if f.category == category and f.matches(division)]
