from __future__ import annotations
from enum import Enum
from typing import Dict, List

# -----------------
# Calendar / teams
# -----------------
class Leg(str, Enum):
    FIRST = "first"
    SECOND = "second"

class Category(str, Enum):
    MEN = "men"
    WOMEN = "women"

class Gender(str, Enum):
    MALE = "M"
    FEMALE = "F"

class ActivityStatus(str, Enum):
    ACTIVE = "active"
    TEMPORARY = "temporary"
    INACTIVE = "inactive"

# ---------------------
# Violation taxonomy
# ---------------------
class ViolationKind(str, Enum):
    LOCK = "lock"
    QUOTA_FEMALE = "quota_female"
    QUOTA_FOREIGN = "quota_foreign"
    RANKING_ORDER = "ranking_order"
    RANKING_FLOOR = "ranking_floor"
    ROUND2_QUOTA = "round2_quota"
    GROUP_ORDER = "group_order"          # Paris article 8
    GROUP_LOCK_CAP = "group_lock_cap"    # Paris article 12
    ROSTER_SIZE = "roster_size"
    UNKNOWN_PLAYER = "unknown_player"

# Cached lock hints are kept per championship: classic men, classic women, group league
GROUP_HINT_SCOPE = "group"
HINT_SCOPES: List[str] = ["men", "women", GROUP_HINT_SCOPE]

# ---------------------
# Slots
# ---------------------
CLASSIC_SLOTS: List[str] = ["A", "B", "C", "D"]
TEMPLATE_SLOTS: List[str] = CLASSIC_SLOTS + ["E"]

# Group league slots are numbered 1..total
def group_slots(total: int) -> List[str]:
    return [str(i) for i in range(1, total + 1)]

# ---------------------
# Match results
# ---------------------
UPCOMING_RESULT_LABELS: List[str] = ["À VENIR", "A VENIR", "UPCOMING"]
SCORE_PATTERN = r"^\s*(\d+)\s*-\s*(\d+)\s*$"

# Leg normalisation for snapshots (FFTT "phase" numbering)
LEG_ALIASES: Dict[str, str] = {
    "1": "first", "aller": "first", "first": "first", "phase 1": "first",
    "2": "second", "retour": "second", "second": "second", "phase 2": "second",
}

GENDER_ALIASES: Dict[str, str] = {
    "m": "M", "h": "M", "male": "M", "homme": "M",
    "f": "F", "female": "F", "femme": "F", "d": "F",
}

def normalize_leg(value) -> str:
    if value is None:
        return ""
    if isinstance(value, Enum):
        return value.value
    key = str(value).strip().lower()
    return LEG_ALIASES.get(key, key)

def normalize_gender(value) -> str:
    if value is None:
        return ""
    if isinstance(value, Enum):
        return value.value
    key = str(value).strip().lower()
    return GENDER_ALIASES.get(key, key.upper())
