from __future__ import annotations
import io
import logging
import re
from typing import List

import pandas as pd
import pydantic
import yaml

from .aliases import MATCH_ALIASES, PLAYER_ALIASES, map_headers
from .constants import HINT_SCOPES, Leg
from .models import Match, Player, RulesConfig

log = logging.getLogger(__name__)

PLAYER_REQUIRED = ["license", "name", "gender", "points"]
MATCH_REQUIRED = ["id", "team_id", "team_tier", "round_number", "leg"]
HINT_COLUMNS = [(scope, leg, f"locked_{scope}_{leg.value}") for scope in HINT_SCOPES for leg in Leg]
PLAYER_COLUMNS = ["license", "name", "gender", "nationality", "points", "status"] + [c for _, _, c in HINT_COLUMNS]

ROSTER_SPLIT = re.compile(r"[|;,\s]+")

def _require(df: pd.DataFrame, required: List[str]) -> None:
    missing = [c for c in required if c not in df.columns]
    if missing:
        raise ValueError(f"Missing required columns: {missing}")

def _text(v) -> str:
    return "" if pd.isna(v) else str(v).strip()

def _int_or_none(v):
    s = _text(v)
    return int(float(s)) if s else None

def load_players_csv(file_like) -> List[Player]:
    df = pd.read_csv(file_like, dtype=str)
    df, _ = map_headers(df, PLAYER_ALIASES)
    _require(df, PLAYER_REQUIRED)

    df["points"] = pd.to_numeric(df["points"], errors="coerce").fillna(0)
    players: List[Player] = []
    for _, r in df.iterrows():
        locked = {}
        for scope, leg, col in HINT_COLUMNS:
            tier = _int_or_none(r[col]) if col in df.columns else None
            if tier is not None:
                locked.setdefault(scope, {})[leg] = tier
        data = {
            "license": _text(r["license"]),
            "name": _text(r["name"]),
            "gender": _text(r["gender"]),
            "points": float(r["points"]),
            "locked_tiers": locked,
        }
        if "nationality" in df.columns and _text(r["nationality"]):
            data["nationality"] = _text(r["nationality"])
        if "status" in df.columns and _text(r["status"]):
            data["status"] = _text(r["status"]).lower()
        players.append(Player(**data))
    log.info("loaded %d players", len(players))
    return players

def load_matches_csv(file_like) -> List[Match]:
    df = pd.read_csv(file_like, dtype=str)
    df, _ = map_headers(df, MATCH_ALIASES)
    _require(df, MATCH_REQUIRED)

    matches: List[Match] = []
    for _, r in df.iterrows():
        data = {
            "id": _text(r["id"]),
            "team_id": _text(r["team_id"]),
            "team_tier": _int_or_none(r["team_tier"]),
            "round_number": _int_or_none(r["round_number"]),
            "leg": _text(r["leg"]),
        }
        for col in ("category", "opponent", "score", "result"):
            if col in df.columns and _text(r[col]):
                data[col] = _text(r[col]).lower() if col == "category" else _text(r[col])
        if "date" in df.columns and _text(r["date"]):
            data["date"] = pd.to_datetime(_text(r["date"]), dayfirst=False).date()
        if "roster" in df.columns:
            data["roster"] = [x for x in ROSTER_SPLIT.split(_text(r["roster"])) if x]
        matches.append(Match(**data))
    log.info("loaded %d matches", len(matches))
    return matches

def save_players_csv_bytes(players: List[Player]) -> bytes:
    rows = [{
        "license": p.license,
        "name": p.name,
        "gender": p.gender.value,
        "nationality": p.nationality,
        "points": p.points,
        "status": p.status.value,
        **{col: p.lock_hint(leg, scope) or "" for scope, leg, col in HINT_COLUMNS},
    } for p in players]
    df = pd.DataFrame(rows, columns=PLAYER_COLUMNS)
    buf = io.StringIO()
    df.to_csv(buf, index=False)
    return buf.getvalue().encode("utf-8")

def parse_rules_yaml(text: str) -> RulesConfig:
    obj = yaml.safe_load(text) or {}
    if not isinstance(obj, dict):
        raise ValueError("Rules file must be a mapping.")
    floors = obj.get("ranking_floors", [])
    if not isinstance(floors, list):
        raise ValueError("ranking_floors must be a list.")
    structures = obj.get("group_structures", {})
    if not isinstance(structures, dict):
        raise ValueError("group_structures must be a mapping of division label to layout.")
    try:
        return RulesConfig(**obj)
    except pydantic.ValidationError as e:
        raise ValueError(f"Invalid rules: {e}") from e

def load_rules_yaml(path: str) -> RulesConfig:
    with open(path, "r", encoding="utf-8") as f:
        cfg = parse_rules_yaml(f.read())
    log.info("loaded rules from %s: %d ranking floors, %d group structures",
             path, len(cfg.ranking_floors), len(cfg.group_structures))
    return cfg

def save_rules_yaml(path: str, text: str):
    parse_rules_yaml(text)
    with open(path, "w", encoding="utf-8") as f:
        f.write(text)
