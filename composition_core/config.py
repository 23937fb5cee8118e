from __future__ import annotations
import os
import textwrap

import yaml

# ===== Engine defaults (federation rules for the current season) =====
DEFAULT_CONFIG = {
    "classic_lock_threshold": 2,      # matches in a leg before a classic player is burned
    "group_lock_threshold": 3,        # same for the group ("Paris") league
    "max_round_slots": 4,
    "max_template_slots": 5,
    "max_foreign": 1,
    "max_women_in_men_team": 2,
    "round2_rule_round": 2,
    "round2_max_from_stronger": 1,
    "group_max_locked_per_group": 1,
    "check_slot_order": False,
    "foreign_nationality_codes": ["ETR"],
}

RULES_ASSET_PATH = os.path.join("assets", "rules.yaml")

def ensure_assets_exist(root: str = ".") -> str:
    """Write the default rules file under <root>/assets if it is missing; return its path."""
    os.makedirs(os.path.join(root, "assets"), exist_ok=True)
    path = os.path.join(root, RULES_ASSET_PATH)
    if not os.path.exists(path):
        with open(path, "w", encoding="utf-8") as f:
            f.write(DEFAULT_RULES_YAML)
    return path

def default_tables() -> dict:
    obj = yaml.safe_load(DEFAULT_RULES_YAML)
    return {
        "ranking_floors": obj["ranking_floors"],
        "group_structures": obj["group_structures"],
    }

# ===== Rule tables (ranking floors per division, Paris group layouts) =====
DEFAULT_RULES_YAML = textwrap.dedent("""\
ranking_floors:
  - category: men
    division: Nationale 1
    aliases: [N1]
    min_points: 1800
  - category: men
    division: Nationale 2
    aliases: [N2]
    min_points: 1600
  - category: men
    division: Nationale 3
    aliases: [N3]
    min_points: 1400
  - category: women
    division: Nationale 1
    aliases: [N1]
    min_points: 1100
  - category: women
    division: Nationale 2
    aliases: [N2]
    min_points: 900
    min_count: 2
    of: 4

group_structures:
  Excellence:
    groups: 3
    players_per_group: 3
  Promo Excellence:
    groups: 3
    players_per_group: 3
  Honneur:
    groups: 3
    players_per_group: 3
  1st Division:
    groups: 2
    players_per_group: 3
  2nd Division:
    groups: 1
    players_per_group: 3
""")
