# FILE: composition_core/aliases.py
PLAYER_ALIASES = {
    "license": ["license", "licence", "license_id", "Licence", "N° licence", "numero_licence"],
    "name": ["name", "nom", "Nom Prénom", "Player", "Full Name", "joueur"],
    "gender": ["gender", "sexe", "sex", "Genre"],
    "nationality": ["nationality", "nationalite", "nationalité", "Nat", "nat"],
    "points": ["points", "Points", "pts", "classement", "points_mensuels"],
    "status": ["status", "etat", "état", "Statut", "activity"],
    "locked_men_first": ["locked_men_first", "locked_first", "brulage_phase1", "brûlage phase 1", "brulage_masculin_phase1"],
    "locked_men_second": ["locked_men_second", "locked_second", "brulage_phase2", "brûlage phase 2", "brulage_masculin_phase2"],
    "locked_women_first": ["locked_women_first", "brulage_feminin_phase1", "brûlage féminin phase 1"],
    "locked_women_second": ["locked_women_second", "brulage_feminin_phase2", "brûlage féminin phase 2"],
    "locked_group_first": ["locked_group_first", "brulage_paris_phase1", "brûlage paris phase 1"],
    "locked_group_second": ["locked_group_second", "brulage_paris_phase2", "brûlage paris phase 2"],
}

MATCH_ALIASES = {
    "id": ["id", "match_id", "rencontre"],
    "team_id": ["team_id", "equipe_id", "équipe", "team"],
    "team_tier": ["team_tier", "numero_equipe", "team_number", "tier"],
    "category": ["category", "categorie", "catégorie", "epreuve"],
    "round_number": ["round_number", "journee", "journée", "round"],
    "leg": ["leg", "phase"],
    "date": ["date", "date_rencontre"],
    "opponent": ["opponent", "adversaire"],
    "score": ["score"],
    "result": ["result", "resultat", "résultat"],
    "roster": ["roster", "joueurs", "players", "licences"],
}

def map_headers(df, aliases=None):
    """
    Map input DataFrame columns to expected canonical names using aliases.
    Returns (renamed_df, mapping_report).
    """
    aliases = aliases or PLAYER_ALIASES
    mapping = {}
    rename_cols = {}
    for col in df.columns:
        matched = False
        key = str(col).strip().lower()
        for canon, names in aliases.items():
            if key == canon.lower() or key in [a.lower() for a in names]:
                rename_cols[col] = canon
                mapping[col] = canon
                matched = True
                break
        if not matched:
            mapping[col] = None
    df = df.rename(columns=rename_cols)
    return df, mapping
