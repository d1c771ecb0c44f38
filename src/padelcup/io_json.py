"""JSON import/export of whole tournaments.

The document is a plain tree of dicts and lists (no references between
objects), so it can be stored as-is or written to a file.
"""

import json
from datetime import datetime
from pathlib import Path
from typing import Any, Optional

from padelcup.models import (
    AdvancementSettings,
    Group,
    KnockoutStage,
    Match,
    MatchScore,
    MatchStatus,
    ScoringRules,
    SetScore,
    StageScoring,
    StageSettings,
    Team,
    TieBreak,
    Tournament,
    TournamentConfig,
    TournamentStatus,
)

FORMAT_VERSION = 1


class JSONImportError(Exception):
    """Error during JSON import."""
    pass


# ============================================================================
# To dict
# ============================================================================


def rules_to_dict(rules: ScoringRules) -> dict[str, Any]:
    return {
        "games_per_set": rules.games_per_set,
        "sets_to_win": rules.sets_to_win,
        "tie_break_at": rules.tie_break_at,
        "deciding_point": rules.deciding_point,
        "super_tie_break_in_final_set": rules.super_tie_break_in_final_set,
    }


def set_to_dict(set_score: SetScore) -> dict[str, Any]:
    data: dict[str, Any] = {"team_a": set_score.team_a, "team_b": set_score.team_b}
    if set_score.tie_break is not None:
        data["tie_break"] = {
            "team_a": set_score.tie_break.team_a,
            "team_b": set_score.tie_break.team_b,
        }
    return data


def match_to_dict(match: Match) -> dict[str, Any]:
    return {
        "id": match.id,
        "team_a_id": match.team_a_id,
        "team_b_id": match.team_b_id,
        "score": {
            "sets": [set_to_dict(s) for s in match.score.sets],
            "winner_id": match.score.winner_id,
        },
        "status": match.status.value,
        "round_index": match.round_index,
        "round_number": match.round_number,
        "created_at": match.created_at.isoformat(),
    }


def tournament_to_dict(tournament: Tournament) -> dict[str, Any]:
    """Convert a tournament to a JSON-compatible document."""
    config = tournament.config
    return {
        "format_version": FORMAT_VERSION,
        "id": tournament.id,
        "config": {
            "name": config.name,
            "stages": {
                "group_stage": config.stages.group_stage,
                "knockout_stage": config.stages.knockout_stage,
            },
            "scoring": {
                "group": rules_to_dict(config.scoring.group),
                "knockout": rules_to_dict(config.scoring.knockout),
            },
            "advancement": {"teams_per_group": config.advancement.teams_per_group},
        },
        "teams": [
            {"id": t.id, "name": t.name, "players": list(t.players)} for t in tournament.teams
        ],
        "groups": [
            {
                "id": g.id,
                "name": g.name,
                "team_ids": list(g.team_ids),
                "matches": [match_to_dict(m) for m in g.matches],
            }
            for g in tournament.groups
        ],
        "knockout": {
            "size": tournament.knockout.size,
            "entries": list(tournament.knockout.entries),
            "rounds": [
                [match_to_dict(m) if m is not None else None for m in round_slots]
                for round_slots in tournament.knockout.rounds
            ],
        },
        "status": tournament.status.value,
        "created_at": tournament.created_at.isoformat(),
    }


# ============================================================================
# From dict
# ============================================================================


def rules_from_dict(data: Optional[dict[str, Any]]) -> ScoringRules:
    if not data:
        return ScoringRules()
    defaults = ScoringRules()
    return ScoringRules(
        games_per_set=int(data.get("games_per_set", defaults.games_per_set)),
        sets_to_win=int(data.get("sets_to_win", defaults.sets_to_win)),
        tie_break_at=int(data.get("tie_break_at", defaults.tie_break_at)),
        deciding_point=bool(data.get("deciding_point", defaults.deciding_point)),
        super_tie_break_in_final_set=bool(
            data.get("super_tie_break_in_final_set", defaults.super_tie_break_in_final_set)
        ),
    )


def set_from_dict(data: dict[str, Any]) -> SetScore:
    tie_break = data.get("tie_break")
    return SetScore(
        team_a=int(data["team_a"]),
        team_b=int(data["team_b"]),
        tie_break=TieBreak(int(tie_break["team_a"]), int(tie_break["team_b"])) if tie_break else None,
    )


def match_from_dict(data: dict[str, Any]) -> Match:
    score = data.get("score") or {}
    return Match(
        id=data["id"],
        team_a_id=data.get("team_a_id"),
        team_b_id=data.get("team_b_id"),
        score=MatchScore(
            sets=[set_from_dict(s) for s in score.get("sets", [])],
            winner_id=score.get("winner_id"),
        ),
        status=MatchStatus(data.get("status", MatchStatus.SCHEDULED.value)),
        round_index=data.get("round_index"),
        round_number=data.get("round_number"),
        created_at=datetime.fromisoformat(data["created_at"]) if data.get("created_at") else datetime.utcnow(),
    )


def tournament_from_dict(data: dict[str, Any]) -> Tournament:
    """Rebuild a tournament from a document made by tournament_to_dict.

    Raises:
        KeyError, ValueError, TypeError: If the document is malformed
    """
    config_data = data["config"]
    stages = config_data.get("stages", {})
    scoring = config_data.get("scoring", {})
    advancement = config_data.get("advancement", {})

    config = TournamentConfig(
        name=config_data["name"],
        stages=StageSettings(
            group_stage=bool(stages.get("group_stage", True)),
            knockout_stage=bool(stages.get("knockout_stage", True)),
        ),
        scoring=StageScoring(
            group=rules_from_dict(scoring.get("group")),
            knockout=rules_from_dict(scoring.get("knockout")),
        ),
        advancement=AdvancementSettings(
            teams_per_group=int(advancement.get("teams_per_group", 2))
        ),
    )

    knockout_data = data.get("knockout") or {}
    knockout = KnockoutStage(
        size=int(knockout_data.get("size", 0)),
        entries=list(knockout_data.get("entries", [])),
        rounds=[
            [match_from_dict(m) if m is not None else None for m in round_slots]
            for round_slots in knockout_data.get("rounds", [])
        ],
    )

    return Tournament(
        id=data["id"],
        config=config,
        teams=[
            Team(id=t["id"], name=t["name"], players=(t["players"][0], t["players"][1]))
            for t in data.get("teams", [])
        ],
        groups=[
            Group(
                id=g["id"],
                name=g["name"],
                team_ids=list(g.get("team_ids", [])),
                matches=[match_from_dict(m) for m in g.get("matches", [])],
            )
            for g in data.get("groups", [])
        ],
        knockout=knockout,
        status=TournamentStatus(data.get("status", TournamentStatus.ACTIVE.value)),
        created_at=datetime.fromisoformat(data["created_at"]) if data.get("created_at") else datetime.utcnow(),
    )


# ============================================================================
# Files
# ============================================================================


def dumps_tournament(tournament: Tournament) -> str:
    return json.dumps(tournament_to_dict(tournament), ensure_ascii=False)


def loads_tournament(text: str) -> Tournament:
    return tournament_from_dict(json.loads(text))


def export_tournament_json(tournament: Tournament, path: str) -> Path:
    """Write a tournament to a JSON file.

    Args:
        tournament: Tournament to export
        path: Output file path

    Returns:
        Path of the written file
    """
    out = Path(path)
    out.parent.mkdir(parents=True, exist_ok=True)
    with open(out, "w", encoding="utf-8") as f:
        json.dump(tournament_to_dict(tournament), f, ensure_ascii=False, indent=2)
    return out


def import_tournament_json(path: str) -> Tournament:
    """Read a tournament from a JSON file.

    Args:
        path: Path to a file written by export_tournament_json

    Returns:
        Tournament

    Raises:
        JSONImportError: If the file is missing, not JSON or not a tournament
    """
    json_file = Path(path)
    if not json_file.exists():
        raise JSONImportError(f"JSON file not found: {path}")

    try:
        with open(json_file, "r", encoding="utf-8") as f:
            data = json.load(f)
    except json.JSONDecodeError as e:
        raise JSONImportError(f"Invalid JSON in {path}: {e}")

    if not isinstance(data, dict):
        raise JSONImportError(f"{path} does not contain a tournament document")

    try:
        return tournament_from_dict(data)
    except (KeyError, ValueError, TypeError, IndexError) as e:
        raise JSONImportError(f"Invalid tournament document in {path}: {e}")
