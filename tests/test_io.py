"""Tests for JSON and CSV import/export."""

import csv
import json

import pytest

from padelcup.io_csv import (
    CSVImportError,
    export_matches_csv,
    export_standings_csv,
    import_teams_csv,
    validate_team_row,
)
from padelcup.io_json import (
    FORMAT_VERSION,
    JSONImportError,
    export_tournament_json,
    import_tournament_json,
    tournament_to_dict,
)
from padelcup.models import SetScore, StageSettings, Team, TieBreak, TournamentConfig
from padelcup.tournament import create_tournament, record_result


def make_tournament(group_stage=True, n=4):
    teams = [Team(id=f"t{i}", name=f"Team {i}", players=(f"A{i}", f"B{i}")) for i in range(1, n + 1)]
    config = TournamentConfig(
        name="Export Cup",
        stages=StageSettings(group_stage=group_stage, knockout_stage=True),
    )
    return create_tournament(config, teams, random_seed=3)


def write_csv(path, text):
    path.write_text(text, encoding="utf-8")
    return str(path)


# ============================================================================
# JSON
# ============================================================================


def test_json_export_import(tmp_path):
    tournament = make_tournament(group_stage=False)
    semi = tournament.knockout.rounds[0][0]
    record_result(tournament, semi.id, [SetScore(7, 6, TieBreak(7, 4)), SetScore(6, 2)])

    out = export_tournament_json(tournament, str(tmp_path / "out" / "cup.json"))
    assert out.exists()

    data = json.loads(out.read_text(encoding="utf-8"))
    assert data["format_version"] == FORMAT_VERSION
    assert data["knockout"]["rounds"][1][0]["team_a_id"] == semi.team_a_id
    assert data["knockout"]["rounds"][0][0]["score"]["sets"][0]["tie_break"] == {"team_a": 7, "team_b": 4}

    loaded = import_tournament_json(str(out))
    assert tournament_to_dict(loaded) == tournament_to_dict(tournament)
    assert loaded.knockout.rounds[0][0].score.sets[0].tie_break == TieBreak(7, 4)


def test_json_empty_slots_are_null(tmp_path):
    tournament = make_tournament(group_stage=False, n=3)
    out = export_tournament_json(tournament, str(tmp_path / "cup.json"))

    data = json.loads(out.read_text(encoding="utf-8"))
    assert data["knockout"]["entries"][-1] is None
    assert data["knockout"]["rounds"][0][1] is None


def test_json_import_missing_file(tmp_path):
    with pytest.raises(JSONImportError, match="not found"):
        import_tournament_json(str(tmp_path / "missing.json"))


def test_json_import_invalid_json(tmp_path):
    path = tmp_path / "bad.json"
    path.write_text("{not json", encoding="utf-8")

    with pytest.raises(JSONImportError, match="Invalid JSON"):
        import_tournament_json(str(path))


def test_json_import_not_a_tournament(tmp_path):
    path = tmp_path / "list.json"
    path.write_text("[1, 2, 3]", encoding="utf-8")
    with pytest.raises(JSONImportError, match="does not contain"):
        import_tournament_json(str(path))

    path.write_text('{"id": "x"}', encoding="utf-8")
    with pytest.raises(JSONImportError, match="Invalid tournament document"):
        import_tournament_json(str(path))


# ============================================================================
# CSV teams
# ============================================================================


def test_import_teams_csv(tmp_path):
    path = write_csv(
        tmp_path / "teams.csv",
        "id,name,player1,player2\n"
        "t1,Los Galacticos,Ana Ruiz,Marta Gil\n"
        "t2,Bandeja Club, Luis Vidal ,Pablo Sanz\n",
    )

    teams = import_teams_csv(path)

    assert teams == [
        Team(id="t1", name="Los Galacticos", players=("Ana Ruiz", "Marta Gil")),
        Team(id="t2", name="Bandeja Club", players=("Luis Vidal", "Pablo Sanz")),
    ]


def test_import_teams_csv_generates_missing_ids(tmp_path):
    path = write_csv(tmp_path / "teams.csv", "name,player1,player2\nSmash,A,B\nLob,C,D\n")

    teams = import_teams_csv(path)

    assert [t.name for t in teams] == ["Smash", "Lob"]
    assert all(t.id for t in teams)
    assert teams[0].id != teams[1].id


def test_import_teams_csv_duplicates(tmp_path, capsys):
    path = write_csv(tmp_path / "teams.csv", "id,name,player1,player2\nt1,A,a1,a2\nt1,B,b1,b2\n")

    teams = import_teams_csv(path)
    assert [t.name for t in teams] == ["A"]
    assert "Skipped 1 duplicate rows" in capsys.readouterr().out

    with pytest.raises(CSVImportError, match="Duplicate team id"):
        import_teams_csv(path, skip_duplicates=False)


def test_import_teams_csv_errors(tmp_path):
    with pytest.raises(CSVImportError, match="not found"):
        import_teams_csv(str(tmp_path / "missing.csv"))

    path = write_csv(tmp_path / "cols.csv", "id,name,player1\nt1,A,a1\n")
    with pytest.raises(CSVImportError, match="missing required columns"):
        import_teams_csv(path)

    path = write_csv(tmp_path / "blank.csv", "id,name,player1,player2\nt1,A,,a2\n")
    with pytest.raises(CSVImportError, match="Row 2"):
        import_teams_csv(path)


def test_validate_team_row():
    row = validate_team_row({"id": " t9 ", "name": " Net ", "player1": "X", "player2": "Y"}, 2)
    assert row == {"id": "t9", "name": "Net", "players": ("X", "Y")}

    with pytest.raises(CSVImportError, match="'name'"):
        validate_team_row({"name": "", "player1": "X", "player2": "Y"}, 5)


# ============================================================================
# CSV exports
# ============================================================================


def test_export_standings_csv(tmp_path):
    tournament = make_tournament()
    match = tournament.groups[0].matches[0]
    record_result(tournament, match.id, [SetScore(6, 4), SetScore(6, 4)])

    path = tmp_path / "standings.csv"
    export_standings_csv(tournament, str(path))

    with open(path, encoding="utf-8", newline="") as f:
        rows = list(csv.DictReader(f))

    assert len(rows) == 4
    leader = rows[0]
    assert leader["Group"] == "Group A"
    assert leader["Position"] == "1"
    assert leader["Team_ID"] == match.team_a_id
    assert leader["Points"] == "2"
    assert leader["Games_W"] == "12"


def test_export_matches_csv(tmp_path):
    tournament = make_tournament(group_stage=False)
    semi = tournament.knockout.rounds[0][0]
    record_result(tournament, semi.id, [SetScore(6, 4), SetScore(6, 4)])

    path = tmp_path / "matches.csv"
    export_matches_csv(tournament, str(path))

    with open(path, encoding="utf-8", newline="") as f:
        rows = list(csv.DictReader(f))

    assert [r["Round"] for r in rows] == ["semiFinal", "semiFinal", "final"]
    assert rows[0]["Score"] == "6-4 6-4"
    assert rows[0]["Status"] == "completed"
    assert rows[0]["Winner"] == tournament.team_name(semi.team_a_id)
    assert rows[2]["Team_B"] == "TBD"
