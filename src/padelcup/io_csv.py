"""CSV import/export utilities."""

import csv
from pathlib import Path

from padelcup.bracket import round_key
from padelcup.models import Match, Team, Tournament, generate_id
from padelcup.standings import calculate_standings

REQUIRED_COLUMNS = {"name", "player1", "player2"}


class CSVImportError(Exception):
    """Error during CSV import."""
    pass


def validate_team_row(row: dict, row_num: int) -> dict:
    """Validate a team row from CSV.

    Args:
        row: Dictionary with CSV columns
        row_num: Row number for error messages

    Returns:
        Validated dictionary with cleaned data

    Raises:
        CSVImportError: If validation fails
    """
    errors = []
    for field in ("name", "player1", "player2"):
        if not (row.get(field) or "").strip():
            errors.append(f"Missing required field '{field}'")

    if errors:
        raise CSVImportError(f"Row {row_num}: {', '.join(errors)}")

    return {
        "id": (row.get("id") or "").strip() or generate_id(),
        "name": row["name"].strip(),
        "players": (row["player1"].strip(), row["player2"].strip()),
    }


def import_teams_csv(csv_path: str, skip_duplicates: bool = True) -> list[Team]:
    """Import teams from CSV file.

    CSV format (``id`` is optional, a new id is generated when blank):
        id,name,player1,player2
        t1,Los Galacticos,Ana Ruiz,Marta Gil

    Args:
        csv_path: Path to CSV file
        skip_duplicates: Skip rows with an id already seen (else fail)

    Returns:
        List of Team objects

    Raises:
        CSVImportError: If file not found or validation fails
    """
    csv_file = Path(csv_path)
    if not csv_file.exists():
        raise CSVImportError(f"CSV file not found: {csv_path}")

    teams = []
    seen_ids = set()
    skipped_count = 0

    with open(csv_file, "r", encoding="utf-8") as f:
        reader = csv.DictReader(f)

        if not REQUIRED_COLUMNS.issubset(set(reader.fieldnames or [])):
            missing = REQUIRED_COLUMNS - set(reader.fieldnames or [])
            raise CSVImportError(f"CSV missing required columns: {sorted(missing)}")

        for row_num, row in enumerate(reader, start=2):  # Start at 2 (row 1 is header)
            validated = validate_team_row(row, row_num)

            if validated["id"] in seen_ids:
                if not skip_duplicates:
                    raise CSVImportError(f"Row {row_num}: Duplicate team id '{validated['id']}'")
                print(f"WARNING Row {row_num}: Duplicate ID {validated['id']}, skipping")
                skipped_count += 1
                continue

            seen_ids.add(validated["id"])
            teams.append(Team(id=validated["id"], name=validated["name"], players=validated["players"]))

    if skipped_count > 0:
        print(f"INFO: Skipped {skipped_count} duplicate rows")

    return teams


def _score_text(match: Match) -> str:
    return " ".join(str(s) for s in match.score.sets)


def export_standings_csv(tournament: Tournament, path: str):
    """Export the standings of every group to CSV.

    Args:
        tournament: Tournament with groups
        path: Output CSV path
    """
    with open(path, "w", encoding="utf-8", newline="") as f:
        writer = csv.writer(f)
        writer.writerow([
            "Group", "Position", "Team_ID", "Team_Name", "Played", "Won", "Lost",
            "Sets_W", "Sets_L", "Games_W", "Games_L", "Points",
        ])

        for group in tournament.groups:
            for standing in calculate_standings(group):
                writer.writerow([
                    group.name,
                    standing.position,
                    standing.team_id,
                    tournament.team_name(standing.team_id),
                    standing.played,
                    standing.won,
                    standing.lost,
                    standing.sets_won,
                    standing.sets_lost,
                    standing.games_won,
                    standing.games_lost,
                    standing.points,
                ])


def export_matches_csv(tournament: Tournament, path: str):
    """Export every group and knockout match to CSV.

    Args:
        tournament: Tournament to export
        path: Output CSV path
    """
    with open(path, "w", encoding="utf-8", newline="") as f:
        writer = csv.writer(f)
        writer.writerow(["Stage", "Round", "Match_ID", "Team_A", "Team_B", "Score", "Status", "Winner"])

        for group in tournament.groups:
            for match in group.matches:
                writer.writerow([
                    group.name,
                    match.round_number or "",
                    match.id,
                    tournament.team_name(match.team_a_id),
                    tournament.team_name(match.team_b_id),
                    _score_text(match),
                    match.status.value,
                    tournament.team_name(match.score.winner_id) if match.score.winner_id else "",
                ])

        stage = tournament.knockout
        for round_index, round_slots in enumerate(stage.rounds):
            for match in round_slots:
                if match is None:
                    continue
                writer.writerow([
                    "Knockout",
                    round_key(stage, round_index),
                    match.id,
                    tournament.team_name(match.team_a_id),
                    tournament.team_name(match.team_b_id),
                    _score_text(match),
                    match.status.value,
                    tournament.team_name(match.score.winner_id) if match.score.winner_id else "",
                ])
