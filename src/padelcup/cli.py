"""Command-line interface for padelcup."""

from typing import Optional

import click

from padelcup.i18n import SUPPORTED_LANGUAGES, get_language_from_env, get_string


def _open_repository(db: Optional[str]):
    """Open the database (creating tables) and return a TournamentRepository."""
    from padelcup.paths import get_default_db_path
    from padelcup.storage import DatabaseManager, TournamentRepository

    manager = DatabaseManager(db or str(get_default_db_path()))
    manager.create_tables()
    return TournamentRepository(manager.get_session())


def _load_tournament(repo, tournament_id: Optional[str], lang: str):
    """Load the requested tournament, or the current one."""
    tournament = repo.load(tournament_id) if tournament_id else repo.get_current()
    if tournament is None:
        if tournament_id:
            click.echo(f"[ERROR] {get_string('cli.errors.tournament_not_found', lang, id=tournament_id)}", err=True)
        else:
            click.echo(f"[ERROR] {get_string('cli.errors.no_tournament', lang)}", err=True)
        raise click.Abort()
    return tournament


def _resolve_match(tournament, match_ref: str):
    """Find a match by full id or by a unique id prefix."""
    from padelcup.tournament import find_match

    match = find_match(tournament, match_ref)
    if match is not None:
        return match

    candidates = [
        m for m in list(tournament.iter_group_matches()) + tournament.knockout.matches
        if m.id.startswith(match_ref)
    ]
    return candidates[0] if len(candidates) == 1 else None


def _format_match(tournament, match, lang: str) -> str:
    tbd = get_string("labels.tbd", lang)
    team_a = tournament.team_name(match.team_a_id) if match.team_a_id else tbd
    team_b = tournament.team_name(match.team_b_id) if match.team_b_id else tbd
    score = " ".join(str(s) for s in match.score.sets) or get_string("labels.vs", lang)
    status = get_string(f"status.{match.status.value}", lang)
    return f"[{match.id[:8]}] {team_a} {score} {team_b} ({status})"


db_option = click.option("--db", required=False, help="Path to SQLite database (default: .padelcup/padelcup.sqlite)")
tournament_option = click.option("--tournament", "tournament_id", required=False, help="Tournament ID (default: current tournament)")
lang_option = click.option("--lang", type=click.Choice(SUPPORTED_LANGUAGES), default=None, help="Output language")


@click.group()
@click.version_option(version="0.1.0")
def cli():
    """Padel Tournament Manager - groups, brackets and results from the command line."""
    pass


@cli.command()
@click.option("--config", required=True, help="Path to config YAML file")
@click.option("--teams", "teams_csv", required=True, help="Path to teams CSV file")
@db_option
def create(config: str, teams_csv: str, db: Optional[str]):
    """Create a tournament from a config file and a teams CSV.

    Example:
        padelcup create --config config/sample_config.yaml --teams data/samples/teams.csv
    """
    from padelcup.config_loader import ConfigError, load_and_validate_config, to_tournament_config
    from padelcup.io_csv import CSVImportError, import_teams_csv
    from padelcup.tournament import create_tournament
    from padelcup.validation import validate_teams

    try:
        click.echo(f"[INFO] Loading config from: {config}")
        cfg = load_and_validate_config(config)
        lang = cfg["lang"]

        click.echo(f"[INFO] Reading teams from: {teams_csv}")
        teams = import_teams_csv(teams_csv)

        is_valid, error_msg = validate_teams(teams)
        if not is_valid:
            click.echo(f"[ERROR] {error_msg}", err=True)
            raise click.Abort()

        tournament = create_tournament(
            to_tournament_config(cfg),
            teams,
            random_seed=cfg["random_seed"],
            group_count=cfg["group_count"],
        )

        repo = _open_repository(db)
        repo.save(tournament)
        repo.set_current(tournament.id)

        click.echo(f"[SUCCESS] {get_string('cli.create.success', lang, name=tournament.config.name, id=tournament.id)}")
        click.echo("          " + get_string(
            "cli.create.summary",
            lang,
            groups=len(tournament.groups),
            group_matches=sum(len(g.matches) for g in tournament.groups),
            knockout_matches=len(tournament.knockout.matches),
        ))

    except ConfigError as e:
        click.echo(f"[ERROR] Configuration Error: {e}", err=True)
        raise click.Abort()
    except CSVImportError as e:
        click.echo(f"[ERROR] CSV Import Error: {e}", err=True)
        raise click.Abort()


@cli.command(name="list")
@db_option
@lang_option
def list_tournaments(db: Optional[str], lang: Optional[str]):
    """List stored tournaments (newest first)."""
    lang = lang or get_language_from_env()
    repo = _open_repository(db)
    current = repo.get_current()

    tournaments = repo.get_all()
    if not tournaments:
        click.echo(get_string("cli.list.empty", lang))
        return

    for tournament in tournaments:
        marker = "*" if current and current.id == tournament.id else " "
        status = get_string(f"tournament_status.{tournament.status.value}", lang)
        click.echo(f"{marker} {tournament.id}  {tournament.config.name}  [{status}]")


@cli.command()
@tournament_option
@db_option
@lang_option
def show(tournament_id: Optional[str], db: Optional[str], lang: Optional[str]):
    """Show groups, standings and the knockout bracket."""
    from padelcup.bracket import round_display_name
    from padelcup.standings import calculate_standings

    lang = lang or get_language_from_env()
    repo = _open_repository(db)
    tournament = _load_tournament(repo, tournament_id, lang)

    status = get_string(f"tournament_status.{tournament.status.value}", lang)
    click.echo(f"{tournament.config.name} [{status}]")

    for group in tournament.groups:
        click.echo(f"\n== {group.name} ==")
        for match in sorted(group.matches, key=lambda m: m.round_number or 0):
            round_name = get_string("group.round", lang, number=match.round_number)
            click.echo(f"  {round_name}: {_format_match(tournament, match, lang)}")

        click.echo(f"  -- {get_string('labels.standings', lang)} --")
        for s in calculate_standings(group):
            click.echo(
                f"  {s.position}. {tournament.team_name(s.team_id)} - "
                f"{s.points} {get_string('labels.points', lang)}, "
                f"{s.won}-{s.lost}, sets {s.sets_won}-{s.sets_lost}, "
                f"{get_string('labels.games', lang).lower()} {s.games_won}-{s.games_lost}"
            )

    stage = tournament.knockout
    if not stage.is_empty:
        click.echo(f"\n== {get_string('labels.knockout_stage', lang)} ==")
        for round_index, round_slots in enumerate(stage.rounds):
            created = [m for m in round_slots if m is not None]
            if not created:
                continue
            click.echo(f"  -- {round_display_name(stage.size >> round_index, lang)} --")
            for match in created:
                click.echo(f"  {_format_match(tournament, match, lang)}")


@cli.command()
@click.option("--match", "match_ref", required=True, help="Match ID (or unique prefix)")
@click.option("--sets", "sets_text", required=True, help='Set scores, e.g. "6-4, 3-6, 7-6(7-5)"')
@tournament_option
@db_option
@lang_option
def score(match_ref: str, sets_text: str, tournament_id: Optional[str], db: Optional[str], lang: Optional[str]):
    """Record the result of a match.

    Example:
        padelcup score --match 3f2a91c0 --sets "6-4, 7-5"
    """
    from padelcup.scoring import score_match
    from padelcup.storage import ConcurrentUpdateError
    from padelcup.tournament import rules_for_match
    from padelcup.validation import ValidationError, parse_sets, validate_match_ready, validate_match_sets

    lang = lang or get_language_from_env()
    repo = _open_repository(db)
    tournament = _load_tournament(repo, tournament_id, lang)

    match = _resolve_match(tournament, match_ref)
    if match is None:
        click.echo(f"[ERROR] {get_string('cli.errors.match_not_found', lang, id=match_ref)}", err=True)
        raise click.Abort()

    is_valid, error_msg = validate_match_ready(match)
    if not is_valid:
        click.echo(f"[ERROR] {error_msg}", err=True)
        raise click.Abort()

    rules = rules_for_match(tournament, match.id)
    try:
        sets = parse_sets(sets_text)
    except ValidationError as e:
        click.echo(f"[ERROR] {e}", err=True)
        raise click.Abort()

    is_valid, error_msg = validate_match_sets(sets, rules)
    if not is_valid:
        click.echo(f"[ERROR] {error_msg}", err=True)
        raise click.Abort()

    score_match(match, sets, rules)
    try:
        repo.update_match(tournament.id, match)
    except (ValueError, ConcurrentUpdateError) as e:
        click.echo(f"[ERROR] {e}", err=True)
        raise click.Abort()

    click.echo("[SUCCESS] " + get_string(
        "cli.score.success",
        lang,
        id=match.id[:8],
        score=" ".join(str(s) for s in match.score.sets),
        status=get_string(f"status.{match.status.value}", lang),
    ))
    if match.score.winner_id:
        click.echo("          " + get_string("cli.score.winner", lang, team=tournament.team_name(match.score.winner_id)))


@cli.command(name="start-knockout")
@tournament_option
@db_option
@lang_option
def start_knockout(tournament_id: Optional[str], db: Optional[str], lang: Optional[str]):
    """Seed the knockout stage from the group standings."""
    from padelcup.tournament import start_knockout_stage

    lang = lang or get_language_from_env()
    repo = _open_repository(db)
    tournament = _load_tournament(repo, tournament_id, lang)

    try:
        start_knockout_stage(tournament)
    except ValueError as e:
        click.echo(f"[ERROR] {e}", err=True)
        raise click.Abort()

    repo.save(tournament)
    first_round = [m for m in tournament.knockout.rounds[0] if m is not None]
    click.echo("[SUCCESS] " + get_string("cli.knockout.started", lang, matches=len(first_round)))


@cli.command()
@click.option("--out", required=True, help="Output file (.json, .xlsx or .csv)")
@tournament_option
@db_option
@lang_option
def export(out: str, tournament_id: Optional[str], db: Optional[str], lang: Optional[str]):
    """Export a tournament to JSON, Excel or CSV (matches).

    Example:
        padelcup export --out exports/cup.xlsx
    """
    from pathlib import Path

    from padelcup.exports import generate_tournament_excel
    from padelcup.io_csv import export_matches_csv
    from padelcup.io_json import export_tournament_json

    lang = lang or get_language_from_env()
    repo = _open_repository(db)
    tournament = _load_tournament(repo, tournament_id, lang)

    out_path = Path(out)
    out_path.parent.mkdir(parents=True, exist_ok=True)
    suffix = out_path.suffix.lower()

    if suffix == ".json":
        export_tournament_json(tournament, str(out_path))
    elif suffix == ".xlsx":
        out_path.write_bytes(generate_tournament_excel(tournament, lang))
    elif suffix == ".csv":
        export_matches_csv(tournament, str(out_path))
    else:
        click.echo(f"[ERROR] Unsupported export format: {suffix or out}", err=True)
        raise click.Abort()

    click.echo("[SUCCESS] " + get_string("cli.export.success", lang, path=out_path))


@cli.command(name="import")
@click.option("--file", "json_file", required=True, help="Tournament JSON file")
@db_option
@lang_option
def import_tournament(json_file: str, db: Optional[str], lang: Optional[str]):
    """Import a tournament exported as JSON and make it current."""
    from padelcup.io_json import JSONImportError, import_tournament_json

    lang = lang or get_language_from_env()
    try:
        tournament = import_tournament_json(json_file)
    except JSONImportError as e:
        click.echo(f"[ERROR] JSON Import Error: {e}", err=True)
        raise click.Abort()

    repo = _open_repository(db)
    repo.save(tournament)
    repo.set_current(tournament.id)
    click.echo("[SUCCESS] " + get_string("cli.import.success", lang, name=tournament.config.name, id=tournament.id))


if __name__ == "__main__":
    cli()
