"""
Excel export of a whole tournament.
"""

import io
from datetime import datetime

from openpyxl import Workbook
from openpyxl.styles import Alignment, Border, Font, PatternFill, Side

from padelcup.bracket import round_display_name
from padelcup.i18n import DEFAULT_LANGUAGE, get_string
from padelcup.models import Match, Tournament
from padelcup.standings import calculate_standings

HEADER_FONT = Font(bold=True, color="FFFFFF", size=11)
HEADER_FILL = PatternFill(start_color="1B5E20", end_color="1B5E20", fill_type="solid")
QUALIFIED_FILL = PatternFill(start_color="DCEDC8", end_color="DCEDC8", fill_type="solid")
THIN = Side(style="thin")


def _fill_sheet(ws, headers: list, rows: list, highlight=None):
    """Write a header row plus data rows, then size the columns.

    ``highlight`` is an optional predicate on a data row; matching rows get
    the qualified fill.
    """
    ws.append(headers)
    for cell in ws[1]:
        cell.font = HEADER_FONT
        cell.fill = HEADER_FILL
        cell.alignment = Alignment(horizontal="center", vertical="center")
        cell.border = Border(left=THIN, right=THIN, top=THIN, bottom=THIN)

    for row in rows:
        ws.append(row)
        if highlight is not None and highlight(row):
            for cell in ws[ws.max_row]:
                cell.fill = QUALIFIED_FILL

    for column_cells in ws.columns:
        longest = max((len(str(c.value)) for c in column_cells if c.value is not None), default=0)
        ws.column_dimensions[column_cells[0].column_letter].width = max(min(longest + 3, 40), 8)


def _match_cells(tournament: Tournament, match: Match, lang: str) -> list:
    tbd = get_string("labels.tbd", lang)
    return [
        tournament.team_name(match.team_a_id) if match.team_a_id else tbd,
        tournament.team_name(match.team_b_id) if match.team_b_id else tbd,
        tournament.team_name(match.score.winner_id) if match.score.winner_id else "-",
        " ".join(str(s) for s in match.score.sets) or "-",
        get_string(f"status.{match.status.value}", lang),
    ]


def generate_tournament_excel(tournament: Tournament, lang: str = DEFAULT_LANGUAGE) -> bytes:
    """
    Build a workbook with one sheet per view of the tournament.

    Sheets: teams, group matches, standings (qualifiers highlighted when a
    knockout stage follows), knockout matches. Sheet titles and headers are
    translated.

    Returns: the .xlsx file as bytes.
    """
    label = lambda key: get_string(f"labels.{key}", lang)  # noqa: E731
    team_a, team_b = label("team") + " A", label("team") + " B"

    wb = Workbook()

    ws_teams = wb.active
    ws_teams.title = label("teams")
    _fill_sheet(
        ws_teams,
        ["#", label("team"), label("players")],
        [[i, team.name, " / ".join(team.players)] for i, team in enumerate(tournament.teams, 1)],
    )

    group_rows = [
        [group.name, match.round_number or ""] + _match_cells(tournament, match, lang)
        for group in tournament.groups
        for match in sorted(group.matches, key=lambda m: m.round_number or 0)
    ]
    _fill_sheet(
        wb.create_sheet(label("group_stage")),
        [label("group"), label("round"), team_a, team_b, label("winner"), label("score"), label("status")],
        group_rows,
    )

    standings_rows = [
        [
            group.name, s.position, tournament.team_name(s.team_id), s.points,
            s.played, s.won, s.lost, s.sets_won, s.sets_lost, s.games_won, s.games_lost,
        ]
        for group in tournament.groups
        for s in calculate_standings(group)
    ]
    qualified = tournament.config.advancement.teams_per_group
    knockout_follows = tournament.config.stages.knockout_stage
    _fill_sheet(
        wb.create_sheet(label("standings")),
        [
            label("group"), label("position"), label("team"), label("points"), label("played"),
            label("won"), label("lost"), label("sets") + "+", label("sets") + "-",
            label("games") + "+", label("games") + "-",
        ],
        standings_rows,
        highlight=lambda row: knockout_follows and row[1] <= qualified,
    )

    stage = tournament.knockout
    knockout_rows = [
        [round_display_name(stage.size >> round_index, lang), position]
        + _match_cells(tournament, match, lang)
        for round_index, round_slots in enumerate(stage.rounds)
        for position, match in enumerate(round_slots, 1)
        if match is not None
    ]
    _fill_sheet(
        wb.create_sheet(label("knockout_stage")),
        [label("round"), "#", team_a, team_b, label("winner"), label("score"), label("status")],
        knockout_rows,
    )

    # Title block above the team list
    ws_teams.insert_rows(1, 2)
    ws_teams["A1"] = tournament.config.name
    ws_teams["A1"].font = Font(bold=True, size=14)
    ws_teams["A2"] = datetime.now().strftime("%Y-%m-%d %H:%M")
    ws_teams["A2"].font = Font(size=9, color="999999")

    output = io.BytesIO()
    wb.save(output)
    return output.getvalue()
