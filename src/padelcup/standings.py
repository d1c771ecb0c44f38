"""Standings calculator with tie-breaking rules."""

from padelcup.models import Group, TeamStats
from padelcup.scoring import played_sets

POINTS_PER_WIN = 2


def standings_sort_key(stats: TeamStats) -> tuple[int, int, int]:
    """Sort key for the tie-break chain.

    1. Points (descending)
    2. Set difference (descending)
    3. Game difference (descending)
    """
    return (-stats.points, -stats.set_difference, -stats.game_difference)


def calculate_standings(group: Group) -> list[TeamStats]:
    """Calculate standings for a group based on its match results.

    Scoring:
    - Win: 2 tournament points
    - Loss: 0 tournament points

    Only completed matches with a winner count; anything else gets no
    partial credit. Teams still level after the three tie-break criteria
    keep their order in ``group.team_ids``.

    Args:
        group: Group with its matches

    Returns:
        List of TeamStats sorted by position (1 = best)
    """
    stats = {team_id: TeamStats(team_id=team_id) for team_id in group.team_ids}

    for match in group.matches:
        if not match.is_completed or match.score.winner_id is None:
            continue

        team_a = stats.get(match.team_a_id)
        team_b = stats.get(match.team_b_id)
        if team_a is None or team_b is None:
            continue

        winner, loser = (team_a, team_b) if match.score.winner_id == match.team_a_id else (team_b, team_a)

        team_a.played += 1
        team_b.played += 1
        winner.won += 1
        winner.points += POINTS_PER_WIN
        loser.lost += 1

        for s in played_sets(match.score.sets):
            if s.team_a > s.team_b:
                team_a.sets_won += 1
                team_b.sets_lost += 1
            elif s.team_b > s.team_a:
                team_b.sets_won += 1
                team_a.sets_lost += 1

            team_a.games_won += s.team_a
            team_a.games_lost += s.team_b
            team_b.games_won += s.team_b
            team_b.games_lost += s.team_a

    # sorted() is stable: residual ties keep group order
    standings = sorted(stats.values(), key=standings_sort_key)

    for position, standing in enumerate(standings, start=1):
        standing.position = position

    return standings


def group_qualifiers(group: Group, count: int) -> list[str]:
    """Return the ids of the top ``count`` teams of a group (best first)."""
    return [s.team_id for s in calculate_standings(group)[:count]]
