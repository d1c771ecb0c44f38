"""Validation rules for user input.

The tournament engine assumes valid input; these checks are run by the
callers (CLI, importers) before handing data to it.
"""

import re

from padelcup.models import Match, ScoringRules, SetScore, Team, TieBreak
from padelcup.scoring import games_limit

SET_PATTERN = re.compile(r"^\s*(\d+)\s*-\s*(\d+)\s*(?:\(\s*(\d+)\s*-\s*(\d+)\s*\))?\s*$")


class ValidationError(Exception):
    """Raised when validation fails."""

    pass


def validate_teams(teams: list[Team]) -> tuple[bool, str]:
    """Validate the team list of a new tournament.

    Returns:
        Tuple of (is_valid, error_message)
    """
    if len(teams) < 2:
        return False, f"A tournament needs at least 2 teams (got {len(teams)})"

    seen = set()
    for team in teams:
        if team.id in seen:
            return False, f"Duplicate team id: {team.id}"
        seen.add(team.id)

    return True, ""


def validate_set_score(team_a: int, team_b: int, rules: ScoringRules) -> tuple[bool, str]:
    """Validate the games of a single set.

    Rules:
    - Game counts cannot be negative
    - A side can reach ``games_per_set`` games, or one more once the
      opponent has ``games_per_set - 1`` (7-5, 7-6)

    Examples:
        >>> validate_set_score(6, 4, ScoringRules())
        (True, '')
        >>> validate_set_score(7, 5, ScoringRules())
        (True, '')
        >>> validate_set_score(7, 4, ScoringRules())
        (False, 'Team A cannot have more than 6 games when the opponent has 4')
    """
    if team_a < 0 or team_b < 0:
        return False, "Game counts cannot be negative"

    limit_a = games_limit(team_b, rules.games_per_set)
    if team_a > limit_a:
        return False, f"Team A cannot have more than {limit_a} games when the opponent has {team_b}"

    limit_b = games_limit(team_a, rules.games_per_set)
    if team_b > limit_b:
        return False, f"Team B cannot have more than {limit_b} games when the opponent has {team_a}"

    return True, ""


def validate_match_sets(sets: list[SetScore], rules: ScoringRules) -> tuple[bool, str]:
    """Validate all sets entered for a match.

    Returns:
        Tuple of (is_valid, error_message)
    """
    if len(sets) > rules.max_sets:
        return False, f"Too many sets (maximum {rules.max_sets}, entered {len(sets)})"

    for idx, s in enumerate(sets, start=1):
        is_valid, error_msg = validate_set_score(s.team_a, s.team_b, rules)
        if not is_valid:
            return False, f"Set {idx}: {error_msg}"

    return True, ""


def validate_match_ready(match: Match) -> tuple[bool, str]:
    """A match can only be scored once both teams are known."""
    if match.team_a_id is None or match.team_b_id is None:
        return False, "Match is still waiting for a qualifier"
    return True, ""


def parse_sets(text: str) -> list[SetScore]:
    """Parse a score string such as ``"6-4, 3-6, 7-6(7-5)"``.

    Raises:
        ValidationError: If a set is not written as ``games-games``
    """
    sets = []
    for idx, chunk in enumerate(part for part in text.split(",") if part.strip()):
        found = SET_PATTERN.match(chunk)
        if not found:
            raise ValidationError(f"Set {idx + 1}: expected 'games-games', got '{chunk.strip()}'")
        a, b, tb_a, tb_b = found.groups()
        tie_break = None
        if tb_a is not None:
            tie_break = TieBreak(int(tb_a), int(tb_b))
        sets.append(SetScore(team_a=int(a), team_b=int(b), tie_break=tie_break))
    return sets
