"""Set clamping and match winner determination for padel scoring."""

from typing import Optional

from padelcup.models import Match, MatchScore, MatchStatus, ScoringRules, SetScore


def games_limit(opponent_games: int, games_per_set: int) -> int:
    """Return the most games a side can have in a set.

    A set is normally won at ``games_per_set`` games, but once the opponent
    reaches ``games_per_set - 1`` the set extends by one game (7-5, 7-6).

    Examples:
        >>> games_limit(4, 6)
        6
        >>> games_limit(5, 6)
        7
    """
    if opponent_games >= games_per_set - 1:
        return games_per_set + 1
    return games_per_set


def clamp_games(value: int, opponent_games: int, games_per_set: int) -> int:
    """Clamp a side's game count to ``[0, games_limit]``."""
    return max(0, min(games_limit(opponent_games, games_per_set), value))


def enter_games(set_score: SetScore, side: str, value: int, rules: ScoringRules) -> SetScore:
    """Return a copy of ``set_score`` with one side's games set to ``value``.

    Args:
        set_score: Current score of the set
        side: "A" or "B"
        value: Requested game count (clamped against the opponent's count)
        rules: Active scoring rules

    Returns:
        New SetScore
    """
    if side == "A":
        games = clamp_games(value, set_score.team_b, rules.games_per_set)
        return SetScore(team_a=games, team_b=set_score.team_b, tie_break=set_score.tie_break)
    if side == "B":
        games = clamp_games(value, set_score.team_a, rules.games_per_set)
        return SetScore(team_a=set_score.team_a, team_b=games, tie_break=set_score.tie_break)
    raise ValueError(f"side must be 'A' or 'B', got {side!r}")


def empty_sets(rules: ScoringRules) -> list[SetScore]:
    """Blank sets for every set a match can last."""
    return [SetScore() for _ in range(rules.max_sets)]


def played_sets(sets: list[SetScore]) -> list[SetScore]:
    """Drop sets where neither side has won a game."""
    return [s for s in sets if s.is_played]


def sets_won(sets: list[SetScore]) -> tuple[int, int]:
    """Count sets won by each side among played sets."""
    played = played_sets(sets)
    won_a = sum(1 for s in played if s.winner_side == "A")
    won_b = sum(1 for s in played if s.winner_side == "B")
    return won_a, won_b


def determine_winner(
    sets: list[SetScore],
    rules: ScoringRules,
    team_a_id: Optional[str],
    team_b_id: Optional[str],
) -> Optional[str]:
    """Return the id of the first side to win ``rules.sets_to_win`` sets.

    Never fails: an under-determined score simply has no winner yet.
    """
    won_a = 0
    won_b = 0
    for s in played_sets(sets):
        if s.winner_side == "A":
            won_a += 1
        elif s.winner_side == "B":
            won_b += 1

        if won_a >= rules.sets_to_win:
            return team_a_id
        if won_b >= rules.sets_to_win:
            return team_b_id
    return None


def status_for(sets: list[SetScore], winner_id: Optional[str]) -> MatchStatus:
    """Derive a match status from its score."""
    if winner_id is not None:
        return MatchStatus.COMPLETED
    if played_sets(sets):
        return MatchStatus.IN_PROGRESS
    return MatchStatus.SCHEDULED


def score_match(match: Match, sets: list[SetScore], rules: ScoringRules) -> Match:
    """Record a set sequence on a match and update its winner and status.

    Unplayed (all-zero) sets are discarded. Calling this again with the same
    sets leaves the match unchanged.

    Args:
        match: Match to update (modified in place)
        sets: Sets as entered, in order
        rules: Scoring rules of the stage the match belongs to

    Returns:
        The updated match
    """
    played = played_sets(sets)
    winner_id = determine_winner(played, rules, match.team_a_id, match.team_b_id)
    match.score = MatchScore(sets=played, winner_id=winner_id)
    match.status = status_for(played, winner_id)
    return match
