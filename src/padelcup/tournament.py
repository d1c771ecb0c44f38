"""Tournament creation and match result processing.

Every function here works on an in-memory Tournament and keeps no state
between calls; loading and saving is done by the caller (see storage).
"""

import copy
import random
from datetime import datetime
from typing import Optional

from padelcup.bracket import (
    advance_winner,
    build_bracket_direct,
    build_bracket_from_groups,
    check_result_change,
)
from padelcup.group_builder import create_groups
from padelcup.models import (
    Match,
    ScoringRules,
    SetScore,
    Team,
    Tournament,
    TournamentConfig,
    TournamentStatus,
    generate_id,
)
from padelcup.scoring import score_match


class MatchNotFoundError(LookupError):
    """Raised when a match id does not exist in a tournament."""

    pass


def create_tournament(
    config: TournamentConfig,
    teams: list[Team],
    random_seed: Optional[int] = None,
    group_count: Optional[int] = None,
    created_at: Optional[datetime] = None,
) -> Tournament:
    """Create a tournament and its initial schedule.

    - Group stage enabled: teams are shuffled and dealt into groups, each
      group gets its round-robin matches.
    - Knockout only: the shuffled teams go straight into a bracket.
    - Mixed: the bracket stays empty until start_knockout_stage.

    Args:
        config: Tournament configuration
        teams: Registered teams (at least 2)
        random_seed: Optional random seed for a deterministic draw
        group_count: Number of groups (default: based on team count)
        created_at: Creation time (default: now)

    Returns:
        New active Tournament
    """
    stages = config.stages
    if not stages.group_stage and not stages.knockout_stage:
        raise ValueError("At least one stage (group or knockout) must be enabled")

    rng = random.Random(random_seed)
    shuffled = list(teams)
    rng.shuffle(shuffled)
    team_ids = [t.id for t in shuffled]

    tournament = Tournament(
        id=generate_id(),
        config=config,
        teams=list(teams),
        status=TournamentStatus.ACTIVE,
        created_at=created_at or datetime.utcnow(),
    )

    if stages.group_stage:
        tournament.groups = create_groups(team_ids, group_count)
    elif stages.knockout_stage:
        tournament.knockout = build_bracket_direct(team_ids)

    return tournament


def _locate(tournament: Tournament, match_id: str):
    """Return ("group", group, index) or ("knockout", round, position)."""
    for group in tournament.groups:
        for idx, match in enumerate(group.matches):
            if match.id == match_id:
                return "group", group, idx

    location = tournament.knockout.locate(match_id)
    if location is not None:
        return ("knockout",) + location
    return None


def find_match(tournament: Tournament, match_id: str) -> Optional[Match]:
    """Return the match with the given id from any stage, None if absent."""
    location = _locate(tournament, match_id)
    if location is None:
        return None
    if location[0] == "group":
        _, group, idx = location
        return group.matches[idx]
    _, round_index, position = location
    return tournament.knockout.rounds[round_index][position]


def rules_for_match(tournament: Tournament, match_id: str) -> ScoringRules:
    """Scoring rules of the stage a match belongs to."""
    location = _locate(tournament, match_id)
    if location is None:
        raise MatchNotFoundError(f"Match not found: {match_id}")
    if location[0] == "group":
        return tournament.config.scoring.group
    return tournament.config.scoring.knockout


def is_group_stage_complete(tournament: Tournament) -> bool:
    """True when every group match has a winner."""
    return bool(tournament.groups) and all(g.is_complete for g in tournament.groups)


def refresh_status(tournament: Tournament) -> TournamentStatus:
    """Mark the tournament completed once its last stage is finished."""
    stages = tournament.config.stages
    if stages.knockout_stage:
        finished = tournament.knockout.is_complete
    else:
        finished = is_group_stage_complete(tournament)

    if finished:
        tournament.status = TournamentStatus.COMPLETED
    return tournament.status


def update_match(tournament: Tournament, match: Match) -> bool:
    """Replace a match in the tournament and process the consequences.

    The match is located by id across all groups and the knockout stage.
    A completed knockout match advances its winner to the next round.
    An unknown id is ignored. A knockout result whose next round match has
    already started with the old winner is refused before anything changes.

    Args:
        tournament: Tournament to update (modified in place)
        match: New version of the match

    Returns:
        True if the match was found and replaced

    Raises:
        ValueError: If the change would rewrite a next round match in play
    """
    location = _locate(tournament, match.id)
    if location is None:
        return False

    if location[0] == "group":
        _, group, idx = location
        group.matches[idx] = match
    else:
        _, round_index, position = location
        check_result_change(tournament.knockout, match)
        tournament.knockout.rounds[round_index][position] = match
        if match.is_completed:
            advance_winner(tournament.knockout, match)

    refresh_status(tournament)
    return True


def record_result(tournament: Tournament, match_id: str, sets: list[SetScore]) -> Match:
    """Score a match with its stage rules and apply it to the tournament.

    The stored match is only replaced once the result is accepted.

    Args:
        tournament: Tournament to update (modified in place)
        match_id: Id of the match being scored
        sets: Sets as entered (unplayed sets are discarded)

    Returns:
        The scored match, now part of the tournament

    Raises:
        MatchNotFoundError: If no match has this id
        ValueError: If the next round match has already started with the
            previous winner
    """
    current = find_match(tournament, match_id)
    if current is None:
        raise MatchNotFoundError(f"Match not found: {match_id}")

    match = score_match(copy.deepcopy(current), sets, rules_for_match(tournament, match_id))
    update_match(tournament, match)
    return match


def start_knockout_stage(tournament: Tournament) -> Tournament:
    """Seed the knockout stage from the group qualifiers (mixed tournaments).

    Raises:
        ValueError: If the tournament has no mixed format, the group stage
            is not finished, or the bracket already exists
    """
    if not tournament.config.stages.is_mixed:
        raise ValueError("Knockout stage can only be started in a group + knockout tournament")
    if not tournament.knockout.is_empty:
        raise ValueError("Knockout stage has already been created")
    if not is_group_stage_complete(tournament):
        raise ValueError("All group matches must be completed before starting the knockout stage")

    tournament.knockout = build_bracket_from_groups(
        tournament.groups, tournament.config.advancement.teams_per_group
    )
    refresh_status(tournament)
    return tournament
