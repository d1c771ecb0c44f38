"""Knockout bracket generator and winner advancement."""

import math
from typing import Optional

from padelcup.i18n import DEFAULT_LANGUAGE, get_string
from padelcup.models import Group, KnockoutStage, Match, MatchStatus, generate_id
from padelcup.standings import group_qualifiers

ROUND_LABELS = {
    2: "final",
    4: "semiFinal",
    8: "quarterFinal",
    16: "roundOf16",
}


def next_power_of_2(n: int) -> int:
    """Return the next power of 2 >= n.

    Examples:
        >>> next_power_of_2(5)
        8
        >>> next_power_of_2(8)
        8
        >>> next_power_of_2(15)
        16
    """
    if n <= 0:
        return 1
    return 2 ** math.ceil(math.log2(n))


def round_label(slot_count: int) -> str:
    """Label for a round with ``slot_count`` team slots.

    Examples:
        >>> round_label(4)
        'semiFinal'
        >>> round_label(64)
        'roundOf64'
    """
    return ROUND_LABELS.get(slot_count, f"roundOf{slot_count}")


def round_key(stage: KnockoutStage, round_index: int) -> str:
    """Label of a round of ``stage`` (round 0 is the first round)."""
    return round_label(stage.size >> round_index)


def round_display_name(slot_count: int, lang: str = DEFAULT_LANGUAGE) -> str:
    """Translated name of a round with ``slot_count`` team slots."""
    label = round_label(slot_count)
    if slot_count in ROUND_LABELS:
        return get_string(f"rounds.{label}", lang)
    return get_string("rounds.roundOf", lang, size=slot_count)


# ============================================================================
# Seeding
# ============================================================================


def build_knockout_stage(entries: list[Optional[str]]) -> KnockoutStage:
    """Build a bracket whose first round pairs consecutive entries.

    Entries are padded with empty slots up to a power of 2. Slot pairs
    (1,2), (3,4), ... become first round matches; a team whose partner slot
    is empty has a BYE and is moved straight into the next round.

    Args:
        entries: Team ids in slot order (None = empty slot)

    Returns:
        KnockoutStage with the first round (and any BYE placements) filled
    """
    if sum(1 for e in entries if e is not None) < 2:
        raise ValueError("Cannot build bracket with fewer than 2 teams")

    size = next_power_of_2(len(entries))
    padded = list(entries) + [None] * (size - len(entries))

    stage = KnockoutStage(size=size, entries=padded)
    round_size = size // 2
    while round_size >= 1:
        stage.rounds.append([None] * round_size)
        round_size //= 2

    byes = []
    for position in range(size // 2):
        team_a = padded[2 * position]
        team_b = padded[2 * position + 1]

        if team_a is not None and team_b is not None:
            stage.rounds[0][position] = Match(
                id=generate_id(),
                team_a_id=team_a,
                team_b_id=team_b,
                status=MatchStatus.SCHEDULED,
                round_index=0,
            )
        elif team_a is not None or team_b is not None:
            byes.append((position, team_a if team_a is not None else team_b))

    for position, team_id in byes:
        _place_team(stage, 1, position // 2, position % 2, team_id)

    return stage


def build_bracket_direct(team_ids: list[str]) -> KnockoutStage:
    """Build a knockout-only bracket: (t1 v t2), (t3 v t4), ...

    A trailing unpaired team gets a BYE.
    """
    return build_knockout_stage(list(team_ids))


def seed_qualifiers(qualifiers: list[list[str]], teams_per_group: int) -> list[Optional[str]]:
    """Order group qualifiers into bracket slots.

    Rules, in priority order:
    - 2 groups x 2: A1 v B2, B1 v A2 (no first round rematch)
    - 1 group: 1 v n, 2 v n-1, ... (odd count: the middle team has a BYE)
    - 4 groups x 2: A1 v B2, C1 v D2, B1 v A2, D1 v C2
    - anything else: all qualifiers in group order, paired consecutively

    Args:
        qualifiers: Per group, qualified team ids (index 0 = group winner)
        teams_per_group: Configured number of qualifiers per group

    Returns:
        Team ids in slot order
    """
    full_pairs = teams_per_group == 2 and all(len(q) == 2 for q in qualifiers)

    if len(qualifiers) == 2 and full_pairs:
        a, b = qualifiers
        return [a[0], b[1], b[0], a[1]]

    if len(qualifiers) == 1:
        ranked = qualifiers[0]
        count = len(ranked)
        entries: list[Optional[str]] = []
        for i in range(count // 2):
            entries.extend([ranked[i], ranked[count - 1 - i]])
        if count % 2 == 1:
            entries.extend([ranked[count // 2], None])
        return entries

    if len(qualifiers) == 4 and full_pairs:
        a, b, c, d = qualifiers
        return [a[0], b[1], c[0], d[1], b[0], a[1], d[0], c[1]]

    return [team_id for q in qualifiers for team_id in q]


def build_bracket_from_groups(groups: list[Group], teams_per_group: int) -> KnockoutStage:
    """Build the knockout stage from the top teams of each group.

    Args:
        groups: Groups in display order, all matches played
        teams_per_group: Qualifiers taken from each group

    Returns:
        KnockoutStage seeded with the qualifiers
    """
    if not groups:
        raise ValueError("Cannot build bracket with no groups")

    qualifiers = [group_qualifiers(group, teams_per_group) for group in groups]
    return build_knockout_stage(seed_qualifiers(qualifiers, teams_per_group))


# ============================================================================
# Advancement
# ============================================================================


def _side_is_empty(stage: KnockoutStage, round_index: int, position: int, side: int) -> bool:
    """True if no seeded team can ever reach one side of a match slot.

    The match at ``round_index``/``position`` covers ``2 ** (round_index + 1)``
    first round entries; side 0 (team A) is the first half of them.
    """
    span = 2 ** round_index
    start = position * 2 * span + side * span
    return all(e is None for e in stage.entries[start:start + span])


def _target_slot(
    stage: KnockoutStage, round_index: int, position: int, side: int
) -> Optional[tuple[int, int, int]]:
    """Resolve where a team entering a slot ends up after walkovers.

    While the other side of the match at ``round_index``/``position`` covers
    only empty entries, the team moves on to the following round.

    Returns:
        (round_index, position, side) of the slot, None past the final
    """
    while round_index < len(stage.rounds):
        if not _side_is_empty(stage, round_index, position, 1 - side):
            return round_index, position, side
        round_index, position, side = round_index + 1, position // 2, position % 2
    return None


def _place_team(
    stage: KnockoutStage, round_index: int, position: int, side: int, team_id: str
) -> Optional[Match]:
    """Put a team into a slot of a round, creating the match if needed.

    Returns:
        The match the team was placed in, None if the team won the bracket
    """
    target = _target_slot(stage, round_index, position, side)
    if target is None:
        return None

    round_index, position, side = target
    match = stage.rounds[round_index][position]
    if match is None:
        match = Match(
            id=generate_id(),
            team_a_id=None,
            team_b_id=None,
            status=MatchStatus.SCHEDULED,
            round_index=round_index,
        )
        stage.rounds[round_index][position] = match

    if side == 0:
        match.team_a_id = team_id
    else:
        match.team_b_id = team_id
    return match


def check_result_change(stage: KnockoutStage, match: Match) -> None:
    """Refuse a knockout result that would rewrite a match already under way.

    Once the next round match fed by ``match`` has a score, the team in the
    fed slot is fixed: the new result must keep that team as the winner.

    Raises:
        ValueError: If the new result removes or replaces that team
    """
    location = stage.locate(match.id)
    if location is None:
        return

    round_index, position = location
    target = _target_slot(stage, round_index + 1, position // 2, position % 2)
    if target is None:
        return

    next_round, next_position, side = target
    successor = stage.rounds[next_round][next_position]
    if successor is None or successor.status == MatchStatus.SCHEDULED:
        return

    placed = successor.team_a_id if side == 0 else successor.team_b_id
    if placed is not None and placed != match.score.winner_id:
        raise ValueError(
            f"Cannot change the winner of match {match.id}: "
            f"the next round match {successor.id} has already started"
        )


def advance_winner(stage: KnockoutStage, match: Match) -> Optional[Match]:
    """Move the winner of a completed knockout match into the next round.

    Match ``p`` of a round feeds match ``p // 2`` of the next round, as team A
    when ``p`` is even and team B when odd. Placing the same winner twice
    changes nothing, so re-saving a score is safe.

    Args:
        stage: Knockout stage containing the match (modified in place)
        match: The completed match

    Returns:
        The next round match that received the winner, None if the match is
        not in the bracket, has no winner, or was the final

    Raises:
        ValueError: If the next round match has started with another team
    """
    winner_id = match.score.winner_id
    if not match.is_completed or winner_id is None:
        return None

    location = stage.locate(match.id)
    if location is None:
        return None

    check_result_change(stage, match)
    round_index, position = location
    return _place_team(stage, round_index + 1, position // 2, position % 2, winner_id)
