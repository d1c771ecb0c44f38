"""Group builder with circle method fixtures."""

from typing import Optional

from padelcup.models import Group, Match, MatchStatus, generate_id


def calculate_group_count(num_teams: int) -> int:
    """Number of groups used for a team count.

    Up to five teams play a single group; larger fields split in two.

    Examples:
        >>> calculate_group_count(5)
        1
        >>> calculate_group_count(6)
        2
    """
    return 2 if num_teams > 5 else 1


def distribute_teams(team_ids: list[str], num_groups: int) -> list[list[str]]:
    """Deal teams into groups one at a time.

    Team ``i`` goes to group ``i % num_groups``:
    - Group A: 1, 3, 5
    - Group B: 2, 4, 6

    Args:
        team_ids: Team ids in dealing order
        num_groups: Number of groups to create

    Returns:
        List of lists, each containing the team ids of one group
    """
    if num_groups < 1:
        raise ValueError(f"Number of groups must be at least 1, got {num_groups}")

    buckets: list[list[str]] = [[] for _ in range(num_groups)]
    for idx, team_id in enumerate(team_ids):
        buckets[idx % num_groups].append(team_id)
    return buckets


def generate_round_robin_matches(team_ids: list[str]) -> list[Match]:
    """Generate every pairing of a group with the circle method.

    An odd team count gets a bye slot (None) so every round has pairs.
    Slot 0 stays fixed and the last slot moves to position 1 after each
    round, which over ``m - 1`` rounds pairs every two teams exactly once.

    For 3 teams (padded to 4):
        Round 1: (T2, T3)     T1 has the bye
        Round 2: (T1, T3)
        Round 3: (T1, T2)

    Args:
        team_ids: Team ids of one group

    Returns:
        List of Match objects; ``n`` teams give ``n * (n - 1) / 2`` matches
    """
    slots: list[Optional[str]] = list(team_ids)
    if len(slots) < 2:
        return []

    if len(slots) % 2 != 0:
        slots.append(None)

    num_rounds = len(slots) - 1
    half = len(slots) // 2
    matches = []

    for round_idx in range(num_rounds):
        for i in range(half):
            team_a = slots[i]
            team_b = slots[len(slots) - 1 - i]

            if team_a is None or team_b is None:
                continue

            matches.append(
                Match(
                    id=generate_id(),
                    team_a_id=team_a,
                    team_b_id=team_b,
                    status=MatchStatus.SCHEDULED,
                    round_number=round_idx + 1,
                )
            )

        slots.insert(1, slots.pop())

    return matches


def group_name(index: int) -> str:
    """Display name of the group at ``index`` (0 -> "Group A")."""
    return f"Group {chr(ord('A') + index)}"


def create_groups(team_ids: list[str], num_groups: Optional[int] = None) -> list[Group]:
    """Split teams into groups and schedule each group's matches.

    Args:
        team_ids: Team ids in dealing order (already shuffled by the caller)
        num_groups: Number of groups (default: calculate_group_count)

    Returns:
        List of Group objects with their round-robin matches
    """
    if not team_ids:
        raise ValueError("Cannot create groups with empty team list")

    if num_groups is None:
        num_groups = calculate_group_count(len(team_ids))

    groups = []
    for idx, bucket in enumerate(distribute_teams(team_ids, num_groups)):
        groups.append(
            Group(
                id=generate_id(),
                name=group_name(idx),
                team_ids=bucket,
                matches=generate_round_robin_matches(bucket),
            )
        )
    return groups
