"""Data models for padelcup.

Domain model hierarchy:
- Tournament contains Teams, Groups (round robin) and a KnockoutStage
- Group contains team ids and Matches
- KnockoutStage contains rounds of Matches
- Match contains a MatchScore
- MatchScore contains Sets (games per side)
"""

import uuid
from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from typing import Iterator, Optional


def generate_id() -> str:
    """Return a new unique identifier."""
    return str(uuid.uuid4())


class MatchStatus(str, Enum):
    """Match status."""

    SCHEDULED = "scheduled"  # No games entered yet
    IN_PROGRESS = "in_progress"  # At least one set has games
    COMPLETED = "completed"  # A winner is determined


class TournamentStatus(str, Enum):
    """Tournament status."""

    DRAFT = "draft"
    ACTIVE = "active"
    COMPLETED = "completed"


# ============================================================================
# Core Domain Models
# ============================================================================


@dataclass(frozen=True)
class Team:
    """A padel team (a pair of players)."""

    id: str
    name: str
    players: tuple[str, str]

    def __str__(self) -> str:
        """String representation."""
        return f"{self.name} ({self.players[0]} / {self.players[1]})"


@dataclass(frozen=True)
class ScoringRules:
    """Scoring rules for one stage of a tournament.

    Every tournament builds its own instances; they are immutable so a
    stage's rules can never be changed through another stage or tournament.

    ``tie_break_at``, ``deciding_point`` and ``super_tie_break_in_final_set``
    are recorded for display and export only: set limits and the match winner
    depend on ``games_per_set`` and ``sets_to_win`` alone.
    """

    games_per_set: int = 6
    sets_to_win: int = 2
    tie_break_at: int = 6
    deciding_point: bool = False
    super_tie_break_in_final_set: bool = False

    @property
    def max_sets(self) -> int:
        """Maximum number of sets a match can last."""
        return self.sets_to_win * 2 - 1


@dataclass
class TieBreak:
    """Tie-break points played at the end of a set."""

    team_a: int
    team_b: int


@dataclass
class SetScore:
    """Games won by each side in a single set."""

    team_a: int = 0
    team_b: int = 0
    tie_break: Optional[TieBreak] = None

    @property
    def is_played(self) -> bool:
        """A set counts only once one side has won a game."""
        return self.team_a > 0 or self.team_b > 0

    @property
    def winner_side(self) -> Optional[str]:
        """Return "A" or "B" for the side with more games, None if tied."""
        if self.team_a > self.team_b:
            return "A"
        elif self.team_b > self.team_a:
            return "B"
        return None

    def __str__(self) -> str:
        """String representation."""
        if self.tie_break:
            return f"{self.team_a}-{self.team_b}({self.tie_break.team_a}-{self.tie_break.team_b})"
        return f"{self.team_a}-{self.team_b}"


@dataclass
class MatchScore:
    """Played sets of a match plus the winner once one is determined."""

    sets: list[SetScore] = field(default_factory=list)
    winner_id: Optional[str] = None


@dataclass
class Match:
    """A match between two teams.

    Either team slot can be None while the team that fills it is still
    playing an earlier knockout round.
    """

    id: str
    team_a_id: Optional[str]
    team_b_id: Optional[str]
    score: MatchScore = field(default_factory=MatchScore)
    status: MatchStatus = MatchStatus.SCHEDULED
    round_index: Optional[int] = None  # Knockout round (0 = first round)
    round_number: Optional[int] = None  # Group round, display only
    created_at: datetime = field(default_factory=datetime.utcnow)

    @property
    def team_a_sets_won(self) -> int:
        """Count sets won by team A."""
        return sum(1 for s in self.score.sets if s.winner_side == "A")

    @property
    def team_b_sets_won(self) -> int:
        """Count sets won by team B."""
        return sum(1 for s in self.score.sets if s.winner_side == "B")

    @property
    def is_completed(self) -> bool:
        """Check if match is finished."""
        return self.status == MatchStatus.COMPLETED

    @property
    def loser_id(self) -> Optional[str]:
        """The team that lost a completed match."""
        if self.score.winner_id is None:
            return None
        if self.score.winner_id == self.team_a_id:
            return self.team_b_id
        return self.team_a_id

    def __str__(self) -> str:
        """String representation."""
        sets = " ".join(str(s) for s in self.score.sets) if self.score.sets else "vs"
        return f"{self.team_a_id or 'TBD'} {sets} {self.team_b_id or 'TBD'}"


# ============================================================================
# Tournament Structure Models
# ============================================================================


@dataclass
class Group:
    """A round-robin group."""

    id: str
    name: str  # "Group A", "Group B", etc.
    team_ids: list[str] = field(default_factory=list)
    matches: list[Match] = field(default_factory=list)

    @property
    def size(self) -> int:
        """Number of teams in group."""
        return len(self.team_ids)

    @property
    def is_complete(self) -> bool:
        """All group matches have a winner."""
        return all(m.is_completed for m in self.matches)

    def __str__(self) -> str:
        """String representation."""
        return f"{self.name} ({self.size} teams)"


@dataclass
class KnockoutStage:
    """Single elimination bracket stored as an arena of rounds.

    ``entries`` holds the seeded first round slots (None = empty slot).
    ``rounds[r]`` holds ``size >> (r + 1)`` match slots; a slot is None until
    its match is created. A match's position in its round list is its
    ordinal: the match at position ``p`` of round ``r`` feeds position
    ``p // 2`` of round ``r + 1``.
    """

    size: int = 0
    entries: list[Optional[str]] = field(default_factory=list)
    rounds: list[list[Optional[Match]]] = field(default_factory=list)

    @property
    def is_empty(self) -> bool:
        """No bracket has been built yet."""
        return self.size == 0

    @property
    def matches(self) -> list[Match]:
        """All created matches, round by round."""
        return [m for round_slots in self.rounds for m in round_slots if m is not None]

    @property
    def final(self) -> Optional[Match]:
        """The final match, once created."""
        if not self.rounds:
            return None
        return self.rounds[-1][0]

    @property
    def is_complete(self) -> bool:
        """The final has been played."""
        final = self.final
        return final is not None and final.is_completed

    def locate(self, match_id: str) -> Optional[tuple[int, int]]:
        """Return (round_index, position) of a match, None if absent."""
        for round_index, round_slots in enumerate(self.rounds):
            for position, match in enumerate(round_slots):
                if match is not None and match.id == match_id:
                    return round_index, position
        return None


@dataclass
class TeamStats:
    """Standing for a team within its group.

    Always recomputed from the group's matches.
    """

    team_id: str
    played: int = 0
    won: int = 0
    lost: int = 0
    sets_won: int = 0
    sets_lost: int = 0
    games_won: int = 0
    games_lost: int = 0
    # 2 per win
    points: int = 0
    position: Optional[int] = None

    @property
    def set_difference(self) -> int:
        return self.sets_won - self.sets_lost

    @property
    def game_difference(self) -> int:
        return self.games_won - self.games_lost

    def __str__(self) -> str:
        """String representation."""
        pos = f"#{self.position}" if self.position else "unranked"
        return f"{pos} {self.team_id}: {self.points}pts {self.won}W-{self.lost}L"


# ============================================================================
# Configuration Models
# ============================================================================


@dataclass
class StageSettings:
    """Which stages the tournament plays."""

    group_stage: bool = True
    knockout_stage: bool = True

    @property
    def is_mixed(self) -> bool:
        return self.group_stage and self.knockout_stage


@dataclass
class StageScoring:
    """Independent scoring rules for each stage."""

    group: ScoringRules = field(default_factory=ScoringRules)
    knockout: ScoringRules = field(default_factory=ScoringRules)


@dataclass
class AdvancementSettings:
    """How teams move from the group stage to the knockout stage."""

    teams_per_group: int = 2


@dataclass
class TournamentConfig:
    """Configuration supplied when a tournament is created."""

    name: str
    stages: StageSettings = field(default_factory=StageSettings)
    scoring: StageScoring = field(default_factory=StageScoring)
    advancement: AdvancementSettings = field(default_factory=AdvancementSettings)


@dataclass
class Tournament:
    """The aggregate read and written by every tournament operation."""

    id: str
    config: TournamentConfig
    teams: list[Team] = field(default_factory=list)
    groups: list[Group] = field(default_factory=list)
    knockout: KnockoutStage = field(default_factory=KnockoutStage)
    status: TournamentStatus = TournamentStatus.DRAFT
    created_at: datetime = field(default_factory=datetime.utcnow)

    def team_by_id(self, team_id: Optional[str]) -> Optional[Team]:
        """Return the team with the given id, None if absent."""
        for team in self.teams:
            if team.id == team_id:
                return team
        return None

    def team_name(self, team_id: Optional[str]) -> str:
        """Display name of a team slot ("TBD" while awaiting a qualifier)."""
        team = self.team_by_id(team_id)
        return team.name if team else "TBD"

    def iter_group_matches(self) -> Iterator[Match]:
        for group in self.groups:
            yield from group.matches

    def __str__(self) -> str:
        """String representation."""
        return f"{self.config.name} [{self.status.value}] ({len(self.teams)} teams)"
