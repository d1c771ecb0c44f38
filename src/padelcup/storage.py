"""SQLite storage layer for padelcup.

Provides the ORM model and repository used to persist tournaments. Each
tournament is stored as one JSON document (see io_json); the tournament
functions load it, change it in memory and save it back.
"""

from datetime import datetime
from pathlib import Path
from typing import Optional

from sqlalchemy import Boolean, Column, DateTime, Integer, String, Text, create_engine
from sqlalchemy.orm import declarative_base, sessionmaker
from sqlalchemy.orm.exc import StaleDataError
from sqlalchemy.pool import NullPool

from padelcup.io_json import dumps_tournament, loads_tournament
from padelcup.models import Match, Tournament
from padelcup.tournament import update_match

Base = declarative_base()

# Attempts made by update_match before giving up on a contended tournament
MAX_UPDATE_ATTEMPTS = 3


class ConcurrentUpdateError(Exception):
    """A tournament kept changing underneath update_match."""


# ============================================================================
# ORM Models
# ============================================================================


class TournamentORM(Base):
    """Tournament table.

    The full aggregate (teams, groups, bracket) lives in ``document``;
    name and status are copied out for listing. Every write bumps
    ``version`` and only succeeds if the row still has the version that was
    read, so a stale document is never written back.
    """

    __tablename__ = "tournaments"

    id = Column(String(36), primary_key=True)
    name = Column(String(200), nullable=False)
    status = Column(String(20), nullable=False, default="active")  # draft, active, completed
    is_current = Column(Boolean, nullable=False, default=False)  # Only one tournament can be current
    document = Column(Text, nullable=False)
    created_at = Column(DateTime, default=datetime.utcnow)
    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)
    version = Column(Integer, nullable=False)

    __mapper_args__ = {"version_id_col": version}


# ============================================================================
# Database Manager
# ============================================================================


class DatabaseManager:
    """Owns the SQLite engine and hands out sessions."""

    def __init__(self, db_path: str = ".padelcup/padelcup.sqlite"):
        """Initialize database manager.

        Args:
            db_path: Path to SQLite database file
        """
        self.db_path = Path(db_path)
        self.db_path.parent.mkdir(parents=True, exist_ok=True)

        # Use NullPool for SQLite to avoid connection pool issues
        self.engine = create_engine(
            f"sqlite:///{self.db_path}",
            echo=False,
            poolclass=NullPool,
            connect_args={"check_same_thread": False}
        )
        self.SessionLocal = sessionmaker(bind=self.engine)

    def create_tables(self):
        """Create the tournaments table if it does not exist."""
        Base.metadata.create_all(self.engine)

    def drop_tables(self):
        """Drop the tournaments table and every stored tournament."""
        Base.metadata.drop_all(self.engine)

    def get_session(self):
        """Open a session; callers close it."""
        return self.SessionLocal()


# ============================================================================
# Repository
# ============================================================================


class TournamentRepository:
    """Load and store Tournament aggregates."""

    def __init__(self, session):
        self.session = session

    def _get_orm(self, tournament_id: str) -> Optional[TournamentORM]:
        return self.session.query(TournamentORM).filter(TournamentORM.id == tournament_id).first()

    def load(self, tournament_id: str) -> Optional[Tournament]:
        """Load a tournament by ID.

        Returns:
            Tournament if found, None otherwise
        """
        tournament_orm = self._get_orm(tournament_id)
        if tournament_orm is None:
            return None
        return loads_tournament(tournament_orm.document)

    def _write(self, tournament: Tournament, tournament_orm: Optional[TournamentORM]) -> TournamentORM:
        if tournament_orm is None:
            tournament_orm = TournamentORM(id=tournament.id, created_at=tournament.created_at)
            self.session.add(tournament_orm)

        tournament_orm.name = tournament.config.name
        tournament_orm.status = tournament.status.value
        tournament_orm.document = dumps_tournament(tournament)
        return tournament_orm

    def save(self, tournament: Tournament) -> TournamentORM:
        """Insert or replace a tournament.

        Args:
            tournament: Tournament domain model

        Returns:
            Stored TournamentORM instance
        """
        tournament_orm = self._write(tournament, self._get_orm(tournament.id))
        self.session.commit()
        return tournament_orm

    def get_all(self) -> list[Tournament]:
        """Every stored tournament, newest first."""
        rows = self.session.query(TournamentORM).order_by(TournamentORM.created_at.desc()).all()
        return [loads_tournament(row.document) for row in rows]

    def delete(self, tournament_id: str) -> bool:
        """Delete a tournament."""
        tournament_orm = self._get_orm(tournament_id)
        if tournament_orm:
            self.session.delete(tournament_orm)
            self.session.commit()
            return True
        return False

    def set_current(self, tournament_id: str) -> bool:
        """Mark one tournament as current and clear the flag on the others."""
        self.session.query(TournamentORM).update({"is_current": False})
        result = self.session.query(TournamentORM).filter(
            TournamentORM.id == tournament_id
        ).update({"is_current": True})
        self.session.commit()
        return result > 0

    def get_current(self) -> Optional[Tournament]:
        """Get the current tournament."""
        tournament_orm = self.session.query(TournamentORM).filter(
            TournamentORM.is_current == True  # noqa: E712
        ).first()
        if tournament_orm is None:
            return None
        return loads_tournament(tournament_orm.document)

    def update_match(self, tournament_id: str, match: Match) -> bool:
        """Replace one match of a stored tournament and save the result.

        The tournament is loaded, updated (including knockout advancement)
        and written back with a conditional UPDATE on ``version``. If another
        session saved the tournament in between, the write matches no row,
        the transaction is rolled back and the whole step runs again on the
        fresh document, so two results of the same round cannot overwrite
        each other's bracket changes.

        Args:
            tournament_id: Tournament the match belongs to
            match: New version of the match

        Returns:
            True if the tournament and match were found

        Raises:
            ValueError: If the tournament refuses the new result
            ConcurrentUpdateError: If every attempt lost the race
        """
        for _ in range(MAX_UPDATE_ATTEMPTS):
            tournament_orm = self._get_orm(tournament_id)
            if tournament_orm is None:
                self.session.rollback()
                return False

            tournament = loads_tournament(tournament_orm.document)
            try:
                found = update_match(tournament, match)
            except ValueError:
                self.session.rollback()
                raise
            if not found:
                self.session.rollback()
                return False

            self._write(tournament, tournament_orm)
            try:
                self.session.commit()
            except StaleDataError:
                self.session.rollback()
                continue
            return True

        raise ConcurrentUpdateError(
            f"Tournament {tournament_id} changed during {MAX_UPDATE_ATTEMPTS} attempts to save match {match.id}"
        )
