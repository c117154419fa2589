"""
Repository for match data access.
"""

import json
import logging

from domain.models.bet import OPEN_STATUSES
from domain.models.match import Match, MatchResult, PlayerStatLine
from repositories.base_repository import BaseRepository
from repositories.interfaces import IMatchRepository

logger = logging.getLogger("tiesada.repositories.match")


class MatchRepository(BaseRepository, IMatchRepository):
    """
    Handles all match-related database operations.

    Responsibilities:
    - Fixture creation and editing
    - Attendance and lineup storage
    - The one-time transition to played (result + stats)
    """

    # Columns that may be edited on any match; result/stats go through record_result_atomic
    EDITABLE_FIELDS = {"opponent": "opponent", "date": "match_date", "emoji": "emoji", "video_url": "video_url"}

    def create(self, match: Match) -> None:
        """Insert a new match."""
        with self.connection() as conn:
            cursor = conn.cursor()
            cursor.execute(
                """
                INSERT INTO matches (match_id, opponent, match_date, played, result, stats,
                                     attending, lineup, emoji, video_url)
                VALUES (?, ?, ?, ?, ?, ?, ?, ?, ?, ?)
                """,
                (
                    match.match_id,
                    match.opponent,
                    match.date,
                    1 if match.played else 0,
                    json.dumps(match.result.to_dict()) if match.result else None,
                    json.dumps([line.to_dict() for line in match.stats]),
                    json.dumps(match.attending),
                    json.dumps(match.lineup),
                    match.emoji,
                    match.video_url,
                ),
            )

    def get_by_id(self, match_id: str) -> Match | None:
        with self.connection() as conn:
            cursor = conn.cursor()
            cursor.execute("SELECT * FROM matches WHERE match_id = ?", (match_id,))
            row = cursor.fetchone()
            return self._row_to_match(row) if row else None

    def get_all(self) -> list[Match]:
        """All matches, oldest fixture first."""
        with self.connection() as conn:
            cursor = conn.cursor()
            cursor.execute("SELECT * FROM matches ORDER BY match_date ASC, created_at ASC")
            return [self._row_to_match(row) for row in cursor.fetchall()]

    def get_played(self) -> list[Match]:
        with self.connection() as conn:
            cursor = conn.cursor()
            cursor.execute("SELECT * FROM matches WHERE played = 1 ORDER BY match_date ASC")
            return [self._row_to_match(row) for row in cursor.fetchall()]

    def update_fields(self, match_id: str, fields: dict) -> bool:
        """
        Update descriptive columns of a match.

        Raises:
            ValueError: If a field is not editable through this method
        """
        unknown = set(fields) - set(self.EDITABLE_FIELDS)
        if unknown:
            raise ValueError(f"Cannot update match fields: {', '.join(sorted(unknown))}")
        if not fields:
            return self.get_by_id(match_id) is not None

        assignments = ", ".join(f"{self.EDITABLE_FIELDS[name]} = ?" for name in fields)
        with self.connection() as conn:
            cursor = conn.cursor()
            cursor.execute(
                f"UPDATE matches SET {assignments}, updated_at = CURRENT_TIMESTAMP WHERE match_id = ?",
                (*fields.values(), match_id),
            )
            return cursor.rowcount == 1

    def update_attendance(self, match_id: str, attending: list[str]) -> bool:
        with self.connection() as conn:
            cursor = conn.cursor()
            cursor.execute(
                "UPDATE matches SET attending = ?, updated_at = CURRENT_TIMESTAMP WHERE match_id = ?",
                (json.dumps(attending), match_id),
            )
            return cursor.rowcount == 1

    def update_lineup(self, match_id: str, lineup: dict[str, str | None]) -> bool:
        with self.connection() as conn:
            cursor = conn.cursor()
            cursor.execute(
                "UPDATE matches SET lineup = ?, updated_at = CURRENT_TIMESTAMP WHERE match_id = ?",
                (json.dumps(lineup), match_id),
            )
            return cursor.rowcount == 1

    def record_result_atomic(self, match: Match) -> None:
        """
        Mark a match as played with its final result and stats.

        The update only applies to an unplayed match, so a result can never be
        overwritten once bets may have been settled against it.

        Raises:
            ValueError: If the match does not exist or was already played
        """
        if match.result is None:
            raise ValueError("A played match needs a result.")

        with self.atomic_transaction() as conn:
            cursor = conn.cursor()
            cursor.execute(
                """
                UPDATE matches
                SET played = 1, result = ?, stats = ?, video_url = COALESCE(?, video_url),
                    updated_at = CURRENT_TIMESTAMP
                WHERE match_id = ? AND played = 0
                """,
                (
                    json.dumps(match.result.to_dict()),
                    json.dumps([line.to_dict() for line in match.stats]),
                    match.video_url,
                    match.match_id,
                ),
            )
            if cursor.rowcount == 1:
                return

            cursor.execute("SELECT played FROM matches WHERE match_id = ?", (match.match_id,))
            row = cursor.fetchone()
            if not row:
                raise ValueError("Match not found.")
            raise ValueError("Match result has already been recorded.")

    def delete_with_settled_bets(self, match_id: str) -> int:
        """
        Delete a match together with its settled bets.

        The open-bet check and both deletes share one write transaction, so a
        bet placed concurrently either blocks the delete or is never touched.

        Returns:
            Number of bet rows removed

        Raises:
            ValueError: If the match does not exist or still has open bets
        """
        placeholders = ",".join("?" * len(OPEN_STATUSES))
        with self.atomic_transaction() as conn:
            cursor = conn.cursor()
            cursor.execute("SELECT 1 FROM matches WHERE match_id = ?", (match_id,))
            if not cursor.fetchone():
                raise ValueError("Match not found.")

            cursor.execute(
                f"SELECT COUNT(*) AS n FROM bets WHERE match_id = ? AND status IN ({placeholders})",
                (match_id, *OPEN_STATUSES),
            )
            open_bets = int(cursor.fetchone()["n"])
            if open_bets:
                raise ValueError(f"Match still has {open_bets} open bet(s). Settle or void them first.")

            cursor.execute(
                f"DELETE FROM bets WHERE match_id = ? AND status NOT IN ({placeholders})",
                (match_id, *OPEN_STATUSES),
            )
            removed = cursor.rowcount
            cursor.execute("DELETE FROM matches WHERE match_id = ?", (match_id,))
            return removed

    def _row_to_match(self, row) -> Match:
        """Convert database row to Match object."""
        result = json.loads(row["result"]) if row["result"] else None
        stats = json.loads(row["stats"]) if row["stats"] else []
        return Match(
            match_id=row["match_id"],
            opponent=row["opponent"],
            date=row["match_date"],
            played=bool(row["played"]),
            result=MatchResult.from_dict(result) if result else None,
            stats=[PlayerStatLine.from_dict(line) for line in stats],
            attending=json.loads(row["attending"]) if row["attending"] else [],
            lineup=json.loads(row["lineup"]) if row["lineup"] else {},
            emoji=row["emoji"],
            video_url=row["video_url"] if "video_url" in row.keys() else None,
        )
