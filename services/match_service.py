"""
Match orchestration: fixtures, attendance, lineups and result recording.
"""

import logging
import uuid
from typing import Any

from config import AUTO_RESOLVE_ON_RESULT, DEFAULT_MATCH_EMOJI, LINEUP_POSITIONS
from domain.models.bet import Bet
from domain.models.match import Match, MatchResult, PlayerStatLine
from repositories.interfaces import IMatchRepository
from services import error_codes
from services.interfaces import IBettingService, IMatchService
from services.result import Result

logger = logging.getLogger("tiesada.services.match")


class MatchService(IMatchService):
    """Handles the match lifecycle from fixture to recorded result."""

    def __init__(
        self,
        match_repo: IMatchRepository,
        *,
        betting_service: IBettingService | None = None,
        auto_resolve_on_result: bool = AUTO_RESOLVE_ON_RESULT,
    ):
        """
        Initialize MatchService with required repository dependencies.

        Args:
            match_repo: Repository for match data access
            betting_service: Optional betting service; when set, recording a
                result settles the match's bets
            auto_resolve_on_result: Whether record_result triggers settlement
        """
        self.match_repo = match_repo
        self.betting_service = betting_service
        self.auto_resolve_on_result = auto_resolve_on_result

    # --- Fixtures ---

    def create_match(
        self,
        opponent: str,
        date: str,
        emoji: str | None = None,
        attending: list[str] | None = None,
    ) -> Result[Match]:
        opponent = (opponent or "").strip()
        if not opponent:
            return Result.fail("Opponent cannot be empty.", code=error_codes.VALIDATION_ERROR)
        if not date:
            return Result.fail("Match date is required.", code=error_codes.VALIDATION_ERROR)

        match = Match(
            match_id=uuid.uuid4().hex,
            opponent=opponent,
            date=date,
            attending=list(dict.fromkeys(attending or [])),
            lineup={position: None for position in LINEUP_POSITIONS},
            emoji=emoji or DEFAULT_MATCH_EMOJI,
        )
        self.match_repo.create(match)
        logger.info(f"Created match {match.match_id} vs {opponent} on {date}")
        return Result.ok(match)

    def get_match(self, match_id: str) -> Result[Match]:
        match = self.match_repo.get_by_id(match_id)
        if match is None:
            return Result.fail("Match not found.", code=error_codes.MATCH_NOT_FOUND)
        return Result.ok(match)

    def list_matches(self) -> list[Match]:
        return self.match_repo.get_all()

    def list_upcoming(self) -> list[Match]:
        return [m for m in self.match_repo.get_all() if not m.played]

    def list_played(self) -> list[Match]:
        return self.match_repo.get_played()

    def update_match(self, match_id: str, **fields: Any) -> Result[Match]:
        """
        Edit opponent, date, emoji or video_url.

        Result and stats are never editable here, even on a played match.
        """
        try:
            updated = self.match_repo.update_fields(match_id, fields)
        except ValueError as e:
            return Result.fail(str(e), code=error_codes.VALIDATION_ERROR)
        if not updated:
            return Result.fail("Match not found.", code=error_codes.MATCH_NOT_FOUND)
        return self.get_match(match_id)

    def delete_match(self, match_id: str) -> Result[bool]:
        """
        Delete a match and its settled bets.

        Rejected while any bet is still open, since deleting it would strand
        the escrowed coins.
        """
        try:
            removed = self.match_repo.delete_with_settled_bets(match_id)
        except ValueError as e:
            msg = str(e)
            if "not found" in msg:
                return Result.fail(msg, code=error_codes.MATCH_NOT_FOUND)
            return Result.fail(msg, code=error_codes.STATE_ERROR)
        logger.info(f"Deleted match {match_id} ({removed} settled bet(s) removed)")
        return Result.ok(True)

    # --- Squad ---

    def toggle_attendance(self, match_id: str, player_id: str) -> Result[Match]:
        """Add the player to the attending list, or remove them (and their lineup slot)."""
        match = self.match_repo.get_by_id(match_id)
        if match is None:
            return Result.fail("Match not found.", code=error_codes.MATCH_NOT_FOUND)
        if match.played:
            return Result.fail("Attendance is frozen once a match is played.", code=error_codes.MATCH_NOT_PLAYABLE)

        if player_id in match.attending:
            match.attending = [pid for pid in match.attending if pid != player_id]
            if player_id in match.lineup.values():
                match.lineup = {pos: (None if pid == player_id else pid) for pos, pid in match.lineup.items()}
                self.match_repo.update_lineup(match_id, match.lineup)
        else:
            match.attending = match.attending + [player_id]

        self.match_repo.update_attendance(match_id, match.attending)
        return Result.ok(match)

    def set_lineup(self, match_id: str, lineup: dict[str, str | None]) -> Result[Match]:
        match = self.match_repo.get_by_id(match_id)
        if match is None:
            return Result.fail("Match not found.", code=error_codes.MATCH_NOT_FOUND)
        if match.played:
            return Result.fail("The lineup is frozen once a match is played.", code=error_codes.MATCH_NOT_PLAYABLE)

        unknown = set(lineup) - set(LINEUP_POSITIONS)
        if unknown:
            return Result.fail(
                f"Unknown lineup position(s): {', '.join(sorted(unknown))}.", code=error_codes.VALIDATION_ERROR
            )

        assigned = [pid for pid in lineup.values() if pid is not None]
        if len(assigned) != len(set(assigned)):
            return Result.fail("A player can only fill one position.", code=error_codes.VALIDATION_ERROR)
        absent = [pid for pid in assigned if pid not in match.attending]
        if absent:
            return Result.fail(
                f"Only attending players can be in the lineup: {', '.join(absent)}.",
                code=error_codes.VALIDATION_ERROR,
            )

        match.lineup = {position: lineup.get(position) for position in LINEUP_POSITIONS}
        self.match_repo.update_lineup(match_id, match.lineup)
        return Result.ok(match)

    # --- Recording ---

    def record_result(
        self,
        match_id: str,
        us: int,
        them: int,
        stats: list[dict] | None = None,
        video_url: str | None = None,
    ) -> Result[dict[str, Any]]:
        """
        Mark a match as played with its final score and per-player stats.

        Stats are normalized into canonical stat lines before they are stored.
        When a betting service is wired in, the match's bets are settled right
        after the result is committed.

        Returns:
            Result.ok({"match": Match, "settlement": list[Result[Bet]]})

        Error codes:
            - INVALID_RESULT: negative or non-integer score, or malformed stats
            - MATCH_NOT_FOUND
            - MATCH_ALREADY_RECORDED: the result is immutable once recorded
        """
        for score in (us, them):
            if isinstance(score, bool) or not isinstance(score, int) or score < 0:
                return Result.fail("Scores must be non-negative whole numbers.", code=error_codes.INVALID_RESULT)

        try:
            stat_lines = self._normalize_stats(stats or [])
        except (TypeError, ValueError) as e:
            return Result.fail(f"Invalid stats: {e}", code=error_codes.INVALID_RESULT)

        match = self.match_repo.get_by_id(match_id)
        if match is None:
            return Result.fail("Match not found.", code=error_codes.MATCH_NOT_FOUND)
        if match.played:
            return Result.fail("Match result has already been recorded.", code=error_codes.MATCH_ALREADY_RECORDED)

        match.played = True
        match.result = MatchResult(us=us, them=them)
        match.stats = stat_lines
        if video_url:
            match.video_url = video_url

        try:
            self.match_repo.record_result_atomic(match)
        except ValueError as e:
            error_msg = str(e)
            if "not found" in error_msg.lower():
                return Result.fail(error_msg, code=error_codes.MATCH_NOT_FOUND)
            return Result.fail(error_msg, code=error_codes.MATCH_ALREADY_RECORDED)

        logger.info(f"Recorded result for match {match_id}: {us}-{them} vs {match.opponent}")

        settlement: list[Result[Bet]] = []
        if self.betting_service is not None and self.auto_resolve_on_result:
            settlement = self.betting_service.resolve_bets_for_match(match_id)

        return Result.ok({"match": match, "settlement": settlement})

    @staticmethod
    def _normalize_stats(stats: list[dict]) -> list[PlayerStatLine]:
        """Parse raw stat rows, merging duplicate rows for the same player."""
        merged: dict[str, PlayerStatLine] = {}
        for raw in stats:
            if not isinstance(raw, dict):
                raise TypeError("each stat row must be an object")
            line = PlayerStatLine.from_dict(raw)
            previous = merged.get(line.player_id)
            if previous is not None:
                line = PlayerStatLine(
                    player_id=line.player_id,
                    goals=previous.goals + line.goals,
                    assists=previous.assists + line.assists,
                    yellow_cards=previous.yellow_cards + line.yellow_cards,
                    red_cards=previous.red_cards + line.red_cards,
                    cagadas=previous.cagadas + line.cagadas,
                )
            merged[line.player_id] = line
        return list(merged.values())
