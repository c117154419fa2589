"""
Repository for managing betting data.
"""

from __future__ import annotations

import json
import logging
import time

from domain.models.bet import (
    CUSTOM_PVP,
    PVP,
    STANDARD,
    STATUS_ACTIVE,
    STATUS_PROPOSED,
    Bet,
    parse_details,
)
from repositories.base_repository import BaseRepository
from repositories.interfaces import IBetRepository

logger = logging.getLogger("tiesada.repositories.bet")

_BET_COLUMNS = """
    bet_id, match_id, bet_type, bet_mode, status, amount, details,
    player_id, proposer_id, accepter_id, accepter_stake, payout, created_at, resolved_at
"""


class BetRepository(BaseRepository, IBetRepository):
    """
    Handles CRUD operations against the bets table.

    Status transitions are compare-and-set updates on the current status, so
    a bet can only leave an open state once.
    """

    def create_bet(self, bet: Bet) -> Bet:
        """Insert a new bet record and return it with its creation time filled in."""
        if bet.created_at is None:
            bet.created_at = int(time.time())
        with self.connection() as conn:
            cursor = conn.cursor()
            cursor.execute(
                f"""
                INSERT INTO bets ({_BET_COLUMNS})
                VALUES (?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?)
                """,
                (
                    bet.bet_id,
                    bet.match_id,
                    bet.bet_type,
                    bet.bet_mode,
                    bet.status,
                    bet.amount,
                    json.dumps(bet.details.to_dict()),
                    bet.player_id,
                    bet.proposer_id,
                    bet.accepter_id,
                    bet.accepter_stake,
                    bet.payout,
                    bet.created_at,
                    bet.resolved_at,
                ),
            )
        return bet

    def get_bet(self, bet_id: str) -> Bet | None:
        with self.connection() as conn:
            cursor = conn.cursor()
            cursor.execute(f"SELECT {_BET_COLUMNS} FROM bets WHERE bet_id = ?", (bet_id,))
            row = cursor.fetchone()
            return self._row_to_bet(row) if row else None

    def get_bets_for_match(self, match_id: str, statuses: tuple[str, ...] | None = None) -> list[Bet]:
        """
        Return bets for a match, optionally restricted to the given statuses.

        Ordered by creation time so settlement walks bets in placement order.
        """
        with self.connection() as conn:
            cursor = conn.cursor()
            if statuses:
                placeholders = ",".join("?" * len(statuses))
                cursor.execute(
                    f"""
                    SELECT {_BET_COLUMNS} FROM bets
                    WHERE match_id = ? AND status IN ({placeholders})
                    ORDER BY created_at ASC, rowid ASC
                    """,
                    (match_id, *statuses),
                )
            else:
                cursor.execute(
                    f"SELECT {_BET_COLUMNS} FROM bets WHERE match_id = ? ORDER BY created_at ASC, rowid ASC",
                    (match_id,),
                )
            return [self._row_to_bet(row) for row in cursor.fetchall()]

    def get_player_bets(self, player_id: str) -> list[Bet]:
        """
        All bets the player has coins in: their standard bets plus PvP bets
        they proposed or accepted. Newest first.
        """
        with self.connection() as conn:
            cursor = conn.cursor()
            cursor.execute(
                f"""
                SELECT {_BET_COLUMNS} FROM bets
                WHERE (bet_mode = ? AND player_id = ?)
                   OR (bet_mode = ? AND (proposer_id = ? OR accepter_id = ?))
                ORDER BY created_at DESC, rowid DESC
                """,
                (STANDARD, player_id, PVP, player_id, player_id),
            )
            return [self._row_to_bet(row) for row in cursor.fetchall()]

    def get_open_pvp_bets(self, excluding_player_id: str | None = None) -> list[Bet]:
        """PvP proposals still waiting for a counter-party."""
        with self.connection() as conn:
            cursor = conn.cursor()
            if excluding_player_id is not None:
                cursor.execute(
                    f"""
                    SELECT {_BET_COLUMNS} FROM bets
                    WHERE bet_mode = ? AND status = ? AND proposer_id != ?
                    ORDER BY created_at ASC, rowid ASC
                    """,
                    (PVP, STATUS_PROPOSED, excluding_player_id),
                )
            else:
                cursor.execute(
                    f"""
                    SELECT {_BET_COLUMNS} FROM bets
                    WHERE bet_mode = ? AND status = ?
                    ORDER BY created_at ASC, rowid ASC
                    """,
                    (PVP, STATUS_PROPOSED),
                )
            return [self._row_to_bet(row) for row in cursor.fetchall()]

    def get_open_custom_pvp_bets_for_match(self, match_id: str) -> list[Bet]:
        """Custom PvP bets on a match that still need a manual verdict."""
        with self.connection() as conn:
            cursor = conn.cursor()
            cursor.execute(
                f"""
                SELECT {_BET_COLUMNS} FROM bets
                WHERE match_id = ? AND bet_type = ? AND status IN (?, ?)
                ORDER BY created_at ASC, rowid ASC
                """,
                (match_id, CUSTOM_PVP, STATUS_PROPOSED, STATUS_ACTIVE),
            )
            return [self._row_to_bet(row) for row in cursor.fetchall()]

    def mark_accepted(self, bet_id: str, accepter_id: str, accepter_stake: int) -> bool:
        """
        Flip a proposed PvP bet to active, freezing the counter-stake.

        Returns:
            False if the bet was no longer proposed or its match has a result
        """
        with self.connection() as conn:
            cursor = conn.cursor()
            cursor.execute(
                """
                UPDATE bets
                SET status = ?, accepter_id = ?, accepter_stake = ?
                WHERE bet_id = ? AND bet_mode = ? AND status = ?
                  AND EXISTS (
                      SELECT 1 FROM matches m WHERE m.match_id = bets.match_id AND m.played = 0
                  )
                """,
                (STATUS_ACTIVE, accepter_id, accepter_stake, bet_id, PVP, STATUS_PROPOSED),
            )
            return cursor.rowcount == 1

    def settle_bet_atomic(
        self,
        bet_id: str,
        expected_status: str,
        new_status: str,
        credits: dict[str, int],
        payout: int | None = None,
    ) -> Bet:
        """
        Atomically settle one bet:
        - move it from expected_status to new_status (compare-and-set)
        - credit every player in ``credits``
        - record the payout and resolution time

        Either everything commits or nothing does, so a bet can never end up
        terminal with its escrow unpaid, nor be paid twice.

        Raises:
            ValueError: If the bet is missing, no longer in expected_status, or a
                credited player does not exist
        """
        now = int(time.time())
        with self.atomic_transaction() as conn:
            cursor = conn.cursor()
            cursor.execute(
                """
                UPDATE bets
                SET status = ?, payout = ?, resolved_at = ?
                WHERE bet_id = ? AND status = ?
                """,
                (new_status, payout, now, bet_id, expected_status),
            )
            if cursor.rowcount != 1:
                cursor.execute("SELECT status FROM bets WHERE bet_id = ?", (bet_id,))
                row = cursor.fetchone()
                if not row:
                    raise ValueError("Bet not found.")
                raise ValueError(f"Bet is already {row['status']}, expected {expected_status}.")

            for player_id, amount in credits.items():
                if amount <= 0:
                    continue
                cursor.execute(
                    """
                    UPDATE players
                    SET coins = coins + ?, updated_at = CURRENT_TIMESTAMP
                    WHERE player_id = ?
                    """,
                    (amount, player_id),
                )
                if cursor.rowcount != 1:
                    raise ValueError(f"Player {player_id} not found.")

            cursor.execute(f"SELECT {_BET_COLUMNS} FROM bets WHERE bet_id = ?", (bet_id,))
            return self._row_to_bet(cursor.fetchone())

    def _row_to_bet(self, row) -> Bet:
        """Convert database row to Bet object."""
        return Bet(
            bet_id=row["bet_id"],
            match_id=row["match_id"],
            bet_type=row["bet_type"],
            amount=int(row["amount"]),
            details=parse_details(row["bet_type"], json.loads(row["details"])),
            bet_mode=row["bet_mode"],
            status=row["status"],
            player_id=row["player_id"],
            proposer_id=row["proposer_id"],
            accepter_id=row["accepter_id"],
            accepter_stake=row["accepter_stake"],
            payout=row["payout"],
            created_at=row["created_at"],
            resolved_at=row["resolved_at"],
        )
