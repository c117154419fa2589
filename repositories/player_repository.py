"""
Repository for player data access.
"""

import logging

from domain.models.player import Player
from repositories.base_repository import BaseRepository
from repositories.interfaces import IPlayerRepository

logger = logging.getLogger("tiesada.repositories.player")


class PlayerRepository(BaseRepository, IPlayerRepository):
    """
    Handles all player-related database operations.

    Responsibilities:
    - CRUD operations for roster players
    - Coin balance reads and guarded writes (the wallet ledger's storage)
    """

    def add(
        self,
        player_id: str,
        name: str,
        position: str | None = None,
        photo_url: str | None = None,
        coins: int = 0,
    ) -> None:
        """
        Add a new player to the roster.

        Raises:
            ValueError: If a player with this id already exists or coins is negative
        """
        if coins < 0:
            raise ValueError("Starting coins cannot be negative.")

        with self.connection() as conn:
            cursor = conn.cursor()
            cursor.execute("SELECT player_id FROM players WHERE player_id = ?", (player_id,))
            if cursor.fetchone():
                raise ValueError(f"Player with id {player_id} already exists.")

            cursor.execute(
                """
                INSERT INTO players (player_id, name, position, photo_url, coins)
                VALUES (?, ?, ?, ?, ?)
                """,
                (player_id, name, position, photo_url, coins),
            )

    def get_by_id(self, player_id: str) -> Player | None:
        """
        Get player by id.

        Returns:
            Player object or None if not found
        """
        with self.connection() as conn:
            cursor = conn.cursor()
            cursor.execute("SELECT * FROM players WHERE player_id = ?", (player_id,))
            row = cursor.fetchone()
            return self._row_to_player(row) if row else None

    def get_by_ids(self, player_ids: list[str]) -> list[Player]:
        """
        Get multiple players by id.

        Returns players in the same order as the input ids; unknown ids are skipped.
        """
        if not player_ids:
            return []

        placeholders = ",".join("?" * len(player_ids))
        with self.connection() as conn:
            cursor = conn.cursor()
            cursor.execute(
                f"SELECT * FROM players WHERE player_id IN ({placeholders})",
                tuple(player_ids),
            )
            by_id = {row["player_id"]: self._row_to_player(row) for row in cursor.fetchall()}
        return [by_id[pid] for pid in player_ids if pid in by_id]

    def get_all(self) -> list[Player]:
        """Get all roster players ordered by name."""
        with self.connection() as conn:
            cursor = conn.cursor()
            cursor.execute("SELECT * FROM players ORDER BY name COLLATE NOCASE ASC")
            return [self._row_to_player(row) for row in cursor.fetchall()]

    def get_leaderboard(self, limit: int = 20) -> list[Player]:
        """
        Get players sorted by coins descending.

        Ties are broken by name so the order is stable.
        """
        with self.connection() as conn:
            cursor = conn.cursor()
            cursor.execute(
                """
                SELECT * FROM players
                ORDER BY coins DESC, name COLLATE NOCASE ASC
                LIMIT ?
                """,
                (limit,),
            )
            return [self._row_to_player(row) for row in cursor.fetchall()]

    def exists(self, player_id: str) -> bool:
        """Check if a player exists."""
        with self.connection() as conn:
            cursor = conn.cursor()
            cursor.execute("SELECT 1 FROM players WHERE player_id = ?", (player_id,))
            return cursor.fetchone() is not None

    def get_balance(self, player_id: str) -> int | None:
        """Get a player's coins, or None if the player does not exist."""
        with self.connection() as conn:
            cursor = conn.cursor()
            cursor.execute("SELECT coins FROM players WHERE player_id = ?", (player_id,))
            row = cursor.fetchone()
            return int(row["coins"]) if row else None

    def set_coins(self, player_id: str, coins: int) -> None:
        """Set a player's balance to a specific amount (admin/seed operation)."""
        if coins < 0:
            raise ValueError("Coins cannot be negative.")
        with self.connection() as conn:
            cursor = conn.cursor()
            cursor.execute(
                """
                UPDATE players
                SET coins = ?, updated_at = CURRENT_TIMESTAMP
                WHERE player_id = ?
                """,
                (coins, player_id),
            )
            if cursor.rowcount == 0:
                raise ValueError("Player not found.")

    def debit_if_sufficient(self, player_id: str, amount: int) -> bool:
        """
        Subtract amount from the balance only if the balance covers it.

        A single conditional UPDATE, so two concurrent debits can never both
        pass the sufficiency check against the same stale balance.

        Returns:
            True if the debit was applied, False otherwise (missing player or short balance)
        """
        with self.connection() as conn:
            cursor = conn.cursor()
            cursor.execute(
                """
                UPDATE players
                SET coins = coins - ?, updated_at = CURRENT_TIMESTAMP
                WHERE player_id = ? AND coins >= ?
                """,
                (amount, player_id, amount),
            )
            return cursor.rowcount == 1

    def credit(self, player_id: str, amount: int) -> bool:
        """Add amount to the balance. Returns False if the player does not exist."""
        with self.connection() as conn:
            cursor = conn.cursor()
            cursor.execute(
                """
                UPDATE players
                SET coins = coins + ?, updated_at = CURRENT_TIMESTAMP
                WHERE player_id = ?
                """,
                (amount, player_id),
            )
            return cursor.rowcount == 1

    def get_total_coins(self) -> int:
        """Sum of all balances (useful for conservation checks)."""
        with self.connection() as conn:
            cursor = conn.cursor()
            cursor.execute("SELECT COALESCE(SUM(coins), 0) AS total FROM players")
            return int(cursor.fetchone()["total"])

    def _row_to_player(self, row) -> Player:
        """Convert database row to Player object."""
        return Player(
            player_id=row["player_id"],
            name=row["name"],
            position=row["position"],
            photo_url=row["photo_url"],
            coins=int(row["coins"]) if row["coins"] is not None else 0,
        )
