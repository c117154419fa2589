"""
Player-facing business logic (registration, lookups, coin leaderboard).
"""

import logging
import uuid

from config import STARTING_COINS
from domain.models.player import Player
from repositories.interfaces import IPlayerRepository
from services import error_codes
from services.interfaces import IPlayerService
from services.result import Result

logger = logging.getLogger("tiesada.services.player")


class PlayerService(IPlayerService):
    """Encapsulates roster registration and player lookups."""

    def __init__(self, player_repo: IPlayerRepository, starting_coins: int = STARTING_COINS):
        self.player_repo = player_repo
        self.starting_coins = starting_coins

    def register_player(
        self,
        name: str,
        position: str | None = None,
        photo_url: str | None = None,
        player_id: str | None = None,
        coins: int | None = None,
    ) -> Result[Player]:
        """
        Add a player to the roster.

        ``player_id`` defaults to a fresh uuid; ``coins`` defaults to the
        configured starting balance.

        Error codes:
            - VALIDATION_ERROR: blank name or negative coins
            - PLAYER_ALREADY_EXISTS: the id is taken
        """
        name = (name or "").strip()
        if not name:
            return Result.fail("Player name cannot be empty.", code=error_codes.VALIDATION_ERROR)

        coins = self.starting_coins if coins is None else coins
        if coins < 0:
            return Result.fail("Starting coins cannot be negative.", code=error_codes.VALIDATION_ERROR)

        player_id = player_id or uuid.uuid4().hex
        if self.player_repo.exists(player_id):
            return Result.fail("Player already registered.", code=error_codes.PLAYER_ALREADY_EXISTS)

        try:
            self.player_repo.add(
                player_id=player_id,
                name=name,
                position=position,
                photo_url=photo_url,
                coins=coins,
            )
        except ValueError as e:
            # Lost a race with a concurrent registration of the same id
            return Result.fail(str(e), code=error_codes.PLAYER_ALREADY_EXISTS)

        logger.info(f"Registered player {name} ({player_id}) with {coins} coins")
        return Result.ok(
            Player(player_id=player_id, name=name, position=position, photo_url=photo_url, coins=coins)
        )

    def get_player(self, player_id: str) -> Result[Player]:
        player = self.player_repo.get_by_id(player_id)
        if player is None:
            return Result.fail("Player not found.", code=error_codes.PLAYER_NOT_FOUND)
        return Result.ok(player)

    def list_players(self) -> list[Player]:
        return self.player_repo.get_all()

    def get_leaderboard(self, limit: int = 20) -> list[Player]:
        return self.player_repo.get_leaderboard(limit)
