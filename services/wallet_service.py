"""
Wallet ledger: guarded debits and credits of player coins.
"""

import logging

from repositories.interfaces import IPlayerRepository
from services import error_codes
from services.result import Result

logger = logging.getLogger("tiesada.services.wallet")


class WalletService:
    """Owns every coin movement outside of bet settlement."""

    def __init__(self, player_repo: IPlayerRepository):
        self.player_repo = player_repo

    def get_balance(self, player_id: str) -> Result[int]:
        balance = self.player_repo.get_balance(player_id)
        if balance is None:
            return Result.fail("Player not found.", code=error_codes.PLAYER_NOT_FOUND)
        return Result.ok(balance)

    def debit(self, player_id: str, amount: int) -> Result[int]:
        """
        Take coins from a player.

        Returns:
            Result.ok(new_balance) on success

        Error codes:
            - INVALID_BET_DETAILS: amount is not positive
            - PLAYER_NOT_FOUND: unknown player
            - INSUFFICIENT_FUNDS: balance below amount (nothing is debited)
        """
        if amount <= 0:
            return Result.fail("Amount must be positive.", code=error_codes.INVALID_BET_DETAILS)

        if self.player_repo.debit_if_sufficient(player_id, amount):
            new_balance = self.player_repo.get_balance(player_id)
            logger.debug(f"Debited {amount} from {player_id}, balance now {new_balance}")
            return Result.ok(new_balance)

        balance = self.player_repo.get_balance(player_id)
        if balance is None:
            return Result.fail("Player not found.", code=error_codes.PLAYER_NOT_FOUND)
        return Result.fail(
            f"Not enough coins. You have {balance} and need {amount}.",
            code=error_codes.INSUFFICIENT_FUNDS,
        )

    def credit(self, player_id: str, amount: int) -> Result[int]:
        """
        Give coins to a player.

        Error codes:
            - INVALID_BET_DETAILS: amount is not positive
            - PLAYER_NOT_FOUND: unknown player
        """
        if amount <= 0:
            return Result.fail("Amount must be positive.", code=error_codes.INVALID_BET_DETAILS)

        if not self.player_repo.credit(player_id, amount):
            return Result.fail("Player not found.", code=error_codes.PLAYER_NOT_FOUND)

        new_balance = self.player_repo.get_balance(player_id)
        logger.debug(f"Credited {amount} to {player_id}, balance now {new_balance}")
        return Result.ok(new_balance)

    def refund(self, player_id: str, amount: int, reason: str) -> None:
        """
        Return escrowed coins after a failed operation.

        Logs loudly if the refund itself fails, since coins would otherwise
        be stranded.
        """
        result = self.credit(player_id, amount)
        if result.success:
            logger.warning(f"Reversed {amount}-coin escrow for {player_id}: {reason}")
        else:
            logger.error(
                f"Could not reverse {amount}-coin escrow for {player_id} ({reason}): {result.error}"
            )
