"""
Handles bet placement: validation, escrow and record creation.
"""

import logging
import uuid

from domain.models.bet import (
    CUSTOM_PVP,
    PVP,
    STANDARD,
    STATUS_PENDING,
    STATUS_PROPOSED,
    Bet,
    parse_details,
)
from repositories.interfaces import IBetRepository, IMatchRepository
from services import error_codes
from services.result import Result
from services.wallet_service import WalletService

logger = logging.getLogger("tiesada.services.wager")


class WagerService:
    """
    Places standard (against the house) and PvP (between players) bets.

    The stake is escrowed by debiting the bettor before the record is written.
    If writing the record fails, the debit is reversed before the failure is
    returned, so a failed placement never leaves coins in limbo.
    """

    def __init__(
        self,
        bet_repo: IBetRepository,
        match_repo: IMatchRepository,
        wallet: WalletService,
    ):
        self.bet_repo = bet_repo
        self.match_repo = match_repo
        self.wallet = wallet

    def place_standard_bet(
        self, player_id: str, match_id: str, bet_type: str, amount: int, details: dict
    ) -> Result[Bet]:
        """
        Bet against the house at fixed odds.

        Returns:
            Result.ok(Bet) in ``pending`` state on success

        Error codes:
            - INVALID_BET_DETAILS: non-positive amount, malformed details, or a custom bet
            - MATCH_NOT_FOUND / BETTING_CLOSED: no such match, or it was already played
            - PLAYER_NOT_FOUND / INSUFFICIENT_FUNDS: from the wallet debit
            - STORE_ERROR: the record could not be written (stake refunded)
        """
        if bet_type == CUSTOM_PVP:
            return Result.fail(
                "Custom bets can only be proposed to another player.",
                code=error_codes.INVALID_BET_DETAILS,
            )
        return self._place(
            bettor_id=player_id,
            match_id=match_id,
            bet_type=bet_type,
            amount=amount,
            raw_details=details,
            bet_mode=STANDARD,
        )

    def place_pvp_bet(
        self, proposer_id: str, match_id: str, bet_type: str, amount: int, details: dict
    ) -> Result[Bet]:
        """
        Propose a bet to the rest of the team.

        Same checks and escrow discipline as place_standard_bet; the bet starts
        ``proposed`` with no accepter. Custom bets need a description and
        ``custom_odds`` above 1, checked before any coins move.
        """
        return self._place(
            bettor_id=proposer_id,
            match_id=match_id,
            bet_type=bet_type,
            amount=amount,
            raw_details=details,
            bet_mode=PVP,
        )

    def _place(
        self,
        *,
        bettor_id: str,
        match_id: str,
        bet_type: str,
        amount: int,
        raw_details: dict,
        bet_mode: str,
    ) -> Result[Bet]:
        if isinstance(amount, bool) or not isinstance(amount, int) or amount <= 0:
            return Result.fail("Bet amount must be a positive whole number.", code=error_codes.INVALID_BET_DETAILS)

        try:
            details = parse_details(bet_type, raw_details)
        except ValueError as e:
            return Result.fail(str(e), code=error_codes.INVALID_BET_DETAILS)

        match = self.match_repo.get_by_id(match_id)
        if match is None:
            return Result.fail("Match not found.", code=error_codes.MATCH_NOT_FOUND)
        if match.played:
            return Result.fail("Betting is closed for a match that has been played.", code=error_codes.BETTING_CLOSED)

        debit = self.wallet.debit(bettor_id, amount)
        if not debit.success:
            return Result.fail(debit.error, code=debit.error_code)

        bet = Bet(
            bet_id=uuid.uuid4().hex,
            match_id=match_id,
            bet_type=bet_type,
            amount=amount,
            details=details,
            bet_mode=bet_mode,
            status=STATUS_PENDING if bet_mode == STANDARD else STATUS_PROPOSED,
            player_id=bettor_id if bet_mode == STANDARD else None,
            proposer_id=bettor_id if bet_mode == PVP else None,
        )

        try:
            bet = self.bet_repo.create_bet(bet)
        except Exception as e:
            self.wallet.refund(bettor_id, amount, reason=f"bet record creation failed: {e}")
            return Result.fail("Could not save the bet. Your coins were returned.", code=error_codes.STORE_ERROR)

        logger.info(
            f"{bet_mode} bet {bet.bet_id} placed by {bettor_id}: {bet_type} for {amount} on match {match_id}"
        )
        return Result.ok(bet)
