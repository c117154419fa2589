"""
Handles acceptance of open PvP proposals.
"""

import logging

from domain.models.bet import STATUS_ACTIVE, STATUS_PROPOSED, Bet
from repositories.interfaces import IBetRepository, IMatchRepository
from services import error_codes
from services.odds import accepter_stake_for
from services.result import Result
from services.wallet_service import WalletService

logger = logging.getLogger("tiesada.services.acceptance")


class AcceptanceService:
    """Matches a counter-party to a proposed PvP bet and escrows their stake."""

    def __init__(self, bet_repo: IBetRepository, match_repo: IMatchRepository, wallet: WalletService):
        self.bet_repo = bet_repo
        self.match_repo = match_repo
        self.wallet = wallet

    def accept_pvp_bet(self, bet_id: str, accepter_id: str) -> Result[Bet]:
        """
        Accept a proposed PvP bet.

        The counter-stake is ``round_half_up(amount x odds)`` (custom bets use
        their own odds) and is stored on the bet so settlement pays exactly
        what was escrowed.

        Error codes:
            - BET_NOT_FOUND: unknown bet
            - BET_NOT_OPEN: not a PvP bet, or no longer proposed
            - BETTING_CLOSED: the match is gone or already has a result
            - VALIDATION_ERROR: the proposer tried to accept their own bet
            - PLAYER_NOT_FOUND / INSUFFICIENT_FUNDS: from the wallet debit
            - STORE_ERROR: the status update failed (stake refunded)
        """
        bet = self.bet_repo.get_bet(bet_id)
        if bet is None:
            return Result.fail("Bet not found.", code=error_codes.BET_NOT_FOUND)
        if not bet.is_pvp or bet.status != STATUS_PROPOSED:
            return Result.fail("This bet is not open for acceptance.", code=error_codes.BET_NOT_OPEN)
        if bet.proposer_id == accepter_id:
            return Result.fail("You cannot accept your own bet.", code=error_codes.VALIDATION_ERROR)
        if not self._match_open(bet.match_id):
            return Result.fail("Betting is closed for a match that has been played.", code=error_codes.BETTING_CLOSED)

        stake = accepter_stake_for(bet)
        debit = self.wallet.debit(accepter_id, stake)
        if not debit.success:
            if debit.error_code == error_codes.INSUFFICIENT_FUNDS:
                return Result.fail(f"Not enough coins to accept: {debit.error}", code=debit.error_code)
            return Result.fail(debit.error, code=debit.error_code)

        try:
            accepted = self.bet_repo.mark_accepted(bet_id, accepter_id, stake)
        except Exception as e:
            self.wallet.refund(accepter_id, stake, reason=f"accepting bet {bet_id} failed: {e}")
            return Result.fail("Could not accept the bet. Your coins were returned.", code=error_codes.STORE_ERROR)

        if not accepted:
            # Someone else accepted, or the result landed, between our read and write
            self.wallet.refund(accepter_id, stake, reason=f"bet {bet_id} was no longer open")
            if not self._match_open(bet.match_id):
                return Result.fail(
                    "Betting is closed for a match that has been played.", code=error_codes.BETTING_CLOSED
                )
            return Result.fail("This bet is not open for acceptance.", code=error_codes.BET_NOT_OPEN)

        bet.accepter_id = accepter_id
        bet.accepter_stake = stake
        bet.status = STATUS_ACTIVE
        logger.info(f"PvP bet {bet_id} accepted by {accepter_id} with stake {stake}")
        return Result.ok(bet)

    def _match_open(self, match_id: str) -> bool:
        match = self.match_repo.get_by_id(match_id)
        return match is not None and not match.played
