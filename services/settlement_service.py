"""
Settles bets against recorded match outcomes.

State machine:
    pending  -> won | lost          (standard bets)
    proposed -> active | void       (PvP; void when the match is played unaccepted)
    active   -> won | lost | void   (PvP; void only by manual resolution)

Every transition goes through BetRepository.settle_bet_atomic, which applies
the status change and the coin credits in one transaction guarded by the
previous status. Settling the same match twice therefore pays nothing the
second time.
"""

import logging

from domain.models.bet import (
    ACCEPTER_WINS,
    CUSTOM_PVP,
    EVENT_ASSISTS,
    EVENT_CAGADAS,
    EVENT_GETS_CARD,
    EVENT_NO_CARD,
    EVENT_SCORES,
    OPEN_STATUSES,
    PLAYER_EVENT,
    PROPOSER_WINS,
    RESOLUTIONS,
    RESULT,
    STATUS_ACTIVE,
    STATUS_LOST,
    STATUS_PENDING,
    STATUS_PROPOSED,
    STATUS_VOID,
    STATUS_WON,
    VOID,
    Bet,
)
from domain.models.match import Match
from repositories.interfaces import IBetRepository, IMatchRepository
from services import error_codes
from services.odds import accepter_stake_for, standard_payout
from services.result import Result

logger = logging.getLogger("tiesada.services.settlement")


def is_winning_bet(bet: Bet, match: Match) -> bool:
    """
    Evaluate a result or player-event bet against a played match.

    A player with no stat line counts as all zeros.

    Raises:
        ValueError: For bet types with no structured win condition, or a match without a result
    """
    if bet.bet_type == RESULT:
        if match.result is None:
            raise ValueError("Match has no recorded result.")
        return match.result.us == bet.details.us and match.result.them == bet.details.them

    if bet.bet_type == PLAYER_EVENT:
        line = match.stat_line_for(bet.details.player_id)
        event = bet.details.event
        if event == EVENT_SCORES:
            return line.goals > 0
        if event == EVENT_ASSISTS:
            return line.assists > 0
        if event == EVENT_GETS_CARD:
            return line.has_card
        if event == EVENT_NO_CARD:
            return not line.has_card
        if event == EVENT_CAGADAS:
            return line.cagadas > 0
        raise ValueError(f"Unknown player event '{event}'.")

    raise ValueError(f"Bets of type '{bet.bet_type}' cannot be evaluated automatically.")


class SettlementService:
    """Resolves open bets once a match is final, plus manual verdicts for custom PvP bets."""

    def __init__(self, bet_repo: IBetRepository, match_repo: IMatchRepository):
        self.bet_repo = bet_repo
        self.match_repo = match_repo

    def resolve_bets_for_match(self, match_id: str) -> list[Result[Bet]]:
        """
        Settle every open bet of a played match.

        A missing or unplayed match is a silent no-op (returns an empty list),
        so callers may invoke this speculatively.

        Bets are processed independently: a failure on one bet is logged and
        reported as a failed Result for that bet, and the rest still settle.
        Accepted custom PvP bets are left active for manual resolution and are
        not part of the returned list.

        Returns:
            One Result per bet acted on, carrying the settled Bet or the error
        """
        match = self.match_repo.get_by_id(match_id)
        if match is None or not match.played:
            logger.info(f"Skipping settlement for match {match_id}: not found or not played yet")
            return []

        bets = self.bet_repo.get_bets_for_match(match_id, statuses=OPEN_STATUSES)
        results: list[Result[Bet]] = []
        for bet in bets:
            if bet.bet_type == CUSTOM_PVP and bet.status == STATUS_ACTIVE:
                logger.info(f"Custom PvP bet {bet.bet_id} awaits manual resolution")
                continue
            results.append(self._settle_one(bet, match))

        settled, failed = Result.partition(results)
        logger.info(
            f"Settled {len(settled)} bet(s) for match {match_id}"
            + (f", {len(failed)} failed" if failed else "")
        )
        return results

    def _settle_one(self, bet: Bet, match: Match) -> Result[Bet]:
        try:
            if bet.is_pvp and bet.status == STATUS_PROPOSED:
                # Nobody took the other side before kickoff; hand the stake back
                return Result.ok(
                    self.bet_repo.settle_bet_atomic(
                        bet.bet_id,
                        expected_status=STATUS_PROPOSED,
                        new_status=STATUS_VOID,
                        credits={bet.proposer_id: bet.amount},
                        payout=bet.amount,
                    )
                )

            won = is_winning_bet(bet, match)

            if not bet.is_pvp and bet.status == STATUS_PENDING:
                payout = standard_payout(bet) if won else 0
                return Result.ok(
                    self.bet_repo.settle_bet_atomic(
                        bet.bet_id,
                        expected_status=STATUS_PENDING,
                        new_status=STATUS_WON if won else STATUS_LOST,
                        credits={bet.player_id: payout} if won else {},
                        payout=payout,
                    )
                )

            if bet.is_pvp and bet.status == STATUS_ACTIVE:
                pool = bet.amount + self._accepter_stake(bet)
                winner = bet.proposer_id if won else bet.accepter_id
                return Result.ok(
                    self.bet_repo.settle_bet_atomic(
                        bet.bet_id,
                        expected_status=STATUS_ACTIVE,
                        new_status=STATUS_WON if won else STATUS_LOST,
                        credits={winner: pool},
                        payout=pool,
                    )
                )

            logger.warning(f"Bet {bet.bet_id} has unexpected mode/status {bet.bet_mode}/{bet.status}")
            return Result.fail(
                f"Bet {bet.bet_id} is in an unexpected state ({bet.bet_mode}/{bet.status}).",
                code=error_codes.STATE_ERROR,
            )
        except ValueError as e:
            logger.exception(f"Failed to settle bet {bet.bet_id}")
            return Result.fail(f"Bet {bet.bet_id}: {e}", code=error_codes.STATE_ERROR)
        except Exception as e:
            logger.exception(f"Failed to settle bet {bet.bet_id}")
            return Result.fail(f"Bet {bet.bet_id}: {e}", code=error_codes.STORE_ERROR)

    def resolve_custom_pvp_bet(self, bet_id: str, resolution: str) -> Result[Bet]:
        """
        Record a human verdict on a free-form PvP bet.

        Resolutions:
            - proposer_wins: proposer receives both stakes, status ``won``
            - accepter_wins: accepter receives both stakes, status ``lost``
            - void: every escrowed stake goes back to its owner, status ``void``

        An unaccepted proposal can only be voided. Terminal bets are rejected,
        so a verdict can never be paid twice.

        Error codes:
            - BET_NOT_FOUND, BET_NOT_OPEN
            - INVALID_BET_DETAILS: not a custom PvP bet, or unknown resolution
        """
        bet = self.bet_repo.get_bet(bet_id)
        if bet is None:
            return Result.fail("Bet not found.", code=error_codes.BET_NOT_FOUND)
        if bet.bet_type != CUSTOM_PVP or not bet.is_pvp:
            return Result.fail(
                "Only custom PvP bets can be resolved manually.", code=error_codes.INVALID_BET_DETAILS
            )
        if resolution not in RESOLUTIONS:
            return Result.fail(
                f"Unknown resolution '{resolution}'. Use one of: {', '.join(sorted(RESOLUTIONS))}.",
                code=error_codes.INVALID_BET_DETAILS,
            )

        if bet.status == STATUS_PROPOSED:
            if resolution != VOID:
                return Result.fail(
                    "Nobody accepted this bet yet; it can only be voided.", code=error_codes.BET_NOT_OPEN
                )
            new_status = STATUS_VOID
            credits = {bet.proposer_id: bet.amount}
            payout = bet.amount
        elif bet.status == STATUS_ACTIVE:
            stake = self._accepter_stake(bet)
            pool = bet.amount + stake
            if resolution == PROPOSER_WINS:
                new_status, credits, payout = STATUS_WON, {bet.proposer_id: pool}, pool
            elif resolution == ACCEPTER_WINS:
                new_status, credits, payout = STATUS_LOST, {bet.accepter_id: pool}, pool
            else:
                new_status = STATUS_VOID
                credits = {bet.proposer_id: bet.amount, bet.accepter_id: stake}
                payout = pool
        else:
            return Result.fail(f"This bet is already {bet.status}.", code=error_codes.BET_NOT_OPEN)

        try:
            settled = self.bet_repo.settle_bet_atomic(
                bet.bet_id,
                expected_status=bet.status,
                new_status=new_status,
                credits=credits,
                payout=payout,
            )
        except ValueError as e:
            logger.warning(f"Manual resolution of bet {bet_id} rejected: {e}")
            error_msg = str(e)
            if "player" in error_msg.lower() and "not found" in error_msg.lower():
                return Result.fail(error_msg, code=error_codes.PLAYER_NOT_FOUND)
            return Result.fail(error_msg, code=error_codes.BET_NOT_OPEN)

        logger.info(f"Custom PvP bet {bet_id} resolved as {resolution}")
        return Result.ok(settled)

    @staticmethod
    def _accepter_stake(bet: Bet) -> int:
        # Rows accepted before the stake column existed fall back to re-pricing
        if bet.accepter_stake is not None:
            return bet.accepter_stake
        return accepter_stake_for(bet)
