"""
Handles betting-related business logic.

Single entry point the UI/CLI layer talks to. Placement, acceptance and
settlement each live in their own service; this class wires them to one set of
repositories and adds the read-only queries.
"""

from domain.models.bet import Bet
from repositories.interfaces import IBetRepository, IMatchRepository, IPlayerRepository
from services.acceptance_service import AcceptanceService
from services.interfaces import IBettingService
from services.result import Result
from services.settlement_service import SettlementService
from services.wager_service import WagerService
from services.wallet_service import WalletService


class BettingService(IBettingService):
    """Encapsulates coin wagering on matches: standard bets, PvP bets and their settlement."""

    def __init__(
        self,
        bet_repo: IBetRepository,
        player_repo: IPlayerRepository,
        match_repo: IMatchRepository,
        wallet: WalletService | None = None,
    ):
        self.bet_repo = bet_repo
        self.player_repo = player_repo
        self.match_repo = match_repo
        self.wallet = wallet if wallet is not None else WalletService(player_repo)
        self.wagers = WagerService(bet_repo, match_repo, self.wallet)
        self.acceptance = AcceptanceService(bet_repo, match_repo, self.wallet)
        self.settlement = SettlementService(bet_repo, match_repo)

    # --- Commands ---

    def place_standard_bet(
        self, player_id: str, match_id: str, bet_type: str, amount: int, details: dict
    ) -> Result[Bet]:
        """Bet against the house; see WagerService.place_standard_bet."""
        return self.wagers.place_standard_bet(player_id, match_id, bet_type, amount, details)

    def place_pvp_bet(
        self, proposer_id: str, match_id: str, bet_type: str, amount: int, details: dict
    ) -> Result[Bet]:
        """Propose a bet to teammates; see WagerService.place_pvp_bet."""
        return self.wagers.place_pvp_bet(proposer_id, match_id, bet_type, amount, details)

    def accept_pvp_bet(self, bet_id: str, accepter_id: str) -> Result[Bet]:
        return self.acceptance.accept_pvp_bet(bet_id, accepter_id)

    def resolve_bets_for_match(self, match_id: str) -> list[Result[Bet]]:
        return self.settlement.resolve_bets_for_match(match_id)

    def resolve_custom_pvp_bet(self, bet_id: str, resolution: str) -> Result[Bet]:
        return self.settlement.resolve_custom_pvp_bet(bet_id, resolution)

    # --- Queries ---

    def get_player_bets(self, player_id: str) -> list[Bet]:
        """Every bet the player has coins in, newest first."""
        return self.bet_repo.get_player_bets(player_id)

    def get_open_pvp_bets(self, excluding_player_id: str | None = None) -> list[Bet]:
        """Proposals another player could accept right now."""
        return self.bet_repo.get_open_pvp_bets(excluding_player_id)

    def get_custom_pvp_bets_for_match(self, match_id: str) -> list[Bet]:
        """Custom PvP bets on a match still waiting for a manual verdict."""
        return self.bet_repo.get_open_custom_pvp_bets_for_match(match_id)
