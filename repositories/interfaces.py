"""
Abstract repository interfaces for data access.

These interfaces define the contracts implemented by concrete repositories.
"""

from abc import ABC, abstractmethod

from domain.models.bet import Bet
from domain.models.match import Match
from domain.models.player import Player


class IPlayerRepository(ABC):
    @abstractmethod
    def add(
        self,
        player_id: str,
        name: str,
        position: str | None = None,
        photo_url: str | None = None,
        coins: int = 0,
    ) -> None: ...

    @abstractmethod
    def get_by_id(self, player_id: str) -> Player | None: ...

    @abstractmethod
    def get_all(self) -> list[Player]: ...

    @abstractmethod
    def get_leaderboard(self, limit: int = 20) -> list[Player]: ...

    @abstractmethod
    def exists(self, player_id: str) -> bool: ...

    @abstractmethod
    def get_balance(self, player_id: str) -> int | None:
        """Return the player's coins, or None if the player does not exist."""
        ...

    @abstractmethod
    def set_coins(self, player_id: str, coins: int) -> None: ...

    @abstractmethod
    def debit_if_sufficient(self, player_id: str, amount: int) -> bool:
        """Atomically subtract amount if the balance covers it. Returns True on success."""
        ...

    @abstractmethod
    def credit(self, player_id: str, amount: int) -> bool:
        """Add amount to the balance. Returns False if the player does not exist."""
        ...


class IMatchRepository(ABC):
    @abstractmethod
    def create(self, match: Match) -> None: ...

    @abstractmethod
    def get_by_id(self, match_id: str) -> Match | None: ...

    @abstractmethod
    def get_all(self) -> list[Match]: ...

    @abstractmethod
    def get_played(self) -> list[Match]: ...

    @abstractmethod
    def update_fields(self, match_id: str, fields: dict) -> bool: ...

    @abstractmethod
    def update_attendance(self, match_id: str, attending: list[str]) -> bool: ...

    @abstractmethod
    def update_lineup(self, match_id: str, lineup: dict[str, str | None]) -> bool: ...

    @abstractmethod
    def record_result_atomic(self, match: Match) -> None:
        """Flip an unplayed match to played with its result and stats."""
        ...

    @abstractmethod
    def delete_with_settled_bets(self, match_id: str) -> int:
        """Delete a match and its settled bets in one transaction. Raises ValueError while any bet is open."""
        ...


class IBetRepository(ABC):
    @abstractmethod
    def create_bet(self, bet: Bet) -> Bet: ...

    @abstractmethod
    def get_bet(self, bet_id: str) -> Bet | None: ...

    @abstractmethod
    def get_bets_for_match(self, match_id: str, statuses: tuple[str, ...] | None = None) -> list[Bet]: ...

    @abstractmethod
    def get_player_bets(self, player_id: str) -> list[Bet]: ...

    @abstractmethod
    def get_open_pvp_bets(self, excluding_player_id: str | None = None) -> list[Bet]: ...

    @abstractmethod
    def get_open_custom_pvp_bets_for_match(self, match_id: str) -> list[Bet]: ...

    @abstractmethod
    def mark_accepted(self, bet_id: str, accepter_id: str, accepter_stake: int) -> bool:
        """Flip a proposed bet to active. Returns False if it was no longer proposed."""
        ...

    @abstractmethod
    def settle_bet_atomic(
        self,
        bet_id: str,
        expected_status: str,
        new_status: str,
        credits: dict[str, int],
        payout: int | None = None,
    ) -> Bet:
        """Apply a terminal status and the matching coin credits in one transaction."""
        ...
