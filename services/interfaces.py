"""
Service layer interfaces (ABCs).

These abstract base classes define the contracts for the services callers
(CLI, UI adapters, tests) talk to. Concrete services inherit from them so
alternative implementations and test doubles share one API.

Usage:
    class MyService(IMyService):
        def my_method(self, param: str) -> Result[dict]:
            ...
"""

from abc import ABC, abstractmethod
from typing import TYPE_CHECKING, Any

if TYPE_CHECKING:
    from domain.models.bet import Bet
    from domain.models.match import Match
    from domain.models.player import Player
    from services.result import Result


class IPlayerService(ABC):
    """Interface for roster registration and lookups."""

    @abstractmethod
    def register_player(
        self,
        name: str,
        position: str | None = None,
        photo_url: str | None = None,
        player_id: str | None = None,
        coins: int | None = None,
    ) -> "Result[Player]":
        """Add a player to the roster with a starting wallet."""
        ...

    @abstractmethod
    def get_player(self, player_id: str) -> "Result[Player]":
        """Get a player by id."""
        ...

    @abstractmethod
    def list_players(self) -> "list[Player]":
        """All roster players ordered by name."""
        ...

    @abstractmethod
    def get_leaderboard(self, limit: int = 20) -> "list[Player]":
        """Players ordered by coins descending."""
        ...


class IMatchService(ABC):
    """Interface for fixtures, attendance, lineups and result recording."""

    @abstractmethod
    def create_match(
        self,
        opponent: str,
        date: str,
        emoji: str | None = None,
        attending: list[str] | None = None,
    ) -> "Result[Match]":
        """Schedule a new fixture."""
        ...

    @abstractmethod
    def get_match(self, match_id: str) -> "Result[Match]":
        """Get a match by id."""
        ...

    @abstractmethod
    def list_matches(self) -> "list[Match]":
        """All matches, oldest fixture first."""
        ...

    @abstractmethod
    def update_match(self, match_id: str, **fields: Any) -> "Result[Match]":
        """Edit descriptive fields (opponent, date, emoji, video_url)."""
        ...

    @abstractmethod
    def toggle_attendance(self, match_id: str, player_id: str) -> "Result[Match]":
        """Add or remove a player from the attending list."""
        ...

    @abstractmethod
    def set_lineup(self, match_id: str, lineup: dict[str, str | None]) -> "Result[Match]":
        """Assign attending players to lineup positions."""
        ...

    @abstractmethod
    def delete_match(self, match_id: str) -> "Result[bool]":
        """Delete a match that has no open bets."""
        ...

    @abstractmethod
    def record_result(
        self,
        match_id: str,
        us: int,
        them: int,
        stats: list[dict] | None = None,
        video_url: str | None = None,
    ) -> "Result[dict[str, Any]]":
        """Mark a match as played and settle its bets."""
        ...


class IBettingService(ABC):
    """Interface for coin wagering on matches."""

    @abstractmethod
    def place_standard_bet(
        self, player_id: str, match_id: str, bet_type: str, amount: int, details: dict
    ) -> "Result[Bet]":
        """Place a bet against the house."""
        ...

    @abstractmethod
    def place_pvp_bet(
        self, proposer_id: str, match_id: str, bet_type: str, amount: int, details: dict
    ) -> "Result[Bet]":
        """Propose a bet to another player."""
        ...

    @abstractmethod
    def accept_pvp_bet(self, bet_id: str, accepter_id: str) -> "Result[Bet]":
        """Take the other side of a proposed PvP bet."""
        ...

    @abstractmethod
    def resolve_bets_for_match(self, match_id: str) -> "list[Result[Bet]]":
        """Settle all open bets for a played match."""
        ...

    @abstractmethod
    def resolve_custom_pvp_bet(self, bet_id: str, resolution: str) -> "Result[Bet]":
        """Apply a manual verdict to a custom PvP bet."""
        ...

    @abstractmethod
    def get_player_bets(self, player_id: str) -> "list[Bet]":
        """Bets the player has coins in, newest first."""
        ...

    @abstractmethod
    def get_open_pvp_bets(self, excluding_player_id: str | None = None) -> "list[Bet]":
        """Proposed PvP bets not made by the given player."""
        ...

    @abstractmethod
    def get_custom_pvp_bets_for_match(self, match_id: str) -> "list[Bet]":
        """Open custom PvP bets of a match."""
        ...


class IScoreboardService(ABC):
    """Interface for season statistics."""

    @abstractmethod
    def get_player_stats(self) -> "list[Any]":
        """Aggregated per-player stats, best MVP score first."""
        ...
