"""
Repository layer for data access abstraction.
"""

from repositories.base_repository import BaseRepository
from repositories.bet_repository import BetRepository
from repositories.interfaces import (
    IBetRepository,
    IMatchRepository,
    IPlayerRepository,
)
from repositories.match_repository import MatchRepository
from repositories.player_repository import PlayerRepository

__all__ = [
    "BaseRepository",
    "PlayerRepository",
    "MatchRepository",
    "BetRepository",
    "IPlayerRepository",
    "IBetRepository",
    "IMatchRepository",
]
