"""
Domain models - pure data structures representing business entities.
"""

from domain.models.bet import Bet, CustomDetails, PlayerEventDetails, ResultDetails, parse_details
from domain.models.match import Match, MatchResult, PlayerStatLine
from domain.models.player import Player

__all__ = [
    "Bet",
    "CustomDetails",
    "Match",
    "MatchResult",
    "Player",
    "PlayerEventDetails",
    "PlayerStatLine",
    "ResultDetails",
    "parse_details",
]
