"""
Application services layer.

Services orchestrate business operations using repositories and domain models.
"""

from services.betting_service import BettingService
from services.match_service import MatchService
from services.player_service import PlayerService
from services.scoreboard_service import ScoreboardService
from services.wallet_service import WalletService

# Result type for consistent error handling
from services.result import Result

# Service interfaces (ABCs)
from services.interfaces import (
    IBettingService,
    IMatchService,
    IPlayerService,
    IScoreboardService,
)

__all__ = [
    # Concrete services
    "PlayerService",
    "MatchService",
    "BettingService",
    "ScoreboardService",
    "WalletService",
    # Result type
    "Result",
    # Interfaces
    "IPlayerService",
    "IMatchService",
    "IBettingService",
    "IScoreboardService",
]
