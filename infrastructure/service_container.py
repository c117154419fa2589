"""
Service container for dependency injection and initialization.

This module centralizes repository and service creation so the CLI, tests
and any UI adapter wire the application the same way.

Usage:
    container = ServiceContainer(config)
    container.initialize()

    # Access services
    match_service = container.match_service
    betting_service = container.betting_service
"""

import logging
from dataclasses import dataclass
from typing import TYPE_CHECKING, Any

import config as app_config

if TYPE_CHECKING:
    from services.betting_service import BettingService
    from services.match_service import MatchService
    from services.player_service import PlayerService
    from services.scoreboard_service import ScoreboardService
    from services.wallet_service import WalletService

from database import Database

# Repositories
from repositories.bet_repository import BetRepository
from repositories.match_repository import MatchRepository
from repositories.player_repository import PlayerRepository

logger = logging.getLogger("tiesada.infrastructure.container")


@dataclass
class RepositoryContainer:
    """Container for all repositories."""

    player: PlayerRepository | None = None
    match: MatchRepository | None = None
    bet: BetRepository | None = None


@dataclass
class ServiceConfig:
    """Configuration for service initialization."""

    # Database
    db_path: str = app_config.DB_PATH

    # Economy settings
    starting_coins: int = app_config.STARTING_COINS

    # Settle bets as soon as a result is recorded
    auto_resolve_on_result: bool = app_config.AUTO_RESOLVE_ON_RESULT


class ServiceContainer:
    """
    Central container for all application services.

    Handles proper initialization order and dependency injection.

    Example:
        container = ServiceContainer(ServiceConfig(db_path="team.db"))
        container.initialize()

        result = container.betting_service.place_standard_bet(...)
    """

    def __init__(self, config: ServiceConfig | None = None):
        """
        Initialize the container with configuration.

        Args:
            config: Service configuration (uses defaults if None)
        """
        self.config = config or ServiceConfig()
        self._initialized = False
        self._repos = RepositoryContainer()

        self._database: Database | None = None
        self._services: dict[str, Any] = {}

    @property
    def is_initialized(self) -> bool:
        """Check if container has been initialized."""
        return self._initialized

    def initialize(self) -> None:
        """
        Initialize all services in correct order.

        This method is idempotent - calling it multiple times has no effect.
        """
        if self._initialized:
            logger.debug("ServiceContainer already initialized, skipping")
            return

        logger.info("Initializing ServiceContainer...")

        self._init_database()
        self._init_repositories()
        self._init_economy_services()
        self._init_match_services()

        self._initialized = True
        logger.info("ServiceContainer initialization complete")

    def _init_database(self) -> None:
        """Create the schema and run migrations."""
        logger.debug(f"Initializing database at {self.config.db_path}")
        self._database = Database(self.config.db_path)

    def _init_repositories(self) -> None:
        logger.debug("Initializing repositories")

        db_path = self.config.db_path
        self._repos.player = PlayerRepository(db_path)
        self._repos.match = MatchRepository(db_path)
        self._repos.bet = BetRepository(db_path)

    def _init_economy_services(self) -> None:
        """Initialize wallet and betting services."""
        logger.debug("Initializing economy services")

        from services.betting_service import BettingService
        from services.player_service import PlayerService
        from services.wallet_service import WalletService

        self._services["wallet"] = WalletService(self._repos.player)

        self._services["player"] = PlayerService(
            player_repo=self._repos.player,
            starting_coins=self.config.starting_coins,
        )

        self._services["betting"] = BettingService(
            bet_repo=self._repos.bet,
            player_repo=self._repos.player,
            match_repo=self._repos.match,
            wallet=self._services["wallet"],
        )

    def _init_match_services(self) -> None:
        """Initialize match-related services; depends on betting for settlement."""
        logger.debug("Initializing match services")

        from services.match_service import MatchService
        from services.scoreboard_service import ScoreboardService

        self._services["match"] = MatchService(
            match_repo=self._repos.match,
            betting_service=self._services["betting"],
            auto_resolve_on_result=self.config.auto_resolve_on_result,
        )

        self._services["scoreboard"] = ScoreboardService(
            player_repo=self._repos.player,
            match_repo=self._repos.match,
        )

    # =========================================================================
    # Service accessors
    # =========================================================================

    @property
    def player_repo(self) -> PlayerRepository:
        return self._repos.player

    @property
    def match_repo(self) -> MatchRepository:
        return self._repos.match

    @property
    def bet_repo(self) -> BetRepository:
        return self._repos.bet

    @property
    def wallet_service(self) -> "WalletService | None":
        return self._services.get("wallet")

    @property
    def player_service(self) -> "PlayerService | None":
        return self._services.get("player")

    @property
    def betting_service(self) -> "BettingService | None":
        return self._services.get("betting")

    @property
    def match_service(self) -> "MatchService | None":
        return self._services.get("match")

    @property
    def scoreboard_service(self) -> "ScoreboardService | None":
        return self._services.get("scoreboard")
