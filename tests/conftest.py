"""
Pytest fixtures for tests.

Performance optimization: Uses a session-scoped schema template so the schema
and migrations are created once per session. Each test copies the resulting
database file instead of re-initializing it.

Roster constants live here so test modules agree on player ids and balances.
"""

import shutil

import pytest

from database import Database
from repositories.bet_repository import BetRepository
from repositories.match_repository import MatchRepository
from repositories.player_repository import PlayerRepository
from services.betting_service import BettingService
from services.match_service import MatchService
from services.player_service import PlayerService
from services.scoreboard_service import ScoreboardService
from services.wallet_service import WalletService


# =============================================================================
# CENTRALIZED CONSTANTS
# =============================================================================

STARTING_BALANCE = 1000
"""Coins every roster fixture player starts with."""

ROSTER = {
    "p_alice": "Alice",
    "p_bruno": "Bruno",
    "p_carla": "Carla",
    "p_dani": "Dani",
}
"""Roster fixture: player_id -> name."""


@pytest.fixture(scope="session")
def _schema_template_path(tmp_path_factory):
    """
    Create a schema template database once per test session.

    Tests copy from this template instead of running schema initialization each time.
    """
    template_dir = tmp_path_factory.mktemp("schema_template")
    template_path = str(template_dir / "template.db")
    Database(template_path)
    yield template_path


@pytest.fixture
def temp_db_path(tmp_path):
    """Create a temporary database path (no schema)."""
    path = str(tmp_path / "temp.db")
    yield path


@pytest.fixture
def repo_db_path(_schema_template_path, tmp_path):
    """
    Create a temporary database with initialized schema for repository tests.

    Fast: file copy instead of schema initialization.
    """
    test_db_path = str(tmp_path / "test.db")
    shutil.copy2(_schema_template_path, test_db_path)
    yield test_db_path


# =============================================================================
# REPOSITORY FIXTURES
# =============================================================================


@pytest.fixture
def player_repository(repo_db_path):
    """Create a player repository with temp database."""
    return PlayerRepository(repo_db_path)


@pytest.fixture
def match_repository(repo_db_path):
    """Create a match repository with temp database."""
    return MatchRepository(repo_db_path)


@pytest.fixture
def bet_repository(repo_db_path):
    """Create a bet repository with temp database."""
    return BetRepository(repo_db_path)


# =============================================================================
# SERVICE FIXTURES
# =============================================================================


@pytest.fixture
def wallet_service(player_repository):
    return WalletService(player_repository)


@pytest.fixture
def betting_service(bet_repository, player_repository, match_repository, wallet_service):
    """Create a betting service with all dependencies wired."""
    return BettingService(
        bet_repo=bet_repository,
        player_repo=player_repository,
        match_repo=match_repository,
        wallet=wallet_service,
    )


@pytest.fixture
def match_service(match_repository):
    """Create a match service without betting.

    For tests that need settlement on record, use match_service_with_betting.
    """
    return MatchService(match_repo=match_repository)


@pytest.fixture
def match_service_with_betting(match_repository, betting_service):
    """Create a match service that settles bets when a result is recorded."""
    return MatchService(
        match_repo=match_repository,
        betting_service=betting_service,
        auto_resolve_on_result=True,
    )


@pytest.fixture
def player_service(player_repository):
    return PlayerService(player_repository, starting_coins=STARTING_BALANCE)


@pytest.fixture
def scoreboard_service(player_repository, match_repository):
    return ScoreboardService(player_repository, match_repository)


# =============================================================================
# DATA FIXTURES
# =============================================================================


@pytest.fixture
def roster(player_repository):
    """Register the ROSTER players with STARTING_BALANCE coins each.

    Returns the list of player ids in ROSTER order.
    """
    for player_id, name in ROSTER.items():
        player_repository.add(player_id=player_id, name=name, coins=STARTING_BALANCE)
    return list(ROSTER)


@pytest.fixture
def open_match(match_service):
    """An unplayed fixture everyone can bet on."""
    return match_service.create_match("Atletico Barrio", "2024-05-11T10:00").unwrap()


@pytest.fixture
def balance(player_repository):
    """Shortcut: balance("p_alice") -> current coins."""
    return player_repository.get_balance
