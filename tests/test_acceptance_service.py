"""Tests for PvP bet acceptance."""

import sqlite3

import pytest

from services import error_codes


SCORES_BRUNO = {"playerId": "p_bruno", "event": "scores"}


@pytest.fixture
def proposal(betting_service, roster, open_match):
    """Alice proposes 100 coins that Bruno scores (x3.5)."""
    return betting_service.place_pvp_bet("p_alice", open_match.match_id, "player_event", 100, SCORES_BRUNO).unwrap()


class TestAcceptPvpBet:
    def test_accept_escrows_priced_stake(self, betting_service, proposal, balance):
        result = betting_service.accept_pvp_bet(proposal.bet_id, "p_carla")

        assert result.success, result.error
        bet = result.value
        assert bet.status == "active"
        assert bet.accepter_id == "p_carla"
        assert bet.accepter_stake == 350
        assert balance("p_carla") == 650
        assert balance("p_alice") == 900

    def test_acceptance_is_persisted(self, betting_service, bet_repository, proposal):
        betting_service.accept_pvp_bet(proposal.bet_id, "p_carla")
        stored = bet_repository.get_bet(proposal.bet_id)
        assert stored.status == "active"
        assert stored.accepter_id == "p_carla"
        assert stored.accepter_stake == 350

    def test_custom_odds_price_the_stake(self, betting_service, roster, open_match, balance):
        bet = betting_service.place_pvp_bet(
            "p_alice",
            open_match.match_id,
            "custom_pvp",
            11,
            {"custom_description": "Keeper scores", "custom_odds": 2.5},
        ).unwrap()

        accepted = betting_service.accept_pvp_bet(bet.bet_id, "p_bruno").unwrap()

        assert accepted.accepter_stake == 28
        assert balance("p_bruno") == 972

    def test_unknown_bet(self, betting_service, roster):
        assert betting_service.accept_pvp_bet("nope", "p_bruno").error_code == error_codes.BET_NOT_FOUND

    def test_cannot_accept_own_bet(self, betting_service, proposal, balance):
        result = betting_service.accept_pvp_bet(proposal.bet_id, "p_alice")
        assert result.error_code == error_codes.VALIDATION_ERROR
        assert balance("p_alice") == 900

    def test_cannot_accept_twice(self, betting_service, proposal, balance):
        betting_service.accept_pvp_bet(proposal.bet_id, "p_carla").unwrap()

        result = betting_service.accept_pvp_bet(proposal.bet_id, "p_dani")

        assert result.error_code == error_codes.BET_NOT_OPEN
        assert balance("p_dani") == 1000

    def test_standard_bets_are_not_acceptable(self, betting_service, roster, open_match):
        bet = betting_service.place_standard_bet(
            "p_alice", open_match.match_id, "result", 10, {"us": 1, "them": 0}
        ).unwrap()
        assert betting_service.accept_pvp_bet(bet.bet_id, "p_bruno").error_code == error_codes.BET_NOT_OPEN

    def test_accepter_short_of_coins(self, betting_service, player_repository, proposal, balance):
        player_repository.set_coins("p_dani", 349)

        result = betting_service.accept_pvp_bet(proposal.bet_id, "p_dani")

        assert result.error_code == error_codes.INSUFFICIENT_FUNDS
        assert result.error.startswith("Not enough coins to accept")
        assert balance("p_dani") == 349

    def test_unknown_accepter(self, betting_service, proposal):
        assert betting_service.accept_pvp_bet(proposal.bet_id, "ghost").error_code == error_codes.PLAYER_NOT_FOUND


class TestAcceptanceReversal:
    def test_lost_race_refunds_accepter(self, betting_service, bet_repository, proposal, balance, monkeypatch):
        """Another accepter flips the status between our read and our write."""
        monkeypatch.setattr(bet_repository, "mark_accepted", lambda bet_id, accepter_id, stake: False)

        result = betting_service.accept_pvp_bet(proposal.bet_id, "p_carla")

        assert result.error_code == error_codes.BET_NOT_OPEN
        assert balance("p_carla") == 1000

    def test_store_failure_refunds_accepter(self, betting_service, bet_repository, proposal, balance, monkeypatch):
        def boom(bet_id, accepter_id, stake):
            raise sqlite3.OperationalError("database is locked")

        monkeypatch.setattr(bet_repository, "mark_accepted", boom)

        result = betting_service.accept_pvp_bet(proposal.bet_id, "p_carla")

        assert result.error_code == error_codes.STORE_ERROR
        assert balance("p_carla") == 1000
        assert bet_repository.get_bet(proposal.bet_id).status == "proposed"

    def test_cas_rejects_second_flip(self, bet_repository, proposal):
        assert bet_repository.mark_accepted(proposal.bet_id, "p_carla", 350) is True
        assert bet_repository.mark_accepted(proposal.bet_id, "p_dani", 350) is False
        assert bet_repository.get_bet(proposal.bet_id).accepter_id == "p_carla"


class TestAcceptanceAfterResult:
    def test_played_match_closes_acceptance(self, betting_service, match_service, proposal, balance):
        """A result recorded without settlement must not let anyone take the known side."""
        match_service.record_result(proposal.match_id, 1, 0)

        result = betting_service.accept_pvp_bet(proposal.bet_id, "p_carla")

        assert result.error_code == error_codes.BETTING_CLOSED
        assert balance("p_carla") == 1000

        [settled] = betting_service.resolve_bets_for_match(proposal.match_id)
        assert settled.value.status == "void"
        assert balance("p_alice") == 1000
        assert balance("p_carla") == 1000

    def test_result_between_check_and_write_refunds(
        self, betting_service, match_service, match_repository, proposal, balance, monkeypatch
    ):
        """The result lands after the match check but before the status flip."""
        real_get = match_repository.get_by_id
        calls = []

        def get_then_record(match_id):
            calls.append(match_id)
            if len(calls) == 1:
                found = real_get(match_id)
                match_service.record_result(match_id, 0, 0)
                return found
            return real_get(match_id)

        monkeypatch.setattr(match_repository, "get_by_id", get_then_record)

        result = betting_service.accept_pvp_bet(proposal.bet_id, "p_carla")

        assert result.error_code == error_codes.BETTING_CLOSED
        assert balance("p_carla") == 1000
        assert betting_service.bet_repo.get_bet(proposal.bet_id).status == "proposed"

    def test_cas_refuses_played_match(self, bet_repository, match_service, proposal):
        match_service.record_result(proposal.match_id, 2, 2)
        assert bet_repository.mark_accepted(proposal.bet_id, "p_carla", 350) is False
