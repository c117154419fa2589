"""Tests for bet placement and escrow."""

import sqlite3

import pytest

from services import error_codes


RESULT_3_1 = {"us": 3, "them": 1}


class TestPlaceStandardBet:
    def test_places_pending_bet_and_escrows_stake(self, betting_service, roster, open_match, balance):
        result = betting_service.place_standard_bet("p_alice", open_match.match_id, "result", 100, RESULT_3_1)

        assert result.success, result.error
        bet = result.value
        assert bet.status == "pending"
        assert bet.bet_mode == "standard"
        assert bet.player_id == "p_alice"
        assert bet.proposer_id is None
        assert bet.created_at is not None
        assert balance("p_alice") == 900

    def test_bet_is_persisted(self, betting_service, bet_repository, roster, open_match):
        bet = betting_service.place_standard_bet(
            "p_alice", open_match.match_id, "player_event", 20, {"playerId": "p_bruno", "event": "scores"}
        ).unwrap()

        stored = bet_repository.get_bet(bet.bet_id)
        assert stored.details.player_id == "p_bruno"
        assert stored.details.event == "scores"
        assert stored.amount == 20

    @pytest.mark.parametrize("amount", [0, -10, 2.5, "100", True])
    def test_invalid_amount_rejected_before_debit(self, betting_service, roster, open_match, balance, amount):
        result = betting_service.place_standard_bet("p_alice", open_match.match_id, "result", amount, RESULT_3_1)
        assert result.error_code == error_codes.INVALID_BET_DETAILS
        assert balance("p_alice") == 1000

    def test_malformed_details_rejected_before_debit(self, betting_service, roster, open_match, balance):
        result = betting_service.place_standard_bet(
            "p_alice", open_match.match_id, "player_event", 50, {"playerId": "p_bruno", "event": "dances"}
        )
        assert result.error_code == error_codes.INVALID_BET_DETAILS
        assert balance("p_alice") == 1000

    def test_custom_bets_cannot_be_standard(self, betting_service, roster, open_match, balance):
        result = betting_service.place_standard_bet(
            "p_alice",
            open_match.match_id,
            "custom_pvp",
            50,
            {"custom_description": "It rains", "custom_odds": 2},
        )
        assert result.error_code == error_codes.INVALID_BET_DETAILS
        assert balance("p_alice") == 1000

    def test_insufficient_funds(self, betting_service, roster, open_match, balance):
        result = betting_service.place_standard_bet("p_alice", open_match.match_id, "result", 1001, RESULT_3_1)
        assert result.error_code == error_codes.INSUFFICIENT_FUNDS
        assert balance("p_alice") == 1000

    def test_unknown_player(self, betting_service, roster, open_match):
        result = betting_service.place_standard_bet("ghost", open_match.match_id, "result", 10, RESULT_3_1)
        assert result.error_code == error_codes.PLAYER_NOT_FOUND

    def test_unknown_match(self, betting_service, roster, balance):
        result = betting_service.place_standard_bet("p_alice", "no-such-match", "result", 10, RESULT_3_1)
        assert result.error_code == error_codes.MATCH_NOT_FOUND
        assert balance("p_alice") == 1000

    def test_betting_closed_once_played(self, betting_service, match_service, roster, open_match, balance):
        match_service.record_result(open_match.match_id, 1, 0)
        result = betting_service.place_standard_bet("p_alice", open_match.match_id, "result", 10, RESULT_3_1)
        assert result.error_code == error_codes.BETTING_CLOSED
        assert balance("p_alice") == 1000


class TestPlacePvpBet:
    def test_proposal_starts_without_accepter(self, betting_service, roster, open_match, balance):
        bet = betting_service.place_pvp_bet("p_alice", open_match.match_id, "result", 100, RESULT_3_1).unwrap()

        assert bet.status == "proposed"
        assert bet.bet_mode == "pvp"
        assert bet.proposer_id == "p_alice"
        assert bet.accepter_id is None
        assert bet.player_id is None
        assert balance("p_alice") == 900

    def test_custom_pvp_bet(self, betting_service, roster, open_match):
        bet = betting_service.place_pvp_bet(
            "p_alice",
            open_match.match_id,
            "custom_pvp",
            30,
            {"custom_description": "Bruno scores a header", "custom_odds": 3},
        ).unwrap()
        assert bet.details.custom_odds == 3.0

    @pytest.mark.parametrize(
        "details",
        [
            {"custom_description": "", "custom_odds": 3},
            {"custom_description": "x", "custom_odds": 1},
            {"custom_description": "x"},
        ],
    )
    def test_invalid_custom_fields(self, betting_service, roster, open_match, balance, details):
        result = betting_service.place_pvp_bet("p_alice", open_match.match_id, "custom_pvp", 30, details)
        assert result.error_code == error_codes.INVALID_BET_DETAILS
        assert balance("p_alice") == 1000


class TestEscrowReversal:
    """A failure after the debit must hand the stake back."""

    def test_store_failure_refunds_stake(self, betting_service, bet_repository, roster, open_match, balance, monkeypatch):
        def boom(bet):
            raise sqlite3.OperationalError("disk I/O error")

        monkeypatch.setattr(bet_repository, "create_bet", boom)

        result = betting_service.place_standard_bet("p_alice", open_match.match_id, "result", 100, RESULT_3_1)

        assert result.error_code == error_codes.STORE_ERROR
        assert "returned" in result.error
        assert balance("p_alice") == 1000

    def test_store_failure_refunds_pvp_stake(self, betting_service, bet_repository, roster, open_match, balance, monkeypatch):
        monkeypatch.setattr(bet_repository, "create_bet", lambda bet: (_ for _ in ()).throw(RuntimeError("boom")))

        result = betting_service.place_pvp_bet("p_bruno", open_match.match_id, "result", 250, RESULT_3_1)

        assert not result.success
        assert balance("p_bruno") == 1000
        assert betting_service.get_player_bets("p_bruno") == []
