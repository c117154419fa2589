"""Tests for automatic bet settlement."""

import pytest

from domain.models.bet import Bet, PlayerEventDetails, ResultDetails
from domain.models.match import Match, MatchResult, PlayerStatLine
from services import error_codes
from services.settlement_service import is_winning_bet


def _event_bet(player_id, event):
    return Bet(
        bet_id="b1",
        match_id="m1",
        bet_type="player_event",
        amount=10,
        details=PlayerEventDetails(player_id, event),
        bet_mode="standard",
        status="pending",
        player_id="p_x",
    )


def _played(stats=(), us=2, them=1):
    return Match(
        match_id="m1",
        opponent="Rivals",
        date="2024-01-01",
        played=True,
        result=MatchResult(us, them),
        stats=list(stats),
    )


class TestIsWinningBet:
    def test_exact_score_wins(self):
        bet = _event_bet("p1", "scores")
        bet.bet_type = "result"
        bet.details = ResultDetails(2, 1)
        assert is_winning_bet(bet, _played())
        bet.details = ResultDetails(1, 2)
        assert not is_winning_bet(bet, _played())

    @pytest.mark.parametrize(
        "event,line,expected",
        [
            ("scores", PlayerStatLine("p1", goals=1), True),
            ("scores", PlayerStatLine("p1"), False),
            ("assists", PlayerStatLine("p1", assists=2), True),
            ("assists", PlayerStatLine("p1", goals=3), False),
            ("gets_card", PlayerStatLine("p1", yellow_cards=1), True),
            ("gets_card", PlayerStatLine("p1", red_cards=1), True),
            ("gets_card", PlayerStatLine("p1"), False),
            ("no_card", PlayerStatLine("p1"), True),
            ("no_card", PlayerStatLine("p1", yellow_cards=1), False),
            ("cagadas", PlayerStatLine("p1", cagadas=1), True),
            ("cagadas", PlayerStatLine("p1"), False),
        ],
    )
    def test_player_events(self, event, line, expected):
        assert is_winning_bet(_event_bet("p1", event), _played([line])) is expected

    def test_player_without_stat_line_counts_as_zeros(self):
        match = _played([PlayerStatLine("someone_else", goals=4)])
        assert not is_winning_bet(_event_bet("p1", "scores"), match)
        assert is_winning_bet(_event_bet("p1", "no_card"), match)

    def test_custom_bets_cannot_be_evaluated(self):
        bet = _event_bet("p1", "scores")
        bet.bet_type = "custom_pvp"
        with pytest.raises(ValueError):
            is_winning_bet(bet, _played())


class TestResolveBetsForMatch:
    def test_unplayed_match_is_a_no_op(self, betting_service, roster, open_match, balance):
        betting_service.place_standard_bet("p_alice", open_match.match_id, "result", 100, {"us": 1, "them": 0})

        assert betting_service.resolve_bets_for_match(open_match.match_id) == []
        assert balance("p_alice") == 900

    def test_missing_match_is_a_no_op(self, betting_service, roster):
        assert betting_service.resolve_bets_for_match("no-such-match") == []

    def test_standard_win_and_loss(self, betting_service, match_service, roster, open_match, balance):
        mid = open_match.match_id
        win = betting_service.place_standard_bet("p_alice", mid, "result", 100, {"us": 2, "them": 0}).unwrap()
        loss = betting_service.place_standard_bet("p_bruno", mid, "result", 100, {"us": 0, "them": 2}).unwrap()
        match_service.record_result(mid, 2, 0)

        results = betting_service.resolve_bets_for_match(mid)

        by_id = {r.value.bet_id: r.value for r in results}
        assert by_id[win.bet_id].status == "won"
        assert by_id[win.bet_id].payout == 500
        assert by_id[win.bet_id].resolved_at is not None
        assert by_id[loss.bet_id].status == "lost"
        assert by_id[loss.bet_id].payout == 0
        assert balance("p_alice") == 1400
        assert balance("p_bruno") == 900

    def test_conservation_for_no_card(self, betting_service, match_service, roster, open_match, balance):
        mid = open_match.match_id
        betting_service.place_standard_bet("p_alice", mid, "player_event", 100, {"playerId": "p_bruno", "event": "no_card"})
        match_service.record_result(mid, 1, 1, [{"playerId": "p_bruno", "goals": 1}])

        [result] = betting_service.resolve_bets_for_match(mid)

        # 100 x 1/3 = 33.33 -> 33
        assert result.value.payout == 33
        assert balance("p_alice") == 933

    def test_legacy_stat_aliases_settle(self, betting_service, match_service, match_repository, roster, open_match, balance):
        """Stats stored with short field names still drive player-event bets."""
        mid = open_match.match_id
        betting_service.place_standard_bet("p_alice", mid, "player_event", 10, {"playerId": "p_bruno", "event": "gets_card"})
        betting_service.place_standard_bet("p_carla", mid, "player_event", 10, {"playerId": "p_bruno", "event": "cagadas"})
        match_service.record_result(mid, 0, 3, [{"player_id": "p_bruno", "yc": 1, "errors": 2}])

        results = betting_service.resolve_bets_for_match(mid)

        assert all(r.value.status == "won" for r in results)
        assert balance("p_alice") == 1020
        assert balance("p_carla") == 1010

    def test_pvp_zero_sum(self, betting_service, match_service, roster, open_match, balance):
        mid = open_match.match_id
        bet = betting_service.place_pvp_bet("p_alice", mid, "result", 100, {"us": 1, "them": 0}).unwrap()
        betting_service.accept_pvp_bet(bet.bet_id, "p_bruno").unwrap()
        total_before = balance("p_alice") + balance("p_bruno")
        match_service.record_result(mid, 1, 0)

        [result] = betting_service.resolve_bets_for_match(mid)

        assert result.value.status == "won"
        assert result.value.payout == 600
        assert balance("p_alice") == 1500
        assert balance("p_bruno") == 500
        assert balance("p_alice") + balance("p_bruno") == total_before + 600

    def test_settlement_pays_persisted_stake(self, betting_service, match_service, bet_repository, roster, open_match, balance):
        """A stake frozen at acceptance is paid out even if pricing changes later."""
        mid = open_match.match_id
        bet = betting_service.place_pvp_bet("p_alice", mid, "result", 100, {"us": 1, "them": 0}).unwrap()
        bet_repository.mark_accepted(bet.bet_id, "p_bruno", 123)
        match_service.record_result(mid, 0, 0)

        [result] = betting_service.resolve_bets_for_match(mid)

        assert result.value.status == "lost"
        assert result.value.payout == 223
        assert balance("p_bruno") == 1223

    def test_unaccepted_proposal_is_voided(self, betting_service, match_service, roster, open_match, balance):
        mid = open_match.match_id
        bet = betting_service.place_pvp_bet("p_alice", mid, "result", 100, {"us": 1, "them": 0}).unwrap()
        match_service.record_result(mid, 1, 0)

        [result] = betting_service.resolve_bets_for_match(mid)

        assert result.value.bet_id == bet.bet_id
        assert result.value.status == "void"
        assert balance("p_alice") == 1000
        assert all(balance(pid) == 1000 for pid in ("p_bruno", "p_carla", "p_dani"))

    def test_active_custom_bets_wait_for_manual_resolution(self, betting_service, match_service, bet_repository, roster, open_match, balance):
        mid = open_match.match_id
        bet = betting_service.place_pvp_bet(
            "p_alice", mid, "custom_pvp", 50, {"custom_description": "Rain", "custom_odds": 2}
        ).unwrap()
        betting_service.accept_pvp_bet(bet.bet_id, "p_bruno").unwrap()
        match_service.record_result(mid, 1, 0)

        assert betting_service.resolve_bets_for_match(mid) == []
        assert bet_repository.get_bet(bet.bet_id).status == "active"
        assert [b.bet_id for b in betting_service.get_custom_pvp_bets_for_match(mid)] == [bet.bet_id]

    def test_unaccepted_custom_bet_is_voided(self, betting_service, match_service, roster, open_match, balance):
        mid = open_match.match_id
        betting_service.place_pvp_bet("p_alice", mid, "custom_pvp", 50, {"custom_description": "Rain", "custom_odds": 2})
        match_service.record_result(mid, 1, 0)

        [result] = betting_service.resolve_bets_for_match(mid)

        assert result.value.status == "void"
        assert balance("p_alice") == 1000

    def test_exactly_once(self, betting_service, match_service, roster, open_match, balance):
        mid = open_match.match_id
        betting_service.place_standard_bet("p_alice", mid, "result", 100, {"us": 3, "them": 1})
        bet = betting_service.place_pvp_bet("p_bruno", mid, "result", 100, {"us": 3, "them": 1}).unwrap()
        betting_service.accept_pvp_bet(bet.bet_id, "p_carla")
        match_service.record_result(mid, 3, 1)

        first = betting_service.resolve_bets_for_match(mid)
        snapshot = {pid: balance(pid) for pid in ("p_alice", "p_bruno", "p_carla")}
        second = betting_service.resolve_bets_for_match(mid)

        assert len(first) == 2
        assert second == []
        assert {pid: balance(pid) for pid in snapshot} == snapshot

    def test_one_failure_does_not_block_the_rest(
        self, betting_service, match_service, bet_repository, roster, open_match, balance, monkeypatch
    ):
        mid = open_match.match_id
        doomed = betting_service.place_standard_bet("p_alice", mid, "result", 100, {"us": 1, "them": 0}).unwrap()
        fine = betting_service.place_standard_bet("p_bruno", mid, "result", 100, {"us": 1, "them": 0}).unwrap()
        match_service.record_result(mid, 1, 0)

        real_settle = bet_repository.settle_bet_atomic

        def flaky(bet_id, **kwargs):
            if bet_id == doomed.bet_id:
                raise RuntimeError("database is locked")
            return real_settle(bet_id, **kwargs)

        monkeypatch.setattr(bet_repository, "settle_bet_atomic", flaky)

        results = betting_service.resolve_bets_for_match(mid)

        failed = [r for r in results if not r.success]
        settled = [r.value for r in results if r.success]
        assert len(failed) == 1
        assert failed[0].error_code == error_codes.STORE_ERROR
        assert doomed.bet_id in failed[0].error
        assert [b.bet_id for b in settled] == [fine.bet_id]
        assert balance("p_bruno") == 1400
        # The failed bet stays open and can be retried
        assert bet_repository.get_bet(doomed.bet_id).status == "pending"
        monkeypatch.undo()
        [retry] = betting_service.resolve_bets_for_match(mid)
        assert retry.value.status == "won"
        assert balance("p_alice") == 1400

    def test_concurrent_settlement_loses_cas(self, betting_service, match_service, bet_repository, roster, open_match, balance):
        """A bet already settled by another caller is reported, never paid again."""
        mid = open_match.match_id
        bet = betting_service.place_standard_bet("p_alice", mid, "result", 100, {"us": 1, "them": 0}).unwrap()
        match_service.record_result(mid, 1, 0)
        stale = bet_repository.get_bet(bet.bet_id)
        bet_repository.settle_bet_atomic(bet.bet_id, expected_status="pending", new_status="won", credits={"p_alice": 500}, payout=500)

        result = betting_service.settlement._settle_one(stale, match_service.get_match(mid).unwrap())

        assert result.error_code == error_codes.STATE_ERROR
        assert balance("p_alice") == 1400
