"""
Bet domain model.

The shape of ``details`` depends on the bet type, so it is modelled as a small
tagged union: one frozen dataclass per type, built through ``parse_details``.
"""

from __future__ import annotations

import math
from dataclasses import dataclass
from typing import Any, Union

# Bet types
RESULT = "result"
PLAYER_EVENT = "player_event"
CUSTOM_PVP = "custom_pvp"
BET_TYPES = {RESULT, PLAYER_EVENT, CUSTOM_PVP}

# Player events
EVENT_SCORES = "scores"
EVENT_ASSISTS = "assists"
EVENT_GETS_CARD = "gets_card"
EVENT_NO_CARD = "no_card"
EVENT_CAGADAS = "cagadas"
PLAYER_EVENTS = {EVENT_SCORES, EVENT_ASSISTS, EVENT_GETS_CARD, EVENT_NO_CARD, EVENT_CAGADAS}

# Bet modes
STANDARD = "standard"
PVP = "pvp"

# Lifecycle
STATUS_PENDING = "pending"
STATUS_PROPOSED = "proposed"
STATUS_ACTIVE = "active"
STATUS_WON = "won"
STATUS_LOST = "lost"
STATUS_VOID = "void"
OPEN_STATUSES = (STATUS_PENDING, STATUS_ACTIVE, STATUS_PROPOSED)
TERMINAL_STATUSES = (STATUS_WON, STATUS_LOST, STATUS_VOID)

# Manual resolutions for custom PvP bets
PROPOSER_WINS = "proposer_wins"
ACCEPTER_WINS = "accepter_wins"
VOID = "void"
RESOLUTIONS = {PROPOSER_WINS, ACCEPTER_WINS, VOID}


@dataclass(frozen=True)
class ResultDetails:
    """Exact final score prediction."""

    us: int
    them: int

    def to_dict(self) -> dict[str, Any]:
        return {"us": self.us, "them": self.them}


@dataclass(frozen=True)
class PlayerEventDetails:
    """Prediction that a player does (or avoids) something during the match."""

    player_id: str
    event: str

    def to_dict(self) -> dict[str, Any]:
        return {"playerId": self.player_id, "event": self.event}


@dataclass(frozen=True)
class CustomDetails:
    """Free-form PvP wager with caller-chosen odds."""

    custom_description: str
    custom_odds: float

    def to_dict(self) -> dict[str, Any]:
        return {"custom_description": self.custom_description, "custom_odds": self.custom_odds}


BetDetails = Union[ResultDetails, PlayerEventDetails, CustomDetails]


def _non_negative_int(raw: dict[str, Any], key: str) -> int:
    value = raw.get(key)
    if isinstance(value, bool) or value is None:
        raise ValueError(f"Result bets need a '{key}' score.")
    try:
        score = int(value)
    except (TypeError, ValueError):
        raise ValueError(f"Score '{key}' must be a whole number.") from None
    if score != value and str(score) != str(value).strip():
        raise ValueError(f"Score '{key}' must be a whole number.")
    if score < 0:
        raise ValueError(f"Score '{key}' cannot be negative.")
    return score


def parse_details(bet_type: str, raw: dict[str, Any] | BetDetails | None) -> BetDetails:
    """
    Build the details variant for ``bet_type`` from a plain dict.

    Already-built variants are passed through after a type check.

    Raises:
        ValueError: If the type is unknown or the fields do not fit it
    """
    if bet_type not in BET_TYPES:
        raise ValueError(f"Unknown bet type '{bet_type}'.")

    expected = {RESULT: ResultDetails, PLAYER_EVENT: PlayerEventDetails, CUSTOM_PVP: CustomDetails}[bet_type]
    if isinstance(raw, (ResultDetails, PlayerEventDetails, CustomDetails)):
        if not isinstance(raw, expected):
            raise ValueError(f"Details do not match bet type '{bet_type}'.")
        raw = raw.to_dict()
    if not isinstance(raw, dict):
        raise ValueError("Bet details are required.")

    if bet_type == RESULT:
        return ResultDetails(us=_non_negative_int(raw, "us"), them=_non_negative_int(raw, "them"))

    if bet_type == PLAYER_EVENT:
        player_id = raw.get("playerId", raw.get("player_id"))
        if player_id is None or str(player_id).strip() == "":
            raise ValueError("Player event bets need a player.")
        event = raw.get("event")
        if event not in PLAYER_EVENTS:
            raise ValueError(f"Unknown player event '{event}'.")
        return PlayerEventDetails(player_id=str(player_id), event=event)

    description = raw.get("custom_description")
    if not isinstance(description, str) or not description.strip():
        raise ValueError("Custom bets need a description.")
    odds = raw.get("custom_odds")
    if isinstance(odds, bool):
        raise ValueError("Custom odds must be a number greater than 1.")
    try:
        odds = float(odds)
    except (TypeError, ValueError):
        raise ValueError("Custom odds must be a number greater than 1.") from None
    if not math.isfinite(odds) or odds <= 1:
        raise ValueError("Custom odds must be a number greater than 1.")
    return CustomDetails(custom_description=description.strip(), custom_odds=odds)


@dataclass
class Bet:
    """
    A wager on one match.

    Standard bets are placed by ``player_id`` against the house. PvP bets are
    proposed by ``proposer_id`` and, once accepted, matched by ``accepter_id``
    who escrowed ``accepter_stake``.
    """

    bet_id: str
    match_id: str
    bet_type: str
    amount: int
    details: BetDetails
    bet_mode: str
    status: str
    player_id: str | None = None
    proposer_id: str | None = None
    accepter_id: str | None = None
    accepter_stake: int | None = None
    payout: int | None = None
    created_at: int | None = None
    resolved_at: int | None = None

    @property
    def is_pvp(self) -> bool:
        return self.bet_mode == PVP

    @property
    def is_open(self) -> bool:
        return self.status in OPEN_STATUSES

    def involves(self, player_id: str) -> bool:
        """True if the player has coins escrowed in this bet."""
        if self.bet_mode == STANDARD:
            return self.player_id == player_id
        return player_id in (self.proposer_id, self.accepter_id)

    def to_dict(self) -> dict[str, Any]:
        return {
            "id": self.bet_id,
            "matchId": self.match_id,
            "type": self.bet_type,
            "amount": self.amount,
            "details": self.details.to_dict(),
            "betMode": self.bet_mode,
            "status": self.status,
            "playerId": self.player_id,
            "proposerId": self.proposer_id,
            "accepterId": self.accepter_id,
            "accepterStake": self.accepter_stake,
            "payout": self.payout,
        }
