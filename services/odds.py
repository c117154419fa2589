"""
Fixed odds table and stake arithmetic.

Coin amounts are integers; whenever a multiplier produces a fraction the
value is rounded half-up (2.5 -> 3), never with Python's banker's rounding.
"""

from decimal import ROUND_HALF_UP, Decimal

from config import (
    ODDS_PLAYER_ASSISTS,
    ODDS_PLAYER_CAGADAS,
    ODDS_PLAYER_GETS_CARD,
    ODDS_PLAYER_NO_CARD,
    ODDS_PLAYER_SCORES,
    ODDS_RESULT,
)
from domain.models.bet import (
    CUSTOM_PVP,
    EVENT_ASSISTS,
    EVENT_CAGADAS,
    EVENT_GETS_CARD,
    EVENT_NO_CARD,
    EVENT_SCORES,
    PLAYER_EVENT,
    RESULT,
    Bet,
    CustomDetails,
)

BET_ODDS = {
    "RESULT": ODDS_RESULT,
    "PLAYER_SCORES": ODDS_PLAYER_SCORES,
    "PLAYER_ASSISTS": ODDS_PLAYER_ASSISTS,
    "PLAYER_GETS_CARD": ODDS_PLAYER_GETS_CARD,
    "PLAYER_NO_CARD": ODDS_PLAYER_NO_CARD,
    "PLAYER_CAGADAS": ODDS_PLAYER_CAGADAS,
}

_EVENT_ODDS = {
    EVENT_SCORES: "PLAYER_SCORES",
    EVENT_ASSISTS: "PLAYER_ASSISTS",
    EVENT_GETS_CARD: "PLAYER_GETS_CARD",
    EVENT_NO_CARD: "PLAYER_NO_CARD",
    EVENT_CAGADAS: "PLAYER_CAGADAS",
}


def round_half_up(value: float) -> int:
    """Round to the nearest integer, halves away from zero."""
    # str() keeps 350.0000000001-style float noise from leaking into the result
    return int(Decimal(str(value)).quantize(Decimal(1), rounding=ROUND_HALF_UP))


def odds_for(bet: Bet | None) -> float:
    """
    Fixed multiplier for a bet's category.

    Falls back to 1 for a missing bet, a missing type, or any combination the
    table does not know. Custom PvP bets are not priced here.
    """
    if bet is None or not getattr(bet, "bet_type", None):
        return 1
    if bet.bet_type == RESULT:
        return BET_ODDS["RESULT"]
    if bet.bet_type == PLAYER_EVENT and bet.details is not None:
        key = _EVENT_ODDS.get(getattr(bet.details, "event", None))
        return BET_ODDS[key] if key else 1
    return 1


def stake_multiplier(bet: Bet) -> float:
    """Multiplier used to size the counter-stake: custom odds for custom bets, the table otherwise."""
    if bet.bet_type == CUSTOM_PVP and isinstance(bet.details, CustomDetails):
        return bet.details.custom_odds
    return odds_for(bet)


def standard_payout(bet: Bet) -> int:
    """Coins the house credits for a winning standard bet."""
    return round_half_up(bet.amount * odds_for(bet))


def accepter_stake_for(bet: Bet) -> int:
    """Coins the counter-party must escrow to accept a PvP proposal."""
    return round_half_up(bet.amount * stake_multiplier(bet))
