"""
Standard error codes for service layer.

These error codes allow callers (UI, CLI) to programmatically handle
specific error conditions without parsing error message text.

Usage:
    from services.error_codes import PLAYER_NOT_FOUND, INSUFFICIENT_FUNDS
    from services.result import Result

    if player is None:
        return Result.fail("Player not found", code=PLAYER_NOT_FOUND)

    if balance < amount:
        return Result.fail("Insufficient funds", code=INSUFFICIENT_FUNDS)
"""

# General errors
VALIDATION_ERROR = "validation_error"
STATE_ERROR = "state_error"
STORE_ERROR = "store_error"

# Player errors
PLAYER_NOT_FOUND = "player_not_found"
PLAYER_ALREADY_EXISTS = "player_already_exists"

# Match errors
MATCH_NOT_FOUND = "match_not_found"
MATCH_NOT_PLAYABLE = "match_not_playable"
MATCH_ALREADY_RECORDED = "match_already_recorded"
INVALID_RESULT = "invalid_result"

# Economy/betting errors
INSUFFICIENT_FUNDS = "insufficient_funds"
BETTING_CLOSED = "betting_closed"
BET_NOT_FOUND = "bet_not_found"
BET_NOT_OPEN = "bet_not_open"
INVALID_BET_DETAILS = "invalid_bet_details"
