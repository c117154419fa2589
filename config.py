"""
Centralized configuration for the Tiesada FC team manager.
"""

from __future__ import annotations

import os

from dotenv import load_dotenv

load_dotenv()


def _parse_int(env_var: str, default: int) -> int:
    raw = os.getenv(env_var)
    if raw is None:
        return default
    try:
        return int(raw)
    except ValueError:
        return default


def _parse_float(env_var: str, default: float) -> float:
    raw = os.getenv(env_var)
    if raw is None:
        return default
    try:
        return float(raw)
    except ValueError:
        return default


def _parse_bool(env_var: str, default: bool) -> bool:
    raw = os.getenv(env_var)
    if raw is None:
        return default
    return raw.lower() in {"1", "true", "yes", "on"}


DB_PATH = os.getenv("DB_PATH", "tiesada.db")
LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO").upper()

# Every roster player starts with this many coins
STARTING_COINS = _parse_int("STARTING_COINS", 1000)

# Fixed odds (payout multipliers) per bet category
ODDS_RESULT = _parse_float("ODDS_RESULT", 5.0)
ODDS_PLAYER_SCORES = _parse_float("ODDS_PLAYER_SCORES", 3.5)
ODDS_PLAYER_ASSISTS = _parse_float("ODDS_PLAYER_ASSISTS", 2.5)
ODDS_PLAYER_GETS_CARD = _parse_float("ODDS_PLAYER_GETS_CARD", 3.0)
ODDS_PLAYER_NO_CARD = _parse_float("ODDS_PLAYER_NO_CARD", 1 / 3)
ODDS_PLAYER_CAGADAS = _parse_float("ODDS_PLAYER_CAGADAS", 2.0)

# Settle open bets automatically when a match result is recorded
AUTO_RESOLVE_ON_RESULT = _parse_bool("AUTO_RESOLVE_ON_RESULT", True)

# MVP ranking weights (cagadas count against the player)
MVP_GOAL_WEIGHT = _parse_int("MVP_GOAL_WEIGHT", 2)
MVP_ASSIST_WEIGHT = _parse_int("MVP_ASSIST_WEIGHT", 1)
MVP_CAGADA_WEIGHT = _parse_int("MVP_CAGADA_WEIGHT", -1)

LINEUP_POSITIONS = ("gk", "def1", "def2", "fwd1", "fwd2")
DEFAULT_MATCH_EMOJI = "⚽️"
