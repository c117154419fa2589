"""
Match domain model.

Stat rows written by older clients used short or snake_case field names
(``g``, ``yellow_cards``, ``errors`` ...). ``PlayerStatLine.from_dict`` accepts
all of them so legacy rows settle the same way as fresh ones.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any

STAT_ALIASES: dict[str, tuple[str, ...]] = {
    "goals": ("goals", "g"),
    "assists": ("assists", "a"),
    "yellow_cards": ("yellowCards", "yellow_cards", "yc"),
    "red_cards": ("redCards", "red_cards", "rc"),
    "cagadas": ("cagadas", "errors"),
}


def _first_int(raw: dict[str, Any], keys: tuple[str, ...]) -> int:
    for key in keys:
        value = raw.get(key)
        if value is None or value == "":
            continue
        try:
            return int(value)
        except (TypeError, ValueError):
            return 0
    return 0


@dataclass(frozen=True)
class MatchResult:
    """Final score from the team's point of view."""

    us: int
    them: int

    @classmethod
    def from_dict(cls, raw: dict[str, Any]) -> MatchResult:
        return cls(us=int(raw["us"]), them=int(raw["them"]))

    def to_dict(self) -> dict[str, int]:
        return {"us": self.us, "them": self.them}


@dataclass(frozen=True)
class PlayerStatLine:
    """Per-player counters for one match."""

    player_id: str
    goals: int = 0
    assists: int = 0
    yellow_cards: int = 0
    red_cards: int = 0
    cagadas: int = 0

    @classmethod
    def from_dict(cls, raw: dict[str, Any]) -> PlayerStatLine:
        player_id = raw.get("playerId", raw.get("player_id"))
        if player_id is None:
            raise ValueError("Stat line is missing a player id.")
        return cls(
            player_id=str(player_id),
            **{name: _first_int(raw, keys) for name, keys in STAT_ALIASES.items()},
        )

    def to_dict(self) -> dict[str, Any]:
        return {
            "playerId": self.player_id,
            "goals": self.goals,
            "assists": self.assists,
            "yellowCards": self.yellow_cards,
            "redCards": self.red_cards,
            "cagadas": self.cagadas,
        }

    @property
    def has_card(self) -> bool:
        return self.yellow_cards > 0 or self.red_cards > 0


@dataclass
class Match:
    """
    A scheduled or played fixture.

    ``result`` and ``stats`` are only meaningful once ``played`` is True, and
    are frozen from then on.
    """

    match_id: str
    opponent: str
    date: str  # ISO-8601
    played: bool = False
    result: MatchResult | None = None
    stats: list[PlayerStatLine] = field(default_factory=list)
    attending: list[str] = field(default_factory=list)
    lineup: dict[str, str | None] = field(default_factory=dict)
    emoji: str | None = None
    video_url: str | None = None

    def stat_line_for(self, player_id: str) -> PlayerStatLine:
        """Return the player's stat line, or an all-zero line if they have none."""
        for line in self.stats:
            if line.player_id == player_id:
                return line
        return PlayerStatLine(player_id=player_id)

    def __str__(self) -> str:
        if self.played and self.result is not None:
            return f"vs {self.opponent} ({self.result.us}-{self.result.them})"
        return f"vs {self.opponent} on {self.date}"
