"""
Service for season statistics and MVP ranking.
"""

from dataclasses import dataclass

from config import MVP_ASSIST_WEIGHT, MVP_CAGADA_WEIGHT, MVP_GOAL_WEIGHT
from repositories.interfaces import IMatchRepository, IPlayerRepository
from services.interfaces import IScoreboardService


@dataclass
class PlayerSeasonStats:
    """Totals for one roster player across every played match."""

    player_id: str
    name: str
    matches_played: int = 0
    goals: int = 0
    assists: int = 0
    yellow_cards: int = 0
    red_cards: int = 0
    cagadas: int = 0

    @property
    def mvp_score(self) -> int:
        return (
            self.goals * MVP_GOAL_WEIGHT
            + self.assists * MVP_ASSIST_WEIGHT
            + self.cagadas * MVP_CAGADA_WEIGHT
        )


class ScoreboardService(IScoreboardService):
    """Aggregates per-player stat lines into a season scoreboard."""

    def __init__(self, player_repo: IPlayerRepository, match_repo: IMatchRepository):
        self.player_repo = player_repo
        self.match_repo = match_repo

    def get_player_stats(self) -> list[PlayerSeasonStats]:
        """
        Season totals for every roster player, best MVP score first.

        A match counts towards ``matches_played`` when the player attended it or
        has a stat line in it. Ties are broken by goals, then by name.
        """
        totals = {
            player.player_id: PlayerSeasonStats(player_id=player.player_id, name=player.name)
            for player in self.player_repo.get_all()
        }

        for match in self.match_repo.get_played():
            lines = {line.player_id: line for line in match.stats}
            for player_id in set(match.attending) | set(lines):
                entry = totals.get(player_id)
                if entry is None:
                    # Stat line for someone no longer on the roster
                    continue
                entry.matches_played += 1
                line = lines.get(player_id)
                if line is None:
                    continue
                entry.goals += line.goals
                entry.assists += line.assists
                entry.yellow_cards += line.yellow_cards
                entry.red_cards += line.red_cards
                entry.cagadas += line.cagadas

        return sorted(totals.values(), key=lambda s: (-s.mvp_score, -s.goals, s.name.lower()))

    def get_top_scorers(self, limit: int = 5) -> list[PlayerSeasonStats]:
        ranked = [s for s in self.get_player_stats() if s.goals > 0]
        return sorted(ranked, key=lambda s: (-s.goals, s.name.lower()))[:limit]
