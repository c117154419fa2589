"""
Player domain model.
"""

from dataclasses import dataclass


@dataclass
class Player:
    """
    Represents a roster player and their play-money wallet.

    This is a pure domain model with no infrastructure dependencies.
    """

    player_id: str
    name: str
    position: str | None = None  # e.g., "Portero", "Defensa", "Medio", "Delantero"
    photo_url: str | None = None
    coins: int = 0

    def __str__(self) -> str:
        return f"{self.name} ({self.coins} coins)"
