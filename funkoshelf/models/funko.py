"""Funko record stored per user."""
from dataclasses import dataclass
from enum import Enum


class FunkoType(str, Enum):
    POP = "Pop!"
    POP_RIDES = "Pop! Rides"
    VYNIL_SODA = "Vynil Soda"
    VYNIL_GOLD = "Vynil Gold"


class FunkoGenre(str, Enum):
    ANIMATION = "Animación"
    MOVIES_TV = "Películas y TV"
    VIDEO_GAMES = "Videojuegos"
    SPORTS = "Deportes"
    MUSIC = "Música"
    ANIME = "Anime"


@dataclass(frozen=True)
class Funko:
    """One catalog item in a user's collection. `id` is unique per user."""
    id: int
    name: str
    description: str
    type: FunkoType
    genre: FunkoGenre
    franchise: str
    number: int
    exclusive: bool
    special_features: str
    market_value: float
