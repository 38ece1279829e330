"""Game state resource describing whether the board still accepts moves."""
from dataclasses import dataclass
from enum import Enum, auto


class GameMode(Enum):
    """Top-level engine states. GAME_OVER is terminal."""
    AWAITING_SELECTION = auto()
    GAME_OVER = auto()


@dataclass
class GameState:
    """Singleton component storing the current game mode."""
    mode: GameMode = GameMode.AWAITING_SELECTION

    @property
    def is_over(self) -> bool:
        return self.mode == GameMode.GAME_OVER
