"""Error and rejection types shared by the board engine."""
from enum import Enum


class ConfigError(ValueError):
    """Raised when an engine is constructed with an unusable configuration."""


class OutOfBoundsError(IndexError):
    """Raised by low-level grid accessors for coordinates outside the board."""

    def __init__(self, position, dimension: int):
        super().__init__(f"Position {position!r} is outside a {dimension}x{dimension} board")
        self.position = position
        self.dimension = dimension


class MoveRejection(Enum):
    """Reasons a selection or move is refused. Returned, never raised."""
    OUT_OF_BOUNDS = "out_of_bounds"
    EMPTY_SOURCE = "empty_source"
    OCCUPIED_DESTINATION = "occupied_destination"
    NO_PATH = "no_path"
    GAME_CLOSED = "game_closed"
