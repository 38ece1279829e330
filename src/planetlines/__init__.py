"""Board engine for an open-path, match-three planet puzzle."""
from planetlines.config import EngineConfig
from planetlines.errors import ConfigError, MoveRejection, OutOfBoundsError
from planetlines.systems.turn_engine import EngineEvent, OutcomeKind, SelectionOutcome, TurnEngine
from planetlines.world import create_world, new_game

__all__ = [
    "ConfigError",
    "EngineConfig",
    "EngineEvent",
    "MoveRejection",
    "OutOfBoundsError",
    "OutcomeKind",
    "SelectionOutcome",
    "TurnEngine",
    "create_world",
    "new_game",
]
