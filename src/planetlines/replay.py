"""Deterministic replay and plain-data snapshots of a game."""
from __future__ import annotations

from typing import Any, Dict, Iterable, Tuple

from planetlines.config import EngineConfig
from planetlines.systems.turn_engine import EngineEvent, TurnEngine
from planetlines.world import new_game

Position = Tuple[int, int]


def replay(config: EngineConfig | None, seed: int, clicks: Iterable[Position]) -> TurnEngine:
    """Rebuild a game from its seed and the ordered cells the player clicked."""
    engine = new_game(config, seed=seed)
    for pos in clicks:
        if engine.is_game_over:
            break
        engine.select_or_move(pos)
    return engine


def _event_to_dict(event: EngineEvent) -> Dict[str, Any]:
    payload: Dict[str, Any] = {}
    for key, value in event.payload.items():
        if key == "tiles":
            value = [[list(pos), name] for pos, name in value.items()]
        elif key == "reason":
            value = value.value
        elif key in ("path", "positions"):
            value = [list(pos) for pos in value]
        elif isinstance(value, tuple):
            value = list(value)
        payload[key] = value
    return {"name": event.name, "payload": payload}


def snapshot(engine: TurnEngine) -> Dict[str, Any]:
    """JSON-friendly view of everything observable about a game."""
    return {
        "dimension": engine.grid.dimension,
        "tiles": [[row, col, name] for (row, col), name in sorted(engine.snapshot().items())],
        "score": engine.score,
        "mode": engine.mode.name,
        "selected": list(engine.selected) if engine.selected is not None else None,
        "events": [_event_to_dict(event) for event in engine.event_log],
    }
