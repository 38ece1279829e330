from blinker import Signal
from typing import Callable, Dict


class EventBus:
    """Named-signal event bus built on blinker.

    The board engine emits every event synchronously from the thread that
    completed the turn; presentation layers may buffer and replay them with
    their own delays.
    """
    def __init__(self):
        self._signals: Dict[str, Signal] = {}

    def subscribe(self, name: str, fn: Callable) -> None:
        sig = self._signals.setdefault(name, Signal(name))
        # Strong references so throwaway lambdas and unreferenced systems keep receiving events.
        sig.connect(fn, weak=False)

    def unsubscribe(self, name: str, fn: Callable) -> None:
        sig = self._signals.get(name)
        if sig:
            sig.disconnect(fn)

    def emit(self, name: str, **payload) -> None:
        sig = self._signals.get(name)
        if sig:
            sig.send(self, **payload)


# ============================================================================
# INPUT & INTERACTION
# ============================================================================
EVENT_TILE_CLICK = "tile_click"                # payload: row, col


# ============================================================================
# SELECTION
# ============================================================================
EVENT_TILE_SELECTED = "tile_selected"          # payload: row, col
EVENT_TILE_DESELECTED = "tile_deselected"      # payload: row, col
EVENT_SELECTION_IGNORED = "selection_ignored"  # payload: row, col


# ============================================================================
# TURN RESOLUTION
# ============================================================================
EVENT_MOVE_REJECTED = "move_rejected"          # payload: src=(r,c)|None, dst=(r,c), reason=MoveRejection
EVENT_MOVE_RESOLVED = "move_resolved"          # payload: src=(r,c), dst=(r,c), path=[(r,c),...], type_name=str
EVENT_MATCH_RESOLVED = "match_resolved"        # payload: positions=[(r,c),...], type_name=str, score_delta=int, score=int
EVENT_NO_MATCH = "no_match"                    # payload: position=(r,c)
EVENT_TILES_SPAWNED = "tiles_spawned"          # payload: tiles={(r,c): type_name}


# ============================================================================
# GAME FLOW & SCORE
# ============================================================================
EVENT_GAME_OVER = "game_over"                  # payload: final_score=int
EVENT_HIGH_SCORE_RECORDED = "high_score_recorded"  # payload: score=int, previous=int
