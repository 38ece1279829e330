from __future__ import annotations

import logging
import threading
from dataclasses import dataclass, field
from enum import Enum, auto
from typing import Any, Dict, List, Optional, Tuple

from esper import World

from planetlines.components.game_state import GameMode
from planetlines.config import EngineConfig
from planetlines.errors import MoveRejection
from planetlines.events.bus import (
    EventBus,
    EVENT_GAME_OVER,
    EVENT_MATCH_RESOLVED,
    EVENT_MOVE_REJECTED,
    EVENT_MOVE_RESOLVED,
    EVENT_NO_MATCH,
    EVENT_SELECTION_IGNORED,
    EVENT_TILE_CLICK,
    EVENT_TILE_DESELECTED,
    EVENT_TILE_SELECTED,
    EVENT_TILES_SPAWNED,
)
from planetlines.systems.match import detect_matches
from planetlines.systems.pathfinding import find_path
from planetlines.systems.spawner import get_tile_registry, refill
from planetlines.utils.game_state import get_game_state, get_score, set_game_mode
from planetlines.world import get_grid

logger = logging.getLogger(__name__)

Position = Tuple[int, int]


class OutcomeKind(Enum):
    SELECTED = auto()
    DESELECTED = auto()
    IGNORED = auto()
    MOVED = auto()
    REJECTED = auto()


@dataclass(frozen=True)
class EngineEvent:
    """One emitted event, kept so callers can replay or compare turns."""
    name: str
    payload: Dict[str, Any]


@dataclass
class SelectionOutcome:
    kind: OutcomeKind
    position: Position
    rejection: Optional[MoveRejection] = None
    events: List[EngineEvent] = field(default_factory=list)

    @property
    def accepted(self) -> bool:
        return self.kind != OutcomeKind.REJECTED


class TurnEngine:
    """Selection state machine and single-turn transaction for the board.

    A turn runs to completion (validate, move, match, score, refill, terminal
    check) before any of its events reach the bus. Events are gathered while
    the board is mutated and published afterwards, so any handler that
    queries the engine sees the finished post-turn state.

    Calls are serialised with a lock; concurrent callers wait their turn.
    event_log is appended under the lock and so follows mutation order. The
    lock is released before events reach the bus, so handlers may call back
    into the engine.
    """

    def __init__(self, world: World, event_bus: EventBus, config: EngineConfig | None = None):
        self.world = world
        self.event_bus = event_bus
        self.config = config or getattr(world, "config", None) or EngineConfig()
        self.grid = get_grid(world)
        self.rng = getattr(world, "random")
        self.selected: Optional[Position] = None
        self.event_log: List[EngineEvent] = []
        self._lock = threading.Lock()
        self.event_bus.subscribe(EVENT_TILE_CLICK, self.on_tile_click)

    # ------------------------------------------------------------------
    # Queries
    # ------------------------------------------------------------------
    @property
    def score(self) -> int:
        return get_score(self.world).value

    @property
    def mode(self) -> GameMode:
        return get_game_state(self.world).mode

    @property
    def is_game_over(self) -> bool:
        return get_game_state(self.world).is_over

    @property
    def empty_count(self) -> int:
        return self.grid.empty_count

    def tile_at(self, pos: Position) -> Optional[str]:
        return self.grid.get(tuple(pos))

    def snapshot(self) -> Dict[Position, str]:
        return self.grid.snapshot()

    # ------------------------------------------------------------------
    # Input
    # ------------------------------------------------------------------
    def on_tile_click(self, sender, **kwargs):
        row = kwargs.get('row')
        col = kwargs.get('col')
        if row is None or col is None:
            return
        self.select_or_move((row, col))

    def select_or_move(self, pos: Position) -> SelectionOutcome:
        """Handle one interaction with the cell at pos."""
        pos = tuple(pos)
        events: List[EngineEvent] = []
        with self._lock:
            outcome = self._select_or_move(pos, events)
            self.event_log.extend(events)
        self._publish(events)
        return outcome

    def try_move(self, src: Position, dst: Position) -> bool:
        """Attempt one full turn moving the tile at src to dst."""
        events: List[EngineEvent] = []
        with self._lock:
            rejection = self._try_move(tuple(src), tuple(dst), events)
            self.event_log.extend(events)
        self._publish(events)
        return rejection is None

    # ------------------------------------------------------------------
    # Turn logic (caller holds the lock)
    # ------------------------------------------------------------------
    def _select_or_move(self, pos: Position, events: List[EngineEvent]) -> SelectionOutcome:
        if self.is_game_over:
            return self._rejected(pos, self._reject(events, self.selected, pos, MoveRejection.GAME_CLOSED), events)
        if not self.grid.in_bounds(pos):
            return self._rejected(pos, self._reject(events, self.selected, pos, MoveRejection.OUT_OF_BOUNDS), events)

        row, col = pos
        if self.selected is None:
            if self.grid.get(pos) is None:
                self._record(events, EVENT_SELECTION_IGNORED, row=row, col=col)
                return SelectionOutcome(OutcomeKind.IGNORED, pos, events=events)
            self.selected = pos
            self._record(events, EVENT_TILE_SELECTED, row=row, col=col)
            return SelectionOutcome(OutcomeKind.SELECTED, pos, events=events)

        if self.selected == pos:
            self.selected = None
            self._record(events, EVENT_TILE_DESELECTED, row=row, col=col)
            return SelectionOutcome(OutcomeKind.DESELECTED, pos, events=events)

        rejection = self._try_move(self.selected, pos, events)
        if rejection is not None:
            # Selection is kept so the player can pick another destination.
            return self._rejected(pos, rejection, events)
        self.selected = None
        return SelectionOutcome(OutcomeKind.MOVED, pos, events=events)

    def _try_move(self, src: Position, dst: Position, events: List[EngineEvent]) -> Optional[MoveRejection]:
        grid = self.grid
        if self.is_game_over:
            return self._reject(events, src, dst, MoveRejection.GAME_CLOSED)
        if not (grid.in_bounds(src) and grid.in_bounds(dst)):
            return self._reject(events, src, dst, MoveRejection.OUT_OF_BOUNDS)
        type_name = grid.get(src)
        if type_name is None:
            return self._reject(events, src, dst, MoveRejection.EMPTY_SOURCE)
        if grid.get(dst) is not None:
            return self._reject(events, src, dst, MoveRejection.OCCUPIED_DESTINATION)
        path = find_path(grid, src, dst)
        if path is None:
            return self._reject(events, src, dst, MoveRejection.NO_PATH)

        grid.set(dst, type_name)
        grid.clear(src)
        self._record(events, EVENT_MOVE_RESOLVED, src=src, dst=dst, path=path, type_name=type_name)

        matches = detect_matches(grid, dst)
        if matches:
            for pos in matches:
                grid.clear(pos)
            score = get_score(self.world)
            delta = score.award(len(matches))
            self._record(
                events,
                EVENT_MATCH_RESOLVED,
                positions=sorted(matches),
                type_name=type_name,
                score_delta=delta,
                score=score.value,
            )
        else:
            self._record(events, EVENT_NO_MATCH, position=dst)

        spawned = refill(
            grid,
            get_tile_registry(self.world).all_types(),
            self.config.min_spawn,
            self.config.max_spawn,
            self.rng,
        )
        self._record(events, EVENT_TILES_SPAWNED, tiles=spawned)

        if self.selected is not None and grid.get(self.selected) is None:
            # Direct try_move calls can vacate or clear the selected cell.
            self.selected = None
        if grid.is_full():
            set_game_mode(self.world, GameMode.GAME_OVER)
            self.selected = None
            logger.info("Game over with score %d", self.score)
            self._record(events, EVENT_GAME_OVER, final_score=self.score)
        logger.debug(
            "Moved %s %s->%s, cleared %d, spawned %d, %d empty",
            type_name, src, dst, len(matches), len(spawned), grid.empty_count,
        )
        return None

    def _reject(
        self,
        events: List[EngineEvent],
        src: Optional[Position],
        dst: Position,
        reason: MoveRejection,
    ) -> MoveRejection:
        logger.debug("Rejected %s->%s: %s", src, dst, reason.value)
        self._record(events, EVENT_MOVE_REJECTED, src=src, dst=dst, reason=reason)
        return reason

    @staticmethod
    def _rejected(pos: Position, reason: MoveRejection, events: List[EngineEvent]) -> SelectionOutcome:
        return SelectionOutcome(OutcomeKind.REJECTED, pos, rejection=reason, events=events)

    @staticmethod
    def _record(events: List[EngineEvent], name: str, **payload) -> None:
        events.append(EngineEvent(name=name, payload=payload))

    def _publish(self, events: List[EngineEvent]) -> None:
        for event in events:
            self.event_bus.emit(event.name, **event.payload)
