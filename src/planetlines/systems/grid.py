from __future__ import annotations

import logging
from typing import Dict, Iterator, List, Optional, Tuple

from esper import World

from planetlines.components.active_switch import ActiveSwitch
from planetlines.components.board import Board
from planetlines.components.board_position import BoardPosition
from planetlines.components.tile import TileType
from planetlines.errors import OutOfBoundsError

logger = logging.getLogger(__name__)

Position = Tuple[int, int]


class Grid:
    """NxN occupancy backed by one esper entity per cell.

    Each cell entity carries BoardPosition, TileType and ActiveSwitch. The set
    of empty coordinates is kept alongside and updated on every write; it is
    only rebuilt from the components when the grid is first attached.

    Empty positions are stored in a list plus an index map so membership
    changes are O(1) and iteration order depends only on the sequence of
    writes, which keeps random sampling over it reproducible.
    """

    def __init__(self, world: World, board_entity: int):
        self.world = world
        self.board_entity = board_entity
        self.dimension = world.component_for_entity(board_entity, Board).dimension
        self._cells: Dict[Position, int] = {}
        self._empty: List[Position] = []
        self._empty_index: Dict[Position, int] = {}
        for entity, position in world.get_component(BoardPosition):
            self._cells[(position.row, position.col)] = entity
        for row in range(self.dimension):
            for col in range(self.dimension):
                pos = (row, col)
                if pos not in self._cells:
                    raise RuntimeError(f"Board cell entity missing at {pos}")
                if not self._switch(pos).active:
                    self._mark_empty(pos)

    # ------------------------------------------------------------------
    # Queries
    # ------------------------------------------------------------------
    def in_bounds(self, pos: Position) -> bool:
        row, col = pos
        return 0 <= row < self.dimension and 0 <= col < self.dimension

    def get(self, pos: Position) -> Optional[str]:
        """Return the tile type at pos, or None when the cell is empty."""
        self._check(pos)
        if not self._switch(pos).active:
            return None
        return self._tile(pos).type_name

    def type_at(self, row: int, col: int) -> Optional[str]:
        """Like get() but treats positions off the board as empty."""
        if not self.in_bounds((row, col)):
            return None
        return self.get((row, col))

    def is_empty(self, pos: Position) -> bool:
        self._check(pos)
        return pos in self._empty_index

    def is_full(self) -> bool:
        return not self._empty

    @property
    def empty_count(self) -> int:
        return len(self._empty)

    @property
    def occupied_count(self) -> int:
        return self.dimension * self.dimension - len(self._empty)

    def empty_positions(self) -> Tuple[Position, ...]:
        return tuple(self._empty)

    def positions(self) -> Iterator[Position]:
        """Row-major traversal, low to high."""
        for row in range(self.dimension):
            for col in range(self.dimension):
                yield row, col

    def entity_at(self, pos: Position) -> int:
        self._check(pos)
        return self._cells[pos]

    def snapshot(self) -> Dict[Position, str]:
        """Occupied cells as a plain mapping of position -> type name."""
        return {
            pos: self._tile(pos).type_name
            for pos in self.positions()
            if self._switch(pos).active
        }

    # ------------------------------------------------------------------
    # Mutation
    # ------------------------------------------------------------------
    def set(self, pos: Position, type_name: Optional[str]) -> None:
        """Overwrite a cell; None clears it."""
        self._check(pos)
        tile = self._tile(pos)
        switch = self._switch(pos)
        tile.type_name = type_name
        switch.active = type_name is not None
        if type_name is None:
            self._mark_empty(pos)
        else:
            self._mark_occupied(pos)

    def clear(self, pos: Position) -> None:
        self.set(pos, None)

    # ------------------------------------------------------------------
    # Internals
    # ------------------------------------------------------------------
    def _check(self, pos: Position) -> None:
        if not self.in_bounds(pos):
            raise OutOfBoundsError(pos, self.dimension)

    def _tile(self, pos: Position) -> TileType:
        return self.world.component_for_entity(self._cells[pos], TileType)

    def _switch(self, pos: Position) -> ActiveSwitch:
        return self.world.component_for_entity(self._cells[pos], ActiveSwitch)

    def _mark_empty(self, pos: Position) -> None:
        if pos in self._empty_index:
            return
        self._empty_index[pos] = len(self._empty)
        self._empty.append(pos)

    def _mark_occupied(self, pos: Position) -> None:
        idx = self._empty_index.pop(pos, None)
        if idx is None:
            return
        last = self._empty.pop()
        if idx < len(self._empty):
            self._empty[idx] = last
            self._empty_index[last] = idx


def create_grid(world: World, dimension: int) -> Grid:
    """Create the board entity plus one empty cell entity per coordinate."""
    board_entity = world.create_entity(Board(dimension=dimension))
    for row in range(dimension):
        for col in range(dimension):
            world.create_entity(
                BoardPosition(row=row, col=col),
                TileType(),
                ActiveSwitch(active=False),
            )
    logger.debug("Created %dx%d board (entity %d)", dimension, dimension, board_entity)
    return Grid(world, board_entity)
