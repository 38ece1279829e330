from __future__ import annotations

import logging
from typing import Dict, List, Sequence, Tuple

from esper import World

from planetlines.components.tile_type_registry import TileTypeRegistry
from planetlines.components.tile_types import TileTypes
from planetlines.systems.grid import Grid
from planetlines.utils.rng import RandomSource

logger = logging.getLogger(__name__)

Position = Tuple[int, int]


def get_tile_registry(world: World) -> TileTypes:
    for entity, _ in world.get_component(TileTypeRegistry):
        return world.component_for_entity(entity, TileTypes)
    raise RuntimeError("TileTypes definitions not found")


def pick_type(
    grid: Grid,
    types: Sequence[str],
    pos: Position,
    rng: RandomSource,
    *,
    check_forward: bool,
) -> str:
    """Choose a tile type for pos that does not complete a run of three.

    Backward neighbours (left and down) are always checked. With
    check_forward the forward neighbours (right and up) are checked too, and
    a type that would sit sandwiched between two equal neighbours is
    excluded. The initial fill runs row-major from the bottom-left, so only
    backward cells can be occupied at that point.
    """
    row, col = pos
    excluded: set[str] = set()

    left1 = grid.type_at(row, col - 1)
    left2 = grid.type_at(row, col - 2)
    down1 = grid.type_at(row - 1, col)
    down2 = grid.type_at(row - 2, col)
    # cannot use a type that already has two identicals on one side
    if left2 is not None and left1 == left2:
        excluded.add(left1)
    if down2 is not None and down1 == down2:
        excluded.add(down1)

    if check_forward:
        right1 = grid.type_at(row, col + 1)
        right2 = grid.type_at(row, col + 2)
        up1 = grid.type_at(row + 1, col)
        up2 = grid.type_at(row + 2, col)
        if right2 is not None and right1 == right2:
            excluded.add(right1)
        if up2 is not None and up1 == up2:
            excluded.add(up1)
        if left1 is not None and left1 == right1:
            excluded.add(left1)
        if down1 is not None and down1 == up1:
            excluded.add(down1)

    available = [name for name in types if name not in excluded]
    if not available:
        # Only reachable with four or fewer types; a triple beats an empty choice.
        logger.debug("Every type excluded at %s, falling back to full alphabet", pos)
        available = list(types)
    return available[rng.randint(0, len(available) - 1)]


def refill(
    grid: Grid,
    types: Sequence[str],
    min_count: int,
    max_count: int,
    rng: RandomSource,
) -> Dict[Position, str]:
    """Spawn between min_count and max_count tiles into random empty cells.

    The drawn count is capped by the number of empty cells. Each spawned tile
    is written to the grid before the next cell is drawn, so later picks see
    earlier ones. Returns the spawned tiles in placement order.
    """
    count = rng.randint(min_count, max_count)
    pool: List[Position] = list(grid.empty_positions())
    if count > len(pool):
        logger.debug("Spawn count %d capped to %d empty cells", count, len(pool))
        count = len(pool)
    spawned: Dict[Position, str] = {}
    for _ in range(count):
        pos = pool.pop(rng.randint(0, len(pool) - 1))
        type_name = pick_type(grid, types, pos, rng, check_forward=True)
        grid.set(pos, type_name)
        spawned[pos] = type_name
    return spawned


def initial_fill(
    grid: Grid,
    types: Sequence[str],
    rng: RandomSource,
    empty_probability: float,
) -> Dict[Position, str]:
    """Populate a fresh board, leaving each cell empty with empty_probability."""
    placed: Dict[Position, str] = {}
    for pos in grid.positions():
        if rng.random() < empty_probability:
            continue
        type_name = pick_type(grid, types, pos, rng, check_forward=False)
        grid.set(pos, type_name)
        placed[pos] = type_name
    logger.debug("Initial fill placed %d tiles, %d cells empty", len(placed), grid.empty_count)
    return placed
