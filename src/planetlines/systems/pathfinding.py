from __future__ import annotations

from collections import deque
from typing import Dict, Iterator, List, Optional, Set, Tuple

from planetlines.constants import NEIGHBOR_OFFSETS
from planetlines.systems.grid import Grid

Position = Tuple[int, int]


def neighbors(grid: Grid, pos: Position) -> Iterator[Position]:
    """Yield in-bounds 4-neighbours in the fixed order left, right, down, up."""
    row, col = pos
    for d_row, d_col in NEIGHBOR_OFFSETS:
        candidate = (row + d_row, col + d_col)
        if grid.in_bounds(candidate):
            yield candidate


def find_path(grid: Grid, src: Position, dst: Position) -> Optional[List[Position]]:
    """Shortest open path from src to dst, both inclusive.

    Only empty cells (and dst itself) may be stepped on. Returns None when
    the frontier is exhausted without reaching dst.
    """
    if src == dst:
        return [src]
    parents: Dict[Position, Optional[Position]] = {src: None}
    frontier = deque([src])
    while frontier:
        node = frontier.popleft()
        for nxt in neighbors(grid, node):
            if nxt in parents:
                continue
            if nxt != dst and not grid.is_empty(nxt):
                continue
            parents[nxt] = node
            if nxt == dst:
                return _walk_back(parents, dst)
            frontier.append(nxt)
    return None


def _walk_back(parents: Dict[Position, Optional[Position]], end: Position) -> List[Position]:
    path: List[Position] = []
    node: Optional[Position] = end
    while node is not None:
        path.append(node)
        node = parents[node]
    path.reverse()
    return path


def reachable_from(grid: Grid, src: Position) -> Set[Position]:
    """Every empty cell connected to src through empty cells (src excluded)."""
    seen: Set[Position] = {src}
    frontier = deque([src])
    while frontier:
        node = frontier.popleft()
        for nxt in neighbors(grid, node):
            if nxt in seen or not grid.is_empty(nxt):
                continue
            seen.add(nxt)
            frontier.append(nxt)
    seen.discard(src)
    return seen
