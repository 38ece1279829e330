from __future__ import annotations

from typing import FrozenSet, List, Set, Tuple

from planetlines.constants import MIN_MATCH_LENGTH
from planetlines.systems.grid import Grid

Position = Tuple[int, int]


def detect_matches(grid: Grid, pivot: Position) -> FrozenSet[Position]:
    """Coordinates cleared by the tile that just landed on pivot.

    Only the row and column through pivot are scanned. An axis contributes
    when its contiguous same-type run through pivot reaches MIN_MATCH_LENGTH;
    both axes may qualify, giving a cross-shaped set.
    """
    type_name = grid.get(pivot)
    if type_name is None:
        return frozenset()
    row, col = pivot
    matched: Set[Position] = set()
    # Horizontal: left then right
    h_run = _run(grid, type_name, row, col, 0, -1) + _run(grid, type_name, row, col, 0, 1)
    if len(h_run) + 1 >= MIN_MATCH_LENGTH:
        matched.update(h_run)
        matched.add(pivot)
    # Vertical: down then up
    v_run = _run(grid, type_name, row, col, -1, 0) + _run(grid, type_name, row, col, 1, 0)
    if len(v_run) + 1 >= MIN_MATCH_LENGTH:
        matched.update(v_run)
        matched.add(pivot)
    return frozenset(matched)


def _run(grid: Grid, type_name: str, row: int, col: int, d_row: int, d_col: int) -> List[Position]:
    run: List[Position] = []
    r, c = row + d_row, col + d_col
    while grid.type_at(r, c) == type_name:
        run.append((r, c))
        r += d_row
        c += d_col
    return run


def find_all_matches(grid: Grid) -> List[List[Position]]:
    """Every horizontal or vertical run of MIN_MATCH_LENGTH or more on the board.

    Diagnostic whole-board scan; turn resolution never calls this.
    """
    dim = grid.dimension
    matches: List[List[Position]] = []
    lines = [[(r, c) for c in range(dim)] for r in range(dim)]
    lines += [[(r, c) for r in range(dim)] for c in range(dim)]
    for line in lines:
        run: List[Position] = []
        last_type = None
        for pos in line:
            tval = grid.get(pos)
            if tval is not None and tval == last_type:
                run.append(pos)
            else:
                if len(run) >= MIN_MATCH_LENGTH:
                    matches.append(run)
                run = [pos] if tval is not None else []
                last_type = tval
        if len(run) >= MIN_MATCH_LENGTH:
            matches.append(run)
    return matches
