from dataclasses import dataclass

@dataclass(slots=True)
class BoardPosition:
    """Logical indices of a cell entity; (0, 0) is the bottom-left cell."""
    row: int
    col: int
