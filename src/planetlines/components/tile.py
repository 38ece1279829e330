from dataclasses import dataclass
from typing import Optional

@dataclass(slots=True)
class TileType:
    """Per-cell tile type assignment.

    Stores only the semantic type_name (no sprite or color data). The name is
    None while the cell is empty; occupancy itself is tracked by ActiveSwitch.
    """
    type_name: Optional[str] = None
