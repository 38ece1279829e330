from dataclasses import dataclass

@dataclass(slots=True)
class ActiveSwitch:
    """Per-cell occupancy flag.

    active: True if the cell currently holds a tile; False if it is empty.
    Type information lives in a separate TileType component.
    """
    active: bool = False
