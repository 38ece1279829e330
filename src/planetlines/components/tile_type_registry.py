from dataclasses import dataclass

@dataclass(slots=True)
class TileTypeRegistry:
    """Empty tag component marking the single entity that stores the tile alphabet.

    The same entity also carries a TileTypes component.
    """
    pass
