from dataclasses import dataclass

@dataclass(slots=True)
class Board:
    """Square board of ``dimension`` x ``dimension`` cells."""
    dimension: int
