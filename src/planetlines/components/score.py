from dataclasses import dataclass

@dataclass(slots=True)
class Score:
    """Running score; only ever grows.

    multiplier: points awarded per cleared tile.
    """
    multiplier: int
    value: int = 0

    def award(self, cleared: int) -> int:
        """Add points for ``cleared`` tiles and return the delta."""
        if cleared <= 0:
            return 0
        delta = cleared * self.multiplier
        self.value += delta
        return delta
