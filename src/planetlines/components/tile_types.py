from dataclasses import dataclass, field
from typing import Iterable, List

@dataclass(slots=True)
class TileTypes:
    """Canonical tile alphabet stored on a single entity.

    Order is preserved: candidate lists handed to the random source are built
    from it, so the same alphabet always yields the same draws for a seed.
    """
    names: List[str] = field(default_factory=list)

    def __post_init__(self) -> None:
        self.names = _dedupe(self.names)

    def all_types(self) -> List[str]:
        return list(self.names)


def _dedupe(type_names: Iterable[str]) -> List[str]:
    seen: set[str] = set()
    filtered: List[str] = []
    for name in type_names:
        if name not in seen:
            filtered.append(name)
            seen.add(name)
    return filtered
