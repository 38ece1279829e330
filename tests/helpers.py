from __future__ import annotations

from typing import Dict, Iterable, List, Sequence, Tuple

from planetlines.config import EngineConfig
from planetlines.events.bus import EventBus
from planetlines.world import new_game

Position = Tuple[int, int]


class ScriptedRandom:
    """Deterministic random source stub.

    randint(a, b) returns a + offset for the next scripted offset (wrapped
    into range), or a once the script is exhausted. random() replays the
    scripted floats, then returns 0.0.
    """

    def __init__(self, ints: Iterable[int] = (), floats: Iterable[float] = ()):
        self._ints = list(ints)
        self._floats = list(floats)
        self.randint_calls: List[Tuple[int, int]] = []

    def randint(self, a: int, b: int) -> int:
        assert a <= b, f"empty range [{a}, {b}]"
        self.randint_calls.append((a, b))
        offset = self._ints.pop(0) if self._ints else 0
        return a + offset % (b - a + 1)

    def random(self) -> float:
        return self._floats.pop(0) if self._floats else 0.0


def layout_from_rows(rows: Sequence[str]) -> Dict[Position, str]:
    """rows[0] is board row 0 (the bottom row); '.' marks an empty cell."""
    return {
        (r, c): ch
        for r, line in enumerate(rows)
        for c, ch in enumerate(line)
        if ch != '.'
    }


def make_engine(
    rows: Sequence[str],
    *,
    tile_types: Sequence[str] = ('R', 'G', 'B'),
    rng=None,
    event_bus: EventBus | None = None,
    **config_kwargs,
):
    config_kwargs.setdefault('min_spawn', 1)
    config_kwargs.setdefault('max_spawn', 3)
    config = EngineConfig(dimension=len(rows), tile_types=tuple(tile_types), **config_kwargs)
    return new_game(
        config,
        rng=rng if rng is not None else ScriptedRandom(),
        event_bus=event_bus,
        layout=layout_from_rows(rows),
    )


def record_events(bus: EventBus, names: Iterable[str]) -> List[Tuple[str, dict]]:
    received: List[Tuple[str, dict]] = []
    for name in names:
        bus.subscribe(name, lambda sender, _name=name, **payload: received.append((_name, payload)))
    return received
