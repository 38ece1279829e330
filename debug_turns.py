import sys, os
ROOT = os.path.dirname(__file__)
SRC = os.path.join(ROOT, 'src')
if SRC not in sys.path:
    sys.path.insert(0, SRC)
import logging
import random

from planetlines.config import EngineConfig
from planetlines.events.bus import (
    EVENT_GAME_OVER, EVENT_MATCH_RESOLVED, EVENT_MOVE_REJECTED, EVENT_MOVE_RESOLVED,
    EVENT_NO_MATCH, EVENT_TILES_SPAWNED,
)
from planetlines.systems.pathfinding import reachable_from
from planetlines.world import new_game

logging.basicConfig(level=logging.DEBUG if '-v' in sys.argv else logging.INFO)


def render(engine):
    dim = engine.grid.dimension
    lines = []
    # row 0 is the bottom of the board
    for row in reversed(range(dim)):
        cells = []
        for col in range(dim):
            name = engine.tile_at((row, col))
            cells.append(name[:2] if name else '..')
        lines.append(f'{row:2d} ' + ' '.join(cells))
    return '\n'.join(lines)


seed = int(sys.argv[1]) if len(sys.argv) > 1 and sys.argv[1].isdigit() else 7
engine = new_game(EngineConfig(min_spawn=1, max_spawn=3), seed=seed)
picker = random.Random(seed + 1)

for ev in [EVENT_MOVE_RESOLVED, EVENT_MOVE_REJECTED, EVENT_MATCH_RESOLVED, EVENT_NO_MATCH, EVENT_TILES_SPAWNED, EVENT_GAME_OVER]:
    engine.event_bus.subscribe(ev, lambda s, _ev=ev, **k: print(' ', _ev, k))

print(render(engine))
turn = 0
while not engine.is_game_over and turn < 500:
    turn += 1
    occupied = sorted(engine.snapshot())
    candidates = [(src, sorted(reachable_from(engine.grid, src))) for src in occupied]
    candidates = [(src, dsts) for src, dsts in candidates if dsts]
    if not candidates:
        print('no legal move left')
        break
    src, dsts = picker.choice(candidates)
    dst = picker.choice(dsts)
    print(f'turn {turn}: {src} -> {dst}')
    engine.select_or_move(src)
    engine.select_or_move(dst)

print(render(engine))
print('score', engine.score, 'mode', engine.mode.name, 'turns', turn)
