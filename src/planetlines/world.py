from typing import Mapping, Tuple

from esper import World

from planetlines.components.game_state import GameMode, GameState
from planetlines.components.score import Score
from planetlines.components.tile_type_registry import TileTypeRegistry
from planetlines.components.tile_types import TileTypes
from planetlines.config import EngineConfig
from planetlines.errors import ConfigError
from planetlines.events.bus import EventBus
from planetlines.systems.grid import Grid, create_grid
from planetlines.systems.spawner import get_tile_registry, initial_fill
from planetlines.utils.rng import RandomSource, resolve_rng

Position = Tuple[int, int]


def create_world(
    config: EngineConfig | None = None,
    *,
    rng: RandomSource | None = None,
    layout: Mapping[Position, str] | None = None,
) -> World:
    """Build an esper world holding the board, score, game state and tile alphabet.

    Without a layout the board receives the random initial fill; with one the
    given tiles are placed verbatim and the random source is left untouched.
    """
    config = config or EngineConfig()
    world = World()
    setattr(world, "random", resolve_rng(rng))
    setattr(world, "config", config)

    world.create_entity(
        GameState(mode=GameMode.AWAITING_SELECTION),
        Score(multiplier=config.score_multiplier),
    )
    world.create_entity(
        TileTypeRegistry(),
        TileTypes(names=list(config.tile_types)),
    )

    grid = create_grid(world, config.dimension)
    setattr(world, "grid", grid)
    if layout is None:
        initial_fill(grid, get_tile_registry(world).all_types(), world.random, config.empty_probability)
    else:
        apply_layout(grid, config, layout)
    return world


def apply_layout(grid: Grid, config: EngineConfig, layout: Mapping[Position, str]) -> None:
    for pos, type_name in layout.items():
        if not grid.in_bounds(pos):
            raise ConfigError(f"Layout position {pos!r} is outside the board")
        if type_name not in config.tile_types:
            raise ConfigError(f"Layout tile {type_name!r} at {pos!r} is not in the tile alphabet")
        grid.set(pos, type_name)


def get_grid(world: World) -> Grid:
    grid = getattr(world, "grid", None)
    if grid is None:
        raise RuntimeError("World has no board grid; build it with create_world()")
    return grid


def new_game(
    config: EngineConfig | None = None,
    *,
    seed: int | None = None,
    rng: RandomSource | None = None,
    event_bus: EventBus | None = None,
    layout: Mapping[Position, str] | None = None,
):
    """Convenience wiring: world + event bus + turn engine."""
    from planetlines.systems.turn_engine import TurnEngine

    rng = resolve_rng(rng, seed)
    bus = event_bus or EventBus()
    world = create_world(config, rng=rng, layout=layout)
    return TurnEngine(world, bus)
