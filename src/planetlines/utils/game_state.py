from __future__ import annotations

from esper import World

from planetlines.components.game_state import GameMode, GameState
from planetlines.components.score import Score


def get_game_state(world: World) -> GameState:
    """Return the singleton GameState component, creating it if absent."""
    for _, state in world.get_component(GameState):
        return state
    world.create_entity(GameState())
    return next(state for _, state in world.get_component(GameState))


def set_game_mode(world: World, mode: GameMode) -> GameMode:
    """Update the game mode and return the previous one."""
    state = get_game_state(world)
    previous = state.mode
    state.mode = mode
    return previous


def get_score(world: World) -> Score:
    for _, score in world.get_component(Score):
        return score
    raise RuntimeError("Score component not found")
