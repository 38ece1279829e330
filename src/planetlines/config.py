from __future__ import annotations

from dataclasses import dataclass, fields
from typing import Any, Mapping, Sequence, Tuple

from planetlines.constants import (
    DEFAULT_TILE_TYPES,
    EMPTY_PROBABILITY,
    GRID_DIMENSION,
    MAX_SPAWN,
    MIN_SPAWN,
    MIN_TILE_TYPES,
    SCORE_MULTIPLIER,
)
from planetlines.errors import ConfigError


@dataclass(frozen=True, slots=True)
class EngineConfig:
    """Immutable engine configuration supplied at construction.

    dimension: side length N of the square board.
    tile_types: the tile alphabet; its length is K.
    empty_probability: chance that a cell starts empty during the initial fill.
    min_spawn / max_spawn: inclusive range of tiles spawned after every move.
    score_multiplier: points per cleared tile.
    """

    dimension: int = GRID_DIMENSION
    tile_types: Tuple[str, ...] = DEFAULT_TILE_TYPES
    empty_probability: float = EMPTY_PROBABILITY
    min_spawn: int = MIN_SPAWN
    max_spawn: int = MAX_SPAWN
    score_multiplier: int = SCORE_MULTIPLIER

    def __post_init__(self) -> None:
        # Accept any sequence of names but store a duplicate-free tuple so the
        # config stays hashable and every type is drawn with equal weight.
        object.__setattr__(self, "tile_types", tuple(dict.fromkeys(self.tile_types)))
        self.validate()

    def validate(self) -> None:
        if not isinstance(self.dimension, int) or self.dimension <= 0:
            raise ConfigError(f"Grid dimension must be a positive integer, got {self.dimension!r}")
        if len(self.tile_types) < MIN_TILE_TYPES:
            raise ConfigError(
                f"At least {MIN_TILE_TYPES} distinct tile types are required, got {len(self.tile_types)}"
            )
        if self.min_spawn < 0 or self.max_spawn < 0:
            raise ConfigError(f"Spawn bounds must be non-negative, got ({self.min_spawn}, {self.max_spawn})")
        if self.min_spawn > self.max_spawn:
            raise ConfigError(f"min_spawn {self.min_spawn} exceeds max_spawn {self.max_spawn}")
        if not 0.0 <= self.empty_probability <= 1.0:
            raise ConfigError(f"empty_probability must lie in [0, 1], got {self.empty_probability!r}")
        if self.score_multiplier <= 0:
            raise ConfigError(f"score_multiplier must be positive, got {self.score_multiplier!r}")

    @property
    def alphabet_size(self) -> int:
        return len(self.tile_types)

    @property
    def spawn_range(self) -> Tuple[int, int]:
        return self.min_spawn, self.max_spawn

    @classmethod
    def from_mapping(cls, data: Mapping[str, Any]) -> "EngineConfig":
        """Build a config from plain data (e.g. a parsed settings file)."""
        known = {f.name for f in fields(cls)}
        unknown = sorted(set(data) - known)
        if unknown:
            raise ConfigError(f"Unknown config keys: {', '.join(unknown)}")
        values = dict(data)
        tile_types = values.get("tile_types")
        if tile_types is not None:
            if isinstance(tile_types, str) or not isinstance(tile_types, Sequence):
                raise ConfigError("tile_types must be a sequence of names")
            values["tile_types"] = tuple(tile_types)
        return cls(**values)
