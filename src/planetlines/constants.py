GRID_DIMENSION = 8

# Canonical tile alphabet (one sprite per planet in the presentation layer).
DEFAULT_TILE_TYPES = (
    'mercury',
    'venus',
    'earth',
    'mars',
    'jupiter',
    'saturn',
    'neptune',
)
MIN_TILE_TYPES = 3

# Run length through a pivot that counts as a match.
MIN_MATCH_LENGTH = 3

# Probability that a cell starts empty (only 20% of the cells are filled on startup).
EMPTY_PROBABILITY = 0.8

# Per-turn spawn range, inclusive on both ends.
MIN_SPAWN = 2
MAX_SPAWN = 35
# Earlier, gentler revision of the spawn range.
CLASSIC_SPAWN_RANGE = (1, 3)

SCORE_MULTIPLIER = 10  # points per cleared planet

# Neighbour expansion order for path search: left, right, down, up.
# (0, 0) is the bottom-left cell; rows grow upward and columns grow to the right.
NEIGHBOR_OFFSETS = ((0, -1), (0, 1), (-1, 0), (1, 0))
