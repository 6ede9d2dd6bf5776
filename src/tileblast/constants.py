GRID_WIDTH = 10
GRID_HEIGHT = 10
COLOR_COUNT = 6

# Ascending group sizes at which a tile switches to its A/B/C sprite variant.
# Only the presentation layer reads these; removal rules ignore them.
GROUP_SIZE_TIERS = (4, 7, 9)

# A group must hold at least this many tiles to be blasted.
MIN_GROUP_SIZE = 2

# Reshuffle cluster seeding: one cluster per CLUSTER_AREA cells, clamped.
CLUSTER_AREA = 10
MIN_CLUSTERS = 1
MAX_CLUSTERS = 6

# Reshuffles tried by a single recovery before giving up.
MAX_RESHUFFLE_ATTEMPTS = 32

# Default colour names, indexed by colour id.
TILE_COLOR_NAMES = ("blue", "green", "pink", "purple", "red", "yellow")
