"""
Game constants - all magic numbers in one place.
NO UI DEPENDENCIES.
"""

# =============================================================================
# ROAD
# =============================================================================
LANES = 3
CENTER_LANE = 1

ROAD_MAX_WIDTH = 420.0
ROAD_MIN_WIDTH = 240.0
ROAD_SIDE_PADDING = 16.0

# =============================================================================
# SIZES (screen-space units)
# =============================================================================
CAR_WIDTH = 46.0
CAR_HEIGHT = 72.0
CAR_BOTTOM_MARGIN = 36.0     # gap between car and bottom of the play area
CAR_MIN_Y = 60.0             # car never sits higher than this

OBSTACLE_SIZE = 54.0
ITEM_SIZE = 44.0

# =============================================================================
# SPEED
# =============================================================================
BASE_SPEED = 280.0           # units per second at round start
SPEED_RAMP = 3.5             # units per second, per second survived
SLOW_MO_FACTOR = 0.65        # speed multiplier while slow-mo is active
ITEM_SPEED_FACTOR = 0.9      # items drift slower than hazards

# =============================================================================
# SPAWNING (all in milliseconds unless noted)
# =============================================================================
OBSTACLE_SPAWN_MS_START = 950
OBSTACLE_SPAWN_MS_MIN = 360
DIFFICULTY_RAMP_SECONDS = 70.0

ITEM_SPAWN_MS_MIN = 2200
ITEM_SPAWN_MS_MAX = 3600
FIRST_ITEM_DELAY_MS_MIN = 900
FIRST_ITEM_DELAY_MS_MAX = 1500

# =============================================================================
# EFFECTS
# =============================================================================
SLOW_MO_DURATION_MS = 3200
TOAST_DURATION_MS = 2000

BOOST_BONUS = 150
TRIVIA_BONUS = 60
SURVIVAL_POINTS_PER_SECOND = 10.0

# =============================================================================
# TIMING
# =============================================================================
MAX_FRAME_MS = 50.0          # clamp for a single loop tick
PUBLISH_INTERVAL_MS = 33.0   # presentation updates at most ~30 per second
