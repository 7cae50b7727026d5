"""
Viewer tuning knobs.
"""

# Window
SCREEN_W, SCREEN_H = 980, 720
FPS = 60
WINDOW_TITLE = "fishtank"
VIEWPORT_ELEMENT_ID = "viewport"

# None = ask the display; a number forces supersampling (e.g. 2.0)
DEVICE_SCALE = None

# Runtime pacing
STEPS_PER_FRAME = 1  # simulation steps per rendered frame

# Sizes relative to logical viewport width
FOOD_RADIUS_FACTOR = 0.01 / 2.0
ORGANISM_SIZE_FACTOR = 0.01

# Fish outline
FISH_LINE_WIDTH = 2

# Snapshot checks (skip out-of-range entities instead of drawing them off-surface)
VALIDATE_SNAPSHOT = True

# Demo collaborator
DEMO_ANIMALS = 40
DEMO_FOODS = 60
DEMO_SPEED_RANGE = (0.0006, 0.0012)
DEMO_TURN_SIGMA = 0.08
DEMO_EAT_RADIUS = 0.01

# Logging
LOG_LEVEL = "INFO"
LOG_FORMAT = "human"
STATS_LOG_EVERY = 300  # ticks between debug frame summaries
