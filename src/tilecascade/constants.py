GRID_WIDTH = 8
GRID_HEIGHT = 8
TYPE_COUNT = 5

# Matches need at least three distinct types to be avoidable on the initial fill.
MIN_TYPE_COUNT = 3
# Origin plus this many same-typed neighbours on one axis forms a run.
MIN_RUN_NEIGHBOURS = 2

# type_id carried by a destroyed cell until it is refilled.
EMPTY_TYPE = -1

# Tween timings (seconds).
SWAP_DURATION = 0.25
DESTROY_DURATION = 0.5
SETTLE_DURATION = 0.5
# Share of the destroy tween spent growing before the shrink.
DESTROY_GROW_SHARE = 0.2
DESTROY_PEAK_SCALE = 1.2

# Board respawn attempts when a stalemate board is regenerated.
RESPAWN_MAX_ATTEMPTS = 200

# Secondary mouse button id used to clear a selection.
MOUSE_BUTTON_SECONDARY = 4
