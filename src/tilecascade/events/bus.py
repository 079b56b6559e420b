from blinker import Signal
from typing import Dict

class EventBus:
    """Simple event bus leveraging blinker Signal objects."""
    def __init__(self):
        self._signals: Dict[str, Signal] = {}

    def subscribe(self, name: str, fn):
        sig = self._signals.setdefault(name, Signal(name))
        # weak=False keeps bound methods of systems that are not stored anywhere else alive.
        sig.connect(fn, weak=False)

    def unsubscribe(self, name: str, fn):
        sig = self._signals.get(name)
        if sig:
            sig.disconnect(fn)

    def emit(self, name: str, **payload):
        sig = self._signals.get(name)
        if sig:
            sig.send(self, **payload)


# ============================================================================
# SYSTEM & TIMING
# ============================================================================
EVENT_TICK = "tick"                                # payload: dt=float (seconds)


# ============================================================================
# INPUT & INTERACTION
# ============================================================================
EVENT_MOUSE_PRESS = "mouse_press"                  # payload: button=int
EVENT_TILE_CLICK = "tile_click"                    # payload: x, y


# ============================================================================
# TILE & BOARD MECHANICS
# ============================================================================
EVENT_TILE_SELECTED = "tile_selected"              # payload: x, y
EVENT_TILE_DESELECTED = "tile_deselected"          # payload: reason=str
EVENT_TILE_SWAP_REQUEST = "tile_swap_request"      # payload: src=(x,y), dst=(x,y)
EVENT_TILE_SWAP_VALID = "tile_swap_valid"          # payload: src=(x,y), dst=(x,y), cells=(a,b)
EVENT_TILE_SWAP_INVALID = "tile_swap_invalid"      # payload: src=(x,y), dst=(x,y), reason=str
EVENT_MATCH_FOUND = "match_found"                  # payload: positions=[(x,y),...], size=int, combo=int
EVENT_MATCH_CLEARED = "match_cleared"              # payload: positions=[(x,y),...], types=[(x,y,type_id),...]
EVENT_GRAVITY_APPLIED = "gravity_applied"          # payload: moves=[{'cell','from','to'},...]
EVENT_REFILL_COMPLETED = "refill_completed"        # payload: new_tiles=[(x,y),...]
EVENT_CASCADE_STARTED = "cascade_started"          # payload: episode=int, positions=[(x,y),...]
EVENT_CASCADE_STEP = "cascade_step"                # payload: depth=int, positions=[(x,y),...]
EVENT_CASCADE_COMPLETE = "cascade_complete"        # payload: depth=int
EVENT_BOARD_CHANGED = "board_changed"              # payload: reason=str, positions=[(x,y),...]
EVENT_BOARD_STALEMATE = "board_stalemate"          # payload: reset=bool


# ============================================================================
# SCORING
# ============================================================================
EVENT_SCORE_INCREMENT = "score_increment"          # payload: matched_count=int, combo=int


# ============================================================================
# ANIMATION
# ============================================================================
EVENT_ANIMATION_START = "animation_start"          # payload: kind=str, items=[cell,...], group=int, duration=float
EVENT_ANIMATION_TASK_DONE = "animation_task_done"  # payload: kind=str, cell=int, group=int
EVENT_ANIMATION_COMPLETE = "animation_complete"    # payload: kind=str, items=[cell,...], group=int
