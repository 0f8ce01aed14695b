from blinker import Signal
from typing import Dict

class EventBus:
    """Simple event bus leveraging blinker Signal objects."""
    def __init__(self):
        self._signals: Dict[str, Signal] = {}

    def subscribe(self, name: str, fn):
        sig = self._signals.setdefault(name, Signal(name))
        # weak=False keeps bound methods of systems that are not stored in a variable alive.
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
EVENT_TICK = "tick"                                # payload: dt=float


# ============================================================================
# SWAPS
# ============================================================================
EVENT_TILE_SWAP_REQUEST = "tile_swap_request"      # payload: src=int, dst=int
EVENT_TILE_SWAP_VALID = "tile_swap_valid"          # payload: src=int, dst=int
EVENT_TILE_SWAP_INVALID = "tile_swap_invalid"      # payload: src=int, dst=int, reason=str
EVENT_TILE_SWAP_DO = "tile_swap_do"                # payload: src=int, dst=int
EVENT_TILE_SWAP_FINALIZE = "tile_swap_finalize"    # payload: src=int, dst=int


# ============================================================================
# BOARD RESOLUTION
# ============================================================================
EVENT_BOARD_CREATED = "board_created"              # payload: size=int
EVENT_BOARD_CHANGED = "board_changed"              # payload: reason=str
EVENT_MATCH_FOUND = "match_found"                  # payload: positions=[int,...], size=int, reason=str
EVENT_MATCH_CLEARED = "match_cleared"              # payload: positions=[int,...], colors=[(int,str),...], counts=dict[str,int]
EVENT_REFILL_COMPLETED = "refill_completed"        # payload: new_tiles=[int,...]
EVENT_BOARD_SHUFFLED = "board_shuffled"            # payload: reason=str
EVENT_CASCADE_STEP = "cascade_step"                # payload: depth=int, positions=[int,...]
EVENT_CASCADE_COMPLETE = "cascade_complete"        # payload: depth=int


# ============================================================================
# BOOSTERS
# ============================================================================
EVENT_BLAST_REQUEST = "blast_request"              # payload: index=int, radius=int
EVENT_BLAST_CLEARED = "blast_cleared"              # payload: positions=[int,...], colors=[(int,str),...], counts=dict[str,int]
EVENT_COLOR_CLEAR_REQUEST = "color_clear_request"  # payload: color=str
EVENT_COLOR_CLEARED = "color_cleared"              # payload: color=str, positions=[int,...], colors=[(int,str),...], counts=dict[str,int]


# ============================================================================
# HINTS
# ============================================================================
EVENT_HINT_REQUEST = "hint_request"                # payload: None
EVENT_HINT_AVAILABLE = "hint_available"            # payload: swap=(int,int), match=(int,...)
EVENT_HINT_UNAVAILABLE = "hint_unavailable"        # payload: reason=str
EVENT_HINT_CLEARED = "hint_cleared"                # payload: None
