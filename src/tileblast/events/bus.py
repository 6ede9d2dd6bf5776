from blinker import Signal
from typing import Dict

class EventBus:
    """Simple event bus leveraging blinker Signal objects."""
    def __init__(self):
        self._signals: Dict[str, Signal] = {}

    def subscribe(self, name: str, fn):
        sig = self._signals.setdefault(name, Signal(name))
        # Use weak=False to retain strong reference to bound methods so systems not kept in a variable still receive events.
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
# INPUT
# ============================================================================
EVENT_TILE_CLICK = "tile_click"                    # payload: x, y


# ============================================================================
# BLAST & CASCADE
# ============================================================================
EVENT_GROUP_BLASTED = "group_blasted"              # payload: positions=[(x,y),...], color_id=int, size=int
EVENT_GROUP_REJECTED = "group_rejected"            # payload: x, y, size=int
EVENT_GRAVITY_APPLIED = "gravity_applied"          # payload: moves=[TileMove,...]
EVENT_REFILL_COMPLETED = "refill_completed"        # payload: new_tiles=[(x,y),...]


# ============================================================================
# DEADLOCK RECOVERY
# ============================================================================
EVENT_DEADLOCK_DETECTED = "deadlock_detected"      # payload: reason=str
EVENT_BOARD_SHUFFLED = "board_shuffled"            # payload: positions=[(x,y),...], attempts=int, generated=[(x,y),...]


# ============================================================================
# BOARD STATE
# ============================================================================
EVENT_BOARD_READY = "board_ready"                  # payload: width=int, height=int, shuffled=bool
EVENT_BOARD_CHANGED = "board_changed"              # payload: reason=str, positions=[(x,y),...], changes=ChangeSet
EVENT_GROUP_TIERS_UPDATED = "group_tiers_updated"  # payload: tiers={(x,y): int}
