import logging
import sys, os
ROOT = os.path.dirname(__file__)
SRC = os.path.join(ROOT, 'src')
if SRC not in sys.path:
    sys.path.insert(0, SRC)
from tileblast.config import load_config
from tileblast.events.bus import (EventBus, EVENT_TILE_CLICK, EVENT_GROUP_BLASTED, EVENT_BOARD_SHUFFLED,
                                  EVENT_BOARD_CHANGED, EVENT_GROUP_TIERS_UPDATED)
from tileblast.systems.board import BoardSystem
from tileblast.systems.group_tier import GroupTierSystem
from tileblast.world import create_world
from tileblast.components.recovery_state import RecoveryState

logging.basicConfig(level=logging.DEBUG, format="%(levelname)s %(name)s: %(message)s")

config_path = sys.argv[1] if len(sys.argv) > 1 else os.path.join(ROOT, 'board_config.yaml')
config = load_config(config_path)

bus = EventBus()
world = create_world(bus, seed=config.seed if config.seed is not None else 7)
received = []
for ev in [EVENT_GROUP_BLASTED, EVENT_BOARD_SHUFFLED, EVENT_BOARD_CHANGED, EVENT_GROUP_TIERS_UPDATED]:
    bus.subscribe(ev, lambda s, _ev=ev, **k: received.append(_ev))
tiers = GroupTierSystem(world, bus)
board = BoardSystem(world, bus, config=config)

print(board.grid.render())
group = board.match_engine.find_removable_group()
print('First removable group', sorted(group))
if group:
    x, y = group[0]
    bus.emit(EVENT_TILE_CLICK, x=x, y=y)
print(board.grid.render())
print('Events', received)
print('Recovery', world.component_for_entity(board.board_entity, RecoveryState))
