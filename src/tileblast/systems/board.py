import logging
import random
from typing import Optional, Tuple

from esper import World

from tileblast.components.board import Board
from tileblast.components.change_set import ChangeSet
from tileblast.components.grid_state import GridState
from tileblast.components.recovery_state import RecoveryState
from tileblast.components.tile_palette import TilePalette
from tileblast.config import BoardConfig
from tileblast.errors import InvalidRemoval
from tileblast.events.bus import (
    EventBus,
    EVENT_TILE_CLICK,
    EVENT_GROUP_BLASTED,
    EVENT_GROUP_REJECTED,
    EVENT_GRAVITY_APPLIED,
    EVENT_REFILL_COMPLETED,
    EVENT_DEADLOCK_DETECTED,
    EVENT_BOARD_SHUFFLED,
    EVENT_BOARD_READY,
    EVENT_BOARD_CHANGED,
)
from tileblast.systems.board_ops import ColorGenerator, populate_grid, uniform_color_generator
from tileblast.systems.cascade import CascadeResolver
from tileblast.systems.deadlock import DeadlockRecovery
from tileblast.systems.match import MatchEngine

logger = logging.getLogger(__name__)


class BoardSystem:
    """Owns the board entity for one session and turns tile clicks into blasts.

    A click is validated (group of two or more), removed and refilled, then
    checked for deadlock; the presentation layer receives a single
    EVENT_BOARD_CHANGED carrying the combined ChangeSet. Clicks on single
    tiles are ignored apart from an EVENT_GROUP_REJECTED notification.
    """
    def __init__(
        self,
        world: World,
        event_bus: EventBus,
        width: Optional[int] = None,
        height: Optional[int] = None,
        color_count: Optional[int] = None,
        *,
        config: Optional[BoardConfig] = None,
        color_generator: Optional[ColorGenerator] = None,
        rng: Optional[random.Random] = None,
    ):
        config = config or BoardConfig()
        self.config = config
        self.world = world
        self.event_bus = event_bus
        width = config.width if width is None else width
        height = config.height if height is None else height
        color_count = config.color_count if color_count is None else color_count
        self.rng = rng or self._world_rng(config.seed)
        self.color_generator = color_generator or uniform_color_generator(color_count, self.rng)

        self.grid = GridState(width, height)
        palette = TilePalette()
        palette.ensure_size(color_count)
        self.board_entity = self.world.create_entity(
            Board(width=width, height=height, color_count=color_count, group_size_tiers=tuple(config.group_size_tiers)),
            self.grid,
            RecoveryState(),
            palette,
        )
        self.match_engine = MatchEngine(self.grid)
        self.cascade = CascadeResolver(self.grid, self.color_generator)
        self.recovery = DeadlockRecovery(
            self.grid,
            self.color_generator,
            rng=self.rng,
            match_engine=self.match_engine,
            state=self.world.component_for_entity(self.board_entity, RecoveryState),
            max_attempts=config.max_reshuffle_attempts,
        )
        self.event_bus.subscribe(EVENT_TILE_CLICK, self.on_tile_click)
        self._init_board()

    def _world_rng(self, seed: Optional[int]) -> random.Random:
        if seed is not None:
            return random.Random(seed)
        candidate = getattr(self.world, "random", None)
        if isinstance(candidate, random.Random):
            return candidate
        return random.Random()

    def _init_board(self):
        spawned = populate_grid(self.grid, self.color_generator)
        logger.info("Tiles have been created (%dx%d).", self.grid.width, self.grid.height)
        changes = ChangeSet(spawned=spawned)
        shuffle = self._recover(reason="initial_board")
        if shuffle is not None:
            changes = changes.merge(shuffle)
        self.event_bus.emit(
            EVENT_BOARD_READY,
            width=self.grid.width,
            height=self.grid.height,
            shuffled=shuffle is not None,
        )
        self.event_bus.emit(
            EVENT_BOARD_CHANGED,
            reason="initial_board",
            positions=changes.sorted_positions(),
            changes=changes,
        )

    def on_tile_click(self, sender, **kwargs):
        x = kwargs.get('x')
        y = kwargs.get('y')
        if x is None or y is None:
            return
        if not self.grid.in_bounds(x, y):
            logger.debug("Ignoring click outside the board at (%s, %s).", x, y)
            return
        self.blast(x, y)

    def blast(self, x: int, y: int) -> Optional[ChangeSet]:
        """Blast the group under (x, y). Returns None when the group is too small."""
        group = self.match_engine.connected_group(x, y)
        if not self.match_engine.is_removable(group):
            self.event_bus.emit(EVENT_GROUP_REJECTED, x=x, y=y, size=len(group))
            return None
        color_id = self.grid.get(x, y)
        changes = self.cascade.remove_and_refill(group)
        self.event_bus.emit(
            EVENT_GROUP_BLASTED,
            positions=sorted(changes.removed),
            color_id=color_id,
            size=len(changes.removed),
        )
        self.event_bus.emit(EVENT_GRAVITY_APPLIED, moves=list(changes.moves))
        if changes.spawned:
            self.event_bus.emit(EVENT_REFILL_COMPLETED, new_tiles=list(changes.spawned))
        shuffle = self._recover(reason="blast")
        if shuffle is not None:
            changes = changes.merge(shuffle)
        self.event_bus.emit(
            EVENT_BOARD_CHANGED,
            reason="blast",
            positions=changes.sorted_positions(),
            changes=changes,
        )
        return changes

    def remove_cells(self, cells) -> ChangeSet:
        """Remove an already validated set of cells and run recovery.

        Unlike ``blast`` this does not look the group up; cells that are
        empty or of mixed colours raise InvalidRemoval.
        """
        cells = list(cells)
        if not self.match_engine.is_removable(cells):
            raise InvalidRemoval(f"A removal needs at least two cells, got {len(set(cells))}")
        changes = self.cascade.remove_and_refill(cells)
        shuffle = self._recover(reason="remove")
        if shuffle is not None:
            changes = changes.merge(shuffle)
        self.event_bus.emit(
            EVENT_BOARD_CHANGED,
            reason="remove",
            positions=changes.sorted_positions(),
            changes=changes,
        )
        return changes

    def _recover(self, reason: str) -> Optional[ChangeSet]:
        if self.match_engine.board_has_any_move():
            return None
        self.event_bus.emit(EVENT_DEADLOCK_DETECTED, reason=reason)
        shuffle = self.recovery.recover()
        if shuffle is None:
            return None
        self.event_bus.emit(
            EVENT_BOARD_SHUFFLED,
            positions=shuffle.sorted_positions(),
            attempts=self.recovery.state.last_attempts,
            generated=list(shuffle.generated),
        )
        return shuffle

    def has_any_move(self) -> bool:
        return self.match_engine.board_has_any_move()

    @property
    def dimensions(self) -> Tuple[int, int]:
        return self.grid.bounds
