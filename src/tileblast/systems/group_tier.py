import logging
from typing import Dict, Iterable, Sequence, Tuple

from esper import World

from tileblast.components.board import Board
from tileblast.components.grid_state import GridState
from tileblast.components.tile_palette import TilePalette
from tileblast.events.bus import EventBus, EVENT_BOARD_CHANGED, EVENT_GROUP_TIERS_UPDATED
from tileblast.systems.board_ops import find_board, neighbors
from tileblast.systems.match import MatchEngine

Position = Tuple[int, int]

logger = logging.getLogger(__name__)


def tier_for_size(size: int, tiers: Sequence[int]) -> int:
    """0 for the default sprite, 1/2/3 once the group reaches the A/B/C threshold."""
    a_threshold, b_threshold, c_threshold = tiers
    if size >= c_threshold:
        return 3
    if size >= b_threshold:
        return 2
    if size >= a_threshold:
        return 1
    return 0


class GroupTierSystem:
    """Keeps per-tile sprite tiers in step with group sizes after every board change.

    Only groups touching changed cells are relabelled (the whole board after a
    shuffle). A neighbour of a changed cell may have lost group members, so
    neighbours are relabelled too.
    """
    def __init__(self, world: World, event_bus: EventBus):
        self.world = world
        self.event_bus = event_bus
        self.tiers: Dict[Position, int] = {}
        self._engine: MatchEngine | None = None
        self.event_bus.subscribe(EVENT_BOARD_CHANGED, self.on_board_changed)

    def _engine_for(self, grid: GridState) -> MatchEngine:
        if self._engine is None or self._engine.grid is not grid:
            self._engine = MatchEngine(grid)
        return self._engine

    def on_board_changed(self, sender, **kwargs):
        found = find_board(self.world)
        if found is None:
            return
        board, grid = found
        changes = kwargs.get('changes')
        positions = kwargs.get('positions') or []
        full_refresh = bool(changes is not None and changes.shuffled) or not self.tiers
        updated = self.refresh(board, grid, None if full_refresh else positions)
        if updated:
            self.event_bus.emit(EVENT_GROUP_TIERS_UPDATED, tiers=updated)

    def refresh(self, board: Board, grid: GridState, positions: Iterable[Position] | None = None) -> Dict[Position, int]:
        engine = self._engine_for(grid)
        if positions is None:
            seeds = None
        else:
            seeds = set()
            for x, y in positions:
                if not grid.in_bounds(x, y):
                    continue
                seeds.add((x, y))
                seeds.update(neighbors(grid, x, y))
        sizes = engine.group_sizes(seeds)
        updated: Dict[Position, int] = {}
        for pos, size in sizes.items():
            tier = tier_for_size(size, board.group_size_tiers)
            self.tiers[pos] = tier
            updated[pos] = tier
        logger.debug("Changed tile sprites have been updated (%d tiles).", len(updated))
        return updated

    def variant_at(self, x: int, y: int) -> str | None:
        """Sprite variant key for the tile at (x, y), e.g. ``"blue_b"``."""
        found = find_board(self.world)
        if found is None:
            return None
        _, grid = found
        color_id = grid.get(x, y)
        if color_id is None:
            return None
        palette = self._palette()
        return palette.variant_name(color_id, self.tiers.get((x, y), 0))

    def _palette(self) -> TilePalette:
        for _, palette in self.world.get_component(TilePalette):
            return palette
        return TilePalette()
