from __future__ import annotations

import logging
import random
from typing import Callable, Iterable, List, Optional, Tuple

from esper import World

from tileblast.components.board import Board
from tileblast.components.grid_state import GridState
from tileblast.systems.match import DIRECTIONS

Position = Tuple[int, int]
ColorGenerator = Callable[[], int]

logger = logging.getLogger(__name__)


def uniform_color_generator(color_count: int, rng: Optional[random.Random] = None) -> ColorGenerator:
    """Return a generator drawing colour ids uniformly from [0, color_count)."""
    if color_count < 1:
        raise ValueError(f"color_count must be at least 1, got {color_count}")
    source = rng if rng is not None else random.Random()

    def _draw() -> int:
        return source.randrange(color_count)

    return _draw


def populate_grid(grid: GridState, color_generator: ColorGenerator) -> List[Position]:
    """Fill every empty cell with a freshly generated tile."""
    spawned: List[Position] = []
    for x, y in grid.positions():
        if grid.is_empty(x, y):
            grid.spawn(x, y, color_generator())
            spawned.append((x, y))
    return spawned


def initialize_grid(
    width: int,
    height: int,
    color_count: int,
    color_generator: ColorGenerator | None = None,
    *,
    rng: random.Random | None = None,
    max_attempts: int | None = None,
) -> GridState:
    """Create a fully populated grid that is guaranteed to contain a legal move.

    Raises RecoveryExhausted when no playable arrangement can be reached.
    """
    from tileblast.systems.deadlock import DeadlockRecovery

    rng = rng or random.Random()
    generator = color_generator or uniform_color_generator(color_count, rng)
    grid = GridState(width, height)
    populate_grid(grid, generator)
    logger.info("Tiles have been created (%dx%d, %d colours).", width, height, color_count)
    recovery = DeadlockRecovery(grid, generator, rng=rng, max_attempts=max_attempts)
    recovery.check_and_recover()
    return grid


def find_board(world: World) -> Tuple[Board, GridState] | None:
    """Return the Board and GridState of the first board entity, if any."""
    for _, (board, grid) in world.get_components(Board, GridState):
        return board, grid
    return None


def neighbors(grid: GridState, x: int, y: int) -> Iterable[Position]:
    for dx, dy in DIRECTIONS:
        nx, ny = x + dx, y + dy
        if grid.in_bounds(nx, ny):
            yield nx, ny
