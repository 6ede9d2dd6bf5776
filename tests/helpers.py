from __future__ import annotations

import itertools
import random
from typing import Iterable, Optional, Sequence

from tileblast.components.grid_state import GridState
from tileblast.config import BoardConfig
from tileblast.events.bus import EventBus
from tileblast.systems.board import BoardSystem
from tileblast.world import create_world


def grid_from_rows(rows: Sequence[Sequence[Optional[int]]]) -> GridState:
    """Build a grid from rows drawn top row first (None for empty cells)."""
    return GridState.from_rows(rows)


def cycle_generator(colors: Iterable[int]):
    """Colour generator that replays ``colors`` forever, for deterministic refills."""
    source = itertools.cycle(list(colors))
    return lambda: next(source)


def build_session(
    width: int = 5,
    height: int = 5,
    color_count: int = 4,
    *,
    seed: int = 1234,
    color_generator=None,
    max_reshuffle_attempts: int = 32,
):
    """Create bus, world and BoardSystem with a seeded generator."""
    bus = EventBus()
    world = create_world(bus, rng=random.Random(seed))
    config = BoardConfig(
        width=width,
        height=height,
        color_count=color_count,
        max_reshuffle_attempts=max_reshuffle_attempts,
    )
    board = BoardSystem(world, bus, config=config, color_generator=color_generator)
    return bus, world, board


def load_rows(board: BoardSystem, rows: Sequence[Sequence[Optional[int]]]) -> None:
    """Overwrite the session grid in place with the given rows (top row first)."""
    grid = board.grid
    height = len(rows)
    assert height == grid.height and all(len(row) == grid.width for row in rows)
    for row_index, row in enumerate(rows):
        y = height - 1 - row_index
        for x, color_id in enumerate(row):
            grid.set(x, y, color_id)
