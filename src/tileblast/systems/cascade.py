from __future__ import annotations

import logging
from typing import Iterable, List, Tuple

from tileblast.components.change_set import ChangeSet, TileMove
from tileblast.components.grid_state import GridState
from tileblast.errors import InvalidRemoval
from tileblast.systems.board_ops import ColorGenerator

Position = Tuple[int, int]

logger = logging.getLogger(__name__)


class CascadeResolver:
    """Blast a set of cells, let the columns fall, and refill the gaps from the top."""

    def __init__(self, grid: GridState, color_generator: ColorGenerator):
        self.grid = grid
        self.color_generator = color_generator

    def validate_removal(self, cells: Iterable[Position]) -> List[Position]:
        """Check every precondition of a removal and return the cells sorted and deduplicated.

        Raises OutOfBounds for a coordinate off the grid and InvalidRemoval for
        an empty request, an empty cell, or cells of different colours.
        """
        positions = sorted(set(cells))
        if not positions:
            raise InvalidRemoval("Removal requested with no cells")
        color = None
        for x, y in positions:
            current = self.grid.get(x, y)
            if current is None:
                raise InvalidRemoval(f"Cell ({x}, {y}) is already empty")
            if color is None:
                color = current
            elif current != color:
                raise InvalidRemoval(
                    f"Cell ({x}, {y}) has colour {current}, expected {color}"
                )
        return positions

    def remove_and_refill(self, cells: Iterable[Position]) -> ChangeSet:
        """Remove ``cells``, compact every column downward, then refill the top.

        All validation happens before the first mutation, so a rejected
        request leaves the grid untouched.
        """
        positions = self.validate_removal(cells)
        changes = ChangeSet(removed=positions)
        for x, y in positions:
            self.grid.take(x, y)
        changes.moves = self.apply_gravity()
        changes.spawned = self.refill()
        logger.debug(
            "Removed %d tiles, %d dropped, %d refilled.",
            len(changes.removed), len(changes.moves), len(changes.spawned),
        )
        return changes

    def apply_gravity(self) -> List[TileMove]:
        """Pull surviving tiles down in every column, preserving their vertical order."""
        grid = self.grid
        moves: List[TileMove] = []
        for x in range(grid.width):
            write_y = 0
            for y in range(grid.height):
                tile = grid.tile_at(x, y)
                if tile is None:
                    continue
                if y != write_y:
                    grid.move((x, y), (x, write_y))
                    moves.append(TileMove(source=(x, y), target=(x, write_y), tile_id=tile.tile_id, color_id=tile.color_id))
                write_y += 1
        return moves

    def refill(self) -> List[Position]:
        """Spawn a new tile in every empty cell; after gravity these are the column tops."""
        spawned: List[Position] = []
        grid = self.grid
        for x in range(grid.width):
            for y in range(grid.height):
                if grid.is_empty(x, y):
                    grid.spawn(x, y, self.color_generator())
                    spawned.append((x, y))
        return spawned
