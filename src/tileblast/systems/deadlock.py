"""Deadlock detection and cluster-biased reshuffling.

Pool order is fixed so seeded runs are reproducible: the pool is built from
the grid in column-major order (x ascending, then y ascending), random picks
remove the element at ``rng.randrange(len(pool))``, and a cluster neighbour
takes the first pool tile of the centre's colour. Neighbours are visited
up, down, left, right.
"""
from __future__ import annotations

import logging
import random
from collections import Counter
from typing import List, Optional, Tuple

from tileblast.components.change_set import ChangeSet, TileMove
from tileblast.components.grid_state import GridState
from tileblast.components.recovery_state import RecoveryPhase, RecoveryState
from tileblast.components.tile import Tile
from tileblast.constants import CLUSTER_AREA, MAX_CLUSTERS, MAX_RESHUFFLE_ATTEMPTS, MIN_CLUSTERS, MIN_GROUP_SIZE
from tileblast.errors import RecoveryExhausted
from tileblast.systems.board_ops import ColorGenerator, neighbors
from tileblast.systems.match import MatchEngine

Position = Tuple[int, int]

logger = logging.getLogger(__name__)


def cluster_count_for(width: int, height: int) -> int:
    return max(MIN_CLUSTERS, min((width * height) // CLUSTER_AREA, MAX_CLUSTERS))


class DeadlockRecovery:
    """Keeps a board playable: Stable -> Recovering -> Stable.

    Recovery reshuffles the tiles already on the board until some group of
    two or more exists, trying at most ``max_attempts`` shuffles.
    """

    def __init__(
        self,
        grid: GridState,
        color_generator: ColorGenerator,
        *,
        rng: Optional[random.Random] = None,
        match_engine: Optional[MatchEngine] = None,
        state: Optional[RecoveryState] = None,
        max_attempts: Optional[int] = None,
    ):
        self.grid = grid
        self.color_generator = color_generator
        self.rng = rng or random.Random()
        self.match_engine = match_engine or MatchEngine(grid)
        self.state = state or RecoveryState()
        self.max_attempts = max_attempts or MAX_RESHUFFLE_ATTEMPTS

    def is_deadlocked(self) -> bool:
        deadlocked = not self.match_engine.board_has_any_move()
        if deadlocked:
            logger.info("There is deadlock.")
        return deadlocked

    def check_and_recover(self) -> bool:
        """Reshuffle until a legal move exists. Returns True if any reshuffle happened."""
        return self.recover() is not None

    def recover(self) -> Optional[ChangeSet]:
        """Like check_and_recover but returns the combined shuffle changes (None if stable)."""
        if not self.is_deadlocked():
            return None
        self._ensure_recoverable()
        logger.info("Deadlock detected! Smart mixing is in progress...")
        self.state.phase = RecoveryPhase.RECOVERING
        changes = ChangeSet(shuffled=True)
        for attempt in range(1, self.max_attempts + 1):
            changes = changes.merge(self.reshuffle())
            self.state.last_attempts = attempt
            if self.match_engine.board_has_any_move():
                self.state.phase = RecoveryPhase.STABLE
                logger.info("Shuffle completed after %d attempt(s)! Playable groups are created.", attempt)
                return changes
        logger.error("Board still deadlocked after %d reshuffles.", self.max_attempts)
        raise RecoveryExhausted(
            f"No legal move after {self.max_attempts} reshuffles", attempts=self.max_attempts
        )

    def _ensure_recoverable(self) -> None:
        """Fail fast when no arrangement of the current tiles can hold a group."""
        grid = self.grid
        if grid.cell_count < MIN_GROUP_SIZE:
            raise RecoveryExhausted(
                f"A {grid.width}x{grid.height} board cannot hold a group of {MIN_GROUP_SIZE}"
            )
        counts: Counter = grid.color_counts()
        missing = grid.cell_count - sum(counts.values())
        if missing == 0 and counts and max(counts.values()) < MIN_GROUP_SIZE:
            raise RecoveryExhausted("Every colour on the board is unique; reshuffling cannot form a group")

    def reshuffle(self) -> ChangeSet:
        """Redistribute the existing tiles with same-colour clusters around random centres.

        Cells left over once the pool runs dry receive freshly generated tiles,
        reported in ``ChangeSet.generated``.
        """
        grid = self.grid
        rng = self.rng
        pool: List[Tile] = grid.clear()
        origins = {tile.tile_id: (tile.x, tile.y) for tile in pool}
        changes = ChangeSet(shuffled=True)

        def _place(tile: Tile, x: int, y: int) -> None:
            grid.place(x, y, tile)
            changes.moves.append(
                TileMove(source=origins[tile.tile_id], target=(x, y), tile_id=tile.tile_id, color_id=tile.color_id)
            )

        centers: List[Position] = [
            (rng.randrange(grid.width), rng.randrange(grid.height))
            for _ in range(cluster_count_for(grid.width, grid.height))
        ]
        for x, y in centers:
            if not pool:
                break
            if not grid.is_empty(x, y):
                continue
            _place(pool.pop(rng.randrange(len(pool))), x, y)

        for x, y in centers:
            center = grid.tile_at(x, y)
            if center is None:
                continue
            for nx, ny in neighbors(grid, x, y):
                if not pool:
                    break
                if not grid.is_empty(nx, ny):
                    continue
                match_index = next(
                    (index for index, tile in enumerate(pool) if tile.color_id == center.color_id),
                    None,
                )
                if match_index is not None:
                    _place(pool.pop(match_index), nx, ny)

        for x, y in grid.positions():
            if not grid.is_empty(x, y):
                continue
            if pool:
                _place(pool.pop(rng.randrange(len(pool))), x, y)
            else:
                grid.spawn(x, y, self.color_generator())
                changes.spawned.append((x, y))
                changes.generated.append((x, y))

        if changes.generated:
            self.state.generated_tiles += len(changes.generated)
            logger.warning("Tile pool ran out during reshuffle; generated %d new tiles.", len(changes.generated))
        self.state.shuffles += 1
        return changes
