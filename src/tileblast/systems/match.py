from typing import Dict, Iterable, List, Optional, Tuple

from tileblast.components.grid_state import GridState
from tileblast.constants import MIN_GROUP_SIZE

Position = Tuple[int, int]

# Neighbour order used by every flood fill: up, down, left, right.
DIRECTIONS: Tuple[Position, ...] = ((0, 1), (0, -1), (-1, 0), (1, 0))


class MatchEngine:
    """Connected-group queries over a GridState.

    Flood fills run on an explicit stack. Visited marks live in a per-cell
    stamp buffer compared against a generation counter that is bumped at the
    start of every fill, so no mark survives from one query to the next.
    """

    def __init__(self, grid: GridState):
        self.grid = grid
        self._stamps: List[int] = []
        self._generation = 0
        self._stack: List[Position] = []
        self._stamp_dims: Optional[Tuple[int, int]] = None

    def _begin_fill(self) -> int:
        dims = self.grid.bounds
        if self._stamp_dims != dims:
            self._stamps = [0] * (dims[0] * dims[1])
            self._stamp_dims = dims
            self._generation = 0
        self._generation += 1
        self._stack.clear()
        return self._generation

    def connected_group(self, x: int, y: int) -> List[Position]:
        """Return every cell 4-connected to (x, y) with the same colour, in discovery order.

        An empty seed cell yields an empty list. Raises OutOfBounds for a seed
        outside the grid.
        """
        grid = self.grid
        target = grid.get(x, y)
        if target is None:
            return []
        generation = self._begin_fill()
        stamps = self._stamps
        height = grid.height
        stack = self._stack
        group: List[Position] = []

        stamps[x * height + y] = generation
        stack.append((x, y))
        while stack:
            cx, cy = stack.pop()
            group.append((cx, cy))
            for dx, dy in DIRECTIONS:
                nx, ny = cx + dx, cy + dy
                if not grid.in_bounds(nx, ny):
                    continue
                index = nx * height + ny
                if stamps[index] == generation:
                    continue
                if grid.get(nx, ny) != target:
                    continue
                stamps[index] = generation
                stack.append((nx, ny))
        return group

    @staticmethod
    def is_removable(group: Iterable[Position]) -> bool:
        return len(set(group)) >= MIN_GROUP_SIZE

    def group_size(self, x: int, y: int) -> int:
        return len(self.connected_group(x, y))

    def board_has_any_move(self) -> bool:
        """True as soon as one cell has a group of two or more.

        A cell's group reaches size two exactly when an orthogonal neighbour
        shares its colour, so checking the right and upper neighbour of every
        cell covers every pair once without a full flood fill.
        """
        grid = self.grid
        for x, y in grid.positions():
            color = grid.get(x, y)
            if color is None:
                continue
            if x + 1 < grid.width and grid.get(x + 1, y) == color:
                return True
            if y + 1 < grid.height and grid.get(x, y + 1) == color:
                return True
        return False

    def find_removable_group(self) -> List[Position]:
        """Return the first removable group in column-major scan order, or [] if deadlocked."""
        grid = self.grid
        seen: set[Position] = set()
        for x, y in grid.positions():
            if (x, y) in seen or grid.get(x, y) is None:
                continue
            group = self.connected_group(x, y)
            if self.is_removable(group):
                return group
            seen.update(group)
        return []

    def label_groups(self, seeds: Optional[Iterable[Position]] = None) -> Dict[Position, List[Position]]:
        """Map each occupied cell to its group, filling each group only once.

        With ``seeds`` only the groups containing those cells are labelled;
        empty or repeated seeds are skipped.
        """
        grid = self.grid
        labels: Dict[Position, List[Position]] = {}
        candidates = grid.positions() if seeds is None else seeds
        for x, y in candidates:
            if (x, y) in labels or grid.get(x, y) is None:
                continue
            group = self.connected_group(x, y)
            for member in group:
                labels[member] = group
        return labels

    def group_sizes(self, seeds: Optional[Iterable[Position]] = None) -> Dict[Position, int]:
        return {pos: len(group) for pos, group in self.label_groups(seeds).items()}
