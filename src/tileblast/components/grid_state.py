"""Cell storage for one board.

Cells are addressed as (x, y) with x growing left to right and y growing
bottom to top, so gravity pulls tiles toward y == 0. Storage is column-major:
``_cells[x][y]``.
"""
from __future__ import annotations

import itertools
from collections import Counter
from typing import Iterator, List, Optional, Sequence, Tuple

from tileblast.components.tile import Tile
from tileblast.errors import OutOfBounds

Position = Tuple[int, int]
Snapshot = Tuple[Tuple[Optional[int], ...], ...]


class GridState:
    """Owns every tile on the board and keeps tile coordinates in sync with cells."""

    def __init__(self, width: int, height: int):
        if width < 1 or height < 1:
            raise ValueError(f"Grid dimensions must be positive, got {width}x{height}")
        self.width = width
        self.height = height
        self._cells: List[List[Optional[Tile]]] = [[None] * height for _ in range(width)]
        self._next_id = itertools.count(1)

    @classmethod
    def from_rows(cls, rows: Sequence[Sequence[Optional[int]]]) -> "GridState":
        """Build a grid from colour rows written top row first, the way boards are drawn.

        ``None`` marks an empty cell.
        """
        if not rows or not rows[0]:
            raise ValueError("from_rows needs at least one non-empty row")
        height = len(rows)
        width = len(rows[0])
        grid = cls(width, height)
        for row_index, row in enumerate(rows):
            if len(row) != width:
                raise ValueError(f"Row {row_index} has {len(row)} cells, expected {width}")
            y = height - 1 - row_index
            for x, color_id in enumerate(row):
                if color_id is not None:
                    grid.spawn(x, y, color_id)
        return grid

    @property
    def bounds(self) -> Tuple[int, int]:
        return self.width, self.height

    @property
    def cell_count(self) -> int:
        return self.width * self.height

    def in_bounds(self, x: int, y: int) -> bool:
        return 0 <= x < self.width and 0 <= y < self.height

    def check_bounds(self, x: int, y: int) -> None:
        if not self.in_bounds(x, y):
            raise OutOfBounds(x, y, self.width, self.height)

    def get(self, x: int, y: int) -> Optional[int]:
        """Return the colour id at (x, y), or None when the cell is empty."""
        self.check_bounds(x, y)
        tile = self._cells[x][y]
        return None if tile is None else tile.color_id

    def set(self, x: int, y: int, color_id: Optional[int]) -> Optional[Tile]:
        """Overwrite a cell with a fresh tile of ``color_id``, or clear it with None."""
        self.check_bounds(x, y)
        self._cells[x][y] = None
        if color_id is None:
            return None
        return self.spawn(x, y, color_id)

    def tile_at(self, x: int, y: int) -> Optional[Tile]:
        self.check_bounds(x, y)
        return self._cells[x][y]

    def is_empty(self, x: int, y: int) -> bool:
        return self.tile_at(x, y) is None

    def spawn(self, x: int, y: int, color_id: int) -> Tile:
        """Create a brand new tile (new identity) in an empty cell."""
        tile = Tile(tile_id=next(self._next_id), color_id=color_id, x=x, y=y)
        self.place(x, y, tile)
        return tile

    def place(self, x: int, y: int, tile: Tile) -> None:
        self.check_bounds(x, y)
        if self._cells[x][y] is not None:
            raise ValueError(f"Cell ({x}, {y}) is already occupied")
        self._cells[x][y] = tile
        tile.x = x
        tile.y = y

    def take(self, x: int, y: int) -> Optional[Tile]:
        """Remove and return the tile at (x, y)."""
        self.check_bounds(x, y)
        tile = self._cells[x][y]
        self._cells[x][y] = None
        return tile

    def move(self, source: Position, target: Position) -> Tile:
        """Relocate the tile at ``source`` into the empty ``target`` cell."""
        tile = self.take(*source)
        if tile is None:
            raise ValueError(f"No tile to move at {source}")
        try:
            self.place(target[0], target[1], tile)
        except (ValueError, IndexError):
            self.place(source[0], source[1], tile)
            raise
        return tile

    def clear(self) -> List[Tile]:
        """Empty the whole grid and return the removed tiles in column-major order."""
        removed = list(self.tiles())
        for column in self._cells:
            for y in range(self.height):
                column[y] = None
        return removed

    def positions(self) -> Iterator[Position]:
        for x in range(self.width):
            for y in range(self.height):
                yield x, y

    def tiles(self) -> Iterator[Tile]:
        for column in self._cells:
            for tile in column:
                if tile is not None:
                    yield tile

    def empty_positions(self) -> List[Position]:
        return [(x, y) for x, y in self.positions() if self._cells[x][y] is None]

    def is_full(self) -> bool:
        return all(tile is not None for column in self._cells for tile in column)

    def color_counts(self) -> Counter:
        return Counter(tile.color_id for tile in self.tiles())

    def snapshot(self) -> Snapshot:
        """Immutable column-major copy of every cell's colour."""
        return tuple(
            tuple(None if tile is None else tile.color_id for tile in column)
            for column in self._cells
        )

    def to_rows(self) -> List[List[Optional[int]]]:
        """Colours as rows, top row first (inverse of ``from_rows``)."""
        return [
            [self.get(x, y) for x in range(self.width)]
            for y in range(self.height - 1, -1, -1)
        ]

    def render(self, empty: str = ".") -> str:
        return "\n".join(
            " ".join(empty if color is None else str(color) for color in row)
            for row in self.to_rows()
        )

    def __repr__(self) -> str:
        return f"GridState({self.width}x{self.height}, tiles={sum(1 for _ in self.tiles())})"
