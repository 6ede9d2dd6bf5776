from __future__ import annotations

from dataclasses import dataclass, field
from typing import List, Set, Tuple

Position = Tuple[int, int]


@dataclass(slots=True)
class TileMove:
    source: Position
    target: Position
    tile_id: int
    color_id: int


@dataclass(slots=True)
class ChangeSet:
    """Everything one engine step did to the board, for the presentation layer to redraw.

    removed:   cells blasted by the player.
    moves:     tiles relocated by gravity or by a shuffle (identity kept).
    spawned:   cells that received a newly created tile.
    generated: subset of spawned created by the reshuffle fallback when the
               tile pool ran dry.
    """
    removed: List[Position] = field(default_factory=list)
    moves: List[TileMove] = field(default_factory=list)
    spawned: List[Position] = field(default_factory=list)
    generated: List[Position] = field(default_factory=list)
    shuffled: bool = False

    @property
    def positions(self) -> Set[Position]:
        touched: Set[Position] = set(self.removed)
        touched.update(self.spawned)
        for move in self.moves:
            touched.add(move.source)
            touched.add(move.target)
        return touched

    def sorted_positions(self) -> List[Position]:
        return sorted(self.positions)

    def merge(self, other: "ChangeSet") -> "ChangeSet":
        return ChangeSet(
            removed=self.removed + other.removed,
            moves=self.moves + other.moves,
            spawned=self.spawned + other.spawned,
            generated=self.generated + other.generated,
            shuffled=self.shuffled or other.shuffled,
        )

    def __bool__(self) -> bool:
        return bool(self.removed or self.moves or self.spawned)
