from dataclasses import dataclass, field
from typing import List

from tileblast.constants import TILE_COLOR_NAMES

TIER_SUFFIXES = ("default", "a", "b", "c")

@dataclass(slots=True)
class TilePalette:
    """Colour names indexed by colour id, used to build sprite variant keys.

    Lives on the board entity next to Board; the engine itself only deals in ids.
    """
    names: List[str] = field(default_factory=lambda: list(TILE_COLOR_NAMES))

    def name_for(self, color_id: int) -> str:
        if 0 <= color_id < len(self.names):
            return self.names[color_id]
        return f"color{color_id}"

    def variant_name(self, color_id: int, tier: int) -> str:
        tier = max(0, min(tier, len(TIER_SUFFIXES) - 1))
        return f"{self.name_for(color_id)}_{TIER_SUFFIXES[tier]}"

    def ensure_size(self, color_count: int) -> None:
        while len(self.names) < color_count:
            self.names.append(f"color{len(self.names)}")
