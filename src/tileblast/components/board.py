from dataclasses import dataclass
from typing import Tuple

from tileblast.constants import GROUP_SIZE_TIERS

@dataclass(slots=True)
class Board:
    width: int
    height: int
    color_count: int
    group_size_tiers: Tuple[int, int, int] = GROUP_SIZE_TIERS
